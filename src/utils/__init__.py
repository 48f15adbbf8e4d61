"""
Utility modules for the cashtag tracker

Provides:
- logging: Structured and console logging setup
- metrics: Custom metrics publishing to Prometheus
- tracing: OpenTelemetry spans for cycles and agent calls
"""

__version__ = "1.0.0"
__all__ = ["logging", "metrics", "tracing"]
