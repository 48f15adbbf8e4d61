"""
Metrics publishing to Prometheus

Usage:
    from src.utils.metrics import MetricsPublisher

    publisher = MetricsPublisher(port=9091)
    publisher.start(version="1.0.0")
"""

from .publisher import MetricsPublisher
from .registry import get_or_create_metric

__all__ = [
    "MetricsPublisher",
    "get_or_create_metric",
]
