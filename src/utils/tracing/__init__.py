"""
Distributed tracing using OpenTelemetry.

Instruments:
- Reconciliation cycles
- Extraction agent calls
- HTTP calls to the agent (via httpx auto-instrumentation)

Tracing is a no-op until initialize_tracing() is called.
"""

from .context import add_span_attributes, add_span_event, trace_operation
from .tracer import (
    get_tracer,
    initialize_tracing,
    instrument_httpx,
    shutdown_tracing,
)

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "add_span_attributes",
    "add_span_event",
    "instrument_httpx",
]
