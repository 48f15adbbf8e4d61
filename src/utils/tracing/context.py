"""
Span helpers.

trace_operation opens a span around a block; the add_* helpers annotate
whichever span is current, so callers deep inside a cycle (the agent
client, the store) need no span reference.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .tracer import get_tracer

_PRIMITIVES = (str, bool, int, float)


def _attributes(values: dict[str, Any]) -> dict[str, Any]:
    # OpenTelemetry only accepts primitives; paths, enums etc. become text
    return {
        key: value if isinstance(value, _PRIMITIVES) else str(value)
        for key, value in values.items()
        if value is not None
    }


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes: Any,
) -> Iterator[trace.Span]:
    """
    Run a block inside a new span

    An exception escaping the block marks the span as failed and is
    re-raised unchanged.

    Args:
        operation_name: Span name, e.g. "reconciliation_cycle"
        kind: Span kind
        **attributes: Initial span attributes; None values are skipped

    Yields:
        The active span
    """
    tracer = get_tracer()

    with tracer.start_as_current_span(
        operation_name,
        kind=kind,
        attributes=_attributes(attributes),
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, f"{type(e).__name__}: {e}"))
            raise


def add_span_attributes(**attributes: Any) -> None:
    """Set attributes on the current span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(_attributes(attributes))


def add_span_event(name: str, **attributes: Any) -> None:
    """
    Add an event to the current span, if one is recording

    Example:
        >>> with trace_operation("reconciliation_cycle"):
        ...     add_span_event("batch_filtered", fetched=5, accepted=4)
    """
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=_attributes(attributes))
