"""Spans around record-store calls and workflow steps."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

_tracer = trace.get_tracer("app.record_store")

# Keyword arguments recorded as span attributes. Record ids are opaque;
# emails, names and free text are never recorded.
SAFE_SPAN_ATTR_KEYS = frozenset({
    "record_id", "contact_id", "team_id", "cohort_id", "program_id",
    "milestone_id", "institution_id", "submission_id", "resource_id",
    "event_id", "reward_id", "application_id", "education_id",
    "limit", "status", "type",
})


def span_attributes(owner: Any, kwargs: dict[str, Any]) -> dict[str, str]:
    """Attributes for a repository call: table name plus allowlisted kwargs."""
    attrs: dict[str, str] = {}
    table = getattr(owner, "table_name", None)
    if table:
        attrs["record_store.table"] = table
    for key, value in kwargs.items():
        if key in SAFE_SPAN_ATTR_KEYS and value is not None:
            attrs[f"arg.{key}"] = str(value)
    return attrs


def traced(
    operation_name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Wrap an async repository method in a span named Class.method.

    Failed calls mark the span as ERROR and record the exception before it
    propagates.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
            name = operation_name or f"{type(self).__name__}.{func.__name__}"
            with _tracer.start_as_current_span(
                name, attributes=span_attributes(self, kwargs)
            ) as span:
                try:
                    result = await func(self, *args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                    span.record_exception(e)
                    raise
                return result

        return wrapper

    return decorator


def add_span_event(name: str, attributes: dict[str, Any] | None = None) -> None:
    """Add an event to the current span (no-op outside a recording span)."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes or {})
