"""Request context management using contextvars.

Holds request-scoped values (request id, signed-in Auth0 subject) so log
records can carry them without threading them through every call.

Usage:
    set_request_id("abc123")
    set_current_user("auth0|123")
    get_request_context()
"""

import logging
from contextvars import ContextVar
from dataclasses import dataclass

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_current_user_sub: ContextVar[str | None] = ContextVar("current_user_sub", default=None)


@dataclass(frozen=True)
class RequestContext:
    """Immutable snapshot of the current request context."""

    request_id: str | None
    user_sub: str | None


def set_request_id(request_id: str | None) -> None:
    _request_id.set(request_id)


def set_current_user(user_sub: str | None) -> None:
    """Record the verified caller for this request (set after authentication)."""
    _current_user_sub.set(user_sub)


def get_request_context() -> RequestContext:
    return RequestContext(request_id=_request_id.get(), user_sub=_current_user_sub.get())


def clear_request_context() -> None:
    _request_id.set(None)
    _current_user_sub.set(None)


class RequestContextFilter(logging.Filter):
    """Adds request_id and user_sub attributes ("-" when unset) to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        record.user_sub = _current_user_sub.get() or "-"
        return True
