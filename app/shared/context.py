"""Request context management using contextvars.

Async-safe storage for request-scoped values read outside the request
object (log records, spans). Set by middleware and dependencies.

Usage:
    token = set_request_id("abc123")
    get_request_id()  # "abc123"
    reset_request_id(token)
"""

from contextvars import ContextVar, Token

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)


def set_request_id(request_id: str | None) -> Token:
    """Bind request_id to the current task; return the token for reset."""
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def get_request_id() -> str | None:
    """Return the request id of the current request, or None outside a request."""
    return _request_id.get()


def set_current_user(user_id: str | None) -> None:
    """Record the authenticated admin user (after bearer token verification)."""
    _current_user_id.set(user_id)


def get_current_user_id() -> str | None:
    return _current_user_id.get()
