"""Request correlation: one id per request, shared by logs, errors and the response."""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST = "-"

_current_request_id: ContextVar[str] = ContextVar("dailywork_request_id", default=NO_REQUEST)


def get_request_id() -> str:
    return _current_request_id.get()


def bind_request_id(request_id: str) -> Token[str]:
    """Make ``request_id`` current until the returned token is reset."""
    return _current_request_id.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _current_request_id.reset(token)


def request_id_of(request: Request) -> str | None:
    """Return the id the middleware stored on ``request``, if it ran."""
    return getattr(request.state, "request_id", None)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Accept a caller supplied ``X-Request-ID`` or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response


__all__ = [
    "NO_REQUEST",
    "REQUEST_ID_HEADER",
    "CorrelationIdMiddleware",
    "bind_request_id",
    "get_request_id",
    "request_id_of",
    "reset_request_id",
]
