"""Fault taxonomy and the FastAPI handlers that render it.

Services raise a subclass of ``ApplicationError`` for anything the caller
must not treat as success; outcomes the caller can act on (a taken email,
say) come back as declined ``ServiceResult`` values instead. Every fault,
including framework validation and routing errors, leaves the service as an
``ErrorResponse`` body stamped with the request id.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.correlation import REQUEST_ID_HEADER, bind_request_id, request_id_of, reset_request_id
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """Base fault; subclasses pin ``status_code`` and a default ``code``."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "application_error"
    default_message: str = "The request could not be processed."

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}


class NotFoundError(ApplicationError):
    """A task, parent task or assignee the request names does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found."


class PermissionDeniedError(ApplicationError):
    """The acting user is not the task's creator, or the account is inactive."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Not enough permissions."


class ValidationError(ApplicationError):
    """Input that parses but breaks a task rule (time range, parent placement)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "validation_error"
    default_message = "Validation failed."


class ServerError(ApplicationError):
    """Storage failed, or a write touched no rows when it had to."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "server_error"
    default_message = "Internal server error."


# Framework-raised HTTP errors this service can produce: missing or bad bearer
# token, unknown route, wrong method.
_HTTP_ERROR_CODES: dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(code=code, message=message, details=dict(details or {}))
    request_id = request_id_of(request)
    if request_id:
        body.details["request_id"] = request_id
    response = JSONResponse(body.model_dump(mode="json"), status_code=status_code, headers=headers)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


async def _application_error(request: Request, exc: ApplicationError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logging.WARNING
    logger.log(level, "Request failed: %s", exc.message, extra={"code": exc.code})
    return _error_response(request, exc.status_code, exc.code, exc.message, exc.details)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Request validation failed", extra={"path": request.url.path})
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed.",
        {"errors": jsonable_encoder(exc.errors())},
    )


async def _integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Constraint violation escaped the service layer", exc_info=exc)
    return _error_response(request, status.HTTP_409_CONFLICT, "db_integrity_error", "Database integrity violation.")


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    if isinstance(exc.detail, str):
        message, details = exc.detail, None
    else:
        message, details = "Request failed.", {"detail": exc.detail}
    return _error_response(request, exc.status_code, code, message, details, headers=exc.headers)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside CorrelationIdMiddleware, so the id must be rebound for the log line.
    request_id = request_id_of(request)
    token = bind_request_id(request_id) if request_id else None
    try:
        logger.exception("Unhandled error", exc_info=exc)
    finally:
        if token is not None:
            reset_request_id(token)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "server_error", "Internal server error.")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, _application_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)


__all__ = [
    "ApplicationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServerError",
    "ValidationError",
    "register_exception_handlers",
]
