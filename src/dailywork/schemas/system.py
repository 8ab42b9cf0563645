"""Bodies of the root, health and error responses."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    name: str
    version: str
    environment: str
    openapi_url: str


class HealthCheckResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ErrorResponse(BaseModel):
    """Body of every error response.

    ``code`` is the fault code (``not_found``, ``forbidden``, ...) and
    ``details`` always carries the ``request_id`` of the failed request.
    """

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
