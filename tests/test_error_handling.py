from __future__ import annotations

import pytest
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from dailywork.core.config import Settings
from dailywork.errors import ApplicationError, NotFoundError, PermissionDeniedError
from dailywork.main import create_app

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def bare_app() -> FastAPI:
    return create_app(Settings(environment="test"))


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


async def test_application_error_response_schema(bare_app: FastAPI) -> None:
    @bare_app.get("/error/application")
    async def trigger_application_error() -> None:
        raise ApplicationError(
            "Example failure",
            code="example_error",
            status_code=status.HTTP_418_IM_A_TEAPOT,
            details={"foo": "bar"},
        )

    async with _client(bare_app) as client:
        response = await client.get("/error/application")

    assert response.status_code == status.HTTP_418_IM_A_TEAPOT
    request_id = response.headers["X-Request-ID"]
    assert response.json() == {
        "code": "example_error",
        "message": "Example failure",
        "details": {"foo": "bar", "request_id": request_id},
    }


@pytest.mark.parametrize(
    ("error", "expected_status", "expected_code"),
    [
        (NotFoundError("Task not found."), status.HTTP_404_NOT_FOUND, "not_found"),
        (PermissionDeniedError(), status.HTTP_403_FORBIDDEN, "forbidden"),
    ],
)
async def test_fault_subclasses_map_to_status(
    bare_app: FastAPI,
    error: ApplicationError,
    expected_status: int,
    expected_code: str,
) -> None:
    @bare_app.get("/error/fault")
    async def trigger_fault() -> None:
        raise error

    async with _client(bare_app) as client:
        response = await client.get("/error/fault")

    assert response.status_code == expected_status
    assert response.json()["code"] == expected_code


async def test_validation_error_response_schema(bare_app: FastAPI) -> None:
    class ExamplePayload(BaseModel):
        name: str

    @bare_app.post("/error/validation")
    async def create_item(_: ExamplePayload) -> None:
        return None

    async with _client(bare_app) as client:
        response = await client.post("/error/validation", json={})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["message"] == "Request validation failed."
    assert "errors" in payload["details"]
    assert payload["details"]["request_id"] == response.headers["X-Request-ID"]


async def test_unknown_route_uses_error_envelope(bare_app: FastAPI) -> None:
    async with _client(bare_app) as client:
        response = await client.get("/error/not-found", headers={"X-Request-ID": "fixed-id"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    payload = response.json()
    assert payload["code"] == "not_found"
    assert payload["details"]["request_id"] == "fixed-id"
    assert response.headers["X-Request-ID"] == "fixed-id"


async def test_integrity_error_response_schema(bare_app: FastAPI) -> None:
    @bare_app.get("/error/database")
    async def trigger_integrity_error() -> None:
        raise IntegrityError("statement", {}, Exception("constraint"))

    async with _client(bare_app) as client:
        response = await client.get("/error/database")

    assert response.status_code == status.HTTP_409_CONFLICT
    payload = response.json()
    assert payload["code"] == "db_integrity_error"
    assert payload["message"] == "Database integrity violation."


async def test_wrong_method_uses_error_envelope(bare_app: FastAPI) -> None:
    async with _client(bare_app) as client:
        response = await client.put("/healthz")

    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert response.json()["code"] == "method_not_allowed"


async def test_structured_http_detail_is_kept_under_details(bare_app: FastAPI) -> None:
    @bare_app.get("/error/structured")
    async def trigger_structured_http_error() -> None:
        raise StarletteHTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail={"retry_after": 5})

    async with _client(bare_app) as client:
        response = await client.get("/error/structured")

    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    payload = response.json()
    assert payload["code"] == "http_error"
    assert payload["message"] == "Request failed."
    assert payload["details"]["detail"] == {"retry_after": 5}


async def test_fault_defaults_come_from_the_subclass() -> None:
    error = NotFoundError()

    assert error.message == "Resource not found."
    assert error.code == "not_found"
    assert error.status_code == status.HTTP_404_NOT_FOUND
    assert error.details == {}
