"""Tests for the error taxonomy and its HTTP rendering."""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from app.errors import (
    AppError,
    DatabaseError,
    ForbiddenError,
    InternalError,
    InvalidFieldError,
    InvalidInputError,
    InvalidStatusError,
    NotFoundError,
    UnauthorizedError,
    register_exception_handlers,
)


class TestErrorTaxonomy:
    """Codes, statuses and log levels of each error kind."""

    @pytest.mark.parametrize(
        "error_cls,code,status_code",
        [
            (InvalidInputError, "INVALID_INPUT", 400),
            (InvalidFieldError, "INVALID_FIELD", 400),
            (InvalidStatusError, "INVALID_STATUS", 400),
            (UnauthorizedError, "UNAUTHORIZED", 401),
            (ForbiddenError, "FORBIDDEN", 403),
            (NotFoundError, "NOT_FOUND", 404),
            (DatabaseError, "DATABASE_ERROR", 500),
            (InternalError, "INTERNAL_ERROR", 500),
        ],
    )
    def test_code_and_status(self, error_cls, code, status_code):
        error = error_cls()
        assert isinstance(error, AppError)
        assert error.code == code
        assert error.status_code == status_code
        assert error.message == error_cls.default_message

    def test_client_errors_log_at_warning(self):
        assert NotFoundError().log_level == logging.WARNING
        assert InvalidFieldError().log_level == logging.WARNING

    def test_server_errors_log_at_error(self):
        assert DatabaseError().log_level == logging.ERROR
        assert InternalError().log_level == logging.ERROR

    def test_custom_message(self):
        error = NotFoundError("encounter not found")
        assert str(error) == "encounter not found"
        assert error.to_dict() == {"error": "encounter not found", "code": "NOT_FOUND"}

    def test_invalid_field_carries_field(self):
        error = InvalidFieldError("invalid field specified: 'ssn'", field="ssn")
        assert error.field == "ssn"

    def test_repr_names_code(self):
        assert "DATABASE_ERROR" in repr(DatabaseError())


class Body(BaseModel):
    value: int


@pytest.fixture
async def error_client():
    """Client for a bare app that raises each kind of error on demand."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/forbidden")
    async def forbidden():
        raise ForbiddenError()

    @app.get("/unauthorized")
    async def unauthorized():
        raise UnauthorizedError("Missing authentication token")

    @app.get("/database")
    async def database():
        raise DatabaseError()

    @app.post("/body")
    async def body(payload: Body):
        return {"value": payload.value}

    @app.get("/crash")
    async def crash():
        raise RuntimeError("secret internals")

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.mark.asyncio
async def test_forbidden_rendered(error_client):
    response = await error_client.get("/forbidden")
    assert response.status_code == 403
    assert response.json() == {"error": "access forbidden", "code": "FORBIDDEN"}


@pytest.mark.asyncio
async def test_unauthorized_has_challenge_header(error_client):
    response = await error_client.get("/unauthorized")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_database_error_rendered(error_client):
    response = await error_client.get("/database")
    assert response.status_code == 500
    assert response.json() == {"error": "database operation failed", "code": "DATABASE_ERROR"}


@pytest.mark.asyncio
async def test_validation_error_is_400(error_client):
    response = await error_client.post("/body", json={"value": "not a number"})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid request", "code": "INVALID_INPUT"}


@pytest.mark.asyncio
async def test_unhandled_error_is_opaque(error_client, caplog):
    caplog.set_level(logging.ERROR, logger="app.errors")
    response = await error_client.get("/crash")
    assert response.status_code == 500
    assert response.json() == {"error": "internal server error", "code": "INTERNAL_ERROR"}
    assert "secret internals" not in response.text
    assert any(r.name == "app.errors" and r.exc_info for r in caplog.records)
