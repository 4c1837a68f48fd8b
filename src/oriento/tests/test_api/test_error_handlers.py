import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from oriento.api.v1.error_handlers import register_exception_handlers
from oriento.exceptions.base import DuplicateError, RepositoryError


def make_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/duplicate")
    async def duplicate():
        raise DuplicateError("User already exists", fields=["email"], constraint="uq_users_email")

    @app.get("/storage")
    async def storage():
        raise RepositoryError("Failed to operate on Conversation", constraint="pk_conversations")

    return app


@pytest.mark.asyncio
class TestAppErrorHandler:

    async def test_client_error_payload(self):
        async with AsyncClient(transport=ASGITransport(app=make_app()), base_url="http://t") as client:
            resp = await client.get("/duplicate")

        assert resp.status_code == 409
        assert resp.json() == {"detail": "User already exists", "code": "duplicate", "fields": ["email"]}

    async def test_storage_failure_hides_constraint(self):
        async with AsyncClient(transport=ASGITransport(app=make_app()), base_url="http://t") as client:
            resp = await client.get("/storage")

        assert resp.status_code == 500
        assert resp.json()["code"] == "storage_failure"
        assert "pk_conversations" not in resp.text
