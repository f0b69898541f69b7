"""Middleware tests: request ID, CORS, error envelopes."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from forum.config import get_settings
from forum.errors import InternalError
from forum.middleware import setup_middleware


@pytest_asyncio.fixture
async def failing_client() -> AsyncGenerator[AsyncClient, None]:
    """App with routes that fail in known ways, wired with the real middleware."""
    app = FastAPI()
    setup_middleware(app, get_settings())

    @app.get("/boom/internal")
    async def internal() -> None:
        raise InternalError

    @app.get("/boom/storage")
    async def storage() -> None:
        raise OperationalError("SELECT 1", {}, Exception("connection refused to db.internal:5432"))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["has spaces", "x" * 65, "slash/path", "semi;colon"])
async def test_unsafe_request_id_replaced(client: AsyncClient, header: str) -> None:
    """A request ID that is too long or has unsafe characters is replaced with a UUID."""
    response = await client.get("/health", headers={"X-Request-Id": header})
    returned = response.headers["x-request-id"]
    assert returned != header
    assert len(returned) == 36


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert "access-control-allow-origin" in response.headers


@pytest.mark.asyncio
async def test_404_returns_envelope(client: AsyncClient) -> None:
    """Unknown paths return 404 in the error envelope."""
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.headers["content-type"] == "application/json"
    data = response.json()
    assert data["success"] is False
    assert data["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_body_validation_envelope(client: AsyncClient) -> None:
    """Malformed JSON bodies are VALIDATION errors."""
    response = await client.post("/auth/login", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_internal_error_envelope(failing_client: AsyncClient) -> None:
    response = await failing_client.get("/boom/internal")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": {"code": "INTERNAL_ERROR", "message": "internal error"}}


@pytest.mark.asyncio
async def test_storage_error_hides_detail(failing_client: AsyncClient) -> None:
    """Driver messages never reach the caller."""
    response = await failing_client.get("/boom/storage")
    assert response.status_code == 500
    body = response.json()
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "db.internal" not in response.text
