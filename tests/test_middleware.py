"""Middleware tests: request ID, CORS, error formatting."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_cors_preflight_allows_secret_header(client: AsyncClient) -> None:
    response = await client.options(
        "/send-notification",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "x-secret-key",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert "x-secret-key" in response.headers["access-control-allow-headers"].lower()


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_malformed_body_is_400(client: AsyncClient) -> None:
    """Request validation failures are reported as 400, not 422."""
    response = await client.post(
        "/login",
        content=b"not json",
        headers={"Content-Type": "application/json", "x-secret-key": "test-shared-secret"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Validation error"


def test_redact_sensitive_masks_tokens_and_secrets() -> None:
    from notifyhub.middleware.logging import redact_sensitive

    event = {
        "event": "push_sent",
        "token": "device-token-0123456789abcdef",
        "tokens": ["device-token-0123456789abcdef", "short"],
        "secret_key": "test-shared-secret",
        "provider": "fake",
    }
    redacted = redact_sensitive(None, "info", event)
    assert redacted["token"] == "...89abcdef"
    assert redacted["tokens"] == ["...89abcdef", "***"]
    assert redacted["secret_key"] == "***"
    assert redacted["provider"] == "fake"
