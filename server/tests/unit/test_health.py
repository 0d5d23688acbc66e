"""Unit tests for health endpoints."""

import pytest


@pytest.mark.asyncio
async def test_health_check(test_client):
    """Test the health check endpoint."""
    response = await test_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "service" in data
    assert "version" in data


@pytest.mark.asyncio
async def test_health_ping_rpc(test_client):
    """Test the RPC-style health ping endpoint."""
    response = await test_client.post("/v1/health/ping", json={})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"] == {"database": "ok"}
    assert data["currency"] == "INR"
    assert "timestamp" in data
    assert "version" in data
    # Workers are only started by the application lifespan
    assert data["workers"] == {"draft_expiry": False, "idempotency_cleanup": False}


@pytest.mark.asyncio
async def test_health_ping_degraded(test_app, test_client):
    """A failing database check degrades the ping without failing it."""
    from travelpod.core.database import get_db

    class BrokenSession:
        async def execute(self, statement):
            raise ConnectionRefusedError("database is down")

    async def broken_db():
        yield BrokenSession()

    test_app.dependency_overrides[get_db] = broken_db

    response = await test_client.post("/v1/health/ping", json={})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["checks"]["database"] == "unavailable"


@pytest.mark.asyncio
async def test_request_id_is_echoed(test_client):
    """A caller supplied request ID comes back on the response."""
    response = await test_client.post(
        "/v1/health/ping", json={}, headers={"X-Request-ID": "req-123"}
    )
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_request_id_is_generated(test_client):
    response = await test_client.post("/v1/health/ping", json={})
    assert response.headers.get("X-Request-ID")
