"""Smoke tests for health and app wiring."""

from httpx import AsyncClient

from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.persistence import database


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"


async def test_health_echoes_request_id(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert response.headers.get("X-Request-ID") == "req-123"


async def test_readiness_503_when_database_unavailable(client: AsyncClient, monkeypatch) -> None:
    async def unavailable():
        raise SqlNotConfiguredException()
        yield  # pragma: no cover

    monkeypatch.setattr(database, "get_db", unavailable)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"
