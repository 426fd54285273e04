import pytest
from httpx import ASGITransport, AsyncClient

from rewards_admin import __version__


@pytest.mark.asyncio
async def test_root_health_reports_version(app_with_db):
    app, _ = app_with_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/healthz")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["version"] == __version__


@pytest.mark.asyncio
async def test_readiness_checks_database(app_with_db):
    app, _ = app_with_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        liveness = await client.get("/api/v1/healthz")
        readiness = await client.get("/api/v1/health/readyz")

    assert liveness.json() == {"status": "ok"}
    payload = readiness.json()
    assert payload["status"] == "ready"
    assert payload["components"]["database"]["status"] == "ready"
