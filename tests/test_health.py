import pytest
from httpx import ASGITransport, AsyncClient

from signal_relay.main import app


@pytest.mark.asyncio
async def test_health_endpoint() -> None:
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/health")
        api_response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "T" in body["timestamp"]
    assert api_response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_health_head() -> None:
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.head("/health")

    assert response.status_code == 200
