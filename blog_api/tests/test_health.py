import pytest
from httpx import AsyncClient

@pytest.mark.asyncio
async def test_root(test_client: AsyncClient):
    response = await test_client.get("/")

    assert response.status_code == 200
    assert response.json()["docs"] == "/api/docs"

@pytest.mark.asyncio
async def test_health_check(test_client: AsyncClient):
    """Test the health endpoint reports the database state"""
    response = await test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert "timestamp" in data
