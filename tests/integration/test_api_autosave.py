"""
자동 저장 설정 API 통합 테스트.
"""

from httpx import AsyncClient


async def test_get_autosave(client: AsyncClient):
    response = await client.get("/api/v1/autosave")

    assert response.status_code == 200
    data = response.json()
    assert data["config"]["enabled"] is False
    assert data["running"] is False


async def test_enable_disable(client: AsyncClient):
    response = await client.post("/api/v1/autosave/enable")
    assert response.json()["running"] is True
    assert response.json()["config"]["enabled"] is True

    response = await client.post("/api/v1/autosave/disable")
    assert response.json()["running"] is False
    assert response.json()["config"]["enabled"] is False


async def test_configure_merges(client: AsyncClient):
    response = await client.patch("/api/v1/autosave", json={"interval": 5000})

    assert response.status_code == 200
    config = response.json()["config"]
    assert config["interval"] == 5000
    assert config["debounce_delay"] == 2000


async def test_configure_rejects_non_positive(client: AsyncClient):
    response = await client.patch("/api/v1/autosave", json={"debounce_delay": 0})
    assert response.status_code == 422
