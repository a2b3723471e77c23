from __future__ import annotations


async def test_liveness(client) -> None:
    response = await client.get("/api/v1/test")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Electric Vehicle DataGrid API is running"
    assert "T" in body["timestamp"]


async def test_health(client) -> None:
    response = await client.get("/api/v1/health")

    assert response.json() == {"status": "ok", "database": "connected"}
