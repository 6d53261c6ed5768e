import pytest


@pytest.mark.asyncio
async def test_root_and_health(client):
    resp = await client.get("/")
    assert resp.json() == {"success": True, "message": "GymLog API is running"}

    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"

    resp = await client.get("/api/v1/health/ready")
    assert resp.json() == {"success": True, "status": "ok", "database": "connected"}


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(client):
    resp = await client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Not Found"}
