import pytest

from conftest import register


def log_body(**overrides) -> dict:
    body = {"exercise": "Bench Press", "sets": 3, "reps": 8, "weight": 60}
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_gym_log_crud(client):
    alice = await register(client, "Alice", "alice@example.com")

    resp = await client.post("/api/v1/gym-logs", json=log_body(notes="felt strong"), headers=alice["headers"])
    assert resp.status_code == 201
    log = resp.json()["data"]
    assert log["user_id"] == alice["id"]
    assert log["weight"] == 60

    resp = await client.put(f"/api/v1/gym-logs/{log['id']}", json={"reps": 10, "notes": None}, headers=alice["headers"])
    assert resp.status_code == 200
    assert resp.json()["data"]["reps"] == 10
    assert resp.json()["data"]["notes"] is None

    resp = await client.put(f"/api/v1/gym-logs/{log['id']}", json={"sets": None}, headers=alice["headers"])
    assert resp.status_code == 400

    resp = await client.delete(f"/api/v1/gym-logs/{log['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    resp = await client.get(f"/api/v1/gym-logs/{log['id']}", headers=alice["headers"])
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_gym_log_validation(client):
    alice = await register(client, "Alice", "alice@example.com")
    resp = await client.post("/api/v1/gym-logs", json=log_body(sets=0, weight=-1), headers=alice["headers"])
    assert resp.status_code == 400
    assert {d.split(":")[0] for d in resp.json()["details"]} == {"sets", "weight"}


@pytest.mark.asyncio
async def test_gym_logs_are_private(client):
    alice = await register(client, "Alice", "alice@example.com")
    bob = await register(client, "Bob", "bob@example.com")
    resp = await client.post("/api/v1/gym-logs", json=log_body(), headers=alice["headers"])
    log_id = resp.json()["data"]["id"]

    resp = await client.get(f"/api/v1/gym-logs/{log_id}", headers=bob["headers"])
    assert resp.status_code == 404
    resp = await client.put(f"/api/v1/gym-logs/{log_id}", json={"reps": 1}, headers=bob["headers"])
    assert resp.status_code == 403
    resp = await client.delete(f"/api/v1/gym-logs/{log_id}", headers=bob["headers"])
    assert resp.status_code == 403

    resp = await client.get("/api/v1/gym-logs", headers=bob["headers"])
    assert resp.json()["data"] == []
    resp = await client.get(f"/api/v1/gym-logs/stats/{alice['id']}", headers=bob["headers"])
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_gym_log_list_filter_and_stats(client):
    alice = await register(client, "Alice", "alice@example.com")
    for name in ("Bench Press", "Incline Bench Press", "Squat"):
        await client.post("/api/v1/gym-logs", json=log_body(exercise=name), headers=alice["headers"])

    resp = await client.get("/api/v1/gym-logs", params={"exercise": "bench"}, headers=alice["headers"])
    body = resp.json()
    assert body["pagination"]["total"] == 2
    assert {log["exercise"] for log in body["data"]} == {"Bench Press", "Incline Bench Press"}

    resp = await client.get("/api/v1/gym-logs", params={"limit": 1, "page": 2}, headers=alice["headers"])
    assert resp.json()["pagination"] == {"total": 3, "page": 2, "limit": 1, "total_pages": 3}

    resp = await client.get(f"/api/v1/gym-logs/stats/{alice['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    stats = resp.json()["data"]
    assert stats["total_logs"] == 3
    assert stats["unique_exercises"] == 3
