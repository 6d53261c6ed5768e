import uuid

import pytest
from sqlalchemy.dialects import postgresql

from conftest import register, seed_exercises
from gymlog.api.v1.endpoints.workout_plans import visible_plans_statement
from gymlog.core.enums import BodyPart

PLANS = "/api/v1/workout-plans"


def plan_body(*exercise_ids, **overrides) -> dict:
    body = {
        "name": "Upper body",
        "description": "Push and pull",
        "muscle_types": ["chest", "back"],
        "difficulty_level": "intermediate",
        "estimated_duration": 60,
        "exercises": [{"exercise_id": ex_id, "sets": 3, "reps": 10} for ex_id in exercise_ids],
    }
    body.update(overrides)
    return body


async def setup_users(client):
    alice = await register(client, "Alice", "alice@example.com")
    bob = await register(client, "Bob", "bob@example.com")
    await seed_exercises(client, alice["headers"])
    return alice, bob


@pytest.mark.asyncio
async def test_create_plan_returns_flattened_exercises(client):
    alice, _ = await setup_users(client)

    resp = await client.post(PLANS, json=plan_body("bench-press", "deadlift"), headers=alice["headers"])
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Workout plan created successfully"
    plan = body["data"]
    assert plan["created_by"] == alice["id"]
    assert plan["is_public"] is False
    assert plan["revision"] == 1
    assert plan["creator"] == {"name": "Alice", "email": "alice@example.com"}
    first, second = plan["exercises"]
    assert (first["exercise_id"], first["order_index"], first["exercise_name"]) == ("bench-press", 1, "Bench Press")
    assert (first["body_part"], first["exercise_type"]) == ("chest", "compound")
    assert (second["exercise_id"], second["order_index"]) == ("deadlift", 2)


@pytest.mark.asyncio
async def test_create_plan_requires_exercises_and_auth(client):
    alice, _ = await setup_users(client)

    resp = await client.post(PLANS, json=plan_body("bench-press"))
    assert resp.status_code == 401
    resp = await client.post(PLANS, json=plan_body(), headers=alice["headers"])
    assert resp.status_code == 400
    resp = await client.post(PLANS, json=plan_body("bench-press", muscle_types=[]), headers=alice["headers"])
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_failed_exercise_insert_discards_plan(client):
    alice, _ = await setup_users(client)

    resp = await client.post(PLANS, json=plan_body("bench-press", "bench-press"), headers=alice["headers"])
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Failed to add exercises to workout plan"
    assert body["details"] == ["exercises[2]: exercise 'bench-press' is already in the plan"]

    resp = await client.get(PLANS, headers=alice["headers"])
    assert resp.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_visibility_of_public_and_private_plans(client):
    alice, bob = await setup_users(client)
    private = (await client.post(PLANS, json=plan_body("squat", name="Secret"), headers=alice["headers"])).json()["data"]
    public = (
        await client.post(PLANS, json=plan_body("squat", name="Shared", is_public=True), headers=alice["headers"])
    ).json()["data"]
    await client.post(PLANS, json=plan_body("deadlift", name="Bob's"), headers=bob["headers"])

    resp = await client.get(PLANS)
    assert [p["name"] for p in resp.json()["data"]] == ["Shared"]
    resp = await client.get(PLANS, headers=bob["headers"])
    assert {p["name"] for p in resp.json()["data"]} == {"Shared", "Bob's"}
    resp = await client.get(PLANS, headers=alice["headers"])
    assert {p["name"] for p in resp.json()["data"]} == {"Secret", "Shared"}
    resp = await client.get(PLANS, params={"search": "secr"}, headers=alice["headers"])
    assert [p["name"] for p in resp.json()["data"]] == ["Secret"]
    resp = await client.get(PLANS, params={"is_public": "false", "created_by": alice["id"]}, headers=alice["headers"])
    assert [p["name"] for p in resp.json()["data"]] == ["Secret"]

    assert (await client.get(f"{PLANS}/{public['id']}")).status_code == 200
    assert (await client.get(f"{PLANS}/{private['id']}")).status_code == 404
    resp = await client.get(f"{PLANS}/{private['id']}", headers=bob["headers"])
    assert resp.status_code == 404
    assert resp.json()["message"] == "Workout plan not found"
    resp = await client.get(f"{PLANS}/{private['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    assert [e["exercise_id"] for e in resp.json()["data"]["exercises"]] == ["squat"]


@pytest.mark.asyncio
async def test_only_owner_modifies_public_plan(client):
    alice, bob = await setup_users(client)
    plan = (
        await client.post(PLANS, json=plan_body("squat", is_public=True), headers=alice["headers"])
    ).json()["data"]

    resp = await client.put(f"{PLANS}/{plan['id']}", json={"name": "Bob's now"}, headers=bob["headers"])
    assert resp.status_code == 403
    assert resp.json()["message"] == "You can only update your own workout plans"
    resp = await client.post(
        f"{PLANS}/{plan['id']}/exercises", json={"exercise_id": "deadlift", "sets": 1, "reps": 1}, headers=bob["headers"]
    )
    assert resp.status_code == 403
    resp = await client.delete(f"{PLANS}/{plan['id']}", headers=bob["headers"])
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_plan(client):
    alice, _ = await setup_users(client)
    plan = (await client.post(PLANS, json=plan_body("bench-press"), headers=alice["headers"])).json()["data"]
    url = f"{PLANS}/{plan['id']}"

    assert (await client.put(url, json={}, headers=alice["headers"])).status_code == 400
    assert (await client.put(url, json={"expected_revision": 1}, headers=alice["headers"])).status_code == 400
    assert (await client.put(url, json={"name": None}, headers=alice["headers"])).status_code == 400
    assert (await client.put(url, json={"exercises": []}, headers=alice["headers"])).status_code == 400
    data = (await client.get(url, headers=alice["headers"])).json()["data"]
    assert [e["exercise_id"] for e in data["exercises"]] == ["bench-press"]

    resp = await client.put(url, json={"description": None, "is_public": True}, headers=alice["headers"])
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["description"] is None
    assert data["is_public"] is True
    assert data["revision"] == 1

    resp = await client.put(
        url,
        json={"exercises": [{"exercise_id": "squat", "sets": 5, "reps": 5}], "expected_revision": 1},
        headers=alice["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["revision"] == 2
    assert [e["exercise_id"] for e in data["exercises"]] == ["squat"]

    resp = await client.put(
        url,
        json={"exercises": [{"exercise_id": "deadlift", "sets": 5, "reps": 5}], "expected_revision": 1},
        headers=alice["headers"],
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_failed_replace_keeps_previous_exercises(client):
    alice, _ = await setup_users(client)
    plan = (await client.post(PLANS, json=plan_body("bench-press", "squat"), headers=alice["headers"])).json()["data"]
    url = f"{PLANS}/{plan['id']}"

    resp = await client.put(
        url,
        json={"exercises": [{"exercise_id": "deadlift", "sets": 1, "reps": 1}, {"exercise_id": "ghost", "sets": 1, "reps": 1}]},
        headers=alice["headers"],
    )
    assert resp.status_code == 500
    assert resp.json()["message"] == "Failed to replace exercises of workout plan"

    data = (await client.get(url, headers=alice["headers"])).json()["data"]
    assert [e["exercise_id"] for e in data["exercises"]] == ["bench-press", "squat"]
    assert data["revision"] == 1


@pytest.mark.asyncio
async def test_plan_exercise_endpoints(client):
    alice, _ = await setup_users(client)
    plan = (
        await client.post(PLANS, json=plan_body("bench-press", "squat", "deadlift"), headers=alice["headers"])
    ).json()["data"]
    url = f"{PLANS}/{plan['id']}/exercises"

    resp = await client.post(url, json={"exercise_id": "squat", "sets": 3, "reps": 5}, headers=alice["headers"])
    assert resp.status_code == 400
    assert resp.json()["message"] == "Exercise already exists in this workout plan"
    resp = await client.post(url, json={"exercise_id": "ghost", "sets": 3, "reps": 5}, headers=alice["headers"])
    assert resp.status_code == 404

    squat_entry = plan["exercises"][1]["id"]
    resp = await client.delete(f"{url}/{squat_entry}", headers=alice["headers"])
    assert resp.status_code == 200

    resp = await client.post(url, json={"exercise_id": "bicep-curl", "sets": 3, "reps": 12}, headers=alice["headers"])
    assert resp.status_code == 201
    added = resp.json()["data"]
    assert added["order_index"] == 4
    assert added["exercise_name"] == "Bicep Curl"

    resp = await client.put(f"{url}/{added['id']}", json={"sets": 4, "notes": "slow"}, headers=alice["headers"])
    assert resp.status_code == 200
    assert (resp.json()["data"]["sets"], resp.json()["data"]["notes"]) == (4, "slow")
    assert (await client.put(f"{url}/{added['id']}", json={}, headers=alice["headers"])).status_code == 400

    data = (await client.get(f"{PLANS}/{plan['id']}", headers=alice["headers"])).json()["data"]
    assert [(e["exercise_id"], e["order_index"]) for e in data["exercises"]] == [
        ("bench-press", 1),
        ("deadlift", 3),
        ("bicep-curl", 4),
    ]


@pytest.mark.asyncio
async def test_delete_plan_and_stats(client):
    alice, _ = await setup_users(client)
    first = (await client.post(PLANS, json=plan_body("squat"), headers=alice["headers"])).json()["data"]
    await client.post(
        PLANS,
        json=plan_body("deadlift", is_public=True, difficulty_level="advanced", muscle_types=["back"]),
        headers=alice["headers"],
    )

    stats = (await client.get(f"{PLANS}/stats", headers=alice["headers"])).json()["data"]
    assert stats == {
        "total_plans": 2,
        "public_plans": 1,
        "private_plans": 1,
        "by_difficulty": {"intermediate": 1, "advanced": 1},
        "muscle_type_usage": {"chest": 1, "back": 2},
    }

    resp = await client.delete(f"{PLANS}/{first['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    assert resp.json()["message"] == "Workout plan deleted successfully"
    assert (await client.get(f"{PLANS}/{first['id']}", headers=alice["headers"])).status_code == 404
    assert (await client.delete(f"{PLANS}/{first['id']}", headers=alice["headers"])).status_code == 404


def test_muscle_type_filter_uses_array_containment():
    stmt = visible_plans_statement(uuid.uuid4(), muscle_type=BodyPart.CHEST)
    compiled = stmt.compile(dialect=postgresql.dialect())
    sql = str(compiled)
    assert "workout_plans.muscle_types @> " in sql
    assert ["chest"] in compiled.params.values()

    anonymous = str(visible_plans_statement(None).compile(dialect=postgresql.dialect()))
    assert "@>" not in anonymous
    assert "workout_plans.is_public IS true" in anonymous
