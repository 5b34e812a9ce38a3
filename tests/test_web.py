"""Tests for the FastAPI application."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from percent_lift.db import GoalRepository
from percent_lift.models.goal import Goal
from percent_lift.session import SessionEngine
from percent_lift.web import create_app
from percent_lift.web.routers.workout import _snapshot

DAY_A_SETS = [(0, 4), (1, 2), (2, 1)]


@pytest.fixture
def client(seeded):
    with TestClient(create_app(seeded.db_path)) as client:
        yield client


def complete_every_set(client):
    state = client.get("/workout/state").json()
    for ei, entry in enumerate(state["session"]["exercises"]):
        for si, logged in enumerate(entry["sets"]):
            response = client.post(
                "/workout/sets/complete",
                json={
                    "exercise_index": ei,
                    "set_index": si,
                    "actual_weight": logged["target_weight"],
                    "actual_reps": logged["target_reps"],
                },
            )
            assert response.status_code == 200


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCalculatorRoutes:
    """Tests for the stateless calculator routes."""

    def test_weight(self, client):
        response = client.post("/calc/weight", json={"max_weight": 225, "percentage": 70})
        data = response.json()
        assert data["weight"] == 160
        assert data["actual_percentage"] == pytest.approx(71.11, abs=0.01)

    def test_plates_with_inventory(self, client):
        response = client.post(
            "/calc/plates",
            json={
                "target_weight": 185,
                "bar_weight": 45,
                "inventory": [{"plate_weight": 45, "count": 2}, {"plate_weight": 25, "count": 2}],
            },
        )
        data = response.json()
        assert data["is_exact"] is True
        assert data["loading_order"] == [45, 25]
        assert data["description"] == "1x45 + 1x25 per side"

    def test_plates_with_stored_inventory(self, client):
        data = client.post("/calc/plates", json={"target_weight": 210}).json()
        assert data["loading_order"] == [45, 35, 2.5]
        assert data["achievable_weight"] == 210

    def test_plates_reject_negative_counts(self, client):
        response = client.post(
            "/calc/plates",
            json={"target_weight": 100, "inventory": [{"plate_weight": 45, "count": -1}]},
        )
        assert response.status_code == 422

    def test_warmup(self, client):
        response = client.get("/calc/warmup", params={"max_weight": 225})
        assert response.json()["weights"] == [45, 135, 160, 180, 205, 225]

    def test_body_fat(self, client):
        response = client.post(
            "/calc/body-fat",
            json={
                "gender": "male",
                "height_inches": 70,
                "weight_lbs": 180,
                "waist_inches": 34,
                "neck_inches": 15,
            },
        )
        data = response.json()
        assert data["body_fat_percent"] == 17.5
        assert data["body_fat_category"] == "Fitness"
        assert data["bmi_category"] == "Overweight"

    @pytest.mark.parametrize(
        "overrides",
        [{"waist_inches": 14}, {"gender": "female"}],
    )
    def test_body_fat_bad_measurements(self, client, overrides):
        body = {
            "gender": "male",
            "height_inches": 70,
            "weight_lbs": 180,
            "waist_inches": 34,
            "neck_inches": 15,
        }
        body.update(overrides)
        response = client.post("/calc/body-fat", json=body)
        assert response.status_code == 422


class TestWorkoutRoutes:
    """Tests for the session routes."""

    def test_idle_state(self, client):
        data = client.get("/workout/state").json()
        assert data["state"] == "not_started"
        assert data["session"] is None
        assert data["rest_timer"]["is_running"] is False

    def test_full_workout(self, client, seeded):
        response = client.post("/workout/start", json={"routine_id": seeded.routine_id})
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "active"
        assert [len(e["sets"]) for e in data["session"]["exercises"]] == [n for _, n in DAY_A_SETS]

        complete_every_set(client)
        response = client.post("/workout/complete")
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "finalized"
        assert data["progressed"] == 2
        assert data["rest_timer"]["is_running"] is False
        names = {r["exercise_name"]: r["new_max_weight"] for r in data["progression_results"]}
        assert names == {"Squat": 230, "Bench Press": 190, "Curl": 50}

    def test_rest_and_skip(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.routine_id})
        data = client.post(
            "/workout/sets/complete",
            json={"exercise_index": 0, "set_index": 1, "actual_weight": 135, "actual_reps": 5},
        ).json()
        assert data["state"] == "resting"
        assert 89 <= data["rest_timer"]["remaining_seconds"] <= 90

        data = client.post("/workout/rest/skip").json()
        assert data["state"] == "active"
        assert data["rest_timer"]["remaining_seconds"] == 0

    def test_current_exercise(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.routine_id})
        data = client.post("/workout/current-exercise", json={"index": 2}).json()
        assert data["session"]["current_exercise_index"] == 2
        assert client.post("/workout/current-exercise", json={"index": 9}).status_code == 404

    def test_unknown_routine(self, client):
        assert client.post("/workout/start", json={"routine_id": 999}).status_code == 404

    def test_start_twice(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.routine_id})
        response = client.post("/workout/start", json={"routine_id": seeded.routine_id})
        assert response.status_code == 409

    def test_set_without_workout(self, client):
        response = client.post(
            "/workout/sets/complete",
            json={"exercise_index": 0, "set_index": 0, "actual_weight": 45, "actual_reps": 10},
        )
        assert response.status_code == 409

    def test_bad_set_index(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.routine_id})
        response = client.post(
            "/workout/sets/complete",
            json={"exercise_index": 0, "set_index": 8, "actual_weight": 45, "actual_reps": 10},
        )
        assert response.status_code == 404

    def test_cancel(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.routine_id})
        data = client.post("/workout/cancel").json()
        assert data["state"] == "not_started"
        assert data["session"] is None

    def test_cancel_after_complete(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.routine_id})
        client.post("/workout/complete")
        assert client.post("/workout/cancel").status_code == 409

    def test_prefill_set(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.routine_id})
        response = client.post(
            "/workout/sets/update",
            json={"exercise_index": 0, "set_index": 2, "actual_weight": 230},
        )
        assert response.status_code == 200
        data = response.json()
        logged = data["session"]["exercises"][0]["sets"][2]
        assert logged["actual_weight"] == 230
        assert logged["completed"] is False
        assert data["state"] == "active"

    def test_prefill_rejects_empty_edit(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.routine_id})
        response = client.post("/workout/sets/update", json={"exercise_index": 0, "set_index": 2})
        assert response.status_code == 422


class TestSnapshot:
    """The state payload shared by every session route."""

    @pytest.mark.asyncio
    async def test_expired_rest_reads_as_active(self, workout_store, make_settings, clock, day_a):
        engine = SessionEngine(workout_store, make_settings(), clock=clock, tick_interval=60)
        await engine.start(day_a)
        await engine.complete_set(0, 0, 45, 10)
        clock.advance(120)
        try:
            data = _snapshot(engine)
        finally:
            engine.skip_rest_timer()

        assert data["rest_timer"]["is_running"] is False
        assert data["state"] == "active"


class TestGoalRoutes:
    """Tests for the weekly goal route."""

    def test_no_goal(self, client):
        assert client.get("/goal").status_code == 404

    def test_progress_and_streak(self, client, seeded):
        asyncio.run(
            GoalRepository(seeded.db_path).create(Goal(workouts_per_week=1, scheduled_days=list(range(7))))
        )
        data = client.get("/goal").json()
        assert data["goal"]["workouts_per_week"] == 1
        assert data["progress"]["workouts_this_week"] == 0
        assert data["today_scheduled"] is True

        client.post("/workout/start", json={"routine_id": seeded.bench_routine_id})
        complete_every_set(client)
        assert client.post("/workout/complete").json()["goal_streak"] == 1
        assert client.get("/goal").json()["progress"]["workouts_this_week"] == 1

    def test_completion_without_goal(self, client, seeded):
        client.post("/workout/start", json={"routine_id": seeded.bench_routine_id})
        assert client.post("/workout/complete").json()["goal_streak"] is None
