"""Pytest configuration and fixtures."""

import asyncio
import tempfile
from dataclasses import dataclass
from pathlib import Path

import pytest
import pytest_asyncio

from percent_lift.config import get_config
from percent_lift.db import (
    BarbellRepository,
    ExerciseRepository,
    RoutineRepository,
    init_db,
)
from percent_lift.errors import StoreFailure
from percent_lift.models.exercise import Barbell, ExerciseProfile
from percent_lift.models.routine import Routine, RoutineExercise, SetPlan, WeightKind, parse_set_plans
from percent_lift.models.settings import DEFAULT_SETTINGS, AppSettings


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryWorkoutStore:
    """Workout store double that records calls and can be told to fail."""

    def __init__(self):
        self.created = []
        self.set_updates = []
        self.finalized = []
        self.deleted = []
        self.fail_on: set[str] = set()
        self.update_delay = 0.0
        self._next_id = 1

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreFailure(f"{operation} failed")

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def create(self, session) -> int:
        self._maybe_fail("create")
        session.id = self._new_id()
        for entry in session.exercises:
            entry.id = self._new_id()
            for resolved in entry.sets:
                resolved.id = self._new_id()
        self.created.append(session)
        return session.id

    async def update_set(self, resolved) -> None:
        self._maybe_fail("update_set")
        if self.update_delay:
            await asyncio.sleep(self.update_delay)
        self.set_updates.append(resolved)

    async def finalize(self, workout_id, completed_at, progressions) -> None:
        self._maybe_fail("finalize")
        self.finalized.append((workout_id, completed_at, list(progressions)))

    async def delete(self, workout_id) -> bool:
        self._maybe_fail("delete")
        self.deleted.append(workout_id)
        return True


class DictSettings:
    """Settings provider backed by a dict, defaults filled in."""

    def __init__(self, **overrides):
        self.values = overrides

    async def get(self, key: str):
        if key not in AppSettings.keys():
            raise KeyError(key)
        return self.values.get(key, getattr(DEFAULT_SETTINGS, key))


class RecordingFeedback:
    def __init__(self):
        self.rest_finished = 0
        self.completed: list[int] = []

    def rest_timer_finished(self) -> None:
        self.rest_finished += 1

    def workout_completed(self, progressed_count: int) -> None:
        self.completed.append(progressed_count)


@dataclass
class SeededStore:
    db_path: Path
    barbell_id: int
    squat_id: int
    bench_id: int
    curl_id: int
    routine_id: int
    bench_routine_id: int


async def seed_store(db_path: Path) -> SeededStore:
    """Barbell, three exercises and two routines in an initialized database."""
    barbell_id = await BarbellRepository(db_path).create(
        Barbell(name="Olympic Bar", weight=45.0, is_default=True)
    )
    exercises = ExerciseRepository(db_path)
    squat_id = await exercises.create(
        ExerciseProfile(name="Squat", max_weight=225.0, weight_increment=5.0, barbell_id=barbell_id)
    )
    bench_id = await exercises.create(
        ExerciseProfile(
            name="Bench Press",
            max_weight=185.0,
            weight_increment=5.0,
            default_rest_seconds=120,
            barbell_id=barbell_id,
        )
    )
    curl_id = await exercises.create(
        ExerciseProfile(name="Curl", max_weight=50.0, weight_increment=2.5, auto_progression=False)
    )

    squat = await exercises.get(squat_id)
    bench = await exercises.get(bench_id)
    curl = await exercises.get(curl_id)

    routines = RoutineRepository(db_path)
    routine_id = await routines.create(
        Routine(
            name="Day A",
            exercises=[
                RoutineExercise(exercise=squat, sets=parse_set_plans("bar x10, 60%x5, 2*100%x5@180")),
                RoutineExercise(exercise=bench, sets=parse_set_plans("100%x5, 135x8@0")),
                RoutineExercise(exercise=curl, sets=parse_set_plans("60%x10")),
            ],
        )
    )
    bench_routine_id = await routines.create(
        Routine(
            name="Day B",
            exercises=[RoutineExercise(exercise=bench, sets=parse_set_plans("3*100%x5"))],
        )
    )
    return SeededStore(
        db_path=db_path,
        barbell_id=barbell_id,
        squat_id=squat_id,
        bench_id=bench_id,
        curl_id=curl_id,
        routine_id=routine_id,
        bench_routine_id=bench_routine_id,
    )


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def db_path(temp_db_path):
    """An initialized, empty database."""
    asyncio.run(init_db(temp_db_path))
    return temp_db_path


@pytest.fixture
def seeded(db_path) -> SeededStore:
    """A database with a barbell, exercises and routines."""
    return asyncio.run(seed_store(db_path))


@pytest_asyncio.fixture
async def store_path(temp_db_path):
    """An initialized, empty database for async tests."""
    await init_db(temp_db_path)
    return temp_db_path


@pytest_asyncio.fixture
async def store(store_path) -> SeededStore:
    """The seeded database for async tests."""
    return await seed_store(store_path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def workout_store():
    return InMemoryWorkoutStore()


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def squat():
    return ExerciseProfile(
        id=1, name="Squat", max_weight=225.0, weight_increment=5.0, equipment_baseline=45.0
    )


@pytest.fixture
def bench():
    return ExerciseProfile(
        id=2,
        name="Bench Press",
        max_weight=185.0,
        weight_increment=5.0,
        default_rest_seconds=120,
        equipment_baseline=45.0,
    )


@pytest.fixture
def curl():
    return ExerciseProfile(
        id=3, name="Curl", max_weight=50.0, weight_increment=2.5, auto_progression=False
    )


@pytest.fixture
def day_a(squat, bench, curl):
    """Squat: bar, 60%, 2x100%. Bench: 100%, fixed 135 with no rest. Curl: 60%."""
    return Routine(
        id=10,
        name="Day A",
        exercises=[
            RoutineExercise(
                exercise=squat,
                sets=[
                    SetPlan(WeightKind.BAR, 0, 10),
                    SetPlan(WeightKind.PERCENTAGE, 60, 5),
                    SetPlan(WeightKind.PERCENTAGE, 100, 5, rest_seconds_override=180),
                    SetPlan(WeightKind.PERCENTAGE, 100, 5, rest_seconds_override=180),
                ],
            ),
            RoutineExercise(
                exercise=bench,
                sets=[
                    SetPlan(WeightKind.PERCENTAGE, 100, 5),
                    SetPlan(WeightKind.FIXED, 135, 8, rest_seconds_override=0),
                ],
            ),
            RoutineExercise(exercise=curl, sets=[SetPlan(WeightKind.PERCENTAGE, 60, 10)]),
        ],
    )


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point the CLI at a temporary data directory."""
    monkeypatch.setenv("PERCENT_LIFT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PERCENT_LIFT_LOG_LEVEL", "WARNING")
    get_config.cache_clear()
    yield tmp_path
    get_config.cache_clear()


@pytest.fixture
def make_settings():
    """Factory for dict-backed settings providers."""
    return DictSettings
