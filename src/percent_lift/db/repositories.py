"""Data access layer for percent-lift."""

import json
from collections.abc import Mapping
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Any

import aiosqlite
from loguru import logger

from ..calculations.body_fat import calculate_bmi, calculate_us_navy_body_fat
from ..errors import InvalidMeasurement, RecordNotFound
from ..models.body_composition import BodyCompositionEntry, BodyFatInput
from ..models.equipment import DEFAULT_PLATE_INVENTORY, PlateInventoryEntry
from ..models.exercise import Barbell, ExerciseProfile
from ..models.goal import Goal, GoalProgress, week_bounds
from ..models.program import Program, ProgramKind
from ..models.routine import Routine, RoutineExercise, SetPlan, WeightKind
from ..models.settings import DEFAULT_SETTINGS, AppSettings, format_setting, parse_setting
from ..models.workout import (
    ProgressionResult,
    ResolvedSet,
    SessionStatus,
    WorkoutExercise,
    WorkoutSession,
)
from .engine import connect, get_db_path

_EXERCISE_SELECT = """
    SELECT e.*, b.weight AS bar_weight
    FROM exercises e
    LEFT JOIN barbells b ON b.id = e.barbell_id
"""


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _row_to_exercise(row: aiosqlite.Row) -> ExerciseProfile:
    """Convert an exercise row (joined with its barbell) to an ExerciseProfile."""
    data = {
        "name": row["name"],
        "max_weight": row["max_weight"],
        "weight_increment": row["weight_increment"],
        "auto_progression": bool(row["auto_progression"]),
        "default_rest_seconds": row["default_rest_seconds"],
        "barbell_id": row["barbell_id"],
        "equipment_baseline": row["bar_weight"],
    }
    return ExerciseProfile.from_dict(
        data,
        id=row["id"],
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )


async def _fetch_program(db: aiosqlite.Connection, program_id: int) -> Program | None:
    cursor = await db.execute("SELECT * FROM programs WHERE id = ?", (program_id,))
    row = await cursor.fetchone()
    if row is None:
        return None

    cursor = await db.execute(
        "SELECT routine_id FROM program_routines WHERE program_id = ? ORDER BY order_index",
        (program_id,),
    )
    routine_ids = [r["routine_id"] for r in await cursor.fetchall()]
    return Program(
        id=row["id"],
        name=row["name"],
        kind=ProgramKind(row["kind"]),
        routine_ids=routine_ids,
        total_workouts=row["total_workouts"],
        current_position=row["current_position"],
        is_active=bool(row["is_active"]),
        completed_at=_parse_timestamp(row["completed_at"]),
    )


async def _save_program_state(db: aiosqlite.Connection, program: Program) -> None:
    """Write position, active flag and completion; the caller commits."""
    await db.execute(
        "UPDATE programs SET current_position = ?, is_active = ?, completed_at = ? WHERE id = ?",
        (
            program.current_position,
            int(program.is_active),
            program.completed_at.isoformat() if program.completed_at else None,
            program.id,
        ),
    )


class SettingsRepository:
    """Key/value user settings with typed values and documented defaults."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def get(self, key: str) -> Any:
        """Get a typed setting value, falling back to its default.

        Raises:
            KeyError: If ``key`` is not a known setting
        """
        if key not in AppSettings.keys():
            raise KeyError(key)

        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = await cursor.fetchone()
            if row is None:
                return getattr(DEFAULT_SETTINGS, key)
            return parse_setting(key, row["value"])

    async def set(self, key: str, value: Any) -> Any:
        """Validate and store a setting. Returns the typed value stored."""
        raw = value if isinstance(value, str) else format_setting(value)
        typed = parse_setting(key, raw)

        async with connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, format_setting(typed)),
            )
            await db.commit()
        return typed

    async def get_all(self) -> AppSettings:
        """All settings as a typed AppSettings, defaults filled in."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT key, value FROM settings")
            rows = await cursor.fetchall()

        known = set(AppSettings.keys())
        values = {
            row["key"]: parse_setting(row["key"], row["value"])
            for row in rows
            if row["key"] in known
        }
        return replace(DEFAULT_SETTINGS, **values)


class BarbellRepository:
    """Repository for bars and implements."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, barbell: Barbell) -> int:
        """Create a barbell. A new default replaces the previous one."""
        async with connect(self.db_path) as db:
            if barbell.is_default:
                await db.execute("UPDATE barbells SET is_default = 0")
            cursor = await db.execute(
                "INSERT INTO barbells (name, weight, is_default) VALUES (?, ?, ?)",
                (barbell.name, barbell.weight, int(barbell.is_default)),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, barbell_id: int) -> Barbell | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM barbells WHERE id = ?", (barbell_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_barbell(row)

    async def get_default(self) -> Barbell | None:
        """The default barbell, if one is marked."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM barbells WHERE is_default = 1 ORDER BY id LIMIT 1"
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_barbell(row)

    async def list_all(self) -> list[Barbell]:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM barbells ORDER BY is_default DESC, name")
            rows = await cursor.fetchall()
            return [self._row_to_barbell(row) for row in rows]

    async def update(self, barbell: Barbell) -> None:
        if barbell.id is None:
            raise ValueError("Barbell must have an ID to update")

        async with connect(self.db_path) as db:
            if barbell.is_default:
                await db.execute("UPDATE barbells SET is_default = 0 WHERE id != ?", (barbell.id,))
            cursor = await db.execute(
                "UPDATE barbells SET name = ?, weight = ?, is_default = ? WHERE id = ?",
                (barbell.name, barbell.weight, int(barbell.is_default), barbell.id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Barbell", barbell.id)
            await db.commit()

    async def delete(self, barbell_id: int) -> bool:
        """Delete a barbell. Exercises using it fall back to no bar."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM barbells WHERE id = ?", (barbell_id,))
            await db.commit()
            return cursor.rowcount > 0

    def _row_to_barbell(self, row: aiosqlite.Row) -> Barbell:
        return Barbell(
            id=row["id"],
            name=row["name"],
            weight=row["weight"],
            is_default=bool(row["is_default"]),
        )


class PlateInventoryRepository:
    """Repository for the plates the user owns."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def list_all(self) -> list[PlateInventoryEntry]:
        """All plate sizes, heaviest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM plate_inventory ORDER BY plate_weight DESC")
            rows = await cursor.fetchall()
            return [
                PlateInventoryEntry(id=row["id"], plate_weight=row["plate_weight"], count=row["count"])
                for row in rows
            ]

    async def as_inventory(self) -> dict[float, int]:
        """Inventory in the form the plate solver takes."""
        return {entry.plate_weight: entry.count for entry in await self.list_all()}

    async def set_count(self, plate_weight: float, count: int) -> None:
        """Add a plate size or change how many plates of it there are."""
        entry = PlateInventoryEntry(plate_weight=plate_weight, count=count)
        async with connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO plate_inventory (plate_weight, count) VALUES (?, ?)
                ON CONFLICT(plate_weight) DO UPDATE SET count = excluded.count
                """,
                (float(entry.plate_weight), entry.count),
            )
            await db.commit()

    async def remove(self, plate_weight: float) -> bool:
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM plate_inventory WHERE plate_weight = ?", (float(plate_weight),)
            )
            await db.commit()
            return cursor.rowcount > 0

    async def replace_all(self, inventory: Mapping[float, int]) -> None:
        """Replace the whole inventory, e.g. with a standard plate set."""
        entries = [PlateInventoryEntry(plate_weight=w, count=c) for w, c in inventory.items()]
        async with connect(self.db_path) as db:
            await db.execute("DELETE FROM plate_inventory")
            await db.executemany(
                "INSERT INTO plate_inventory (plate_weight, count) VALUES (?, ?)",
                [(float(e.plate_weight), e.count) for e in entries],
            )
            await db.commit()

    async def reset_to_defaults(self) -> None:
        await self.replace_all(DEFAULT_PLATE_INVENTORY)


class ExerciseRepository:
    """Repository for the exercise library."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, exercise: ExerciseProfile) -> int:
        """Create a new exercise. Names are unique."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO exercises
                (name, max_weight, weight_increment, auto_progression,
                 default_rest_seconds, barbell_id)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    exercise.name,
                    exercise.max_weight,
                    exercise.weight_increment,
                    int(exercise.auto_progression),
                    exercise.default_rest_seconds,
                    exercise.barbell_id,
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, exercise_id: int) -> ExerciseProfile | None:
        """Get an exercise by ID, with its bar weight filled in."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(f"{_EXERCISE_SELECT} WHERE e.id = ?", (exercise_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return _row_to_exercise(row)

    async def get_by_name(self, name: str) -> ExerciseProfile | None:
        """Get an exercise by name, ignoring case."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                f"{_EXERCISE_SELECT} WHERE e.name = ? COLLATE NOCASE", (name,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return _row_to_exercise(row)

    async def list_all(self) -> list[ExerciseProfile]:
        async with connect(self.db_path) as db:
            cursor = await db.execute(f"{_EXERCISE_SELECT} ORDER BY e.name")
            rows = await cursor.fetchall()
            return [_row_to_exercise(row) for row in rows]

    async def update(self, exercise: ExerciseProfile) -> None:
        """Update an existing exercise."""
        if exercise.id is None:
            raise ValueError("Exercise must have an ID to update")

        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE exercises SET
                    name = ?, max_weight = ?, weight_increment = ?, auto_progression = ?,
                    default_rest_seconds = ?, barbell_id = ?,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (
                    exercise.name,
                    exercise.max_weight,
                    exercise.weight_increment,
                    int(exercise.auto_progression),
                    exercise.default_rest_seconds,
                    exercise.barbell_id,
                    exercise.id,
                ),
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Exercise", exercise.id)
            await db.commit()

    async def update_max_weight(self, exercise_id: int, new_max: float) -> None:
        if new_max <= 0:
            raise ValueError("max_weight must be positive")

        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "UPDATE exercises SET max_weight = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (new_max, exercise_id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Exercise", exercise_id)
            await db.commit()

    async def delete(self, exercise_id: int) -> bool:
        """Delete an exercise.

        Fails with StoreFailure while a routine or a logged workout still
        references it.
        """
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM exercises WHERE id = ?", (exercise_id,))
            await db.commit()
            return cursor.rowcount > 0


class RoutineRepository:
    """Repository for routines and their planned sets."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, routine: Routine) -> int:
        """Create a routine with all of its exercises and sets."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("INSERT INTO routines (name) VALUES (?)", (routine.name,))
            routine_id = cursor.lastrowid
            await self._insert_exercises(db, routine_id, routine.exercises)
            await db.commit()
            return routine_id

    async def get(self, routine_id: int) -> Routine | None:
        """Get a routine with exercise profiles and planned sets loaded."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM routines WHERE id = ?", (routine_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._hydrate(db, row)

    async def list_all(self) -> list[Routine]:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM routines ORDER BY name")
            rows = await cursor.fetchall()
            return [await self._hydrate(db, row) for row in rows]

    async def update(self, routine: Routine) -> None:
        """Rename a routine and replace its exercises and sets."""
        if routine.id is None:
            raise ValueError("Routine must have an ID to update")

        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "UPDATE routines SET name = ? WHERE id = ?", (routine.name, routine.id)
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Routine", routine.id)
            await db.execute("DELETE FROM routine_exercises WHERE routine_id = ?", (routine.id,))
            await self._insert_exercises(db, routine.id, routine.exercises)
            await db.commit()

    async def delete(self, routine_id: int) -> bool:
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM routines WHERE id = ?", (routine_id,))
            await db.commit()
            return cursor.rowcount > 0

    async def _insert_exercises(
        self,
        db: aiosqlite.Connection,
        routine_id: int,
        entries: list[RoutineExercise],
    ) -> None:
        for order, entry in enumerate(entries):
            if entry.exercise.id is None:
                raise ValueError(f"Exercise {entry.exercise.name} must be saved before use")
            cursor = await db.execute(
                "INSERT INTO routine_exercises (routine_id, exercise_id, order_index) VALUES (?, ?, ?)",
                (routine_id, entry.exercise.id, order),
            )
            entry_id = cursor.lastrowid
            await db.executemany(
                """
                INSERT INTO routine_sets
                (routine_exercise_id, order_index, weight_kind, weight_value,
                 target_reps, rest_seconds_override)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        entry_id,
                        set_order,
                        plan.weight_kind.value,
                        plan.weight_value,
                        plan.target_reps,
                        plan.rest_seconds_override,
                    )
                    for set_order, plan in enumerate(entry.sets)
                ],
            )

    async def _hydrate(self, db: aiosqlite.Connection, row: aiosqlite.Row) -> Routine:
        cursor = await db.execute(
            """
            SELECT re.id AS entry_id, e.*, b.weight AS bar_weight
            FROM routine_exercises re
            JOIN exercises e ON e.id = re.exercise_id
            LEFT JOIN barbells b ON b.id = e.barbell_id
            WHERE re.routine_id = ?
            ORDER BY re.order_index
            """,
            (row["id"],),
        )
        entries = []
        for entry_row in await cursor.fetchall():
            set_cursor = await db.execute(
                "SELECT * FROM routine_sets WHERE routine_exercise_id = ? ORDER BY order_index",
                (entry_row["entry_id"],),
            )
            sets = [
                SetPlan(
                    weight_kind=WeightKind(s["weight_kind"]),
                    weight_value=s["weight_value"],
                    target_reps=s["target_reps"],
                    rest_seconds_override=s["rest_seconds_override"],
                )
                for s in await set_cursor.fetchall()
            ]
            entries.append(
                RoutineExercise(
                    id=entry_row["entry_id"],
                    exercise=_row_to_exercise(entry_row),
                    sets=sets,
                )
            )

        return Routine(
            id=row["id"],
            name=row["name"],
            exercises=entries,
            created_at=_parse_timestamp(row["created_at"]),
        )


class ProgramRepository:
    """Repository for programs (routine rotations)."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, program: Program) -> int:
        """Create a program. An active program deactivates the others."""
        async with connect(self.db_path) as db:
            if program.is_active:
                await db.execute("UPDATE programs SET is_active = 0")
            cursor = await db.execute(
                """
                INSERT INTO programs
                (name, kind, total_workouts, current_position, is_active)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    program.name,
                    program.kind.value,
                    program.total_workouts,
                    program.current_position,
                    int(program.is_active),
                ),
            )
            program_id = cursor.lastrowid
            await self._insert_routines(db, program_id, program.routine_ids)
            await db.commit()
            return program_id

    async def get(self, program_id: int) -> Program | None:
        async with connect(self.db_path) as db:
            return await _fetch_program(db, program_id)

    async def get_active(self) -> Program | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT id FROM programs WHERE is_active = 1 LIMIT 1")
            row = await cursor.fetchone()
            if row is None:
                return None
            return await _fetch_program(db, row["id"])

    async def list_all(self) -> list[Program]:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT id FROM programs ORDER BY created_at DESC, id DESC")
            rows = await cursor.fetchall()
            return [await _fetch_program(db, row["id"]) for row in rows]

    async def activate(self, program_id: int) -> Program:
        """Make a program the only active one.

        Raises:
            RecordNotFound: If the program does not exist
            ValueError: If the program is already complete
        """
        async with connect(self.db_path) as db:
            program = await _fetch_program(db, program_id)
            if program is None:
                raise RecordNotFound("Program", program_id)
            if program.is_complete:
                raise ValueError(f"Program {program.name} is already complete")

            await db.execute("UPDATE programs SET is_active = 0")
            program.is_active = True
            await _save_program_state(db, program)
            await db.commit()
            return program

    async def update(self, program: Program) -> None:
        """Update a program's details, state and routine list."""
        if program.id is None:
            raise ValueError("Program must have an ID to update")

        async with connect(self.db_path) as db:
            if program.is_active:
                await db.execute("UPDATE programs SET is_active = 0 WHERE id != ?", (program.id,))
            cursor = await db.execute(
                "UPDATE programs SET name = ?, kind = ?, total_workouts = ? WHERE id = ?",
                (program.name, program.kind.value, program.total_workouts, program.id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Program", program.id)
            await _save_program_state(db, program)
            await db.execute("DELETE FROM program_routines WHERE program_id = ?", (program.id,))
            await self._insert_routines(db, program.id, program.routine_ids)
            await db.commit()

    async def delete(self, program_id: int) -> bool:
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM programs WHERE id = ?", (program_id,))
            await db.commit()
            return cursor.rowcount > 0

    async def _insert_routines(
        self, db: aiosqlite.Connection, program_id: int, routine_ids: list[int]
    ) -> None:
        await db.executemany(
            "INSERT INTO program_routines (program_id, routine_id, order_index) VALUES (?, ?, ?)",
            [(program_id, routine_id, order) for order, routine_id in enumerate(routine_ids)],
        )


class WorkoutRepository:
    """Repository for workouts and their logged sets."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, session: WorkoutSession) -> int:
        """Insert a workout with all its exercises and sets in one transaction.

        Ids are assigned to the session, its exercises and its sets only after
        the transaction commits.
        """
        assigned: list[tuple[WorkoutExercise | ResolvedSet, int]] = []
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO workouts (routine_id, routine_name, program_id, started_at, notes)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    session.routine_id,
                    session.routine_name,
                    session.program_id,
                    session.started_at.isoformat(),
                    session.notes,
                ),
            )
            workout_id = cursor.lastrowid

            for order, entry in enumerate(session.exercises):
                cursor = await db.execute(
                    """
                    INSERT INTO workout_exercises (workout_id, exercise_id, order_index, max_weight)
                    VALUES (?, ?, ?, ?)
                    """,
                    (workout_id, entry.exercise.id, order, entry.exercise.max_weight),
                )
                entry_id = cursor.lastrowid
                assigned.append((entry, entry_id))

                for set_order, resolved in enumerate(entry.sets):
                    cursor = await db.execute(
                        """
                        INSERT INTO workout_sets
                        (workout_exercise_id, order_index, target_weight, target_reps,
                         percentage_of_max, rest_seconds, actual_weight, actual_reps, completed)
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            entry_id,
                            set_order,
                            resolved.target_weight,
                            resolved.target_reps,
                            resolved.percentage_of_max,
                            resolved.rest_seconds,
                            resolved.actual_weight,
                            resolved.actual_reps,
                            int(resolved.completed),
                        ),
                    )
                    assigned.append((resolved, cursor.lastrowid))

            await db.commit()

        session.id = workout_id
        for record, record_id in assigned:
            record.id = record_id
        return workout_id

    async def get(self, workout_id: int) -> WorkoutSession | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM workouts WHERE id = ?", (workout_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._hydrate(db, row)

    async def history(self, limit: int | None = None) -> list[WorkoutSession]:
        """Completed workouts, most recent first."""
        query = "SELECT * FROM workouts WHERE completed_at IS NOT NULL ORDER BY completed_at DESC"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)

        async with connect(self.db_path) as db:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
            return [await self._hydrate(db, row) for row in rows]

    async def count_completed_between(self, start: datetime, end: datetime) -> int:
        """Number of workouts completed from ``start`` to ``end`` inclusive."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT COUNT(*) FROM workouts WHERE completed_at >= ? AND completed_at <= ?",
                (start.isoformat(), end.isoformat()),
            )
            (count,) = await cursor.fetchone()
            return count

    async def update_set(self, resolved: ResolvedSet) -> None:
        """Persist the logged fields of one set."""
        if resolved.id is None:
            raise ValueError("Set must have an ID to update")

        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE workout_sets SET actual_weight = ?, actual_reps = ?, completed = ?
                WHERE id = ?
                """,
                (resolved.actual_weight, resolved.actual_reps, int(resolved.completed), resolved.id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Workout set", resolved.id)
            await db.commit()

    async def finalize(
        self,
        workout_id: int,
        completed_at: datetime,
        progressions: list[ProgressionResult],
    ) -> None:
        """Complete a workout in a single transaction.

        Applies every progressed max weight, stamps the completion time and
        advances the workout's program. Either all of it is written or none.
        """
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT program_id FROM workouts WHERE id = ?", (workout_id,))
            row = await cursor.fetchone()
            if row is None:
                raise RecordNotFound("Workout", workout_id)

            for result in progressions:
                if not result.should_progress or result.exercise_id is None:
                    continue
                await db.execute(
                    "UPDATE exercises SET max_weight = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (result.new_max_weight, result.exercise_id),
                )

            await db.execute(
                "UPDATE workouts SET completed_at = ? WHERE id = ?",
                (completed_at.isoformat(), workout_id),
            )

            if row["program_id"] is not None:
                program = await _fetch_program(db, row["program_id"])
                if program is not None and not program.is_complete:
                    program.advance(completed_at)
                    await _save_program_state(db, program)

            await db.commit()

    async def delete(self, workout_id: int) -> bool:
        """Delete a workout.

        Deleting a completed program workout moves the program back one step.
        """
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT program_id, completed_at FROM workouts WHERE id = ?", (workout_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return False

            if row["completed_at"] is not None and row["program_id"] is not None:
                program = await _fetch_program(db, row["program_id"])
                if program is not None:
                    program.step_back()
                    await _save_program_state(db, program)

            await db.execute("DELETE FROM workouts WHERE id = ?", (workout_id,))
            await db.commit()
            return True

    async def _hydrate(self, db: aiosqlite.Connection, row: aiosqlite.Row) -> WorkoutSession:
        cursor = await db.execute(
            """
            SELECT we.id AS entry_id, we.order_index AS entry_order, we.max_weight AS logged_max,
                   e.*, b.weight AS bar_weight
            FROM workout_exercises we
            JOIN exercises e ON e.id = we.exercise_id
            LEFT JOIN barbells b ON b.id = e.barbell_id
            WHERE we.workout_id = ?
            ORDER BY we.order_index
            """,
            (row["id"],),
        )
        exercises = []
        for entry_row in await cursor.fetchall():
            set_cursor = await db.execute(
                "SELECT * FROM workout_sets WHERE workout_exercise_id = ? ORDER BY order_index",
                (entry_row["entry_id"],),
            )
            sets = [
                ResolvedSet(
                    id=s["id"],
                    order_index=s["order_index"],
                    target_weight=s["target_weight"],
                    target_reps=s["target_reps"],
                    percentage_of_max=s["percentage_of_max"],
                    rest_seconds=s["rest_seconds"],
                    actual_weight=s["actual_weight"],
                    actual_reps=s["actual_reps"],
                    completed=bool(s["completed"]),
                )
                for s in await set_cursor.fetchall()
            ]
            # Report the max the workout was programmed from, not today's
            exercise = _row_to_exercise(entry_row)
            if entry_row["logged_max"] is not None:
                exercise = replace(exercise, max_weight=entry_row["logged_max"])
            exercises.append(
                WorkoutExercise(
                    id=entry_row["entry_id"],
                    order_index=entry_row["entry_order"],
                    exercise=exercise,
                    sets=sets,
                )
            )

        completed_at = _parse_timestamp(row["completed_at"])
        return WorkoutSession(
            id=row["id"],
            routine_id=row["routine_id"],
            routine_name=row["routine_name"],
            program_id=row["program_id"],
            exercises=exercises,
            started_at=_parse_timestamp(row["started_at"]),
            completed_at=completed_at,
            status=SessionStatus.FINALIZED if completed_at else SessionStatus.ACTIVE,
            notes=row["notes"],
        )


class BodyCompositionRepository:
    """Repository for body measurements."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, entry: BodyCompositionEntry) -> BodyCompositionEntry:
        """Store a measurement, deriving whatever metrics the inputs allow.

        With waist and neck the US Navy estimate is stored. With weight only,
        BMI is stored. If the estimate cannot be computed (for example a
        female profile without a hip measurement), only the raw values are
        kept.
        """
        entry = await self._with_metrics(entry)
        recorded_at = entry.recorded_at or datetime.now()
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO body_compositions
                (weight, waist, neck, hip, body_fat_percent, bmi, lean_mass, recorded_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.weight,
                    entry.waist,
                    entry.neck,
                    entry.hip,
                    entry.body_fat_percent,
                    entry.bmi,
                    entry.lean_mass,
                    recorded_at.isoformat(),
                ),
            )
            await db.commit()
            return replace(entry, id=cursor.lastrowid, recorded_at=recorded_at)

    async def update(self, entry: BodyCompositionEntry) -> BodyCompositionEntry:
        """Replace a measurement and recompute its derived metrics.

        The recorded time is kept unless the entry carries a new one.

        Raises:
            RecordNotFound: If the entry does not exist
        """
        if entry.id is None:
            raise ValueError("Body composition entry must have an ID to update")

        entry = await self._with_metrics(entry)
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE body_compositions
                SET weight = ?, waist = ?, neck = ?, hip = ?,
                    body_fat_percent = ?, bmi = ?, lean_mass = ?,
                    recorded_at = COALESCE(?, recorded_at)
                WHERE id = ?
                """,
                (
                    entry.weight,
                    entry.waist,
                    entry.neck,
                    entry.hip,
                    entry.body_fat_percent,
                    entry.bmi,
                    entry.lean_mass,
                    entry.recorded_at.isoformat() if entry.recorded_at else None,
                    entry.id,
                ),
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Body composition entry", entry.id)
            await db.commit()

            cursor = await db.execute("SELECT * FROM body_compositions WHERE id = ?", (entry.id,))
            return self._row_to_entry(await cursor.fetchone())

    async def get_in_range(self, start: datetime, end: datetime) -> list[BodyCompositionEntry]:
        """Entries recorded between ``start`` and ``end`` inclusive, most recent first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM body_compositions
                WHERE recorded_at >= ? AND recorded_at <= ?
                ORDER BY recorded_at DESC, id DESC
                """,
                (start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entry(row) for row in rows]

    async def _with_metrics(self, entry: BodyCompositionEntry) -> BodyCompositionEntry:
        settings = await SettingsRepository(self.db_path).get_all()
        entry = replace(entry, body_fat_percent=None, bmi=None, lean_mass=None)

        if entry.waist and entry.neck:
            try:
                result = calculate_us_navy_body_fat(
                    BodyFatInput(
                        gender=settings.gender,
                        height_inches=settings.height,
                        weight_lbs=entry.weight,
                        waist_inches=entry.waist,
                        neck_inches=entry.neck,
                        hip_inches=entry.hip,
                    )
                )
            except InvalidMeasurement as e:
                logger.info(f"Storing raw measurements only: {e}")
                return entry
            return replace(
                entry,
                body_fat_percent=result.body_fat_percent,
                bmi=result.bmi,
                lean_mass=result.lean_mass,
            )
        if entry.weight > 0 and settings.height > 0:
            return replace(entry, bmi=calculate_bmi(entry.weight, settings.height))
        return entry

    async def get(self, entry_id: int) -> BodyCompositionEntry | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM body_compositions WHERE id = ?", (entry_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entry(row)

    async def get_latest(self) -> BodyCompositionEntry | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM body_compositions ORDER BY recorded_at DESC, id DESC LIMIT 1"
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entry(row)

    async def list_all(self) -> list[BodyCompositionEntry]:
        """All entries, most recent first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM body_compositions ORDER BY recorded_at DESC, id DESC"
            )
            rows = await cursor.fetchall()
            return [self._row_to_entry(row) for row in rows]

    async def delete(self, entry_id: int) -> bool:
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM body_compositions WHERE id = ?", (entry_id,))
            await db.commit()
            return cursor.rowcount > 0

    def _row_to_entry(self, row: aiosqlite.Row) -> BodyCompositionEntry:
        return BodyCompositionEntry(
            id=row["id"],
            weight=row["weight"],
            waist=row["waist"],
            neck=row["neck"],
            hip=row["hip"],
            body_fat_percent=row["body_fat_percent"],
            bmi=row["bmi"],
            lean_mass=row["lean_mass"],
            recorded_at=_parse_timestamp(row["recorded_at"]),
        )


class GoalRepository:
    """Repository for the weekly training goal."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, goal: Goal) -> Goal:
        """Save a goal as the active one, deactivating any other."""
        start_date = goal.start_date or datetime.now()
        async with connect(self.db_path) as db:
            await db.execute("UPDATE goals SET is_active = 0 WHERE is_active = 1")
            cursor = await db.execute(
                """
                INSERT INTO goals
                (workouts_per_week, total_weeks, scheduled_days, reminder_time,
                 start_date, current_streak, last_credited_week, is_active)
                VALUES (?, ?, ?, ?, ?, ?, ?, 1)
                """,
                (
                    goal.workouts_per_week,
                    goal.total_weeks,
                    json.dumps(goal.scheduled_days),
                    goal.reminder_time,
                    start_date.isoformat(),
                    goal.current_streak,
                    goal.last_credited_week.isoformat() if goal.last_credited_week else None,
                ),
            )
            await db.commit()
            return replace(goal, id=cursor.lastrowid, start_date=start_date, is_active=True)

    async def get(self, goal_id: int) -> Goal | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM goals WHERE id = ?", (goal_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_goal(row)

    async def get_active(self) -> Goal | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM goals WHERE is_active = 1 ORDER BY id DESC LIMIT 1")
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_goal(row)

    async def list_all(self) -> list[Goal]:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM goals ORDER BY id DESC")
            rows = await cursor.fetchall()
            return [self._row_to_goal(row) for row in rows]

    async def update(self, goal: Goal) -> None:
        """Update the plan and streak of a goal."""
        if goal.id is None:
            raise ValueError("Goal must have an ID to update")

        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE goals SET workouts_per_week = ?, total_weeks = ?, scheduled_days = ?,
                    reminder_time = ?, current_streak = ?, last_credited_week = ?
                WHERE id = ?
                """,
                (
                    goal.workouts_per_week,
                    goal.total_weeks,
                    json.dumps(goal.scheduled_days),
                    goal.reminder_time,
                    goal.current_streak,
                    goal.last_credited_week.isoformat() if goal.last_credited_week else None,
                    goal.id,
                ),
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Goal", goal.id)
            await db.commit()

    async def deactivate(self, goal_id: int) -> bool:
        """Stop tracking a goal without deleting it."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("UPDATE goals SET is_active = 0 WHERE id = ?", (goal_id,))
            await db.commit()
            return cursor.rowcount > 0

    async def delete(self, goal_id: int) -> bool:
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM goals WHERE id = ?", (goal_id,))
            await db.commit()
            return cursor.rowcount > 0

    async def get_progress(self, today: date | None = None) -> GoalProgress | None:
        """This week's progress against the active goal, or None without one."""
        goal = await self.get_active()
        if goal is None:
            return None
        today = today or date.today()
        return goal.progress(await self._workouts_in_week(today), today)

    async def is_today_scheduled(self, today: date | None = None) -> bool:
        goal = await self.get_active()
        if goal is None:
            return False
        return goal.is_scheduled(today or date.today())

    async def check_and_update_streak(self, today: date | None = None) -> Goal | None:
        """Credit or break the active goal's streak from this week's workouts.

        Returns:
            The active goal after the check, or None without one
        """
        goal = await self.get_active()
        if goal is None:
            return None

        today = today or date.today()
        if goal.update_streak(await self._workouts_in_week(today), today):
            await self.update(goal)
            logger.info(f"Goal {goal.id} streak is now {goal.current_streak} week(s)")
        return goal

    async def _workouts_in_week(self, day: date) -> int:
        start, end = week_bounds(day)
        return await WorkoutRepository(self.db_path).count_completed_between(start, end)

    def _row_to_goal(self, row: aiosqlite.Row) -> Goal:
        return Goal(
            id=row["id"],
            workouts_per_week=row["workouts_per_week"],
            total_weeks=row["total_weeks"],
            scheduled_days=json.loads(row["scheduled_days"]),
            reminder_time=row["reminder_time"],
            start_date=_parse_timestamp(row["start_date"]),
            current_streak=row["current_streak"],
            last_credited_week=date.fromisoformat(row["last_credited_week"]) if row["last_credited_week"] else None,
            is_active=bool(row["is_active"]),
        )
