"""Database engine setup and initialization."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from ..config import get_config
from ..errors import StoreFailure
from ..models.equipment import DEFAULT_PLATE_INVENTORY
from ..models.settings import DEFAULT_SETTINGS, AppSettings, format_setting


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path, creating its directory if needed."""
    config = get_config()
    if data_dir is None:
        data_dir = config.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / config.db_name


@asynccontextmanager
async def connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Open a connection with row access by name and foreign keys enforced.

    Any SQLite error raised while the connection is open surfaces as
    :class:`StoreFailure`.
    """
    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("PRAGMA foreign_keys = ON")
            yield db
    except aiosqlite.Error as e:
        raise StoreFailure(f"Database error: {e}") from e


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS settings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS barbells (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        weight REAL NOT NULL,
        is_default INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS plate_inventory (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        plate_weight REAL NOT NULL UNIQUE,
        count INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS exercises (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT UNIQUE NOT NULL,
        max_weight REAL NOT NULL,
        weight_increment REAL NOT NULL DEFAULT 5,
        auto_progression INTEGER NOT NULL DEFAULT 1,
        default_rest_seconds INTEGER,
        barbell_id INTEGER,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (barbell_id) REFERENCES barbells(id) ON DELETE SET NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS routines (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS routine_exercises (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        routine_id INTEGER NOT NULL,
        exercise_id INTEGER NOT NULL,
        order_index INTEGER NOT NULL,
        FOREIGN KEY (routine_id) REFERENCES routines(id) ON DELETE CASCADE,
        FOREIGN KEY (exercise_id) REFERENCES exercises(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS routine_sets (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        routine_exercise_id INTEGER NOT NULL,
        order_index INTEGER NOT NULL,
        weight_kind TEXT NOT NULL,
        weight_value REAL NOT NULL DEFAULT 0,
        target_reps INTEGER NOT NULL,
        rest_seconds_override INTEGER,
        FOREIGN KEY (routine_exercise_id) REFERENCES routine_exercises(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS programs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        kind TEXT NOT NULL,
        total_workouts INTEGER,
        current_position INTEGER NOT NULL DEFAULT 0,
        is_active INTEGER NOT NULL DEFAULT 0,
        completed_at TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS program_routines (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        program_id INTEGER NOT NULL,
        routine_id INTEGER NOT NULL,
        order_index INTEGER NOT NULL,
        FOREIGN KEY (program_id) REFERENCES programs(id) ON DELETE CASCADE,
        FOREIGN KEY (routine_id) REFERENCES routines(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS workouts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        routine_id INTEGER,
        routine_name TEXT NOT NULL,
        program_id INTEGER,
        started_at TIMESTAMP NOT NULL,
        completed_at TIMESTAMP,
        notes TEXT,
        FOREIGN KEY (routine_id) REFERENCES routines(id) ON DELETE SET NULL,
        FOREIGN KEY (program_id) REFERENCES programs(id) ON DELETE SET NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS workout_exercises (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        workout_id INTEGER NOT NULL,
        exercise_id INTEGER NOT NULL,
        order_index INTEGER NOT NULL,
        max_weight REAL,
        FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE CASCADE,
        FOREIGN KEY (exercise_id) REFERENCES exercises(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS workout_sets (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        workout_exercise_id INTEGER NOT NULL,
        order_index INTEGER NOT NULL,
        target_weight REAL NOT NULL,
        target_reps INTEGER NOT NULL,
        percentage_of_max REAL,
        rest_seconds INTEGER NOT NULL DEFAULT 0,
        actual_weight REAL,
        actual_reps INTEGER,
        completed INTEGER NOT NULL DEFAULT 0,
        FOREIGN KEY (workout_exercise_id) REFERENCES workout_exercises(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS body_compositions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        weight REAL NOT NULL,
        waist REAL,
        neck REAL,
        hip REAL,
        body_fat_percent REAL,
        bmi REAL,
        lean_mass REAL,
        recorded_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS goals (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        workouts_per_week INTEGER NOT NULL,
        total_weeks INTEGER,
        scheduled_days TEXT NOT NULL,
        reminder_time TEXT,
        start_date TIMESTAMP NOT NULL,
        current_streak INTEGER NOT NULL DEFAULT 0,
        last_credited_week TEXT,
        is_active INTEGER NOT NULL DEFAULT 1
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_routine_exercises_routine ON routine_exercises(routine_id)",
    "CREATE INDEX IF NOT EXISTS idx_routine_sets_entry ON routine_sets(routine_exercise_id)",
    "CREATE INDEX IF NOT EXISTS idx_workout_exercises_workout ON workout_exercises(workout_id)",
    "CREATE INDEX IF NOT EXISTS idx_workout_sets_entry ON workout_sets(workout_exercise_id)",
    "CREATE INDEX IF NOT EXISTS idx_workouts_completed ON workouts(completed_at)",
)


async def init_db(db_path: Path | None = None) -> None:
    """Create the schema and seed default settings and plates.

    Safe to run repeatedly: existing rows are never overwritten.
    """
    if db_path is None:
        db_path = get_db_path()

    async with connect(db_path) as db:
        for statement in SCHEMA:
            await db.execute(statement)

        for key in AppSettings.keys():
            await db.execute(
                "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)",
                (key, format_setting(getattr(DEFAULT_SETTINGS, key))),
            )

        cursor = await db.execute("SELECT COUNT(*) FROM plate_inventory")
        (plate_rows,) = await cursor.fetchone()
        if plate_rows == 0:
            await db.executemany(
                "INSERT INTO plate_inventory (plate_weight, count) VALUES (?, ?)",
                [(float(weight), count) for weight, count in DEFAULT_PLATE_INVENTORY.items()],
            )

        await db.commit()
