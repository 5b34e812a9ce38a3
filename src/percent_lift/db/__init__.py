"""Database layer for percent-lift."""

from .engine import connect, get_db_path, init_db
from .repositories import (
    BarbellRepository,
    BodyCompositionRepository,
    ExerciseRepository,
    GoalRepository,
    PlateInventoryRepository,
    ProgramRepository,
    RoutineRepository,
    SettingsRepository,
    WorkoutRepository,
)

__all__ = [
    "BarbellRepository",
    "BodyCompositionRepository",
    "connect",
    "ExerciseRepository",
    "get_db_path",
    "GoalRepository",
    "init_db",
    "PlateInventoryRepository",
    "ProgramRepository",
    "RoutineRepository",
    "SettingsRepository",
    "WorkoutRepository",
]
