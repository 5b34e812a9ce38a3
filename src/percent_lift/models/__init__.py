"""Data models for percent-lift."""

from .body_composition import BodyCompositionEntry, BodyFatInput, BodyFatResult, Gender
from .equipment import PlateInventoryEntry, PlateLoadPlan
from .exercise import Barbell, ExerciseProfile
from .goal import Goal, GoalProgress
from .program import Program, ProgramKind
from .routine import Routine, RoutineExercise, SetPlan, WeightKind
from .settings import AppSettings
from .workout import (
    ProgressionResult,
    ResolvedSet,
    RestTimerState,
    SessionStatus,
    WorkoutExercise,
    WorkoutSession,
)

__all__ = [
    "AppSettings",
    "Barbell",
    "BodyCompositionEntry",
    "BodyFatInput",
    "BodyFatResult",
    "ExerciseProfile",
    "Gender",
    "Goal",
    "GoalProgress",
    "PlateInventoryEntry",
    "PlateLoadPlan",
    "Program",
    "ProgramKind",
    "ProgressionResult",
    "ResolvedSet",
    "RestTimerState",
    "Routine",
    "RoutineExercise",
    "SessionStatus",
    "SetPlan",
    "WeightKind",
    "WorkoutExercise",
    "WorkoutSession",
]
