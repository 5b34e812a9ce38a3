"""Workout session models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .exercise import ExerciseProfile


class SessionStatus(str, Enum):
    """Engine-visible state of the workout session.

    ``RESTING`` is an overlay on ``ACTIVE``: the session is active and the rest
    timer is running.
    """

    NOT_STARTED = "not_started"
    ACTIVE = "active"
    RESTING = "resting"
    COMPLETING = "completing"
    FINALIZED = "finalized"
    CANCELLED = "cancelled"


@dataclass
class ResolvedSet:
    """A planned set with its target weight resolved for this session."""

    target_weight: float
    target_reps: int
    percentage_of_max: float | None
    rest_seconds: int
    order_index: int = 0
    actual_weight: float | None = None
    actual_reps: int | None = None
    completed: bool = False
    id: int | None = None

    @property
    def is_successful(self) -> bool:
        """Completed with at least the target reps."""
        return (
            self.completed
            and self.actual_reps is not None
            and self.actual_reps >= self.target_reps
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_index": self.order_index,
            "target_weight": self.target_weight,
            "target_reps": self.target_reps,
            "percentage_of_max": self.percentage_of_max,
            "rest_seconds": self.rest_seconds,
            "actual_weight": self.actual_weight,
            "actual_reps": self.actual_reps,
            "completed": self.completed,
        }


@dataclass
class WorkoutExercise:
    """One exercise of a running or finished workout."""

    exercise: ExerciseProfile
    sets: list[ResolvedSet]
    order_index: int = 0
    id: int | None = None

    @property
    def completed_sets(self) -> int:
        return sum(1 for s in self.sets if s.completed)

    @property
    def is_complete(self) -> bool:
        return bool(self.sets) and all(s.completed for s in self.sets)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_index": self.order_index,
            "exercise_id": self.exercise.id,
            "exercise_name": self.exercise.name,
            "max_weight": self.exercise.max_weight,
            "bar_weight": self.exercise.equipment_baseline,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass(frozen=True)
class RestTimerState:
    """Snapshot of the rest timer."""

    is_running: bool = False
    remaining_seconds: int = 0
    total_seconds: int = 0

    def to_dict(self) -> dict:
        return {
            "is_running": self.is_running,
            "remaining_seconds": self.remaining_seconds,
            "total_seconds": self.total_seconds,
        }


@dataclass
class WorkoutSession:
    """A workout started from a routine.

    Sets are copies resolved at start time, so later edits to the routine or to
    an exercise's max never change an in-progress or historical session.
    """

    routine_id: int | None
    routine_name: str
    exercises: list[WorkoutExercise]
    started_at: datetime = field(default_factory=datetime.now)
    status: SessionStatus = SessionStatus.ACTIVE
    current_exercise_index: int = 0
    current_set_index: int = 0
    program_id: int | None = None
    completed_at: datetime | None = None
    notes: str | None = None
    id: int | None = None

    @property
    def all_sets(self) -> list[ResolvedSet]:
        return [s for exercise in self.exercises for s in exercise.sets]

    @property
    def total_volume(self) -> float:
        """Sum of actual weight x actual reps over completed sets."""
        return sum(
            (s.actual_weight or 0) * (s.actual_reps or 0)
            for s in self.all_sets
            if s.completed
        )

    @property
    def duration_seconds(self) -> int | None:
        if self.completed_at is None:
            return None
        return int((self.completed_at - self.started_at).total_seconds())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "routine_id": self.routine_id,
            "routine_name": self.routine_name,
            "program_id": self.program_id,
            "status": self.status.value,
            "current_exercise_index": self.current_exercise_index,
            "current_set_index": self.current_set_index,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "exercises": [e.to_dict() for e in self.exercises],
        }


@dataclass(frozen=True)
class ProgressionResult:
    """Outcome of the auto-progression check for one exercise."""

    should_progress: bool
    new_max_weight: float
    increment_applied: float
    reason: str
    exercise_id: int | None = None
    exercise_name: str = ""
    previous_max: float = 0.0

    def to_dict(self) -> dict:
        return {
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise_name,
            "should_progress": self.should_progress,
            "previous_max": self.previous_max,
            "new_max_weight": self.new_max_weight,
            "increment_applied": self.increment_applied,
            "reason": self.reason,
        }
