"""Auto-progression and set statistics."""

from collections.abc import Sequence
from typing import Protocol

from ..models.exercise import ExerciseProfile
from ..models.workout import ProgressionResult

MAX_PERCENTAGE = 100

REASON_DISABLED = "Auto-progression disabled for this exercise"
REASON_NO_MAX_SETS = "No sets at 100% of max"
REASON_NOT_COMPLETED = "Not all 100% sets were completed"
REASON_REPS_MISSED = "Not all 100% sets achieved target reps"
REASON_PROGRESSED = "All 100% sets completed with target reps"


class LoggedSet(Protocol):
    """The fields progression needs from a set."""

    percentage_of_max: float | None
    target_reps: int
    actual_reps: int | None
    completed: bool


def evaluate_progression(
    exercise: ExerciseProfile,
    sets: Sequence[LoggedSet],
) -> ProgressionResult:
    """Decide whether the exercise's max weight should go up.

    Only sets prescribed at exactly 100% of max count. Every one of them must
    be completed with at least the target reps; warm-up sets may fail freely.
    """

    def no_progress(reason: str) -> ProgressionResult:
        return ProgressionResult(
            should_progress=False,
            new_max_weight=exercise.max_weight,
            increment_applied=0.0,
            reason=reason,
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            previous_max=exercise.max_weight,
        )

    if not exercise.auto_progression:
        return no_progress(REASON_DISABLED)

    max_sets = [s for s in sets if s.percentage_of_max == MAX_PERCENTAGE]
    if not max_sets:
        return no_progress(REASON_NO_MAX_SETS)

    if not all(s.completed for s in max_sets):
        return no_progress(REASON_NOT_COMPLETED)

    if any(s.actual_reps is None or s.actual_reps < s.target_reps for s in max_sets):
        return no_progress(REASON_REPS_MISSED)

    return ProgressionResult(
        should_progress=True,
        new_max_weight=exercise.max_weight + exercise.weight_increment,
        increment_applied=exercise.weight_increment,
        reason=REASON_PROGRESSED,
        exercise_id=exercise.id,
        exercise_name=exercise.name,
        previous_max=exercise.max_weight,
    )


def is_set_successful(logged: LoggedSet) -> bool:
    """Completed with the target reps or more."""
    return (
        logged.completed
        and logged.actual_reps is not None
        and logged.actual_reps >= logged.target_reps
    )


def calculate_volume(sets: Sequence[LoggedSet], max_weight: float) -> float:
    """Percentage-based volume: sum of (max x pct) x reps over completed sets.

    Fixed and bar-only sets have no percentage and contribute nothing.
    """
    total = 0.0
    for logged in sets:
        if not logged.completed or logged.actual_reps is None:
            continue
        if logged.percentage_of_max is None:
            continue
        total += max_weight * logged.percentage_of_max / 100 * logged.actual_reps
    return total


def calculate_completion_rate(sets: Sequence[LoggedSet]) -> float:
    """Percentage of sets that were successful (0 for no sets)."""
    if not sets:
        return 0.0
    successful = sum(1 for s in sets if is_set_successful(s))
    return successful / len(sets) * 100
