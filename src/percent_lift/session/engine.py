"""Workout session state machine."""

import asyncio
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any, Protocol

from loguru import logger

from ..calculations.plates import calculate_plates
from ..calculations.progression import evaluate_progression
from ..calculations.weights import calculate_weight_from_percentage
from ..errors import InvalidState, StoreFailure
from ..models.equipment import PlateInventoryEntry, PlateLoadPlan
from ..models.exercise import ExerciseProfile
from ..models.routine import Routine, SetPlan, WeightKind
from ..models.workout import (
    ProgressionResult,
    ResolvedSet,
    RestTimerState,
    SessionStatus,
    WorkoutExercise,
    WorkoutSession,
)
from .feedback import Feedback, NullFeedback
from .timer import RestTimer

# Statuses from which a new workout may be started
_STARTABLE = (SessionStatus.NOT_STARTED, SessionStatus.FINALIZED, SessionStatus.CANCELLED)
_IN_PROGRESS = (SessionStatus.ACTIVE, SessionStatus.RESTING)

# Fields update_set() may change; targets stay as resolved at start
_EDITABLE_SET_FIELDS = frozenset({"actual_weight", "actual_reps"})


class SettingsProvider(Protocol):
    """Typed settings lookup with documented defaults."""

    async def get(self, key: str) -> Any: ...


class WorkoutStore(Protocol):
    """The workout persistence the engine needs."""

    async def create(self, session: WorkoutSession) -> int: ...

    async def update_set(self, resolved: ResolvedSet) -> None: ...

    async def finalize(
        self,
        workout_id: int,
        completed_at: datetime,
        progressions: list[ProgressionResult],
    ) -> None: ...

    async def delete(self, workout_id: int) -> bool: ...


class SessionEngine:
    """Runs one workout at a time from start to completion or cancellation.

    States: NOT_STARTED -> ACTIVE (with RESTING while the rest timer runs)
    -> COMPLETING -> FINALIZED, or CANCELLED from anywhere before FINALIZED.

    Every mutating call is serialized with a lock. Store writes happen before
    the in-memory state changes, so a StoreFailure leaves the session exactly
    as it was and the same call can be retried.
    """

    def __init__(
        self,
        workouts: WorkoutStore,
        settings: SettingsProvider,
        feedback: Feedback | None = None,
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = 1.0,
    ):
        self._workouts = workouts
        self._settings = settings
        self._feedback = feedback or NullFeedback()
        self._lock = asyncio.Lock()
        self._status = SessionStatus.NOT_STARTED
        self._session: WorkoutSession | None = None
        self._progression_results: list[ProgressionResult] = []
        self._timer = RestTimer(
            on_finished=self._on_rest_finished,
            clock=clock,
            tick_interval=tick_interval,
        )

    @property
    def state(self) -> SessionStatus:
        """Current status; RESTING while active with the rest timer running."""
        if self._status == SessionStatus.ACTIVE and self._timer.is_running:
            return SessionStatus.RESTING
        return self._status

    @property
    def session(self) -> WorkoutSession | None:
        return self._session

    @property
    def rest_timer(self) -> RestTimerState:
        """Rest timer snapshot, refreshed from its deadline."""
        return self._timer.tick()

    @property
    def progression_results(self) -> list[ProgressionResult]:
        """Results of the last completed workout."""
        return list(self._progression_results)

    @property
    def current_exercise(self) -> WorkoutExercise | None:
        if self._session is None or not self._session.exercises:
            return None
        return self._session.exercises[self._session.current_exercise_index]

    @property
    def current_set(self) -> ResolvedSet | None:
        exercise = self.current_exercise
        if exercise is None or not exercise.sets:
            return None
        return exercise.sets[self._session.current_set_index]

    async def start(self, routine: Routine, program_id: int | None = None) -> WorkoutSession:
        """Resolve the routine into a new session and persist it.

        Raises:
            InvalidState: If a workout is already in progress
            ValueError: If the routine has no exercises
            StoreFailure: If the workout could not be saved
        """
        async with self._lock:
            self._require("start a workout", *_STARTABLE)
            if not routine.exercises:
                raise ValueError(f"Routine {routine.name} has no exercises")

            session = await self._resolve(routine, program_id)
            try:
                await self._workouts.create(session)
            except StoreFailure as e:
                logger.warning(f"Could not start workout {routine.name}: {e}")
                raise

            self._timer.skip()
            self._session = session
            self._progression_results = []
            self._status = SessionStatus.ACTIVE
            logger.info(f"Workout {session.id} started from routine {routine.name}")
            return session

    async def complete_set(
        self,
        exercise_index: int,
        set_index: int,
        actual_weight: float,
        actual_reps: int,
    ) -> ResolvedSet:
        """Log a set as done and start its rest period.

        Raises:
            InvalidState: If no workout is in progress
            IndexError: If the exercise or set does not exist
            StoreFailure: If the set could not be saved
        """
        async with self._lock:
            self._require("complete a set", *_IN_PROGRESS)
            entry = self._exercise_at(exercise_index)
            target = self._set_at(entry, set_index)

            updated = replace(
                target,
                actual_weight=actual_weight,
                actual_reps=actual_reps,
                completed=True,
            )
            try:
                await self._workouts.update_set(updated)
            except StoreFailure as e:
                logger.warning(f"Could not save set {exercise_index}/{set_index}: {e}")
                raise

            entry.sets[set_index] = updated
            logger.info(
                f"Set {exercise_index}/{set_index} of {entry.exercise.name} done: "
                f"{actual_weight:g} x {actual_reps}"
            )
            if updated.rest_seconds > 0:
                self._timer.start(updated.rest_seconds)
                logger.info(f"Resting {updated.rest_seconds}s")
            return updated

    async def update_set(self, exercise_index: int, set_index: int, **fields: Any) -> ResolvedSet:
        """Change a set's logged weight or reps without completing it.

        Only ``actual_weight`` and ``actual_reps`` may be edited. The edit is
        saved before it is applied, like :meth:`complete_set`.

        Raises:
            InvalidState: If no workout is in progress
            ValueError: If any other field is passed
            StoreFailure: If the set could not be saved
        """
        unknown = set(fields) - _EDITABLE_SET_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit set fields: {', '.join(sorted(unknown))}")

        async with self._lock:
            self._require("edit a set", *_IN_PROGRESS)
            entry = self._exercise_at(exercise_index)
            updated = replace(self._set_at(entry, set_index), **fields)
            try:
                await self._workouts.update_set(updated)
            except StoreFailure as e:
                logger.warning(f"Could not save set {exercise_index}/{set_index}: {e}")
                raise

            entry.sets[set_index] = updated
            return updated

    def start_rest_timer(self, seconds: int) -> None:
        self._require("start the rest timer", *_IN_PROGRESS)
        self._timer.start(seconds)

    def skip_rest_timer(self) -> None:
        """Stop the rest timer immediately. Safe to call when it is not running."""
        self._timer.skip()

    def set_current_exercise(self, index: int) -> None:
        """Jump to any exercise; the set position goes back to the first set."""
        self._require("change exercise", *_IN_PROGRESS)
        self._exercise_at(index)
        self._session.current_exercise_index = index
        self._session.current_set_index = 0

    def set_current_set(self, index: int) -> None:
        self._require("change set", *_IN_PROGRESS)
        self._set_at(self._exercise_at(self._session.current_exercise_index), index)
        self._session.current_set_index = index

    async def complete_workout(self) -> list[ProgressionResult]:
        """Evaluate progression and finalize the workout.

        Max-weight updates, the completion timestamp and the program advance
        are written together. If that write fails nothing is kept and the
        session returns to the state it was in before the call.

        Returns:
            One ProgressionResult per exercise, in workout order
        """
        async with self._lock:
            self._require("complete the workout", *_IN_PROGRESS)
            previous = self._status
            self._status = SessionStatus.COMPLETING
            logger.info(f"Completing workout {self._session.id}")

            results = [
                evaluate_progression(entry.exercise, entry.sets)
                for entry in self._session.exercises
            ]
            completed_at = datetime.now()
            try:
                await self._workouts.finalize(self._session.id, completed_at, results)
            except StoreFailure as e:
                logger.warning(f"Could not finalize workout {self._session.id}: {e}")
                self._status = previous
                raise

            self._timer.skip()
            for entry, result in zip(self._session.exercises, results):
                if result.should_progress:
                    entry.exercise.max_weight = result.new_max_weight
            self._session.completed_at = completed_at
            self._session.status = SessionStatus.FINALIZED
            self._status = SessionStatus.FINALIZED
            self._progression_results = results

            progressed = sum(1 for r in results if r.should_progress)
            logger.info(f"Workout {self._session.id} finalized, {progressed} exercise(s) progressed")
            self._notify(self._feedback.workout_completed, progressed)
            return list(results)

    async def cancel_workout(self) -> None:
        """Discard the in-progress workout. No progression is evaluated."""
        async with self._lock:
            if self._status == SessionStatus.FINALIZED:
                raise InvalidState("cancel the workout", self.state.value)

            session = self._session
            if session is not None and session.id is not None:
                try:
                    await self._workouts.delete(session.id)
                except StoreFailure as e:
                    logger.warning(f"Could not delete workout {session.id}: {e}")
                    raise

            self._timer.skip()
            self._status = SessionStatus.CANCELLED
            logger.info(f"Workout {session.id if session else None} cancelled")
            self._session = None
            self._progression_results = []
            self._status = SessionStatus.NOT_STARTED

    def clear_progression_results(self) -> None:
        self._progression_results = []

    def plates_for(
        self,
        exercise_index: int,
        set_index: int,
        inventory: Mapping[float, int] | list[PlateInventoryEntry],
    ) -> PlateLoadPlan:
        """Plate plan for a set's target weight on its exercise's bar."""
        if self._session is None:
            raise InvalidState("calculate plates", self.state.value)
        entry = self._exercise_at(exercise_index)
        target = self._set_at(entry, set_index)
        bar_weight = entry.exercise.equipment_baseline or 0.0
        return calculate_plates(target.target_weight, bar_weight, inventory)

    def _require(self, operation: str, *allowed: SessionStatus) -> None:
        state = self.state
        if state not in allowed:
            raise InvalidState(operation, state.value)

    def _exercise_at(self, index: int) -> WorkoutExercise:
        if not 0 <= index < len(self._session.exercises):
            raise IndexError(f"No exercise at index {index}")
        return self._session.exercises[index]

    @staticmethod
    def _set_at(entry: WorkoutExercise, index: int) -> ResolvedSet:
        if not 0 <= index < len(entry.sets):
            raise IndexError(f"No set at index {index} for {entry.exercise.name}")
        return entry.sets[index]

    async def _resolve(self, routine: Routine, program_id: int | None) -> WorkoutSession:
        default_rest = await self._settings.get("default_rest_time")
        default_bar = await self._settings.get("default_bar_weight")

        exercises = []
        for order, entry in enumerate(routine.exercises):
            # Copy the profile so progression applied to this session never
            # leaks into the caller's routine
            exercise = replace(entry.exercise)
            sets = [
                self._resolve_set(exercise, plan, set_order, default_rest, default_bar)
                for set_order, plan in enumerate(entry.sets)
            ]
            exercises.append(WorkoutExercise(exercise=exercise, sets=sets, order_index=order))

        return WorkoutSession(
            routine_id=routine.id,
            routine_name=routine.name,
            exercises=exercises,
            program_id=program_id,
            status=SessionStatus.ACTIVE,
        )

    @staticmethod
    def _resolve_set(
        exercise: ExerciseProfile,
        plan: SetPlan,
        order: int,
        default_rest: int,
        default_bar: float,
    ) -> ResolvedSet:
        if plan.rest_seconds_override is not None:
            rest = plan.rest_seconds_override
        elif exercise.default_rest_seconds is not None:
            rest = exercise.default_rest_seconds
        else:
            rest = default_rest

        bar = exercise.equipment_baseline
        percentage = None
        if plan.weight_kind == WeightKind.PERCENTAGE:
            percentage = plan.weight_value
            weight = calculate_weight_from_percentage(
                exercise.max_weight,
                plan.weight_value,
                exercise.weight_increment,
                min_weight=bar if bar is not None else default_bar,
            )
        elif plan.weight_kind == WeightKind.BAR:
            weight = bar if bar is not None else 0.0
        else:
            weight = plan.weight_value

        return ResolvedSet(
            target_weight=weight,
            target_reps=plan.target_reps,
            percentage_of_max=percentage,
            rest_seconds=rest,
            order_index=order,
        )

    def _on_rest_finished(self) -> None:
        logger.info("Rest timer finished")
        self._notify(self._feedback.rest_timer_finished)

    @staticmethod
    def _notify(signal: Callable[..., None], *args: Any) -> None:
        try:
            signal(*args)
        except Exception:
            logger.exception("Feedback signal failed")
