"""Workout session routes backed by the app's session engine."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from ...db import GoalRepository, RoutineRepository
from ...errors import RecordNotFound
from ...session import SessionEngine

router = APIRouter(prefix="/workout", tags=["workout"])


class StartRequest(BaseModel):
    routine_id: int
    program_id: int | None = None


class CompleteSetRequest(BaseModel):
    exercise_index: int = Field(ge=0)
    set_index: int = Field(ge=0)
    actual_weight: float = Field(ge=0)
    actual_reps: int = Field(ge=0)


class UpdateSetRequest(BaseModel):
    exercise_index: int = Field(ge=0)
    set_index: int = Field(ge=0)
    actual_weight: float | None = Field(default=None, ge=0)
    actual_reps: int | None = Field(default=None, ge=0)


class CurrentExerciseRequest(BaseModel):
    index: int = Field(ge=0)


def get_engine(request: Request) -> SessionEngine:
    """Get the session engine from app state."""
    return request.app.state.engine


def _snapshot(engine: SessionEngine) -> dict:
    # Tick the timer before reading the state so both agree
    rest_timer = engine.rest_timer
    session = engine.session
    return {
        "state": engine.state.value,
        "session": session.to_dict() if session else None,
        "rest_timer": rest_timer.to_dict(),
        "progression_results": [r.to_dict() for r in engine.progression_results],
    }


@router.post("/start")
async def start(request: Request, body: StartRequest):
    """Start a workout from a saved routine."""
    routine = await RoutineRepository(request.app.state.db_path).get(body.routine_id)
    if routine is None:
        raise RecordNotFound("Routine", body.routine_id)

    engine = get_engine(request)
    try:
        await engine.start(routine, program_id=body.program_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _snapshot(engine)


@router.get("/state")
async def state(request: Request):
    """Current session, rest timer and last progression results."""
    return _snapshot(get_engine(request))


@router.post("/sets/complete")
async def complete_set(request: Request, body: CompleteSetRequest):
    """Log a set; starts the rest timer when the set has rest."""
    engine = get_engine(request)
    try:
        await engine.complete_set(
            body.exercise_index, body.set_index, body.actual_weight, body.actual_reps
        )
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _snapshot(engine)


@router.post("/sets/update")
async def update_set(request: Request, body: UpdateSetRequest):
    """Pre-fill a set's weight or reps without completing it."""
    fields = body.model_dump(include={"actual_weight", "actual_reps"}, exclude_none=True)
    if not fields:
        raise HTTPException(status_code=422, detail="Nothing to update")

    engine = get_engine(request)
    try:
        await engine.update_set(body.exercise_index, body.set_index, **fields)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _snapshot(engine)


@router.post("/rest/skip")
async def skip_rest(request: Request):
    engine = get_engine(request)
    engine.skip_rest_timer()
    return _snapshot(engine)


@router.post("/current-exercise")
async def current_exercise(request: Request, body: CurrentExerciseRequest):
    engine = get_engine(request)
    try:
        engine.set_current_exercise(body.index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _snapshot(engine)


@router.post("/complete")
async def complete(request: Request):
    """Finish the workout and apply progression."""
    engine = get_engine(request)
    results = await engine.complete_workout()
    active_goal = await GoalRepository(request.app.state.db_path).check_and_update_streak()
    return {
        **_snapshot(engine),
        "progressed": sum(1 for r in results if r.should_progress),
        "goal_streak": active_goal.current_streak if active_goal else None,
    }


@router.post("/cancel")
async def cancel(request: Request):
    """Discard the workout in progress."""
    engine = get_engine(request)
    await engine.cancel_workout()
    return _snapshot(engine)
