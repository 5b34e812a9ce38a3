"""Weekly goal routes."""

from fastapi import APIRouter, HTTPException, Request

from ...db import GoalRepository

router = APIRouter(prefix="/goal", tags=["goal"])


@router.get("")
async def progress(request: Request):
    """The active goal with this week's progress."""
    repo = GoalRepository(request.app.state.db_path)
    active = await repo.get_active()
    if active is None:
        raise HTTPException(status_code=404, detail="No active goal")

    return {
        "goal": active.to_dict(),
        "progress": (await repo.get_progress()).to_dict(),
        "today_scheduled": await repo.is_today_scheduled(),
    }
