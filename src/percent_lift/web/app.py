"""FastAPI application for the percent-lift API."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from .. import __version__
from ..config import get_config
from ..db import SettingsRepository, WorkoutRepository, get_db_path, init_db
from ..errors import InvalidMeasurement, InvalidState, RecordNotFound, StoreFailure
from ..session import LoggingFeedback, SessionEngine
from .routers import calculators, goals, workout


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    await init_db(app.state.db_path)
    yield
    # Shutdown: stop any rest countdown still scheduled
    app.state.engine.skip_rest_timer()


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        if status_code >= 500:
            logger.warning(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: SQLite database to use (defaults to the configured one)
    """
    app = FastAPI(
        title="percent-lift",
        description="Percentage-based strength training calculator and workout engine",
        version=__version__,
        lifespan=lifespan,
    )

    db_path = db_path or get_db_path()
    app.state.db_path = db_path
    app.state.engine = SessionEngine(
        WorkoutRepository(db_path),
        SettingsRepository(db_path),
        feedback=LoggingFeedback(),
        tick_interval=get_config().rest_tick_seconds,
    )

    app.add_exception_handler(InvalidState, _error_handler(409))
    app.add_exception_handler(InvalidMeasurement, _error_handler(422))
    app.add_exception_handler(RecordNotFound, _error_handler(404))
    app.add_exception_handler(StoreFailure, _error_handler(503))

    app.include_router(calculators.router)
    app.include_router(workout.router)
    app.include_router(goals.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
