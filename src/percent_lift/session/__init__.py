"""Workout session runtime."""

from .engine import SessionEngine, SettingsProvider, WorkoutStore
from .feedback import ConsoleFeedback, Feedback, LoggingFeedback, NullFeedback
from .timer import RestTimer

__all__ = [
    "ConsoleFeedback",
    "Feedback",
    "LoggingFeedback",
    "NullFeedback",
    "RestTimer",
    "SessionEngine",
    "SettingsProvider",
    "WorkoutStore",
]
