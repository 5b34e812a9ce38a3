"""Feedback sinks for session events (sound, vibration, notices)."""

from typing import Protocol

import click
from loguru import logger


class Feedback(Protocol):
    """Receives fire-and-forget signals from the session engine."""

    def rest_timer_finished(self) -> None: ...

    def workout_completed(self, progressed_count: int) -> None: ...


class NullFeedback:
    """Ignores every signal."""

    def rest_timer_finished(self) -> None:
        pass

    def workout_completed(self, progressed_count: int) -> None:
        pass


class ConsoleFeedback:
    """Terminal feedback: the bell stands in for audio, a printed line for haptics.

    Which channels are on is decided once, at construction, usually from the
    ``rest_timer_audio``, ``rest_timer_haptic`` and ``notifications_enabled``
    settings.
    """

    def __init__(self, audio: bool = True, haptic: bool = True, notifications: bool = True):
        self.audio = audio
        self.haptic = haptic
        self.notifications = notifications

    def rest_timer_finished(self) -> None:
        try:
            if self.audio:
                click.echo("\a", nl=False)
            if self.haptic:
                click.echo("*bzzt* Rest over, next set!")
        except OSError as e:
            logger.warning(f"Could not deliver rest timer feedback: {e}")

    def workout_completed(self, progressed_count: int) -> None:
        if not self.notifications:
            return
        try:
            if progressed_count:
                noun = "exercise" if progressed_count == 1 else "exercises"
                click.echo(f"Workout complete! {progressed_count} {noun} progressed.")
            else:
                click.echo("Workout complete!")
        except OSError as e:
            logger.warning(f"Could not deliver workout feedback: {e}")


class LoggingFeedback:
    """Records signals in the log; used where there is no terminal to ring."""

    def rest_timer_finished(self) -> None:
        logger.info("Feedback: rest timer finished")

    def workout_completed(self, progressed_count: int) -> None:
        logger.info(f"Feedback: workout completed, {progressed_count} exercise(s) progressed")
