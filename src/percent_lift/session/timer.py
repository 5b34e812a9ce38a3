"""Deadline-based rest timer."""

import asyncio
import math
import time
from collections.abc import Callable

from loguru import logger

from ..models.workout import RestTimerState


class RestTimer:
    """Counts down a rest period against a wall-clock deadline.

    Remaining time is recomputed from the deadline on every wake, so a
    suspended event loop never makes the timer drift. When the countdown
    reaches zero ``on_finished`` is called exactly once per run. ``skip()``
    stops the timer immediately and wins over any tick already scheduled.

    Inside a running event loop ``start()`` schedules a background task that
    calls ``tick()`` every ``tick_interval`` seconds. Outside a loop the
    caller drives ``tick()`` itself.
    """

    def __init__(
        self,
        on_finished: Callable[[], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = 1.0,
    ):
        self._on_finished = on_finished
        self._clock = clock
        self._tick_interval = tick_interval
        self._deadline: float | None = None
        self._running = False
        self._remaining = 0
        self._total = 0
        self._fired = False
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def state(self) -> RestTimerState:
        return RestTimerState(
            is_running=self._running,
            remaining_seconds=self._remaining,
            total_seconds=self._total,
        )

    def start(self, seconds: int) -> None:
        """Start (or restart) a countdown of ``seconds``. Zero or less does nothing."""
        if seconds <= 0:
            return

        self._cancel_task()
        self._total = seconds
        self._remaining = seconds
        self._deadline = self._clock() + seconds
        self._running = True
        self._fired = False

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._task = loop.create_task(self._run())

    def tick(self) -> RestTimerState:
        """Recompute the remaining time; finish the run if the deadline has passed."""
        if not self._running or self._deadline is None:
            return self.state

        self._remaining = max(0, math.ceil(self._deadline - self._clock()))
        if self._remaining == 0:
            self._running = False
            self._deadline = None
            self._fire()
        return self.state

    def skip(self) -> None:
        """Stop now. Idempotent; does not signal completion."""
        self._running = False
        self._remaining = 0
        self._deadline = None
        self._cancel_task()

    def _fire(self) -> None:
        if self._fired:
            return
        self._fired = True
        if self._on_finished is None:
            return
        try:
            self._on_finished()
        except Exception:
            logger.exception("Rest timer completion callback failed")

    def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run(self) -> None:
        while self._running:
            await asyncio.sleep(self._tick_interval)
            # skip() may have run while we slept
            if not self._running:
                break
            self.tick()
