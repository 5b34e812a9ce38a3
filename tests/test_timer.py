"""Tests for the rest timer."""

import asyncio

import pytest

from percent_lift.session.timer import RestTimer


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


@pytest.fixture
def finished():
    return Counter()


class TestRestTimerManualTicks:
    """Timer driven by explicit tick() calls, outside an event loop."""

    def test_counts_down_from_deadline(self, clock, finished):
        timer = RestTimer(on_finished=finished, clock=clock)
        timer.start(90)
        assert timer.is_running
        assert timer.state.remaining_seconds == 90
        assert timer.state.total_seconds == 90

        clock.advance(30.4)
        assert timer.tick().remaining_seconds == 60
        assert finished.calls == 0

    def test_finishes_once(self, clock, finished):
        timer = RestTimer(on_finished=finished, clock=clock)
        timer.start(10)
        clock.advance(10)
        state = timer.tick()
        assert not state.is_running
        assert state.remaining_seconds == 0
        clock.advance(5)
        timer.tick()
        assert finished.calls == 1

    def test_large_jump_does_not_go_negative(self, clock, finished):
        timer = RestTimer(on_finished=finished, clock=clock)
        timer.start(10)
        clock.advance(3600)
        assert timer.tick().remaining_seconds == 0
        assert finished.calls == 1

    def test_skip_stops_without_firing(self, clock, finished):
        timer = RestTimer(on_finished=finished, clock=clock)
        timer.start(60)
        timer.skip()
        timer.skip()
        assert not timer.is_running
        assert timer.state.remaining_seconds == 0
        clock.advance(120)
        timer.tick()
        assert finished.calls == 0

    def test_restart_resets_countdown(self, clock, finished):
        timer = RestTimer(on_finished=finished, clock=clock)
        timer.start(60)
        clock.advance(50)
        timer.start(120)
        clock.advance(60)
        assert timer.tick().remaining_seconds == 60
        assert finished.calls == 0

    def test_each_run_fires(self, clock, finished):
        timer = RestTimer(on_finished=finished, clock=clock)
        for _ in range(2):
            timer.start(5)
            clock.advance(5)
            timer.tick()
        assert finished.calls == 2

    @pytest.mark.parametrize("seconds", [0, -5])
    def test_non_positive_duration_is_ignored(self, clock, finished, seconds):
        timer = RestTimer(on_finished=finished, clock=clock)
        timer.start(seconds)
        assert not timer.is_running
        assert finished.calls == 0

    def test_callback_errors_are_contained(self, clock):
        def explode():
            raise RuntimeError("speaker unplugged")

        timer = RestTimer(on_finished=explode, clock=clock)
        timer.start(1)
        clock.advance(1)
        assert not timer.tick().is_running


class TestRestTimerBackgroundTask:
    """Timer driven by its own task inside an event loop."""

    @pytest.mark.asyncio
    async def test_task_fires_after_deadline(self, clock, finished):
        timer = RestTimer(on_finished=finished, clock=clock, tick_interval=0.01)
        timer.start(30)
        await asyncio.sleep(0.03)
        assert timer.is_running
        assert finished.calls == 0

        clock.advance(30)
        for _ in range(50):
            await asyncio.sleep(0.01)
            if not timer.is_running:
                break
        assert not timer.is_running
        assert finished.calls == 1

    @pytest.mark.asyncio
    async def test_skip_cancels_task(self, clock, finished):
        timer = RestTimer(on_finished=finished, clock=clock, tick_interval=0.01)
        timer.start(30)
        task = timer._task
        timer.skip()
        clock.advance(60)
        await asyncio.sleep(0.05)
        assert task.cancelled() or task.done()
        assert finished.calls == 0
