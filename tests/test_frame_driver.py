"""
Tests for the frame driver and schedulers.
"""

import logging

import pygame
import pytest

from giraffe_runner.runner_core.frame_driver import FrameDriver, ManualScheduler, PygameScheduler


class Recorder:
    """Frame function that records the renderer it was given."""

    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def __call__(self, renderer):
        self.calls.append(renderer)
        if len(self.calls) in self.fail_on:
            raise RuntimeError(f"boom {len(self.calls)}")


class NoCancelScheduler(ManualScheduler):
    """Scheduler whose cancel() has no effect."""

    def cancel(self, handle):
        pass


@pytest.fixture
def scheduler():
    return ManualScheduler()


class TestManualScheduler:
    """Test the explicitly pumped scheduler."""

    def test_runs_in_request_order(self, scheduler):
        order = []
        scheduler.request(lambda: order.append("a"))
        scheduler.request(lambda: order.append("b"))

        assert scheduler.run_pending() == 2
        assert order == ["a", "b"]
        assert scheduler.pending == 0
        assert scheduler.frames_run == 1

    def test_cancel(self, scheduler):
        ran = []
        handle = scheduler.request(lambda: ran.append(1))
        scheduler.cancel(handle)

        assert scheduler.run_pending() == 0
        assert ran == []
        assert scheduler.frames_run == 0

    def test_requests_during_frame_wait(self, scheduler):
        ran = []

        def again():
            ran.append(1)
            scheduler.request(again)

        scheduler.request(again)
        scheduler.run_pending()

        assert ran == [1]
        assert scheduler.pending == 1

    def test_run_until_idle_respects_limit(self, scheduler):
        def again():
            scheduler.request(again)

        scheduler.request(again)
        assert scheduler.run_until_idle(max_frames=25) == 25


class TestFrameDriver:
    """Test the per-frame loop."""

    def test_passes_renderer_each_frame(self, scheduler):
        renderer = object()
        recorder = Recorder()
        driver = FrameDriver(scheduler, recorder, renderer)

        driver.start()
        assert driver.running
        assert scheduler.pending == 1

        scheduler.run_until_idle(max_frames=5)
        assert recorder.calls == [renderer] * 5
        assert driver.frames == 5

    def test_exception_is_logged_and_loop_continues(self, scheduler, caplog):
        recorder = Recorder(fail_on={2})
        driver = FrameDriver(scheduler, recorder, "r")

        with caplog.at_level(logging.ERROR, logger="giraffe_runner.runner_core.frame_driver"):
            driver.start()
            scheduler.run_until_idle(max_frames=4)

        assert len(recorder.calls) == 4
        assert driver.errors == 1
        assert driver.running
        assert scheduler.pending == 1
        assert "Frame 2 failed" in caplog.text
        assert "boom 2" in caplog.text

    def test_every_frame_failing_keeps_running(self, scheduler):
        recorder = Recorder(fail_on=range(1, 11))
        driver = FrameDriver(scheduler, recorder, None)
        driver.start()

        scheduler.run_until_idle(max_frames=10)
        assert driver.errors == 10
        assert scheduler.pending == 1

    def test_stop_cancels_pending_frame(self, scheduler):
        recorder = Recorder()
        driver = FrameDriver(scheduler, recorder, None)
        driver.start()
        scheduler.run_pending()

        driver.stop()

        assert not driver.running
        assert scheduler.pending == 0
        assert scheduler.run_until_idle(max_frames=10) == 0
        assert len(recorder.calls) == 1

    def test_stop_from_inside_frame(self, scheduler):
        calls = []

        def frame(_):
            calls.append(1)
            if len(calls) == 3:
                driver.stop()

        driver = FrameDriver(scheduler, frame, None)
        driver.start()

        assert scheduler.run_until_idle(max_frames=100) == 3
        assert len(calls) == 3

    def test_stale_callback_does_nothing(self):
        scheduler = NoCancelScheduler()
        recorder = Recorder()
        driver = FrameDriver(scheduler, recorder, None)
        driver.start()
        driver.stop()

        scheduler.run_pending()

        assert recorder.calls == []
        assert scheduler.pending == 0

    def test_start_twice_schedules_once(self, scheduler):
        driver = FrameDriver(scheduler, Recorder(), None)
        driver.start()
        driver.start()

        assert scheduler.pending == 1

    def test_restart_after_stop(self, scheduler):
        recorder = Recorder()
        driver = FrameDriver(scheduler, recorder, None)
        driver.start()
        scheduler.run_pending()
        driver.stop()

        driver.start()
        scheduler.run_pending()

        assert len(recorder.calls) == 2
        assert driver.frames == 1

    def test_drivers_share_scheduler(self, scheduler):
        order = []
        first = FrameDriver(scheduler, lambda r: order.append(r), "first")
        second = FrameDriver(scheduler, lambda r: order.append(r), "second")
        first.start()
        second.start()

        scheduler.run_until_idle(max_frames=2)
        assert order == ["first", "second", "first", "second"]


class TestPygameScheduler:
    """Test the clock-paced scheduler."""

    @pytest.fixture(autouse=True)
    def _pygame(self):
        pygame.init()

    def test_runs_until_driver_stops(self):
        scheduler = PygameScheduler(fps=1000)
        calls = []

        def frame(_):
            calls.append(1)
            if len(calls) == 3:
                driver.stop()

        driver = FrameDriver(scheduler, frame, None)
        driver.start()

        assert scheduler.run() == 3
        assert len(calls) == 3
        assert scheduler.target_fps == 1000

    def test_idle_run_returns_immediately(self):
        scheduler = PygameScheduler(fps=60)
        assert scheduler.run() == 0

    def test_fps_floor(self):
        assert PygameScheduler(fps=0).target_fps == 1
