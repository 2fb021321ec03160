"""
Frame Driver
============

Runs one callback per display refresh. The next frame is requested before the
current callback runs, so an exception in rendering or game code is logged and
the loop keeps going. stop() cancels the pending frame.
"""

from __future__ import annotations

import itertools
import logging
from collections import OrderedDict
from typing import Callable, Generic, Optional, Protocol, TypeVar

import pygame

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Scheduler(Protocol):
    """Runs a callback before the next repaint."""

    def request(self, callback: Callable[[], None]) -> int:
        """Schedule callback for the next frame and return a handle."""
        ...

    def cancel(self, handle: int) -> None:
        """Invalidate a handle returned by request()."""
        ...


class ManualScheduler:
    """
    Scheduler pumped explicitly by the caller.

    Used for headless runs (benchmarks, agents, tests) where frames advance as
    fast as the caller wants instead of at display rate.
    """

    def __init__(self):
        self._pending: "OrderedDict[int, Callable[[], None]]" = OrderedDict()
        self._handles = itertools.count(1)
        self._frames_run: int = 0

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for a frame."""
        return len(self._pending)

    @property
    def frames_run(self) -> int:
        return self._frames_run

    def request(self, callback: Callable[[], None]) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_pending(self) -> int:
        """
        Run one frame: every callback scheduled before this call.

        Callbacks requested while the frame runs wait for the next frame.

        Returns:
            Number of callbacks executed.
        """
        batch = list(self._pending.keys())
        executed = 0
        for handle in batch:
            # Cancelled by an earlier callback in this frame
            callback = self._pending.pop(handle, None)
            if callback is None:
                continue
            callback()
            executed += 1
        if executed:
            self._frames_run += 1
        return executed

    def run_until_idle(self, max_frames: int) -> int:
        """
        Run frames until nothing is scheduled or max_frames is reached.

        Returns:
            Number of frames run.
        """
        frames = 0
        while self._pending and frames < max_frames:
            self.run_pending()
            frames += 1
        return frames


class PygameScheduler:
    """
    Scheduler paced by pygame.time.Clock.

    run() blocks, executing one frame of callbacks per clock tick, and returns
    once nothing is scheduled (e.g. after FrameDriver.stop()).
    """

    def __init__(self, fps: int = 60):
        self._fps = max(1, fps)
        self._clock = pygame.time.Clock()
        self._inner = ManualScheduler()

    @property
    def fps(self) -> float:
        """Measured frames per second."""
        return self._clock.get_fps()

    @property
    def target_fps(self) -> int:
        return self._fps

    def request(self, callback: Callable[[], None]) -> int:
        return self._inner.request(callback)

    def cancel(self, handle: int) -> None:
        self._inner.cancel(handle)

    def run(self) -> int:
        """
        Run frames until idle.

        Returns:
            Number of frames run.
        """
        frames = 0
        while self._inner.pending:
            self._clock.tick(self._fps)
            self._inner.run_pending()
            frames += 1
        return frames


class FrameDriver(Generic[R]):
    """
    Calls frame_fn(renderer) once per scheduled frame.

    The renderer is passed explicitly on every call so the frame function does
    not capture drawing state.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        frame_fn: Callable[[R], None],
        renderer: R
    ):
        self._scheduler = scheduler
        self._frame_fn = frame_fn
        self._renderer = renderer

        self._running = False
        self._handle: Optional[int] = None
        self._frames: int = 0
        self._errors: int = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def frames(self) -> int:
        """Frames executed since start()."""
        return self._frames

    @property
    def errors(self) -> int:
        """Frames whose callback raised."""
        return self._errors

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._frames = 0
        self._errors = 0
        self._schedule_next()

    def stop(self) -> None:
        """Cancel the pending frame. No frame runs after this returns."""
        self._running = False
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _schedule_next(self) -> None:
        self._handle = self._scheduler.request(self._on_frame)

    def _on_frame(self) -> None:
        # A stale handle may still fire on schedulers that cannot cancel
        if not self._running:
            return

        self._schedule_next()
        self._frames += 1

        try:
            self._frame_fn(self._renderer)
        except Exception:
            self._errors += 1
            logger.exception("Frame %d failed", self._frames)
