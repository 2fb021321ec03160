"""
Animation State
===============

Sprite-sheet run cycle and sliding background offset. Both advance with the
walk speed so the legs and the scenery keep pace with the bushes.
"""

from __future__ import annotations

import math
from typing import Optional

from giraffe_runner.runner_core.config_loader import GameConfig, get_config


class RunAnimation:
    """
    Current frame of the run sprite sheet.

    The phase advances by walk_speed / stride per tick; the frame index is
    the integer part of the phase modulo the frame count.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._frame_count = config.animation.frame_count
        self._stride = config.animation.stride
        self._phase: float = 0.0

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def phase(self) -> float:
        return self._phase

    @property
    def frame_index(self) -> int:
        return int(math.floor(self._phase)) % self._frame_count

    def step_size(self, walk_speed: float) -> float:
        """Frames advanced per tick at the given walk speed."""
        return walk_speed / self._stride

    def update(self, walk_speed: float) -> None:
        # Wrap to keep the phase small over long runs
        self._phase = (self._phase + self.step_size(walk_speed)) % self._frame_count

    def reset(self) -> None:
        self._phase = 0.0


class ParallaxScroll:
    """Horizontal offset of the tiled background."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._factor = config.animation.parallax
        self._width = config.animation.background_width
        self._offset: float = 0.0

    @property
    def offset(self) -> float:
        """Offset in [0, background_width)."""
        return self._offset

    @property
    def width(self) -> float:
        return self._width

    def update(self, walk_speed: float) -> None:
        self._offset = (self._offset + walk_speed * self._factor) % self._width

    def reset(self) -> None:
        self._offset = 0.0
