"""
Player
======

The giraffe's vertical motion: a three-phase jump state machine moving at a
constant speed between the ground and the jump apex.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from giraffe_runner.runner_core.config_loader import GameConfig, get_config


class JumpPhase(Enum):
    """Vertical-motion state of the giraffe."""
    GROUNDED = "grounded"
    ASCENDING = "ascending"
    DESCENDING = "descending"


class Player:
    """
    Vertical position and jump phase of the giraffe.

    Y grows downward (screen coordinates): ground_y is the largest value the
    position can take, apex_y the smallest.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._ground_y = config.ground_y
        self._apex_y = config.apex_y
        self._x = config.player.x
        self._size = config.player.size

        self._y: float = self._ground_y
        self._phase: JumpPhase = JumpPhase.GROUNDED

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def size(self) -> float:
        return self._size

    @property
    def phase(self) -> JumpPhase:
        return self._phase

    @property
    def ground_y(self) -> float:
        return self._ground_y

    @property
    def apex_y(self) -> float:
        return self._apex_y

    @property
    def height(self) -> float:
        """Distance above the ground."""
        return self._ground_y - self._y

    @property
    def is_grounded(self) -> bool:
        return self._phase is JumpPhase.GROUNDED

    def begin_jump(self) -> bool:
        """
        Start a jump. Only honored when grounded.

        Returns:
            True if the jump started.
        """
        if self._phase is not JumpPhase.GROUNDED:
            return False
        self._phase = JumpPhase.ASCENDING
        return True

    def release_jump(self) -> bool:
        """
        Cut the ascent short for a lower hop. Only honored while ascending.

        Returns:
            True if the giraffe started falling.
        """
        if self._phase is not JumpPhase.ASCENDING:
            return False
        self._phase = JumpPhase.DESCENDING
        return True

    def update(self, jump_speed: float) -> None:
        """
        Move one tick along the current jump phase.

        Positions are clamped to the apex and to the ground so that speeds
        which do not divide the jump height never drift past either bound.
        """
        if self._phase is JumpPhase.ASCENDING:
            self._y -= jump_speed
            if self._y <= self._apex_y:
                self._y = self._apex_y
                self._phase = JumpPhase.DESCENDING
        elif self._phase is JumpPhase.DESCENDING:
            self._y += jump_speed
            if self._y >= self._ground_y:
                self._y = self._ground_y
                self._phase = JumpPhase.GROUNDED

    def reset(self) -> None:
        """Stand on the ground, not jumping."""
        self._y = self._ground_y
        self._phase = JumpPhase.GROUNDED
