"""
Game Rules
==========

Handles the difficulty ramp, obstacle spawn cadence and collision detection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from giraffe_runner.runner_core.config_loader import GameConfig, get_config
from giraffe_runner.runner_core.obstacles import ObstacleField
from giraffe_runner.runner_core.player import Player


@dataclass
class DifficultyState:
    """Current difficulty level and the speeds derived from it."""
    level: int
    jump_speed: float
    walk_speed: float


class DifficultyRules:
    """
    Linear difficulty ramp.

    Speeds are base + level * coefficient. The level rises by one every
    interval_ticks ticks once the player has scored, up to max_level.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize difficulty rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._difficulty = config.difficulty
        self._physics = config.physics
        self._state = self.initial_state()

    @property
    def state(self) -> DifficultyState:
        return self._state

    @property
    def level(self) -> int:
        return self._state.level

    @property
    def max_level(self) -> int:
        return self._difficulty.max_level

    def initial_state(self) -> DifficultyState:
        """Difficulty at the start of a run."""
        level = self._difficulty.initial_level
        return DifficultyState(
            level=level,
            jump_speed=self._physics.jump_speed + level * self._difficulty.jump_speed_coef,
            walk_speed=self._physics.walk_speed + level * self._difficulty.walk_speed_coef
        )

    def should_ramp(self, tick: int, score: int) -> bool:
        """True if this tick raises the level."""
        return (
            score > 0
            and tick % self._difficulty.interval_ticks == 0
            and self._state.level < self._difficulty.max_level
        )

    def update(self, tick: int, score: int) -> bool:
        """
        Apply the ramp for this tick.

        Returns:
            True if the level increased.
        """
        if not self.should_ramp(tick, score):
            return False

        self._state.level += 1
        self._state.walk_speed += self._difficulty.walk_speed_coef
        self._state.jump_speed += self._difficulty.jump_speed_coef
        return True

    def reset(self) -> None:
        self._state = self.initial_state()


class SpawnRules:
    """
    Obstacle spawn cadence.

    The interval shrinks with the level and is clamped at min_interval so it
    never reaches zero or goes negative.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._spawn = config.spawn

    def spawn_interval(self, level: int) -> int:
        """Ticks between spawns at the given difficulty level."""
        interval = self._spawn.base_interval - level * self._spawn.interval_per_level
        return max(self._spawn.min_interval, interval)

    def should_spawn(self, tick: int, level: int) -> bool:
        """True if an obstacle spawns on this tick."""
        return tick % self.spawn_interval(level) == 0


class CollisionRules:
    """
    Bounding-box heuristic between the giraffe and the bushes.

    A hit needs both a low giraffe (height above ground under the bush height
    minus a margin) and a bush inside the window (0, window_ratio * size].
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._near_ground = config.near_ground_threshold
        self._window = config.collision_window

    @property
    def window(self) -> float:
        return self._window

    @property
    def near_ground_threshold(self) -> float:
        return self._near_ground

    def is_near_ground(self, player: Player) -> bool:
        return player.height < self._near_ground

    def check(self, player: Player, obstacles: ObstacleField) -> bool:
        """True if the giraffe hits a bush."""
        return self.is_near_ground(player) and obstacles.any_in_window(0.0, self._window)
