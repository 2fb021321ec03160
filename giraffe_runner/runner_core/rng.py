"""
RNG - Obstacle Gap Source
=========================

Provides deterministic obstacle spawn distances. Each spawn lands beyond the
right edge of the field at a uniformly random multiple of a base unit, which
randomizes the gaps between bushes.
"""

from __future__ import annotations

import random
from typing import Optional

from giraffe_runner.runner_core.config_loader import GameConfig, get_config


class ObstacleSpawner:
    """
    Seeded source of obstacle spawn positions.

    spawn_x = field.width + U(gap_multiplier_min, gap_multiplier_max) * gap_unit
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._spawned: int = 0

    @property
    def spawned(self) -> int:
        """Number of positions drawn since the last reset."""
        return self._spawned

    @property
    def max_spawn_x(self) -> float:
        """Farthest possible spawn position."""
        return self._config.field.width + self._config.spawn.gap_multiplier_max * self._config.gap_unit

    def next_spawn_x(self) -> float:
        """
        Draw the starting horizontal position of the next obstacle.

        Returns:
            Position to the right of the visible field.
        """
        spawn = self._config.spawn
        multiplier = self._rng.uniform(spawn.gap_multiplier_min, spawn.gap_multiplier_max)
        self._spawned += 1
        return self._config.field.width + multiplier * self._config.gap_unit

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator with optional new seed.

        Args:
            seed: New random seed. Keeps the current stream if None, so the
                next course continues where the last one stopped.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._spawned = 0
