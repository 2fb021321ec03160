"""
Obstacles
=========

Ordered sequence of scrolling bushes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from giraffe_runner.runner_core.config_loader import GameConfig, get_config


@dataclass
class Obstacle:
    """A bush. Only its horizontal position changes."""
    uid: int
    x: float


class ObstacleField:
    """
    Holds obstacles in spawn order, scrolls them left and culls the ones that
    left the visible field.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._cull_x = config.obstacle.cull_x
        self._size = config.obstacle.size
        self._obstacles: List[Obstacle] = []
        self._next_uid: int = 0

    def __len__(self) -> int:
        return len(self._obstacles)

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self._obstacles)

    @property
    def cull_x(self) -> float:
        return self._cull_x

    @property
    def size(self) -> float:
        return self._size

    @property
    def positions(self) -> Tuple[float, ...]:
        """Horizontal positions in spawn order."""
        return tuple(o.x for o in self._obstacles)

    def spawn(self, x: float) -> Obstacle:
        """Append a new obstacle at the given position."""
        obstacle = Obstacle(uid=self._next_uid, x=x)
        self._next_uid += 1
        self._obstacles.append(obstacle)
        return obstacle

    def advance(self, dx: float) -> int:
        """
        Scroll every obstacle left by dx and drop those at or past the cull line.

        Returns:
            Number of obstacles removed.
        """
        for obstacle in self._obstacles:
            obstacle.x -= dx

        before = len(self._obstacles)
        self._obstacles = [o for o in self._obstacles if o.x > self._cull_x]
        return before - len(self._obstacles)

    def any_in_window(self, left: float, right: float) -> bool:
        """True if some obstacle lies in the half-open window (left, right]."""
        return any(left < o.x <= right for o in self._obstacles)

    def nearest_ahead(self, x: float) -> Optional[Obstacle]:
        """Closest obstacle strictly to the right of x, if any."""
        ahead = [o for o in self._obstacles if o.x > x]
        if not ahead:
            return None
        return min(ahead, key=lambda o: o.x)

    def clear(self) -> None:
        self._obstacles = []
        self._next_uid = 0
