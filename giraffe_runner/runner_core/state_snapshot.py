"""
State Snapshot
==============

Read-only view of the simulation handed to renderers and agents, plus packing
into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, TYPE_CHECKING
import numpy as np

from giraffe_runner.runner_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from giraffe_runner.runner_core.obstacles import ObstacleField
    from giraffe_runner.runner_core.player import Player

# Obstacle slots in observations; extra obstacles (far right) are dropped
MAX_OBSTACLES = 32

# Observation codes for jump phases and run status
JUMP_PHASE_CODES = {"grounded": 0, "ascending": 1, "descending": 2}
STATUS_CODES = {"running": 0, "failed": 1}


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete game state at the end of a tick.

    Obstacle arrays are fixed-size with masking for variable obstacle counts.
    """
    # Run state
    status: str
    tick: int
    score: int
    best_score: Optional[int]
    record_beaten: bool

    # Difficulty
    level: int
    walk_speed: float
    jump_speed: float

    # Player
    player_x: float
    player_y: float
    player_size: float
    jump_phase: str
    ground_y: float
    apex_y: float

    # Field info (for normalization)
    field_width: float
    field_height: float
    obstacle_size: float

    # Animation
    scroll_offset: float
    frame_index: int

    # Obstacles in spawn order
    obstacles: Tuple[float, ...]

    # Derived features
    nearest_obstacle_x: float        # -1 if no obstacle ahead of the player
    obstacle_x: np.ndarray           # (MAX_OBSTACLES,) float32
    obstacle_mask: np.ndarray        # (MAX_OBSTACLES,) bool

    @property
    def is_running(self) -> bool:
        return self.status == "running"

    @property
    def player_height(self) -> float:
        """Distance of the giraffe above the ground."""
        return self.ground_y - self.player_y

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            # Run state
            "status": np.array(STATUS_CODES[self.status], dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "level": np.array(self.level, dtype=np.int32),
            "walk_speed": np.array(self.walk_speed, dtype=np.float32),
            "jump_speed": np.array(self.jump_speed, dtype=np.float32),

            # Player
            "player_y": np.array(self.player_y, dtype=np.float32),
            "player_height": np.array(self.player_height, dtype=np.float32),
            "jump_phase": np.array(JUMP_PHASE_CODES[self.jump_phase], dtype=np.int32),

            # Obstacles
            "obstacles_count": np.array(int(self.obstacle_mask.sum()), dtype=np.int32),
            "nearest_obstacle_x": np.array(self.nearest_obstacle_x, dtype=np.float32),
            "obstacle_x": self.obstacle_x.copy(),
            "obstacle_mask": self.obstacle_mask.copy(),
        }


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None, max_obstacles: int = MAX_OBSTACLES):
        if config is None:
            config = get_config()

        self._config = config
        self._max_obstacles = max_obstacles

        # Pre-allocate arrays
        self._obstacle_x = np.zeros(self._max_obstacles, dtype=np.float32)
        self._obstacle_mask = np.zeros(self._max_obstacles, dtype=bool)

    @property
    def max_obstacles(self) -> int:
        return self._max_obstacles

    def build(
        self,
        status: str,
        tick: int,
        player: "Player",
        obstacles: "ObstacleField",
        score: int,
        best_score: Optional[int],
        record_beaten: bool,
        level: int,
        walk_speed: float,
        jump_speed: float,
        scroll_offset: float,
        frame_index: int
    ) -> GameSnapshot:
        """Build a snapshot from current game state."""
        self._obstacle_x.fill(0)
        self._obstacle_mask.fill(False)

        positions = obstacles.positions
        count = min(len(positions), self._max_obstacles)
        if count:
            self._obstacle_x[:count] = positions[:count]
            self._obstacle_mask[:count] = True

        nearest = obstacles.nearest_ahead(0.0)
        nearest_x = nearest.x if nearest is not None else -1.0

        return GameSnapshot(
            status=status,
            tick=tick,
            score=score,
            best_score=best_score,
            record_beaten=record_beaten,
            level=level,
            walk_speed=walk_speed,
            jump_speed=jump_speed,
            player_x=player.x,
            player_y=player.y,
            player_size=player.size,
            jump_phase=player.phase.value,
            ground_y=player.ground_y,
            apex_y=player.apex_y,
            field_width=float(self._config.field.width),
            field_height=float(self._config.field.height),
            obstacle_size=obstacles.size,
            scroll_offset=scroll_offset,
            frame_index=frame_index,
            obstacles=positions,
            nearest_obstacle_x=nearest_x,
            # Copies so earlier snapshots are not overwritten by later builds
            obstacle_x=self._obstacle_x.copy(),
            obstacle_mask=self._obstacle_mask.copy(),
        )
