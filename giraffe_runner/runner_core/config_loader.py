"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "game_config.yaml"
CLASSIC_CONFIG_NAME = "classic_config.yaml"


@dataclass(frozen=True)
class FieldConfig:
    """Play-field geometry."""
    width: int
    height: int


@dataclass(frozen=True)
class PlayerConfig:
    """Giraffe slot, size and jump height."""
    x: float             # Fixed horizontal slot
    size: float          # Square sprite size
    jump_height: float   # Apex distance above ground


@dataclass(frozen=True)
class ObstacleConfig:
    """Bush geometry and culling."""
    size: float
    cull_x: float        # Obstacles at or left of this are removed
    sink: float          # Draw offset below the field bottom edge


@dataclass(frozen=True)
class PhysicsConfig:
    """Base speeds before difficulty coefficients are applied."""
    jump_speed: float
    walk_speed: float


@dataclass(frozen=True)
class CollisionConfig:
    """Bounding-box heuristic parameters."""
    height_margin: float
    window_ratio: float


@dataclass(frozen=True)
class DifficultyConfig:
    """Difficulty ramp parameters."""
    initial_level: int
    max_level: int
    interval_ticks: int
    jump_speed_coef: float
    walk_speed_coef: float


@dataclass(frozen=True)
class SpawnConfig:
    """Obstacle spawn cadence and gap randomization."""
    base_interval: int
    interval_per_level: int
    min_interval: int
    gap_unit_sizes: float
    gap_multiplier_min: float
    gap_multiplier_max: float


@dataclass(frozen=True)
class AnimationConfig:
    """Run animation and parallax background."""
    frame_count: int
    stride: float
    parallax: float
    background_width: float


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    Use dataclasses.replace() to derive variants (e.g. in tests).
    """
    field: FieldConfig
    player: PlayerConfig
    obstacle: ObstacleConfig
    physics: PhysicsConfig
    collision: CollisionConfig
    difficulty: DifficultyConfig
    spawn: SpawnConfig
    animation: AnimationConfig

    @property
    def ground_y(self) -> float:
        """Vertical position of the giraffe when standing on the ground."""
        return self.field.height - self.player.size

    @property
    def apex_y(self) -> float:
        """Highest point of a full jump (smallest y)."""
        return self.ground_y - self.player.jump_height

    @property
    def gap_unit(self) -> float:
        """Base unit for randomized spawn distances."""
        return self.player.size * self.spawn.gap_unit_sizes

    @property
    def collision_window(self) -> float:
        """Right edge of the horizontal hit window."""
        return self.collision.window_ratio * self.player.size

    @property
    def near_ground_threshold(self) -> float:
        """Height above ground below which the giraffe can hit a bush."""
        return self.obstacle.size - self.collision.height_margin


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.field.width <= 0 or config.field.height <= 0:
        raise ValueError(
            f"Field size must be positive, got {config.field.width}x{config.field.height}"
        )

    if config.player.size <= 0 or config.player.size > config.field.height:
        raise ValueError(f"player.size must be in (0, field.height], got {config.player.size}")

    if config.player.jump_height <= 0 or config.apex_y < 0:
        raise ValueError(
            f"player.jump_height must be positive and keep the apex on the field, "
            f"got {config.player.jump_height}"
        )

    if config.physics.jump_speed <= 0:
        raise ValueError(f"physics.jump_speed must be positive, got {config.physics.jump_speed}")

    if config.physics.walk_speed + config.difficulty.initial_level * config.difficulty.walk_speed_coef <= 0:
        raise ValueError("Initial walk speed must be positive")

    if config.difficulty.jump_speed_coef < 0 or config.difficulty.walk_speed_coef < 0:
        raise ValueError("Difficulty coefficients must not be negative")

    difficulty = config.difficulty
    if not 1 <= difficulty.initial_level <= difficulty.max_level:
        raise ValueError(
            f"Difficulty levels must satisfy 1 <= initial_level ({difficulty.initial_level}) "
            f"<= max_level ({difficulty.max_level})"
        )

    if difficulty.interval_ticks <= 0:
        raise ValueError(f"difficulty.interval_ticks must be positive, got {difficulty.interval_ticks}")

    spawn = config.spawn
    if spawn.min_interval < 1 or spawn.base_interval < 1:
        raise ValueError(
            f"Spawn intervals must be at least 1 tick, got base={spawn.base_interval} "
            f"min={spawn.min_interval}"
        )

    if spawn.interval_per_level < 0:
        raise ValueError(f"spawn.interval_per_level must not be negative, got {spawn.interval_per_level}")

    if not 0 <= spawn.gap_multiplier_min <= spawn.gap_multiplier_max:
        raise ValueError(
            f"Gap multipliers must satisfy 0 <= min ({spawn.gap_multiplier_min}) "
            f"<= max ({spawn.gap_multiplier_max})"
        )

    if config.collision.window_ratio <= 0:
        raise ValueError(f"collision.window_ratio must be positive, got {config.collision.window_ratio}")

    if config.obstacle.cull_x >= 0:
        raise ValueError(f"obstacle.cull_x must be left of the field, got {config.obstacle.cull_x}")

    animation = config.animation
    if animation.frame_count < 1:
        raise ValueError(f"animation.frame_count must be >= 1, got {animation.frame_count}")
    if animation.stride <= 0 or animation.background_width <= 0:
        raise ValueError("animation.stride and animation.background_width must be positive")
    if animation.parallax < 0:
        raise ValueError(f"animation.parallax must not be negative, got {animation.parallax}")


def default_config_path(name: str = DEFAULT_CONFIG_NAME) -> Path:
    """Path of a configuration file shipped with the package."""
    return Path(os.path.dirname(os.path.dirname(__file__))) / name


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to a config YAML. If None, uses the packaged
            game_config.yaml.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = default_config_path()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    try:
        field_data = raw["field"]
        field = FieldConfig(
            width=int(field_data["width"]),
            height=int(field_data["height"])
        )

        player_data = raw["player"]
        player = PlayerConfig(
            x=float(player_data.get("x", 10)),
            size=float(player_data["size"]),
            jump_height=float(player_data.get("jump_height", 2 * float(player_data["size"])))
        )

        obstacle_data = raw["obstacle"]
        obstacle = ObstacleConfig(
            size=float(obstacle_data["size"]),
            cull_x=float(obstacle_data.get("cull_x", -100)),
            sink=float(obstacle_data.get("sink", 0))
        )

        physics_data = raw["physics"]
        physics = PhysicsConfig(
            jump_speed=float(physics_data["jump_speed"]),
            walk_speed=float(physics_data["walk_speed"])
        )

        collision_data = raw["collision"]
        collision = CollisionConfig(
            height_margin=float(collision_data.get("height_margin", 20)),
            window_ratio=float(collision_data["window_ratio"])
        )

        difficulty_data = raw["difficulty"]
        difficulty = DifficultyConfig(
            initial_level=int(difficulty_data.get("initial_level", 1)),
            max_level=int(difficulty_data["max_level"]),
            interval_ticks=int(difficulty_data["interval_ticks"]),
            jump_speed_coef=float(difficulty_data.get("jump_speed_coef", 0)),
            walk_speed_coef=float(difficulty_data.get("walk_speed_coef", 1))
        )

        spawn_data = raw["spawn"]
        spawn = SpawnConfig(
            base_interval=int(spawn_data["base_interval"]),
            interval_per_level=int(spawn_data.get("interval_per_level", 0)),
            min_interval=int(spawn_data.get("min_interval", 1)),
            gap_unit_sizes=float(spawn_data["gap_unit_sizes"]),
            gap_multiplier_min=float(spawn_data["gap_multiplier_min"]),
            gap_multiplier_max=float(spawn_data["gap_multiplier_max"])
        )

        # Animation section is optional (static sprites)
        animation_data = raw.get("animation", {})
        animation = AnimationConfig(
            frame_count=int(animation_data.get("frame_count", 1)),
            stride=float(animation_data.get("stride", 24.0)),
            parallax=float(animation_data.get("parallax", 0.0)),
            background_width=float(animation_data.get("background_width", field.width))
        )
    except KeyError as e:
        raise ValueError(f"Missing config key {e} in {config_path}") from e

    config = GameConfig(
        field=field,
        player=player,
        obstacle=obstacle,
        physics=physics,
        collision=collision,
        difficulty=difficulty,
        spawn=spawn,
        animation=animation
    )

    _validate_config(config)
    logger.debug("Loaded config from %s", config_path)
    return config


def load_classic_config() -> GameConfig:
    """Load the first-variant tuning shipped as classic_config.yaml."""
    return load_config(str(default_config_path(CLASSIC_CONFIG_NAME)))


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
