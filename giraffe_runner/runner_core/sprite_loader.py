"""
Sprite Loader
==============

Loads giraffe, bush and background images and slices the run sprite sheet.
Missing or unreadable images are replaced by procedurally drawn surfaces of
the same nominal size, so the game runs without any asset files.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Dict, Optional, Tuple

import pygame

from giraffe_runner.runner_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).parent.parent / "assets"

# Sprite name -> file name in the assets directory
SPRITE_FILES = {
    "giraffe": "giraffe.png",
    "giraffe_run": "giraffe_run.png",   # Horizontal sheet of frame_count frames
    "dead_giraffe": "dead-giraffe.png",
    "bush": "bush.png",
    "background": "background.png",
}

# Palette for the procedural fallbacks
GIRAFFE_COLOR = (236, 186, 74)
GIRAFFE_SPOTS = (150, 92, 40)
DEAD_COLOR = (160, 150, 140)
BUSH_COLOR = (60, 140, 60)
BUSH_HIGHLIGHT = (100, 180, 90)
SKY_TOP = (180, 220, 250)
SKY_BOTTOM = (240, 245, 230)
HILL_COLOR = (170, 200, 140)


class SpriteLoader:
    """
    Loads and caches game sprites.

    Handles file loading, sheet slicing, scaling, and fallback generation.
    """

    def __init__(self, config: Optional[GameConfig] = None, assets_dir: Optional[Path] = None):
        """
        Initialize sprite loader.

        Args:
            config: Game configuration. Uses default if None.
            assets_dir: Path to the assets directory. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._assets_dir = assets_dir or ASSETS_DIR
        self._player_size = int(config.player.size)
        self._obstacle_size = int(config.obstacle.size)
        self._frame_count = config.animation.frame_count

        self._sprites: Dict[str, pygame.Surface] = {}
        self._fallbacks: set = set()

        self._load_all()

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def frame_size(self) -> Tuple[int, int]:
        """Nominal size of one run-sheet frame."""
        return (self._player_size, self._player_size)

    def is_fallback(self, name: str) -> bool:
        """True if the named sprite was drawn procedurally."""
        return name in self._fallbacks

    def get_sprite(self, name: str) -> pygame.Surface:
        """Get a sprite at its nominal size."""
        if name not in self._sprites:
            raise KeyError(f"Unknown sprite: {name}")
        return self._sprites[name]

    def frame_rect(self, index: int) -> pygame.Rect:
        """Area of run frame `index` inside the run sheet."""
        w, h = self.frame_size
        return pygame.Rect((index % self._frame_count) * w, 0, w, h)

    def _load_all(self) -> None:
        sizes = {
            "giraffe": (self._player_size, self._player_size),
            "giraffe_run": (self._player_size * self._frame_count, self._player_size),
            "dead_giraffe": (self._player_size, self._player_size),
            "bush": (self._obstacle_size, self._obstacle_size),
            "background": (
                int(self._config.animation.background_width),
                int(self._config.field.height)
            ),
        }

        for name, size in sizes.items():
            surface = self._load_file(SPRITE_FILES[name], size)
            if surface is None:
                surface = self._generate(name, size)
                self._fallbacks.add(name)
            self._sprites[name] = surface

    def _load_file(self, filename: str, size: Tuple[int, int]) -> Optional[pygame.Surface]:
        """Load and scale an image file, or None if unavailable."""
        path = self._assets_dir / filename
        if not path.exists():
            return None

        try:
            image = pygame.image.load(str(path))
        except pygame.error as e:
            logger.warning("Could not load %s, using generated sprite: %s", path, e)
            return None

        if pygame.display.get_surface() is not None:
            image = image.convert_alpha()

        if image.get_size() != size:
            image = pygame.transform.smoothscale(image, size)
        return image

    def _generate(self, name: str, size: Tuple[int, int]) -> pygame.Surface:
        if name == "giraffe":
            return self._draw_giraffe(size[1], leg_swing=0.0, color=GIRAFFE_COLOR)
        if name == "giraffe_run":
            return self._draw_run_sheet(size[1])
        if name == "dead_giraffe":
            return self._draw_dead_giraffe(size[1])
        if name == "bush":
            return self._draw_bush(size[0])
        return self._draw_background(size)

    def _draw_giraffe(
        self,
        size: int,
        leg_swing: float,
        color: Tuple[int, int, int]
    ) -> pygame.Surface:
        """Side view facing right; leg_swing in [-1, 1] offsets the feet."""
        surface = pygame.Surface((size, size), pygame.SRCALPHA)
        u = size / 12.0

        # Legs
        hip_y = int(7 * u)
        for i, hip_x in enumerate((2.5 * u, 4 * u, 6.5 * u, 8 * u)):
            sign = 1 if i % 2 == 0 else -1
            foot_x = hip_x + sign * leg_swing * 1.2 * u
            pygame.draw.line(
                surface, GIRAFFE_SPOTS,
                (int(hip_x), hip_y), (int(foot_x), size - 1),
                max(2, int(0.6 * u))
            )

        # Body
        body = pygame.Rect(int(1.5 * u), int(4.5 * u), int(7.5 * u), int(3 * u))
        pygame.draw.ellipse(surface, color, body)

        # Neck and head
        pygame.draw.polygon(surface, color, [
            (int(7 * u), int(5 * u)), (int(8.8 * u), int(5 * u)),
            (int(10.4 * u), int(1.2 * u)), (int(9.4 * u), int(0.8 * u)),
        ])
        head = pygame.Rect(int(9 * u), int(0.2 * u), int(2.8 * u), int(1.6 * u))
        pygame.draw.ellipse(surface, color, head)
        pygame.draw.circle(surface, (30, 30, 30), (int(10.6 * u), int(0.8 * u)), max(1, int(0.25 * u)))

        # Spots
        for sx, sy in ((3 * u, 5.5 * u), (5 * u, 5 * u), (6.5 * u, 6 * u), (8.8 * u, 3 * u)):
            pygame.draw.circle(surface, GIRAFFE_SPOTS, (int(sx), int(sy)), max(1, int(0.5 * u)))

        return surface

    def _draw_run_sheet(self, size: int) -> pygame.Surface:
        sheet = pygame.Surface((size * self._frame_count, size), pygame.SRCALPHA)
        for i in range(self._frame_count):
            swing = math.sin(2 * math.pi * i / self._frame_count)
            sheet.blit(self._draw_giraffe(size, leg_swing=swing, color=GIRAFFE_COLOR), (i * size, 0))
        return sheet

    def _draw_dead_giraffe(self, size: int) -> pygame.Surface:
        surface = self._draw_giraffe(size, leg_swing=0.0, color=DEAD_COLOR)
        u = size / 12.0
        # Crossed-out eye
        cx, cy, r = int(10.6 * u), int(0.8 * u), max(2, int(0.4 * u))
        pygame.draw.line(surface, (200, 40, 40), (cx - r, cy - r), (cx + r, cy + r), 2)
        pygame.draw.line(surface, (200, 40, 40), (cx - r, cy + r), (cx + r, cy - r), 2)
        return surface

    def _draw_bush(self, size: int) -> pygame.Surface:
        surface = pygame.Surface((size, size), pygame.SRCALPHA)
        r = size // 4
        for cx, cy in ((r, size - r), (size // 2, size - 2 * r), (size - r, size - r), (size // 2, size - r)):
            pygame.draw.circle(surface, BUSH_COLOR, (cx, cy), r)
        pygame.draw.circle(surface, BUSH_HIGHLIGHT, (size // 2 - r // 3, size - 2 * r - r // 3), max(1, r // 3))
        return surface

    def _draw_background(self, size: Tuple[int, int]) -> pygame.Surface:
        width, height = size
        surface = pygame.Surface((width, height))
        for y in range(height):
            t = y / max(1, height - 1)
            c = tuple(int(a * (1 - t) + b * t) for a, b in zip(SKY_TOP, SKY_BOTTOM))
            pygame.draw.line(surface, c, (0, y), (width, y))

        # Hills repeat with the tile width so the seam lines up
        horizon = int(height * 0.7)
        points = [(0, height)]
        for x in range(0, width + 1, 10):
            y = horizon - int(25 * (1 + math.sin(2 * math.pi * 2 * x / width)))
            points.append((x, y))
        points.append((width, height))
        pygame.draw.polygon(surface, HILL_COLOR, points)
        return surface


_sprite_loaders: Dict[GameConfig, SpriteLoader] = {}


def get_sprite_loader(config: Optional[GameConfig] = None) -> SpriteLoader:
    """Get a cached sprite loader for the given configuration."""
    if config is None:
        config = get_config()
    if config not in _sprite_loaders:
        _sprite_loaders[config] = SpriteLoader(config)
    return _sprite_loaders[config]
