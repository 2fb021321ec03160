"""
Full Pygame Renderer
====================

Draws a GameSnapshot with pygame: sliding background, sprite-sheet run
animation, bushes and the score overlay. Supports both display mode (human
play) and headless RGB output, plus screenshot export.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import pygame

from giraffe_runner.runner_core.config_loader import GameConfig, get_config
from giraffe_runner.runner_core.sprite_loader import SpriteLoader, get_sprite_loader
from giraffe_runner.runner_core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)


def score_label(snapshot: GameSnapshot) -> str:
    """Score line, with the record appended once one exists."""
    label = f"Score: {snapshot.score}"
    if snapshot.best_score is not None:
        label += f" (Record {snapshot.best_score})"
    return label


class PygameRenderer:
    """
    Full-featured renderer using pygame.

    Supports:
    - Tiled background scrolled by the snapshot's parallax offset
    - Run frames cropped from a sprite sheet by the snapshot's frame index
    - Score/difficulty overlay and game-over banner
    - Screen display for human mode
    - RGB array output for agents
    - PNG screenshots of the last frame
    """

    def __init__(self, config: Optional[GameConfig] = None, sprites: Optional[SpriteLoader] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            sprites: Sprite loader. The shared loader for config if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        # Initialize pygame
        if not pygame.get_init():
            pygame.init()

        self._sprites = sprites or get_sprite_loader(config)

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._last_frame: Optional[pygame.Surface] = None

        # Fonts
        pygame.font.init()
        self._font = pygame.font.Font(None, 36)
        self._font_large = pygame.font.Font(None, 64)

        # Colors
        self._text_color = (40, 40, 40)
        self._banner_color = (255, 255, 255, 190)
        self._fail_color = (200, 50, 50)

    @property
    def field_size(self) -> Tuple[int, int]:
        return (int(self._config.field.width), int(self._config.field.height))

    @property
    def sprites(self) -> SpriteLoader:
        return self._sprites

    def draw(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Paint one frame of the snapshot onto a field-sized surface."""
        self._draw_background(surface, snapshot.scroll_offset)

        for x in snapshot.obstacles:
            self._draw_bush(surface, x)

        self._draw_player(surface, snapshot)
        self._draw_ui(surface, snapshot)

        if not snapshot.is_running:
            self._draw_game_over(surface, snapshot)

    def render(self, snapshot: GameSnapshot) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface(self.field_size)
        self.draw(surface, snapshot)
        self._last_frame = surface
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(self, snapshot: GameSnapshot) -> None:
        """Render to the pygame window, creating it on first use."""
        if self._screen is None:
            self._screen = pygame.display.set_mode(self.field_size)
            pygame.display.set_caption("Giraffe Runner")

        self.draw(self._screen, snapshot)
        self._last_frame = self._screen
        pygame.display.flip()

    def save_screenshot(self, path: Union[str, Path]) -> Path:
        """
        Save the last rendered frame as an image file.

        Raises:
            RuntimeError: If nothing has been rendered yet.
        """
        if self._last_frame is None:
            raise RuntimeError("Nothing rendered yet")

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        pygame.image.save(self._last_frame, str(path))
        logger.info("Saved screenshot to %s", path)
        return path

    def _draw_background(self, surface: pygame.Surface, offset: float) -> None:
        background = self._sprites.get_sprite("background")
        tile_width = background.get_width()
        width = surface.get_width()

        # Tile from -offset until the field is covered
        x = -int(offset)
        while x < width:
            surface.blit(background, (x, 0))
            x += tile_width

    def _draw_bush(self, surface: pygame.Surface, x: float) -> None:
        size = self._config.obstacle.size
        y = self._config.field.height - size + self._config.obstacle.sink
        surface.blit(self._sprites.get_sprite("bush"), (int(x), int(y)))

    def _draw_player(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        pos = (int(snapshot.player_x), int(snapshot.player_y))

        if not snapshot.is_running:
            surface.blit(self._sprites.get_sprite("dead_giraffe"), pos)
        elif snapshot.jump_phase == "grounded":
            surface.blit(
                self._sprites.get_sprite("giraffe_run"),
                pos,
                area=self._sprites.frame_rect(snapshot.frame_index)
            )
        else:
            surface.blit(self._sprites.get_sprite("giraffe"), pos)

    def _draw_ui(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        score_surface = self._font.render(score_label(snapshot), True, self._text_color)
        surface.blit(score_surface, (10, 10))

        level_surface = self._font.render(f"Difficulty: {snapshot.level}", True, self._text_color)
        surface.blit(level_surface, (10, 40))

    def _draw_game_over(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        width, height = surface.get_size()
        banner = pygame.Surface((width, 120), pygame.SRCALPHA)
        banner.fill(self._banner_color)
        surface.blit(banner, (0, height // 2 - 60))

        title = "New record!" if snapshot.record_beaten else "Game over"
        title_surface = self._font_large.render(title, True, self._fail_color)
        surface.blit(title_surface, title_surface.get_rect(center=(width // 2, height // 2 - 20)))

        hint = self._font.render("Enter: start again   S: screenshot", True, self._text_color)
        surface.blit(hint, hint.get_rect(center=(width // 2, height // 2 + 30)))

    def handle_events(self) -> bool:
        """Handle pygame events. Returns False if quit requested."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
        return True

    def close(self) -> None:
        """Clean up pygame resources."""
        self._last_frame = None
        if self._screen is not None:
            self._screen = None
            pygame.display.quit()
