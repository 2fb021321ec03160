"""
Human Play Mode
================

Play the giraffe runner interactively with the keyboard.

Controls:
    - Space / Up: Jump (release early for a short hop)
    - Enter / R: Start again after a crash
    - S: Save a screenshot
    - ESC: Quit

Usage:
    python -m tools.play_human [--config PATH] [--seed SEED] [--fps FPS]
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import pygame

from giraffe_runner.runner_core.config_loader import GameConfig, load_classic_config, load_config
from giraffe_runner.runner_core.frame_driver import FrameDriver, PygameScheduler
from giraffe_runner.runner_core.game import CoreGame, InputState, RunStatus
from giraffe_runner.runner_core.render_full_pygame import PygameRenderer

logger = logging.getLogger(__name__)

JUMP_KEYS = (pygame.K_SPACE, pygame.K_UP)
RESTART_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_r)


class HumanPlayer:
    """
    Keyboard-driven game window.

    Key events between frames are folded into one InputState per tick.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: int = 60,
        screenshot_dir: Optional[Path] = None
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._screenshot_dir = screenshot_dir or Path.cwd() / "screenshots"

        pygame.init()
        self._game = CoreGame(config=config, seed=seed)
        self._game.reset()

        self._renderer = PygameRenderer(config)
        self._scheduler = PygameScheduler(fps=target_fps)
        self._driver = FrameDriver(self._scheduler, self._frame, self._renderer)

        # Edge events collected since the last frame
        self._jump_begin = False
        self._jump_release = False

    def run(self) -> Optional[int]:
        """Run the game loop. Returns the best score, if any."""
        print("=== Giraffe Runner ===")
        print("Space/Up to jump (release early for a short hop)")
        print("Enter or R to start again, S for a screenshot, ESC to quit")
        print()

        self._driver.start()
        try:
            self._scheduler.run()
        finally:
            self._driver.stop()
            self._renderer.close()
            pygame.quit()

        if self._driver.errors:
            logger.warning("%d frame(s) raised during the session", self._driver.errors)
        return self._game.best_score

    def _frame(self, renderer: PygameRenderer) -> None:
        """One display frame: input, one tick, paint."""
        if not self._handle_events(renderer):
            self._driver.stop()
            return

        inp = InputState(jump_begin=self._jump_begin, jump_release=self._jump_release)
        self._jump_begin = False
        self._jump_release = False

        result = self._game.advance(inp)
        if result.collided:
            best = self._game.best_score
            print(f"CRASH - Score: {self._game.score}  Best: {best if best is not None else '-'}")
            if result.record_beaten:
                print("  New record!")

        renderer.render_to_screen(result.snapshot)

    def _handle_events(self, renderer: PygameRenderer) -> bool:
        """Process pygame events. Returns False if quit requested."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                if event.key in JUMP_KEYS:
                    self._jump_begin = True
                elif event.key in RESTART_KEYS and self._game.status is RunStatus.FAILED:
                    self._restart()
                elif event.key == pygame.K_s:
                    self._screenshot(renderer)

            elif event.type == pygame.KEYUP and event.key in JUMP_KEYS:
                self._jump_release = True

        return True

    def _restart(self) -> None:
        """Start a new run, keeping the best score."""
        self._game.reset()
        self._jump_begin = False
        self._jump_release = False
        print("\n=== New Run ===\n")

    def _screenshot(self, renderer: PygameRenderer) -> None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        try:
            path = renderer.save_screenshot(self._screenshot_dir / f"giraffe_{stamp}.png")
        except (RuntimeError, pygame.error, OSError) as e:
            print(f"Screenshot failed: {e}")
            return
        print(f"Screenshot saved: {path}")


def main():
    parser = argparse.ArgumentParser(description="Play the giraffe runner interactively")
    parser.add_argument("--config", type=str, default=None, help="Path to a config YAML")
    parser.add_argument("--classic", action="store_true", help="Use the first-variant tuning")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--screenshot-dir", type=Path, default=None, help="Where S saves screenshots")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config = load_classic_config() if args.classic else load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    player = HumanPlayer(
        config=config,
        seed=args.seed,
        target_fps=args.fps,
        screenshot_dir=args.screenshot_dir
    )
    best = player.run()
    print(f"\nBest Score: {best if best is not None else '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
