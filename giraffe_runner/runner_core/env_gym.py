"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the runner. One step is one tick.
Reward is the score gained during the step.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from giraffe_runner.runner_core.config_loader import GameConfig, load_config
from giraffe_runner.runner_core.game import CoreGame, InputState, RunStatus
from giraffe_runner.runner_core.state_snapshot import MAX_OBSTACLES, GameSnapshot

logger = logging.getLogger(__name__)

# Discrete actions
ACTION_NOOP = 0
ACTION_JUMP = 1
ACTION_RELEASE = 2

ACTION_INPUTS = {
    ACTION_NOOP: InputState(),
    ACTION_JUMP: InputState(jump_begin=True),
    ACTION_RELEASE: InputState(jump_release=True),
}


class GiraffeRunnerEnv(gym.Env):
    """
    Giraffe endless runner as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = no-op, 1 = jump (press), 2 = release (short hop).

    Observation Space:
        Dict with run state, player state and padded obstacle positions.

    Reward:
        Score gained this step (0 or 1).

    Termination:
        terminated when the giraffe hits a bush; truncated after max_ticks
        ticks if a cap is set.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        max_ticks: Optional[int] = None,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to a config YAML. Uses default if None.
            config: Already loaded configuration (takes precedence).
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            max_ticks: Truncate episodes after this many ticks. None for no cap.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self._config = config if config is not None else load_config(config_path)
        self.render_mode = render_mode
        self._max_ticks = max_ticks

        self._game = CoreGame(config=self._config)
        self._last_snapshot: GameSnapshot = self._game.snapshot()

        # Initialize renderer (lazy)
        self._renderer = None
        self._window_closed = False

        self.action_space = spaces.Discrete(3)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        cfg = self._config
        max_level = cfg.difficulty.max_level
        max_walk = cfg.physics.walk_speed + max_level * cfg.difficulty.walk_speed_coef
        max_jump = cfg.physics.jump_speed + max_level * cfg.difficulty.jump_speed_coef
        far_right = self._game.spawner.max_spawn_x

        return spaces.Dict({
            "status": spaces.Discrete(2),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "level": spaces.Box(low=1, high=max_level, shape=(), dtype=np.int32),
            "walk_speed": spaces.Box(low=0, high=max_walk, shape=(), dtype=np.float32),
            "jump_speed": spaces.Box(low=0, high=max_jump, shape=(), dtype=np.float32),
            "player_y": spaces.Box(low=cfg.apex_y, high=cfg.ground_y, shape=(), dtype=np.float32),
            "player_height": spaces.Box(low=0, high=cfg.player.jump_height, shape=(), dtype=np.float32),
            "jump_phase": spaces.Discrete(3),
            "obstacles_count": spaces.Box(low=0, high=MAX_OBSTACLES, shape=(), dtype=np.int32),
            "nearest_obstacle_x": spaces.Box(low=-1, high=far_right, shape=(), dtype=np.float32),
            "obstacle_x": spaces.Box(low=cfg.obstacle.cull_x, high=far_right, shape=(MAX_OBSTACLES,), dtype=np.float32),
            "obstacle_mask": spaces.MultiBinary(MAX_OBSTACLES),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for obstacle gaps.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._last_snapshot = self._game.reset(seed=seed)

        obs = self._last_snapshot.to_obs_dict()
        info = self._game.get_info()
        info["delta_score"] = 0

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Args:
            action: 0 = no-op, 1 = jump, 2 = release.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = action.item()
        action = int(action)
        if action not in ACTION_INPUTS:
            raise ValueError(f"Invalid action {action}; expected 0, 1 or 2")

        result = self._game.advance(ACTION_INPUTS[action])
        self._last_snapshot = result.snapshot

        obs = result.snapshot.to_obs_dict()
        reward = float(result.delta_score)
        terminated = result.status is RunStatus.FAILED
        truncated = (
            not terminated
            and self._max_ticks is not None
            and self._game.tick >= self._max_ticks
        )

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["level_up"] = result.level_up
        info["record_beaten"] = result.record_beaten

        if result.collided:
            logger.debug("Episode terminated at tick %d with score %d", self._game.tick, self._game.score)

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, bool(truncated), info

    def _init_renderer(self) -> None:
        from giraffe_runner.runner_core.render_full_pygame import PygameRenderer
        self._renderer = PygameRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode is None or self._window_closed:
            return None

        if self._renderer is None:
            self._init_renderer()

        if self.render_mode == "rgb_array":
            return self._renderer.render(self._last_snapshot)

        self._renderer.render_to_screen(self._last_snapshot)
        if not self._renderer.handle_events():
            # Window closed by the user; the episode keeps running headless
            logger.info("Render window closed")
            self._window_closed = True
            self.close()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def window_closed(self) -> bool:
        """True once the user closed the human-mode window."""
        return self._window_closed

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
