"""
Runner Core - The game simulation and its hosts.

This module provides the per-tick simulation, the frame driver that schedules
it, the pygame renderer and a Gymnasium environment wrapper.

Main exports:
- CoreGame: Per-tick simulation state machine
- InputState / RunStatus / JumpPhase: Simulation inputs and states
- FrameDriver: Frame scheduling with error containment
- GiraffeRunnerEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from giraffe_runner.runner_core.config_loader import (
    GameConfig,
    get_config,
    load_classic_config,
    load_config,
)
from giraffe_runner.runner_core.frame_driver import (
    FrameDriver,
    ManualScheduler,
    PygameScheduler,
    Scheduler,
)
from giraffe_runner.runner_core.game import CoreGame, InputState, RunStatus, StepResult
from giraffe_runner.runner_core.player import JumpPhase
from giraffe_runner.runner_core.state_snapshot import GameSnapshot
from giraffe_runner.runner_core.env_gym import GiraffeRunnerEnv

__all__ = [
    "GameConfig",
    "get_config",
    "load_config",
    "load_classic_config",
    "FrameDriver",
    "ManualScheduler",
    "PygameScheduler",
    "Scheduler",
    "CoreGame",
    "InputState",
    "RunStatus",
    "StepResult",
    "JumpPhase",
    "GameSnapshot",
    "GiraffeRunnerEnv",
]
