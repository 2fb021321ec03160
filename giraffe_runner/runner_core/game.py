"""
Core Game
=========

Main game orchestrator combining jump physics, obstacles, difficulty, scoring
and collision into a per-tick state machine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from giraffe_runner.runner_core.animation import ParallaxScroll, RunAnimation
from giraffe_runner.runner_core.config_loader import GameConfig, get_config
from giraffe_runner.runner_core.obstacles import ObstacleField
from giraffe_runner.runner_core.player import JumpPhase, Player
from giraffe_runner.runner_core.rng import ObstacleSpawner
from giraffe_runner.runner_core.rules import CollisionRules, DifficultyRules, SpawnRules
from giraffe_runner.runner_core.scoring import ScoreTracker
from giraffe_runner.runner_core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    """Run state. FAILED is terminal until reset()."""
    RUNNING = "running"
    FAILED = "failed"


@dataclass(frozen=True)
class InputState:
    """Edge events received since the previous tick."""
    jump_begin: bool = False     # Key went down
    jump_release: bool = False   # Key went up


@dataclass
class StepResult:
    """Result of a single tick."""
    status: RunStatus
    snapshot: GameSnapshot
    collided: bool = False
    record_beaten: bool = False
    level_up: bool = False
    spawned: bool = False
    culled: int = 0
    delta_score: int = 0


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Player jump phases
    - Obstacle spawn, scroll and culling
    - Difficulty ramp
    - Scoring
    - Collision / run termination
    - Run animation and background scroll
    - State snapshots

    One step = one display frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducible obstacle gaps.
        """
        if config is None:
            config = get_config()

        self._config = config

        # Initialize subsystems
        self._player = Player(config)
        self._obstacles = ObstacleField(config)
        self._spawner = ObstacleSpawner(config, seed)
        self._difficulty = DifficultyRules(config)
        self._spawn_rules = SpawnRules(config)
        self._collision = CollisionRules(config)
        self._scorer = ScoreTracker()
        self._animation = RunAnimation(config)
        self._scroll = ParallaxScroll(config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self._tick: int = 0
        self._status: RunStatus = RunStatus.RUNNING

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def is_over(self) -> bool:
        """True if the run has failed."""
        return self._status is RunStatus.FAILED

    @property
    def tick(self) -> int:
        """Ticks simulated in the current run."""
        return self._tick

    @property
    def player(self) -> Player:
        return self._player

    @property
    def jump_phase(self) -> JumpPhase:
        return self._player.phase

    @property
    def obstacles(self) -> ObstacleField:
        return self._obstacles

    @property
    def spawner(self) -> ObstacleSpawner:
        return self._spawner

    @property
    def scorer(self) -> ScoreTracker:
        return self._scorer

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def best_score(self) -> Optional[int]:
        """Best score of this process, or None."""
        return self._scorer.best

    @property
    def level(self) -> int:
        return self._difficulty.level

    @property
    def walk_speed(self) -> float:
        return self._difficulty.state.walk_speed

    @property
    def jump_speed(self) -> float:
        return self._difficulty.state.jump_speed

    @property
    def spawn_interval(self) -> int:
        """Ticks between spawns at the current level."""
        return self._spawn_rules.spawn_interval(self.level)

    @property
    def scroll_offset(self) -> float:
        return self._scroll.offset

    @property
    def frame_index(self) -> int:
        return self._animation.frame_index

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Start a new run. The best score is kept.

        Args:
            seed: Reseeds the obstacle gaps. If None the random stream
                continues, so each run gets a new course.

        Returns:
            Initial game snapshot.
        """
        self._player.reset()
        self._obstacles.clear()
        self._spawner.reset(seed)
        self._difficulty.reset()
        self._scorer.reset()
        self._animation.reset()
        self._scroll.reset()

        self._tick = 0
        self._status = RunStatus.RUNNING

        return self._build_snapshot()

    def apply_input(self, inp: InputState) -> None:
        """Apply jump edge events. Ignored once the run has failed."""
        if self.is_over:
            return
        if inp.jump_begin:
            self._player.begin_jump()
        if inp.jump_release:
            self._player.release_jump()

    def advance(self, inp: Optional[InputState] = None) -> StepResult:
        """
        Execute one tick.

        Args:
            inp: Edge events since the previous tick. None means no input.

        Returns:
            StepResult with the new status and snapshot.
        """
        if self.is_over:
            # Run already ended, nothing moves until reset()
            return StepResult(status=self._status, snapshot=self._build_snapshot())

        if inp is not None:
            self.apply_input(inp)

        self._tick += 1

        if self._collision.check(self._player, self._obstacles):
            record = self._scorer.commit_run()
            self._status = RunStatus.FAILED
            logger.debug(
                "Collision at tick %d: score=%d best=%s record=%s",
                self._tick, self._scorer.score, self._scorer.best, record
            )
            return StepResult(
                status=self._status,
                snapshot=self._build_snapshot(),
                collided=True,
                record_beaten=record
            )

        level_up = self._difficulty.update(self._tick, self._scorer.score)
        if level_up:
            logger.debug(
                "Level %d at tick %d (walk_speed=%.1f, spawn_interval=%d)",
                self.level, self._tick, self.walk_speed, self.spawn_interval
            )

        spawned = self._spawn_rules.should_spawn(self._tick, self.level)
        if spawned:
            obstacle = self._obstacles.spawn(self._spawner.next_spawn_x())
            logger.debug("Spawned bush %d at x=%.1f (tick %d)", obstacle.uid, obstacle.x, self._tick)

        self._player.update(self.jump_speed)

        delta_score = self._scorer.accrue(self._tick)

        culled = self._obstacles.advance(self.walk_speed)

        if self._player.is_grounded:
            self._animation.update(self.walk_speed)
        self._scroll.update(self.walk_speed)

        return StepResult(
            status=self._status,
            snapshot=self._build_snapshot(),
            level_up=level_up,
            spawned=spawned,
            culled=culled,
            delta_score=delta_score
        )

    def run_ticks(self, count: int, inp: Optional[InputState] = None) -> StepResult:
        """
        Advance up to count ticks with the same input, stopping on failure.

        Returns:
            Result of the last tick executed.
        """
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")

        result = self.advance(inp)
        for _ in range(count - 1):
            if result.status is RunStatus.FAILED:
                break
            result = self.advance()
        return result

    def snapshot(self) -> GameSnapshot:
        """Snapshot of the current state without advancing."""
        return self._build_snapshot()

    def _build_snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        difficulty = self._difficulty.state
        return self._snapshot_builder.build(
            status=self._status.value,
            tick=self._tick,
            player=self._player,
            obstacles=self._obstacles,
            score=self._scorer.score,
            best_score=self._scorer.best,
            record_beaten=self._scorer.record_beaten,
            level=difficulty.level,
            walk_speed=difficulty.walk_speed,
            jump_speed=difficulty.jump_speed,
            scroll_offset=self._scroll.offset,
            frame_index=self._animation.frame_index
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "best_score": self._scorer.best,
            "tick": self._tick,
            "level": self.level,
            "walk_speed": self.walk_speed,
            "obstacles": len(self._obstacles),
            "status": self._status.value,
        }

    def hit_window(self) -> Tuple[float, float]:
        """Horizontal band (exclusive left, inclusive right) where bushes hit."""
        return (0.0, self._collision.window)
