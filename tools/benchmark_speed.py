"""
Performance Benchmark
=====================

Measures headless tick throughput of the core simulation and of the
Gymnasium environment, driven by a simple look-ahead autopilot.

Usage:
    python -m tools.benchmark_speed [--ticks N] [--seed S]
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from giraffe_runner.runner_core.config_loader import GameConfig, load_config
from giraffe_runner.runner_core.env_gym import ACTION_JUMP, ACTION_NOOP, GiraffeRunnerEnv
from giraffe_runner.runner_core.frame_driver import FrameDriver, ManualScheduler
from giraffe_runner.runner_core.game import CoreGame, InputState, RunStatus
from giraffe_runner.runner_core.state_snapshot import GameSnapshot

# Ticks of ascent needed before a bush reaches the hit window
LEAD_TICKS = 6


def autopilot_should_jump(snapshot: GameSnapshot, window_right: float) -> bool:
    """Jump when the nearest bush will enter the hit window within LEAD_TICKS."""
    if snapshot.jump_phase != "grounded" or snapshot.nearest_obstacle_x < 0:
        return False
    return snapshot.nearest_obstacle_x <= window_right + snapshot.walk_speed * LEAD_TICKS


def benchmark_core(
    config: GameConfig,
    num_ticks: int = 100_000,
    seed: int = 42
) -> dict:
    """
    Benchmark the simulation through the frame driver and a manual scheduler.

    Returns:
        Dict with timing results.
    """
    game = CoreGame(config=config, seed=seed)
    snapshot = game.reset(seed=seed)
    _, window_right = game.hit_window()
    crashes = 0

    def frame(_renderer: None) -> None:
        nonlocal snapshot, crashes
        jump = autopilot_should_jump(snapshot, window_right)
        result = game.advance(InputState(jump_begin=jump))
        snapshot = result.snapshot
        if result.status is RunStatus.FAILED:
            crashes += 1
            snapshot = game.reset()

    scheduler = ManualScheduler()
    driver = FrameDriver(scheduler, frame, None)

    start = time.perf_counter()
    driver.start()
    scheduler.run_until_idle(max_frames=num_ticks)
    driver.stop()
    elapsed = time.perf_counter() - start

    return {
        "mode": "core",
        "num_ticks": num_ticks,
        "elapsed_seconds": elapsed,
        "ticks_per_second": num_ticks / elapsed,
        "crashes": crashes,
        "best_score": game.best_score,
        "frame_errors": driver.errors,
    }


def benchmark_env(
    config: GameConfig,
    num_steps: int = 20_000,
    seed: int = 42
) -> dict:
    """
    Benchmark Gymnasium environment steps.

    Returns:
        Dict with timing results.
    """
    env = GiraffeRunnerEnv(config=config)
    _, window_right = env.game.hit_window()

    env.reset(seed=seed)
    episodes = 1
    start = time.perf_counter()

    for _ in range(num_steps):
        jump = autopilot_should_jump(env.game.snapshot(), window_right)
        _, _, terminated, truncated, _ = env.step(ACTION_JUMP if jump else ACTION_NOOP)
        if terminated or truncated:
            env.reset()
            episodes += 1

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "episodes": episodes,
    }


def main():
    parser = argparse.ArgumentParser(description="Benchmark the giraffe runner")
    parser.add_argument("--config", type=str, default=None, help="Path to a config YAML")
    parser.add_argument("--ticks", type=int, default=100_000, help="Core ticks to simulate")
    parser.add_argument("--steps", type=int, default=20_000, help="Env steps to simulate")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")

    args = parser.parse_args()
    logging.basicConfig(level=logging.WARNING)

    config = load_config(args.config)

    print("=" * 50)
    print("Giraffe Runner Benchmark")
    print("=" * 50)

    core = benchmark_core(config, num_ticks=args.ticks, seed=args.seed)
    print(f"\nCore: {core['ticks_per_second']:,.0f} ticks/s "
          f"({core['num_ticks']:,} ticks in {core['elapsed_seconds']:.2f}s)")
    print(f"  crashes={core['crashes']} best={core['best_score']} frame_errors={core['frame_errors']}")

    env = benchmark_env(config, num_steps=args.steps, seed=args.seed)
    print(f"\nEnv:  {env['steps_per_second']:,.0f} steps/s "
          f"({env['num_steps']:,} steps, {env['episodes']} episodes)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
