"""
Tests for obstacle spawning, scrolling and culling.
"""

import pytest

from giraffe_runner.runner_core.game import CoreGame, RunStatus
from giraffe_runner.runner_core.obstacles import ObstacleField
from giraffe_runner.runner_core.rng import ObstacleSpawner
from giraffe_runner.runner_core.rules import SpawnRules


class TestObstacleSpawner:
    """Test the seeded spawn-position source."""

    def test_deterministic_with_seed(self, config):
        a = ObstacleSpawner(config, seed=42)
        b = ObstacleSpawner(config, seed=42)

        assert [a.next_spawn_x() for _ in range(20)] == [b.next_spawn_x() for _ in range(20)]

    def test_different_seeds_differ(self, config):
        a = ObstacleSpawner(config, seed=1)
        b = ObstacleSpawner(config, seed=2)

        assert [a.next_spawn_x() for _ in range(5)] != [b.next_spawn_x() for _ in range(5)]

    def test_positions_in_range(self, config):
        spawner = ObstacleSpawner(config, seed=5)
        low = config.field.width + config.spawn.gap_multiplier_min * config.gap_unit
        high = config.field.width + config.spawn.gap_multiplier_max * config.gap_unit

        assert spawner.max_spawn_x == high
        for _ in range(500):
            assert low <= spawner.next_spawn_x() <= high

    def test_spawns_beyond_right_edge(self, config):
        spawner = ObstacleSpawner(config, seed=0)
        for _ in range(100):
            assert spawner.next_spawn_x() > config.field.width

    def test_unseeded_reset_continues_stream(self, config):
        spawner = ObstacleSpawner(config, seed=11)
        reference = ObstacleSpawner(config, seed=11)
        stream = [reference.next_spawn_x() for _ in range(8)]

        first = [spawner.next_spawn_x() for _ in range(4)]
        spawner.reset()

        assert spawner.spawned == 0
        assert first + [spawner.next_spawn_x() for _ in range(4)] == stream

    def test_seeded_reset_restarts_sequence(self, config):
        spawner = ObstacleSpawner(config, seed=11)
        first = [spawner.next_spawn_x() for _ in range(4)]

        spawner.reset(seed=11)
        assert [spawner.next_spawn_x() for _ in range(4)] == first

        spawner.reset(seed=12)
        assert [spawner.next_spawn_x() for _ in range(4)] != first


class TestObstacleField:
    """Test the scrolling obstacle sequence."""

    def test_spawn_keeps_order(self, config):
        field = ObstacleField(config)
        field.spawn(100.0)
        field.spawn(300.0)

        assert len(field) == 2
        assert field.positions == (100.0, 300.0)
        assert [o.uid for o in field] == [0, 1]

    def test_advance_moves_left(self, config):
        field = ObstacleField(config)
        field.spawn(100.0)
        field.spawn(300.0)

        assert field.advance(7.0) == 0
        assert field.positions == (93.0, 293.0)

    def test_advance_culls_past_line(self, config):
        field = ObstacleField(config)
        field.spawn(-90.0)
        field.spawn(50.0)

        assert field.advance(7.0) == 0
        assert field.positions == (-97.0, 43.0)

        assert field.advance(7.0) == 1
        assert field.positions == (36.0,)

    def test_obstacle_on_cull_line_is_removed(self, config):
        field = ObstacleField(config)
        field.spawn(config.obstacle.cull_x + 5)

        assert field.advance(5.0) == 1
        assert len(field) == 0

    def test_window_is_half_open(self, config):
        field = ObstacleField(config)
        field.spawn(0.0)
        assert not field.any_in_window(0.0, 50.0)

        field.spawn(50.0)
        assert field.any_in_window(0.0, 50.0)

    def test_nearest_ahead(self, config):
        field = ObstacleField(config)
        assert field.nearest_ahead(0.0) is None

        field.spawn(-20.0)
        field.spawn(400.0)
        field.spawn(150.0)

        assert field.nearest_ahead(0.0).x == 150.0
        assert field.nearest_ahead(200.0).x == 400.0

    def test_clear(self, config):
        field = ObstacleField(config)
        field.spawn(10.0)
        field.clear()

        assert len(field) == 0
        assert field.spawn(5.0).uid == 0


class TestSpawnCadence:
    """Test spawns driven by the game tick."""

    def test_spawn_interval_shrinks_and_clamps(self, config, tweak):
        rules = SpawnRules(config)
        assert rules.spawn_interval(1) == 72
        assert rules.spawn_interval(10) == 45

        steep = SpawnRules(tweak(config, spawn={"interval_per_level": 10}))
        assert steep.spawn_interval(10) == config.spawn.min_interval
        for level in range(1, 50):
            assert steep.spawn_interval(level) >= config.spawn.min_interval

    def test_first_spawn_on_interval_tick(self, config):
        game = CoreGame(config, seed=4)
        game.reset()
        interval = game.spawn_interval

        result = game.run_ticks(interval - 1)
        assert len(game.obstacles) == 0
        assert not result.spawned

        result = game.advance()
        assert result.spawned
        assert len(game.obstacles) == 1

        # Spawned then scrolled within the same tick
        x = game.obstacles.positions[0]
        low = config.field.width + config.spawn.gap_multiplier_min * config.gap_unit
        high = ObstacleSpawner(config).max_spawn_x
        assert low - game.walk_speed <= x <= high - game.walk_speed

    def test_positions_decrease_and_cull(self, ghost_config):
        game = CoreGame(ghost_config, seed=8)
        game.reset()
        cull_x = ghost_config.obstacle.cull_x
        total_culled = 0

        for _ in range(3000):
            before = {o.uid: o.x for o in game.obstacles}
            result = game.advance()
            after = {o.uid: o.x for o in game.obstacles}
            total_culled += result.culled

            assert result.status is RunStatus.RUNNING
            for uid, x in after.items():
                assert x > cull_x
                if uid in before:
                    assert x < before[uid]
            for uid in set(before) - set(after):
                assert before[uid] - game.walk_speed <= cull_x

        assert total_culled > 0

    def test_reset_clears_obstacles(self, config):
        game = CoreGame(config, seed=4)
        game.reset()
        game.run_ticks(game.spawn_interval)
        assert len(game.obstacles) == 1

        game.reset()
        assert len(game.obstacles) == 0

    def test_restart_gets_new_course(self, ghost_config):
        game = CoreGame(ghost_config, seed=5)
        game.reset()
        game.run_ticks(400)
        first = game.obstacles.positions

        game.reset()
        game.run_ticks(400)

        assert len(game.obstacles) > 0
        assert game.obstacles.positions != first

    def test_seeded_reset_replays_course(self, ghost_config):
        game = CoreGame(ghost_config, seed=5)
        game.reset()
        game.run_ticks(400)
        first = game.obstacles.positions

        game.reset()
        game.run_ticks(400)
        game.reset(seed=5)
        game.run_ticks(400)

        assert game.obstacles.positions == first


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_same_seed_same_course(config, seed):
    a = CoreGame(config, seed=seed)
    b = CoreGame(config, seed=seed)
    a.reset()
    b.reset()

    a.run_ticks(300)
    b.run_ticks(300)

    assert a.obstacles.positions == b.obstacles.positions
    assert a.status is b.status
