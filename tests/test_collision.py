"""
Tests for collision detection and run termination.
"""

from giraffe_runner.runner_core.game import CoreGame, InputState, RunStatus
from giraffe_runner.runner_core.player import Player
from giraffe_runner.runner_core.obstacles import ObstacleField
from giraffe_runner.runner_core.rules import CollisionRules


class TestCollisionRules:
    """Test the bounding-box heuristic."""

    def test_derived_thresholds(self, config):
        rules = CollisionRules(config)

        assert rules.near_ground_threshold == config.obstacle.size - config.collision.height_margin
        assert rules.window == config.collision.window_ratio * config.player.size

    def test_grounded_player_hits_bush_in_window(self, config):
        rules = CollisionRules(config)
        player = Player(config)
        field = ObstacleField(config)
        field.spawn(50.0)

        assert rules.check(player, field)

    def test_bush_outside_window_misses(self, config):
        rules = CollisionRules(config)
        player = Player(config)
        field = ObstacleField(config)
        field.spawn(rules.window + 1)
        field.spawn(0.0)
        field.spawn(-30.0)

        assert not rules.check(player, field)

    def test_high_player_clears_bush(self, config):
        rules = CollisionRules(config)
        player = Player(config)
        field = ObstacleField(config)
        field.spawn(50.0)

        player.begin_jump()
        while player.height < rules.near_ground_threshold:
            player.update(10)

        assert not rules.is_near_ground(player)
        assert not rules.check(player, field)


class TestRunTermination:
    """Test how a collision ends the run."""

    def test_collision_fails_run(self, config):
        game = CoreGame(config, seed=0)
        game.reset()
        game.obstacles.spawn(50.0)

        result = game.advance()

        assert result.collided
        assert result.status is RunStatus.FAILED
        assert game.is_over
        assert game.tick == 1

    def test_collision_tick_does_nothing_else(self, config):
        game = CoreGame(config, seed=0)
        game.reset()
        game.obstacles.spawn(50.0)

        result = game.advance()

        assert game.obstacles.positions == (50.0,)
        assert game.score == 0
        assert result.delta_score == 0
        assert game.scroll_offset == 0.0

    def test_failed_run_is_frozen(self, config):
        game = CoreGame(config, seed=0)
        game.reset()
        game.obstacles.spawn(50.0)
        game.advance()
        frozen = game.snapshot()

        for _ in range(20):
            result = game.advance(InputState(jump_begin=True))
            assert result.status is RunStatus.FAILED
            assert not result.collided

        assert game.tick == frozen.tick
        assert game.score == frozen.score
        assert game.player.y == frozen.player_y
        assert game.obstacles.positions == frozen.obstacles

    def test_jumping_player_survives(self, config):
        game = CoreGame(config, seed=0)
        game.reset()
        game.run_ticks(5, InputState(jump_begin=True))
        assert game.player.height == 50

        game.obstacles.spawn(50.0)
        result = game.advance()

        assert not result.collided
        assert result.status is RunStatus.RUNNING

    def test_bush_behind_player_ignored(self, config):
        game = CoreGame(config, seed=0)
        game.reset()
        game.obstacles.spawn(-5.0)

        assert game.advance().status is RunStatus.RUNNING

    def test_bush_scrolls_into_window(self, config):
        game = CoreGame(config, seed=0)
        game.reset()
        game.obstacles.spawn(game.hit_window()[1] + 1)

        # Checked before scrolling, so the hit lands on the next tick
        assert game.advance().status is RunStatus.RUNNING
        assert game.advance().status is RunStatus.FAILED

    def test_reset_after_failure(self, config):
        game = CoreGame(config, seed=0)
        game.reset()
        game.obstacles.spawn(50.0)
        game.advance()

        snapshot = game.reset()

        assert game.status is RunStatus.RUNNING
        assert snapshot.status == "running"
        assert game.tick == 0
        assert len(game.obstacles) == 0
        assert game.level == config.difficulty.initial_level

    def test_unattended_run_ends(self, config):
        """Without input the first bush reaches the giraffe."""
        game = CoreGame(config, seed=21)
        game.reset()

        result = game.run_ticks(2000)

        assert result.status is RunStatus.FAILED
        assert result.collided
