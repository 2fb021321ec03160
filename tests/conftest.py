"""
Shared fixtures.
"""

import os

# Headless pygame for renderer and scheduler tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import dataclasses

import pytest

from giraffe_runner.runner_core.config_loader import GameConfig, load_config


def _with_sections(config: GameConfig, **sections) -> GameConfig:
    changes = {
        name: dataclasses.replace(getattr(config, name), **fields)
        for name, fields in sections.items()
    }
    return dataclasses.replace(config, **changes)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def tweak():
    """Copy a config replacing fields per section, e.g. tweak(cfg, spawn={"base_interval": 10})."""
    return _with_sections


@pytest.fixture
def quiet_config(config):
    """Default tuning with no obstacle spawning within any test run."""
    return _with_sections(config, spawn={"base_interval": 100_000, "interval_per_level": 0})


@pytest.fixture
def ghost_config(config):
    """Default tuning where bushes spawn and scroll but never hit."""
    return _with_sections(config, collision={"height_margin": config.obstacle.size})
