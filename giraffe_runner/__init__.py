"""
Giraffe Runner
==============

Endless-runner arcade game: a giraffe jumps over bushes that scroll in from
the right, faster and more often as the difficulty rises.

- runner_core: simulation, frame driver, renderer and Gymnasium environment
- game_config.yaml: default tuning (latest variant)
- classic_config.yaml: tuning of the first variant
"""
