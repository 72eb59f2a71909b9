"""Visualization module for sampled orientations."""

from .orientation_plot import build_orientation_scene, build_roll_figure, axis_directions

__all__ = [
    "build_orientation_scene",
    "build_roll_figure",
    "axis_directions",
]
