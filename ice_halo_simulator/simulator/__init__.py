"""Wavelength sweep driver module."""

from .sweep import (
    OrientationBatch,
    SweepResult,
    allocate_samples,
    build_samplers,
    restore_global_directions,
    simulate_orientation_sweep,
)

__all__ = [
    "OrientationBatch",
    "SweepResult",
    "allocate_samples",
    "build_samplers",
    "restore_global_directions",
    "simulate_orientation_sweep",
]
