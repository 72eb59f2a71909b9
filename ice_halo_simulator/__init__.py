"""Orientation sampling and frame transforms for ice-crystal halo simulation."""

__version__ = "0.1.0"
