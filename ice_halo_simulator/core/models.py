"""Configuration models for an orientation sweep."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import numpy as np

from .errors import ConfigError
from .orientation import Distribution, DistributionSpec
from .rotation import spherical_to_cartesian

# Wavelengths (nm) of the default visible-light sweep
DEFAULT_WAVELENGTHS = [float(wl) for wl in range(440, 655, 30)]


def distribution_from_dict(data: dict, label: str) -> DistributionSpec:
    """Build a DistributionSpec from a config block given in degrees.

    Expected format:
        {"dist": "gauss", "mean": 90.0, "std": 0.5}

    Args:
        data: The config block.
        label: Name used in error messages (e.g. "axis").

    Returns:
        DistributionSpec with mean and spread in radians.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"{label} distribution must be an object, got {data!r}")
    if "dist" not in data:
        raise ConfigError(f"{label} distribution is missing 'dist'")

    try:
        mean_deg = float(data.get("mean", 0.0))
        spread_deg = float(data.get("std", 0.0))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{label} distribution has a non-numeric mean/std: {e}") from e

    return DistributionSpec(
        kind=Distribution.parse(data["dist"]),
        mean=math.radians(mean_deg),
        spread=math.radians(spread_deg),
    )


def distribution_to_dict(spec: DistributionSpec) -> dict:
    """Inverse of distribution_from_dict."""
    return {
        "dist": spec.kind.value,
        "mean": math.degrees(spec.mean),
        "std": math.degrees(spec.spread),
    }


@dataclass
class CrystalConfig:
    """One crystal population.

    Attributes:
        name: Identifier of the population.
        axis: Distribution of the crystal main axis.
        roll: Distribution of the roll about the main axis.
        population: Relative weight when splitting the ray budget.
    """

    name: str
    axis: DistributionSpec
    roll: DistributionSpec
    population: float = 1.0


@dataclass
class SimulationConfig:
    """Complete configuration for an orientation sweep.

    Attributes:
        crystals: Crystal populations.
        sun_altitude_deg: Sun altitude above the horizon in degrees.
        sun_azimuth_deg: Sun azimuth in degrees, counterclockwise from +x.
        ray_number: Total number of crystals sampled per wavelength.
        wavelengths: Wavelengths (nm) of the sweep.
        seed: Master random seed, or None to seed from the clock.
    """

    crystals: list[CrystalConfig]
    sun_altitude_deg: float = 0.0
    sun_azimuth_deg: float = 0.0
    ray_number: int = 10000
    wavelengths: list[float] = field(default_factory=lambda: list(DEFAULT_WAVELENGTHS))
    seed: Optional[int] = None

    @property
    def incident_direction(self) -> np.ndarray:
        """Unit vector along which sunlight travels (away from the sun)."""
        toward_sun = spherical_to_cartesian(
            math.radians(self.sun_azimuth_deg), math.radians(self.sun_altitude_deg)
        )
        return -toward_sun

    @property
    def total_population(self) -> float:
        return sum(c.population for c in self.crystals)

    @classmethod
    def from_json_file(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> SimulationConfig:
        """Create configuration from a dictionary.

        Raises:
            ConfigError: If a required field is missing or out of range.
        """
        crystal_data = data.get("crystals")
        if not crystal_data:
            raise ConfigError("Config must define at least one crystal")

        crystals = []
        for i, c in enumerate(crystal_data):
            if not isinstance(c, dict):
                raise ConfigError(f"Crystal {i} must be an object, got {c!r}")
            name = str(c.get("name", f"crystal_{i}"))
            if "axis" not in c or "roll" not in c:
                raise ConfigError(f"Crystal {name} must define 'axis' and 'roll'")
            try:
                population = float(c.get("population", 1.0))
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Crystal {name} population must be a number: {e}") from e
            if not math.isfinite(population) or population < 0:
                raise ConfigError(f"Crystal {name} population must be finite and >= 0, got {population}")
            crystals.append(
                CrystalConfig(
                    name=name,
                    axis=distribution_from_dict(c["axis"], f"{name}.axis"),
                    roll=distribution_from_dict(c["roll"], f"{name}.roll"),
                    population=population,
                )
            )

        names = [c.name for c in crystals]
        if len(set(names)) != len(names):
            raise ConfigError(f"Crystal names must be unique: {names}")
        if sum(c.population for c in crystals) <= 0:
            raise ConfigError("Total crystal population must be positive")

        ray_number = int(data.get("ray_number", 10000))
        if ray_number <= 0:
            raise ConfigError(f"ray_number must be positive, got {ray_number}")

        wavelengths = [float(wl) for wl in data.get("wavelengths", DEFAULT_WAVELENGTHS)]
        if not wavelengths:
            raise ConfigError("wavelengths must not be empty")

        sun_data = data.get("sun", {})
        sun_altitude = float(sun_data.get("altitude", 0.0))
        if not -90.0 <= sun_altitude <= 90.0:
            raise ConfigError(f"Sun altitude must be in [-90, 90], got {sun_altitude}")

        seed = data.get("seed")

        return cls(
            crystals=crystals,
            sun_altitude_deg=sun_altitude,
            sun_azimuth_deg=float(sun_data.get("azimuth", 0.0)),
            ray_number=ray_number,
            wavelengths=wavelengths,
            seed=int(seed) if seed is not None else None,
        )

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        data = {
            "sun": {
                "altitude": self.sun_altitude_deg,
                "azimuth": self.sun_azimuth_deg,
            },
            "ray_number": self.ray_number,
            "wavelengths": list(self.wavelengths),
            "crystals": [
                {
                    "name": c.name,
                    "population": c.population,
                    "axis": distribution_to_dict(c.axis),
                    "roll": distribution_to_dict(c.roll),
                }
                for c in self.crystals
            ],
        }
        if self.seed is not None:
            data["seed"] = self.seed
        return data
