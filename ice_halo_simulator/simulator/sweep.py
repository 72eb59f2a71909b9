"""Wavelength sweep over crystal populations.

This module drives the orientation sampler the way a full halo simulation
does: one sampler per crystal population, reused for every wavelength, with
the ray budget split across populations by their relative weight.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..core.models import CrystalConfig, SimulationConfig
from ..core.orientation import MasterSeed, OrientationSampler, master_seed_sequence
from ..core.rotation import to_global_frames

logger = logging.getLogger(__name__)


@dataclass
class OrientationBatch:
    """Sampled orientations of one crystal population at one wavelength.

    Attributes:
        crystal: Name of the crystal population.
        wavelength: Wavelength in nm.
        ray_directions: Incident direction in each crystal frame, shape (n, 3).
        angles: (lon, lat, roll) per crystal in radians, shape (n, 3).
    """

    crystal: str
    wavelength: float
    ray_directions: np.ndarray
    angles: np.ndarray

    @property
    def size(self) -> int:
        return len(self.angles)

    def to_global(self, local_dirs: Optional[np.ndarray] = None) -> np.ndarray:
        """Map crystal-frame directions back to the global frame.

        Args:
            local_dirs: Directions in each crystal frame, shape (n, 3).
                Defaults to this batch's own incident directions.

        Returns:
            New array of global-frame directions.
        """
        if local_dirs is None:
            local_dirs = self.ray_directions
        return restore_global_directions(local_dirs, self.angles)


@dataclass
class SweepResult:
    """Result of an orientation sweep.

    Attributes:
        wavelengths: Wavelengths processed, in order.
        samples_per_crystal: Number of crystals drawn per wavelength, by name.
        batches: Per-wavelength, per-crystal batches (empty when not kept).
        elapsed_seconds: Wall time of the sweep.
    """

    wavelengths: list[float]
    samples_per_crystal: dict[str, int]
    batches: list[OrientationBatch] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def total_samples(self) -> int:
        return sum(self.samples_per_crystal.values()) * len(self.wavelengths)

    def batches_for_wavelength(self, wavelength: float) -> list[OrientationBatch]:
        return [b for b in self.batches if b.wavelength == wavelength]

    def batches_for_crystal(self, crystal: str) -> list[OrientationBatch]:
        return [b for b in self.batches if b.crystal == crystal]

    def crystal_statistics(self) -> dict[str, dict]:
        """Mean and standard deviation (degrees) of lat and roll per crystal."""
        stats = {}
        for name in self.samples_per_crystal:
            batches = self.batches_for_crystal(name)
            if not batches:
                continue
            angles = np.concatenate([b.angles for b in batches])
            if len(angles) == 0:
                continue
            lat_deg = np.degrees(angles[:, 1])
            roll_deg = np.degrees(angles[:, 2])
            stats[name] = {
                "n": int(len(angles)),
                "lat_mean_deg": round(float(lat_deg.mean()), 4),
                "lat_std_deg": round(float(lat_deg.std()), 4),
                "roll_mean_deg": round(float(roll_deg.mean()), 4),
                "roll_std_deg": round(float(roll_deg.std()), 4),
            }
        return stats

    def to_dict(self) -> dict:
        """Convert to a summary dictionary."""
        return {
            "wavelengths": list(self.wavelengths),
            "samples_per_crystal": dict(self.samples_per_crystal),
            "total_samples": self.total_samples,
            "elapsed_seconds": round(self.elapsed_seconds, 4),
            "crystals": self.crystal_statistics(),
        }


def allocate_samples(ray_number: int, crystals: list[CrystalConfig]) -> dict[str, int]:
    """Split the ray budget across crystal populations.

    Shares are proportional to population. Leftover rays from rounding down
    go to the populations with the largest remainders, so the counts always
    sum to ``ray_number``.

    Args:
        ray_number: Total crystals to sample per wavelength.
        crystals: Crystal populations.

    Returns:
        Mapping of crystal name to sample count.
    """
    total = sum(c.population for c in crystals)
    if not math.isfinite(total) or total <= 0:
        raise ValueError(f"Total crystal population must be positive and finite, got {total}")

    exact = [ray_number * c.population / total for c in crystals]
    counts = [math.floor(x) for x in exact]
    leftover = ray_number - sum(counts)
    by_remainder = sorted(range(len(crystals)), key=lambda i: exact[i] - counts[i], reverse=True)
    for i in by_remainder[:leftover]:
        counts[i] += 1

    return {c.name: n for c, n in zip(crystals, counts)}


def build_samplers(config: SimulationConfig, seed: MasterSeed = None) -> dict[str, OrientationSampler]:
    """Create one sampler per crystal population.

    Seeds are split from a single master seed so populations draw
    independent streams.

    Args:
        config: Simulation configuration.
        seed: Master seed. Falls back to ``config.seed``, then to the clock.

    Returns:
        Mapping of crystal name to sampler.
    """
    if seed is None:
        seed = config.seed
    children = master_seed_sequence(seed).spawn(len(config.crystals))
    return {
        crystal.name: OrientationSampler(crystal.axis, crystal.roll, child)
        for crystal, child in zip(config.crystals, children)
    }


def restore_global_directions(local_dirs: np.ndarray, angles: np.ndarray) -> np.ndarray:
    """Apply the backward frame transform to each sample's direction.

    Args:
        local_dirs: Directions in each crystal frame, shape (n, 3).
        angles: Orientation of each crystal, shape (n, 3).

    Returns:
        New (n, 3) array of directions in the global frame.
    """
    result = np.array(local_dirs, dtype=np.float64, order="C")
    if result.ndim != 2 or result.shape[1] != 3:
        raise ValueError(f"Directions must have shape (n, 3), got {result.shape}")
    if len(angles) != len(result):
        raise ValueError(f"Got {len(angles)} orientations for {len(result)} directions")

    to_global_frames(np.asarray(angles, dtype=np.float64), result)
    return result


def simulate_orientation_sweep(
    config: SimulationConfig,
    seed: MasterSeed = None,
    keep_batches: bool = True,
) -> SweepResult:
    """Sample crystal orientations for every wavelength of the sweep.

    Args:
        config: Simulation configuration.
        seed: Master seed; see :func:`build_samplers`.
        keep_batches: Whether to keep the sampled arrays in the result.

    Returns:
        SweepResult with sample counts and, optionally, all batches.
    """
    start = time.perf_counter()

    samplers = build_samplers(config, seed)
    counts = allocate_samples(config.ray_number, config.crystals)
    sun_dir = config.incident_direction

    logger.info(
        "Starting sweep: %d wavelengths, %d crystal populations, %d rays each",
        len(config.wavelengths),
        len(config.crystals),
        config.ray_number,
    )

    batches = []
    for wavelength in config.wavelengths:
        t0 = time.perf_counter()
        for crystal in config.crystals:
            ray_dir, angles = samplers[crystal.name].sample(sun_dir, counts[crystal.name])
            if keep_batches:
                batches.append(
                    OrientationBatch(
                        crystal=crystal.name,
                        wavelength=wavelength,
                        ray_directions=ray_dir,
                        angles=angles,
                    )
                )
        logger.info(
            "Wavelength %.1f nm: sampled in %.2f ms", wavelength, (time.perf_counter() - t0) * 1e3
        )

    elapsed = time.perf_counter() - start
    logger.info("Sweep finished in %.3f s", elapsed)

    return SweepResult(
        wavelengths=list(config.wavelengths),
        samples_per_crystal=counts,
        batches=batches,
        elapsed_seconds=elapsed,
    )
