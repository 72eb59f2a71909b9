"""Random crystal orientations and per-crystal incident ray directions.

Each simulated crystal gets an orientation (lon, lat, roll):
    - (lon, lat) point the crystal main axis. UNIFORM picks the axis
      uniformly over the sphere. GAUSS picks lon uniformly over a full
      circle and lat from a normal distribution around ``mean``.
    - roll spins the crystal about its main axis. GAUSS draws
      ``mean + N(0, 1) * spread``. UNIFORM draws from the interval
      ``[mean - spread/2, mean + spread/2)``, so ``spread`` is a standard
      deviation for GAUSS but a full width for UNIFORM.

The sun direction is then expressed in each crystal's own frame with
:func:`~ice_halo_simulator.core.rotation.to_local_frames`.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np

from .errors import ConfigError, ZeroLengthVectorError
from .rotation import to_local_frames
from .vector import as_vec3

logger = logging.getLogger(__name__)

SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]
MasterSeed = Optional[Union[int, np.random.SeedSequence]]

HALF_PI = math.pi / 2


class Distribution(Enum):
    """Statistical model for an orientation angle."""

    UNIFORM = "uniform"
    GAUSS = "gauss"

    @classmethod
    def parse(cls, value: Union[str, Distribution]) -> Distribution:
        """Resolve a distribution tag from config.

        Raises:
            ConfigError: If the tag is not recognized.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _DISTRIBUTION_ALIASES:
                return _DISTRIBUTION_ALIASES[key]
        raise ConfigError(f"Unknown distribution: {value!r}")


_DISTRIBUTION_ALIASES = {
    "uniform": Distribution.UNIFORM,
    "gauss": Distribution.GAUSS,
    "gaussian": Distribution.GAUSS,
    "normal": Distribution.GAUSS,
}


@dataclass
class DistributionSpec:
    """Distribution of one orientation angle.

    Attributes:
        kind: UNIFORM or GAUSS. Strings are accepted and parsed.
        mean: Center of the distribution in radians.
        spread: Standard deviation (GAUSS) or full interval width (UNIFORM),
            in radians.
    """

    kind: Distribution = Distribution.UNIFORM
    mean: float = 0.0
    spread: float = 0.0

    def __post_init__(self):
        self.kind = Distribution.parse(self.kind)
        try:
            self.mean = float(self.mean)
            self.spread = float(self.spread)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Distribution mean/spread must be numbers: {e}") from e
        if not (math.isfinite(self.mean) and math.isfinite(self.spread)):
            raise ConfigError("Distribution mean/spread must be finite")
        if self.spread < 0:
            raise ConfigError(f"Distribution spread must be >= 0, got {self.spread}")


@dataclass(frozen=True)
class OrientationAngles:
    """Orientation of one crystal, in radians.

    Attributes:
        lon: Longitude of the main axis.
        lat: Latitude of the main axis, in [-pi/2, pi/2].
        roll: Rotation about the main axis.
    """

    lon: float
    lat: float
    roll: float

    @classmethod
    def from_array(cls, data) -> OrientationAngles:
        lon, lat, roll = (float(v) for v in data)
        return cls(lon, lat, roll)

    def as_array(self) -> np.ndarray:
        return np.array([self.lon, self.lat, self.roll], dtype=np.float64)

    def __iter__(self):
        yield self.lon
        yield self.lat
        yield self.roll

    def __len__(self) -> int:
        return 3

    def __getitem__(self, index: int) -> float:
        return (self.lon, self.lat, self.roll)[index]


def fold_latitude(lat):
    """Reflect latitudes that overshoot a pole back into range.

    ``lat > pi/2`` becomes ``pi - lat``. The result is then checked against
    the south pole, and ``lat < -pi/2`` becomes ``-pi - lat``. Each check
    runs once, so a latitude below ``-3*pi/2`` is left above the north pole.

    Args:
        lat: Latitude in radians, scalar or array.

    Returns:
        Folded latitude of the same kind as the input.
    """
    if np.ndim(lat) == 0:
        lat = float(lat)
        if lat > HALF_PI:
            lat = math.pi - lat
        if lat < -HALF_PI:
            lat = -math.pi - lat
        return lat

    lat = np.asarray(lat, dtype=np.float64)
    folded = np.where(lat > HALF_PI, math.pi - lat, lat)
    return np.where(folded < -HALF_PI, -math.pi - folded, folded)


def clock_seed() -> int:
    """Seed taken from the nanosecond wall clock."""
    return time.time_ns()


class OrientationSampler:
    """Draws crystal orientations and the matching local ray directions.

    One sampler serves a whole crystal population for an entire wavelength
    sweep. It owns its random generator and is not safe to share between
    threads; use :func:`spawn_samplers` to give each worker its own.

    Args:
        axis: Distribution of the main axis (lon, lat).
        roll: Distribution of the roll angle.
        seed: Seed for the random generator. An int, a SeedSequence, or an
            existing Generator. Defaults to :func:`clock_seed`.

    Raises:
        ConfigError: If either distribution is invalid.
    """

    def __init__(
        self,
        axis: DistributionSpec,
        roll: DistributionSpec,
        seed: SeedLike = None,
    ):
        for label, spec in (("axis", axis), ("roll", roll)):
            if not isinstance(spec, DistributionSpec):
                raise ConfigError(
                    f"{label} distribution must be a DistributionSpec, got {type(spec).__name__}"
                )
            if not isinstance(spec.kind, Distribution):
                raise ConfigError(f"Unknown {label} distribution: {spec.kind!r}")

        self.axis = axis
        self.roll = roll

        if seed is None:
            seed = clock_seed()
            logger.debug("Seeding orientation sampler from clock: %d", seed)
        self._rng = np.random.default_rng(seed)

        logger.debug(
            "Created sampler: axis=%s(mean=%.4f, spread=%.4f) roll=%s(mean=%.4f, spread=%.4f)",
            axis.kind.value,
            axis.mean,
            axis.spread,
            roll.kind.value,
            roll.mean,
            roll.spread,
        )

    def _draw_axis(self, num: int) -> tuple[np.ndarray, np.ndarray]:
        if self.axis.kind is Distribution.UNIFORM:
            # Isotropic normal triples give directions uniform over the sphere
            v = self._rng.standard_normal((num, 3))
            lengths = np.linalg.norm(v, axis=1)
            if np.any(lengths == 0.0):
                raise ZeroLengthVectorError("Drew a zero-length axis vector")
            v /= lengths[:, np.newaxis]
            lon = np.arctan2(v[:, 1], v[:, 0])
            lat = np.arcsin(np.clip(v[:, 2], -1.0, 1.0))
        else:
            lon = self._rng.random(num) * 2 * math.pi
            lat = self._rng.standard_normal(num) * self.axis.spread + self.axis.mean
            lat = fold_latitude(lat)
        return lon, lat

    def _draw_roll(self, num: int) -> np.ndarray:
        if self.roll.kind is Distribution.GAUSS:
            return self._rng.standard_normal(num) * self.roll.spread + self.roll.mean
        return (self._rng.random(num) - 0.5) * self.roll.spread + self.roll.mean

    def draw_angles(self, num: int) -> np.ndarray:
        """Draw ``num`` orientations.

        Returns:
            Array of shape (num, 3) with columns lon, lat, roll.
        """
        if num < 0:
            raise ValueError(f"Sample count must be >= 0, got {num}")
        angles = np.empty((num, 3), dtype=np.float64)
        angles[:, 0], angles[:, 1] = self._draw_axis(num)
        angles[:, 2] = self._draw_roll(num)
        return angles

    def fill(self, sun_dir, ray_dir: np.ndarray, angles: np.ndarray) -> None:
        """Sample orientations into caller-supplied buffers.

        The number of samples is ``len(ray_dir)``.

        Args:
            sun_dir: Incident light direction in the global frame.
            ray_dir: Float array of shape (num, 3); receives ``sun_dir``
                expressed in each sampled crystal frame.
            angles: Float array of shape (num, 3); receives (lon, lat, roll).
        """
        sun = as_vec3(sun_dir)
        if ray_dir.ndim != 2 or ray_dir.shape[1] != 3:
            raise ValueError(f"ray_dir must have shape (num, 3), got {ray_dir.shape}")
        if angles.shape != ray_dir.shape:
            raise ValueError(
                f"angles shape {angles.shape} does not match ray_dir shape {ray_dir.shape}"
            )

        num = ray_dir.shape[0]
        angles[...] = self.draw_angles(num)
        ray_dir[...] = sun
        to_local_frames(angles, ray_dir)

    def sample(self, sun_dir, num: int) -> tuple[np.ndarray, np.ndarray]:
        """Sample ``num`` crystal orientations for one incident direction.

        Args:
            sun_dir: Incident light direction in the global frame.
            num: Number of crystals to sample.

        Returns:
            Tuple of (ray_dir, angles), both of shape (num, 3). ``ray_dir[i]``
            is ``sun_dir`` in the frame of the crystal oriented by
            ``angles[i]``.
        """
        if num < 0:
            raise ValueError(f"Sample count must be >= 0, got {num}")
        ray_dir = np.empty((num, 3), dtype=np.float64)
        angles = np.empty((num, 3), dtype=np.float64)
        self.fill(sun_dir, ray_dir, angles)
        return ray_dir, angles


def master_seed_sequence(seed: MasterSeed = None) -> np.random.SeedSequence:
    """SeedSequence to split worker seeds from; clock-seeded when ``seed`` is None."""
    if isinstance(seed, np.random.SeedSequence):
        return seed
    return np.random.SeedSequence(clock_seed() if seed is None else seed)


def spawn_samplers(
    axis: DistributionSpec,
    roll: DistributionSpec,
    count: int,
    seed: MasterSeed = None,
) -> list[OrientationSampler]:
    """Create independent samplers for parallel workers.

    Child seeds are split from one master SeedSequence, so the streams are
    statistically independent and reproducible from ``seed``.

    Args:
        axis: Axis distribution shared by all workers.
        roll: Roll distribution shared by all workers.
        count: Number of samplers.
        seed: Master seed. Defaults to :func:`clock_seed`.

    Returns:
        List of ``count`` samplers.
    """
    if count < 0:
        raise ValueError(f"Sampler count must be >= 0, got {count}")
    master = master_seed_sequence(seed)
    return [OrientationSampler(axis, roll, child) for child in master.spawn(count)]
