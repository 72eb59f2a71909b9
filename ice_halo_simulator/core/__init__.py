"""Core orientation sampling and frame transform components."""

from .errors import (
    ConfigError,
    DimensionMismatchError,
    HaloSimulationError,
    NonSquareMatrixError,
    ZeroLengthVectorError,
)
from .vector import Vec3, cross, diff_norm, dot, norm, normalize, normalized, vec3_from_to
from .matrix import Matrix
from .rotation import (
    frame_bases,
    frame_basis,
    rotate_vector,
    rotate_vectors,
    rotation_matrix,
    spherical_to_cartesian,
    to_global_frame,
    to_global_frames,
    to_local_frame,
    to_local_frames,
)
from .orientation import (
    Distribution,
    DistributionSpec,
    OrientationAngles,
    OrientationSampler,
    fold_latitude,
    master_seed_sequence,
    spawn_samplers,
)
from .models import CrystalConfig, SimulationConfig

__all__ = [
    "ConfigError",
    "DimensionMismatchError",
    "HaloSimulationError",
    "NonSquareMatrixError",
    "ZeroLengthVectorError",
    "Vec3",
    "cross",
    "diff_norm",
    "dot",
    "norm",
    "normalize",
    "normalized",
    "vec3_from_to",
    "Matrix",
    "frame_bases",
    "frame_basis",
    "rotate_vector",
    "rotate_vectors",
    "rotation_matrix",
    "spherical_to_cartesian",
    "to_global_frame",
    "to_global_frames",
    "to_local_frame",
    "to_local_frames",
    "Distribution",
    "DistributionSpec",
    "OrientationAngles",
    "OrientationSampler",
    "fold_latitude",
    "master_seed_sequence",
    "spawn_samplers",
    "CrystalConfig",
    "SimulationConfig",
]
