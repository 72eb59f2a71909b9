"""Axis-angle rotation and the crystal frame transform pair.

Conventions:
    - Vectors are ROW vectors. A rotation matrix R is applied as ``v @ R``.
    - A crystal orientation is (lon, lat, roll) in radians. (lon, lat) point
      the crystal's main axis; roll spins the crystal about that axis.

Frame basis for an orientation (before roll), one basis vector per row:
    row 0 = (-sin lon, cos lon, 0)
    row 1 = (-cos lon sin lat, -sin lon sin lat, cos lat)
    row 2 = (cos lat cos lon, cos lat sin lon, sin lat)   # main axis
All three rows are then rotated by ``roll`` about row 2.

The forward transform (global -> local) multiplies by the transposed basis,
so local components are projections onto the basis rows. The backward
transform multiplies by the basis itself and undoes the forward one.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Union

import numpy as np

from .matrix import Matrix

AnglesLike = Union[Sequence[float], np.ndarray]


def spherical_to_cartesian(lon: float, lat: float) -> np.ndarray:
    """Convert longitude/latitude (radians) to a unit direction vector.

    Args:
        lon: Longitude, measured from +x toward +y.
        lat: Latitude above the xy plane, in [-pi/2, pi/2].

    Returns:
        Unit vector (cos lat cos lon, cos lat sin lon, sin lat).
    """
    cos_lat = math.cos(lat)
    return np.array(
        [cos_lat * math.cos(lon), cos_lat * math.sin(lon), math.sin(lat)],
        dtype=np.float64,
    )


def rotation_matrix(axis: np.ndarray, angle: float) -> np.ndarray:
    """Build the Rodrigues rotation matrix for row vectors.

    For a column vector the rotation is ``c*I + s*K + (1-c)*a a^T`` where K is
    the cross-product matrix of the axis. Row vectors need the transpose of
    that, so that ``v @ R`` turns v counterclockwise about the axis.

    Args:
        axis: Unit rotation axis.
        angle: Rotation angle in radians.

    Returns:
        3x3 rotation matrix.

    Example:
        >>> R = rotation_matrix(np.array([0.0, 0.0, 1.0]), math.pi / 2)
        >>> np.round(np.array([1.0, 0.0, 0.0]) @ R, 12)  # x turns into y
        array([0., 1., 0.])
    """
    x, y, z = float(axis[0]), float(axis[1]), float(axis[2])
    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c

    return np.array(
        [
            [c + x * x * t, y * x * t + z * s, z * x * t - y * s],
            [x * y * t - z * s, c + y * y * t, z * y * t + x * s],
            [x * z * t + y * s, y * z * t - x * s, c + z * z * t],
        ],
        dtype=np.float64,
    )


def _as_row_batch(vecs: np.ndarray) -> int:
    """Number of 3-component rows in a buffer, validating its layout."""
    if not isinstance(vecs, np.ndarray) or not np.issubdtype(vecs.dtype, np.floating):
        raise ValueError("Vectors must be given as a floating point numpy array")
    if vecs.size % 3 != 0:
        raise ValueError(f"Buffer of {vecs.size} elements does not hold whole 3-vectors")
    return vecs.size // 3


def _scratch_for(num: int, scratch: Optional[np.ndarray]) -> np.ndarray:
    if scratch is None:
        return np.empty(num * 3, dtype=np.float64)
    if scratch.size < num * 3:
        raise ValueError(f"Scratch buffer needs {num * 3} elements, got {scratch.size}")
    return scratch


def _apply_in_place(
    vecs: np.ndarray,
    matrix: np.ndarray,
    scratch: Optional[np.ndarray] = None,
) -> None:
    """Replace each row vector v in ``vecs`` by ``v @ matrix``."""
    num = _as_row_batch(vecs)
    buffer = _scratch_for(num, scratch)

    inputs = Matrix(vecs, num, 3)
    result = Matrix(buffer, num, 3)
    Matrix.multiply(inputs, Matrix(matrix, 3, 3), result)
    inputs.values[...] = result.values


def rotate_vector(axis: np.ndarray, angle: float, vec: np.ndarray) -> None:
    """Rotate a single 3-vector in place about ``axis`` by ``angle``.

    Args:
        axis: Unit rotation axis.
        angle: Rotation angle in radians.
        vec: Writable float array of shape (3,).
    """
    if vec.size != 3:
        raise ValueError(f"Expected a single 3-vector, got {vec.size} elements")
    _apply_in_place(vec, rotation_matrix(axis, angle))


def rotate_vectors(
    axis: np.ndarray,
    angle: float,
    vecs: np.ndarray,
    scratch: Optional[np.ndarray] = None,
) -> None:
    """Rotate a batch of row vectors in place about ``axis`` by ``angle``.

    Args:
        axis: Unit rotation axis.
        angle: Rotation angle in radians.
        vecs: C-contiguous float array holding N row vectors, shape (N, 3)
            or flat (3N,).
        scratch: Optional buffer of at least 3N floats used for the product.
            A new one is allocated when omitted.
    """
    _apply_in_place(vecs, rotation_matrix(axis, angle), scratch)


def frame_basis(angles: AnglesLike) -> np.ndarray:
    """Orthonormal basis of the crystal frame for an orientation.

    Args:
        angles: (lon, lat, roll) in radians.

    Returns:
        3x3 array whose rows are the local x, y and z axes expressed in the
        global frame. Row 2 is the crystal main axis.
    """
    lon, lat, roll = float(angles[0]), float(angles[1]), float(angles[2])
    sin_lon, cos_lon = math.sin(lon), math.cos(lon)
    sin_lat, cos_lat = math.sin(lat), math.cos(lat)

    basis = np.array(
        [
            [-sin_lon, cos_lon, 0.0],
            [-cos_lon * sin_lat, -sin_lon * sin_lat, cos_lat],
            [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
        ],
        dtype=np.float64,
    )
    main_axis = spherical_to_cartesian(lon, lat)
    rotate_vectors(main_axis, roll, basis)
    return basis


def to_local_frame(
    angles: AnglesLike,
    vecs: np.ndarray,
    scratch: Optional[np.ndarray] = None,
) -> None:
    """Express global-frame row vectors in the crystal frame, in place.

    Args:
        angles: Crystal orientation (lon, lat, roll) in radians.
        vecs: C-contiguous float array of N row vectors, modified in place.
        scratch: Optional buffer of at least 3N floats.
    """
    basis = frame_basis(angles)
    Matrix(basis, 3, 3).transpose()
    _apply_in_place(vecs, basis, scratch)


def to_global_frame(
    angles: AnglesLike,
    vecs: np.ndarray,
    scratch: Optional[np.ndarray] = None,
) -> None:
    """Express crystal-frame row vectors in the global frame, in place.

    Inverse of :func:`to_local_frame` for the same orientation.

    Args:
        angles: Crystal orientation (lon, lat, roll) in radians.
        vecs: C-contiguous float array of N row vectors, modified in place.
        scratch: Optional buffer of at least 3N floats.
    """
    _apply_in_place(vecs, frame_basis(angles), scratch)


def frame_bases(angles: np.ndarray) -> np.ndarray:
    """Frame bases for a batch of orientations.

    Same result as calling :func:`frame_basis` per row. Because the unrolled
    rows are orthonormal and right-handed, rolling by ``roll`` about row 2
    reduces to ``row0' = c*row0 + s*row1`` and ``row1' = c*row1 - s*row0``.

    Args:
        angles: Array of shape (n, 3) with columns lon, lat, roll.

    Returns:
        Array of shape (n, 3, 3); ``bases[i]`` is the basis for ``angles[i]``.
    """
    angles = np.asarray(angles, dtype=np.float64)
    if angles.ndim != 2 or angles.shape[1] != 3:
        raise ValueError(f"Orientations must have shape (n, 3), got {angles.shape}")
    lon, lat, roll = angles[:, 0], angles[:, 1], angles[:, 2]
    sin_lon, cos_lon = np.sin(lon), np.cos(lon)
    sin_lat, cos_lat = np.sin(lat), np.cos(lat)

    row0 = np.column_stack([-sin_lon, cos_lon, np.zeros_like(lon)])
    row1 = np.column_stack([-cos_lon * sin_lat, -sin_lon * sin_lat, cos_lat])
    c = np.cos(roll)[:, np.newaxis]
    s = np.sin(roll)[:, np.newaxis]

    bases = np.empty((len(angles), 3, 3), dtype=np.float64)
    bases[:, 0] = c * row0 + s * row1
    bases[:, 1] = c * row1 - s * row0
    bases[:, 2] = np.column_stack([cos_lat * cos_lon, cos_lat * sin_lon, sin_lat])
    return bases


def _check_frame_batch(angles: np.ndarray, vecs: np.ndarray) -> None:
    if not isinstance(vecs, np.ndarray) or not np.issubdtype(vecs.dtype, np.floating):
        raise ValueError("Vectors must be given as a floating point numpy array")
    if vecs.ndim != 2 or vecs.shape[1] != 3:
        raise ValueError(f"Vectors must have shape (n, 3), got {vecs.shape}")
    if len(angles) != len(vecs):
        raise ValueError(f"Got {len(angles)} orientations for {len(vecs)} vectors")


def to_local_frames(angles: np.ndarray, vecs: np.ndarray) -> None:
    """Express each row of ``vecs`` in the crystal frame of the matching orientation.

    Batched :func:`to_local_frame`: ``vecs[i]`` is transformed by
    ``angles[i]``, in place.

    Args:
        angles: Orientations, shape (n, 3).
        vecs: Float array of shape (n, 3), modified in place.
    """
    _check_frame_batch(angles, vecs)
    vecs[...] = np.einsum("ni,nji->nj", vecs, frame_bases(angles))


def to_global_frames(angles: np.ndarray, vecs: np.ndarray) -> None:
    """Batched :func:`to_global_frame`, inverse of :func:`to_local_frames`."""
    _check_frame_batch(angles, vecs)
    vecs[...] = np.einsum("ni,nij->nj", vecs, frame_bases(angles))
