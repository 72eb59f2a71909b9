"""Vector math for 3-component directions and displacements.

All functions operate on numpy arrays of shape (3,) holding float64 values.
No magnitude invariant is enforced; callers decide when a vector must be
unit length.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import ZeroLengthVectorError


def as_vec3(v) -> np.ndarray:
    """Convert a sequence of three numbers to a float64 array.

    Args:
        v: Any sequence or array with exactly three components.

    Returns:
        A new array of shape (3,).

    Raises:
        ValueError: If the input does not have three components.
    """
    arr = np.array(v, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got {arr.size}")
    return arr


def dot(a: np.ndarray, b: np.ndarray) -> float:
    """Compute dot product of two 3D vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        Scalar dot product.
    """
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Compute the right-handed cross product of two 3D vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        Cross product vector a × b.
    """
    return np.array(
        [
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ],
        dtype=np.float64,
    )


def norm(v: np.ndarray) -> float:
    """Euclidean length of a vector, without underflow for tiny components."""
    return math.hypot(float(v[0]), float(v[1]), float(v[2]))


def normalize(v: np.ndarray) -> None:
    """Scale a vector to unit length in place.

    Args:
        v: Writable float array of shape (3,).

    Raises:
        ZeroLengthVectorError: If the vector has zero length.
    """
    length = norm(v)
    if length == 0.0:
        raise ZeroLengthVectorError("Cannot normalize zero-length vector")
    v /= length


def normalized(v: np.ndarray) -> np.ndarray:
    """Return a unit vector in the direction of ``v``, leaving ``v`` untouched.

    Raises:
        ZeroLengthVectorError: If the vector has zero length.
    """
    result = np.array(v, dtype=np.float64)
    normalize(result)
    return result


def vec3_from_to(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Displacement pointing from ``a`` to ``b`` (that is, ``b - a``)."""
    return np.array([b[0] - a[0], b[1] - a[1], b[2] - a[2]], dtype=np.float64)


def diff_norm(a: np.ndarray, b: np.ndarray) -> float:
    """Distance between two points."""
    return norm(vec3_from_to(a, b))


@dataclass
class Vec3:
    """Mutable 3-component vector value.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, data) -> Vec3:
        """Create from any three-component sequence."""
        x, y, z = as_vec3(data)
        return cls(float(x), float(y), float(z))

    def to_array(self) -> np.ndarray:
        """Components as a new float64 array."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def set(self, x: float, y: float, z: float) -> None:
        """Overwrite all three components."""
        self.x, self.y, self.z = float(x), float(y), float(z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def normalize(self) -> None:
        """Scale this vector to unit length in place."""
        self.set(*normalized(self.to_array()))

    def normalized(self) -> Vec3:
        """Unit-length copy of this vector."""
        return Vec3.from_array(normalized(self.to_array()))

    @staticmethod
    def dot(a: Vec3, b: Vec3) -> float:
        return dot(a.to_array(), b.to_array())

    @staticmethod
    def norm(v: Vec3) -> float:
        return norm(v.to_array())

    @staticmethod
    def cross(a: Vec3, b: Vec3) -> Vec3:
        return Vec3.from_array(cross(a.to_array(), b.to_array()))

    @staticmethod
    def from_to(a: Vec3, b: Vec3) -> Vec3:
        """Displacement vector from ``a`` to ``b``."""
        return Vec3.from_array(vec3_from_to(a.to_array(), b.to_array()))
