"""Tests for the vector module."""

import math

import numpy as np
import pytest

from ice_halo_simulator.core.errors import ZeroLengthVectorError
from ice_halo_simulator.core.vector import (
    Vec3,
    as_vec3,
    cross,
    diff_norm,
    dot,
    norm,
    normalize,
    normalized,
    vec3_from_to,
)


def random_vectors(n=50, seed=7):
    rng = np.random.default_rng(seed)
    return rng.uniform(-5.0, 5.0, size=(n, 3))


class TestDotAndNorm:
    """Tests for dot and norm."""

    def test_dot_simple(self):
        assert dot(np.array([1.0, 2.0, 3.0]), np.array([4.0, -5.0, 6.0])) == pytest.approx(12.0)

    def test_dot_perpendicular(self):
        assert dot(np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0])) == 0.0

    def test_norm_345(self):
        assert norm(np.array([3.0, 4.0, 0.0])) == pytest.approx(5.0)

    def test_norm_matches_numpy(self):
        for v in random_vectors():
            assert norm(v) == pytest.approx(np.linalg.norm(v))


class TestCross:
    """Tests for the right-handed cross product."""

    def test_unit_axes(self):
        """x × y = z, y × z = x, z × x = y."""
        x = np.array([1.0, 0.0, 0.0])
        y = np.array([0.0, 1.0, 0.0])
        z = np.array([0.0, 0.0, 1.0])
        np.testing.assert_array_almost_equal(cross(x, y), z)
        np.testing.assert_array_almost_equal(cross(y, z), x)
        np.testing.assert_array_almost_equal(cross(z, x), y)

    def test_anticommutative(self):
        a, b = random_vectors(2, seed=3)
        np.testing.assert_array_almost_equal(cross(a, b), -cross(b, a))

    def test_orthogonal_to_both_inputs(self):
        vecs = random_vectors(40)
        for a, b in zip(vecs[::2], vecs[1::2]):
            c = cross(a, b)
            assert dot(c, a) == pytest.approx(0.0, abs=1e-9)
            assert dot(c, b) == pytest.approx(0.0, abs=1e-9)

    def test_magnitude_is_area(self):
        """|a × b| = |a| |b| sin(angle)."""
        vecs = random_vectors(40, seed=11)
        for a, b in zip(vecs[::2], vecs[1::2]):
            cos_angle = np.clip(dot(a, b) / (norm(a) * norm(b)), -1.0, 1.0)
            expected = norm(a) * norm(b) * math.sin(math.acos(cos_angle))
            assert norm(cross(a, b)) == pytest.approx(expected, rel=1e-6, abs=1e-9)

    def test_matches_numpy(self):
        a, b = random_vectors(2, seed=5)
        np.testing.assert_array_almost_equal(cross(a, b), np.cross(a, b))


class TestNormalize:
    """Tests for normalize and normalized."""

    def test_normalize_in_place(self):
        v = np.array([3.0, 4.0, 0.0])
        result = normalize(v)
        assert result is None
        np.testing.assert_array_almost_equal(v, [0.6, 0.8, 0.0])

    def test_normalized_leaves_input(self):
        v = np.array([0.0, 0.0, 2.0])
        result = normalized(v)
        np.testing.assert_array_almost_equal(result, [0.0, 0.0, 1.0])
        np.testing.assert_array_equal(v, [0.0, 0.0, 2.0])

    def test_unit_length(self):
        for v in random_vectors():
            assert norm(normalized(v)) == pytest.approx(1.0)

    def test_tiny_vector_is_not_zero_length(self):
        v = np.array([1e-170, 0.0, 0.0])
        assert norm(v) == pytest.approx(1e-170)
        normalize(v)
        np.testing.assert_allclose(v, [1.0, 0.0, 0.0])

    def test_huge_vector_norm(self):
        assert norm(np.array([3e200, 4e200, 0.0])) == pytest.approx(5e200)

    def test_normalize_zero_raises(self):
        v = np.zeros(3)
        with pytest.raises(ZeroLengthVectorError):
            normalize(v)

    def test_normalized_zero_raises_value_error(self):
        """Zero-length errors are also ValueErrors."""
        with pytest.raises(ValueError):
            normalized(np.zeros(3))


class TestDifferences:
    """Tests for vec3_from_to and diff_norm."""

    def test_from_to(self):
        a = np.array([1.0, 2.0, 3.0])
        b = np.array([4.0, 6.0, 3.0])
        np.testing.assert_array_almost_equal(vec3_from_to(a, b), [3.0, 4.0, 0.0])

    def test_diff_norm(self):
        a = np.array([1.0, 2.0, 3.0])
        b = np.array([4.0, 6.0, 3.0])
        assert diff_norm(a, b) == pytest.approx(5.0)
        assert diff_norm(b, a) == pytest.approx(5.0)


class TestAsVec3:
    """Tests for as_vec3."""

    def test_list_input(self):
        v = as_vec3([1, 2, 3])
        assert v.dtype == np.float64
        np.testing.assert_array_equal(v, [1.0, 2.0, 3.0])

    def test_wrong_length_raises(self):
        with pytest.raises(ValueError):
            as_vec3([1.0, 2.0])


class TestVec3:
    """Tests for the Vec3 value type."""

    def test_components(self):
        v = Vec3(1.0, 2.0, 3.0)
        assert (v.x, v.y, v.z) == (1.0, 2.0, 3.0)
        assert list(v) == [1.0, 2.0, 3.0]

    def test_set_and_attributes(self):
        v = Vec3()
        v.set(4, 5, 6)
        v.z = -1.0
        np.testing.assert_array_equal(v.to_array(), [4.0, 5.0, -1.0])

    def test_from_array(self):
        assert Vec3.from_array(np.array([0.5, 0.0, -0.5])) == Vec3(0.5, 0.0, -0.5)

    def test_normalize_in_place(self):
        v = Vec3(0.0, 3.0, 4.0)
        v.normalize()
        assert v.y == pytest.approx(0.6)
        assert v.z == pytest.approx(0.8)

    def test_normalized_copy(self):
        v = Vec3(2.0, 0.0, 0.0)
        n = v.normalized()
        assert n == Vec3(1.0, 0.0, 0.0)
        assert v == Vec3(2.0, 0.0, 0.0)

    def test_static_operations(self):
        a = Vec3(1.0, 0.0, 0.0)
        b = Vec3(0.0, 1.0, 0.0)
        assert Vec3.dot(a, b) == 0.0
        assert Vec3.norm(Vec3(3.0, 4.0, 0.0)) == pytest.approx(5.0)
        assert Vec3.cross(a, b) == Vec3(0.0, 0.0, 1.0)
        assert Vec3.from_to(a, b) == Vec3(-1.0, 1.0, 0.0)

    def test_normalize_zero_raises(self):
        with pytest.raises(ZeroLengthVectorError):
            Vec3().normalize()
