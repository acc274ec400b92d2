"""Unit tests for per-axis rotation.

Tests cover:
- Single-axis quarter turns
- X, then Y, then Z application order
- Agreement between the kernel and NumPy implementations
- Arity validation
"""

import math

import numpy as np
import pytest
import taichi as ti

from raycanvas.core.rotation import AXIS_ORDER, Rotation, axis_matrix, rotate
from raycanvas.core.vector import vec3
from raycanvas.errors import ConstructionError

HALF_PI = math.pi / 2.0


@ti.kernel
def _rotate_kernel(out: ti.types.ndarray(dtype=ti.f32, ndim=1), v: vec3, angles: vec3):
    r = rotate(v, angles)
    for k in ti.static(range(3)):
        out[k] = r[k]


def _rotate_on_device(v, angles):
    out = np.zeros(3, dtype=np.float32)
    _rotate_kernel(out, vec3(*v), vec3(*angles))
    return out


class TestHostRotation:
    """Tests for Rotation.rotate."""

    def test_identity(self):
        result = Rotation().rotate((1.0, 2.0, 3.0))
        assert np.allclose(result, [1.0, 2.0, 3.0])

    def test_quarter_turn_about_z(self):
        result = Rotation(z=HALF_PI).rotate((1.0, 0.0, 0.0))
        assert np.allclose(result, [0.0, 1.0, 0.0], atol=1e-6)

    def test_quarter_turn_about_x(self):
        result = Rotation(x=HALF_PI).rotate((0.0, 1.0, 0.0))
        assert np.allclose(result, [0.0, 0.0, 1.0], atol=1e-6)

    def test_quarter_turn_about_y(self):
        result = Rotation(y=HALF_PI).rotate((0.0, 0.0, 1.0))
        assert np.allclose(result, [1.0, 0.0, 0.0], atol=1e-6)

    def test_x_applied_before_z(self):
        """X first sends +Y to +Z, which Z then leaves alone.

        Applying Z first would give -X instead.
        """
        result = Rotation(x=HALF_PI, z=HALF_PI).rotate((0.0, 1.0, 0.0))
        assert np.allclose(result, [0.0, 0.0, 1.0], atol=1e-6)

    def test_preserves_length(self):
        v = np.array([0.3, -0.5, 1.2], dtype=np.float32)
        result = Rotation(0.4, 1.1, -0.7).rotate(v)
        assert np.linalg.norm(result) == pytest.approx(np.linalg.norm(v), rel=1e-5)

    def test_returns_float32(self):
        assert Rotation(0.1, 0.2, 0.3).rotate((1, 0, 0)).dtype == np.float32


class TestDeviceRotation:
    """Tests for the kernel-side rotate()."""

    def test_x_applied_before_z(self):
        result = _rotate_on_device((0.0, 1.0, 0.0), (HALF_PI, 0.0, HALF_PI))
        assert np.allclose(result, [0.0, 0.0, 1.0], atol=1e-6)

    @pytest.mark.parametrize(
        "angles",
        [(0.4, 1.1, -0.7), (0.0, math.pi, 0.0), (-2.0, 0.3, 5.0)],
    )
    def test_matches_host(self, angles):
        v = (0.3, -0.5, 1.2)
        device = _rotate_on_device(v, angles)
        host = Rotation(*angles).rotate(v)
        assert np.allclose(device, host, atol=1e-5)


class TestAxisMatrix:
    """Tests for axis_matrix."""

    def test_axis_order(self):
        assert AXIS_ORDER == ("x", "y", "z")

    @pytest.mark.parametrize("axis", ["x", "y", "z"])
    def test_orthonormal(self, axis):
        m = axis_matrix(axis, 0.83)
        assert np.allclose(m @ m.T, np.eye(3), atol=1e-6)

    def test_unknown_axis_raises(self):
        with pytest.raises(ValueError, match="Unknown rotation axis"):
            axis_matrix("w", 1.0)


class TestFromSequence:
    """Tests for Rotation.from_sequence."""

    def test_three_components(self):
        rotation = Rotation.from_sequence([0.1, 0.2, 0.3])
        assert rotation.as_tuple() == pytest.approx((0.1, 0.2, 0.3))

    @pytest.mark.parametrize("values", [[], [0.1, 0.2], [0.1, 0.2, 0.3, 0.4]])
    def test_wrong_arity_raises(self, values):
        with pytest.raises(ConstructionError):
            Rotation.from_sequence(values)

    def test_construction_error_is_value_error(self):
        with pytest.raises(ValueError):
            Rotation.from_sequence([1.0])
