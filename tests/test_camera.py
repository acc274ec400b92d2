"""Unit tests for the camera.

Tests cover:
- Viewport geometry
- Primary ray generation with and without rotation
- Relative movement and absolute turning
- Arity validation
"""

import math

import numpy as np
import pytest
import taichi as ti

from raycanvas.camera.camera import Camera, RelativeDirection, beam, make_view
from raycanvas.core.rotation import Rotation
from raycanvas.core.vector import vec3
from raycanvas.errors import ConstructionError

ASPECT = 16.0 / 9.0


@ti.kernel
def _beam_kernel(
    out: ti.types.ndarray(dtype=ti.f32, ndim=1),
    u: ti.f32,
    v: ti.f32,
    origin: vec3,
    horizontal: vec3,
    vertical: vec3,
    focal_length: ti.f32,
    rotation: vec3,
):
    ray = beam(make_view(origin, horizontal, vertical, focal_length, rotation), u, v)
    for k in ti.static(range(3)):
        out[k] = ray.origin[k]
        out[3 + k] = ray.direction[k]


def _beam(camera, u, v):
    out = np.zeros(6, dtype=np.float32)
    _beam_kernel(out, u, v, *camera.view_args())
    return out[:3], out[3:]


class TestViewport:
    """Tests for viewport geometry."""

    def test_basis_vectors(self, demo_camera):
        assert np.allclose(demo_camera.horizontal, [2.0 * ASPECT, 0.0, 0.0])
        assert np.allclose(demo_camera.vertical, [0.0, 2.0, 0.0])

    def test_lower_left_corner(self):
        camera = Camera(ASPECT, 2, 1.0, origin=(0.0, 0.0, 0.0))
        assert np.allclose(camera.lower_left_corner(), [-ASPECT, -1.0, -1.0])

    def test_lower_left_corner_follows_origin(self, demo_camera):
        demo_camera.move_along(RelativeDirection.RIGHT)
        assert np.allclose(demo_camera.lower_left_corner(), [-ASPECT + 0.1, -1.0, 1.0])


class TestBeam:
    """Tests for primary ray generation."""

    def test_center_looks_down_negative_z(self, demo_camera):
        origin, direction = _beam(demo_camera, 0.5, 0.5)
        assert np.allclose(origin, [0.0, 0.0, 2.0])
        assert np.allclose(direction, [0.0, 0.0, -1.0], atol=1e-6)

    def test_lower_left(self, demo_camera):
        _, direction = _beam(demo_camera, 0.0, 0.0)
        assert np.allclose(direction, [-ASPECT, -1.0, -1.0], atol=1e-6)

    def test_upper_right(self, demo_camera):
        _, direction = _beam(demo_camera, 1.0, 1.0)
        assert np.allclose(direction, [ASPECT, 1.0, -1.0], atol=1e-6)

    def test_rotation_applies_to_direction_only(self, demo_camera):
        demo_camera.turn((0.0, math.pi / 2.0, 0.0))
        origin, direction = _beam(demo_camera, 0.5, 0.5)
        assert np.allclose(origin, [0.0, 0.0, 2.0])
        assert np.allclose(direction, [-1.0, 0.0, 0.0], atol=1e-6)

    def test_matches_host_rotation(self, demo_camera):
        rotation = Rotation(0.3, -0.8, 1.2)
        demo_camera.turn(rotation)
        _, direction = _beam(demo_camera, 0.25, 0.75)
        raw = demo_camera.lower_left_corner() + 0.25 * demo_camera.horizontal
        raw = raw + 0.75 * demo_camera.vertical - demo_camera.origin
        assert np.allclose(direction, rotation.rotate(raw), atol=1e-5)


class TestMovement:
    """Tests for move_along and turn."""

    @pytest.mark.parametrize(
        ("direction", "expected"),
        [
            (RelativeDirection.UP, [0.0, 0.0, 1.9]),
            (RelativeDirection.DOWN, [0.0, 0.0, 2.1]),
            (RelativeDirection.LEFT, [-0.1, 0.0, 2.0]),
            (RelativeDirection.RIGHT, [0.1, 0.0, 2.0]),
        ],
    )
    def test_unrotated_steps(self, demo_camera, direction, expected):
        demo_camera.move_along(direction)
        assert np.allclose(demo_camera.origin, expected, atol=1e-6)

    def test_step_follows_rotation(self, demo_camera):
        """Facing -X after a quarter turn about Y, forward moves along -X."""
        demo_camera.turn((0.0, math.pi / 2.0, 0.0))
        demo_camera.move_along(RelativeDirection.UP)
        assert np.allclose(demo_camera.origin, [-0.1, 0.0, 2.0], atol=1e-6)

    def test_opposite_steps_cancel(self, demo_camera):
        demo_camera.turn((0.4, 1.0, -0.3))
        demo_camera.move_along(RelativeDirection.LEFT)
        demo_camera.move_along(RelativeDirection.RIGHT)
        assert np.allclose(demo_camera.origin, [0.0, 0.0, 2.0], atol=1e-6)

    def test_custom_speed(self):
        camera = Camera(ASPECT, 2, 1.0, origin=(0.0, 0.0, 0.0), speed=0.5)
        camera.move_along(RelativeDirection.UP)
        assert np.allclose(camera.origin, [0.0, 0.0, -0.5])

    def test_turn_is_absolute(self, demo_camera):
        demo_camera.turn((0.0, 1.0, 0.0))
        demo_camera.turn((0.0, 0.5, 0.0))
        assert demo_camera.rotation.as_tuple() == pytest.approx((0.0, 0.5, 0.0))

    def test_turn_does_not_move(self, demo_camera):
        demo_camera.turn((0.2, 0.2, 0.2))
        assert np.allclose(demo_camera.origin, [0.0, 0.0, 2.0])

    def test_origin_property_is_a_copy(self, demo_camera):
        origin = demo_camera.origin
        origin[0] = 99.0
        assert demo_camera.origin[0] == 0.0


class TestValidation:
    """Tests for construction errors."""

    def test_origin_wrong_arity(self):
        with pytest.raises(ConstructionError, match="origin"):
            Camera(ASPECT, 2, 1.0, origin=(0.0, 0.0))

    def test_rotation_wrong_arity(self):
        with pytest.raises(ConstructionError):
            Camera(ASPECT, 2, 1.0, origin=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0, 0.0))

    def test_failed_turn_keeps_rotation(self, demo_camera):
        demo_camera.turn((0.1, 0.2, 0.3))
        with pytest.raises(ConstructionError):
            demo_camera.turn((1.0,))
        assert demo_camera.rotation.as_tuple() == pytest.approx((0.1, 0.2, 0.3))


class TestCameraInfo:
    """Tests for debugging helpers."""

    def test_get_camera_info(self, demo_camera):
        info = demo_camera.get_camera_info()
        assert set(info) == {"origin", "horizontal", "vertical", "lower_left", "rotation"}
        assert info["origin"] == pytest.approx((0.0, 0.0, 2.0))
        assert info["rotation"] == (0.0, 0.0, 0.0)

    def test_repr(self, demo_camera):
        assert repr(demo_camera).startswith("Camera(origin=")
