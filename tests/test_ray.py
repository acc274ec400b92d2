"""Unit tests for the Ray dataclass and ray evaluation."""

import numpy as np
import pytest
import taichi as ti

from raycanvas.core.ray import Ray, make_ray, ray_at
from raycanvas.core.vector import point3, vec3


@ti.kernel
def _ray_at_kernel(out: ti.types.ndarray(dtype=ti.f32, ndim=1), origin: point3, direction: vec3, t: ti.f32):
    ray = make_ray(origin, direction)
    p = ray_at(ray, t)
    for k in ti.static(range(3)):
        out[k] = p[k]
        out[3 + k] = ray.direction[k]


def _evaluate(origin, direction, t):
    out = np.zeros(6, dtype=np.float32)
    _ray_at_kernel(out, point3(*origin), vec3(*direction), t)
    return out[:3], out[3:]


class TestRayAt:
    """Tests for point-along-ray evaluation."""

    def test_at_zero_is_origin(self):
        point, _ = _evaluate((1.0, 2.0, 3.0), (0.0, 0.0, -1.0), 0.0)
        assert np.allclose(point, [1.0, 2.0, 3.0])

    def test_scales_unnormalized_direction(self):
        point, _ = _evaluate((1.0, 2.0, 3.0), (0.0, 0.0, -2.0), 1.5)
        assert np.allclose(point, [1.0, 2.0, 0.0])

    def test_negative_parameter_goes_behind(self):
        point, _ = _evaluate((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), -2.0)
        assert np.allclose(point, [-2.0, 0.0, 0.0])

    def test_direction_is_not_normalized(self):
        _, direction = _evaluate((0.0, 0.0, 0.0), (3.0, 0.0, 4.0), 1.0)
        assert np.allclose(direction, [3.0, 0.0, 4.0])


class TestRayStruct:
    """Tests for constructing Ray values directly."""

    def test_fields_round_trip(self):
        result = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=point3(1.0, -1.0, 0.5), direction=vec3(0.0, 2.0, 0.0))
            result[0] = ray.origin
            result[1] = ray.direction

        test_kernel()
        assert np.allclose(result[0].to_numpy(), [1.0, -1.0, 0.5])
        assert result[1][1] == pytest.approx(2.0)
