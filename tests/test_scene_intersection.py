"""Unit tests for shape packing and nearest-hit search.

Tests cover:
- Structure of Arrays packing, including the empty scene
- Nearest hit selection regardless of shape order
- Tie breaking in favor of the earlier shape
"""

import numpy as np
import pytest
import taichi as ti

from raycanvas.core.ray import Ray
from raycanvas.core.vector import vec3
from raycanvas.geometry.shape import Shape, ShapeKind
from raycanvas.scene.intersection import intersect_scene, pack_shapes


@ti.kernel
def _nearest_kernel(
    out: ti.types.ndarray(dtype=ti.f32, ndim=1),
    kinds: ti.types.ndarray(dtype=ti.i32, ndim=1),
    centers: ti.types.ndarray(dtype=vec3, ndim=1),
    radii: ti.types.ndarray(dtype=ti.f32, ndim=1),
    colors: ti.types.ndarray(dtype=vec3, ndim=1),
    count: ti.i32,
    origin: vec3,
    direction: vec3,
):
    ray = Ray(origin=origin, direction=direction)
    record = intersect_scene(ray, kinds, centers, radii, colors, count, 0.0, 10.0)
    out[0] = ti.cast(record.hit, ti.f32)
    out[1] = record.time
    out[2] = ti.cast(record.shape_index, ti.f32)


def _nearest(shapes, origin=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0)):
    arrays = pack_shapes(shapes)
    out = np.zeros(3, dtype=np.float32)
    _nearest_kernel(
        out,
        arrays.kinds,
        arrays.centers,
        arrays.radii,
        arrays.colors,
        arrays.count,
        vec3(*origin),
        vec3(*direction),
    )
    return out[0] == 1.0, float(out[1]), int(out[2])


class TestPackShapes:
    """Tests for pack_shapes."""

    def test_packs_fields(self):
        shapes = [
            Shape.sphere((0.0, 0.0, -1.0), 0.5, (0.3, 1.0, 0.3)),
            Shape.sphere((2.0, 0.0, 0.0), 0.2),
        ]
        arrays = pack_shapes(shapes)
        assert arrays.count == 2
        assert arrays.kinds.tolist() == [int(ShapeKind.SPHERE)] * 2
        assert np.allclose(arrays.centers[0], [0.0, 0.0, -1.0])
        assert np.allclose(arrays.radii, [0.5, 0.2])
        assert np.allclose(arrays.colors[1], [1.0, 1.0, 1.0])

    def test_dtypes(self):
        arrays = pack_shapes([Shape.sphere((0.0, 0.0, 0.0), 1.0)])
        assert arrays.kinds.dtype == np.int32
        assert arrays.centers.dtype == np.float32
        assert arrays.radii.dtype == np.float32
        assert arrays.colors.dtype == np.float32

    def test_empty_scene_keeps_one_slot(self):
        arrays = pack_shapes([])
        assert arrays.count == 0
        assert arrays.kinds.shape == (1,)
        assert arrays.kinds[0] == -1
        assert arrays.centers.shape == (1, 3)


class TestNearestHit:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        hit, _, index = _nearest([])
        assert not hit
        assert index == -1

    def test_picks_nearest_after_farther(self):
        far = Shape.sphere((0.0, 0.0, -2.0), 0.5)
        near = Shape.sphere((0.0, 0.0, -1.0), 0.25)
        hit, time, index = _nearest([far, near])
        assert hit
        assert time == pytest.approx(0.75)
        assert index == 1

    def test_picks_nearest_before_farther(self):
        far = Shape.sphere((0.0, 0.0, -2.0), 0.5)
        near = Shape.sphere((0.0, 0.0, -1.0), 0.25)
        hit, time, index = _nearest([near, far])
        assert hit
        assert time == pytest.approx(0.75)
        assert index == 0

    def test_tie_keeps_first_shape(self):
        shape = Shape.sphere((0.0, 0.0, -1.0), 0.5)
        hit, _, index = _nearest([shape, shape])
        assert hit
        assert index == 0

    def test_skips_missed_shapes(self):
        off_axis = Shape.sphere((5.0, 0.0, -1.0), 0.5)
        on_axis = Shape.sphere((0.0, 0.0, -2.0), 0.5)
        hit, time, index = _nearest([off_axis, on_axis])
        assert hit
        assert time == pytest.approx(1.5)
        assert index == 1
