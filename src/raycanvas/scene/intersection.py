"""Scene-level ray intersection testing.

The scene's shapes are uploaded to the device as a Structure of Arrays (one
array per shape attribute) and scanned linearly. The nearest hit is the one
with the smallest ray parameter; a later candidate only replaces the current
best when its time compares strictly less, so a NaN time never displaces an
existing hit and ties keep the earlier shape.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycanvas.geometry.shape import Shape
    >>> from raycanvas.scene.intersection import pack_shapes
    >>> arrays = pack_shapes([Shape.sphere((0, 0, -1), 0.5)])
    >>> # Pass arrays.kinds, arrays.centers, ... to a kernel using intersect_scene
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from raycanvas.core.ray import Ray
from raycanvas.geometry.shape import Shape, ShapeData, cast
from raycanvas.geometry.sphere import HitRecord, make_miss_record


@dataclass
class ShapeArrays:
    """Structure of Arrays layout of a shape list for kernel arguments.

    Arrays always hold at least one slot so they can be passed to kernels
    even for an empty scene; ``count`` is the number of live shapes.

    Attributes:
        kinds: ShapeKind tags, int32 of shape (n,).
        centers: Centers, float32 of shape (n, 3).
        radii: Radii, float32 of shape (n,).
        colors: Colors, float32 of shape (n, 3).
        count: Number of shapes actually in the scene.
    """

    kinds: npt.NDArray[np.int32]
    centers: npt.NDArray[np.float32]
    radii: npt.NDArray[np.float32]
    colors: npt.NDArray[np.float32]
    count: int


def pack_shapes(shapes: Sequence[Shape]) -> ShapeArrays:
    """Pack a shape list into kernel-ready arrays.

    Args:
        shapes: The scene's shapes, in scan order.

    Returns:
        The packed arrays.
    """
    count = len(shapes)
    slots = max(count, 1)

    kinds = np.full(slots, -1, dtype=np.int32)
    centers = np.zeros((slots, 3), dtype=np.float32)
    radii = np.zeros(slots, dtype=np.float32)
    colors = np.zeros((slots, 3), dtype=np.float32)

    for idx, shape in enumerate(shapes):
        kinds[idx] = int(shape.kind)
        centers[idx] = shape.center
        radii[idx] = shape.radius
        colors[idx] = shape.color

    return ShapeArrays(kinds=kinds, centers=centers, radii=radii, colors=colors, count=count)


@ti.func
def load_shape(
    kinds: ti.template(),
    centers: ti.template(),
    radii: ti.template(),
    colors: ti.template(),
    index: ti.i32,
) -> ShapeData:
    """Read one shape out of the Structure of Arrays storage."""
    return ShapeData(
        kind=kinds[index],
        center=centers[index],
        radius=radii[index],
        color=colors[index],
    )


@ti.func
def intersect_scene(
    ray: Ray,
    kinds: ti.template(),
    centers: ti.template(),
    radii: ti.template(),
    colors: ti.template(),
    count: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test a ray against every shape and return the nearest hit.

    Args:
        ray: The ray to test.
        kinds: Shape kind tags.
        centers: Shape centers.
        radii: Shape radii.
        colors: Shape colors.
        count: Number of live shapes.
        t_min: Lower bound of the accepted ray parameter.
        t_max: Upper bound of the accepted ray parameter.

    Returns:
        The nearest HitRecord with ``shape_index`` set, or a miss record.
    """
    closest = make_miss_record()

    for k in range(count):
        shape = load_shape(kinds, centers, radii, colors, k)
        rec = cast(ray, shape, t_min, t_max)
        if rec.hit == 1:
            if closest.hit == 0 or rec.time < closest.time:
                closest = rec
                closest.shape_index = k

    return closest
