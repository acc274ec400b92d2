"""Tagged shape set and intersection dispatch.

Shapes form a closed set of kinds identified by :class:`ShapeKind`. On the
host a shape is an immutable :class:`Shape` value; on the device the same data
is carried by :class:`ShapeData` and intersection dispatches on the kind tag.
Adding a shape kind means adding an enum member, its intersection routine,
and a branch in :func:`cast`.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum

import taichi as ti

from raycanvas.core.ray import Ray
from raycanvas.core.vector import color3, point3
from raycanvas.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

logger = logging.getLogger(__name__)

Vec3Tuple = tuple[float, float, float]


class ShapeKind(IntEnum):
    """Enumeration of supported shape kinds.

    Used as the tag for intersection dispatch on the device.
    """

    SPHERE = 0


# Plain integer for comparisons inside Taichi functions
_SPHERE = int(ShapeKind.SPHERE)


@dataclass(frozen=True)
class Shape:
    """A scene shape.

    Attributes:
        kind: The shape kind tag.
        center: The center point (x, y, z).
        radius: The radius. Expected to be positive, not enforced.
        color: The surface color (r, g, b).
    """

    kind: ShapeKind
    center: Vec3Tuple
    radius: float
    color: Vec3Tuple = (1.0, 1.0, 1.0)

    @classmethod
    def sphere(
        cls,
        center: Vec3Tuple,
        radius: float,
        color: Vec3Tuple = (1.0, 1.0, 1.0),
    ) -> "Shape":
        """Create a sphere shape.

        A non-positive radius is accepted but logged, since such spheres
        never produce a sensible hit.
        """
        if radius <= 0.0:
            logger.warning("Sphere at %s has non-positive radius %s", center, radius)
        return cls(
            kind=ShapeKind.SPHERE,
            center=(float(center[0]), float(center[1]), float(center[2])),
            radius=float(radius),
            color=(float(color[0]), float(color[1]), float(color[2])),
        )


@dataclass
class CastHit:
    """Host-side record of a ray striking a shape.

    A host cast result is ``CastHit | None``, where ``None`` is a miss.

    Attributes:
        shape: The struck shape.
        entry: The world-space hit point.
        normal: Unit normal oriented against the incoming ray.
        time: The ray parameter of the hit.
        front_face: Whether the ray struck the outside of the surface.
        collisions: Further intersection points. Always empty for spheres,
            which only track the entry point.
    """

    shape: Shape
    entry: Vec3Tuple
    normal: Vec3Tuple
    time: float
    front_face: bool
    collisions: list[Vec3Tuple] = field(default_factory=list)


@ti.dataclass
class ShapeData:
    """Device-side shape value.

    Attributes:
        kind: The ShapeKind tag as an integer.
        center: The center point.
        radius: The radius.
        color: The surface color.
    """

    kind: ti.i32
    center: point3
    radius: ti.f32
    color: color3


@ti.func
def cast(ray: Ray, shape: ShapeData, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Intersect a ray with a shape, dispatching on the shape kind.

    Args:
        ray: The ray to test.
        shape: The shape to test against.
        t_min: Lower bound of the accepted ray parameter.
        t_max: Upper bound of the accepted ray parameter.

    Returns:
        A HitRecord; unknown kinds always miss.
    """
    result = make_miss_record()
    if shape.kind == _SPHERE:
        sphere = Sphere(center=shape.center, radius=shape.radius, color=shape.color)
        result = hit_sphere(ray, sphere, t_min, t_max)
    return result
