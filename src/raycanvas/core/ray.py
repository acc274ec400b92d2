"""Ray data structure.

A ray is an origin plus a direction. The direction is not normalized: its
magnitude scales the ray parameter ``t`` but not the location of
``origin + direction * t``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti

from raycanvas.core.vector import point3, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not normalized.
    """

    origin: point3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> point3:
    """Compute the point along the ray at parameter t.

    No bounds are applied to ``t``; negative values lie behind the origin.

    Args:
        ray: The ray to evaluate.
        t: The parameter value.

    Returns:
        The point ray.origin + ray.direction * t.
    """
    return ray.origin + ray.direction * t


@ti.func
def make_ray(origin: point3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)
