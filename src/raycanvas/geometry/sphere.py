"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere and HitRecord dataclasses and the sphere
intersection routine. The intersection uses the half-b form of the quadratic
formula and accepts the nearer root when it lies inside the ``[t_min, t_max]``
window, falling back to the farther root otherwise.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycanvas.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from raycanvas.core.ray import Ray, ray_at
from raycanvas.core.vector import color3, dot, length_squared, point3, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and color.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive by convention).
        color: The surface color (vec3). Carried with the shape but not used
            by the normal shader.
    """

    center: point3
    radius: ti.f32
    color: color3


@ti.dataclass
class HitRecord:
    """Outcome of one ray-shape intersection test.

    The ``hit`` flag is the cast result tag: 0 for a miss, 1 for a hit. The
    remaining fields are only meaningful when ``hit == 1``.

    Attributes:
        hit: 1 if the ray struck the shape, 0 otherwise.
        entry: The world-space hit point.
        normal: Unit surface normal, oriented against the incoming ray.
        time: The ray parameter of the hit.
        front_face: 1 if the ray struck the outside of the surface.
        shape_index: Index of the struck shape in the scene, -1 if unknown.
    """

    hit: ti.i32
    entry: point3
    normal: vec3
    time: ti.f32
    front_face: ti.i32
    shape_index: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        entry=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        time=0.0,
        front_face=0,
        shape_index=-1,
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-sphere intersection.

    Solves |origin + t * direction - center|^2 = radius^2 using

        a = |direction|^2
        half_b = (origin - center) . direction
        c = |origin - center|^2 - radius^2
        discriminant = half_b^2 - a * c

    A root is rejected when ``root < t_min or t_max < root``; both bounds are
    inclusive. The nearer root wins when accepted. The normal is flipped for
    back-face hits so it always opposes the incoming ray.

    A zero-length direction or a zero radius is reported as a miss rather
    than propagating NaN.

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        t_min: Lower bound of the accepted ray parameter.
        t_max: Upper bound of the accepted ray parameter.

    Returns:
        A HitRecord; check ``hit`` to determine whether it struck.
    """
    oc = ray.origin - sphere.center
    a = length_squared(ray.direction)
    half_b = dot(oc, ray.direction)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    result = make_miss_record()

    if discriminant >= 0.0 and a != 0.0 and sphere.radius != 0.0:
        sqrtd = ti.sqrt(discriminant)
        root = (-half_b - sqrtd) / a
        second_root = (-half_b + sqrtd) / a

        root_oob = root < t_min or t_max < root
        second_oob = second_root < t_min or t_max < second_root

        if not (root_oob and second_oob):
            t = root
            if root_oob:
                t = second_root

            p = ray_at(ray, t)
            outward_normal = (p - sphere.center) / sphere.radius

            front_face = 0
            normal = -outward_normal
            if dot(ray.direction, outward_normal) < 0.0:
                front_face = 1
                normal = outward_normal

            result = HitRecord(
                hit=1,
                entry=p,
                normal=normal,
                time=t,
                front_face=front_face,
                shape_index=-1,
            )

    return result
