"""Vector algebra for points, directions and RGB colors.

A single 3-component f32 type (``taichi.math.vec3``) is used for points,
directions and colors. Component-wise arithmetic, scalar multiplication and
division, and negation come from the Taichi vector operators; this module adds
the geometric products and length helpers used by the renderer.

All functions here are Taichi functions (@ti.func) and must be called from
within a Taichi kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycanvas.core.vector import cross, unit_vector, vec3
    >>> @ti.kernel
    ... def demo() -> ti.f32:
    ...     n = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))
    ...     return unit_vector(n).z
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Aliases that document intent at call sites
point3 = vec3
color3 = vec3


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        The dot product a . b.
    """
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product of two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        The cross product a x b.
    """
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector (sum of squares)."""
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Unlike ``tm.normalize`` there is no epsilon guard: a zero-length input
    produces non-finite components. Callers must not pass degenerate
    directions.

    Args:
        v: The input vector.

    Returns:
        v divided by its length.
    """
    return v / length(v)
