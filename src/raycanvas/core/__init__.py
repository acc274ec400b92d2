"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    vector: 3-vector aliases and vector algebra
    ray: Ray data structure and point-along-ray evaluation
    rotation: Per-axis rotation matrices and sequential X, Y, Z rotation
    integrator: Background and normal shading, the render and probe kernels
    canvas: Pixel enumeration, rendering and RGBA encoding

All per-pixel work runs in Taichi kernels; the host side only packs inputs
and gathers outputs.
"""

from .ray import Ray, make_ray, ray_at
from .rotation import AXIS_ORDER, Rotation, axis_matrix, rotate, rotate_x, rotate_y, rotate_z
from .vector import color3, cross, dot, length, length_squared, point3, unit_vector, vec3

# Note: integrator and canvas are NOT imported here to avoid circular imports.
# Import them directly from raycanvas.core.integrator or raycanvas.core.canvas.

__all__ = [
    "vec3",
    "point3",
    "color3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit_vector",
    "Ray",
    "ray_at",
    "make_ray",
    "AXIS_ORDER",
    "Rotation",
    "axis_matrix",
    "rotate",
    "rotate_x",
    "rotate_y",
    "rotate_z",
]
