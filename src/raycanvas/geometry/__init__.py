"""Geometry module for shape descriptions and intersection.

Components:
    sphere: Sphere primitive with ray-sphere intersection
    shape: Host-side shape descriptions and kind dispatch

Intersection routines are Taichi functions (@ti.func) so they can be called
from the render kernel for every pixel in parallel.
"""

from .shape import CastHit, Shape, ShapeData, ShapeKind, cast
from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record

__all__ = [
    "Shape",
    "ShapeKind",
    "ShapeData",
    "CastHit",
    "cast",
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
]
