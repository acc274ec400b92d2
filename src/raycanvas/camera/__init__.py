"""Camera module for view and ray generation.

Components:
    camera: Camera state, relative movement and primary ray generation

Ray generation uses viewport coordinates:
    u in [0, 1]: left to right across the viewport
    v in [0, 1]: bottom to top across the viewport

The unrotated camera looks down -Z with +Y up. Rays are rotated by the
camera's angles, X first, then Y, then Z.
"""

from .camera import Camera, RelativeDirection, View, as_vector3, beam, make_view

__all__ = [
    "Camera",
    "RelativeDirection",
    "View",
    "as_vector3",
    "beam",
    "make_view",
]
