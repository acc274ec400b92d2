"""Taichi-based ray casting renderer.

This package renders scenes of spheres seen through a rotatable pinhole
camera into packed RGBA8 pixel buffers, with support for:
- Surface-normal shading over a sky gradient background
- Jittered anti-aliasing
- Relative camera movement and absolute turning between frames
- PNG export and an interactive preview window

Subpackages:
    core: Vector algebra, rays, rotations, the render kernel and the canvas
    geometry: Shape descriptions and ray-sphere intersection
    camera: Camera state and primary ray generation
    scene: Shape packing, nearest-hit search, configuration and the scene facade
    preview: RGBA8 encoding, PNG export and interactive preview
"""

__version__ = "0.1.0"
