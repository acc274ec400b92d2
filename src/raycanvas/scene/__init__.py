"""Scene module for shape storage, configuration and rendering.

Components:
    intersection: Structure-of-arrays shape packing and nearest-hit search
    config: Camera and canvas configuration dataclasses
    scene: Scene facade pairing a camera with a canvas, and render()

Shape data is packed into contiguous numpy arrays and passed to the render
kernel as ndarray arguments, so no global Taichi fields are needed.
"""

from .intersection import ShapeArrays, intersect_scene, load_shape, pack_shapes

# Note: config and scene import the canvas, which imports this package.
# Import them directly from raycanvas.scene.config or raycanvas.scene.scene.

__all__ = [
    "ShapeArrays",
    "pack_shapes",
    "load_shape",
    "intersect_scene",
]
