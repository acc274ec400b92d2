"""Render configuration.

A render is fully described by two values: the camera state and the canvas
state. Both are plain dataclasses so they can be built from command-line
arguments, tests or any host application.

Example:
    >>> from raycanvas.scene.config import CameraState, CanvasState
    >>> camera_state = CameraState(origin=(0.0, 0.0, 2.0))
    >>> canvas_state = CanvasState(width=400, anti_aliasing=4)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from raycanvas.camera.camera import Camera
from raycanvas.core.canvas import Canvas
from raycanvas.geometry.shape import Shape

DEFAULT_ASPECT_RATIO = 16.0 / 9.0
DEFAULT_VIEWPORT_HEIGHT = 2
DEFAULT_FOCAL_LENGTH = 1.0


@dataclass
class CameraState:
    """Camera configuration.

    Attributes:
        origin: Camera position; must have exactly 3 components.
        rotation: Per-axis angles in radians; must have exactly 3 components.
        viewport_height: Viewport height in world units.
        aspect_ratio: Viewport width divided by height.
        focal_length: Distance from the origin to the viewport.
    """

    origin: Sequence[float] = (0.0, 0.0, 0.0)
    rotation: Sequence[float] = (0.0, 0.0, 0.0)
    viewport_height: int = DEFAULT_VIEWPORT_HEIGHT
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    focal_length: float = DEFAULT_FOCAL_LENGTH

    def build(self) -> Camera:
        """Create the camera.

        Raises:
            ConstructionError: If origin or rotation has the wrong arity.
        """
        return Camera(
            aspect_ratio=self.aspect_ratio,
            viewport_height=self.viewport_height,
            focal_length=self.focal_length,
            origin=self.origin,
            rotation=self.rotation,
        )


@dataclass
class CanvasState:
    """Canvas configuration.

    Attributes:
        width: Image width in pixels.
        aspect_ratio: Image width divided by height.
        anti_aliasing: Extra jittered samples per pixel (0 disables).
        shapes: The scene's shapes.
    """

    width: int = 400
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    anti_aliasing: int = 0
    shapes: list[Shape] = field(default_factory=list)

    def build(self) -> Canvas:
        """Create the canvas."""
        return Canvas(
            self.width,
            self.aspect_ratio,
            self.shapes,
            anti_aliasing=self.anti_aliasing,
        )
