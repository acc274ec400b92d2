"""Scene facade and the render entry point.

The :class:`Scene` pairs a camera with a canvas and exposes the commands a
host application needs between frames: relative movement, absolute turning,
resizing, changing the anti-aliasing level, and rendering to RGBA8 bytes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycanvas.camera.camera import RelativeDirection
    >>> from raycanvas.scene.scene import Scene
    >>>
    >>> scene = Scene.create(
    ...     width=400,
    ...     viewport_height=2,
    ...     aspect_ratio=16 / 9,
    ...     focal_length=1.0,
    ...     origin=(0.0, 0.0, 2.0),
    ...     rotation=(0.0, 0.0, 0.0),
    ... )
    >>> scene.move_along(RelativeDirection.UP)
    >>> data = scene.render()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from raycanvas.camera.camera import Camera, RelativeDirection
from raycanvas.core.canvas import Canvas
from raycanvas.core.rotation import Rotation
from raycanvas.geometry.shape import Shape
from raycanvas.scene.config import CameraState, CanvasState

logger = logging.getLogger(__name__)


def default_shapes() -> list[Shape]:
    """Create the demonstration scene: two small spheres over a large ground.

    Returns:
        A green sphere at the origin, a small red sphere to its right, and a
        large sphere acting as the ground plane.
    """
    return [
        Shape.sphere(center=(0.0, 0.0, 0.0), radius=0.5, color=(0.3, 1.0, 0.3)),
        Shape.sphere(center=(2.0, 0.0, 0.0), radius=0.2, color=(0.8, 0.0, 0.3)),
        Shape.sphere(center=(0.0, -100.5, -1.0), radius=100.0, color=(0.0, 0.0, 0.0)),
    ]


class Scene:
    """A camera and a canvas rendered together.

    Attributes:
        camera: The scene camera.
        canvas: The render target and shape list.
    """

    def __init__(self, camera: Camera, canvas: Canvas) -> None:
        """Initialize the scene from an existing camera and canvas."""
        self.camera = camera
        self.canvas = canvas
        logger.debug("Created scene with %r and %r", camera, canvas)

    @classmethod
    def create(
        cls,
        width: int,
        viewport_height: int,
        aspect_ratio: float,
        focal_length: float,
        origin: Sequence[float],
        rotation: Sequence[float],
        shapes: Sequence[Shape] | None = None,
        *,
        anti_aliasing: int = 0,
    ) -> Scene:
        """Create a scene from raw camera and canvas parameters.

        Args:
            width: Image width in pixels.
            viewport_height: Viewport height in world units.
            aspect_ratio: Width divided by height, for viewport and image.
            focal_length: Distance from the camera to the viewport.
            origin: Camera position (x, y, z).
            rotation: Camera angles (x, y, z) in radians.
            shapes: The scene's shapes; defaults to :func:`default_shapes`.
            anti_aliasing: Extra jittered samples per pixel (0 disables).

        Raises:
            ConstructionError: If origin or rotation has the wrong arity.
        """
        # Camera first: it validates origin and rotation before any canvas exists
        camera = Camera(aspect_ratio, viewport_height, focal_length, origin, rotation)
        if shapes is None:
            shapes = default_shapes()
        canvas = Canvas(width, aspect_ratio, shapes, anti_aliasing=anti_aliasing)
        return cls(camera, canvas)

    @classmethod
    def from_states(cls, camera_state: CameraState, canvas_state: CanvasState) -> Scene:
        """Create a scene from configuration dataclasses."""
        return cls(camera_state.build(), canvas_state.build())

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.canvas.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.canvas.height

    def move_along(self, direction: RelativeDirection) -> None:
        """Move the camera one step relative to its facing."""
        self.camera.move_along(direction)

    def turn(self, rotation: Sequence[float] | Rotation) -> None:
        """Set the camera orientation to the given absolute angles."""
        self.camera.turn(rotation)

    def change_width(self, width: int) -> None:
        """Resize the canvas; height follows from the aspect ratio."""
        self.canvas.resize(width)

    def set_anti_aliasing(self, samples: int) -> None:
        """Set the number of extra jittered samples per pixel."""
        self.canvas.anti_aliasing = samples

    def set_shapes(self, shapes: Sequence[Shape]) -> None:
        """Replace the scene's shapes."""
        self.canvas.shapes = shapes

    def render(self) -> bytes:
        """Render the current view as packed RGBA8 bytes."""
        return self.canvas.paint(self.camera)


def render(camera_state: CameraState, canvas_state: CanvasState) -> bytes:
    """Render one frame from configuration values.

    Args:
        camera_state: Camera position, orientation and viewport.
        canvas_state: Output width, aspect ratio, anti-aliasing and shapes.

    Returns:
        ``4 * width * height`` RGBA8 bytes in output pixel order.

    Raises:
        ConstructionError: If origin or rotation has the wrong arity.
        PixelEncodingError: If a shaded color is outside [0, 1].
    """
    return Scene.from_states(camera_state, canvas_state).render()
