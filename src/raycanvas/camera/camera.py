"""Movable camera with rotated primary ray generation.

The camera maps normalized viewport coordinates to world-space rays:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image

The viewport is a rectangle ``horizontal`` wide and ``vertical`` tall,
``focal_length`` in front of the camera along -Z. Every generated direction
is rotated by the camera's per-axis rotation (X, then Y, then Z).

The camera itself is host-side state. Before rendering, its current values
are packed into a :class:`View` which kernels pass to :func:`beam`.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycanvas.camera.camera import Camera, RelativeDirection
    >>>
    >>> camera = Camera(
    ...     aspect_ratio=16.0 / 9.0,
    ...     viewport_height=2,
    ...     focal_length=1.0,
    ...     origin=(0.0, 0.0, 2.0),
    ... )
    >>> camera.move_along(RelativeDirection.UP)  # one step forward
    >>> camera.turn((0.0, 0.5, 0.0))  # absolute orientation
"""

import logging
from collections.abc import Sequence
from enum import Enum
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti

from raycanvas.core.ray import Ray, make_ray
from raycanvas.core.rotation import Rotation, rotate
from raycanvas.core.vector import point3, vec3
from raycanvas.errors import ConstructionError

logger = logging.getLogger(__name__)


class RelativeDirection(Enum):
    """Movement directions relative to the camera's facing."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Unit steps in camera-local space before rotation.
# UP/DOWN move forward/back along the view axis (-Z/+Z).
_LOCAL_STEPS: dict[RelativeDirection, tuple[float, float, float]] = {
    RelativeDirection.UP: (0.0, 0.0, -1.0),
    RelativeDirection.DOWN: (0.0, 0.0, 1.0),
    RelativeDirection.LEFT: (-1.0, 0.0, 0.0),
    RelativeDirection.RIGHT: (1.0, 0.0, 0.0),
}


def as_vector3(values: Sequence[float], name: str) -> npt.NDArray[np.float32]:
    """Convert a 3-component sequence to a float32 array.

    Raises:
        ConstructionError: If ``values`` does not have exactly 3 components.
    """
    values = list(values)
    if len(values) != 3:
        raise ConstructionError(f"{name} requires exactly 3 components, got {len(values)}")
    return np.array(values, dtype=np.float32)


# =============================================================================
# Device-side view and ray generation
# =============================================================================


@ti.dataclass
class View:
    """Camera values needed for ray generation inside a kernel.

    Attributes:
        origin: Camera position.
        horizontal: Viewport width vector.
        vertical: Viewport height vector.
        focal_length: Distance from the origin to the viewport along -Z.
        rotation: Per-axis rotation angles (x, y, z) in radians.
    """

    origin: point3
    horizontal: vec3
    vertical: vec3
    focal_length: ti.f32
    rotation: vec3


@ti.func
def make_view(
    origin: point3,
    horizontal: vec3,
    vertical: vec3,
    focal_length: ti.f32,
    rotation: vec3,
) -> View:
    """Create a View from kernel arguments."""
    return View(
        origin=origin,
        horizontal=horizontal,
        vertical=vertical,
        focal_length=focal_length,
        rotation=rotation,
    )


@ti.func
def beam(view: View, u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized viewport coordinates (u, v).

    The lower-left corner is derived from the current origin on every call.
    The raw direction is rotated by the view rotation before the ray is
    returned; the ray origin is the camera position.

    Args:
        view: The camera view.
        u: Horizontal coordinate in [0, 1] (left to right).
        v: Vertical coordinate in [0, 1] (bottom to top).

    Returns:
        The primary ray. Its direction is not normalized.
    """
    lower_left_corner = (
        view.origin
        - view.horizontal / 2.0
        - view.vertical / 2.0
        - vec3(0.0, 0.0, view.focal_length)
    )
    direction = lower_left_corner + u * view.horizontal + v * view.vertical - view.origin
    return make_ray(view.origin, rotate(direction, view.rotation))


# =============================================================================
# Host-side camera state
# =============================================================================


class Camera:
    """A movable, rotatable pinhole camera.

    The viewport basis is fixed at construction. Origin and rotation change
    through :meth:`move_along` and :meth:`turn` between renders.

    Attributes:
        focal_length: Distance from the origin to the viewport.
        speed: Distance covered by one movement step.
    """

    DEFAULT_SPEED = 0.1

    def __init__(
        self,
        aspect_ratio: float,
        viewport_height: int,
        focal_length: float,
        origin: Sequence[float],
        rotation: Sequence[float] | Rotation = (0.0, 0.0, 0.0),
        *,
        speed: float = DEFAULT_SPEED,
    ) -> None:
        """Initialize the camera.

        Args:
            aspect_ratio: Viewport width divided by height.
            viewport_height: Height of the viewport in world units.
            focal_length: Distance from the origin to the viewport.
            origin: Camera position (x, y, z).
            rotation: Per-axis angles (x, y, z) in radians.
            speed: Distance covered by one movement step.

        Raises:
            ConstructionError: If origin or rotation is not 3 components.
        """
        origin_vec = as_vector3(origin, "Camera origin")
        if not isinstance(rotation, Rotation):
            rotation = Rotation.from_sequence(rotation)

        viewport_width = aspect_ratio * viewport_height

        self._origin = origin_vec
        self._rotation = rotation
        self._horizontal = np.array([viewport_width, 0.0, 0.0], dtype=np.float32)
        self._vertical = np.array([0.0, viewport_height, 0.0], dtype=np.float32)
        self.focal_length = float(focal_length)
        self.speed = float(speed)

    @property
    def origin(self) -> npt.NDArray[np.float32]:
        """Get a copy of the camera position."""
        return self._origin.copy()

    @property
    def rotation(self) -> Rotation:
        """Get the current per-axis rotation."""
        return self._rotation

    @property
    def horizontal(self) -> npt.NDArray[np.float32]:
        """Get the viewport width vector."""
        return self._horizontal.copy()

    @property
    def vertical(self) -> npt.NDArray[np.float32]:
        """Get the viewport height vector."""
        return self._vertical.copy()

    def move_along(self, direction: RelativeDirection) -> None:
        """Move one step relative to the current facing.

        The local step is scaled by ``speed`` and rotated by the current
        rotation before it is added to the origin.

        Args:
            direction: Which way to move.
        """
        step = np.array(_LOCAL_STEPS[direction], dtype=np.float32) * np.float32(self.speed)
        self._origin = self._origin + self._rotation.rotate(step)
        logger.debug("Camera moved %s to %s", direction.value, self._origin.tolist())

    def turn(self, rotation: Sequence[float] | Rotation) -> None:
        """Replace the camera orientation.

        Turning is absolute: the given angles replace the stored ones.

        Raises:
            ConstructionError: If rotation is not 3 components.
        """
        if not isinstance(rotation, Rotation):
            rotation = Rotation.from_sequence(rotation)
        self._rotation = rotation
        logger.debug("Camera turned to %s", rotation.as_tuple())

    def lower_left_corner(self) -> npt.NDArray[np.float32]:
        """Compute the viewport's lower-left corner for the current origin."""
        focal = np.array([0.0, 0.0, self.focal_length], dtype=np.float32)
        return self._origin - self._horizontal / 2.0 - self._vertical / 2.0 - focal

    def view_args(self) -> tuple[Any, Any, Any, float, Any]:
        """Pack the camera state as kernel arguments.

        Returns:
            (origin, horizontal, vertical, focal_length, rotation) with the
            vectors as ``taichi.math.vec3`` values.
        """
        return (
            vec3(*(float(c) for c in self._origin)),
            vec3(*(float(c) for c in self._horizontal)),
            vec3(*(float(c) for c in self._vertical)),
            self.focal_length,
            vec3(*self._rotation.as_tuple()),
        )

    def get_camera_info(self) -> dict[str, tuple[float, float, float]]:
        """Get current camera state for debugging.

        Returns:
            Dictionary with origin, horizontal, vertical, lower_left and
            rotation as plain float tuples.
        """

        def _tuple(vec: npt.NDArray[np.float32]) -> tuple[float, float, float]:
            return (float(vec[0]), float(vec[1]), float(vec[2]))

        return {
            "origin": _tuple(self._origin),
            "horizontal": _tuple(self._horizontal),
            "vertical": _tuple(self._vertical),
            "lower_left": _tuple(self.lower_left_corner()),
            "rotation": self._rotation.as_tuple(),
        }

    def __repr__(self) -> str:
        """Return a string representation of the camera state."""
        return (
            f"Camera(origin={self._origin.tolist()}, "
            f"rotation={self._rotation.as_tuple()}, "
            f"focal_length={self.focal_length})"
        )
