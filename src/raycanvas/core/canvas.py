"""Canvas: pixel enumeration, rendering and RGBA encoding.

The Canvas owns the output dimensions, the scene's shape list and the
anti-aliasing level, and drives the render kernel for a given camera.

Pixel order is part of the output format. Pixel coordinates are enumerated
row by row (``j`` over rows, ``i`` over columns within a row) and the whole
sequence is then reversed; the rendered buffer follows that order exactly.
The kernel renders into an (i, j) grid in parallel and the host gathers the
grid in enumeration order, so scheduling never affects the output.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycanvas.camera.camera import Camera
    >>> from raycanvas.core.canvas import Canvas
    >>> from raycanvas.geometry.shape import Shape
    >>>
    >>> camera = Camera(16 / 9, 2, 1.0, origin=(0.0, 0.0, 0.0))
    >>> canvas = Canvas(320, 16 / 9, [Shape.sphere((0.0, 0.0, -1.0), 0.5)])
    >>> data = canvas.paint(camera)  # 4 * 320 * 180 bytes
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from raycanvas.camera.camera import Camera
from raycanvas.core.integrator import (
    MAX_ANTI_ALIASING,
    T_MAX,
    T_MIN,
    probe_kernel,
    render_kernel,
)
from raycanvas.geometry.shape import CastHit, Shape
from raycanvas.preview.export import to_pixel_data
from raycanvas.scene.intersection import ShapeArrays, pack_shapes

logger = logging.getLogger(__name__)

# Number of floats written by probe_kernel
_PROBE_SIZE = 13


def enumerate_pixels(width: int, height: int) -> npt.NDArray[np.int64]:
    """Enumerate pixel coordinates in output order.

    Args:
        width: Number of columns.
        height: Number of rows.

    Returns:
        Array of shape (width * height, 2) holding (i, j) pairs: row-major
        with rows outermost, then reversed.
    """
    rows, cols = np.meshgrid(
        np.arange(height, dtype=np.int64),
        np.arange(width, dtype=np.int64),
        indexing="ij",
    )
    ordered = np.stack([cols.ravel(), rows.ravel()], axis=1)
    return np.ascontiguousarray(ordered[::-1])


@dataclass
class Probe:
    """Result of tracing a single viewport coordinate.

    Attributes:
        color: The shaded color (r, g, b).
        hit: The nearest hit, or None if the ray missed every shape.
    """

    color: tuple[float, float, float]
    hit: CastHit | None


class Canvas:
    """A render target bound to a shape list.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels, floor(width / aspect_ratio).
        aspect_ratio: Width divided by height.
    """

    def __init__(
        self,
        width: int,
        aspect_ratio: float,
        shapes: Sequence[Shape] = (),
        *,
        anti_aliasing: int = 0,
        t_min: float = T_MIN,
        t_max: float = T_MAX,
    ) -> None:
        """Initialize the canvas.

        Args:
            width: Image width in pixels.
            aspect_ratio: Width divided by height.
            shapes: The scene's shapes. Not modified by rendering.
            anti_aliasing: Extra jittered samples per pixel (0 disables).
            t_min: Lower bound of the accepted ray parameter.
            t_max: Upper bound of the accepted ray parameter.

        Raises:
            ValueError: If width, aspect ratio or anti-aliasing are invalid.
        """
        if aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")

        self._aspect_ratio = float(aspect_ratio)
        self._width = 0
        self._height = 0
        self._pixels = enumerate_pixels(0, 0)
        self.resize(width)

        self._shapes: tuple[Shape, ...] = ()
        self._shape_arrays: ShapeArrays = pack_shapes(())
        self.shapes = shapes

        self._anti_aliasing = 0
        self.anti_aliasing = anti_aliasing

        self._t_min = float(t_min)
        self._t_max = float(t_max)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def aspect_ratio(self) -> float:
        """Get the aspect ratio."""
        return self._aspect_ratio

    @property
    def pixel_count(self) -> int:
        """Get the number of pixels, width * height."""
        return self._width * self._height

    @property
    def shapes(self) -> tuple[Shape, ...]:
        """Get the scene's shapes."""
        return self._shapes

    @shapes.setter
    def shapes(self, shapes: Sequence[Shape]) -> None:
        self._shapes = tuple(shapes)
        self._shape_arrays = pack_shapes(self._shapes)

    @property
    def anti_aliasing(self) -> int:
        """Get the number of extra jittered samples per pixel."""
        return self._anti_aliasing

    @anti_aliasing.setter
    def anti_aliasing(self, samples: int) -> None:
        if not 0 <= samples <= MAX_ANTI_ALIASING:
            raise ValueError(
                f"Anti-aliasing must be between 0 and {MAX_ANTI_ALIASING}, got {samples}"
            )
        self._anti_aliasing = int(samples)

    @property
    def clip(self) -> tuple[float, float]:
        """Get the accepted ray parameter window (t_min, t_max)."""
        return (self._t_min, self._t_max)

    def set_clip(self, t_min: float, t_max: float) -> None:
        """Set the accepted ray parameter window."""
        self._t_min = float(t_min)
        self._t_max = float(t_max)

    def pixels(self) -> npt.NDArray[np.int64]:
        """Get the pixel coordinates in output order.

        Returns:
            A copy of the (width * height, 2) array of (i, j) pairs.
        """
        return self._pixels.copy()

    def resize(self, width: int) -> None:
        """Change the width, recomputing height and the pixel enumeration.

        Shapes and anti-aliasing level are unaffected.

        Args:
            width: New image width in pixels.

        Raises:
            ValueError: If width is not positive.
        """
        if width <= 0:
            raise ValueError(f"Width must be positive, got {width}")
        self._width = int(width)
        self._height = int(math.floor(self._width / self._aspect_ratio))
        self._pixels = enumerate_pixels(self._width, self._height)
        logger.debug("Canvas resized to %dx%d", self._width, self._height)

    def _shape_args(self) -> tuple[object, ...]:
        arrays = self._shape_arrays
        return (arrays.kinds, arrays.centers, arrays.radii, arrays.colors, arrays.count)

    def render_colors(self, camera: Camera) -> npt.NDArray[np.float32]:
        """Render the scene and return colors in output pixel order.

        Args:
            camera: The camera to render from.

        Returns:
            Array of shape (width * height, 3) with dtype float32.
        """
        if self.pixel_count == 0:
            return np.zeros((0, 3), dtype=np.float32)

        start = time.perf_counter()
        grid = np.zeros((self._width, self._height, 3), dtype=np.float32)
        render_kernel(
            grid,
            *self._shape_args(),
            self._anti_aliasing,
            *camera.view_args(),
            self._t_min,
            self._t_max,
        )
        colors = grid[self._pixels[:, 0], self._pixels[:, 1]]

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug(
            "Rendered %dx%d (%d shapes, aa=%d) in %.1f ms",
            self._width,
            self._height,
            len(self._shapes),
            self._anti_aliasing,
            elapsed_ms,
        )
        return colors

    def paint(self, camera: Camera) -> bytes:
        """Render the scene as packed RGBA8 bytes.

        Args:
            camera: The camera to render from.

        Returns:
            ``4 * width * height`` bytes in output pixel order.

        Raises:
            PixelEncodingError: If a shaded color is outside [0, 1].
        """
        return to_pixel_data(self.render_colors(camera), self._pixels)

    def probe(self, camera: Camera, u: float, v: float) -> Probe:
        """Trace the ray through viewport coordinate (u, v).

        Args:
            camera: The camera to trace from.
            u: Horizontal coordinate in [0, 1].
            v: Vertical coordinate in [0, 1].

        Returns:
            The shaded color and the nearest hit, if any.
        """
        result = np.zeros(_PROBE_SIZE, dtype=np.float32)
        probe_kernel(
            result,
            float(u),
            float(v),
            *self._shape_args(),
            *camera.view_args(),
            self._t_min,
            self._t_max,
        )

        color = (float(result[10]), float(result[11]), float(result[12]))
        hit = None
        if result[0] == 1.0:
            hit = CastHit(
                shape=self._shapes[int(result[9])],
                entry=(float(result[2]), float(result[3]), float(result[4])),
                normal=(float(result[5]), float(result[6]), float(result[7])),
                time=float(result[1]),
                front_face=bool(result[8] == 1.0),
            )
        return Probe(color=color, hit=hit)

    def __repr__(self) -> str:
        """Return a string representation of the canvas state."""
        return (
            f"Canvas(width={self._width}, height={self._height}, "
            f"shapes={len(self._shapes)}, anti_aliasing={self._anti_aliasing})"
        )
