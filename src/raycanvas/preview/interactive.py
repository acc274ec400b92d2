"""Interactive preview window using Taichi GGUI.

This module provides a window that re-renders a :class:`Scene` whenever the
camera moves or the anti-aliasing level changes.

Features:
    - Held W/A/S/D keys move the camera relative to its facing
    - Anti-aliasing slider
    - PNG export of the current frame
    - Render time readout

Example:
    >>> from raycanvas.preview.interactive import InteractivePreview
    >>> from raycanvas.scene.scene import Scene
    >>>
    >>> scene = Scene.create(400, 2, 16 / 9, 1.0, (0.0, 0.0, 2.0), (0.0, 0.0, 0.0))
    >>> preview = InteractivePreview(scene)
    >>> preview.run()  # Blocks until the window is closed
"""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime

import numpy as np
import taichi as ti

from raycanvas.camera.camera import RelativeDirection
from raycanvas.preview.export import save_png
from raycanvas.scene.scene import Scene

logger = logging.getLogger(__name__)

# Keyboard keys mapped to camera movement
KEY_BINDINGS: dict[str, RelativeDirection] = {
    "w": RelativeDirection.UP,
    "s": RelativeDirection.DOWN,
    "a": RelativeDirection.LEFT,
    "d": RelativeDirection.RIGHT,
}

# Opposing keys; within a pair the first pressed key wins
_KEY_PAIRS = (("w", "s"), ("a", "d"))

MAX_PREVIEW_ANTI_ALIASING = 16


def pixel_data_to_display(
    data: bytes, pixels: np.ndarray, width: int, height: int
) -> np.ndarray:
    """Convert an RGBA8 buffer to a float RGB grid for display.

    Each buffer entry is placed at its own pixel coordinate, so the grid is
    independent of the buffer's output order.

    Args:
        data: Packed RGBA8 bytes in output pixel order.
        pixels: The (i, j) coordinate of each buffer entry.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Array of shape (width, height, 3) indexed by (i, j), values in [0, 1].
    """
    rgba = np.frombuffer(data, dtype=np.uint8).reshape(-1, 4)
    grid = np.zeros((width, height, 3), dtype=np.float32)
    grid[pixels[:, 0], pixels[:, 1]] = rgba[:, :3].astype(np.float32) / 255.0
    return grid


class InteractivePreview:
    """Interactive preview window for a scene.

    Attributes:
        scene: The scene being rendered.
        width: Window width in pixels (the canvas width).
        height: Window height in pixels (the canvas height).
    """

    def __init__(self, scene: Scene, *, title: str = "raycanvas") -> None:
        """Initialize the preview.

        The window and display field are created on the first call to
        :meth:`run`, after Taichi is initialized.

        Args:
            scene: The scene to render. Its canvas size is fixed while the
                window is open.
            title: Window title.
        """
        self.scene = scene
        self.width = scene.width
        self.height = scene.height
        self._title = title
        self._dirty = True
        self._last_frame: bytes | None = None
        self._last_render_ms = 0.0

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._display_image: ti.MatrixField | None = None

    def _initialize_window(self) -> None:
        """Create the window, canvas and display field."""
        if self._window is not None:
            return
        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()
        self._display_image = ti.Vector.field(3, dtype=ti.f32, shape=(self.width, self.height))

    @property
    def last_render_ms(self) -> float:
        """Duration of the most recent render in milliseconds."""
        return self._last_render_ms

    def handle_key(self, key: str) -> bool:
        """Apply the movement bound to a key.

        Args:
            key: The key name as reported by GGUI.

        Returns:
            True if the key moved the camera.
        """
        direction = KEY_BINDINGS.get(key.lower())
        if direction is None:
            return False
        self.scene.move_along(direction)
        self._dirty = True
        return True

    def set_anti_aliasing(self, samples: int) -> None:
        """Change the anti-aliasing level and schedule a re-render."""
        if samples != self.scene.canvas.anti_aliasing:
            self.scene.set_anti_aliasing(samples)
            self._dirty = True

    def render_if_needed(self) -> bytes:
        """Render a new frame if anything changed since the last one.

        Returns:
            The current frame as RGBA8 bytes.
        """
        if self._dirty or self._last_frame is None:
            start = time.perf_counter()
            self._last_frame = self.scene.render()
            self._last_render_ms = (time.perf_counter() - start) * 1000.0
            self._dirty = False
        return self._last_frame

    def update_image(self, data: bytes) -> None:
        """Copy an RGBA8 frame into the display field."""
        assert self._display_image is not None
        # Taichi fields use (x, y) indexing with the origin at bottom-left,
        # which matches pixel (i, j)
        image = pixel_data_to_display(
            data, self.scene.canvas.pixels(), self.width, self.height
        )
        self._display_image.from_numpy(image)

    def _poll_keys(self) -> None:
        assert self._window is not None
        for pair in _KEY_PAIRS:
            for key in pair:
                if self._window.is_pressed(key):
                    self.handle_key(key)
                    break

    def _draw_gui_panel(self) -> None:
        assert self._window is not None
        with self._window.GUI.sub_window("Render", 0.02, 0.02, 0.3, 0.2) as gui:
            samples = gui.slider_int(
                "Anti-aliasing",
                self.scene.canvas.anti_aliasing,
                minimum=0,
                maximum=MAX_PREVIEW_ANTI_ALIASING,
            )
            gui.text(f"Rendered in {self._last_render_ms:.0f} ms")
            if gui.button("Export PNG"):
                self._export_png()
        self.set_anti_aliasing(samples)

    def _export_png(self) -> None:
        """Save the current frame to a timestamped PNG file."""
        if self._last_frame is None:
            logger.warning("No frame rendered yet, nothing to export")
            return
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        save_png(self._last_frame, self.width, self.height, f"raycanvas_{timestamp}.png")

    def run(self) -> None:
        """Run the window event loop until the window is closed."""
        self._initialize_window()
        assert self._window is not None and self._canvas is not None

        while self._window.running:
            self._poll_keys()
            if self._dirty:
                self.update_image(self.render_if_needed())
            self._draw_gui_panel()
            self._canvas.set_image(self._display_image)
            self._window.show()

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        if os.uname().sysname == "Darwin":
            # SSH sessions without X forwarding have no display
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)
