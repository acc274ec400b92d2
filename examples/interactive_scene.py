#!/usr/bin/env python3
"""Interactive viewer for the demonstration scene.

Usage:
    python -m examples.interactive_scene

Controls:
    - W / S: Move the camera up / down its view plane (along -Z / +Z locally)
    - A / D: Move the camera left / right
    - Anti-aliasing slider: Extra jittered samples per pixel
    - Export PNG: Save the current frame with a timestamp

The frame is re-rendered only when the camera or anti-aliasing changes.
"""

from __future__ import annotations

import sys

from raycanvas.runtime import init_taichi, setup_default_logging


def main() -> int:
    """Main entry point for the interactive viewer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    setup_default_logging()

    # Initialize Taichi first (before rendering anything)
    backend = init_taichi()
    print(f"Taichi backend: {backend}")

    from raycanvas.preview.interactive import InteractivePreview
    from raycanvas.scene.scene import Scene

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    scene = Scene.create(
        width=640,
        viewport_height=2,
        aspect_ratio=16 / 9,
        focal_length=1.0,
        origin=(0.0, 0.0, 2.0),
        rotation=(0.0, 0.0, 0.0),
    )
    preview = InteractivePreview(scene)

    print("Starting interactive viewer...")
    print("  - Hold W/A/S/D to move the camera")
    print("  - Close window to exit")

    try:
        preview.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
