#!/usr/bin/env python3
"""Render the demonstration scene to a PNG file.

Renders two small spheres resting on a large ground sphere, shaded by
surface normal over a sky gradient.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --anti-aliasing N       Extra jittered samples per pixel (default: 0)
    --origin X Y Z          Camera position (default: 0 0 2)
    --rotation X Y Z        Camera angles in radians (default: 0 0 0)
    --output OUTPUT         Output file path (default: scene.png)
    --cpu                   Force the CPU backend
    --verbose               Enable debug logging

Example:
    python -m examples.render_scene --width 800 --anti-aliasing 8
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from raycanvas.runtime import init_taichi, setup_default_logging

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demonstration scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--anti-aliasing",
        type=int,
        default=0,
        help="Extra jittered samples per pixel (default: 0)",
    )
    parser.add_argument(
        "--origin",
        type=float,
        nargs=3,
        default=(0.0, 0.0, 2.0),
        metavar=("X", "Y", "Z"),
        help="Camera position (default: 0 0 2)",
    )
    parser.add_argument(
        "--rotation",
        type=float,
        nargs=3,
        default=(0.0, 0.0, 0.0),
        metavar=("X", "Y", "Z"),
        help="Camera angles in radians (default: 0 0 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="scene.png",
        help="Output file path (default: scene.png)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def render_scene(
    width: int = 400,
    anti_aliasing: int = 0,
    origin: tuple[float, float, float] = (0.0, 0.0, 2.0),
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0),
    output_path: str = "scene.png",
) -> Path:
    """Render the demonstration scene and save to file.

    Args:
        width: Image width in pixels.
        anti_aliasing: Extra jittered samples per pixel.
        origin: Camera position.
        rotation: Camera angles in radians.
        output_path: Output file path (PNG).

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from raycanvas.preview.export import save_png
    from raycanvas.scene.config import CameraState, CanvasState
    from raycanvas.scene.scene import default_shapes, render

    camera_state = CameraState(origin=origin, rotation=rotation)
    canvas_state = CanvasState(
        width=width,
        anti_aliasing=anti_aliasing,
        shapes=default_shapes(),
    )

    start_time = time.time()
    data = render(camera_state, canvas_state)
    height = len(data) // (4 * width)
    logger.info("Rendered %dx%d in %.2fs", width, height, time.time() - start_time)

    output_file = Path(output_path)
    save_png(data, width, height, str(output_file))
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_default_logging("DEBUG" if args.verbose else "INFO")

    backend = init_taichi("cpu" if args.cpu else "auto")
    logger.info("Taichi backend: %s", backend)

    try:
        output_file = render_scene(
            width=args.width,
            anti_aliasing=args.anti_aliasing,
            origin=tuple(args.origin),
            rotation=tuple(args.rotation),
            output_path=args.output,
        )
    except ValueError as e:
        logger.error("Render failed: %s", e)
        return 1

    print(f"Saved to: {output_file.absolute()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
