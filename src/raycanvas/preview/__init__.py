"""Preview module for output and visualization.

Components:
    export: RGBA8 pixel encoding and PNG export
    interactive: Taichi GGUI-based interactive preview window

Example:
    >>> from raycanvas.preview import save_png
    >>> from raycanvas.scene.scene import Scene
    >>>
    >>> scene = Scene.create(400, 2, 16 / 9, 1.0, (0.0, 0.0, 2.0), (0.0, 0.0, 0.0))
    >>> save_png(scene.render(), scene.width, scene.height, "output.png")

For the interactive preview:
    >>> from raycanvas.preview.interactive import InteractivePreview
    >>> InteractivePreview(scene).run()
"""

from raycanvas.preview.export import (
    BYTES_PER_PIXEL,
    OPAQUE,
    encode_channels,
    pixel_data_to_image,
    save_png,
    to_pixel_data,
)

# Note: interactive imports the scene, which imports the canvas and this
# package, so it is not imported here.

__all__ = [
    "BYTES_PER_PIXEL",
    "OPAQUE",
    "encode_channels",
    "to_pixel_data",
    "pixel_data_to_image",
    "save_png",
]
