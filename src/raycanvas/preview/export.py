"""Pixel encoding and image export.

Resolved colors are encoded as tightly packed RGBA8: each channel becomes
``round(component * 255)`` (halves rounded away from zero) and alpha is
always 255. Values that land outside [0, 255] are an error, never clamped or
wrapped, so shader bugs surface instead of silently corrupting the image.

Supported formats:
    - Raw RGBA8 bytes (the render output)
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from raycanvas.preview.export import save_png
    >>> data = canvas.paint(camera)
    >>> save_png(data, canvas.width, canvas.height, "render.png")
"""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from raycanvas.errors import PixelEncodingError

logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 4
OPAQUE = 255


def encode_channels(
    colors: npt.NDArray[np.floating[npt.NBitBase]],
    pixels: npt.NDArray[np.int64] | None = None,
) -> npt.NDArray[np.uint8]:
    """Encode float colors as RGBA8 rows.

    Args:
        colors: Array of shape (N, 3) with components expected in [0, 1].
        pixels: Optional (N, 2) array of the (i, j) coordinate of each row,
            used only to report where encoding failed.

    Returns:
        Array of shape (N, 4) with dtype uint8.

    Raises:
        PixelEncodingError: If any channel rounds outside [0, 255] or is not
            finite.
    """
    colors = np.asarray(colors)
    if colors.ndim != 2 or colors.shape[1] != 3:
        raise ValueError(f"Colors must have shape (N, 3), got {colors.shape}")

    scaled = colors.astype(np.float32) * np.float32(255.0)
    # Round half away from zero; computed in float64 so the +0.5 is exact
    scaled64 = scaled.astype(np.float64)
    rounded = np.trunc(scaled64 + np.copysign(0.5, scaled64))

    valid = np.isfinite(rounded) & (rounded >= 0.0) & (rounded <= 255.0)
    if not np.all(valid):
        bad_rows = np.flatnonzero(~np.all(valid, axis=1))
        first = int(bad_rows[0])
        where = f"row {first}"
        if pixels is not None:
            i, j = (int(c) for c in pixels[first])
            where = f"pixel ({i}, {j})"
        logger.error(
            "%d pixel(s) failed to encode; first at %s with color %s",
            len(bad_rows),
            where,
            colors[first].tolist(),
        )
        raise PixelEncodingError(
            f"Color {colors[first].tolist()} at {where} is outside the 8-bit range"
        )

    rgba = np.empty((colors.shape[0], BYTES_PER_PIXEL), dtype=np.uint8)
    rgba[:, :3] = rounded.astype(np.uint8)
    rgba[:, 3] = OPAQUE
    return rgba


def to_pixel_data(
    colors: npt.NDArray[np.floating[npt.NBitBase]],
    pixels: npt.NDArray[np.int64] | None = None,
) -> bytes:
    """Encode colors as a flat RGBA8 byte string, preserving row order.

    Args:
        colors: Array of shape (N, 3) in output pixel order.
        pixels: Optional pixel coordinates for error reporting.

    Returns:
        ``4 * N`` bytes.
    """
    return encode_channels(colors, pixels).tobytes()


def pixel_data_to_image(data: bytes, width: int, height: int) -> PILImage.Image:
    """Wrap an RGBA8 buffer in a Pillow image without reordering it.

    Args:
        data: Packed RGBA8 bytes.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        An RGBA Pillow image.

    Raises:
        ValueError: If the buffer length doesn't match the dimensions.
    """
    expected = BYTES_PER_PIXEL * width * height
    if len(data) != expected:
        raise ValueError(
            f"Buffer holds {len(data)} bytes, expected {expected} for {width}x{height}"
        )
    return PILImage.frombytes("RGBA", (width, height), bytes(data))


def save_png(data: bytes, width: int, height: int, filepath: str) -> None:
    """Save an RGBA8 buffer as a PNG file.

    Args:
        data: Packed RGBA8 bytes, as returned by ``Canvas.paint``.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .png).
    """
    image = pixel_data_to_image(data, width, height)
    image.save(filepath)
    logger.info("Saved %dx%d image to %s", width, height, filepath)
