"""Exception types raised by raycanvas."""


class ConstructionError(ValueError):
    """Raised when a camera or scene is built from malformed input.

    Construction is all-or-nothing: no partially initialized object is
    returned when this is raised.
    """


class PixelEncodingError(ValueError):
    """Raised when a shaded color cannot be encoded as an 8-bit channel."""
