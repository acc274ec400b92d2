"""Per-axis rotation of direction vectors.

Orientation is stored as three independent angles in radians, one per axis.
A direction is rotated by applying the X, Y and Z axis rotations in that
order, each step consuming the vector produced by the previous one:

    v' = Rz . (Ry . (Rx . v))

Each step is a matrix-vector product where the vector is dotted against the
three rows of the axis matrix:

    Rx = [[1, 0, 0], [0, c, -s], [0, s, c]]
    Ry = [[c, 0, s], [0, 1, 0], [-s, 0, c]]
    Rz = [[c, -s, 0], [s, c, 0], [0, 0, 1]]

Device-side code uses :func:`rotate` inside kernels. Host-side code (camera
movement) uses :meth:`Rotation.rotate`, which performs the same sequence in
NumPy float32.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from raycanvas.core.vector import dot, vec3
from raycanvas.errors import ConstructionError

AXIS_ORDER = ("x", "y", "z")


# =============================================================================
# Device-side rotation (Taichi functions)
# =============================================================================


@ti.func
def rotate_x(v: vec3, angle: ti.f32) -> vec3:
    """Rotate a vector about the X axis."""
    c = ti.cos(angle)
    s = ti.sin(angle)
    return vec3(
        dot(vec3(1.0, 0.0, 0.0), v),
        dot(vec3(0.0, c, -s), v),
        dot(vec3(0.0, s, c), v),
    )


@ti.func
def rotate_y(v: vec3, angle: ti.f32) -> vec3:
    """Rotate a vector about the Y axis."""
    c = ti.cos(angle)
    s = ti.sin(angle)
    return vec3(
        dot(vec3(c, 0.0, s), v),
        dot(vec3(0.0, 1.0, 0.0), v),
        dot(vec3(-s, 0.0, c), v),
    )


@ti.func
def rotate_z(v: vec3, angle: ti.f32) -> vec3:
    """Rotate a vector about the Z axis."""
    c = ti.cos(angle)
    s = ti.sin(angle)
    return vec3(
        dot(vec3(c, -s, 0.0), v),
        dot(vec3(s, c, 0.0), v),
        dot(vec3(0.0, 0.0, 1.0), v),
    )


@ti.func
def rotate(direction: vec3, angles: vec3) -> vec3:
    """Rotate a direction by per-axis angles, X then Y then Z.

    Args:
        direction: The vector to rotate.
        angles: Rotation angles in radians about X, Y and Z.

    Returns:
        The rotated vector.
    """
    rotated = rotate_x(direction, angles.x)
    rotated = rotate_y(rotated, angles.y)
    rotated = rotate_z(rotated, angles.z)
    return rotated


# =============================================================================
# Host-side rotation
# =============================================================================


def axis_matrix(axis: str, angle: float) -> npt.NDArray[np.float32]:
    """Build the 3x3 rotation matrix for one axis.

    Args:
        axis: One of "x", "y" or "z".
        angle: Rotation angle in radians.

    Returns:
        The rotation matrix as a float32 array.

    Raises:
        ValueError: If the axis name is unknown.
    """
    c = np.float32(np.cos(np.float32(angle)))
    s = np.float32(np.sin(np.float32(angle)))
    if axis == "x":
        rows = [[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]]
    elif axis == "y":
        rows = [[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]]
    elif axis == "z":
        rows = [[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]]
    else:
        raise ValueError(f"Unknown rotation axis: {axis!r}")
    return np.array(rows, dtype=np.float32)


@dataclass(frozen=True)
class Rotation:
    """Orientation as three per-axis angles in radians.

    Angles are unconstrained; no wraparound is applied.

    Attributes:
        x: Rotation about the X axis.
        y: Rotation about the Y axis.
        z: Rotation about the Z axis.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Rotation":
        """Build a rotation from exactly three angle components.

        Raises:
            ConstructionError: If ``values`` does not have three components.
        """
        values = list(values)
        if len(values) != 3:
            raise ConstructionError(
                f"Rotation requires exactly 3 components, got {len(values)}"
            )
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def as_tuple(self) -> tuple[float, float, float]:
        """Return the angles as an (x, y, z) tuple."""
        return (self.x, self.y, self.z)

    def rotate(self, vector: npt.ArrayLike) -> npt.NDArray[np.float32]:
        """Rotate a host-side vector, X then Y then Z.

        Args:
            vector: A 3-component vector.

        Returns:
            The rotated vector as a float32 array of shape (3,).
        """
        rotated = np.asarray(vector, dtype=np.float32).reshape(3)
        for axis, angle in zip(AXIS_ORDER, self.as_tuple()):
            matrix = axis_matrix(axis, angle)
            rotated = np.array(
                [np.dot(row, rotated) for row in matrix], dtype=np.float32
            )
        return rotated
