"""Immutable 4x5 affine colour matrices over normalised RGBA."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

Row = tuple[float, float, float, float, float]

_IDENTITY_ROWS: tuple[Row, Row, Row, Row] = (
    (1.0, 0.0, 0.0, 0.0, 0.0),
    (0.0, 1.0, 0.0, 0.0, 0.0),
    (0.0, 0.0, 1.0, 0.0, 0.0),
    (0.0, 0.0, 0.0, 1.0, 0.0),
)

ALPHA_ROW: Row = _IDENTITY_ROWS[3]
"""Alpha row shared by every adjustment matrix: alpha passes through untouched."""


@dataclass(frozen=True)
class ColorMatrix:
    """Affine transform ``out = M[:, :4] @ (r, g, b, a) + M[:, 4]``.

    Rows map to the output channels R, G, B and A; the fifth column is the
    constant offset in normalised units.  Instances are hashable and compare
    by value, so identical adjustment values always produce equal matrices.
    """

    rows: tuple[Row, Row, Row, Row] = _IDENTITY_ROWS

    @classmethod
    def identity(cls) -> "ColorMatrix":
        return cls()

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "ColorMatrix":
        """Return a matrix from four rows of five coefficients."""

        if len(rows) != 4 or any(len(row) != 5 for row in rows):
            raise ValueError("ColorMatrix expects 4 rows of 5 coefficients")
        return cls(tuple(tuple(float(value) for value in row) for row in rows))  # type: ignore[arg-type]

    @classmethod
    def from_array(cls, array: np.ndarray) -> "ColorMatrix":
        return cls.from_rows(np.asarray(array, dtype=np.float64).tolist())

    def as_array(self) -> np.ndarray:
        """Return the coefficients as a read-only ``(4, 5)`` float64 array."""

        array = np.array(self.rows, dtype=np.float64)
        array.setflags(write=False)
        return array

    def homogeneous(self) -> np.ndarray:
        """Return the ``(5, 5)`` homogeneous form used for composition."""

        array = np.zeros((5, 5), dtype=np.float64)
        array[:4, :] = self.rows
        array[4, 4] = 1.0
        return array

    def is_identity(self) -> bool:
        return self.rows == _IDENTITY_ROWS

    def apply_to_pixel(self, pixel: Sequence[float]) -> tuple[float, float, float, float]:
        """Return *pixel* ``(r, g, b, a)`` transformed by the matrix, without clamping."""

        r, g, b, a = (float(channel) for channel in pixel)
        return tuple(  # type: ignore[return-value]
            row[0] * r + row[1] * g + row[2] * b + row[3] * a + row[4] for row in self.rows
        )

    def apply_to_array(self, rgba: np.ndarray) -> np.ndarray:
        """Return ``(..., 4)`` float pixels transformed by the matrix, without clamping."""

        array = self.as_array()
        pixels = np.asarray(rgba, dtype=np.float64)
        return pixels @ array[:, :4].T + array[:, 4]

    def then(self, other: "ColorMatrix") -> "ColorMatrix":
        """Return the matrix equivalent to applying ``self`` and then *other*."""

        return compose(self, other)


def compose(first: ColorMatrix, second: ColorMatrix) -> ColorMatrix:
    """Return one matrix equivalent to applying *first* then *second*.

    In homogeneous form a pixel ``p`` becomes ``S @ (F @ p)``, therefore the
    combined matrix is ``S @ F``.
    """

    if first.is_identity():
        return second
    if second.is_identity():
        return first
    combined = second.homogeneous() @ first.homogeneous()
    return ColorMatrix.from_array(combined[:4, :])


def compose_all(matrices: Iterable[ColorMatrix]) -> ColorMatrix:
    """Reduce *matrices* left to right; an empty iterable yields the identity."""

    result = ColorMatrix.identity()
    for matrix in matrices:
        result = compose(result, matrix)
    return result


__all__ = ["ALPHA_ROW", "ColorMatrix", "compose", "compose_all"]
