"""Composed, ready-to-render description of one layer's adjustments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .color_matrix import ColorMatrix


@dataclass(frozen=True)
class FilterGraph:
    """Colour transform plus spatial effects for a single layer.

    Stages run in a fixed order: colour matrix, tone curve (highlights and
    shadows), clarity, blur and finally vignette.  The colour stages come first
    so the spatial kernels never spread values that have not been clamped yet.

    ``highlights``, ``shadows`` and ``clarity`` are normalised to ``[-1, 1]``;
    ``blur_radius`` is expressed in pixels and ``vignette`` is the maximum
    corner darkening in ``[0, 1]``.  ``matrix`` is ``None`` when the graph
    carries no colour transform at all.
    """

    matrix: ColorMatrix | None = None
    highlights: float = 0.0
    shadows: float = 0.0
    clarity: float = 0.0
    blur_radius: float = 0.0
    vignette: float = 0.0

    IDENTITY: ClassVar["FilterGraph"]

    @classmethod
    def identity(cls) -> "FilterGraph":
        return cls.IDENTITY

    def effective_matrix(self) -> ColorMatrix:
        """Return the colour matrix, substituting the identity when absent."""

        return self.matrix if self.matrix is not None else ColorMatrix.identity()

    def has_tone_stage(self) -> bool:
        return self.highlights != 0.0 or self.shadows != 0.0

    def has_color_stage(self) -> bool:
        return not self.effective_matrix().is_identity() or self.has_tone_stage()

    def has_spatial_stage(self) -> bool:
        return self.clarity != 0.0 or self.blur_radius > 0.0 or self.vignette > 0.0

    def is_identity(self) -> bool:
        return not self.has_color_stage() and not self.has_spatial_stage()

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable description of the graph."""

        return {
            "matrix": [list(row) for row in self.effective_matrix().rows],
            "highlights": self.highlights,
            "shadows": self.shadows,
            "clarity": self.clarity,
            "blur_radius": self.blur_radius,
            "vignette": self.vignette,
        }


FilterGraph.IDENTITY = FilterGraph()


__all__ = ["FilterGraph"]
