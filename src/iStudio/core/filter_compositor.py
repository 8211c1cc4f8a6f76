"""Reduce family matrices and spatial parameters into a single filter graph."""

from __future__ import annotations

import logging
from typing import Iterable

from ..config import BLUR_RADIUS_SCALE, VIGNETTE_MAX_DARKENING
from .adjustment_settings import Adjustment, Target, clamp_adjustment
from .color_matrix import ColorMatrix, compose_all
from .filter_graph import FilterGraph

_LOGGER = logging.getLogger(__name__)


def compose_family_matrices(matrices: Iterable[ColorMatrix]) -> ColorMatrix:
    """Return the single matrix equivalent to applying *matrices* in order.

    Callers pass the family matrices in
    :data:`~iStudio.core.matrix_builder.FAMILY_ORDER`; the order matters
    because the contrast pivot assumes it operates on the exposed image.
    Identity entries are skipped by :func:`compose` so including them is free.
    """

    return compose_all(matrices)


def build_filter_graph(
    target: Target | str,
    matrices: Iterable[ColorMatrix],
    *,
    highlights: float = 0.0,
    shadows: float = 0.0,
    clarity: float = 0.0,
    blur: float = 0.0,
    vignette: float = 0.0,
) -> FilterGraph:
    """Package the composed matrix and the slider driven stages for *target*.

    Blur and vignette only exist on the background layer.  Product layers are
    alpha-masked cut-outs, so those values are dropped for ``product`` instead
    of raising.
    """

    target = Target(target)
    blur = clamp_adjustment(Adjustment.BLUR, blur)
    vignette = clamp_adjustment(Adjustment.VIGNETTE, vignette)
    if target is Target.PRODUCT and (blur or vignette):
        _LOGGER.debug(
            "Ignoring background-only effects for product layer (blur=%s, vignette=%s)",
            blur,
            vignette,
        )
        blur = 0.0
        vignette = 0.0

    return FilterGraph(
        matrix=compose_family_matrices(matrices),
        highlights=clamp_adjustment(Adjustment.HIGHLIGHTS, highlights) / 100.0,
        shadows=clamp_adjustment(Adjustment.SHADOWS, shadows) / 100.0,
        clarity=clamp_adjustment(Adjustment.CLARITY, clarity) / 100.0,
        blur_radius=blur * BLUR_RADIUS_SCALE,
        vignette=vignette / 100.0 * VIGNETTE_MAX_DARKENING,
    )


__all__ = ["build_filter_graph", "compose_family_matrices"]
