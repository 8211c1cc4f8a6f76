"""Entry point applying a filter graph to an RGBA pixel array."""

from __future__ import annotations

import logging

import numpy as np

from ...config import CLARITY_RADIUS_FRACTION
from ..filter_graph import FilterGraph
from . import numpy_executor
from .jit_executor import apply_color_stage_inplace
from .pillow_executor import gaussian_blur

_LOGGER = logging.getLogger(__name__)

_JIT_AVAILABLE = True
"""Cleared after the first JIT failure; later frames go straight to NumPy."""


def _normalise_pixels(pixels: np.ndarray) -> np.ndarray:
    array = np.asarray(pixels)
    if array.ndim != 3 or array.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {array.shape}")
    if array.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {array.dtype}")
    return np.ascontiguousarray(array)


def clarity_radius(height: int, width: int) -> float:
    """Return the clarity detail radius for a frame of the given size."""

    return max(1.0, min(height, width) * CLARITY_RADIUS_FRACTION)


def apply_filter_graph(
    pixels: np.ndarray,
    graph: FilterGraph,
    *,
    prefer_jit: bool = True,
) -> np.ndarray:
    """Return a new RGBA ``uint8`` array with *graph* applied to *pixels*.

    The input is never modified.  The colour stage runs through the JIT kernel
    when *prefer_jit* is set and falls back to the vectorised NumPy path if the
    kernel cannot run; both produce the same bytes up to one rounding step.  A
    failing kernel is reported once and skipped for the rest of the process.
    """

    source = _normalise_pixels(pixels)
    if graph.is_identity():
        return source.copy()

    global _JIT_AVAILABLE
    result = source
    if graph.has_color_stage():
        if prefer_jit and _JIT_AVAILABLE:
            try:
                result = source.copy()
                apply_color_stage_inplace(result, graph)
            except Exception:
                _JIT_AVAILABLE = False
                _LOGGER.warning(
                    "JIT colour stage failed; using the NumPy path from now on", exc_info=True
                )
                result = numpy_executor.apply_color_stage(source, graph)
        else:
            result = numpy_executor.apply_color_stage(source, graph)

    height, width = result.shape[:2]
    if graph.clarity != 0.0:
        result = numpy_executor.apply_clarity(result, graph.clarity, clarity_radius(height, width))
    if graph.blur_radius > 0.0:
        result = gaussian_blur(result, graph.blur_radius)
    if graph.vignette > 0.0:
        result = numpy_executor.apply_vignette(result, graph.vignette)

    if result is source:
        result = source.copy()
    return result


__all__ = ["apply_filter_graph", "clarity_radius"]
