"""JIT-accelerated colour stage executor using Numba.

This module provides the fastest execution path for the per-pixel part of a
:class:`~iStudio.core.filter_graph.FilterGraph`, processing an 8-bit RGBA
buffer in-place.
"""

from __future__ import annotations

import numpy as np
from numba import jit

from ..filter_graph import FilterGraph
from .algorithms import _apply_tone_channel, _clamp01, _float_to_uint8


def apply_color_stage_inplace(pixels: np.ndarray, graph: FilterGraph) -> None:
    """Mutate the ``(H, W, 4)`` RGBA ``uint8`` array *pixels* in-place."""

    if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
        raise ValueError("Expected an (H, W, 4) uint8 RGBA array")
    if not pixels.flags.c_contiguous:
        raise BufferError("RGBA pixel array must be C-contiguous")
    if not pixels.flags.writeable:
        raise BufferError("RGBA pixel array is read-only")

    height, width = pixels.shape[:2]
    apply_color_stage_to_buffer(pixels.reshape(-1), width, height, width * 4, graph)


def apply_color_stage_to_buffer(
    buffer: np.ndarray,
    width: int,
    height: int,
    bytes_per_line: int,
    graph: FilterGraph,
) -> None:
    """Apply the colour matrix and tone curve to a flat RGBA byte buffer."""

    if width <= 0 or height <= 0:
        return

    expected_size = bytes_per_line * height
    if buffer.size < expected_size:
        raise BufferError("Pixel buffer is smaller than expected")

    matrix = graph.effective_matrix()
    # The kernel wants a writable, contiguous copy of the coefficients.
    coefficients = np.array(matrix.rows, dtype=np.float64)

    _apply_color_stage(
        buffer,
        width,
        height,
        bytes_per_line,
        coefficients,
        not matrix.is_identity(),
        float(graph.highlights),
        float(graph.shadows),
        graph.has_tone_stage(),
    )


@jit(nopython=True, cache=True)
def _apply_color_stage(
    buffer: np.ndarray,
    width: int,
    height: int,
    bytes_per_line: int,
    matrix: np.ndarray,
    apply_matrix: bool,
    highlights: float,
    shadows: float,
    apply_tone: bool,
) -> None:
    """JIT-compiled pixel processing kernel."""
    for y in range(height):
        row_offset = y * bytes_per_line
        for x in range(width):
            pixel_offset = row_offset + x * 4

            r = buffer[pixel_offset] / 255.0
            g = buffer[pixel_offset + 1] / 255.0
            b = buffer[pixel_offset + 2] / 255.0
            a = buffer[pixel_offset + 3] / 255.0

            if apply_matrix:
                nr = matrix[0, 0] * r + matrix[0, 1] * g + matrix[0, 2] * b + matrix[0, 3] * a + matrix[0, 4]
                ng = matrix[1, 0] * r + matrix[1, 1] * g + matrix[1, 2] * b + matrix[1, 3] * a + matrix[1, 4]
                nb = matrix[2, 0] * r + matrix[2, 1] * g + matrix[2, 2] * b + matrix[2, 3] * a + matrix[2, 4]
                na = matrix[3, 0] * r + matrix[3, 1] * g + matrix[3, 2] * b + matrix[3, 3] * a + matrix[3, 4]
                r = _clamp01(nr)
                g = _clamp01(ng)
                b = _clamp01(nb)
                a = _clamp01(na)

            if apply_tone:
                r = _apply_tone_channel(r, highlights, shadows)
                g = _apply_tone_channel(g, highlights, shadows)
                b = _apply_tone_channel(b, highlights, shadows)

            buffer[pixel_offset] = _float_to_uint8(r)
            buffer[pixel_offset + 1] = _float_to_uint8(g)
            buffer[pixel_offset + 2] = _float_to_uint8(b)
            buffer[pixel_offset + 3] = _float_to_uint8(a)


__all__ = ["apply_color_stage_inplace", "apply_color_stage_to_buffer"]
