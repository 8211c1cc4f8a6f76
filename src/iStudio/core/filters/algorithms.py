"""Per-pixel helpers shared by the JIT kernels.

The functions are compiled in ``nopython`` mode and inlined into the calling
kernels, so they must only use scalar arithmetic.
"""

from __future__ import annotations

from numba import jit

from ...config import TONE_HIGHLIGHT_THRESHOLD, TONE_SHADOW_THRESHOLD, TONE_STRENGTH


@jit(nopython=True, inline="always")
def _clamp01(value: float) -> float:
    if value < 0.0:
        return 0.0
    if value > 1.0:
        return 1.0
    return value


@jit(nopython=True, inline="always")
def _float_to_uint8(value: float) -> int:
    """Quantise a normalised channel to ``[0, 255]`` rounding half up."""

    return int(_clamp01(value) * 255.0 + 0.5)


@jit(nopython=True, inline="always")
def _apply_tone_channel(value: float, highlights: float, shadows: float) -> float:
    """Lift or recover the tonal extremes of a clamped channel value.

    Values above the highlight knee move by ``highlights`` scaled by their
    distance to white, values below the shadow knee by ``shadows`` scaled by
    their distance to black.  Mid tones are untouched.
    """

    adjusted = value
    if value > TONE_HIGHLIGHT_THRESHOLD:
        ratio = (value - TONE_HIGHLIGHT_THRESHOLD) / (1.0 - TONE_HIGHLIGHT_THRESHOLD)
        adjusted += highlights * TONE_STRENGTH * ratio
    elif value < TONE_SHADOW_THRESHOLD:
        ratio = (TONE_SHADOW_THRESHOLD - value) / TONE_SHADOW_THRESHOLD
        adjusted += shadows * TONE_STRENGTH * ratio
    return _clamp01(adjusted)
