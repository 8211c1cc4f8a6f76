"""NumPy vectorised executor for the colour, clarity and vignette stages.

The colour stage mirrors :mod:`.jit_executor` operation for operation so
either path can serve a render request; the spatial helpers operate on whole
frames and therefore live here exclusively.
"""

from __future__ import annotations

import numpy as np

from ...config import (
    TONE_HIGHLIGHT_THRESHOLD,
    TONE_SHADOW_THRESHOLD,
    TONE_STRENGTH,
    VIGNETTE_INNER_RADIUS,
)
from ..filter_graph import FilterGraph
from .pillow_executor import gaussian_blur


def to_float(pixels: np.ndarray) -> np.ndarray:
    """Return ``uint8`` pixels normalised into ``[0, 1]`` as float64."""

    return pixels.astype(np.float64) / 255.0


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Quantise normalised values, rounding half up like the JIT kernel."""

    return np.floor(np.clip(values, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)


def apply_tone(rgb: np.ndarray, highlights: float, shadows: float) -> np.ndarray:
    """Vectorised equivalent of ``_apply_tone_channel`` for clamped ``rgb``."""

    adjusted = rgb.copy()
    high_ratio = (rgb - TONE_HIGHLIGHT_THRESHOLD) / (1.0 - TONE_HIGHLIGHT_THRESHOLD)
    low_ratio = (TONE_SHADOW_THRESHOLD - rgb) / TONE_SHADOW_THRESHOLD
    adjusted = np.where(
        rgb > TONE_HIGHLIGHT_THRESHOLD,
        rgb + highlights * TONE_STRENGTH * high_ratio,
        adjusted,
    )
    adjusted = np.where(
        rgb < TONE_SHADOW_THRESHOLD,
        rgb + shadows * TONE_STRENGTH * low_ratio,
        adjusted,
    )
    return np.clip(adjusted, 0.0, 1.0)


def apply_color_stage(pixels: np.ndarray, graph: FilterGraph) -> np.ndarray:
    """Return a copy of RGBA *pixels* with the matrix and tone curve applied."""

    rgba = to_float(pixels)
    matrix = graph.effective_matrix()
    if not matrix.is_identity():
        rgba = np.clip(matrix.apply_to_array(rgba), 0.0, 1.0)

    if graph.has_tone_stage():
        rgba[..., :3] = apply_tone(rgba[..., :3], graph.highlights, graph.shadows)

    return to_uint8(rgba)


def apply_clarity(pixels: np.ndarray, amount: float, radius: float) -> np.ndarray:
    """Return *pixels* with local contrast boosted (or softened) by *amount*.

    Clarity adds back ``amount`` times the difference between the image and a
    wide gaussian blur of itself.  Negative amounts pull towards the blur.
    Alpha is left untouched.
    """

    if amount == 0.0 or radius <= 0.0:
        return pixels.copy()

    blurred = gaussian_blur(pixels, radius)
    rgb = to_float(pixels[..., :3])
    detail = rgb - to_float(blurred[..., :3])
    result = pixels.copy()
    result[..., :3] = to_uint8(rgb + amount * detail)
    return result


def vignette_mask(height: int, width: int, strength: float) -> np.ndarray:
    """Return an ``(H, W)`` multiplier darkening the frame towards its corners."""

    ys = (np.arange(height, dtype=np.float64) + 0.5) / max(height, 1) * 2.0 - 1.0
    xs = (np.arange(width, dtype=np.float64) + 0.5) / max(width, 1) * 2.0 - 1.0
    distance = np.sqrt(xs[None, :] ** 2 + ys[:, None] ** 2) / np.sqrt(2.0)
    t = np.clip(
        (distance - VIGNETTE_INNER_RADIUS) / (1.0 - VIGNETTE_INNER_RADIUS),
        0.0,
        1.0,
    )
    falloff = t * t * (3.0 - 2.0 * t)
    return 1.0 - max(0.0, min(1.0, strength)) * falloff


def apply_vignette(pixels: np.ndarray, strength: float) -> np.ndarray:
    """Return *pixels* with colour multiplied by :func:`vignette_mask`."""

    if strength <= 0.0:
        return pixels.copy()

    height, width = pixels.shape[:2]
    mask = vignette_mask(height, width, strength)
    result = pixels.copy()
    result[..., :3] = to_uint8(to_float(pixels[..., :3]) * mask[..., None])
    return result


def composite_over(
    background: np.ndarray,
    product: np.ndarray,
    offset: tuple[int, int] = (0, 0),
) -> np.ndarray:
    """Return *product* composited over *background* (source-over, straight alpha).

    *offset* places the product's top-left corner at ``(x, y)`` in background
    coordinates; parts falling outside the background are clipped.
    """

    result = to_float(background)
    bg_height, bg_width = background.shape[:2]
    fg_height, fg_width = product.shape[:2]
    x, y = int(offset[0]), int(offset[1])

    left, top = max(0, x), max(0, y)
    right, bottom = min(bg_width, x + fg_width), min(bg_height, y + fg_height)
    if right <= left or bottom <= top:
        return background.copy()

    src = to_float(product[top - y : bottom - y, left - x : right - x])
    dst = result[top:bottom, left:right]

    src_alpha = src[..., 3:4]
    dst_alpha = dst[..., 3:4]
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    safe_alpha = np.where(out_alpha > 0.0, out_alpha, 1.0)
    out_rgb = (src[..., :3] * src_alpha + dst[..., :3] * dst_alpha * (1.0 - src_alpha)) / safe_alpha

    dst[..., :3] = np.where(out_alpha > 0.0, out_rgb, 0.0)
    dst[..., 3:4] = out_alpha
    return to_uint8(result)


__all__ = [
    "apply_clarity",
    "apply_color_stage",
    "apply_tone",
    "apply_vignette",
    "composite_over",
    "to_float",
    "to_uint8",
    "vignette_mask",
]
