"""Pillow-based gaussian blur used by the clarity and blur stages.

Pillow blurs each band independently.  Blurring straight RGBA would drag the
colour of fully transparent pixels (usually black) into the edges of a
cut-out, so the pixels are premultiplied first and divided back afterwards.
"""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageFilter


def premultiply(pixels: np.ndarray) -> np.ndarray:
    """Return ``uint8`` RGBA *pixels* with colour multiplied by alpha."""

    rgba = pixels.astype(np.float32)
    alpha = rgba[..., 3:4] / np.float32(255.0)
    rgba[..., :3] *= alpha
    return np.floor(rgba + 0.5).astype(np.uint8)


def unpremultiply(pixels: np.ndarray) -> np.ndarray:
    """Inverse of :func:`premultiply`; fully transparent pixels become black."""

    rgba = pixels.astype(np.float32)
    alpha = rgba[..., 3:4]
    safe_alpha = np.where(alpha > 0.0, alpha, np.float32(1.0))
    rgb = np.where(alpha > 0.0, rgba[..., :3] * np.float32(255.0) / safe_alpha, 0.0)
    rgba[..., :3] = np.clip(rgb, 0.0, 255.0)
    return np.floor(rgba + 0.5).astype(np.uint8)


def gaussian_blur(pixels: np.ndarray, radius: float) -> np.ndarray:
    """Return a blurred copy of the ``(H, W, 4)`` RGBA ``uint8`` array *pixels*."""

    if radius <= 0.0:
        return pixels.copy()

    premultiplied = np.ascontiguousarray(premultiply(pixels))
    image = Image.fromarray(premultiplied)
    blurred = image.filter(ImageFilter.GaussianBlur(radius=float(radius)))
    return unpremultiply(np.asarray(blurred, dtype=np.uint8))


__all__ = ["gaussian_blur", "premultiply", "unpremultiply"]
