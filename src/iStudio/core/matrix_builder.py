"""Pure builders translating adjustment values into colour matrices.

Every builder clamps its input, returns :meth:`ColorMatrix.identity` for the
neutral value and leaves the alpha row untouched so transparent pixels of a
cut-out stay transparent no matter how the colour sliders move.
"""

from __future__ import annotations

from ..config import (
    BRIGHTNESS_SCALE,
    CONTRAST_SCALE,
    EXPOSURE_SCALE,
    LUMA_WEIGHTS,
    SATURATION_SCALE,
    WARMTH_SCALE,
)
from .adjustment_settings import Adjustment, TargetAdjustments, clamp_adjustment
from .color_matrix import ALPHA_ROW, ColorMatrix

FAMILY_ORDER = ("brightness_exposure", "contrast", "saturation", "warmth")
"""Order in which the family matrices are composed."""


def brightness_exposure_matrix(brightness: float, exposure: float) -> ColorMatrix:
    """Return an additive RGB offset combining brightness and exposure.

    Both terms are summed before the matrix is built so they share a single
    offset instead of being rounded twice.
    """

    brightness = clamp_adjustment(Adjustment.BRIGHTNESS, brightness)
    exposure = clamp_adjustment(Adjustment.EXPOSURE, exposure)
    if brightness == 0.0 and exposure == 0.0:
        return ColorMatrix.identity()

    offset = brightness / BRIGHTNESS_SCALE + exposure / EXPOSURE_SCALE
    return ColorMatrix(
        (
            (1.0, 0.0, 0.0, 0.0, offset),
            (0.0, 1.0, 0.0, 0.0, offset),
            (0.0, 0.0, 1.0, 0.0, offset),
            ALPHA_ROW,
        )
    )


def contrast_matrix(contrast: float) -> ColorMatrix:
    """Return an RGB scale pivoting around mid grey."""

    contrast = clamp_adjustment(Adjustment.CONTRAST, contrast)
    if contrast == 0.0:
        return ColorMatrix.identity()

    c = 1.0 + contrast / CONTRAST_SCALE
    t = (1.0 - c) / 2.0
    return ColorMatrix(
        (
            (c, 0.0, 0.0, 0.0, t),
            (0.0, c, 0.0, 0.0, t),
            (0.0, 0.0, c, 0.0, t),
            ALPHA_ROW,
        )
    )


def saturation_matrix(saturation: float, vibrance: float) -> ColorMatrix:
    """Return the luminance preserving saturation matrix.

    ``s = 1 + (saturation + vibrance) / 100`` interpolates between the grey
    projection (``s = 0``) and the identity (``s = 1``); values above one push
    colours away from grey.
    """

    saturation = clamp_adjustment(Adjustment.SATURATION, saturation)
    vibrance = clamp_adjustment(Adjustment.VIBRANCE, vibrance)
    s = max(0.0, 1.0 + (saturation + vibrance) / SATURATION_SCALE)
    if s == 1.0:
        return ColorMatrix.identity()

    lr, lg, lb = LUMA_WEIGHTS
    inv = 1.0 - s
    return ColorMatrix(
        (
            (lr * inv + s, lg * inv, lb * inv, 0.0, 0.0),
            (lr * inv, lg * inv + s, lb * inv, 0.0, 0.0),
            (lr * inv, lg * inv, lb * inv + s, 0.0, 0.0),
            ALPHA_ROW,
        )
    )


def warmth_matrix(warmth: float) -> ColorMatrix:
    """Return a red/blue shift on the constant column."""

    warmth = clamp_adjustment(Adjustment.WARMTH, warmth)
    if warmth == 0.0:
        return ColorMatrix.identity()

    w = warmth / WARMTH_SCALE
    return ColorMatrix(
        (
            (1.0, 0.0, 0.0, 0.0, w),
            (0.0, 1.0, 0.0, 0.0, 0.0),
            (0.0, 0.0, 1.0, 0.0, -w),
            ALPHA_ROW,
        )
    )


def build_family_matrices(adjustments: TargetAdjustments) -> list[ColorMatrix]:
    """Return one matrix per family, in :data:`FAMILY_ORDER`."""

    return [
        brightness_exposure_matrix(adjustments.brightness, adjustments.exposure),
        contrast_matrix(adjustments.contrast),
        saturation_matrix(adjustments.saturation, adjustments.vibrance),
        warmth_matrix(adjustments.warmth),
    ]


__all__ = [
    "FAMILY_ORDER",
    "brightness_exposure_matrix",
    "build_family_matrices",
    "contrast_matrix",
    "saturation_matrix",
    "warmth_matrix",
]
