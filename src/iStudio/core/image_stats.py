"""Image statistics driving the automatic adjustment suggestions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .. import config
from .adjustment_settings import Adjustment, AdjustmentSettings, Target, settings_key

_LOGGER = logging.getLogger(__name__)

_ALPHA_VISIBLE = 8
"""Pixels with alpha at or below this value are treated as cut away."""

_DARK_THRESHOLD = 0.4
_FLAT_THRESHOLD = 0.5
_DULL_THRESHOLD = 0.6


@dataclass(frozen=True)
class ImageStats:
    """Summary of the visible pixels of one layer.

    ``brightness`` is the mean luma, ``contrast`` the spread between the 5th
    and 95th luma percentiles and ``saturation`` the mean HSV saturation, all
    in ``[0, 1]``.  ``coverage`` is the fraction of pixels that are visible.
    """

    brightness: float = 0.5
    contrast: float = 1.0
    saturation: float = 1.0
    coverage: float = 0.0


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def compute_image_statistics(pixels: np.ndarray, *, max_sample_size: int = 512) -> ImageStats:
    """Return :class:`ImageStats` describing the RGBA ``uint8`` array *pixels*.

    Large images are sampled with a stride so the longest edge stays below
    *max_sample_size*.  Transparent pixels are ignored, which keeps the
    empty area around a cut-out product from skewing the numbers.
    """

    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3|4) array, got shape {pixels.shape}")

    height, width = pixels.shape[:2]
    if width <= 0 or height <= 0:
        return ImageStats()

    step = max(1, -(-max(width, height) // max(1, max_sample_size)))
    sample = pixels[::step, ::step]

    rgb = sample[..., :3].astype(np.float32) / np.float32(255.0)
    if sample.shape[2] == 4:
        visible = sample[..., 3] > _ALPHA_VISIBLE
    else:
        visible = np.ones(sample.shape[:2], dtype=bool)

    total = visible.size
    count = int(np.count_nonzero(visible))
    if count == 0:
        _LOGGER.debug("No visible pixels to measure")
        return ImageStats()

    r = rgb[..., 0][visible]
    g = rgb[..., 1][visible]
    b = rgb[..., 2][visible]

    lr, lg, lb = config.LUMA_WEIGHTS
    luma = lr * r + lg * g + lb * b

    max_c = np.maximum(np.maximum(r, g), b)
    min_c = np.minimum(np.minimum(r, g), b)
    saturation = np.where(max_c <= 0.0, 0.0, (max_c - min_c) / (max_c + 1e-8))

    low, high = np.percentile(luma, [5.0, 95.0])

    return ImageStats(
        brightness=_clamp(float(np.mean(luma, dtype=np.float64)), 0.0, 1.0),
        contrast=_clamp(float(high - low), 0.0, 1.0),
        saturation=_clamp(float(np.mean(saturation, dtype=np.float64)), 0.0, 1.0),
        coverage=count / total,
    )


def suggest_adjustments(stats: ImageStats, target: Target | str) -> AdjustmentSettings:
    """Return settings nudging *target* towards a balanced exposure.

    Dark layers get lifted, flat ones gain contrast and dull ones gain
    colour.  The other target is left neutral.
    """

    target = Target(target)
    values: dict[Adjustment, float] = {}
    if stats.brightness < _DARK_THRESHOLD:
        values[Adjustment.BRIGHTNESS] = 20.0
        values[Adjustment.SHADOWS] = 15.0
    if stats.contrast < _FLAT_THRESHOLD:
        values[Adjustment.CONTRAST] = 25.0
        values[Adjustment.CLARITY] = 10.0
    if stats.saturation < _DULL_THRESHOLD:
        values[Adjustment.SATURATION] = 15.0
        values[Adjustment.VIBRANCE] = 20.0

    _LOGGER.debug("Suggested %s adjustments: %s", target.value, values)
    return AdjustmentSettings.neutral().updated(
        {settings_key(target, adjustment): value for adjustment, value in values.items()}
    )


__all__ = ["ImageStats", "compute_image_statistics", "suggest_adjustments"]
