"""Application constants for the iStudio adjustment engine."""

from __future__ import annotations

LOGGER_NAME = "iStudio"
LOG_LEVEL_ENV = "ISTUDIO_LOG_LEVEL"
"""Environment variable overriding the package log level (``DEBUG``, ``INFO``, ...)."""

# Canonical slider scales.  Each adjustment slider reports values in ``[-100, 100]``
# (``[0, 100]`` for blur and vignette); the divisors below map those values into the
# normalised colour space used by the matrix builders.
BRIGHTNESS_SCALE = 255.0
EXPOSURE_SCALE = 100.0
CONTRAST_SCALE = 100.0
SATURATION_SCALE = 100.0
WARMTH_SCALE = 255.0

LUMA_WEIGHTS = (0.213, 0.715, 0.072)
"""Luminance weights used by the saturation matrix."""

# Highlights and shadows lift the tonal extremes by at most ``TONE_STRENGTH``.
TONE_STRENGTH = 0.25
TONE_HIGHLIGHT_THRESHOLD = 0.65
TONE_SHADOW_THRESHOLD = 0.35

CLARITY_RADIUS_FRACTION = 0.02
"""Clarity detail radius expressed as a fraction of the shorter image edge."""

BLUR_RADIUS_SCALE = 1.0
"""Pixels of gaussian blur radius per blur slider unit."""

VIGNETTE_MAX_DARKENING = 0.8
VIGNETTE_INNER_RADIUS = 0.35

FRAME_INTERVAL_MS = 16
"""Debounce window for preview renders while a slider is dragged."""

USER_PRESETS_FILE_NAME = "presets.json"
