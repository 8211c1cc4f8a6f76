"""Typed, immutable adjustment settings for the product and background layers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Iterator, Mapping

_LOGGER = logging.getLogger(__name__)


class Target(str, Enum):
    """Image layer an adjustment applies to."""

    PRODUCT = "product"
    BACKGROUND = "background"


class Adjustment(str, Enum):
    """Closed set of adjustment sliders exposed by the editor."""

    BRIGHTNESS = "brightness"
    EXPOSURE = "exposure"
    CONTRAST = "contrast"
    SATURATION = "saturation"
    VIBRANCE = "vibrance"
    WARMTH = "warmth"
    HIGHLIGHTS = "highlights"
    SHADOWS = "shadows"
    CLARITY = "clarity"
    VIGNETTE = "vignette"
    BLUR = "blur"


ADJUSTMENT_RANGES: Mapping[Adjustment, tuple[float, float]] = {
    adjustment: (0.0, 100.0)
    if adjustment in (Adjustment.VIGNETTE, Adjustment.BLUR)
    else (-100.0, 100.0)
    for adjustment in Adjustment
}
"""Inclusive ranges for each adjustment slider."""

SPATIAL_ADJUSTMENTS = (Adjustment.VIGNETTE, Adjustment.BLUR)
"""Adjustments that only take effect on the background layer."""


def settings_key(target: Target | str, adjustment: Adjustment | str) -> str:
    """Return the flat ``"<target>_<adjustment>"`` key."""

    return f"{Target(target).value}_{Adjustment(adjustment).value}"


_KEY_LOOKUP: dict[str, tuple[Target, Adjustment]] = {
    settings_key(target, adjustment): (target, adjustment)
    for target in Target
    for adjustment in Adjustment
}

SETTINGS_KEYS: tuple[str, ...] = tuple(_KEY_LOOKUP)
"""Every recognised settings key, grouped by target."""


def parse_settings_key(key: str) -> tuple[Target, Adjustment] | None:
    """Return the ``(target, adjustment)`` pair encoded in *key*, or ``None``."""

    return _KEY_LOOKUP.get(key)


def clamp_adjustment(adjustment: Adjustment | str, value: float) -> float:
    """Return *value* limited to the inclusive range of *adjustment*."""

    minimum, maximum = ADJUSTMENT_RANGES[Adjustment(adjustment)]
    numeric = float(value)
    if numeric < minimum:
        return minimum
    if numeric > maximum:
        return maximum
    return numeric


def _coerce(value: Any) -> float | None:
    """Return *value* as a float or ``None`` when it cannot be used.

    Infinities are kept so clamping maps them onto the range bounds; NaN has no
    closest valid value and is dropped.
    """

    if isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(numeric):
        return None
    return numeric


@dataclass(frozen=True)
class TargetAdjustments:
    """Clamped adjustment values for a single layer."""

    brightness: float = 0.0
    exposure: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0
    vibrance: float = 0.0
    warmth: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    clarity: float = 0.0
    vignette: float = 0.0
    blur: float = 0.0

    def is_neutral(self) -> bool:
        return all(getattr(self, field.name) == 0.0 for field in fields(self))


class AdjustmentSettings(Mapping[str, float]):
    """Immutable snapshot of every adjustment for both layers.

    The snapshot always contains the full closed key set.  Building one from an
    arbitrary mapping ignores unknown keys, defaults missing keys to ``0`` and
    clamps every value into its slider range, so downstream matrix builders
    never observe an out-of-range value.  Callers replace snapshots instead of
    mutating them which keeps every reader consistent across fields.
    """

    __slots__ = ("_values", "_hash")

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        resolved = dict.fromkeys(SETTINGS_KEYS, 0.0)
        for key, raw in (values or {}).items():
            parsed = parse_settings_key(key)
            if parsed is None:
                _LOGGER.debug("Ignoring unknown adjustment key %r", key)
                continue
            numeric = _coerce(raw)
            if numeric is None:
                _LOGGER.debug("Ignoring non-numeric value %r for %s", raw, key)
                continue
            clamped = clamp_adjustment(parsed[1], numeric)
            if clamped != numeric:
                _LOGGER.debug("Clamped %s from %s to %s", key, numeric, clamped)
            resolved[key] = clamped
        self._values: dict[str, float] = resolved
        self._hash: int | None = None

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def neutral(cls) -> "AdjustmentSettings":
        return cls()

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "AdjustmentSettings":
        """Return *values* as :class:`AdjustmentSettings` (no copy when already one)."""

        if isinstance(values, cls):
            return values
        # ``dict(...)`` takes the snapshot before validation so a caller mutating
        # its mapping concurrently cannot tear the values across fields.
        return cls(dict(values or {}))

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------
    def __getitem__(self, key: str) -> float:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AdjustmentSettings):
            return self._values == other._values
        return NotImplemented

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(tuple(self._values.items()))
        return self._hash

    def __repr__(self) -> str:
        active = {key: value for key, value in self._values.items() if value != 0.0}
        return f"AdjustmentSettings({active!r})"

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def value(self, target: Target | str, adjustment: Adjustment | str) -> float:
        return self._values[settings_key(target, adjustment)]

    def for_target(self, target: Target | str) -> TargetAdjustments:
        """Return the values scoped to *target*."""

        prefix = f"{Target(target).value}_"
        return TargetAdjustments(
            **{
                adjustment.value: self._values[prefix + adjustment.value]
                for adjustment in Adjustment
            }
        )

    def is_neutral(self, target: Target | str | None = None) -> bool:
        if target is None:
            return all(value == 0.0 for value in self._values.values())
        return self.for_target(target).is_neutral()

    def to_dict(self) -> dict[str, float]:
        """Return a JSON-serialisable copy of every value."""

        return dict(self._values)

    # ------------------------------------------------------------------
    # Copy-on-write updates
    # ------------------------------------------------------------------
    def updated(self, changes: Mapping[str, Any]) -> "AdjustmentSettings":
        """Return a new snapshot with *changes* applied on top of this one."""

        merged = dict(self._values)
        merged.update(changes)
        return AdjustmentSettings(merged)

    def reset(self, target: Target | str | None = None) -> "AdjustmentSettings":
        """Return a copy with *target* (or every target) set back to neutral."""

        if target is None:
            return AdjustmentSettings()
        prefix = f"{Target(target).value}_"
        return AdjustmentSettings(
            {key: value for key, value in self._values.items() if not key.startswith(prefix)}
        )

    def changed_targets(self, other: "AdjustmentSettings") -> frozenset[Target]:
        """Return the targets whose values differ between ``self`` and *other*."""

        changed = set()
        for key, value in self._values.items():
            if other._values[key] != value:
                changed.add(_KEY_LOOKUP[key][0])
        return frozenset(changed)

    # ------------------------------------------------------------------
    # Settings arithmetic
    # ------------------------------------------------------------------
    def scaled(self, intensity: float) -> "AdjustmentSettings":
        """Return every value multiplied by *intensity* (clamped to ``[0, 1]``)."""

        factor = max(0.0, min(1.0, float(intensity)))
        return AdjustmentSettings({key: value * factor for key, value in self._values.items()})

    def interpolated(self, other: Mapping[str, Any], progress: float) -> "AdjustmentSettings":
        """Return the linear blend from ``self`` (``0``) to *other* (``1``)."""

        target = AdjustmentSettings.from_mapping(other)
        t = max(0.0, min(1.0, float(progress)))
        return AdjustmentSettings(
            {
                key: value + (target._values[key] - value) * t
                for key, value in self._values.items()
            }
        )

    def impact(self) -> float:
        """Return how strongly the settings deviate from neutral, in ``[0, 1]``."""

        total = sum(abs(value) for value in self._values.values())
        return min(1.0, total / (len(self._values) * 100.0))


__all__ = [
    "ADJUSTMENT_RANGES",
    "Adjustment",
    "AdjustmentSettings",
    "SETTINGS_KEYS",
    "SPATIAL_ADJUSTMENTS",
    "Target",
    "TargetAdjustments",
    "clamp_adjustment",
    "parse_settings_key",
    "settings_key",
]
