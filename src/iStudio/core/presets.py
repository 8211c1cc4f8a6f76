"""Built-in filter presets and the user preset library."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..config import USER_PRESETS_FILE_NAME
from ..errors import SettingsInvalidError
from ..utils.jsonio import read_json, write_json
from .adjustment_settings import (
    SPATIAL_ADJUSTMENTS,
    Adjustment,
    AdjustmentSettings,
    Target,
    settings_key,
)

_LOGGER = logging.getLogger(__name__)

SCOPE_ALL = "all"
"""Preset scope writing the preset into both layers."""


@dataclass(frozen=True)
class FilterPreset:
    """Named set of unprefixed adjustment values (``{"contrast": 20, ...}``)."""

    key: str
    name: str
    settings: Mapping[str, float] = field(default_factory=dict)

    def values(self) -> dict[Adjustment, float]:
        """Return the preset values keyed by :class:`Adjustment`, unknown names dropped."""

        resolved: dict[Adjustment, float] = {}
        for name, value in self.settings.items():
            try:
                resolved[Adjustment(name)] = float(value)
            except ValueError:
                _LOGGER.debug("Preset %s ignores unknown adjustment %r", self.key, name)
        return resolved

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "name": self.name, "settings": dict(self.settings)}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FilterPreset":
        try:
            key = str(payload["key"])
            name = str(payload.get("name", key))
            settings = {str(k): float(v) for k, v in dict(payload.get("settings", {})).items()}
        except (KeyError, TypeError, ValueError) as exc:
            raise SettingsInvalidError(f"Invalid preset entry: {payload!r}") from exc
        return cls(key=key, name=name, settings=settings)


BUILTIN_PRESETS: tuple[FilterPreset, ...] = (
    FilterPreset("original", "Original", {}),
    FilterPreset(
        "vivid",
        "Vivid",
        {"saturation": 35, "vibrance": 25, "contrast": 20, "clarity": 15, "warmth": 5, "exposure": 5},
    ),
    FilterPreset(
        "dramatic",
        "Dramatic",
        {
            "contrast": 45,
            "highlights": -25,
            "shadows": 30,
            "clarity": 25,
            "vignette": 20,
            "saturation": 15,
            "exposure": -5,
        },
    ),
    FilterPreset(
        "mono",
        "Mono",
        {"saturation": -100, "contrast": 25, "clarity": 20, "highlights": -5, "shadows": 10, "exposure": 5},
    ),
    FilterPreset(
        "vintage",
        "Vintage",
        {
            "warmth": 40,
            "contrast": -10,
            "vignette": 30,
            "saturation": -20,
            "shadows": 15,
            "exposure": -10,
            "clarity": -5,
        },
    ),
    FilterPreset(
        "cool",
        "Cool",
        {"warmth": -30, "saturation": 10, "highlights": 10, "contrast": 5, "clarity": 5},
    ),
    FilterPreset(
        "warm",
        "Warm",
        {"warmth": 25, "exposure": 5, "shadows": -10, "saturation": 15, "contrast": 5},
    ),
    FilterPreset(
        "bright",
        "Bright",
        {
            "exposure": 20,
            "highlights": 15,
            "shadows": -10,
            "contrast": 10,
            "clarity": 10,
            "saturation": 5,
            "warmth": 5,
        },
    ),
    FilterPreset(
        "fade",
        "Fade",
        {
            "highlights": -30,
            "shadows": 20,
            "contrast": -20,
            "saturation": -15,
            "exposure": 10,
            "warmth": 5,
            "clarity": -10,
            "vignette": 5,
        },
    ),
    FilterPreset(
        "cinema",
        "Cinema",
        {
            "contrast": 30,
            "shadows": 25,
            "highlights": -15,
            "warmth": 5,
            "vignette": 20,
            "saturation": -5,
            "clarity": 15,
            "exposure": -5,
        },
    ),
    FilterPreset(
        "noir",
        "Noir",
        {"saturation": -100, "contrast": 40, "highlights": -20, "shadows": 35, "vignette": 25, "clarity": 20},
    ),
    FilterPreset(
        "pastel",
        "Pastel",
        {
            "exposure": 10,
            "highlights": -20,
            "shadows": 15,
            "contrast": -15,
            "saturation": -10,
            "warmth": 10,
            "clarity": -5,
        },
    ),
)

_BUILTIN_BY_KEY = {preset.key: preset for preset in BUILTIN_PRESETS}


def get_preset(key: str, presets: Iterable[FilterPreset] | None = None) -> FilterPreset | None:
    """Return the preset named *key* from *presets* (default: the built-ins)."""

    if presets is None:
        return _BUILTIN_BY_KEY.get(key)
    for preset in presets:
        if preset.key == key:
            return preset
    return None


def _scope_targets(scope: Target | str) -> tuple[Target, ...]:
    if scope == SCOPE_ALL:
        return tuple(Target)
    return (Target(scope),)


def apply_preset(
    settings: Mapping[str, Any],
    key: str,
    scope: Target | str,
    *,
    intensity: float = 1.0,
    presets: Iterable[FilterPreset] | None = None,
) -> AdjustmentSettings:
    """Return *settings* with preset *key* written into the layers of *scope*.

    *scope* is ``"product"``, ``"background"`` or ``"all"``.  The ``all`` scope
    first resets both layers so the result matches the preset exactly; the
    single-layer scopes only overwrite the values the preset defines.  Blur and
    vignette values only land on the background.  Unknown presets leave the
    settings untouched.
    """

    snapshot = AdjustmentSettings.from_mapping(settings)
    preset = get_preset(key, presets)
    if preset is None:
        _LOGGER.warning("Unknown filter preset %r; settings left unchanged", key)
        return snapshot

    factor = max(0.0, min(1.0, float(intensity)))
    targets = _scope_targets(scope)
    if scope == SCOPE_ALL:
        snapshot = snapshot.reset()

    changes: dict[str, float] = {}
    for target in targets:
        for adjustment, value in preset.values().items():
            if target is Target.PRODUCT and adjustment in SPATIAL_ADJUSTMENTS:
                continue
            changes[settings_key(target, adjustment)] = value * factor
    return snapshot.updated(changes)


def find_matching_preset(
    settings: Mapping[str, Any],
    target: Target | str,
    *,
    tolerance: float = 10.0,
    presets: Iterable[FilterPreset] | None = None,
) -> FilterPreset | None:
    """Return the first preset whose values are within *tolerance* of *target*'s."""

    snapshot = AdjustmentSettings.from_mapping(settings)
    target = Target(target)
    for preset in presets if presets is not None else BUILTIN_PRESETS:
        expected = preset.values()
        if all(
            abs(snapshot.value(target, adjustment) - expected.get(adjustment, 0.0)) <= tolerance
            for adjustment in Adjustment
            if not (target is Target.PRODUCT and adjustment in SPATIAL_ADJUSTMENTS)
        ):
            return preset
    return None


def _library_file(path: Path) -> Path:
    """Return *path*, or the default library file when *path* is a directory."""

    return path / USER_PRESETS_FILE_NAME if path.is_dir() else path


def load_user_presets(path: Path) -> list[FilterPreset]:
    """Return the presets stored in *path*; a missing file yields an empty list."""

    path = _library_file(path)
    if not path.exists():
        return []
    payload = read_json(path)
    entries = payload.get("presets") if isinstance(payload, dict) else None
    if not isinstance(entries, list):
        raise SettingsInvalidError(f"Preset library {path} has no 'presets' list")
    return [FilterPreset.from_dict(entry) for entry in entries]


def save_user_presets(
    path: Path,
    presets: Iterable[FilterPreset],
    *,
    backup_dir: Path | None = None,
) -> None:
    """Atomically write *presets* to *path*."""

    path = _library_file(path)
    payload = {"presets": [preset.to_dict() for preset in presets]}
    write_json(path, payload, backup_dir=backup_dir)
    _LOGGER.info("Saved %d user presets to %s", len(payload["presets"]), path)


__all__ = [
    "BUILTIN_PRESETS",
    "FilterPreset",
    "SCOPE_ALL",
    "apply_preset",
    "find_matching_preset",
    "get_preset",
    "load_user_presets",
    "save_user_presets",
]
