"""Tests for the immutable adjustment settings snapshot."""

import math

import pytest

from iStudio.core.adjustment_settings import (
    ADJUSTMENT_RANGES,
    SETTINGS_KEYS,
    Adjustment,
    AdjustmentSettings,
    Target,
    clamp_adjustment,
    parse_settings_key,
    settings_key,
)


def test_neutral_settings_cover_every_key() -> None:
    settings = AdjustmentSettings.neutral()

    assert len(settings) == len(SETTINGS_KEYS) == 22
    assert all(value == 0.0 for value in settings.values())
    assert settings.is_neutral()


def test_settings_key_round_trip() -> None:
    key = settings_key(Target.BACKGROUND, Adjustment.BLUR)

    assert key == "background_blur"
    assert parse_settings_key(key) == (Target.BACKGROUND, Adjustment.BLUR)
    assert parse_settings_key("foreground_blur") is None


def test_blur_and_vignette_ranges_start_at_zero() -> None:
    assert ADJUSTMENT_RANGES[Adjustment.BLUR] == (0.0, 100.0)
    assert ADJUSTMENT_RANGES[Adjustment.VIGNETTE] == (0.0, 100.0)
    assert ADJUSTMENT_RANGES[Adjustment.CONTRAST] == (-100.0, 100.0)


def test_out_of_range_values_are_clamped() -> None:
    settings = AdjustmentSettings(
        {
            "product_contrast": 150,
            "product_brightness": -250,
            "background_blur": -5,
            "background_vignette": 400,
        }
    )

    assert settings["product_contrast"] == 100.0
    assert settings["product_brightness"] == -100.0
    assert settings["background_blur"] == 0.0
    assert settings["background_vignette"] == 100.0


def test_clamp_adjustment_boundary_values_pass_through() -> None:
    assert clamp_adjustment(Adjustment.CONTRAST, 100.0) == 100.0
    assert clamp_adjustment(Adjustment.CONTRAST, -100.0) == -100.0
    assert clamp_adjustment("blur", 0.0) == 0.0


def test_unknown_keys_and_unusable_values_are_ignored() -> None:
    settings = AdjustmentSettings(
        {
            "product_sharpness": 40,
            "product_contrast": "strong",
            "product_warmth": True,
            "product_exposure": math.nan,
            "background_warmth": "25",
        }
    )

    assert "product_sharpness" not in settings
    assert settings["product_contrast"] == 0.0
    assert settings["product_warmth"] == 0.0
    assert settings["product_exposure"] == 0.0
    assert settings["background_warmth"] == 25.0


def test_infinite_values_clamp_to_range_bounds() -> None:
    settings = AdjustmentSettings(
        {
            "product_contrast": math.inf,
            "product_warmth": -math.inf,
            "background_blur": -math.inf,
            "background_vignette": "inf",
        }
    )

    assert settings["product_contrast"] == 100.0
    assert settings["product_warmth"] == -100.0
    assert settings["background_blur"] == 0.0
    assert settings["background_vignette"] == 100.0


def test_for_target_scopes_values() -> None:
    settings = AdjustmentSettings({"product_contrast": 30, "background_contrast": -40})

    assert settings.for_target(Target.PRODUCT).contrast == 30.0
    assert settings.for_target("background").contrast == -40.0
    assert settings.value(Target.BACKGROUND, Adjustment.CONTRAST) == -40.0


def test_updated_returns_new_snapshot() -> None:
    original = AdjustmentSettings({"product_saturation": 10})
    changed = original.updated({"product_saturation": 20})

    assert original["product_saturation"] == 10.0
    assert changed["product_saturation"] == 20.0
    assert changed is not original


def test_from_mapping_reuses_existing_snapshot() -> None:
    settings = AdjustmentSettings({"product_clarity": 5})

    assert AdjustmentSettings.from_mapping(settings) is settings
    assert AdjustmentSettings.from_mapping(None) == AdjustmentSettings.neutral()


def test_from_mapping_is_detached_from_source_dict() -> None:
    source = {"product_clarity": 5}
    settings = AdjustmentSettings.from_mapping(source)
    source["product_clarity"] = 50

    assert settings["product_clarity"] == 5.0


def test_equal_snapshots_hash_alike() -> None:
    first = AdjustmentSettings({"background_blur": 12})
    second = AdjustmentSettings({"background_blur": 12.0})

    assert first == second
    assert hash(first) == hash(second)


def test_changed_targets_reports_only_modified_layers() -> None:
    base = AdjustmentSettings({"product_contrast": 10})

    assert base.changed_targets(base.updated({"background_blur": 40})) == frozenset(
        {Target.BACKGROUND}
    )
    assert base.changed_targets(base.updated({"product_contrast": 10})) == frozenset()
    assert base.changed_targets(AdjustmentSettings.neutral()) == frozenset({Target.PRODUCT})


def test_reset_single_target_keeps_the_other() -> None:
    settings = AdjustmentSettings({"product_contrast": 10, "background_contrast": 20})
    reset = settings.reset(Target.PRODUCT)

    assert reset.is_neutral(Target.PRODUCT)
    assert reset["background_contrast"] == 20.0
    assert settings.reset().is_neutral()


def test_scaled_and_interpolated() -> None:
    settings = AdjustmentSettings({"product_contrast": 40, "background_blur": 20})

    half = settings.scaled(0.5)
    assert half["product_contrast"] == pytest.approx(20.0)
    assert half["background_blur"] == pytest.approx(10.0)

    blended = AdjustmentSettings.neutral().interpolated(settings, 0.25)
    assert blended["product_contrast"] == pytest.approx(10.0)
    assert blended["background_blur"] == pytest.approx(5.0)


def test_impact_grows_with_deviation() -> None:
    assert AdjustmentSettings.neutral().impact() == 0.0
    mild = AdjustmentSettings({"product_contrast": 10})
    strong = AdjustmentSettings({"product_contrast": 100, "background_blur": 100})
    assert 0.0 < mild.impact() < strong.impact() <= 1.0
