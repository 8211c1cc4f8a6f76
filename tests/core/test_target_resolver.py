"""Tests for resolving per-target filter graphs from settings."""

import pytest

from iStudio.core.adjustment_settings import AdjustmentSettings, Target
from iStudio.core.color_matrix import ALPHA_ROW
from iStudio.core.matrix_builder import contrast_matrix
from iStudio.core.target_resolver import resolve_all, resolve_filter_graph


def test_neutral_settings_resolve_to_identity_graphs() -> None:
    graphs = resolve_all(AdjustmentSettings.neutral())

    assert set(graphs) == {Target.PRODUCT, Target.BACKGROUND}
    assert all(graph.is_identity() for graph in graphs.values())


def test_background_blur_only_adds_spatial_stage() -> None:
    graph = resolve_filter_graph({"background_blur": 40}, Target.BACKGROUND)

    assert graph.effective_matrix().is_identity()
    assert graph.blur_radius == pytest.approx(40.0)


def test_background_blur_does_not_touch_product() -> None:
    before = resolve_filter_graph({"product_contrast": 25}, Target.PRODUCT)
    after = resolve_filter_graph(
        {"product_contrast": 25, "background_blur": 80, "background_contrast": -40},
        Target.PRODUCT,
    )

    assert before == after


def test_product_blur_is_ignored() -> None:
    graph = resolve_filter_graph({"product_blur": 60, "product_vignette": 60}, "product")

    assert graph.blur_radius == 0.0
    assert graph.vignette == 0.0


def test_plain_mapping_is_clamped_before_resolution() -> None:
    graph = resolve_filter_graph(
        {"product_contrast": 250, "product_unknown": 5, "background_contrast": "x"},
        Target.PRODUCT,
    )

    assert graph.effective_matrix() == contrast_matrix(100)


def test_product_contrast_resolves_to_pivoted_matrix() -> None:
    graph = resolve_filter_graph({"product_contrast": 50}, Target.PRODUCT)
    rows = graph.effective_matrix().rows

    assert rows[0] == pytest.approx((1.5, 0.0, 0.0, 0.0, -0.25))
    assert rows[1] == pytest.approx((0.0, 1.5, 0.0, 0.0, -0.25))
    assert rows[2] == pytest.approx((0.0, 0.0, 1.5, 0.0, -0.25))
    assert rows[3] == pytest.approx(ALPHA_ROW)
    assert graph.blur_radius == 0.0
    assert graph.vignette == 0.0


def test_full_desaturation_resolves_to_luma_rows() -> None:
    graph = resolve_filter_graph({"product_saturation": -100}, Target.PRODUCT)
    rows = graph.effective_matrix().rows

    for row in rows[:3]:
        assert row == pytest.approx((0.213, 0.715, 0.072, 0.0, 0.0))
    assert rows[3] == pytest.approx(ALPHA_ROW)


def test_value_just_past_the_bound_resolves_like_the_bound() -> None:
    assert resolve_filter_graph({"product_contrast": 101}, "product") == resolve_filter_graph(
        {"product_contrast": 100}, "product"
    )


def test_resolution_is_deterministic() -> None:
    settings = {"background_warmth": 35, "background_vignette": 20, "background_shadows": 10}

    assert resolve_filter_graph(settings, "background") == resolve_filter_graph(
        dict(settings), "background"
    )


def test_unknown_target_is_rejected() -> None:
    with pytest.raises(ValueError):
        resolve_filter_graph({}, "foreground")
