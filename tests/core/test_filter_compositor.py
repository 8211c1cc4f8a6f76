"""Tests for building filter graphs from family matrices and spatial values."""

import pytest

from iStudio.core.color_matrix import compose
from iStudio.core.filter_compositor import build_filter_graph, compose_family_matrices
from iStudio.core.filter_graph import FilterGraph
from iStudio.core.matrix_builder import contrast_matrix, warmth_matrix


def test_compose_family_matrices_applies_in_order() -> None:
    first = contrast_matrix(40)
    second = warmth_matrix(30)

    assert compose_family_matrices([first, second]) == compose(first, second)
    assert compose_family_matrices([]).is_identity()


def test_product_ignores_blur_and_vignette() -> None:
    graph = build_filter_graph("product", [], blur=40, vignette=30)

    assert graph.blur_radius == 0.0
    assert graph.vignette == 0.0
    assert graph.is_identity()


def test_background_keeps_spatial_effects() -> None:
    graph = build_filter_graph("background", [], blur=40, vignette=50)

    assert graph.blur_radius == pytest.approx(40.0)
    assert graph.vignette == pytest.approx(0.4)
    assert graph.has_spatial_stage()
    assert not graph.has_color_stage()


def test_tone_values_are_normalised_and_clamped() -> None:
    graph = build_filter_graph(
        "product",
        [],
        highlights=50,
        shadows=-250,
        clarity=20,
    )

    assert graph.highlights == pytest.approx(0.5)
    assert graph.shadows == pytest.approx(-1.0)
    assert graph.clarity == pytest.approx(0.2)
    assert graph.has_tone_stage()


def test_blur_below_zero_is_clamped_to_zero() -> None:
    graph = build_filter_graph("background", [], blur=-10)

    assert graph.blur_radius == 0.0


def test_identity_graph_helpers() -> None:
    identity = FilterGraph.identity()

    assert identity is FilterGraph.IDENTITY
    assert identity.is_identity()
    assert identity.effective_matrix().is_identity()
    assert identity.to_dict()["matrix"][3] == [0.0, 0.0, 0.0, 1.0, 0.0]
