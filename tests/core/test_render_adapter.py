"""Tests for the array and Pillow render adapters."""

import numpy as np
import pytest
from PIL import Image

from iStudio.core.filter_graph import FilterGraph
from iStudio.core.render_adapter import (
    ArrayRenderAdapter,
    PillowRenderAdapter,
    select_render_adapter,
)
from iStudio.core.target_resolver import resolve_filter_graph
from iStudio.errors import RenderError


def test_array_adapter_applies_graph(rgba_gradient) -> None:
    adapter = ArrayRenderAdapter()
    graph = resolve_filter_graph({"product_exposure": 20}, "product")

    result = adapter.apply(rgba_gradient, graph)

    assert result.shape == rgba_gradient.shape
    assert int(result[0, 0, 0]) > int(rgba_gradient[0, 0, 0])


def test_array_adapter_wraps_invalid_input() -> None:
    with pytest.raises(RenderError):
        ArrayRenderAdapter().apply(np.zeros((2, 2), dtype=np.uint8), FilterGraph.identity())


def test_pillow_adapter_keeps_rgb_mode(rgba_gradient) -> None:
    image = Image.fromarray(rgba_gradient).convert("RGB")
    graph = resolve_filter_graph({"background_warmth": 40}, "background")

    result = PillowRenderAdapter().apply(image, graph)

    assert result.mode == "RGB"
    assert result.size == image.size
    assert result.getpixel((0, 0))[0] > image.getpixel((0, 0))[0]


def test_pillow_adapter_renders_other_modes_as_rgba() -> None:
    image = Image.new("L", (8, 6), color=90)

    result = PillowRenderAdapter().apply(image, FilterGraph.identity())

    assert result.mode == "RGBA"
    assert result.getpixel((3, 3)) == (90, 90, 90, 255)


def test_select_render_adapter_by_surface_type(rgba_gradient) -> None:
    assert isinstance(select_render_adapter(rgba_gradient), ArrayRenderAdapter)
    assert isinstance(select_render_adapter(Image.new("RGBA", (2, 2))), PillowRenderAdapter)


def test_select_render_adapter_rejects_unknown_surfaces() -> None:
    pytest.importorskip("PySide6.QtGui")

    with pytest.raises(RenderError):
        select_render_adapter("not an image")
