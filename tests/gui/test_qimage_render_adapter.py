"""Tests for rendering filter graphs onto ``QImage`` surfaces."""

import numpy as np
import pytest

QtGui = pytest.importorskip("PySide6.QtGui")
QImage = QtGui.QImage

from iStudio.core.filter_graph import FilterGraph  # noqa: E402
from iStudio.core.qt_adapter import (  # noqa: E402
    QImageRenderAdapter,
    array_to_qimage,
    qimage_to_array,
)
from iStudio.core.render_adapter import select_render_adapter  # noqa: E402
from iStudio.core.target_resolver import resolve_filter_graph  # noqa: E402


def test_qimage_pixels_survive_conversion(rgba_gradient) -> None:
    image = array_to_qimage(rgba_gradient)

    assert image.width() == rgba_gradient.shape[1]
    assert image.height() == rgba_gradient.shape[0]
    np.testing.assert_array_equal(qimage_to_array(image), rgba_gradient)


def test_qimage_to_array_handles_padded_rows() -> None:
    image = QImage(3, 2, QImage.Format.Format_RGB888)
    image.fill(QtGui.QColor(0x33, 0x66, 0x99))

    pixels = qimage_to_array(image)

    assert pixels.shape == (2, 3, 4)
    assert tuple(pixels[1, 2]) == (0x33, 0x66, 0x99, 255)


def test_adapter_applies_graph(rgba_gradient) -> None:
    image = array_to_qimage(rgba_gradient)
    graph = resolve_filter_graph({"background_warmth": 50}, "background")

    result = QImageRenderAdapter().apply(image, graph)
    pixels = qimage_to_array(result)

    assert int(pixels[0, 0, 0]) == 50
    np.testing.assert_array_equal(pixels[..., 3], rgba_gradient[..., 3])


def test_adapter_returns_null_image_for_null_input() -> None:
    assert QImageRenderAdapter().apply(QImage(), FilterGraph.identity()).isNull()


def test_select_render_adapter_picks_qimage_adapter() -> None:
    image = QImage(2, 2, QImage.Format.Format_ARGB32)

    assert isinstance(select_render_adapter(image), QImageRenderAdapter)
