import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def rgba_gradient() -> np.ndarray:
    """Opaque 24x32 RGBA image with a distinct value in every channel."""

    height, width = 24, 32
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (xs * 255 // (width - 1)).astype(np.uint8)
    pixels[..., 1] = (ys * 255 // (height - 1)).astype(np.uint8)
    pixels[..., 2] = ((xs + ys) * 255 // (width + height - 2)).astype(np.uint8)
    pixels[..., 3] = 255
    return pixels


@pytest.fixture
def cutout(rgba_gradient: np.ndarray) -> np.ndarray:
    """Product cut-out: the gradient with a fully transparent border."""

    pixels = rgba_gradient.copy()
    pixels[:4, :, :] = 0
    pixels[-4:, :, :] = 0
    pixels[:, :4, :] = 0
    pixels[:, -4:, :] = 0
    return pixels


@pytest.fixture
def qapp():
    qt_core = pytest.importorskip("PySide6.QtCore")
    app = qt_core.QCoreApplication.instance()
    if app is None:
        app = qt_core.QCoreApplication([])
    return app
