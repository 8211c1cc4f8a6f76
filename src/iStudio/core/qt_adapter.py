"""Render adapter for Qt ``QImage`` surfaces."""

from __future__ import annotations

import numpy as np
from PySide6.QtGui import QImage

from ..errors import RenderError
from .filter_graph import FilterGraph
from .filters import apply_filter_graph
from .render_adapter import RenderAdapter


def _resolve_pixel_buffer(image: QImage) -> tuple[memoryview, object]:
    """Return a 1-D :class:`memoryview` over *image*'s pixels.

    PyQt returns a ``sip.voidptr`` that requires an explicit ``setsize`` call
    before Python can view the memory, while PySide exposes a ready-to-use
    ``memoryview``.  The tuple's second element is the object returned by
    ``bits()``; callers keep it alive for as long as they use the view.
    """

    bytes_per_line = image.bytesPerLine()
    height = image.height()
    buffer = image.bits()
    expected_size = bytes_per_line * height

    guard: object = buffer

    if isinstance(buffer, memoryview):
        view = buffer
    else:
        try:
            view = memoryview(buffer)
        except TypeError:
            if hasattr(buffer, "setsize"):
                buffer.setsize(expected_size)
                view = memoryview(buffer)
            else:
                raise RuntimeError("Unsupported QImage.bits() buffer wrapper") from None

    try:
        view = view.cast("B")
    except TypeError:
        # Multi-dimensional views need the shape argument on older interpreters.
        view = view.cast("B", (view.nbytes,))

    if len(view) < expected_size:
        raise BufferError("QImage pixel buffer is smaller than expected")
    return view[:expected_size], guard


def qimage_to_array(image: QImage) -> np.ndarray:
    """Return a detached ``(H, W, 4)`` RGBA ``uint8`` copy of *image*."""

    converted = image.convertToFormat(QImage.Format.Format_RGBA8888)
    width = converted.width()
    height = converted.height()
    bytes_per_line = converted.bytesPerLine()

    view, guard = _resolve_pixel_buffer(converted)
    _ = guard

    buffer = np.frombuffer(view, dtype=np.uint8, count=bytes_per_line * height)
    surface = buffer.reshape((height, bytes_per_line))
    return surface[:, : width * 4].reshape((height, width, 4)).copy()


def array_to_qimage(pixels: np.ndarray) -> QImage:
    """Return a ``QImage`` owning a copy of the RGBA ``uint8`` array *pixels*."""

    array = np.ascontiguousarray(pixels, dtype=np.uint8)
    height, width = array.shape[:2]
    data = array.tobytes()
    image = QImage(data, width, height, width * 4, QImage.Format.Format_RGBA8888)
    # ``QImage`` only borrows ``data``; ``copy`` detaches it before the bytes
    # object goes out of scope.
    return image.copy()


class QImageRenderAdapter(RenderAdapter):
    """Adapter rendering filter graphs onto ``QImage`` surfaces."""

    tier_name = "QImage"

    def __init__(self, *, prefer_jit: bool = True) -> None:
        self._prefer_jit = prefer_jit

    def supports(self, image: object) -> bool:
        return isinstance(image, QImage)

    def apply(self, image: QImage, graph: FilterGraph) -> QImage:
        if image.isNull():
            return QImage()
        try:
            pixels = qimage_to_array(image)
            rendered = apply_filter_graph(pixels, graph, prefer_jit=self._prefer_jit)
        except (BufferError, RuntimeError, ValueError) as exc:
            raise RenderError(f"Cannot render QImage: {exc}") from exc
        return array_to_qimage(rendered)


__all__ = [
    "QImageRenderAdapter",
    "array_to_qimage",
    "qimage_to_array",
]
