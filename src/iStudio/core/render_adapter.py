"""Render adapters binding filter graphs to concrete image surfaces."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import numpy as np
from PIL import Image

from ..errors import RenderError
from .filter_graph import FilterGraph
from .filters import apply_filter_graph

_LOGGER = logging.getLogger(__name__)


class RenderAdapter(ABC):
    """Apply a :class:`FilterGraph` to one kind of image surface.

    Adapters own no adjustment logic: they convert the surface into an RGBA
    pixel array, hand it to :func:`apply_filter_graph` and wrap the result back
    into the surface type the caller gave them.  Every failure is surfaced as
    :class:`RenderError`; the adjustment core itself never raises for bad
    slider values.
    """

    tier_name: str = "unknown"
    """Human readable label used in logs."""

    @abstractmethod
    def supports(self, image: Any) -> bool:
        """Return ``True`` when *image* is a surface this adapter understands."""

    @abstractmethod
    def apply(self, image: Any, graph: FilterGraph) -> Any:
        """Return a new surface with *graph* applied to *image*."""


class ArrayRenderAdapter(RenderAdapter):
    """Adapter for ``(H, W, 4)`` RGBA ``uint8`` NumPy arrays."""

    tier_name = "NumPy"

    def __init__(self, *, prefer_jit: bool = True) -> None:
        self._prefer_jit = prefer_jit

    def supports(self, image: Any) -> bool:
        return isinstance(image, np.ndarray)

    def apply(self, image: np.ndarray, graph: FilterGraph) -> np.ndarray:
        try:
            return apply_filter_graph(image, graph, prefer_jit=self._prefer_jit)
        except (ValueError, BufferError) as exc:
            raise RenderError(f"Cannot render array surface: {exc}") from exc


class PillowRenderAdapter(RenderAdapter):
    """Adapter for :class:`PIL.Image.Image` surfaces.

    RGB and RGBA images keep their mode; any other mode is rendered as RGBA.
    """

    tier_name = "Pillow"

    def __init__(self, *, prefer_jit: bool = True) -> None:
        self._prefer_jit = prefer_jit

    def supports(self, image: Any) -> bool:
        return isinstance(image, Image.Image)

    def apply(self, image: Image.Image, graph: FilterGraph) -> Image.Image:
        try:
            pixels = np.asarray(image.convert("RGBA"), dtype=np.uint8)
            rendered = apply_filter_graph(pixels, graph, prefer_jit=self._prefer_jit)
        except (OSError, ValueError, BufferError) as exc:
            raise RenderError(f"Cannot render {image.mode} image: {exc}") from exc

        result = Image.fromarray(rendered)
        if image.mode == "RGB":
            return result.convert("RGB")
        return result


def select_render_adapter(image: Any, *, prefer_jit: bool = True) -> RenderAdapter:
    """Return the adapter able to render *image*.

    ``QImage`` support is imported lazily so headless callers working on
    arrays or Pillow images never load Qt.
    """

    candidates: list[RenderAdapter] = [
        ArrayRenderAdapter(prefer_jit=prefer_jit),
        PillowRenderAdapter(prefer_jit=prefer_jit),
    ]
    for adapter in candidates:
        if adapter.supports(image):
            _LOGGER.debug("Using %s render adapter", adapter.tier_name)
            return adapter

    from .qt_adapter import QImageRenderAdapter

    adapter = QImageRenderAdapter(prefer_jit=prefer_jit)
    if adapter.supports(image):
        _LOGGER.debug("Using %s render adapter", adapter.tier_name)
        return adapter
    raise RenderError(f"No render adapter supports {type(image).__name__}")


__all__ = [
    "ArrayRenderAdapter",
    "PillowRenderAdapter",
    "RenderAdapter",
    "select_render_adapter",
]
