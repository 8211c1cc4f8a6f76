"""Worker that renders a filter graph onto a layer on a background thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal
from PySide6.QtGui import QImage

from ....core.filter_graph import FilterGraph
from ....core.render_adapter import RenderAdapter


LOGGER = logging.getLogger(__name__)


class FilterRenderSignals(QObject):
    """Signals emitted by :class:`FilterRenderWorker`."""

    finished = Signal(str, QImage, int)
    """Emitted with the target name, the rendered frame and the request ticket."""

    error = Signal(str, int, str)
    """Emitted with the target name, the request ticket and the failure message."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class FilterRenderWorker(QRunnable):
    """Apply a :class:`FilterGraph` using ``RenderAdapter.apply``."""

    def __init__(
        self,
        adapter: RenderAdapter,
        source_image: QImage,
        graph: FilterGraph,
        *,
        target: str,
        ticket: int,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)

        # ``QImage`` is implicitly shared; the copy keeps the caller's instance
        # detached while the worker reads it from another thread.
        self._source_image = QImage(source_image)
        self._adapter = adapter
        self._graph = graph
        self._target = target
        self._ticket = ticket
        self.signals = FilterRenderSignals()

    @property
    def ticket(self) -> int:
        return self._ticket

    def run(self) -> None:  # type: ignore[override]
        """Render the filtered frame and notify listeners when done."""

        try:
            image = self._adapter.apply(self._source_image, self._graph)
        except Exception as exc:
            LOGGER.exception("Filter render failed for %s", self._target)
            self.signals.error.emit(self._target, self._ticket, str(exc))
            return
        self.signals.finished.emit(self._target, image, self._ticket)


__all__ = ["FilterRenderSignals", "FilterRenderWorker"]
