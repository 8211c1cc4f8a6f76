"""Controller scheduling live filter previews for the product and background layers."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from PySide6.QtCore import QObject, QThreadPool, QTimer, Signal, Slot
from PySide6.QtGui import QImage

from ....config import FRAME_INTERVAL_MS
from ....core.adjustment_settings import Target
from ....core.edit_session import EditSession, LatestRequestTracker
from ....core.filter_graph import FilterGraph
from ....core.qt_adapter import QImageRenderAdapter
from ....core.render_adapter import RenderAdapter
from ..tasks.filter_render_worker import FilterRenderWorker


_LOGGER = logging.getLogger(__name__)


class FilterPreviewController(QObject):
    """Turn settings changes into debounced, most-recent-wins preview renders.

    Slider drags produce far more updates than can be rendered.  Requests are
    collected per target and flushed once per frame by a single-shot timer;
    only the newest result for each target is ever emitted.  A target whose
    graph did not change since its last render is left alone, so dragging a
    background slider never re-renders the product.
    """

    previewReady = Signal(str, QImage)
    renderFailed = Signal(str, str)

    def __init__(
        self,
        session: EditSession,
        adapter: Optional[RenderAdapter] = None,
        thread_pool: Optional[QThreadPool] = None,
        frame_interval_ms: int = FRAME_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._adapter = adapter if adapter is not None else QImageRenderAdapter()
        self._thread_pool = thread_pool if thread_pool is not None else QThreadPool.globalInstance()
        self._tracker = LatestRequestTracker()
        self._sources: dict[Target, QImage] = {}
        self._rendered_graphs: dict[Target, FilterGraph] = {}
        self._pending: set[Target] = set()
        self._active_workers: dict[tuple[Target, int], FilterRenderWorker] = {}

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(frame_interval_ms)))
        self._timer.timeout.connect(self.flush)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def session(self) -> EditSession:
        return self._session

    def set_source(self, target: Target | str, image: QImage) -> None:
        """Use *image* as the unfiltered layer for *target* and schedule a render."""

        target = Target(target)
        if image.isNull():
            self._sources.pop(target, None)
            self._rendered_graphs.pop(target, None)
            self._pending.discard(target)
            # Advance the ticket so a render still in flight for this layer is dropped.
            self._tracker.next_ticket(target)
            return
        self._sources[target] = QImage(image)
        # A new source invalidates the previous render even if the graph is unchanged.
        self._rendered_graphs.pop(target, None)
        self.request_render(target)

    def update_settings(self, changes: Mapping[str, Any]) -> frozenset[Target]:
        """Apply *changes* to the session and schedule renders for affected targets."""

        affected = self._session.update(changes)
        for target in affected:
            self.request_render(target)
        return affected

    def request_render(self, target: Target | str) -> None:
        """Queue a render of *target* for the next frame."""

        target = Target(target)
        if target not in self._sources:
            return
        self._pending.add(target)
        if not self._timer.isActive():
            self._timer.start()

    @Slot()
    def flush(self) -> None:
        """Start renders for every pending target immediately."""

        self._timer.stop()
        pending = [target for target in Target if target in self._pending]
        self._pending.clear()
        for target in pending:
            self._start_render(target)

    def has_pending(self) -> bool:
        return bool(self._pending)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _start_render(self, target: Target) -> None:
        source = self._sources.get(target)
        if source is None:
            return

        graph = self._session.graph(target)
        if self._rendered_graphs.get(target) is graph:
            _LOGGER.debug("Skipping %s render: graph unchanged", target.value)
            return

        ticket = self._tracker.next_ticket(target)
        self._rendered_graphs[target] = graph

        worker = FilterRenderWorker(
            self._adapter,
            source,
            graph,
            target=target.value,
            ticket=ticket,
        )
        worker.signals.finished.connect(self._handle_render_finished)
        worker.signals.error.connect(self._handle_render_error)
        self._active_workers[(target, ticket)] = worker
        self._thread_pool.start(worker)

    @Slot(str, QImage, int)
    def _handle_render_finished(self, target_name: str, image: QImage, ticket: int) -> None:
        target = Target(target_name)
        self._active_workers.pop((target, ticket), None)
        if not self._tracker.is_latest(target, ticket):
            _LOGGER.debug("Dropping stale %s render %d", target.value, ticket)
            return
        self.previewReady.emit(target.value, image)

    @Slot(str, int, str)
    def _handle_render_error(self, target_name: str, ticket: int, message: str) -> None:
        target = Target(target_name)
        self._active_workers.pop((target, ticket), None)
        if not self._tracker.is_latest(target, ticket):
            _LOGGER.debug("Ignoring failure of stale %s render %d", target.value, ticket)
            return
        # Forget the failed graph so the next request retries it.
        self._rendered_graphs.pop(target, None)
        _LOGGER.error("Preview render failed for %s: %s", target.value, message)
        self.renderFailed.emit(target.value, message)


__all__ = ["FilterPreviewController"]
