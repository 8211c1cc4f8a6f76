"""Editor session state: settings snapshots, per-target graphs and render tickets."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping

from .adjustment_settings import AdjustmentSettings, Target
from .filter_graph import FilterGraph
from .target_resolver import resolve_filter_graph

_LOGGER = logging.getLogger(__name__)


class EditSession:
    """Own the current settings snapshot and derive one graph per target.

    Every slider change swaps in a new immutable :class:`AdjustmentSettings`
    snapshot under a lock, so readers never mix fields from two versions.  Only
    the targets whose values actually changed lose their cached graph; the
    other target keeps returning the very same :class:`FilterGraph` object,
    which lets the preview layer skip re-rendering it.
    """

    def __init__(self, settings: Mapping[str, Any] | None = None) -> None:
        self._lock = threading.Lock()
        self._settings = AdjustmentSettings.from_mapping(settings)
        self._versions: dict[Target, int] = {target: 0 for target in Target}
        self._graphs: dict[Target, FilterGraph | None] = {target: None for target in Target}

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def snapshot(self) -> AdjustmentSettings:
        """Return the current immutable settings snapshot."""

        with self._lock:
            return self._settings

    def update(self, changes: Mapping[str, Any]) -> frozenset[Target]:
        """Merge *changes* into the settings and return the affected targets."""

        with self._lock:
            return self._swap(self._settings.updated(changes))

    def replace(self, settings: Mapping[str, Any]) -> frozenset[Target]:
        """Replace every value with *settings* and return the affected targets."""

        new_settings = AdjustmentSettings.from_mapping(settings)
        with self._lock:
            return self._swap(new_settings)

    def reset(self, target: Target | str | None = None) -> frozenset[Target]:
        """Reset *target* (or both targets) to neutral values."""

        with self._lock:
            return self._swap(self._settings.reset(target))

    def _swap(self, new_settings: AdjustmentSettings) -> frozenset[Target]:
        affected = self._settings.changed_targets(new_settings)
        self._settings = new_settings
        for target in affected:
            self._versions[target] += 1
            self._graphs[target] = None
        if affected:
            _LOGGER.debug("Settings changed for %s", sorted(target.value for target in affected))
        return affected

    # ------------------------------------------------------------------
    # Filter graphs
    # ------------------------------------------------------------------
    def version(self, target: Target | str) -> int:
        with self._lock:
            return self._versions[Target(target)]

    def cached_graph(self, target: Target | str) -> FilterGraph | None:
        """Return the cached graph for *target*, or ``None`` if not yet computed."""

        with self._lock:
            return self._graphs[Target(target)]

    def graph(self, target: Target | str) -> FilterGraph:
        """Return the graph for *target*, computing it from the latest snapshot.

        Resolution happens outside the lock.  When the settings change while
        the graph is being computed, the result is still returned to this
        caller but is not cached, so a stale graph never replaces a newer one.
        """

        target = Target(target)
        with self._lock:
            cached = self._graphs[target]
            if cached is not None:
                return cached
            settings = self._settings
            version = self._versions[target]

        graph = resolve_filter_graph(settings, target)

        with self._lock:
            if self._versions[target] == version:
                existing = self._graphs[target]
                if existing is not None:
                    # Another thread resolved the same version first; share its object.
                    return existing
                self._graphs[target] = graph
        return graph

    def graphs(self) -> dict[Target, FilterGraph]:
        return {target: self.graph(target) for target in Target}


class LatestRequestTracker:
    """Issue per-target tickets so only the newest render result is applied.

    Each render request takes a ticket; when a result comes back, callers ask
    :meth:`is_latest` and drop anything older instead of queueing it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tickets: dict[Target, int] = {target: 0 for target in Target}

    def next_ticket(self, target: Target | str) -> int:
        with self._lock:
            target = Target(target)
            self._tickets[target] += 1
            return self._tickets[target]

    def latest(self, target: Target | str) -> int:
        with self._lock:
            return self._tickets[Target(target)]

    def is_latest(self, target: Target | str, ticket: int) -> bool:
        with self._lock:
            return self._tickets[Target(target)] == ticket


__all__ = ["EditSession", "LatestRequestTracker"]
