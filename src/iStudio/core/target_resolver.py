"""Resolve per-layer filter graphs from a settings snapshot."""

from __future__ import annotations

from typing import Any, Mapping

from .adjustment_settings import AdjustmentSettings, Target
from .filter_compositor import build_filter_graph
from .filter_graph import FilterGraph
from .matrix_builder import build_family_matrices


def resolve_filter_graph(settings: Mapping[str, Any], target: Target | str) -> FilterGraph:
    """Return the :class:`FilterGraph` for *target*.

    The function depends only on its arguments.  Plain mappings are copied into
    an :class:`AdjustmentSettings` snapshot first, which applies the default and
    clamping rules and guarantees every value comes from the same version of
    the settings.
    """

    snapshot = AdjustmentSettings.from_mapping(settings)
    target = Target(target)
    adjustments = snapshot.for_target(target)
    return build_filter_graph(
        target,
        build_family_matrices(adjustments),
        highlights=adjustments.highlights,
        shadows=adjustments.shadows,
        clarity=adjustments.clarity,
        blur=adjustments.blur,
        vignette=adjustments.vignette,
    )


def resolve_all(settings: Mapping[str, Any]) -> dict[Target, FilterGraph]:
    """Return one independent graph per target from a single snapshot."""

    snapshot = AdjustmentSettings.from_mapping(settings)
    return {target: resolve_filter_graph(snapshot, target) for target in Target}


__all__ = ["resolve_all", "resolve_filter_graph"]
