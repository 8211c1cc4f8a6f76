"""Pixel executors for non-destructive filter graphs.

This package provides the rendering side of the adjustment engine through a
clean separation of concerns:
- algorithms: scalar helpers compiled into the JIT kernels
- executors: JIT (Numba), NumPy and Pillow implementations of each stage
- facade: stage ordering for a complete :class:`FilterGraph`
"""

from __future__ import annotations

from .facade import apply_filter_graph
from .numpy_executor import composite_over

__all__ = ["apply_filter_graph", "composite_over"]
