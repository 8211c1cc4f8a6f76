"""Exception hierarchy for iStudio."""

from __future__ import annotations


class IStudioError(Exception):
    """Base class for errors raised by iStudio."""


class SettingsInvalidError(IStudioError):
    """Raised when a settings or preset file cannot be read."""


class RenderError(IStudioError):
    """Raised when a render adapter cannot apply a filter graph to a surface."""


__all__ = ["IStudioError", "RenderError", "SettingsInvalidError"]
