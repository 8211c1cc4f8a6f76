"""Non-destructive adjustment engine for the iStudio product photo editor."""

from .utils.logging import get_logger

get_logger()

__all__ = ["get_logger"]
