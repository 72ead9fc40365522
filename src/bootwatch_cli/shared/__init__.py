"""Shared modules for bootwatch-cli."""

from .logging import configure_logging, get_logger, level_from_verbosity

__all__ = [
    "configure_logging",
    "get_logger",
    "level_from_verbosity",
]
