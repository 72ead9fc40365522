"""CLI commands for bootwatch-cli."""

from .wait import status, wait

__all__ = ["status", "wait"]
