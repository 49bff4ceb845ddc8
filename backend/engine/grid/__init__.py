"""Utility grid availability module."""

from .grid_monitor import GridMonitor, GridStatus

__all__ = ["GridMonitor", "GridStatus"]
