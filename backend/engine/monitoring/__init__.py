"""Tick orchestration and event publishing module."""

from .events import GRID, NOTIFICATION, TELEMETRY, EventBus
from .monitor import GeneratorMonitor
from .ticker import Ticker

__all__ = ["GRID", "NOTIFICATION", "TELEMETRY", "EventBus", "GeneratorMonitor", "Ticker"]
