"""RUNNING/STOPPED lifecycle of the backup generator.

The state machine owns the generator status and the timestamp of the
current run.  Starting is refused when the tank is below the minimum start
level; stopping always succeeds and records whether the operator or the
safety supervisor asked for it.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable, Optional

from .notifications import Notification, Severity
from .telemetry import GeneratorStatus

logger = logging.getLogger(__name__)

MIN_START_FUEL_PCT = 15.0


class EngineError(Exception):
    """Base class for generator engine command failures."""


class FuelTooLowError(EngineError):
    """Raised by :meth:`GeneratorStateMachine.start` on an under-fuelled tank."""

    def __init__(self, fuel_level_pct: float, minimum_pct: float = MIN_START_FUEL_PCT) -> None:
        self.fuel_level_pct = fuel_level_pct
        self.minimum_pct = minimum_pct
        super().__init__(
            f"Cannot start generator: fuel level {fuel_level_pct:.1f}% is below "
            f"the {minimum_pct:.0f}% minimum. Refuel before starting."
        )


class StopCause(str, enum.Enum):
    OPERATOR = "operator"
    SAFETY = "safety"


class GeneratorStateMachine:
    """Start/stop controller for a single generator.

    Parameters
    ----------
    fuel_gauge : Callable[[], float]
        Returns the current tank level in percent.  Read on every start.
    clock : Callable[[], float]
        Returns epoch seconds.  Defaults to :func:`time.time`.
    notify : Callable[[Notification], None], optional
        Sink for "started"/"stopped" notifications.
    min_start_fuel_pct : float
        Start is refused below this level.
    """

    def __init__(
        self,
        fuel_gauge: Callable[[], float],
        clock: Callable[[], float] = time.time,
        notify: Optional[Callable[[Notification], None]] = None,
        min_start_fuel_pct: float = MIN_START_FUEL_PCT,
    ) -> None:
        self._fuel_gauge = fuel_gauge
        self._clock = clock
        self._notify = notify
        self.min_start_fuel_pct = min_start_fuel_pct

        self._status: GeneratorStatus = GeneratorStatus.STOPPED
        self._started_at: Optional[float] = None
        self._completed_runtime_s: float = 0.0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def status(self) -> GeneratorStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is GeneratorStatus.RUNNING

    @property
    def started_at(self) -> Optional[float]:
        """Epoch seconds the current run began, ``None`` while stopped."""
        return self._started_at

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Bring the generator online.

        Raises
        ------
        FuelTooLowError
            If the tank is below ``min_start_fuel_pct``.
        """
        if self.is_running:
            return

        fuel = self._fuel_gauge()
        if fuel < self.min_start_fuel_pct:
            logger.warning(
                "Start refused: fuel %.1f%% < %.1f%%", fuel, self.min_start_fuel_pct
            )
            raise FuelTooLowError(fuel, self.min_start_fuel_pct)

        now = self._clock()
        self._started_at = now
        self._status = GeneratorStatus.RUNNING
        logger.info("Generator started (fuel %.1f%%)", fuel)
        self._emit(
            Notification(
                Severity.INFO,
                "started",
                "Generator started; stabilising output.",
                now,
            )
        )

    def stop(self, cause: StopCause = StopCause.OPERATOR, reason: Optional[str] = None) -> None:
        """Take the generator offline.

        Stopping an already stopped generator does nothing.  A safety stop
        is reported as critical with ``reason`` so it reads differently
        from an operator stop.
        """
        if not self.is_running:
            return

        now = self._clock()
        run_seconds = self.runtime_seconds(now)
        self._completed_runtime_s += max(0.0, now - (self._started_at or now))
        self._status = GeneratorStatus.STOPPED
        self._started_at = None

        if cause is StopCause.SAFETY:
            detail = reason or "protective interlock tripped"
            logger.error("Generator shut down by safety interlock: %s", detail)
            notification = Notification(
                Severity.CRITICAL,
                "stopped_safety",
                f"Generator stopped itself: {detail}.",
                now,
            )
        else:
            logger.info("Generator stopped by operator after %ds", run_seconds)
            notification = Notification(
                Severity.INFO,
                "stopped_operator",
                f"Generator stopped by operator after {run_seconds}s; cooling down.",
                now,
            )
        self._emit(notification)

    # ------------------------------------------------------------------
    # Runtime accounting
    # ------------------------------------------------------------------

    def runtime_seconds(self, now: Optional[float] = None) -> int:
        """Whole seconds since the current run started; 0 while stopped."""
        if not self.is_running or self._started_at is None:
            return 0
        now = self._clock() if now is None else now
        return max(0, int(now - self._started_at))

    def total_runtime_seconds(self, now: Optional[float] = None) -> float:
        """Runtime accumulated over all runs, including the current one."""
        total = self._completed_runtime_s
        if self.is_running and self._started_at is not None:
            now = self._clock() if now is None else now
            total += max(0.0, now - self._started_at)
        return total

    def _emit(self, notification: Notification) -> None:
        if self._notify is not None:
            self._notify(notification)
