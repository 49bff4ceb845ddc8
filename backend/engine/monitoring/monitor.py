"""Tick orchestration for the backup generator and the grid feed.

:class:`GeneratorMonitor` wires the fuel accountant, state machine,
telemetry simulator and safety supervisor together and owns the two
tickers that drive them.  Every mutation of fuel or generator state goes
through one re-entrant lock, so operator commands and ticks are strictly
serialized.  Events are published while the lock is held, so subscribers
see snapshots in the order they were taken.

Per generator tick the order is fixed::

    fuel.tick -> simulate -> supervisor.enforce -> publish
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Any, Callable, Optional

from engine.generator.fuel import FuelAccountant
from engine.generator.notifications import Notification, Severity
from engine.generator.safety import SafetySupervisor, SafetyVerdict
from engine.generator.state_machine import (
    FuelTooLowError,
    GeneratorStateMachine,
    StopCause,
)
from engine.generator.telemetry import (
    GeneratorStatus,
    GeneratorTelemetry,
    MaintenanceSchedule,
    simulate,
)
from engine.grid.grid_monitor import GridMonitor, GridStatus

from .events import GRID, NOTIFICATION, TELEMETRY, EventBus
from .ticker import Ticker

logger = logging.getLogger(__name__)


class GeneratorMonitor:
    """Single-generator monitoring and control engine.

    Parameters
    ----------
    fuel : FuelAccountant
        Tank bookkeeping.  Its reference timestamp should match ``clock``.
    grid : GridMonitor
        Mains availability feed.
    supervisor : SafetySupervisor, optional
        Interlock rules.  Defaults to the standard thresholds.
    clock : Callable[[], float]
        Epoch-seconds time source.  Injected in tests.
    maintenance : MaintenanceSchedule, optional
        Service dates stamped on every snapshot.
    generator_tick_s, grid_poll_s : float
        Ticker intervals.
    history_size : int
        Number of notifications kept for :meth:`recent_notifications`.
    """

    def __init__(
        self,
        fuel: FuelAccountant,
        grid: GridMonitor,
        supervisor: Optional[SafetySupervisor] = None,
        clock: Callable[[], float] = time.time,
        maintenance: Optional[MaintenanceSchedule] = None,
        generator_tick_s: float = 2.0,
        grid_poll_s: float = 5.0,
        history_size: int = 100,
    ) -> None:
        self._lock = threading.RLock()
        self._clock = clock
        self._fuel = fuel
        self._grid = grid
        self._supervisor = supervisor or SafetySupervisor()
        self._maintenance = maintenance or MaintenanceSchedule()
        self.events = EventBus()
        self._history: deque[Notification] = deque(maxlen=history_size)

        self._machine = GeneratorStateMachine(
            fuel_gauge=lambda: self._fuel.level_pct,
            clock=clock,
            notify=self._publish_notification,
        )

        self._tickers = [
            Ticker("generator", generator_tick_s, self.tick),
            Ticker("grid", grid_poll_s, self.poll_grid),
        ]

        self._telemetry = self._snapshot(clock())

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def status(self) -> GeneratorStatus:
        return self._machine.status

    def current_telemetry(self) -> GeneratorTelemetry:
        """Most recent snapshot; cheap and safe to poll at any rate."""
        return self._telemetry

    def current_grid_status(self) -> GridStatus:
        return self._grid.status

    def recent_notifications(self, limit: Optional[int] = None) -> list[Notification]:
        """Newest-first notification history."""
        with self._lock:
            items = list(reversed(self._history))
        return items if limit is None else items[:limit]

    def total_runtime_seconds(self) -> float:
        with self._lock:
            return self._machine.total_runtime_seconds(self._clock())

    def subscribe(self, topic: str, listener: Callable[[Any], None]) -> Callable[[], None]:
        return self.events.subscribe(topic, listener)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> GeneratorTelemetry:
        """Start the generator.

        Raises
        ------
        FuelTooLowError
            Tank below the start minimum.  A warning notification is
            published before the error propagates.
        """
        with self._lock:
            now = self._clock()
            self._fuel.tick(self._machine.is_running, now)
            try:
                self._machine.start()
            except FuelTooLowError as exc:
                self._publish_notification(
                    Notification(Severity.WARNING, "start_rejected", str(exc), now)
                )
                raise
            self._telemetry = self._snapshot(now)
            telemetry = self._telemetry
            self.events.publish(TELEMETRY, telemetry)
        return telemetry

    def stop(self, cause: StopCause = StopCause.OPERATOR) -> GeneratorTelemetry:
        """Stop the generator on behalf of ``cause``."""
        with self._lock:
            now = self._clock()
            # Bill fuel up to the stop instant before leaving RUNNING.
            self._fuel.tick(self._machine.is_running, now)
            self._machine.stop(cause)
            self._telemetry = self._snapshot(now)
            telemetry = self._telemetry
            self.events.publish(TELEMETRY, telemetry)
        return telemetry

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def tick(self) -> SafetyVerdict:
        """Run one generator evaluation cycle."""
        with self._lock:
            now = self._clock()
            self._fuel.tick(self._machine.is_running, now)
            telemetry = self._snapshot(now)
            verdict = self._supervisor.enforce(
                telemetry, self._machine, notify=self._publish_notification
            )
            if verdict.shutdown:
                telemetry = self._snapshot(now)
            self._telemetry = telemetry
            self.events.publish(TELEMETRY, telemetry)
        return verdict

    def poll_grid(self) -> GridStatus:
        """Refresh the grid feed and announce availability changes."""
        with self._lock:
            was_available = self._grid.status.available
            status = self._grid.poll()
            now = self._clock()
            if was_available and not status.available:
                if self._machine.is_running:
                    text = "Grid outage: mains unavailable. Generator is supplying backup power."
                else:
                    text = "Grid outage: mains unavailable. Start the generator to keep power."
                logger.warning(text)
                self._publish_notification(
                    Notification(Severity.WARNING, "grid_outage", text, now)
                )
            elif not was_available and status.available:
                logger.info("Grid restored")
                self._publish_notification(
                    Notification(Severity.INFO, "grid_restored", "Grid power restored.", now)
                )
            self.events.publish(GRID, status)
        return status

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_timers(self) -> None:
        """Begin periodic ticking on the running event loop."""
        for ticker in self._tickers:
            ticker.start()
        logger.info(
            "Monitor timers started (generator %.1fs, grid %.1fs)",
            self._tickers[0].interval_s,
            self._tickers[1].interval_s,
        )

    async def aclose(self) -> None:
        """Cancel both tickers; no tick fires after this returns."""
        for ticker in self._tickers:
            await ticker.cancel()
        logger.info("Monitor timers stopped")

    async def __aenter__(self) -> "GeneratorMonitor":
        self.start_timers()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _snapshot(self, now: float) -> GeneratorTelemetry:
        return simulate(
            self._machine.is_running,
            self._machine.runtime_seconds(now),
            self._fuel.level_pct,
            now,
            maintenance=self._maintenance,
        )

    def _publish_notification(self, notification: Notification) -> None:
        self._history.append(notification)
        self.events.publish(NOTIFICATION, notification)
