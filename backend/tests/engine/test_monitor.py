"""Tests for engine.monitoring — tick orchestration, events and timers."""

from __future__ import annotations

import asyncio
import threading

import numpy as np
import pytest

from engine.generator import FuelTooLowError, GeneratorStatus, Severity, StopCause
from engine.grid import GridMonitor
from engine.monitoring import GRID, NOTIFICATION, TELEMETRY, EventBus, Ticker

GENERATOR_TICK_S = 2.0


def _run_for(monitor, clock, seconds: float, step: float = GENERATOR_TICK_S) -> None:
    for _ in range(int(seconds / step)):
        clock.advance(step)
        monitor.tick()


# ======================================================================
# Scenarios
# ======================================================================


class TestScenarios:
    def test_one_hour_run_burns_three_percent_without_alerts(self, monitor, clock):
        monitor.start()
        _run_for(monitor, clock, 3600.0)

        telemetry = monitor.current_telemetry()
        assert telemetry.status is GeneratorStatus.RUNNING
        assert telemetry.fuel_level_pct == pytest.approx(82.0, abs=1e-6)
        assert telemetry.runtime_seconds == 3600
        alerts = [n for n in monitor.recent_notifications() if n.severity is not Severity.INFO]
        assert alerts == []

    def test_start_rejected_at_twelve_percent(self, monitor_factory):
        monitor = monitor_factory(fuel_pct=12.0)
        with pytest.raises(FuelTooLowError):
            monitor.start()
        assert monitor.status is GeneratorStatus.STOPPED
        latest = monitor.recent_notifications(1)[0]
        assert latest.code == "start_rejected"
        assert latest.severity is Severity.WARNING

    def test_running_until_fuel_critical_triggers_shutdown(self, monitor_factory, clock):
        monitor = monitor_factory(fuel_pct=15.0)
        monitor.start()
        # 5 % at 3 %/h is 6000 s; run a little past it.
        _run_for(monitor, clock, 6010.0)

        assert monitor.status is GeneratorStatus.STOPPED
        codes = [n.code for n in monitor.recent_notifications()]
        assert "fuel_critical" in codes
        assert "stopped_safety" in codes
        assert "low_fuel" in codes
        assert monitor.current_telemetry().status is GeneratorStatus.STOPPED

        level = monitor.current_telemetry().fuel_level_pct
        assert level < 10.0
        _run_for(monitor, clock, 600.0)
        assert monitor.current_telemetry().fuel_level_pct == level


# ======================================================================
# Commands
# ======================================================================


class TestCommands:
    def test_stopped_time_is_not_billed(self, monitor, clock):
        _run_for(monitor, clock, 1800.0)
        assert monitor.current_telemetry().fuel_level_pct == 85.0

        monitor.start()
        clock.advance(100.0)
        monitor.tick()
        expected = 85.0 - 100.0 * 3.0 / 3600.0
        assert monitor.current_telemetry().fuel_level_pct == pytest.approx(expected)

    def test_stop_bills_fuel_up_to_stop_instant(self, monitor, clock):
        monitor.start()
        clock.advance(360.0)
        telemetry = monitor.stop()
        assert telemetry.status is GeneratorStatus.STOPPED
        assert telemetry.fuel_level_pct == pytest.approx(85.0 - 0.3)

    def test_restart_resets_runtime(self, monitor, clock):
        monitor.start()
        _run_for(monitor, clock, 120.0)
        monitor.stop()
        clock.advance(30.0)
        telemetry = monitor.start()
        assert telemetry.runtime_seconds == 0
        assert monitor.total_runtime_seconds() == pytest.approx(120.0)

    def test_operator_and_safety_stops_are_distinguishable(self, monitor):
        monitor.start()
        monitor.stop(StopCause.OPERATOR)
        assert monitor.recent_notifications(1)[0].code == "stopped_operator"


# ======================================================================
# Events
# ======================================================================


class TestEvents:
    def test_tick_publishes_telemetry(self, monitor, clock):
        seen = []
        monitor.subscribe(TELEMETRY, seen.append)
        clock.advance(2.0)
        monitor.tick()
        assert seen == [monitor.current_telemetry()]

    def test_notifications_streamed(self, monitor):
        seen = []
        monitor.subscribe(NOTIFICATION, seen.append)
        monitor.start()
        assert [n.code for n in seen] == ["started"]

    def test_unsubscribe(self, monitor, clock):
        seen = []
        unsubscribe = monitor.subscribe(TELEMETRY, seen.append)
        unsubscribe()
        unsubscribe()
        monitor.tick()
        assert seen == []

    def test_failing_listener_does_not_break_tick(self, monitor, clock):
        def boom(_):
            raise RuntimeError("listener failure")

        seen = []
        monitor.subscribe(TELEMETRY, boom)
        monitor.subscribe(TELEMETRY, seen.append)
        monitor.tick()
        assert len(seen) == 1

    def test_trip_streams_alert_before_stop_notice(self, monitor_factory, clock):
        monitor = monitor_factory(fuel_pct=15.0)
        monitor.start()
        seen = []
        monitor.subscribe(NOTIFICATION, seen.append)
        # 6100 s at 3 %/h leaves ~9.9 %, past the trip in a single tick.
        clock.advance(6100.0)
        monitor.tick()
        assert [n.code for n in seen] == ["fuel_critical", "stopped_safety"]

    def test_concurrent_stop_published_after_tick_snapshot(self, monitor, clock):
        """A stop from another thread waits until the tick has published."""
        monitor.start()
        seen = []
        blocked = []

        def on_telemetry(telemetry):
            seen.append(telemetry.status)
            if telemetry.status is GeneratorStatus.RUNNING and not blocked:
                stopper = threading.Thread(target=monitor.stop)
                stopper.start()
                stopper.join(timeout=0.1)
                blocked.append(stopper)

        monitor.subscribe(TELEMETRY, on_telemetry)
        clock.advance(2.0)
        monitor.tick()
        stopper = blocked[0]
        stopper.join(timeout=5.0)

        assert not stopper.is_alive()
        assert seen == [GeneratorStatus.RUNNING, GeneratorStatus.STOPPED]
        assert monitor.current_telemetry().status is GeneratorStatus.STOPPED

    def test_unknown_topic_rejected(self):
        with pytest.raises(ValueError, match="Unknown topic"):
            EventBus().subscribe("weather", print)

    def test_history_is_bounded_and_newest_first(self, monitor, clock):
        for _ in range(150):
            monitor.start()
            clock.advance(1.0)
            monitor.stop()
        history = monitor.recent_notifications()
        assert len(history) == 100
        assert history[0].code == "stopped_operator"
        assert monitor.recent_notifications(5) == history[:5]


# ======================================================================
# Grid feed
# ======================================================================


class TestGridPolling:
    def test_outage_and_restore_notifications(self, monitor_factory):
        grid = GridMonitor(outage_probability=1.0, rng=np.random.default_rng(3))
        monitor = monitor_factory(grid=grid)
        grid_events = []
        monitor.subscribe(GRID, grid_events.append)

        monitor.poll_grid()
        monitor.poll_grid()
        grid.outage_probability = 0.0
        monitor.poll_grid()

        codes = [n.code for n in reversed(monitor.recent_notifications())]
        assert codes == ["grid_outage", "grid_restored"]
        assert [e.available for e in grid_events] == [False, False, True]

    def test_outage_does_not_start_generator(self, monitor_factory):
        grid = GridMonitor(outage_probability=1.0, rng=np.random.default_rng(3))
        monitor = monitor_factory(grid=grid)
        monitor.poll_grid()
        assert not monitor.current_grid_status().available
        assert monitor.status is GeneratorStatus.STOPPED
        assert "Start the generator" in monitor.recent_notifications(1)[0].message

    def test_outage_message_when_running(self, monitor_factory):
        grid = GridMonitor(outage_probability=1.0, rng=np.random.default_rng(3))
        monitor = monitor_factory(grid=grid)
        monitor.start()
        monitor.poll_grid()
        assert "supplying backup power" in monitor.recent_notifications(1)[0].message


# ======================================================================
# Timers
# ======================================================================


class TestTimers:
    @pytest.mark.asyncio
    async def test_ticker_fires_and_stops_on_cancel(self):
        calls = []
        ticker = Ticker("test", 0.01, lambda: calls.append(1))
        ticker.start()
        await asyncio.sleep(0.1)
        await ticker.cancel()
        fired = len(calls)
        assert fired > 0
        assert not ticker.running
        await asyncio.sleep(0.05)
        assert len(calls) == fired

    @pytest.mark.asyncio
    async def test_monitor_context_manager_drives_ticks(self, monitor):
        seen = []
        monitor.subscribe(TELEMETRY, seen.append)
        monitor._tickers[0].interval_s = 0.01
        async with monitor:
            await asyncio.sleep(0.1)
        count = len(seen)
        assert count > 0
        await asyncio.sleep(0.05)
        assert len(seen) == count

    def test_ticker_rejects_non_positive_interval(self):
        with pytest.raises(ValueError, match="interval_s"):
            Ticker("bad", 0.0, lambda: None)
