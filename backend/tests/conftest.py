"""Shared test fixtures for the generator engine and API tests."""

from __future__ import annotations

import numpy as np
import pytest

from engine.generator import FuelAccountant, GeneratorStateMachine, Notification
from engine.grid import GridMonitor
from engine.monitoring import GeneratorMonitor

# Fixed epoch so every test replays identically.
T0 = 1_760_000_000.0


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = T0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


# ======================================================================
# Clock and component fixtures
# ======================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifications() -> list[Notification]:
    """Sink list for notifications emitted by a state machine."""
    return []


@pytest.fixture
def fuel(clock: FakeClock) -> FuelAccountant:
    """Tank at the 85 % power-on default, referenced to the fake clock."""
    return FuelAccountant(initial_level_pct=85.0, started_at=clock())


@pytest.fixture
def machine(fuel: FuelAccountant, clock: FakeClock, notifications) -> GeneratorStateMachine:
    return GeneratorStateMachine(
        fuel_gauge=lambda: fuel.level_pct,
        clock=clock,
        notify=notifications.append,
    )


@pytest.fixture
def steady_grid() -> GridMonitor:
    """Grid feed that never drops out."""
    return GridMonitor(outage_probability=0.0, rng=np.random.default_rng(42))


def make_monitor(
    clock: FakeClock,
    fuel_pct: float = 85.0,
    grid: GridMonitor | None = None,
) -> GeneratorMonitor:
    return GeneratorMonitor(
        fuel=FuelAccountant(initial_level_pct=fuel_pct, started_at=clock()),
        grid=grid or GridMonitor(outage_probability=0.0, rng=np.random.default_rng(42)),
        clock=clock,
    )


@pytest.fixture
def monitor_factory(clock: FakeClock):
    """Build monitors on the shared fake clock with a chosen tank level."""

    def _factory(fuel_pct: float = 85.0, grid: GridMonitor | None = None) -> GeneratorMonitor:
        return make_monitor(clock, fuel_pct, grid)

    return _factory


@pytest.fixture
def monitor(clock: FakeClock) -> GeneratorMonitor:
    return make_monitor(clock)
