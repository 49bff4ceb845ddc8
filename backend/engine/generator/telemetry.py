"""Synthetic sensor readings for the backup generator.

:func:`simulate` is a pure function of the generator's operating state and
wall-clock time.  Running signals are slow sinusoids around their nominal
values so consecutive snapshots move smoothly; stopped signals settle to
fixed idle values.  The only stochastic term (thermal jitter) is drawn from
a generator seeded by ``now`` so a given input tuple always replays to the
same snapshot.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import numpy as np

from .fuel import SECONDS_PER_HOUR


class GeneratorStatus(str, enum.Enum):
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    # Reserved: no transition currently produces these.
    MAINTENANCE = "MAINTENANCE"
    STANDBY = "STANDBY"


@dataclass(frozen=True)
class MaintenanceSchedule:
    """Static service dates shown alongside live readings."""

    last_service: date = date(2025, 10, 15)
    next_service: date = date(2026, 1, 15)


# ======================================================================
# Signal constants
# ======================================================================

BASE_POWER_KW = 12.0
POWER_SWING_KW = 0.8

AMBIENT_TEMP_C = 25.0
WARM_TEMP_C = 70.0
MAX_RUNNING_TEMP_C = 85.0
# One degree per two minutes of runtime above WARM_TEMP_C.
TEMP_RISE_SECONDS_PER_C = 120.0
WARMUP_TAU_S = 60.0
TEMP_JITTER_C = 1.0

NOMINAL_VOLTAGE_V = 230.0
VOLTAGE_SWING_V = 3.0
NOMINAL_FREQUENCY_HZ = 50.0
FREQUENCY_SWING_HZ = 0.15

RUNNING_OIL_PRESSURE_PSI = 51.0
OIL_PRESSURE_SWING_PSI = 1.0
IDLE_OIL_PRESSURE_PSI = 45.0

BASE_LOAD_PCT = 65.0
LOAD_SWING_PCT = 10.0

RUNNING_COOLANT_C = 75.0
COOLANT_SWING_C = 5.0
IDLE_COOLANT_C = 30.0

BATTERY_REST_V = 12.6
BATTERY_SWING_V = 0.3

BASE_FUEL_FLOW_LPH = 2.8
FUEL_FLOW_SWING_LPH = 0.2

CO2_BASELINE_KG = 45.8
CO2_KG_PER_RUN_HOUR = 15.0


@dataclass(frozen=True)
class GeneratorTelemetry:
    """One point-in-time snapshot of generator sensor readings."""

    status: GeneratorStatus
    power_kw: float
    fuel_level_pct: float
    runtime_seconds: int
    temperature_c: float
    coolant_temp_c: float
    oil_pressure_psi: float
    voltage_v: float
    frequency_hz: float
    load_pct: float
    battery_voltage_v: float
    fuel_consumption_lph: float
    co2_kg_equivalent: float
    last_maintenance_date: date
    next_maintenance_date: date
    timestamp: float = field(default=0.0, compare=False)

    @property
    def is_running(self) -> bool:
        return self.status is GeneratorStatus.RUNNING


def _wave(now: float, period_s: float, amplitude: float) -> float:
    """Smooth periodic deviation, ``amplitude * sin(now / period_s)``."""
    return amplitude * math.sin(now / period_s)


def _jitter(now: float, amplitude: float) -> float:
    """Uniform noise in [-amplitude, amplitude) seeded by ``now`` (ms)."""
    seed = int(round(now * 1000.0)) & 0xFFFFFFFFFFFFFFFF
    rng = np.random.default_rng(seed)
    return float(rng.uniform(-amplitude, amplitude))


def engine_temperature(is_running: bool, runtime_seconds: int, now: float) -> float:
    """Block temperature in degrees C.

    While running the engine warms from ambient toward a plateau that
    creeps from ``WARM_TEMP_C`` up to ``MAX_RUNNING_TEMP_C`` with runtime.
    Jitter never lifts the reading above the plateau.
    """
    noise = _jitter(now, TEMP_JITTER_C)
    if not is_running:
        return AMBIENT_TEMP_C + noise

    target = min(
        WARM_TEMP_C + runtime_seconds / TEMP_RISE_SECONDS_PER_C,
        MAX_RUNNING_TEMP_C,
    )
    warm_fraction = 1.0 - math.exp(-runtime_seconds / WARMUP_TAU_S)
    temp = AMBIENT_TEMP_C + (target - AMBIENT_TEMP_C) * warm_fraction
    return min(temp + noise, target)


def simulate(
    is_running: bool,
    runtime_seconds: int,
    fuel_level_pct: float,
    now: float,
    *,
    maintenance: Optional[MaintenanceSchedule] = None,
) -> GeneratorTelemetry:
    """Synthesize a telemetry snapshot.

    Parameters
    ----------
    is_running : bool
        Whether the generator is online.
    runtime_seconds : int
        Seconds since the current run started (0 when stopped).
    fuel_level_pct : float
        Tank level as reported by the fuel accountant.  Passed through,
        clamped to [0, 100].
    now : float
        Epoch seconds; drives every periodic signal and seeds the jitter.
    maintenance : MaintenanceSchedule, optional
        Service dates to stamp on the snapshot.

    Returns
    -------
    GeneratorTelemetry
    """
    schedule = maintenance or MaintenanceSchedule()
    runtime_seconds = max(0, int(runtime_seconds)) if is_running else 0
    fuel = min(100.0, max(0.0, fuel_level_pct))

    if is_running:
        power = max(0.0, BASE_POWER_KW + _wave(now, 5.0, POWER_SWING_KW))
        voltage = NOMINAL_VOLTAGE_V + _wave(now, 3.0, VOLTAGE_SWING_V)
        frequency = NOMINAL_FREQUENCY_HZ + _wave(now, 4.0, FREQUENCY_SWING_HZ)
        oil = RUNNING_OIL_PRESSURE_PSI + _wave(now, 6.0, OIL_PRESSURE_SWING_PSI)
        load = BASE_LOAD_PCT + _wave(now, 6.0, LOAD_SWING_PCT)
        coolant = RUNNING_COOLANT_C + _wave(now, 5.0, COOLANT_SWING_C)
        battery = BATTERY_REST_V + _wave(now, 8.0, BATTERY_SWING_V)
        fuel_flow = BASE_FUEL_FLOW_LPH + _wave(now, 7.0, FUEL_FLOW_SWING_LPH)
        status = GeneratorStatus.RUNNING
    else:
        power = voltage = frequency = load = fuel_flow = 0.0
        oil = IDLE_OIL_PRESSURE_PSI
        coolant = IDLE_COOLANT_C
        battery = BATTERY_REST_V
        status = GeneratorStatus.STOPPED

    co2 = CO2_BASELINE_KG + (runtime_seconds / SECONDS_PER_HOUR) * CO2_KG_PER_RUN_HOUR

    return GeneratorTelemetry(
        status=status,
        power_kw=power,
        fuel_level_pct=fuel,
        runtime_seconds=runtime_seconds,
        temperature_c=engine_temperature(is_running, runtime_seconds, now),
        coolant_temp_c=coolant,
        oil_pressure_psi=oil,
        voltage_v=voltage,
        frequency_hz=frequency,
        load_pct=load,
        battery_voltage_v=battery,
        fuel_consumption_lph=fuel_flow,
        co2_kg_equivalent=co2,
        last_maintenance_date=schedule.last_service,
        next_maintenance_date=schedule.next_service,
        timestamp=now,
    )
