"""Per-gauge health classification used to colour dashboard readings."""

from __future__ import annotations

from .state_machine import MIN_START_FUEL_PCT
from .telemetry import NOMINAL_FREQUENCY_HZ, NOMINAL_VOLTAGE_V, GeneratorTelemetry

FUEL_RESERVE_WARNING_PCT = 25.0


def _fuel_grade(pct: float) -> str:
    if pct > 50:
        return "good"
    if pct > 30:
        return "fair"
    return "low"


def _fuel_reserve(pct: float) -> str:
    if pct < MIN_START_FUEL_PCT:
        return "critical"
    if pct < FUEL_RESERVE_WARNING_PCT:
        return "warning"
    return "ok"


def assess(telemetry: GeneratorTelemetry) -> dict[str, str]:
    """Map each gauge of a snapshot to a display level.

    Voltage and frequency only make sense with the alternator turning, so
    they read ``"offline"`` while the generator is stopped.
    """
    running = telemetry.is_running

    if running:
        voltage = "ok" if abs(telemetry.voltage_v - NOMINAL_VOLTAGE_V) < 10 else "out_of_range"
        frequency = (
            "ok" if abs(telemetry.frequency_hz - NOMINAL_FREQUENCY_HZ) < 1 else "out_of_range"
        )
    else:
        voltage = frequency = "offline"

    return {
        "fuel": _fuel_grade(telemetry.fuel_level_pct),
        "fuel_reserve": _fuel_reserve(telemetry.fuel_level_pct),
        "temperature": "normal" if telemetry.temperature_c < 80 else "high",
        "oil_pressure": "ok" if telemetry.oil_pressure_psi > 40 else "low",
        "voltage": voltage,
        "frequency": frequency,
        "load": "ok" if telemetry.load_pct < 80 else "high",
        "battery": "ok" if telemetry.battery_voltage_v > 12 else "low",
        "coolant": "ok" if telemetry.coolant_temp_c < 85 else "high",
    }
