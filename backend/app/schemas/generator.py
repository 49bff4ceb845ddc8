from datetime import date

from pydantic import BaseModel, Field


class TelemetryResponse(BaseModel):
    status: str
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
    timestamp: float
    total_runtime_seconds: float = 0.0
    health: dict[str, str] = Field(
        default_factory=dict, description="Per-gauge display level (ok, low, high, ...)"
    )

    model_config = {"from_attributes": True}


class GridStatusResponse(BaseModel):
    available: bool
    voltage_v: float
    frequency_hz: float

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    severity: str
    code: str
    message: str
    timestamp: float

    model_config = {"from_attributes": True}
