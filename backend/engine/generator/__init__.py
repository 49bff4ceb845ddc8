"""Backup generator engine module."""

from .fuel import FuelAccountant
from .notifications import Notification, Severity
from .safety import SafetySupervisor, SafetyThresholds, SafetyVerdict
from .state_machine import (
    EngineError,
    FuelTooLowError,
    GeneratorStateMachine,
    StopCause,
)
from .telemetry import (
    GeneratorStatus,
    GeneratorTelemetry,
    MaintenanceSchedule,
    simulate,
)

__all__ = [
    "FuelAccountant",
    "Notification",
    "Severity",
    "SafetySupervisor",
    "SafetyThresholds",
    "SafetyVerdict",
    "EngineError",
    "FuelTooLowError",
    "GeneratorStateMachine",
    "StopCause",
    "GeneratorStatus",
    "GeneratorTelemetry",
    "MaintenanceSchedule",
    "simulate",
]
