"""Protective interlocks evaluated against every telemetry snapshot.

Rules, in priority order:

============================  ========  =================================
Condition                     Severity  Action
============================  ========  =================================
fuel < fuel_critical          critical  force stop ("fuel critical")
temperature > temp_critical   critical  force stop ("overheat")
fuel < fuel_warning           warning   "low fuel"
temperature > temp_warning    warning   "high temperature"
runtime > extended_runtime    info      "schedule maintenance"
============================  ========  =================================

Only the first matching shutdown rule fires.  Warnings and info alerts are
independent and may accompany a shutdown.  Nothing is evaluated while the
generator is not running.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .notifications import Notification, Severity
from .state_machine import GeneratorStateMachine, StopCause
from .telemetry import GeneratorTelemetry


@dataclass(frozen=True)
class SafetyThresholds:
    """Trip and warning limits for the supervisor.

    Parameters
    ----------
    fuel_critical_pct : float
        Fuel below this forces a shutdown.
    fuel_warning_pct : float
        Fuel below this (and at or above ``fuel_critical_pct``) warns.
    temp_critical_c : float
        Temperature above this forces a shutdown.
    temp_warning_c : float
        Temperature above this (and at or below ``temp_critical_c``) warns.
    extended_runtime_s : float
        Continuous runtime above this raises a maintenance reminder.
    """

    fuel_critical_pct: float = 10.0
    fuel_warning_pct: float = 20.0
    temp_critical_c: float = 92.0
    temp_warning_c: float = 85.0
    extended_runtime_s: float = 6 * 3600.0

    def __post_init__(self) -> None:
        if self.fuel_critical_pct > self.fuel_warning_pct:
            raise ValueError(
                f"fuel_critical_pct ({self.fuel_critical_pct}) must be <= "
                f"fuel_warning_pct ({self.fuel_warning_pct})"
            )
        if self.temp_warning_c > self.temp_critical_c:
            raise ValueError(
                f"temp_warning_c ({self.temp_warning_c}) must be <= "
                f"temp_critical_c ({self.temp_critical_c})"
            )


@dataclass
class SafetyVerdict:
    """Outcome of one supervisor evaluation."""

    alerts: List[Notification] = field(default_factory=list)
    shutdown_reason: Optional[str] = None

    @property
    def shutdown(self) -> bool:
        return self.shutdown_reason is not None


class SafetySupervisor:
    """Stateless threshold evaluator with the authority to force a stop."""

    def __init__(self, thresholds: Optional[SafetyThresholds] = None) -> None:
        self.thresholds = thresholds or SafetyThresholds()

    def evaluate(self, telemetry: GeneratorTelemetry, is_running: bool) -> SafetyVerdict:
        """Apply the rule table to a snapshot without side effects."""
        verdict = SafetyVerdict()
        if not is_running:
            return verdict

        t = self.thresholds
        fuel = telemetry.fuel_level_pct
        temp = telemetry.temperature_c
        ts = telemetry.timestamp

        # --- Shutdown rules (first match wins) ---
        if fuel < t.fuel_critical_pct:
            verdict.shutdown_reason = f"fuel critical at {fuel:.0f}%"
            verdict.alerts.append(
                Notification(
                    Severity.CRITICAL,
                    "fuel_critical",
                    f"Emergency shutdown: fuel critical ({fuel:.0f}%). "
                    "Stopped to protect the engine.",
                    ts,
                )
            )
        elif temp > t.temp_critical_c:
            verdict.shutdown_reason = f"overheat at {temp:.0f}°C"
            verdict.alerts.append(
                Notification(
                    Severity.CRITICAL,
                    "overheat",
                    f"Emergency shutdown: overheat ({temp:.0f}°C). "
                    "Risk of engine damage.",
                    ts,
                )
            )

        # --- Independent warnings ---
        if t.fuel_critical_pct <= fuel < t.fuel_warning_pct:
            verdict.alerts.append(
                Notification(
                    Severity.WARNING,
                    "low_fuel",
                    f"Low fuel: {fuel:.0f}% remaining. Prepare to refuel.",
                    ts,
                )
            )
        if t.temp_warning_c < temp <= t.temp_critical_c:
            verdict.alerts.append(
                Notification(
                    Severity.WARNING,
                    "high_temperature",
                    f"High temperature: {temp:.0f}°C. Monitor closely.",
                    ts,
                )
            )
        if telemetry.runtime_seconds > t.extended_runtime_s:
            hours = telemetry.runtime_seconds // 3600
            verdict.alerts.append(
                Notification(
                    Severity.INFO,
                    "extended_runtime",
                    f"Extended runtime: {hours}h continuous. Schedule maintenance.",
                    ts,
                )
            )

        return verdict

    def enforce(
        self,
        telemetry: GeneratorTelemetry,
        machine: GeneratorStateMachine,
        notify: Optional[Callable[[Notification], None]] = None,
    ) -> SafetyVerdict:
        """Evaluate ``telemetry`` and trip ``machine`` if a shutdown rule fired.

        Alerts go to ``notify`` before the machine is stopped, so the
        emergency alert precedes the machine's own "stopped" notice.
        """
        verdict = self.evaluate(telemetry, machine.is_running)
        if notify is not None:
            for alert in verdict.alerts:
                notify(alert)
        if verdict.shutdown:
            machine.stop(StopCause.SAFETY, verdict.shutdown_reason)
        return verdict
