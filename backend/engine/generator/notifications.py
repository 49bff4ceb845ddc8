"""Alert and notification records shared by the generator engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Severity(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Notification:
    """A single alert emitted by the state machine, supervisor or monitor.

    Parameters
    ----------
    severity : Severity
        Display grade of the alert.
    code : str
        Stable identifier for the condition (e.g. ``"fuel_critical"``).
        Alerting UIs key de-duplication and icons on this.
    message : str
        Human-readable text.
    timestamp : float
        Epoch seconds at which the alert was raised.
    """

    severity: Severity
    code: str
    message: str
    timestamp: float = 0.0
