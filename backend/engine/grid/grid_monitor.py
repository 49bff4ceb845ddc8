"""Utility-grid availability feed.

Simulates the mains supply seen at the site: each poll the grid is lost
with a small probability, otherwise voltage and frequency sit slightly
above nominal.  The feed is informational; it never starts or stops the
generator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

NOMINAL_VOLTAGE_V = 230.0
NOMINAL_FREQUENCY_HZ = 50.0
VOLTAGE_JITTER_V = 5.0
FREQUENCY_JITTER_HZ = 0.2


@dataclass(frozen=True)
class GridStatus:
    """Mains supply reading; voltage and frequency are zero during an outage."""

    available: bool
    voltage_v: float
    frequency_hz: float


class GridMonitor:
    """Randomised grid-availability poller.

    Parameters
    ----------
    outage_probability : float
        Chance in [0, 1] that any single poll reports an outage.
    rng : numpy.random.Generator, optional
        Random source.  Pass a seeded generator for reproducible feeds.
    """

    def __init__(
        self,
        outage_probability: float = 0.05,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if not 0.0 <= outage_probability <= 1.0:
            raise ValueError(
                f"outage_probability must be in [0, 1], got {outage_probability}"
            )
        self.outage_probability = outage_probability
        self._rng = rng if rng is not None else np.random.default_rng()
        self._status = GridStatus(
            available=True,
            voltage_v=NOMINAL_VOLTAGE_V,
            frequency_hz=NOMINAL_FREQUENCY_HZ,
        )

    @property
    def status(self) -> GridStatus:
        """Result of the most recent :meth:`poll`."""
        return self._status

    def poll(self) -> GridStatus:
        """Sample the grid once and remember the result."""
        available = bool(self._rng.random() > self.outage_probability)
        if available:
            self._status = GridStatus(
                available=True,
                voltage_v=NOMINAL_VOLTAGE_V + float(self._rng.uniform(0.0, VOLTAGE_JITTER_V)),
                frequency_hz=NOMINAL_FREQUENCY_HZ
                + float(self._rng.uniform(0.0, FREQUENCY_JITTER_HZ)),
            )
        else:
            self._status = GridStatus(available=False, voltage_v=0.0, frequency_hz=0.0)
        return self._status
