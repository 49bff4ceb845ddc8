"""Fuel-level bookkeeping for the backup generator.

The accountant integrates fuel burn over wall-clock time.  It is the only
owner of the tank level: the telemetry simulator reads it, nothing else
writes it.
"""

from __future__ import annotations

SECONDS_PER_HOUR = 3600.0

# ~3 % of the tank per running hour.
DEFAULT_CONSUMPTION_PCT_PER_HOUR = 3.0


class FuelAccountant:
    """Time-integrating fuel gauge.

    Parameters
    ----------
    initial_level_pct : float
        Starting tank level in percent, within [0, 100].
    started_at : float
        Epoch seconds used as the first ``last_update`` reference.
    consumption_pct_per_hour : float
        Burn rate while the generator is running (% of tank per hour).
    """

    def __init__(
        self,
        initial_level_pct: float = 85.0,
        started_at: float = 0.0,
        consumption_pct_per_hour: float = DEFAULT_CONSUMPTION_PCT_PER_HOUR,
    ) -> None:
        if not 0.0 <= initial_level_pct <= 100.0:
            raise ValueError(
                f"initial_level_pct must be in [0, 100], got {initial_level_pct}"
            )
        if consumption_pct_per_hour < 0:
            raise ValueError(
                f"consumption_pct_per_hour must be >= 0, got {consumption_pct_per_hour}"
            )

        self._level_pct: float = float(initial_level_pct)
        self._last_update: float = float(started_at)
        self.rate_pct_per_second: float = consumption_pct_per_hour / SECONDS_PER_HOUR

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def level_pct(self) -> float:
        """Current tank level in percent."""
        return self._level_pct

    @property
    def last_update(self) -> float:
        """Epoch seconds of the most recent :meth:`tick`."""
        return self._last_update

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def tick(self, is_running: bool, now: float) -> float:
        """Advance the gauge to ``now``.

        Fuel is only burned for the interval since the previous tick when
        ``is_running`` is true.  The reference timestamp always moves to
        ``now`` so stopped periods never leak into a later running tick.

        Returns
        -------
        float
            The updated level in percent.
        """
        elapsed = max(0.0, now - self._last_update)
        if is_running and elapsed > 0:
            burned = elapsed * self.rate_pct_per_second
            self._level_pct = max(0.0, self._level_pct - burned)
        self._last_update = now
        return self._level_pct
