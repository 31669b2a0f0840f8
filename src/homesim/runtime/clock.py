"""Virtual clock for the smart-home simulation.

The clock never reads wall time after construction. It only moves when the
owning controller advances it, once per scheduler tick.
"""
from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Optional


class SimulationClock:
    """Monotonic virtual date-time advanced by explicit deltas."""

    def __init__(self, start_time: Optional[datetime] = None):
        """Initialize simulation clock.

        Args:
            start_time: Initial simulation time (default: current UTC time)
        """
        self._lock = RLock()
        self._start_time = start_time or datetime.now(timezone.utc)
        self._sim_time = self._start_time

    def now(self) -> datetime:
        """Get current simulation time."""
        with self._lock:
            return self._sim_time

    def advance(self, delta: timedelta) -> datetime:
        """Advance simulation time by a fixed amount.

        Args:
            delta: Amount of time to advance

        Returns:
            The new simulation time
        """
        if delta < timedelta(0):
            raise ValueError(f"Cannot move clock backwards by {delta}")

        with self._lock:
            self._sim_time = self._sim_time + delta
            return self._sim_time

    def elapsed(self) -> timedelta:
        """Virtual time elapsed since the clock was created."""
        with self._lock:
            return self._sim_time - self._start_time

    def __repr__(self) -> str:
        return f"SimulationClock({self.now().isoformat()})"
