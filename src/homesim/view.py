"""View side of the simulation: receives pushed clock and rate updates."""

from abc import ABC, abstractmethod
from datetime import datetime
from threading import RLock
from typing import Any, Dict, Optional


class SimManagerView(ABC):
    """Display surface the scheduler pushes its state to.

    Implementations must not block and must not call back into the scheduler
    from these methods.
    """

    @abstractmethod
    def set_date_time(self, date_time: datetime) -> None:
        """Show the current virtual date-time."""

    @abstractmethod
    def set_time_rate(self, rate: int) -> None:
        """Show the current time rate."""


class StatusView(SimManagerView):
    """Keeps the last pushed values for the REST API and CLI."""

    def __init__(self):
        self._lock = RLock()
        self._date_time: Optional[datetime] = None
        self._time_rate: Optional[int] = None
        self._updates = 0

    def set_date_time(self, date_time: datetime) -> None:
        with self._lock:
            self._date_time = date_time
            self._updates += 1

    def set_time_rate(self, rate: int) -> None:
        with self._lock:
            self._time_rate = rate

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "date_time": self._date_time.isoformat() if self._date_time else None,
                "time_rate": self._time_rate,
                "updates": self._updates,
            }
