"""Electrical meter aggregating outlet consumption over virtual time."""

from datetime import timedelta
from threading import RLock
from typing import Iterable, List
import logging

from .base import Tickable
from .outlets import Outlet

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600.0


class ElectricalMeter(Tickable):
    """Meter integrating the power drawn by a fixed set of outlets."""

    def __init__(self, outlets: Iterable[Outlet] = ()):
        """Initialize meter.

        Args:
            outlets: Outlets measured by this meter
        """
        self._lock = RLock()
        self._outlets: List[Outlet] = list(outlets)
        self._energy_wh = 0.0
        self._elapsed = timedelta(0)

    @property
    def outlets(self) -> List[Outlet]:
        with self._lock:
            return list(self._outlets)

    def add_outlet(self, outlet: Outlet) -> None:
        with self._lock:
            if outlet not in self._outlets:
                self._outlets.append(outlet)

    def cut_power_to(self, outlet: Outlet) -> None:
        """Switch off a metered outlet.

        Raises:
            ValueError: if the outlet is not connected to this meter
        """
        with self._lock:
            if outlet not in self._outlets:
                raise ValueError("Outlet is not connected to this meter")
        outlet.switch(False)
        logger.info("Power cut to outlet")

    @property
    def global_consumption(self) -> float:
        """Instantaneous power drawn by all outlets, in watts."""
        total = 0.0
        for outlet in self.outlets:
            power = outlet.get_state().power
            if power is not None:
                total += power
        return total

    @property
    def consumed_energy(self) -> float:
        """Energy drawn since the meter started, in watt-hours."""
        with self._lock:
            return self._energy_wh

    @property
    def average_power(self) -> float:
        """Mean power over the metered virtual time, in watts."""
        with self._lock:
            hours = self._elapsed.total_seconds() / SECONDS_PER_HOUR
            if hours == 0:
                return 0.0
            return self._energy_wh / hours

    def update_tick(self, delta: timedelta) -> None:
        power = self.global_consumption
        with self._lock:
            self._energy_wh += power * delta.total_seconds() / SECONDS_PER_HOUR
            self._elapsed += delta

    def to_dict(self) -> dict:
        return {
            "global_consumption_w": round(self.global_consumption, 2),
            "consumed_energy_wh": round(self.consumed_energy, 4),
            "average_power_w": round(self.average_power, 2),
            "outlets": len(self.outlets),
        }
