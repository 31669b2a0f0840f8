"""Domain controller owning the virtual clock and the device registry."""

from datetime import timedelta
from threading import RLock
from typing import Dict, Optional
import logging

from .model.base import Device, Tickable
from .runtime.clock import SimulationClock

logger = logging.getLogger(__name__)


class DeviceManager:
    """Thread-safe registry of the devices in the home."""

    def __init__(self):
        self._lock = RLock()
        self._devices: Dict[str, Device] = {}
        self._tickables: Dict[str, Tickable] = {}

    def add_device(self, device_id: str, device: Device) -> None:
        """Register a device.

        Devices implementing :class:`Tickable` are also recorded in the tick
        registry, so the scheduler never inspects types while ticking.

        Args:
            device_id: Unique device identifier
            device: The device instance
        """
        with self._lock:
            if device_id in self._devices:
                raise ValueError(f"Device already registered: {device_id}")
            self._devices[device_id] = device
            if isinstance(device, Tickable):
                self._tickables[device_id] = device

        logger.debug(f"Registered device {device_id}")

    def remove_device(self, device_id: str) -> bool:
        """Unregister a device.

        Returns:
            True if removed, False if not found
        """
        with self._lock:
            if device_id not in self._devices:
                return False
            del self._devices[device_id]
            self._tickables.pop(device_id, None)
            return True

    def get_device(self, device_id: str) -> Optional[Device]:
        with self._lock:
            return self._devices.get(device_id)

    def get_devices(self) -> Dict[str, Device]:
        """Get all devices keyed by id, in registration order."""
        with self._lock:
            return dict(self._devices)

    def get_tickable_devices(self) -> Dict[str, Tickable]:
        """Get the devices that take part in the tick loop."""
        with self._lock:
            return dict(self._tickables)

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)


class Controller:
    """Advances the home's clock and exposes its devices."""

    def __init__(
        self,
        clock: Optional[SimulationClock] = None,
        device_manager: Optional[DeviceManager] = None,
    ):
        self.clock = clock or SimulationClock()
        self.device_manager = device_manager or DeviceManager()

    def update_tick(self, delta: timedelta) -> None:
        self.clock.advance(delta)
