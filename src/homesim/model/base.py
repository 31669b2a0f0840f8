"""Capabilities shared by simulated devices."""

from abc import ABC, abstractmethod
from datetime import timedelta

from .state import DeviceState


class Tickable(ABC):
    """Anything that advances its internal state by a virtual time delta.

    Devices opt in to per-tick updates by inheriting from this class; the
    device registry keeps them in a dedicated collection at registration.
    """

    @abstractmethod
    def update_tick(self, delta: timedelta) -> None:
        """Advance by ``delta`` of virtual time."""


class Device(ABC):
    """A device whose observable state can be read and commanded."""

    @abstractmethod
    def get_state(self) -> DeviceState:
        """Return an immutable snapshot of the device state."""

    @abstractmethod
    def set_state(self, state: DeviceState) -> None:
        """Command the device towards ``state``.

        Raises:
            InvalidStateType: if ``state`` is not the variant this device accepts
        """
