"""Power outlets feeding appliances."""

from threading import RLock

from .base import Device
from .state import DeviceState, InvalidStateType, OutletState


class Outlet(Device):
    """Outlet drawing its rated power while switched on."""

    kind = "outlet"

    def __init__(self, rated_power: float, on: bool = True):
        """Initialize outlet.

        Args:
            rated_power: Power drawn while on, in watts
            on: Whether the outlet starts powered
        """
        if rated_power < 0:
            raise ValueError("Rated power must not be negative")

        self._lock = RLock()
        self._rated_power = rated_power
        self._on = on

    @property
    def rated_power(self) -> float:
        return self._rated_power

    def is_on(self) -> bool:
        with self._lock:
            return self._on

    def switch(self, on: bool) -> None:
        with self._lock:
            self._on = on

    def get_state(self) -> OutletState:
        with self._lock:
            return OutletState(self._rated_power if self._on else None)

    def set_state(self, state: DeviceState) -> None:
        if state is None:
            raise TypeError("state must not be None")
        if not isinstance(state, OutletState):
            raise InvalidStateType(OutletState, state)
        self.switch(state.is_on)
