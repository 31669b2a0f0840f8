"""Devices whose state is a bounded position driven by an actuator."""

from datetime import timedelta
from typing import Optional

from .actuator import Actuator, LinearActuator
from .base import Device, Tickable
from .state import ActuatedDeviceState, Bounds, DeviceState, InvalidStateType

PERCENT_BOUNDS = Bounds(0.0, 100.0)


class ActuatedDevice(Device, Tickable):
    """Device adapter translating state objects into actuator commands."""

    kind = "actuated"

    def __init__(self, actuator: Actuator):
        """Initialize device.

        Args:
            actuator: The actuator controlling the device position
        """
        if actuator is None:
            raise TypeError("actuator must not be None")
        self._actuator = actuator

    @property
    def actuator(self) -> Actuator:
        return self._actuator

    def get_state(self) -> ActuatedDeviceState:
        return ActuatedDeviceState(self._actuator.position, self._actuator.bounds)

    def set_state(self, state: DeviceState) -> None:
        if state is None:
            raise TypeError("state must not be None")
        if not isinstance(state, ActuatedDeviceState):
            raise InvalidStateType(ActuatedDeviceState, state)
        self._actuator.command(state.position)

    def update_tick(self, delta: timedelta) -> None:
        self._actuator.update_tick(delta)


class Blind(ActuatedDevice):
    """Window blind; the lower bound is fully closed (default 0..100)."""

    kind = "blind"

    def __init__(
        self,
        speed: float = 10.0,
        position: Optional[float] = None,
        bounds: Bounds = PERCENT_BOUNDS,
    ):
        super().__init__(LinearActuator(bounds, speed, position))


class Window(ActuatedDevice):
    """Motorised window; the lower bound is closed (default 0..100)."""

    kind = "window"

    def __init__(
        self,
        speed: float = 5.0,
        position: Optional[float] = None,
        bounds: Bounds = PERCENT_BOUNDS,
    ):
        super().__init__(LinearActuator(bounds, speed, position))


DEVICE_KINDS = {
    Blind.kind: Blind,
    Window.kind: Window,
}
