"""Device state snapshots exchanged through the get/set state contract."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class InvalidStateType(ValueError):
    """A device received a state object of a variant it does not accept."""

    def __init__(self, expected: type, got: object):
        self.expected = expected
        self.got = type(got)
        super().__init__(f"State expected {expected.__name__} but got {self.got.__name__}")


@dataclass(frozen=True)
class Bounds:
    """Closed interval of valid actuator positions."""
    lower: float
    upper: float

    def __post_init__(self):
        if self.lower > self.upper:
            raise ValueError(f"Invalid bounds: {self.lower} > {self.upper}")

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


class DeviceState(ABC):
    """Base class of every device state variant."""

    @abstractmethod
    def to_dict(self) -> dict:
        """JSON-ready representation of the state."""


@dataclass(frozen=True)
class ActuatedDeviceState(DeviceState):
    """Current position of an actuated device together with its bounds."""
    position: float
    bounds: Bounds

    def to_dict(self) -> dict:
        return {
            "type": "actuated",
            "position": self.position,
            "bounds": [self.bounds.lower, self.bounds.upper],
        }


@dataclass(frozen=True)
class OutletState(DeviceState):
    """Power drawn by an outlet; ``None`` when its power is cut."""
    power: Optional[float]

    @property
    def is_on(self) -> bool:
        return self.power is not None

    def to_dict(self) -> dict:
        return {"type": "outlet", "power": self.power, "on": self.is_on}
