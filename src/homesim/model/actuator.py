"""Positional actuators moving devices over virtual time."""

from abc import abstractmethod
from datetime import timedelta
from threading import RLock
from typing import Optional
import logging

from .base import Tickable
from .state import Bounds

logger = logging.getLogger(__name__)


class Actuator(Tickable):
    """Drives a position within fixed bounds."""

    @property
    @abstractmethod
    def position(self) -> float:
        """Current position."""

    @property
    @abstractmethod
    def bounds(self) -> Bounds:
        """Valid position interval."""

    @abstractmethod
    def command(self, position: float) -> None:
        """Set the target position.

        Raises:
            ValueError: if ``position`` lies outside :attr:`bounds`
        """


class LinearActuator(Actuator):
    """Actuator moving towards its target at constant speed."""

    def __init__(
        self,
        bounds: Bounds,
        speed: float,
        position: Optional[float] = None,
    ):
        """Initialize actuator.

        Args:
            bounds: Valid position interval
            speed: Units travelled per second of virtual time (must be > 0)
            position: Initial position (default: lower bound)
        """
        if speed <= 0:
            raise ValueError("Speed must be positive")

        self._lock = RLock()
        self._bounds = bounds
        self._speed = speed
        self._position = bounds.lower if position is None else position
        if not bounds.contains(self._position):
            raise ValueError(f"Initial position {self._position} outside {bounds}")
        self._target = self._position

    @property
    def position(self) -> float:
        with self._lock:
            return self._position

    @property
    def target(self) -> float:
        with self._lock:
            return self._target

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    @property
    def speed(self) -> float:
        return self._speed

    def is_moving(self) -> bool:
        with self._lock:
            return self._position != self._target

    def command(self, position: float) -> None:
        if not self._bounds.contains(position):
            raise ValueError(
                f"Position {position} outside bounds [{self._bounds.lower}, {self._bounds.upper}]"
            )

        with self._lock:
            self._target = position
        logger.debug(f"Actuator commanded to {position}")

    def update_tick(self, delta: timedelta) -> None:
        with self._lock:
            step = self._speed * delta.total_seconds()
            remaining = self._target - self._position
            if abs(remaining) <= step:
                self._position = self._target
            elif remaining > 0:
                self._position += step
            else:
                self._position -= step

    def __repr__(self) -> str:
        return f"LinearActuator(position={self.position}, target={self.target}, bounds={self._bounds})"
