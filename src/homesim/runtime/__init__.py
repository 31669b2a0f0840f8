"""Runtime components of the smart-home simulator."""

from .clock import SimulationClock
from .trigger import LoopHandle, ThreadTrigger
from .loop import SimManager, Running, Paused

__all__ = [
    "SimulationClock",
    "LoopHandle",
    "ThreadTrigger",
    "SimManager",
    "Running",
    "Paused",
]
