"""Simulation scheduler driving every tickable entity from a real-time loop.

Each firing of the periodic trigger advances virtual time by
``sim_step_period * time_rate`` and updates, in order: the controller, the
electrical meter, the tickable devices, the view, and the observers.
"""
from dataclasses import dataclass
from datetime import timedelta
from threading import Lock, RLock
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Union
import logging

from ..config import SimSettings
from ..model.base import Tickable
from ..model.meter import ElectricalMeter
from ..view import SimManagerView
from .trigger import LoopHandle, ThreadTrigger

if TYPE_CHECKING:
    from ..controller import Controller

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Running:
    """Loop is scheduled; ``handle`` is the live trigger."""
    handle: LoopHandle
    generation: int


@dataclass(frozen=True)
class Paused:
    """Loop is not scheduled."""


LoopState = Union[Running, Paused]


class SimManager:
    """Owns the simulation loop and its pause/resume/time-rate controls.

    ``resume``, ``pause`` and ``set_time_rate`` may be called from any thread.
    They never wait for a tick in progress.
    """

    def __init__(
        self,
        view: SimManagerView,
        controller: "Controller",
        meter: ElectricalMeter,
        settings: Optional[SimSettings] = None,
        trigger: Optional[ThreadTrigger] = None,
    ):
        """Initialize the scheduler and start running it.

        Args:
            view: View receiving date-time and time-rate updates
            controller: Controller owning the clock and the devices
            meter: Electrical meter updated every tick
            settings: Timing parameters (default: 10 ms real and virtual steps)
            trigger: Periodic trigger factory (default: worker thread per loop)
        """
        self._settings = settings or SimSettings()
        self._view = view
        self._controller = controller
        self._meter = meter
        self._trigger = trigger or ThreadTrigger()

        self._state_lock = RLock()
        self._tick_lock = Lock()
        self._state: LoopState = Paused()
        self._generation = 0
        self._handles: List[LoopHandle] = []
        self._max_time_rate = min(
            self._settings.max_time_rate,
            timedelta.max // self._settings.sim_step_period,
        )
        self._time_rate = self._clamp_rate(self._settings.time_rate)
        self._observers: Dict[int, Tickable] = {}
        self._tick_count = 0
        self._fault_count = 0

        with self._state_lock:
            self._view.set_time_rate(self._time_rate)
        self.resume()

    @property
    def settings(self) -> SimSettings:
        return self._settings

    @property
    def time_rate(self) -> int:
        with self._state_lock:
            return self._time_rate

    @property
    def tick_count(self) -> int:
        """Number of completed ticks."""
        with self._state_lock:
            return self._tick_count

    @property
    def fault_count(self) -> int:
        """Number of tick steps that raised and were skipped."""
        with self._state_lock:
            return self._fault_count

    @property
    def state(self) -> LoopState:
        with self._state_lock:
            return self._state

    def is_running(self) -> bool:
        with self._state_lock:
            return isinstance(self._state, Running)

    def resume(self) -> None:
        """Start the loop; the first tick fires immediately. No-op if running."""
        with self._state_lock:
            if isinstance(self._state, Running):
                return

            self._generation += 1
            generation = self._generation
            handle = self._trigger.schedule(
                lambda: self._fire(generation),
                self._settings.real_step_period,
            )
            self._state = Running(handle, generation)
            self._handles = [h for h in self._handles if not h.finished]
            self._handles.append(handle)

        logger.info("Simulation resumed")

    def pause(self) -> None:
        """Stop the loop, freezing the virtual clock. No-op if paused.

        A tick already in progress completes; no further tick runs.
        """
        with self._state_lock:
            state = self._state
            if not isinstance(state, Running):
                return

            state.handle.cancel()
            self._state = Paused()

        logger.info("Simulation paused")

    def set_time_rate(self, rate: int) -> None:
        """Set the virtual time multiplier, clamped to the allowed range."""
        with self._state_lock:
            self._time_rate = self._clamp_rate(rate)
            rate = self._time_rate
            self._view.set_time_rate(rate)

        logger.info(f"Time rate set to {rate}x")

    def add_observer(self, observer: Tickable) -> None:
        """Register an entity for per-tick updates. Re-adding has no effect."""
        with self._state_lock:
            self._observers[id(observer)] = observer
        logger.debug(f"Observer added: {observer!r}")

    def remove_observer(self, observer: Tickable) -> bool:
        """Unregister an observer.

        Returns:
            True if removed, False if it was not registered
        """
        with self._state_lock:
            return self._observers.pop(id(observer), None) is not None

    def close(self, timeout: float = 5.0) -> None:
        """Pause and wait for every loop worker to exit."""
        self.pause()
        with self._state_lock:
            handles, self._handles = self._handles, []
        for handle in handles:
            handle.join(timeout=timeout)
        logger.info("Simulation loop closed")

    def _fire(self, generation: int) -> None:
        """Run one tick for the trigger of the given generation."""
        with self._tick_lock:
            with self._state_lock:
                state = self._state
                if not isinstance(state, Running) or state.generation != generation:
                    return
                delta = self._settings.sim_step_period * self._time_rate
                observers = list(self._observers.values())

            self._tick(delta, observers)

    def _tick(self, delta: timedelta, observers: List[Tickable]) -> None:
        controller = self._controller
        self._run_step("controller", controller.update_tick, delta)
        self._run_step("electrical meter", self._meter.update_tick, delta)

        for device_id, device in controller.device_manager.get_tickable_devices().items():
            self._run_step(f"device {device_id}", device.update_tick, delta)

        self._run_step("view", lambda _: self._view.set_date_time(controller.clock.now()), delta)

        for observer in observers:
            self._run_step(f"observer {observer!r}", observer.update_tick, delta)

        with self._state_lock:
            self._tick_count += 1

    def _run_step(self, name: str, step: Callable[[timedelta], None], delta: timedelta) -> None:
        """Run a single tick step, logging and skipping it if it raises."""
        try:
            step(delta)
        except Exception:
            with self._state_lock:
                self._fault_count += 1
            logger.exception(f"Error updating {name}; skipped for this tick")

    def _clamp_rate(self, rate: int) -> int:
        return max(self._settings.min_time_rate, min(self._max_time_rate, int(rate)))

    def __repr__(self) -> str:
        status = "running" if self.is_running() else "paused"
        return f"SimManager({status}, {self.time_rate}x)"
