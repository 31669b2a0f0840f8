"""Periodic real-time triggers driving the simulation loop."""
from datetime import timedelta
from threading import Event, Thread, current_thread
from typing import Callable, Optional
import logging
import time

logger = logging.getLogger(__name__)


class LoopHandle:
    """Live reference to one scheduled periodic trigger.

    A handle runs its callback on a single worker thread at a fixed rate.
    Firings are never concurrent: a firing that overruns the period delays
    the next one, which then runs immediately after it.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        period: timedelta,
        name: str = "homesim-loop",
    ):
        if period <= timedelta(0):
            raise ValueError("Trigger period must be positive")

        self._callback = callback
        self._period = period.total_seconds()
        self._cancel_event = Event()
        self._thread = Thread(target=self._run, name=name, daemon=True)

    def start(self) -> "LoopHandle":
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Stop scheduling further firings.

        An in-flight firing is allowed to finish; this call does not wait for it.
        """
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def finished(self) -> bool:
        """True once cancelled and the worker thread has exited."""
        return self.cancelled and not self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the worker thread to exit."""
        if self._thread.is_alive() and self._thread is not current_thread():
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        next_fire = time.monotonic()
        while not self._cancel_event.is_set():
            delay = next_fire - time.monotonic()
            if delay > 0 and self._cancel_event.wait(delay):
                break

            try:
                self._callback()
            except Exception:
                logger.exception("Unhandled error in periodic trigger")

            next_fire += self._period


class ThreadTrigger:
    """Schedules callbacks on dedicated fixed-rate worker threads."""

    def schedule(self, callback: Callable[[], None], period: timedelta) -> LoopHandle:
        """Start firing ``callback`` now and then every ``period``.

        Args:
            callback: Function to call on each firing
            period: Real-world time between firings

        Returns:
            Handle controlling the scheduled trigger
        """
        return LoopHandle(callback, period).start()
