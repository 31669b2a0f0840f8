from datetime import datetime, timezone

import pytest

from homesim.config import SimSettings
from homesim.controller import Controller
from homesim.model.base import Tickable
from homesim.model.meter import ElectricalMeter
from homesim.runtime.clock import SimulationClock
from homesim.runtime.loop import SimManager
from homesim.view import SimManagerView

START = datetime(2025, 1, 1, tzinfo=timezone.utc)


class ManualHandle:
  def __init__(self, callback, period):
    self.callback = callback
    self.period = period
    self.cancelled = False
    self.joined = False
    self.finished = False

  def cancel(self):
    self.cancelled = True

  def join(self, timeout=None):
    self.joined = True


class ManualTrigger:
  """Trigger whose firings happen only when a test calls fire()."""

  def __init__(self):
    self.handles = []

  def schedule(self, callback, period):
    handle = ManualHandle(callback, period)
    self.handles.append(handle)
    return handle

  @property
  def active(self):
    return [h for h in self.handles if not h.cancelled]

  def fire(self, times=1):
    for _ in range(times):
      for handle in self.active:
        handle.callback()


class RecordingView(SimManagerView):
  def __init__(self):
    self.date_times = []
    self.time_rates = []

  def set_date_time(self, date_time):
    self.date_times.append(date_time)

  def set_time_rate(self, rate):
    self.time_rates.append(rate)


class RecordingTickable(Tickable):
  def __init__(self, name, log=None):
    self.name = name
    self.deltas = []
    self.log = log

  def update_tick(self, delta):
    self.deltas.append(delta)
    if self.log is not None:
      self.log.append(self.name)

  def __repr__(self):
    return f"RecordingTickable({self.name})"


@pytest.fixture
def trigger():
  return ManualTrigger()


@pytest.fixture
def view():
  return RecordingView()


@pytest.fixture
def controller():
  return Controller(SimulationClock(START))


@pytest.fixture
def meter():
  return ElectricalMeter()


@pytest.fixture
def manager(view, controller, meter, trigger):
  return SimManager(view, controller, meter, settings=SimSettings(), trigger=trigger)
