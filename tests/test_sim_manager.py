from datetime import timedelta
from threading import Event, Thread
import time

from homesim.config import MAX_TIME_RATE, SimSettings
from homesim.runtime.loop import Paused, Running, SimManager

from conftest import START, RecordingTickable


def test_construction_starts_running(manager, trigger, view):
  assert manager.is_running()
  assert isinstance(manager.state, Running)
  assert len(trigger.active) == 1
  assert trigger.active[0].period == timedelta(milliseconds=10)
  assert view.time_rates == [1]


def test_resume_twice_keeps_one_handle(manager, trigger):
  manager.resume()
  manager.resume()
  assert len(trigger.handles) == 1
  assert len(trigger.active) == 1


def test_pause_twice_is_noop(manager, trigger):
  manager.pause()
  manager.pause()
  assert not manager.is_running()
  assert isinstance(manager.state, Paused)
  assert trigger.active == []


def test_pause_resume_creates_fresh_handle(manager, trigger):
  manager.pause()
  manager.resume()
  assert manager.is_running()
  assert len(trigger.handles) == 2
  assert trigger.handles[0].cancelled
  assert not trigger.handles[1].cancelled


def test_rate_five_advances_one_second_in_twenty_ticks(manager, trigger, controller):
  manager.set_time_rate(5)
  trigger.fire(20)
  assert manager.tick_count == 20
  assert controller.clock.now() - START == timedelta(seconds=1)


def test_rate_is_clamped_to_minimum(manager, view):
  for rate in (0, -3, 1):
    manager.set_time_rate(rate)
    assert manager.time_rate == 1
  assert view.time_rates == [1, 1, 1, 1]


def test_rate_clamped_to_configured_minimum(view, controller, meter, trigger):
  settings = SimSettings(min_time_rate=3, time_rate=1)
  manager = SimManager(view, controller, meter, settings=settings, trigger=trigger)
  assert manager.time_rate == 3
  manager.set_time_rate(2)
  assert manager.time_rate == 3
  manager.set_time_rate(7)
  assert manager.time_rate == 7


def test_new_rate_applies_on_next_tick(manager, trigger):
  observer = RecordingTickable("obs")
  manager.add_observer(observer)
  trigger.fire()
  manager.set_time_rate(12)
  trigger.fire()
  assert observer.deltas == [timedelta(milliseconds=10), timedelta(milliseconds=120)]


def test_paused_clock_is_frozen(manager, trigger, controller):
  trigger.fire(3)
  before = controller.clock.now()
  manager.pause()
  trigger.fire(5)
  assert controller.clock.now() == before
  manager.resume()
  assert controller.clock.now() == before
  trigger.fire()
  assert controller.clock.now() == before + timedelta(milliseconds=10)


def test_stale_handle_firing_is_ignored(manager, trigger, controller):
  stale = trigger.handles[0]
  manager.pause()
  manager.resume()
  stale.callback()
  assert manager.tick_count == 0
  assert controller.clock.now() == START


def test_tick_order(controller, trigger):
  log = []

  class LoggingController:
    def __init__(self, inner):
      self.inner = inner
      self.clock = inner.clock
      self.device_manager = inner.device_manager

    def update_tick(self, delta):
      log.append("controller")
      self.inner.update_tick(delta)

  class LoggingMeter(RecordingTickable):
    pass

  class LoggingView:
    def set_date_time(self, dt):
      log.append("view")

    def set_time_rate(self, rate):
      pass

  controller.device_manager.add_device("a", RecordingTickable("device a", log))
  controller.device_manager.add_device("b", RecordingTickable("device b", log))
  manager = SimManager(LoggingView(), LoggingController(controller), LoggingMeter("meter", log), trigger=trigger)
  manager.add_observer(RecordingTickable("observer", log))
  trigger.fire()
  assert log == ["controller", "meter", "device a", "device b", "view", "observer"]


def test_observers_receive_same_delta_as_devices(manager, trigger, controller):
  device_probe = RecordingTickable("device")
  controller.device_manager.add_device("probe", device_probe)
  first, second = RecordingTickable("first"), RecordingTickable("second")
  manager.add_observer(first)
  manager.add_observer(second)
  manager.add_observer(first)
  manager.set_time_rate(3)
  trigger.fire(2)
  assert first.deltas == [timedelta(milliseconds=30)] * 2
  assert second.deltas == first.deltas
  assert device_probe.deltas == first.deltas


def test_remove_observer(manager, trigger):
  observer = RecordingTickable("obs")
  manager.add_observer(observer)
  assert manager.remove_observer(observer)
  assert not manager.remove_observer(observer)
  trigger.fire()
  assert observer.deltas == []


def test_view_receives_clock_after_each_tick(manager, trigger, view):
  trigger.fire(2)
  assert view.date_times == [START + timedelta(milliseconds=10), START + timedelta(milliseconds=20)]


def test_faulting_device_is_skipped_and_loop_keeps_running(manager, trigger, controller):
  class Broken(RecordingTickable):
    def update_tick(self, delta):
      raise RuntimeError("boom")

  after = RecordingTickable("after")
  observer = RecordingTickable("observer")
  controller.device_manager.add_device("broken", Broken("broken"))
  controller.device_manager.add_device("after", after)
  manager.add_observer(observer)
  trigger.fire(2)
  assert manager.is_running()
  assert manager.fault_count == 2
  assert manager.tick_count == 2
  assert len(after.deltas) == 2
  assert len(observer.deltas) == 2
  assert controller.clock.now() == START + timedelta(milliseconds=20)


def test_observer_added_during_tick_does_not_break_iteration(manager, trigger):
  late = RecordingTickable("late")

  class Adder(RecordingTickable):
    def update_tick(self, delta):
      super().update_tick(delta)
      manager.add_observer(late)

  manager.add_observer(Adder("adder"))
  trigger.fire(2)
  assert manager.fault_count == 0
  assert len(late.deltas) == 1


def test_close_pauses(manager, trigger):
  manager.close()
  assert not manager.is_running()
  assert trigger.active == []


def test_concurrent_resume_pause_leaves_consistent_state(manager, trigger):
  def toggle():
    for _ in range(200):
      manager.resume()
      manager.pause()

  threads = [Thread(target=toggle) for _ in range(4)]
  for t in threads:
    t.start()
  for t in threads:
    t.join()

  assert not manager.is_running()
  assert trigger.active == []
  manager.resume()
  assert len(trigger.active) == 1


def test_huge_rate_is_clamped_and_ticks_keep_running(manager, trigger, controller):
  manager.set_time_rate(10**16)
  assert manager.time_rate == MAX_TIME_RATE
  trigger.fire(3)
  assert manager.tick_count == 3
  assert manager.fault_count == 0
  assert controller.clock.now() - START == timedelta(milliseconds=10) * MAX_TIME_RATE * 3


def test_rate_ceiling_follows_step_size(view, controller, meter, trigger):
  settings = SimSettings(sim_step_period=timedelta(days=1000))
  manager = SimManager(view, controller, meter, settings=settings, trigger=trigger)
  manager.set_time_rate(10**16)
  assert manager.time_rate == timedelta.max // timedelta(days=1000)
  trigger.fire()
  # the clock overflows past datetime.max; that step is skipped, the tick completes
  assert manager.tick_count == 1
  assert manager.fault_count == 1
  assert controller.clock.now() == START


def test_pause_does_not_wait_for_tick_in_flight(view, controller, meter):
  entered, release = Event(), Event()

  class Slow(RecordingTickable):
    def update_tick(self, delta):
      super().update_tick(delta)
      entered.set()
      release.wait(2.0)

  slow = Slow("slow")
  controller.device_manager.add_device("slow", slow)
  settings = SimSettings(real_step_period=timedelta(milliseconds=2))
  manager = SimManager(view, controller, meter, settings=settings)
  try:
    assert entered.wait(2.0)
    started = time.monotonic()
    manager.pause()
    assert time.monotonic() - started < 0.5
    assert not manager.is_running()
    assert manager.tick_count == 0
  finally:
    release.set()
    manager.close(timeout=2.0)

  assert len(slow.deltas) == 1
  assert manager.tick_count == 1


def test_view_shows_stored_rate_after_concurrent_updates(manager, view):
  def setter(rate):
    for _ in range(200):
      manager.set_time_rate(rate)

  threads = [Thread(target=setter, args=(rate,)) for rate in (2, 3, 5, 7)]
  for t in threads:
    t.start()
  for t in threads:
    t.join()

  assert view.time_rates[-1] == manager.time_rate


def test_close_joins_every_unfinished_worker(manager, trigger):
  manager.pause()
  manager.resume()
  manager.pause()
  manager.close()
  assert len(trigger.handles) == 2
  assert all(h.joined for h in trigger.handles)


def test_finished_workers_are_not_kept(manager, trigger):
  manager.pause()
  trigger.handles[0].finished = True
  manager.resume()
  manager.close()
  assert not trigger.handles[0].joined
  assert trigger.handles[1].joined
