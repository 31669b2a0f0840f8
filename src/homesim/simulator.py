"""Main simulator coordinator that ties all components together."""

from typing import Any, Dict, Optional
import logging

from .api import HomeRestAPI
from .config import DEMO_HOME, HomeConfig, SimSettings
from .controller import Controller
from .model.actuated import DEVICE_KINDS, ActuatedDevice
from .model.actuator import LinearActuator
from .model.meter import ElectricalMeter
from .model.outlets import Outlet
from .model.state import Bounds
from .runtime import SimManager, SimulationClock
from .view import StatusView

logger = logging.getLogger(__name__)


class HomeSimulator:
    """Main coordinator for the smart-home simulator."""

    def __init__(
        self,
        settings: Optional[SimSettings] = None,
        home: Optional[HomeConfig] = None,
        trigger: Optional[Any] = None,
    ):
        """Initialize the simulator; the simulation loop starts running.

        Args:
            settings: Scheduler timing parameters
            home: Home layout (default: the demo home)
            trigger: Periodic trigger factory for the loop (default: threads)
        """
        self.settings = settings or SimSettings()

        # Core runtime components
        self.clock = SimulationClock(start_time=self.settings.start_time)
        self.controller = Controller(self.clock)
        self.meter = ElectricalMeter()
        self.view = StatusView()

        self.create_home(home or DEMO_HOME)

        self.sim_manager = SimManager(
            self.view,
            self.controller,
            self.meter,
            settings=self.settings,
            trigger=trigger,
        )

        # API components
        self.rest_api = HomeRestAPI(self)

        logger.info("Home simulator initialized")

    @property
    def device_manager(self):
        return self.controller.device_manager

    def create_device(self, device_id: str, device) -> None:
        """Register a device; outlets are also connected to the meter."""
        self.device_manager.add_device(device_id, device)
        if isinstance(device, Outlet):
            self.meter.add_outlet(device)

    def create_home(self, home: HomeConfig) -> None:
        """Create the devices described by a home configuration.

        Args:
            home: Home configuration
        """
        for cfg in home.actuated:
            kind = DEVICE_KINDS.get(cfg.kind)
            if kind is None and cfg.kind != ActuatedDevice.kind:
                logger.warning(f"Unknown device kind {cfg.kind!r} for {cfg.id}; using a plain actuator")

            bounds = Bounds(*cfg.bounds)
            if kind is not None:
                device = kind(speed=cfg.speed, position=cfg.position, bounds=bounds)
            else:
                device = ActuatedDevice(LinearActuator(bounds, cfg.speed, cfg.position))
            self.create_device(cfg.id, device)

        for cfg in home.outlets:
            self.create_device(cfg.id, Outlet(cfg.rated_power, on=cfg.on))

        logger.info(f"Created home: {home.home_id} with {len(self.device_manager)} devices")

    def stop(self) -> None:
        """Stop the simulation loop."""
        self.sim_manager.close()

    def is_running(self) -> bool:
        return self.sim_manager.is_running()

    def get_api_app(self):
        """Get the FastAPI app for the REST API."""
        return self.rest_api.get_app()

    def get_stats(self) -> Dict[str, Any]:
        """Get simulator statistics."""
        return {
            "running": self.is_running(),
            "devices": len(self.device_manager),
            "current_time": self.clock.now().isoformat(),
            "time_rate": self.sim_manager.time_rate,
            "ticks": self.sim_manager.tick_count,
            "faults": self.sim_manager.fault_count,
            "meter": self.meter.to_dict(),
        }
