"""REST API exposing the simulation view and its control commands."""

from typing import Any, Dict, List
import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from ..config import MAX_TIME_RATE
from ..model.actuated import ActuatedDevice
from ..model.outlets import Outlet
from ..model.state import ActuatedDeviceState, InvalidStateType, OutletState

logger = logging.getLogger(__name__)


# Pydantic models for request validation
class TimeRateData(BaseModel):
    """Time rate request data; values below the minimum are clamped."""
    rate: int = Field(le=MAX_TIME_RATE)


class PositionData(BaseModel):
    """Actuated device command data."""
    position: float


class PowerData(BaseModel):
    """Outlet switch command data."""
    on: bool


class HomeRestAPI:
    """REST front end of a :class:`~homesim.simulator.HomeSimulator`."""

    def __init__(self, simulator: Any):
        """Initialize REST API.

        Args:
            simulator: Simulator whose scheduler, devices and meter are exposed
        """
        self.simulator = simulator
        self.app = FastAPI(
            title="homesim API",
            description="Control and view API for the smart-home simulator",
            version="1.0.0",
        )

        # Setup routes
        self._setup_routes()

    def _device_or_404(self, device_id: str):
        device = self.simulator.device_manager.get_device(device_id)
        if device is None:
            raise HTTPException(status_code=404, detail="Device not found")
        return device

    def _device_dict(self, device_id: str, device) -> Dict[str, Any]:
        return {
            "device_id": device_id,
            "kind": getattr(device, "kind", type(device).__name__.lower()),
            "state": device.get_state().to_dict(),
        }

    def _clock_dict(self) -> Dict[str, Any]:
        sim = self.simulator
        return {
            "current_time": sim.clock.now().isoformat(),
            "time_rate": sim.sim_manager.time_rate,
            "running": sim.sim_manager.is_running(),
            "ticks": sim.sim_manager.tick_count,
        }

    def _setup_routes(self) -> None:
        """Setup all API routes."""
        sim = self.simulator

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {
                "status": "healthy",
                "devices": len(sim.device_manager),
                "timestamp": sim.clock.now().isoformat(),
            }

        @self.app.get("/api/simulator/clock")
        async def get_clock_info():
            """Get simulation clock information."""
            return self._clock_dict()

        @self.app.get("/api/simulator/view")
        async def get_view():
            """Get the values last pushed to the view."""
            return sim.view.snapshot()

        @self.app.post("/api/simulator/clock/pause")
        async def pause_clock():
            """Pause simulation."""
            sim.sim_manager.pause()
            return self._clock_dict()

        @self.app.post("/api/simulator/clock/resume")
        async def resume_clock():
            """Resume simulation."""
            sim.sim_manager.resume()
            return self._clock_dict()

        @self.app.post("/api/simulator/clock/set_time_rate")
        async def set_time_rate(data: TimeRateData):
            """Set the simulation time rate."""
            sim.sim_manager.set_time_rate(data.rate)
            return self._clock_dict()

        @self.app.get("/api/devices")
        async def get_devices() -> List[Dict[str, Any]]:
            """Get all devices and their states."""
            return [
                self._device_dict(device_id, device)
                for device_id, device in sim.device_manager.get_devices().items()
            ]

        @self.app.get("/api/devices/{device_id}")
        async def get_device(device_id: str):
            """Get a single device state."""
            return self._device_dict(device_id, self._device_or_404(device_id))

        @self.app.post("/api/devices/{device_id}/position")
        async def set_position(device_id: str, data: PositionData):
            """Command an actuated device to a position."""
            device = self._device_or_404(device_id)
            if not isinstance(device, ActuatedDevice):
                raise HTTPException(status_code=400, detail=f"{device_id} is not an actuated device")

            current = device.get_state()
            try:
                device.set_state(ActuatedDeviceState(data.position, current.bounds))
            except (InvalidStateType, ValueError) as e:
                raise HTTPException(status_code=400, detail=str(e))
            return self._device_dict(device_id, device)

        @self.app.post("/api/devices/{device_id}/power")
        async def set_power(device_id: str, data: PowerData):
            """Switch an outlet on or off."""
            device = self._device_or_404(device_id)
            if not isinstance(device, Outlet):
                raise HTTPException(status_code=400, detail=f"{device_id} is not an outlet")

            try:
                device.set_state(OutletState(device.rated_power if data.on else None))
            except InvalidStateType as e:
                raise HTTPException(status_code=400, detail=str(e))
            return self._device_dict(device_id, device)

        @self.app.get("/api/meter")
        async def get_meter():
            """Get electrical meter readings."""
            return sim.meter.to_dict()

        @self.app.post("/api/meter/outlets/{device_id}/cut")
        async def cut_power(device_id: str):
            """Cut power to a metered outlet."""
            device = self._device_or_404(device_id)
            if not isinstance(device, Outlet):
                raise HTTPException(status_code=400, detail=f"{device_id} is not an outlet")

            try:
                sim.meter.cut_power_to(device)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return self._device_dict(device_id, device)

    def get_app(self) -> FastAPI:
        """Get the FastAPI app instance."""
        return self.app
