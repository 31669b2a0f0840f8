"""Simulation and home configuration models."""

from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

MAX_TIME_RATE = 1_000_000


class SimSettings(BaseModel):
    """Timing parameters of the scheduler.

    Periods accept a ``timedelta`` or a number of seconds.
    """
    real_step_period: timedelta = timedelta(milliseconds=10)
    sim_step_period: timedelta = timedelta(milliseconds=10)
    min_time_rate: int = Field(default=1, ge=1)
    max_time_rate: int = Field(default=MAX_TIME_RATE, ge=1, le=MAX_TIME_RATE)
    time_rate: int = 1
    start_time: Optional[datetime] = None

    @field_validator("real_step_period", "sim_step_period")
    @classmethod
    def _positive_period(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("period must be positive")
        return value

    @model_validator(mode="after")
    def _check_rate_range(self) -> "SimSettings":
        if self.max_time_rate < self.min_time_rate:
            raise ValueError("max_time_rate must not be below min_time_rate")
        return self


class ActuatedDeviceConfig(BaseModel):
    id: str
    kind: str = "blind"
    bounds: Tuple[float, float] = (0.0, 100.0)
    speed: float = Field(default=10.0, gt=0)
    position: Optional[float] = None

    @model_validator(mode="after")
    def _check_position(self) -> "ActuatedDeviceConfig":
        low, high = self.bounds
        if low > high:
            raise ValueError(f"invalid bounds {self.bounds}")
        if self.position is not None and not low <= self.position <= high:
            raise ValueError(f"position {self.position} outside bounds {self.bounds}")
        return self


class OutletConfig(BaseModel):
    id: str
    rated_power: float = Field(default=60.0, ge=0)
    on: bool = True


class HomeConfig(BaseModel):
    """Devices making up a simulated home."""
    home_id: str = "demo_home"
    actuated: List[ActuatedDeviceConfig] = Field(default_factory=list)
    outlets: List[OutletConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> "HomeConfig":
        ids = [d.id for d in self.actuated] + [o.id for o in self.outlets]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate device ids: {', '.join(duplicates)}")
        return self


DEMO_HOME = HomeConfig(
    home_id="demo_home",
    actuated=[
        ActuatedDeviceConfig(id="living_room_blind", kind="blind", speed=10.0),
        ActuatedDeviceConfig(id="bedroom_blind", kind="blind", speed=10.0),
        ActuatedDeviceConfig(id="kitchen_window", kind="window", speed=5.0),
    ],
    outlets=[
        OutletConfig(id="fridge", rated_power=150.0),
        OutletConfig(id="tv", rated_power=90.0, on=False),
        OutletConfig(id="washing_machine", rated_power=500.0, on=False),
        OutletConfig(id="router", rated_power=12.0),
    ],
)


def load_config(path: Union[str, Path]) -> Tuple[SimSettings, HomeConfig]:
    """Load simulation settings and home layout from a YAML file.

    Both the ``simulation`` and ``home`` sections are optional.

    Args:
        path: Path to the YAML file

    Returns:
        Tuple of (settings, home configuration)
    """
    cfg = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    settings = SimSettings(**(cfg.get("simulation") or {}))
    home_cfg = cfg.get("home")
    home = HomeConfig(**home_cfg) if home_cfg else DEMO_HOME
    return settings, home
