"""Device models for the smart-home simulator."""

from .state import (
    ActuatedDeviceState,
    Bounds,
    DeviceState,
    InvalidStateType,
    OutletState,
)
from .base import Device, Tickable
from .actuator import Actuator, LinearActuator
from .actuated import ActuatedDevice, Blind, Window
from .outlets import Outlet
from .meter import ElectricalMeter

__all__ = [
    "ActuatedDeviceState",
    "Bounds",
    "DeviceState",
    "InvalidStateType",
    "OutletState",
    "Device",
    "Tickable",
    "Actuator",
    "LinearActuator",
    "ActuatedDevice",
    "Blind",
    "Window",
    "Outlet",
    "ElectricalMeter",
]
