"""API components for the smart-home simulator."""

from .rest import HomeRestAPI

__all__ = [
    "HomeRestAPI",
]
