"""Collectors module for building hardware trees."""

from .local_collector import LocalCollector
from .nvidia_collector import discover_nvidia_devices

__all__ = [
    "LocalCollector",
    "discover_nvidia_devices",
]
