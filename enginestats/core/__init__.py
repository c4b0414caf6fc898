"""Core module containing the hardware tree, sampling engine and configuration."""

from .models import (
    DeviceKind,
    SensorKind,
    Sensor,
    Device,
    HardwareTree,
    SnapshotStatus,
    Snapshot,
)
from .smoother import RollingWindow, WINDOW_SIZE
from .selector import MetricCategory, select
from .refresher import refresh_tree
from .aggregator import SnapshotAggregator, sample
from .config import Config, ConfigError

__all__ = [
    "DeviceKind",
    "SensorKind",
    "Sensor",
    "Device",
    "HardwareTree",
    "SnapshotStatus",
    "Snapshot",
    "RollingWindow",
    "WINDOW_SIZE",
    "MetricCategory",
    "select",
    "refresh_tree",
    "SnapshotAggregator",
    "sample",
    "Config",
    "ConfigError",
]
