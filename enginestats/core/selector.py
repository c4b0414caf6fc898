"""
Sensor Selector.

Picks one raw reading per metric category from a refreshed hardware tree.
Every device and sensor is scanned without stopping early, so when several
sensors match, the last one in traversal order wins.
"""

from enum import Enum
from typing import Callable, Iterable, Optional

from .models import Device, DeviceKind, HardwareTree, Sensor, SensorKind


CPU_TOTAL_SENSOR = "CPU Total"
USED_MEMORY_SENSOR = "Used Memory"
MEMORY_USED_FRAGMENT = "Memory Used"


class MetricCategory(Enum):
    """Metric categories tracked by the sampler."""

    CPU_LOAD = "cpu_load"
    GPU_LOAD = "gpu_load"
    MEMORY_USED = "memory_used"


def _last_match(
    devices: Iterable[Device],
    device_filter: Callable[[Device], bool],
    sensor_filter: Callable[[Sensor], bool],
) -> Optional[float]:
    """Return the value of the last sensor matching both filters."""
    selected = None
    for device in devices:
        if not device_filter(device):
            continue
        for sensor in device.sensors:
            # Sensors that were never read cannot win a match
            if sensor.value is not None and sensor_filter(sensor):
                selected = float(sensor.value)
    return selected


def select_cpu_load(tree: HardwareTree) -> float:
    """Total CPU load in percent, 0.0 when no CPU total sensor exists."""
    value = _last_match(
        tree.devices(),
        lambda d: d.kind == DeviceKind.CPU,
        lambda s: s.kind == SensorKind.LOAD and CPU_TOTAL_SENSOR in s.name,
    )
    return 0.0 if value is None else value


def select_gpu_load(tree: HardwareTree) -> Optional[float]:
    """GPU load in percent, or None when the tree has no GPU load sensor."""
    return _last_match(
        tree.devices(),
        lambda d: d.kind.is_gpu,
        lambda s: s.kind == SensorKind.LOAD,
    )


def _is_used_memory(sensor: Sensor) -> bool:
    return sensor.kind == SensorKind.DATA and (
        sensor.name == USED_MEMORY_SENSOR or MEMORY_USED_FRAGMENT in sensor.name
    )


def select_memory_used(tree: HardwareTree) -> float:
    """Used memory in GB, 0.0 when no memory sensor exists."""
    value = _last_match(
        tree.devices(),
        lambda d: d.kind == DeviceKind.MEMORY,
        _is_used_memory,
    )
    return 0.0 if value is None else value


_SELECTORS = {
    MetricCategory.CPU_LOAD: select_cpu_load,
    MetricCategory.GPU_LOAD: select_gpu_load,
    MetricCategory.MEMORY_USED: select_memory_used,
}


def select(tree: HardwareTree, category: MetricCategory) -> Optional[float]:
    """Select the raw reading for a metric category."""
    return _SELECTORS[category](tree)
