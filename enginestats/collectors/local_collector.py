"""
Local Hardware Tree Collector.

Builds a hardware tree for the local machine using psutil, with NVIDIA
GPUs attached through NVML when present.
"""

import logging
from typing import Dict, List, Optional

import psutil

from ..core.models import Device, DeviceKind, HardwareTree, Sensor, SensorKind
from ..core.selector import CPU_TOTAL_SENSOR, USED_MEMORY_SENSOR
from .nvidia_collector import discover_nvidia_devices


logger = logging.getLogger(__name__)

BYTES_PER_GB = 1024 ** 3


def _core_sensor_name(index: int) -> str:
    return f"CPU Core #{index + 1}"


def _read_cpu() -> Dict[str, Optional[float]]:
    """Per-core and total CPU load since the previous read."""
    per_core = psutil.cpu_percent(interval=None, percpu=True)
    values: Dict[str, Optional[float]] = {
        _core_sensor_name(i): float(load) for i, load in enumerate(per_core)
    }
    values[CPU_TOTAL_SENSOR] = sum(per_core) / len(per_core) if per_core else None
    return values


def build_cpu_device() -> Device:
    """Create the CPU device with one load sensor per logical core plus a total."""
    core_count = psutil.cpu_count(logical=True) or 0
    sensors = [Sensor(SensorKind.LOAD, _core_sensor_name(i)) for i in range(core_count)]
    sensors.append(Sensor(SensorKind.LOAD, CPU_TOTAL_SENSOR))

    # The first non-blocking call only primes psutil's counters
    psutil.cpu_percent(interval=None, percpu=True)

    return Device(
        kind=DeviceKind.CPU,
        name="CPU",
        sensors=sensors,
        reader=_read_cpu,
    )


def _read_memory() -> Dict[str, Optional[float]]:
    mem = psutil.virtual_memory()
    return {
        "Memory": float(mem.percent),
        USED_MEMORY_SENSOR: mem.used / BYTES_PER_GB,
        "Available Memory": mem.available / BYTES_PER_GB,
    }


def _read_swap() -> Dict[str, Optional[float]]:
    swap = psutil.swap_memory()
    return {
        "Virtual Memory Load": float(swap.percent),
        "Virtual Memory Used": swap.used / BYTES_PER_GB,
    }


def build_memory_device() -> Device:
    """Create the memory device, with swap as a child device."""
    swap = Device(
        kind=DeviceKind.OTHER,
        name="Virtual Memory",
        sensors=[
            Sensor(SensorKind.LOAD, "Virtual Memory Load"),
            Sensor(SensorKind.DATA, "Virtual Memory Used"),
        ],
        reader=_read_swap,
    )
    return Device(
        kind=DeviceKind.MEMORY,
        name="Generic Memory",
        sensors=[
            Sensor(SensorKind.LOAD, "Memory"),
            Sensor(SensorKind.DATA, USED_MEMORY_SENSOR),
            Sensor(SensorKind.DATA, "Available Memory"),
        ],
        children=[swap],
        reader=_read_memory,
    )


class LocalCollector:
    """
    Assembles the hardware tree of the local machine.

    Roots are ordered CPU, GPUs, memory. Disabled providers are left out
    of the tree entirely, which the sampler treats like absent hardware.
    """

    def __init__(
        self,
        collect_cpu: bool = True,
        collect_gpu: bool = True,
        collect_memory: bool = True,
    ):
        self.collect_cpu = collect_cpu
        self.collect_gpu = collect_gpu
        self.collect_memory = collect_memory

    def build_tree(self) -> HardwareTree:
        """Discover devices and return a tree ready to be refreshed."""
        roots: List[Device] = []

        if self.collect_cpu:
            roots.append(build_cpu_device())

        if self.collect_gpu:
            gpus = discover_nvidia_devices()
            if gpus:
                logger.info(f"Found {len(gpus)} NVIDIA GPU(s): {', '.join(g.name for g in gpus)}")
            else:
                logger.info("No supported GPU found")
            roots.extend(gpus)

        if self.collect_memory:
            roots.append(build_memory_device())

        logger.debug(f"Hardware tree has {len(roots)} root devices")
        return HardwareTree(roots=roots)
