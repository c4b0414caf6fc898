"""
NVIDIA GPU Collector.

Exposes NVIDIA GPUs as hardware tree devices using NVML (nvidia-ml-py).
"""

import logging
from typing import Dict, List, Optional

import pynvml

from ..core.models import Device, DeviceKind, Sensor, SensorKind


logger = logging.getLogger(__name__)

BYTES_PER_GB = 1024 ** 3

_initialized = False


def _decode(name) -> str:
    # Older NVML bindings return bytes
    if isinstance(name, bytes):
        return name.decode("utf-8", errors="replace")
    return str(name)


def _make_reader(handle):
    def read() -> Dict[str, Optional[float]]:
        util = pynvml.nvmlDeviceGetUtilizationRates(handle)
        mem = pynvml.nvmlDeviceGetMemoryInfo(handle)
        return {
            "GPU Memory Controller": float(util.memory),
            "GPU Memory Used": mem.used / BYTES_PER_GB,
            "GPU Core": float(util.gpu),
        }

    return read


def discover_nvidia_devices() -> List[Device]:
    """
    Return one device per NVIDIA GPU.

    An empty list means NVML is unusable here (no driver, no GPU), which
    is a normal state rather than an error.
    """
    global _initialized

    try:
        if not _initialized:
            pynvml.nvmlInit()
            _initialized = True
        count = pynvml.nvmlDeviceGetCount()
        devices = []
        for index in range(count):
            handle = pynvml.nvmlDeviceGetHandleByIndex(index)
            devices.append(Device(
                kind=DeviceKind.GPU_NVIDIA,
                name=_decode(pynvml.nvmlDeviceGetName(handle)),
                sensors=[
                    # Core load last so it is the one picked as GPU load
                    Sensor(SensorKind.LOAD, "GPU Memory Controller"),
                    Sensor(SensorKind.DATA, "GPU Memory Used"),
                    Sensor(SensorKind.LOAD, "GPU Core"),
                ],
                reader=_make_reader(handle),
            ))
        return devices
    except pynvml.NVMLError as e:
        logger.debug(f"NVML unavailable: {e}")
        return []


def shutdown():
    """Release NVML if it was initialized."""
    global _initialized

    if not _initialized:
        return
    try:
        pynvml.nvmlShutdown()
    except pynvml.NVMLError as e:
        logger.debug(f"NVML shutdown failed: {e}")
    _initialized = False
