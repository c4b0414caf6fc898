"""Shared fixtures: hand-built hardware trees."""

import pytest

from enginestats.core.models import Device, DeviceKind, HardwareTree, Sensor, SensorKind


def cpu(total, name="CPU", cores=()):
    sensors = [Sensor(SensorKind.LOAD, f"CPU Core #{i + 1}", v) for i, v in enumerate(cores)]
    sensors.append(Sensor(SensorKind.LOAD, "CPU Total", total))
    return Device(DeviceKind.CPU, name, sensors)


def gpu(load, kind=DeviceKind.GPU_NVIDIA, name="GPU"):
    return Device(kind, name, [Sensor(SensorKind.LOAD, "GPU Core", load)])


def memory(used, name="Generic Memory", sensor_name="Used Memory"):
    return Device(DeviceKind.MEMORY, name, [
        Sensor(SensorKind.LOAD, "Memory", 50.0),
        Sensor(SensorKind.DATA, sensor_name, used),
    ])


class ScriptedReader:
    """Sensor reader that returns queued values and can be told to fail."""

    def __init__(self, *readings):
        self.readings = list(readings)
        self.calls = 0
        self.error = None

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


@pytest.fixture
def full_tree():
    return HardwareTree(roots=[cpu(25.0), gpu(40.0), memory(7.84)])


@pytest.fixture
def no_gpu_tree():
    return HardwareTree(roots=[cpu(25.0), memory(7.84)])
