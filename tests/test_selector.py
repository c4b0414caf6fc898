"""Tests for sensor selection rules."""

from enginestats.core.models import Device, DeviceKind, HardwareTree, Sensor, SensorKind
from enginestats.core.selector import (
    MetricCategory,
    select,
    select_cpu_load,
    select_gpu_load,
    select_memory_used,
)

from .conftest import cpu, gpu, memory


def test_last_cpu_match_wins():
    tree = HardwareTree(roots=[cpu(50.0, name="CPU 0"), cpu(70.0, name="CPU 1")])
    assert select_cpu_load(tree) == 70.0


def test_cpu_total_preferred_over_core_sensors():
    tree = HardwareTree(roots=[cpu(33.0, cores=[90.0, 10.0])])
    assert select_cpu_load(tree) == 33.0


def test_cpu_name_match_is_substring():
    device = Device(DeviceKind.CPU, "CPU", [Sensor(SensorKind.LOAD, "CPU Total Load", 12.0)])
    assert select_cpu_load(HardwareTree(roots=[device])) == 12.0


def test_cpu_ignores_wrong_kinds():
    tree = HardwareTree(roots=[
        Device(DeviceKind.OTHER, "Board", [Sensor(SensorKind.LOAD, "CPU Total", 99.0)]),
        Device(DeviceKind.CPU, "CPU", [Sensor(SensorKind.DATA, "CPU Total", 88.0)]),
    ])
    assert select_cpu_load(tree) == 0.0


def test_cpu_default_when_absent():
    assert select_cpu_load(HardwareTree()) == 0.0


def test_gpu_absent_is_none():
    tree = HardwareTree(roots=[cpu(10.0), memory(4.0)])
    assert select_gpu_load(tree) is None


def test_gpu_idle_is_zero_not_none():
    tree = HardwareTree(roots=[gpu(0.0)])
    assert select_gpu_load(tree) == 0.0


def test_gpu_last_match_across_vendors():
    tree = HardwareTree(roots=[
        gpu(15.0, kind=DeviceKind.GPU_NVIDIA),
        gpu(60.0, kind=DeviceKind.GPU_AMD),
    ])
    assert select_gpu_load(tree) == 60.0


def test_gpu_last_load_sensor_on_device_wins():
    device = Device(DeviceKind.GPU_NVIDIA, "GPU", [
        Sensor(SensorKind.LOAD, "GPU Core", 80.0),
        Sensor(SensorKind.LOAD, "GPU Memory", 20.0),
    ])
    assert select_gpu_load(HardwareTree(roots=[device])) == 20.0


def test_gpu_without_reading_is_absent():
    tree = HardwareTree(roots=[gpu(None)])
    assert select_gpu_load(tree) is None


def test_unread_sensor_does_not_clear_earlier_match():
    tree = HardwareTree(roots=[cpu(45.0), cpu(None)])
    assert select_cpu_load(tree) == 45.0


def test_memory_used_memory_name():
    assert select_memory_used(HardwareTree(roots=[memory(7.5)])) == 7.5


def test_memory_used_fragment_name():
    tree = HardwareTree(roots=[memory(3.2, sensor_name="Virtual Memory Used")])
    assert select_memory_used(tree) == 3.2


def test_memory_default_when_absent():
    assert select_memory_used(HardwareTree(roots=[cpu(10.0)])) == 0.0


def test_memory_sensor_in_child_device_is_visited_in_order():
    parent = memory(8.0)
    parent.children.append(memory(2.0, name="Child"))
    tree = HardwareTree(roots=[parent])
    assert select_memory_used(tree) == 2.0


def test_select_dispatches_by_category(full_tree):
    assert select(full_tree, MetricCategory.CPU_LOAD) == 25.0
    assert select(full_tree, MetricCategory.GPU_LOAD) == 40.0
    assert select(full_tree, MetricCategory.MEMORY_USED) == 7.84
