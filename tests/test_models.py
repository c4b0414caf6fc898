"""Tests for snapshot presentation."""

import dataclasses

import pytest

from enginestats.core.models import DeviceKind, Snapshot, SnapshotStatus, round_half_up


def test_format_with_gpu():
    snapshot = Snapshot(cpu_percent=12.5, gpu_percent=48.0, ram_used_gb=7.9)
    assert snapshot.format() == "CPU: 12.5% | GPU: 48.0% | RAM: 7.9GB"


def test_format_without_gpu_uses_marker():
    snapshot = Snapshot(cpu_percent=12.5, gpu_percent=None, ram_used_gb=7.9)
    assert snapshot.format() == "CPU: 12.5% | GPU: N/A | RAM: 7.9GB"
    assert snapshot.format(unavailable="unavailable") == "CPU: 12.5% | GPU: unavailable | RAM: 7.9GB"
    assert str(snapshot) == snapshot.format()


def test_format_rounds_smoothed_cpu():
    assert Snapshot(cpu_percent=33.26).format().startswith("CPU: 33.3%")


def test_snapshot_is_immutable():
    snapshot = Snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.cpu_percent = 1.0


def test_to_dict_keeps_gpu_sentinel():
    data = Snapshot(cpu_percent=1.0).to_dict()
    assert data["gpu_percent"] is None
    assert data["status"] == "ok"
    assert data["error"] is None


def test_failed_snapshot():
    snapshot = Snapshot.failed("boom")
    assert snapshot.status == SnapshotStatus.error("boom")
    assert not snapshot.has_gpu


def test_gpu_kinds():
    assert DeviceKind.GPU_NVIDIA.is_gpu
    assert DeviceKind.GPU_AMD.is_gpu
    assert not DeviceKind.CPU.is_gpu


def test_format_rounds_midpoints_up():
    snapshot = Snapshot(cpu_percent=10.25, gpu_percent=0.05, ram_used_gb=2.45)
    assert snapshot.format() == "CPU: 10.3% | GPU: 0.1% | RAM: 2.5GB"


def test_round_half_up():
    assert round_half_up(10.25) == 10.3
    assert round_half_up(33.26) == 33.3
    assert round_half_up(0.0) == 0.0


def test_has_gpu_for_idle_gpu():
    assert Snapshot(gpu_percent=0.0).has_gpu
    assert not Snapshot().has_gpu
