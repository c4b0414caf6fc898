"""
Data models for the hardware tree and sampled snapshots.

The hardware tree is a hierarchy of devices, each carrying sensors.
A Snapshot is the display-ready result of one sampling cycle.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional


class DeviceKind(Enum):
    """Closed set of device variants the sampler knows about."""

    CPU = "cpu"
    GPU_NVIDIA = "gpu_nvidia"
    GPU_AMD = "gpu_amd"
    MEMORY = "memory"
    OTHER = "other"

    @property
    def is_gpu(self) -> bool:
        return self in (DeviceKind.GPU_NVIDIA, DeviceKind.GPU_AMD)


def round_half_up(value: float) -> float:
    """Round to one decimal place, with midpoints rounded away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class SensorKind(Enum):
    """Sensor measurement kinds."""

    LOAD = "load"  # percent
    DATA = "data"  # device-specific unit, GB for memory
    OTHER = "other"


@dataclass
class Sensor:
    """A single measurement attached to a device."""

    kind: SensorKind
    name: str
    value: Optional[float] = None


# Returns the latest {sensor name: value} for one device.
SensorReader = Callable[[], Dict[str, Optional[float]]]


@dataclass
class Device:
    """
    A node in the hardware tree.

    Sensor values are pulled from ``reader`` on ``update()``. A device
    without a reader is static and keeps whatever values it was built with.
    """

    kind: DeviceKind
    name: str = ""
    sensors: List[Sensor] = field(default_factory=list)
    children: List["Device"] = field(default_factory=list)
    reader: Optional[SensorReader] = field(default=None, repr=False, compare=False)

    def sensor(self, name: str) -> Optional[Sensor]:
        """Get a sensor by name."""
        for sensor in self.sensors:
            if sensor.name == name:
                return sensor
        return None

    def update(self):
        """Refresh this device's own sensor values (children are not touched)."""
        if self.reader is None:
            return

        values = self.reader()
        for sensor in self.sensors:
            if sensor.name in values:
                sensor.value = values[sensor.name]


@dataclass
class HardwareTree:
    """Ordered collection of root devices."""

    roots: List[Device] = field(default_factory=list)

    def devices(self) -> Iterator[Device]:
        """Yield every device, depth-first, in declared child order."""
        stack = list(reversed(self.roots))
        while stack:
            device = stack.pop()
            yield device
            stack.extend(reversed(device.children))

    def refresh(self):
        """Update every device and sensor reachable from the roots."""
        from .refresher import refresh_tree

        refresh_tree(self)

    def __len__(self) -> int:
        return sum(1 for _ in self.devices())


@dataclass(frozen=True)
class SnapshotStatus:
    """Outcome of one sampling cycle."""

    ok: bool = True
    message: str = ""

    @classmethod
    def success(cls) -> "SnapshotStatus":
        return cls()

    @classmethod
    def error(cls, message: str) -> "SnapshotStatus":
        return cls(ok=False, message=message)


@dataclass(frozen=True)
class Snapshot:
    """Aggregated, display-ready telemetry for one cycle."""

    cpu_percent: float = 0.0
    gpu_percent: Optional[float] = None  # None means no GPU, not an idle one
    ram_used_gb: float = 0.0
    status: SnapshotStatus = field(default_factory=SnapshotStatus.success)
    timestamp: datetime = field(default_factory=datetime.now)
    collection_duration_ms: float = 0.0

    @classmethod
    def failed(cls, message: str, collection_duration_ms: float = 0.0) -> "Snapshot":
        """Build a snapshot for a cycle that could not read the hardware."""
        return cls(
            status=SnapshotStatus.error(message),
            collection_duration_ms=collection_duration_ms,
        )

    @property
    def has_gpu(self) -> bool:
        return self.gpu_percent is not None

    def format(self, unavailable: str = "N/A") -> str:
        """
        Render the snapshot as a single display line.

        ``unavailable`` replaces the GPU percentage when no GPU exists.
        """
        if not self.status.ok:
            return f"Error: {self.status.message}"

        if self.has_gpu:
            gpu = f"GPU: {round_half_up(self.gpu_percent):.1f}%"
        else:
            gpu = f"GPU: {unavailable}"
        cpu = round_half_up(self.cpu_percent)
        ram = round_half_up(self.ram_used_gb)
        return f"CPU: {cpu:.1f}% | {gpu} | RAM: {ram:.1f}GB"

    def __str__(self) -> str:
        return self.format()

    def to_dict(self) -> dict:
        """Convert snapshot to dictionary for serialization."""
        return {
            "cpu_percent": self.cpu_percent,
            "gpu_percent": self.gpu_percent,
            "ram_used_gb": self.ram_used_gb,
            "status": "ok" if self.status.ok else "error",
            "error": self.status.message or None,
            "timestamp": self.timestamp.isoformat(),
            "collection_duration_ms": self.collection_duration_ms,
        }
