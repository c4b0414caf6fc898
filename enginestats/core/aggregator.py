"""
Snapshot Aggregator.

Runs one sampling cycle: refresh the hardware tree, select the raw
readings, smooth CPU load and assemble a Snapshot.
"""

import logging
import time
from datetime import datetime
from typing import Optional

from .models import HardwareTree, Snapshot, SnapshotStatus, round_half_up
from .refresher import refresh_tree
from .selector import select_cpu_load, select_gpu_load, select_memory_used
from .smoother import RollingWindow


logger = logging.getLogger(__name__)


def sample(tree: HardwareTree, smoother: RollingWindow) -> Snapshot:
    """
    Sample the tree once and return a Snapshot.

    Never raises for hardware faults. If any step before smoothing fails,
    the returned snapshot carries an error status and nothing is pushed
    into the smoother.
    """
    start_time = time.time()

    try:
        refresh_tree(tree)
        raw_cpu = select_cpu_load(tree)
        gpu = select_gpu_load(tree)
        ram = select_memory_used(tree)
    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        message = f"{type(e).__name__}: {e}"
        logger.warning(f"Sampling cycle failed: {message}")
        return Snapshot.failed(message, collection_duration_ms=duration_ms)

    cpu = smoother.push(raw_cpu)
    duration_ms = (time.time() - start_time) * 1000
    logger.debug(f"Raw CPU {raw_cpu:.2f}%, smoothed {cpu:.2f}% over {len(smoother)} samples")

    return Snapshot(
        cpu_percent=round_half_up(cpu),
        gpu_percent=round_half_up(gpu) if gpu is not None else None,
        ram_used_gb=round_half_up(ram),
        status=SnapshotStatus.success(),
        timestamp=datetime.now(),
        collection_duration_ms=duration_ms,
    )


class SnapshotAggregator:
    """
    Owns the hardware tree and CPU smoothing state for one engine.

    Cycles must not overlap on the same instance; the scheduler calls
    ``sample()`` once per tick and waits for it to return.
    """

    def __init__(self, tree: HardwareTree, window: Optional[RollingWindow] = None):
        self.tree = tree
        self.window = window if window is not None else RollingWindow()
        self._cycles = 0
        self._failures = 0

    @property
    def cycles(self) -> int:
        """Number of cycles run so far."""
        return self._cycles

    @property
    def failures(self) -> int:
        """Number of cycles that ended with an error status."""
        return self._failures

    def sample(self) -> Snapshot:
        """Run one sampling cycle."""
        snapshot = sample(self.tree, self.window)
        self._cycles += 1
        if not snapshot.status.ok:
            self._failures += 1
        return snapshot
