"""
Rolling Smoother.

Fixed-size circular history that turns noisy CPU readings into a
moving average.
"""

from typing import List


WINDOW_SIZE = 3


class RollingWindow:
    """
    Circular buffer of the most recent readings.

    The average only covers filled slots, so the first reading is
    returned unchanged and the window never divides by empty slots.
    """

    def __init__(self):
        self._slots: List[float] = [0.0] * WINDOW_SIZE
        self._filled_count = 0
        self._next_slot = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def filled_count(self) -> int:
        return self._filled_count

    @property
    def next_slot(self) -> int:
        return self._next_slot

    @property
    def average(self) -> float:
        """Mean of the filled slots, 0.0 before the first push."""
        if self._filled_count == 0:
            return 0.0
        return sum(self._slots[:self._filled_count]) / self._filled_count

    def push(self, value: float) -> float:
        """Store a reading, overwriting the oldest when full, and return the average."""
        self._slots[self._next_slot] = float(value)
        self._next_slot = (self._next_slot + 1) % self.capacity
        if self._filled_count < self.capacity:
            self._filled_count += 1
        return self.average

    def __len__(self) -> int:
        return self._filled_count

    def __repr__(self) -> str:
        return (
            f"RollingWindow(capacity={self.capacity}, "
            f"filled={self._filled_count}, average={self.average:.2f})"
        )
