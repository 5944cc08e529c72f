"""Thread-safe ring buffer of order-parameter samples exposed via the API."""

from __future__ import annotations

import math
import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Sample:
    """One recorded order-parameter value."""

    sweep: int
    value: float
    timestamp: float


@dataclass(frozen=True, slots=True)
class RollingStats:
    count: int
    mean: float
    std: float
    minimum: float
    maximum: float


class MagnetizationHistory:
    """Bounded history of the last *capacity* samples. Oldest samples drop off.

    The frame thread appends, readers copy under a lock.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, capacity: int = 400) -> None:
        self._buffer: deque[Sample] = deque(maxlen=max(1, capacity))
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._buffer.maxlen or 0

    def append(self, sample: Sample) -> None:
        with self._lock:
            self._buffer.append(sample)

    def latest(self, count: int | None = None) -> list[Sample]:
        """Return the *count* most recent samples, oldest first."""
        with self._lock:
            items = list(self._buffer)
        if count is None:
            return items
        return items[-count:] if count > 0 else []

    def stats(self) -> RollingStats | None:
        """Mean / population standard deviation over the buffered samples."""
        values = [s.value for s in self.latest()]
        if not values:
            return None
        mean = sum(values) / len(values)
        variance = sum((v - mean) ** 2 for v in values) / len(values)
        return RollingStats(
            count=len(values),
            mean=mean,
            std=math.sqrt(variance),
            minimum=min(values),
            maximum=max(values),
        )

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
