"""Bounded sliding window of gesture samples."""
from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True)
class Sample:
    """One position sample."""

    t: int    # ms since gesture start
    y: float  # px


class SampleWindow:
    """FIFO window holding the most recent ``capacity`` samples.

    Mutations and snapshots share a lock, so a reader on another thread
    always sees a complete window.
    """

    def __init__(self, capacity: int = 20) -> None:
        """Initialize the window."""
        if capacity < 1:
            msg = f"capacity must be at least 1, got {capacity}"
            raise ValueError(msg)
        self._capacity = int(capacity)
        self._samples: deque[Sample] = deque()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        """Get the capacity."""
        return self._capacity

    def clear(self) -> None:
        """Drop all samples."""
        with self._lock:
            self._samples.clear()

    def append(self, sample: Sample) -> None:
        """Append a sample, evicting the oldest ones beyond capacity."""
        with self._lock:
            self._samples.append(sample)
            while len(self._samples) > self._capacity:
                self._samples.popleft()

    def snapshot(self) -> tuple[Sample, ...]:
        """Get an immutable copy of the samples in arrival order."""
        with self._lock:
            return tuple(self._samples)

    def last(self) -> Sample | None:
        """Get the most recent sample."""
        with self._lock:
            return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)
