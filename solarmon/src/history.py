"""
Fixed-capacity rolling history of recent samples.

An index-based ring buffer: a preallocated arena of ``capacity`` slots plus
a head index and a count. Pushing beyond capacity overwrites the oldest slot
in place, so eviction never reallocates or shifts the arena.

The buffer is not internally synchronized. The TelemetryEngine guards it
with its read/write lock: the poller pushes under the exclusive side, and
readers reduce under the shared side.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TypeVar

from solarmon.src.models import Sample

R = TypeVar("R")

DEFAULT_CAPACITY: int = 50
"""Number of samples kept when no capacity is configured (~8 min at 10 s)."""


class HistoryBuffer:
    """Oldest-first FIFO of Samples with a fixed capacity.

    Args:
        capacity: Maximum number of samples retained. Must be >= 1.

    Raises:
        ValueError: If *capacity* is less than 1.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be >= 1 (got {capacity})")
        self._capacity = capacity
        self._slots: list[Sample | None] = [None] * capacity
        self._head = 0  # index of the oldest sample
        self._count = 0

    @property
    def capacity(self) -> int:
        """Maximum number of samples retained."""
        return self._capacity

    def __len__(self) -> int:
        return self._count

    @property
    def latest(self) -> Sample | None:
        """Most recently pushed sample, or None when empty."""
        if self._count == 0:
            return None
        return self._slots[(self._head + self._count - 1) % self._capacity]

    def push(self, sample: Sample) -> None:
        """Append *sample*, evicting the oldest entry when full."""
        if self._count < self._capacity:
            self._slots[(self._head + self._count) % self._capacity] = sample
            self._count += 1
            return
        self._slots[self._head] = sample
        self._head = (self._head + 1) % self._capacity

    def _iter_oldest_first(self) -> Iterator[Sample]:
        for offset in range(self._count):
            yield self._slots[(self._head + offset) % self._capacity]

    def samples(self) -> tuple[Sample, ...]:
        """Return the current contents, oldest first.

        The tuple is a copy of the arena order; the samples themselves are
        frozen, so nothing returned here can alter the buffer.
        """
        return tuple(self._iter_oldest_first())

    def reduce(self, fn: Callable[[R, Sample], R], initial: R = 0.0) -> R:
        """Fold *fn* over the samples oldest-first.

        Returns *initial* unchanged when the buffer is empty, which callers
        treat as the neutral "no trend" value rather than an error.
        """
        acc = initial
        for sample in self._iter_oldest_first():
            acc = fn(acc, sample)
        return acc

    def mean(self, key: Callable[[Sample], float]) -> float:
        """Arithmetic mean of ``key(sample)`` over the buffer; 0.0 when empty."""
        if self._count == 0:
            return 0.0
        total = self.reduce(lambda acc, s: acc + key(s), 0.0)
        return total / self._count
