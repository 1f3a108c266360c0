"""
Snapshot store holding the outcome of the most recent poll attempt.

Holds exactly one ``(sample, error)`` pair. A successful cycle publishes
``(sample, None)``; a failed cycle publishes ``(None, error)``. The pair is
stored as a single tuple and replaced in one assignment, so a reader never
sees half of one publish and half of another.

A failed publish only replaces the pair here; the rolling history keeps the
samples of earlier successful cycles.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from datetime import UTC, datetime

from solarmon.src.models import Sample


class SnapshotStore:
    """Latest (sample, error) pair plus success/attempt bookkeeping."""

    def __init__(self) -> None:
        self._pair: tuple[Sample | None, Exception | None] = (None, None)
        self._has_data = False
        self._last_success_at: datetime | None = None
        self._last_attempt_at: datetime | None = None

    def publish(self, sample: Sample | None, error: Exception | None) -> None:
        """Replace the current pair.

        Exactly one of *sample* and *error* must be given; a failed fetch
        carries no partial sample.

        Raises:
            ValueError: If both or neither of *sample* and *error* are given.
        """
        if (sample is None) == (error is None):
            raise ValueError("Exactly one of sample and error must be provided")
        now = datetime.now(tz=UTC)
        self._pair = (sample, error)
        self._last_attempt_at = now
        if sample is not None:
            self._has_data = True
            self._last_success_at = now

    def read(self) -> tuple[Sample | None, Exception | None]:
        """Return the current pair; ``(None, None)`` before any publish."""
        return self._pair

    @property
    def has_data(self) -> bool:
        """True once any successful publish has happened."""
        return self._has_data

    @property
    def last_success_at(self) -> datetime | None:
        return self._last_success_at

    @property
    def last_attempt_at(self) -> datetime | None:
        return self._last_attempt_at
