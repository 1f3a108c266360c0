"""
Telemetry engine: the single-writer, many-reader state of one device.

Owns the snapshot store, the rolling history, the retained previous
``grid_in_wh_today`` counter, and the last known probe temperature. All of
it lives on one instance (no module globals), so several devices could be
monitored side by side by building several engines.

Locking discipline:
- The poller calls :meth:`TelemetryEngine.record_success` or
  :meth:`TelemetryEngine.record_failure` after its network fetch and probe
  have completed. Each takes the exclusive lock once, for the counter
  update, snapshot publish, and history push together.
- Readers go through :meth:`TelemetryEngine.read_locked` (used by the query
  facade), which holds the shared side for one snapshot read plus the
  reduction passes over the history.

No I/O happens while the lock is held, so hold time is bounded by the
history size rather than network latency.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from solarmon.src.history import DEFAULT_CAPACITY, HistoryBuffer
from solarmon.src.metrics import BATTERY_CAPACITY_KWH, BATTERY_EMPTY_AT_SOC_PERCENT
from solarmon.src.models import Sample, TelemetryReading
from solarmon.src.normalizer import generator_running_since, normalize
from solarmon.src.rwlock import ReadWriteLock
from solarmon.src.store import SnapshotStore


class TelemetryEngine:
    """Shared telemetry state for one monitored device.

    Args:
        history_capacity: Number of samples kept in the rolling window.
        battery_capacity_kwh: Usable battery capacity used by estimators.
        battery_empty_at_soc_pct: SOC treated as empty by estimators.
    """

    def __init__(
        self,
        *,
        history_capacity: int = DEFAULT_CAPACITY,
        battery_capacity_kwh: float = BATTERY_CAPACITY_KWH,
        battery_empty_at_soc_pct: float = BATTERY_EMPTY_AT_SOC_PERCENT,
    ) -> None:
        self.battery_capacity_kwh = battery_capacity_kwh
        self.battery_empty_at_soc_pct = battery_empty_at_soc_pct
        self._lock = ReadWriteLock()
        self._store = SnapshotStore()
        self._history = HistoryBuffer(history_capacity)
        self._prev_grid_in_wh: float = 0.0
        self._last_temperature_c: float | None = None

    # ------------------------------------------------------------------
    # Writer side (poller only)
    # ------------------------------------------------------------------

    def record_success(
        self,
        reading: TelemetryReading,
        temperature_c: float | None,
        ts: datetime,
    ) -> Sample:
        """Publish a successful cycle and append it to the history.

        Args:
            reading: Decoded device document for this cycle.
            temperature_c: Probe result for this cycle, or None if the probe
                failed. None and non-finite values keep the previously
                retained temperature.
            ts: Acquisition time.

        Returns:
            The published, immutable Sample.
        """
        with self._lock.write_locked():
            if temperature_c is not None and math.isfinite(temperature_c):
                self._last_temperature_c = temperature_c
            current_wh = reading.items.grid_in_wh_today
            running = generator_running_since(self._prev_grid_in_wh, current_wh)
            self._prev_grid_in_wh = current_wh
            sample = normalize(
                reading,
                temperature_c=self._last_temperature_c,
                generator_running=running,
                ts=ts,
            )
            self._store.publish(sample, None)
            self._history.push(sample)
        return sample

    def record_failure(self, error: Exception) -> None:
        """Publish a failed cycle.

        Only the snapshot's error slot changes. The history, the retained
        counter, and the retained temperature are left as they were.
        """
        with self._lock.write_locked():
            self._store.publish(None, error)

    # ------------------------------------------------------------------
    # Reader side
    # ------------------------------------------------------------------

    @contextmanager
    def read_locked(
        self,
    ) -> Iterator[tuple[SnapshotStore, HistoryBuffer, float | None]]:
        """Yield the store, history, and last temperature under the shared lock.

        The lock is not reentrant: do not call other reader methods of the
        engine inside the block, and do not keep references past it.
        """
        with self._lock.read_locked():
            yield self._store, self._history, self._last_temperature_c

    def read_snapshot(self) -> tuple[Sample | None, Exception | None]:
        """Return the latest (sample, error) pair."""
        with self._lock.read_locked():
            return self._store.read()

    def history_samples(self) -> tuple[Sample, ...]:
        """Return a copy of the rolling history, oldest first."""
        with self._lock.read_locked():
            return self._history.samples()

    @property
    def history_size(self) -> int:
        with self._lock.read_locked():
            return len(self._history)

    @property
    def last_temperature_c(self) -> float | None:
        """Last successfully observed probe temperature, if any."""
        with self._lock.read_locked():
            return self._last_temperature_c

    @property
    def has_data(self) -> bool:
        with self._lock.read_locked():
            return self._store.has_data

    def status(self) -> dict[str, object]:
        """Bookkeeping for the health endpoint, read in one pass."""
        with self._lock.read_locked():
            last_success = self._store.last_success_at
            last_attempt = self._store.last_attempt_at
            return {
                "has_data": self._store.has_data,
                "history_size": len(self._history),
                "last_success_ts": last_success.isoformat() if last_success else None,
                "last_attempt_ts": last_attempt.isoformat() if last_attempt else None,
            }
