"""
Read-only query facade over the telemetry engine.

:meth:`QueryFacade.current_view` takes the engine's shared lock once, reads
the snapshot pair, and computes the derived metrics against the history as
it stands at that moment. The snapshot and the metrics in a view therefore
always belong together, even while the poller is publishing.

The facade never decides how failures are presented. A view carries the
error (if any) alongside stale-but-available trend metrics, and
:meth:`TelemetryView.to_payload` raises the distinct error for each failure
condition so the HTTP layer can map them to status codes.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from solarmon.src import metrics
from solarmon.src.engine import TelemetryEngine
from solarmon.src.errors import AcquisitionError, NoDataYetError
from solarmon.src.models import Sample


@dataclass(frozen=True)
class TelemetryView:
    """Consistent (snapshot, metrics) pair for one read."""

    sample: Sample | None
    error: Exception | None
    avg_battery_w: float
    avg_total_generation_w: float
    avg_load_w: float
    hours_until_full: float
    hours_until_empty: float
    temperature: float | None
    history_size: int

    @property
    def status(self) -> str:
        """``"error"`` if the latest poll failed, ``"no_data"`` before the
        first success, otherwise ``"ok"``."""
        if self.error is not None:
            return "error"
        if self.sample is None:
            return "no_data"
        return "ok"

    def to_payload(self) -> dict[str, Any]:
        """Serialise the view for the ``/data`` endpoint.

        The raw device document is merged at the top level (``device``,
        ``item_count``, ``items``, ``now``), followed by the derived fields.

        Raises:
            AcquisitionError: If the latest poll failed (checked first).
            NoDataYetError: If no poll has succeeded yet.
        """
        if self.error is not None:
            raise AcquisitionError(str(self.error)) from self.error
        if self.sample is None:
            raise NoDataYetError()

        payload: dict[str, Any] = self.sample.reading.model_dump(mode="json")
        payload["temperature"] = self.temperature
        payload["avg_battery_w"] = self.avg_battery_w
        payload["avg_total_generation_w"] = self.avg_total_generation_w
        payload["avg_load_w"] = self.avg_load_w
        payload["hours_until_full"] = self.hours_until_full
        payload["hours_until_empty"] = self.hours_until_empty
        return payload


class QueryFacade:
    """Entry point used by the HTTP responder to read engine state."""

    def __init__(self, engine: TelemetryEngine) -> None:
        self._engine = engine

    def current_view(self) -> TelemetryView:
        """Read the snapshot once and derive metrics under the same lock."""
        engine = self._engine
        with engine.read_locked() as (store, history, temperature):
            sample, error = store.read()
            return TelemetryView(
                sample=sample,
                error=error,
                avg_battery_w=metrics.average_battery_power_w(history),
                avg_total_generation_w=metrics.average_total_generation_w(history),
                avg_load_w=metrics.average_load_w(history),
                hours_until_full=metrics.hours_until_full(
                    history,
                    sample,
                    capacity_kwh=engine.battery_capacity_kwh,
                ),
                hours_until_empty=metrics.hours_until_empty(
                    history,
                    sample,
                    capacity_kwh=engine.battery_capacity_kwh,
                    empty_at_soc_percent=engine.battery_empty_at_soc_pct,
                ),
                temperature=temperature,
                history_size=len(history),
            )
