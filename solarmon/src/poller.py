"""
Fixed-period poller driving acquisition for one device.

Each cycle fetches a telemetry reading and a probe temperature concurrently,
with no engine lock held. A temperature read still pending when the cycle
ends (a failed fetch) is cancelled. The outcome is then published to the
engine in one short exclusive section:

- success: ``engine.record_success`` (generator flag, counter update,
  snapshot publish, history push).
- failure: ``engine.record_failure``; the history receives nothing for the
  cycle.

Failures are never retried within a cycle and there is no backoff: the
inverter sits on the local LAN and is always expected to be reachable, so
the next scheduled cycle is the retry. The loop only ends when its shutdown
event is set.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from solarmon.src.errors import AcquisitionError
from solarmon.src.metrics import total_generation_w

if TYPE_CHECKING:
    from solarmon.src.engine import TelemetryEngine
    from solarmon.src.models import Sample
    from solarmon.src.probe import TemperatureProbe
    from solarmon.src.source import TelemetryClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_S: float = 10.0


def _log_cycle(sample: Sample) -> None:
    """Log one cycle summary line: SOC, power flows, energy today, temperature."""
    logger.info(
        "Poll success: soc=%.1f%% battery_w=%d load_w=%d shunt_w=%d "
        "solar_w=%d total_gen_w=%d gen_kwh_today=%.2f load_kwh_today=%.2f "
        "temp_c=%s generator_running=%s",
        sample.soc_percent,
        int(sample.battery_power_w),
        int(sample.load_power_w),
        int(sample.shunt_power_w),
        int(sample.solar_inverter_power_w),
        int(total_generation_w(sample)),
        sample.grid_in_energy_today_wh / 1000.0,
        sample.load_energy_today_wh / 1000.0,
        "n/a" if sample.temperature_c is None else f"{sample.temperature_c:.2f}",
        sample.generator_running,
    )


async def _cancel(task: asyncio.Task[float | None]) -> None:
    """Cancel an unfinished task and wait for its cleanup."""
    if task.done():
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


class Poller:
    """Acquires samples for a TelemetryEngine on a fixed schedule.

    Args:
        client: Telemetry source.
        probe: Temperature probe.
        engine: Engine receiving each cycle's outcome.
    """

    def __init__(
        self,
        *,
        client: TelemetryClient,
        probe: TemperatureProbe,
        engine: TelemetryEngine,
    ) -> None:
        self._client = client
        self._probe = probe
        self._engine = engine

    async def poll_once(self) -> Sample | None:
        """Execute a single fetch-and-publish cycle.

        Catches all exceptions so that the caller's loop is never broken.

        Returns:
            The published Sample, or None if the cycle failed.
        """
        temperature_task = asyncio.create_task(self._probe.read())
        try:
            reading = await self._client.fetch()
            temperature_c = await temperature_task
        except AcquisitionError as exc:
            logger.warning("Poll failed: %s", exc)
            self._engine.record_failure(exc)
            return None
        except Exception as exc:
            logger.error("Poll cycle error", exc_info=True)
            self._engine.record_failure(exc)
            return None
        finally:
            await _cancel(temperature_task)

        sample = self._engine.record_success(
            reading,
            temperature_c,
            datetime.now(tz=UTC),
        )
        _log_cycle(sample)
        return sample

    async def run(
        self,
        *,
        interval_s: float = DEFAULT_POLL_INTERVAL_S,
        shutdown_event: asyncio.Event,
    ) -> None:
        """Run the poll loop until shutdown_event is set.

        Executes :meth:`poll_once`, then waits ``interval_s`` seconds,
        checking the shutdown event between iterations.

        Args:
            interval_s: Seconds between poll cycles.
            shutdown_event: Event to signal shutdown.
        """
        logger.info("Poll loop started (interval=%ss)", interval_s)
        while not shutdown_event.is_set():
            await self.poll_once()
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(shutdown_event.wait(), timeout=interval_s)
        logger.info("Poll loop stopped")
