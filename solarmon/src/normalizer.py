"""
Pure normalizer that converts a raw TelemetryReading into a Sample.

This is a pure module: no side effects, no I/O, no clock. The timestamp,
temperature, and generator flag are supplied by the caller (the engine owns
the retained previous-counter state and computes the flag under its lock).

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from datetime import datetime

from solarmon.src.models import Sample, TelemetryReading


def generator_running_since(previous_wh: float, current_wh: float) -> bool:
    """Return True when the grid-in counter strictly increased.

    The site's grid input is fed by a generator, so any growth of
    ``grid_in_wh_today`` between two cycles means the generator ran.
    An unchanged or reset (smaller) counter means it did not.
    """
    return current_wh > previous_wh


def normalize(
    reading: TelemetryReading,
    *,
    temperature_c: float | None,
    generator_running: bool,
    ts: datetime,
) -> Sample:
    """Convert a raw reading into an immutable Sample.

    Args:
        reading: Decoded device document.
        temperature_c: Last known probe temperature, or None if never seen.
        generator_running: Flag computed from the retained energy counter.
        ts: Acquisition time to embed in the sample.

    Returns:
        A frozen :class:`Sample`. ``reading.items.gen_status`` in the
        returned sample is 1 or 0 to agree with ``generator_running``.
    """
    items = reading.items
    rewritten = reading.model_copy(
        update={
            "items": items.model_copy(
                update={"gen_status": 1 if generator_running else 0}
            )
        }
    )
    return Sample(
        soc_percent=items.battery_soc,
        battery_power_w=items.battery_w,
        load_power_w=items.load_w,
        grid_power_w=items.grid_w,
        shunt_power_w=items.shunt_w,
        solar_inverter_power_w=items.solarinverter_w,
        load_energy_today_wh=items.load_wh_today,
        grid_in_energy_today_wh=items.grid_in_wh_today,
        fault_code=items.fault_code,
        generator_running=generator_running,
        temperature_c=temperature_c,
        timestamp=ts,
        reading=rewritten,
    )
