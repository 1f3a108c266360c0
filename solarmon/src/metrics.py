"""
Trend metrics over the rolling history.

Pure functions: they read a HistoryBuffer (and the latest Sample where an
SOC is needed) and hold no state of their own. Every function is total:
an empty buffer, a missing snapshot, or a zero/opposite-signed power average
yields 0.0 ("no estimate") instead of raising.

Sign conventions follow the inverter: battery power is negative while
charging and positive while discharging.

Generation sign-folding rule: the grid input on this site is fed by a
generator, so both import and export on ``grid_w`` are counted as
generation, using ``abs(grid_w)``. The same rule is used for the
instantaneous total (:func:`total_generation_w`) and the average.

Display policy (hide estimates over 24 h, or when the average battery
power is within a 5 W noise floor) belongs to the dashboard, not here.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from solarmon.src.history import HistoryBuffer
from solarmon.src.models import Sample

BATTERY_CAPACITY_KWH: float = 24.0
"""Usable capacity of the battery bank."""

BATTERY_EMPTY_AT_SOC_PERCENT: float = 30.0
"""SOC at which the battery is treated as empty for time estimates."""


def total_generation_w(sample: Sample) -> float:
    """Instantaneous gross generation: ``|grid| + shunt + solar inverter``."""
    return (
        abs(sample.grid_power_w)
        + sample.shunt_power_w
        + sample.solar_inverter_power_w
    )


def average_battery_power_w(history: HistoryBuffer) -> float:
    """Mean battery power over the window; 0.0 when empty."""
    return history.mean(lambda s: s.battery_power_w)


def average_total_generation_w(history: HistoryBuffer) -> float:
    """Mean gross generation over the window; 0.0 when empty."""
    return history.mean(total_generation_w)


def average_load_w(history: HistoryBuffer) -> float:
    """Mean house load over the window; 0.0 when empty."""
    return history.mean(lambda s: s.load_power_w)


def _stored_kwh(latest: Sample, capacity_kwh: float) -> float:
    return (latest.soc_percent / 100.0) * capacity_kwh


def hours_until_full(
    history: HistoryBuffer,
    latest: Sample | None,
    *,
    capacity_kwh: float = BATTERY_CAPACITY_KWH,
) -> float:
    """Estimated hours until 100% SOC at the average charge rate.

    Returns 0.0 when there is no latest sample, or when the battery is not
    net-charging over the window (average battery power >= 0).
    """
    if latest is None:
        return 0.0
    needed_kwh = capacity_kwh - _stored_kwh(latest, capacity_kwh)

    avg_w = average_battery_power_w(history)
    if avg_w >= 0:
        return 0.0
    charging_kw = -avg_w / 1000.0
    if charging_kw <= 0:
        return 0.0
    return needed_kwh / charging_kw


def hours_until_empty(
    history: HistoryBuffer,
    latest: Sample | None,
    *,
    capacity_kwh: float = BATTERY_CAPACITY_KWH,
    empty_at_soc_percent: float = BATTERY_EMPTY_AT_SOC_PERCENT,
) -> float:
    """Estimated hours until the empty threshold at the average discharge rate.

    Returns 0.0 when there is no latest sample, or when the battery is not
    net-discharging over the window (average battery power <= 0).

    The result is negative when the SOC is already below the threshold;
    it is not clamped, so callers can gate on the sign.
    """
    if latest is None:
        return 0.0
    empty_kwh = (empty_at_soc_percent / 100.0) * capacity_kwh
    available_kwh = _stored_kwh(latest, capacity_kwh) - empty_kwh

    avg_w = average_battery_power_w(history)
    if avg_w <= 0:
        return 0.0
    return available_kwh / (avg_w / 1000.0)
