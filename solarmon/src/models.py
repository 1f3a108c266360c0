"""
Pydantic models for Selectronic telemetry.

Defines the raw TelemetryReading document returned by the inverter's
solarmonweb point endpoint, and the normalized, immutable Sample that the
engine publishes to the snapshot store and the rolling history.

All models are frozen: once a Sample has been published, neither it nor the
raw reading it carries can be mutated by readers.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class DeviceInfo(BaseModel):
    """Identification block of the device document."""

    model_config = ConfigDict(frozen=True)

    name: str = ""


class TelemetryItems(BaseModel):
    """Instantaneous and cumulative values reported by the inverter.

    Power values are in watts, energy counters in watt-hours (the ``*_today``
    counters reset at the local day boundary on the device itself).
    Fields the device omits default to 0; unknown fields are ignored.

    Sign conventions:
        battery_w: Negative = charging, positive = discharging.
        grid_w: Positive = export, negative = import.
    """

    model_config = ConfigDict(frozen=True)

    battery_in_wh_today: float = 0.0
    battery_in_wh_total: float = 0.0
    battery_out_wh_today: float = 0.0
    battery_out_wh_total: float = 0.0
    battery_soc: float = 0.0
    battery_w: float = 0.0
    fault_code: int = 0
    fault_ts: int = 0
    gen_status: int = 0
    grid_in_wh_today: float = 0.0
    grid_in_wh_total: float = 0.0
    grid_out_wh_today: float = 0.0
    grid_out_wh_total: float = 0.0
    grid_w: float = 0.0
    load_w: float = 0.0
    load_wh_today: float = 0.0
    load_wh_total: float = 0.0
    shunt_w: float = 0.0
    solar_wh_today: float = 0.0
    solar_wh_total: float = 0.0
    solarinverter_w: float = 0.0
    timestamp: int = 0


class TelemetryReading(BaseModel):
    """One raw document from the solarmonweb point endpoint."""

    model_config = ConfigDict(frozen=True)

    device: DeviceInfo = DeviceInfo()
    item_count: int = 0
    items: TelemetryItems
    now: int = 0


class Sample(BaseModel):
    """A single normalized telemetry sample.

    Built once per successful poll cycle and never mutated afterwards.
    ``generator_running`` is derived at acquisition time by comparing this
    cycle's ``grid_in_energy_today_wh`` with the previous cycle's value.

    Attributes:
        soc_percent: Battery state of charge (0-100).
        battery_power_w: Battery power. Negative = charging.
        load_power_w: House load.
        grid_power_w: Grid/generator input. Positive = export.
        shunt_power_w: Power measured on the DC shunt (DC-coupled solar).
        solar_inverter_power_w: AC-coupled solar inverter output.
        load_energy_today_wh: Load energy consumed today.
        grid_in_energy_today_wh: Grid/generator energy imported today.
        fault_code: Inverter fault code (0 = no fault).
        generator_running: True when the import counter grew this cycle.
        temperature_c: Last observed probe temperature, or None if the probe
            has never produced a value.
        timestamp: Acquisition time.
        reading: Raw device document, with ``items.gen_status`` rewritten
            to match ``generator_running``.
    """

    model_config = ConfigDict(frozen=True)

    soc_percent: float
    battery_power_w: float
    load_power_w: float
    grid_power_w: float
    shunt_power_w: float
    solar_inverter_power_w: float
    load_energy_today_wh: float
    grid_in_energy_today_wh: float
    fault_code: int
    generator_running: bool
    temperature_c: float | None = None
    timestamp: datetime
    reading: TelemetryReading
