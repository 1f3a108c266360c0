"""
Solar monitor configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
All configuration values come from environment variables or .env files;
the inverter URL is never hardcoded.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings


class MonitorSettings(BaseSettings):
    """Solar monitor configuration.

    All values are loaded from environment variables. TELEMETRY_URL is
    required; everything else has a default matching the reference site
    (24 kWh bank, 30% empty threshold, 10 s poll period).

    Attributes:
        telemetry_url: Full URL of the inverter's solarmonweb point endpoint.
        telemetry_timeout_s: Timeout for one telemetry request in seconds.
        temperature_command: Shell-style command printing a Celsius value.
        temperature_timeout_s: Timeout for one probe invocation in seconds.
        poll_interval_s: Seconds between poll cycles.
        history_capacity: Number of samples kept in the rolling window.
        battery_capacity_kwh: Usable battery bank capacity.
        battery_empty_at_soc_pct: SOC treated as "empty" for estimates.
        http_host: Bind address of the HTTP responder.
        http_port: Bind port of the HTTP responder.
        log_level: Root logging level name.
    """

    telemetry_url: str
    telemetry_timeout_s: float = 5.0
    temperature_command: str = "./temper/temper -c"
    temperature_timeout_s: float = 5.0
    poll_interval_s: float = 10.0
    history_capacity: int = 50
    battery_capacity_kwh: float = 24.0
    battery_empty_at_soc_pct: float = 30.0
    http_host: str = "0.0.0.0"
    http_port: int = 80
    log_level: str = "INFO"

    @field_validator("telemetry_url")
    @classmethod
    def telemetry_url_must_be_http(cls, v: str) -> str:
        """Validate that the telemetry URL is an http(s) URL."""
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("TELEMETRY_URL must start with http:// or https://")
        return v

    @field_validator("telemetry_timeout_s", "temperature_timeout_s")
    @classmethod
    def timeouts_must_be_positive(cls, v: float) -> float:
        """Every external call carries a bounded, non-zero timeout."""
        if v <= 0:
            raise ValueError("Timeouts must be > 0 seconds")
        return v

    @field_validator("temperature_command")
    @classmethod
    def temperature_command_must_not_be_empty(cls, v: str) -> str:
        """Validate the probe command is not blank."""
        if not v.strip():
            raise ValueError("TEMPERATURE_COMMAND must not be empty")
        return v

    @field_validator("poll_interval_s")
    @classmethod
    def poll_interval_must_be_reasonable(cls, v: float) -> float:
        """Minimum 1-second interval to avoid hammering the inverter."""
        if v < 1:
            raise ValueError("POLL_INTERVAL_S must be >= 1")
        return v

    @field_validator("history_capacity")
    @classmethod
    def history_capacity_must_be_valid(cls, v: int) -> int:
        """Validate history capacity is between 1 and 10000."""
        if v < 1 or v > 10000:
            raise ValueError("HISTORY_CAPACITY must be >= 1 and <= 10000")
        return v

    @field_validator("battery_capacity_kwh")
    @classmethod
    def battery_capacity_must_be_positive(cls, v: float) -> float:
        """Validate the battery capacity is positive."""
        if v <= 0:
            raise ValueError("BATTERY_CAPACITY_KWH must be > 0")
        return v

    @field_validator("battery_empty_at_soc_pct")
    @classmethod
    def empty_threshold_must_be_percentage(cls, v: float) -> float:
        """Validate the empty threshold is a percentage."""
        if v < 0 or v > 100:
            raise ValueError("BATTERY_EMPTY_AT_SOC_PCT must be between 0 and 100")
        return v

    @field_validator("http_port")
    @classmethod
    def http_port_must_be_valid(cls, v: int) -> int:
        """Validate HTTP port is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("HTTP_PORT must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Validate and normalise the logging level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL '{v}' is not a known logging level")
        return level

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
