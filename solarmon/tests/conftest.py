"""
Shared test fixtures for solar monitor tests.

Provides environment variable fixtures for MonitorSettings tests and
factories for raw readings and samples. All monitor env vars are cleaned
before each test to ensure isolation.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from solarmon.src.models import Sample, TelemetryReading
from solarmon.src.normalizer import normalize

# All MonitorSettings environment variable names, used for cleanup.
_ALL_MONITOR_ENV_VARS = (
    "TELEMETRY_URL",
    "TELEMETRY_TIMEOUT_S",
    "TEMPERATURE_COMMAND",
    "TEMPERATURE_TIMEOUT_S",
    "POLL_INTERVAL_S",
    "HISTORY_CAPACITY",
    "BATTERY_CAPACITY_KWH",
    "BATTERY_EMPTY_AT_SOC_PCT",
    "HTTP_HOST",
    "HTTP_PORT",
    "LOG_LEVEL",
)

_TS = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_monitor_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all monitor env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_MONITOR_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def env_vars_full(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set every MonitorSettings environment variable.

    Returns the dict of env var names to values for assertion convenience.
    """
    env = {
        "TELEMETRY_URL": "http://192.168.1.45/cgi-bin/solarmonweb/devices/ABC/point",
        "TELEMETRY_TIMEOUT_S": "3",
        "TEMPERATURE_COMMAND": "/usr/local/bin/temper -c",
        "TEMPERATURE_TIMEOUT_S": "2",
        "POLL_INTERVAL_S": "15",
        "HISTORY_CAPACITY": "100",
        "BATTERY_CAPACITY_KWH": "48",
        "BATTERY_EMPTY_AT_SOC_PCT": "20",
        "HTTP_HOST": "127.0.0.1",
        "HTTP_PORT": "8080",
        "LOG_LEVEL": "debug",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


@pytest.fixture()
def env_vars_required_only(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set only TELEMETRY_URL; everything else falls back to defaults."""
    env = {"TELEMETRY_URL": "http://10.0.0.5/cgi-bin/solarmonweb/devices/XYZ/point"}
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


def build_reading(**items: float) -> TelemetryReading:
    """Build a TelemetryReading with the given item overrides."""
    return TelemetryReading.model_validate(
        {
            "device": {"name": "SP PRO"},
            "item_count": 22,
            "items": {
                "battery_soc": 50.0,
                "battery_w": 0.0,
                "load_w": 800.0,
                "grid_w": 0.0,
                "shunt_w": 0.0,
                "solarinverter_w": 0.0,
                "load_wh_today": 4000.0,
                "grid_in_wh_today": 0.0,
                "timestamp": 1760875200,
                **items,
            },
            "now": 1760875200,
        }
    )


def build_sample(
    *,
    generator_running: bool = False,
    temperature_c: float | None = None,
    ts: datetime = _TS,
    **items: float,
) -> Sample:
    """Build a Sample directly, bypassing the engine's counter logic."""
    return normalize(
        build_reading(**items),
        temperature_c=temperature_c,
        generator_running=generator_running,
        ts=ts,
    )


@pytest.fixture()
def reading_factory() -> Callable[..., TelemetryReading]:
    return build_reading


@pytest.fixture()
def sample_factory() -> Callable[..., Sample]:
    return build_sample
