"""
Unit tests for the solar monitor entrypoint module.

Tests verify:
- configure_logging() installs a JSON formatter on the root logger.
- Exceptions are included in JSON log records.
- The startup config summary masks the telemetry URL query and credentials.
- build_app() wires settings into the engine, client, probe, and poller.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from solarmon.src.main import (
    _masked_url,
    build_app,
    configure_logging,
    log_config_summary,
)


@pytest.fixture()
def _restore_root_logger() -> Generator[None, None, None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _make_settings(**overrides: object) -> MagicMock:
    """Create a mock MonitorSettings with sensible defaults."""
    defaults = {
        "telemetry_url": "http://admin:pw@192.168.1.45/cgi-bin/solarmonweb/devices/ABC/point?x=1",
        "telemetry_timeout_s": 5.0,
        "temperature_command": "./temper/temper -c",
        "temperature_timeout_s": 5.0,
        "poll_interval_s": 10.0,
        "history_capacity": 20,
        "battery_capacity_kwh": 36.0,
        "battery_empty_at_soc_pct": 25.0,
        "http_host": "0.0.0.0",
        "http_port": 8080,
        "log_level": "INFO",
    }
    defaults.update(overrides)
    settings = MagicMock()
    for key, value in defaults.items():
        setattr(settings, key, value)
    return settings


@pytest.mark.usefixtures("_restore_root_logger")
class TestConfigureLogging:
    def test_emits_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("DEBUG")

        logging.getLogger("solarmon.test").debug("hello %s", "world")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["level"] == "DEBUG"
        assert entry["logger"] == "solarmon.test"
        assert entry["msg"] == "hello world"
        assert "T" in entry["ts"]
        assert logging.getLogger().level == logging.DEBUG

    def test_includes_exception(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging()

        try:
            raise RuntimeError("kaput")
        except RuntimeError:
            logging.getLogger("solarmon.test").error("failed", exc_info=True)

        entry = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert "RuntimeError: kaput" in entry["exception"]

    def test_replaces_existing_handlers(self) -> None:
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1


class TestConfigSummary:
    def test_masked_url_drops_query_and_credentials(self) -> None:
        assert (
            _masked_url("http://admin:pw@10.0.0.5:8080/point?_=123")
            == "http://10.0.0.5:8080/point"
        )

    def test_summary_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="solarmon.src.main"):
            log_config_summary(_make_settings())

        assert "poll_interval_s=10.0" in caplog.text
        assert "history_capacity=20" in caplog.text
        assert "192.168.1.45/cgi-bin/solarmonweb/devices/ABC/point" in caplog.text
        assert "pw@" not in caplog.text
        assert "x=1" not in caplog.text


class TestBuildApp:
    def test_engine_configured_from_settings(self) -> None:
        app = build_app(_make_settings())

        engine = app.state.engine
        assert engine.battery_capacity_kwh == 36.0
        assert engine.battery_empty_at_soc_pct == 25.0
        assert engine._history.capacity == 20
