"""
Solar monitor entrypoint.

Loads MonitorSettings, configures structured JSON logging, builds the
telemetry engine, client, probe, and poller, and serves the FastAPI app
with uvicorn. The poll loop runs inside the app lifespan, so it starts and
stops with the server.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from urllib.parse import urlsplit, urlunsplit

from solarmon.src.api import create_app
from solarmon.src.engine import TelemetryEngine
from solarmon.src.poller import Poller
from solarmon.src.probe import TemperatureProbe
from solarmon.src.source import TelemetryClient

if TYPE_CHECKING:
    from fastapi import FastAPI

    from solarmon.src.config import MonitorSettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


class _JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the monitor.

    Sets up the root logger with a JSON-formatted handler writing to stderr.

    Args:
        level: Root logging level name.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def _masked_url(url: str) -> str:
    """Drop credentials and the query string from a URL for logging."""
    parts = urlsplit(url)
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urlunsplit((parts.scheme, host, parts.path, "", ""))


def log_config_summary(settings: object) -> None:
    """Log a config summary at startup.

    Args:
        settings: A MonitorSettings instance (or any object with the same attrs).
    """
    logger.info(
        "Solar monitor starting with config: "
        "telemetry_url=%s, telemetry_timeout_s=%s, "
        "temperature_command=%s, temperature_timeout_s=%s, "
        "poll_interval_s=%s, history_capacity=%s, "
        "battery_capacity_kwh=%s, battery_empty_at_soc_pct=%s, "
        "http_host=%s, http_port=%s",
        _masked_url(settings.telemetry_url),  # type: ignore[union-attr]
        settings.telemetry_timeout_s,  # type: ignore[union-attr]
        settings.temperature_command,  # type: ignore[union-attr]
        settings.temperature_timeout_s,  # type: ignore[union-attr]
        settings.poll_interval_s,  # type: ignore[union-attr]
        settings.history_capacity,  # type: ignore[union-attr]
        settings.battery_capacity_kwh,  # type: ignore[union-attr]
        settings.battery_empty_at_soc_pct,  # type: ignore[union-attr]
        settings.http_host,  # type: ignore[union-attr]
        settings.http_port,  # type: ignore[union-attr]
    )


def build_app(settings: MonitorSettings) -> FastAPI:
    """Wire engine, client, probe, and poller into a FastAPI app."""
    engine = TelemetryEngine(
        history_capacity=settings.history_capacity,
        battery_capacity_kwh=settings.battery_capacity_kwh,
        battery_empty_at_soc_pct=settings.battery_empty_at_soc_pct,
    )
    poller = Poller(
        client=TelemetryClient(
            settings.telemetry_url,
            timeout_s=settings.telemetry_timeout_s,
        ),
        probe=TemperatureProbe(
            settings.temperature_command,
            timeout_s=settings.temperature_timeout_s,
        ),
        engine=engine,
    )
    return create_app(
        engine=engine,
        poller=poller,
        poll_interval_s=settings.poll_interval_s,
    )


def main() -> None:
    """Synchronous entrypoint for the solar monitor."""
    import uvicorn

    from solarmon.src.config import MonitorSettings

    settings = MonitorSettings()
    configure_logging(settings.log_level)
    log_config_summary(settings)

    app = build_app(settings)
    uvicorn.run(
        app,
        host=settings.http_host,
        port=settings.http_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
