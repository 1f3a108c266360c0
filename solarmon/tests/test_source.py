"""
Tests for the telemetry source HTTP client.

Verifies that TelemetryClient fetches and decodes the solarmonweb point
document, appends the cache-busting parameter, passes its timeout, and turns
every transport, status, and decode failure into AcquisitionError.
Tests use a mocked httpx.AsyncClient.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from solarmon.src.errors import AcquisitionError
from solarmon.src.source import TelemetryClient

_URL = "http://192.168.1.45/cgi-bin/solarmonweb/devices/ABC/point"

_DOC = {
    "device": {"name": "SP PRO"},
    "item_count": 22,
    "items": {
        "battery_soc": 64.2,
        "battery_w": -1830.5,
        "grid_in_wh_today": 2400.0,
        "load_w": 720.0,
        "shunt_w": 2550.0,
        "solarinverter_w": 0.0,
        "timestamp": 1760875200,
    },
    "now": 1760875201,
}


def _response(status: int = 200, **kwargs: object) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", _URL), **kwargs)


def _mock_client(
    response: httpx.Response | None = None,
    side_effect: Exception | None = None,
) -> AsyncMock:
    client = AsyncMock()
    client.get = AsyncMock(return_value=response, side_effect=side_effect)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


class TestFetchSuccess:
    @pytest.mark.asyncio
    async def test_decodes_document(self) -> None:
        mock_client = _mock_client(_response(json=_DOC))

        with patch("solarmon.src.source.httpx.AsyncClient", return_value=mock_client):
            reading = await TelemetryClient(_URL).fetch()

        assert reading.device.name == "SP PRO"
        assert reading.items.battery_soc == 64.2
        assert reading.items.battery_w == -1830.5
        assert reading.items.grid_in_wh_today == 2400.0
        assert reading.now == 1760875201

    @pytest.mark.asyncio
    async def test_sends_cache_buster_and_timeout(self) -> None:
        mock_client = _mock_client(_response(json=_DOC))

        with (
            patch(
                "solarmon.src.source.httpx.AsyncClient", return_value=mock_client
            ) as mock_cls,
            patch("solarmon.src.source.time.time", return_value=1760875200.7),
        ):
            await TelemetryClient(_URL, timeout_s=3.0).fetch()

        mock_cls.assert_called_once_with(timeout=3.0)
        mock_client.get.assert_awaited_once_with(_URL, params={"_": "1760875200"})


class TestFetchFailures:
    """Every failure mode surfaces as AcquisitionError."""

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        mock_client = _mock_client(side_effect=httpx.ConnectError("refused"))

        with (
            patch("solarmon.src.source.httpx.AsyncClient", return_value=mock_client),
            pytest.raises(AcquisitionError, match="failed") as exc_info,
        ):
            await TelemetryClient(_URL).fetch()

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        mock_client = _mock_client(side_effect=httpx.ReadTimeout("slow"))

        with (
            patch("solarmon.src.source.httpx.AsyncClient", return_value=mock_client),
            pytest.raises(AcquisitionError, match="timed out"),
        ):
            await TelemetryClient(_URL, timeout_s=2.0).fetch()

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        mock_client = _mock_client(_response(502, text="bad gateway"))

        with (
            patch("solarmon.src.source.httpx.AsyncClient", return_value=mock_client),
            pytest.raises(AcquisitionError, match="HTTP 502"),
        ):
            await TelemetryClient(_URL).fetch()

    @pytest.mark.asyncio
    async def test_malformed_json(self) -> None:
        mock_client = _mock_client(_response(content=b"<html>oops</html>"))

        with (
            patch("solarmon.src.source.httpx.AsyncClient", return_value=mock_client),
            pytest.raises(AcquisitionError, match="malformed"),
        ):
            await TelemetryClient(_URL).fetch()

    @pytest.mark.asyncio
    async def test_unexpected_shape(self) -> None:
        mock_client = _mock_client(_response(json={"device": {"name": "x"}}))

        with (
            patch("solarmon.src.source.httpx.AsyncClient", return_value=mock_client),
            pytest.raises(AcquisitionError, match="invalid"),
        ):
            await TelemetryClient(_URL).fetch()
