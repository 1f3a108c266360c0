"""
HTTP client for the Selectronic solarmonweb point endpoint.

Fetches one JSON document per call with a bounded timeout and decodes it
into a :class:`~solarmon.src.models.TelemetryReading`. Every transport,
status, or decode failure is raised as
:class:`~solarmon.src.errors.AcquisitionError`, which the poller records in
the snapshot error slot. There is no retry here: the next scheduled poll
cycle is the retry.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
import time

import httpx
from pydantic import ValidationError

from solarmon.src.errors import AcquisitionError
from solarmon.src.models import TelemetryReading

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 5.0


class TelemetryClient:
    """Fetches telemetry readings from the inverter.

    A ``_=<unix seconds>`` query parameter is appended to every request,
    the same cache buster the inverter's own web UI sends.

    Args:
        url: Full URL of the point endpoint.
        timeout_s: Total timeout for one request in seconds.

    Usage::

        client = TelemetryClient(
            "http://192.168.1.45/cgi-bin/solarmonweb/devices/<id>/point"
        )
        reading = await client.fetch()
    """

    def __init__(self, url: str, timeout_s: float = _DEFAULT_TIMEOUT_S) -> None:
        self._url = url
        self._timeout_s = timeout_s

    @property
    def url(self) -> str:
        return self._url

    async def fetch(self) -> TelemetryReading:
        """Fetch and decode one reading.

        Returns:
            The decoded :class:`TelemetryReading`.

        Raises:
            AcquisitionError: On connection errors, timeouts, non-2xx
                responses, invalid JSON, or a document that does not match
                the expected shape.
        """
        params = {"_": str(int(time.time()))}
        try:
            async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                response = await client.get(self._url, params=params)
        except httpx.TimeoutException as exc:
            raise AcquisitionError(
                f"Telemetry request timed out after {self._timeout_s}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise AcquisitionError(f"Telemetry request failed: {exc}") from exc

        if not response.is_success:
            raise AcquisitionError(
                f"Telemetry endpoint returned HTTP {response.status_code}"
            )

        try:
            return TelemetryReading.model_validate(response.json())
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError both land here.
            kind = "invalid" if isinstance(exc, ValidationError) else "malformed"
            raise AcquisitionError(f"Telemetry payload {kind}: {exc}") from exc
