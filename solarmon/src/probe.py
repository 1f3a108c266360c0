"""
Temperature probe backed by an external command (e.g. a TEMPer USB stick).

The command prints a single Celsius value such as ``23.4`` or ``23.4C``.
Any failure (missing binary, non-zero exit, timeout, unparsable output) is
logged and reported as ``None``; the engine then keeps the last known value.
The probe never raises into the poll cycle.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging
import math
import shlex

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 5.0


def parse_temperature(text: str) -> float | None:
    """Parse probe output into degrees Celsius.

    Strips surrounding whitespace and one trailing ``C`` unit marker.

    Returns:
        The value as a float, or None if the text is not a finite number
        (``nan`` and ``inf`` are treated as a failed reading).
    """
    value = text.strip()
    if value.endswith(("C", "c")):
        value = value[:-1].strip()
    try:
        temperature = float(value)
    except ValueError:
        return None
    if not math.isfinite(temperature):
        return None
    return temperature


class TemperatureProbe:
    """Runs the probe command and returns its reading.

    Args:
        command: Command line, split with shell rules (no shell is spawned).
        timeout_s: Seconds to wait before killing the process.
    """

    def __init__(self, command: str, timeout_s: float = _DEFAULT_TIMEOUT_S) -> None:
        self._argv = shlex.split(command)
        self._timeout_s = timeout_s

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    async def read(self) -> float | None:
        """Run the command once.

        Returns:
            Temperature in Celsius, or None if the probe failed.
        """
        proc = None
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(),
                timeout=self._timeout_s,
            )
        except TimeoutError:
            logger.warning("Temperature probe timed out after %ss", self._timeout_s)
            return None
        except OSError as exc:
            logger.warning("Error getting temp: %s", exc)
            return None
        finally:
            if proc is not None and proc.returncode is None:
                proc.kill()
                await proc.wait()

        if proc.returncode != 0:
            logger.warning(
                "Error getting temp: exit status %d (%s)",
                proc.returncode,
                stderr.decode(errors="replace").strip(),
            )
            return None

        output = stdout.decode(errors="replace")
        value = parse_temperature(output)
        if value is None:
            logger.warning("Error getting temp: unparsable output %r", output.strip())
        return value
