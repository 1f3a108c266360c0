"""
Exception taxonomy for the solar monitor.

- AcquisitionError: the telemetry source could not be reached or decoded.
  Recorded in the snapshot error slot; never crashes the poll loop.
- NoDataYetError: a reader asked for the current view before any poll cycle
  succeeded.

Temperature probe failures and degenerate metrics are not errors: the probe
falls back to the last known value and the estimators return 0.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""


class MonitorError(Exception):
    """Base class for all solar monitor errors."""


class AcquisitionError(MonitorError):
    """Raised when a telemetry reading cannot be fetched or decoded."""


class NoDataYetError(MonitorError):
    """Raised when no poll cycle has completed successfully yet."""

    def __init__(self, message: str = "No data available yet") -> None:
        super().__init__(message)
