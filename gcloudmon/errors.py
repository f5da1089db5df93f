"""Exceptions raised by the monitoring client."""

from google.api_core.exceptions import GoogleAPICallError


class MonitoringError(Exception):
    """Base class for all monitoring client errors."""


class AuthError(MonitoringError):
    """Exception raised when credentials cannot be acquired."""

    def __init__(self, message: str, error: Exception | None = None):
        self.message = message
        self.error = error
        super().__init__(message)


class RemoteAPIError(MonitoringError):
    """
    Exception raised when a Cloud Monitoring API call fails.

    The original API error is kept unchanged on ``error``; its ``code`` and
    ``message`` are copied for convenience.
    """

    def __init__(self, error: GoogleAPICallError):
        self.error = error
        self.code = error.code
        self.message = error.message
        super().__init__(str(error))


class TimeSeriesWriteError(RemoteAPIError):
    """
    Exception raised when a batch time series write fails.

    Carries the request payload that was sent so callers can inspect it.
    """

    def __init__(self, error: GoogleAPICallError, time_series: list):
        super().__init__(error)
        self.time_series = time_series
        self.error_data = {"timeSeries": time_series}


__all__ = ["AuthError", "MonitoringError", "RemoteAPIError", "TimeSeriesWriteError"]
