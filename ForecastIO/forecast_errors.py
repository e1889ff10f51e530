"""Errors raised by the forecast.io client.

Network failures are not wrapped: ``requests.exceptions.RequestException``
raised by the transport reaches the caller unchanged.
"""
from typing import Optional


class ForecastError(Exception):
    """Base class for every error raised by this library."""
    pass


class InvalidUnitsError(ForecastError, ValueError):
    """Raised when a unit mode outside the supported set is requested."""

    def __init__(self, units: str):
        self.units = units
        super().__init__(f"Invalid units requested: {units!r}")


class InvalidExcludeError(ForecastError, ValueError):
    """Raised when an exclude entry does not name a report block."""

    def __init__(self, exclude: str):
        self.exclude = exclude
        super().__init__(f"Invalid exclude requested: {exclude!r}")


class ForecastParseError(ForecastError):
    """Raised when the response body does not match the report shape."""
    pass


class ForecastAPIError(ForecastError):
    """Raised when the service answers with a non-2xx status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        text = f"forecast.io API error {status_code}"
        if message:
            text += f": {message}"
        super().__init__(text)
