"""forecast.io API connection."""
import logging
from typing import Iterable, List

import requests

from forecast_data import Report
from forecast_errors import (
    ForecastAPIError,
    ForecastParseError,
    InvalidExcludeError,
    InvalidUnitsError,
)
from forecast_time import ForecastTime
from rwlock import ReadWriteLock

BASE_URL = "https://api.forecast.io/forecast"
CALLS_HEADER = "X-Forecast-API-Calls"

EXCLUDES = frozenset({"currently", "minutely", "hourly", "daily", "alerts", "flags"})
UNITS = frozenset({"us", "si", "ca", "uk", "auto"})


def _exclude_list(excludes: Iterable[str]) -> List[str]:
    if isinstance(excludes, str):
        raise TypeError(
            f"excludes must be a list of block names, not a string: {excludes!r}"
        )
    return list(excludes)


class ForecastConnection:
    """
    Connection to the forecast.io API.

    Each connection has its own API key, unit mode and counter of API calls
    made today with that key. The counter stays 0 until fetch_current() or
    fetch_at_time() has returned a call-count header; connections sharing a
    key do not share the counter.

    Fetches and set_units() hold the connection's write lock for their whole
    duration, network call included, so requests through one connection never
    overlap. Timeouts belong to the session passed in.
    """

    def __init__(
        self,
        api_key: str,
        session=None,
        base_url: str = BASE_URL,
    ):
        """
        Initialize connection.

        Args:
            api_key: forecast.io API key (not validated locally)
            session: Object with a requests-style get(url), e.g. a
                requests.Session. Defaults to the requests module.
            base_url: Service endpoint the key and location are appended to
        """
        self._api_key = api_key
        self._session = session if session is not None else requests
        self.base_url = base_url.rstrip("/")
        self._units = "auto"
        self._call_count = 0
        self._lock = ReadWriteLock()

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def units(self) -> str:
        with self._lock.read_locked():
            return self._units

    @property
    def call_count(self) -> int:
        """API calls made today with this key, as of this connection's last fetch."""
        with self._lock.read_locked():
            return self._call_count

    def set_units(self, units: str) -> None:
        """
        Set the unit mode used by later fetches.

        Raises:
            InvalidUnitsError: If units is not one of us, si, ca, uk, auto.
                The current mode is kept.
        """
        with self._lock.write_locked():
            if units not in UNITS:
                raise InvalidUnitsError(units)
            self._units = units
            logging.debug(f"Units set to {units}")

    def fetch_current(
        self,
        lat: float,
        lon: float,
        excludes: Iterable[str] = (),
        extend_hourly: bool = False,
    ) -> Report:
        """
        Fetch the forecast for a location.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            excludes: Blocks to leave out of the report (currently, minutely,
                hourly, daily, alerts, flags). Empty strings are ignored.
            extend_hourly: Request 7 days of hourly data instead of 2

        Returns:
            Report: Parsed report, structured times not yet filled in

        Raises:
            InvalidExcludeError: Before any request, for an unknown exclude
            TypeError: If excludes is a single string instead of a list
            requests.exceptions.RequestException: If the request fails
            ForecastAPIError: If the service returns an error status
            ForecastParseError: If the body is not a valid report
        """
        excludes = _exclude_list(excludes)
        for ex in excludes:
            if ex and ex not in EXCLUDES:
                raise InvalidExcludeError(ex)

        with self._lock.write_locked():
            url = self._build_url(f"{lat:f},{lon:f}", excludes)
            if extend_hourly:
                url += "&extend=hourly"
            return self._fetch(url)

    def fetch_at_time(
        self,
        lat: float,
        lon: float,
        when: ForecastTime,
        excludes: Iterable[str] = (),
    ) -> Report:
        """
        Fetch observed or forecast conditions for a location at a given time.

        Unlike fetch_current(), every exclude must name a block; an empty
        string is rejected.

        Raises:
            InvalidExcludeError: Before any request, for an invalid exclude
            TypeError: If excludes is a single string instead of a list
            requests.exceptions.RequestException: If the request fails
            ForecastAPIError: If the service returns an error status
            ForecastParseError: If the body is not a valid report
        """
        excludes = _exclude_list(excludes)
        for ex in excludes:
            if ex not in EXCLUDES:
                raise InvalidExcludeError(ex)

        with self._lock.write_locked():
            url = self._build_url(f"{lat:f},{lon:f},{when.url_segment()}", excludes)
            return self._fetch(url)

    def _build_url(self, location: str, excludes: Iterable[str]) -> str:
        # Caller holds the lock: reads self._units directly.
        return (
            f"{self.base_url}/{self._api_key}/{location}"
            f"?units={self._units}&exclude={','.join(excludes)}"
        )

    def _fetch(self, url: str) -> Report:
        logging.info(f"Making forecast.io API request: {self._redact(url)}")

        try:
            response = self._session.get(url)
        except requests.exceptions.RequestException as e:
            logging.debug(f"Network error during API request: {e}")
            raise

        logging.info(f"API response status: {response.status_code}")
        self._record_call_count(response)

        if not response.ok:
            self._handle_error_response(response)

        try:
            data = response.json()
        except ValueError as e:
            logging.debug(f"Response body is not JSON: {e}")
            raise ForecastParseError(f"Failed to parse response: {e}") from e

        try:
            report = Report.from_dict(data)
        except ForecastParseError as e:
            logging.debug(f"Failed to parse API response: {e}")
            raise

        logging.debug(
            f"Parsed report for {report.latitude},{report.longitude} "
            f"({report.timezone})"
        )
        return report

    def _record_call_count(self, response) -> None:
        """Store the call-count header; keep the old value if it is absent or garbled."""
        raw = response.headers.get(CALLS_HEADER)
        if raw is None:
            logging.debug(f"No {CALLS_HEADER} header in response")
            return
        try:
            self._call_count = int(raw)
        except (TypeError, ValueError):
            logging.debug(f"Ignoring unparsable {CALLS_HEADER} header: {raw!r}")
            return
        logging.info(f"API calls made today: {self._call_count}")

    def _handle_error_response(self, response) -> None:
        """Raise ForecastAPIError from a forecast.io error response."""
        try:
            error_data = response.json()
            message = error_data.get("error") if isinstance(error_data, dict) else None
        except ValueError:
            message = (response.text or "")[:200] or None
        logging.debug(f"forecast.io error response: HTTP {response.status_code} {message}")
        raise ForecastAPIError(response.status_code, message)

    def _redact(self, url: str) -> str:
        if not self._api_key:
            return url
        return url.replace(f"/{self._api_key}/", "/<api-key>/", 1)
