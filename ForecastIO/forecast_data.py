"""forecast.io report model - dataclasses mirroring the JSON response."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from forecast_errors import ForecastParseError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Range of epoch seconds a datetime can hold (years 1 to 9999)
MIN_TIMESTAMP = int((datetime(1, 1, 1, tzinfo=timezone.utc) - EPOCH).total_seconds())
MAX_TIMESTAMP = int((datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc) - EPOCH).total_seconds())


def unix_to_datetime(seconds: Optional[int]) -> Optional[datetime]:
    """Convert Unix epoch seconds to an aware UTC datetime (None stays None)."""
    if seconds is None:
        return None
    return EPOCH + timedelta(seconds=seconds)


def _opt_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"'{key}' must be a number, got {value!r}")
    return float(value)


def _opt_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or (isinstance(value, float) and not value.is_integer())
    ):
        raise TypeError(f"'{key}' must be an integer, got {value!r}")
    return int(value)


def _req_int(data: Dict[str, Any], key: str) -> int:
    if key not in data:
        raise KeyError(key)
    value = _opt_int(data, key)
    if value is None:
        raise ValueError(f"'{key}' must not be null")
    return value


def _opt_timestamp(data: Dict[str, Any], key: str) -> Optional[int]:
    value = _opt_int(data, key)
    if value is not None and not MIN_TIMESTAMP <= value <= MAX_TIMESTAMP:
        raise ValueError(f"'{key}' timestamp out of range: {value}")
    return value


def _req_timestamp(data: Dict[str, Any], key: str) -> int:
    value = _req_int(data, key)
    if not MIN_TIMESTAMP <= value <= MAX_TIMESTAMP:
        raise ValueError(f"'{key}' timestamp out of range: {value}")
    return value


def _opt_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {value!r}")
    return value


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    values = data.get(key) or []
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise TypeError(f"'{key}' must be a list of strings")
    return list(values)


def _object(data: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = data.get(key)
    if value is not None and not isinstance(value, dict):
        raise TypeError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


def _objects(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    values = data.get(key) or []
    if not isinstance(values, list) or not all(isinstance(v, dict) for v in values):
        raise TypeError(f"'{key}' must be a list of objects")
    return values


@dataclass
class CurrentConditions:
    """Snapshot of the conditions at the requested location and time."""
    time_unix: int  # UNIX timestamp (UTC)
    time: Optional[datetime] = None
    summary: Optional[str] = None
    icon: Optional[str] = None
    nearest_storm_distance: Optional[int] = None
    nearest_storm_bearing: Optional[int] = None
    precip_intensity: Optional[float] = None
    precip_probability: Optional[float] = None
    temperature: Optional[float] = None
    apparent_temperature: Optional[float] = None  # "feels like"
    dew_point: Optional[float] = None
    humidity: Optional[float] = None  # 0..1
    wind_speed: Optional[float] = None
    wind_bearing: Optional[float] = None
    visibility: Optional[float] = None
    cloud_cover: Optional[float] = None  # 0..1
    pressure: Optional[float] = None
    ozone: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CurrentConditions":
        return cls(
            time_unix=_req_timestamp(data, "time"),
            summary=_opt_str(data, "summary"),
            icon=_opt_str(data, "icon"),
            nearest_storm_distance=_opt_int(data, "nearestStormDistance"),
            nearest_storm_bearing=_opt_int(data, "nearestStormBearing"),
            precip_intensity=_opt_float(data, "precipIntensity"),
            precip_probability=_opt_float(data, "precipProbability"),
            temperature=_opt_float(data, "temperature"),
            apparent_temperature=_opt_float(data, "apparentTemperature"),
            dew_point=_opt_float(data, "dewPoint"),
            humidity=_opt_float(data, "humidity"),
            wind_speed=_opt_float(data, "windSpeed"),
            wind_bearing=_opt_float(data, "windBearing"),
            visibility=_opt_float(data, "visibility"),
            cloud_cover=_opt_float(data, "cloudCover"),
            pressure=_opt_float(data, "pressure"),
            ozone=_opt_float(data, "ozone"),
        )

    def parse_times(self) -> None:
        self.time = unix_to_datetime(self.time_unix)


@dataclass
class MinuteData:
    time_unix: int
    time: Optional[datetime] = None
    precip_intensity: Optional[float] = None
    precip_probability: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MinuteData":
        return cls(
            time_unix=_req_timestamp(data, "time"),
            precip_intensity=_opt_float(data, "precipIntensity"),
            precip_probability=_opt_float(data, "precipProbability"),
        )

    def parse_times(self) -> None:
        self.time = unix_to_datetime(self.time_unix)


@dataclass
class HourData:
    time_unix: int
    time: Optional[datetime] = None
    summary: Optional[str] = None
    icon: Optional[str] = None
    precip_intensity: Optional[float] = None
    precip_probability: Optional[float] = None
    precip_type: Optional[str] = None  # rain, snow, sleet
    temperature: Optional[float] = None
    apparent_temperature: Optional[float] = None
    dew_point: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_bearing: Optional[float] = None
    visibility: Optional[float] = None
    cloud_cover: Optional[float] = None
    pressure: Optional[float] = None
    ozone: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HourData":
        return cls(
            time_unix=_req_timestamp(data, "time"),
            summary=_opt_str(data, "summary"),
            icon=_opt_str(data, "icon"),
            precip_intensity=_opt_float(data, "precipIntensity"),
            precip_probability=_opt_float(data, "precipProbability"),
            precip_type=_opt_str(data, "precipType"),
            temperature=_opt_float(data, "temperature"),
            apparent_temperature=_opt_float(data, "apparentTemperature"),
            dew_point=_opt_float(data, "dewPoint"),
            humidity=_opt_float(data, "humidity"),
            wind_speed=_opt_float(data, "windSpeed"),
            wind_bearing=_opt_float(data, "windBearing"),
            visibility=_opt_float(data, "visibility"),
            cloud_cover=_opt_float(data, "cloudCover"),
            pressure=_opt_float(data, "pressure"),
            ozone=_opt_float(data, "ozone"),
        )

    def parse_times(self) -> None:
        self.time = unix_to_datetime(self.time_unix)


@dataclass
class DayData:
    """
    One day of the daily forecast.

    Min/max values carry the moment they occur at; sunrise and sunset are
    missing on days without them (polar day/night).
    """
    time_unix: int
    time: Optional[datetime] = None
    summary: Optional[str] = None
    icon: Optional[str] = None
    sunrise_time_unix: Optional[int] = None
    sunrise_time: Optional[datetime] = None
    sunset_time_unix: Optional[int] = None
    sunset_time: Optional[datetime] = None
    moon_phase: Optional[float] = None  # 0 new, 0.5 full
    precip_intensity: Optional[float] = None
    precip_intensity_max: Optional[float] = None
    precip_intensity_max_time_unix: Optional[int] = None
    precip_intensity_max_time: Optional[datetime] = None
    precip_probability: Optional[float] = None
    precip_type: Optional[str] = None
    temperature_min: Optional[float] = None
    temperature_min_time_unix: Optional[int] = None
    temperature_min_time: Optional[datetime] = None
    temperature_max: Optional[float] = None
    temperature_max_time_unix: Optional[int] = None
    temperature_max_time: Optional[datetime] = None
    apparent_temperature_min: Optional[float] = None
    apparent_temperature_min_time_unix: Optional[int] = None
    apparent_temperature_min_time: Optional[datetime] = None
    apparent_temperature_max: Optional[float] = None
    apparent_temperature_max_time_unix: Optional[int] = None
    apparent_temperature_max_time: Optional[datetime] = None
    dew_point: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_bearing: Optional[float] = None
    visibility: Optional[float] = None
    cloud_cover: Optional[float] = None
    pressure: Optional[float] = None
    ozone: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DayData":
        return cls(
            time_unix=_req_timestamp(data, "time"),
            summary=_opt_str(data, "summary"),
            icon=_opt_str(data, "icon"),
            sunrise_time_unix=_opt_timestamp(data, "sunriseTime"),
            sunset_time_unix=_opt_timestamp(data, "sunsetTime"),
            moon_phase=_opt_float(data, "moonPhase"),
            precip_intensity=_opt_float(data, "precipIntensity"),
            precip_intensity_max=_opt_float(data, "precipIntensityMax"),
            precip_intensity_max_time_unix=_opt_timestamp(data, "precipIntensityMaxTime"),
            precip_probability=_opt_float(data, "precipProbability"),
            precip_type=_opt_str(data, "precipType"),
            temperature_min=_opt_float(data, "temperatureMin"),
            temperature_min_time_unix=_opt_timestamp(data, "temperatureMinTime"),
            temperature_max=_opt_float(data, "temperatureMax"),
            temperature_max_time_unix=_opt_timestamp(data, "temperatureMaxTime"),
            apparent_temperature_min=_opt_float(data, "apparentTemperatureMin"),
            apparent_temperature_min_time_unix=_opt_timestamp(data, "apparentTemperatureMinTime"),
            apparent_temperature_max=_opt_float(data, "apparentTemperatureMax"),
            apparent_temperature_max_time_unix=_opt_timestamp(data, "apparentTemperatureMaxTime"),
            dew_point=_opt_float(data, "dewPoint"),
            humidity=_opt_float(data, "humidity"),
            wind_speed=_opt_float(data, "windSpeed"),
            wind_bearing=_opt_float(data, "windBearing"),
            visibility=_opt_float(data, "visibility"),
            cloud_cover=_opt_float(data, "cloudCover"),
            pressure=_opt_float(data, "pressure"),
            ozone=_opt_float(data, "ozone"),
        )

    def parse_times(self) -> None:
        self.time = unix_to_datetime(self.time_unix)
        self.sunrise_time = unix_to_datetime(self.sunrise_time_unix)
        self.sunset_time = unix_to_datetime(self.sunset_time_unix)
        self.precip_intensity_max_time = unix_to_datetime(self.precip_intensity_max_time_unix)
        self.temperature_min_time = unix_to_datetime(self.temperature_min_time_unix)
        self.temperature_max_time = unix_to_datetime(self.temperature_max_time_unix)
        self.apparent_temperature_min_time = unix_to_datetime(self.apparent_temperature_min_time_unix)
        self.apparent_temperature_max_time = unix_to_datetime(self.apparent_temperature_max_time_unix)


@dataclass
class MinutelyBlock:
    summary: Optional[str] = None
    icon: Optional[str] = None
    data: List[MinuteData] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MinutelyBlock":
        return cls(
            summary=_opt_str(data, "summary"),
            icon=_opt_str(data, "icon"),
            data=[MinuteData.from_dict(d) for d in _objects(data, "data")],
        )


@dataclass
class HourlyBlock:
    summary: Optional[str] = None
    icon: Optional[str] = None
    data: List[HourData] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HourlyBlock":
        return cls(
            summary=_opt_str(data, "summary"),
            icon=_opt_str(data, "icon"),
            data=[HourData.from_dict(d) for d in _objects(data, "data")],
        )


@dataclass
class DailyBlock:
    summary: Optional[str] = None
    icon: Optional[str] = None
    data: List[DayData] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyBlock":
        return cls(
            summary=_opt_str(data, "summary"),
            icon=_opt_str(data, "icon"),
            data=[DayData.from_dict(d) for d in _objects(data, "data")],
        )


@dataclass
class Alert:
    """Severe weather advisory issued for the location."""
    title: Optional[str] = None
    expires_unix: Optional[int] = None
    expires: Optional[datetime] = None
    description: Optional[str] = None
    uri: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Alert":
        return cls(
            title=_opt_str(data, "title"),
            expires_unix=_opt_timestamp(data, "expires"),
            description=_opt_str(data, "description"),
            uri=_opt_str(data, "uri"),
        )

    def parse_times(self) -> None:
        self.expires = unix_to_datetime(self.expires_unix)


@dataclass
class Flags:
    """Which data sources and stations contributed, plus the units used."""
    sources: List[str] = field(default_factory=list)
    isd_stations: List[str] = field(default_factory=list)
    madis_stations: List[str] = field(default_factory=list)
    datapoint_stations: List[str] = field(default_factory=list)
    darksky_stations: List[str] = field(default_factory=list)
    units: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Flags":
        return cls(
            sources=_str_list(data, "sources"),
            isd_stations=_str_list(data, "isd-stations"),
            madis_stations=_str_list(data, "madis-stations"),
            datapoint_stations=_str_list(data, "datapoint-stations"),
            darksky_stations=_str_list(data, "darksky-stations"),
            units=_opt_str(data, "units"),
        )


@dataclass
class Report:
    """
    A complete forecast.io response.

    Every block may be missing, either because it was excluded from the
    request or because the service has no data for it at the location.
    Structured times stay None until parse_times() is called.
    """
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None
    offset: Optional[float] = None  # hours from UTC, may be fractional
    currently: Optional[CurrentConditions] = None
    minutely: Optional[MinutelyBlock] = None
    hourly: Optional[HourlyBlock] = None
    daily: Optional[DailyBlock] = None
    alerts: List[Alert] = field(default_factory=list)
    flags: Optional[Flags] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "Report":
        """
        Build a Report from a decoded JSON document.

        Raises:
            ForecastParseError: If the document does not match the report shape
        """
        if not isinstance(payload, dict):
            raise ForecastParseError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        try:
            currently = _object(payload, "currently")
            minutely = _object(payload, "minutely")
            hourly = _object(payload, "hourly")
            daily = _object(payload, "daily")
            flags = _object(payload, "flags")
            return cls(
                latitude=_opt_float(payload, "latitude"),
                longitude=_opt_float(payload, "longitude"),
                timezone=_opt_str(payload, "timezone"),
                offset=_opt_float(payload, "offset"),
                currently=CurrentConditions.from_dict(currently) if currently is not None else None,
                minutely=MinutelyBlock.from_dict(minutely) if minutely is not None else None,
                hourly=HourlyBlock.from_dict(hourly) if hourly is not None else None,
                daily=DailyBlock.from_dict(daily) if daily is not None else None,
                alerts=[Alert.from_dict(a) for a in _objects(payload, "alerts")],
                flags=Flags.from_dict(flags) if flags is not None else None,
            )
        except KeyError as e:
            raise ForecastParseError(f"Missing required field: {e}") from e
        except (ValueError, TypeError, OverflowError) as e:
            raise ForecastParseError(f"Malformed report: {e}") from e

    def parse_times(self) -> "Report":
        """
        Fill in every structured time from its raw Unix timestamp.

        Times are timezone-aware UTC datetimes. Safe to call more than once;
        each call recomputes the same values from the raw integers.
        """
        if self.currently is not None:
            self.currently.parse_times()
        for block in (self.minutely, self.hourly, self.daily):
            if block is not None:
                for sample in block.data:
                    sample.parse_times()
        for alert in self.alerts:
            alert.parse_times()
        return self
