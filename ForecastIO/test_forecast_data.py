"""Tests for forecast_data module."""
import pytest
from datetime import datetime, timezone, timedelta
from forecast_data import (
    Report,
    Alert,
    DayData,
    MinuteData,
    unix_to_datetime,
)
from forecast_errors import ForecastParseError


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_unix_to_datetime():
    """Test epoch conversion is UTC and aware."""
    assert unix_to_datetime(1609459200) == utc(2021, 1, 1, 0, 0, 0)
    assert unix_to_datetime(1609459200).isoformat() == "2021-01-01T00:00:00+00:00"
    assert unix_to_datetime(0) == utc(1970, 1, 1)
    assert unix_to_datetime(-86400) == utc(1969, 12, 31)
    assert unix_to_datetime(None) is None


def test_report_parses_location(full_forecast_payload):
    report = Report.from_dict(full_forecast_payload)

    assert report.latitude == 37.8267
    assert report.longitude == -122.423
    assert report.timezone == "America/Los_Angeles"
    assert report.offset == -8.0


def test_report_parses_currently(full_forecast_payload):
    current = Report.from_dict(full_forecast_payload).currently

    assert current.time_unix == 1609459200
    assert current.time is None  # not normalized yet
    assert current.summary == "Partly Cloudy"
    assert current.icon == "partly-cloudy-night"
    assert current.nearest_storm_distance == 12
    assert current.nearest_storm_bearing == 270
    assert current.precip_intensity == 0.0
    assert current.precip_probability == 0.0
    assert current.temperature == 48.52
    assert current.apparent_temperature == 46.91
    assert current.dew_point == 41.3
    assert current.humidity == 0.76
    assert current.wind_speed == 3.87
    assert current.wind_bearing == 284.0
    assert current.visibility == 9.84
    assert current.cloud_cover == 0.42
    assert current.pressure == 1021.4
    assert current.ozone == 289.7


def test_report_parses_minutely_and_hourly(full_forecast_payload):
    report = Report.from_dict(full_forecast_payload)

    assert report.minutely.summary == "Partly cloudy for the hour."
    assert [m.time_unix for m in report.minutely.data] == [1609459200, 1609459260]
    assert report.minutely.data[1].precip_intensity == 0.002
    assert report.minutely.data[1].precip_probability == 0.01

    assert report.hourly.summary == "Light rain starting tomorrow morning."
    assert report.hourly.icon == "rain"
    assert len(report.hourly.data) == 3
    assert [h.time_unix for h in report.hourly.data] == [1609459200, 1609462800, 1609466400]
    first, _, last = report.hourly.data
    assert first.precip_type is None  # omitted when there is no precipitation
    assert last.precip_type == "rain"
    assert last.summary == "Light Rain"
    assert last.temperature == 47.2
    assert last.apparent_temperature == 44.8
    assert last.humidity == 0.84
    assert last.wind_bearing == 190.0
    assert last.cloud_cover == 0.96
    assert last.ozone == 291.0


def test_report_parses_daily(full_forecast_payload):
    report = Report.from_dict(full_forecast_payload)

    assert report.daily.summary == "Rain throughout the week."
    assert len(report.daily.data) == 2
    day = report.daily.data[0]
    assert day.time_unix == 1609459200
    assert day.summary == "Rain starting in the afternoon."
    assert day.sunrise_time_unix == 1609514700
    assert day.sunset_time_unix == 1609549620
    assert day.moon_phase == 0.59
    assert day.precip_intensity == 0.0093
    assert day.precip_intensity_max == 0.0412
    assert day.precip_intensity_max_time_unix == 1609531200
    assert day.precip_probability == 0.88
    assert day.precip_type == "rain"
    assert day.temperature_min == 44.1
    assert day.temperature_min_time_unix == 1609513200
    assert day.temperature_max == 54.3
    assert day.temperature_max_time_unix == 1609538400
    assert day.apparent_temperature_min == 41.2
    assert day.apparent_temperature_min_time_unix == 1609513200
    assert day.apparent_temperature_max == 54.3
    assert day.apparent_temperature_max_time_unix == 1609538400
    assert day.pressure == 1018.2
    assert report.daily.data[1].precip_type is None


def test_report_parses_alerts_and_flags(full_forecast_payload):
    report = Report.from_dict(full_forecast_payload)

    assert len(report.alerts) == 1
    alert = report.alerts[0]
    assert alert.title == "Wind Advisory for San Francisco, CA"
    assert alert.expires_unix == 1609502400
    assert alert.description.startswith("...WIND ADVISORY")
    assert alert.uri.startswith("http://alerts.weather.gov/")

    assert report.flags.sources == ["nwspa", "isd", "madis", "lamp", "darksky"]
    assert report.flags.isd_stations == ["724943-99999", "745039-99999"]
    assert report.flags.madis_stations == ["AU915", "C5988"]
    assert report.flags.darksky_stations == ["KMUX"]
    assert report.flags.datapoint_stations == []
    assert report.flags.units == "us"


def test_report_with_excluded_blocks():
    """Test that omitted blocks are None rather than empty placeholders."""
    report = Report.from_dict({
        "latitude": 51.5,
        "longitude": -0.13,
        "timezone": "Europe/London",
        "offset": 0,
        "currently": {"time": 1609459200, "temperature": 4.2},
    })

    assert report.currently.temperature == 4.2
    assert report.currently.humidity is None
    assert report.minutely is None
    assert report.hourly is None
    assert report.daily is None
    assert report.alerts == []
    assert report.flags is None


def test_fractional_offset():
    report = Report.from_dict({"latitude": 28.6, "longitude": 77.2, "offset": 5.5})
    assert report.offset == 5.5


def test_parse_times(full_forecast_payload):
    report = Report.from_dict(full_forecast_payload)
    assert report.parse_times() is report

    assert report.currently.time == utc(2021, 1, 1, 0, 0, 0)
    assert [m.time for m in report.minutely.data] == [
        utc(2021, 1, 1, 0, 0, 0),
        utc(2021, 1, 1, 0, 1, 0),
    ]
    assert [h.time for h in report.hourly.data] == [
        utc(2021, 1, 1, 0), utc(2021, 1, 1, 1), utc(2021, 1, 1, 2),
    ]
    day = report.daily.data[0]
    assert day.time == utc(2021, 1, 1)
    assert day.sunrise_time == utc(2021, 1, 1, 15, 25)
    assert day.sunset_time == unix_to_datetime(1609549620)
    assert day.precip_intensity_max_time == utc(2021, 1, 1, 20)
    assert day.temperature_min_time == utc(2021, 1, 1, 15)
    assert day.temperature_max_time == utc(2021, 1, 1, 22)
    assert day.apparent_temperature_min_time == day.temperature_min_time
    assert day.apparent_temperature_max_time == day.temperature_max_time
    assert report.daily.data[1].time == utc(2021, 1, 2)
    assert report.alerts[0].expires == utc(2021, 1, 1, 12)


def test_parse_times_matches_raw_fields(full_forecast_payload):
    """Test every structured time equals the conversion of its raw field."""
    report = Report.from_dict(full_forecast_payload).parse_times()
    epoch = utc(1970, 1, 1)

    samples = [report.currently] + report.minutely.data + report.hourly.data + report.daily.data
    for sample in samples:
        assert sample.time == epoch + timedelta(seconds=sample.time_unix)
        assert sample.time.tzinfo is not None
        assert sample.time.utcoffset() == timedelta(0)


def test_parse_times_idempotent(full_forecast_payload):
    once = Report.from_dict(full_forecast_payload).parse_times()
    twice = Report.from_dict(full_forecast_payload).parse_times().parse_times()

    assert once == twice


def test_parse_times_leaves_missing_times_empty():
    """Test that days without sunrise/sunset keep None."""
    report = Report.from_dict({
        "latitude": 78.2,
        "longitude": 15.6,
        "daily": {"data": [{"time": 1609459200, "moonPhase": 0.6}]},
    }).parse_times()

    day = report.daily.data[0]
    assert day.time == utc(2021, 1, 1)
    assert day.sunrise_time_unix is None
    assert day.sunrise_time is None
    assert day.sunset_time is None
    assert day.temperature_max_time is None


def test_parse_times_without_blocks():
    report = Report.from_dict({"latitude": 0.0, "longitude": 0.0})
    report.parse_times()
    assert report.currently is None


def test_sample_missing_time():
    with pytest.raises(ForecastParseError) as exc_info:
        Report.from_dict({"hourly": {"data": [{"temperature": 10.0}]}})

    assert "time" in str(exc_info.value)


@pytest.mark.parametrize("payload", [
    [],
    "not a report",
    None,
    {"currently": "sunny"},
    {"currently": {"time": "yesterday"}},
    {"currently": {"time": 1609459200, "temperature": "warm"}},
    {"currently": {"time": 1609459200, "summary": 12}},
    {"hourly": {"data": {"time": 1609459200}}},
    {"alerts": [{"title": "x", "expires": 1609459200}, "bad"]},
    {"flags": {"sources": "isd"}},
    {"latitude": True},
])
def test_malformed_payloads(payload):
    with pytest.raises(ForecastParseError):
        Report.from_dict(payload)


def test_day_data_direct():
    day = DayData.from_dict({"time": 1609545600, "temperatureMin": 1.5})
    day.parse_times()
    assert day.time == utc(2021, 1, 2)
    assert day.temperature_min == 1.5


def test_minute_data_has_no_sunrise():
    minute = MinuteData.from_dict({"time": 1609459200})
    assert not hasattr(minute, "sunrise_time")


@pytest.mark.parametrize("payload", [
    {"currently": {"time": 1609459200000}},
    {"currently": {"time": -99999999999999}},
    {"hourly": {"data": [{"time": 1609459200}, {"time": 10 ** 18}]}},
    {"daily": {"data": [{"time": 1609459200, "sunriseTime": 1609459200000}]}},
    {"alerts": [{"title": "x", "expires": 1e20}]},
])
def test_timestamp_out_of_datetime_range(payload):
    """Test that timestamps parse_times() could not convert are rejected up front."""
    with pytest.raises(ForecastParseError) as exc_info:
        Report.from_dict(payload)

    assert "out of range" in str(exc_info.value)


def test_timestamp_range_limits():
    report = Report.from_dict({
        "currently": {"time": 253402300799},
        "minutely": {"data": [{"time": -62135596800}]},
    }).parse_times()

    assert report.currently.time == utc(9999, 12, 31, 23, 59, 59)
    assert report.minutely.data[0].time == utc(1, 1, 1)


@pytest.mark.parametrize("payload", [
    {"currently": {"time": 1609459200.9}},
    {"currently": {"time": 1609459200, "nearestStormDistance": 12.5}},
    {"daily": {"data": [{"time": 1609459200, "sunsetTime": 1609549620.5}]}},
    {"currently": {"time": float("nan")}},
])
def test_fractional_integer_fields(payload):
    with pytest.raises(ForecastParseError):
        Report.from_dict(payload)


def test_integral_float_accepted():
    current = Report.from_dict({"currently": {"time": 1609459200.0}}).currently
    assert current.time_unix == 1609459200
    assert isinstance(current.time_unix, int)


def test_alert_optional_fields_default():
    alert = Alert()
    assert alert.title is None
    assert alert.expires_unix is None
    alert.parse_times()
    assert alert.expires is None

    alert = Alert.from_dict({"description": "no title or expiry"})
    assert alert.title is None
    assert alert.expires_unix is None
