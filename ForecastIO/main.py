"""Print the forecast for a location from the command line."""
import argparse
import logging
import os
import sys
from typing import List, Optional

import requests
from dotenv import load_dotenv

from forecast_conn import BASE_URL, UNITS, ForecastConnection
from forecast_data import Report
from forecast_errors import ForecastError
from forecast_time import ForecastTime

DEFAULT_LAT = 37.8267
DEFAULT_LON = -122.423
TIME_FORMAT = "%d/%b/%Y - %H:%M"
DATE_FORMAT = "%d/%b/%Y"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("forecast.io weather report")
    parser.add_argument("--apikey", help="API key for forecast.io (default: $FORECAST_API_KEY)")
    parser.add_argument("--lat", type=float, help="Latitude for requested location")
    parser.add_argument("--lon", type=float, help="Longitude for requested location")
    parser.add_argument("--exclude", default="", help="Comma separated list of blocks to exclude")
    parser.add_argument("--units", help="Units to return values in (us, si, ca, uk, auto)")
    parser.add_argument("--extend", action="store_true", help="Request extended hourly data")
    parser.add_argument("--at", help="Unix time or YYYY-MM-DDTHH:MM:SS[Z|+HHMM] to request instead of now")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def load_config(args: argparse.Namespace) -> argparse.Namespace:
    """Fill unset options from the environment (and .env); flags win."""
    load_dotenv()
    args.apikey = args.apikey or os.getenv("FORECAST_API_KEY")
    args.units = args.units or os.getenv("FORECAST_UNITS", "auto")
    args.base_url = os.getenv("FORECAST_BASE_URL", BASE_URL)

    if not args.apikey:
        raise SystemExit("Missing API key: pass --apikey or set FORECAST_API_KEY")
    if args.units not in UNITS:
        raise SystemExit(f"Invalid units {args.units!r}, expected one of {', '.join(sorted(UNITS))}")

    try:
        if args.lat is None:
            args.lat = float(os.getenv("FORECAST_LAT", DEFAULT_LAT))
        if args.lon is None:
            args.lon = float(os.getenv("FORECAST_LON", DEFAULT_LON))
    except ValueError as exc:
        raise SystemExit(f"Invalid coordinates: {exc}") from exc

    logging.info("Configuration loaded: lat=%s lon=%s units=%s", args.lat, args.lon, args.units)
    return args


def parse_excludes(value: str) -> List[str]:
    return value.split(",")


def parse_when(value: str) -> ForecastTime:
    """Digits are a Unix time; anything else goes to the service as text."""
    if value.lstrip("-").isdigit():
        return ForecastTime.at_unix(int(value))
    return ForecastTime.at_text(value)


def format_report_lines(report: Report, call_count: int) -> List[str]:
    lines = [
        f"API Calls made today: {call_count}",
        f"Latitude: {_fmt_num(report.latitude, 2)}  Longitude: {_fmt_num(report.longitude, 2)}  "
        f"Timezone: {report.timezone}",
    ]
    current = report.currently
    if current is not None:
        humidity = (current.humidity or 0.0) * 100
        lines.append("Current Weather -")
        lines.append(f"Report Time: {_fmt_time(current.time, TIME_FORMAT)}  Summary: {current.summary}")
        lines.append(
            f"Temperature: {_fmt_num(current.temperature, 0)}°  "
            f"Pressure: {_fmt_num(current.pressure, 0)}mb  Humidity {humidity:.0f}%"
        )
    if report.hourly is not None and report.hourly.data:
        lines.append(f"Summary for next hours: {report.hourly.summary}")
        for h in report.hourly.data:
            lines.append(
                f"Time: {_fmt_time(h.time, TIME_FORMAT)}  Temperature: {_fmt_num(h.temperature, 0)}°  "
                f"Pressure: {_fmt_num(h.pressure, 0)}mb  - {h.summary}"
            )
    if report.daily is not None and report.daily.data:
        lines.append(f"Summary for next 7 days: {report.daily.summary}")
        for d in report.daily.data:
            lines.append(
                f"Time: {_fmt_time(d.time, DATE_FORMAT)}  "
                f"Temperature (Min/Max): {_fmt_num(d.temperature_min, 0)}/{_fmt_num(d.temperature_max, 0)}°  "
                f"Pressure: {_fmt_num(d.pressure, 0)}mb  - {d.summary}"
            )
    for alert in report.alerts:
        lines.append(f"ALERT: {alert.title} (expires {_fmt_time(alert.expires, TIME_FORMAT)}) {alert.uri}")
    return lines


def _fmt_time(value, fmt: str) -> str:
    return value.strftime(fmt) if value is not None else "N/A"


def _fmt_num(value: Optional[float], digits: int) -> str:
    return f"{value:.{digits}f}" if value is not None else "N/A"


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    args = load_config(args)

    conn = ForecastConnection(args.apikey, base_url=args.base_url)
    conn.set_units(args.units)
    excludes = parse_excludes(args.exclude)

    try:
        if args.at:
            # At-time requests reject empty excludes
            report = conn.fetch_at_time(args.lat, args.lon, parse_when(args.at), [e for e in excludes if e])
        else:
            report = conn.fetch_current(args.lat, args.lon, excludes, args.extend)
    except (ForecastError, requests.exceptions.RequestException) as err:
        logging.error("Forecast fetch failed: %s", err)
        return 1

    report.parse_times()
    for line in format_report_lines(report, conn.call_count):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
