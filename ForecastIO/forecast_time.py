"""Point-in-time argument for at-time forecast requests."""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Union


class TimeKind(Enum):
    DATETIME = "datetime"
    UNIX = "unix"
    TEXT = "text"


@dataclass(frozen=True)
class ForecastTime:
    """
    The moment an at-time forecast is requested for.

    Build one with ``at_datetime``, ``at_unix`` or ``at_text``; the request
    path segment is formatted according to ``kind``.

    Text values are sent as-is. The service accepts a decimal Unix time or
    ``YYYY-MM-DDTHH:MM:SS`` with an optional ``Z`` or ``+HHMM``/``-HHMM``
    zone, for example ``2013-05-06T12:00:00-0400``. Malformed text is only
    rejected by the service.
    """
    kind: TimeKind
    value: Union[datetime, int, str]

    @classmethod
    def at_datetime(cls, value: datetime) -> "ForecastTime":
        """Naive datetimes are taken to be UTC."""
        return cls(TimeKind.DATETIME, value)

    @classmethod
    def at_unix(cls, seconds: int) -> "ForecastTime":
        return cls(TimeKind.UNIX, int(seconds))

    @classmethod
    def at_text(cls, text: str) -> "ForecastTime":
        return cls(TimeKind.TEXT, text)

    def url_segment(self) -> str:
        if self.kind is TimeKind.DATETIME:
            moment = self.value
            if moment.tzinfo is None:
                moment = moment.replace(tzinfo=timezone.utc)
            return str(int(moment.timestamp()))
        if self.kind is TimeKind.UNIX:
            return str(self.value)
        return self.value
