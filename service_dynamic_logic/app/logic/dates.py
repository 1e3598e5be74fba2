"""
Date helpers for date-aware conditions.

Record date-time values are stored in UTC (``YYYY-MM-DD HH:MM:SS``); they
are shifted to the configured zone before the calendar day is taken. Date
values (``YYYY-MM-DD``) carry no zone.
"""

from datetime import date, datetime, timezone, tzinfo
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

DATE_VALUE_LENGTH = 10


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Resolve a zone name; ``UTC`` does not need the tz database."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DateTimeHelper:
    """Parses record date values and compares them with today."""

    def __init__(self, tz: Optional[str] = "UTC", clock: Optional[Callable[[], datetime]] = None):
        self.timezone = resolve_timezone(tz)
        self.clock = clock or _utc_now

    def now(self) -> datetime:
        """Current moment in the configured zone."""
        current = self.clock()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        return current.astimezone(self.timezone)

    def today(self) -> date:
        return self.now().date()

    def to_datetime(self, value: Any) -> Optional[datetime]:
        """Parse a stored date-time; naive values are UTC."""
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                return None
        else:
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)

        return parsed.astimezone(self.timezone)

    def to_date(self, value: Any) -> Optional[date]:
        """Parse a date-only value."""
        if isinstance(value, datetime):
            converted = self.to_datetime(value)
            return converted.date() if converted else None
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip())
            except ValueError:
                return None
        return None

    def to_day(self, value: Any) -> Optional[date]:
        """Calendar day of a record value.

        Strings longer than a bare date are read as date-times.
        """
        if isinstance(value, str) and len(value) > DATE_VALUE_LENGTH:
            converted = self.to_datetime(value)
            return converted.date() if converted else None
        return self.to_date(value)

    def is_today(self, value: Any) -> bool:
        day = self.to_day(value)
        return day is not None and day == self.today()

    def is_future(self, value: Any) -> bool:
        day = self.to_day(value)
        return day is not None and day > self.today()

    def is_past(self, value: Any) -> bool:
        day = self.to_day(value)
        return day is not None and day < self.today()
