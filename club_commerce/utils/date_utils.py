"""Date manipulation utilities"""

from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

DateBound = Union[date, str, None]


def parse_date_bound(value: DateBound) -> Optional[date]:
    """Accept a date, an ISO 'YYYY-MM-DD' string, or an empty value (no bound)"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def start_of_day(day: date, tz: tzinfo) -> datetime:
    """First instant of a calendar day in the given timezone"""
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    """Last millisecond (23:59:59.999) of a calendar day in the given timezone"""
    return datetime.combine(day, time(23, 59, 59, 999000), tzinfo=tz)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 instant; naive values are taken as UTC"""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_timezone(name: str) -> tzinfo:
    """Timezone by IANA name, with 'UTC' short-circuited"""
    return timezone.utc if name.upper() == "UTC" else ZoneInfo(name)
