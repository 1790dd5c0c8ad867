"""Wall-clock helpers. Times of day are tenant-local ``HH:MM`` strings and are
compared as integer minutes since midnight, never lexically."""
import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from tenant_availability.core.config import settings

# 0 = Sunday ... 6 = Saturday, the index used by tenant_business_hours.day_of_week
WEEKDAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

# Postgres TIME columns come back as HH:MM:SS; seconds are ignored
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{1,2})(?::\d{1,2})?$")


def to_minutes(value: str) -> int:
    """``"09:30"`` -> 570. Accepts ``"9:5"`` and ``"09:05:00"``; ``"24:00"`` is end of day."""
    match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59 or hours > 24 or (hours == 24 and minutes):
        raise ValueError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def format_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def normalize_time(value: str) -> str:
    return format_minutes(to_minutes(value))


def weekday_index(d: date) -> int:
    return d.isoweekday() % 7


def overlaps(start: int, end: int, other_start: int, other_end: int) -> bool:
    """Half-open intervals: touching at an edge is not an overlap."""
    return start < other_end and end > other_start


def contains(outer_start: int, outer_end: int, start: int, end: int) -> bool:
    """Inclusive at both bounds."""
    return outer_start <= start and end <= outer_end


def local_now() -> datetime:
    """Naive tenant-local wall-clock time."""
    if settings.timezone:
        return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)
    return datetime.now()
