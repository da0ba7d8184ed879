"""
Jakarta Time Module

Centralized timezone handling for Jakarta (WIB, fixed UTC+7, no DST).
All calendar-date decisions in the domain layer go through these helpers.
"""

from calendar import monthrange
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterator, Optional, Tuple

JAKARTA_TZ = timezone(timedelta(hours=7), "WIB")

# Indexed by date.weekday() (0 = Monday)
DAY_NAMES = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"]

MONTH_NAMES = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: the current instant, timezone-aware."""
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse a backend timestamp into an aware datetime.

    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_jakarta(value) -> Optional[datetime]:
    """Convert a timestamp to Jakarta local time, or None if unparseable."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    try:
        return parsed.astimezone(JAKARTA_TZ)
    except (OverflowError, ValueError):
        return None


def to_jakarta_date_string(value) -> Optional[str]:
    """
    Render a timestamp as its Jakarta calendar date (YYYY-MM-DD).

    Plain dates are returned as-is; they are already calendar days.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value.isoformat()
    local = to_jakarta(value)
    return local.date().isoformat() if local else None


def to_calendar_date(value) -> Optional[date]:
    """Coerce a date, datetime or string into a Jakarta calendar date."""
    date_str = to_jakarta_date_string(value)
    if date_str is None:
        return None
    return date.fromisoformat(date_str)


def today_jakarta(clock: Optional[Clock] = None) -> date:
    """Today's calendar date in Jakarta, read once from the given clock."""
    now = (clock or utc_now)()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(JAKARTA_TZ).date()


def minutes_since_midnight(value) -> Optional[int]:
    """Jakarta-local minutes since midnight for a timestamp."""
    local = to_jakarta(value)
    if local is None:
        return None
    return local.hour * 60 + local.minute


def day_name(day: date) -> str:
    """Indonesian weekday name."""
    return DAY_NAMES[day.weekday()]


def format_long_date(day: date) -> str:
    """Indonesian long date, e.g. '10 Maret 2024'."""
    return f"{day.day} {MONTH_NAMES[day.month - 1]} {day.year}"


def format_period_label(year: int, month: int) -> str:
    """Indonesian month label, e.g. 'Maret 2024'."""
    return f"{MONTH_NAMES[month - 1]} {year}"


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def iterate_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month."""
    _, num_days = monthrange(year, month)
    return date(year, month, 1), date(year, month, num_days)
