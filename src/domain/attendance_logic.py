"""
Attendance Logic Module

Company clock rules driven by the system settings: minutes late against the
clock-in start, worked hours and the attendance start date. All wall-clock
comparisons use Jakarta local time.
"""

from datetime import date, datetime, time
from typing import Optional

from .jakarta_time import minutes_since_midnight, parse_timestamp, to_calendar_date
from config.config_manager import SystemSettings


def parse_time(time_str: str) -> time:
    """Parse time string (HH:MM) to time object."""
    if not time_str:
        return time(0, 0)
    try:
        parts = time_str.split(':')
        return time(int(parts[0]), int(parts[1]))
    except (ValueError, IndexError):
        return time(0, 0)


def time_to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def calculate_work_hours(clock_in, clock_out) -> Optional[float]:
    """
    Hours between clock-in and clock-out, rounded to 2 decimals.

    Returns None when either timestamp is missing or unreadable.
    """
    start = parse_timestamp(clock_in)
    end = parse_timestamp(clock_out)
    if start is None or end is None:
        return None
    return round((end - start).total_seconds() / 3600, 2)


class ClockPolicy:
    """
    Applies the company's clock rules.

    Rules:
    - Late minutes are counted from clock_in_start
    - Days before attendance_start_date are outside the attendance period
    """

    def __init__(self, settings: Optional[SystemSettings] = None):
        self.settings = settings or SystemSettings()

    def late_minutes(self, clock_in) -> int:
        minutes = minutes_since_midnight(clock_in)
        if minutes is None:
            return 0
        limit = time_to_minutes(parse_time(self.settings.clock_in_start or "08:00"))
        return max(minutes - limit, 0)

    def attendance_start(self) -> Optional[date]:
        """Configured first day of attendance tracking, None when unset or unreadable."""
        if not self.settings.attendance_start_date:
            return None
        return to_calendar_date(self.settings.attendance_start_date)

    def is_within_attendance_period(self, day) -> bool:
        start = self.attendance_start()
        check = day if isinstance(day, date) and not isinstance(day, datetime) else to_calendar_date(day)
        if start is None or check is None:
            return True
        return check >= start
