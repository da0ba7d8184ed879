"""
Attendance Generator Module

Reconstructs a complete, gap-free calendar of daily attendance statuses
for a period by merging clock records, approved leave and the join date.
All day boundaries are evaluated in Jakarta time (UTC+7).
"""

from typing import Dict, Iterable, List, Optional

from .entities import (
    AttendanceRecord, AttendanceStatus, DailyAttendanceStatus, LeaveRequest
)
from .jakarta_time import (
    Clock, day_name, format_long_date, is_weekend, iterate_days,
    to_calendar_date, to_jakarta_date_string, today_jakarta
)

NOT_YET_JOINED_NOTE = "not yet joined"


def _index_records_by_date(
    records: Iterable[AttendanceRecord]
) -> Dict[str, AttendanceRecord]:
    """
    Map Jakarta calendar date -> record.

    When several records fall on the same day the first one in input order
    is kept. Records without a parseable clock-in are dropped.
    """
    by_date: Dict[str, AttendanceRecord] = {}
    for record in records:
        day = to_jakarta_date_string(record.clock_in)
        if day is None:
            continue
        by_date.setdefault(day, record)
    return by_date


def _find_leave(leaves: List[LeaveRequest], date_str: str) -> Optional[LeaveRequest]:
    for leave in leaves:
        if leave.covers(date_str):
            return leave
    return None


def _record_status(record: AttendanceRecord) -> AttendanceStatus:
    if not record.status:
        return AttendanceStatus.PRESENT
    status = AttendanceStatus.from_value(record.status)
    if status is None:
        return AttendanceStatus.PRESENT
    return status


def generate_attendance_period(
    start_date,
    end_date,
    records: Iterable[AttendanceRecord],
    leaves: Iterable[LeaveRequest] = (),
    join_date=None,
    clock: Optional[Clock] = None,
) -> List[DailyAttendanceStatus]:
    """
    Generate the daily attendance statuses for every day in a period.

    Args:
        start_date: First day (date, datetime or YYYY-MM-DD string)
        end_date: Last day, inclusive
        records: Clock records of one employee, any order
        leaves: Leave requests of the same employee; only approved ones count
        join_date: Optional join date/timestamp; earlier days are not evaluated
        clock: Time source for "today"; defaults to the system clock

    Returns:
        One DailyAttendanceStatus per day, chronological. Empty when the
        range is inverted or its bounds cannot be read.
    """
    start = to_calendar_date(start_date)
    end = to_calendar_date(end_date)
    if start is None or end is None or start > end:
        return []

    today_str = today_jakarta(clock).isoformat()
    join_str = to_jakarta_date_string(join_date) if join_date else None

    records_by_date = _index_records_by_date(records)
    approved_leaves = [leave for leave in leaves if leave.is_approved]

    normalized: List[DailyAttendanceStatus] = []

    for current in iterate_days(start, end):
        date_str = current.isoformat()
        weekend = is_weekend(current)

        if join_str and date_str < join_str:
            normalized.append(DailyAttendanceStatus(
                date=date_str,
                formatted_date=format_long_date(current),
                day_name=day_name(current),
                status=AttendanceStatus.FUTURE,
                notes=NOT_YET_JOINED_NOTE,
                is_weekend=weekend,
            ))
            continue

        record = records_by_date.get(date_str)
        leave = _find_leave(approved_leaves, date_str)

        if record:
            status = _record_status(record)
        elif leave:
            status = AttendanceStatus.LEAVE
        elif date_str >= today_str:
            # Today without a record stays pending until the day is over
            status = AttendanceStatus.FUTURE
        elif weekend:
            status = AttendanceStatus.WEEKEND
        else:
            status = AttendanceStatus.ABSENT

        notes = record.notes if record else None
        if not notes and leave:
            notes = f"Leave: {leave.leave_type}"

        normalized.append(DailyAttendanceStatus(
            date=date_str,
            formatted_date=format_long_date(current),
            day_name=day_name(current),
            status=status,
            clock_in=record.clock_in if record else None,
            clock_out=record.clock_out if record else None,
            record_id=record.id if record else None,
            notes=notes or None,
            is_weekend=weekend,
        ))

    return normalized
