"""
Domain Entities Module

Core domain entities using dataclasses for the attendance system.
These entities represent the core business concepts independent of infrastructure.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, auto
from typing import Dict, List, Mapping, Optional, Union


Timestamp = Union[str, datetime, None]


class AttendanceStatus(str, Enum):
    """Status of attendance for a given day."""
    PRESENT = "present"          # Hadir
    LATE = "late"                # Terlambat
    EARLY_LEAVE = "early_leave"  # Pulang cepat
    ABSENT = "absent"            # Tidak hadir
    LEAVE = "leave"              # Cuti
    PERMISSION = "permission"    # Izin
    ALPHA = "alpha"              # Alpha (tanpa keterangan)
    HOLIDAY = "holiday"          # Libur nasional
    FUTURE = "future"            # Belum berjalan / belum bergabung
    WEEKEND = "weekend"          # Sabtu / Minggu

    @classmethod
    def from_value(cls, value) -> Optional["AttendanceStatus"]:
        """Return the matching status, or None for unknown values."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        text = STATUS_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            return None


# Backend values that are not part of the status set; sick days are Izin
STATUS_ALIASES = {
    "sick": AttendanceStatus.PERMISSION.value,
}


class RateColorTier(Enum):
    """Color tier for attendance rate display."""
    RED = auto()     # < threshold (default 80%)
    YELLOW = auto()  # >= threshold and < 90%
    GREEN = auto()   # >= 90%


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _date_str(value) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value or "").strip()
    # Spreadsheet exports turn date cells into midnight timestamps
    if len(text) > 10 and text[10] in "T ":
        return text[:10]
    return text


@dataclass
class AttendanceRecord:
    """
    A raw clock-in/clock-out event as stored by the backend.

    Attributes:
        id: Backend identifier of the row
        clock_in: Clock-in timestamp (ISO string or datetime)
        clock_out: Clock-out timestamp (None while still clocked in)
        status: Status assigned at clock time (e.g. 'present', 'late')
        notes: Optional free text
        user_id: Owner of the record
        work_hours: Hours worked, filled on clock-out
    """
    id: Optional[str] = None
    clock_in: Timestamp = None
    clock_out: Timestamp = None
    status: Optional[str] = None
    notes: Optional[str] = None
    user_id: Optional[str] = None
    work_hours: Optional[float] = None

    @classmethod
    def from_row(cls, row: Mapping) -> "AttendanceRecord":
        """Build a record from a backend row (dict-like)."""
        work_hours = row.get("work_hours")
        try:
            work_hours = float(work_hours) if work_hours not in (None, "") else None
        except (TypeError, ValueError):
            work_hours = None
        return cls(
            id=_optional_str(row.get("id")),
            clock_in=row.get("clock_in") or None,
            clock_out=row.get("clock_out") or None,
            status=_optional_str(row.get("status")),
            notes=_optional_str(row.get("notes")),
            user_id=_optional_str(row.get("user_id")),
            work_hours=work_hours,
        )


@dataclass
class LeaveRequest:
    """
    A leave request spanning inclusive calendar dates.

    Dates are kept as YYYY-MM-DD strings; range checks compare them as strings.
    """
    start_date: str
    end_date: str
    leave_type: str = ""
    status: str = "pending"
    user_id: Optional[str] = None
    id: Optional[str] = None
    reason: Optional[str] = None

    APPROVED = "approved"

    @property
    def is_approved(self) -> bool:
        return self.status == self.APPROVED

    def covers(self, date_str: str) -> bool:
        """Check whether the given YYYY-MM-DD string falls inside the range."""
        return self.start_date <= date_str <= self.end_date

    @property
    def days(self) -> int:
        """Inclusive number of calendar days, 0 when the dates are unreadable."""
        try:
            start = date.fromisoformat(self.start_date[:10])
            end = date.fromisoformat(self.end_date[:10])
        except (TypeError, ValueError):
            return 0
        return max((end - start).days + 1, 0)

    @classmethod
    def from_row(cls, row: Mapping) -> "LeaveRequest":
        """Build a leave request from a backend row (dict-like)."""
        return cls(
            start_date=_date_str(row.get("start_date")),
            end_date=_date_str(row.get("end_date")),
            leave_type=str(row.get("leave_type") or "").strip(),
            status=str(row.get("status") or "pending").strip(),
            user_id=_optional_str(row.get("user_id")),
            id=_optional_str(row.get("id")),
            reason=_optional_str(row.get("reason")),
        )


@dataclass
class Employee:
    """
    An employee profile.

    Attributes:
        user_id: Backend user identifier
        full_name: Display name
        department: Department name
        position: Job title
        role: Application role (karyawan, magang, pkwt, manager, admin)
        join_date: Join date or timestamp, as stored
    """
    user_id: str
    full_name: str
    department: str = ""
    position: str = "Staf"
    role: str = "karyawan"
    join_date: Optional[str] = None


@dataclass
class DailyAttendanceStatus:
    """One reconstructed calendar day of an employee's attendance."""
    date: str
    formatted_date: str
    day_name: str
    status: AttendanceStatus
    clock_in: Timestamp = None
    clock_out: Timestamp = None
    record_id: Optional[str] = None
    notes: Optional[str] = None
    is_weekend: bool = False

    def to_dict(self) -> Dict:
        """Serialize to plain JSON-friendly values."""
        def _ts(value):
            return value.isoformat() if isinstance(value, datetime) else value

        return {
            "date": self.date,
            "formatted_date": self.formatted_date,
            "day_name": self.day_name,
            "status": self.status.value,
            "clock_in": _ts(self.clock_in),
            "clock_out": _ts(self.clock_out),
            "record_id": self.record_id,
            "notes": self.notes,
            "is_weekend": self.is_weekend,
        }


@dataclass
class EmployeeAttendance:
    """
    An employee's reconstructed attendance over a period, with statistics.

    Attributes:
        employee: The employee
        days: Reconstructed days, chronological
        present: Days present (including early leave)
        late: Days late
        absent: Days absent (absent or alpha)
        leave: Days on leave or permission
        late_minutes: Total minutes late
        work_hours: Total hours between clock-in and clock-out
        attendance_rate: Percentage of attended working days
        rate_color: Color tier based on rate
        remarks: Short evaluation text
    """
    employee: Employee
    days: List[DailyAttendanceStatus] = field(default_factory=list)
    present: int = 0
    late: int = 0
    absent: int = 0
    leave: int = 0
    late_minutes: int = 0
    work_hours: float = 0.0
    attendance_rate: float = 0.0
    rate_color: RateColorTier = RateColorTier.RED
    remarks: str = ""
    daily_codes: Dict[str, str] = field(default_factory=dict)

    def _dates_with(self, *statuses: AttendanceStatus) -> List[str]:
        return [d.date for d in self.days if d.status in statuses]

    @property
    def absent_dates(self) -> List[str]:
        return self._dates_with(AttendanceStatus.ABSENT, AttendanceStatus.ALPHA)

    @property
    def late_dates(self) -> List[str]:
        return self._dates_with(AttendanceStatus.LATE)

    @property
    def leave_dates(self) -> List[str]:
        return self._dates_with(AttendanceStatus.LEAVE, AttendanceStatus.PERMISSION)


@dataclass
class PeriodSummary:
    """Totals across all employees for a report period."""
    period_start: str
    period_end: str
    total_employees: int = 0
    total_present: int = 0
    total_absent: int = 0
    total_leave: int = 0
    total_late: int = 0
