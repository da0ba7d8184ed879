"""
Rate Calculator Module

Calculates per-employee attendance statistics, attendance rates and
color grading from reconstructed daily statuses.
"""

from typing import Dict, List, Optional, Sequence

from .attendance_logic import ClockPolicy, calculate_work_hours
from .entities import (
    AttendanceStatus, DailyAttendanceStatus, Employee,
    EmployeeAttendance, PeriodSummary, RateColorTier
)

PRESENT_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.EARLY_LEAVE)
ABSENT_STATUSES = (AttendanceStatus.ABSENT, AttendanceStatus.ALPHA)
LEAVE_STATUSES = (AttendanceStatus.LEAVE, AttendanceStatus.PERMISSION)

# Matrix legend: H=Hadir, T=Terlambat, A=Alpha, C=Cuti, I=Izin, L=Libur
STATUS_CODES = {
    AttendanceStatus.PRESENT: "H",
    AttendanceStatus.EARLY_LEAVE: "H",
    AttendanceStatus.LATE: "T",
    AttendanceStatus.ABSENT: "A",
    AttendanceStatus.ALPHA: "A",
    AttendanceStatus.LEAVE: "C",
    AttendanceStatus.PERMISSION: "I",
    AttendanceStatus.HOLIDAY: "L",
}

LEGEND = "Keterangan: H=Hadir, T=Terlambat, A=Alpha, I=Izin, C=Cuti, L=Libur"

REMARK_NO_DATA = "Belum ada data"
REMARK_GOOD = "Kehadiran baik"
REMARK_ABSENT = "Perlu evaluasi kehadiran (Alpha > {limit})"
REMARK_LATE = "Sering terlambat"


def status_code(day: DailyAttendanceStatus) -> str:
    """Single-letter matrix code for a day."""
    code = STATUS_CODES.get(day.status)
    if code:
        return code
    if day.is_weekend:
        return "L"
    return "-"


class RateCalculator:
    """
    Calculates attendance statistics.

    Provides:
    - Mutually exclusive present / late / absent / leave counts
    - Late minutes against the clock-in start
    - Worked hours from clock-in / clock-out pairs
    - Attendance rate with 3-tier color grading
    - Short remarks for HR review
    """

    def __init__(
        self,
        policy: Optional[ClockPolicy] = None,
        absent_alert_days: int = 2,
        frequent_late_days: int = 4
    ):
        self.policy = policy or ClockPolicy()
        self.absent_alert_days = absent_alert_days
        self.frequent_late_days = frequent_late_days

    @staticmethod
    def count_statuses(days: Sequence[DailyAttendanceStatus]) -> Dict[str, int]:
        """Count days per report bucket. Late days count only as late."""
        counts = {"present": 0, "late": 0, "absent": 0, "leave": 0}
        for day in days:
            if day.status in PRESENT_STATUSES:
                counts["present"] += 1
            elif day.status == AttendanceStatus.LATE:
                counts["late"] += 1
            elif day.status in ABSENT_STATUSES:
                counts["absent"] += 1
            elif day.status in LEAVE_STATUSES:
                counts["leave"] += 1
        return counts

    def calculate_late_minutes(self, days: Sequence[DailyAttendanceStatus]) -> int:
        return sum(
            self.policy.late_minutes(day.clock_in)
            for day in days
            if day.status == AttendanceStatus.LATE and day.clock_in
        )

    @staticmethod
    def total_work_hours(days: Sequence[DailyAttendanceStatus]) -> float:
        """Sum of worked hours; days without both clock times are skipped."""
        hours = (calculate_work_hours(day.clock_in, day.clock_out) for day in days)
        return round(sum(h for h in hours if h is not None), 2)

    def calculate_rate(self, attended_days: int, absent_days: int) -> float:
        """
        Attendance rate percentage over days that required attendance.

        Returns 100.0 when there was nothing to attend.
        """
        required = attended_days + absent_days
        if required == 0:
            return 100.0
        return (attended_days / required) * 100

    def get_rate_color(self, rate: float, threshold: int = 80) -> RateColorTier:
        if rate < threshold:
            return RateColorTier.RED
        elif rate < 90:
            return RateColorTier.YELLOW
        else:
            return RateColorTier.GREEN

    def build_remarks(self, days: Sequence[DailyAttendanceStatus], absent: int, late: int) -> str:
        if not days:
            return REMARK_NO_DATA
        if absent > self.absent_alert_days:
            return REMARK_ABSENT.format(limit=self.absent_alert_days)
        if late > self.frequent_late_days:
            return REMARK_LATE
        return REMARK_GOOD

    def calculate_employee_attendance(
        self,
        employee: Employee,
        days: List[DailyAttendanceStatus],
        threshold: int = 80
    ) -> EmployeeAttendance:
        """
        Calculate the complete period statistics for an employee.

        Args:
            employee: The employee
            days: Reconstructed days for the period
            threshold: Rate threshold for color grading

        Returns:
            EmployeeAttendance with all calculations
        """
        counts = self.count_statuses(days)
        rate = self.calculate_rate(counts["present"] + counts["late"], counts["absent"])

        return EmployeeAttendance(
            employee=employee,
            days=days,
            present=counts["present"],
            late=counts["late"],
            absent=counts["absent"],
            leave=counts["leave"],
            late_minutes=self.calculate_late_minutes(days),
            work_hours=self.total_work_hours(days),
            attendance_rate=rate,
            rate_color=self.get_rate_color(rate, threshold),
            remarks=self.build_remarks(days, counts["absent"], counts["late"]),
            daily_codes={day.date: status_code(day) for day in days},
        )

    @staticmethod
    def calculate_period_summary(
        reports: Sequence[EmployeeAttendance],
        period_start: str,
        period_end: str
    ) -> PeriodSummary:
        return PeriodSummary(
            period_start=period_start,
            period_end=period_end,
            total_employees=len(reports),
            total_present=sum(r.present for r in reports),
            total_absent=sum(r.absent for r in reports),
            total_leave=sum(r.leave for r in reports),
            total_late=sum(r.late for r in reports),
        )
