"""
Unit tests for RateCalculator and status codes.
"""

import pytest
from datetime import datetime, timezone
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.attendance_generator import generate_attendance_period
from domain.entities import (
    AttendanceRecord, AttendanceStatus, DailyAttendanceStatus, Employee, EmployeeAttendance, RateColorTier
)
from domain.rate_calculator import (
    REMARK_GOOD, REMARK_LATE, REMARK_NO_DATA, RateCalculator, status_code
)


def make_day(date_str: str, status: AttendanceStatus, clock_in=None, weekend=False):
    return DailyAttendanceStatus(
        date=date_str,
        formatted_date=date_str,
        day_name="",
        status=status,
        clock_in=clock_in,
        is_weekend=weekend,
    )


@pytest.fixture
def employee():
    return Employee(user_id="u1", full_name="Budi Santoso", department="IT")


class TestStatusCode:
    """Tests for matrix status codes."""

    @pytest.mark.parametrize("status,code", [
        (AttendanceStatus.PRESENT, "H"),
        (AttendanceStatus.EARLY_LEAVE, "H"),
        (AttendanceStatus.LATE, "T"),
        (AttendanceStatus.ABSENT, "A"),
        (AttendanceStatus.ALPHA, "A"),
        (AttendanceStatus.LEAVE, "C"),
        (AttendanceStatus.PERMISSION, "I"),
        (AttendanceStatus.HOLIDAY, "L"),
    ])
    def test_codes(self, status, code):
        assert status_code(make_day("2024-03-05", status)) == code

    def test_weekend_is_libur(self):
        assert status_code(make_day("2024-03-09", AttendanceStatus.WEEKEND, weekend=True)) == "L"

    def test_future_is_dash(self):
        assert status_code(make_day("2024-03-05", AttendanceStatus.FUTURE)) == "-"


class TestCountStatuses:
    """Tests for mutually exclusive counts."""

    def test_counts(self):
        days = [
            make_day("2024-03-04", AttendanceStatus.PRESENT),
            make_day("2024-03-05", AttendanceStatus.EARLY_LEAVE),
            make_day("2024-03-06", AttendanceStatus.LATE),
            make_day("2024-03-07", AttendanceStatus.ABSENT),
            make_day("2024-03-08", AttendanceStatus.ALPHA),
            make_day("2024-03-09", AttendanceStatus.WEEKEND, weekend=True),
            make_day("2024-03-11", AttendanceStatus.LEAVE),
            make_day("2024-03-12", AttendanceStatus.PERMISSION),
            make_day("2024-03-13", AttendanceStatus.FUTURE),
        ]
        counts = RateCalculator.count_statuses(days)

        assert counts == {"present": 2, "late": 1, "absent": 2, "leave": 2}


class TestRate:
    """Tests for the attendance rate and its color tier."""

    def test_rate(self):
        assert RateCalculator().calculate_rate(18, 2) == 90.0

    def test_nothing_to_attend(self):
        assert RateCalculator().calculate_rate(0, 0) == 100.0

    @pytest.mark.parametrize("rate,tier", [
        (95.0, RateColorTier.GREEN),
        (90.0, RateColorTier.GREEN),
        (89.9, RateColorTier.YELLOW),
        (80.0, RateColorTier.YELLOW),
        (79.9, RateColorTier.RED),
    ])
    def test_color_tiers(self, rate, tier):
        assert RateCalculator().get_rate_color(rate) == tier

    def test_custom_threshold(self):
        assert RateCalculator().get_rate_color(82.0, threshold=85) == RateColorTier.RED


class TestRemarks:
    """Tests for remark text."""

    def test_no_days(self):
        assert RateCalculator().build_remarks([], 0, 0) == REMARK_NO_DATA

    def test_good(self):
        days = [make_day("2024-03-04", AttendanceStatus.PRESENT)]
        assert RateCalculator().build_remarks(days, 2, 4) == REMARK_GOOD

    def test_absent_alert(self):
        days = [make_day("2024-03-04", AttendanceStatus.ABSENT)]
        remarks = RateCalculator().build_remarks(days, 3, 0)
        assert remarks == "Perlu evaluasi kehadiran (Alpha > 2)"

    def test_frequent_late(self):
        days = [make_day("2024-03-04", AttendanceStatus.LATE)]
        assert RateCalculator().build_remarks(days, 0, 5) == REMARK_LATE

    def test_absent_takes_priority(self):
        days = [make_day("2024-03-04", AttendanceStatus.ABSENT)]
        remarks = RateCalculator(absent_alert_days=1).build_remarks(days, 2, 10)
        assert remarks.startswith("Perlu evaluasi")


class TestEmployeeAttendance:
    """Tests for calculate_employee_attendance."""

    def test_full_calculation(self, employee):
        days = [
            make_day("2024-03-04", AttendanceStatus.PRESENT, "2024-03-04T00:55:00Z"),
            make_day("2024-03-05", AttendanceStatus.LATE, "2024-03-05T02:10:00Z"),
            make_day("2024-03-06", AttendanceStatus.LATE, "2024-03-06T01:30:00Z"),
            make_day("2024-03-07", AttendanceStatus.ABSENT),
            make_day("2024-03-08", AttendanceStatus.LEAVE),
        ]
        report = RateCalculator().calculate_employee_attendance(employee, days)

        assert (report.present, report.late, report.absent, report.leave) == (1, 2, 1, 1)
        # 09:10 and 08:30 Jakarta against an 08:00 start
        assert report.late_minutes == 70 + 30
        assert report.attendance_rate == 75.0
        assert report.rate_color == RateColorTier.RED
        assert report.remarks == REMARK_GOOD
        assert report.daily_codes == {
            "2024-03-04": "H", "2024-03-05": "T", "2024-03-06": "T",
            "2024-03-07": "A", "2024-03-08": "C",
        }
        assert report.absent_dates == ["2024-03-07"]
        assert report.late_dates == ["2024-03-05", "2024-03-06"]
        assert report.leave_dates == ["2024-03-08"]

    def test_work_hours_summed_over_complete_days(self, employee):
        days = [
            DailyAttendanceStatus("2024-03-04", "", "", AttendanceStatus.PRESENT,
                                  clock_in="2024-03-04T01:00:00Z", clock_out="2024-03-04T10:00:00Z"),
            DailyAttendanceStatus("2024-03-05", "", "", AttendanceStatus.LATE,
                                  clock_in="2024-03-05T02:30:00Z", clock_out="2024-03-05T10:15:00Z"),
            # still clocked in
            DailyAttendanceStatus("2024-03-06", "", "", AttendanceStatus.PRESENT,
                                  clock_in="2024-03-06T01:00:00Z"),
            make_day("2024-03-07", AttendanceStatus.ABSENT),
        ]
        report = RateCalculator().calculate_employee_attendance(employee, days)

        assert report.work_hours == 16.75

    def test_sick_record_counts_as_leave(self, employee):
        records = [AttendanceRecord(id="r1", clock_in="2024-06-04T01:00:00Z", status="sick")]
        days = generate_attendance_period(
            "2024-06-04", "2024-06-04", records, clock=lambda: datetime(2024, 6, 15, tzinfo=timezone.utc)
        )
        report = RateCalculator().calculate_employee_attendance(employee, days)

        assert (report.present, report.late, report.absent, report.leave) == (0, 0, 0, 1)
        assert report.daily_codes == {"2024-06-04": "I"}
        assert report.leave_dates == ["2024-06-04"]


class TestPeriodSummary:
    """Tests for calculate_period_summary."""

    def test_totals(self):
        reports = [
            EmployeeAttendance(employee=Employee("u1", "A"), present=10, late=2, absent=1, leave=0),
            EmployeeAttendance(employee=Employee("u2", "B"), present=8, late=0, absent=3, leave=2),
        ]
        summary = RateCalculator.calculate_period_summary(reports, "2024-03-01", "2024-03-31")

        assert summary.total_employees == 2
        assert summary.total_present == 18
        assert summary.total_late == 2
        assert summary.total_absent == 4
        assert summary.total_leave == 2
        assert summary.period_start == "2024-03-01"
