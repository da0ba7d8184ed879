"""
Integration tests for AttendanceReportService.
"""

import pytest
import json
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from openpyxl import load_workbook

from application.report_service import (
    AttendanceReportService, ReportGenerationParams, describe_period
)
from config.config_manager import AppConfig, SystemSettings
from domain.entities import AttendanceStatus


ROSTER_CSV = """user_id,full_name,department,position,role,join_date
u1,Budi Santoso,IT,Developer,karyawan,2023-01-10
u2,Siti Aminah,HR,Staf,magang,2024-03-11
u3,Super Admin,,,admin,
"""

RECORDS = [
    # Jakarta 07:55 Friday 1 March
    {"id": "r1", "user_id": "u1", "clock_in": "2024-03-01T00:55:00Z", "status": "present"},
    # Jakarta 09:20 Monday 4 March
    {"id": "r2", "user_id": "u1", "clock_in": "2024-03-04T02:20:00Z", "status": "late"},
    {"id": "r3", "user_id": "u2", "clock_in": "2024-03-11T01:00:00Z", "status": "present"},
]

LEAVES = [
    {"user_id": "u1", "start_date": "2024-03-05", "end_date": "2024-03-06",
     "leave_type": "Cuti Tahunan", "status": "approved"},
    {"user_id": "u2", "start_date": "2024-03-12", "end_date": "2024-03-12",
     "leave_type": "Sakit", "status": "pending"},
    {"user_id": "u3", "start_date": "2024-03-05", "end_date": "2024-03-05",
     "leave_type": "Cuti", "status": "approved"},
]

# Wednesday 13 March 2024, midday in Jakarta
CLOCK = lambda: datetime(2024, 3, 13, 5, 0, tzinfo=timezone.utc)


@pytest.fixture
def workspace():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / "employees.csv").write_text(ROSTER_CSV, encoding="utf-8")
        (root / "records.json").write_text(json.dumps(RECORDS), encoding="utf-8")
        (root / "leaves.json").write_text(json.dumps(LEAVES), encoding="utf-8")
        yield root


def make_params(root: Path, **overrides) -> ReportGenerationParams:
    values = dict(
        employees_csv_path=root / "employees.csv",
        records_path=root / "records.json",
        leaves_path=root / "leaves.json",
        output_path=root / "out" / "report.xlsx",
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 31),
        generate_pdf=False,
        clock=CLOCK,
    )
    values.update(overrides)
    return ReportGenerationParams(**values)


class TestGenerateReport:
    """Tests for generate_report."""

    def test_reports_reportable_employees(self, workspace):
        result = AttendanceReportService().generate_report(make_params(workspace))

        assert result.success
        assert [r.employee.user_id for r in result.reports] == ["u2", "u1"]
        assert result.skipped_names == ["Super Admin"]
        assert result.output_path.exists()

    def test_statistics(self, workspace):
        result = AttendanceReportService().generate_report(make_params(workspace))
        budi = next(r for r in result.reports if r.employee.user_id == "u1")

        # Weekdays 1..12 March: 1 present, 1 late, 2 leave, 4 absent
        assert (budi.present, budi.late, budi.leave, budi.absent) == (1, 1, 2, 4)
        assert budi.late_minutes == 80
        assert budi.days[12].status == AttendanceStatus.FUTURE
        assert len(budi.days) == 31

    def test_join_date_applied(self, workspace):
        result = AttendanceReportService().generate_report(make_params(workspace))
        siti = next(r for r in result.reports if r.employee.user_id == "u2")

        assert siti.days[0].notes == "not yet joined"
        assert siti.days[10].status == AttendanceStatus.PRESENT
        # Pending leave is ignored
        assert siti.days[11].status == AttendanceStatus.ABSENT
        assert (siti.present, siti.absent) == (1, 1)
        assert siti.attendance_rate == 50.0

    def test_summary_totals(self, workspace):
        result = AttendanceReportService().generate_report(make_params(workspace))

        assert result.summary.total_employees == 2
        assert result.summary.total_present == 2
        assert result.summary.total_absent == 5

    def test_leave_sheet_only_lists_reported_employees(self, workspace):
        result = AttendanceReportService().generate_report(make_params(workspace))
        ws = load_workbook(result.output_path)["Ringkasan Cuti"]

        assert ws["A4"].value == "Budi Santoso"
        assert ws["A5"].value == "Siti Aminah"
        assert ws["G5"].value == "Menunggu"
        assert ws["A6"].value is None

    def test_attendance_start_date_clamps_period(self, workspace):
        settings = SystemSettings(attendance_start_date="2024-03-04")
        result = AttendanceReportService().generate_report(make_params(workspace, settings=settings))
        budi = next(r for r in result.reports if r.employee.user_id == "u1")

        assert budi.days[0].date == "2024-03-04"
        assert result.summary.period_start == "2024-03-04"
        assert budi.present == 0

        ws = load_workbook(result.output_path)["Ringkasan Kehadiran"]
        assert ws["A3"].value == "Periode: 4 Maret 2024 - 31 Maret 2024"

    def test_settings_file_overrides_settings(self, workspace):
        rows = [
            {"key": "company_name", "value": "PT. Maju Jaya"},
            {"key": "attendance_start_date", "value": "2024-03-04"},
        ]
        (workspace / "settings.json").write_text(json.dumps({"data": rows}), encoding="utf-8")
        params = make_params(
            workspace,
            settings_path=workspace / "settings.json",
            settings=SystemSettings(clock_in_start="09:00"),
        )
        result = AttendanceReportService().generate_report(params)
        budi = next(r for r in result.reports if r.employee.user_id == "u1")

        assert result.summary.period_start == "2024-03-04"
        # clock_in_start is not in the file and keeps the configured 09:00
        assert budi.late_minutes == 20
        ws = load_workbook(result.output_path)["Ringkasan Kehadiran"]
        assert ws["A1"].value == "PT. MAJU JAYA"

    def test_missing_settings_file_keeps_settings(self, workspace):
        params = make_params(workspace, settings_path=workspace / "absent.json")
        result = AttendanceReportService().generate_report(params)

        assert result.summary.period_start == "2024-03-01"

    def test_sort_by_name(self, workspace):
        result = AttendanceReportService().generate_report(make_params(workspace, sort_by="name"))
        assert [r.employee.full_name for r in result.reports] == ["Budi Santoso", "Siti Aminah"]

    def test_without_leaves_file(self, workspace):
        result = AttendanceReportService().generate_report(make_params(workspace, leaves_path=None))
        budi = next(r for r in result.reports if r.employee.user_id == "u1")

        assert budi.leave == 0
        assert budi.absent == 6

    def test_pdf_generated(self, workspace):
        params = make_params(workspace, generate_pdf=True, pdf_output_dir=str(workspace / "pdf"))
        result = AttendanceReportService().generate_report(params)

        assert result.pdf_path == workspace / "pdf" / "Laporan_Kehadiran_2024_03.pdf"
        assert result.pdf_path.exists()

    def test_empty_roster_raises(self, workspace):
        (workspace / "employees.csv").write_text("user_id,full_name,role\nu9,Admin,admin\n", encoding="utf-8")

        with pytest.raises(ValueError, match="No reportable employees"):
            AttendanceReportService().generate_report(make_params(workspace))


class TestBuildParams:
    """Tests for build_params_from_config."""

    def test_from_config(self):
        config = AppConfig()
        config.paths.employees_csv = "/data/employees.csv"
        config.paths.records_file = "/data/records.json"
        config.output_settings.output_dir = "/reports"
        config.report_prefs.rate_threshold = 85

        params = AttendanceReportService.build_params_from_config(
            config, date(2024, 3, 1), date(2024, 3, 31)
        )

        assert params.employees_csv_path == Path("/data/employees.csv")
        assert params.leaves_path is None
        assert params.settings_path is None
        assert params.output_path == Path("/reports/Laporan_Kehadiran_2024_03.xlsx")
        assert params.rate_threshold == 85
        assert params.generate_pdf is True
        assert "Super Admin" in params.excluded_names

    def test_settings_file_from_config(self):
        config = AppConfig()
        config.paths.settings_file = "/data/settings.csv"

        params = AttendanceReportService.build_params_from_config(
            config, date(2024, 3, 1), date(2024, 3, 31)
        )

        assert params.settings_path == Path("/data/settings.csv")

    def test_overrides(self):
        params = AttendanceReportService.build_params_from_config(
            AppConfig(), date(2024, 3, 1), date(2024, 3, 31),
            output_path=Path("x.xlsx"), generate_pdf=False,
        )

        assert params.output_path == Path("x.xlsx")
        assert params.generate_pdf is False


class TestDescribePeriod:
    """Tests for period labels."""

    def test_full_month(self):
        assert describe_period(date(2024, 2, 1), date(2024, 2, 29)) == "Februari 2024"

    def test_partial_range(self):
        assert describe_period(date(2024, 3, 4), date(2024, 3, 15)) == "4 Maret 2024 - 15 Maret 2024"
