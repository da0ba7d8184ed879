"""
Report Service Module

Application layer service that orchestrates attendance report generation:
load exports, reconstruct each employee's period, compute statistics and
write the Excel / PDF reports.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from config.config_manager import AppConfig, SystemSettings
from domain.attendance_generator import generate_attendance_period
from domain.attendance_logic import ClockPolicy
from domain.entities import (
    AttendanceRecord, DailyAttendanceStatus, Employee,
    EmployeeAttendance, LeaveRequest, PeriodSummary
)
from domain.jakarta_time import Clock, format_long_date, format_period_label
from domain.rate_calculator import RateCalculator
from domain.sorting import sort_attendance_list
from domain.staff_classifier import StaffClassifier
from infrastructure.logger import get_logger

logger = get_logger("ReportService")


@dataclass
class ReportGenerationParams:
    """
    Parameters for report generation.

    Decouples the service from the persisted AppConfig layout.
    """
    employees_csv_path: Path
    records_path: Path
    output_path: Path
    start_date: date
    end_date: date
    leaves_path: Optional[Path] = None
    settings_path: Optional[Path] = None

    settings: SystemSettings = field(default_factory=SystemSettings)
    required_roles: Sequence[str] = ("karyawan", "magang", "pkwt")
    excluded_names: Sequence[str] = ()

    rate_threshold: int = 80
    sort_by: str = "attendance_rate"
    absent_alert_days: int = 2
    frequent_late_days: int = 4

    generate_pdf: bool = True
    pdf_output_dir: Optional[str] = None
    pdf_filename_pattern: str = "Laporan_Kehadiran_{year}_{month}.pdf"
    custom_font_path: Optional[str] = None

    clock: Optional[Clock] = None


@dataclass
class ReportResult:
    """Result of report generation."""
    success: bool
    output_path: Path
    reports: List[EmployeeAttendance]
    summary: PeriodSummary
    pdf_path: Optional[Path] = None
    skipped_names: List[str] = field(default_factory=list)


def describe_period(start: date, end: date) -> str:
    """Readable period label: 'Maret 2024' for a full month, else a date range."""
    next_day = date.fromordinal(end.toordinal() + 1)
    if start.day == 1 and start.year == end.year and start.month == end.month and next_day.month != end.month:
        return format_period_label(start.year, start.month)
    return f"{format_long_date(start)} - {format_long_date(end)}"


def group_by_user(items) -> Dict[Optional[str], list]:
    grouped = defaultdict(list)
    for item in items:
        grouped[item.user_id].append(item)
    return grouped


class AttendanceReportService:
    """
    Application service for generating attendance reports.

    This service:
    - Orchestrates loading, reconstruction, statistics and writing
    - Depends only on domain entities and infrastructure, not on the CLI
    - Provides logging for key operations
    """

    def build_employee_period(
        self,
        employee: Employee,
        records: Sequence[AttendanceRecord],
        leaves: Sequence[LeaveRequest],
        start_date,
        end_date,
        clock: Optional[Clock] = None
    ) -> List[DailyAttendanceStatus]:
        """Reconstruct one employee's period from already-filtered records and leaves."""
        return generate_attendance_period(
            start_date, end_date, records, leaves,
            join_date=employee.join_date, clock=clock,
        )

    def effective_start(self, start_date: date, settings: SystemSettings) -> date:
        """Clamp the period start to the configured attendance start date."""
        policy = ClockPolicy(settings)
        if policy.is_within_attendance_period(start_date):
            return start_date
        configured = policy.attendance_start()
        logger.info(f"Period start moved to attendance start date {configured.isoformat()}")
        return configured

    def load_settings(self, params: ReportGenerationParams, loader) -> SystemSettings:
        """
        System settings for the run.

        Rows from params.settings_path (backend key/value export) override
        params.settings key by key.
        """
        if not params.settings_path:
            return params.settings
        rows = loader.load_rows(params.settings_path)
        if not rows:
            return params.settings
        logger.info(f"Using system settings from {params.settings_path.name}")
        return SystemSettings.from_key_values(rows, base=params.settings)

    def generate_report(self, params: ReportGenerationParams) -> ReportResult:
        """
        Generate the attendance report.

        Args:
            params: ReportGenerationParams containing all necessary configuration

        Returns:
            ReportResult with the outcome of report generation

        Raises:
            ValueError: If no reportable employees are found
            SourceFormatError: If an export file cannot be read
            PermissionError: If files cannot be written
        """
        from infrastructure.excel_writer import ExcelWriter
        from infrastructure.record_loader import RecordLoader

        classifier = StaffClassifier(params.required_roles, params.excluded_names)
        classifier.load_from_csv(params.employees_csv_path)
        employees = classifier.reportable_employees
        skipped_names = [e.full_name for e in classifier.all_employees if not classifier.is_reportable(e)]

        if not employees:
            raise ValueError(f"No reportable employees found in {params.employees_csv_path}")

        logger.info(f"Roster: {len(employees)} employees, {len(skipped_names)} skipped")

        loader = RecordLoader()
        records = loader.load_records(params.records_path)
        leaves = loader.load_leaves(params.leaves_path) if params.leaves_path else []
        settings = self.load_settings(params, loader)

        records_by_user = group_by_user(records)
        leaves_by_user = group_by_user(leaves)

        start = self.effective_start(params.start_date, settings)
        end = params.end_date
        period_label = describe_period(start, end)

        calculator = RateCalculator(
            ClockPolicy(settings),
            absent_alert_days=params.absent_alert_days,
            frequent_late_days=params.frequent_late_days,
        )

        reports: List[EmployeeAttendance] = []
        for employee in employees:
            days = self.build_employee_period(
                employee,
                records_by_user.get(employee.user_id, []),
                leaves_by_user.get(employee.user_id, []),
                start, end,
                clock=params.clock,
            )
            reports.append(
                calculator.calculate_employee_attendance(employee, days, params.rate_threshold)
            )

        reports = sort_attendance_list(reports, params.sort_by)
        summary = calculator.calculate_period_summary(reports, start.isoformat(), end.isoformat())

        logger.info(
            f"Processed {summary.total_employees} employees: present {summary.total_present}, "
            f"late {summary.total_late}, absent {summary.total_absent}, leave {summary.total_leave}"
        )

        leave_rows = self._leave_rows(employees, leaves, start, end)

        logger.info(f"Writing Excel: {params.output_path}")
        writer = ExcelWriter(settings.company_name)
        writer.create_report(reports, summary, leave_rows, period_label, params.output_path)
        logger.info("Excel written")

        pdf_path = None
        if params.generate_pdf:
            try:
                pdf_path = self._generate_pdf_report(params, settings, reports, summary, period_label)
            except Exception as e:
                logger.error(f"PDF generation failed: {e}")

        return ReportResult(
            success=True,
            output_path=params.output_path,
            reports=reports,
            summary=summary,
            pdf_path=pdf_path,
            skipped_names=skipped_names,
        )

    @staticmethod
    def _leave_rows(
        employees: Sequence[Employee],
        leaves: Sequence[LeaveRequest],
        start: date,
        end: date
    ) -> List[Tuple[Employee, LeaveRequest]]:
        """Leave requests of reportable employees that overlap the period."""
        by_id = {e.user_id: e for e in employees}
        start_str, end_str = start.isoformat(), end.isoformat()
        rows = [
            (by_id[leave.user_id], leave)
            for leave in leaves
            if leave.user_id in by_id and leave.start_date <= end_str and leave.end_date >= start_str
        ]
        return sorted(rows, key=lambda pair: (pair[1].start_date, pair[0].full_name))

    def _generate_pdf_report(
        self,
        params: ReportGenerationParams,
        settings: SystemSettings,
        reports: List[EmployeeAttendance],
        summary: PeriodSummary,
        period_label: str
    ) -> Path:
        from infrastructure.pdf_writer import PdfWriter, format_filename

        pdf_dir = Path(params.pdf_output_dir) if params.pdf_output_dir else params.output_path.parent
        pdf_dir.mkdir(parents=True, exist_ok=True)

        pdf_path = pdf_dir / format_filename(
            params.pdf_filename_pattern, params.start_date.year, params.start_date.month
        )
        logger.info(f"Writing PDF: {pdf_path}")

        PdfWriter(
            company_name=settings.company_name,
            custom_font_path=params.custom_font_path,
        ).create_report(reports, summary, period_label, pdf_path)
        return pdf_path

    @staticmethod
    def build_params_from_config(
        config: AppConfig,
        start_date: date,
        end_date: date,
        output_path: Optional[Path] = None,
        generate_pdf: Optional[bool] = None
    ) -> ReportGenerationParams:
        """
        Build ReportGenerationParams from AppConfig.

        Args:
            config: Application configuration
            start_date: First day of the report
            end_date: Last day of the report
            output_path: Excel path; defaults to output_dir + filename_pattern
            generate_pdf: Overrides the configured PDF toggle when given

        Returns:
            ReportGenerationParams ready for generate_report()
        """
        from infrastructure.pdf_writer import format_filename

        out = config.output_settings
        if output_path is None:
            filename = format_filename(out.filename_pattern, start_date.year, start_date.month)
            output_path = Path(out.output_dir or ".") / filename

        return ReportGenerationParams(
            employees_csv_path=Path(config.paths.employees_csv),
            records_path=Path(config.paths.records_file),
            leaves_path=Path(config.paths.leaves_file) if config.paths.leaves_file else None,
            settings_path=Path(config.paths.settings_file) if config.paths.settings_file else None,
            output_path=output_path,
            start_date=start_date,
            end_date=end_date,
            settings=config.system_settings,
            required_roles=tuple(config.roster.required_roles),
            excluded_names=tuple(config.roster.excluded_names),
            rate_threshold=config.report_prefs.rate_threshold,
            sort_by=config.report_prefs.sort_by,
            absent_alert_days=config.report_prefs.absent_alert_days,
            frequent_late_days=config.report_prefs.frequent_late_days,
            generate_pdf=out.generate_pdf if generate_pdf is None else generate_pdf,
            pdf_output_dir=out.pdf_output_dir or None,
            pdf_filename_pattern=out.pdf_filename_pattern,
            custom_font_path=config.paths.custom_font_path or None,
        )
