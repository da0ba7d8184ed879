"""
Command Line Interface

Entry points for reconstructing a single employee's attendance period
(printed as JSON) and for generating the full XLSX/PDF report.
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime, time
from pathlib import Path
from typing import List, Optional, Tuple

from application.report_service import AttendanceReportService
from config.config_manager import ConfigManager
from domain.attendance_generator import generate_attendance_period
from domain.jakarta_time import JAKARTA_TZ, Clock, month_bounds
from infrastructure.logger import get_logger, set_console_level
from infrastructure.record_loader import AttendanceError, RecordLoader

logger = get_logger("CLI")


def parse_month(value: str) -> Tuple[date, date]:
    """Parse YYYY-MM into the month's first and last day."""
    try:
        year_str, month_str = value.split("-")
        return month_bounds(int(year_str), int(month_str))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid month '{value}', expected YYYY-MM")


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def fixed_clock(day: date) -> Clock:
    """Clock pinned to midday of the given Jakarta date."""
    instant = datetime.combine(day, time(12, 0), tzinfo=JAKARTA_TZ)
    return lambda: instant


def _add_range_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--month", type=parse_month, help="Whole month, YYYY-MM")
    group.add_argument("--start", type=parse_date, help="First day, YYYY-MM-DD (needs --end)")
    parser.add_argument("--end", type=parse_date, help="Last day, YYYY-MM-DD")


def _resolve_range(parser: argparse.ArgumentParser, args) -> Tuple[date, date]:
    if args.month:
        if args.end:
            parser.error("--end cannot be combined with --month")
        return args.month
    if not args.end:
        parser.error("--start requires --end")
    return args.start, args.end


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="absensi",
        description="Attendance period reconstruction and reporting",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    period = sub.add_parser("period", help="Print one employee's daily statuses as JSON")
    period.add_argument("--records", type=Path, required=True, help="Attendance records export")
    period.add_argument("--leaves", type=Path, help="Leave requests export")
    period.add_argument("--user", help="Only use rows of this user_id")
    period.add_argument("--join-date", help="Join date; earlier days are not evaluated")
    period.add_argument("--today", type=parse_date, help="Override today's date (Jakarta)")
    _add_range_arguments(period)

    report = sub.add_parser("report", help="Generate the XLSX (and PDF) attendance report")
    report.add_argument("--employees", type=Path, required=True, help="Employee roster CSV")
    report.add_argument("--records", type=Path, required=True, help="Attendance records export")
    report.add_argument("--leaves", type=Path, help="Leave requests export")
    report.add_argument("--settings", type=Path, help="System settings export (key/value rows)")
    report.add_argument("--output", type=Path, help="Excel output path")
    report.add_argument("--no-pdf", action="store_true", help="Skip the PDF report")
    report.add_argument("--config", type=Path, help="Config JSON (defaults to src/config.json)")
    report.add_argument("--today", type=parse_date, help="Override today's date (Jakarta)")
    _add_range_arguments(report)

    return parser


def run_period(args, start: date, end: date) -> int:
    loader = RecordLoader()
    records = loader.load_records(args.records)
    leaves = loader.load_leaves(args.leaves) if args.leaves else []

    if args.user:
        records = [r for r in records if r.user_id == args.user]
        leaves = [leave for leave in leaves if leave.user_id == args.user]

    days = generate_attendance_period(
        start, end, records, leaves,
        join_date=args.join_date,
        clock=fixed_clock(args.today) if args.today else None,
    )
    json.dump([day.to_dict() for day in days], sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def run_report(args, start: date, end: date) -> int:
    config = ConfigManager(args.config).load()
    config.paths.employees_csv = str(args.employees)
    config.paths.records_file = str(args.records)
    config.paths.leaves_file = str(args.leaves) if args.leaves else ""
    if args.settings:
        config.paths.settings_file = str(args.settings)

    params = AttendanceReportService.build_params_from_config(
        config, start, end,
        output_path=args.output,
        generate_pdf=False if args.no_pdf else None,
    )
    if args.today:
        params.clock = fixed_clock(args.today)

    result = AttendanceReportService().generate_report(params)

    print(f"Excel: {result.output_path}")
    if result.pdf_path:
        print(f"PDF: {result.pdf_path}")
    summary = result.summary
    print(
        f"Karyawan: {summary.total_employees}  Hadir: {summary.total_present}  "
        f"Terlambat: {summary.total_late}  Tidak Hadir: {summary.total_absent}  "
        f"Cuti: {summary.total_leave}"
    )
    return 0


def run_app(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the command and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_console_level(logging.DEBUG)

    start, end = _resolve_range(parser, args)

    try:
        if args.command == "period":
            return run_period(args, start, end)
        return run_report(args, start, end)
    except (AttendanceError, ValueError) as e:
        logger.error(str(e))
        return 1
    except PermissionError as e:
        logger.error(f"Cannot write output: {e}")
        return 1
