"""
Excel Writer Module

Generates the formatted multi-sheet Excel attendance report:
summary, day-by-day matrix and leave overview.
"""

from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from domain.entities import Employee, EmployeeAttendance, LeaveRequest, PeriodSummary, RateColorTier
from domain.jakarta_time import iterate_days
from domain.rate_calculator import LEGEND

LeaveRow = Tuple[Employee, LeaveRequest]


class ExcelWriter:
    """
    Generates formatted Excel attendance reports.

    Sheets:
    - Ringkasan Kehadiran: company header, totals, one row per employee, signatures
    - Detail Kehadiran (Matrix): one column per day with status codes
    - Ringkasan Cuti: leave requests in the period

    Styling:
    - Blue header band, alternating row shading
    - Green/orange/red codes for present/late/absent
    - 3-tier color for attendance rates
    """

    COLORS = {
        'header': PatternFill(start_color='1E40AF', end_color='1E40AF', fill_type='solid'),
        'alt': PatternFill(start_color='F8FAFC', end_color='F8FAFC', fill_type='solid'),
        'weekend': PatternFill(start_color='E2E8F0', end_color='E2E8F0', fill_type='solid'),
        'green': PatternFill(start_color='90EE90', end_color='90EE90', fill_type='solid'),
        'yellow': PatternFill(start_color='FFD700', end_color='FFD700', fill_type='solid'),
        'red': PatternFill(start_color='FF6B6B', end_color='FF6B6B', fill_type='solid'),
    }

    FONT_TITLE = Font(name='Arial', bold=True, size=14, color='1E40AF')
    FONT_SUBTITLE = Font(name='Arial', size=10, color='4A5568')
    FONT_SECTION = Font(name='Arial', bold=True, size=11, color='1E40AF')
    FONT_HEADER = Font(name='Arial', bold=True, size=10, color='FFFFFF')
    FONT_DATA = Font(name='Arial', size=9)
    FONT_GOOD = Font(name='Arial', size=9, color='047857')
    FONT_WARNING = Font(name='Arial', size=9, color='D97706')
    FONT_BAD = Font(name='Arial', size=9, color='DC2626')
    FONT_SIGNATURE = Font(name='Arial', bold=True, size=10)

    CODE_FONTS = {'H': FONT_GOOD, 'T': FONT_WARNING, 'A': FONT_BAD}

    LEAVE_STATUS_LABELS = {
        'approved': 'Disetujui',
        'rejected': 'Ditolak',
        'pending': 'Menunggu',
    }

    BORDER = Border(
        left=Side(style='thin', color='A0AEC0'),
        right=Side(style='thin', color='A0AEC0'),
        top=Side(style='thin', color='A0AEC0'),
        bottom=Side(style='thin', color='A0AEC0')
    )

    SUMMARY_SHEET = "Ringkasan Kehadiran"
    MATRIX_SHEET = "Detail Kehadiran (Matrix)"
    LEAVE_SHEET = "Ringkasan Cuti"

    def __init__(self, company_name: str = "PT. Talenta Traincom Indonesia"):
        self.company_name = company_name
        self.wb: Optional[Workbook] = None

    def create_report(
        self,
        reports: Sequence[EmployeeAttendance],
        summary: PeriodSummary,
        leave_rows: Sequence[LeaveRow],
        period_label: str,
        output_path: Path,
        printed_at: Optional[datetime] = None
    ) -> Path:
        """
        Create the complete attendance workbook.

        Args:
            reports: Per-employee attendance, already sorted
            summary: Period totals
            leave_rows: (employee, leave request) pairs to list
            period_label: Human readable period, e.g. "Maret 2024"
            output_path: Path to save the Excel file
            printed_at: Timestamp printed in the header (default: now)

        Returns:
            Path to the created file
        """
        self.wb = Workbook()
        self.wb.remove(self.wb.active)

        printed = (printed_at or datetime.now()).strftime('%d/%m/%Y %H:%M')

        self._write_summary_sheet(
            self.wb.create_sheet(self.SUMMARY_SHEET), reports, summary, period_label, printed
        )
        self._write_matrix_sheet(
            self.wb.create_sheet(self.MATRIX_SHEET), reports, summary, period_label
        )
        self._write_leave_sheet(
            self.wb.create_sheet(self.LEAVE_SHEET), leave_rows, period_label
        )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(output_path)
        return output_path

    def _write_header_cells(self, ws, row: int, labels: List[str]) -> None:
        for col, label in enumerate(labels, start=1):
            cell = ws.cell(row, col, label)
            cell.font = self.FONT_HEADER
            cell.fill = self.COLORS['header']
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
            cell.border = self.BORDER

    def _data_cell(self, ws, row: int, col: int, value, alt: bool, center: bool = False, font=None):
        cell = ws.cell(row, col, value)
        cell.font = font or self.FONT_DATA
        cell.border = self.BORDER
        cell.alignment = Alignment(horizontal='center' if center else 'left', vertical='center')
        if alt:
            cell.fill = self.COLORS['alt']
        return cell

    def _write_summary_sheet(
        self,
        ws,
        reports: Sequence[EmployeeAttendance],
        summary: PeriodSummary,
        period_label: str,
        printed: str
    ) -> None:
        ws.cell(1, 1, self.company_name.upper()).font = self.FONT_TITLE
        ws.cell(2, 1, "LAPORAN KEHADIRAN KARYAWAN").font = self.FONT_TITLE
        ws.cell(3, 1, f"Periode: {period_label}").font = self.FONT_SUBTITLE
        ws.cell(4, 1, f"Dicetak: {printed}").font = self.FONT_SUBTITLE

        ws.cell(6, 1, "STATISTIK KEHADIRAN").font = self.FONT_SECTION
        totals = [
            ("Total Karyawan", summary.total_employees, self.FONT_DATA),
            ("Total Hadir", summary.total_present, self.FONT_GOOD),
            ("Total Tidak Hadir", summary.total_absent, self.FONT_BAD),
            ("Total Cuti", summary.total_leave, self.FONT_DATA),
            ("Total Terlambat", summary.total_late, self.FONT_WARNING),
        ]
        row = 7
        for label, value, font in totals:
            self._data_cell(ws, row, 1, label, alt=False)
            self._data_cell(ws, row, 2, value, alt=False, center=True, font=font)
            row += 1

        row += 1
        ws.cell(row, 1, "DATA KARYAWAN").font = self.FONT_SECTION
        row += 1
        self._write_header_cells(ws, row, [
            "Nama Karyawan", "Departemen", "Hadir", "Tidak Hadir",
            "Cuti", "Terlambat", "Menit Terlambat", "Jam Kerja", "Kehadiran", "Keterangan"
        ])
        ws.row_dimensions[row].height = 28
        row += 1

        for i, report in enumerate(reports):
            alt = i % 2 == 1
            self._data_cell(ws, row, 1, report.employee.full_name, alt)
            self._data_cell(ws, row, 2, report.employee.department, alt)
            self._data_cell(ws, row, 3, report.present, alt, center=True, font=self.FONT_GOOD)
            self._data_cell(ws, row, 4, report.absent, alt, center=True,
                            font=self.FONT_BAD if report.absent > 0 else None)
            self._data_cell(ws, row, 5, report.leave, alt, center=True)
            self._data_cell(ws, row, 6, report.late, alt, center=True,
                            font=self.FONT_WARNING if report.late > 0 else None)
            self._data_cell(ws, row, 7, report.late_minutes, alt, center=True)
            self._data_cell(ws, row, 8, report.work_hours, alt, center=True)
            rate_cell = self._data_cell(ws, row, 9, f"{report.attendance_rate:.1f}%", alt, center=True)
            rate_cell.fill = self._rate_fill(report.rate_color)
            self._data_cell(ws, row, 10, report.remarks or "-", alt)
            row += 1

        # Signature block
        row += 2
        ws.cell(row, 2, "Dibuat Oleh,").font = self.FONT_SIGNATURE
        ws.cell(row, 6, "Disetujui Oleh,").font = self.FONT_SIGNATURE
        row += 4
        ws.cell(row, 2, "( HR Manager )").font = self.FONT_SIGNATURE
        ws.cell(row, 6, "( Direktur Utama )").font = self.FONT_SIGNATURE

        widths = [28, 20, 9, 11, 8, 11, 15, 11, 11, 36]
        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width

    def _write_matrix_sheet(
        self,
        ws,
        reports: Sequence[EmployeeAttendance],
        summary: PeriodSummary,
        period_label: str
    ) -> None:
        days = self._period_days(summary)
        last_col = len(days) + 2

        ws.cell(1, 1, f"DETAIL KEHADIRAN (MATRIX) - {period_label.upper()}").font = self.FONT_TITLE
        ws.cell(2, 1, LEGEND).font = self.FONT_SUBTITLE
        if last_col > 1:
            ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=last_col)

        header_row = 4
        self._write_header_cells(ws, header_row, ["Nama Karyawan", "Departemen"] + [str(d.day) for d in days])

        row = header_row + 1
        for i, report in enumerate(reports):
            alt = i % 2 == 1
            self._data_cell(ws, row, 1, report.employee.full_name, alt)
            self._data_cell(ws, row, 2, report.employee.department, alt)
            for offset, day in enumerate(days):
                code = report.daily_codes.get(day.isoformat(), '-')
                cell = self._data_cell(ws, row, offset + 3, code, alt, center=True,
                                       font=self.CODE_FONTS.get(code))
                if day.weekday() >= 5:
                    cell.fill = self.COLORS['weekend']
            row += 1

        ws.column_dimensions['A'].width = 28
        ws.column_dimensions['B'].width = 20
        for col in range(3, last_col + 1):
            ws.column_dimensions[get_column_letter(col)].width = 4.5
        ws.freeze_panes = ws.cell(header_row + 1, 3)

    def _write_leave_sheet(self, ws, leave_rows: Sequence[LeaveRow], period_label: str) -> None:
        ws.cell(1, 1, f"LAPORAN CUTI KARYAWAN - {period_label.upper()}").font = self.FONT_TITLE

        header_row = 3
        self._write_header_cells(ws, header_row, [
            "Nama Karyawan", "Departemen", "Jenis Cuti", "Tanggal Mulai",
            "Tanggal Selesai", "Hari", "Status"
        ])

        row = header_row + 1
        if not leave_rows:
            self._data_cell(ws, row, 1, "Tidak ada data cuti", alt=False)
        for i, (employee, leave) in enumerate(leave_rows):
            alt = i % 2 == 1
            label = self.LEAVE_STATUS_LABELS.get(leave.status, leave.status)
            if leave.status == 'approved':
                status_font = self.FONT_GOOD
            elif leave.status == 'rejected':
                status_font = self.FONT_BAD
            else:
                status_font = self.FONT_WARNING
            self._data_cell(ws, row, 1, employee.full_name, alt)
            self._data_cell(ws, row, 2, employee.department, alt)
            self._data_cell(ws, row, 3, leave.leave_type, alt)
            self._data_cell(ws, row, 4, leave.start_date, alt, center=True)
            self._data_cell(ws, row, 5, leave.end_date, alt, center=True)
            self._data_cell(ws, row, 6, leave.days, alt, center=True)
            self._data_cell(ws, row, 7, label, alt, center=True, font=status_font)
            row += 1

        widths = [28, 20, 16, 15, 15, 7, 13]
        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width

    def _rate_fill(self, tier: RateColorTier) -> PatternFill:
        if tier == RateColorTier.GREEN:
            return self.COLORS['green']
        elif tier == RateColorTier.YELLOW:
            return self.COLORS['yellow']
        return self.COLORS['red']

    @staticmethod
    def _period_days(summary: PeriodSummary) -> List[date]:
        try:
            start = date.fromisoformat(summary.period_start)
            end = date.fromisoformat(summary.period_end)
        except ValueError:
            return []
        return list(iterate_days(start, end))
