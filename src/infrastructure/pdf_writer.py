"""
PDF Writer Module

Generates the attendance matrix report as a landscape PDF using fpdf2.
Mirrors the Excel matrix sheet: one row per employee, one column per day,
followed by the period counts and attendance rate.
"""

from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from fpdf import FPDF

from domain.entities import EmployeeAttendance, PeriodSummary, RateColorTier
from domain.jakarta_time import iterate_days
from domain.rate_calculator import LEGEND
from infrastructure.logger import get_logger

logger = get_logger("PdfWriter")

FALLBACK_FONT = "Helvetica"


# ==============================================================================
# AttendancePdf Class (A4 Landscape)
# ==============================================================================
class AttendancePdf(FPDF):
    """
    FPDF document for A4 landscape attendance reports.

    Uses a custom TTF font when one is configured, otherwise the built-in
    Helvetica (latin-1 only).
    """

    def __init__(self, title: str = "", custom_font_path: Optional[str] = None):
        # A4 Landscape: 297mm x 210mm
        super().__init__(orientation='L', unit='mm', format='A4')
        self.title_text = title
        self._font_family = FALLBACK_FONT
        self._font_loaded = False
        if custom_font_path:
            self._setup_custom_font(Path(custom_font_path))

    def _setup_custom_font(self, font_path: Path) -> None:
        if not font_path.exists():
            logger.warning(f"Custom font not found: {font_path}")
            return
        try:
            self.add_font("ReportFont", "", str(font_path))
            self._font_family = "ReportFont"
            self._font_loaded = True
            logger.info(f"Loaded custom font: {font_path.name}")
        except Exception as e:
            logger.warning(f"Cannot load font {font_path}: {e}")

    @property
    def font_family_name(self) -> str:
        return self._font_family

    def safe_text(self, text: str) -> str:
        """Replace characters the built-in font cannot encode."""
        if self._font_loaded:
            return text
        return text.encode('latin-1', 'replace').decode('latin-1')

    def header(self) -> None:
        """Draw page header with centered title."""
        self.set_font(self._font_family, '', 13)
        self.set_text_color(30, 64, 175)
        self.cell(0, 8, self.safe_text(self.title_text), align='C', new_x='LMARGIN', new_y='NEXT')
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def footer(self) -> None:
        """Draw page footer with page number."""
        self.set_y(-12)
        self.set_font(self._font_family, '', 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f'Halaman {self.page_no()}/{{nb}}', align='C')


# ==============================================================================
# PdfWriter Class
# ==============================================================================
class PdfWriter:
    """
    Generates PDF attendance matrix reports.

    Features:
    - A4 Landscape, day columns sized to fit the period
    - Color-coded status codes (H/T/A) and rate tiers
    - Header row repeated on every page
    """

    COLORS: Dict[str, Tuple[int, int, int]] = {
        'green': (144, 238, 144),
        'yellow': (255, 215, 0),
        'red': (255, 107, 107),
        'header': (30, 64, 175),
        'weekend': (226, 232, 240),
        'white': (255, 255, 255),
    }

    CODE_TEXT_COLORS: Dict[str, Tuple[int, int, int]] = {
        'H': (4, 120, 87),
        'T': (217, 119, 6),
        'A': (220, 38, 38),
    }

    MARGIN = 8
    PAGE_WIDTH = 297
    PAGE_HEIGHT = 210

    NAME_COL_WIDTH = 42
    COUNT_COL_WIDTH = 8
    RATE_COL_WIDTH = 14

    HEADER_ROW_HEIGHT = 8
    DATA_ROW_HEIGHT = 6
    BOTTOM_LIMIT = 20

    COUNT_HEADERS = ("H", "T", "A", "C")

    def __init__(self, company_name: str = "", custom_font_path: Optional[str] = None):
        self.company_name = company_name
        self._custom_font_path = custom_font_path

    def create_report(
        self,
        reports: Sequence[EmployeeAttendance],
        summary: PeriodSummary,
        period_label: str,
        output_path: Path
    ) -> None:
        """
        Create the PDF matrix report.

        Returns early without writing a file when there are no reports.
        """
        if not reports:
            return

        title = f"Laporan Kehadiran Karyawan - {period_label}"
        if self.company_name:
            title = f"{self.company_name} | {title}"

        pdf = AttendancePdf(title=title, custom_font_path=self._custom_font_path)
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=False)
        pdf.set_margins(self.MARGIN, self.MARGIN, self.MARGIN)
        pdf.add_page()

        days = self._period_days(summary)
        layout = self._layout(len(days))

        self._draw_totals(pdf, summary)
        self._draw_header_row(pdf, days, layout)

        for report in reports:
            if pdf.get_y() + self.DATA_ROW_HEIGHT > self.PAGE_HEIGHT - self.BOTTOM_LIMIT:
                pdf.add_page()
                self._draw_header_row(pdf, days, layout)
            self._draw_employee_row(pdf, report, days, layout)

        pdf.ln(4)
        pdf.set_font(pdf.font_family_name, '', 8)
        pdf.set_text_color(0, 0, 0)
        pdf.cell(0, 5, LEGEND, new_x='LMARGIN', new_y='NEXT')

        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))
        logger.info(f"PDF report saved: {output_path}")

    def _layout(self, num_days: int) -> Dict[str, float]:
        available = self.PAGE_WIDTH - 2 * self.MARGIN
        fixed = self.NAME_COL_WIDTH + self.COUNT_COL_WIDTH * len(self.COUNT_HEADERS) + self.RATE_COL_WIDTH
        day_w = (available - fixed) / num_days if num_days else 0
        day_w = min(max(day_w, 4), 12) if num_days else 0
        table_width = fixed + day_w * num_days
        return {
            'day_col_width': day_w,
            'start_x': (self.PAGE_WIDTH - table_width) / 2,
        }

    def _draw_totals(self, pdf: AttendancePdf, summary: PeriodSummary) -> None:
        pdf.set_font(pdf.font_family_name, '', 9)
        line = (
            f"Karyawan: {summary.total_employees}   Hadir: {summary.total_present}   "
            f"Tidak Hadir: {summary.total_absent}   Cuti: {summary.total_leave}   "
            f"Terlambat: {summary.total_late}"
        )
        pdf.cell(0, 6, line, align='C', new_x='LMARGIN', new_y='NEXT')
        pdf.ln(2)

    def _draw_header_row(self, pdf: AttendancePdf, days: List[date], layout: Dict[str, float]) -> None:
        day_w = layout['day_col_width']
        h = self.HEADER_ROW_HEIGHT

        pdf.set_font(pdf.font_family_name, '', 7)
        pdf.set_fill_color(*self.COLORS['header'])
        pdf.set_text_color(*self.COLORS['white'])
        pdf.set_line_width(0.2)

        pdf.set_x(layout['start_x'])
        pdf.cell(self.NAME_COL_WIDTH, h, "Nama", border=1, align='C', fill=True)
        for day in days:
            pdf.cell(day_w, h, str(day.day), border=1, align='C', fill=True)
        for label in self.COUNT_HEADERS:
            pdf.cell(self.COUNT_COL_WIDTH, h, label, border=1, align='C', fill=True)
        pdf.cell(self.RATE_COL_WIDTH, h, "%", border=1, align='C', fill=True,
                 new_x='LMARGIN', new_y='NEXT')
        pdf.set_text_color(0, 0, 0)

    def _draw_employee_row(
        self,
        pdf: AttendancePdf,
        report: EmployeeAttendance,
        days: List[date],
        layout: Dict[str, float]
    ) -> None:
        day_w = layout['day_col_width']
        h = self.DATA_ROW_HEIGHT

        pdf.set_font(pdf.font_family_name, '', 7)
        pdf.set_x(layout['start_x'])
        pdf.cell(self.NAME_COL_WIDTH, h, pdf.safe_text(report.employee.full_name[:30]), border=1)

        for day in days:
            code = report.daily_codes.get(day.isoformat(), '-')
            fill = day.weekday() >= 5
            if fill:
                pdf.set_fill_color(*self.COLORS['weekend'])
            pdf.set_text_color(*self.CODE_TEXT_COLORS.get(code, (0, 0, 0)))
            pdf.cell(day_w, h, code, border=1, align='C', fill=fill)
        pdf.set_text_color(0, 0, 0)

        for value in (report.present, report.late, report.absent, report.leave):
            pdf.cell(self.COUNT_COL_WIDTH, h, str(value), border=1, align='C')

        pdf.set_fill_color(*self._get_rate_color(report.rate_color))
        pdf.cell(self.RATE_COL_WIDTH, h, f"{report.attendance_rate:.0f}", border=1, align='C',
                 fill=True, new_x='LMARGIN', new_y='NEXT')

    def _get_rate_color(self, tier: RateColorTier) -> Tuple[int, int, int]:
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


def format_filename(pattern: str, year: int, month: int) -> str:
    """
    Fill {year} and {month} placeholders; month is zero-padded.

    Example: "Laporan_{year}_{month}.pdf" -> "Laporan_2025_01.pdf"
    """
    return pattern.format(
        year=year,
        month=f"{month:02d}"
    )
