"""
Unit tests for PdfWriter and filename formatting.
"""

import pytest
from pathlib import Path
import tempfile

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities import Employee, EmployeeAttendance, PeriodSummary, RateColorTier
from infrastructure.pdf_writer import PdfWriter, format_filename, AttendancePdf


class TestFormatFilename:
    """Tests for format_filename utility function."""

    def test_basic_formatting(self):
        """Test basic year/month formatting."""
        result = format_filename("Report_{year}_{month}.pdf", 2025, 12)
        assert result == "Report_2025_12.pdf"

    def test_month_padding(self):
        """Test that month is zero-padded."""
        result = format_filename("Report_{year}_{month}.pdf", 2025, 1)
        assert result == "Report_2025_01.pdf"

    def test_default_pattern(self):
        """Test the default Indonesian filename pattern."""
        result = format_filename("Laporan_Kehadiran_{year}_{month}.pdf", 2024, 3)
        assert result == "Laporan_Kehadiran_2024_03.pdf"


class TestAttendancePdf:
    """Tests for AttendancePdf class."""

    def test_initialization(self):
        """Test AttendancePdf initialization."""
        pdf = AttendancePdf(title="Test Report")
        assert pdf.title_text == "Test Report"
        assert pdf.font_family_name == "Helvetica"

    def test_missing_custom_font_falls_back(self):
        """Test that a missing font file keeps the built-in font."""
        pdf = AttendancePdf(title="Test", custom_font_path="/nonexistent/font.ttf")
        assert pdf.font_family_name == "Helvetica"

    def test_safe_text_replaces_unencodable(self):
        """Test latin-1 replacement for the built-in font."""
        pdf = AttendancePdf(title="Test")
        assert pdf.safe_text("Budi ✓") == "Budi ?"
        assert pdf.safe_text("José") == "José"


class TestPdfWriter:
    """Tests for PdfWriter class."""

    @pytest.fixture
    def summary(self):
        return PeriodSummary(
            period_start="2024-03-01", period_end="2024-03-31",
            total_employees=2, total_present=30, total_absent=3, total_leave=1, total_late=4,
        )

    @pytest.fixture
    def reports(self):
        budi = EmployeeAttendance(
            employee=Employee("u1", "Budi Santoso", "IT"),
            present=18, late=2, absent=1, leave=1,
            attendance_rate=95.2, rate_color=RateColorTier.GREEN,
            daily_codes={"2024-03-01": "H", "2024-03-04": "T", "2024-03-05": "A"},
        )
        siti = EmployeeAttendance(
            employee=Employee("u2", "Siti Ñandú ✓", "HR"),
            present=12, late=2, absent=2,
            attendance_rate=87.5, rate_color=RateColorTier.YELLOW,
            daily_codes={"2024-03-01": "C"},
        )
        return [budi, siti]

    def test_create_report_empty_list(self, summary):
        """Test that empty attendance list returns early."""
        writer = PdfWriter()

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "test.pdf"

            writer.create_report([], summary, "Maret 2024", output_path)

            assert not output_path.exists()

    def test_create_report_generates_file(self, reports, summary):
        """Test that create_report generates a PDF file."""
        writer = PdfWriter(company_name="PT. Talenta Traincom Indonesia")

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "output" / "test.pdf"

            writer.create_report(reports, summary, "Maret 2024", output_path)

            assert output_path.exists()
            assert output_path.read_bytes().startswith(b"%PDF")

    def test_many_employees_span_pages(self, summary):
        """Test that long rosters paginate without errors."""
        reports = [
            EmployeeAttendance(employee=Employee(f"u{i}", f"Karyawan {i}"), attendance_rate=100.0,
                               rate_color=RateColorTier.GREEN)
            for i in range(60)
        ]

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "long.pdf"
            PdfWriter().create_report(reports, summary, "Maret 2024", output_path)

            assert output_path.stat().st_size > 0

    def test_rate_colors(self):
        writer = PdfWriter()
        assert writer._get_rate_color(RateColorTier.GREEN) == PdfWriter.COLORS['green']
        assert writer._get_rate_color(RateColorTier.YELLOW) == PdfWriter.COLORS['yellow']
        assert writer._get_rate_color(RateColorTier.RED) == PdfWriter.COLORS['red']


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
