"""
Absensi Attendance Report

Command line tool that reconstructs daily attendance from clock records
and leave requests and writes monthly XLSX/PDF attendance reports.
"""

import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from ui.cli import run_app


def main():
    """Application entry point."""
    sys.exit(run_app())


if __name__ == "__main__":
    main()
