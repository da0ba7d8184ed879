"""
Record Loader Module

Loads attendance records and leave requests exported from the backend.
Supports JSON (list of rows, or an object with a "data" list), CSV and XLSX
(first row is the header).
"""

import csv
import json
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List

from openpyxl import load_workbook

from domain.entities import AttendanceRecord, LeaveRequest
from infrastructure.logger import get_logger

logger = get_logger("RecordLoader")


# ==============================================================================
# Custom Exceptions
# ==============================================================================
class AttendanceError(Exception):
    """Base exception for attendance-related errors."""
    pass


class SourceFormatError(AttendanceError):
    """Raised when an export file format is unrecognized or invalid."""
    pass


# ==============================================================================
# RecordLoader Class
# ==============================================================================
class RecordLoader:
    """
    Reads backend exports into domain entities.

    Handles:
    - JSON arrays and {"data": [...]} envelopes
    - CSV with UTF-8 BOM
    - XLSX worksheets with a header row
    """

    SUPPORTED_SUFFIXES = (".json", ".csv", ".xlsx")

    def load_rows(self, file_path: Path) -> List[Dict]:
        """
        Read raw rows from an export file.

        Raises:
            SourceFormatError: If the file type or structure is not supported
        """
        if not file_path.exists():
            logger.warning(f"Source file not found: {file_path}")
            return []

        suffix = file_path.suffix.lower()
        if suffix == ".json":
            rows = self._read_json(file_path)
        elif suffix == ".csv":
            rows = self._read_csv(file_path)
        elif suffix == ".xlsx":
            rows = self._read_xlsx(file_path)
        else:
            raise SourceFormatError(
                f"Unsupported file type '{file_path.suffix}' for {file_path.name}. "
                f"Expected one of: {', '.join(self.SUPPORTED_SUFFIXES)}"
            )

        logger.debug(f"Read {len(rows)} rows from {file_path.name}")
        return rows

    def load_records(self, file_path: Path) -> List[AttendanceRecord]:
        records = [AttendanceRecord.from_row(row) for row in self.load_rows(file_path)]
        logger.info(f"Loaded {len(records)} attendance records from {file_path.name}")
        return records

    def load_leaves(self, file_path: Path) -> List[LeaveRequest]:
        leaves = [LeaveRequest.from_row(row) for row in self.load_rows(file_path)]
        logger.info(f"Loaded {len(leaves)} leave requests from {file_path.name}")
        return leaves

    def _read_json(self, file_path: Path) -> List[Dict]:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SourceFormatError(f"Invalid JSON in {file_path.name}: {e}") from e

        if isinstance(data, dict):
            data = data.get("data")
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise SourceFormatError(
                f"{file_path.name} must contain a list of rows or an object with a 'data' list"
            )
        return data

    def _read_csv(self, file_path: Path) -> List[Dict]:
        with open(file_path, 'r', encoding='utf-8-sig', newline='') as f:
            reader = csv.DictReader(f)
            # Empty cells become None so optional columns stay optional
            return [
                {k.strip(): (v if v != "" else None) for k, v in row.items() if k}
                for row in reader
            ]

    def _read_xlsx(self, file_path: Path) -> List[Dict]:
        wb = load_workbook(file_path, read_only=True, data_only=True)
        try:
            ws = wb.active
            rows = ws.iter_rows(values_only=True)
            header = next(rows, None)
            if not header:
                return []
            columns = [str(h).strip() if h is not None else "" for h in header]

            result = []
            for values in rows:
                if values is None or all(v is None for v in values):
                    continue
                row = {}
                for column, value in zip(columns, values):
                    if not column:
                        continue
                    row[column] = self._cell_value(value)
                result.append(row)
            return result
        finally:
            wb.close()

    @staticmethod
    def _cell_value(value):
        """Normalize spreadsheet cells: dates to ISO strings, blanks to None."""
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, str) and not value.strip():
            return None
        return value
