"""
Staff Classifier Module

Loads the employee roster from CSV and selects who is required to clock in.
"""

import csv
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .entities import Employee


class StaffClassifier:
    """
    Loads employees and filters them for attendance reporting.

    The CSV should have columns: user_id, full_name, department, position,
    role, join_date. Indonesian headers (nama, departemen, jabatan,
    tanggal_bergabung) are accepted as well.
    """

    COLUMN_ALIASES: Dict[str, tuple] = {
        "user_id": ("user_id", "id", "User ID"),
        "full_name": ("full_name", "name", "Name", "nama", "Nama"),
        "department": ("department", "Department", "departemen", "Departemen"),
        "position": ("position", "Position", "jabatan", "Jabatan"),
        "role": ("role", "Role"),
        "join_date": ("join_date", "Join Date", "tanggal_bergabung"),
    }

    DEFAULT_REQUIRED_ROLES = ("karyawan", "magang", "pkwt")

    def __init__(
        self,
        required_roles: Optional[Iterable[str]] = None,
        excluded_names: Optional[Iterable[str]] = None
    ):
        self.required_roles = {r.strip().lower() for r in (required_roles or self.DEFAULT_REQUIRED_ROLES)}
        self.excluded_names = {n.strip().casefold() for n in (excluded_names or []) if n.strip()}
        self._employees: List[Employee] = []

    @classmethod
    def _column(cls, row: Dict[str, str], field_name: str) -> str:
        for alias in cls.COLUMN_ALIASES[field_name]:
            value = row.get(alias)
            if value is not None and str(value).strip():
                return str(value).strip()
        return ""

    def load_from_csv(self, csv_path: Path) -> List[Employee]:
        """
        Load the roster from a CSV file.

        Args:
            csv_path: Path to the CSV file

        Returns:
            All employees in file order (before filtering)
        """
        self._employees = []

        if not csv_path.exists():
            return []

        with open(csv_path, 'r', encoding='utf-8-sig', newline='') as f:
            reader = csv.DictReader(f)
            for row in reader:
                employee = self._employee_from_row(row)
                if employee:
                    self._employees.append(employee)

        return list(self._employees)

    def load_from_rows(self, rows: Iterable[Dict[str, str]]) -> List[Employee]:
        """Load the roster from already-parsed rows (e.g. a JSON export)."""
        self._employees = [e for e in (self._employee_from_row(r) for r in rows) if e]
        return list(self._employees)

    def _employee_from_row(self, row: Dict[str, str]) -> Optional[Employee]:
        user_id = self._column(row, "user_id")
        name = self._column(row, "full_name")
        if not user_id or not name:
            return None
        return Employee(
            user_id=user_id,
            full_name=name,
            department=self._column(row, "department"),
            position=self._column(row, "position") or "Staf",
            role=(self._column(row, "role") or "karyawan").lower(),
            join_date=self._column(row, "join_date") or None,
        )

    def is_reportable(self, employee: Employee) -> bool:
        """
        Required to clock in and not on the exclusion list.

        An excluded name matches case-insensitively anywhere in the full name,
        so "admin" also skips "Admin HR".
        """
        if employee.role not in self.required_roles:
            return False
        name = employee.full_name.casefold()
        return not any(excluded in name for excluded in self.excluded_names)

    @property
    def all_employees(self) -> List[Employee]:
        return self._employees

    @property
    def reportable_employees(self) -> List[Employee]:
        """Employees that appear in attendance reports."""
        return [e for e in self._employees if self.is_reportable(e)]

    def get_employee_by_id(self, user_id: str) -> Optional[Employee]:
        for employee in self._employees:
            if employee.user_id == user_id:
                return employee
        return None
