"""
Sorting Utilities Module

Provides sorting functions for attendance report output.
"""

from typing import List
from domain.entities import EmployeeAttendance


def get_name_key(name: str) -> tuple:
    """
    Case-insensitive sort key for a person's name.
    Returns tuple of (folded_name, full_name) for stable sorting.
    """
    if not name:
        return ("", "")
    return (name.strip().casefold(), name)


def sort_attendance_list(
    attendance_list: List[EmployeeAttendance],
    sort_by: str = "attendance_rate"
) -> List[EmployeeAttendance]:
    """
    Sort attendance list by specified criteria.

    Args:
        attendance_list: List of EmployeeAttendance objects
        sort_by: Sorting method - "attendance_rate" or "name"

    Returns:
        Sorted list (new list, does not modify original)
    """
    if sort_by == "name":
        return sorted(
            attendance_list,
            key=lambda a: get_name_key(a.employee.full_name)
        )
    else:
        # Default: highest rate first, ties broken by name
        return sorted(
            attendance_list,
            key=lambda a: (-a.attendance_rate, get_name_key(a.employee.full_name))
        )
