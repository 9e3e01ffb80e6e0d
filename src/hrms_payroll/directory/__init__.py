"""Employee directory adapters."""

from hrms_payroll.directory.base import EmployeeDirectory
from hrms_payroll.directory.http import HttpEmployeeDirectory
from hrms_payroll.directory.memory import AttendanceRecord, InMemoryEmployeeDirectory

__all__ = [
    "EmployeeDirectory",
    "HttpEmployeeDirectory",
    "InMemoryEmployeeDirectory",
    "AttendanceRecord",
]
