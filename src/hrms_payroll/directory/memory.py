"""In-memory employee directory for local development and testing.

Replace with HttpEmployeeDirectory (or another adapter) in production.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from hrms_payroll.calculators.types import ZERO, AttendanceSummary, EmployeeCompensation
from hrms_payroll.exceptions import NotFoundError


@dataclass(frozen=True)
class AttendanceRecord:
    """One day of attendance."""

    employee_id: int
    work_date: date
    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    present: bool = True


class InMemoryEmployeeDirectory:
    """Directory backed by dicts."""

    def __init__(
        self,
        employees: list[EmployeeCompensation] | None = None,
        attendance: list[AttendanceRecord] | None = None,
    ):
        self._employees: dict[int, EmployeeCompensation] = {}
        self._attendance: list[AttendanceRecord] = list(attendance or [])
        for employee in employees or []:
            self.add_employee(employee)

    def add_employee(self, employee: EmployeeCompensation) -> None:
        self._employees[employee.employee_id] = employee

    def record_attendance(self, record: AttendanceRecord) -> None:
        self._attendance.append(record)

    async def get_employee(self, employee_id: int) -> EmployeeCompensation:
        employee = self._employees.get(employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def list_active_employees(self, organization_id: int) -> list[EmployeeCompensation]:
        return sorted(
            (
                e
                for e in self._employees.values()
                if e.organization_id == organization_id and e.is_active
            ),
            key=lambda e: e.employee_id,
        )

    async def get_attendance(
        self, employee_id: int, start: date, end: date
    ) -> AttendanceSummary:
        regular = ZERO
        overtime = ZERO
        for record in self._attendance:
            if record.employee_id != employee_id or not record.present:
                continue
            if start <= record.work_date <= end:
                regular += record.regular_hours
                overtime += record.overtime_hours
        return AttendanceSummary(regular_hours=regular, overtime_hours=overtime)
