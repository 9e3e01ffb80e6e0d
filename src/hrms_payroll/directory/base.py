"""Employee directory port.

The payroll service never owns employee master data. Every adapter
implements EmployeeDirectory and raises NotFoundError for unknown IDs.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from hrms_payroll.calculators.types import AttendanceSummary, EmployeeCompensation


class EmployeeDirectory(Protocol):
    """Read-only lookup of employee compensation and attendance."""

    async def get_employee(self, employee_id: int) -> EmployeeCompensation:
        """Return the employee's compensation basis.

        Raises:
            NotFoundError: if the employee does not exist.
        """
        ...

    async def list_active_employees(self, organization_id: int) -> list[EmployeeCompensation]:
        """Return all active employees of an organization."""
        ...

    async def get_attendance(
        self, employee_id: int, start: date, end: date
    ) -> AttendanceSummary:
        """Return hours worked between start and end (inclusive)."""
        ...
