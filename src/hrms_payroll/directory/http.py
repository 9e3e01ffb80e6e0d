"""Employee directory adapter for the HR core REST API."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

import httpx

from hrms_payroll.calculators.types import ZERO, AttendanceSummary, EmployeeCompensation
from hrms_payroll.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def _decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def parse_employee(payload: dict[str, Any]) -> EmployeeCompensation:
    """Map an HR core employee document to a compensation record."""
    first = payload.get("firstName") or ""
    last = payload.get("lastName") or ""
    benefits = {
        code: Decimal(str(amount))
        for code, amount in (payload.get("benefitElections") or {}).items()
    }
    earnings = {
        code: Decimal(str(amount))
        for code, amount in (payload.get("recurringEarnings") or {}).items()
    }
    return EmployeeCompensation(
        employee_id=int(payload["id"]),
        organization_id=int(payload["organizationId"]),
        employee_number=str(payload.get("employeeNumber") or payload["id"]),
        full_name=f"{first} {last}".strip(),
        employment_type=(payload.get("employmentType") or "FULL_TIME").upper(),
        salary_amount=_decimal(payload.get("salaryAmount")),
        hourly_rate=_decimal(payload.get("hourlyRate")),
        is_active=(payload.get("employmentStatus") or "ACTIVE").upper() == "ACTIVE",
        benefit_elections=benefits,
        retirement_percent=_decimal(payload.get("retirementPercent")),
        recurring_earnings=earnings,
    )


def _is_last_page(payload: dict[str, Any], pages_read: int) -> bool:
    if payload.get("last") is not None:
        return bool(payload["last"])
    total_pages = payload.get("totalPages")
    # No paging metadata: a single page
    return total_pages is None or pages_read >= int(total_pages)


class HttpEmployeeDirectory:
    """Reads employees and attendance from the HR core service."""

    # HR core caps page size at 100
    PAGE_SIZE = 100

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers or {},
            timeout=timeout,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self.client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def get_employee(self, employee_id: int) -> EmployeeCompensation:
        try:
            payload = await self._get(f"/employees/{employee_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise NotFoundError("Employee", employee_id) from e
            raise
        return parse_employee(payload)

    async def list_active_employees(self, organization_id: int) -> list[EmployeeCompensation]:
        employees: list[EmployeeCompensation] = []
        page = 0
        while True:
            payload = await self._get(
                f"/organizations/{organization_id}/employees",
                params={"status": "ACTIVE", "page": page, "size": self.PAGE_SIZE},
            )
            if not isinstance(payload, dict):
                # Unpaged list
                employees.extend(parse_employee(row) for row in payload)
                break

            rows = payload.get("content") or []
            employees.extend(parse_employee(row) for row in rows)
            page += 1
            if not rows or _is_last_page(payload, page):
                break

        logger.debug(
            "Directory returned %d active employees for organization %s",
            len(employees),
            organization_id,
        )
        return [e for e in employees if e.is_active]

    async def get_attendance(
        self, employee_id: int, start: date, end: date
    ) -> AttendanceSummary:
        rows = await self._get(
            f"/employees/{employee_id}/attendance",
            params={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        regular = ZERO
        overtime = ZERO
        for row in rows:
            if (row.get("status") or "PRESENT").upper() != "PRESENT":
                continue
            regular += _decimal(row.get("regularHours")) or ZERO
            overtime += _decimal(row.get("overtimeHours")) or ZERO
        return AttendanceSummary(regular_hours=regular, overtime_hours=overtime)
