"""Builds payslip lines from an employee's compensation basis and attendance."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from hrms_payroll.calculators.line_builder import COMPONENTS_BY_CODE, LineItemBuilder
from hrms_payroll.calculators.tax_policy import FlatRateTaxPolicy, TaxPolicy
from hrms_payroll.calculators.types import (
    ZERO,
    AttendanceSummary,
    EmployeeCompensation,
    PayrollItemLine,
)

SALARIED_TYPES = frozenset({"FULL_TIME"})
HOURLY_TYPES = frozenset({"PART_TIME", "CONTRACT"})


@dataclass
class CompensationResult:
    """Lines and hours for one employee's payslip."""

    employee_id: int
    lines: list[PayrollItemLine]
    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    warnings: list[str] = field(default_factory=list)


class CompensationCalculator:
    """Payslip line pipeline (stable order per employee):

    1) Basic pay: monthly salary, or regular hours x hourly rate
    2) Overtime: overtime hours x hourly-equivalent rate x multiplier
    3) Recurring earnings (bonus, commission, allowances, ...)
    4) Benefit deductions and retirement contribution
    5) Taxes from the tax policy, on taxable earnings
    """

    OVERTIME_MULTIPLIER = Decimal("1.5")
    STANDARD_WORK_HOURS_PER_DAY = Decimal("8")
    STANDARD_WORK_DAYS_PER_MONTH = Decimal("22")

    def __init__(self, tax_policy: TaxPolicy | None = None):
        self.tax_policy = tax_policy or FlatRateTaxPolicy()

    def hourly_equivalent(self, employee: EmployeeCompensation) -> Decimal:
        """Hourly base rate: monthly salary over standard hours, else the hourly rate."""
        if employee.salary_amount is not None:
            monthly_hours = self.STANDARD_WORK_DAYS_PER_MONTH * self.STANDARD_WORK_HOURS_PER_DAY
            return (employee.salary_amount / monthly_hours).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
        if employee.hourly_rate is not None:
            return employee.hourly_rate
        return ZERO

    def calculate(
        self,
        employee: EmployeeCompensation,
        attendance: AttendanceSummary,
    ) -> CompensationResult:
        result = CompensationResult(
            employee_id=employee.employee_id,
            lines=[],
            regular_hours=attendance.regular_hours,
            overtime_hours=attendance.overtime_hours,
        )
        employment_type = (employee.employment_type or "").upper()

        # 1) Basic pay
        basic_spec = COMPONENTS_BY_CODE["basic_salary"]
        basic_pay = ZERO
        if employment_type in SALARIED_TYPES and employee.salary_amount is not None:
            basic_pay = employee.salary_amount
            result.lines.append(
                LineItemBuilder.create_earning_line(
                    code=basic_spec.code,
                    name=basic_spec.name,
                    amount=basic_pay,
                    calculation_order=basic_spec.order,
                )
            )
        elif employment_type in HOURLY_TYPES and employee.hourly_rate is not None:
            line = LineItemBuilder.create_earning_line(
                code=basic_spec.code,
                name=basic_spec.name,
                rate=employee.hourly_rate,
                quantity=attendance.regular_hours,
                unit="hours",
                calculation_order=basic_spec.order,
            )
            basic_pay = line.calculate_amount()
            result.lines.append(line)
        else:
            result.warnings.append(
                f"Employee {employee.employee_id} has no pay basis for "
                f"employment type '{employee.employment_type}'"
            )

        # 2) Overtime
        if attendance.overtime_hours > 0:
            ot_spec = COMPONENTS_BY_CODE["overtime_pay"]
            result.lines.append(
                LineItemBuilder.create_earning_line(
                    code=ot_spec.code,
                    name=ot_spec.name,
                    rate=self.hourly_equivalent(employee) * self.OVERTIME_MULTIPLIER,
                    quantity=attendance.overtime_hours,
                    unit="hours",
                    calculation_order=ot_spec.order,
                )
            )

        # 3) Recurring earnings
        for code, amount in sorted(employee.recurring_earnings.items()):
            spec = COMPONENTS_BY_CODE.get(code)
            if spec is None:
                result.warnings.append(f"Unknown recurring earning '{code}' ignored")
                continue
            if amount:
                result.lines.append(
                    LineItemBuilder.create_earning_line(
                        code=spec.code,
                        name=spec.name,
                        amount=amount,
                        is_taxable=spec.is_taxable,
                        calculation_order=spec.order,
                    )
                )

        # 4) Deductions
        for code, amount in sorted(employee.benefit_elections.items()):
            spec = COMPONENTS_BY_CODE.get(code)
            if spec is None:
                result.warnings.append(f"Unknown benefit election '{code}' ignored")
                continue
            if amount:
                result.lines.append(
                    LineItemBuilder.create_deduction_line(
                        code=spec.code,
                        name=spec.name,
                        amount=amount,
                        calculation_order=spec.order,
                    )
                )

        if employee.retirement_percent and basic_pay > 0:
            spec = COMPONENTS_BY_CODE["retirement_401k"]
            result.lines.append(
                LineItemBuilder.create_deduction_line(
                    code=spec.code,
                    name=spec.name,
                    amount=LineItemBuilder.round_to_cents(
                        basic_pay * employee.retirement_percent / Decimal("100")
                    ),
                    calculation_order=spec.order,
                )
            )

        # 5) Taxes
        taxable_wages = sum(
            (line.calculate_amount() for line in result.lines if line.is_earning() and line.is_taxable),
            ZERO,
        )
        result.lines.extend(self.tax_policy.calculate_taxes(taxable_wages))

        result.lines = LineItemBuilder.sort_lines(result.lines)
        return result
