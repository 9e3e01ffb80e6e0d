"""Type definitions for the payslip calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol


ZERO = Decimal("0")


class ItemType(str, Enum):
    """Payroll item types."""

    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"
    TAX = "TAX"

    @classmethod
    def parse(cls, value: str | None) -> ItemType | None:
        """Case-insensitive lookup. Unknown values yield None."""
        if value is None:
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class PayableItem(Protocol):
    """Anything the aggregator can sum: ORM rows and in-memory lines alike."""

    item_type: str
    item_code: str

    def calculate_amount(self) -> Decimal: ...

    def is_earning(self) -> bool: ...

    def is_deduction(self) -> bool: ...

    def is_tax(self) -> bool: ...


def resolve_amount(
    amount: Decimal | None,
    rate: Decimal | None,
    quantity: Decimal | None,
) -> Decimal:
    """rate * quantity when both are present, else amount, else zero."""
    if rate is not None and quantity is not None:
        return rate * quantity
    if amount is None:
        return ZERO
    return amount


def type_matches(item_type: str | None, expected: ItemType) -> bool:
    return ItemType.parse(item_type) is expected


@dataclass
class PayrollItemLine:
    """A payroll item before persistence."""

    item_type: str
    item_code: str
    item_name: str
    amount: Decimal | None = None
    rate: Decimal | None = None
    quantity: Decimal | None = None
    is_taxable: bool = True
    is_statutory: bool = False
    calculation_order: int = 0
    unit: str | None = None
    description: str | None = None

    def calculate_amount(self) -> Decimal:
        return resolve_amount(self.amount, self.rate, self.quantity)

    def is_earning(self) -> bool:
        return type_matches(self.item_type, ItemType.EARNING)

    def is_deduction(self) -> bool:
        return type_matches(self.item_type, ItemType.DEDUCTION)

    def is_tax(self) -> bool:
        return type_matches(self.item_type, ItemType.TAX)

    def to_row_kwargs(self) -> dict[str, Any]:
        """Column values for a persisted item, with the amount resolved."""
        return {
            "item_type": self.item_type.upper(),
            "item_code": self.item_code,
            "item_name": self.item_name,
            "description": self.description,
            "amount": self.calculate_amount(),
            "rate": self.rate,
            "quantity": self.quantity,
            "is_taxable": self.is_taxable,
            "is_statutory": self.is_statutory,
            "calculation_order": self.calculation_order,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class PayslipTotals:
    """Derived totals of one payslip (rounded to cents)."""

    gross_pay: Decimal = ZERO
    total_taxes: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_pay: Decimal = ZERO


@dataclass(frozen=True)
class RunTotals:
    """Run-level totals summed over payslips."""

    total_gross_pay: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_taxes: Decimal = ZERO
    total_net_pay: Decimal = ZERO
    employee_count: int = 0


@dataclass(frozen=True)
class AttendanceSummary:
    """Hours worked by one employee over a pay period."""

    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours


@dataclass
class EmployeeCompensation:
    """Compensation basis supplied by the employee directory."""

    employee_id: int
    organization_id: int
    employee_number: str
    full_name: str
    employment_type: str = "FULL_TIME"
    salary_amount: Decimal | None = None
    hourly_rate: Decimal | None = None
    is_active: bool = True
    # deduction code -> per-period amount (health, dental, ...)
    benefit_elections: dict[str, Decimal] = field(default_factory=dict)
    retirement_percent: Decimal | None = None
    # earning code -> per-period amount (bonus, commission, ...)
    recurring_earnings: dict[str, Decimal] = field(default_factory=dict)
