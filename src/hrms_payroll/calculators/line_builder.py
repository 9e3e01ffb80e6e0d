"""Payroll item builder and the standard component catalog."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from hrms_payroll.calculators.types import ItemType, PayrollItemLine


@dataclass(frozen=True)
class ComponentSpec:
    """A named pay component of a standard payslip."""

    code: str
    name: str
    item_type: ItemType
    order: int
    is_taxable: bool = True
    is_statutory: bool = False


# Ordered catalog. calculation_order keeps earnings before deductions before taxes.
STANDARD_COMPONENTS: tuple[ComponentSpec, ...] = (
    ComponentSpec("basic_salary", "Basic Salary", ItemType.EARNING, 10),
    ComponentSpec("overtime_pay", "Overtime Pay", ItemType.EARNING, 20),
    ComponentSpec("bonus", "Bonus", ItemType.EARNING, 30),
    ComponentSpec("commission", "Commission", ItemType.EARNING, 40),
    ComponentSpec("allowances", "Allowances", ItemType.EARNING, 50),
    ComponentSpec("reimbursements", "Reimbursements", ItemType.EARNING, 60, is_taxable=False),
    ComponentSpec("health_insurance", "Health Insurance", ItemType.DEDUCTION, 110),
    ComponentSpec("dental_insurance", "Dental Insurance", ItemType.DEDUCTION, 120),
    ComponentSpec("vision_insurance", "Vision Insurance", ItemType.DEDUCTION, 130),
    ComponentSpec("life_insurance", "Life Insurance", ItemType.DEDUCTION, 140),
    ComponentSpec("retirement_401k", "401(k) Contribution", ItemType.DEDUCTION, 150),
    ComponentSpec("other_deductions", "Other Deductions", ItemType.DEDUCTION, 160),
    ComponentSpec("federal_tax", "Federal Income Tax", ItemType.TAX, 210, is_statutory=True),
    ComponentSpec("state_tax", "State Income Tax", ItemType.TAX, 220, is_statutory=True),
    ComponentSpec("social_security_tax", "Social Security", ItemType.TAX, 230, is_statutory=True),
    ComponentSpec("medicare_tax", "Medicare", ItemType.TAX, 240, is_statutory=True),
    ComponentSpec("unemployment_tax", "Unemployment Tax", ItemType.TAX, 250, is_statutory=True),
)

COMPONENTS_BY_CODE: dict[str, ComponentSpec] = {c.code: c for c in STANDARD_COMPONENTS}

# (precision, scale) of the payroll_item columns
COLUMN_DIGITS: dict[str, tuple[int, int]] = {
    "amount": (15, 4),
    "resolved amount": (15, 4),
    "rate": (14, 6),
    "quantity": (10, 2),
}


def fits_column(value: Decimal, precision: int, scale: int) -> bool:
    """True if value is stored without losing digits in NUMERIC(precision, scale)."""
    if not value.is_finite():
        return False
    _, digits, exponent = value.normalize().as_tuple()
    decimal_places = max(0, -exponent)
    integer_digits = max(0, len(digits) + exponent)
    return decimal_places <= scale and integer_digits <= precision - scale


class LineItemBuilder:
    """Builds payroll item lines.

    Amounts are kept at full precision. Rounding to cents happens once, on
    the derived payslip totals, never on individual lines.
    """

    OUTPUT_PRECISION = Decimal("0.01")  # 2 decimal places for totals

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents), half up."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_earning_line(
        code: str,
        name: str,
        amount: Decimal | None = None,
        rate: Decimal | None = None,
        quantity: Decimal | None = None,
        unit: str | None = None,
        is_taxable: bool = True,
        calculation_order: int = 0,
    ) -> PayrollItemLine:
        """Create an earning line (amount or rate x quantity)."""
        return PayrollItemLine(
            item_type=ItemType.EARNING.value,
            item_code=code,
            item_name=name,
            amount=amount,
            rate=rate,
            quantity=quantity,
            unit=unit,
            is_taxable=is_taxable,
            calculation_order=calculation_order,
        )

    @staticmethod
    def create_deduction_line(
        code: str,
        name: str,
        amount: Decimal,
        calculation_order: int = 0,
        is_statutory: bool = False,
    ) -> PayrollItemLine:
        """Create a non-tax deduction line."""
        return PayrollItemLine(
            item_type=ItemType.DEDUCTION.value,
            item_code=code,
            item_name=name,
            amount=amount,
            is_taxable=False,
            is_statutory=is_statutory,
            calculation_order=calculation_order,
        )

    @staticmethod
    def create_tax_line(
        code: str,
        name: str,
        amount: Decimal,
        calculation_order: int = 0,
        rate: Decimal | None = None,
    ) -> PayrollItemLine:
        """Create a tax line.

        A tax rate, when given, is informational: the amount has already been
        computed against taxable wages and stays authoritative.
        """
        line = PayrollItemLine(
            item_type=ItemType.TAX.value,
            item_code=code,
            item_name=name,
            amount=amount,
            is_taxable=False,
            is_statutory=True,
            calculation_order=calculation_order,
        )
        if rate is not None:
            line.description = f"{rate * 100:.2f}% of taxable wages"
        return line

    @staticmethod
    def from_components(components: Mapping[str, Decimal | None]) -> list[PayrollItemLine]:
        """Build lines from named standard components.

        Zero and absent components produce no line. Unknown names raise
        KeyError; callers validate names before building.
        """
        lines: list[PayrollItemLine] = []
        for code, amount in components.items():
            spec = COMPONENTS_BY_CODE[code]
            if amount is None or amount == 0:
                continue
            lines.append(
                PayrollItemLine(
                    item_type=spec.item_type.value,
                    item_code=spec.code,
                    item_name=spec.name,
                    amount=Decimal(amount),
                    is_taxable=spec.is_taxable,
                    is_statutory=spec.is_statutory,
                    calculation_order=spec.order,
                )
            )
        return LineItemBuilder.sort_lines(lines)

    @staticmethod
    def sort_lines(lines: list[PayrollItemLine]) -> list[PayrollItemLine]:
        """Stable sort by calculation order."""
        return sorted(lines, key=lambda line: line.calculation_order)

    @staticmethod
    def validate_lines(lines: list[PayrollItemLine]) -> list[str]:
        """Check lines for input errors.

        Returns list of error messages (empty if all valid).
        """
        errors: list[str] = []
        seen_codes: set[str] = set()

        for i, line in enumerate(lines):
            if ItemType.parse(line.item_type) is None:
                errors.append(
                    f"Line {i} ({line.item_code}) has unknown item type '{line.item_type}'"
                )
            if not line.item_code:
                errors.append(f"Line {i} is missing an item code")
            if not line.item_name:
                errors.append(f"Line {i} ({line.item_code}) is missing an item name")
            if line.amount is None and (line.rate is None or line.quantity is None):
                errors.append(
                    f"Line {i} ({line.item_code}) needs an amount or both rate and quantity"
                )
            resolved = None
            if line.rate is not None and line.quantity is not None:
                resolved = line.calculate_amount()
            for column, value in (
                ("amount", line.amount),
                ("rate", line.rate),
                ("quantity", line.quantity),
                ("resolved amount", resolved),
            ):
                precision, scale = COLUMN_DIGITS[column]
                if value is not None and not fits_column(value, precision, scale):
                    errors.append(
                        f"Line {i} ({line.item_code}) {column} {value} does not fit "
                        f"{precision} digits with {scale} decimal places"
                    )
            if line.item_code in seen_codes:
                errors.append(f"Line {i} duplicates item code '{line.item_code}'")
            seen_codes.add(line.item_code)

        return errors
