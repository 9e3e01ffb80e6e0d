"""Pluggable tax withholding policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

from hrms_payroll.calculators.line_builder import COMPONENTS_BY_CODE, LineItemBuilder
from hrms_payroll.calculators.types import PayrollItemLine


class TaxPolicy(Protocol):
    """Computes employee tax lines for one payslip.

    Tax-table rules live outside this package; implementations adapt them
    to this protocol.
    """

    def calculate_taxes(self, taxable_wages: Decimal) -> list[PayrollItemLine]: ...


@dataclass(frozen=True)
class FlatRateTaxPolicy:
    """Flat percentage of taxable wages per tax component.

    Each tax is withheld in whole cents.
    """

    rates: dict[str, Decimal] = field(
        default_factory=lambda: {
            "federal_tax": Decimal("0.22"),
            "state_tax": Decimal("0.05"),
            "social_security_tax": Decimal("0.062"),
            "medicare_tax": Decimal("0.0145"),
            "unemployment_tax": Decimal("0.006"),
        }
    )

    def calculate_taxes(self, taxable_wages: Decimal) -> list[PayrollItemLine]:
        lines = []
        for code, rate in self.rates.items():
            spec = COMPONENTS_BY_CODE[code]
            amount = LineItemBuilder.round_to_cents(taxable_wages * rate)
            if amount == 0:
                continue
            lines.append(
                LineItemBuilder.create_tax_line(
                    code=spec.code,
                    name=spec.name,
                    amount=amount,
                    calculation_order=spec.order,
                    rate=rate,
                )
            )
        return lines


class NoTaxPolicy:
    """Withholds nothing (contractors paid gross, manual tax entry)."""

    def calculate_taxes(self, taxable_wages: Decimal) -> list[PayrollItemLine]:
        return []
