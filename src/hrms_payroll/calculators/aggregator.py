"""Payslip and payroll run aggregation."""

from __future__ import annotations

import logging
from functools import reduce
from typing import Iterable, Protocol

from hrms_payroll.calculators.line_builder import LineItemBuilder
from hrms_payroll.calculators.types import ZERO, PayableItem, PayslipTotals, RunTotals

logger = logging.getLogger(__name__)


class HasPayslipTotals(Protocol):
    gross_pay: object
    total_taxes: object
    total_deductions: object
    net_pay: object


class PayslipAggregator:
    """Derives payslip totals from payroll items.

    GROSS      = Σ(EARNING)
    TAXES      = Σ(TAX)
    DEDUCTIONS = Σ(DEDUCTION) + TAXES
    NET        = GROSS - DEDUCTIONS

    Sums are taken at full precision; the four results are rounded to cents
    (half up) only at the end. Items of an unknown type count toward nothing.
    This never raises: absent amounts are zero and negative amounts are kept.
    """

    @staticmethod
    def calculate_totals(items: Iterable[PayableItem]) -> PayslipTotals:
        gross = ZERO
        taxes = ZERO
        deductions = ZERO

        for item in items:
            amount = item.calculate_amount()
            if item.is_earning():
                gross += amount
            elif item.is_tax():
                taxes += amount
            elif item.is_deduction():
                deductions += amount
            else:
                logger.warning(
                    "Excluding payroll item %s with unknown type %r from totals",
                    item.item_code,
                    item.item_type,
                )

        deductions += taxes
        net = gross - deductions

        return PayslipTotals(
            gross_pay=LineItemBuilder.round_to_cents(gross),
            total_taxes=LineItemBuilder.round_to_cents(taxes),
            total_deductions=LineItemBuilder.round_to_cents(deductions),
            net_pay=LineItemBuilder.round_to_cents(net),
        )

    @staticmethod
    def aggregate_run(payslips: Iterable[HasPayslipTotals]) -> RunTotals:
        """Sum payslip totals into run totals (missing values count as zero)."""
        payslips = list(payslips)

        def total(attr: str):
            return reduce(
                lambda acc, p: acc + (getattr(p, attr) or ZERO),
                payslips,
                ZERO,
            )

        return RunTotals(
            total_gross_pay=total("gross_pay"),
            total_deductions=total("total_deductions"),
            total_taxes=total("total_taxes"),
            total_net_pay=total("net_pay"),
            employee_count=len(payslips),
        )
