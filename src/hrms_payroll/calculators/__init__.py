"""Payslip calculation pipeline."""

from hrms_payroll.calculators.aggregator import PayslipAggregator
from hrms_payroll.calculators.compensation import CompensationCalculator, CompensationResult
from hrms_payroll.calculators.line_builder import LineItemBuilder
from hrms_payroll.calculators.tax_policy import FlatRateTaxPolicy, NoTaxPolicy, TaxPolicy
from hrms_payroll.calculators.types import ItemType, PayrollItemLine, PayslipTotals, RunTotals

__all__ = [
    "PayslipAggregator",
    "CompensationCalculator",
    "CompensationResult",
    "LineItemBuilder",
    "FlatRateTaxPolicy",
    "NoTaxPolicy",
    "TaxPolicy",
    "ItemType",
    "PayrollItemLine",
    "PayslipTotals",
    "RunTotals",
]
