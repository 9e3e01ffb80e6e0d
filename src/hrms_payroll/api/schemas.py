"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from hrms_payroll.calculators.line_builder import COMPONENTS_BY_CODE, LineItemBuilder
from hrms_payroll.calculators.types import PayrollItemLine


# ============================================================================
# Error schema
# ============================================================================


class ErrorResponse(BaseModel):
    """Error payload for every rejected operation."""

    detail: str
    code: str
    errors: list[str] | None = None


# ============================================================================
# Payroll Run schemas
# ============================================================================


class PayrollRunCreate(BaseModel):
    """Schema for creating a new payroll run."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    pay_period_start: date
    pay_period_end: date
    pay_date: date


class PayrollRunUpdate(BaseModel):
    """Schema for editing a draft run."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    pay_period_start: date | None = None
    pay_period_end: date | None = None
    pay_date: date | None = None


class PayrollRunResponse(BaseModel):
    """Schema for payroll run response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    organization_id: int
    name: str
    description: str | None = None
    pay_period_start: date
    pay_period_end: date
    pay_date: date
    status: str
    total_gross_pay: Decimal
    total_deductions: Decimal
    total_taxes: Decimal
    total_net_pay: Decimal
    employee_count: int
    created_by: str | None = None
    processed_at: datetime | None = None
    processed_by: str | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None
    paid_at: datetime | None = None
    paid_by: str | None = None
    notes: str | None = None
    version: int
    created_at: datetime
    updated_at: datetime


class PayrollRunListResponse(BaseModel):
    """Schema for listing payroll runs."""

    items: list[PayrollRunResponse]
    total: int
    page: int
    page_size: int


class ApprovalRequest(BaseModel):
    comments: str | None = None


class RejectionRequest(BaseModel):
    reason: str = Field(min_length=1)


class CancelRequest(BaseModel):
    reason: str | None = None


class ValidationReportResponse(BaseModel):
    payroll_run_id: int
    is_valid: bool
    errors: list[str]
    warnings: list[str]
    employee_count: int


class CalendarEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    pay_period_start: date
    pay_period_end: date
    pay_date: date
    status: str


class StatisticsResponse(BaseModel):
    year: int
    total_gross_pay: Decimal
    total_net_pay: Decimal
    total_taxes: Decimal
    total_payroll_runs: int


# ============================================================================
# Payslip schemas
# ============================================================================


class PayrollItemInput(BaseModel):
    """One payroll item supplied by the caller."""

    item_type: str = Field(description="EARNING, DEDUCTION or TAX")
    item_code: str = Field(min_length=1, max_length=50)
    item_name: str = Field(min_length=1, max_length=255)
    amount: Decimal | None = None
    rate: Decimal | None = None
    quantity: Decimal | None = None
    is_taxable: bool = True
    is_statutory: bool = False
    calculation_order: int = 0
    unit: str | None = None
    description: str | None = None

    def to_line(self) -> PayrollItemLine:
        return PayrollItemLine(**self.model_dump())


class PayslipUpsertRequest(BaseModel):
    """Payslip contents as explicit items and/or named standard components.

    Components use the standard catalog codes (basic_salary, overtime_pay,
    federal_tax, health_insurance, ...).
    """

    employee_id: int
    items: list[PayrollItemInput] = Field(default_factory=list)
    components: dict[str, Decimal] = Field(default_factory=dict)

    def unknown_components(self) -> list[str]:
        return sorted(code for code in self.components if code not in COMPONENTS_BY_CODE)

    def to_lines(self) -> list[PayrollItemLine]:
        lines = [item.to_line() for item in self.items]
        lines.extend(LineItemBuilder.from_components(self.components))
        return lines


class PayrollItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_type: str
    item_code: str
    item_name: str
    description: str | None = None
    amount: Decimal
    rate: Decimal | None = None
    quantity: Decimal | None = None
    is_taxable: bool
    is_statutory: bool
    calculation_order: int
    unit: str | None = None


class PayslipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    payroll_run_id: int
    employee_id: int
    pay_period: str
    regular_hours: Decimal
    overtime_hours: Decimal
    gross_pay: Decimal
    total_taxes: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    is_finalized: bool
    generated_at: datetime | None = None
    document_url: str | None = None
    version: int
    items: list[PayrollItemResponse]


class PayrollRunDetailResponse(PayrollRunResponse):
    """Run with its payslips."""

    payslips: list[PayslipResponse]
