"""Payroll run, payslip, and payroll item models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrms_payroll.calculators.aggregator import PayslipAggregator
from hrms_payroll.calculators.types import ZERO, ItemType, resolve_amount, type_matches
from hrms_payroll.models.base import Base, TimestampMixin

RUN_STATUSES = ("draft", "calculated", "approved", "paid", "error", "rejected", "cancelled")


# ===== Payroll Run =====


class PayrollRun(Base, TimestampMixin):
    """A batch of payslips for one organization and pay period."""

    __tablename__ = "payroll_run"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False)
    pay_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    total_gross_pay: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=ZERO)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=ZERO)
    total_taxes: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=ZERO)
    total_net_pay: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=ZERO)
    employee_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    processed_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Optimistic concurrency
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in RUN_STATUSES) + ")",
            name="payroll_run_status_check",
        ),
        CheckConstraint("pay_period_end >= pay_period_start", name="payroll_run_dates_check"),
        Index("ix_payroll_run_org_period", "organization_id", "pay_period_start", "pay_period_end"),
    )
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    payslips: Mapped[list[Payslip]] = relationship(
        back_populates="payroll_run",
        cascade="all, delete-orphan",
        order_by="Payslip.id",
    )

    @property
    def pay_period_label(self) -> str:
        """YYYY-MM label shared by every payslip of this run."""
        return self.pay_period_start.strftime("%Y-%m")

    def add_payslip(self, payslip: Payslip) -> None:
        self.payslips.append(payslip)

    def remove_payslip(self, payslip: Payslip) -> None:
        self.payslips.remove(payslip)

    def calculate_totals(self) -> None:
        """Recompute run totals as the sum of current payslip totals."""
        totals = PayslipAggregator.aggregate_run(self.payslips)
        self.total_gross_pay = totals.total_gross_pay
        self.total_deductions = totals.total_deductions
        self.total_taxes = totals.total_taxes
        self.total_net_pay = totals.total_net_pay
        self.employee_count = totals.employee_count


# ===== Payslip =====


class Payslip(Base, TimestampMixin):
    """One employee's pay statement within a payroll run."""

    __tablename__ = "payslip"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    payroll_run_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payroll_run.id", ondelete="CASCADE"),
        nullable=False,
    )
    employee_id: Mapped[int] = mapped_column(Integer, nullable=False)
    pay_period: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM

    regular_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=ZERO)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=ZERO)

    gross_pay: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=ZERO)
    total_taxes: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=ZERO)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=ZERO)
    net_pay: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=ZERO)

    is_finalized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    generated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    document_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "pay_period", name="payslip_employee_period_unique"),
        UniqueConstraint("payroll_run_id", "employee_id", name="payslip_run_employee_unique"),
    )
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    payroll_run: Mapped[PayrollRun] = relationship(back_populates="payslips")
    items: Mapped[list[PayrollItem]] = relationship(
        back_populates="payslip",
        cascade="all, delete-orphan",
        order_by=lambda: (PayrollItem.calculation_order, PayrollItem.id),
    )

    def calculate_totals(self) -> None:
        """Overwrite the four derived totals from the current items."""
        totals = PayslipAggregator.calculate_totals(self.items)
        self.gross_pay = totals.gross_pay
        self.total_taxes = totals.total_taxes
        self.total_deductions = totals.total_deductions
        self.net_pay = totals.net_pay

    def items_of_type(self, item_type: ItemType) -> list[PayrollItem]:
        return [item for item in self.items if type_matches(item.item_type, item_type)]


# ===== Payroll Item =====


class PayrollItem(Base, TimestampMixin):
    """One pay component (earning, deduction, or tax) of a payslip."""

    __tablename__ = "payroll_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    payslip_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payslip.id", ondelete="CASCADE"),
        nullable=False,
    )
    item_type: Mapped[str] = mapped_column(String(50), nullable=False)
    item_code: Mapped[str] = mapped_column(String(50), nullable=False)
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 4), nullable=False, default=ZERO)
    rate: Mapped[Decimal | None] = mapped_column(Numeric(14, 6), nullable=True)
    quantity: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    is_taxable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_statutory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    calculation_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Relationships
    payslip: Mapped[Payslip] = relationship(back_populates="items")

    def calculate_amount(self) -> Decimal:
        """rate * quantity when both are set, else the stored amount (zero if unset)."""
        return resolve_amount(self.amount, self.rate, self.quantity)

    def is_earning(self) -> bool:
        return type_matches(self.item_type, ItemType.EARNING)

    def is_deduction(self) -> bool:
        return type_matches(self.item_type, ItemType.DEDUCTION)

    def is_tax(self) -> bool:
        return type_matches(self.item_type, ItemType.TAX)
