"""Payroll run service - orchestrator for payroll operations."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from hrms_payroll.calculators.compensation import CompensationCalculator
from hrms_payroll.calculators.line_builder import LineItemBuilder
from hrms_payroll.calculators.types import ZERO, EmployeeCompensation, PayrollItemLine
from hrms_payroll.directory.base import EmployeeDirectory
from hrms_payroll.exceptions import (
    ConcurrentModificationError,
    DuplicatePayslipError,
    DuplicateRunError,
    NotFoundError,
    PayrollProcessingError,
    ValidationError,
)
from hrms_payroll.models import PayrollItem, PayrollRun, Payslip
from hrms_payroll.services.context import ActorContext
from hrms_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunValidationReport:
    """Pre-processing checks for a payroll run."""

    payroll_run_id: int
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    employee_count: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class PayrollStatistics:
    """Paid payroll totals for an organization and year."""

    year: int
    total_gross_pay: Decimal
    total_net_pay: Decimal
    total_taxes: Decimal
    total_payroll_runs: int


class PayrollRunService:
    """Service for managing the payroll run lifecycle.

    Operations:
    - create_run / update_run / delete_run: run details while editable
    - add_payslip / add_or_recalculate_payslip / remove_payslip: payslip set
    - process_run: build one payslip per active employee, then calculate
    - calculate_run: aggregate payslips into run totals (→ calculated)
    - approve_run / reject_run / pay_run / cancel_run: status transitions

    The service flushes but never commits; the caller owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        directory: EmployeeDirectory | None = None,
        calculator: CompensationCalculator | None = None,
    ):
        self.session = session
        self.directory = directory
        self.calculator = calculator or CompensationCalculator()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def get_run(self, ctx: ActorContext, payroll_run_id: int) -> PayrollRun:
        """Load a run with payslips and items, scoped to the caller's organization."""
        result = await self.session.execute(
            select(PayrollRun)
            .where(PayrollRun.id == payroll_run_id)
            .options(selectinload(PayrollRun.payslips).selectinload(Payslip.items))
        )
        payroll_run = result.scalar_one_or_none()
        if payroll_run is None or payroll_run.organization_id != ctx.organization_id:
            raise NotFoundError("Payroll run", payroll_run_id)
        return payroll_run

    async def get_payslip(self, ctx: ActorContext, payslip_id: int) -> Payslip:
        result = await self.session.execute(
            select(Payslip)
            .where(Payslip.id == payslip_id)
            .options(selectinload(Payslip.items), selectinload(Payslip.payroll_run))
        )
        payslip = result.scalar_one_or_none()
        if payslip is None or payslip.payroll_run.organization_id != ctx.organization_id:
            raise NotFoundError("Payslip", payslip_id)
        return payslip

    async def list_runs(
        self,
        ctx: ActorContext,
        status: str | None = None,
        year: int | None = None,
        month: int | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[PayrollRun], int]:
        """List runs for the caller's organization, newest period first."""
        query = select(PayrollRun).where(PayrollRun.organization_id == ctx.organization_id)

        if status:
            query = query.where(PayrollRun.status == status)
        if year is not None:
            start, end = _period_bounds(year, month)
            query = query.where(
                PayrollRun.pay_period_start >= start,
                PayrollRun.pay_period_start <= end,
            )

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = await self.session.scalar(count_query) or 0

        # Apply pagination
        query = query.order_by(PayrollRun.pay_period_start.desc(), PayrollRun.id.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def list_pending_runs(self, ctx: ActorContext) -> list[PayrollRun]:
        """Runs calculated and awaiting approval."""
        result = await self.session.execute(
            select(PayrollRun)
            .where(
                PayrollRun.organization_id == ctx.organization_id,
                PayrollRun.status == PayrollRunStatus.CALCULATED.value,
            )
            .order_by(PayrollRun.pay_date)
        )
        return list(result.scalars().all())

    async def get_calendar(self, ctx: ActorContext, year: int) -> list[PayrollRun]:
        """Runs whose pay period touches the given year."""
        start, end = _period_bounds(year)
        result = await self.session.execute(
            select(PayrollRun)
            .where(
                PayrollRun.organization_id == ctx.organization_id,
                PayrollRun.pay_period_start <= end,
                PayrollRun.pay_period_end >= start,
            )
            .order_by(PayrollRun.pay_period_start)
        )
        return list(result.scalars().all())

    async def list_payslips(self, ctx: ActorContext, payroll_run_id: int) -> list[Payslip]:
        payroll_run = await self.get_run(ctx, payroll_run_id)
        return list(payroll_run.payslips)

    async def list_employee_payslips(
        self,
        ctx: ActorContext,
        employee_id: int,
        year: int | None = None,
        month: int | None = None,
    ) -> list[Payslip]:
        query = (
            select(Payslip)
            .join(PayrollRun, Payslip.payroll_run_id == PayrollRun.id)
            .where(
                Payslip.employee_id == employee_id,
                PayrollRun.organization_id == ctx.organization_id,
            )
            .options(selectinload(Payslip.items))
            .order_by(Payslip.pay_period.desc())
        )
        if year is not None and month is not None:
            query = query.where(Payslip.pay_period == f"{year:04d}-{month:02d}")
        elif year is not None:
            query = query.where(Payslip.pay_period.like(f"{year:04d}-%"))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_statistics(self, ctx: ActorContext, year: int) -> PayrollStatistics:
        """Totals over paid runs with a pay date in the given year."""
        start, end = _period_bounds(year)
        result = await self.session.execute(
            select(
                func.coalesce(func.sum(PayrollRun.total_gross_pay), 0),
                func.coalesce(func.sum(PayrollRun.total_net_pay), 0),
                func.coalesce(func.sum(PayrollRun.total_taxes), 0),
                func.count(PayrollRun.id),
            ).where(
                PayrollRun.organization_id == ctx.organization_id,
                PayrollRun.status == PayrollRunStatus.PAID.value,
                PayrollRun.pay_date >= start,
                PayrollRun.pay_date <= end,
            )
        )
        gross, net, taxes, count = result.one()
        return PayrollStatistics(
            year=year,
            total_gross_pay=Decimal(str(gross)),
            total_net_pay=Decimal(str(net)),
            total_taxes=Decimal(str(taxes)),
            total_payroll_runs=int(count),
        )

    # ------------------------------------------------------------------
    # Run CRUD
    # ------------------------------------------------------------------

    async def create_run(
        self,
        ctx: ActorContext,
        name: str,
        pay_period_start: date | None,
        pay_period_end: date | None,
        pay_date: date | None,
        description: str | None = None,
    ) -> PayrollRun:
        """Create a new payroll run in draft status."""
        _validate_run_fields(name, pay_period_start, pay_period_end, pay_date)

        existing = await self.session.scalar(
            select(func.count(PayrollRun.id)).where(
                PayrollRun.organization_id == ctx.organization_id,
                PayrollRun.pay_period_start == pay_period_start,
                PayrollRun.pay_period_end == pay_period_end,
                PayrollRun.status != PayrollRunStatus.CANCELLED.value,
            )
        )
        if existing:
            raise DuplicateRunError("Payroll run already exists for this pay period")

        payroll_run = PayrollRun(
            organization_id=ctx.organization_id,
            name=name.strip(),
            description=description,
            pay_period_start=pay_period_start,
            pay_period_end=pay_period_end,
            pay_date=pay_date,
            status=PayrollRunStatus.DRAFT.value,
            total_gross_pay=ZERO,
            total_deductions=ZERO,
            total_taxes=ZERO,
            total_net_pay=ZERO,
            employee_count=0,
            created_by=ctx.user,
            payslips=[],
        )
        self.session.add(payroll_run)
        await self.session.flush()

        logger.info(
            "Created payroll run %s (%s to %s) for organization %s",
            payroll_run.id,
            pay_period_start,
            pay_period_end,
            ctx.organization_id,
        )
        return payroll_run

    async def update_run(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        name: str | None = None,
        description: str | None = None,
        pay_period_start: date | None = None,
        pay_period_end: date | None = None,
        pay_date: date | None = None,
        expected_version: int | None = None,
    ) -> PayrollRun:
        """Edit run details while the run is editable."""
        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)
        PayrollRunStateMachine.require_modifiable(payroll_run, "update")

        new_start = pay_period_start or payroll_run.pay_period_start
        new_end = pay_period_end or payroll_run.pay_period_end
        new_pay_date = pay_date or payroll_run.pay_date
        new_name = name if name is not None else payroll_run.name
        _validate_run_fields(new_name, new_start, new_end, new_pay_date)

        if payroll_run.payslips and new_start.strftime("%Y-%m") != payroll_run.pay_period_label:
            raise ValidationError(
                "Cannot move a run with payslips to a different pay period month"
            )

        payroll_run.name = new_name.strip()
        if description is not None:
            payroll_run.description = description
        payroll_run.pay_period_start = new_start
        payroll_run.pay_period_end = new_end
        payroll_run.pay_date = new_pay_date

        await self._flush(payroll_run)
        return payroll_run

    async def delete_run(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        expected_version: int | None = None,
    ) -> None:
        """Delete a draft, error, or rejected run with its payslips."""
        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)

        if not PayrollRunStateMachine.can_delete(payroll_run.status):
            raise InvalidTransitionError(
                payroll_run.status,
                "deleted",
                "only draft, error or rejected runs can be deleted",
            )

        await self.session.delete(payroll_run)
        await self._flush(payroll_run)
        logger.info("Deleted payroll run %s", payroll_run_id)

    async def validate_run(self, ctx: ActorContext, payroll_run_id: int) -> RunValidationReport:
        """Check a run before processing."""
        payroll_run = await self.get_run(ctx, payroll_run_id)
        report = RunValidationReport(payroll_run_id=payroll_run.id)

        if payroll_run.pay_period_start > payroll_run.pay_period_end:
            report.errors.append("Pay period start date must be before end date")
        if payroll_run.pay_date < payroll_run.pay_period_end:
            report.warnings.append("Pay date is before pay period end date")

        if self.directory is not None:
            employees = await self.directory.list_active_employees(payroll_run.organization_id)
            report.employee_count = len(employees)
            if not employees:
                report.errors.append("No active employees found for this organization")
        else:
            report.employee_count = len(payroll_run.payslips)
            report.warnings.append("Employee directory unavailable; active employees not checked")

        return report

    # ------------------------------------------------------------------
    # Payslips
    # ------------------------------------------------------------------

    async def add_payslip(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        employee_id: int,
        lines: Sequence[PayrollItemLine],
        expected_version: int | None = None,
    ) -> Payslip:
        """Create a payslip. Rejects a second payslip for the same employee and period."""
        return await self._put_payslip(
            ctx, payroll_run_id, employee_id, lines, expected_version, replace=False
        )

    async def add_or_recalculate_payslip(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        employee_id: int,
        lines: Sequence[PayrollItemLine],
        expected_version: int | None = None,
    ) -> Payslip:
        """Create the employee's payslip in this run, or replace its items."""
        return await self._put_payslip(
            ctx, payroll_run_id, employee_id, lines, expected_version, replace=True
        )

    async def remove_payslip(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        payslip_id: int,
        expected_version: int | None = None,
    ) -> PayrollRun:
        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)
        PayrollRunStateMachine.require_modifiable(payroll_run, "remove payslips from")

        payslip = next((p for p in payroll_run.payslips if p.id == payslip_id), None)
        if payslip is None:
            raise NotFoundError("Payslip", payslip_id)

        payroll_run.remove_payslip(payslip)
        payroll_run.calculate_totals()
        await self._flush(payroll_run)
        return payroll_run

    async def recalculate_payslip(self, ctx: ActorContext, payslip_id: int) -> Payslip:
        """Rebuild a payslip from the employee's current compensation and attendance."""
        found = await self.get_payslip(ctx, payslip_id)
        if found.is_finalized:
            raise InvalidTransitionError(
                found.payroll_run.status,
                found.payroll_run.status,
                "cannot recalculate a finalized payslip",
            )

        payroll_run = await self.get_run(ctx, found.payroll_run_id)
        PayrollRunStateMachine.require_modifiable(payroll_run, "recalculate payslips of")
        directory = self._require_directory()

        employee = await self._get_employee(ctx, found.employee_id)
        attendance = await directory.get_attendance(
            employee.employee_id, payroll_run.pay_period_start, payroll_run.pay_period_end
        )
        result = self.calculator.calculate(employee, attendance)
        _require_storable(result.lines)

        payslip = next(p for p in payroll_run.payslips if p.id == payslip_id)
        self._fill_payslip(payslip, result.lines, result.regular_hours, result.overtime_hours)
        payroll_run.calculate_totals()
        await self._flush(payroll_run)
        return payslip

    # ------------------------------------------------------------------
    # Processing and transitions
    # ------------------------------------------------------------------

    async def process_run(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        expected_version: int | None = None,
    ) -> PayrollRun:
        """Build payslips for every active employee, then calculate the run.

        Any failure moves the run to error (with the reason in notes) and is
        raised as PayrollProcessingError.
        """
        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)
        PayrollRunStateMachine.require_modifiable(payroll_run, "process")
        directory = self._require_directory()

        try:
            employees = await directory.list_active_employees(payroll_run.organization_id)
            if not employees:
                raise ValidationError("No active employees found for this organization")

            existing = {p.employee_id: p for p in payroll_run.payslips}
            for employee in employees:
                attendance = await directory.get_attendance(
                    employee.employee_id,
                    payroll_run.pay_period_start,
                    payroll_run.pay_period_end,
                )
                result = self.calculator.calculate(employee, attendance)
                _require_storable(result.lines)
                for warning in result.warnings:
                    logger.warning("Payroll run %s: %s", payroll_run.id, warning)

                payslip = existing.get(employee.employee_id)
                if payslip is None:
                    await self._ensure_no_other_payslip(payroll_run, employee.employee_id)
                    payslip = Payslip(
                        employee_id=employee.employee_id,
                        pay_period=payroll_run.pay_period_label,
                        is_finalized=False,
                        items=[],
                    )
                    payroll_run.add_payslip(payslip)
                self._fill_payslip(
                    payslip, result.lines, result.regular_hours, result.overtime_hours
                )

            payroll_run.calculate_totals()
            self._transition(payroll_run, PayrollRunStatus.CALCULATED, ctx)
            payroll_run.processed_at = _now()
            payroll_run.processed_by = ctx.user
            await self._flush(payroll_run)

        except ConcurrentModificationError:
            raise
        except Exception as e:
            logger.exception("Processing payroll run %s failed", payroll_run_id)
            if not self.session.is_active:
                # A failed flush leaves the transaction unusable
                await self.session.rollback()
                payroll_run = await self.get_run(ctx, payroll_run_id)
            payroll_run.calculate_totals()
            payroll_run.status = PayrollRunStatus.ERROR.value
            payroll_run.notes = f"Error processing payroll: {e}"
            await self._flush(payroll_run)
            raise PayrollProcessingError(payroll_run_id, str(e)) from e

        return payroll_run

    async def calculate_run(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        expected_version: int | None = None,
    ) -> PayrollRun:
        """Re-aggregate every payslip and the run totals (→ calculated)."""
        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)

        self._transition(payroll_run, PayrollRunStatus.CALCULATED, ctx)

        calculated_at = _now()
        for payslip in payroll_run.payslips:
            payslip.calculate_totals()
            payslip.generated_at = calculated_at
        payroll_run.calculate_totals()
        payroll_run.processed_at = calculated_at
        payroll_run.processed_by = ctx.user

        await self._flush(payroll_run)
        return payroll_run

    async def approve_run(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        comments: str | None = None,
        expected_version: int | None = None,
    ) -> PayrollRun:
        """Approve a calculated run and finalize its payslips."""
        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)

        self._transition(payroll_run, PayrollRunStatus.APPROVED, ctx)
        payroll_run.approved_at = _now()
        payroll_run.approved_by = ctx.user
        if comments:
            payroll_run.notes = comments
        for payslip in payroll_run.payslips:
            payslip.is_finalized = True

        await self._flush(payroll_run)
        return payroll_run

    async def reject_run(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        reason: str,
        expected_version: int | None = None,
    ) -> PayrollRun:
        """Send a calculated run back for corrections."""
        if not reason or not reason.strip():
            raise ValidationError("A rejection reason is required")

        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)

        self._transition(payroll_run, PayrollRunStatus.REJECTED, ctx)
        payroll_run.notes = reason.strip()

        await self._flush(payroll_run)
        return payroll_run

    async def pay_run(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        expected_version: int | None = None,
    ) -> PayrollRun:
        """Mark an approved run as paid."""
        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)

        self._transition(payroll_run, PayrollRunStatus.PAID, ctx)
        payroll_run.paid_at = _now()
        payroll_run.paid_by = ctx.user

        await self._flush(payroll_run)
        return payroll_run

    async def cancel_run(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        reason: str | None = None,
        expected_version: int | None = None,
    ) -> PayrollRun:
        """Cancel a run and release its payslips so the period can be run again."""
        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)

        self._transition(payroll_run, PayrollRunStatus.CANCELLED, ctx)
        if reason:
            payroll_run.notes = reason
        released = len(payroll_run.payslips)
        payroll_run.payslips.clear()
        payroll_run.calculate_totals()

        await self._flush(payroll_run)
        logger.info("Cancelled payroll run %s, released %d payslips", payroll_run.id, released)
        return payroll_run

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(
        self,
        payroll_run: PayrollRun,
        to_status: PayrollRunStatus,
        ctx: ActorContext,
    ) -> None:
        from_status = payroll_run.status
        errors = PayrollRunStateMachine.validate_run_for_transition(payroll_run, to_status)
        if errors:
            raise InvalidTransitionError(from_status, to_status, "; ".join(errors))

        payroll_run.status = to_status.value
        logger.info(
            "Payroll run %s: %s -> %s by %s",
            payroll_run.id,
            from_status,
            to_status.value,
            ctx.user,
        )

    async def _get_employee(self, ctx: ActorContext, employee_id: int) -> EmployeeCompensation:
        """Directory lookup limited to the caller's organization."""
        employee = await self._require_directory().get_employee(employee_id)
        if employee.organization_id != ctx.organization_id:
            raise NotFoundError("Employee", employee_id)
        return employee

    def _require_directory(self) -> EmployeeDirectory:
        if self.directory is None:
            raise ValidationError("No employee directory configured")
        return self.directory

    async def _put_payslip(
        self,
        ctx: ActorContext,
        payroll_run_id: int,
        employee_id: int,
        lines: Sequence[PayrollItemLine],
        expected_version: int | None,
        replace: bool,
    ) -> Payslip:
        _require_storable(lines)

        payroll_run = await self.get_run(ctx, payroll_run_id)
        _check_version(payroll_run, expected_version)
        PayrollRunStateMachine.require_modifiable(payroll_run, "add payslips to")

        if self.directory is not None:
            await self._get_employee(ctx, employee_id)

        payslip = next((p for p in payroll_run.payslips if p.employee_id == employee_id), None)
        if payslip is not None and not replace:
            raise DuplicatePayslipError(employee_id, payroll_run.pay_period_label)
        if payslip is None:
            await self._ensure_no_other_payslip(payroll_run, employee_id)
            payslip = Payslip(
                employee_id=employee_id,
                pay_period=payroll_run.pay_period_label,
                is_finalized=False,
                items=[],
            )
            payroll_run.add_payslip(payslip)

        self._fill_payslip(payslip, LineItemBuilder.sort_lines(list(lines)))
        payroll_run.calculate_totals()

        try:
            await self._flush(payroll_run)
        except IntegrityError as e:
            raise DuplicatePayslipError(employee_id, payroll_run.pay_period_label) from e
        return payslip

    async def _ensure_no_other_payslip(self, payroll_run: PayrollRun, employee_id: int) -> None:
        other_run_id = await self.session.scalar(
            select(Payslip.payroll_run_id).where(
                Payslip.employee_id == employee_id,
                Payslip.pay_period == payroll_run.pay_period_label,
            )
        )
        if other_run_id is not None:
            raise DuplicatePayslipError(employee_id, payroll_run.pay_period_label)

    @staticmethod
    def _fill_payslip(
        payslip: Payslip,
        lines: Sequence[PayrollItemLine],
        regular_hours: Decimal = ZERO,
        overtime_hours: Decimal = ZERO,
    ) -> None:
        payslip.items = [PayrollItem(**line.to_row_kwargs()) for line in lines]
        payslip.regular_hours = regular_hours
        payslip.overtime_hours = overtime_hours
        payslip.calculate_totals()
        payslip.generated_at = _now()

    async def _flush(self, payroll_run: PayrollRun) -> None:
        try:
            await self.session.flush()
        except StaleDataError as e:
            raise ConcurrentModificationError("Payroll run", payroll_run.id) from e


def _check_version(payroll_run: PayrollRun, expected_version: int | None) -> None:
    if expected_version is not None and payroll_run.version != expected_version:
        raise ConcurrentModificationError(
            "Payroll run", payroll_run.id, expected_version, payroll_run.version
        )


def _require_storable(lines: Sequence[PayrollItemLine]) -> None:
    errors = LineItemBuilder.validate_lines(list(lines))
    if errors:
        raise ValidationError("Invalid payroll items", errors)


def _validate_run_fields(
    name: str | None,
    pay_period_start: date | None,
    pay_period_end: date | None,
    pay_date: date | None,
) -> None:
    errors: list[str] = []
    if not name or not name.strip():
        errors.append("Name is required")
    if pay_period_start is None:
        errors.append("Pay period start is required")
    if pay_period_end is None:
        errors.append("Pay period end is required")
    if pay_date is None:
        errors.append("Pay date is required")
    if pay_period_start and pay_period_end and pay_period_end < pay_period_start:
        errors.append("Pay period end must not be before pay period start")
    if errors:
        raise ValidationError("; ".join(errors), errors)


def _period_bounds(year: int, month: int | None = None) -> tuple[date, date]:
    if month is None:
        return date(year, 1, 1), date(year, 12, 31)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
