"""Payroll run API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status

from hrms_payroll.api.dependencies import Actor, DbSession, ExpectedVersion, PayrollService
from hrms_payroll.api.schemas import (
    ApprovalRequest,
    CalendarEntry,
    CancelRequest,
    ErrorResponse,
    PayrollItemResponse,
    PayrollRunCreate,
    PayrollRunDetailResponse,
    PayrollRunListResponse,
    PayrollRunResponse,
    PayrollRunUpdate,
    PayslipResponse,
    PayslipUpsertRequest,
    RejectionRequest,
    ValidationReportResponse,
)
from hrms_payroll.exceptions import PayrollProcessingError, ValidationError

router = APIRouter(prefix="/payroll/runs", tags=["payroll-runs"])

RunId = Annotated[int, Path(ge=1)]

ERRORS = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


# ============================================================================
# Payroll Run CRUD
# ============================================================================


@router.post(
    "",
    response_model=PayrollRunResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def create_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    payload: PayrollRunCreate,
) -> PayrollRunResponse:
    """Create a new payroll run in draft status."""
    payroll_run = await service.create_run(
        actor,
        name=payload.name,
        pay_period_start=payload.pay_period_start,
        pay_period_end=payload.pay_period_end,
        pay_date=payload.pay_date,
        description=payload.description,
    )
    await db.commit()
    return PayrollRunResponse.model_validate(payroll_run)


@router.get("", response_model=PayrollRunListResponse)
async def list_payroll_runs(
    service: PayrollService,
    actor: Actor,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    year: Annotated[int | None, Query(ge=1900, le=9999)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
) -> PayrollRunListResponse:
    """List payroll runs for the caller's organization with optional filters."""
    runs, total = await service.list_runs(
        actor,
        status=status_filter,
        year=year,
        month=month,
        page=page,
        page_size=page_size,
    )
    return PayrollRunListResponse(
        items=[PayrollRunResponse.model_validate(r) for r in runs],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/pending", response_model=list[PayrollRunResponse])
async def list_pending_payroll_runs(
    service: PayrollService,
    actor: Actor,
) -> list[PayrollRunResponse]:
    """Runs calculated and awaiting approval."""
    runs = await service.list_pending_runs(actor)
    return [PayrollRunResponse.model_validate(r) for r in runs]


@router.get("/calendar", response_model=list[CalendarEntry])
async def get_payroll_calendar(
    service: PayrollService,
    actor: Actor,
    year: Annotated[int, Query(ge=1900, le=9999)],
) -> list[CalendarEntry]:
    runs = await service.get_calendar(actor, year)
    return [CalendarEntry.model_validate(r) for r in runs]


@router.get(
    "/{payroll_run_id}",
    response_model=PayrollRunDetailResponse,
    responses=ERRORS,
)
async def get_payroll_run(
    service: PayrollService,
    actor: Actor,
    payroll_run_id: RunId,
) -> PayrollRunDetailResponse:
    """Get a payroll run with its payslips."""
    payroll_run = await service.get_run(actor, payroll_run_id)
    return PayrollRunDetailResponse.model_validate(payroll_run)


@router.put(
    "/{payroll_run_id}",
    response_model=PayrollRunResponse,
    responses=ERRORS,
)
async def update_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
    payload: PayrollRunUpdate,
) -> PayrollRunResponse:
    payroll_run = await service.update_run(
        actor,
        payroll_run_id,
        expected_version=expected_version,
        **payload.model_dump(exclude_unset=True),
    )
    await db.commit()
    return PayrollRunResponse.model_validate(payroll_run)


@router.delete(
    "/{payroll_run_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERRORS,
)
async def delete_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
) -> Response:
    """Delete a draft, error, or rejected run."""
    await service.delete_run(actor, payroll_run_id, expected_version=expected_version)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Payroll Run State Transitions
# ============================================================================


@router.post(
    "/{payroll_run_id}/process",
    response_model=PayrollRunDetailResponse,
    responses=ERRORS,
)
async def process_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
) -> PayrollRunDetailResponse:
    """Build payslips for all active employees and calculate the run."""
    try:
        payroll_run = await service.process_run(
            actor, payroll_run_id, expected_version=expected_version
        )
    except PayrollProcessingError:
        # Keep the error status and notes recorded by the service
        await db.commit()
        raise
    await db.commit()
    return PayrollRunDetailResponse.model_validate(payroll_run)


@router.post(
    "/{payroll_run_id}/calculate",
    response_model=PayrollRunDetailResponse,
    responses=ERRORS,
)
async def calculate_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
) -> PayrollRunDetailResponse:
    """Aggregate payslips into run totals. Idempotent on unchanged payslips."""
    payroll_run = await service.calculate_run(
        actor, payroll_run_id, expected_version=expected_version
    )
    await db.commit()
    return PayrollRunDetailResponse.model_validate(payroll_run)


@router.post(
    "/{payroll_run_id}/approve",
    response_model=PayrollRunResponse,
    responses=ERRORS,
)
async def approve_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
    payload: ApprovalRequest | None = None,
) -> PayrollRunResponse:
    """Approve a calculated run and finalize its payslips."""
    payroll_run = await service.approve_run(
        actor,
        payroll_run_id,
        comments=payload.comments if payload else None,
        expected_version=expected_version,
    )
    await db.commit()
    return PayrollRunResponse.model_validate(payroll_run)


@router.post(
    "/{payroll_run_id}/reject",
    response_model=PayrollRunResponse,
    responses=ERRORS,
)
async def reject_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
    payload: RejectionRequest,
) -> PayrollRunResponse:
    payroll_run = await service.reject_run(
        actor, payroll_run_id, payload.reason, expected_version=expected_version
    )
    await db.commit()
    return PayrollRunResponse.model_validate(payroll_run)


@router.post(
    "/{payroll_run_id}/pay",
    response_model=PayrollRunResponse,
    responses=ERRORS,
)
async def pay_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
) -> PayrollRunResponse:
    """Mark an approved run as paid."""
    payroll_run = await service.pay_run(
        actor, payroll_run_id, expected_version=expected_version
    )
    await db.commit()
    return PayrollRunResponse.model_validate(payroll_run)


@router.post(
    "/{payroll_run_id}/cancel",
    response_model=PayrollRunResponse,
    responses=ERRORS,
)
async def cancel_payroll_run(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
    payload: CancelRequest | None = None,
) -> PayrollRunResponse:
    payroll_run = await service.cancel_run(
        actor,
        payroll_run_id,
        reason=payload.reason if payload else None,
        expected_version=expected_version,
    )
    await db.commit()
    return PayrollRunResponse.model_validate(payroll_run)


@router.post(
    "/{payroll_run_id}/validate",
    response_model=ValidationReportResponse,
    responses=ERRORS,
)
async def validate_payroll_run(
    service: PayrollService,
    actor: Actor,
    payroll_run_id: RunId,
) -> ValidationReportResponse:
    report = await service.validate_run(actor, payroll_run_id)
    return ValidationReportResponse(
        payroll_run_id=report.payroll_run_id,
        is_valid=report.is_valid,
        errors=report.errors,
        warnings=report.warnings,
        employee_count=report.employee_count,
    )


# ============================================================================
# Payslips within a run
# ============================================================================


@router.get(
    "/{payroll_run_id}/payslips",
    response_model=list[PayslipResponse],
    responses=ERRORS,
)
async def list_run_payslips(
    service: PayrollService,
    actor: Actor,
    payroll_run_id: RunId,
) -> list[PayslipResponse]:
    payslips = await service.list_payslips(actor, payroll_run_id)
    return [PayslipResponse.model_validate(p) for p in payslips]


@router.get(
    "/{payroll_run_id}/items",
    response_model=list[PayrollItemResponse],
    responses=ERRORS,
)
async def list_run_items(
    service: PayrollService,
    actor: Actor,
    payroll_run_id: RunId,
) -> list[PayrollItemResponse]:
    """All payroll items of the run, payslip by payslip."""
    payslips = await service.list_payslips(actor, payroll_run_id)
    return [PayrollItemResponse.model_validate(i) for p in payslips for i in p.items]


@router.post(
    "/{payroll_run_id}/payslips",
    response_model=PayslipResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def add_payslip(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
    payload: PayslipUpsertRequest,
) -> PayslipResponse:
    """Add a payslip. Rejects a second payslip for the same employee and period."""
    _reject_unknown_components(payload)
    payslip = await service.add_payslip(
        actor,
        payroll_run_id,
        payload.employee_id,
        payload.to_lines(),
        expected_version=expected_version,
    )
    await db.commit()
    return PayslipResponse.model_validate(payslip)


@router.put(
    "/{payroll_run_id}/payslips",
    response_model=PayslipResponse,
    responses=ERRORS,
)
async def upsert_payslip(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
    payload: PayslipUpsertRequest,
) -> PayslipResponse:
    """Add the employee's payslip, or replace its items and recompute totals."""
    _reject_unknown_components(payload)
    payslip = await service.add_or_recalculate_payslip(
        actor,
        payroll_run_id,
        payload.employee_id,
        payload.to_lines(),
        expected_version=expected_version,
    )
    await db.commit()
    return PayslipResponse.model_validate(payslip)


@router.delete(
    "/{payroll_run_id}/payslips/{payslip_id}",
    response_model=PayrollRunResponse,
    responses=ERRORS,
)
async def remove_payslip(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    expected_version: ExpectedVersion,
    payroll_run_id: RunId,
    payslip_id: Annotated[int, Path(ge=1)],
) -> PayrollRunResponse:
    payroll_run = await service.remove_payslip(
        actor, payroll_run_id, payslip_id, expected_version=expected_version
    )
    await db.commit()
    return PayrollRunResponse.model_validate(payroll_run)


def _reject_unknown_components(payload: PayslipUpsertRequest) -> None:
    unknown = payload.unknown_components()
    if unknown:
        raise ValidationError(
            "Unknown payslip components",
            [f"Unknown component '{code}'" for code in unknown],
        )
