"""Payslip and reporting endpoints outside a single run."""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from hrms_payroll.api.dependencies import Actor, DbSession, PayrollService
from hrms_payroll.api.schemas import ErrorResponse, PayslipResponse, StatisticsResponse

router = APIRouter(prefix="/payroll", tags=["payslips"])

PayslipId = Annotated[int, Path(ge=1)]


@router.get(
    "/payslips/{payslip_id}",
    response_model=PayslipResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payslip(
    service: PayrollService,
    actor: Actor,
    payslip_id: PayslipId,
) -> PayslipResponse:
    payslip = await service.get_payslip(actor, payslip_id)
    return PayslipResponse.model_validate(payslip)


@router.post(
    "/payslips/{payslip_id}/recalculate",
    response_model=PayslipResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def recalculate_payslip(
    db: DbSession,
    service: PayrollService,
    actor: Actor,
    payslip_id: PayslipId,
) -> PayslipResponse:
    """Rebuild a payslip from current compensation and attendance."""
    payslip = await service.recalculate_payslip(actor, payslip_id)
    await db.commit()
    return PayslipResponse.model_validate(payslip)


@router.get("/employees/{employee_id}/payslips", response_model=list[PayslipResponse])
async def list_employee_payslips(
    service: PayrollService,
    actor: Actor,
    employee_id: Annotated[int, Path(ge=1)],
    year: Annotated[int | None, Query(ge=1900, le=9999)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
) -> list[PayslipResponse]:
    payslips = await service.list_employee_payslips(actor, employee_id, year=year, month=month)
    return [PayslipResponse.model_validate(p) for p in payslips]


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    service: PayrollService,
    actor: Actor,
    year: Annotated[int, Query(ge=1900, le=9999)],
) -> StatisticsResponse:
    """Totals over paid runs with a pay date in the year."""
    stats = await service.get_statistics(actor, year)
    return StatisticsResponse(
        year=stats.year,
        total_gross_pay=stats.total_gross_pay,
        total_net_pay=stats.total_net_pay,
        total_taxes=stats.total_taxes,
        total_payroll_runs=stats.total_payroll_runs,
    )
