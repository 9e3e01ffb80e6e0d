"""Payroll services."""

from hrms_payroll.services.context import ActorContext
from hrms_payroll.services.payroll_run_service import (
    PayrollRunService,
    PayrollStatistics,
    RunValidationReport,
)
from hrms_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
)

__all__ = [
    "ActorContext",
    "PayrollRunService",
    "PayrollStatistics",
    "RunValidationReport",
    "InvalidTransitionError",
    "PayrollRunStateMachine",
    "PayrollRunStatus",
]
