"""API routes."""

from hrms_payroll.api.routes.health import router as health_router
from hrms_payroll.api.routes.payroll_runs import router as payroll_runs_router
from hrms_payroll.api.routes.payslips import router as payslips_router

__all__ = ["health_router", "payroll_runs_router", "payslips_router"]
