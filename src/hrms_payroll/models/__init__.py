"""ORM models."""

from hrms_payroll.models.base import Base, TimestampMixin
from hrms_payroll.models.payroll import RUN_STATUSES, PayrollItem, PayrollRun, Payslip

__all__ = [
    "Base",
    "TimestampMixin",
    "RUN_STATUSES",
    "PayrollItem",
    "PayrollRun",
    "Payslip",
]
