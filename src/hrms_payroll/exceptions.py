"""Typed failures raised by the payroll services."""

from __future__ import annotations


class PayrollError(Exception):
    """Base class for payroll business errors."""

    code = "PAYROLL_ERROR"


class NotFoundError(PayrollError):
    """Raised when a run, payslip, or employee does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ValidationError(PayrollError):
    """Raised for malformed input (missing dates, inverted periods, unknown item types)."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or [message]
        super().__init__(message)


class DuplicateRunError(ValidationError):
    """Raised when a run already exists for the organization and pay period."""

    code = "DUPLICATE_RUN"


class DuplicatePayslipError(PayrollError):
    """Raised when a second payslip is created for the same employee and period."""

    code = "DUPLICATE_PAYSLIP"

    def __init__(self, employee_id: int, pay_period: str):
        self.employee_id = employee_id
        self.pay_period = pay_period
        super().__init__(
            f"Payslip already exists for employee {employee_id} in period {pay_period}"
        )


class ConcurrentModificationError(PayrollError):
    """Raised on an optimistic version mismatch. Re-read and retry."""

    code = "CONCURRENT_MODIFICATION"

    def __init__(
        self,
        entity: str,
        entity_id: object,
        expected_version: int | None = None,
        actual_version: int | None = None,
    ):
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        msg = f"{entity} {entity_id} was modified concurrently"
        if expected_version is not None:
            msg += f" (expected version {expected_version}, found {actual_version})"
        super().__init__(msg)


class PayrollProcessingError(PayrollError):
    """Raised when processing fails and the run has been moved to error."""

    code = "PROCESSING_FAILED"

    def __init__(self, payroll_run_id: int, reason: str):
        self.payroll_run_id = payroll_run_id
        self.reason = reason
        super().__init__(f"Failed to process payroll run {payroll_run_id}: {reason}")
