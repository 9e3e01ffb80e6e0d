"""Payroll run state machine with transition validation."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from hrms_payroll.exceptions import PayrollError

if TYPE_CHECKING:
    from hrms_payroll.models import PayrollRun


class PayrollRunStatus(str, Enum):
    """Payroll run status values."""

    DRAFT = "draft"
    CALCULATED = "calculated"
    APPROVED = "approved"
    PAID = "paid"
    ERROR = "error"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class InvalidTransitionError(PayrollError):
    """Raised when an invalid state transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = str(getattr(from_status, "value", from_status))
        self.to_status = str(getattr(to_status, "value", to_status))
        self.reason = reason
        msg = f"Invalid transition from '{self.from_status}' to '{self.to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PayrollRunStateMachine:
    """State machine for payroll run status transitions.

    Allowed transitions:
    - draft → calculated
    - error → calculated (recalculate after fixing inputs)
    - rejected → calculated
    - calculated → approved
    - calculated → rejected
    - approved → paid
    - draft/calculated/approved/rejected → error
    - any non-terminal → cancelled
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollRunStatus.DRAFT: [
            PayrollRunStatus.CALCULATED,
            PayrollRunStatus.ERROR,
            PayrollRunStatus.CANCELLED,
        ],
        PayrollRunStatus.ERROR: [
            PayrollRunStatus.CALCULATED,
            PayrollRunStatus.CANCELLED,
        ],
        PayrollRunStatus.REJECTED: [
            PayrollRunStatus.CALCULATED,
            PayrollRunStatus.ERROR,
            PayrollRunStatus.CANCELLED,
        ],
        PayrollRunStatus.CALCULATED: [
            PayrollRunStatus.APPROVED,
            PayrollRunStatus.REJECTED,
            PayrollRunStatus.ERROR,
            PayrollRunStatus.CANCELLED,
        ],
        PayrollRunStatus.APPROVED: [
            PayrollRunStatus.PAID,
            PayrollRunStatus.ERROR,
            PayrollRunStatus.CANCELLED,
        ],
        PayrollRunStatus.PAID: [],  # Terminal state
        PayrollRunStatus.CANCELLED: [],  # Terminal state
    }

    # Statuses where the payslip set and run details may be edited
    MODIFIABLE = {
        PayrollRunStatus.DRAFT,
        PayrollRunStatus.ERROR,
        PayrollRunStatus.REJECTED,
    }

    # Statuses where the run may be deleted
    DELETABLE = MODIFIABLE

    # Statuses where payslips are final
    RESULTS_IMMUTABLE = {
        PayrollRunStatus.APPROVED,
        PayrollRunStatus.PAID,
        PayrollRunStatus.CANCELLED,
    }

    TERMINAL = {
        PayrollRunStatus.PAID,
        PayrollRunStatus.CANCELLED,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(
                from_status, to_status, cls.guard_message(from_status, to_status)
            )

    @classmethod
    def guard_message(cls, from_status: str, to_status: str) -> str | None:
        """Human-readable reason for a rejected transition."""
        if to_status == PayrollRunStatus.APPROVED:
            return "cannot approve a run not in CALCULATED"
        if to_status == PayrollRunStatus.PAID:
            return "cannot pay a run not in APPROVED"
        if to_status == PayrollRunStatus.CALCULATED:
            return "only draft, error or rejected runs can be calculated"
        if to_status == PayrollRunStatus.REJECTED:
            return "cannot reject a run not in CALCULATED"
        if to_status == PayrollRunStatus.CANCELLED:
            if from_status == PayrollRunStatus.PAID:
                return "cannot cancel a paid run"
            return "run is already cancelled"
        return None

    @classmethod
    def can_modify(cls, status: str) -> bool:
        """Check if the payslip set and run details can be edited."""
        return status in cls.MODIFIABLE

    @classmethod
    def can_delete(cls, status: str) -> bool:
        return status in cls.DELETABLE

    @classmethod
    def are_results_immutable(cls, status: str) -> bool:
        """Check if payslips and items are final."""
        return status in cls.RESULTS_IMMUTABLE

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return status in cls.TERMINAL

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def require_modifiable(cls, payroll_run: PayrollRun, action: str = "modify") -> None:
        """Raise unless the run's payslips may be edited."""
        if not cls.can_modify(payroll_run.status):
            raise InvalidTransitionError(
                payroll_run.status,
                payroll_run.status,
                f"cannot {action} a run in status '{payroll_run.status}'; "
                "only draft, error or rejected runs are editable",
            )

    @classmethod
    def validate_run_for_transition(
        cls, payroll_run: PayrollRun, to_status: str
    ) -> list[str]:
        """Validate a payroll run for a specific transition, returning any errors.

        Returns list of error messages (empty if valid).
        """
        errors: list[str] = []
        from_status = payroll_run.status

        # Basic transition check
        if not cls.can_transition(from_status, to_status):
            reason = cls.guard_message(from_status, to_status)
            errors.append(reason or f"Cannot transition from '{from_status}' to '{to_status}'")
            return errors

        # Transition-specific validations
        if to_status == PayrollRunStatus.APPROVED:
            if not payroll_run.payslips:
                errors.append("Payroll run has no payslips")
            if payroll_run.employee_count != len(payroll_run.payslips):
                errors.append("Run totals are stale; recalculate before approval")

        elif to_status == PayrollRunStatus.CALCULATED:
            if payroll_run.pay_period_end < payroll_run.pay_period_start:
                errors.append("Pay period end is before pay period start")

        return errors
