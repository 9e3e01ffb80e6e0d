"""HTTP API for payroll runs and payslips."""
