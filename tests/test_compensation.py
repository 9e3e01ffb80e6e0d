"""Tests for the compensation calculator and tax policies."""

from decimal import Decimal

from hrms_payroll.calculators.aggregator import PayslipAggregator
from hrms_payroll.calculators.compensation import CompensationCalculator
from hrms_payroll.calculators.tax_policy import FlatRateTaxPolicy, NoTaxPolicy
from hrms_payroll.calculators.types import AttendanceSummary, EmployeeCompensation


def salaried(**overrides) -> EmployeeCompensation:
    fields = dict(
        employee_id=42,
        organization_id=1,
        employee_number="E-042",
        full_name="Dana Reyes",
        employment_type="FULL_TIME",
        salary_amount=Decimal("5000.00"),
    )
    fields.update(overrides)
    return EmployeeCompensation(**fields)


def by_code(result):
    return {line.item_code: line for line in result.lines}


class TestFlatRateTaxPolicy:
    def test_default_rates(self):
        lines = FlatRateTaxPolicy().calculate_taxes(Decimal("5000.00"))
        amounts = {line.item_code: line.amount for line in lines}

        assert amounts == {
            "federal_tax": Decimal("1100.00"),
            "state_tax": Decimal("250.00"),
            "social_security_tax": Decimal("310.00"),
            "medicare_tax": Decimal("72.50"),
            "unemployment_tax": Decimal("30.00"),
        }
        assert all(line.is_tax() and line.is_statutory for line in lines)

    def test_each_tax_withheld_in_cents(self):
        lines = FlatRateTaxPolicy(rates={"medicare_tax": Decimal("0.0145")}).calculate_taxes(
            Decimal("123.45")
        )
        assert lines[0].amount == Decimal("1.79")

    def test_zero_wages_withhold_nothing(self):
        assert FlatRateTaxPolicy().calculate_taxes(Decimal("0")) == []

    def test_no_tax_policy(self):
        assert NoTaxPolicy().calculate_taxes(Decimal("5000")) == []


class TestCompensationCalculator:
    """Test payslip line generation."""

    def test_salaried_employee(self):
        calculator = CompensationCalculator()
        result = calculator.calculate(
            salaried(benefit_elections={"health_insurance": Decimal("150.00")}),
            AttendanceSummary(),
        )
        lines = by_code(result)

        assert lines["basic_salary"].calculate_amount() == Decimal("5000.00")
        assert lines["health_insurance"].amount == Decimal("150.00")
        assert lines["federal_tax"].amount == Decimal("1100.00")
        assert "overtime_pay" not in lines
        assert result.warnings == []

        totals = PayslipAggregator.calculate_totals(result.lines)
        assert totals.gross_pay == Decimal("5000.00")
        assert totals.total_taxes == Decimal("1762.50")
        assert totals.total_deductions == Decimal("1912.50")
        assert totals.net_pay == Decimal("3087.50")

    def test_lines_are_in_calculation_order(self):
        result = CompensationCalculator().calculate(
            salaried(
                benefit_elections={"health_insurance": Decimal("150")},
                recurring_earnings={"bonus": Decimal("100")},
            ),
            AttendanceSummary(overtime_hours=Decimal("1")),
        )
        orders = [line.calculation_order for line in result.lines]
        assert orders == sorted(orders)
        assert result.lines[0].item_code == "basic_salary"

    def test_salaried_overtime_uses_hourly_equivalent(self):
        calculator = CompensationCalculator(tax_policy=NoTaxPolicy())
        result = calculator.calculate(
            salaried(salary_amount=Decimal("5280.00")),
            AttendanceSummary(regular_hours=Decimal("160"), overtime_hours=Decimal("4")),
        )
        overtime = by_code(result)["overtime_pay"]

        # 5280 / (22 * 8) = 30.00, x 1.5
        assert overtime.rate == Decimal("45.0000")
        assert overtime.calculate_amount() == Decimal("180.00")
        assert result.overtime_hours == Decimal("4")

    def test_hourly_contractor(self):
        calculator = CompensationCalculator(tax_policy=NoTaxPolicy())
        employee = EmployeeCompensation(
            employee_id=43,
            organization_id=1,
            employee_number="E-043",
            full_name="Sam Okafor",
            employment_type="CONTRACT",
            hourly_rate=Decimal("40.00"),
        )

        result = calculator.calculate(
            employee,
            AttendanceSummary(regular_hours=Decimal("16"), overtime_hours=Decimal("2")),
        )
        lines = by_code(result)

        assert lines["basic_salary"].calculate_amount() == Decimal("640.00")
        assert lines["basic_salary"].unit == "hours"
        assert lines["overtime_pay"].calculate_amount() == Decimal("120.00")
        assert PayslipAggregator.calculate_totals(result.lines).net_pay == Decimal("760.00")

    def test_retirement_contribution(self):
        result = CompensationCalculator(tax_policy=NoTaxPolicy()).calculate(
            salaried(retirement_percent=Decimal("5")),
            AttendanceSummary(),
        )
        assert by_code(result)["retirement_401k"].amount == Decimal("250.00")

    def test_non_taxable_earnings_are_not_taxed(self):
        policy = FlatRateTaxPolicy(rates={"federal_tax": Decimal("0.10")})
        result = CompensationCalculator(tax_policy=policy).calculate(
            salaried(
                salary_amount=Decimal("1000"),
                recurring_earnings={"reimbursements": Decimal("500")},
            ),
            AttendanceSummary(),
        )
        assert by_code(result)["federal_tax"].amount == Decimal("100.00")

    def test_unknown_codes_are_warned(self):
        result = CompensationCalculator().calculate(
            salaried(
                recurring_earnings={"stock_grant": Decimal("10")},
                benefit_elections={"gym": Decimal("5")},
            ),
            AttendanceSummary(),
        )
        codes = {line.item_code for line in result.lines}
        assert "stock_grant" not in codes
        assert "gym" not in codes
        assert len(result.warnings) == 2

    def test_no_pay_basis(self):
        result = CompensationCalculator().calculate(
            salaried(employment_type="INTERN", salary_amount=None),
            AttendanceSummary(),
        )
        assert result.lines == []
        assert "no pay basis" in result.warnings[0]
