"""Tests for line item builder."""

from decimal import Decimal

import pytest

from hrms_payroll.calculators.line_builder import (
    COMPONENTS_BY_CODE,
    STANDARD_COMPONENTS,
    LineItemBuilder,
    fits_column,
)
from hrms_payroll.calculators.types import ItemType, PayrollItemLine


class TestLineItemBuilder:
    """Test line item builder functionality."""

    def test_round_to_cents(self):
        """Test rounding to 2 decimal places, half up."""
        assert LineItemBuilder.round_to_cents(Decimal("10.125")) == Decimal("10.13")
        assert LineItemBuilder.round_to_cents(Decimal("10.124")) == Decimal("10.12")
        assert LineItemBuilder.round_to_cents(Decimal("10.135")) == Decimal("10.14")
        assert LineItemBuilder.round_to_cents(Decimal("-10.125")) == Decimal("-10.13")

    def test_create_earning_line_with_rate_and_quantity(self):
        line = LineItemBuilder.create_earning_line(
            code="overtime_pay",
            name="Overtime Pay",
            rate=Decimal("37.50"),
            quantity=Decimal("4"),
            unit="hours",
        )

        assert line.is_earning()
        assert line.amount is None
        assert line.calculate_amount() == Decimal("150.00")
        assert line.unit == "hours"

    def test_create_deduction_line(self):
        line = LineItemBuilder.create_deduction_line(
            code="health_insurance",
            name="Health Insurance",
            amount=Decimal("150.00"),
        )

        assert line.is_deduction()
        assert not line.is_taxable
        # Deductions are stored as positive amounts
        assert line.amount == Decimal("150.00")

    def test_create_tax_line(self):
        line = LineItemBuilder.create_tax_line(
            code="federal_tax",
            name="Federal Income Tax",
            amount=Decimal("1100.00"),
            rate=Decimal("0.22"),
        )

        assert line.is_tax()
        assert line.is_statutory
        assert line.calculate_amount() == Decimal("1100.00")
        assert line.description == "22.00% of taxable wages"

    def test_from_components_skips_zero_and_sorts(self):
        lines = LineItemBuilder.from_components(
            {
                "federal_tax": Decimal("800"),
                "basic_salary": Decimal("5000"),
                "bonus": Decimal("0"),
                "health_insurance": Decimal("150"),
                "overtime_pay": Decimal("250"),
            }
        )

        assert [line.item_code for line in lines] == [
            "basic_salary",
            "overtime_pay",
            "health_insurance",
            "federal_tax",
        ]
        assert lines[-1].item_type == ItemType.TAX.value
        assert lines[-1].is_statutory

    def test_from_components_unknown_code(self):
        with pytest.raises(KeyError):
            LineItemBuilder.from_components({"stock_options": Decimal("1")})

    def test_reimbursements_are_not_taxable(self):
        assert COMPONENTS_BY_CODE["reimbursements"].is_taxable is False

    def test_catalog_orders_earnings_before_deductions_before_taxes(self):
        orders = {t: [c.order for c in STANDARD_COMPONENTS if c.item_type is t] for t in ItemType}
        assert max(orders[ItemType.EARNING]) < min(orders[ItemType.DEDUCTION])
        assert max(orders[ItemType.DEDUCTION]) < min(orders[ItemType.TAX])

    def test_to_row_kwargs_resolves_amount(self):
        line = PayrollItemLine(
            "earning", "basic_salary", "Basic", rate=Decimal("20"), quantity=Decimal("10")
        )

        row = line.to_row_kwargs()

        assert row["item_type"] == "EARNING"
        assert row["amount"] == Decimal("200")
        assert row["rate"] == Decimal("20")


class TestValidateLines:
    """Test input validation of item lines."""

    def test_valid_lines(self):
        lines = LineItemBuilder.from_components(
            {"basic_salary": Decimal("5000"), "federal_tax": Decimal("800")}
        )
        assert LineItemBuilder.validate_lines(lines) == []

    def test_unknown_item_type(self):
        errors = LineItemBuilder.validate_lines(
            [PayrollItemLine("BENEFIT", "gym", "Gym", amount=Decimal("1"))]
        )
        assert len(errors) == 1
        assert "unknown item type 'BENEFIT'" in errors[0]

    def test_missing_amount(self):
        errors = LineItemBuilder.validate_lines(
            [PayrollItemLine("EARNING", "bonus", "Bonus", rate=Decimal("1"))]
        )
        assert any("needs an amount" in e for e in errors)

    def test_duplicate_codes(self):
        errors = LineItemBuilder.validate_lines(
            [
                PayrollItemLine("EARNING", "bonus", "Bonus", amount=Decimal("1")),
                PayrollItemLine("EARNING", "bonus", "Bonus", amount=Decimal("2")),
            ]
        )
        assert errors == ["Line 1 duplicates item code 'bonus'"]

    def test_missing_code_and_name(self):
        errors = LineItemBuilder.validate_lines(
            [PayrollItemLine("TAX", "", "", amount=Decimal("1"))]
        )
        assert "Line 0 is missing an item code" in errors
        assert any("missing an item name" in e for e in errors)

    def test_digits_beyond_column_scale(self):
        errors = LineItemBuilder.validate_lines(
            [
                PayrollItemLine(
                    "EARNING", "basic_salary", "Hours", rate=Decimal("100"), quantity=Decimal("1.005")
                ),
                PayrollItemLine("DEDUCTION", "other_deductions", "Other", amount=Decimal("0.00001")),
            ]
        )
        assert len(errors) == 2
        assert "quantity 1.005 does not fit" in errors[0]
        assert "amount 0.00001 does not fit" in errors[1]

    def test_resolved_amount_must_fit(self):
        errors = LineItemBuilder.validate_lines(
            [
                PayrollItemLine(
                    "EARNING",
                    "overtime_pay",
                    "Overtime",
                    rate=Decimal("0.333333"),
                    quantity=Decimal("1.5"),
                )
            ]
        )
        assert len(errors) == 1
        assert "resolved amount" in errors[0]

    def test_trailing_zeros_fit(self):
        line = PayrollItemLine(
            "EARNING", "basic_salary", "Hours", rate=Decimal("40.000000"), quantity=Decimal("16.00")
        )
        assert LineItemBuilder.validate_lines([line]) == []

    @pytest.mark.parametrize(
        "value, precision, scale, expected",
        [
            (Decimal("12345678901.2345"), 15, 4, True),
            (Decimal("123456789012"), 15, 4, False),
            (Decimal("1E+3"), 10, 2, True),
            (Decimal("0"), 10, 2, True),
            (Decimal("-1.25"), 10, 2, True),
            (Decimal("NaN"), 15, 4, False),
        ],
    )
    def test_fits_column(self, value, precision, scale, expected):
        assert fits_column(value, precision, scale) is expected
