"""Tests for the rich result renderer."""

import io

from rich.console import Console

from thaitax.cli.renderers.result_renderer import format_baht, render_tax_result
from thaitax.sdk import TaxpayerInput, calculate_tax


def render_to_text(result) -> str:
    buffer = io.StringIO()
    render_tax_result(Console(file=buffer, width=120), result)
    return buffer.getvalue()


class TestFormatBaht:

    def test_rounds_and_groups(self):
        assert format_baht(1234567.6) == "1,234,568"
        assert format_baht(None) == "-"


class TestRenderTaxResult:

    def test_donation_labels_carry_no_multiplier(self, rules):
        result = calculate_tax(
            TaxpayerInput(annual_salary=600_000, education_donation=10_000), rules
        )

        output = render_to_text(result)

        assert "Education" in output
        assert "(x2)" not in output
        assert "20,000" in output

    def test_payable_panel(self, rules):
        output = render_to_text(calculate_tax(TaxpayerInput(annual_salary=600_000), rules))

        assert "Tax payable: 21,500 baht" in output
