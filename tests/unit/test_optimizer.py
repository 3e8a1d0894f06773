"""Unit tests for the retirement optimizer and what-if scenarios."""

import pytest

from thaitax.sdk import (
    SimulationScenario,
    TaxpayerInput,
    apply_maximize_benefit,
    calculate_maximize_benefit,
    calculate_tax,
    calculate_tax_impact,
    simulate_scenario,
)
from thaitax.sdk.taxes import baseline_input


class TestMaximizeBenefit:

    def test_fills_ssf_then_pension(self, rules):
        taxpayer = TaxpayerInput(annual_salary=1_000_000, provident_fund=50_000)

        suggestion = calculate_maximize_benefit(taxpayer, rules)

        # Capacity 300,000 - 50,000 PVD = 250,000
        assert suggestion.optimal_ssf == pytest.approx(200_000)
        assert suggestion.optimal_pension_insurance == pytest.approx(50_000)
        assert suggestion.optimal_rmf == 0
        assert suggestion.max_deduction_used == pytest.approx(300_000)
        # Taxable 790,000 -> 540,000: 73,000 -> 33,500
        assert suggestion.tax_saved == pytest.approx(39_500)

    def test_rmf_takes_remainder(self, rules):
        suggestion = calculate_maximize_benefit(TaxpayerInput(annual_salary=3_000_000), rules)

        assert suggestion.optimal_ssf == 200_000
        assert suggestion.optimal_pension_insurance == 200_000
        assert suggestion.optimal_rmf == pytest.approx(100_000)
        assert suggestion.max_deduction_used == pytest.approx(500_000)

    def test_no_capacity_left(self, rules):
        taxpayer = TaxpayerInput(annual_salary=100_000, provident_fund=15_000, nsf=30_000)

        suggestion = calculate_maximize_benefit(taxpayer, rules)

        assert suggestion.optimal_ssf == 0
        assert suggestion.optimal_pension_insurance == 0
        assert suggestion.optimal_rmf == 0

    def test_input_not_modified(self, rules):
        taxpayer = TaxpayerInput(annual_salary=1_000_000, ssf=10_000)

        calculate_maximize_benefit(taxpayer, rules)

        assert taxpayer.ssf == 10_000
        assert taxpayer.rmf == 0

    def test_apply_suggestion(self, rules):
        taxpayer = TaxpayerInput(annual_salary=1_000_000, rmf=80_000)
        suggestion = calculate_maximize_benefit(taxpayer, rules)

        applied = apply_maximize_benefit(taxpayer, suggestion)

        assert applied.ssf == suggestion.optimal_ssf
        assert applied.pension_insurance == suggestion.optimal_pension_insurance
        assert applied.rmf == suggestion.optimal_rmf
        assert calculate_tax(applied, rules).deductions.retirement.remaining_capacity == pytest.approx(0)


class TestTaxImpact:

    def test_positive_values_favour_new_result(self, rules):
        baseline = calculate_tax(TaxpayerInput(annual_salary=1_000_000, withholding_tax_paid=80_000), rules)
        new = calculate_tax(
            TaxpayerInput(annual_salary=1_000_000, ssf=100_000, withholding_tax_paid=80_000), rules
        )

        impact = calculate_tax_impact(baseline, new)

        assert impact.tax_reduction > 0
        assert impact.tax_reduction == pytest.approx(baseline.tax_before_credits - new.tax_before_credits)
        assert impact.additional_refund == pytest.approx(new.refund_amount - baseline.refund_amount)
        assert impact.refund_difference == impact.additional_refund


class TestSimulateScenario:

    def test_scenario_against_no_flexible_contributions(self, rules):
        taxpayer = TaxpayerInput(annual_salary=1_000_000, ssf=80_000)
        scenario = SimulationScenario(ssf_amount=100_000, rmf_amount=50_000)

        simulation = simulate_scenario(taxpayer, rules, scenario)

        # Baseline taxable 840,000 -> 83,000; scenario taxable 690,000 -> 56,000
        assert simulation.tax_calculation.tax_before_credits == pytest.approx(56_000)
        assert simulation.tax_reduction == pytest.approx(27_000)
        assert simulation.compared_to_baseline.tax_difference == pytest.approx(27_000)
        assert simulation.additional_refund == 0
        assert simulation.scenario == scenario

    def test_empty_scenario_matches_baseline(self, rules):
        taxpayer = TaxpayerInput(annual_salary=700_000, rmf=30_000)

        simulation = simulate_scenario(taxpayer, rules, SimulationScenario())

        assert simulation.tax_reduction == 0
        assert simulation.tax_calculation == calculate_tax(baseline_input(taxpayer), rules)

    def test_refund_grows_with_withholding(self, rules):
        taxpayer = TaxpayerInput(annual_salary=1_000_000, withholding_tax_paid=83_000)

        simulation = simulate_scenario(taxpayer, rules, SimulationScenario(ssf_amount=100_000, rmf_amount=50_000))

        assert simulation.additional_refund == pytest.approx(27_000)
        assert simulation.tax_calculation.refund_amount == pytest.approx(27_000)
