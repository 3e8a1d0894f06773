"""Retirement contribution optimizer and what-if scenarios.

Pure functions. No I/O. Nothing here mutates the caller's TaxpayerInput:
suggestions are returned and the caller decides whether to apply them.

Allocation policy (calculate_maximize_benefit):
  PVD, GPF and NSF are treated as fixed (payroll-driven) contributions.
  The combined retirement capacity left after them is filled greedily in a
  fixed order: SSF first (up to its own cap), then pension insurance (up to
  its own cap), then RMF takes whatever remains. The order is smallest cap
  first. It is a heuristic, not an optimum over every possible rules
  configuration: different individual caps could make another order
  reach a larger deduction.
"""

import logging

from ..schemas import (
    BaselineComparison,
    MaximizeBenefitResult,
    SimulationResult,
    SimulationScenario,
    TaxCalculationResult,
    TaxImpact,
    TaxpayerInput,
)
from .buckets import calculate_max_retirement_deduction, retirement_component_caps
from .calculator import calculate_gross_income, calculate_tax
from .schemas import TaxRules

logger = logging.getLogger(__name__)

# TaxpayerInput fields the optimizer is free to change, in allocation order
FLEXIBLE_RETIREMENT_FIELDS = ("ssf", "pension_insurance", "rmf")


def calculate_maximize_benefit(taxpayer: TaxpayerInput, rules: TaxRules) -> MaximizeBenefitResult:
    """Suggest SSF / pension insurance / RMF amounts that use the remaining retirement capacity.

    tax_saved compares tax before credits for the unmodified input against
    the input with the suggested amounts in place of the current ones.
    """
    gross_income = calculate_gross_income(taxpayer)
    max_calc = calculate_max_retirement_deduction(gross_income, rules)

    current_fixed = taxpayer.provident_fund + taxpayer.government_pension_fund + taxpayer.nsf
    remaining_capacity = max(0, max_calc.max_deduction - current_fixed)

    caps = retirement_component_caps(taxpayer, gross_income, rules)

    remaining = remaining_capacity
    optimal_ssf = min(remaining, caps["ssf"])
    remaining -= optimal_ssf

    optimal_pension = min(remaining, caps["pension_insurance"])
    remaining -= optimal_pension

    # RMF has no individual cap beyond the combined ceiling
    optimal_rmf = remaining

    optimized = taxpayer.with_updates(
        ssf=optimal_ssf,
        pension_insurance=optimal_pension,
        rmf=optimal_rmf,
    )
    baseline_result = calculate_tax(taxpayer, rules)
    optimized_result = calculate_tax(optimized, rules)
    tax_saved = baseline_result.tax_before_credits - optimized_result.tax_before_credits

    logger.debug(
        f"maximize: capacity={max_calc.max_deduction:.2f} fixed={current_fixed:.2f} "
        f"ssf={optimal_ssf:.2f} pension={optimal_pension:.2f} rmf={optimal_rmf:.2f} "
        f"saved={tax_saved:.2f}"
    )

    return MaximizeBenefitResult(
        optimal_rmf=optimal_rmf,
        optimal_ssf=optimal_ssf,
        optimal_pension_insurance=optimal_pension,
        max_deduction_used=optimal_rmf + optimal_ssf + optimal_pension + current_fixed,
        tax_saved=tax_saved,
    )


def apply_maximize_benefit(taxpayer: TaxpayerInput, suggestion: MaximizeBenefitResult) -> TaxpayerInput:
    """Return a copy of the input with a suggested allocation applied."""
    return taxpayer.with_updates(
        ssf=suggestion.optimal_ssf,
        pension_insurance=suggestion.optimal_pension_insurance,
        rmf=suggestion.optimal_rmf,
    )


def calculate_tax_impact(baseline: TaxCalculationResult, new: TaxCalculationResult) -> TaxImpact:
    """Compare two results. Positive values favour the new result."""
    additional_refund = new.refund_amount - baseline.refund_amount
    return TaxImpact(
        tax_reduction=baseline.tax_before_credits - new.tax_before_credits,
        additional_refund=additional_refund,
        tax_difference=baseline.final_tax_payable - new.final_tax_payable,
        refund_difference=additional_refund,
    )


def baseline_input(taxpayer: TaxpayerInput) -> TaxpayerInput:
    """The input with no flexible retirement contributions (SSF, pension insurance, RMF)."""
    return taxpayer.with_updates(**{field: 0 for field in FLEXIBLE_RETIREMENT_FIELDS})


def simulate_scenario(
    taxpayer: TaxpayerInput,
    rules: TaxRules,
    scenario: SimulationScenario,
) -> SimulationResult:
    """Calculate tax with the scenario's flexible retirement amounts.

    The comparison baseline is the input without any flexible retirement
    contributions, so the result shows what the scenario's SSF, pension
    insurance and RMF purchases are worth on their own.
    """
    baseline = calculate_tax(baseline_input(taxpayer), rules)
    scenario_result = calculate_tax(
        taxpayer.with_updates(
            rmf=scenario.rmf_amount,
            ssf=scenario.ssf_amount,
            pension_insurance=scenario.pension_insurance_amount,
        ),
        rules,
    )
    impact = calculate_tax_impact(baseline, scenario_result)

    return SimulationResult(
        scenario=scenario,
        tax_calculation=scenario_result,
        tax_reduction=impact.tax_reduction,
        additional_refund=impact.additional_refund,
        compared_to_baseline=BaselineComparison(
            tax_difference=impact.tax_difference,
            refund_difference=impact.refund_difference,
        ),
    )
