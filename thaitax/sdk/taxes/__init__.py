"""taxes - Thai personal income tax calculation.

Scope:
- Year-keyed tax rules (tax_rules/<year>.yaml, validated by TaxRules)
- Personal allowances and capped deduction buckets
- Donation layering, progressive brackets, payable/refund
- Retirement contribution optimizer and what-if scenarios

Constraints:
- Pure calculation - no settings, profiles or other I/O beyond rules loading
- Receives a TaxpayerInput and TaxRules, returns frozen result models

Modules:
- rules: Rules loading (load_tax_rules, get_available_years, get_latest_year)
- schemas: TaxRules pydantic schema
- allowances, buckets, donations: Deduction calculators
- brackets: Progressive tax over ordered brackets
- calculator: Full pipeline (calculate_tax)
- optimizer: calculate_maximize_benefit, simulate_scenario

Usage:
    from thaitax.sdk.taxes import calculate_tax, load_tax_rules

    rules = load_tax_rules(2567)
    result = calculate_tax(TaxpayerInput(annual_salary=600000), rules)
"""

# Rules
from .schemas import TaxBracket, TaxRules
from .rules import (
    TaxRulesError,
    TaxRulesNotFoundError,
    clear_rules_cache,
    get_available_years,
    get_latest_year,
    get_rules_dir,
    load_tax_rules,
)

# Calculators
from .allowances import calculate_personal_allowances
from .buckets import (
    calculate_health_insurance_bucket,
    calculate_life_insurance_bucket,
    calculate_max_retirement_deduction,
    calculate_other_deductions,
    calculate_parent_health_insurance_bucket,
    calculate_retirement_bucket,
    calculate_social_security_bucket,
    retirement_component_caps,
)
from .donations import calculate_donations
from .brackets import calculate_progressive_tax
from .calculator import (
    calculate_employment_expense_deduction,
    calculate_gross_income,
    calculate_net_income_after_expense,
    calculate_tax,
)

# Optimization
from .optimizer import (
    apply_maximize_benefit,
    baseline_input,
    calculate_maximize_benefit,
    calculate_tax_impact,
    simulate_scenario,
)

__all__ = [
    # Rules
    "TaxBracket",
    "TaxRules",
    "TaxRulesError",
    "TaxRulesNotFoundError",
    "clear_rules_cache",
    "get_available_years",
    "get_latest_year",
    "get_rules_dir",
    "load_tax_rules",
    # Calculators
    "calculate_personal_allowances",
    "calculate_health_insurance_bucket",
    "calculate_life_insurance_bucket",
    "calculate_max_retirement_deduction",
    "calculate_other_deductions",
    "calculate_parent_health_insurance_bucket",
    "calculate_retirement_bucket",
    "calculate_social_security_bucket",
    "retirement_component_caps",
    "calculate_donations",
    "calculate_progressive_tax",
    "calculate_employment_expense_deduction",
    "calculate_gross_income",
    "calculate_net_income_after_expense",
    "calculate_tax",
    # Optimization
    "apply_maximize_benefit",
    "baseline_input",
    "calculate_maximize_benefit",
    "calculate_tax_impact",
    "simulate_scenario",
]
