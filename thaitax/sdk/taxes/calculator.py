"""Tax calculation pipeline.

Sequences the income, allowance, bucket, donation and bracket calculations
into one TaxCalculationResult. The order matters:

  1. gross income = salary + bonus + other income
  2. expense deduction = min(gross x rate, cap) -> net income after expense
  3. personal allowances
  4. retirement bucket (eligible income = gross income)
  5. life insurance, then health insurance (needs life effective amount)
  6. parent health insurance, social security
  7. other deductions
  8. net income before donations = net after expense - deductions so far
  9. donations (capped against step 8)
 10. taxable income = max(0, net after expense - all deductions)
 11. progressive tax
 12. payable / refund against withholding, effective rate

Every function is pure: the same (input, rules) pair always produces an
identical result.
"""

import logging

from ..schemas import DeductionSummary, TaxCalculationResult, TaxpayerInput
from .allowances import calculate_personal_allowances
from .brackets import calculate_progressive_tax
from .buckets import (
    calculate_health_insurance_bucket,
    calculate_life_insurance_bucket,
    calculate_other_deductions,
    calculate_parent_health_insurance_bucket,
    calculate_retirement_bucket,
    calculate_social_security_bucket,
)
from .donations import calculate_donations
from .schemas import TaxRules

logger = logging.getLogger(__name__)


def calculate_gross_income(taxpayer: TaxpayerInput) -> float:
    """Salary + bonus + other income."""
    return taxpayer.annual_salary + taxpayer.bonus + taxpayer.other_income


def calculate_employment_expense_deduction(gross_income: float, rules: TaxRules) -> float:
    """min(gross income x rate, max amount)."""
    expense = rules.income_rules.employment_expense_deduction
    return min(gross_income * expense.rate, expense.max_amount)


def calculate_net_income_after_expense(gross_income: float, rules: TaxRules) -> float:
    return gross_income - calculate_employment_expense_deduction(gross_income, rules)


def calculate_tax(taxpayer: TaxpayerInput, rules: TaxRules) -> TaxCalculationResult:
    """Calculate the full tax breakdown for one taxpayer and one year's rules."""
    gross_income = calculate_gross_income(taxpayer)

    employment_expense_deduction = calculate_employment_expense_deduction(gross_income, rules)
    net_income_after_expense = gross_income - employment_expense_deduction

    personal_allowances = calculate_personal_allowances(taxpayer, rules)

    retirement = calculate_retirement_bucket(taxpayer, gross_income, rules)

    life_insurance = calculate_life_insurance_bucket(taxpayer, rules)
    health_insurance = calculate_health_insurance_bucket(
        taxpayer, life_insurance.effective_deduction, rules
    )
    parent_health_insurance = calculate_parent_health_insurance_bucket(taxpayer, rules)
    social_security = calculate_social_security_bucket(taxpayer, rules)

    other_deductions = calculate_other_deductions(taxpayer, rules)

    total_deductions_before_donations = (
        personal_allowances.total
        + retirement.total_effective_deduction
        + life_insurance.effective_deduction
        + health_insurance.effective_deduction
        + parent_health_insurance.effective_deduction
        + social_security.effective_deduction
        + other_deductions.total
    )
    net_income_before_donations = net_income_after_expense - total_deductions_before_donations

    donations = calculate_donations(taxpayer, net_income_before_donations, rules)

    total_deductions = total_deductions_before_donations + donations.total
    taxable_income = max(0, net_income_after_expense - total_deductions)

    tax = calculate_progressive_tax(taxable_income, rules)

    withholding = taxpayer.withholding_tax_paid
    final_tax_payable = max(0, tax.total_tax - withholding)
    refund_amount = max(0, withholding - tax.total_tax)
    effective_tax_rate = tax.total_tax / gross_income if gross_income > 0 else 0

    logger.debug(
        f"tax {rules.tax_year}: gross={gross_income:.2f} deductions={total_deductions:.2f} "
        f"taxable={taxable_income:.2f} tax={tax.total_tax:.2f} withheld={withholding:.2f}"
    )

    return TaxCalculationResult(
        tax_year=rules.tax_year,
        gross_income=gross_income,
        employment_expense_deduction=employment_expense_deduction,
        net_income_after_expense=net_income_after_expense,
        personal_allowances=personal_allowances,
        deductions=DeductionSummary(
            retirement=retirement,
            life_insurance=life_insurance,
            health_insurance=health_insurance,
            parent_health_insurance=parent_health_insurance,
            social_security=social_security,
            other_deductions=other_deductions,
            donations=donations,
            total_deductions=total_deductions,
        ),
        taxable_income=taxable_income,
        tax_before_credits=tax.total_tax,
        bracket_breakdown=tax.bracket_breakdown,
        withholding_tax_paid=withholding,
        final_tax_payable=final_tax_payable,
        refund_amount=refund_amount,
        is_refund=refund_amount > 0,
        effective_tax_rate=effective_tax_rate,
        marginal_tax_rate=tax.marginal_rate,
    )
