"""Plain-language, step-by-step explanation of a tax calculation."""

from typing import List

from .schemas import ExplanationSection, TaxCalculationResult
from .taxes.schemas import TaxRules


def _baht(amount: float) -> str:
    return f"{round(amount):,} baht"


def _pct(rate: float) -> str:
    return f"{rate * 100:.0f}%"


def build_explanation(result: TaxCalculationResult, rules: TaxRules) -> List[ExplanationSection]:
    """Explain how result was reached, one section per pipeline step."""
    sections = []

    # 1. Income
    content = f"Your total income for the year is {_baht(result.gross_income)}"
    if result.gross_income > 0:
        content += f", about {_baht(result.gross_income / 12)} per month"
    sections.append(ExplanationSection(title="Your income", content=content + "."))

    # 2. Expense deduction
    expense = rules.income_rules.employment_expense_deduction
    sections.append(ExplanationSection(
        title="Expense deduction",
        content=(
            f"Employment income may deduct {_pct(expense.rate)} as expenses, up to "
            f"{_baht(expense.max_amount)}. You deduct {_baht(result.employment_expense_deduction)}, "
            f"leaving {_baht(result.net_income_after_expense)}."
        ),
    ))

    # 3. Deductions
    deductions = result.deductions
    retirement = deductions.retirement
    details = [f"Personal and family allowances: {_baht(result.personal_allowances.total)}"]
    if retirement.total_effective_deduction > 0:
        line = f"Retirement savings: {_baht(retirement.total_effective_deduction)}"
        if retirement.remaining_capacity > 0:
            line += f" ({_baht(retirement.remaining_capacity)} of capacity still unused)"
        details.append(line)
    insurance = (
        deductions.life_insurance.effective_deduction
        + deductions.health_insurance.effective_deduction
        + deductions.parent_health_insurance.effective_deduction
        + deductions.social_security.effective_deduction
    )
    if insurance > 0:
        details.append(f"Insurance and social security: {_baht(insurance)}")
    if deductions.other_deductions.total > 0:
        details.append(f"Other deductions: {_baht(deductions.other_deductions.total)}")
    if deductions.donations.total > 0:
        details.append(f"Donations: {_baht(deductions.donations.total)}")
    sections.append(ExplanationSection(
        title="Deductions",
        content=f"Your deductions total {_baht(deductions.total_deductions)}.",
        details=details,
    ))

    # 4. Taxable income
    sections.append(ExplanationSection(
        title="Taxable income",
        content=(
            f"Income after expenses minus deductions leaves taxable income of "
            f"{_baht(result.taxable_income)}."
        ),
    ))

    # 5. Tax by bracket
    active = [b for b in result.bracket_breakdown if b.taxable_in_bracket > 0]
    bracket_details = []
    for b in active:
        upper = _baht(b.max_income) if b.max_income is not None else "and above"
        bracket_details.append(
            f"{_baht(b.min_income)} - {upper} at {_pct(b.rate)}: "
            f"{_baht(b.taxable_in_bracket)} taxed {_baht(b.tax_in_bracket)}"
        )
    content = f"Tax on your taxable income is {_baht(result.tax_before_credits)}"
    if active:
        content += f"; your highest bracket is {_pct(result.marginal_tax_rate)}"
    content += f" and the effective rate on gross income is {result.effective_tax_rate * 100:.2f}%."
    sections.append(ExplanationSection(title="Tax calculation", content=content, details=bracket_details))

    # 6. Payable or refund
    if result.is_refund:
        content = (
            f"Tax withheld during the year ({_baht(result.withholding_tax_paid)}) exceeds your tax, "
            f"so you can claim a refund of {_baht(result.refund_amount)}."
        )
    elif result.final_tax_payable > 0:
        content = (
            f"After {_baht(result.withholding_tax_paid)} already withheld you still owe "
            f"{_baht(result.final_tax_payable)}."
        )
    else:
        content = "Your withholding exactly covers your tax. Nothing is owed or refunded."
    sections.append(ExplanationSection(title="Result", content=content, highlight=True))

    return sections
