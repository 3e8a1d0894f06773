"""Progressive income tax over ordered brackets."""

from typing import Sequence, Union

from ..schemas import BracketCalculation, ProgressiveTaxResult
from .schemas import TaxBracket, TaxRules


def calculate_progressive_tax(
    taxable_income: float,
    brackets: Union[TaxRules, Sequence[TaxBracket]],
) -> ProgressiveTaxResult:
    """Calculate tax on taxable income using ascending, contiguous brackets.

    Every bracket appears in the breakdown; brackets the income does not reach
    are recorded with zero amounts. The marginal rate is the rate of the
    highest bracket holding any income, even when that rate is 0.

    Args:
        taxable_income: Final taxable income (>= 0)
        brackets: TaxRules for a year, or its tax_brackets list

    Returns:
        ProgressiveTaxResult with total tax, per-bracket rows and marginal rate
    """
    if isinstance(brackets, TaxRules):
        brackets = brackets.tax_brackets

    breakdown = []
    total_tax = 0.0
    marginal_rate = 0.0

    for bracket in brackets:
        bracket_min = bracket.min_income
        bracket_max = bracket.max_income if bracket.max_income is not None else float("inf")

        if taxable_income <= bracket_min:
            taxable_in_bracket = 0.0
            tax_in_bracket = 0.0
        else:
            taxable_in_bracket = max(0.0, min(taxable_income, bracket_max) - bracket_min)
            tax_in_bracket = taxable_in_bracket * bracket.rate
            total_tax += tax_in_bracket
            if taxable_in_bracket > 0:
                marginal_rate = bracket.rate

        breakdown.append(BracketCalculation(
            min_income=bracket.min_income,
            max_income=bracket.max_income,
            rate=bracket.rate,
            description=bracket.description,
            taxable_in_bracket=taxable_in_bracket,
            tax_in_bracket=tax_in_bracket,
            cumulative_tax=total_tax,
        ))

    return ProgressiveTaxResult(
        total_tax=total_tax,
        bracket_breakdown=breakdown,
        marginal_rate=marginal_rate,
    )
