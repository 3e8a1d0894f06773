"""Rich renderer for tax calculation results.

Transforms SDK result models into formatted Rich tables. Amounts are
rounded to whole baht for display only; the SDK keeps full precision.
"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from thaitax.sdk.schemas import (
    BucketCalculation,
    ExplanationSection,
    MaximizeBenefitResult,
    SimulationResult,
    TaxCalculationResult,
)
from thaitax.sdk.taxes.schemas import TaxRules


def format_baht(amount: Optional[float]) -> str:
    """Round to the nearest baht with thousands grouping."""
    if amount is None:
        return "-"
    return f"{round(amount):,}"


def _pct(rate: float, digits: int = 0) -> str:
    return f"{rate * 100:.{digits}f}%"


def render_tax_result(
    console: Console,
    result: TaxCalculationResult,
    explanation: Optional[List[ExplanationSection]] = None,
) -> None:
    """Render a full tax calculation: summary, deductions, brackets, outcome."""
    _render_summary(console, result)
    _render_deductions(console, result)
    _render_brackets(console, result)
    _render_outcome(console, result)

    if explanation:
        render_explanation(console, explanation)


def _render_summary(console: Console, result: TaxCalculationResult) -> None:
    year = f" {result.tax_year}" if result.tax_year else ""
    table = Table(title=f"Tax Calculation{year}", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=28)
    table.add_column("Baht", justify="right", min_width=14)

    table.add_row("Gross income", format_baht(result.gross_income))
    table.add_row("  Expense deduction", f"-{format_baht(result.employment_expense_deduction)}")
    table.add_row("Net income after expense", format_baht(result.net_income_after_expense))
    table.add_row("  Total deductions", f"-{format_baht(result.deductions.total_deductions)}")
    table.add_row("[bold]Taxable income[/bold]", f"[bold]{format_baht(result.taxable_income)}[/bold]")
    table.add_row("Tax", format_baht(result.tax_before_credits))
    table.add_row("Effective rate", _pct(result.effective_tax_rate, 2))
    table.add_row("Marginal rate", _pct(result.marginal_tax_rate))

    console.print(table)


def _bucket_row(table: Table, label: str, bucket: BucketCalculation) -> None:
    table.add_row(
        label,
        format_baht(bucket.input_amount),
        format_baht(bucket.effective_deduction),
        format_baht(bucket.remaining_capacity),
        _constraint_label(bucket.binding_constraint, bucket.is_at_limit),
    )


def _constraint_label(constraint: str, at_limit: bool) -> str:
    if constraint == "none":
        return "[dim]-[/dim]"
    style = "yellow" if at_limit else "cyan"
    return f"[{style}]{constraint}[/{style}]"


def _render_deductions(console: Console, result: TaxCalculationResult) -> None:
    deductions = result.deductions
    allowances = result.personal_allowances
    retirement = deductions.retirement

    table = Table(title="Deductions", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=24)
    table.add_column("Input", justify="right")
    table.add_column("Deducted", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Limit")

    table.add_row("[bold]ALLOWANCES[/bold]", "", "", "", "")
    table.add_row("  Self", "", format_baht(allowances.self_allowance), "", "")
    if allowances.spouse:
        table.add_row("  Spouse", "", format_baht(allowances.spouse), "", "")
    if allowances.children:
        table.add_row("  Children", "", format_baht(allowances.children), "", "")
    if allowances.parents:
        table.add_row("  Parents", "", format_baht(allowances.parents), "", "")
    if allowances.disabled:
        table.add_row("  Disabled dependents", "", format_baht(allowances.disabled), "", "")

    table.add_row("[bold]RETIREMENT[/bold]", "", "", "", "")
    for component in retirement.components:
        if not component.input_amount:
            continue
        table.add_row(
            f"  {component.component_name}",
            format_baht(component.input_amount),
            format_baht(component.effective_amount),
            "",
            _constraint_label("individual", True) if component.is_at_individual_limit else "",
        )
    table.add_row(
        "  Retirement total",
        format_baht(retirement.total_input),
        format_baht(retirement.total_effective_deduction),
        format_baht(retirement.remaining_capacity),
        _constraint_label(retirement.binding_constraint, retirement.remaining_capacity == 0),
    )

    table.add_row("[bold]INSURANCE[/bold]", "", "", "", "")
    _bucket_row(table, "  Life insurance", deductions.life_insurance)
    _bucket_row(table, "  Health insurance", deductions.health_insurance)
    _bucket_row(table, "  Parent health insurance", deductions.parent_health_insurance)
    _bucket_row(table, "  Social security", deductions.social_security)

    other = deductions.other_deductions
    if other.total:
        table.add_row("[bold]OTHER[/bold]", "", "", "", "")
        table.add_row("  Home loan interest", "", format_baht(other.home_loan_interest), "", "")
        table.add_row("  Easy E-Receipt", "", format_baht(other.easy_e_receipt), "", "")

    donations = deductions.donations
    if donations.total:
        table.add_row("[bold]DONATIONS[/bold]", "", "", "", "")
        table.add_row(
            "  Education",
            format_baht(donations.education.input),
            format_baht(donations.education.effective),
            "",
            "",
        )
        table.add_row(
            "  General",
            format_baht(donations.general.input),
            format_baht(donations.general.effective),
            "",
            "",
        )
        table.add_row(
            "  Political party",
            format_baht(donations.political.input),
            format_baht(donations.political.effective),
            "",
            "",
        )

    table.add_row("", "", "", "", "")
    table.add_row("[bold]TOTAL[/bold]", "", f"[bold]{format_baht(deductions.total_deductions)}[/bold]", "", "")

    console.print(table)
    console.print(f"[dim]Retirement: {retirement.constraint_explanation}[/dim]")


def _render_brackets(console: Console, result: TaxCalculationResult) -> None:
    table = Table(title="Tax Brackets", box=box.SIMPLE)
    table.add_column("Bracket", min_width=22)
    table.add_column("Rate", justify="right")
    table.add_column("Taxed", justify="right")
    table.add_column("Tax", justify="right")

    for row in result.bracket_breakdown:
        upper = format_baht(row.max_income) if row.max_income is not None else "+"
        style = "" if row.taxable_in_bracket > 0 else "dim"
        table.add_row(
            f"{format_baht(row.min_income)} - {upper}",
            _pct(row.rate),
            format_baht(row.taxable_in_bracket),
            format_baht(row.tax_in_bracket),
            style=style,
        )

    console.print(table)


def _render_outcome(console: Console, result: TaxCalculationResult) -> None:
    if result.is_refund:
        console.print(Panel(
            f"[green]Refund: {format_baht(result.refund_amount)} baht[/green]\n"
            f"Withheld {format_baht(result.withholding_tax_paid)}, "
            f"tax {format_baht(result.tax_before_credits)}",
            title="Result",
            border_style="green",
        ))
    else:
        console.print(Panel(
            f"[yellow]Tax payable: {format_baht(result.final_tax_payable)} baht[/yellow]\n"
            f"Withheld {format_baht(result.withholding_tax_paid)}, "
            f"tax {format_baht(result.tax_before_credits)}",
            title="Result",
            border_style="yellow",
        ))


def render_explanation(console: Console, sections: List[ExplanationSection]) -> None:
    for i, section in enumerate(sections, start=1):
        body = section.content
        if section.details:
            body += "\n" + "\n".join(f"  - {d}" for d in section.details)
        console.print(Panel(
            body,
            title=f"{i}. {section.title}",
            border_style="green" if section.highlight else "dim",
        ))


def render_maximize_benefit(
    console: Console,
    suggestion: MaximizeBenefitResult,
    current: TaxCalculationResult,
) -> None:
    """Render the suggested flexible retirement allocation."""
    retirement = current.deductions.retirement

    table = Table(title="Suggested Retirement Allocation", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=24)
    table.add_column("Current", justify="right")
    table.add_column("Suggested", justify="right")

    current_amounts = {c.component_id: c.input_amount for c in retirement.components}
    table.add_row("SSF", format_baht(current_amounts.get("ssf")), format_baht(suggestion.optimal_ssf))
    table.add_row(
        "Pension insurance",
        format_baht(current_amounts.get("pension_insurance")),
        format_baht(suggestion.optimal_pension_insurance),
    )
    table.add_row("RMF", format_baht(current_amounts.get("rmf")), format_baht(suggestion.optimal_rmf))
    table.add_row("", "", "")
    table.add_row(
        "Retirement ceiling",
        "",
        format_baht(retirement.max_retirement_deduction),
    )
    table.add_row("Deduction used", "", format_baht(suggestion.max_deduction_used))

    console.print(table)
    console.print(Panel(
        f"[green]Tax saved: {format_baht(suggestion.tax_saved)} baht[/green]\n"
        f"[dim]Fills SSF first, then pension insurance, then RMF.[/dim]",
        title="Benefit",
        border_style="green",
    ))


def render_simulation(console: Console, simulation: SimulationResult) -> None:
    scenario = simulation.scenario
    result = simulation.tax_calculation

    table = Table(title="Scenario", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=24)
    table.add_column("Baht", justify="right")

    table.add_row("RMF", format_baht(scenario.rmf_amount))
    table.add_row("SSF", format_baht(scenario.ssf_amount))
    table.add_row("Pension insurance", format_baht(scenario.pension_insurance_amount))
    table.add_row("", "")
    table.add_row("Taxable income", format_baht(result.taxable_income))
    table.add_row("Tax", format_baht(result.tax_before_credits))
    table.add_row("Tax reduction", format_baht(simulation.tax_reduction))
    table.add_row("Additional refund", format_baht(simulation.additional_refund))

    console.print(table)
    _render_outcome(console, result)


def render_rules(console: Console, rules: TaxRules) -> None:
    """Render the headline parameters of a rules year."""
    allowances = rules.personal_allowances
    buckets = rules.deduction_buckets
    retirement = buckets.retirement
    expense = rules.income_rules.employment_expense_deduction

    table = Table(title=f"Tax Rules {rules.year_label or rules.tax_year}", box=box.ROUNDED)
    table.add_column("Parameter", style="bold", min_width=30)
    table.add_column("Value", justify="right")

    table.add_row("Expense deduction", f"{_pct(expense.rate)} up to {format_baht(expense.max_amount)}")
    table.add_row("Self allowance", format_baht(allowances.self_allowance.amount))
    table.add_row("Spouse allowance", format_baht(allowances.spouse.amount))
    table.add_row(
        "Child allowance",
        f"{format_baht(allowances.child.amount_per_child)} "
        f"(+{format_baht(allowances.child.additional_from_cutoff)} from {allowances.child.cutoff_year})",
    )
    table.add_row(
        "Parent care",
        f"{format_baht(allowances.parent_care.amount_per_parent)} x {allowances.parent_care.max_parents}",
    )
    table.add_row(
        "Retirement combined",
        f"{_pct(retirement.percentage_limit.rate)} up to {format_baht(retirement.absolute_limit.amount)}",
    )
    table.add_row("Life insurance", format_baht(buckets.life_insurance.absolute_limit))
    table.add_row("Health insurance", format_baht(buckets.health_insurance.absolute_limit))
    table.add_row("Parent health insurance", format_baht(buckets.parent_health_insurance.absolute_limit))
    table.add_row("Social security", format_baht(buckets.social_security.absolute_limit))

    console.print(table)

    brackets = Table(title="Brackets", box=box.SIMPLE)
    brackets.add_column("From", justify="right")
    brackets.add_column("To", justify="right")
    brackets.add_column("Rate", justify="right")
    for bracket in rules.tax_brackets:
        brackets.add_row(
            format_baht(bracket.min_income),
            format_baht(bracket.max_income) if bracket.max_income is not None else "+",
            _pct(bracket.rate),
        )
    console.print(brackets)
