"""Thai Tax CLI - Command-line interface for Thai personal income tax."""

import json
import logging
import os

import click
from rich.console import Console

from thaitax import __version__
from thaitax.sdk import (
    ConfigNotFoundError,
    ProfileNotFoundError,
    TaxRulesError,
    TaxRulesNotFoundError,
)

from .profile_commands import profile as profile_group
from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.WARNING),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)


@click.group()
@click.version_option(version=__version__, prog_name="thai-tax")
def cli():
    """Thai Tax - Thailand personal income tax calculator.

    Calculates deductions, taxable income, progressive tax and the
    refund or amount payable for a tax year, and suggests retirement
    fund purchases that use the remaining deduction capacity.

    Taxpayer figures are read from (in order):

    \b
    1. INPUT_FILE argument (YAML or JSON)
    2. settings.json 'profile' key (if set)
    3. ~/.config/thai-tax/profile.yaml (XDG default)

    Run 'thai-tax profile init' to create a profile.
    """
    pass


cli.add_command(profile_group)
cli.add_command(rules_group)
cli.add_command(settings_group)


def resolve_context(input_file, year):
    """Load taxpayer input and rules, converting SDK errors to ClickException.

    Returns:
        Tuple of (TaxpayerInput, TaxRules)
    """
    from thaitax.sdk import get_default_year, load_tax_rules, load_taxpayer_input

    try:
        taxpayer = load_taxpayer_input(input_file)
    except (ProfileNotFoundError, FileNotFoundError, ValueError) as e:
        # pydantic ValidationError is a ValueError
        raise click.ClickException(str(e))

    try:
        tax_year = year if year is not None else get_default_year()
        rules = load_tax_rules(tax_year)
    except (TaxRulesNotFoundError, TaxRulesError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))

    return taxpayer, rules


def _echo_json(model) -> None:
    click.echo(json.dumps(model.model_dump(mode="json"), indent=2, ensure_ascii=False))


@cli.command("calc")
@click.argument("input_file", required=False, type=click.Path())
@click.option("--year", "-y", type=int, help="Tax year, Buddhist era (default: settings or latest)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--explain", is_flag=True, help="Add a step-by-step explanation")
def calc(input_file, year, output_format, explain):
    """Calculate tax, deductions and refund or amount payable.

    \b
    Examples:
      thai-tax calc
      thai-tax calc income.yaml --year 2567
      thai-tax calc income.yaml --format json | jq .taxable_income
    """
    from thaitax.sdk import build_explanation, calculate_tax
    from .renderers.result_renderer import render_tax_result

    taxpayer, rules = resolve_context(input_file, year)
    result = calculate_tax(taxpayer, rules)

    if output_format == "json":
        if explain:
            payload = result.model_dump(mode="json")
            payload["explanation"] = [s.model_dump(mode="json") for s in build_explanation(result, rules)]
            click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        else:
            _echo_json(result)
        return

    explanation = build_explanation(result, rules) if explain else None
    render_tax_result(Console(), result, explanation)


@cli.command("optimize")
@click.argument("input_file", required=False, type=click.Path())
@click.option("--year", "-y", type=int, help="Tax year, Buddhist era (default: settings or latest)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--apply", "apply_to_profile", is_flag=True,
              help="Write the suggested amounts into the active profile")
def optimize(input_file, year, output_format, apply_to_profile):
    """Suggest SSF, pension insurance and RMF amounts to maximize the deduction.

    Provident fund, GPF and NSF contributions are kept as they are. The
    remaining retirement capacity is filled SSF first, then pension
    insurance, then RMF.
    """
    from thaitax.sdk import (
        apply_maximize_benefit,
        calculate_maximize_benefit,
        calculate_tax,
        save_profile,
    )
    from .renderers.result_renderer import render_maximize_benefit

    if apply_to_profile and input_file:
        raise click.UsageError("--apply updates the profile and cannot be combined with INPUT_FILE")

    taxpayer, rules = resolve_context(input_file, year)
    suggestion = calculate_maximize_benefit(taxpayer, rules)

    if output_format == "json":
        _echo_json(suggestion)
    else:
        render_maximize_benefit(Console(), suggestion, calculate_tax(taxpayer, rules))

    if apply_to_profile:
        path = save_profile(apply_maximize_benefit(taxpayer, suggestion))
        click.echo(f"Updated profile: {path}", err=output_format == "json")


@cli.command("simulate")
@click.argument("input_file", required=False, type=click.Path())
@click.option("--rmf", type=click.FloatRange(min=0), default=0, help="RMF purchase amount")
@click.option("--ssf", type=click.FloatRange(min=0), default=0, help="SSF purchase amount")
@click.option("--pension-insurance", type=click.FloatRange(min=0), default=0,
              help="Pension insurance premium amount")
@click.option("--year", "-y", type=int, help="Tax year, Buddhist era (default: settings or latest)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def simulate(input_file, rmf, ssf, pension_insurance, year, output_format):
    """Calculate tax for a what-if RMF / SSF / pension insurance scenario.

    The scenario amounts replace the input's own flexible retirement
    amounts and are compared against having none at all.

    \b
    Example:
      thai-tax simulate --ssf 100000 --rmf 50000
    """
    from thaitax.sdk import SimulationScenario, simulate_scenario
    from .renderers.result_renderer import render_simulation

    taxpayer, rules = resolve_context(input_file, year)
    try:
        scenario = SimulationScenario(
            rmf_amount=rmf,
            ssf_amount=ssf,
            pension_insurance_amount=pension_insurance,
        )
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        raise click.ClickException(str(e))
    simulation = simulate_scenario(taxpayer, rules, scenario)

    if output_format == "json":
        _echo_json(simulation)
    else:
        render_simulation(Console(), simulation)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
