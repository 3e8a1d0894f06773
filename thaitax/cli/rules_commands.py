"""Tax rules CLI commands.

Lists and shows the year-keyed rules documents the calculator uses.
"""

import json

import click
from rich.console import Console

from thaitax.sdk import (
    ConfigNotFoundError,
    TaxRulesError,
    TaxRulesNotFoundError,
    get_available_years,
    get_default_year,
    load_tax_rules,
)
from thaitax.sdk.taxes import get_rules_dir


@click.group()
def rules():
    """Inspect tax rules (tax_rules/<year>.yaml)."""
    pass


@rules.command("list")
def rules_list():
    """List tax years with a rules document (newest first)."""
    try:
        rules_dir = get_rules_dir()
        years = get_available_years(rules_dir)
    except ConfigNotFoundError as e:
        raise click.ClickException(str(e))

    click.echo(f"Rules directory: {rules_dir}")
    if not years:
        click.echo("No tax rules found.")
        return

    for i, year in enumerate(years):
        marker = " (latest)" if i == 0 else ""
        click.echo(f"  {year}{marker}")


@rules.command("show")
@click.argument("year", required=False, type=int)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def rules_show(year, output_format):
    """Show the parameters of a tax year (default: settings or latest)."""
    from .renderers.result_renderer import render_rules

    try:
        tax_rules = load_tax_rules(year if year is not None else get_default_year())
    except (TaxRulesNotFoundError, TaxRulesError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(tax_rules.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
        return

    render_rules(Console(), tax_rules)
