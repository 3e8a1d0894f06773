"""Settings CLI commands for Thai Tax.

Manages settings.json - default tax year, custom rules directory.
"""

from pathlib import Path

import click

from thaitax.sdk import (
    ConfigNotFoundError,
    TaxRulesError,
    clear_setting,
    get_available_years,
    get_default_year,
    get_setting,
    get_settings_path,
    load_settings,
    set_setting,
)
from thaitax.sdk.taxes import clear_rules_cache, get_rules_dir


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - tax_year: default tax year for calc/optimize/simulate
    - rules_dir: custom directory of <year>.yaml rules files
    - profile: path to profile.yaml
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    try:
        click.echo(f"  rules_dir: {get_rules_dir()}")
        click.echo(f"  tax_year: {get_default_year()}")
    except (ConfigNotFoundError, TaxRulesError) as e:
        raise click.ClickException(str(e))


@settings.command("year")
@click.argument("year", required=False, type=int)
@click.option("--clear", is_flag=True, help="Clear tax_year, revert to latest available")
def settings_year(year, clear):
    """Set or clear the default tax year.

    Examples:
        thai-tax settings year 2567
        thai-tax settings year --clear
    """
    if clear:
        if clear_setting("tax_year"):
            click.echo("Cleared tax_year setting.")
        else:
            click.echo("tax_year was not set.")
        return

    if year is None:
        current = get_setting("tax_year")
        if current is not None:
            click.echo(f"Current tax_year: {current}")
        else:
            click.echo("No tax_year set. Using latest available rules year.")
        return

    try:
        available = get_available_years()
    except (ConfigNotFoundError, TaxRulesError) as e:
        raise click.ClickException(str(e))

    if year not in available:
        raise click.ClickException(
            f"No tax rules for year {year}. Available years: {', '.join(str(y) for y in available)}"
        )

    set_setting("tax_year", year)
    click.echo(f"Set tax_year: {year}")


@settings.command("rules-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom rules_dir, revert to packaged rules")
def settings_rules_dir(path, clear):
    """Set or clear a custom tax rules directory.

    PATH is a directory containing <year>.yaml rules documents.
    """
    if clear:
        if clear_setting("rules_dir"):
            clear_rules_cache()
            click.echo("Cleared rules_dir setting.")
        else:
            click.echo("rules_dir was not set.")
        return

    if not path:
        current = get_setting("rules_dir")
        if current:
            click.echo(f"Current rules_dir: {current}")
        else:
            click.echo(f"No custom rules_dir set. Using packaged rules: {get_rules_dir()}")
        return

    rules_path = Path(path).expanduser().resolve()
    if not rules_path.is_dir():
        raise click.ClickException(f"Not a directory: {rules_path}")

    years = get_available_years(rules_path)
    if not years:
        raise click.ClickException(f"No <year>.yaml rules files in {rules_path}")

    set_setting("rules_dir", str(rules_path))
    clear_rules_cache()
    click.echo(f"Set rules_dir: {rules_path}")
    click.echo(f"Years available: {', '.join(str(y) for y in years)}")
