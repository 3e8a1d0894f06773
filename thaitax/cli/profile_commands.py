"""Profile CLI commands for Thai Tax.

Manages the taxpayer profile (profile.yaml) - income, family status,
deduction contributions and withholding for the year.
"""

import click
import yaml
from pydantic import ValidationError

from thaitax.sdk import (
    ProfileNotFoundError,
    TaxpayerInput,
    get_profile_path,
    load_profile,
    save_profile,
    set_profile_value,
)


def _format_validation_error(e: ValidationError) -> str:
    lines = []
    for error in e.errors():
        location = ".".join(str(p) for p in error["loc"]) or "profile"
        lines.append(f"  ! {location}: {error['msg']}")
    return "Invalid profile:\n" + "\n".join(lines)


def _parse_value(field: str, raw: str):
    """Convert a command-line string to the field's type."""
    annotation = TaxpayerInput.model_fields[field].annotation
    if annotation is bool:
        lowered = raw.lower()
        if lowered in ("true", "yes", "1", "y"):
            return True
        if lowered in ("false", "no", "0", "n"):
            return False
        raise click.BadParameter(f"Expected true/false for {field}, got '{raw}'")
    if annotation is int:
        try:
            return int(raw)
        except ValueError:
            raise click.BadParameter(f"Expected a whole number for {field}, got '{raw}'")
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        raise click.BadParameter(f"Expected an amount for {field}, got '{raw}'")


@click.group()
def profile():
    """Manage the taxpayer profile (profile.yaml)."""
    pass


@profile.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing profile")
def profile_init(force):
    """Create a profile with every field set to its default (zero/false)."""
    path = get_profile_path()
    if path.exists() and not force:
        raise click.ClickException(f"Profile already exists: {path}\nUse --force to overwrite.")

    saved = save_profile(TaxpayerInput())
    click.echo(f"Created profile: {saved}")
    click.echo("Set values with: thai-tax profile set annual_salary 600000")


@profile.command("show")
def profile_show():
    """Show the profile and whether it is valid."""
    try:
        data = load_profile(require_exists=True)
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))

    click.echo(f"Profile: {get_profile_path()}")
    click.echo()
    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip())

    try:
        TaxpayerInput.model_validate(data)
    except ValidationError as e:
        click.echo()
        raise click.ClickException(_format_validation_error(e))


@profile.command("set")
@click.argument("field")
@click.argument("value")
def profile_set(field, value):
    """Set one profile FIELD to VALUE.

    \b
    Examples:
      thai-tax profile set annual_salary 600000
      thai-tax profile set has_spouse true
      thai-tax profile set number_of_children 2
    """
    if field not in TaxpayerInput.model_fields:
        valid = ", ".join(TaxpayerInput.model_fields)
        raise click.BadParameter(f"Unknown field '{field}'. Valid fields: {valid}")

    try:
        set_profile_value(field, _parse_value(field, value))
    except ValidationError as e:
        raise click.ClickException(_format_validation_error(e))

    click.echo(f"Set {field}: {value}")


@profile.command("path")
def profile_path():
    """Print the profile path."""
    click.echo(get_profile_path())
