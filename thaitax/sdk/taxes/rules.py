"""Tax rules loading.

Rules are data, one YAML document per tax year at tax_rules/<year>.yaml
(Buddhist-era year). Each document is validated through the TaxRules schema
the first time it is loaded and cached afterwards; TaxRules is frozen so the
cached record can be shared by any number of calculations.

A missing year is a configuration error. There is no fallback to a nearby
year: callers get TaxRulesNotFoundError listing the years that do exist.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from .schemas import TaxRules

logger = logging.getLogger(__name__)


class TaxRulesNotFoundError(LookupError):
    """Raised when no rules document exists for the requested year."""

    def __init__(self, year: int, available_years: list, rules_dir: Path):
        self.year = year
        self.available_years = available_years
        self.rules_dir = rules_dir
        available = ", ".join(str(y) for y in available_years) or "none"
        super().__init__(
            f"Tax rules for year {year} not found. Available years: {available}"
        )


class TaxRulesError(ValueError):
    """Raised when a rules document cannot be parsed or fails validation."""
    pass


def _get_packaged_rules_dir() -> Path:
    """Get the tax_rules directory shipped with the package."""
    return Path(__file__).parent.parent.parent / "tax_rules"  # taxes -> sdk -> thaitax


def get_rules_dir(rules_dir: Optional[Union[str, Path]] = None) -> Path:
    """Resolve the rules directory.

    Resolution order:
    1. rules_dir argument
    2. settings.json "rules_dir" key
    3. Packaged thaitax/tax_rules/
    """
    if rules_dir is not None:
        return Path(rules_dir)

    from ..config import get_rules_dir_override
    override = get_rules_dir_override()
    if override is not None:
        return override

    return _get_packaged_rules_dir()


def get_available_years(rules_dir: Optional[Union[str, Path]] = None) -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    directory = get_rules_dir(rules_dir)
    years = [int(p.stem) for p in directory.glob("*.yaml") if p.stem.isdigit()]
    logger.debug(f"Rules years in {directory}: {years}")
    return sorted(years, reverse=True)


def get_latest_year(rules_dir: Optional[Union[str, Path]] = None) -> int:
    """Get the most recent tax year with a rules document."""
    years = get_available_years(rules_dir)
    if not years:
        raise TaxRulesError(f"No tax rules found in {get_rules_dir(rules_dir)}")
    return years[0]


@lru_cache(maxsize=None)
def _load_rules_file(path: Path) -> TaxRules:
    logger.debug(f"Loading tax rules from {path}")
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TaxRulesError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise TaxRulesError(f"Tax rules must be a YAML mapping: {path}")

    try:
        return TaxRules.model_validate(data)
    except ValidationError as e:
        raise TaxRulesError(f"Tax rules validation failed for {path}:\n{e}") from e


def load_tax_rules(year: Union[int, str], rules_dir: Optional[Union[str, Path]] = None) -> TaxRules:
    """Load tax rules for a specific year from tax_rules/<year>.yaml.

    Args:
        year: Tax year (Buddhist era), e.g. 2567
        rules_dir: Optional directory overriding settings and packaged rules

    Raises:
        TaxRulesNotFoundError: If the year has no rules document
        TaxRulesError: If the document is invalid
    """
    year = int(year)
    directory = get_rules_dir(rules_dir)
    config_file = directory / f"{year}.yaml"

    if not config_file.exists():
        raise TaxRulesNotFoundError(year, get_available_years(directory), directory)

    rules = _load_rules_file(config_file.resolve())
    if rules.tax_year != year:
        raise TaxRulesError(
            f"{config_file} declares tax_year {rules.tax_year}, expected {year}"
        )
    return rules


def clear_rules_cache() -> None:
    """Forget cached rules documents (after editing a custom rules_dir)."""
    _load_rules_file.cache_clear()
