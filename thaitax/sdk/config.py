"""Configuration management for Thai Tax.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - tax_year: default tax year for commands (Buddhist era, e.g. 2567)
   - rules_dir: directory of custom rules YAML files (overrides packaged rules)
   - profile: path to profile.yaml (optional, if not colocated)

2. profile.yaml - The taxpayer's annual figures
   - income, family status, deduction contributions, withholding paid
   - Validated into a TaxpayerInput on load

Config directory resolution:
1. THAI_TAX_CONFIG_PATH environment variable (if set)
2. ~/.config/thai-tax/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set via CLI)
2. profile.yaml in same config directory
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .schemas import TaxpayerInput

logger = logging.getLogger(__name__)

APP_NAME = "thai-tax"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"


class ConfigNotFoundError(Exception):
    """Raised when a configured path does not exist."""
    pass


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. THAI_TAX_CONFIG_PATH environment variable
    2. ~/.config/thai-tax/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("THAI_TAX_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def clear_setting(key: str) -> bool:
    """Remove a setting. Returns True if it was present."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_rules_dir_override() -> Optional[Path]:
    """Custom rules directory from settings.json, or None for packaged rules.

    Raises:
        ConfigNotFoundError: If rules_dir is set but the directory is missing
    """
    custom = get_setting("rules_dir")
    if not custom:
        return None

    rules_dir = Path(custom).expanduser()
    if not rules_dir.is_dir():
        raise ConfigNotFoundError(
            f"Configured rules_dir does not exist: {rules_dir}\n\n"
            f"Update with: thai-tax settings rules-dir /path/to/rules\n"
            f"Or clear it: thai-tax settings rules-dir --clear"
        )
    return rules_dir


def get_default_year() -> int:
    """Default tax year: the tax_year setting, else the latest available rules year."""
    year = get_setting("tax_year")
    if year is not None:
        return int(year)

    from .taxes.rules import get_latest_year
    return get_latest_year()


# =============================================================================
# Profile (taxpayer input)
# =============================================================================


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    custom_profile = get_setting("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Create it with: thai-tax profile init"
            )
        return profile_path

    profile_path = get_config_dir() / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found at {profile_path}\n\n"
            f"Create a profile with: thai-tax profile init\n"
            f"Or pass an input file: thai-tax calc input.yaml"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load the raw profile mapping from profile.yaml.

    Returns:
        Profile dictionary (empty dict if not required and not found)

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: Union[dict, TaxpayerInput], path: Optional[Path] = None) -> Path:
    """Save the taxpayer profile to profile.yaml.

    Args:
        profile: Profile mapping or TaxpayerInput to save
        path: Optional custom path (uses default if not specified)

    Returns:
        Path to the saved profile file
    """
    if isinstance(profile, TaxpayerInput):
        profile = profile.model_dump()

    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def read_input_file(path: Union[str, Path]) -> dict:
    """Read a taxpayer input mapping from a YAML or JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with open(path, "r") as f:
        if path.suffix == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Input file must contain a mapping, got {type(data).__name__}: {path}")
    return data


def load_taxpayer_input(path: Optional[Union[str, Path]] = None) -> TaxpayerInput:
    """Load and validate a TaxpayerInput.

    Args:
        path: YAML/JSON input file. If None, the active profile is used.

    Raises:
        ProfileNotFoundError: If no path given and no profile exists
        pydantic.ValidationError: If the data is not a valid TaxpayerInput
    """
    if path is not None:
        data = read_input_file(path)
        logger.debug(f"Loaded taxpayer input from {path}")
    else:
        data = load_profile(require_exists=True)
        logger.debug(f"Loaded taxpayer input from profile {get_profile_path()}")

    return TaxpayerInput.model_validate(data)


def set_profile_value(field: str, value: Any) -> TaxpayerInput:
    """Set one TaxpayerInput field in the profile, validating the result.

    The profile is created with defaults if it does not exist yet.

    Raises:
        KeyError: If field is not a TaxpayerInput field
        pydantic.ValidationError: If the new value is invalid
    """
    if field not in TaxpayerInput.model_fields:
        raise KeyError(f"Unknown profile field: {field}")

    profile = load_profile(require_exists=False)
    profile[field] = value
    taxpayer = TaxpayerInput.model_validate(profile)
    save_profile(taxpayer)
    return taxpayer
