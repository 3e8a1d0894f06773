"""Shared fixtures for thai-tax tests."""

import pytest

from thaitax.sdk.taxes import clear_rules_cache, load_tax_rules
from thaitax.sdk.taxes.rules import _get_packaged_rules_dir


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config directory at an empty temp dir for every test."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("THAI_TAX_CONFIG_PATH", str(config_dir))
    yield config_dir
    clear_rules_cache()


@pytest.fixture
def rules():
    """Packaged 2567 rules."""
    return load_tax_rules(2567, rules_dir=_get_packaged_rules_dir())
