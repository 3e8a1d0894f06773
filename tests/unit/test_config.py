"""Unit tests for settings and profile management.

Every test runs against an empty THAI_TAX_CONFIG_PATH directory
(see the isolated_config fixture).
"""

import json

import pytest
from pydantic import ValidationError

from thaitax.sdk import (
    ConfigNotFoundError,
    ProfileNotFoundError,
    TaxpayerInput,
    clear_setting,
    get_config_dir,
    get_default_year,
    get_profile_path,
    get_rules_dir_override,
    get_setting,
    load_profile,
    load_taxpayer_input,
    read_input_file,
    save_profile,
    set_profile_value,
    set_setting,
)


class TestConfigDir:

    def test_env_override(self, isolated_config):
        assert get_config_dir() == isolated_config

    def test_xdg_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("THAI_TAX_CONFIG_PATH")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        assert get_config_dir() == tmp_path / "xdg" / "thai-tax"


class TestSettings:

    def test_set_and_get(self, isolated_config):
        set_setting("tax_year", 2567)

        assert get_setting("tax_year") == 2567
        saved = json.loads((isolated_config / "settings.json").read_text())
        assert saved == {"tax_year": 2567}

    def test_missing_setting_default(self):
        assert get_setting("tax_year") is None
        assert get_setting("tax_year", 2560) == 2560

    def test_clear_setting(self):
        set_setting("tax_year", 2567)

        assert clear_setting("tax_year") is True
        assert clear_setting("tax_year") is False
        assert get_setting("tax_year") is None

    def test_default_year_from_setting(self):
        set_setting("tax_year", 2566)

        assert get_default_year() == 2566

    def test_default_year_is_latest_rules(self):
        assert get_default_year() >= 2567

    def test_missing_rules_dir_raises(self, tmp_path):
        set_setting("rules_dir", str(tmp_path / "missing"))

        with pytest.raises(ConfigNotFoundError, match="rules_dir does not exist"):
            get_rules_dir_override()

    def test_rules_dir_override(self, tmp_path):
        rules_dir = tmp_path / "rules"
        rules_dir.mkdir()
        set_setting("rules_dir", str(rules_dir))

        assert get_rules_dir_override() == rules_dir


class TestProfile:

    def test_no_profile(self):
        with pytest.raises(ProfileNotFoundError, match="thai-tax profile init"):
            load_taxpayer_input()

        assert load_profile(require_exists=False) == {}

    def test_save_and_load(self, isolated_config):
        path = save_profile(TaxpayerInput(annual_salary=600_000, has_spouse=True))

        assert path == isolated_config / "profile.yaml"
        taxpayer = load_taxpayer_input()
        assert taxpayer.annual_salary == 600_000
        assert taxpayer.has_spouse is True

    def test_custom_profile_path(self, tmp_path):
        custom = tmp_path / "elsewhere" / "me.yaml"
        set_setting("profile", str(custom))

        with pytest.raises(ProfileNotFoundError, match="configured path"):
            get_profile_path(require_exists=True)

        save_profile({"annual_salary": 500_000})
        assert custom.exists()
        assert load_taxpayer_input().annual_salary == 500_000

    def test_set_profile_value_creates_profile(self):
        taxpayer = set_profile_value("annual_salary", 750_000)

        assert taxpayer.annual_salary == 750_000
        assert load_profile()["annual_salary"] == 750_000

    def test_set_profile_value_keeps_other_fields(self):
        set_profile_value("annual_salary", 750_000)
        set_profile_value("ssf", 50_000)

        taxpayer = load_taxpayer_input()
        assert taxpayer.annual_salary == 750_000
        assert taxpayer.ssf == 50_000

    def test_set_profile_value_unknown_field(self):
        with pytest.raises(KeyError):
            set_profile_value("salary", 1)

    def test_set_profile_value_invalid(self):
        with pytest.raises(ValidationError):
            set_profile_value("rmf", -1)

        assert not get_profile_path().exists()

    def test_invalid_profile_rejected(self, isolated_config):
        (isolated_config / "profile.yaml").write_text("annual_salary: 600000\nbogus: 1\n")

        with pytest.raises(ValidationError):
            load_taxpayer_input()


class TestInputFile:

    def test_yaml_input(self, tmp_path):
        path = tmp_path / "input.yaml"
        path.write_text("annual_salary: 900000\nnumber_of_children: 1\n")

        taxpayer = load_taxpayer_input(path)

        assert taxpayer.annual_salary == 900_000
        assert taxpayer.number_of_children == 1

    def test_json_input(self, tmp_path):
        path = tmp_path / "input.json"
        path.write_text(json.dumps({"annual_salary": 900_000, "rmf": 10_000}))

        assert load_taxpayer_input(path).rmf == 10_000

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "input.yaml"
        path.write_text("")

        assert read_input_file(path) == {}
        assert load_taxpayer_input(path) == TaxpayerInput()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_input_file(tmp_path / "missing.yaml")

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "input.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            read_input_file(path)
