"""Thai Tax SDK - Core functionality for Thai personal income tax calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    clear_setting,
    get_rules_dir_override,
    get_default_year,
    ConfigNotFoundError,
    # Profile (taxpayer input)
    get_profile_path,
    load_profile,
    save_profile,
    read_input_file,
    load_taxpayer_input,
    set_profile_value,
    ProfileNotFoundError,
)

from .schemas import (
    TaxpayerInput,
    TaxCalculationResult,
    MaximizeBenefitResult,
    SimulationScenario,
    SimulationResult,
    TaxImpact,
    ExplanationSection,
)

from .taxes import (
    TaxRules,
    TaxRulesError,
    TaxRulesNotFoundError,
    load_tax_rules,
    get_available_years,
    get_latest_year,
    calculate_tax,
    calculate_progressive_tax,
    calculate_maximize_benefit,
    apply_maximize_benefit,
    calculate_tax_impact,
    simulate_scenario,
)

from .explain import build_explanation

__all__ = [
    # Settings
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "clear_setting",
    "get_rules_dir_override",
    "get_default_year",
    "ConfigNotFoundError",
    # Profile
    "get_profile_path",
    "load_profile",
    "save_profile",
    "read_input_file",
    "load_taxpayer_input",
    "set_profile_value",
    "ProfileNotFoundError",
    # Schemas
    "TaxpayerInput",
    "TaxCalculationResult",
    "MaximizeBenefitResult",
    "SimulationScenario",
    "SimulationResult",
    "TaxImpact",
    "ExplanationSection",
    # Tax
    "TaxRules",
    "TaxRulesError",
    "TaxRulesNotFoundError",
    "load_tax_rules",
    "get_available_years",
    "get_latest_year",
    "calculate_tax",
    "calculate_progressive_tax",
    "calculate_maximize_benefit",
    "apply_maximize_benefit",
    "calculate_tax_impact",
    "simulate_scenario",
    "build_explanation",
]
