"""Unit tests for capped deduction buckets.

Retirement: per-component caps, then the combined ceiling
min(30% of income, 500,000). Insurance: own caps, with health insurance
also limited by the 100,000 life+health ceiling.
"""

import pytest

from thaitax.sdk import TaxpayerInput
from thaitax.sdk.taxes import (
    calculate_health_insurance_bucket,
    calculate_life_insurance_bucket,
    calculate_max_retirement_deduction,
    calculate_other_deductions,
    calculate_parent_health_insurance_bucket,
    calculate_retirement_bucket,
    calculate_social_security_bucket,
    retirement_component_caps,
)
from thaitax.sdk.taxes.buckets import DEFAULT_SPOUSE_LIFE_CAP


class TestMaxRetirementDeduction:

    def test_percentage_binds_for_moderate_income(self, rules):
        result = calculate_max_retirement_deduction(1_000_000, rules)

        assert result.max_deduction == pytest.approx(300_000)
        assert result.binding_constraint == "percentage"
        assert result.absolute_limit == 500_000

    def test_absolute_binds_for_high_income(self, rules):
        result = calculate_max_retirement_deduction(3_000_000, rules)

        assert result.max_deduction == 500_000
        assert result.binding_constraint == "absolute"
        assert result.percentage_limit == pytest.approx(900_000)

    def test_zero_income(self, rules):
        result = calculate_max_retirement_deduction(0, rules)

        assert result.max_deduction == 0
        assert result.binding_constraint == "percentage"

    @pytest.mark.parametrize("income,expected,binding", [
        (600_000, 180_000, "percentage"),
        (2_000_000, 500_000, "absolute"),
    ])
    def test_reference_incomes(self, rules, income, expected, binding):
        result = calculate_max_retirement_deduction(income, rules)

        assert result.max_deduction == pytest.approx(expected)
        assert result.binding_constraint == binding


class TestComponentCaps:

    def test_caps_for_one_million_salary(self, rules):
        caps = retirement_component_caps(TaxpayerInput(annual_salary=1_000_000), 1_000_000, rules)

        assert caps["provident_fund"] == pytest.approx(150_000)
        assert caps["government_pension_fund"] == pytest.approx(150_000)
        assert caps["rmf"] == pytest.approx(300_000)
        assert caps["ssf"] == 200_000
        assert caps["pension_insurance"] == pytest.approx(150_000)
        assert caps["nsf"] == 30_000

    def test_provident_fund_uses_salary_only(self, rules):
        taxpayer = TaxpayerInput(annual_salary=400_000, bonus=600_000)

        caps = retirement_component_caps(taxpayer, 1_000_000, rules)

        assert caps["provident_fund"] == pytest.approx(60_000)
        assert caps["rmf"] == pytest.approx(300_000)


class TestRetirementBucket:

    def test_component_over_own_cap(self, rules):
        taxpayer = TaxpayerInput(annual_salary=1_000_000, ssf=300_000)

        bucket = calculate_retirement_bucket(taxpayer, 1_000_000, rules)
        ssf = bucket.component("ssf")

        assert ssf.effective_amount == 200_000
        assert ssf.is_at_individual_limit is True
        assert bucket.total_effective_deduction == 200_000
        assert bucket.remaining_capacity == pytest.approx(100_000)

    def test_combined_ceiling_clamps_total(self, rules):
        taxpayer = TaxpayerInput(
            annual_salary=1_000_000,
            provident_fund=150_000,
            ssf=200_000,
            rmf=100_000,
        )

        bucket = calculate_retirement_bucket(taxpayer, 1_000_000, rules)

        assert bucket.total_input == 450_000
        assert bucket.total_effective_deduction == pytest.approx(300_000)
        assert bucket.remaining_capacity == 0
        assert bucket.monthly_remaining_capacity == 0
        # Component amounts are only capped individually
        assert sum(c.effective_amount for c in bucket.components) == pytest.approx(450_000)

    def test_no_contributions(self, rules):
        bucket = calculate_retirement_bucket(TaxpayerInput(annual_salary=600_000), 600_000, rules)

        assert bucket.total_effective_deduction == 0
        assert bucket.remaining_capacity == pytest.approx(180_000)
        assert bucket.monthly_remaining_capacity == pytest.approx(15_000)
        assert [c.component_id for c in bucket.components] == [
            "pvd", "gpf", "rmf", "ssf", "pension_insurance", "nsf",
        ]

    def test_unknown_component_lookup(self, rules):
        bucket = calculate_retirement_bucket(TaxpayerInput(), 0, rules)

        assert bucket.component("unknown") is None


class TestLifeInsurance:

    def test_own_premiums_capped(self, rules):
        bucket = calculate_life_insurance_bucket(TaxpayerInput(life_insurance=150_000), rules)

        assert bucket.effective_deduction == 100_000
        assert bucket.is_at_limit is True
        assert bucket.binding_constraint == "absolute"

    def test_spouse_premiums_when_spouse_has_no_income(self, rules):
        taxpayer = TaxpayerInput(
            has_spouse=True,
            life_insurance=50_000,
            spouse_life_insurance=20_000,
        )

        bucket = calculate_life_insurance_bucket(taxpayer, rules)

        assert bucket.effective_deduction == 60_000
        assert bucket.capped_amount == 110_000
        assert bucket.remaining_capacity == 50_000

    def test_spouse_premiums_ignored_when_spouse_has_income(self, rules):
        taxpayer = TaxpayerInput(
            has_spouse=True,
            spouse_has_income=True,
            life_insurance=50_000,
            spouse_life_insurance=20_000,
        )

        bucket = calculate_life_insurance_bucket(taxpayer, rules)

        assert bucket.effective_deduction == 50_000
        assert bucket.binding_constraint == "none"

    def test_spouse_limit_defaults_when_rules_leave_it_null(self, rules):
        life_rules = rules.deduction_buckets.life_insurance.model_copy(update={"spouse_limit": None})
        buckets = rules.deduction_buckets.model_copy(update={"life_insurance": life_rules})
        no_spouse_limit = rules.model_copy(update={"deduction_buckets": buckets})
        taxpayer = TaxpayerInput(has_spouse=True, spouse_life_insurance=25_000)

        bucket = calculate_life_insurance_bucket(taxpayer, no_spouse_limit)

        assert bucket.effective_deduction == DEFAULT_SPOUSE_LIFE_CAP
        assert bucket.capped_amount == 100_000 + DEFAULT_SPOUSE_LIFE_CAP


class TestHealthInsurance:

    def test_own_cap(self, rules):
        taxpayer = TaxpayerInput(health_insurance=30_000)

        bucket = calculate_health_insurance_bucket(taxpayer, 0, rules)

        assert bucket.effective_deduction == 25_000
        assert bucket.binding_constraint == "absolute"
        assert bucket.is_at_limit is True

    def test_combined_ceiling_with_life_insurance(self, rules):
        taxpayer = TaxpayerInput(life_insurance=90_000, health_insurance=25_000)
        life = calculate_life_insurance_bucket(taxpayer, rules)

        bucket = calculate_health_insurance_bucket(taxpayer, life.effective_deduction, rules)

        assert bucket.effective_deduction == 10_000
        assert bucket.binding_constraint == "combined"
        assert bucket.is_at_limit is True

    def test_life_insurance_at_combined_ceiling(self, rules):
        taxpayer = TaxpayerInput(life_insurance=100_000, health_insurance=25_000)

        bucket = calculate_health_insurance_bucket(taxpayer, 100_000, rules)

        assert bucket.effective_deduction == 0
        assert bucket.binding_constraint == "combined"

    def test_under_every_limit(self, rules):
        taxpayer = TaxpayerInput(life_insurance=10_000, health_insurance=5_000)

        bucket = calculate_health_insurance_bucket(taxpayer, 10_000, rules)

        assert bucket.effective_deduction == 5_000
        assert bucket.binding_constraint == "none"
        assert bucket.is_at_limit is False
        assert bucket.remaining_capacity == 20_000


class TestSingleCapBuckets:

    def test_parent_health_insurance(self, rules):
        bucket = calculate_parent_health_insurance_bucket(
            TaxpayerInput(parent_health_insurance=20_000), rules
        )

        assert bucket.effective_deduction == 15_000
        assert bucket.is_at_limit is True

    def test_social_security(self, rules):
        bucket = calculate_social_security_bucket(TaxpayerInput(social_security=6_000), rules)

        assert bucket.effective_deduction == 6_000
        assert bucket.remaining_capacity == 3_000
        assert bucket.monthly_remaining_capacity == pytest.approx(250)
        assert bucket.is_at_limit is False


class TestOtherDeductions:

    def test_each_capped_independently(self, rules):
        taxpayer = TaxpayerInput(home_loan_interest=120_000, easy_e_receipt=30_000)

        other = calculate_other_deductions(taxpayer, rules)

        assert other.home_loan_interest == 100_000
        assert other.easy_e_receipt == 30_000
        assert other.total == 130_000
