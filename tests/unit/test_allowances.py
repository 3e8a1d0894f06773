"""Unit tests for personal and family allowances."""

import pytest
from pydantic import ValidationError

from thaitax.sdk import TaxpayerInput
from thaitax.sdk.taxes import calculate_personal_allowances


class TestPersonalAllowances:

    def test_single_no_dependents(self, rules):
        allowances = calculate_personal_allowances(TaxpayerInput(), rules)

        assert allowances.self_allowance == 60_000
        assert allowances.spouse == 0
        assert allowances.children == 0
        assert allowances.total == 60_000

    def test_full_family(self, rules):
        taxpayer = TaxpayerInput(
            has_spouse=True,
            number_of_children=3,
            children_born_from_cutoff=2,
            number_of_parents=2,
            number_of_disabled_dependents=1,
        )

        allowances = calculate_personal_allowances(taxpayer, rules)

        assert allowances.spouse == 60_000
        # 1 x 30,000 + 2 x (30,000 + 30,000)
        assert allowances.children == 150_000
        assert allowances.parents == 60_000
        assert allowances.disabled == 60_000
        assert allowances.total == 60_000 + 60_000 + 150_000 + 60_000 + 60_000

    def test_spouse_with_income_gets_nothing(self, rules):
        taxpayer = TaxpayerInput(has_spouse=True, spouse_has_income=True)

        assert calculate_personal_allowances(taxpayer, rules).spouse == 0

    def test_spouse_income_flag_without_spouse(self, rules):
        taxpayer = TaxpayerInput(has_spouse=False, spouse_has_income=False)

        assert calculate_personal_allowances(taxpayer, rules).spouse == 0

    def test_parents_capped_at_four(self, rules):
        taxpayer = TaxpayerInput(number_of_parents=6)

        assert calculate_personal_allowances(taxpayer, rules).parents == 120_000


class TestChildCountValidation:

    def test_from_cutoff_cannot_exceed_children(self):
        with pytest.raises(ValidationError, match="children_born_from_cutoff"):
            TaxpayerInput(number_of_children=1, children_born_from_cutoff=2)

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            TaxpayerInput(number_of_parents=-1)
