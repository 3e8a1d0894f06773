"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to tax parameters like allowance amounts, deduction caps, donation limits
and tax brackets. Rules records are frozen: a loaded year is shared by every
calculation and must never change underneath one.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RulesModel(BaseModel):
    """Base for rules sections: immutable, rejects unknown keys."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


# =============================================================================
# Income
# =============================================================================


class ExpenseDeductionRules(RulesModel):
    """Employment income expense deduction (rate of gross, capped)."""

    rate: float = Field(..., ge=0, le=1, description="Deduction rate as decimal")
    max_amount: float = Field(..., ge=0, description="Maximum deduction")
    description: str = ""


class IncomeRules(RulesModel):
    employment_expense_deduction: ExpenseDeductionRules


# =============================================================================
# Personal allowances
# =============================================================================


class AllowanceItem(RulesModel):
    """Flat allowance (self, spouse) or per-person allowance (disabled care)."""

    amount: Optional[float] = Field(default=None, ge=0)
    amount_per_person: Optional[float] = Field(default=None, ge=0)
    description: str = ""
    conditions: List[str] = Field(default_factory=list)


class ChildAllowance(RulesModel):
    amount_per_child: float = Field(..., ge=0)
    additional_from_cutoff: float = Field(
        ..., ge=0, description="Extra amount per child born from cutoff_year"
    )
    cutoff_year: int = Field(default=2018, description="Gregorian birth year cutoff")
    max_children: Optional[int] = Field(default=None, ge=0)
    description: str = ""


class ParentCareAllowance(RulesModel):
    amount_per_parent: float = Field(..., ge=0)
    max_parents: int = Field(..., ge=0)
    description: str = ""
    conditions: List[str] = Field(default_factory=list)


class PersonalAllowanceRules(RulesModel):
    self_allowance: AllowanceItem = Field(..., alias="self")
    spouse: AllowanceItem
    child: ChildAllowance
    parent_care: ParentCareAllowance
    disabled_care: AllowanceItem


# =============================================================================
# Deduction buckets
# =============================================================================


class PercentageLimit(RulesModel):
    rate: float = Field(..., ge=0, le=1)
    base_description: str = ""


class AbsoluteLimit(RulesModel):
    amount: float = Field(..., ge=0)
    description: str = ""


class RetirementComponent(RulesModel):
    """One retirement instrument inside the combined retirement bucket.

    Either cap may be null. Calculators substitute the statutory default for
    a missing cap where the instrument has one (see taxes.buckets).
    """

    id: str
    name: str
    name_short: str = ""
    individual_cap: Optional[float] = Field(default=None, ge=0)
    percentage_cap: Optional[float] = Field(
        default=None, ge=0, le=1,
        description="Cap as a share of salary (PVD/GPF) or assessable income (others)",
    )
    description: str = ""


class RetirementComponents(RulesModel):
    provident_fund: RetirementComponent
    government_pension_fund: RetirementComponent
    rmf: RetirementComponent
    ssf: RetirementComponent
    pension_insurance: RetirementComponent
    nsf: RetirementComponent


class RetirementBucketRules(RulesModel):
    description: str = ""
    percentage_limit: PercentageLimit
    absolute_limit: AbsoluteLimit
    components: RetirementComponents


class InsuranceBucketRules(RulesModel):
    id: str
    name: str
    description: str = ""
    absolute_limit: float = Field(..., ge=0)
    spouse_limit: Optional[float] = Field(default=None, ge=0)
    spouse_condition: Optional[str] = None
    notes: Optional[str] = None
    conditions: List[str] = Field(default_factory=list)


class CombinedLimit(RulesModel):
    enabled: bool = True
    combined_limit: float = Field(..., ge=0)
    description: str = ""


class HealthInsuranceBucketRules(InsuranceBucketRules):
    combined_with_life_insurance: Optional[CombinedLimit] = None


class DeductionBuckets(RulesModel):
    retirement: RetirementBucketRules
    life_insurance: InsuranceBucketRules
    health_insurance: HealthInsuranceBucketRules
    parent_health_insurance: InsuranceBucketRules
    social_security: InsuranceBucketRules


# =============================================================================
# Other deductions and donations
# =============================================================================


class OtherDeductionItem(RulesModel):
    id: str
    name: str
    absolute_limit: float = Field(..., ge=0)
    description: str = ""
    conditions: List[str] = Field(default_factory=list)
    temporary_measure: bool = False


class OtherDeductions(RulesModel):
    home_loan_interest: OtherDeductionItem
    easy_e_receipt: OtherDeductionItem


class DonationItem(RulesModel):
    id: str
    name: str
    multiplier: float = Field(default=1, ge=0)
    max_percent_of_net_income: float = Field(..., ge=0, le=1)
    description: str = ""


class PoliticalDonationItem(RulesModel):
    id: str
    name: str
    absolute_limit: float = Field(..., ge=0)
    description: str = ""


class DonationRules(RulesModel):
    education: DonationItem
    general: DonationItem
    political_party: PoliticalDonationItem


# =============================================================================
# Brackets and top level
# =============================================================================


class TaxBracket(RulesModel):
    """Single tax bracket entry. max_income None means unbounded."""

    min_income: float = Field(..., ge=0, description="Lower bound (exclusive of tax)")
    max_income: Optional[float] = Field(default=None, description="Upper bound, None if top bracket")
    rate: float = Field(..., ge=0, le=1, description="Tax rate as decimal")
    description: str = ""


class WithholdingTaxInfo(RulesModel):
    description: str = ""
    calculation_method: str = ""
    notes: str = ""


class TaxRules(RulesModel):
    """Complete tax rules for a year."""

    tax_year: int = Field(..., description="Buddhist-era tax year, e.g. 2567")
    year_label: str = ""
    effective_from: Optional[str] = None
    effective_to: Optional[str] = None
    income_rules: IncomeRules
    personal_allowances: PersonalAllowanceRules
    deduction_buckets: DeductionBuckets
    other_deductions: OtherDeductions
    donations: DonationRules
    tax_brackets: List[TaxBracket] = Field(..., min_length=1)
    withholding_tax: Optional[WithholdingTaxInfo] = None

    @model_validator(mode="after")
    def check_brackets(self) -> "TaxRules":
        """Brackets must start at 0, be contiguous and ascending, and end unbounded."""
        errors = []
        brackets = self.tax_brackets

        if brackets[0].min_income != 0:
            errors.append(f"first bracket must start at 0, got {brackets[0].min_income}")

        for i, bracket in enumerate(brackets):
            is_last = i == len(brackets) - 1
            if bracket.max_income is None:
                if not is_last:
                    errors.append(f"bracket {i} is unbounded but is not the last bracket")
                continue
            if is_last:
                errors.append(f"last bracket must have max_income null, got {bracket.max_income}")
            if bracket.max_income <= bracket.min_income:
                errors.append(
                    f"bracket {i} max_income ({bracket.max_income}) must exceed "
                    f"min_income ({bracket.min_income})"
                )
            if not is_last and brackets[i + 1].min_income != bracket.max_income:
                errors.append(
                    f"bracket {i + 1} min_income ({brackets[i + 1].min_income}) != "
                    f"bracket {i} max_income ({bracket.max_income})"
                )

        if errors:
            raise ValueError("; ".join(errors))

        return self
