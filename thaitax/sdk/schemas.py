"""Pydantic schemas for thai-tax data validation.

TaxpayerInput is the only mutable record: the calling session owns it and
edits it field by field. Every result schema is frozen, built once per
calculation and never modified afterwards.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in input files cause clear errors rather than silent ignoring.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

BindingConstraint = Literal["percentage", "absolute", "individual", "combined", "none"]


# =============================================================================
# Taxpayer input
# =============================================================================


class TaxpayerInput(BaseModel):
    """Annual financial inputs for one taxpayer. Amounts in baht."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, allow_inf_nan=False)

    # Income
    annual_salary: float = Field(default=0, ge=0, description="Annual salary")
    bonus: float = Field(default=0, ge=0, description="Bonus paid in the year")
    other_income: float = Field(default=0, ge=0, description="Other employment income")

    # Family status
    has_spouse: bool = Field(default=False, description="Legally married")
    spouse_has_income: bool = Field(default=False, description="Spouse has assessable income")
    number_of_children: int = Field(default=0, ge=0)
    children_born_from_cutoff: int = Field(
        default=0, ge=0,
        description="Children born from the rules cutoff year (2018), included in number_of_children",
    )
    number_of_parents: int = Field(default=0, ge=0, description="Dependent parents (own and spouse's)")
    number_of_disabled_dependents: int = Field(default=0, ge=0)

    # Retirement
    provident_fund: float = Field(default=0, ge=0, description="Provident fund (PVD) contributions")
    government_pension_fund: float = Field(default=0, ge=0, description="GPF contributions")
    rmf: float = Field(default=0, ge=0, description="Retirement mutual fund purchases")
    ssf: float = Field(default=0, ge=0, description="Super savings fund purchases")
    pension_insurance: float = Field(default=0, ge=0, description="Pension life insurance premiums")
    nsf: float = Field(default=0, ge=0, description="National savings fund contributions")

    # Insurance
    life_insurance: float = Field(default=0, ge=0)
    spouse_life_insurance: float = Field(default=0, ge=0)
    health_insurance: float = Field(default=0, ge=0)
    parent_health_insurance: float = Field(default=0, ge=0)
    social_security: float = Field(default=0, ge=0, description="Social security contributions")

    # Other deductions
    home_loan_interest: float = Field(default=0, ge=0)
    easy_e_receipt: float = Field(default=0, ge=0)

    # Donations
    education_donation: float = Field(default=0, ge=0, description="Education/sports/hospital donations")
    general_donation: float = Field(default=0, ge=0)
    political_donation: float = Field(default=0, ge=0)

    # Withholding
    withholding_tax_paid: float = Field(default=0, ge=0, description="Tax withheld at source")

    @model_validator(mode="after")
    def check_children(self) -> "TaxpayerInput":
        if self.children_born_from_cutoff > self.number_of_children:
            raise ValueError(
                f"children_born_from_cutoff ({self.children_born_from_cutoff}) cannot exceed "
                f"number_of_children ({self.number_of_children})"
            )
        return self

    def with_updates(self, **changes) -> "TaxpayerInput":
        """Return a validated copy with the given fields replaced."""
        return TaxpayerInput.model_validate({**self.model_dump(), **changes})


# =============================================================================
# Calculation results
# =============================================================================


class ResultModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ComponentCalculation(ResultModel):
    """One retirement component after its own cap."""

    component_id: str
    component_name: str
    input_amount: float
    effective_amount: float
    individual_cap: Optional[float] = Field(..., description="Component cap actually applied")
    is_at_individual_limit: bool


class BucketCalculation(ResultModel):
    """Normalized summary of a capped deduction bucket."""

    bucket_id: str
    bucket_name: str
    input_amount: float
    effective_deduction: float
    capped_amount: float
    remaining_capacity: float
    monthly_remaining_capacity: float
    binding_constraint: BindingConstraint
    constraint_explanation: str
    is_at_limit: bool
    components: List[ComponentCalculation] = Field(default_factory=list)


class MaxRetirementDeduction(ResultModel):
    """Combined retirement ceiling and which side of it binds."""

    percentage_limit: float
    absolute_limit: float
    max_deduction: float
    binding_constraint: Literal["percentage", "absolute"]
    constraint_explanation: str


class RetirementBucketSummary(ResultModel):
    total_input: float
    total_effective_deduction: float
    percentage_limit: float
    absolute_limit: float
    binding_limit: float
    binding_constraint: Literal["percentage", "absolute"]
    remaining_capacity: float
    monthly_remaining_capacity: float
    constraint_explanation: str
    max_retirement_deduction: float
    components: List[ComponentCalculation]

    def component(self, component_id: str) -> Optional[ComponentCalculation]:
        """Look up a component by id (e.g. 'ssf')."""
        for c in self.components:
            if c.component_id == component_id:
                return c
        return None


class PersonalAllowances(ResultModel):
    self_allowance: float
    spouse: float
    children: float
    parents: float
    disabled: float
    total: float


class OtherDeductionsSummary(ResultModel):
    home_loan_interest: float
    easy_e_receipt: float
    total: float


class DonationLine(ResultModel):
    input: float
    effective: float
    capped: float = Field(..., description="Cap that applied to this donation")


class PoliticalDonationLine(ResultModel):
    input: float
    effective: float


class DonationSummary(ResultModel):
    education: DonationLine
    general: DonationLine
    political: PoliticalDonationLine
    total: float


class DeductionSummary(ResultModel):
    retirement: RetirementBucketSummary
    life_insurance: BucketCalculation
    health_insurance: BucketCalculation
    parent_health_insurance: BucketCalculation
    social_security: BucketCalculation
    other_deductions: OtherDeductionsSummary
    donations: DonationSummary
    total_deductions: float


class BracketCalculation(ResultModel):
    """Tax attributed to one bracket. Brackets not reached carry zeros."""

    min_income: float
    max_income: Optional[float]
    rate: float
    description: str = ""
    taxable_in_bracket: float
    tax_in_bracket: float
    cumulative_tax: float


class ProgressiveTaxResult(ResultModel):
    total_tax: float
    bracket_breakdown: List[BracketCalculation]
    marginal_rate: float


class TaxCalculationResult(ResultModel):
    """Full breakdown produced by calculate_tax()."""

    tax_year: Optional[int] = None

    # Income
    gross_income: float
    employment_expense_deduction: float
    net_income_after_expense: float

    personal_allowances: PersonalAllowances
    deductions: DeductionSummary

    taxable_income: float

    tax_before_credits: float
    bracket_breakdown: List[BracketCalculation]

    # Final amounts
    withholding_tax_paid: float
    final_tax_payable: float
    refund_amount: float
    is_refund: bool

    effective_tax_rate: float
    marginal_tax_rate: float


# =============================================================================
# Optimization and simulation
# =============================================================================


class MaximizeBenefitResult(ResultModel):
    """Suggested flexible retirement allocation. The caller decides whether to apply it."""

    optimal_rmf: float
    optimal_ssf: float
    optimal_pension_insurance: float
    max_deduction_used: float
    tax_saved: float


class SimulationScenario(ResultModel):
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    rmf_amount: float = Field(default=0, ge=0)
    ssf_amount: float = Field(default=0, ge=0)
    pension_insurance_amount: float = Field(default=0, ge=0)


class TaxImpact(ResultModel):
    tax_reduction: float
    additional_refund: float
    tax_difference: float
    refund_difference: float


class BaselineComparison(ResultModel):
    tax_difference: float
    refund_difference: float


class SimulationResult(ResultModel):
    scenario: SimulationScenario
    tax_calculation: TaxCalculationResult
    tax_reduction: float
    additional_refund: float
    compared_to_baseline: BaselineComparison


class ExplanationSection(ResultModel):
    title: str
    content: str
    details: List[str] = Field(default_factory=list)
    highlight: bool = False
