"""Capped deduction buckets: retirement, insurance, other deductions.

Each calculator is a pure function of the taxpayer input and the rules and
returns a normalized summary (input, effective amount, cap, remaining
capacity, binding constraint). Where one bucket depends on another the
dependency is an explicit argument: health insurance takes the already
computed life insurance deduction.
"""

from typing import Optional

from ..schemas import (
    BucketCalculation,
    ComponentCalculation,
    MaxRetirementDeduction,
    OtherDeductionsSummary,
    RetirementBucketSummary,
    TaxpayerInput,
)
from .schemas import InsuranceBucketRules, RetirementComponent, TaxRules

# Statutory defaults used when a rules document leaves a component cap null
DEFAULT_SALARY_PCT_CAP = 0.15       # PVD, GPF: share of salary
DEFAULT_RMF_PCT_CAP = 0.30
DEFAULT_SSF_PCT_CAP = 0.30
DEFAULT_SSF_CAP = 200_000
DEFAULT_PENSION_PCT_CAP = 0.15
DEFAULT_PENSION_CAP = 200_000
DEFAULT_NSF_CAP = 30_000
DEFAULT_SPOUSE_LIFE_CAP = 10_000


def _baht(amount: float) -> str:
    return f"{round(amount):,}"


def _monthly(amount: float) -> float:
    return amount / 12


# =============================================================================
# Retirement
# =============================================================================


def calculate_max_retirement_deduction(eligible_income: float, rules: TaxRules) -> MaxRetirementDeduction:
    """Combined retirement ceiling: min(eligible income x rate, absolute limit).

    A tie between the two sides reports 'percentage'.
    """
    retirement = rules.deduction_buckets.retirement
    rate = retirement.percentage_limit.rate

    percentage_limit = eligible_income * rate
    absolute_limit = retirement.absolute_limit.amount
    max_deduction = min(percentage_limit, absolute_limit)

    if percentage_limit <= absolute_limit:
        binding = "percentage"
        explanation = (
            f"Limited to {rate * 100:.0f}% of income ({_baht(percentage_limit)} baht) "
            f"because it is below the {_baht(absolute_limit)} baht ceiling"
        )
    else:
        binding = "absolute"
        explanation = (
            f"Limited to {_baht(absolute_limit)} baht because it is below "
            f"{rate * 100:.0f}% of income ({_baht(percentage_limit)} baht)"
        )

    return MaxRetirementDeduction(
        percentage_limit=percentage_limit,
        absolute_limit=absolute_limit,
        max_deduction=max_deduction,
        binding_constraint=binding,
        constraint_explanation=explanation,
    )


def _percentage_and_individual_cap(
    component: RetirementComponent,
    base: float,
    default_pct: float,
    default_cap: Optional[float],
) -> float:
    """min(base x pct, individual cap); no individual cap when neither rules nor default give one."""
    cap = base * (component.percentage_cap or default_pct)
    individual = component.individual_cap or default_cap
    if individual:
        cap = min(cap, individual)
    return cap


def retirement_component_caps(taxpayer: TaxpayerInput, eligible_income: float, rules: TaxRules) -> dict:
    """Per-component caps keyed by TaxpayerInput field name.

    PVD and GPF are capped on salary alone; RMF, SSF and pension insurance on
    eligible income; NSF has only an absolute cap.
    """
    components = rules.deduction_buckets.retirement.components
    salary = taxpayer.annual_salary

    return {
        "provident_fund": salary * (components.provident_fund.percentage_cap or DEFAULT_SALARY_PCT_CAP),
        "government_pension_fund": salary * (
            components.government_pension_fund.percentage_cap or DEFAULT_SALARY_PCT_CAP
        ),
        "rmf": _percentage_and_individual_cap(components.rmf, eligible_income, DEFAULT_RMF_PCT_CAP, None),
        "ssf": _percentage_and_individual_cap(
            components.ssf, eligible_income, DEFAULT_SSF_PCT_CAP, DEFAULT_SSF_CAP
        ),
        "pension_insurance": _percentage_and_individual_cap(
            components.pension_insurance, eligible_income, DEFAULT_PENSION_PCT_CAP, DEFAULT_PENSION_CAP
        ),
        "nsf": components.nsf.individual_cap or DEFAULT_NSF_CAP,
    }


def calculate_retirement_bucket(
    taxpayer: TaxpayerInput,
    eligible_income: float,
    rules: TaxRules,
) -> RetirementBucketSummary:
    """Apply per-component caps, then clamp the sum to the combined ceiling.

    The combined clamp truncates the total only. It does not decide which
    component loses capacity, so component effective amounts can sum to more
    than total_effective_deduction.
    """
    components_rules = rules.deduction_buckets.retirement.components
    max_calc = calculate_max_retirement_deduction(eligible_income, rules)
    caps = retirement_component_caps(taxpayer, eligible_income, rules)

    components = []
    for field, cap in caps.items():
        component = getattr(components_rules, field)
        amount = getattr(taxpayer, field)
        components.append(ComponentCalculation(
            component_id=component.id,
            component_name=component.name,
            input_amount=amount,
            effective_amount=min(amount, cap),
            individual_cap=cap,
            is_at_individual_limit=amount >= cap,
        ))

    total_component_effective = sum(c.effective_amount for c in components)
    total_effective = min(total_component_effective, max_calc.max_deduction)
    remaining = max(0, max_calc.max_deduction - total_effective)

    return RetirementBucketSummary(
        total_input=sum(c.input_amount for c in components),
        total_effective_deduction=total_effective,
        percentage_limit=max_calc.percentage_limit,
        absolute_limit=max_calc.absolute_limit,
        binding_limit=max_calc.max_deduction,
        binding_constraint=max_calc.binding_constraint,
        remaining_capacity=remaining,
        monthly_remaining_capacity=_monthly(remaining),
        constraint_explanation=max_calc.constraint_explanation,
        max_retirement_deduction=max_calc.max_deduction,
        components=components,
    )


# =============================================================================
# Insurance
# =============================================================================


def _spouse_eligible(taxpayer: TaxpayerInput) -> bool:
    return taxpayer.has_spouse and not taxpayer.spouse_has_income


def calculate_life_insurance_bucket(taxpayer: TaxpayerInput, rules: TaxRules) -> BucketCalculation:
    """Own premiums up to the self cap, plus spouse premiums when the spouse has no income."""
    life = rules.deduction_buckets.life_insurance
    spouse_limit = life.spouse_limit if life.spouse_limit is not None else DEFAULT_SPOUSE_LIFE_CAP

    self_effective = min(taxpayer.life_insurance, life.absolute_limit)
    if _spouse_eligible(taxpayer):
        spouse_effective = min(taxpayer.spouse_life_insurance, spouse_limit)
        total_cap = life.absolute_limit + spouse_limit
        explanation = (
            f"Own life insurance up to {_baht(life.absolute_limit)} baht "
            f"and spouse up to {_baht(spouse_limit)} baht"
        )
    else:
        spouse_effective = 0
        total_cap = life.absolute_limit
        explanation = f"Own life insurance up to {_baht(life.absolute_limit)} baht"

    total_effective = self_effective + spouse_effective
    remaining = max(0, total_cap - total_effective)
    at_limit = total_effective >= total_cap

    return BucketCalculation(
        bucket_id=life.id,
        bucket_name=life.name,
        input_amount=taxpayer.life_insurance + taxpayer.spouse_life_insurance,
        effective_deduction=total_effective,
        capped_amount=total_cap,
        remaining_capacity=remaining,
        monthly_remaining_capacity=_monthly(remaining),
        binding_constraint="absolute" if at_limit else "none",
        constraint_explanation=explanation,
        is_at_limit=at_limit,
    )


def calculate_health_insurance_bucket(
    taxpayer: TaxpayerInput,
    life_insurance_effective: float,
    rules: TaxRules,
) -> BucketCalculation:
    """Own cap first, then the life+health combined ceiling.

    Args:
        life_insurance_effective: effective_deduction of the life insurance bucket
    """
    health = rules.deduction_buckets.health_insurance
    life = rules.deduction_buckets.life_insurance
    health_cap = health.absolute_limit

    own_capped = min(taxpayer.health_insurance, health_cap)
    effective = own_capped
    explanation = f"Health insurance up to {_baht(health_cap)} baht"

    combined = health.combined_with_life_insurance
    if combined is not None and combined.enabled:
        # Only the self portion of life insurance shares the combined ceiling
        life_used = min(life_insurance_effective, life.absolute_limit)
        remaining_combined = max(0, combined.combined_limit - life_used)
        effective = min(own_capped, remaining_combined)
        explanation += f", and together with life insurance up to {_baht(combined.combined_limit)} baht"

    if effective < own_capped:
        binding = "combined"
    elif effective >= health_cap:
        binding = "absolute"
    else:
        binding = "none"

    remaining = max(0, health_cap - effective)

    return BucketCalculation(
        bucket_id=health.id,
        bucket_name=health.name,
        input_amount=taxpayer.health_insurance,
        effective_deduction=effective,
        capped_amount=health_cap,
        remaining_capacity=remaining,
        monthly_remaining_capacity=_monthly(remaining),
        binding_constraint=binding,
        constraint_explanation=explanation,
        is_at_limit=binding != "none",
    )


def _single_cap_bucket(amount: float, bucket: InsuranceBucketRules, explanation: str) -> BucketCalculation:
    cap = bucket.absolute_limit
    effective = min(amount, cap)
    remaining = max(0, cap - effective)
    at_limit = effective >= cap

    return BucketCalculation(
        bucket_id=bucket.id,
        bucket_name=bucket.name,
        input_amount=amount,
        effective_deduction=effective,
        capped_amount=cap,
        remaining_capacity=remaining,
        monthly_remaining_capacity=_monthly(remaining),
        binding_constraint="absolute" if at_limit else "none",
        constraint_explanation=explanation,
        is_at_limit=at_limit,
    )


def calculate_parent_health_insurance_bucket(taxpayer: TaxpayerInput, rules: TaxRules) -> BucketCalculation:
    bucket = rules.deduction_buckets.parent_health_insurance
    return _single_cap_bucket(
        taxpayer.parent_health_insurance,
        bucket,
        f"Parent health insurance up to {_baht(bucket.absolute_limit)} baht",
    )


def calculate_social_security_bucket(taxpayer: TaxpayerInput, rules: TaxRules) -> BucketCalculation:
    bucket = rules.deduction_buckets.social_security
    return _single_cap_bucket(
        taxpayer.social_security,
        bucket,
        f"Social security contributions up to {_baht(bucket.absolute_limit)} baht "
        f"({_baht(_monthly(bucket.absolute_limit))} baht/month)",
    )


# =============================================================================
# Other deductions
# =============================================================================


def calculate_other_deductions(taxpayer: TaxpayerInput, rules: TaxRules) -> OtherDeductionsSummary:
    """Home loan interest and Easy E-Receipt, each capped independently."""
    other = rules.other_deductions
    home_loan_interest = min(taxpayer.home_loan_interest, other.home_loan_interest.absolute_limit)
    easy_e_receipt = min(taxpayer.easy_e_receipt, other.easy_e_receipt.absolute_limit)

    return OtherDeductionsSummary(
        home_loan_interest=home_loan_interest,
        easy_e_receipt=easy_e_receipt,
        total=home_loan_interest + easy_e_receipt,
    )
