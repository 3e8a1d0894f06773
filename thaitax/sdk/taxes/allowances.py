"""Personal and family allowances."""

from ..schemas import PersonalAllowances, TaxpayerInput
from .schemas import TaxRules


def calculate_personal_allowances(taxpayer: TaxpayerInput, rules: TaxRules) -> PersonalAllowances:
    """Calculate self, spouse, child, parent and disabled-dependent allowances.

    Counts are clamped rather than rejected: parents beyond max_parents earn
    nothing extra, and a from-cutoff count above the child count leaves no
    before-cutoff children.
    """
    allowances = rules.personal_allowances

    self_allowance = allowances.self_allowance.amount or 0

    # Spouse allowance only if spouse has no income
    if taxpayer.has_spouse and not taxpayer.spouse_has_income:
        spouse = allowances.spouse.amount or 0
    else:
        spouse = 0

    child = allowances.child
    before_cutoff = max(0, taxpayer.number_of_children - taxpayer.children_born_from_cutoff)
    from_cutoff = taxpayer.children_born_from_cutoff
    children = (
        before_cutoff * child.amount_per_child
        + from_cutoff * (child.amount_per_child + child.additional_from_cutoff)
    )

    parent_care = allowances.parent_care
    parents = min(taxpayer.number_of_parents, parent_care.max_parents) * parent_care.amount_per_parent

    disabled = taxpayer.number_of_disabled_dependents * (allowances.disabled_care.amount_per_person or 0)

    return PersonalAllowances(
        self_allowance=self_allowance,
        spouse=spouse,
        children=children,
        parents=parents,
        disabled=disabled,
        total=self_allowance + spouse + children + parents + disabled,
    )
