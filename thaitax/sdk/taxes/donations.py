"""Donation deductions.

Donations are capped as a share of net income after every other deduction,
so they are calculated last. The caps are layered in a fixed order:

1. Education donation: input x multiplier, capped at edu% of net income
2. General donation: capped at general% of what remains after (1)
3. Political party donation: flat cap, independent of (1) and (2)
"""

from ..schemas import DonationLine, DonationSummary, PoliticalDonationLine, TaxpayerInput
from .schemas import TaxRules


def calculate_donations(
    taxpayer: TaxpayerInput,
    net_income_before_donations: float,
    rules: TaxRules,
) -> DonationSummary:
    """Calculate effective donation deductions.

    Args:
        net_income_before_donations: Net income after expense minus all
            non-donation deductions. Negative values are treated as 0.
    """
    donations = rules.donations
    safe_net_income = max(0, net_income_before_donations)

    edu_multiplied = taxpayer.education_donation * donations.education.multiplier
    edu_cap = safe_net_income * donations.education.max_percent_of_net_income
    edu_effective = min(edu_multiplied, edu_cap)

    remaining_after_edu = max(0, safe_net_income - edu_effective)
    general_cap = remaining_after_edu * donations.general.max_percent_of_net_income
    general_effective = min(taxpayer.general_donation, general_cap)

    political_effective = min(taxpayer.political_donation, donations.political_party.absolute_limit)

    return DonationSummary(
        education=DonationLine(
            input=taxpayer.education_donation,
            effective=edu_effective,
            capped=edu_cap,
        ),
        general=DonationLine(
            input=taxpayer.general_donation,
            effective=general_effective,
            capped=general_cap,
        ),
        political=PoliticalDonationLine(
            input=taxpayer.political_donation,
            effective=political_effective,
        ),
        total=edu_effective + general_effective + political_effective,
    )
