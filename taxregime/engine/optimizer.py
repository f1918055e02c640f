"""
Tax-saving suggestions for unused deduction headroom.
Pure functions. No I/O.

Called by compare_regimes() in tax_engine.py via local import to avoid circular import.
(optimizer.py imports constants from tax_engine — so tax_engine must NOT import this at module level.)
"""
from __future__ import annotations

from typing import Union

from taxregime.engine.formatting import format_inr
from taxregime.engine.schemas import AppliedDeductions, Suggestion
from taxregime.engine.tax_engine import CAP_80C, CAP_80D_BELOW60, CAP_HOME_LOAN_INTEREST
from taxregime.profile.schemas import Deductions

# Flat assumed marginal rate, independent of the taxpayer's own slab.
SUGGESTION_MARGINAL_RATE = 0.30


def suggest_savings(
    deductions: Union[AppliedDeductions, Deductions],
    annual_salary: float,
) -> list[Suggestion]:
    """
    One suggestion per category with unused cap, in fixed order:
    80C, 80D (below-60 cap of ₹25,000 for everyone), 24(b) home loan interest.

    potential_savings = unused cap × 30%. annual_salary is accepted for callers
    that pass the full profile context; the flat-rate estimate does not use it.
    """
    suggestions: list[Suggestion] = []

    # 1. 80C headroom
    unused_80c = CAP_80C - (deductions.section_80c or 0)
    if unused_80c > 0:
        suggestions.append(Suggestion(
            category="section80C",
            title="Maximize Section 80C",
            description=(
                f"You can invest {format_inr(unused_80c)} more in ELSS, PPF, EPF "
                "or other 80C instruments to lower your taxable income."
            ),
            unused_limit=unused_80c,
            potential_savings=unused_80c * SUGGESTION_MARGINAL_RATE,
        ))

    # 2. 80D headroom
    unused_80d = CAP_80D_BELOW60 - (deductions.section_80d or 0)
    if unused_80d > 0:
        suggestions.append(Suggestion(
            category="section80D",
            title="Health Insurance Premium",
            description=(
                f"Health insurance premiums of up to {format_inr(unused_80d)} more "
                "can be claimed under Section 80D."
            ),
            unused_limit=unused_80d,
            potential_savings=unused_80d * SUGGESTION_MARGINAL_RATE,
        ))

    # 3. Section 24(b) home loan interest headroom
    unused_home_loan = CAP_HOME_LOAN_INTEREST - (deductions.home_loan_interest or 0)
    if unused_home_loan > 0:
        suggestions.append(Suggestion(
            category="homeLoan",
            title="Home Loan Interest",
            description=(
                "If you have a home loan, you can claim up to "
                f"{format_inr(CAP_HOME_LOAN_INTEREST)} in interest under Section 24(b)."
            ),
            unused_limit=unused_home_loan,
            potential_savings=unused_home_loan * SUGGESTION_MARGINAL_RATE,
        ))

    return suggestions
