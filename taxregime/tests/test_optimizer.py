"""
Savings suggestion tests.

potential_savings = unused cap × 30%, categories always in the order
80C → 80D → home loan, and only where unused cap > 0.
"""
from __future__ import annotations

import pytest

from taxregime.engine.optimizer import SUGGESTION_MARGINAL_RATE, suggest_savings
from taxregime.engine.schemas import AppliedDeductions
from taxregime.profile.schemas import Deductions


def test_marginal_rate_constant() -> None:
    assert SUGGESTION_MARGINAL_RATE == pytest.approx(0.30)


def test_no_deductions_yields_all_three_in_order() -> None:
    suggestions = suggest_savings(AppliedDeductions(), 800_000)
    assert [s.category for s in suggestions] == ["section80C", "section80D", "homeLoan"]
    # 150000 × 0.3, 25000 × 0.3, 200000 × 0.3
    assert [s.potential_savings for s in suggestions] == pytest.approx([45_000, 7_500, 60_000])
    assert [s.unused_limit for s in suggestions] == [150_000, 25_000, 200_000]


def test_partial_deductions() -> None:
    applied = AppliedDeductions(section_80c=100_000, section_80d=15_000, home_loan_interest=0)
    suggestions = suggest_savings(applied, 800_000)
    assert [(s.category, s.unused_limit) for s in suggestions] == [
        ("section80C", 50_000), ("section80D", 10_000), ("homeLoan", 200_000),
    ]
    assert suggestions[0].potential_savings == pytest.approx(15_000)
    assert "₹50,000" in suggestions[0].description


def test_all_caps_used_yields_nothing() -> None:
    applied = AppliedDeductions(section_80c=150_000, section_80d=25_000, home_loan_interest=200_000)
    assert suggest_savings(applied, 1_500_000) == []


def test_senior_80d_above_non_senior_cap_yields_no_80d_suggestion() -> None:
    """80D headroom is measured against the ₹25K cap only."""
    applied = AppliedDeductions(section_80c=150_000, section_80d=50_000, home_loan_interest=200_000)
    assert suggest_savings(applied, 1_200_000) == []


def test_raw_claims_over_cap_yield_no_suggestion() -> None:
    claims = Deductions(section_80c=999_999, section_80d=0, home_loan_interest=999_999)
    suggestions = suggest_savings(claims, 2_000_000)
    assert [s.category for s in suggestions] == ["section80D"]


def test_home_loan_description_names_statutory_cap() -> None:
    suggestions = suggest_savings(AppliedDeductions(home_loan_interest=50_000), 900_000)
    home_loan = suggestions[-1]
    assert home_loan.category == "homeLoan"
    assert "₹2,00,000" in home_loan.description
    assert home_loan.potential_savings == pytest.approx(45_000)
