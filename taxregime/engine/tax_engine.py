"""
Income-tax regime engine — FY 2023-24 slabs, FY 2025-26 standard deductions.
Pure Python, deterministic, no I/O. Same profile in → same TaxResult out.

Pipeline (compute_tax):
  select_slab_table → calculate_hra_exemption / aggregate_deductions
  → taxable income → calculate_slab_tax → apply_rebate_and_cess → TaxResult

Regime differences (standard deduction, which deductions apply, 87A rebate)
live in REGIME_POLICIES only. Nothing else in this module branches on regime.

All HRA inputs (basic salary, HRA received, rent paid) are ANNUAL figures.
No monthly-to-annual conversion happens here.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from taxregime.engine.formatting import format_indian_number, format_inr
from taxregime.engine.schemas import (
    AppliedDeductions,
    RegimeComparison,
    RegimePolicy,
    SlabBracket,
    SlabBreakdownEntry,
    SlabTable,
    TaxResult,
)
from taxregime.profile.schemas import (
    AgeGroup,
    Deductions,
    HRADetails,
    Location,
    Regime,
    TaxpayerProfile,
)
from taxregime.profile.validator import load_profile, parse_age_group, parse_regime

logger = logging.getLogger(__name__)

# ===========================================================================
# STANDARD DEDUCTION
# ===========================================================================

OLD_STD_DEDUCTION        = 50_000
NEW_STD_DEDUCTION        = 75_000

# ===========================================================================
# DEDUCTION CAP CONSTANTS (old regime only)
# ===========================================================================

CAP_80C                  = 150_000
CAP_80D_BELOW60          = 25_000    # age_group == "below60"
CAP_80D_SENIOR           = 50_000    # age_group in ("60-80", "above80")
CAP_HOME_LOAN_INTEREST   = 200_000   # Section 24(b)

# ===========================================================================
# HRA EXEMPTION (Section 10(13A), Rule 2A)
# ===========================================================================

HRA_METRO_RATE           = 0.50
HRA_NON_METRO_RATE       = 0.40
HRA_RENT_BASIC_OFFSET    = 0.10      # rent counts only above 10% of basic

# ===========================================================================
# 87A REBATE AND CESS
# ===========================================================================

OLD_87A_MAX_REBATE       = 12_500
OLD_87A_TAXABLE_CEILING  = 500_000
NEW_87A_TAXABLE_CEILING  = 700_000   # full rebate, no maximum

CESS_RATE                = 0.04

# ---------------------------------------------------------------------------
# 87A Rebate Mechanics
# ---------------------------------------------------------------------------
# OLD REGIME:
#   - taxable_income <= 5,00,000: rebate = min(slab_tax, 12,500)
#   - taxable_income  > 5,00,000: NO rebate at all (hard cliff, no phase-out)
#
# NEW REGIME:
#   - taxable_income <= 7,00,000: rebate = slab_tax (liability zeroed)
#   - taxable_income  > 7,00,000: NO rebate at all
# ---------------------------------------------------------------------------

REGIME_POLICIES: dict[Regime, RegimePolicy] = {
    Regime.old: RegimePolicy(
        regime=Regime.old,
        standard_deduction=OLD_STD_DEDUCTION,
        allows_deductions=True,
        rebate_ceiling=OLD_87A_TAXABLE_CEILING,
        rebate_max=OLD_87A_MAX_REBATE,
    ),
    Regime.new: RegimePolicy(
        regime=Regime.new,
        standard_deduction=NEW_STD_DEDUCTION,
        allows_deductions=False,
        rebate_ceiling=NEW_87A_TAXABLE_CEILING,
        rebate_max=None,
    ),
}

# ===========================================================================
# SLAB TABLES — (lower, upper, rate %), upper=None is unbounded
# ===========================================================================


def _table(*brackets: tuple[float, Optional[float], float]) -> SlabTable:
    return SlabTable(
        brackets=tuple(SlabBracket(lower=lo, upper=hi, rate=rate) for lo, hi, rate in brackets)
    )


OLD_SLABS_BELOW60 = _table(
    (0,         250_000,   0),    # 0–2.5L: 0%
    (250_000,   500_000,   5),    # 2.5–5L: 5%
    (500_000,   1_000_000, 20),   # 5–10L: 20%
    (1_000_000, None,      30),   # >10L: 30%
)

OLD_SLABS_SENIOR = _table(
    (0,         300_000,   0),    # 0–3L: 0%
    (300_000,   500_000,   5),    # 3–5L: 5%
    (500_000,   1_000_000, 20),
    (1_000_000, None,      30),
)

# Super senior: no 5% bracket — 0% jumps straight to 20% at 5L.
OLD_SLABS_SUPER_SENIOR = _table(
    (0,         500_000,   0),
    (500_000,   1_000_000, 20),
    (1_000_000, None,      30),
)

# Identical for every age group.
NEW_SLABS = _table(
    (0,         300_000,   0),    # 0–3L: 0%
    (300_000,   600_000,   5),    # 3–6L: 5%
    (600_000,   900_000,   10),   # 6–9L: 10%
    (900_000,   1_200_000, 15),   # 9–12L: 15%
    (1_200_000, 1_500_000, 20),   # 12–15L: 20%
    (1_500_000, None,      30),   # >15L: 30%
)

SLAB_TABLES: dict[tuple[AgeGroup, Regime], SlabTable] = {
    (AgeGroup.below60, Regime.old):  OLD_SLABS_BELOW60,
    (AgeGroup.sixty_80, Regime.old): OLD_SLABS_SENIOR,
    (AgeGroup.above80, Regime.old):  OLD_SLABS_SUPER_SENIOR,
    (AgeGroup.below60, Regime.new):  NEW_SLABS,
    (AgeGroup.sixty_80, Regime.new): NEW_SLABS,
    (AgeGroup.above80, Regime.new):  NEW_SLABS,
}


# ===========================================================================
# PIPELINE STAGES (pure functions — no side effects, no I/O)
# ===========================================================================

def get_regime_policy(regime: Union[Regime, str]) -> RegimePolicy:
    return REGIME_POLICIES[parse_regime(regime)]


def select_slab_table(age_group: Union[AgeGroup, str], regime: Union[Regime, str]) -> SlabTable:
    """
    Return the slab table for (age_group, regime).

    Raises:
        InvalidInput: age_group or regime outside the enumerated values.
    """
    return SLAB_TABLES[(parse_age_group(age_group), parse_regime(regime))]


def calculate_hra_exemption(hra: HRADetails) -> float:
    """
    HRA exemption under Section 10(13A), Rule 2A.
    Returns 0 unless basic salary, HRA received and rent paid are all non-zero.

    Component 1: HRA received from employer
    Component 2: 50% of basic_salary (metro) or 40% (non-metro)
    Component 3: max(0, rent_paid - 10% of basic_salary)  ← MUST clip at 0
    """
    if not (hra.basic_salary and hra.hra_received and hra.rent_paid):
        return 0.0
    rate = HRA_METRO_RATE if hra.location == Location.metro else HRA_NON_METRO_RATE
    component_1 = max(0.0, hra.hra_received)
    component_2 = max(0.0, rate * hra.basic_salary)
    component_3 = max(0.0, hra.rent_paid - HRA_RENT_BASIC_OFFSET * hra.basic_salary)
    return min(component_1, component_2, component_3)


def _clamp(amount: float, cap: float) -> float:
    return max(0.0, min(float(amount), float(cap)))


def aggregate_deductions(
    regime: Union[Regime, str],
    age_group: Union[AgeGroup, str],
    deductions: Deductions,
    hra_exemption: float,
) -> AppliedDeductions:
    """
    Apply the regime's deduction policy and statutory caps.

    New regime: nothing beyond the standard deduction — every field is 0
    regardless of what was claimed.
    Old regime: 80C ≤ 1.5L, 80D ≤ 25K (below 60) / 50K (60+), HRA as computed,
    24(b) ≤ 2L. Values below 0 become 0.
    """
    policy = get_regime_policy(regime)
    if not policy.allows_deductions:
        return AppliedDeductions()

    cap_80d = CAP_80D_BELOW60 if parse_age_group(age_group) == AgeGroup.below60 else CAP_80D_SENIOR
    return AppliedDeductions(
        section_80c=_clamp(deductions.section_80c, CAP_80C),
        section_80d=_clamp(deductions.section_80d, cap_80d),
        hra_exemption=max(0.0, hra_exemption),
        home_loan_interest=_clamp(deductions.home_loan_interest, CAP_HOME_LOAN_INTEREST),
    )


def _range_label(bracket: SlabBracket) -> str:
    upper = "∞" if bracket.upper is None else format_indian_number(bracket.upper)
    return f"{format_indian_number(bracket.lower)} - {upper}"


def calculate_slab_tax(
    taxable_income: float,
    slabs: SlabTable,
) -> tuple[float, tuple[SlabBreakdownEntry, ...]]:
    """
    Apply progressive slab tax to taxable_income.

    Walks brackets in ascending order and stops at the first bracket whose
    lower bound is >= taxable_income. Brackets holding no income are left out
    of the breakdown. No rounding anywhere.
    """
    total_tax = 0.0
    breakdown: list[SlabBreakdownEntry] = []
    for bracket in slabs.brackets:
        if taxable_income <= bracket.lower:
            break
        ceiling = taxable_income if bracket.upper is None else min(taxable_income, bracket.upper)
        taxable_in_slab = ceiling - bracket.lower
        tax_in_slab = taxable_in_slab * bracket.rate / 100
        if taxable_in_slab > 0:
            breakdown.append(SlabBreakdownEntry(
                range=_range_label(bracket),
                taxable_amount=taxable_in_slab,
                rate=bracket.rate,
                tax=tax_in_slab,
            ))
        total_tax += tax_in_slab
    return total_tax, tuple(breakdown)


def calculate_rebate_87a(tax: float, taxable_income: float, regime: Union[Regime, str]) -> float:
    """Section 87A rebate. Sharp threshold at the regime's ceiling — no phase-out."""
    policy = get_regime_policy(regime)
    if taxable_income > policy.rebate_ceiling:
        return 0.0
    if policy.rebate_max is None:
        return tax
    return min(tax, policy.rebate_max)


def apply_rebate_and_cess(
    tax_before_rebate: float,
    taxable_income: float,
    regime: Union[Regime, str],
    gross_salary: float,
) -> dict[str, float]:
    """
    87A rebate, then 4% cess on what is left.

    Returns rebate, tax_after_rebate, cess, final_tax and monthly_take_home.
    """
    rebate = calculate_rebate_87a(tax_before_rebate, taxable_income, regime)
    tax_after_rebate = max(0.0, tax_before_rebate - rebate)
    cess = tax_after_rebate * CESS_RATE          # on post-87A tax — NOT on pre-87A tax
    final_tax = tax_after_rebate + cess
    return {
        "rebate": rebate,
        "tax_after_rebate": tax_after_rebate,
        "cess": cess,
        "final_tax": final_tax,
        "monthly_take_home": (gross_salary - final_tax) / 12,
    }


# ===========================================================================
# COMPUTE TAX — public API
# ===========================================================================

def compute_tax(profile: Union[TaxpayerProfile, Mapping[str, Any]]) -> TaxResult:
    """
    Full single-regime computation for one profile.

    Accepts a TaxpayerProfile or a raw mapping; both are (re-)validated first.

    Raises:
        InvalidInput: unknown enum value, negative or non-finite monetary field. No
            partial result is produced.
    """
    profile = load_profile(profile)
    policy = get_regime_policy(profile.regime)
    slabs = select_slab_table(profile.age_group, profile.regime)

    # Step 1: Deductions
    hra_exemption = calculate_hra_exemption(profile.hra_details)
    applied = aggregate_deductions(profile.regime, profile.age_group, profile.deductions, hra_exemption)
    other_deductions = applied.total

    # Step 2: Taxable income (never negative)
    gross_salary = profile.annual_salary
    standard_deduction = float(policy.standard_deduction)
    taxable_income = max(0.0, gross_salary - standard_deduction - other_deductions)

    # Step 3: Slab tax
    tax_before_rebate, breakdown = calculate_slab_tax(taxable_income, slabs)

    # Step 4: 87A rebate and cess
    adjusted = apply_rebate_and_cess(tax_before_rebate, taxable_income, profile.regime, gross_salary)

    logger.debug(
        "Computed tax regime=%s age_group=%s taxable=%.2f before_rebate=%.2f "
        "rebate=%.2f cess=%.2f final=%.2f",
        profile.regime.value,
        profile.age_group.value,
        taxable_income,
        tax_before_rebate,
        adjusted["rebate"],
        adjusted["cess"],
        adjusted["final_tax"],
    )

    return TaxResult(
        regime=profile.regime,
        age_group=profile.age_group,
        gross_salary=gross_salary,
        standard_deduction=standard_deduction,
        other_deductions=other_deductions,
        taxable_income=taxable_income,
        tax_before_rebate=tax_before_rebate,
        slab_breakdown=breakdown,
        hra_exemption=applied.hra_exemption,
        deductions=applied,
        **adjusted,
    )


# ===========================================================================
# COMPARE REGIMES — public API
# ===========================================================================

def compare_regimes(profile: Union[TaxpayerProfile, Mapping[str, Any]]) -> RegimeComparison:
    """
    Compute both regimes for the same profile and recommend the cheaper one.
    Ties go to the new regime (no investment requirements).

    The profile's own regime field is ignored.
    Suggestions use the old-regime applied deductions.

    Local import of optimizer: optimizer.py imports cap constants from this module.
    """
    from taxregime.engine.optimizer import suggest_savings

    profile = load_profile(profile)
    old = compute_tax(profile.model_copy(update={"regime": Regime.old}))
    new = compute_tax(profile.model_copy(update={"regime": Regime.new}))

    if old.final_tax < new.final_tax:
        recommended = Regime.old
    else:
        recommended = Regime.new
    savings = abs(old.final_tax - new.final_tax)

    if savings == 0:
        rationale = (
            f"Both regimes result in the same tax ({format_inr(old.final_tax)}). "
            "New Regime recommended as the simpler option with no investment requirements."
        )
    elif recommended == Regime.old:
        rationale = (
            f"Old Regime saves {format_inr(savings)} a year over the New Regime. "
            f"Old Regime tax: {format_inr(old.final_tax)} vs New Regime tax: "
            f"{format_inr(new.final_tax)}, helped by {format_inr(old.other_deductions)} "
            "of deductions."
        )
    else:
        rationale = (
            f"New Regime saves {format_inr(savings)} a year over the Old Regime. "
            f"New Regime tax: {format_inr(new.final_tax)} vs Old Regime tax: "
            f"{format_inr(old.final_tax)}."
        )

    return RegimeComparison(
        old_regime=old,
        new_regime=new,
        recommended_regime=recommended,
        savings_amount=savings,
        monthly_savings=savings / 12,
        rationale=rationale,
        suggestions=tuple(suggest_savings(old.deductions, profile.annual_salary)),
    )
