"""
schemas.py — tax engine data contracts (pydantic v2).

Defines:
  - SlabBracket, SlabTable   (progressive bracket configuration, validated on build)
  - RegimePolicy             (per-regime constants: standard deduction, 87A rebate)
  - SlabBreakdownEntry       (one reported bracket of a slab calculation)
  - AppliedDeductions        (post-cap deductions actually used)
  - TaxResult                (output of compute_tax — immutable)
  - Suggestion               (unused-cap tax saving hint)
  - RegimeComparison         (old vs new, output of compare_regimes)

Every model here is frozen; sequences are tuples so a result cannot be
mutated after the engine hands it out.
"""
from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from taxregime.profile.schemas import AgeGroup, Regime


# ---------------------------------------------------------------------------
# Slab configuration
# ---------------------------------------------------------------------------

class SlabBracket(BaseModel):
    """
    One income sub-range taxed at a single marginal rate.

    lower is inclusive, upper exclusive. upper=None marks the open-ended top
    bracket. rate is a percentage (5 means 5%).
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    lower: float = Field(..., ge=0)
    upper: Optional[float] = None
    rate: float = Field(..., ge=0)


class SlabTable(BaseModel):
    """
    Contiguous, gap-free bracket sequence covering 0 to infinity.

    Checked on construction:
      1. first bracket starts at 0
      2. every bracket starts where the previous one ended
      3. upper > lower for every bounded bracket
      4. only the last bracket is unbounded, and it must be
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    brackets: Tuple[SlabBracket, ...]

    @model_validator(mode="after")
    def validate_contiguous_coverage(self) -> "SlabTable":
        if not self.brackets:
            raise ValueError("A slab table needs at least one bracket")
        if self.brackets[0].lower != 0:
            raise ValueError("The first bracket must start at 0")

        for prev, curr in zip(self.brackets, self.brackets[1:]):
            if prev.upper is None:
                raise ValueError("Only the last bracket may be unbounded")
            if curr.lower != prev.upper:
                raise ValueError(
                    f"Bracket starting at {curr.lower:,.0f} does not continue "
                    f"from the previous upper bound {prev.upper:,.0f}"
                )

        for bracket in self.brackets:
            if bracket.upper is not None and bracket.upper <= bracket.lower:
                raise ValueError(
                    f"Bracket bounds must be strictly increasing "
                    f"(got {bracket.lower:,.0f} to {bracket.upper:,.0f})"
                )

        if self.brackets[-1].upper is not None:
            raise ValueError("The last bracket must be unbounded")
        return self


class RegimePolicy(BaseModel):
    """
    Everything that differs between the old and the new regime, in one place.

    rebate_max=None means the 87A rebate wipes out the whole tax when the
    taxable income is within rebate_ceiling.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    regime: Regime
    standard_deduction: float
    allows_deductions: bool          # 80C / 80D / HRA / 24(b)
    rebate_ceiling: float            # 87A applies when taxable_income <= this
    rebate_max: Optional[float]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class SlabBreakdownEntry(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    range: str                # e.g. "2,50,000 - 5,00,000", last bracket "15,00,000 - ∞"
    taxable_amount: float     # portion of taxable income inside this bracket
    rate: float               # percentage
    tax: float


class AppliedDeductions(BaseModel):
    """
    Deductions actually used, after caps.

    For example, section_80c=150000 means ₹1.5L was applied even if the claim was ₹10L.
    New regime: every field is 0.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    section_80c: float = 0
    section_80d: float = 0
    hra_exemption: float = 0
    home_loan_interest: float = 0

    @property
    def total(self) -> float:
        return self.section_80c + self.section_80d + self.hra_exemption + self.home_loan_interest


class TaxResult(BaseModel):
    """
    Complete computation for one regime.

    Computation sequence:
      1. other_deductions = capped 80C + 80D + HRA exemption + 24(b)  (old regime only)
      2. taxable_income = max(0, gross - standard_deduction - other_deductions)
      3. tax_before_rebate = progressive slab tax
      4. tax_after_rebate = max(0, tax_before_rebate - rebate)
      5. cess = 4% of tax_after_rebate   ← NOT of tax_before_rebate
      6. final_tax = tax_after_rebate + cess
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    regime: Regime
    age_group: AgeGroup
    gross_salary: float
    standard_deduction: float
    other_deductions: float
    taxable_income: float
    tax_before_rebate: float
    rebate: float
    tax_after_rebate: float
    cess: float
    final_tax: float
    monthly_take_home: float
    slab_breakdown: Tuple[SlabBreakdownEntry, ...] = ()
    hra_exemption: float = 0
    deductions: AppliedDeductions = Field(default_factory=AppliedDeductions)


class Suggestion(BaseModel):
    """Unused deduction headroom. title/description are display text only."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    category: Literal["section80C", "section80D", "homeLoan"]
    title: str
    description: str
    unused_limit: float
    potential_savings: float


class RegimeComparison(BaseModel):
    """
    Output of compare_regimes().

    recommended_regime is the one with the lower final tax; ties go to new.
    suggestions are built from the old-regime applied deductions, the only
    regime where they can change the outcome.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    old_regime: TaxResult
    new_regime: TaxResult
    recommended_regime: Regime
    savings_amount: float            # abs(old.final_tax - new.final_tax)
    monthly_savings: float           # savings_amount / 12
    rationale: str
    suggestions: Tuple[Suggestion, ...] = ()


__all__ = [
    "SlabBracket",
    "SlabTable",
    "RegimePolicy",
    "SlabBreakdownEntry",
    "AppliedDeductions",
    "TaxResult",
    "Suggestion",
    "RegimeComparison",
]
