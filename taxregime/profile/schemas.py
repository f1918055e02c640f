"""
schemas.py — taxpayer input contracts (pydantic v2).

Defines:
  - AgeGroup, Regime, Location enums
  - Deductions, HRADetails  (optional-field records, absent values become 0)
  - TaxpayerProfile         (the single input of the tax engine)
  - ErrorDetail, ErrorBody, ErrorResponse  (cross-cutting error envelope)

All monetary fields are ANNUAL figures in INR, including rent_paid, and
must be finite: inf and nan (JSON 1e400, Infinity, NaN) are rejected.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class AgeGroup(str, Enum):
    below60 = "below60"
    sixty_80 = "60-80"
    above80 = "above80"


class Regime(str, Enum):
    old = "old"
    new = "new"


class Location(str, Enum):
    metro = "metro"
    non_metro = "non-metro"


# ---------------------------------------------------------------------------
# Deduction and HRA records
# ---------------------------------------------------------------------------

class Deductions(BaseModel):
    """
    Claimed deductions as entered by the taxpayer.

    Values are raw claims. The engine clamps them to statutory caps, so a
    section_80c of 10,00,000 is accepted here and applied as 1,50,000.
    """
    model_config = ConfigDict(
        extra="forbid", frozen=True, revalidate_instances="always", allow_inf_nan=False,
    )

    section_80c: float = Field(default=0, ge=0)          # Investments (PPF, ELSS, EPF ...)
    section_80d: float = Field(default=0, ge=0)          # Health insurance premium
    home_loan_interest: float = Field(default=0, ge=0)   # Section 24(b), self-occupied

    @field_validator("section_80c", "section_80d", "home_loan_interest", mode="before")
    @classmethod
    def coerce_missing_to_zero(cls, value):
        return 0 if value is None else value


class HRADetails(BaseModel):
    """Salary components needed for the HRA exemption. rent_paid is annual."""
    model_config = ConfigDict(
        extra="forbid", frozen=True, revalidate_instances="always", allow_inf_nan=False,
    )

    basic_salary: float = Field(default=0, ge=0)
    hra_received: float = Field(default=0, ge=0)
    rent_paid: float = Field(default=0, ge=0)
    location: Location = Location.metro

    @field_validator("basic_salary", "hra_received", "rent_paid", mode="before")
    @classmethod
    def coerce_missing_to_zero(cls, value):
        return 0 if value is None else value


# ---------------------------------------------------------------------------
# TaxpayerProfile — central input contract
# ---------------------------------------------------------------------------

class TaxpayerProfile(BaseModel):
    """
    One user submission. Constructed once, fed to compute_tax().

    revalidate_instances='always' makes TaxpayerProfile.model_validate() re-run
    field validation on instances built with model_construct(), so the engine
    never trusts an unchecked object.
    """
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        revalidate_instances="always",
        allow_inf_nan=False,
    )

    annual_salary: float = Field(
        ..., ge=0,
        description="Annual gross salary in INR. Negative values are rejected, not clamped.",
    )
    age_group: AgeGroup = Field(
        ...,
        description="Selects the old-regime slab table and the 80D cap.",
    )
    regime: Regime = Field(
        ...,
        description="Statutory regime the tax is computed under.",
    )
    deductions: Deductions = Field(default_factory=Deductions)
    hra_details: HRADetails = Field(default_factory=HRADetails)

    @field_validator("deductions", "hra_details", mode="before")
    @classmethod
    def coerce_missing_record(cls, value):
        return {} if value is None else value


# ---------------------------------------------------------------------------
# Error response models — used by main.py exception handlers (cross-cutting)
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    """Single field-level validation error."""
    model_config = ConfigDict(extra="forbid")

    field: Optional[str] = None   # Dot-notation field path, e.g. "deductions.section_80c"
    issue: str


class ErrorBody(BaseModel):
    """Error envelope body."""
    model_config = ConfigDict(extra="forbid")

    code: str                                      # INVALID_INPUT, VALIDATION_ERROR, ...
    message: str
    details: List[ErrorDetail] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    Standard error response format for every endpoint.

    Structure: {"error": {"code": "...", "message": "...", "details": [...]}}
    """
    model_config = ConfigDict(extra="forbid")

    error: ErrorBody


__all__ = [
    "AgeGroup",
    "Regime",
    "Location",
    "Deductions",
    "HRADetails",
    "TaxpayerProfile",
    "ErrorDetail",
    "ErrorBody",
    "ErrorResponse",
]
