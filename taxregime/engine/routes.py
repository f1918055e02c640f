"""
Tax engine HTTP routes — POST /api/calculate,
                         POST /api/compare,
                         POST /api/suggestions,
                         GET  /api/slabs/{age_group}/{regime},
                         GET|DELETE /api/history

Profiles arrive as raw JSON dicts and go through load_profile(), so unknown
enum values and negative amounts surface as InvalidInput (422 INVALID_INPUT,
see main.py) with every violation listed.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from taxregime.engine.optimizer import suggest_savings
from taxregime.engine.tax_engine import compare_regimes, compute_tax, select_slab_table
from taxregime.profile.schemas import Deductions
from taxregime.profile.validator import load_profile
from taxregime.store import CalculationHistory

router = APIRouter(prefix="/api", tags=["tax_engine"])
logger = logging.getLogger(__name__)


class SuggestionRequest(BaseModel):
    """
    Body of POST /api/suggestions.

    deductions are raw claims, not post-cap amounts. suggest_savings only
    emits a hint when cap - claim is positive, so a claim above its cap gives
    the same result as the capped AppliedDeductions used by compare_regimes.
    """
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    deductions: Deductions = Field(
        default_factory=Deductions,
        description="Raw claimed deductions; amounts above a statutory cap are allowed.",
    )
    annual_salary: float = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _history(request: Request) -> CalculationHistory:
    return request.app.state.history


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/calculate")
async def calculate_tax(request_body: dict) -> JSONResponse:
    """Compute tax under the regime named in the profile."""
    result = compute_tax(request_body)
    logger.info(
        "Tax calculated regime=%s age_group=%s brackets=%d",
        result.regime.value,
        result.age_group.value,
        len(result.slab_breakdown),
    )
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.post("/compare")
async def compare(request: Request, request_body: dict) -> JSONResponse:
    """
    Compute both regimes, recommend the cheaper one and record the
    comparison in the calculation history.
    """
    profile = load_profile(request_body)
    comparison = compare_regimes(profile)
    _history(request).record(profile, comparison)
    logger.info(
        "Regimes compared recommended=%s suggestions=%d",
        comparison.recommended_regime.value,
        len(comparison.suggestions),
    )
    return JSONResponse(status_code=200, content=comparison.model_dump(mode="json"))


@router.post("/suggestions")
async def suggestions(request_body: SuggestionRequest) -> JSONResponse:
    """Savings hints for unused 80C / 80D / 24(b) headroom."""
    result = suggest_savings(request_body.deductions, request_body.annual_salary)
    return JSONResponse(
        status_code=200,
        content=[s.model_dump(mode="json") for s in result],
    )


@router.get("/slabs/{age_group}/{regime}")
async def get_slabs(age_group: str, regime: str) -> JSONResponse:
    """Slab table used for (age_group, regime)."""
    table = select_slab_table(age_group, regime)
    return JSONResponse(status_code=200, content=table.model_dump(mode="json"))


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

@router.get("/history")
async def get_history(request: Request) -> JSONResponse:
    """Most recent comparisons, newest first."""
    entries = _history(request).entries()
    return JSONResponse(
        status_code=200,
        content=[entry.model_dump(mode="json") for entry in entries],
    )


@router.delete("/history", status_code=204)
async def clear_history(request: Request) -> Response:
    _history(request).clear()
    return Response(status_code=204)
