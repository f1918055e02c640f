"""
Profile boundary validation.

Every path into the engine goes through load_profile() or the parse_* helpers,
so enum membership and non-negative money are checked once, here, and the
pipeline after it can assume a well-formed TaxpayerProfile.

Pydantic ValidationErrors are re-raised as InvalidInput carrying the full list
of {field, issue} violations, so callers receive every error in one response.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError

from taxregime.errors import InvalidInput
from taxregime.profile.schemas import AgeGroup, Regime, TaxpayerProfile

logger = logging.getLogger(__name__)


def load_profile(data: Union[TaxpayerProfile, Mapping[str, Any]]) -> TaxpayerProfile:
    """
    Validate a raw mapping (or re-validate an existing profile).

    Raises:
        InvalidInput: unknown age_group / regime / location, a negative
            monetary field, a missing required field or an unknown key.
    """
    try:
        return TaxpayerProfile.model_validate(data)
    except ValidationError as exc:
        error = InvalidInput.from_validation_error(exc)
        logger.info("Rejected taxpayer profile violations=%d", len(error.details))
        raise error from exc


def parse_age_group(value: Union[AgeGroup, str]) -> AgeGroup:
    try:
        return AgeGroup(value)
    except ValueError:
        allowed = ", ".join(a.value for a in AgeGroup)
        raise InvalidInput(
            f"Unknown age group {value!r}",
            [{"field": "age_group", "issue": f"Expected one of: {allowed}"}],
        ) from None


def parse_regime(value: Union[Regime, str]) -> Regime:
    try:
        return Regime(value)
    except ValueError:
        allowed = ", ".join(r.value for r in Regime)
        raise InvalidInput(
            f"Unknown regime {value!r}",
            [{"field": "regime", "issue": f"Expected one of: {allowed}"}],
        ) from None
