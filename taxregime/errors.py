"""
errors.py — the single error type raised by the tax engine.

InvalidInput subclasses ValueError so callers that already treat ValueError as
"bad data" keep working. details mirrors the {field, issue} shape of the HTTP
error envelope (see taxregime.profile.schemas.ErrorDetail).
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError


class InvalidInput(ValueError):
    """Unrecognised enum value, or a negative or non-finite monetary field."""

    def __init__(self, message: str, details: Optional[list[dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: list[dict[str, Any]] = details or []

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidInput":
        """Collapse every pydantic violation into one InvalidInput."""
        details = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            details.append({"field": field or None, "issue": error["msg"]})
        return cls("Taxpayer profile is invalid", details)
