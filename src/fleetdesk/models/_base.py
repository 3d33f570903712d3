"""Base model and shared field types for backend rows.

Every row model inherits from :class:`FleetBaseModel` which provides:

* A ``model_validator(mode="before")`` that drops ``None`` and blank
  string values so the field default is used instead.
* A ``raw`` dict that captures the original row.

Rows written by older app versions may miss the running-total columns
or carry numbers as strings; the annotated types below absorb that.
"""

from __future__ import annotations

import enum
import math
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from fleetdesk._normalize import parse_timestamp, safe_float, safe_int


def _to_amount(value: Any) -> float:
    parsed = safe_float(value)
    return 0.0 if parsed is None else parsed


def _to_optional_int(value: Any) -> int | None:
    return safe_int(value)


def _to_row_id(value: Any) -> str:
    return "" if value is None else str(value)


Timestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""ISO-8601 string coerced to an aware UTC datetime (``None`` when unparseable)."""

Amount = Annotated[float, BeforeValidator(_to_amount)]
"""Numeric column where a missing or invalid value counts as ``0``."""

OptionalInt = Annotated[int | None, BeforeValidator(_to_optional_int)]

RowId = Annotated[str, BeforeValidator(_to_row_id)]
"""Primary key; integer and UUID keys are both carried as strings."""


class TicketPriority(enum.StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def _missing_(cls, value: object) -> TicketPriority | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class FleetBaseModel(BaseModel):
    """Base for backend row models.

    Handles:
    * ``None`` and blank strings dropped so defaults apply
    * Stashes the original row in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original row dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_row_values(cls, values: Any) -> Any:
        """Drop empty values and stash the raw row."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = FleetBaseModel._clean_dict(original)
        # Keep an explicit raw= from the caller.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
