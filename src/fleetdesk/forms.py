"""Form validation entry points.

Request models raise :class:`pydantic.ValidationError`.  Callers that
deal with user input want field-keyed, human-readable messages instead,
which is what :class:`FleetValidationError` carries.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fleetdesk.exceptions import FleetValidationError

M = TypeVar("M", bound=BaseModel)

#: Key used for errors that are not tied to a single field.
FORM_ERROR_KEY = "form"


def errors_from_validation(exc: ValidationError) -> dict[str, str]:
    """Map a pydantic ``ValidationError`` to ``{field: message}``.

    The first error per field wins; messages raised by our own validators
    are used verbatim (without pydantic's ``"Value error, "`` prefix).
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        key = str(loc[0]) if loc else FORM_ERROR_KEY
        if key in errors:
            continue
        ctx = error.get("ctx") or {}
        original = ctx.get("error")
        if isinstance(original, ValueError):
            errors[key] = str(original)
        else:
            errors[key] = str(error.get("msg", "Invalid value"))
    return errors


def validate_form(model_cls: type[M], data: Mapping[str, Any]) -> M:
    """Build *model_cls* from form data.

    Raises
    ------
    FleetValidationError
        With one message per failing field.
    """
    try:
        return model_cls.model_validate(dict(data))
    except ValidationError as exc:
        raise FleetValidationError(errors_from_validation(exc)) from exc


def coerce_form(model_cls: type[M], value: M | Mapping[str, Any]) -> M:
    """Accept either an already-built request model or raw form data."""
    if isinstance(value, model_cls):
        return value
    if isinstance(value, Mapping):
        return validate_form(model_cls, value)
    raise TypeError(f"Expected {model_cls.__name__} or a mapping, got {type(value).__name__}")
