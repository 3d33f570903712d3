"""Pydantic request models for client entrypoints.

These models provide a consistent "validate → normalize → execute" flow.
Form-style inputs accept the loose values a form produces (strings for
numbers, blank strings for missing values) and report problems with the
messages the app shows to users.  See :func:`fleetdesk.forms.validate_form`
for turning validation failures into :class:`FleetValidationError`.
"""

from __future__ import annotations

import mimetypes
import re
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator, model_validator

from fleetdesk._normalize import safe_float, safe_int, to_iso_utc
from fleetdesk.models._base import TicketPriority

REQUIRED_FIELDS_MESSAGE = "Please fill out all required fields."

_SIGNUP_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_CONTACT_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")

SIGNUP_ROLES: tuple[str, ...] = ("manager", "driver", "admin")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


FormFloat = Annotated[float | None, BeforeValidator(safe_float)]
"""Number typed into a form; blank or non-numeric text becomes ``None``."""

FormInt = Annotated[int | None, BeforeValidator(safe_int)]

FormDate = Annotated[date | datetime | None, BeforeValidator(_blank_to_none)]

FormText = Annotated[str | None, BeforeValidator(_blank_to_none)]
"""Optional text; a blank entry means "not given"."""


def _to_form_id(value: Any) -> Any:
    value = _blank_to_none(value)
    return str(value) if isinstance(value, int) and not isinstance(value, bool) else value


FormId = Annotated[str | None, BeforeValidator(_to_form_id)]


class _FormModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )


# ------------------------------------------------------------------
# Account forms
# ------------------------------------------------------------------


class SignUpRequest(_FormModel):
    """Sign-up form.

    Checks run in a fixed order and stop at the first failure, so the
    user sees one message at a time.
    """

    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    role: str = ""
    organization: str | None = None

    @field_validator("name", "email", "role", "organization")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _check_form(self) -> SignUpRequest:
        if not (self.name and self.email and self.password and self.confirm_password and self.role):
            raise ValueError("Please fill in all required fields.")
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        if len(self.password) < 6:
            raise ValueError("Password must be at least 6 characters long.")
        if not _SIGNUP_EMAIL_RE.match(self.email):
            raise ValueError("Please enter a valid email address.")
        if self.role not in SIGNUP_ROLES:
            raise ValueError("Please select a valid role.")
        return self


class PasswordResetRequest(_FormModel):
    new_password: str = ""
    confirm_password: str = ""

    @model_validator(mode="after")
    def _check_form(self) -> PasswordResetRequest:
        if not self.new_password or not self.confirm_password:
            raise ValueError("Please fill in all required fields.")
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ContactRequest(_FormModel):
    """Contact form.  Every field is checked; errors are reported per field."""

    name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    message: str = ""

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value

    @field_validator("email")
    @classmethod
    def _email_valid(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Email is required")
        if not _CONTACT_EMAIL_RE.search(value):
            raise ValueError("Email is invalid")
        return value

    @field_validator("message")
    @classmethod
    def _message_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message is required")
        return value


class ProfileUpdate(_FormModel):
    """Editable profile fields.  ``None`` leaves a column unchanged."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str | None = None
    bio: str | None = None
    company: str | None = None
    location: str | None = None
    department: str | None = None
    employee_id: str | None = None

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# ------------------------------------------------------------------
# Fleet records
# ------------------------------------------------------------------


class VehicleInput(_FormModel):
    name: str = ""
    type: str | None = None
    year: FormInt = None
    make: str | None = None
    model: str | None = None
    manufacturer: str | None = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError(REQUIRED_FIELDS_MESSAGE)
        return name

    def to_row(self) -> dict[str, Any]:
        return self.model_dump()


class DriverInput(_FormModel):
    name: str = ""
    vehicle: str | None = None
    license_number: str | None = None
    license_expiry: FormDate = None
    social_security: str | None = None
    join_date: FormDate = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError(REQUIRED_FIELDS_MESSAGE)
        return name

    def to_row(self) -> dict[str, Any]:
        row = self.model_dump(exclude={"license_expiry", "join_date"})
        row["license_expiry"] = to_iso_utc(self.license_expiry) if self.license_expiry else None
        row["join_date"] = to_iso_utc(self.join_date) if self.join_date else None
        return row

    def __repr__(self) -> str:
        return f"DriverInput(name={self.name!r}, vehicle={self.vehicle!r})"


class TicketInput(_FormModel):
    """New maintenance ticket.  ``vehicle`` is the vehicle's name."""

    vehicle: str = ""
    issue: str = ""
    priority: TicketPriority = TicketPriority.MEDIUM
    status: str = "Pending"
    cost: FormFloat = None

    @model_validator(mode="after")
    def _check_required(self) -> TicketInput:
        if not self.vehicle.strip() or not self.issue.strip() or self.cost is None:
            raise ValueError(REQUIRED_FIELDS_MESSAGE)
        return self

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class TicketPatch(_FormModel):
    """Partial ticket update.  ``None`` (or a blank vehicle) leaves a column unchanged."""

    vehicle: FormText = None
    issue: str | None = None
    priority: TicketPriority | None = None
    status: str | None = None
    cost: FormFloat = None

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class FuelUpdateInput(_FormModel):
    """New fuel update.  ``vehicle`` is the vehicle's name."""

    vehicle: str = ""
    vehicle_id: FormId = None
    quantity: FormFloat = None
    distance: FormFloat = None
    cost: FormFloat = None

    @model_validator(mode="after")
    def _check_required(self) -> FuelUpdateInput:
        if not self.vehicle.strip() or self.quantity is None or self.distance is None or self.cost is None:
            raise ValueError(REQUIRED_FIELDS_MESSAGE)
        return self

    @property
    def estimated_total(self) -> float:
        """Quantity times cost, as previewed by the fuel form."""
        return (self.quantity or 0.0) * (self.cost or 0.0)

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class FuelUpdatePatch(_FormModel):
    vehicle: FormText = None
    quantity: FormFloat = None
    distance: FormFloat = None
    cost: FormFloat = None

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# ------------------------------------------------------------------
# Files
# ------------------------------------------------------------------


class FileUpload(BaseModel):
    """An image to store alongside a record."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    data: bytes
    filename: str
    content_type: str | None = None

    @field_validator("filename")
    @classmethod
    def _filename_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("filename must be non-empty")
        return value

    @property
    def extension(self) -> str:
        """Text after the last dot (the whole name when there is no dot)."""
        return self.filename.rsplit(".", 1)[-1]

    @property
    def resolved_content_type(self) -> str:
        if self.content_type:
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.filename)
        return guessed or "application/octet-stream"
