"""Profile model."""

from __future__ import annotations

from fleetdesk.models._base import FleetBaseModel, Timestamp


class Profile(FleetBaseModel):
    """Row of the ``profiles`` table, keyed by the auth user id."""

    user_id: str = ""
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str | None = None
    bio: str | None = None
    avatar: str | None = None
    """Public URL of the avatar image in the avatars bucket."""
    company: str | None = None
    location: str | None = None
    department: str | None = None
    employee_id: str | None = None
    created_at: Timestamp = None
    updated_at: Timestamp = None
