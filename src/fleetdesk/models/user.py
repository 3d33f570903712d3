"""Account models: the auth account and the app-level user mirror."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetdesk.models._base import FleetBaseModel, Timestamp


class AuthAccount(FleetBaseModel):
    """User object as returned by the auth API."""

    id: str = ""
    email: str = ""
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    email_confirmed_at: Timestamp = None
    created_at: Timestamp = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def is_confirmed(self) -> bool:
        return self.email_confirmed_at is not None

    def metadata_str(self, key: str) -> str | None:
        value = self.user_metadata.get(key)
        if value is None or value == "":
            return None
        return str(value)


class AuthUser(BaseModel):
    """The signed-in user as the app sees it.

    Profile values win over the auth account's metadata; ``organization``
    comes from the profile's ``company`` column only.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str | None = None
    avatar: str | None = None
    role: str | None = None
    organization: str | None = None

    @classmethod
    def from_account(cls, account: AuthAccount, profile: Any = None) -> AuthUser:
        """Merge an auth account with its profile row (if any)."""
        name = getattr(profile, "name", None) or account.metadata_str("name")
        role = getattr(profile, "role", None) or account.metadata_str("role")
        return cls(
            id=account.id,
            email=account.email,
            name=name,
            avatar=getattr(profile, "avatar", None),
            role=role,
            organization=getattr(profile, "company", None),
        )
