"""Authentication token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fleetdesk.models.user import AuthAccount


class AuthToken(BaseModel):
    """Token returned by a password or refresh-token grant.

    Parameters
    ----------
    access_token : str
        JWT for authenticated requests.
    refresh_token : str
        Token used to obtain the next access token.
    expires_in : float or None
        Server-side lifetime of ``access_token`` in seconds.
    user : AuthAccount
        The signed-in account.
    raw : dict
        Full decoded token dict for access to additional fields.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str
    refresh_token: str = ""
    token_type: str = "bearer"
    expires_in: float | None = None
    user: AuthAccount
    raw: dict[str, Any] = Field(default_factory=dict)


class SignUpResult(BaseModel):
    """Result of a sign-up call.

    ``token`` is only present when the project does not require email
    confirmation; otherwise the account has to be verified first.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    user: AuthAccount
    token: AuthToken | None = None
