"""Session state management for authenticated API calls."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

#: Fallback lifetime when neither the server nor the config provides one.
DEFAULT_SESSION_TTL: float = 3600.0


class Session(BaseModel):
    """Session obtained from a password or refresh-token grant.

    Parameters
    ----------
    user_id : str
        The authenticated user's ID.
    email : str
        The authenticated user's email.
    access_token : str
        JWT sent as ``Authorization: Bearer`` on authenticated requests.
    refresh_token : str
        Token used to obtain a new access token once this one expires.
    created_at : float
        Monotonic timestamp (``time.monotonic()``) when the session
        was created.  Defaults to *now* if not provided.
    ttl : float
        Time-to-live in seconds.  After this period the session is
        considered expired and is refreshed before the next call.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    user_id: str
    email: str = ""
    access_token: str
    refresh_token: str = ""
    created_at: float = Field(default_factory=time.monotonic)
    ttl: float = DEFAULT_SESSION_TTL

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)

    @property
    def is_expired(self) -> bool:
        """Whether the session has exceeded its TTL."""
        return (time.monotonic() - self.created_at) >= self.ttl
