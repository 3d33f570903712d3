"""Custom exception hierarchy for fleetdesk."""

from __future__ import annotations

from typing import Any


class FleetError(Exception):
    """Base exception for all fleetdesk errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetValidationError(FleetError):
    """Client-side form validation failed.

    ``errors`` maps field names to human-readable messages, in the order
    the checks ran.  The exception message is the first error.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        first = next(iter(self.errors.values()), "Invalid input")
        super().__init__(first)


class FleetTransportError(FleetError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FleetApiError(FleetError):
    """Backend returned an error response."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(message)


class FleetAuthenticationError(FleetApiError):
    """Login failed, or the operation needs a signed-in user."""


class FleetSessionExpiredError(FleetAuthenticationError):
    """Access token rejected by the backend.

    The client catches this internally, refreshes the session and retries
    the call once.
    """


class FleetEmailNotConfirmedError(FleetAuthenticationError):
    """Sign-in refused because the account email is not verified yet.

    Callers typically offer :meth:`FleetClient.resend_verification`.
    """


class FleetNotFoundError(FleetApiError):
    """A lookup expected exactly one row and found none (or several)."""


class FleetStorageError(FleetApiError):
    """Object storage upload or removal failed."""


class FleetCooldownError(FleetError):
    """An action was retried before its client-side cooldown elapsed."""

    def __init__(self, message: str, *, retry_after: float) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class FleetConsistencyError(FleetError):
    """A primary write succeeded but a dependent write failed.

    Multi-step writes are not transactional.  ``primary`` holds the result
    of the write that did go through; ``__cause__`` is the failure of the
    dependent write.  Nothing is rolled back.
    """

    def __init__(self, message: str, *, primary: Any = None) -> None:
        self.primary = primary
        super().__init__(message)
