"""Shared helpers for backend endpoint modules.

This module centralizes the most repeated patterns:
- extracting ``code``/``message`` from the backend's error bodies
- mapping error responses onto the exception hierarchy
- selecting the access token to send for a request

It is internal to fleetdesk and may change at any time.
"""

from __future__ import annotations

from typing import Any

from fleetdesk._constants import EMAIL_NOT_CONFIRMED_CODES, NOT_FOUND_CODES, SESSION_EXPIRED_CODES
from fleetdesk._transport import RestResponse
from fleetdesk.exceptions import (
    FleetApiError,
    FleetAuthenticationError,
    FleetEmailNotConfirmedError,
    FleetNotFoundError,
    FleetSessionExpiredError,
)
from fleetdesk.session import Session


def access_token_of(session: Session | None) -> str | None:
    return session.access_token if session is not None else None


def parse_error(payload: Any, status: int) -> tuple[str, str]:
    """Return ``(code, message)`` from an error body.

    The auth API uses ``error_code``/``msg`` (or ``error``/
    ``error_description`` for token grants), the table API uses
    ``code``/``message`` and storage uses ``error``/``message``.
    """
    if not isinstance(payload, dict):
        return str(status), f"HTTP {status}"

    code = ""
    for key in ("code", "error_code", "error"):
        value = payload.get(key)
        if value not in (None, ""):
            code = str(value)
            break

    message = ""
    for key in ("message", "msg", "error_description"):
        value = payload.get(key)
        if value not in (None, ""):
            message = str(value)
            break

    return code or str(status), message or f"HTTP {status}"


def _is_session_expired(status: int, code: str, message: str) -> bool:
    if code in SESSION_EXPIRED_CODES:
        return True
    lowered = message.lower()
    return status == 401 and ("jwt" in lowered or "expired" in lowered)


def raise_for_response(
    response: RestResponse,
    *,
    endpoint: str,
    auth_errors: bool = False,
    error_cls: type[FleetApiError] = FleetApiError,
) -> Any:
    """Return the payload of a successful response or raise.

    Parameters
    ----------
    response : RestResponse
        Response returned by the transport.
    endpoint : str
        Endpoint used in error messages.
    auth_errors : bool
        When ``True`` (auth endpoints), unmapped failures raise
        :class:`FleetAuthenticationError` instead of ``error_cls``.
    error_cls : type
        Exception raised for unmapped failures.
    """
    if response.ok:
        return response.payload

    status = response.status
    code, message = parse_error(response.payload, status)

    if _is_session_expired(status, code, message):
        raise FleetSessionExpiredError(
            f"{endpoint} failed: code={code} message={message}",
            code=code,
            endpoint=endpoint,
            status_code=status,
        )
    if code in EMAIL_NOT_CONFIRMED_CODES or "email not confirmed" in message.lower():
        raise FleetEmailNotConfirmedError(
            message,
            code=code,
            endpoint=endpoint,
            status_code=status,
        )
    if auth_errors:
        raise FleetAuthenticationError(
            message,
            code=code,
            endpoint=endpoint,
            status_code=status,
        )
    if code in NOT_FOUND_CODES or status == 404:
        raise FleetNotFoundError(
            f"{endpoint} failed: code={code} message={message}",
            code=code,
            endpoint=endpoint,
            status_code=status,
        )
    raise error_cls(
        f"{endpoint} failed: code={code} message={message}",
        code=code,
        endpoint=endpoint,
        status_code=status,
    )
