"""Auth endpoints.

Endpoints:
  - /auth/v1/token?grant_type=password
  - /auth/v1/token?grant_type=refresh_token
  - /auth/v1/signup
  - /auth/v1/logout
  - /auth/v1/recover
  - /auth/v1/resend
  - /auth/v1/user
  - /auth/v1/admin/users/<id>
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from fleetdesk._api._common import raise_for_response
from fleetdesk._constants import AUTH_PREFIX
from fleetdesk._redact import redact_for_log
from fleetdesk._transport import Transport
from fleetdesk.exceptions import FleetAuthenticationError
from fleetdesk.models.token import AuthToken, SignUpResult
from fleetdesk.models.user import AuthAccount
from fleetdesk.session import Session

_logger = logging.getLogger(__name__)

_TOKEN_ENDPOINT = f"{AUTH_PREFIX}/token"


def parse_token_response(payload: Any, *, endpoint: str = _TOKEN_ENDPOINT) -> AuthToken:
    """Parse a token grant response.

    Raises
    ------
    FleetAuthenticationError
        If the response is missing the access token or user.
    """
    _logger.debug("Token response parsed=%s", redact_for_log(payload))
    if not isinstance(payload, dict) or not payload.get("access_token") or not isinstance(payload.get("user"), dict):
        raise FleetAuthenticationError(
            "Login response missing token fields",
            endpoint=endpoint,
        )
    try:
        return AuthToken.model_validate({**payload, "raw": payload})
    except ValidationError as exc:
        raise FleetAuthenticationError(
            f"Login response is malformed: {exc.error_count()} error(s)",
            endpoint=endpoint,
        ) from exc


async def password_grant(transport: Transport, email: str, password: str) -> AuthToken:
    response = await transport.request(
        "POST",
        _TOKEN_ENDPOINT,
        params={"grant_type": "password"},
        json_body={"email": email, "password": password},
    )
    payload = raise_for_response(response, endpoint=_TOKEN_ENDPOINT, auth_errors=True)
    return parse_token_response(payload)


async def refresh_grant(transport: Transport, refresh_token: str) -> AuthToken:
    response = await transport.request(
        "POST",
        _TOKEN_ENDPOINT,
        params={"grant_type": "refresh_token"},
        json_body={"refresh_token": refresh_token},
    )
    payload = raise_for_response(response, endpoint=_TOKEN_ENDPOINT, auth_errors=True)
    return parse_token_response(payload)


async def sign_up(
    transport: Transport,
    email: str,
    password: str,
    *,
    metadata: Mapping[str, Any],
) -> SignUpResult:
    """Create an auth account.

    Depending on project settings the response is either the bare user
    (email confirmation pending) or a full session.
    """
    endpoint = f"{AUTH_PREFIX}/signup"
    response = await transport.request(
        "POST",
        endpoint,
        json_body={"email": email, "password": password, "data": dict(metadata)},
    )
    payload = raise_for_response(response, endpoint=endpoint, auth_errors=True)
    if not isinstance(payload, dict):
        raise FleetAuthenticationError("User registration failed", endpoint=endpoint)

    if payload.get("access_token"):
        token = parse_token_response(payload, endpoint=endpoint)
        return SignUpResult(user=token.user, token=token)

    user_payload = payload.get("user") if isinstance(payload.get("user"), dict) else payload
    account = AuthAccount.model_validate(user_payload)
    if not account.id:
        raise FleetAuthenticationError("User registration failed", endpoint=endpoint)
    return SignUpResult(user=account)


async def sign_out(transport: Transport, session: Session) -> None:
    endpoint = f"{AUTH_PREFIX}/logout"
    response = await transport.request("POST", endpoint, access_token=session.access_token)
    raise_for_response(response, endpoint=endpoint, auth_errors=True)


async def recover(transport: Transport, email: str, *, redirect_to: str) -> None:
    endpoint = f"{AUTH_PREFIX}/recover"
    response = await transport.request(
        "POST",
        endpoint,
        params={"redirect_to": redirect_to},
        json_body={"email": email},
    )
    raise_for_response(response, endpoint=endpoint, auth_errors=True)


async def resend_signup(transport: Transport, email: str) -> None:
    endpoint = f"{AUTH_PREFIX}/resend"
    response = await transport.request(
        "POST",
        endpoint,
        json_body={"type": "signup", "email": email},
    )
    raise_for_response(response, endpoint=endpoint, auth_errors=True)


async def get_user(transport: Transport, session: Session) -> AuthAccount:
    endpoint = f"{AUTH_PREFIX}/user"
    response = await transport.request("GET", endpoint, access_token=session.access_token)
    payload = raise_for_response(response, endpoint=endpoint, auth_errors=True)
    return AuthAccount.model_validate(payload if isinstance(payload, dict) else {})


async def update_user(
    transport: Transport,
    session: Session,
    *,
    password: str | None = None,
    data: Mapping[str, Any] | None = None,
) -> AuthAccount:
    """Update the signed-in account's password and/or metadata."""
    endpoint = f"{AUTH_PREFIX}/user"
    body: dict[str, Any] = {}
    if password is not None:
        body["password"] = password
    if data is not None:
        body["data"] = dict(data)
    response = await transport.request("PUT", endpoint, json_body=body, access_token=session.access_token)
    payload = raise_for_response(response, endpoint=endpoint, auth_errors=True)
    return AuthAccount.model_validate(payload if isinstance(payload, dict) else {})


async def admin_delete_user(transport: Transport, user_id: str, *, service_role_key: str) -> None:
    """Delete an auth account.  Requires the service-role key."""
    endpoint = f"{AUTH_PREFIX}/admin/users/{user_id}"
    response = await transport.request(
        "DELETE",
        endpoint,
        headers={"apikey": service_role_key},
        access_token=service_role_key,
    )
    raise_for_response(response, endpoint=endpoint, auth_errors=True)
