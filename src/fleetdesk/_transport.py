"""HTTP transport for the hosted backend's REST endpoints."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp

from fleetdesk._constants import USER_AGENT
from fleetdesk._redact import redact_for_log
from fleetdesk.config import FleetConfig
from fleetdesk.exceptions import FleetTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestResponse:
    """Decoded HTTP response.

    ``payload`` is the JSON-decoded body, or ``None`` for an empty body.
    Error statuses are returned as-is; mapping them to exceptions is the
    job of :mod:`fleetdesk._api._common`.
    """

    status: int
    payload: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`RestTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        data: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        access_token: str | None = None,
    ) -> RestResponse:
        ...


class RestTransport:
    """HTTP transport that adds the project API key and bearer token."""

    def __init__(self, config: FleetConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _build_headers(
        self,
        *,
        access_token: str | None,
        extra: Mapping[str, str] | None,
        has_json: bool,
    ) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "apikey": self._config.anon_key,
            "user-agent": USER_AGENT,
        }
        if has_json:
            headers["content-type"] = "application/json"
        if access_token:
            headers["authorization"] = f"Bearer {access_token}"
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        data: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        access_token: str | None = None,
    ) -> RestResponse:
        """Send one request and decode the JSON body.

        Raises
        ------
        FleetTransportError
            On network failures or when a non-empty body is not JSON.
        """
        url = f"{self._config.base_url}{endpoint}"
        request_headers = self._build_headers(
            access_token=access_token,
            extra=headers,
            has_json=json_body is not None,
        )
        body: str | bytes | None
        if json_body is not None:
            body = json.dumps(json_body, separators=(",", ":"))
        else:
            body = data

        _logger.debug("%s %s params=%s", method, url, dict(params or {}))
        if self._config.log_requests and json_body is not None:
            _logger.debug("Request body %s: %s", endpoint, redact_for_log(json_body))

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                data=body,
                headers=request_headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
                resp_headers = {k.lower(): v for k, v in resp.headers.items()}
        except aiohttp.ClientError as exc:
            raise FleetTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise FleetTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        payload: Any = None
        if text.strip():
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                raise FleetTransportError(
                    f"Invalid JSON from {endpoint} (HTTP {status}): {text[:200]}",
                    status_code=status,
                    endpoint=endpoint,
                ) from exc

        if self._config.log_requests:
            _logger.debug("Response %s HTTP %s: %s", endpoint, status, redact_for_log(payload))

        return RestResponse(status=status, payload=payload, headers=resp_headers)
