"""Client configuration for fleetdesk."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from fleetdesk.exceptions import FleetConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StorageBuckets:
    """Object storage bucket names used by the app."""

    avatars: str = "avatars"
    vehicle_images: str = "vehicle-images"
    driver_images: str = "driver-images"


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Project URL of the hosted backend (e.g. ``https://xyz.supabase.co``).
    anon_key : str
        Public (anon) API key sent as ``apikey`` with every request.
    service_role_key : str or None
        Optional privileged key.  Only used to delete an orphaned auth user
        when registration fails after sign-up.
    email : str or None
        Account email for unattended use.  When set together with
        ``password`` the client logs in on demand.
    password : str or None
        Account password for unattended use.
    site_url : str
        Public URL of the web app; password recovery mails link to
        ``<site_url>/reset-password``.
    session_ttl : float
        Upper bound on the session lifetime in seconds.  The effective
        lifetime is the smaller of this and the server's ``expires_in``.
        Set to ``0`` to rely on the server value only.
    request_timeout : float
        Total timeout for a single HTTP request, in seconds.
    log_requests : bool
        Emit redacted request/response bodies at DEBUG level.
    buckets : StorageBuckets
        Storage bucket names.
    """

    base_url: str
    anon_key: str
    service_role_key: str | None = None
    email: str | None = None
    password: str | None = None
    site_url: str = "http://localhost:3000"
    session_ttl: float = 3600.0
    request_timeout: float = 30.0
    log_requests: bool = False
    buckets: StorageBuckets = dataclasses.field(default_factory=StorageBuckets)

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise FleetConfigError("base_url is required")
        if not self.anon_key or not self.anon_key.strip():
            raise FleetConfigError("anon_key is required")
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        object.__setattr__(self, "site_url", self.site_url.strip().rstrip("/"))

    @property
    def has_credentials(self) -> bool:
        """Whether the client can log in without an explicit call to ``login``."""
        return bool(self.email and self.password)

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads ``FLEETDESK_URL`` and ``FLEETDESK_ANON_KEY`` plus the optional
        ``FLEETDESK_*`` variables below.  Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FleetConfig
            Populated configuration.

        Raises
        ------
        FleetConfigError
            If the URL or anon key is missing after applying overrides.
        """
        env = os.environ

        bucket_kwargs: dict[str, str] = {}
        _ENV_BUCKET_MAP = {
            "FLEETDESK_AVATAR_BUCKET": "avatars",
            "FLEETDESK_VEHICLE_IMAGE_BUCKET": "vehicle_images",
            "FLEETDESK_DRIVER_IMAGE_BUCKET": "driver_images",
        }
        for env_key, field_name in _ENV_BUCKET_MAP.items():
            val = env.get(env_key)
            if val is not None:
                bucket_kwargs[field_name] = val

        bucket_overrides = overrides.pop("buckets", None)
        if isinstance(bucket_overrides, dict):
            bucket_kwargs.update(bucket_overrides)
        elif isinstance(bucket_overrides, StorageBuckets):
            bucket_kwargs = dataclasses.asdict(bucket_overrides)

        _ENV_CONFIG_MAP = {
            "FLEETDESK_URL": "base_url",
            "FLEETDESK_ANON_KEY": "anon_key",
            "FLEETDESK_SERVICE_ROLE_KEY": "service_role_key",
            "FLEETDESK_EMAIL": "email",
            "FLEETDESK_PASSWORD": "password",
            "FLEETDESK_SITE_URL": "site_url",
        }
        config_kwargs: dict[str, Any] = {"buckets": StorageBuckets(**bucket_kwargs)}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        ttl_env = env.get("FLEETDESK_SESSION_TTL")
        if ttl_env is not None and "session_ttl" not in overrides:
            config_kwargs["session_ttl"] = float(ttl_env)

        timeout_env = env.get("FLEETDESK_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        if "log_requests" not in overrides:
            config_kwargs["log_requests"] = _env_bool(env.get("FLEETDESK_LOG_REQUESTS"), False)

        config_kwargs.update(overrides)
        config_kwargs.setdefault("base_url", "")
        config_kwargs.setdefault("anon_key", "")

        return cls(**config_kwargs)
