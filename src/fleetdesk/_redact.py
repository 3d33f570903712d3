"""Redaction of log payloads.

Request and response bodies of the auth, table and storage endpoints carry
passwords, JWTs, API keys and driver personal data.  Everything passed to a
DEBUG log goes through :func:`redact_for_log` first.

Keys are matched case-insensitively, either exactly (``_SENSITIVE_KEYS``) or
by fragment (``_SENSITIVE_FRAGMENTS``) so that ``new_password`` and
``service_role_key`` are covered.  JWTs embedded in free text, such as an
``Authorization`` echo in an error message, are masked as well.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "apikey",
        "authorization",
        "cookie",
        "social_security",
        "license_number",
    }
)
_SENSITIVE_FRAGMENTS: tuple[str, ...] = ("password", "token", "secret", "api_key", "api-key", "role_key")

_JWT_RE = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]*")

_MAX_DEPTH = 20


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return lowered in _SENSITIVE_KEYS or any(fragment in lowered for fragment in _SENSITIVE_FRAGMENTS)


def _redact_text(value: str, max_string: int) -> str:
    value = _JWT_RE.sub("<jwt>", value)
    if len(value) > max_string:
        return f"{value[:max_string]}...<truncated>"
    return value


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* that is safe to put in a debug log."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _redact_text(value, max_string)
    if isinstance(value, (bytes, bytearray)):
        # Image uploads; only the size is useful.
        return f"<bytes:{len(value)}b>"
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED if is_sensitive_key(str(key)) else redact_for_log(
                item, max_string=max_string, _depth=_depth + 1
            )
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return _redact_text(repr(value), max_string)
