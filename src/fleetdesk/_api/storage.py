"""Object storage endpoints.

Endpoints:
  - /storage/v1/object/<bucket>/<path>     (upload)
  - /storage/v1/object/<bucket>            (bulk remove)
  - /storage/v1/object/public/<bucket>/<path>  (public URL, not requested)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote, unquote, urlsplit

from fleetdesk._api._common import access_token_of, raise_for_response
from fleetdesk._constants import STORAGE_PREFIX
from fleetdesk._transport import Transport
from fleetdesk.exceptions import FleetStorageError
from fleetdesk.session import Session

_logger = logging.getLogger(__name__)


def public_url(base_url: str, bucket: str, path: str) -> str:
    """Public URL of an object in a public bucket."""
    return f"{base_url.rstrip('/')}{STORAGE_PREFIX}/object/public/{bucket}/{quote(path.lstrip('/'))}"


def object_name_from_url(url: str | None) -> str | None:
    """Return the last path segment of an object URL, or ``None``."""
    if not url:
        return None
    path = urlsplit(url).path
    name = unquote(path.rstrip("/").rsplit("/", 1)[-1])
    return name or None


def object_path_from_url(url: str | None, bucket: str) -> str | None:
    """Return the object path inside *bucket* for one of its public URLs.

    Falls back to :func:`object_name_from_url` for URLs that do not follow
    the public URL layout.
    """
    if not url:
        return None
    marker = f"/object/public/{bucket}/"
    path = urlsplit(url).path
    index = path.find(marker)
    if index == -1:
        return object_name_from_url(url)
    return unquote(path[index + len(marker) :]) or None


async def upload_object(
    transport: Transport,
    session: Session | None,
    bucket: str,
    path: str,
    data: bytes,
    *,
    content_type: str,
    upsert: bool = False,
    cache_control: str | None = None,
) -> str:
    """Upload *data* and return the stored object key."""
    endpoint = f"{STORAGE_PREFIX}/object/{bucket}/{quote(path.lstrip('/'))}"
    headers = {
        "content-type": content_type,
        "x-upsert": "true" if upsert else "false",
    }
    if cache_control:
        headers["cache-control"] = f"max-age={cache_control}"
    response = await transport.request(
        "POST",
        endpoint,
        data=data,
        headers=headers,
        access_token=access_token_of(session),
    )
    payload = raise_for_response(response, endpoint=endpoint, error_cls=FleetStorageError)
    _logger.debug("Uploaded %d bytes to %s/%s", len(data), bucket, path)
    key = payload.get("Key") if isinstance(payload, dict) else None
    return str(key) if key else f"{bucket}/{path}"


async def remove_objects(
    transport: Transport,
    session: Session | None,
    bucket: str,
    paths: Sequence[str],
) -> list[dict[str, Any]]:
    """Remove objects by path.  Missing objects are not an error."""
    if not paths:
        return []
    endpoint = f"{STORAGE_PREFIX}/object/{bucket}"
    response = await transport.request(
        "DELETE",
        endpoint,
        json_body={"prefixes": list(paths)},
        access_token=access_token_of(session),
    )
    payload = raise_for_response(response, endpoint=endpoint, error_cls=FleetStorageError)
    _logger.debug("Removed %s from %s", list(paths), bucket)
    return [item for item in payload if isinstance(item, dict)] if isinstance(payload, list) else []
