"""Internal profile and avatar operations for :class:`fleetdesk.client.FleetClient`."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fleetdesk._api import auth as _auth_api
from fleetdesk._api import storage as _storage_api
from fleetdesk._api import tables as _tables_api
from fleetdesk._constants import IMAGE_CACHE_CONTROL, TABLE_PROFILES
from fleetdesk._normalize import to_iso_utc
from fleetdesk.exceptions import FleetConsistencyError, FleetError, FleetNotFoundError
from fleetdesk.forms import coerce_form
from fleetdesk.models.profile import Profile
from fleetdesk.models.requests import FileUpload, ProfileUpdate
from fleetdesk.state.events import AuthEvent

if TYPE_CHECKING:
    from fleetdesk.client import FleetClient

_logger = logging.getLogger(__name__)


def avatar_object_name(user_id: str, upload: FileUpload, now_ms: int | None = None) -> str:
    """Object name ``avatar-<user>-<epoch ms>.<ext>`` in the avatars bucket."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"avatar-{user_id}-{now_ms}.{upload.extension}"


def _now_iso() -> str:
    return to_iso_utc(datetime.now(UTC))


async def fetch_profile(client: FleetClient, user_id: str) -> Profile:
    async def _fetch() -> dict[str, Any]:
        session = await client.ensure_session()
        return await _tables_api.select_single(
            client._require_transport(),
            session,
            TABLE_PROFILES,
            filters={"user_id": user_id},
            not_found_message="Profile not found.",
        )

    return Profile.model_validate(await client._call_with_reauth(_fetch))


async def _update_profile_row(client: FleetClient, user_id: str, values: Mapping[str, Any]) -> Profile:
    async def _update() -> list[dict[str, Any]]:
        session = await client.ensure_session()
        return await _tables_api.update_rows(
            client._require_transport(),
            session,
            TABLE_PROFILES,
            {**values, "updated_at": _now_iso()},
            filters={"user_id": user_id},
        )

    rows = await client._call_with_reauth(_update)
    if not rows:
        raise FleetNotFoundError("Profile not found.", endpoint=TABLE_PROFILES)
    return Profile.model_validate(rows[0])


def _publish_profile(client: FleetClient, profile: Profile) -> None:
    user = client.auth_state.user
    if user is None:
        return
    merged = user.model_copy(
        update={
            "name": profile.name or user.name,
            "role": profile.role or user.role,
            "avatar": profile.avatar,
            "organization": profile.company,
        }
    )
    client.auth_state.set_user(AuthEvent.USER_UPDATED, merged)


async def get_profile(client: FleetClient) -> Profile:
    user_id = await client._require_user_id()
    return await fetch_profile(client, user_id)


async def update_profile(client: FleetClient, data: ProfileUpdate | Mapping[str, Any]) -> Profile:
    """Save profile fields.  A new name is also written to the auth metadata."""
    form = coerce_form(ProfileUpdate, data)
    user_id = await client._require_user_id()

    if form.name is not None:

        async def _update_metadata() -> None:
            session = await client.ensure_session()
            await _auth_api.update_user(client._require_transport(), session, data={"name": form.name})

        await client._call_with_reauth(_update_metadata)

    profile = await _update_profile_row(client, user_id, form.to_row())
    _publish_profile(client, profile)
    return profile


async def upload_avatar(client: FleetClient, upload: FileUpload) -> str:
    """Store a new avatar and return its public URL.

    The old avatar object is removed after the new one is uploaded.
    """
    user_id = await client._require_user_id()
    bucket = client.config.buckets.avatars
    profile = await fetch_profile(client, user_id)
    name = avatar_object_name(user_id, upload)

    async def _upload() -> None:
        session = await client.ensure_session()
        await _storage_api.upload_object(
            client._require_transport(),
            session,
            bucket,
            name,
            upload.data,
            content_type=upload.resolved_content_type,
            upsert=True,
            cache_control=IMAGE_CACHE_CONTROL,
        )

    await client._call_with_reauth(_upload)
    url = _storage_api.public_url(client.config.base_url, bucket, name)

    try:
        old_name = _storage_api.object_name_from_url(profile.avatar)
        if old_name and old_name != name:
            await _remove_avatar_object(client, old_name)
        updated = await _update_profile_row(client, user_id, {"avatar": url})
    except FleetError as exc:
        raise FleetConsistencyError("Avatar uploaded but the profile was not updated", primary=url) from exc

    _publish_profile(client, updated)
    _logger.info("Avatar updated for user %s", user_id)
    return url


async def _remove_avatar_object(client: FleetClient, name: str) -> None:
    async def _remove() -> None:
        session = await client.ensure_session()
        await _storage_api.remove_objects(client._require_transport(), session, client.config.buckets.avatars, [name])

    await client._call_with_reauth(_remove)


async def remove_avatar(client: FleetClient) -> Profile:
    user_id = await client._require_user_id()
    profile = await fetch_profile(client, user_id)
    old_name = _storage_api.object_name_from_url(profile.avatar)
    if old_name:
        await _remove_avatar_object(client, old_name)
    updated = await _update_profile_row(client, user_id, {"avatar": None})
    _publish_profile(client, updated)
    return updated


async def delete_account(client: FleetClient) -> None:
    """Remove the avatar object and the profile row, then log out.

    The auth account itself is left in place; deleting it requires the
    admin API.  Avatar removal is best effort.
    """
    user_id = await client._require_user_id()
    avatar = client.auth_state.user.avatar if client.auth_state.user else None
    old_name = _storage_api.object_name_from_url(avatar)
    if old_name:
        try:
            await _remove_avatar_object(client, old_name)
        except FleetError:
            _logger.warning("Could not remove avatar %s of user %s", old_name, user_id, exc_info=True)

    async def _delete() -> list[dict[str, Any]]:
        session = await client.ensure_session()
        return await _tables_api.delete_rows(
            client._require_transport(),
            session,
            TABLE_PROFILES,
            filters={"user_id": user_id},
        )

    await client._call_with_reauth(_delete)
    _logger.info("Profile of user %s deleted", user_id)
    await client.logout()
