"""Internal CRUD operations for vehicles and drivers.

Both tables share the same shape: rows ordered by name, an optional image
in a dedicated bucket, and ``created_by`` set to the signed-in user.
These functions keep `client.py` small without changing the public API.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

from fleetdesk._api import storage as _storage_api
from fleetdesk._api import tables as _tables_api
from fleetdesk._constants import IMAGE_CACHE_CONTROL, TABLE_DRIVERS, TABLE_VEHICLES
from fleetdesk.config import StorageBuckets
from fleetdesk.exceptions import FleetNotFoundError
from fleetdesk.forms import coerce_form
from fleetdesk.models._base import FleetBaseModel
from fleetdesk.models.driver import Driver
from fleetdesk.models.requests import DriverInput, FileUpload, VehicleInput
from fleetdesk.models.vehicle import Vehicle

if TYPE_CHECKING:
    from fleetdesk.client import FleetClient

_logger = logging.getLogger(__name__)

R = TypeVar("R", bound=FleetBaseModel)


@dataclass(frozen=True)
class RecordKind(Generic[R]):
    """Table, model and image bucket of one record type."""

    table: str
    model: type[R]
    input_model: type[BaseModel]
    bucket_field: str
    label: str

    def bucket(self, buckets: StorageBuckets) -> str:
        return str(getattr(buckets, self.bucket_field))


VEHICLES: RecordKind[Vehicle] = RecordKind(
    table=TABLE_VEHICLES,
    model=Vehicle,
    input_model=VehicleInput,
    bucket_field="vehicle_images",
    label="Vehicle",
)

DRIVERS: RecordKind[Driver] = RecordKind(
    table=TABLE_DRIVERS,
    model=Driver,
    input_model=DriverInput,
    bucket_field="driver_images",
    label="Driver",
)


def image_object_path(folder: str, upload: FileUpload, now_ms: int | None = None) -> str:
    """Object path ``<folder>/<epoch ms>.<ext>`` for a record image."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{folder}/{now_ms}.{upload.extension}"


async def _upload_image(client: FleetClient, kind: RecordKind[Any], upload: FileUpload) -> str:
    bucket = kind.bucket(client.config.buckets)
    path = image_object_path(bucket, upload)

    async def _upload() -> str:
        session = await client.ensure_session()
        await _storage_api.upload_object(
            client._require_transport(),
            session,
            bucket,
            path,
            upload.data,
            content_type=upload.resolved_content_type,
            upsert=False,
            cache_control=IMAGE_CACHE_CONTROL,
        )
        return _storage_api.public_url(client.config.base_url, bucket, path)

    return await client._call_with_reauth(_upload)


async def _remove_image(client: FleetClient, kind: RecordKind[Any], image_url: str | None) -> None:
    bucket = kind.bucket(client.config.buckets)
    path = _storage_api.object_path_from_url(image_url, bucket)
    if not path:
        return

    async def _remove() -> None:
        session = await client.ensure_session()
        await _storage_api.remove_objects(client._require_transport(), session, bucket, [path])

    await client._call_with_reauth(_remove)


async def list_records(client: FleetClient, kind: RecordKind[R]) -> list[R]:
    async def _fetch() -> list[dict[str, Any]]:
        session = await client.ensure_session()
        return await _tables_api.select_rows(
            client._require_transport(),
            session,
            kind.table,
            order="name",
            ascending=True,
        )

    rows = await client._call_with_reauth(_fetch)
    return [kind.model.model_validate(row) for row in rows]


async def get_record(client: FleetClient, kind: RecordKind[R], record_id: str) -> R:
    async def _fetch() -> dict[str, Any]:
        session = await client.ensure_session()
        return await _tables_api.select_single(
            client._require_transport(),
            session,
            kind.table,
            filters={"id": record_id},
            not_found_message=f"{kind.label} not found.",
        )

    return kind.model.model_validate(await client._call_with_reauth(_fetch))


async def add_record(
    client: FleetClient,
    kind: RecordKind[R],
    data: BaseModel | Mapping[str, Any],
    image: FileUpload | None = None,
) -> R:
    """Insert a record, uploading its image first when one is given."""
    form = coerce_form(kind.input_model, data)
    user_id = await client._require_user_id()

    row: dict[str, Any] = form.to_row()  # type: ignore[attr-defined]
    if image is not None:
        row["image_url"] = await _upload_image(client, kind, image)
    row["created_by"] = user_id

    async def _insert() -> list[dict[str, Any]]:
        session = await client.ensure_session()
        return await _tables_api.insert_rows(client._require_transport(), session, kind.table, [row])

    inserted = await client._call_with_reauth(_insert)
    if not inserted:
        raise FleetNotFoundError(f"{kind.label} insert returned no row", endpoint=kind.table)
    record = kind.model.model_validate(inserted[0])
    _logger.info("%s added: id=%s name=%s", kind.label, record.id, row.get("name"))
    return record


async def update_record(
    client: FleetClient,
    kind: RecordKind[R],
    record_id: str,
    data: BaseModel | Mapping[str, Any],
    image: FileUpload | None = None,
) -> R:
    """Update a record.  A new image replaces (and removes) the old one."""
    form = coerce_form(kind.input_model, data)
    user_id = await client._require_user_id()

    row: dict[str, Any] = form.to_row()  # type: ignore[attr-defined]
    if image is not None:
        current = await get_record(client, kind, record_id)
        await _remove_image(client, kind, getattr(current, "image_url", None))
        row["image_url"] = await _upload_image(client, kind, image)
    row["created_by"] = user_id

    async def _update() -> list[dict[str, Any]]:
        session = await client.ensure_session()
        return await _tables_api.update_rows(
            client._require_transport(),
            session,
            kind.table,
            row,
            filters={"id": record_id},
        )

    updated = await client._call_with_reauth(_update)
    if not updated:
        raise FleetNotFoundError(f"{kind.label} not found.", endpoint=kind.table)
    _logger.info("%s updated: id=%s", kind.label, record_id)
    return kind.model.model_validate(updated[0])


async def delete_record(client: FleetClient, kind: RecordKind[Any], record_id: str) -> None:
    async def _delete() -> list[dict[str, Any]]:
        session = await client.ensure_session()
        return await _tables_api.delete_rows(
            client._require_transport(),
            session,
            kind.table,
            filters={"id": record_id},
        )

    await client._call_with_reauth(_delete)
    _logger.info("%s deleted: id=%s", kind.label, record_id)
