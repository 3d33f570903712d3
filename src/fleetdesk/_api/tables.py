"""Table endpoints.

Endpoint:
  - /rest/v1/<table>

Rows are plain dicts here; the client layer turns them into models.
Filters are equality filters encoded as ``column=eq.value``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from fleetdesk._api._common import access_token_of, raise_for_response
from fleetdesk._constants import REST_PREFIX
from fleetdesk._transport import Transport
from fleetdesk.exceptions import FleetNotFoundError
from fleetdesk.session import Session

_logger = logging.getLogger(__name__)

_RETURN_REPRESENTATION = {"prefer": "return=representation"}


def _endpoint(table: str) -> str:
    return f"{REST_PREFIX}/{table}"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def build_params(
    *,
    filters: Mapping[str, Any] | None = None,
    columns: str | None = None,
    order: str | None = None,
    ascending: bool = True,
    limit: int | None = None,
) -> dict[str, str]:
    """Encode a query as table API query parameters."""
    params: dict[str, str] = {}
    if columns is not None:
        params["select"] = columns
    for column, value in (filters or {}).items():
        op = "is" if value is None else "eq"
        params[column] = f"{op}.{_format_value(value)}"
    if order:
        params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
    if limit is not None:
        params["limit"] = str(limit)
    return params


def _rows(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, dict)]
    if isinstance(payload, dict):
        return [payload]
    return []


async def select_rows(
    transport: Transport,
    session: Session | None,
    table: str,
    *,
    filters: Mapping[str, Any] | None = None,
    columns: str = "*",
    order: str | None = None,
    ascending: bool = True,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    endpoint = _endpoint(table)
    response = await transport.request(
        "GET",
        endpoint,
        params=build_params(filters=filters, columns=columns, order=order, ascending=ascending, limit=limit),
        access_token=access_token_of(session),
    )
    return _rows(raise_for_response(response, endpoint=endpoint))


async def select_single(
    transport: Transport,
    session: Session | None,
    table: str,
    *,
    filters: Mapping[str, Any],
    not_found_message: str | None = None,
) -> dict[str, Any]:
    """Return the only row matching *filters*.

    Raises
    ------
    FleetNotFoundError
        When no row or more than one row matches.
    """
    rows = await select_rows(transport, session, table, filters=filters, limit=2)
    if len(rows) != 1:
        message = not_found_message or f"Expected one row in {table} for {dict(filters)}, found {len(rows)}"
        raise FleetNotFoundError(message, code="PGRST116", endpoint=_endpoint(table))
    return rows[0]


async def insert_rows(
    transport: Transport,
    session: Session | None,
    table: str,
    rows: Sequence[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    endpoint = _endpoint(table)
    response = await transport.request(
        "POST",
        endpoint,
        params={"select": "*"},
        json_body=[dict(row) for row in rows],
        headers=_RETURN_REPRESENTATION,
        access_token=access_token_of(session),
    )
    inserted = _rows(raise_for_response(response, endpoint=endpoint))
    _logger.debug("Inserted %d row(s) into %s", len(inserted), table)
    return inserted


async def update_rows(
    transport: Transport,
    session: Session | None,
    table: str,
    values: Mapping[str, Any],
    *,
    filters: Mapping[str, Any],
) -> list[dict[str, Any]]:
    endpoint = _endpoint(table)
    params = build_params(filters=filters, columns="*")
    response = await transport.request(
        "PATCH",
        endpoint,
        params=params,
        json_body=dict(values),
        headers=_RETURN_REPRESENTATION,
        access_token=access_token_of(session),
    )
    updated = _rows(raise_for_response(response, endpoint=endpoint))
    _logger.debug("Updated %d row(s) in %s", len(updated), table)
    return updated


async def delete_rows(
    transport: Transport,
    session: Session | None,
    table: str,
    *,
    filters: Mapping[str, Any],
) -> list[dict[str, Any]]:
    if not filters:
        # An unfiltered DELETE would wipe the table.
        raise ValueError("delete_rows requires at least one filter")
    endpoint = _endpoint(table)
    response = await transport.request(
        "DELETE",
        endpoint,
        params=build_params(filters=filters, columns="*"),
        headers=_RETURN_REPRESENTATION,
        access_token=access_token_of(session),
    )
    deleted = _rows(raise_for_response(response, endpoint=endpoint))
    _logger.debug("Deleted %d row(s) from %s", len(deleted), table)
    return deleted
