"""Internal maintenance ticket and fuel update operations.

Tickets and fuel updates refer to their vehicle by name and feed the
vehicle's running totals:

* ticket ``cost``        -> ``total_maintenance_cost``
* fuel update ``distance`` -> ``total_distance``
* fuel update ``cost``     -> ``total_fuel_cost``

Every write is two requests (the record and the vehicle totals) without a
transaction.  When the second request fails the first is not undone;
:class:`FleetConsistencyError` reports what did go through.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from typing import TYPE_CHECKING, Any

from fleetdesk._api import tables as _tables_api
from fleetdesk._constants import TABLE_FUEL_UPDATES, TABLE_TICKETS, TABLE_VEHICLES
from fleetdesk.exceptions import FleetConsistencyError, FleetError, FleetNotFoundError, FleetValidationError
from fleetdesk.forms import coerce_form
from fleetdesk.models.maintenance import FuelUpdate, MaintenanceTicket
from fleetdesk.models.requests import FuelUpdateInput, FuelUpdatePatch, TicketInput, TicketPatch
from fleetdesk.models.vehicle import Vehicle

if TYPE_CHECKING:
    from fleetdesk.client import FleetClient

_logger = logging.getLogger(__name__)

VEHICLE_NOT_UNIQUE_MESSAGE = "Vehicle not found or multiple vehicles with the same name exist."


# ------------------------------------------------------------------
# Shared helpers
# ------------------------------------------------------------------


async def _select_single(
    client: FleetClient,
    table: str,
    filters: Mapping[str, Any],
    not_found_message: str,
) -> dict[str, Any]:
    async def _fetch() -> dict[str, Any]:
        session = await client.ensure_session()
        return await _tables_api.select_single(
            client._require_transport(),
            session,
            table,
            filters=filters,
            not_found_message=not_found_message,
        )

    return await client._call_with_reauth(_fetch)


async def _select_ordered(client: FleetClient, table: str) -> list[dict[str, Any]]:
    async def _fetch() -> list[dict[str, Any]]:
        session = await client.ensure_session()
        return await _tables_api.select_rows(
            client._require_transport(),
            session,
            table,
            order="created_at",
            ascending=False,
        )

    return await client._call_with_reauth(_fetch)


async def _write(
    client: FleetClient,
    method: str,
    table: str,
    *,
    values: Mapping[str, Any] | None = None,
    filters: Mapping[str, Any] | None = None,
) -> list[dict[str, Any]]:
    async def _call() -> list[dict[str, Any]]:
        session = await client.ensure_session()
        transport = client._require_transport()
        if method == "insert":
            return await _tables_api.insert_rows(transport, session, table, [dict(values or {})])
        if method == "update":
            return await _tables_api.update_rows(transport, session, table, dict(values or {}), filters=filters or {})
        return await _tables_api.delete_rows(transport, session, table, filters=filters or {})

    return await client._call_with_reauth(_call)


async def resolve_vehicle(client: FleetClient, name: str) -> Vehicle:
    """Return the one vehicle named exactly *name*."""
    row = await _select_single(client, TABLE_VEHICLES, {"name": name}, VEHICLE_NOT_UNIQUE_MESSAGE)
    return Vehicle.model_validate(row)


async def adjust_vehicle_totals(client: FleetClient, vehicle: Vehicle, **deltas: float) -> Vehicle:
    """Add *deltas* to the vehicle's running totals (``total_*`` columns).

    Totals are computed from *vehicle* as fetched; a ``null`` total counts
    as ``0``.
    """
    values = {column: getattr(vehicle, column) + delta for column, delta in deltas.items()}
    rows = await _write(client, "update", TABLE_VEHICLES, values=values, filters={"id": vehicle.id})
    if not rows:
        raise FleetNotFoundError(f"Vehicle {vehicle.id} disappeared while updating totals", endpoint=TABLE_VEHICLES)
    _logger.debug("Vehicle %s totals adjusted by %s", vehicle.id, deltas)
    return Vehicle.model_validate(rows[0])


async def _secondary(primary: Any, description: str, pending: Awaitable[Any]) -> None:
    try:
        await pending
    except FleetError as exc:
        _logger.warning("%s; the primary write is kept", description)
        raise FleetConsistencyError(description, primary=primary) from exc


# ------------------------------------------------------------------
# Tickets
# ------------------------------------------------------------------


async def list_tickets(client: FleetClient) -> list[MaintenanceTicket]:
    return [MaintenanceTicket.model_validate(row) for row in await _select_ordered(client, TABLE_TICKETS)]


async def get_ticket(client: FleetClient, ticket_id: str) -> MaintenanceTicket:
    row = await _select_single(client, TABLE_TICKETS, {"id": ticket_id}, "Ticket not found.")
    return MaintenanceTicket.model_validate(row)


async def add_ticket(client: FleetClient, data: TicketInput | Mapping[str, Any]) -> MaintenanceTicket:
    form = coerce_form(TicketInput, data)
    user_id = await client._require_user_id()
    vehicle = await resolve_vehicle(client, form.vehicle)

    rows = await _write(client, "insert", TABLE_TICKETS, values={**form.to_row(), "created_by": user_id})
    ticket = MaintenanceTicket.model_validate(rows[0] if rows else {})
    _logger.info("Ticket added: id=%s vehicle=%s cost=%s", ticket.id, form.vehicle, form.cost)

    await _secondary(
        ticket,
        "Ticket added but the vehicle's maintenance cost was not updated",
        adjust_vehicle_totals(client, vehicle, total_maintenance_cost=form.cost or 0.0),
    )
    return ticket


async def edit_ticket(
    client: FleetClient,
    ticket_id: str,
    data: TicketPatch | Mapping[str, Any],
) -> MaintenanceTicket:
    """Update a ticket and move the cost difference onto the vehicle.

    When the ticket is reassigned to another vehicle, the old cost leaves
    the old vehicle and the new cost lands on the new one.
    """
    form = coerce_form(TicketPatch, data)
    current = await get_ticket(client, ticket_id)
    old_vehicle = await resolve_vehicle(client, current.vehicle)
    new_cost = current.cost if form.cost is None else form.cost
    new_vehicle = old_vehicle
    if form.vehicle is not None and form.vehicle != current.vehicle:
        new_vehicle = await resolve_vehicle(client, form.vehicle)

    rows = await _write(client, "update", TABLE_TICKETS, values=form.to_row(), filters={"id": ticket_id})
    if not rows:
        raise FleetNotFoundError("Ticket not found.", endpoint=TABLE_TICKETS)
    ticket = MaintenanceTicket.model_validate(rows[0])

    async def _apply() -> None:
        if new_vehicle.id != old_vehicle.id:
            await adjust_vehicle_totals(client, old_vehicle, total_maintenance_cost=-current.cost)
            await adjust_vehicle_totals(client, new_vehicle, total_maintenance_cost=new_cost)
        elif new_cost != current.cost:
            await adjust_vehicle_totals(client, old_vehicle, total_maintenance_cost=new_cost - current.cost)

    await _secondary(ticket, "Ticket updated but the vehicle's maintenance cost was not updated", _apply())
    return ticket


async def delete_ticket(client: FleetClient, ticket_id: str) -> MaintenanceTicket:
    """Delete a ticket and subtract its cost from the vehicle.  Returns the deleted ticket."""
    current = await get_ticket(client, ticket_id)
    vehicle = await resolve_vehicle(client, current.vehicle)

    await _write(client, "delete", TABLE_TICKETS, filters={"id": ticket_id})
    _logger.info("Ticket deleted: id=%s", ticket_id)

    await _secondary(
        current,
        "Ticket deleted but the vehicle's maintenance cost was not updated",
        adjust_vehicle_totals(client, vehicle, total_maintenance_cost=-current.cost),
    )
    return current


# ------------------------------------------------------------------
# Fuel updates
# ------------------------------------------------------------------


async def list_fuel_updates(client: FleetClient) -> list[FuelUpdate]:
    return [FuelUpdate.model_validate(row) for row in await _select_ordered(client, TABLE_FUEL_UPDATES)]


async def get_fuel_update(client: FleetClient, fuel_update_id: str) -> FuelUpdate:
    row = await _select_single(client, TABLE_FUEL_UPDATES, {"id": fuel_update_id}, "Fuel update not found.")
    return FuelUpdate.model_validate(row)


async def add_fuel_update(client: FleetClient, data: FuelUpdateInput | Mapping[str, Any]) -> FuelUpdate:
    """Record a fuel update.

    The vehicle's totals are updated first; if recording the fuel update
    then fails, the totals stay updated and :class:`FleetConsistencyError`
    carries the updated vehicle.
    """
    form = coerce_form(FuelUpdateInput, data)
    user_id = await client._require_user_id()
    vehicle = await resolve_vehicle(client, form.vehicle)
    if form.vehicle_id is not None and form.vehicle_id != vehicle.id:
        message = f"Vehicle id {form.vehicle_id} does not match vehicle {form.vehicle!r}."
        raise FleetValidationError({"vehicle_id": message})

    updated_vehicle = await adjust_vehicle_totals(
        client,
        vehicle,
        total_distance=form.distance or 0.0,
        total_fuel_cost=form.cost or 0.0,
    )

    try:
        rows = await _write(
            client,
            "insert",
            TABLE_FUEL_UPDATES,
            values={**form.to_row(), "vehicle_id": vehicle.id, "created_by": user_id},
        )
    except FleetError as exc:
        _logger.warning("Vehicle %s totals updated but the fuel update was not recorded", vehicle.id)
        raise FleetConsistencyError(
            "Vehicle totals updated but the fuel update was not recorded",
            primary=updated_vehicle,
        ) from exc

    fuel_update = FuelUpdate.model_validate(rows[0] if rows else {})
    _logger.info("Fuel update added: id=%s vehicle=%s", fuel_update.id, form.vehicle)
    return fuel_update


async def edit_fuel_update(
    client: FleetClient,
    fuel_update_id: str,
    data: FuelUpdatePatch | Mapping[str, Any],
) -> FuelUpdate:
    form = coerce_form(FuelUpdatePatch, data)
    current = await get_fuel_update(client, fuel_update_id)
    old_vehicle = await resolve_vehicle(client, current.vehicle)
    new_cost = current.cost if form.cost is None else form.cost
    new_distance = current.distance if form.distance is None else form.distance
    new_vehicle = old_vehicle
    if form.vehicle is not None and form.vehicle != current.vehicle:
        new_vehicle = await resolve_vehicle(client, form.vehicle)

    # vehicle_id always names the vehicle carrying this row's amounts.
    values = {**form.to_row(), "vehicle_id": new_vehicle.id}
    rows = await _write(client, "update", TABLE_FUEL_UPDATES, values=values, filters={"id": fuel_update_id})
    if not rows:
        raise FleetNotFoundError("Fuel update not found.", endpoint=TABLE_FUEL_UPDATES)
    fuel_update = FuelUpdate.model_validate(rows[0])

    async def _apply() -> None:
        if new_vehicle.id != old_vehicle.id:
            await adjust_vehicle_totals(
                client,
                old_vehicle,
                total_distance=-current.distance,
                total_fuel_cost=-current.cost,
            )
            await adjust_vehicle_totals(client, new_vehicle, total_distance=new_distance, total_fuel_cost=new_cost)
        elif new_cost != current.cost or new_distance != current.distance:
            await adjust_vehicle_totals(
                client,
                old_vehicle,
                total_distance=new_distance - current.distance,
                total_fuel_cost=new_cost - current.cost,
            )

    await _secondary(fuel_update, "Fuel update changed but the vehicle's totals were not updated", _apply())
    return fuel_update


async def delete_fuel_update(client: FleetClient, fuel_update_id: str) -> FuelUpdate:
    current = await get_fuel_update(client, fuel_update_id)
    vehicle = await resolve_vehicle(client, current.vehicle)

    await _write(client, "delete", TABLE_FUEL_UPDATES, filters={"id": fuel_update_id})
    _logger.info("Fuel update deleted: id=%s", fuel_update_id)

    await _secondary(
        current,
        "Fuel update deleted but the vehicle's totals were not updated",
        adjust_vehicle_totals(client, vehicle, total_distance=-current.distance, total_fuel_cost=-current.cost),
    )
    return current
