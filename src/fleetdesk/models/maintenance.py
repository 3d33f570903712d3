"""Maintenance ticket and fuel update models."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from fleetdesk.models._base import Amount, FleetBaseModel, RowId, TicketPriority, Timestamp


class MaintenanceTicket(FleetBaseModel):
    """A maintenance ticket.  ``vehicle`` is the vehicle's name, not its id."""

    id: RowId = ""
    vehicle: str = ""
    issue: str = ""
    priority: TicketPriority = TicketPriority.MEDIUM
    status: str = "Pending"
    cost: Amount = 0.0
    created_by: str | None = None
    created_at: Timestamp = None

    @field_validator("priority", mode="before")
    @classmethod
    def _lenient_priority(cls, value: Any) -> Any:
        try:
            return TicketPriority(value)
        except ValueError:
            return TicketPriority.MEDIUM


class FuelUpdate(FleetBaseModel):
    """A fuel purchase with the distance driven since the last one."""

    id: RowId = ""
    vehicle: str = ""
    """Vehicle name."""
    vehicle_id: str | None = None
    """Vehicle id, when the row carries one."""
    quantity: Amount = 0.0
    """Fuel amount (litres)."""
    cost: Amount = 0.0
    """Cost as entered in the form; added to the vehicle's ``total_fuel_cost`` as-is."""
    distance: Amount = 0.0
    """Distance driven (km)."""
    created_by: str | None = None
    created_at: Timestamp = None

    @field_validator("vehicle_id", mode="before")
    @classmethod
    def _coerce_vehicle_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value
