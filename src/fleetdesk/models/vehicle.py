"""Vehicle model."""

from __future__ import annotations

from fleetdesk.models._base import Amount, FleetBaseModel, OptionalInt, RowId, Timestamp


class Vehicle(FleetBaseModel):
    """A vehicle in the fleet.

    Fields are mapped from the ``vehicles`` table.  The three ``total_*``
    columns are running totals maintained by ticket and fuel-update writes.
    """

    id: RowId = ""
    """Primary key."""
    name: str = ""
    """Display name (e.g. ``"Truck 1"``).  Tickets and fuel updates refer to
    the vehicle by this name."""
    type: str | None = None
    """Body type from :data:`fleetdesk.catalog.VEHICLE_TYPES`."""
    year: OptionalInt = None
    """Model year."""
    make: str | None = None
    model: str | None = None
    manufacturer: str | None = None
    image_url: str | None = None
    """Public URL of the vehicle image."""
    created_by: str | None = None
    """ID of the user who created the row."""
    created_at: Timestamp = None
    total_distance: Amount = 0.0
    """Sum of fuel-update distances (km)."""
    total_fuel_cost: Amount = 0.0
    """Sum of fuel-update costs."""
    total_maintenance_cost: Amount = 0.0
    """Sum of maintenance ticket costs."""
