"""Driver model."""

from __future__ import annotations

from fleetdesk.models._base import FleetBaseModel, RowId, Timestamp


class Driver(FleetBaseModel):
    """A driver, optionally assigned to a vehicle by name."""

    id: RowId = ""
    name: str = ""
    vehicle: str | None = None
    """Name of the assigned vehicle."""
    license_number: str | None = None
    license_expiry: Timestamp = None
    social_security: str | None = None
    join_date: Timestamp = None
    image_url: str | None = None
    created_by: str | None = None
    created_at: Timestamp = None

    def __repr__(self) -> str:
        # Keep personal data out of reprs that end up in logs.
        return f"Driver(id={self.id!r}, name={self.name!r}, vehicle={self.vehicle!r})"
