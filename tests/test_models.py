"""Tests for row model parsing with FleetBaseModel."""

from __future__ import annotations

from datetime import UTC, datetime

from fleetdesk.models._base import TicketPriority
from fleetdesk.models.driver import Driver
from fleetdesk.models.maintenance import FuelUpdate, MaintenanceTicket
from fleetdesk.models.profile import Profile
from fleetdesk.models.token import AuthToken
from fleetdesk.models.user import AuthAccount, AuthUser
from fleetdesk.models.vehicle import Vehicle

# ------------------------------------------------------------------
# FleetBaseModel
# ------------------------------------------------------------------


class TestFleetBaseModel:
    def test_raw_keeps_original_row(self) -> None:
        row = {"id": 3, "name": "Truck 1", "make": "", "extra_column": "x"}
        vehicle = Vehicle.model_validate(row)
        assert vehicle.raw == row
        assert vehicle.id == "3"
        assert vehicle.make is None

    def test_null_running_totals_count_as_zero(self) -> None:
        vehicle = Vehicle.model_validate(
            {"id": 1, "name": "Van", "total_distance": None, "total_fuel_cost": "12.5", "total_maintenance_cost": "n/a"}
        )
        assert vehicle.total_distance == 0.0
        assert vehicle.total_fuel_cost == 12.5
        assert vehicle.total_maintenance_cost == 0.0

    def test_timestamps_parsed_to_utc(self) -> None:
        vehicle = Vehicle.model_validate({"id": 1, "name": "Van", "created_at": "2026-03-01T10:00:00+02:00"})
        assert vehicle.created_at == datetime(2026, 3, 1, 8, 0, tzinfo=UTC)

    def test_invalid_timestamp_becomes_none(self) -> None:
        assert Vehicle.model_validate({"id": 1, "created_at": "yesterday"}).created_at is None

    def test_year_string_coerced(self) -> None:
        assert Vehicle.model_validate({"year": "2018.0"}).year == 2018


# ------------------------------------------------------------------
# Rows
# ------------------------------------------------------------------


def test_ticket_priority_is_lenient() -> None:
    assert MaintenanceTicket.model_validate({"priority": "low"}).priority is TicketPriority.LOW
    assert MaintenanceTicket.model_validate({"priority": "urgent"}).priority is TicketPriority.MEDIUM
    ticket = MaintenanceTicket.model_validate({"id": 9, "vehicle": "Van", "issue": "Oil"})
    assert ticket.status == "Pending"
    assert ticket.cost == 0.0


def test_fuel_update_vehicle_id_is_string() -> None:
    update = FuelUpdate.model_validate({"vehicle": "Van", "vehicle_id": 12, "quantity": "30"})
    assert update.vehicle_id == "12"
    assert update.quantity == 30.0


def test_driver_repr_hides_personal_data() -> None:
    driver = Driver.model_validate({"id": 1, "name": "Sam", "social_security": "123-45-6789", "license_number": "X9"})
    assert "123-45-6789" not in repr(driver)
    assert "X9" not in repr(driver)


# ------------------------------------------------------------------
# Auth
# ------------------------------------------------------------------


def test_auth_token_parses_nested_user() -> None:
    token = AuthToken.model_validate(
        {
            "access_token": "at",
            "refresh_token": "rt",
            "expires_in": 3600,
            "user": {"id": "u1", "email": "a@b.co", "user_metadata": {"name": "Ann"}, "email_confirmed_at": None},
        }
    )
    assert token.user.id == "u1"
    assert token.user.is_confirmed is False
    assert token.user.metadata_str("name") == "Ann"
    assert token.user.metadata_str("role") is None


class TestAuthUser:
    def test_profile_values_win(self) -> None:
        account = AuthAccount.model_validate(
            {"id": "u1", "email": "a@b.co", "user_metadata": {"name": "Meta", "role": "driver"}},
        )
        profile = Profile.model_validate(
            {"user_id": "u1", "name": "Ann", "avatar": "https://x/a.png", "company": "Acme"},
        )

        user = AuthUser.from_account(account, profile)

        assert user.name == "Ann"
        assert user.role == "driver"
        assert user.avatar == "https://x/a.png"
        assert user.organization == "Acme"

    def test_without_profile_uses_metadata(self) -> None:
        account = AuthAccount.model_validate({"id": "u1", "email": "a@b.co", "user_metadata": {"name": "Meta"}})
        user = AuthUser.from_account(account)
        assert user.name == "Meta"
        assert user.organization is None
