"""Tests for request models and form validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fleetdesk.exceptions import FleetValidationError
from fleetdesk.forms import FORM_ERROR_KEY, coerce_form, validate_form
from fleetdesk.models._base import TicketPriority
from fleetdesk.models.requests import (
    ContactRequest,
    DriverInput,
    FileUpload,
    FuelUpdateInput,
    FuelUpdatePatch,
    PasswordResetRequest,
    ProfileUpdate,
    SignUpRequest,
    TicketInput,
    TicketPatch,
    VehicleInput,
)

_VALID_SIGNUP = {
    "name": "Nora",
    "email": "nora@example.com",
    "password": "hunter22",
    "confirm_password": "hunter22",
    "role": "manager",
}


# ------------------------------------------------------------------
# Sign-up
# ------------------------------------------------------------------


class TestSignUpRequest:
    def test_valid(self) -> None:
        form = validate_form(SignUpRequest, {**_VALID_SIGNUP, "name": "  Nora  "})
        assert form.name == "Nora"
        assert form.organization is None

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"role": ""}, "Please fill in all required fields."),
            ({"confirm_password": "other"}, "Passwords do not match."),
            ({"password": "abc", "confirm_password": "abc"}, "Password must be at least 6 characters long."),
            ({"email": "nora@example"}, "Please enter a valid email address."),
            ({"role": "owner"}, "Please select a valid role."),
        ],
    )
    def test_first_failing_check_is_reported(self, overrides: dict[str, str], message: str) -> None:
        with pytest.raises(FleetValidationError) as exc_info:
            validate_form(SignUpRequest, {**_VALID_SIGNUP, **overrides})
        assert str(exc_info.value) == message
        assert exc_info.value.errors == {FORM_ERROR_KEY: message}

    def test_mismatch_reported_before_length(self) -> None:
        with pytest.raises(FleetValidationError, match="Passwords do not match."):
            validate_form(SignUpRequest, {**_VALID_SIGNUP, "password": "abc", "confirm_password": "abd"})

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SignUpRequest.model_validate({**_VALID_SIGNUP, "is_admin": True})


def test_password_reset_request() -> None:
    with pytest.raises(FleetValidationError, match="Please fill in all required fields."):
        validate_form(PasswordResetRequest, {"new_password": "abcdef"})
    with pytest.raises(FleetValidationError) as exc_info:
        validate_form(PasswordResetRequest, {"new_password": "abcdef", "confirm_password": "abcdeg"})
    assert str(exc_info.value) == "Passwords do not match"


def test_contact_request_reports_every_field() -> None:
    with pytest.raises(FleetValidationError) as exc_info:
        validate_form(ContactRequest, {"name": " ", "email": "not-an-email", "message": ""})
    assert exc_info.value.errors == {
        "name": "Name is required",
        "email": "Email is invalid",
        "message": "Message is required",
    }

    with pytest.raises(FleetValidationError) as exc_info:
        validate_form(ContactRequest, {"name": "A", "email": "", "message": "hi"})
    assert exc_info.value.errors == {"email": "Email is required"}


# ------------------------------------------------------------------
# Fleet records
# ------------------------------------------------------------------


def test_vehicle_input_coerces_year_and_requires_name() -> None:
    form = validate_form(VehicleInput, {"name": " Truck 1 ", "year": "2019"})
    assert form.name == "Truck 1"
    assert form.to_row()["year"] == 2019

    assert validate_form(VehicleInput, {"name": "Van", "year": ""}).year is None

    with pytest.raises(FleetValidationError) as exc_info:
        validate_form(VehicleInput, {"name": "   "})
    assert exc_info.value.errors == {"name": "Please fill out all required fields."}


def test_driver_input_serializes_dates_and_hides_personal_data() -> None:
    form = validate_form(
        DriverInput,
        {"name": "Sam", "join_date": "2024-03-01", "license_expiry": "", "social_security": "123-45-6789"},
    )
    row = form.to_row()
    assert row["join_date"] == "2024-03-01T00:00:00.000Z"
    assert row["license_expiry"] is None
    assert "123-45-6789" not in repr(form)


class TestTicketInput:
    def test_defaults(self) -> None:
        form = validate_form(TicketInput, {"vehicle": "Truck 1", "issue": "Brakes", "cost": "99.5"})
        assert form.priority is TicketPriority.MEDIUM
        assert form.status == "Pending"
        assert form.to_row() == {
            "vehicle": "Truck 1",
            "issue": "Brakes",
            "priority": "Medium",
            "status": "Pending",
            "cost": 99.5,
        }

    def test_priority_is_case_insensitive(self) -> None:
        form = validate_form(TicketInput, {"vehicle": "V", "issue": "I", "cost": 1, "priority": "high"})
        assert form.priority is TicketPriority.HIGH

    @pytest.mark.parametrize("missing", ["vehicle", "issue", "cost"])
    def test_required_fields(self, missing: str) -> None:
        data = {"vehicle": "Truck 1", "issue": "Brakes", "cost": "10"}
        data[missing] = ""
        with pytest.raises(FleetValidationError, match="Please fill out all required fields."):
            validate_form(TicketInput, data)

    def test_patch_only_sends_given_columns(self) -> None:
        assert TicketPatch(cost=5).to_row() == {"cost": 5.0}
        assert TicketPatch(status="Completed").to_row() == {"status": "Completed"}

    def test_blank_patch_vehicle_leaves_vehicle_unchanged(self) -> None:
        patch = TicketPatch(vehicle="  ", cost="60")
        assert patch.vehicle is None
        assert patch.to_row() == {"cost": 60.0}


class TestFuelUpdateInput:
    def test_estimated_total(self) -> None:
        form = validate_form(FuelUpdateInput, {"vehicle": "Van", "quantity": "40", "distance": "320", "cost": "1.5"})
        assert form.estimated_total == pytest.approx(60.0)
        assert form.to_row() == {"vehicle": "Van", "quantity": 40.0, "distance": 320.0, "cost": 1.5}

    def test_non_numeric_quantity_is_missing(self) -> None:
        with pytest.raises(FleetValidationError, match="Please fill out all required fields."):
            validate_form(FuelUpdateInput, {"vehicle": "Van", "quantity": "abc", "distance": "1", "cost": "1"})

    def test_patch(self) -> None:
        assert FuelUpdatePatch(distance="12").to_row() == {"distance": 12.0}
        assert FuelUpdatePatch(vehicle="", cost="3").to_row() == {"cost": 3.0}

    def test_integer_vehicle_id_is_carried_as_text(self) -> None:
        form = validate_form(
            FuelUpdateInput,
            {"vehicle": "Van", "vehicle_id": 3, "quantity": "1", "distance": "1", "cost": "1"},
        )
        assert form.vehicle_id == "3"


def test_profile_update_excludes_unset_fields() -> None:
    assert ProfileUpdate(name="Jane", bio="").to_row() == {"name": "Jane", "bio": ""}
    assert ProfileUpdate().to_row() == {}


# ------------------------------------------------------------------
# Files
# ------------------------------------------------------------------


def test_file_upload_extension_and_content_type() -> None:
    upload = FileUpload(data=b"x", filename="photo.final.JPG")
    assert upload.extension == "JPG"
    assert upload.resolved_content_type == "image/jpeg"
    assert FileUpload(data=b"x", filename="blob").resolved_content_type == "application/octet-stream"
    assert FileUpload(data=b"x", filename="a.png", content_type="image/webp").resolved_content_type == "image/webp"


def test_file_upload_requires_filename() -> None:
    with pytest.raises(ValidationError):
        FileUpload(data=b"x", filename="  ")


# ------------------------------------------------------------------
# coerce_form
# ------------------------------------------------------------------


def test_coerce_form_accepts_model_or_mapping() -> None:
    model = VehicleInput(name="Van")
    assert coerce_form(VehicleInput, model) is model
    assert coerce_form(VehicleInput, {"name": "Van"}).name == "Van"
    with pytest.raises(TypeError):
        coerce_form(VehicleInput, ["Van"])  # type: ignore[arg-type]
