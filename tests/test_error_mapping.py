from __future__ import annotations

from typing import Any

import pytest

from fleetdesk._api import storage as storage_api
from fleetdesk._api import tables as tables_api
from fleetdesk._api._common import parse_error, raise_for_response
from fleetdesk._transport import RestResponse
from fleetdesk.exceptions import (
    FleetApiError,
    FleetAuthenticationError,
    FleetEmailNotConfirmedError,
    FleetNotFoundError,
    FleetSessionExpiredError,
    FleetStorageError,
)
from fleetdesk.session import Session

# ------------------------------------------------------------------
# Error bodies
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"code": "PGRST116", "message": "no rows"}, ("PGRST116", "no rows")),
        (
            {"error_code": "email_not_confirmed", "msg": "Email not confirmed"},
            ("email_not_confirmed", "Email not confirmed"),
        ),
        ({"error": "invalid_grant", "error_description": "Invalid login"}, ("invalid_grant", "Invalid login")),
        (None, ("502", "HTTP 502")),
    ],
)
def test_parse_error(payload: Any, expected: tuple[str, str]) -> None:
    assert parse_error(payload, 502) == expected


class TestRaiseForResponse:
    def test_ok_returns_payload(self) -> None:
        assert raise_for_response(RestResponse(status=200, payload=[1]), endpoint="/x") == [1]

    def test_expired_jwt(self) -> None:
        with pytest.raises(FleetSessionExpiredError):
            raise_for_response(
                RestResponse(status=401, payload={"code": "PGRST301", "message": "JWT expired"}),
                endpoint="/x",
            )
        with pytest.raises(FleetSessionExpiredError):
            raise_for_response(RestResponse(status=401, payload={"message": "jwt malformed"}), endpoint="/x")

    def test_email_not_confirmed(self) -> None:
        response = RestResponse(status=400, payload={"code": 400, "error_code": "x", "msg": "Email not confirmed"})
        with pytest.raises(FleetEmailNotConfirmedError):
            raise_for_response(response, endpoint="/auth/v1/token", auth_errors=True)

    def test_auth_errors(self) -> None:
        response = RestResponse(status=400, payload={"error": "invalid_grant", "error_description": "Invalid login"})
        with pytest.raises(FleetAuthenticationError, match="Invalid login") as exc_info:
            raise_for_response(response, endpoint="/auth/v1/token", auth_errors=True)
        assert exc_info.value.code == "invalid_grant"
        assert exc_info.value.status_code == 400

    def test_not_found(self) -> None:
        with pytest.raises(FleetNotFoundError):
            raise_for_response(RestResponse(status=404, payload=None), endpoint="/x")

    def test_generic_and_custom_error_class(self) -> None:
        response = RestResponse(status=500, payload={"code": "XX000", "message": "boom"})
        with pytest.raises(FleetApiError, match="/x failed: code=XX000 message=boom") as exc_info:
            raise_for_response(response, endpoint="/x")
        assert type(exc_info.value) is FleetApiError
        with pytest.raises(FleetStorageError):
            raise_for_response(response, endpoint="/x", error_cls=FleetStorageError)


# ------------------------------------------------------------------
# Table queries
# ------------------------------------------------------------------


def test_build_params() -> None:
    params = tables_api.build_params(
        filters={"name": "Truck 1", "archived": False, "vehicle_id": None},
        columns="*",
        order="created_at",
        ascending=False,
        limit=2,
    )
    assert params == {
        "select": "*",
        "name": "eq.Truck 1",
        "archived": "eq.false",
        "vehicle_id": "is.null",
        "order": "created_at.desc",
        "limit": "2",
    }


class _RecordingTransport:
    def __init__(self, response: RestResponse) -> None:
        self.response = response
        self.requests: list[dict[str, Any]] = []

    async def request(self, method: str, endpoint: str, **kwargs: Any) -> RestResponse:
        self.requests.append({"method": method, "endpoint": endpoint, **kwargs})
        return self.response


def _session() -> Session:
    return Session(user_id="u1", access_token="at", refresh_token="rt")


@pytest.mark.asyncio
async def test_select_single_requires_exactly_one_row() -> None:
    transport = _RecordingTransport(RestResponse(status=200, payload=[{"id": 1}, {"id": 2}]))
    with pytest.raises(FleetNotFoundError, match="Vehicle not found."):
        await tables_api.select_single(
            transport,
            _session(),
            "vehicles",
            filters={"name": "Twin"},
            not_found_message="Vehicle not found.",
        )

    request = transport.requests[0]
    assert request["params"]["limit"] == "2"
    assert request["access_token"] == "at"


@pytest.mark.asyncio
async def test_writes_ask_for_representation() -> None:
    transport = _RecordingTransport(RestResponse(status=201, payload=[{"id": 1, "name": "Van"}]))
    rows = await tables_api.insert_rows(transport, _session(), "vehicles", [{"name": "Van"}])
    assert rows == [{"id": 1, "name": "Van"}]
    request = transport.requests[0]
    assert request["method"] == "POST"
    assert request["endpoint"] == "/rest/v1/vehicles"
    assert request["headers"] == {"prefer": "return=representation"}


@pytest.mark.asyncio
async def test_delete_without_filters_is_refused() -> None:
    transport = _RecordingTransport(RestResponse(status=200, payload=[]))
    with pytest.raises(ValueError):
        await tables_api.delete_rows(transport, _session(), "vehicles", filters={})
    assert transport.requests == []


# ------------------------------------------------------------------
# Storage
# ------------------------------------------------------------------


def test_public_url_and_object_paths() -> None:
    url = storage_api.public_url("https://x.example.com/", "vehicle-images", "vehicle-images/1700.png")
    assert url == "https://x.example.com/storage/v1/object/public/vehicle-images/vehicle-images/1700.png"
    assert storage_api.object_path_from_url(url, "vehicle-images") == "vehicle-images/1700.png"
    assert storage_api.object_name_from_url(url) == "1700.png"
    assert storage_api.object_path_from_url("https://cdn.example.com/a/b.png", "vehicle-images") == "b.png"
    assert storage_api.object_name_from_url(None) is None


@pytest.mark.asyncio
async def test_upload_sends_upsert_and_cache_headers() -> None:
    transport = _RecordingTransport(RestResponse(status=200, payload={"Key": "avatars/a.png"}))
    key = await storage_api.upload_object(
        transport,
        _session(),
        "avatars",
        "a.png",
        b"png",
        content_type="image/png",
        upsert=True,
        cache_control="3600",
    )
    assert key == "avatars/a.png"
    headers = transport.requests[0]["headers"]
    assert headers["x-upsert"] == "true"
    assert headers["cache-control"] == "max-age=3600"


@pytest.mark.asyncio
async def test_storage_errors_raise_storage_error() -> None:
    transport = _RecordingTransport(RestResponse(status=400, payload={"error": "Duplicate", "message": "exists"}))
    with pytest.raises(FleetStorageError):
        await storage_api.remove_objects(transport, _session(), "avatars", ["a.png"])
