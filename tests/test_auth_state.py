from __future__ import annotations

import logging

import pytest

from fleetdesk.models.user import AuthUser
from fleetdesk.state.auth import AuthState
from fleetdesk.state.events import AuthEvent


def _user(name: str | None = "Jane Manager") -> AuthUser:
    return AuthUser(id="u1", email="jane@example.com", name=name)


def test_listeners_receive_events_in_order() -> None:
    state = AuthState()
    seen: list[tuple[AuthEvent, str | None]] = []
    state.subscribe(lambda event, user: seen.append((event, user.id if user else None)))

    state.set_user(AuthEvent.SIGNED_IN, _user())
    state.set_user(AuthEvent.USER_UPDATED, _user("Jane Boss"))
    state.clear()

    assert seen == [
        (AuthEvent.SIGNED_IN, "u1"),
        (AuthEvent.USER_UPDATED, "u1"),
        (AuthEvent.SIGNED_OUT, None),
    ]
    assert state.is_authenticated is False


def test_unsubscribe_stops_notifications() -> None:
    state = AuthState()
    seen: list[AuthEvent] = []
    unsubscribe = state.subscribe(lambda event, _user: seen.append(event))

    unsubscribe()
    unsubscribe()
    state.set_user(AuthEvent.SIGNED_IN, _user())

    assert seen == []


def test_failing_listener_is_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    state = AuthState()
    seen: list[AuthEvent] = []

    def _broken(_event: AuthEvent, _user: AuthUser | None) -> None:
        raise RuntimeError("listener bug")

    state.subscribe(_broken)
    state.subscribe(lambda event, _user: seen.append(event))

    with caplog.at_level(logging.WARNING, logger="fleetdesk.state.auth"):
        state.set_user(AuthEvent.SIGNED_IN, _user())

    assert seen == [AuthEvent.SIGNED_IN]
    assert state.user is not None
    assert "listener" in caplog.text


def test_initials_follow_current_user() -> None:
    state = AuthState()
    assert state.initials == "U"
    state.set_user(AuthEvent.SIGNED_IN, _user())
    assert state.initials == "JM"
