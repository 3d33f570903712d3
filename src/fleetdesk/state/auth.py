"""Signed-in user mirror with change listeners."""

from __future__ import annotations

import logging
from collections.abc import Callable

from fleetdesk.formatting import user_initials
from fleetdesk.models.user import AuthUser
from fleetdesk.state.events import AuthEvent

_logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthEvent, AuthUser | None], None]


class AuthState:
    """Holds the current :class:`AuthUser` and notifies listeners on change.

    Listeners are called synchronously in registration order.  A listener
    that raises is logged and skipped; it never breaks the auth flow that
    triggered the notification.
    """

    def __init__(self) -> None:
        self._user: AuthUser | None = None
        self._listeners: list[AuthListener] = []

    @property
    def user(self) -> AuthUser | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def initials(self) -> str:
        return user_initials(self._user.name if self._user else None)

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_user(self, event: AuthEvent, user: AuthUser | None) -> None:
        self._user = user
        self._emit(event)

    def clear(self) -> None:
        self.set_user(AuthEvent.SIGNED_OUT, None)

    def _emit(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self._user)
            except Exception:
                _logger.warning("Auth listener %r failed on %s", listener, event, exc_info=True)
