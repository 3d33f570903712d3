"""Client-side state.

In-memory mirrors of what the app shows between backend calls: the
signed-in user (with change listeners) and the notification list.
"""

from fleetdesk.state.auth import AuthListener, AuthState
from fleetdesk.state.events import AuthEvent
from fleetdesk.state.notifications import NotificationCenter

__all__ = ["AuthEvent", "AuthListener", "AuthState", "NotificationCenter"]
