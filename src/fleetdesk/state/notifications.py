"""In-memory notification list.

Notifications are identified by their creation time in epoch milliseconds.
Read notifications are pruned once they are older than the retention
window; unread ones are kept until removed.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from fleetdesk._constants import NOTIFICATION_READ_RETENTION_SECONDS
from fleetdesk.models.notification import Notification, NotificationType


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class NotificationCenter:
    """Ordered list of notifications, oldest first."""

    def __init__(
        self,
        *,
        clock_ms: Callable[[], int] = _now_ms,
        read_retention_seconds: float = NOTIFICATION_READ_RETENTION_SECONDS,
    ) -> None:
        self._clock_ms = clock_ms
        self._retention_ms = int(read_retention_seconds * 1000)
        self._items: list[Notification] = []
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._items)

    @property
    def notifications(self) -> list[Notification]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._items if not item.read)

    def _next_id(self) -> int:
        # Two adds in the same millisecond must still get distinct ids.
        candidate = max(self._clock_ms(), self._last_id + 1)
        self._last_id = candidate
        return candidate

    def add(
        self,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.INFO,
    ) -> Notification:
        notification = Notification(
            id=self._next_id(),
            title=title,
            message=message,
            type=NotificationType(type),
        )
        self._items.append(notification)
        return notification

    def get(self, notification_id: int) -> Notification | None:
        for item in self._items:
            if item.id == notification_id:
                return item
        return None

    def mark_as_read(self, notification_id: int) -> bool:
        """Mark one notification read.  Returns ``False`` for unknown ids."""
        for index, item in enumerate(self._items):
            if item.id == notification_id:
                if not item.read:
                    self._items[index] = item.model_copy(update={"read": True})
                return True
        return False

    def mark_all_as_read(self) -> None:
        self._items = [item if item.read else item.model_copy(update={"read": True}) for item in self._items]

    def remove(self, notification_id: int) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != notification_id]
        return len(self._items) != before

    def prune(self, now_ms: int | None = None) -> list[Notification]:
        """Drop read notifications older than the retention window.

        Age is measured from creation (the id), not from when the
        notification was read.  Returns the removed notifications.
        """
        now = self._clock_ms() if now_ms is None else now_ms
        kept: list[Notification] = []
        removed: list[Notification] = []
        for item in self._items:
            if item.read and now - item.id >= self._retention_ms:
                removed.append(item)
            else:
                kept.append(item)
        self._items = kept
        return removed

    def clear(self) -> None:
        self._items.clear()
