from __future__ import annotations

from fleetdesk.models.notification import NotificationType
from fleetdesk.state.notifications import NotificationCenter

BASE_MS = 1_771_000_000_000


class _Clock:
    def __init__(self, start: int = BASE_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now


def test_add_assigns_unique_increasing_ids_within_same_millisecond() -> None:
    center = NotificationCenter(clock_ms=_Clock())

    first = center.add("Saved", "Vehicle saved")
    second = center.add("Saved", "Driver saved", "success")

    assert first.id == BASE_MS
    assert second.id == BASE_MS + 1
    assert second.type is NotificationType.SUCCESS
    assert center.unread_count == 2
    assert len(center) == 2


def test_mark_as_read_and_remove() -> None:
    center = NotificationCenter(clock_ms=_Clock())
    item = center.add("Heads up", "Insurance expires soon", NotificationType.WARNING)

    assert center.mark_as_read(item.id) is True
    assert center.get(item.id).read is True  # type: ignore[union-attr]
    assert center.unread_count == 0
    assert center.mark_as_read(12345) is False

    assert center.remove(item.id) is True
    assert center.remove(item.id) is False
    assert center.notifications == []


def test_mark_all_as_read() -> None:
    center = NotificationCenter(clock_ms=_Clock())
    center.add("a", "a")
    center.add("b", "b")
    center.mark_all_as_read()
    assert center.unread_count == 0


def test_prune_drops_only_old_read_notifications() -> None:
    clock = _Clock()
    center = NotificationCenter(clock_ms=clock)
    old_read = center.add("old", "read")
    old_unread = center.add("old", "unread")
    clock.now += 10 * 60 * 1000
    fresh_read = center.add("fresh", "read")
    center.mark_as_read(old_read.id)
    center.mark_as_read(fresh_read.id)

    clock.now = BASE_MS + 30 * 60 * 1000
    removed = center.prune()

    assert [n.id for n in removed] == [old_read.id]
    assert [n.id for n in center.notifications] == [old_unread.id, fresh_read.id]


def test_prune_with_explicit_now_and_custom_retention() -> None:
    center = NotificationCenter(clock_ms=_Clock(), read_retention_seconds=1)
    item = center.add("x", "y")
    center.mark_as_read(item.id)

    assert center.prune(now_ms=BASE_MS + 999) == []
    assert len(center.prune(now_ms=BASE_MS + 1000)) == 1
