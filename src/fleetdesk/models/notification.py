"""In-app notification model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class NotificationType(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """A notification held by :class:`fleetdesk.state.NotificationCenter`.

    ``id`` is the creation time in epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    read: bool = False
