# storefront/core/notifications.py
"""
Transient user-facing notifications ("toasts").

Session operations and profile saves push a success or error message here.
The front-end drains the buffer through GET /notifications and shows each
entry once.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Literal

from sqlmodel import SQLModel, Field

logger = logging.getLogger(__name__)

NotificationKind = Literal["success", "error"]


class Notification(SQLModel):
    kind: NotificationKind
    message: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Notifier:
    """
    Bounded in-memory toast buffer.

    Oldest entries are dropped once `maxlen` is reached, the way stacked
    toasts fall off screen.
    """

    def __init__(self, maxlen: int = 50):
        self._items: deque[Notification] = deque(maxlen=maxlen)

    def success(self, message: str) -> None:
        self._push("success", message)

    def error(self, message: str) -> None:
        self._push("error", message)

    def _push(self, kind: NotificationKind, message: str) -> None:
        logger.debug("toast[%s]: %s", kind, message)
        self._items.append(Notification(kind=kind, message=message))

    def peek(self) -> list[Notification]:
        return list(self._items)

    def drain(self) -> list[Notification]:
        """Return every pending notification and empty the buffer."""
        items = list(self._items)
        self._items.clear()
        return items
