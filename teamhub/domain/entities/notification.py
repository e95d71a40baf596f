"""Domain entities describing in-app notifications."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class UnknownCategoryError(ValueError):
    """Raised when a string does not name a :class:`NotificationCategory`."""


class NotificationCategory(str, Enum):
    """Closed set of notification kinds; each one is a preference key."""

    FORUM_MESSAGE = "forum_message"
    FORUM_MENTION = "forum_mention"
    FORUM_REPLY = "forum_reply"
    TASK_ASSIGNED = "task_assigned"
    TASK_COMPLETED = "task_completed"
    CHAT_MESSAGE = "chat_message"
    CHAT_MENTION = "chat_mention"
    CHAT_REPLY = "chat_reply"
    SYSTEM = "system"

    @classmethod
    def parse(cls, value: "NotificationCategory | str") -> "NotificationCategory":
        """Return the category named by ``value`` or raise :class:`UnknownCategoryError`."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise UnknownCategoryError(f"Unknown notification category: {value!r}") from exc

    @property
    def allows_self_notification(self) -> bool:
        """System announcements have no sender, every other category does."""

        return self is NotificationCategory.SYSTEM


class ReferenceKind(str, Enum):
    """Kinds of related entities a notification may point at."""

    FORUM = "forum"
    MESSAGE = "message"
    TASK = "task"
    MISSION = "mission"


@dataclass
class NotificationOptions:
    """Content and addressing of a notification about to be created."""

    recipient: str
    title: str
    body: str
    sender: str | None = None
    link: str | None = None
    references: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.recipient:
            raise ValueError("A notification requires a recipient")
        unknown = set(self.references) - {kind.value for kind in ReferenceKind}
        if unknown:
            raise ValueError(f"Unsupported reference kinds: {sorted(unknown)}")
        self.references = {
            kind: str(value) for kind, value in self.references.items() if value is not None
        }


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    recipient_id: str
    category: NotificationCategory
    title: str
    body: str
    sender_id: str | None = None
    link: str | None = None
    references: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = None
    read_at: datetime | None = None


@dataclass
class NotificationPage:
    """One page of a user's notifications plus their counters."""

    notifications: list[Notification]
    total: int
    unread_count: int
    page: int = 1
    limit: int = 0

    @property
    def pages(self) -> int:
        """Number of pages of ``limit`` items needed to cover ``total``."""

        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    @classmethod
    def empty(cls, page: int = 1, limit: int = 0) -> "NotificationPage":
        return cls(notifications=[], total=0, unread_count=0, page=page, limit=limit)


__all__ = [
    "Notification",
    "NotificationCategory",
    "NotificationOptions",
    "NotificationPage",
    "ReferenceKind",
    "UnknownCategoryError",
]
