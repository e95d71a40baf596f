"""Domain entities exposed by the application."""

from .notification import (
    Notification,
    NotificationCategory,
    NotificationOptions,
    NotificationPage,
    ReferenceKind,
    UnknownCategoryError,
)
from .preference import ForumSubscription, NotificationPreference

__all__ = [
    "ForumSubscription",
    "Notification",
    "NotificationCategory",
    "NotificationOptions",
    "NotificationPage",
    "NotificationPreference",
    "ReferenceKind",
    "UnknownCategoryError",
]
