"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .preference import PreferenceModel

__all__ = [
    "NotificationModel",
    "PreferenceModel",
]
