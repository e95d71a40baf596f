"""Aggregate application use cases."""

from .notifications import NotificationEventListener, NotificationService
from .preferences import PreferenceService

__all__ = [
    "NotificationEventListener",
    "NotificationService",
    "PreferenceService",
]
