"""Use cases that create and manage in-app notifications."""

from .service import NotificationService
from .translators import NotificationEventListener

__all__ = ["NotificationEventListener", "NotificationService"]
