"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, RealtimeTransport, user_group
from .publisher import NOTIFICATION_EVENT, NotificationPublisher, serialize_notification

__all__ = [
    "NOTIFICATION_EVENT",
    "NotificationConnectionManager",
    "NotificationPublisher",
    "RealtimeTransport",
    "serialize_notification",
    "user_group",
]
