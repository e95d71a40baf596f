"""Push freshly created notifications to the recipient's open connections."""

from __future__ import annotations

import logging
from typing import Any

from teamhub.domain.entities import Notification

from .manager import RealtimeTransport, user_group

logger = logging.getLogger(__name__)

NOTIFICATION_EVENT = "notification"


class NotificationPublisher:
    """Best-effort real-time delivery of notifications.

    The transport is bound once after startup. Until then, and whenever the
    transport fails, delivery is skipped; the persisted notification stays
    available to the regular queries.
    """

    def __init__(self, transport: RealtimeTransport | None = None) -> None:
        self._transport = transport

    def bind_transport(self, transport: RealtimeTransport) -> None:
        self._transport = transport

    @property
    def is_bound(self) -> bool:
        return self._transport is not None

    async def deliver(self, notification: Notification) -> bool:
        """Emit ``notification`` to its recipient's group; never raises."""

        if self._transport is None:
            logger.debug(
                "Realtime transport not bound; skipping delivery of notification %s",
                notification.id,
            )
            return False
        try:
            await self._transport.emit(
                user_group(notification.recipient_id),
                NOTIFICATION_EVENT,
                serialize_notification(notification),
            )
        except Exception:
            logger.warning(
                "Realtime delivery of notification %s to %s failed",
                notification.id,
                notification.recipient_id,
                exc_info=True,
            )
            return False
        return True


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the reduced websocket payload for ``notification``."""

    return {
        "id": notification.id,
        "category": notification.category.value,
        "title": notification.title,
        "body": notification.body,
        "link": notification.link,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


__all__ = ["NOTIFICATION_EVENT", "NotificationPublisher", "serialize_notification"]
