"""Wire the notification components together.

Nothing here is a module-level singleton: the application owns one
:class:`NotificationSystem` for its lifetime and tests build their own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from teamhub.application.use_cases.notifications import (
    NotificationEventListener,
    NotificationService,
)
from teamhub.application.use_cases.preferences import PreferenceService
from teamhub.config import Settings
from teamhub.infrastructure.database import (
    SessionFactory,
    create_engine_from_settings,
    create_session_factory,
    initialize_database,
)
from teamhub.infrastructure.events import EventBus
from teamhub.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
)
from teamhub.utils import configure_app_timezone

logger = logging.getLogger(__name__)


@dataclass
class NotificationSystem:
    """Everything a process needs to create and deliver notifications."""

    settings: Settings
    engine: AsyncEngine
    session_factory: SessionFactory
    bus: EventBus
    connections: NotificationConnectionManager
    publisher: NotificationPublisher
    service: NotificationService
    preferences: PreferenceService
    listener: NotificationEventListener

    async def aclose(self) -> None:
        """Wait for in-flight handlers, detach the listener and dispose the engine."""

        await self.bus.drain()
        self.listener.unregister()
        await self.engine.dispose()
        logger.info("Notification system stopped")


async def build_notification_system(
    settings: Settings,
    *,
    engine: AsyncEngine | None = None,
) -> NotificationSystem:
    """Create the tables, bind the websocket transport and subscribe the translators."""

    configure_app_timezone(settings.app_timezone)
    engine = engine or create_engine_from_settings(settings)
    await initialize_database(engine)
    session_factory = create_session_factory(engine)

    connections = NotificationConnectionManager()
    publisher = NotificationPublisher()
    publisher.bind_transport(connections)

    service = NotificationService(
        session_factory,
        publisher,
        page_size=settings.notification_page_size,
        preview_length=settings.message_preview_length,
    )
    bus = EventBus()
    listener = NotificationEventListener(service)
    listener.register(bus)

    logger.info("Notification system ready")
    return NotificationSystem(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        bus=bus,
        connections=connections,
        publisher=publisher,
        service=service,
        preferences=PreferenceService(session_factory),
        listener=listener,
    )


__all__ = ["NotificationSystem", "build_notification_system"]
