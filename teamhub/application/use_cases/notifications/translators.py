"""Translate domain events into notifications.

Each handler below listens to exactly one event name, parses the payload
into its typed form and hands the rendered content to
:class:`NotificationService`, one call per recipient. Producers are never
notified about their own actions, except for system announcements.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from teamhub.domain.events import (
    ChatMessageCreated,
    ChatMessageReplied,
    ChatUserMentioned,
    EventTypes,
    ForumMessageCreated,
    ForumMessageReplied,
    ForumUserMentioned,
    SystemAnnouncement,
    TaskAssigned,
    TaskCompleted,
)
from teamhub.infrastructure.events import EventBus, EventHandler, EventPayload

from .service import NotificationService

logger = logging.getLogger(__name__)


def _unique_recipients(recipients: Iterable[str], *, exclude: str | None = None) -> list[str]:
    """Return ``recipients`` without duplicates or ``exclude``, keeping order."""

    seen: set[str] = set()
    unique: list[str] = []
    for recipient in recipients:
        if recipient == exclude or recipient in seen:
            continue
        seen.add(recipient)
        unique.append(recipient)
    return unique


class NotificationEventListener:
    """Subscribe one translator per event name on an :class:`EventBus`."""

    def __init__(self, service: NotificationService) -> None:
        self._service = service
        self._subscriptions: list[tuple[EventBus, str, EventHandler]] = []

    @property
    def handlers(self) -> dict[str, EventHandler]:
        return {
            EventTypes.Forum.MESSAGE_CREATED: self.on_forum_message_created,
            EventTypes.Forum.USER_MENTIONED: self.on_forum_user_mentioned,
            EventTypes.Forum.MESSAGE_REPLIED: self.on_forum_message_replied,
            EventTypes.Task.ASSIGNED: self.on_task_assigned,
            EventTypes.Task.COMPLETED: self.on_task_completed,
            EventTypes.Chat.MESSAGE_CREATED: self.on_chat_message_created,
            EventTypes.Chat.USER_MENTIONED: self.on_chat_user_mentioned,
            EventTypes.Chat.MESSAGE_REPLIED: self.on_chat_message_replied,
            EventTypes.System.ANNOUNCEMENT: self.on_system_announcement,
        }

    def register(self, bus: EventBus) -> None:
        """Subscribe every translator on ``bus``."""

        for event_name, handler in self.handlers.items():
            bus.subscribe(event_name, handler)
            self._subscriptions.append((bus, event_name, handler))
        logger.info("Registered %d notification translators", len(self.handlers))

    def unregister(self) -> None:
        """Remove every subscription made by :meth:`register`."""

        for bus, event_name, handler in self._subscriptions:
            bus.unsubscribe(event_name, handler)
        self._subscriptions.clear()

    # ------ forum ------

    async def on_forum_message_created(self, payload: EventPayload) -> None:
        event = ForumMessageCreated.from_payload(payload)
        for recipient_id in _unique_recipients(event.recipients, exclude=event.sender_id):
            await self._service.notify_forum_message(
                forum_id=event.forum_id,
                message_id=event.message_id,
                recipient_id=recipient_id,
                sender_id=event.sender_id,
                forum_title=event.forum_title,
                message_content=event.message_content,
            )

    async def on_forum_user_mentioned(self, payload: EventPayload) -> None:
        event = ForumUserMentioned.from_payload(payload)
        if event.mentioned_user_id == event.sender_id:
            return
        await self._service.notify_forum_mention(
            forum_id=event.forum_id,
            message_id=event.message_id,
            recipient_id=event.mentioned_user_id,
            sender_id=event.sender_id,
            forum_title=event.forum_title,
            message_content=event.message_content,
        )

    async def on_forum_message_replied(self, payload: EventPayload) -> None:
        event = ForumMessageReplied.from_payload(payload)
        if event.original_author_id == event.sender_id:
            return
        await self._service.notify_forum_reply(
            forum_id=event.forum_id,
            message_id=event.message_id,
            recipient_id=event.original_author_id,
            sender_id=event.sender_id,
            forum_title=event.forum_title,
            message_content=event.message_content,
        )

    # ------ tasks ------

    async def on_task_assigned(self, payload: EventPayload) -> None:
        event = TaskAssigned.from_payload(payload)
        if event.assignee_id == event.assigner_id:
            return
        await self._service.notify_task_assigned(
            task_id=event.task_id,
            recipient_id=event.assignee_id,
            assigner_id=event.assigner_id,
            task_title=event.task_title,
            task_description=event.task_description,
            due_date=event.due_date,
        )

    async def on_task_completed(self, payload: EventPayload) -> None:
        event = TaskCompleted.from_payload(payload)
        if event.assignee_id == event.completed_by:
            return
        await self._service.notify_task_completed(
            task_id=event.task_id,
            recipient_id=event.assignee_id,
            completed_by=event.completed_by,
            task_title=event.task_title,
        )

    # ------ chat ------

    async def on_chat_message_created(self, payload: EventPayload) -> None:
        event = ChatMessageCreated.from_payload(payload)
        recipients = _unique_recipients(event.recipients, exclude=event.sender_id)
        if not recipients:
            logger.debug("Chat message %s has no recipients to notify", event.message_id)
            return
        for recipient_id in recipients:
            await self._service.notify_chat_message(
                mission_id=event.mission_id,
                message_id=event.message_id,
                recipient_id=recipient_id,
                sender_id=event.sender_id,
                sender_username=event.sender_username,
                mission_name=event.mission_name,
                message_content=event.message_content,
            )

    async def on_chat_user_mentioned(self, payload: EventPayload) -> None:
        event = ChatUserMentioned.from_payload(payload)
        if event.mentioned_user_id == event.sender_id:
            return
        await self._service.notify_chat_mention(
            mission_id=event.mission_id,
            message_id=event.message_id,
            recipient_id=event.mentioned_user_id,
            sender_id=event.sender_id,
            sender_username=event.sender_username,
            mission_name=event.mission_name,
            message_content=event.message_content,
        )

    async def on_chat_message_replied(self, payload: EventPayload) -> None:
        event = ChatMessageReplied.from_payload(payload)
        if event.original_author_id == event.sender_id:
            return
        await self._service.notify_chat_reply(
            mission_id=event.mission_id,
            message_id=event.message_id,
            recipient_id=event.original_author_id,
            sender_id=event.sender_id,
            sender_username=event.sender_username,
            mission_name=event.mission_name,
            message_content=event.message_content,
        )

    # ------ system ------

    async def on_system_announcement(self, payload: EventPayload) -> None:
        event = SystemAnnouncement.from_payload(payload)
        for recipient_id in _unique_recipients(event.recipients):
            await self._service.notify_system(
                recipient_id=recipient_id,
                title=event.title,
                body=event.body,
                link=event.link,
            )


__all__ = ["NotificationEventListener"]
