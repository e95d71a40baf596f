"""Notification orchestration: preference check, persistence and fan-out.

``NotificationService`` is the only entry point that creates notifications.
Creation is best-effort relative to whatever triggered it, so failures are
logged and turned into ``None``/``False``/empty results instead of being
raised to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationOptions,
    NotificationPage,
    ReferenceKind,
)
from teamhub.infrastructure.database import SessionFactory
from teamhub.infrastructure.notifications import NotificationPublisher
from teamhub.infrastructure.repositories import NotificationRepository, PreferenceRepository
from teamhub.utils import truncate_preview

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
DEFAULT_PREVIEW_LENGTH = 100


class NotificationService:
    """Create, query and update a user's in-app notifications.

    Each operation opens its own session from ``session_factory`` so that
    concurrent event handlers never share one.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        publisher: NotificationPublisher,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
    ) -> None:
        self._session_factory = session_factory
        self._publisher = publisher
        self.page_size = page_size
        self.preview_length = preview_length

    async def create_notification(
        self,
        category: NotificationCategory | str,
        options: NotificationOptions,
    ) -> Notification | None:
        """Persist and push a notification unless the recipient does not want it.

        Raises:
            UnknownCategoryError: ``category`` is a string outside the enumeration.

        Returns:
            The stored notification, or ``None`` when it was suppressed or
            could not be stored.
        """

        category = NotificationCategory.parse(category)
        if options.sender is not None and options.sender == options.recipient:
            if not category.allows_self_notification:
                logger.debug(
                    "Skipping %s notification: %s would notify themselves",
                    category.value,
                    options.recipient,
                )
                return None

        try:
            async with self._session_factory() as session:
                if not await self._should_send(session, options.recipient, category, options.references):
                    logger.info(
                        "Notification skipped: user %s opted out of %s notifications",
                        options.recipient,
                        category.value,
                    )
                    return None
                saved = await NotificationRepository(session).create(
                    Notification(
                        id=None,
                        recipient_id=options.recipient,
                        sender_id=options.sender,
                        category=category,
                        title=options.title,
                        body=options.body,
                        link=options.link,
                        references=dict(options.references),
                        metadata=dict(options.metadata),
                    )
                )
        except Exception:
            logger.error(
                "Error creating %s notification for %s",
                category.value,
                options.recipient,
                exc_info=True,
            )
            return None

        await self._publisher.deliver(saved)
        return saved

    async def mark_as_read(self, notification_id: int, user_id: str) -> bool:
        """Mark one of ``user_id``'s notifications as read; repeated calls stay ``True``."""

        try:
            async with self._session_factory() as session:
                updated = await NotificationRepository(session).mark_as_read(notification_id, user_id)
        except Exception:
            logger.error("Error marking notification %s as read", notification_id, exc_info=True)
            return False
        return updated is not None

    async def mark_all_as_read(self, user_id: str) -> int:
        """Return how many unread notifications of ``user_id`` became read."""

        try:
            async with self._session_factory() as session:
                return await NotificationRepository(session).mark_all_as_read(user_id)
        except Exception:
            logger.error("Error marking all notifications as read for %s", user_id, exc_info=True)
            return 0

    async def get_user_notifications(
        self,
        user_id: str,
        page: int = 1,
        limit: int | None = None,
        unread_only: bool = False,
    ) -> NotificationPage:
        """Return one newest-first page plus the total and unread counters.

        ``page`` is 1-based. ``limit=0`` skips the listing but still counts.
        """

        page = max(int(page or 1), 1)
        limit = self.page_size if limit is None else max(int(limit), 0)
        try:
            async with self._session_factory() as session:
                repository = NotificationRepository(session)
                notifications: list[Notification] = []
                if limit:
                    notifications = list(
                        await repository.list_for_recipient(
                            user_id,
                            offset=(page - 1) * limit,
                            limit=limit,
                            unread_only=unread_only,
                        )
                    )
                total = await repository.count_for_recipient(user_id, unread_only=unread_only)
                unread_count = await repository.count_for_recipient(user_id, unread_only=True)
        except Exception:
            logger.error("Error getting notifications for %s", user_id, exc_info=True)
            return NotificationPage.empty(page=page, limit=limit)

        return NotificationPage(
            notifications=notifications,
            total=total,
            unread_count=unread_count,
            page=page,
            limit=limit,
        )

    async def delete_notification(self, notification_id: int, user_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                return await NotificationRepository(session).delete(notification_id, user_id)
        except Exception:
            logger.error("Error deleting notification %s", notification_id, exc_info=True)
            return False

    # ------ forum ------

    async def notify_forum_message(
        self,
        *,
        forum_id: str,
        message_id: str,
        recipient_id: str,
        sender_id: str,
        forum_title: str,
        message_content: str,
    ) -> Notification | None:
        return await self.create_notification(
            NotificationCategory.FORUM_MESSAGE,
            NotificationOptions(
                recipient=recipient_id,
                sender=sender_id,
                title=f'Nova mensagem em "{forum_title}"',
                body=self.preview(message_content),
                link=_forum_link(forum_id, message_id),
                references=_forum_references(forum_id, message_id),
            ),
        )

    async def notify_forum_mention(
        self,
        *,
        forum_id: str,
        message_id: str,
        recipient_id: str,
        sender_id: str,
        forum_title: str,
        message_content: str,
    ) -> Notification | None:
        return await self.create_notification(
            NotificationCategory.FORUM_MENTION,
            NotificationOptions(
                recipient=recipient_id,
                sender=sender_id,
                title=f'Você foi mencionado em "{forum_title}"',
                body=self.preview(message_content),
                link=_forum_link(forum_id, message_id),
                references=_forum_references(forum_id, message_id),
            ),
        )

    async def notify_forum_reply(
        self,
        *,
        forum_id: str,
        message_id: str,
        recipient_id: str,
        sender_id: str,
        forum_title: str,
        message_content: str,
    ) -> Notification | None:
        return await self.create_notification(
            NotificationCategory.FORUM_REPLY,
            NotificationOptions(
                recipient=recipient_id,
                sender=sender_id,
                title=f'Nova resposta em "{forum_title}"',
                body=self.preview(message_content),
                link=_forum_link(forum_id, message_id),
                references=_forum_references(forum_id, message_id),
            ),
        )

    # ------ tasks ------

    async def notify_task_assigned(
        self,
        *,
        task_id: str,
        recipient_id: str,
        assigner_id: str,
        task_title: str,
        task_description: str | None = None,
        due_date: str | None = None,
    ) -> Notification | None:
        body = f"{task_title}: {task_description}" if task_description else task_title
        metadata: dict[str, Any] = {"dueDate": due_date} if due_date else {}
        return await self.create_notification(
            NotificationCategory.TASK_ASSIGNED,
            NotificationOptions(
                recipient=recipient_id,
                sender=assigner_id,
                title="Nova tarefa atribuída a você",
                body=body,
                link=f"/tasks/{task_id}",
                references={ReferenceKind.TASK.value: task_id},
                metadata=metadata,
            ),
        )

    async def notify_task_completed(
        self,
        *,
        task_id: str,
        recipient_id: str,
        completed_by: str,
        task_title: str,
    ) -> Notification | None:
        return await self.create_notification(
            NotificationCategory.TASK_COMPLETED,
            NotificationOptions(
                recipient=recipient_id,
                sender=completed_by,
                title="Tarefa concluída",
                body=task_title,
                link=f"/tasks/{task_id}",
                references={ReferenceKind.TASK.value: task_id},
            ),
        )

    # ------ chat ------

    async def notify_chat_message(
        self,
        *,
        mission_id: str,
        message_id: str,
        recipient_id: str,
        sender_id: str,
        sender_username: str,
        mission_name: str,
        message_content: str,
    ) -> Notification | None:
        return await self.create_notification(
            NotificationCategory.CHAT_MESSAGE,
            NotificationOptions(
                recipient=recipient_id,
                sender=sender_id,
                title=f"Nova mensagem em {mission_name}",
                body=self.preview(f"{sender_username}: {message_content or ''}"),
                link=_chat_link(mission_id, message_id),
                references=_chat_references(mission_id, message_id),
            ),
        )

    async def notify_chat_mention(
        self,
        *,
        mission_id: str,
        message_id: str,
        recipient_id: str,
        sender_id: str,
        sender_username: str,
        mission_name: str,
        message_content: str,
    ) -> Notification | None:
        return await self.create_notification(
            NotificationCategory.CHAT_MENTION,
            NotificationOptions(
                recipient=recipient_id,
                sender=sender_id,
                title=f"Você foi mencionado em {mission_name}",
                body=self.preview(f"{sender_username}: {message_content or ''}"),
                link=_chat_link(mission_id, message_id),
                references=_chat_references(mission_id, message_id),
            ),
        )

    async def notify_chat_reply(
        self,
        *,
        mission_id: str,
        message_id: str,
        recipient_id: str,
        sender_id: str,
        sender_username: str,
        mission_name: str,
        message_content: str,
    ) -> Notification | None:
        return await self.create_notification(
            NotificationCategory.CHAT_REPLY,
            NotificationOptions(
                recipient=recipient_id,
                sender=sender_id,
                title=f"{sender_username} respondeu à sua mensagem em {mission_name}",
                body=self.preview(message_content),
                link=_chat_link(mission_id, message_id),
                references=_chat_references(mission_id, message_id),
            ),
        )

    # ------ system ------

    async def notify_system(
        self,
        *,
        recipient_id: str,
        title: str,
        body: str,
        link: str | None = None,
    ) -> Notification | None:
        return await self.create_notification(
            NotificationCategory.SYSTEM,
            NotificationOptions(recipient=recipient_id, title=title, body=body, link=link),
        )

    def preview(self, content: str | None) -> str:
        return truncate_preview(content, self.preview_length)

    async def _should_send(
        self,
        session: AsyncSession,
        user_id: str,
        category: NotificationCategory,
        references: Mapping[str, str],
    ) -> bool:
        try:
            preference = await PreferenceRepository(session).get_by_user(user_id)
        except Exception:
            # Unreadable preferences count as fully enabled.
            logger.error("Error checking notification preferences of %s", user_id, exc_info=True)
            await session.rollback()
            return True
        if preference is None:
            return True
        return preference.allows(category, references)


def _forum_link(forum_id: str, message_id: str) -> str:
    return f"/forum/{forum_id}/message/{message_id}"


def _forum_references(forum_id: str, message_id: str) -> dict[str, str]:
    return {ReferenceKind.FORUM.value: forum_id, ReferenceKind.MESSAGE.value: message_id}


def _chat_link(mission_id: str, message_id: str) -> str:
    return f"/missions/{mission_id}/chat?message={message_id}"


def _chat_references(mission_id: str, message_id: str) -> dict[str, str]:
    return {ReferenceKind.MISSION.value: mission_id, ReferenceKind.MESSAGE.value: message_id}


__all__ = ["DEFAULT_PAGE_SIZE", "DEFAULT_PREVIEW_LENGTH", "NotificationService"]
