"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.domain.entities import Notification, NotificationCategory
from teamhub.infrastructure.models import NotificationModel
from teamhub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide recipient-scoped CRUD operations for :class:`Notification` objects.

    Every lookup by id also filters by recipient, so a caller can never read
    or change a notification that belongs to somebody else.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def get_for_recipient(
        self, notification_id: int, recipient_id: str
    ) -> Notification | None:
        model = await self._get_model(notification_id, recipient_id)
        return self._to_entity(model) if model is not None else None

    async def list_for_recipient(
        self,
        recipient_id: str,
        *,
        offset: int = 0,
        limit: int | None = 20,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        query = select(NotificationModel).where(NotificationModel.recipient_id == recipient_id)
        if unread_only:
            query = query.where(NotificationModel.read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def count_for_recipient(self, recipient_id: str, *, unread_only: bool = False) -> int:
        query = (
            select(func.count())
            .select_from(NotificationModel)
            .where(NotificationModel.recipient_id == recipient_id)
        )
        if unread_only:
            query = query.where(NotificationModel.read.is_(False))
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def mark_as_read(self, notification_id: int, recipient_id: str) -> Notification | None:
        """Flag the notification as read; ``read_at`` is only set on the first call."""

        model = await self._get_model(notification_id, recipient_id)
        if model is None:
            return None
        if not model.read:
            model.read = True
            model.read_at = ensure_app_naive_datetime(now_in_app_timezone())
            await self.session.commit()
            await self.session.refresh(model)
        return self._to_entity(model)

    async def mark_all_as_read(self, recipient_id: str) -> int:
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.read.is_(False),
            )
            .values(read=True, read_at=ensure_app_naive_datetime(now_in_app_timezone()))
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return int(result.rowcount or 0)

    async def delete(self, notification_id: int, recipient_id: str) -> bool:
        result = await self.session.execute(
            delete(NotificationModel).where(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
        )
        await self.session.commit()
        return bool(result.rowcount)

    async def _get_model(
        self, notification_id: int, recipient_id: str
    ) -> NotificationModel | None:
        result = await self.session.execute(
            select(NotificationModel).where(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.recipient_id = notification.recipient_id
        model.sender_id = notification.sender_id
        model.category = NotificationCategory.parse(notification.category).value
        model.title = notification.title
        model.body = notification.body
        model.link = notification.link
        model.references = dict(notification.references or {})
        model.extra = dict(notification.metadata or {})
        model.read = bool(notification.read)
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.read_at = ensure_app_naive_datetime(notification.read_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            sender_id=model.sender_id,
            category=NotificationCategory(model.category),
            title=model.title,
            body=model.body,
            link=model.link,
            references=dict(model.references or {}),
            metadata=dict(model.extra or {}),
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(model.read_at),
        )


__all__ = ["NotificationRepository"]
