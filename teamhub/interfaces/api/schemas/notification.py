"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from teamhub.domain.entities import Notification, NotificationCategory, NotificationPage


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    recipient_id: str
    sender_id: str | None = None
    category: NotificationCategory
    title: str
    body: str
    link: str | None = None
    references: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = None
    read_at: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or 0,
            recipient_id=notification.recipient_id,
            sender_id=notification.sender_id,
            category=notification.category,
            title=notification.title,
            body=notification.body,
            link=notification.link,
            references=dict(notification.references),
            metadata=dict(notification.metadata),
            read=notification.read,
            created_at=notification.created_at,
            read_at=notification.read_at,
        )


class PaginationRead(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int
    pagination: PaginationRead

    @classmethod
    def from_page(cls, page: NotificationPage) -> "NotificationListResponse":
        return cls(
            notifications=[NotificationRead.from_entity(item) for item in page.notifications],
            unread_count=page.unread_count,
            pagination=PaginationRead(
                total=page.total,
                page=page.page,
                limit=page.limit,
                pages=page.pages,
            ),
        )


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int


class SendTestNotificationRequest(BaseModel):
    """Payload accepted by the administrator-only test endpoint."""

    recipient_id: str | None = Field(
        default=None,
        description="Recipient of the test notification; defaults to the caller",
    )
    category: str = Field(default=NotificationCategory.SYSTEM.value)
    title: str = Field(default="Notificação de teste", min_length=1)
    body: str = Field(default="Esta é uma notificação de teste.", min_length=1)
    link: str | None = None


__all__ = [
    "MarkAllReadResponse",
    "NotificationListResponse",
    "NotificationRead",
    "PaginationRead",
    "SendTestNotificationRequest",
    "UnreadCountResponse",
]
