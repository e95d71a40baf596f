"""Pydantic models describing notification preferences."""

from __future__ import annotations

from pydantic import BaseModel, Field

from teamhub.domain.entities import ForumSubscription, NotificationPreference


class ForumSubscriptionRead(BaseModel):
    forum_id: str
    notifications: bool

    @classmethod
    def from_entity(cls, subscription: ForumSubscription) -> "ForumSubscriptionRead":
        return cls(forum_id=subscription.forum_id, notifications=subscription.notifications)


class NotificationPreferenceRead(BaseModel):
    user_id: str
    notifications_enabled: bool
    category_settings: dict[str, bool] = Field(default_factory=dict)
    forum_subscriptions: list[ForumSubscriptionRead] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, preference: NotificationPreference) -> "NotificationPreferenceRead":
        return cls(
            user_id=preference.user_id,
            notifications_enabled=preference.notifications_enabled,
            category_settings=dict(preference.category_settings),
            forum_subscriptions=[
                ForumSubscriptionRead.from_entity(item) for item in preference.forum_subscriptions
            ],
        )


class NotificationsEnabledUpdate(BaseModel):
    enabled: bool


class CategoryUpdate(BaseModel):
    enabled: bool


class ForumSubscriptionUpdate(BaseModel):
    notifications: bool = True


__all__ = [
    "CategoryUpdate",
    "ForumSubscriptionRead",
    "ForumSubscriptionUpdate",
    "NotificationPreferenceRead",
    "NotificationsEnabledUpdate",
]
