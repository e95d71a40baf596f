"""Domain entity holding a user's notification preferences."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .notification import NotificationCategory, ReferenceKind


@dataclass
class ForumSubscription:
    """Whether a user wants notifications about new messages in a forum."""

    forum_id: str
    notifications: bool = True


@dataclass
class NotificationPreference:
    """Per-user switches deciding which notifications are wanted.

    A missing category entry means the category is enabled, whether or not
    the preference itself has been persisted.
    """

    user_id: str
    notifications_enabled: bool = True
    category_settings: dict[str, bool] = field(default_factory=dict)
    forum_subscriptions: list[ForumSubscription] = field(default_factory=list)
    id: int | None = None

    @classmethod
    def default_for(cls, user_id: str) -> "NotificationPreference":
        """Return the unsaved preference used when a user never changed anything."""

        return cls(user_id=user_id)

    def is_category_enabled(self, category: NotificationCategory) -> bool:
        return self.category_settings.get(NotificationCategory.parse(category).value) is not False

    def forum_subscription(self, forum_id: str) -> ForumSubscription | None:
        for subscription in self.forum_subscriptions:
            if subscription.forum_id == str(forum_id):
                return subscription
        return None

    def allows(
        self,
        category: NotificationCategory,
        references: Mapping[str, str] | None = None,
    ) -> bool:
        """Return ``True`` when a notification of ``category`` should be created."""

        if not self.notifications_enabled:
            return False
        if not self.is_category_enabled(category):
            return False
        forum_id = (references or {}).get(ReferenceKind.FORUM.value)
        if category is NotificationCategory.FORUM_MESSAGE and forum_id:
            subscription = self.forum_subscription(forum_id)
            if subscription is not None and not subscription.notifications:
                return False
        return True

    def set_category(self, category: NotificationCategory, enabled: bool) -> None:
        self.category_settings[NotificationCategory.parse(category).value] = bool(enabled)

    def set_forum_subscription(self, forum_id: str, notifications: bool) -> ForumSubscription:
        """Update the entry for ``forum_id`` or append one, keeping one per forum."""

        subscription = self.forum_subscription(forum_id)
        if subscription is None:
            subscription = ForumSubscription(forum_id=str(forum_id), notifications=notifications)
            self.forum_subscriptions.append(subscription)
        else:
            subscription.notifications = notifications
        return subscription


__all__ = ["ForumSubscription", "NotificationPreference"]
