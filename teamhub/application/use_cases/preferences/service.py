"""Use cases for reading and changing notification preferences."""

from __future__ import annotations

import logging

from teamhub.domain.entities import ForumSubscription, NotificationCategory, NotificationPreference
from teamhub.infrastructure.database import SessionFactory
from teamhub.infrastructure.repositories import PreferenceRepository

logger = logging.getLogger(__name__)


class PreferenceService:
    """Read and update the preference row of a user.

    The row is created the first time something is changed; reads for a
    user without a row return the all-enabled default.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    async def get_preferences(self, user_id: str) -> NotificationPreference:
        async with self._session_factory() as session:
            preference = await PreferenceRepository(session).get_by_user(user_id)
        return preference or NotificationPreference.default_for(user_id)

    async def set_notifications_enabled(self, user_id: str, enabled: bool) -> NotificationPreference:
        """Turn every notification for ``user_id`` on or off."""

        async with self._session_factory() as session:
            repository = PreferenceRepository(session)
            preference = await self._load(repository, user_id)
            preference.notifications_enabled = bool(enabled)
            saved = await repository.save(preference)
        logger.info("User %s set notifications_enabled=%s", user_id, saved.notifications_enabled)
        return saved

    async def set_category_enabled(
        self,
        user_id: str,
        category: NotificationCategory | str,
        enabled: bool,
    ) -> NotificationPreference:
        """Enable or disable one category.

        Raises:
            UnknownCategoryError: ``category`` is not a known category name.
        """

        category = NotificationCategory.parse(category)
        async with self._session_factory() as session:
            repository = PreferenceRepository(session)
            preference = await self._load(repository, user_id)
            preference.set_category(category, enabled)
            saved = await repository.save(preference)
        logger.info("User %s set %s=%s", user_id, category.value, bool(enabled))
        return saved

    async def update_forum_subscription(
        self,
        user_id: str,
        forum_id: str,
        notifications: bool,
    ) -> ForumSubscription:
        """Create or update the subscription of ``user_id`` to ``forum_id``."""

        async with self._session_factory() as session:
            repository = PreferenceRepository(session)
            preference = await self._load(repository, user_id)
            preference.set_forum_subscription(forum_id, bool(notifications))
            saved = await repository.save(preference)
        return saved.forum_subscription(forum_id) or ForumSubscription(
            forum_id=str(forum_id), notifications=bool(notifications)
        )

    @staticmethod
    async def _load(repository: PreferenceRepository, user_id: str) -> NotificationPreference:
        preference = await repository.get_by_user(user_id)
        return preference or NotificationPreference.default_for(user_id)


__all__ = ["PreferenceService"]
