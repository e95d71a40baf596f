"""Persistence helpers for notification preferences."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.domain.entities import ForumSubscription, NotificationPreference
from teamhub.infrastructure.models import PreferenceModel


class PreferenceRepository:
    """Load and store :class:`NotificationPreference` rows keyed by user."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_user(self, user_id: str) -> NotificationPreference | None:
        model = await self._get_model(user_id)
        return self._to_entity(model) if model is not None else None

    async def save(self, preference: NotificationPreference) -> NotificationPreference:
        """Insert the preference for its user or overwrite the existing row."""

        model = await self._get_model(preference.user_id)
        if model is None:
            model = PreferenceModel(user_id=preference.user_id)
            self.session.add(model)
        model.notifications_enabled = bool(preference.notifications_enabled)
        # JSON columns are not mutation-tracked, so new containers are assigned.
        model.category_settings = {
            key: bool(value) for key, value in preference.category_settings.items()
        }
        model.forum_subscriptions = [
            {"forum_id": sub.forum_id, "notifications": bool(sub.notifications)}
            for sub in preference.forum_subscriptions
        ]
        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def _get_model(self, user_id: str) -> PreferenceModel | None:
        result = await self.session.execute(
            select(PreferenceModel).where(PreferenceModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: PreferenceModel) -> NotificationPreference:
        subscriptions = [
            ForumSubscription(
                forum_id=str(item.get("forum_id")),
                notifications=bool(item.get("notifications", True)),
            )
            for item in (model.forum_subscriptions or [])
            if isinstance(item, dict) and item.get("forum_id") is not None
        ]
        return NotificationPreference(
            id=model.id,
            user_id=model.user_id,
            notifications_enabled=bool(model.notifications_enabled),
            category_settings=dict(model.category_settings or {}),
            forum_subscriptions=subscriptions,
        )


__all__ = ["PreferenceRepository"]
