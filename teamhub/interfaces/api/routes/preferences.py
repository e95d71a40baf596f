"""Endpoints for reading and changing notification preferences."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from teamhub.application.use_cases.preferences import PreferenceService
from teamhub.domain.entities import UnknownCategoryError
from teamhub.interfaces.api.dependencies import (
    CurrentUser,
    get_current_user,
    get_preference_service,
)
from teamhub.interfaces.api.schemas import (
    CategoryUpdate,
    ForumSubscriptionRead,
    ForumSubscriptionUpdate,
    NotificationPreferenceRead,
    NotificationsEnabledUpdate,
)

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/notifications", response_model=NotificationPreferenceRead)
async def get_notification_preferences(
    preferences: PreferenceService = Depends(get_preference_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> NotificationPreferenceRead:
    preference = await preferences.get_preferences(current_user.id)
    return NotificationPreferenceRead.from_entity(preference)


@router.put("/notifications", response_model=NotificationPreferenceRead)
async def set_notifications_enabled(
    payload: NotificationsEnabledUpdate,
    preferences: PreferenceService = Depends(get_preference_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> NotificationPreferenceRead:
    preference = await preferences.set_notifications_enabled(current_user.id, payload.enabled)
    return NotificationPreferenceRead.from_entity(preference)


@router.put("/notifications/categories/{category}", response_model=NotificationPreferenceRead)
async def set_category_enabled(
    category: str,
    payload: CategoryUpdate,
    preferences: PreferenceService = Depends(get_preference_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> NotificationPreferenceRead:
    try:
        preference = await preferences.set_category_enabled(
            current_user.id, category, payload.enabled
        )
    except UnknownCategoryError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return NotificationPreferenceRead.from_entity(preference)


@router.put("/forums/{forum_id}", response_model=ForumSubscriptionRead)
async def update_forum_subscription(
    forum_id: str,
    payload: ForumSubscriptionUpdate,
    preferences: PreferenceService = Depends(get_preference_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> ForumSubscriptionRead:
    subscription = await preferences.update_forum_subscription(
        current_user.id, forum_id, payload.notifications
    )
    return ForumSubscriptionRead.from_entity(subscription)
