"""Tests for notification preference management."""

import pytest

from teamhub.domain.entities import (
    ForumSubscription,
    NotificationCategory,
    NotificationPreference,
    UnknownCategoryError,
)


def test_default_preference_allows_everything():
    preference = NotificationPreference.default_for("u1")

    assert all(preference.allows(category) for category in NotificationCategory)


def test_missing_category_entry_counts_as_enabled():
    preference = NotificationPreference(user_id="u1", category_settings={"chat_message": False})

    assert preference.is_category_enabled(NotificationCategory.CHAT_REPLY) is True
    assert preference.is_category_enabled(NotificationCategory.CHAT_MESSAGE) is False


def test_forum_subscription_only_affects_forum_messages():
    preference = NotificationPreference(
        user_id="u1",
        forum_subscriptions=[ForumSubscription(forum_id="f1", notifications=False)],
    )
    references = {"forum": "f1"}

    assert preference.allows(NotificationCategory.FORUM_MESSAGE, references) is False
    assert preference.allows(NotificationCategory.FORUM_MESSAGE, {"forum": "f2"}) is True
    assert preference.allows(NotificationCategory.FORUM_REPLY, references) is True


def test_set_forum_subscription_keeps_one_entry_per_forum():
    preference = NotificationPreference.default_for("u1")

    preference.set_forum_subscription("f1", False)
    preference.set_forum_subscription("f1", True)

    assert preference.forum_subscriptions == [ForumSubscription(forum_id="f1", notifications=True)]


@pytest.mark.asyncio
async def test_get_preferences_defaults_without_creating_a_row(system):
    preference = await system.preferences.get_preferences("u1")

    assert preference.id is None
    assert preference.notifications_enabled is True
    assert preference.category_settings == {}
    assert preference.forum_subscriptions == []


@pytest.mark.asyncio
async def test_writes_create_the_row_lazily_and_persist(system):
    saved = await system.preferences.set_notifications_enabled("u1", False)

    assert saved.id is not None
    reloaded = await system.preferences.get_preferences("u1")
    assert reloaded.id == saved.id
    assert reloaded.notifications_enabled is False


@pytest.mark.asyncio
async def test_category_switches_round_trip(system):
    await system.preferences.set_category_enabled("u1", "task_assigned", False)
    await system.preferences.set_category_enabled("u1", NotificationCategory.SYSTEM, False)
    await system.preferences.set_category_enabled("u1", "task_assigned", True)

    preference = await system.preferences.get_preferences("u1")
    assert preference.category_settings == {"task_assigned": True, "system": False}


@pytest.mark.asyncio
async def test_unknown_category_is_rejected(system):
    with pytest.raises(UnknownCategoryError):
        await system.preferences.set_category_enabled("u1", "smoke_signal", False)


@pytest.mark.asyncio
async def test_forum_subscription_upsert(system):
    first = await system.preferences.update_forum_subscription("u1", "f1", False)
    second = await system.preferences.update_forum_subscription("u1", "f1", True)
    await system.preferences.update_forum_subscription("u1", "f2", False)

    assert first == ForumSubscription(forum_id="f1", notifications=False)
    assert second == ForumSubscription(forum_id="f1", notifications=True)
    preference = await system.preferences.get_preferences("u1")
    assert preference.forum_subscriptions == [
        ForumSubscription(forum_id="f1", notifications=True),
        ForumSubscription(forum_id="f2", notifications=False),
    ]
