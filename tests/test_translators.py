"""End-to-end tests: publish a domain event, observe the notifications."""

import logging

import pytest

from teamhub.domain.events import EventTypes


def _chat_message(**overrides):
    payload = {
        "missionId": "M",
        "messageId": "X",
        "senderId": "A",
        "senderUsername": "alice",
        "missionName": "Apollo",
        "messageContent": "hi team",
        "recipients": ["A", "B", "C"],
    }
    payload.update(overrides)
    return payload


async def _publish(system, event_name, payload):
    system.bus.publish(event_name, payload)
    await system.bus.drain()


@pytest.mark.asyncio
async def test_chat_message_reaches_everyone_but_the_sender(system, service, transport):
    await _publish(system, EventTypes.Chat.MESSAGE_CREATED, _chat_message())

    sender_page = await service.get_user_notifications("A")
    assert sender_page.total == 0

    for recipient in ("B", "C"):
        page = await service.get_user_notifications(recipient)
        assert page.total == 1
        assert page.unread_count == 1
        notification = page.notifications[0]
        assert notification.title == "Nova mensagem em Apollo"
        assert notification.body == "alice: hi team"
        assert notification.link == "/missions/M/chat?message=X"
        assert notification.references == {"mission": "M", "message": "X"}
        assert notification.sender_id == "A"

    assert [group for group, _, _ in transport.emitted] == ["user:B", "user:C"]


@pytest.mark.asyncio
async def test_chat_message_without_recipients_creates_nothing(system, service, transport):
    await _publish(system, EventTypes.Chat.MESSAGE_CREATED, _chat_message(recipients=None))

    assert transport.emitted == []


@pytest.mark.asyncio
async def test_long_message_is_truncated_in_the_body(system, service, transport):
    await _publish(
        system,
        EventTypes.Forum.MESSAGE_CREATED,
        {
            "forumId": "f1",
            "messageId": "m1",
            "senderId": "A",
            "forumTitle": "Geral",
            "messageContent": "x" * 250,
            "recipients": ["B"],
        },
    )

    notification = (await service.get_user_notifications("B")).notifications[0]
    assert notification.title == 'Nova mensagem em "Geral"'
    assert len(notification.body) == 103
    assert notification.body.endswith("...")
    assert notification.link == "/forum/f1/message/m1"


@pytest.mark.asyncio
async def test_long_chat_message_body_includes_sender_within_the_limit(system, service, transport):
    await _publish(
        system,
        EventTypes.Chat.MESSAGE_CREATED,
        _chat_message(messageContent="z" * 150, recipients=["B"]),
    )

    notification = (await service.get_user_notifications("B")).notifications[0]
    assert notification.body.startswith("alice: zzz")
    assert notification.body.endswith("...")
    assert len(notification.body) == 103


@pytest.mark.asyncio
async def test_long_chat_mention_body_stays_within_the_limit(system, service, transport):
    await _publish(
        system,
        EventTypes.Chat.USER_MENTIONED,
        {
            "missionId": "M",
            "messageId": "X",
            "mentionedUserId": "B",
            "senderId": "A",
            "senderUsername": "alice",
            "missionName": "Apollo",
            "messageContent": "@bob " + "w" * 200,
        },
    )

    notification = (await service.get_user_notifications("B")).notifications[0]
    assert notification.title == "Você foi mencionado em Apollo"
    assert len(notification.body) <= 103
    assert notification.body.endswith("...")


@pytest.mark.asyncio
async def test_short_message_is_not_marked_as_truncated(system, service, transport):
    await _publish(
        system,
        EventTypes.Forum.MESSAGE_REPLIED,
        {
            "forumId": "f1",
            "messageId": "m2",
            "originalAuthorId": "B",
            "senderId": "A",
            "forumTitle": "Geral",
            "messageContent": "y" * 100,
        },
    )

    notification = (await service.get_user_notifications("B")).notifications[0]
    assert notification.title == 'Nova resposta em "Geral"'
    assert notification.body == "y" * 100


@pytest.mark.asyncio
async def test_mentioning_yourself_creates_nothing(system, service, transport):
    await _publish(
        system,
        EventTypes.Chat.USER_MENTIONED,
        {
            "missionId": "M",
            "messageId": "X",
            "mentionedUserId": "A",
            "senderId": "A",
            "senderUsername": "alice",
            "missionName": "Apollo",
            "messageContent": "@alice note to self",
        },
    )

    assert transport.emitted == []


@pytest.mark.asyncio
async def test_forum_mention(system, service, transport):
    await _publish(
        system,
        EventTypes.Forum.USER_MENTIONED,
        {
            "forumId": "f1",
            "messageId": "m1",
            "mentionedUserId": "B",
            "senderId": "A",
            "forumTitle": "Geral",
            "messageContent": "@bob look",
        },
    )

    notification = (await service.get_user_notifications("B")).notifications[0]
    assert notification.title == 'Você foi mencionado em "Geral"'
    assert notification.references == {"forum": "f1", "message": "m1"}


@pytest.mark.asyncio
async def test_chat_reply_names_the_sender(system, service, transport):
    await _publish(
        system,
        EventTypes.Chat.MESSAGE_REPLIED,
        {
            "missionId": "M",
            "messageId": "Y",
            "originalAuthorId": "B",
            "senderId": "A",
            "senderUsername": "alice",
            "missionName": "Apollo",
            "messageContent": "agreed",
            "originalMessageId": "X",
        },
    )

    notification = (await service.get_user_notifications("B")).notifications[0]
    assert notification.title == "alice respondeu à sua mensagem em Apollo"
    assert notification.body == "agreed"


@pytest.mark.asyncio
async def test_task_assignment_carries_due_date(system, service, transport):
    await _publish(
        system,
        EventTypes.Task.ASSIGNED,
        {
            "taskId": "t1",
            "assigneeId": "B",
            "assignerId": "A",
            "taskTitle": "Write report",
            "taskDescription": "Quarterly numbers",
            "dueDate": "2026-11-01",
        },
    )

    notification = (await service.get_user_notifications("B")).notifications[0]
    assert notification.title == "Nova tarefa atribuída a você"
    assert notification.body == "Write report: Quarterly numbers"
    assert notification.link == "/tasks/t1"
    assert notification.references == {"task": "t1"}
    assert notification.metadata == {"dueDate": "2026-11-01"}


@pytest.mark.asyncio
async def test_task_completed_by_someone_else_notifies_the_assignee(system, service, transport):
    payload = {"taskId": "t1", "taskTitle": "Write report", "assigneeId": "B", "completedBy": "A"}

    await _publish(system, EventTypes.Task.COMPLETED, payload)
    await _publish(system, EventTypes.Task.COMPLETED, {**payload, "completedBy": "B"})

    page = await service.get_user_notifications("B")
    assert page.total == 1
    assert page.notifications[0].title == "Tarefa concluída"
    assert page.notifications[0].sender_id == "A"


@pytest.mark.asyncio
async def test_system_announcement_reaches_every_recipient(system, service, transport):
    await _publish(
        system,
        EventTypes.System.ANNOUNCEMENT,
        {
            "title": "Manutenção",
            "body": "O sistema ficará indisponível às 22h.",
            "link": "/status",
            "recipients": ["A", "B", "B"],
        },
    )

    for recipient in ("A", "B"):
        page = await service.get_user_notifications(recipient)
        assert page.total == 1
        notification = page.notifications[0]
        assert notification.category.value == "system"
        assert notification.sender_id is None
        assert notification.link == "/status"


@pytest.mark.asyncio
async def test_muted_category_is_respected_through_events(system, service, transport):
    await system.preferences.set_category_enabled("C", "chat_message", False)

    await _publish(system, EventTypes.Chat.MESSAGE_CREATED, _chat_message())

    assert (await service.get_user_notifications("B")).total == 1
    assert (await service.get_user_notifications("C")).total == 0


@pytest.mark.asyncio
async def test_malformed_payload_is_logged_not_raised(system, service, transport, caplog):
    with caplog.at_level(logging.ERROR, logger="teamhub.infrastructure.events.bus"):
        await _publish(system, EventTypes.Task.ASSIGNED, {"taskId": "t1"})

    assert transport.emitted == []
    assert any("failed for event task.assigned" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_unregister_stops_translation(system, service, transport):
    system.listener.unregister()

    await _publish(system, EventTypes.Chat.MESSAGE_CREATED, _chat_message())

    assert transport.emitted == []
    assert system.bus.handler_count(EventTypes.Chat.MESSAGE_CREATED) == 0
