"""Domain event names and the payload shape producers must publish.

Producers (forum, chat and task controllers) publish plain mappings with
camelCase keys. Each payload class below parses one of those mappings and
raises :class:`InvalidEventPayload` when a required key is missing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar


class InvalidEventPayload(ValueError):
    """Raised when an event payload lacks a field its consumers need."""


class EventTypes:
    """All event names published on the notification event bus."""

    class Forum:
        MESSAGE_CREATED = "forum.message.created"
        USER_MENTIONED = "forum.user.mentioned"
        MESSAGE_REPLIED = "forum.message.replied"

    class Task:
        ASSIGNED = "task.assigned"
        COMPLETED = "task.completed"

    class Chat:
        MESSAGE_CREATED = "chat.message.created"
        USER_MENTIONED = "chat.user.mentioned"
        MESSAGE_REPLIED = "chat.message.replied"

    class System:
        ANNOUNCEMENT = "system.announcement"


def _require(payload: Mapping[str, Any], key: str, event_name: str) -> Any:
    value = payload.get(key)
    if value is None or value == "":
        raise InvalidEventPayload(f"{event_name} payload requires '{key}'")
    return value


def _optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    return str(value)


def _recipient_list(payload: Mapping[str, Any], key: str, event_name: str, *, required: bool) -> tuple[str, ...]:
    value = payload.get(key)
    if value is None:
        if required:
            raise InvalidEventPayload(f"{event_name} payload requires '{key}'")
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
        raise InvalidEventPayload(f"{event_name} payload field '{key}' must be a list")
    return tuple(str(item) for item in value if item is not None and item != "")


@dataclass(frozen=True)
class ForumMessageCreated:
    event_name: ClassVar[str] = EventTypes.Forum.MESSAGE_CREATED

    forum_id: str
    message_id: str
    sender_id: str
    forum_title: str
    message_content: str
    recipients: tuple[str, ...]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ForumMessageCreated":
        name = cls.event_name
        return cls(
            forum_id=str(_require(payload, "forumId", name)),
            message_id=str(_require(payload, "messageId", name)),
            sender_id=str(_require(payload, "senderId", name)),
            forum_title=str(_require(payload, "forumTitle", name)),
            message_content=str(payload.get("messageContent") or ""),
            recipients=_recipient_list(payload, "recipients", name, required=True),
        )


@dataclass(frozen=True)
class ForumUserMentioned:
    event_name: ClassVar[str] = EventTypes.Forum.USER_MENTIONED

    forum_id: str
    message_id: str
    mentioned_user_id: str
    sender_id: str
    forum_title: str
    message_content: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ForumUserMentioned":
        name = cls.event_name
        return cls(
            forum_id=str(_require(payload, "forumId", name)),
            message_id=str(_require(payload, "messageId", name)),
            mentioned_user_id=str(_require(payload, "mentionedUserId", name)),
            sender_id=str(_require(payload, "senderId", name)),
            forum_title=str(_require(payload, "forumTitle", name)),
            message_content=str(payload.get("messageContent") or ""),
        )


@dataclass(frozen=True)
class ForumMessageReplied:
    event_name: ClassVar[str] = EventTypes.Forum.MESSAGE_REPLIED

    forum_id: str
    message_id: str
    original_author_id: str
    sender_id: str
    forum_title: str
    message_content: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ForumMessageReplied":
        name = cls.event_name
        return cls(
            forum_id=str(_require(payload, "forumId", name)),
            message_id=str(_require(payload, "messageId", name)),
            original_author_id=str(_require(payload, "originalAuthorId", name)),
            sender_id=str(_require(payload, "senderId", name)),
            forum_title=str(_require(payload, "forumTitle", name)),
            message_content=str(payload.get("messageContent") or ""),
        )


@dataclass(frozen=True)
class TaskAssigned:
    event_name: ClassVar[str] = EventTypes.Task.ASSIGNED

    task_id: str
    assignee_id: str
    assigner_id: str
    task_title: str
    task_description: str | None = None
    due_date: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TaskAssigned":
        name = cls.event_name
        due_date = payload.get("dueDate")
        if due_date is not None and hasattr(due_date, "isoformat"):
            due_date = due_date.isoformat()
        return cls(
            task_id=str(_require(payload, "taskId", name)),
            assignee_id=str(_require(payload, "assigneeId", name)),
            assigner_id=str(_require(payload, "assignerId", name)),
            task_title=str(_require(payload, "taskTitle", name)),
            task_description=_optional_str(payload, "taskDescription"),
            due_date=None if due_date is None else str(due_date),
        )


@dataclass(frozen=True)
class TaskCompleted:
    event_name: ClassVar[str] = EventTypes.Task.COMPLETED

    task_id: str
    task_title: str
    assignee_id: str
    completed_by: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TaskCompleted":
        name = cls.event_name
        return cls(
            task_id=str(_require(payload, "taskId", name)),
            task_title=str(_require(payload, "taskTitle", name)),
            assignee_id=str(_require(payload, "assigneeId", name)),
            completed_by=str(_require(payload, "completedBy", name)),
        )


@dataclass(frozen=True)
class ChatMessageCreated:
    event_name: ClassVar[str] = EventTypes.Chat.MESSAGE_CREATED

    mission_id: str
    message_id: str
    sender_id: str
    sender_username: str
    mission_name: str
    message_content: str
    recipients: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ChatMessageCreated":
        name = cls.event_name
        return cls(
            mission_id=str(_require(payload, "missionId", name)),
            message_id=str(_require(payload, "messageId", name)),
            sender_id=str(_require(payload, "senderId", name)),
            sender_username=str(_require(payload, "senderUsername", name)),
            mission_name=str(_require(payload, "missionName", name)),
            message_content=str(payload.get("messageContent") or ""),
            recipients=_recipient_list(payload, "recipients", name, required=False),
        )


@dataclass(frozen=True)
class ChatUserMentioned:
    event_name: ClassVar[str] = EventTypes.Chat.USER_MENTIONED

    mission_id: str
    message_id: str
    mentioned_user_id: str
    sender_id: str
    sender_username: str
    mission_name: str
    message_content: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ChatUserMentioned":
        name = cls.event_name
        return cls(
            mission_id=str(_require(payload, "missionId", name)),
            message_id=str(_require(payload, "messageId", name)),
            mentioned_user_id=str(_require(payload, "mentionedUserId", name)),
            sender_id=str(_require(payload, "senderId", name)),
            sender_username=str(_require(payload, "senderUsername", name)),
            mission_name=str(_require(payload, "missionName", name)),
            message_content=str(payload.get("messageContent") or ""),
        )


@dataclass(frozen=True)
class ChatMessageReplied:
    event_name: ClassVar[str] = EventTypes.Chat.MESSAGE_REPLIED

    mission_id: str
    message_id: str
    original_author_id: str
    sender_id: str
    sender_username: str
    mission_name: str
    message_content: str
    original_message_id: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ChatMessageReplied":
        name = cls.event_name
        return cls(
            mission_id=str(_require(payload, "missionId", name)),
            message_id=str(_require(payload, "messageId", name)),
            original_author_id=str(_require(payload, "originalAuthorId", name)),
            sender_id=str(_require(payload, "senderId", name)),
            sender_username=str(_require(payload, "senderUsername", name)),
            mission_name=str(_require(payload, "missionName", name)),
            message_content=str(payload.get("messageContent") or ""),
            original_message_id=_optional_str(payload, "originalMessageId"),
        )


@dataclass(frozen=True)
class SystemAnnouncement:
    event_name: ClassVar[str] = EventTypes.System.ANNOUNCEMENT

    title: str
    body: str
    recipients: tuple[str, ...]
    link: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SystemAnnouncement":
        name = cls.event_name
        return cls(
            title=str(_require(payload, "title", name)),
            body=str(_require(payload, "body", name)),
            recipients=_recipient_list(payload, "recipients", name, required=True),
            link=_optional_str(payload, "link"),
        )


__all__ = [
    "ChatMessageCreated",
    "ChatMessageReplied",
    "ChatUserMentioned",
    "EventTypes",
    "ForumMessageCreated",
    "ForumMessageReplied",
    "ForumUserMentioned",
    "InvalidEventPayload",
    "SystemAnnouncement",
    "TaskAssigned",
    "TaskCompleted",
]
