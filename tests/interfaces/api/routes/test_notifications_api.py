"""Integration tests for the notification and preference endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from teamhub.domain.events import EventTypes
from teamhub.infrastructure.security import create_access_token


@pytest.fixture()
def client(settings):
    from main import create_app

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def _headers(settings, user_id: str, **claims) -> dict[str, str]:
    token = create_access_token({"sub": user_id, **claims}, settings)
    return {"Authorization": f"Bearer {token}"}


def _publish(client: TestClient, event_name: str, payload: dict) -> None:
    system = client.app.state.notifications
    client.portal.call(system.bus.publish, event_name, payload)
    client.portal.call(system.bus.drain)


def _chat_message(recipients):
    return {
        "missionId": "M",
        "messageId": "X",
        "senderId": "A",
        "senderUsername": "alice",
        "missionName": "Apollo",
        "messageContent": "hi team",
        "recipients": recipients,
    }


def test_requests_without_token_are_rejected(client):
    response = client.get("/notifications/")

    assert response.status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.get("/notifications/", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Credenciales inválidas"


def test_list_and_count_after_event(client, settings):
    _publish(client, EventTypes.Chat.MESSAGE_CREATED, _chat_message(["A", "B"]))

    response = client.get("/notifications/", headers=_headers(settings, "B"))
    assert response.status_code == 200
    body = response.json()
    assert body["unread_count"] == 1
    assert body["pagination"] == {"total": 1, "page": 1, "limit": 20, "pages": 1}
    assert body["notifications"][0]["title"] == "Nova mensagem em Apollo"
    assert body["notifications"][0]["category"] == "chat_message"

    count = client.get("/notifications/unread-count", headers=_headers(settings, "B"))
    assert count.json() == {"unread_count": 1}

    sender = client.get("/notifications/unread-count", headers=_headers(settings, "A"))
    assert sender.json() == {"unread_count": 0}


def test_mark_read_delete_and_ownership(client, settings):
    _publish(client, EventTypes.Chat.MESSAGE_CREATED, _chat_message(["B"]))
    headers = _headers(settings, "B")
    notification_id = client.get("/notifications/", headers=headers).json()["notifications"][0]["id"]

    stranger = _headers(settings, "C")
    foreign = client.put(f"/notifications/{notification_id}/read", headers=stranger)
    assert foreign.status_code == 404
    assert foreign.json()["detail"] == "Notificación no encontrada"
    assert client.delete(f"/notifications/{notification_id}", headers=stranger).status_code == 404

    assert client.put(f"/notifications/{notification_id}/read", headers=headers).status_code == 204
    assert client.put(f"/notifications/{notification_id}/read", headers=headers).status_code == 204
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 0}

    assert client.delete(f"/notifications/{notification_id}", headers=headers).status_code == 204
    assert client.delete(f"/notifications/{notification_id}", headers=headers).status_code == 404


def test_read_all(client, settings):
    for _ in range(3):
        _publish(client, EventTypes.Chat.MESSAGE_CREATED, _chat_message(["B"]))
    headers = _headers(settings, "B")

    response = client.put("/notifications/read-all", headers=headers)

    assert response.json() == {"updated": 3}
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 0}


def test_test_endpoint_requires_admin(client, settings):
    response = client.post("/notifications/test", json={}, headers=_headers(settings, "A"))

    assert response.status_code == 403
    assert response.json()["detail"] == "No autorizado"


def test_test_endpoint_creates_notification(client, settings):
    response = client.post(
        "/notifications/test",
        json={"recipient_id": "B", "category": "system", "title": "Olá", "body": "Teste"},
        headers=_headers(settings, "admin-1", role="admin"),
    )

    assert response.status_code == 201
    assert response.json()["recipient_id"] == "B"
    assert response.json()["sender_id"] is None


def test_test_endpoint_rejects_unknown_category(client, settings):
    response = client.post(
        "/notifications/test",
        json={"category": "pager"},
        headers=_headers(settings, "admin-1", role="admin"),
    )

    assert response.status_code == 400


def test_preferences_endpoints(client, settings):
    headers = _headers(settings, "B")

    initial = client.get("/preferences/notifications", headers=headers).json()
    assert initial["notifications_enabled"] is True
    assert initial["category_settings"] == {}

    muted = client.put(
        "/preferences/notifications/categories/chat_message",
        json={"enabled": False},
        headers=headers,
    )
    assert muted.json()["category_settings"] == {"chat_message": False}

    unknown = client.put(
        "/preferences/notifications/categories/pager",
        json={"enabled": False},
        headers=headers,
    )
    assert unknown.status_code == 400

    subscription = client.put(
        "/preferences/forums/f1", json={"notifications": False}, headers=headers
    )
    assert subscription.json() == {"forum_id": "f1", "notifications": False}

    disabled = client.put("/preferences/notifications", json={"enabled": False}, headers=headers)
    assert disabled.json()["notifications_enabled"] is False
    assert disabled.json()["forum_subscriptions"] == [{"forum_id": "f1", "notifications": False}]

    _publish(client, EventTypes.Chat.MESSAGE_CREATED, _chat_message(["B"]))
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 0}


def test_websocket_requires_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/notifications/ws") as websocket:
            websocket.receive_json()


def test_websocket_init_push_ping_and_ack(client, settings):
    _publish(client, EventTypes.Chat.MESSAGE_CREATED, _chat_message(["B"]))
    token = create_access_token({"sub": "B"}, settings)

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [item["title"] for item in init["data"]] == ["Nova mensagem em Apollo"]
        first_id = init["data"][0]["id"]

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        _publish(client, EventTypes.Chat.MESSAGE_CREATED, _chat_message(["B"]))
        pushed = websocket.receive_json()
        assert pushed["type"] == "notification"
        assert set(pushed["data"]) == {"id", "category", "title", "body", "link", "created_at"}
        assert pushed["data"]["body"] == "alice: hi team"

        websocket.send_json({"type": "ack", "ids": [first_id]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    headers = _headers(settings, "B")
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 1}
