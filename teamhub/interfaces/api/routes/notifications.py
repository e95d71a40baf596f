"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from teamhub.application.use_cases.notifications import NotificationService
from teamhub.domain.entities import NotificationCategory, NotificationOptions, UnknownCategoryError
from teamhub.infrastructure.notifications import serialize_notification
from teamhub.interfaces.api.dependencies import (
    CurrentUser,
    get_current_user,
    get_notification_service,
    require_admin,
    resolve_current_user,
)
from teamhub.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
    SendTestNotificationRequest,
    UnreadCountResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=0, le=100),
    unread_only: bool = False,
    service: NotificationService = Depends(get_notification_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> NotificationListResponse:
    """Return one page of the authenticated user's notifications, newest first."""

    result = await service.get_user_notifications(
        current_user.id, page=page, limit=limit, unread_only=unread_only
    )
    return NotificationListResponse.from_page(result)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    service: NotificationService = Depends(get_notification_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> UnreadCountResponse:
    result = await service.get_user_notifications(current_user.id, 1, 0, True)
    return UnreadCountResponse(unread_count=result.unread_count)


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_as_read(
    service: NotificationService = Depends(get_notification_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> MarkAllReadResponse:
    updated = await service.mark_all_as_read(current_user.id)
    return MarkAllReadResponse(updated=updated)


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_as_read(
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> None:
    if not await service.mark_as_read(notification_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notificación no encontrada")


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> None:
    if not await service.delete_notification(notification_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notificación no encontrada")


@router.post("/test", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def send_test_notification(
    payload: SendTestNotificationRequest,
    service: NotificationService = Depends(get_notification_service),
    current_user: CurrentUser = Depends(require_admin),
) -> NotificationRead:
    """Create a notification for any user; restricted to administrators."""

    try:
        category = NotificationCategory.parse(payload.category)
    except UnknownCategoryError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    recipient_id = payload.recipient_id or current_user.id
    sender_id = None if category is NotificationCategory.SYSTEM else current_user.id
    notification = await service.create_notification(
        category,
        NotificationOptions(
            recipient=recipient_id,
            sender=sender_id,
            title=payload.title,
            body=payload.body,
            link=payload.link,
        ),
    )
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="La notificación no fue creada",
        )
    return NotificationRead.from_entity(notification)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    system = websocket.app.state.notifications
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        user = resolve_current_user(token, system.settings)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    service: NotificationService = system.service
    manager = system.connections
    pending = await service.get_user_notifications(user.id, unread_only=True)

    await manager.connect(user.id, websocket)
    try:
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(n) for n in pending.notifications]}
        )
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in ids:
                        if isinstance(notification_id, int):
                            await service.mark_as_read(notification_id, user.id)
                continue
    except WebSocketDisconnect:
        logger.debug("Notification websocket of %s closed", user.id)
    finally:
        manager.disconnect(user.id, websocket)
