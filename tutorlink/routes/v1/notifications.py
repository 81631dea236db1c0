# tutorlink/routes/v1/notifications.py
"""
Notification routes - API v1

Endpoints:
    GET /                       → Caller's notifications, newest first
    PUT /read-all               → Mark all of the caller's notifications read
    PUT /{notification_id}/read → Mark one notification read
    DELETE /{notification_id}   → Delete one notification
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.params import Path

from ...api.dependencies import get_current_actor, get_notification_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...principal import Actor
from ...schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from ...services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications-v1"])

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(100, ge=1, le=500),
    current_actor: Actor = Depends(get_current_actor),
    notification_service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    try:
        items, unread = await asyncio.to_thread(
            notification_service.list_for_user, current_actor, limit
        )
        return NotificationListResponse(
            notifications=[NotificationResponse.model_validate(n) for n in items],
            unread_count=unread,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    current_actor: Actor = Depends(get_current_actor),
    notification_service: NotificationService = Depends(get_notification_service),
) -> MarkAllReadResponse:
    try:
        updated = await asyncio.to_thread(notification_service.mark_all_read, current_actor)
        return MarkAllReadResponse(updated=updated)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_actor: Actor = Depends(get_current_actor),
    notification_service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    try:
        notification = await asyncio.to_thread(
            notification_service.mark_read, current_actor, notification_id
        )
        return NotificationResponse.model_validate(notification)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_actor: Actor = Depends(get_current_actor),
    notification_service: NotificationService = Depends(get_notification_service),
) -> Response:
    try:
        await asyncio.to_thread(notification_service.delete, current_actor, notification_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)
