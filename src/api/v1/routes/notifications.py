"""Notification API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_notification_service
from api.v1.schemas.common import MessageResponse
from api.v1.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from core.rate_limit import limiter
from domain.services.notification_service import NotificationService

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List notifications",
    responses={
        200: {"description": "Notification feed, newest first"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_notifications(
    request: Request,
    user: CurrentUser,
    unread_only: bool = Query(False, description="Only unread notifications"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """List the caller's notifications."""
    notifications = await service.get_notifications(
        user.username, unread_only=unread_only, limit=limit
    )
    unread_count = await service.get_unread_count(user.username)
    return NotificationListResponse(
        data=[
            NotificationResponse(
                id=n.id,
                type=n.type,
                message=n.message,
                group_id=n.group_id,
                read=n.read,
                created_at=n.created_at,
            )
            for n in notifications
        ],
        meta={"unread_count": unread_count, "limit": limit},
    )


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Get unread notification count",
    responses={
        200: {"description": "Unread notification count"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_unread_count(
    request: Request,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountResponse:
    """Get the caller's unread notification count."""
    count = await service.get_unread_count(user.username)
    return UnreadCountResponse(count=count)


@router.post(
    "/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark all notifications as read",
    responses={
        200: {"description": "Count of notifications marked as read"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def mark_all_notifications_read(
    request: Request,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> MarkAllReadResponse:
    """Mark every notification of the caller as read."""
    count = await service.mark_all_read(user.username)
    return MarkAllReadResponse(count=count)


@router.post(
    "/{notification_id}/read",
    response_model=MessageResponse,
    summary="Mark notification as read",
    responses={
        200: {"description": "Notification marked as read"},
        404: {"description": "Notification not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def mark_notification_read(
    request: Request,
    notification_id: UUID,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> MessageResponse:
    """Mark a notification as read. Only its recipient may do so."""
    await service.mark_read(notification_id, user.username)
    return MessageResponse(message="Notification marked as read")
