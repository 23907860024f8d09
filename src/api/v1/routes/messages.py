"""Group message API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_message_service
from api.v1.schemas.message import (
    GroupMessageCreate,
    GroupMessageDetailResponse,
    GroupMessageListResponse,
    GroupMessageResponse,
)
from core.rate_limit import limiter
from domain.entities.message import Message
from domain.services.message_service import MessageService

router = APIRouter(
    prefix="/groups/{group_id}/messages",
    tags=["messages"],
)


@router.get(
    "",
    response_model=GroupMessageListResponse,
    summary="List group messages",
    responses={
        200: {"description": "Messages, newest first"},
        403: {"description": "Not an approved member"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_messages(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    limit: int = Query(50, ge=1, le=100),
    before: int | None = Query(None, ge=1, description="Only messages older than this id"),
    service: MessageService = Depends(get_message_service),
) -> GroupMessageListResponse:
    """List messages and mark them read by the caller."""
    messages = await service.list_messages(group_id, user.username, limit=limit, before=before)
    data = [_build_message_response(m) for m in messages]
    next_before = data[-1].id if len(data) == limit else None
    return GroupMessageListResponse(data=data, meta={"limit": limit, "next_before": next_before})


@router.post(
    "",
    response_model=GroupMessageDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a message",
    responses={
        201: {"description": "Message posted"},
        403: {"description": "Not an approved member"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def send_message(
    request: Request,
    group_id: UUID,
    body: GroupMessageCreate,
    user: CurrentUser,
    service: MessageService = Depends(get_message_service),
) -> GroupMessageDetailResponse:
    """Post a message to the group chat."""
    message = await service.send(group_id, user.username, body.content)
    return GroupMessageDetailResponse(data=_build_message_response(message))


def _build_message_response(message: Message) -> GroupMessageResponse:
    """Convert domain entity to response schema."""
    return GroupMessageResponse(
        id=message.id,
        group_id=message.group_id,
        username=message.username,
        content=message.content,
        read_by=message.read_by,
        created_at=message.created_at,
    )
