"""Group membership API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_membership_service
from api.v1.schemas.common import MessageResponse
from api.v1.schemas.membership import (
    MembershipDetailResponse,
    MembershipListResponse,
    MembershipResponse,
)
from core.rate_limit import limiter
from domain.entities.membership import Membership
from domain.services.membership_service import MembershipService

router = APIRouter(
    prefix="/groups/{group_id}",
    tags=["memberships"],
)


@router.post(
    "/join",
    response_model=MembershipDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request to join a group",
    responses={
        201: {"description": "Join request submitted"},
        403: {"description": "Group full or membership window closed"},
        404: {"description": "Group not found"},
        409: {"description": "Request already pending or already a member"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def join_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipDetailResponse:
    """Ask the organiser to join a group."""
    membership = await service.request_join(group_id, user.username)
    return MembershipDetailResponse(
        data=_build_membership_response(membership),
        message="Join request submitted",
    )


@router.post(
    "/leave",
    response_model=MessageResponse,
    summary="Leave a group",
    responses={
        200: {"description": "Left the group or withdrew the request"},
        403: {"description": "Organiser, rejected request or window closed"},
        404: {"description": "Group or membership not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def leave_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MessageResponse:
    """Leave a group, or withdraw a pending join request."""
    await service.leave(group_id, user.username)
    return MessageResponse(message="Left group successfully")


@router.get(
    "/pending-members",
    response_model=MembershipListResponse,
    summary="List pending join requests",
    responses={
        200: {"description": "Pending join requests"},
        403: {"description": "Not the organiser"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_pending_members(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipListResponse:
    """List pending join requests. Organiser only."""
    pending = await service.list_pending(group_id, user.username)
    data = [_build_membership_response(m) for m in pending]
    return MembershipListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/members",
    response_model=MembershipListResponse,
    summary="List group members",
    responses={
        200: {"description": "Group members"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipListResponse:
    """List members. The organiser also sees pending and rejected requests."""
    members = await service.list_members(group_id, user.username)
    data = [_build_membership_response(m) for m in members]
    return MembershipListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/members/{username}/approve",
    response_model=MembershipDetailResponse,
    summary="Approve a join request",
    responses={
        200: {"description": "Member approved"},
        403: {"description": "Not the organiser, group full or window closed"},
        404: {"description": "Group or join request not found"},
        409: {"description": "Request is not pending"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def approve_member(
    request: Request,
    group_id: UUID,
    username: str,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipDetailResponse:
    """Approve a pending join request. Organiser only."""
    membership = await service.approve(group_id, user.username, username)
    return MembershipDetailResponse(
        data=_build_membership_response(membership),
        message="Member approved",
    )


@router.post(
    "/members/{username}/reject",
    response_model=MembershipDetailResponse,
    summary="Reject a join request",
    responses={
        200: {"description": "Member rejected"},
        403: {"description": "Not the organiser or window closed"},
        404: {"description": "Group or join request not found"},
        409: {"description": "Request is not pending"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def reject_member(
    request: Request,
    group_id: UUID,
    username: str,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipDetailResponse:
    """Reject a pending join request. Organiser only."""
    membership = await service.reject(group_id, user.username, username)
    return MembershipDetailResponse(
        data=_build_membership_response(membership),
        message="Member rejected",
    )


@router.post(
    "/members/{username}/remove",
    response_model=MessageResponse,
    summary="Remove a member",
    responses={
        200: {"description": "Member removed"},
        400: {"description": "The organiser cannot be removed"},
        403: {"description": "Not the organiser or window closed"},
        404: {"description": "Group not found or user is not an approved member"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    group_id: UUID,
    username: str,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MessageResponse:
    """Remove an approved member. Organiser only."""
    await service.remove(group_id, user.username, username)
    return MessageResponse(message="Member removed successfully")


def _build_membership_response(membership: Membership) -> MembershipResponse:
    """Convert domain entity to response schema."""
    return MembershipResponse(
        group_id=membership.group_id,
        username=membership.username,
        status=membership.status,
        joined_at=membership.joined_at,
        updated_at=membership.updated_at,
    )
