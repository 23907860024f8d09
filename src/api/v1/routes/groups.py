"""Group API routes."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_group_service
from api.v1.schemas.common import to_naive_utc
from api.v1.schemas.group import (
    GroupCreate,
    GroupDetailResponse,
    GroupListResponse,
    GroupResponse,
    GroupUpdate,
    OrganiserSummary,
)
from core.rate_limit import limiter
from domain.entities.group import ActivityType, Group, GroupDetails, GroupFilter, SkillLevel
from domain.services.group_service import GroupService

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
)


@router.get(
    "",
    response_model=GroupListResponse,
    summary="List groups",
    responses={
        200: {"description": "Groups matching the filters"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_groups(
    request: Request,
    user: CurrentUser,
    activity_type: ActivityType | None = Query(None),
    skill_level: SkillLevel | None = Query(None),
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    min_members: int | None = Query(None, ge=0),
    max_members: int | None = Query(None, ge=0),
    sort_by: str = Query("date_time", description="Unknown fields fall back to date_time"),
    sort_order: str = Query("asc", description="asc or desc"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: GroupService = Depends(get_group_service),
) -> GroupListResponse:
    """Browse groups with filters, sorting and pagination."""
    filters = GroupFilter(
        activity_type=activity_type,
        skill_level=skill_level,
        min_price=min_price,
        max_price=max_price,
        date_from=to_naive_utc(date_from),
        date_to=to_naive_utc(date_to),
        min_members=min_members,
        max_members=max_members,
        sort_by=sort_by,
        sort_order=sort_order.lower(),
        limit=limit,
        offset=offset,
    )
    groups = await service.search(filters)
    data = [_build_group_response(g) for g in groups]
    return GroupListResponse(
        data=data,
        meta={"limit": limit, "offset": offset, "count": len(data)},
    )


@router.post(
    "",
    response_model=GroupDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    responses={
        201: {"description": "Group created"},
        400: {"description": "Event date is not in the future"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_group(
    request: Request,
    body: GroupCreate,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Create a group. The caller becomes its organiser and first member."""
    group = await service.create(
        organiser_username=user.username,
        name=body.name,
        date_time=body.date_time,
        max_members=body.max_members,
        description=body.description,
        activity_type=body.activity_type,
        skill_level=body.skill_level,
        cost=body.cost,
        venue=body.venue,
    )
    return GroupDetailResponse(data=_build_group_response(group, approved_count=1))


@router.get(
    "/{group_id}",
    response_model=GroupDetailResponse,
    summary="Get a group",
    responses={
        200: {"description": "Group with member count and organiser"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Get a group by ID."""
    details = await service.get(group_id)
    return GroupDetailResponse(data=_build_details_response(details))


@router.patch(
    "/{group_id}",
    response_model=GroupDetailResponse,
    summary="Update a group",
    responses={
        200: {"description": "Group updated"},
        400: {"description": "Event date is not in the future"},
        403: {"description": "Not the organiser"},
        404: {"description": "Group not found"},
        409: {"description": "Capacity below current member count"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_group(
    request: Request,
    group_id: UUID,
    body: GroupUpdate,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Update a group. Organiser only."""
    group = await service.update(
        group_id=group_id,
        actor=user.username,
        name=body.name,
        description=body.description,
        date_time=body.date_time,
        max_members=body.max_members,
        activity_type=body.activity_type,
        skill_level=body.skill_level,
        cost=body.cost,
        venue=body.venue,
    )
    return GroupDetailResponse(data=_build_group_response(group))


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a group",
    responses={
        204: {"description": "Group deleted"},
        403: {"description": "Not the organiser"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> None:
    """Delete a group with its memberships, messages and notifications."""
    await service.delete(group_id, user.username)
    return None


def _build_group_response(group: Group, approved_count: int | None = None) -> GroupResponse:
    """Convert domain entity to response schema."""
    return GroupResponse(
        id=group.id,
        name=group.name,
        organiser_username=group.organiser_username,
        date_time=group.date_time,
        max_members=group.max_members,
        description=group.description,
        activity_type=group.activity_type,
        skill_level=group.skill_level,
        cost=group.cost,
        venue=group.venue,
        created_at=group.created_at,
        updated_at=group.updated_at,
        approved_count=approved_count,
    )


def _build_details_response(details: GroupDetails) -> GroupResponse:
    response = _build_group_response(details.group, approved_count=details.approved_count)
    if details.organiser:
        response.organiser = OrganiserSummary(
            username=details.organiser.username,
            display_name=details.organiser.display_name,
        )
    return response
