"""Activity history API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_activity_service
from api.v1.schemas.activity import ActivityListResponse, ActivityLogResponse
from core.rate_limit import limiter
from domain.services.activity_service import ActivityService

router = APIRouter(
    prefix="/accounts/{username}/history",
    tags=["activity"],
)


@router.get(
    "",
    response_model=ActivityListResponse,
    summary="Get a user's activity history",
    responses={
        200: {"description": "Activity entries, newest first"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_user_history(
    request: Request,
    username: str,
    user: CurrentUser,
    limit: int = Query(50, ge=1, le=100),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityListResponse:
    """Get the activity history recorded for a user."""
    activities = await service.get_history(username, limit=limit)
    data = [
        ActivityLogResponse(
            id=a.id,
            username=a.username,
            event_type=a.event_type,
            group_id=a.group_id,
            timestamp=a.timestamp,
        )
        for a in activities
    ]
    return ActivityListResponse(data=data, meta={"limit": limit})
