"""Account, profile and platform statistics API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_account_service
from api.v1.schemas.account import (
    AccountDetailResponse,
    AccountProfileDetailResponse,
    AccountProfileResponse,
    AccountResponse,
    ProfileUpdate,
    StatsResponse,
)
from core.rate_limit import limiter
from domain.services.account_service import AccountService

router = APIRouter(tags=["accounts"])


@router.get(
    "/accounts/{username}",
    response_model=AccountProfileDetailResponse,
    summary="Get an account",
    responses={
        200: {"description": "Account with owned, approved and pending groups"},
        404: {"description": "Account not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_account(
    request: Request,
    username: str,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> AccountProfileDetailResponse:
    """Get a user's public profile and group memberships."""
    profile = await service.get_profile(username)
    return AccountProfileDetailResponse(
        data=AccountProfileResponse(
            **AccountResponse.model_validate(profile.account).model_dump(),
            owned_group_ids=profile.owned_group_ids,
            approved_group_ids=profile.approved_group_ids,
            pending_group_ids=profile.pending_group_ids,
        )
    )


@router.put(
    "/accounts/{username}",
    response_model=AccountDetailResponse,
    summary="Update an account's profile",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "No fields to update"},
        403: {"description": "Not the caller's own profile"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_account(
    request: Request,
    username: str,
    body: ProfileUpdate,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    """Update a profile. Only its owner may do so."""
    account = await service.update_profile(
        user.username, username, **body.model_dump(exclude_unset=True)
    )
    return AccountDetailResponse(data=AccountResponse.model_validate(account))


@router.put(
    "/profile",
    response_model=AccountDetailResponse,
    summary="Update the caller's profile",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "No fields to update"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_own_profile(
    request: Request,
    body: ProfileUpdate,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    """Update the authenticated user's own profile."""
    account = await service.update_profile(
        user.username, user.username, **body.model_dump(exclude_unset=True)
    )
    return AccountDetailResponse(data=AccountResponse.model_validate(account))


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Platform statistics",
    responses={
        200: {"description": "Number of accounts and groups"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_stats(
    request: Request,
    service: AccountService = Depends(get_account_service),
) -> StatsResponse:
    """Count registered users and groups. No authentication required."""
    stats = await service.get_stats()
    return StatsResponse(users=stats.users, groups=stats.groups)
