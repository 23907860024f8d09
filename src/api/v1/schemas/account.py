"""Pydantic schemas for Account API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile. Omitted fields are unchanged."""

    display_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, max_length=500, pattern=r"^https?://")


class AccountResponse(BaseModel):
    """Public view of an account."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    display_name: str | None
    bio: str | None
    avatar_url: str | None
    created_at: datetime


class AccountProfileResponse(AccountResponse):
    """Account with the groups it organises, belongs to and is waiting on."""

    owned_group_ids: list[UUID]
    approved_group_ids: list[UUID]
    pending_group_ids: list[UUID]


class AccountDetailResponse(BaseModel):
    data: AccountResponse


class AccountProfileDetailResponse(BaseModel):
    data: AccountProfileResponse


class StatsResponse(BaseModel):
    """Platform statistics."""

    users: int
    groups: int
