"""Pydantic schemas for group membership API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.membership import MembershipStatus


class MembershipResponse(BaseModel):
    """A user's membership in a group."""

    model_config = ConfigDict(from_attributes=True)

    group_id: UUID
    username: str
    status: MembershipStatus
    joined_at: datetime
    updated_at: datetime


class MembershipDetailResponse(BaseModel):
    """Single membership response."""

    data: MembershipResponse
    message: str


class MembershipListResponse(BaseModel):
    """List of memberships response."""

    data: list[MembershipResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
