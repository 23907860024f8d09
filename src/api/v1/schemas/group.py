"""Pydantic schemas for Group API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.common import to_naive_utc
from domain.entities.group import ActivityType, SkillLevel


class GroupCreate(BaseModel):
    """Schema for creating a group."""

    name: str = Field(..., min_length=1, max_length=100)
    date_time: datetime = Field(..., description="Event start; naive values are UTC")
    max_members: int = Field(..., ge=2, le=1000)
    description: str = Field("", max_length=2000)
    activity_type: ActivityType = ActivityType.OTHER
    skill_level: SkillLevel = SkillLevel.BEGINNER
    cost: float = Field(0.0, ge=0)
    venue: str | None = Field(None, max_length=255)

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, value: datetime | None) -> datetime | None:
        return to_naive_utc(value)


class GroupUpdate(BaseModel):
    """Schema for updating a group."""

    name: str | None = Field(None, min_length=1, max_length=100)
    date_time: datetime | None = None
    max_members: int | None = Field(None, ge=2, le=1000)
    description: str | None = Field(None, max_length=2000)
    activity_type: ActivityType | None = None
    skill_level: SkillLevel | None = None
    cost: float | None = Field(None, ge=0)
    venue: str | None = Field(None, max_length=255)

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, value: datetime | None) -> datetime | None:
        return to_naive_utc(value)


class OrganiserSummary(BaseModel):
    """Public summary of a group's organiser."""

    username: str
    display_name: str | None = None


class GroupResponse(BaseModel):
    """Schema for Group response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    organiser_username: str
    date_time: datetime
    max_members: int
    description: str
    activity_type: ActivityType
    skill_level: SkillLevel
    cost: float
    venue: str | None
    created_at: datetime
    updated_at: datetime
    approved_count: int | None = None
    organiser: OrganiserSummary | None = None


class GroupListResponse(BaseModel):
    """Schema for list of Groups response."""

    data: list[GroupResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class GroupDetailResponse(BaseModel):
    """Schema for single Group response."""

    data: GroupResponse
