"""Pydantic schemas for Activity API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ActivityLogResponse(BaseModel):
    """Schema for an activity log entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    event_type: str
    group_id: UUID
    timestamp: datetime


class ActivityListResponse(BaseModel):
    """Schema for activity history response."""

    data: list[ActivityLogResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
