"""Pydantic schemas for group messages API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.message import MAX_MESSAGE_LENGTH


class GroupMessageCreate(BaseModel):
    """Schema for posting a message."""

    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message content cannot be blank")
        return value


class GroupMessageResponse(BaseModel):
    """Schema for a message in a group."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    group_id: UUID
    username: str
    content: str
    read_by: list[str]
    created_at: datetime


class GroupMessageDetailResponse(BaseModel):
    """Single message response."""

    data: GroupMessageResponse


class GroupMessageListResponse(BaseModel):
    """Messages page, newest first."""

    data: list[GroupMessageResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
