"""Shared helpers for API integration tests."""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any

import pytest
from httpx import AsyncClient


def future(**delta: float) -> str:
    """ISO timestamp ``delta`` from now, naive UTC."""
    return (datetime.utcnow() + timedelta(**delta)).isoformat()


@pytest.fixture
def create_group(
    authenticated_client: AsyncClient,
) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Create a group as the test user and return its JSON."""

    async def create(**overrides: Any) -> dict[str, Any]:
        body: dict[str, Any] = {
            "name": "Sunday Football",
            "date_time": future(days=3),
            "max_members": 5,
            "activity_type": "sport",
            "skill_level": "beginner",
            "cost": 5.0,
            "venue": "Hackney Marshes",
        }
        body.update(overrides)
        response = await authenticated_client.post("/api/v1/groups", json=body)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return create


@pytest.fixture
def add_member(
    client: AsyncClient,
    authenticated_client: AsyncClient,
    headers_for: Callable[[str], dict[str, str]],
) -> Callable[[str, str], Awaitable[None]]:
    """Join ``username`` to a group and approve them as the organiser."""

    async def add(group_id: str, username: str) -> None:
        joined = await client.post(f"/api/v1/groups/{group_id}/join", headers=headers_for(username))
        assert joined.status_code == 201, joined.text
        approved = await authenticated_client.post(
            f"/api/v1/groups/{group_id}/members/{username}/approve"
        )
        assert approved.status_code == 200, approved.text

    return add
