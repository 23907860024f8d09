"""Integration tests for the membership workflow API."""

import pytest
from httpx import AsyncClient

from infrastructure.tasks.runner import BackgroundTaskRunner
from tests.conftest import RecordingEmailSender
from tests.integration.conftest import future


class TestJoin:
    """POST /groups/{group_id}/join."""

    @pytest.mark.asyncio
    async def test_join_creates_pending_request(
        self, client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()

        response = await client.post(
            f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice")
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Join request submitted"
        assert body["data"]["status"] == "pending"
        assert body["data"]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_join_twice_conflicts(
        self, client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()
        url = f"/api/v1/groups/{group['id']}/join"
        await client.post(url, headers=headers_for("alice"))

        response = await client.post(url, headers=headers_for("alice"))

        assert response.status_code == 409
        assert response.json()["error_code"] == "JOIN_REQUEST_PENDING"

    @pytest.mark.asyncio
    async def test_organiser_cannot_join_own_group(
        self, authenticated_client: AsyncClient, create_group
    ) -> None:
        group = await create_group()

        response = await authenticated_client.post(f"/api/v1/groups/{group['id']}/join")

        assert response.status_code == 409
        assert response.json()["error_code"] == "ALREADY_A_GROUP_MEMBER"

    @pytest.mark.asyncio
    async def test_join_inside_lockout_window(
        self, client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group(date_time=future(minutes=30))

        response = await client.post(
            f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice")
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "MEMBERSHIP_WINDOW_CLOSED"

    @pytest.mark.asyncio
    async def test_join_full_group(
        self, client: AsyncClient, headers_for, create_group, add_member
    ) -> None:
        group = await create_group(max_members=2)
        await add_member(group["id"], "alice")

        response = await client.post(
            f"/api/v1/groups/{group['id']}/join", headers=headers_for("bob")
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "GROUP_FULL"

    @pytest.mark.asyncio
    async def test_rejected_user_can_request_again(
        self, client: AsyncClient, authenticated_client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()
        url = f"/api/v1/groups/{group['id']}/join"
        await client.post(url, headers=headers_for("alice"))
        await authenticated_client.post(f"/api/v1/groups/{group['id']}/members/alice/reject")

        response = await client.post(url, headers=headers_for("alice"))

        assert response.status_code == 201
        assert response.json()["data"]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_join_notifies_and_emails_organiser(
        self,
        client: AsyncClient,
        authenticated_client: AsyncClient,
        headers_for,
        create_group,
        task_runner: BackgroundTaskRunner,
        email_sender: RecordingEmailSender,
    ) -> None:
        group = await create_group()

        await client.post(f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice"))
        await task_runner.drain()

        notifications = (await authenticated_client.get("/api/v1/notifications")).json()["data"]
        assert [n["type"] for n in notifications] == ["join_request"]
        assert email_sender.sent == [
            ("join_request", "organiser@example.com", "Sunday Football")
        ]


class TestDecisions:
    """Approve, reject and remove."""

    @pytest.mark.asyncio
    async def test_pending_members_listed_for_organiser(
        self, client: AsyncClient, authenticated_client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()
        await client.post(f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice"))

        response = await authenticated_client.get(f"/api/v1/groups/{group['id']}/pending-members")

        assert response.status_code == 200
        assert [m["username"] for m in response.json()["data"]] == ["alice"]

    @pytest.mark.asyncio
    async def test_pending_members_hidden_from_others(
        self, client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()

        response = await client.get(
            f"/api/v1/groups/{group['id']}/pending-members", headers=headers_for("alice")
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_approve(
        self,
        client: AsyncClient,
        authenticated_client: AsyncClient,
        headers_for,
        create_group,
        task_runner: BackgroundTaskRunner,
        email_sender: RecordingEmailSender,
    ) -> None:
        group = await create_group()
        await client.post(f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice"))

        response = await authenticated_client.post(
            f"/api/v1/groups/{group['id']}/members/alice/approve"
        )
        await task_runner.drain()

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "approved"
        detail = (await authenticated_client.get(f"/api/v1/groups/{group['id']}")).json()["data"]
        assert detail["approved_count"] == 2
        assert "join_approval" in email_sender.kinds()

        alice_notifications = (
            await client.get("/api/v1/notifications", headers=headers_for("alice"))
        ).json()["data"]
        assert [n["type"] for n in alice_notifications] == ["join_approved"]

    @pytest.mark.asyncio
    async def test_approve_tells_existing_members(
        self, client: AsyncClient, headers_for, create_group, add_member
    ) -> None:
        group = await create_group()
        await add_member(group["id"], "alice")
        await add_member(group["id"], "bob")

        response = await client.get(
            "/api/v1/notifications", headers=headers_for("alice"), params={"limit": 10}
        )

        types = [n["type"] for n in response.json()["data"]]
        assert types.count("member_joined") == 1

    @pytest.mark.asyncio
    async def test_approve_without_request(
        self, authenticated_client: AsyncClient, create_group
    ) -> None:
        group = await create_group()

        response = await authenticated_client.post(
            f"/api/v1/groups/{group['id']}/members/nobody/approve"
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "PENDING_REQUEST_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_approve_already_approved(
        self, authenticated_client: AsyncClient, create_group, add_member
    ) -> None:
        group = await create_group()
        await add_member(group["id"], "alice")

        response = await authenticated_client.post(
            f"/api/v1/groups/{group['id']}/members/alice/approve"
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "MEMBERSHIP_STATUS_CONFLICT"

    @pytest.mark.asyncio
    async def test_approve_by_non_organiser(
        self, client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()
        await client.post(f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice"))

        response = await client.post(
            f"/api/v1/groups/{group['id']}/members/alice/approve", headers=headers_for("alice")
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "ORGANISER_ONLY"

    @pytest.mark.asyncio
    async def test_approve_when_full(
        self, client: AsyncClient, authenticated_client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group(max_members=2)
        for username in ("alice", "bob"):
            await client.post(
                f"/api/v1/groups/{group['id']}/join", headers=headers_for(username)
            )
        await authenticated_client.post(f"/api/v1/groups/{group['id']}/members/alice/approve")

        response = await authenticated_client.post(
            f"/api/v1/groups/{group['id']}/members/bob/approve"
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "GROUP_FULL"

    @pytest.mark.asyncio
    async def test_reject(
        self, client: AsyncClient, authenticated_client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()
        await client.post(f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice"))

        response = await authenticated_client.post(
            f"/api/v1/groups/{group['id']}/members/alice/reject"
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "rejected"
        pending = await authenticated_client.get(f"/api/v1/groups/{group['id']}/pending-members")
        assert pending.json()["data"] == []

    @pytest.mark.asyncio
    async def test_remove_member(
        self,
        authenticated_client: AsyncClient,
        create_group,
        add_member,
        task_runner: BackgroundTaskRunner,
        email_sender: RecordingEmailSender,
    ) -> None:
        group = await create_group()
        await add_member(group["id"], "alice")

        response = await authenticated_client.post(
            f"/api/v1/groups/{group['id']}/members/alice/remove"
        )
        await task_runner.drain()

        assert response.status_code == 200
        assert response.json()["message"] == "Member removed successfully"
        members = await authenticated_client.get(f"/api/v1/groups/{group['id']}/members")
        assert [m["username"] for m in members.json()["data"]] == ["organiser"]
        assert "member_removal" in email_sender.kinds()

    @pytest.mark.asyncio
    async def test_remove_organiser(
        self, authenticated_client: AsyncClient, create_group
    ) -> None:
        group = await create_group()

        response = await authenticated_client.post(
            f"/api/v1/groups/{group['id']}/members/organiser/remove"
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "ORGANISER_CANNOT_BE_REMOVED"

    @pytest.mark.asyncio
    async def test_remove_pending_user(
        self, client: AsyncClient, authenticated_client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()
        await client.post(f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice"))

        response = await authenticated_client.post(
            f"/api/v1/groups/{group['id']}/members/alice/remove"
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "MEMBERSHIP_NOT_FOUND"


class TestLeave:
    """POST /groups/{group_id}/leave."""

    @pytest.mark.asyncio
    async def test_member_leaves(
        self,
        client: AsyncClient,
        authenticated_client: AsyncClient,
        headers_for,
        create_group,
        add_member,
    ) -> None:
        group = await create_group()
        await add_member(group["id"], "alice")

        response = await client.post(
            f"/api/v1/groups/{group['id']}/leave", headers=headers_for("alice")
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Left group successfully"
        detail = (await authenticated_client.get(f"/api/v1/groups/{group['id']}")).json()["data"]
        assert detail["approved_count"] == 1

        notifications = (await authenticated_client.get("/api/v1/notifications")).json()["data"]
        assert "leave_group" in [n["type"] for n in notifications]

    @pytest.mark.asyncio
    async def test_pending_user_withdraws(
        self, client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()
        await client.post(f"/api/v1/groups/{group['id']}/join", headers=headers_for("alice"))

        response = await client.post(
            f"/api/v1/groups/{group['id']}/leave", headers=headers_for("alice")
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_organiser_cannot_leave(
        self, authenticated_client: AsyncClient, create_group
    ) -> None:
        group = await create_group()

        response = await authenticated_client.post(f"/api/v1/groups/{group['id']}/leave")

        assert response.status_code == 403
        assert response.json()["error_code"] == "ORGANISER_CANNOT_LEAVE"

    @pytest.mark.asyncio
    async def test_non_member_cannot_leave(
        self, client: AsyncClient, headers_for, create_group
    ) -> None:
        group = await create_group()

        response = await client.post(
            f"/api/v1/groups/{group['id']}/leave", headers=headers_for("stranger")
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "MEMBERSHIP_NOT_FOUND"
