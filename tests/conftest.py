"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from datetime import datetime
from pathlib import Path
from typing import Any

# Disable rate limiting and the reminder loop in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REMINDERS_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.email.sender import EmailRecipient
from infrastructure.tasks.runner import BackgroundTaskRunner

TEST_USERNAME = "organiser"


class RecordingEmailSender:
    """Email sender that keeps every message it is asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    async def send_join_request_email(
        self, organiser: EmailRecipient, requester_username: str, group_name: str
    ) -> None:
        self.sent.append(("join_request", organiser.email, group_name))

    async def send_join_approval_email(self, requester: EmailRecipient, group_name: str) -> None:
        self.sent.append(("join_approval", requester.email, group_name))

    async def send_member_removal_email(self, member: EmailRecipient, group_name: str) -> None:
        self.sent.append(("member_removal", member.email, group_name))

    async def send_event_reminder_email(
        self,
        member: EmailRecipient,
        group_name: str,
        date_time: datetime,
        venue: str | None,
        reminder_type: Any,
    ) -> None:
        self.sent.append(("event_reminder", member.email, group_name))

    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.sent]


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh SQLite database file for each test.

    File backed rather than in memory so that concurrent sessions (requests
    and background tasks) each get their own connection.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'groops.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def task_runner() -> AsyncGenerator[BackgroundTaskRunner, None]:
    """Background runner that is shut down after the test."""
    runner = BackgroundTaskRunner(default_timeout=5.0)
    yield runner
    await runner.shutdown()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def test_user() -> TokenUser:
    """The default caller: organises the groups it creates."""
    return TokenUser(
        username=TEST_USERNAME,
        email="organiser@example.com",
        display_name="Olive Organiser",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def headers_for(auth_provider: JWTAuthProvider) -> Callable[[str], dict[str, str]]:
    """Build authorization headers for any username."""

    def build(username: str) -> dict[str, str]:
        token = auth_provider.create_token(
            TokenUser(username=username, email=f"{username}@example.com")
        )
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
def auth_headers(
    auth_provider: JWTAuthProvider, test_user: TokenUser
) -> dict[str, str]:
    """Create authorization headers for the test user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(test_user)}"}


@pytest.fixture
def app(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    session_factory: async_sessionmaker[AsyncSession],
    task_runner: BackgroundTaskRunner,
    email_sender: RecordingEmailSender,
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """
    Create the application wired to the test database.

    Real token validation and account provisioning run on every request;
    services share the test runner and the recording email sender. Deferred
    unread checks run as soon as the runner gets to them.
    """
    from api.dependencies.auth import get_auth_provider
    from api.dependencies.services import (
        get_account_service,
        get_activity_service,
        get_email_service,
        get_group_service,
        get_membership_service,
        get_message_service,
        get_notification_service,
        get_task_runner,
    )
    from domain.services.account_service import AccountService
    from domain.services.activity_service import ActivityService
    from domain.services.email_service import EmailService
    from domain.services.group_service import GroupService
    from domain.services.membership_service import MembershipService
    from domain.services.membership_state_machine import MembershipStateMachine
    from domain.services.message_service import MessageService
    from domain.services.notification_service import NotificationService
    from infrastructure.database.session import get_async_session
    from main import create_app

    application = create_app()

    account_service = AccountService(uow_factory)
    activity_service = ActivityService(uow_factory, backoff_seconds=0)
    notification_service = NotificationService(uow_factory)
    email_service = EmailService(uow_factory, sender=email_sender, runner=task_runner)
    group_service = GroupService(uow_factory, activity_service=activity_service)
    membership_service = MembershipService(
        uow_factory,
        state_machine=MembershipStateMachine(),
        activity_service=activity_service,
        notification_service=notification_service,
        email_service=email_service,
    )
    message_service = MessageService(
        uow_factory,
        notification_service=notification_service,
        runner=task_runner,
        activity_service=activity_service,
        unread_check_delay=0,
    )

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    overrides: dict[Callable[..., Any], Callable[..., Any]] = {
        get_auth_provider: lambda: auth_provider,
        get_task_runner: lambda: task_runner,
        get_account_service: lambda: account_service,
        get_activity_service: lambda: activity_service,
        get_notification_service: lambda: notification_service,
        get_email_service: lambda: email_service,
        get_group_service: lambda: group_service,
        get_membership_service: lambda: membership_service,
        get_message_service: lambda: message_service,
        get_async_session: override_get_async_session,
    }
    application.dependency_overrides.update(overrides)
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    app: FastAPI, auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client that sends the test user's token by default."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c
