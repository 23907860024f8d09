"""Main FastAPI application entry point."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import API_VERSION
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.dependencies.services import get_reminder_service, get_task_runner
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


async def reminder_loop(interval_seconds: float) -> None:
    """Send due event reminders every ``interval_seconds``."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            sent = await get_reminder_service().send_due_reminders()
            if sent > 0:
                logger.info("reminder_run_completed", sent_count=sent)
        except Exception:
            logger.exception("reminder_run_failed")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    reminder_task: asyncio.Task[None] | None = None
    if settings.reminders_enabled:
        reminder_task = asyncio.create_task(reminder_loop(settings.reminder_interval_seconds))
    logger.info("application_started", environment=settings.app_env)

    yield

    if reminder_task is not None:
        reminder_task.cancel()
        with suppress(asyncio.CancelledError):
            await reminder_task
    await get_task_runner().shutdown()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Activity Groups\n\n"
            "Groops lets people organise activity groups and manage who takes "
            "part in them.\n\n"
            "### Features\n"
            "- **Groups**: Create, browse and manage activity groups\n"
            "- **Membership**: Request to join; organisers approve, reject or remove\n"
            "- **Messages**: Group chat with unread reminders\n"
            "- **Notifications**: In-app feed of membership changes\n\n"
            "### Authentication\n"
            "All endpoints (except `/health`) require a valid JWT token "
            "in the Authorization header:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n\n"
            "### Rate Limits\n"
            "- GET endpoints: 30 requests/minute\n"
            "- POST/PATCH/DELETE: 10 requests/minute"
        ),
        version=API_VERSION,
        debug=settings.debug,
        contact={
            "name": "Groops Support",
        },
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "groups",
                "description": "Group management operations",
            },
            {
                "name": "memberships",
                "description": "Join requests and membership decisions",
            },
            {
                "name": "messages",
                "description": "Group chat messages",
            },
            {
                "name": "notifications",
                "description": "Notification feed operations",
            },
            {
                "name": "activity",
                "description": "User activity history",
            },
            {
                "name": "accounts",
                "description": "Account profiles and platform statistics",
            },
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
