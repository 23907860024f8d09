"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.accounts import router as accounts_router
from api.v1.routes.activity import router as activity_router
from api.v1.routes.groups import router as groups_router
from api.v1.routes.memberships import router as memberships_router
from api.v1.routes.messages import router as messages_router
from api.v1.routes.notifications import router as notifications_router

router = APIRouter()
router.include_router(groups_router)
router.include_router(memberships_router)
router.include_router(messages_router)
router.include_router(notifications_router)
router.include_router(activity_router)
router.include_router(accounts_router)
