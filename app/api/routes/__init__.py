"""API routes."""

from fastapi import APIRouter

from app.api.routes import auth, groups, health, roles, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(groups.router, prefix="/groups", tags=["groups"])
router.include_router(roles.router, prefix="/roles", tags=["roles"])
