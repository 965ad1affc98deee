"""API v1 routes."""

from fastapi import APIRouter

from crudkit.api.v1 import auth, users

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/user", tags=["user"])
