# specflow/api/auth.py
"""
Authentication status routes.
"""
from fastapi import APIRouter, Depends

from specflow.api.errors import ok
from specflow.api.schemas import user_out
from specflow.core.auth import get_current_user
from specflow.models import User


router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.get("/verify")
async def verify(user: User = Depends(get_current_user)):
    """Validate the bearer token and return its user."""
    return ok({"user": user_out(user)})


@router.get("/check-admin")
async def check_admin(user: User = Depends(get_current_user)):
    return ok({
        "isAdmin": user.is_admin,
        "isSuperAdmin": user.is_super_admin,
        "role": user.role,
    })
