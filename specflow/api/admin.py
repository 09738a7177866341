# specflow/api/admin.py
"""
Administrative routes - user roles and key/value settings.

Role rules:
- only super admins assign the super_admin role
- only super admins modify super-admin users
- super admins cannot demote themselves
"""
from typing import Any, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from specflow.api.errors import ok
from specflow.api.schemas import user_out
from specflow.core.auth import require_admin
from specflow.core.exceptions import NotFoundError, PermissionDeniedError, RequestValidationFailed
from specflow.core.logging import log
from specflow.models import Project, Setting, User, USER_ROLES
from specflow.models.project import utcnow


router = APIRouter(prefix="/api/admin", tags=["Admin"])


class UpdateRoleRequest(BaseModel):
    userId: Optional[str] = None
    role: Optional[str] = None


class SettingRequest(BaseModel):
    key: Optional[str] = None
    value: Any = None


def check_role_change(actor: User, user_id: str, new_role: str) -> None:
    """Checks that need only the actor and the request."""
    if new_role not in USER_ROLES:
        raise RequestValidationFailed("Invalid role", {"role": new_role})
    if new_role == "super_admin" and not actor.is_super_admin:
        raise PermissionDeniedError("Only super admins can assign super admin role")
    if user_id == str(actor.id) and actor.is_super_admin and new_role != "super_admin":
        raise RequestValidationFailed("Cannot demote yourself from super admin")


# ═══════════════════════════════════════════════════════════════════════════════
# USERS
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("/users")
async def list_users(admin: User = Depends(require_admin)):
    """All users, newest first, with their project counts."""
    users = await User.find_all().sort(-User.created_at).to_list()
    result = []
    for user in users:
        count = await Project.find(Project.owner_id == str(user.id)).count()
        result.append(user_out(user, project_count=count))
    return ok(result)


@router.patch("/users")
async def update_user_role(data: UpdateRoleRequest, admin: User = Depends(require_admin)):
    if not data.userId or not data.role:
        raise RequestValidationFailed("User ID and role are required")

    check_role_change(admin, data.userId, data.role)

    try:
        target = await User.get(PydanticObjectId(data.userId))
    except InvalidId:
        target = None
    if target is None:
        raise NotFoundError("User", data.userId)

    if target.is_super_admin and not admin.is_super_admin:
        raise PermissionDeniedError("Cannot modify super admin users")

    await target.set({"role": data.role, "updated_at": utcnow()})
    log("ADMIN", f"{admin.email} set role of {target.email} to {data.role}")
    return ok({"message": "User role updated", "user": user_out(target)})


# ═══════════════════════════════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("/settings")
async def list_settings(prefix: Optional[str] = Query(None), admin: User = Depends(require_admin)):
    """Settings as a key -> value map, optionally filtered by key prefix."""
    settings_list = await Setting.find_all().to_list()
    return ok({
        s.key: s.value
        for s in settings_list
        if not prefix or s.key.startswith(prefix)
    })


@router.post("/settings")
async def upsert_setting(data: SettingRequest, admin: User = Depends(require_admin)):
    if not data.key or data.value is None:
        raise RequestValidationFailed("Key and value are required")

    value = str(data.value)
    existing = await Setting.find_one(Setting.key == data.key)
    if existing:
        await existing.set({"value": value, "updated_at": utcnow()})
    else:
        await Setting(key=data.key, value=value).insert()

    log("ADMIN", f"{admin.email} set {data.key}")
    return ok({"message": "Setting updated", "key": data.key, "value": value})


@router.delete("/settings")
async def delete_setting(key: Optional[str] = Query(None), admin: User = Depends(require_admin)):
    if not key:
        raise RequestValidationFailed("Key is required")

    await Setting.find(Setting.key == key).delete()
    log("ADMIN", f"{admin.email} deleted {key}")
    return ok({"message": "Setting deleted", "key": key})
