# specflow/api/schemas.py
"""
Request models and response serializers for the project routes.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from specflow.models import Artifact, Project, User


MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 5000


def _clean_name(value, required: bool):
    if isinstance(value, str):
        value = value.strip()
    if value is None and not required:
        return None
    if value is None or value == "":
        raise ValueError("Project name is required")
    if isinstance(value, str) and len(value) > MAX_NAME_LENGTH:
        raise ValueError(f"Project name must not exceed {MAX_NAME_LENGTH} characters")
    return value


class CreateProjectRequest(BaseModel):
    name: Optional[str] = Field(default=None, validate_default=True)
    description: str = Field(default="", max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def _name_required(cls, value):
        return _clean_name(value, required=True)

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


class UpdateProjectRequest(BaseModel):
    """Partial update; the slug never changes."""
    name: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_blank(cls, value):
        return _clean_name(value, required=False)

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value):
        return value.strip() if isinstance(value, str) else value


# ═══════════════════════════════════════════════════════════════════════════════
# SERIALIZERS
# ═══════════════════════════════════════════════════════════════════════════════

def project_out(project: Project) -> Dict[str, Any]:
    data = project.model_dump(mode="json", exclude={"id", "revision_id"})
    data["id"] = str(project.id)
    return data


def artifact_summary(artifact: Artifact) -> Dict[str, Any]:
    return {
        "phase": artifact.phase,
        "name": artifact.name,
        "version": artifact.version,
        "size": len(artifact.content),
        "created_at": artifact.created_at,
    }


def user_out(user: User, project_count: Optional[int] = None) -> Dict[str, Any]:
    data = {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "emailVerified": user.email_verified,
        "createdAt": user.created_at,
    }
    if project_count is not None:
        data["projectCount"] = project_count
    return data
