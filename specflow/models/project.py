from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional
from beanie import Document, Indexed
from pydantic import BaseModel, Field

from specflow.models.phase import Phase


StackMode = Literal["template", "custom"]
DependencyMode = Literal["preset", "custom"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StackSelection(BaseModel):
    """One stack approval. Superseded by later approvals, never removed."""
    mode: StackMode = "template"
    stack_choice: str
    platform: Optional[str] = None
    reasoning: str = ""
    composition: Optional[Dict[str, Any]] = None
    technical_preferences: Dict[str, str] = Field(default_factory=dict)
    decision_version: int = 1
    approved_by: Optional[str] = None
    approved_at: datetime = Field(default_factory=utcnow)


class DependencySelection(BaseModel):
    """One dependency approval. Superseded by later approvals, never removed."""
    mode: DependencyMode = "preset"
    architecture: Optional[str] = None
    platform: Optional[str] = None
    preset_id: Optional[str] = None
    frontend: str
    backend: str
    database: str
    deployment: str
    packages: List[str] = Field(default_factory=list)
    notes: str = ""
    decision_version: int = 1
    approved_by: Optional[str] = None
    approved_at: datetime = Field(default_factory=utcnow)


class Project(Document):
    slug: Indexed(str, unique=True)
    name: str
    description: str = ""
    owner_id: Indexed(str)

    current_phase: Phase = Phase.ANALYSIS
    phases_completed: List[Phase] = Field(default_factory=list)

    # Stack approval (mirrors the latest entry of stack_selections)
    stack_choice: Optional[str] = None
    stack_mode: Optional[StackMode] = None
    platform_type: Optional[str] = None
    stack_reasoning: Optional[str] = None
    technical_preferences: Dict[str, str] = Field(default_factory=dict)
    stack_approved: bool = False
    stack_approved_at: Optional[datetime] = None
    stack_selections: List[StackSelection] = Field(default_factory=list)

    # Dependency approval (mirrors the latest entry of dependency_selections)
    dependencies_approved: bool = False
    dependencies_approved_at: Optional[datetime] = None
    dependency_selections: List[DependencySelection] = Field(default_factory=list)

    # phase name -> summary of the last successful execution
    orchestration_state: Dict[str, Any] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "projects"
