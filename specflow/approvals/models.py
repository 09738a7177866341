# specflow/approvals/models.py
"""
Approval request payloads.
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


MAX_FREE_TEXT = 2000


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class _Choice(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def _strip_strings(cls, value):
        return _strip(value)


# ═══════════════════════════════════════════════════════════════════════════════
# STACK
# ═══════════════════════════════════════════════════════════════════════════════

class FrontendChoice(_Choice):
    framework: str = Field(min_length=1)
    meta_framework: Optional[str] = None
    styling: str = ""
    ui_library: str = ""


class MobileChoice(_Choice):
    platform: str = "none"


class BackendChoice(_Choice):
    language: str = Field(min_length=1)
    framework: str = Field(min_length=1)


class DatabaseChoice(_Choice):
    type: str = Field(min_length=1)
    provider: str = Field(min_length=1)
    orm: Optional[str] = None


class DeploymentChoice(_Choice):
    platform: str = Field(min_length=1)
    architecture: str = "monolithic"


class CustomStackComposition(BaseModel):
    frontend: FrontendChoice
    backend: BackendChoice
    database: DatabaseChoice
    deployment: DeploymentChoice
    mobile: MobileChoice = Field(default_factory=MobileChoice)


class AlternativeConsidered(BaseModel):
    stack: str
    reason_not_chosen: str = Field(default="", max_length=MAX_FREE_TEXT)


class ApproveStackRequest(BaseModel):
    mode: Literal["template", "custom"] = "template"
    stack_choice: Optional[str] = Field(default=None, validate_default=True)
    reasoning: str = Field(default="", max_length=MAX_FREE_TEXT)
    platform: Optional[str] = None
    custom_composition: Optional[CustomStackComposition] = None
    technical_preferences: Dict[str, str] = Field(default_factory=dict)
    alternatives_considered: List[AlternativeConsidered] = Field(default_factory=list)

    @field_validator("stack_choice", mode="before")
    @classmethod
    def _stack_choice_required(cls, value):
        value = _strip(value)
        if not value:
            raise ValueError("Stack choice is required")
        return value

    @field_validator("reasoning", mode="before")
    @classmethod
    def _strip_reasoning(cls, value):
        return _strip(value) or ""

    @model_validator(mode="after")
    def _custom_needs_composition(self) -> "ApproveStackRequest":
        if self.mode == "custom" and self.custom_composition is None:
            raise ValueError("custom_composition is required when mode is 'custom'")
        return self


# ═══════════════════════════════════════════════════════════════════════════════
# DEPENDENCIES
# ═══════════════════════════════════════════════════════════════════════════════

class DependencyPackage(BaseModel):
    name: str
    version: str = "latest"
    size: Optional[str] = None
    category: Literal["core", "ui", "data", "auth", "utils", "dev"] = "core"


class DependencyOption(_Choice):
    """A preset as submitted by the client (may differ from the catalog copy)."""
    id: str = Field(min_length=1)
    title: str = ""
    summary: str = ""
    frontend: str = Field(min_length=1)
    backend: str = Field(min_length=1)
    database: str = Field(min_length=1)
    deployment: str = Field(min_length=1)
    dependencies: List[str] = Field(default_factory=list)
    packages: List[DependencyPackage] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)

    @property
    def package_names(self) -> List[str]:
        return list(self.dependencies) + [p.name for p in self.packages if p.name not in self.dependencies]


class CustomDependencyStack(_Choice):
    frontend: str = Field(min_length=1)
    backend: str = Field(min_length=1)
    database: str = Field(min_length=1)
    deployment: str = Field(min_length=1)
    dependencies: List[str] = Field(default_factory=list)
    requests: Optional[str] = Field(default=None, max_length=MAX_FREE_TEXT)


class ApproveDependenciesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mode: Literal["preset", "custom"] = "preset"
    architecture: Optional[str] = None
    platform: Optional[str] = None
    preset_id: Optional[str] = None
    option: Optional[DependencyOption] = None
    custom_stack: Optional[CustomDependencyStack] = Field(default=None, alias="customStack")
    notes: str = Field(default="", max_length=MAX_FREE_TEXT)

    @field_validator("notes", mode="before")
    @classmethod
    def _strip_notes(cls, value):
        return _strip(value) or ""

    @model_validator(mode="after")
    def _selection_present(self) -> "ApproveDependenciesRequest":
        if self.mode == "custom" and self.custom_stack is None:
            raise ValueError("custom_stack is required when mode is 'custom'")
        if self.mode == "preset" and not (self.preset_id or self.option):
            raise ValueError("preset_id or option is required when mode is 'preset'")
        return self
