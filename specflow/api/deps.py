# specflow/api/deps.py
"""
Shared route dependencies.

Collaborators live on app.state so tests can swap them (artifact store
root, LLM factory, phase specification).
"""
from fastapi import Depends, Request

from specflow.core.auth import get_current_user
from specflow.core.exceptions import NotFoundError
from specflow.lib.artifact_store import ArtifactStore
from specflow.llm import LLMFactory
from specflow.models import Project, User
from specflow.orchestration.phase_spec import PhaseSpec


def get_store(request: Request) -> ArtifactStore:
    return request.app.state.artifact_store


def get_phase_spec(request: Request) -> PhaseSpec:
    return request.app.state.phase_spec


def get_llm_factory(request: Request) -> LLMFactory:
    return request.app.state.llm_factory


async def get_owned_project(slug: str, user: User = Depends(get_current_user)) -> Project:
    """The caller's project; projects owned by someone else are reported as absent."""
    project = await Project.find_one(Project.slug == slug, Project.owner_id == str(user.id))
    if project is None:
        raise NotFoundError("Project", slug)
    return project
