# specflow/api/approvals.py
"""
Stack and dependency approval routes.
"""
from fastapi import APIRouter, Depends

from specflow.api.deps import get_owned_project, get_store
from specflow.api.errors import ok
from specflow.api.schemas import artifact_summary, project_out
from specflow.approvals.models import ApproveDependenciesRequest, ApproveStackRequest
from specflow.approvals.service import approve_dependencies, approve_stack
from specflow.core.auth import get_current_user
from specflow.lib.artifact_store import ArtifactStore
from specflow.models import Project, User


router = APIRouter(prefix="/api/projects/{slug}", tags=["Approvals"])


@router.post("/approve-stack")
async def approve_stack_route(
    data: ApproveStackRequest,
    project: Project = Depends(get_owned_project),
    user: User = Depends(get_current_user),
    store: ArtifactStore = Depends(get_store),
):
    selection, artifacts = await approve_stack(project, data, store=store, user_id=str(user.id))
    return ok({
        "selection": selection.model_dump(mode="json"),
        "artifacts": [artifact_summary(a) for a in artifacts],
        "project": project_out(project),
    })


@router.post("/approve-dependencies")
async def approve_dependencies_route(
    data: ApproveDependenciesRequest,
    project: Project = Depends(get_owned_project),
    user: User = Depends(get_current_user),
    store: ArtifactStore = Depends(get_store),
):
    selection, artifacts = await approve_dependencies(project, data, store=store, user_id=str(user.id))
    return ok({
        "selection": selection.model_dump(mode="json"),
        "artifacts": [artifact_summary(a) for a in artifacts],
        "project": project_out(project),
    })
