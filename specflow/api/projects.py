# specflow/api/projects.py
"""
Project management routes.

Projects are owned by the user who created them; every lookup is scoped to
the caller.
"""
from fastapi import APIRouter, Depends, Query
from pymongo.errors import DuplicateKeyError

from specflow.api.deps import get_owned_project, get_store
from specflow.api.errors import ok
from specflow.api.schemas import CreateProjectRequest, UpdateProjectRequest, project_out
from specflow.core.auth import get_current_user
from specflow.core.logging import log
from specflow.lib.artifact_store import ArtifactStore
from specflow.lib.slug import suffixed_slug, unique_slug
from specflow.models import Project, User
from specflow.models.project import utcnow


router = APIRouter(prefix="/api/projects", tags=["Projects"])

SLUG_INSERT_ATTEMPTS = 3


@router.get("")
async def list_projects(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
):
    """List the caller's projects, newest first."""
    query = Project.find(Project.owner_id == str(user.id))
    total = await query.count()
    projects = await query.sort(-Project.created_at).skip(offset).limit(limit).to_list()
    return ok({
        "projects": [project_out(p) for p in projects],
        "total": total,
        "limit": limit,
        "offset": offset,
    })


@router.post("", status_code=201)
async def create_project(data: CreateProjectRequest, user: User = Depends(get_current_user)):
    """Create a project in ANALYSIS. The slug is derived from the name."""

    async def slug_taken(candidate: str) -> bool:
        return await Project.find_one(Project.slug == candidate) is not None

    slug = await unique_slug(data.name, slug_taken)
    for attempt in range(SLUG_INSERT_ATTEMPTS):
        project = Project(
            slug=slug,
            name=data.name,
            description=data.description,
            owner_id=str(user.id),
        )
        try:
            await project.insert()
            break
        except DuplicateKeyError:
            # Another create took the slug between the check and the insert
            if attempt == SLUG_INSERT_ATTEMPTS - 1:
                raise
            log("API", f"Slug {slug!r} taken concurrently, retrying with a suffix")
            slug = suffixed_slug(data.name)

    log("API", f"Project created: {data.name!r}", project_id=slug)
    return ok(project_out(project), status_code=201)


@router.get("/{slug}")
async def get_project(project: Project = Depends(get_owned_project)):
    return ok(project_out(project))


@router.put("/{slug}")
async def update_project(data: UpdateProjectRequest, project: Project = Depends(get_owned_project)):
    """Update name and/or description."""
    changes = data.model_dump(exclude_none=True)
    if changes:
        changes["updated_at"] = utcnow()
        await project.set(changes)
        log("API", f"Project updated: {', '.join(k for k in changes if k != 'updated_at')}", project_id=project.slug)
    return ok(project_out(project))


@router.delete("/{slug}")
async def delete_project(
    project: Project = Depends(get_owned_project),
    store: ArtifactStore = Depends(get_store),
):
    """Delete a project together with every artifact version and its files."""
    deleted_artifacts = await store.delete_project(project)
    await project.delete()

    log("API", f"Project deleted ({deleted_artifacts} artifact versions)", project_id=project.slug)
    return ok({"slug": project.slug, "deleted": True, "artifacts_deleted": deleted_artifacts})
