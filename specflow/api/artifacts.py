# specflow/api/artifacts.py
"""
Artifact retrieval routes.

Single artifacts are returned raw with a content type inferred from the
extension: .json -> application/json, .md -> text/markdown, else text/plain.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from starlette.responses import Response

from specflow.api.deps import get_owned_project, get_store
from specflow.api.errors import ok
from specflow.api.schemas import artifact_summary
from specflow.lib.artifact_store import ArtifactStore, normalize_phase
from specflow.models import Project


router = APIRouter(prefix="/api/projects/{slug}/artifacts", tags=["Artifacts"])


def media_type_for(name: str) -> str:
    lowered = name.lower()
    if lowered.endswith(".json"):
        return "application/json"
    if lowered.endswith(".md"):
        return "text/markdown"
    return "text/plain"


@router.get("")
async def list_artifacts(
    phase: Optional[str] = Query(None),
    project: Project = Depends(get_owned_project),
    store: ArtifactStore = Depends(get_store),
):
    """Latest version of each artifact, optionally for one phase."""
    artifacts = await store.list_latest(project, normalize_phase(phase) if phase else None)
    return ok({"artifacts": [artifact_summary(a) for a in artifacts]})


@router.get("/{phase}/{name}")
async def get_artifact(
    phase: str,
    name: str,
    version: Optional[int] = Query(None, ge=1),
    project: Project = Depends(get_owned_project),
    store: ArtifactStore = Depends(get_store),
):
    artifact = await store.read(project, phase, name, version)
    return Response(
        content=artifact.content,
        media_type=media_type_for(name),
        headers={"X-Artifact-Version": str(artifact.version)},
    )


@router.get("/{phase}/{name}/versions")
async def list_artifact_versions(
    phase: str,
    name: str,
    project: Project = Depends(get_owned_project),
    store: ArtifactStore = Depends(get_store),
):
    """Every stored version, newest first."""
    versions = await store.history(project, phase, name)
    return ok({
        "phase": normalize_phase(phase),
        "name": name,
        "versions": [
            {"version": a.version, "size": len(a.content), "created_at": a.created_at}
            for a in versions
        ],
    })
