# specflow/api/phases.py
"""
Phase routes - specification, execution and advancement.

Execution does not advance the project; advancing is an explicit call that
checks the current phase's required artifacts and approval.
"""
from fastapi import APIRouter, Depends

from specflow.api.deps import get_llm_factory, get_owned_project, get_phase_spec, get_store
from specflow.api.errors import ok
from specflow.api.schemas import project_out
from specflow.core.logging import log
from specflow.lib.artifact_store import ArtifactStore
from specflow.llm import LLMFactory
from specflow.models import Phase, Project
from specflow.orchestration.engine import advance_phase, run_phase
from specflow.orchestration.phase_spec import PhaseSpec


router = APIRouter(tags=["Phases"])


@router.get("/api/phases")
async def list_phases(spec: PhaseSpec = Depends(get_phase_spec)):
    """The phase specification: order, required artifacts, executors."""
    return ok(spec.as_dict())


@router.post("/api/projects/{slug}/phases/{phase}/execute")
async def execute_phase(
    phase: str,
    project: Project = Depends(get_owned_project),
    spec: PhaseSpec = Depends(get_phase_spec),
    llm_factory: LLMFactory = Depends(get_llm_factory),
    store: ArtifactStore = Depends(get_store),
):
    """Run the executors of a reached phase and save their documents."""
    log("API", f"Execute {phase} requested", project_id=project.slug)
    result = await run_phase(project, phase, spec=spec, llm_factory=llm_factory, store=store)
    return ok({
        **result.summary(),
        "current_phase": Phase(project.current_phase).value,
    })


@router.post("/api/projects/{slug}/advance")
async def advance(
    project: Project = Depends(get_owned_project),
    spec: PhaseSpec = Depends(get_phase_spec),
    store: ArtifactStore = Depends(get_store),
):
    """Move the project to the next phase."""
    previous = Phase(project.current_phase).value
    await advance_phase(project, spec, store)
    return ok({"previous_phase": previous, "project": project_out(project)})
