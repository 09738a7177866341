# specflow/approvals/service.py
"""
Stack and dependency approval handlers.

Each approval writes a decision/rationale pair as new artifact versions,
appends a selection record to the project and sets the approval flag.
Nothing from an earlier approval is deleted.
"""
from typing import List, Optional, Tuple

from beanie.operators import Push, Set

from specflow.approvals.catalog import Catalog, get_catalog
from specflow.approvals.documents import (
    dependencies_decision_markdown,
    dependencies_rationale_markdown,
    stack_decision_markdown,
    stack_rationale_markdown,
)
from specflow.approvals.models import ApproveDependenciesRequest, ApproveStackRequest
from specflow.core.exceptions import RequestValidationFailed
from specflow.core.logging import log
from specflow.lib.artifact_store import ArtifactStore
from specflow.models import Artifact, DependencySelection, Phase, Project, StackSelection
from specflow.models.project import utcnow
from specflow.orchestration.state_machine import ensure_reached


async def approve_stack(
    project: Project,
    request: ApproveStackRequest,
    *,
    store: ArtifactStore,
    user_id: Optional[str] = None,
    catalog: Optional[Catalog] = None,
) -> Tuple[StackSelection, List[Artifact]]:
    """
    Raises:
        PhaseTransitionError: STACK_SELECTION not reached yet
        PersistenceError: artifact storage failure
    """
    ensure_reached(project.current_phase, Phase.STACK_SELECTION, "approve the stack")
    catalog = catalog or get_catalog()

    version = len(project.stack_selections) + 1
    approved_at = utcnow()
    pattern = catalog.get_pattern(request.stack_choice) if request.mode == "template" else None
    platform = request.platform or (pattern.platform if pattern else None)

    artifacts = await store.save_many(project, Phase.STACK_SELECTION.value, {
        "stack-decision.md": stack_decision_markdown(request, version, approved_at, pattern),
        "stack-rationale.md": stack_rationale_markdown(request, version, approved_at, pattern),
    })

    selection = StackSelection(
        mode=request.mode,
        stack_choice=request.stack_choice,
        platform=platform,
        reasoning=request.reasoning,
        composition=request.custom_composition.model_dump() if request.custom_composition else None,
        technical_preferences=request.technical_preferences,
        decision_version=version,
        approved_by=user_id,
        approved_at=approved_at,
    )

    await project.update(
        Set({
            "stack_choice": request.stack_choice,
            "stack_mode": request.mode,
            "platform_type": platform,
            "stack_reasoning": request.reasoning,
            "technical_preferences": request.technical_preferences,
            "stack_approved": True,
            "stack_approved_at": approved_at,
            "updated_at": approved_at,
        }),
        Push({"stack_selections": selection.model_dump()}),
    )

    log("APPROVAL", f"Stack approved: {request.stack_choice} ({request.mode}), decision v{version}",
        project_id=project.slug)
    return selection, artifacts


def _resolve_dependency_choice(request: ApproveDependenciesRequest, catalog: Catalog) -> dict:
    """Flatten preset, option or custom stack into one set of fields."""
    if request.mode == "custom":
        custom = request.custom_stack
        return {
            "title": "Custom Stack",
            "preset_id": None,
            "frontend": custom.frontend,
            "backend": custom.backend,
            "database": custom.database,
            "deployment": custom.deployment,
            "packages": list(custom.dependencies),
            "highlights": [],
            "requests": custom.requests,
        }

    if request.option is not None:
        option = request.option
        return {
            "title": option.title or option.id,
            "preset_id": option.id,
            "frontend": option.frontend,
            "backend": option.backend,
            "database": option.database,
            "deployment": option.deployment,
            "packages": option.package_names,
            "highlights": list(option.highlights),
            "requests": None,
        }

    preset = catalog.get_preset(request.preset_id)
    if preset is None:
        raise RequestValidationFailed(
            f"Unknown dependency preset: {request.preset_id}",
            {"preset_id": request.preset_id},
        )
    return {
        "title": preset.title,
        "preset_id": preset.id,
        "frontend": preset.frontend,
        "backend": preset.backend,
        "database": preset.database,
        "deployment": preset.deployment,
        "packages": list(preset.dependencies),
        "highlights": list(preset.highlights),
        "requests": None,
    }


async def approve_dependencies(
    project: Project,
    request: ApproveDependenciesRequest,
    *,
    store: ArtifactStore,
    user_id: Optional[str] = None,
    catalog: Optional[Catalog] = None,
) -> Tuple[DependencySelection, List[Artifact]]:
    """
    Raises:
        PhaseTransitionError: DEPENDENCIES not reached yet
        RequestValidationFailed: unknown preset id
        PersistenceError: artifact storage failure
    """
    ensure_reached(project.current_phase, Phase.DEPENDENCIES, "approve dependencies")
    catalog = catalog or get_catalog()

    choice = _resolve_dependency_choice(request, catalog)
    platform = request.platform
    if platform is None and choice["preset_id"]:
        platform = next(
            (name for name, presets in catalog.presets.items() if any(p.id == choice["preset_id"] for p in presets)),
            None,
        )

    selection = DependencySelection(
        mode=request.mode,
        architecture=request.architecture or project.stack_choice,
        platform=platform or project.platform_type,
        preset_id=choice["preset_id"],
        frontend=choice["frontend"],
        backend=choice["backend"],
        database=choice["database"],
        deployment=choice["deployment"],
        packages=choice["packages"],
        notes=request.notes,
        decision_version=len(project.dependency_selections) + 1,
        approved_by=user_id,
        approved_at=utcnow(),
    )

    artifacts = await store.save_many(project, Phase.DEPENDENCIES.value, {
        "dependencies-decision.md": dependencies_decision_markdown(selection, choice["title"], choice["requests"]),
        "dependencies-rationale.md": dependencies_rationale_markdown(selection, choice["title"], choice["highlights"]),
    })

    await project.update(
        Set({
            "dependencies_approved": True,
            "dependencies_approved_at": selection.approved_at,
            "updated_at": selection.approved_at,
        }),
        Push({"dependency_selections": selection.model_dump()}),
    )

    log("APPROVAL", f"Dependencies approved: {choice['title']} ({request.mode}), decision v{selection.decision_version}",
        project_id=project.slug)
    return selection, artifacts
