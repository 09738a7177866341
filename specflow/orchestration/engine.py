# specflow/orchestration/engine.py
"""
Orchestrator engine.

    resolve phase -> check state -> snapshot context -> run executors in order
    -> persist everything (only if every executor succeeded)

One request runs one phase to completion or failure. There is no retry and
no background work; a failed phase is re-triggered by the caller.
"""
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List

from specflow.core.exceptions import ExecutorError, SpecflowError
from specflow.core.logging import log, log_error, log_section
from specflow.lib.artifact_store import ArtifactStore, artifact_key
from specflow.lib.monitoring import record_phase_execution
from specflow.llm import LLMFactory
from specflow.models import Phase, PHASE_ORDER, Project
from specflow.models.project import utcnow
from specflow.orchestration.executors import EXECUTORS, ProjectContext
from specflow.orchestration.phase_spec import PhaseSpec
from specflow.orchestration.state_machine import (
    ensure_can_execute,
    missing_requirements,
    phase_index,
    plan_advance,
)


@dataclass(frozen=True)
class PhaseResult:
    phase: Phase
    artifacts: Dict[str, str]
    versions: Dict[str, int] = field(default_factory=dict)
    executors: List[str] = field(default_factory=list)

    def summary(self) -> Dict:
        return {
            "phase": self.phase.value,
            "executors": list(self.executors),
            "artifacts": [
                {"name": name, "version": self.versions.get(name), "size": len(content)}
                for name, content in self.artifacts.items()
            ],
        }


async def run_phase(
    project: Project,
    phase_name: str,
    *,
    spec: PhaseSpec,
    llm_factory: LLMFactory,
    store: ArtifactStore,
) -> PhaseResult:
    """
    Execute every executor registered for a phase and persist the results.

    Raises:
        UnknownPhaseError: phase_name is not a phase (nothing runs)
        PhaseTransitionError: phase not reached yet, or has no executors
        ExecutorError: an executor failed; nothing of this phase was saved
        PersistenceError: storage failure after generation
    """
    definition = spec.get(phase_name)
    phase = definition.name
    executor_ids = [executor.id for executor in definition.executors]
    ensure_can_execute(project.current_phase, phase, executor_ids)

    # Everything the executors see is captured here, before the first await
    context = ProjectContext.from_project(project)
    earlier_phases = [p.value for p in PHASE_ORDER[:phase_index(phase)]]

    log_section("ORCHESTRATOR", f"{phase.value} -> {', '.join(executor_ids)}", project_id=context.slug)
    prior = await store.latest_contents(project, earlier_phases)
    log("ORCHESTRATOR", f"Running {phase.value} with {len(prior)} prior artifacts", project_id=context.slug)

    started = time.perf_counter()
    generated: Dict[str, str] = {}
    for definition_entry in definition.executors:
        executor = EXECUTORS[definition_entry.id]
        visible = dict(prior)
        visible.update({artifact_key(phase.value, name): content for name, content in generated.items()})
        try:
            llm = llm_factory(definition_entry.llm)
            documents = await executor(
                llm,
                context,
                MappingProxyType(visible),
                tuple(definition_entry.produces),
            )
        except SpecflowError as e:
            record_phase_execution(phase.value, "failed", time.perf_counter() - started)
            log_error("ORCHESTRATOR", f"{definition_entry.id} failed, {phase.value} aborted", e, project_id=context.slug)
            raise ExecutorError(definition_entry.id, phase.value, e.message)
        except Exception as e:
            record_phase_execution(phase.value, "failed", time.perf_counter() - started)
            log_error("ORCHESTRATOR", f"{definition_entry.id} crashed, {phase.value} aborted", e, project_id=context.slug)
            raise ExecutorError(definition_entry.id, phase.value, str(e))

        log("EXECUTOR", f"{definition_entry.id} produced {', '.join(documents)}", project_id=context.slug)
        generated.update(documents)

    try:
        saved = await store.save_many(project, phase.value, generated)
        result = PhaseResult(
            phase=phase,
            artifacts=generated,
            versions={artifact.name: artifact.version for artifact in saved},
            executors=executor_ids,
        )

        # Only these fields are written; approval fields keep their stored values
        await project.set({
            f"orchestration_state.{phase.value}": {**result.summary(), "executed_at": utcnow()},
            "updated_at": utcnow(),
        })
    except Exception as e:
        record_phase_execution(phase.value, "failed", time.perf_counter() - started)
        log_error("ORCHESTRATOR", f"{phase.value} generated but could not be persisted", e, project_id=context.slug)
        raise

    record_phase_execution(phase.value, "succeeded", time.perf_counter() - started)
    log("ORCHESTRATOR", f"{phase.value} complete: {len(saved)} artifacts saved", project_id=context.slug)
    return result


async def advance_phase(project: Project, spec: PhaseSpec, store: ArtifactStore) -> Phase:
    """
    Move the project to the successor of its current phase.

    Raises:
        PhaseTransitionError: DONE, or required artifacts / approval missing
    """
    current = Phase(project.current_phase)
    definition = spec.get(current.value)

    existing = await store.existing_names(project, current.value)
    flag = definition.approval_flag
    missing = missing_requirements(
        definition.required_artifacts,
        existing,
        approval_flag=flag,
        approved=bool(getattr(project, flag)) if flag else True,
    )
    successor, completed = plan_advance(current, project.phases_completed, missing)

    await project.set({
        "current_phase": successor.value,
        "phases_completed": [p.value for p in completed],
        "updated_at": utcnow(),
    })
    log("ORCHESTRATOR", f"Advanced {current.value} -> {successor.value}", project_id=project.slug)
    return successor
