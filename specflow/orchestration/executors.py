# specflow/orchestration/executors.py
"""
Agent executors - one pure async function per agent role.

    (llm, context, prior, expected) -> {document name: content}

Every dependency arrives as an argument. Nothing is cached on a module,
class or instance between calls, and nothing read before an await is
re-read after it: the context is an immutable snapshot and the prior
artifacts mapping is never mutated.

Prior artifacts are keyed "{PHASE}/{name}", e.g. "ANALYSIS/personas.md".
"""
import json
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Mapping, Sequence

from specflow.core.exceptions import ExecutorOutputError
from specflow.core.logging import log
from specflow.llm import LLMClient
from specflow.llm.prompts import (
    DOCUMENT_PROTOCOL,
    ANALYST_PROMPT,
    PM_PROMPT,
    ARCHITECT_PROMPT,
    DEVOPS_PROMPT,
    SCRUMMASTER_PROMPT,
)
from specflow.orchestration.parser import parse_documents


@dataclass(frozen=True)
class ProjectContext:
    """Read-only snapshot of the project taken before a phase starts."""
    project_id: str
    slug: str
    name: str
    description: str
    stack_summary: str = ""
    dependency_summary: str = ""

    @classmethod
    def from_project(cls, project) -> "ProjectContext":
        stack_summary = ""
        if project.stack_approved and project.stack_choice:
            stack_summary = f"{project.stack_choice} ({project.stack_mode or 'template'})"
            if project.platform_type:
                stack_summary += f", platform: {project.platform_type}"

        dependency_summary = ""
        if project.dependencies_approved and project.dependency_selections:
            latest = project.dependency_selections[-1]
            dependency_summary = (
                f"frontend: {latest.frontend}; backend: {latest.backend}; "
                f"database: {latest.database}; deployment: {latest.deployment}"
            )
            if latest.packages:
                dependency_summary += f"; packages: {', '.join(latest.packages)}"

        return cls(
            project_id=str(project.id),
            slug=project.slug,
            name=project.name,
            description=project.description or "",
            stack_summary=stack_summary,
            dependency_summary=dependency_summary,
        )


Executor = Callable[[LLMClient, ProjectContext, Mapping[str, str], Sequence[str]], Awaitable[Dict[str, str]]]


# ═══════════════════════════════════════════════════════════════════════════════
# PROMPT ASSEMBLY
# ═══════════════════════════════════════════════════════════════════════════════

def _select(prior: Mapping[str, str], prefixes: Sequence[str]) -> Dict[str, str]:
    return {
        key: content
        for key, content in prior.items()
        if any(key == prefix or key.startswith(prefix + "/") for prefix in prefixes)
    }


def _build_prompt(
    context: ProjectContext,
    documents: Mapping[str, str],
    expected: Sequence[str],
) -> str:
    lines = [
        f"PROJECT: {context.name}",
        f"DESCRIPTION: {context.description or '(none provided)'}",
    ]
    if context.stack_summary:
        lines.append(f"APPROVED STACK: {context.stack_summary}")
    if context.dependency_summary:
        lines.append(f"APPROVED DEPENDENCIES: {context.dependency_summary}")

    if documents:
        lines.append("")
        lines.append("EXISTING DOCUMENTS:")
        for key in sorted(documents):
            lines.append(f"\n--- {key} ---\n{documents[key]}")

    lines.append("")
    lines.append(f"WRITE THESE DOCUMENTS: {', '.join(expected)}")
    return "\n".join(lines)


async def _generate(
    executor_id: str,
    llm: LLMClient,
    role_prompt: str,
    context: ProjectContext,
    documents: Mapping[str, str],
    expected: Sequence[str],
) -> Dict[str, str]:
    """
    One LLM call, parsed and checked against the expected document names.

    Raises:
        LLMError: provider failure
        ExecutorOutputError: missing, truncated or invalid documents
    """
    prompt = _build_prompt(context, documents, expected)
    log("EXECUTOR", f"{executor_id}: generating {', '.join(expected)}", project_id=context.slug)

    raw = await llm.complete(prompt, system_prompt=role_prompt + DOCUMENT_PROTOCOL)
    parsed = parse_documents(raw, source=executor_id)

    missing = [name for name in expected if name not in parsed.documents]
    incomplete = [name for name in expected if name in parsed.incomplete]
    invalid = []
    for name in expected:
        if name.endswith(".json") and name in parsed.documents and name not in incomplete:
            try:
                json.loads(parsed.documents[name])
            except json.JSONDecodeError:
                invalid.append(name)

    if missing or incomplete or invalid:
        raise ExecutorOutputError(executor_id, missing, incomplete, invalid)

    return {name: parsed.documents[name] for name in expected}


# ═══════════════════════════════════════════════════════════════════════════════
# EXECUTORS
# ═══════════════════════════════════════════════════════════════════════════════

async def run_analyst(
    llm: LLMClient,
    context: ProjectContext,
    prior: Mapping[str, str],
    expected: Sequence[str],
) -> Dict[str, str]:
    """ANALYSIS: constitution, project brief and personas from the idea alone."""
    return await _generate("analyst", llm, ANALYST_PROMPT, context, {}, expected)


async def run_pm(
    llm: LLMClient,
    context: ProjectContext,
    prior: Mapping[str, str],
    expected: Sequence[str],
) -> Dict[str, str]:
    """SPEC step 1: the PRD."""
    documents = _select(prior, ["ANALYSIS", "STACK_SELECTION/stack-decision.md"])
    return await _generate("pm", llm, PM_PROMPT, context, documents, expected)


async def run_architect(
    llm: LLMClient,
    context: ProjectContext,
    prior: Mapping[str, str],
    expected: Sequence[str],
) -> Dict[str, str]:
    """SPEC step 2: data model and API spec, built on the PRD from step 1."""
    documents = _select(prior, ["SPEC/PRD.md", "STACK_SELECTION/stack-decision.md", "ANALYSIS/constitution.md"])
    return await _generate("architect", llm, ARCHITECT_PROMPT, context, documents, expected)


async def run_devops(
    llm: LLMClient,
    context: ProjectContext,
    prior: Mapping[str, str],
    expected: Sequence[str],
) -> Dict[str, str]:
    """DEPENDENCIES: the dependency proposal."""
    documents = _select(prior, ["STACK_SELECTION", "SPEC"])
    return await _generate("devops", llm, DEVOPS_PROMPT, context, documents, expected)


async def run_scrummaster(
    llm: LLMClient,
    context: ProjectContext,
    prior: Mapping[str, str],
    expected: Sequence[str],
) -> Dict[str, str]:
    """SOLUTIONING: architecture, epics and tasks from everything before."""
    return await _generate("scrummaster", llm, SCRUMMASTER_PROMPT, context, dict(prior), expected)


EXECUTORS: Dict[str, Executor] = {
    "analyst": run_analyst,
    "pm": run_pm,
    "architect": run_architect,
    "devops": run_devops,
    "scrummaster": run_scrummaster,
}
