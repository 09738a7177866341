# tests/test_engine.py
"""
Orchestrator engine: run_phase and advance_phase against a real store.
"""
import pytest

from specflow.core.exceptions import ExecutorError, PersistenceError, PhaseTransitionError, UnknownPhaseError
from specflow.lib.monitoring import registry
from specflow.models import Artifact, Phase, Project
from specflow.orchestration.engine import advance_phase, run_phase
from tests.conftest import FakeLLM, make_project


async def _run(project, phase, fake_llm, phase_spec, store):
    return await run_phase(project, phase, spec=phase_spec, llm_factory=fake_llm.factory, store=store)


async def _reload(project):
    return await Project.get(project.id)


class TestRunPhase:

    @pytest.mark.asyncio
    async def test_analysis_generates_and_persists_documents(self, project, fake_llm, phase_spec, store):
        """
        GIVEN a new project in ANALYSIS
        WHEN the ANALYSIS phase runs
        THEN the analyst's three documents are stored as version 1
        """
        result = await _run(project, "ANALYSIS", fake_llm, phase_spec, store)

        assert result.phase == Phase.ANALYSIS
        assert set(result.artifacts) == {"constitution.md", "project-brief.md", "personas.md"}
        assert result.versions == {"constitution.md": 1, "project-brief.md": 1, "personas.md": 1}
        assert sorted(await store.existing_names(project, "ANALYSIS")) == [
            "constitution.md", "personas.md", "project-brief.md",
        ]
        assert (store.project_dir(project) / "ANALYSIS" / "personas.md").is_file()

        reloaded = await _reload(project)
        assert "ANALYSIS" in reloaded.orchestration_state
        assert reloaded.current_phase == Phase.ANALYSIS

    @pytest.mark.asyncio
    async def test_unknown_phase_is_rejected_before_any_executor(self, project, fake_llm, phase_spec, store):
        with pytest.raises(UnknownPhaseError):
            await _run(project, "DEPLOYMENT", fake_llm, phase_spec, store)

        assert fake_llm.calls == []
        assert await Artifact.count() == 0

    @pytest.mark.asyncio
    async def test_phase_not_reached_is_rejected(self, project, fake_llm, phase_spec, store):
        with pytest.raises(PhaseTransitionError):
            await _run(project, "SPEC", fake_llm, phase_spec, store)

        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_pm_output_feeds_the_architect(self, user, fake_llm, phase_spec, store):
        """
        GIVEN a project in SPEC
        WHEN the SPEC phase runs
        THEN the architect's prompt contains the PRD the pm produced in the same run
        """
        project = await make_project(user, current_phase=Phase.SPEC)
        fake_llm.responses["PRD.md"] = '<<<FILE path="PRD.md">>>\n# PRD\nUNIQUE-PRD-MARKER\n<<<END_FILE>>>'

        result = await _run(project, "SPEC", fake_llm, phase_spec, store)

        assert set(result.artifacts) == {"PRD.md", "data-model.md", "api-spec.json"}
        assert result.executors == ["pm", "architect"]
        architect_prompts = fake_llm.prompts_asking_for("data-model.md")
        assert len(architect_prompts) == 1
        assert "UNIQUE-PRD-MARKER" in architect_prompts[0]

    @pytest.mark.asyncio
    async def test_executor_failure_persists_nothing(self, user, fake_llm, phase_spec, store):
        """
        GIVEN the architect's LLM call fails after the pm succeeded
        WHEN the SPEC phase runs
        THEN the phase is aborted and not even the pm's PRD is stored
        """
        project = await make_project(user, current_phase=Phase.SPEC)
        fake_llm.fail_on.append("data-model.md")

        with pytest.raises(ExecutorError) as exc_info:
            await _run(project, "SPEC", fake_llm, phase_spec, store)

        assert exc_info.value.executor == "architect"
        assert exc_info.value.phase == "SPEC"
        assert len(fake_llm.calls) == 2
        assert await Artifact.find(Artifact.phase == "SPEC").count() == 0
        assert not (store.project_dir(project) / "SPEC").exists()
        assert "SPEC" not in (await _reload(project)).orchestration_state

    @pytest.mark.asyncio
    async def test_malformed_output_aborts_the_phase(self, project, phase_spec, store):
        llm = FakeLLM(responses={"constitution.md": "I could not produce the documents."})

        with pytest.raises(ExecutorError):
            await _run(project, "ANALYSIS", llm, phase_spec, store)

        assert await Artifact.count() == 0

    @pytest.mark.asyncio
    async def test_storage_failure_is_counted_as_a_failed_phase(self, project, fake_llm, phase_spec, store, monkeypatch):
        """
        GIVEN every executor succeeds but the artifact store is down
        WHEN the ANALYSIS phase runs
        THEN PersistenceError propagates and the execution counts as failed
        """
        def executions(outcome):
            return registry.get_sample_value(
                "specflow_phase_executions_total", {"phase": "ANALYSIS", "outcome": outcome}
            ) or 0

        failed_before, succeeded_before = executions("failed"), executions("succeeded")

        async def store_down(*args, **kwargs):
            raise PersistenceError("artifacts/test-project/ANALYSIS", "disk full")

        monkeypatch.setattr(store, "save_many", store_down)

        with pytest.raises(PersistenceError):
            await _run(project, "ANALYSIS", fake_llm, phase_spec, store)

        assert executions("failed") == failed_before + 1
        assert executions("succeeded") == succeeded_before
        assert "ANALYSIS" not in (await _reload(project)).orchestration_state

    @pytest.mark.asyncio
    async def test_rerun_creates_new_versions(self, project, fake_llm, phase_spec, store):
        await _run(project, "ANALYSIS", fake_llm, phase_spec, store)
        result = await _run(project, "ANALYSIS", fake_llm, phase_spec, store)

        assert result.versions["personas.md"] == 2
        history = await store.history(project, "ANALYSIS", "personas.md")
        assert [a.version for a in history] == [2, 1]

    @pytest.mark.asyncio
    async def test_prior_phase_artifacts_reach_later_executors(self, user, fake_llm, phase_spec, store):
        project = await make_project(user, current_phase=Phase.SPEC)
        await store.save(project, "ANALYSIS", "personas.md", "# Personas\nNIGHT-SHIFT-NURSES")

        await _run(project, "SPEC", fake_llm, phase_spec, store)

        assert "NIGHT-SHIFT-NURSES" in fake_llm.prompts_asking_for("PRD.md")[0]

    @pytest.mark.asyncio
    async def test_executor_params_come_from_the_spec(self, project, fake_llm, phase_spec, store):
        await _run(project, "ANALYSIS", fake_llm, phase_spec, store)

        assert fake_llm.params[0] == phase_spec.get("ANALYSIS").executors[0].llm


class TestAdvancePhase:

    @pytest.mark.asyncio
    async def test_advance_requires_the_phase_artifacts(self, project, phase_spec, store):
        with pytest.raises(PhaseTransitionError) as exc_info:
            await advance_phase(project, phase_spec, store)

        assert set(exc_info.value.missing) == {"constitution.md", "project-brief.md", "personas.md"}
        assert (await _reload(project)).current_phase == Phase.ANALYSIS

    @pytest.mark.asyncio
    async def test_advance_after_analysis(self, project, fake_llm, phase_spec, store):
        await _run(project, "ANALYSIS", fake_llm, phase_spec, store)

        successor = await advance_phase(project, phase_spec, store)

        assert successor == Phase.STACK_SELECTION
        reloaded = await _reload(project)
        assert reloaded.current_phase == Phase.STACK_SELECTION
        assert reloaded.phases_completed == [Phase.ANALYSIS]

    @pytest.mark.asyncio
    async def test_stack_selection_needs_approval_flag(self, user, phase_spec, store):
        project = await make_project(user, current_phase=Phase.STACK_SELECTION)
        await store.save(project, "STACK_SELECTION", "stack-decision.md", "# Decision")
        await store.save(project, "STACK_SELECTION", "stack-rationale.md", "# Rationale")

        with pytest.raises(PhaseTransitionError) as exc_info:
            await advance_phase(project, phase_spec, store)
        assert exc_info.value.missing == ["stack_approved"]

        await project.set({"stack_approved": True})
        assert await advance_phase(project, phase_spec, store) == Phase.SPEC

    @pytest.mark.asyncio
    async def test_done_cannot_advance(self, user, phase_spec, store):
        project = await make_project(user, current_phase=Phase.DONE)

        with pytest.raises(PhaseTransitionError):
            await advance_phase(project, phase_spec, store)

        assert (await _reload(project)).current_phase == Phase.DONE

    @pytest.mark.asyncio
    async def test_full_walk_reaches_done_without_regressing(self, project, fake_llm, phase_spec, store):
        seen = [Phase.ANALYSIS]

        await _run(project, "ANALYSIS", fake_llm, phase_spec, store)
        seen.append(await advance_phase(project, phase_spec, store))

        await store.save(project, "STACK_SELECTION", "stack-decision.md", "# Decision")
        await store.save(project, "STACK_SELECTION", "stack-rationale.md", "# Rationale")
        await project.set({"stack_approved": True})
        seen.append(await advance_phase(project, phase_spec, store))

        await _run(project, "SPEC", fake_llm, phase_spec, store)
        seen.append(await advance_phase(project, phase_spec, store))

        await _run(project, "DEPENDENCIES", fake_llm, phase_spec, store)
        await project.set({"dependencies_approved": True})
        seen.append(await advance_phase(project, phase_spec, store))

        await _run(project, "SOLUTIONING", fake_llm, phase_spec, store)
        seen.append(await advance_phase(project, phase_spec, store))

        assert seen == [
            Phase.ANALYSIS, Phase.STACK_SELECTION, Phase.SPEC,
            Phase.DEPENDENCIES, Phase.SOLUTIONING, Phase.DONE,
        ]
        reloaded = await _reload(project)
        assert reloaded.current_phase == Phase.DONE
        assert reloaded.phases_completed == seen[:-1]
