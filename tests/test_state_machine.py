# tests/test_state_machine.py
"""
Phase state machine (pure functions).
"""
import itertools

import pytest

from specflow.core.exceptions import PhaseTransitionError
from specflow.models import Phase, PHASE_ORDER
from specflow.orchestration.state_machine import (
    ensure_can_execute,
    is_reached,
    missing_requirements,
    next_phase,
    phase_index,
    plan_advance,
)


class TestOrdering:

    def test_six_phases_in_fixed_order(self):
        assert [p.value for p in PHASE_ORDER] == [
            "ANALYSIS", "STACK_SELECTION", "SPEC", "DEPENDENCIES", "SOLUTIONING", "DONE",
        ]

    def test_each_phase_has_exactly_one_successor_except_done(self):
        for current, expected in zip(PHASE_ORDER, PHASE_ORDER[1:]):
            assert next_phase(current) == expected
        assert next_phase(Phase.DONE) is None

    def test_is_reached(self):
        assert is_reached(Phase.SPEC, Phase.ANALYSIS)
        assert is_reached(Phase.SPEC, Phase.SPEC)
        assert not is_reached(Phase.SPEC, Phase.DEPENDENCIES)


class TestAdvance:

    def test_advance_appends_current_to_completed(self):
        successor, completed = plan_advance(Phase.ANALYSIS, [], [])

        assert successor == Phase.STACK_SELECTION
        assert completed == [Phase.ANALYSIS]

    def test_missing_requirements_block_advance(self):
        with pytest.raises(PhaseTransitionError) as exc_info:
            plan_advance(Phase.ANALYSIS, [], ["personas.md"])

        assert exc_info.value.missing == ["personas.md"]
        assert "personas.md" in exc_info.value.message

    def test_done_is_terminal(self):
        with pytest.raises(PhaseTransitionError):
            plan_advance(Phase.DONE, list(PHASE_ORDER[:-1]), [])

    def test_missing_requirements_lists_artifacts_then_approval(self):
        missing = missing_requirements(
            ["stack-decision.md", "stack-rationale.md"],
            ["stack-decision.md"],
            approval_flag="stack_approved",
            approved=False,
        )
        assert missing == ["stack-rationale.md", "stack_approved"]

    def test_nothing_missing_when_all_present_and_approved(self):
        assert missing_requirements(["a.md"], ["a.md", "extra.md"], "stack_approved", True) == []

    def test_no_sequence_of_advances_ever_regresses(self):
        """
        GIVEN every sequence of advance attempts, with requirements met or not
        WHEN they are applied in order
        THEN current_phase is always one of the six phases and never moves backwards
        """
        for outcomes in itertools.product([True, False], repeat=8):
            current, completed = Phase.ANALYSIS, []
            for requirements_met in outcomes:
                before = phase_index(current)
                try:
                    current, completed = plan_advance(
                        current, completed, [] if requirements_met else ["missing.md"]
                    )
                except PhaseTransitionError:
                    pass
                assert current in PHASE_ORDER
                assert phase_index(current) >= before
                assert completed == PHASE_ORDER[:phase_index(current)]


class TestExecutionGuard:

    def test_current_phase_can_execute(self):
        ensure_can_execute(Phase.ANALYSIS, Phase.ANALYSIS, ["analyst"])

    def test_completed_phase_can_be_regenerated(self):
        ensure_can_execute(Phase.SOLUTIONING, Phase.SPEC, ["pm", "architect"])

    def test_future_phase_cannot_execute(self):
        with pytest.raises(PhaseTransitionError) as exc_info:
            ensure_can_execute(Phase.ANALYSIS, Phase.SPEC, ["pm", "architect"])
        assert "has not started" in exc_info.value.message

    def test_phase_without_executors_cannot_execute(self):
        with pytest.raises(PhaseTransitionError) as exc_info:
            ensure_can_execute(Phase.STACK_SELECTION, Phase.STACK_SELECTION, [])
        assert "no executors" in exc_info.value.message
