# specflow/orchestration/state_machine.py
"""
Phase state machine.

Six states, one legal successor each, DONE is terminal. Everything here is a
pure function of the values passed in; callers persist the results.
"""
from typing import Iterable, List, Optional, Sequence, Tuple

from specflow.core.exceptions import PhaseTransitionError
from specflow.models.phase import Phase, PHASE_ORDER


def phase_index(phase: Phase) -> int:
    return PHASE_ORDER.index(Phase(phase))


def next_phase(phase: Phase) -> Optional[Phase]:
    """The single legal successor, or None for DONE."""
    index = phase_index(phase)
    if index + 1 >= len(PHASE_ORDER):
        return None
    return PHASE_ORDER[index + 1]


def is_reached(current: Phase, phase: Phase) -> bool:
    """A phase is reached once it is current or behind the current phase."""
    return phase_index(phase) <= phase_index(current)


def ensure_reached(current: Phase, phase: Phase, action: str) -> None:
    if not is_reached(current, phase):
        raise PhaseTransitionError(
            f"Cannot {action}: project is in {Phase(current).value}, "
            f"{Phase(phase).value} has not started yet",
            phase=Phase(phase).value,
        )


def ensure_can_execute(current: Phase, phase: Phase, executor_ids: Sequence[str]) -> None:
    """
    Raises:
        PhaseTransitionError: the phase has no executors, or has not been reached
    """
    phase = Phase(phase)
    if not executor_ids:
        raise PhaseTransitionError(
            f"Phase {phase.value} has no executors to run",
            phase=phase.value,
        )
    ensure_reached(current, phase, f"execute {phase.value}")


def missing_requirements(
    required_artifacts: Iterable[str],
    existing_artifacts: Iterable[str],
    approval_flag: Optional[str] = None,
    approved: bool = True,
) -> List[str]:
    """List what still blocks leaving a phase (artifact names, then approval)."""
    existing = set(existing_artifacts)
    missing = [name for name in required_artifacts if name not in existing]
    if approval_flag and not approved:
        missing.append(approval_flag)
    return missing


def plan_advance(
    current: Phase,
    completed: Sequence[Phase],
    missing: Sequence[str],
) -> Tuple[Phase, List[Phase]]:
    """
    Compute the state after leaving the current phase.

    Returns:
        (new current phase, new completed list)

    Raises:
        PhaseTransitionError: DONE reached, or requirements still missing
    """
    current = Phase(current)
    successor = next_phase(current)
    if successor is None:
        raise PhaseTransitionError("Project is already DONE", phase=current.value)
    if missing:
        raise PhaseTransitionError(
            f"Cannot leave {current.value}: missing {', '.join(missing)}",
            phase=current.value,
            missing=list(missing),
        )

    new_completed = [Phase(p) for p in completed]
    if current not in new_completed:
        new_completed.append(current)
    return successor, new_completed
