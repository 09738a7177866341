from enum import Enum


class Phase(str, Enum):
    """The fixed project phases, in order."""
    ANALYSIS = "ANALYSIS"
    STACK_SELECTION = "STACK_SELECTION"
    SPEC = "SPEC"
    DEPENDENCIES = "DEPENDENCIES"
    SOLUTIONING = "SOLUTIONING"
    DONE = "DONE"


PHASE_ORDER = [
    Phase.ANALYSIS,
    Phase.STACK_SELECTION,
    Phase.SPEC,
    Phase.DEPENDENCIES,
    Phase.SOLUTIONING,
    Phase.DONE,
]
