"""
Executor prompts - one module per agent role.
"""
from .protocol import DOCUMENT_PROTOCOL
from .analyst import ANALYST_PROMPT
from .pm import PM_PROMPT
from .architect import ARCHITECT_PROMPT
from .devops import DEVOPS_PROMPT
from .scrummaster import SCRUMMASTER_PROMPT

__all__ = [
    "DOCUMENT_PROTOCOL",
    "ANALYST_PROMPT",
    "PM_PROMPT",
    "ARCHITECT_PROMPT",
    "DEVOPS_PROMPT",
    "SCRUMMASTER_PROMPT",
]
