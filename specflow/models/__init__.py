from .phase import Phase, PHASE_ORDER
from .project import Project, StackSelection, DependencySelection
from .artifact import Artifact
from .user import User, USER_ROLES
from .setting import Setting

DOCUMENT_MODELS = [Project, Artifact, User, Setting]

__all__ = [
    "Phase",
    "PHASE_ORDER",
    "Project",
    "StackSelection",
    "DependencySelection",
    "Artifact",
    "User",
    "USER_ROLES",
    "Setting",
    "DOCUMENT_MODELS",
]
