# specflow/core/exceptions.py
"""
Custom exceptions for the application.

Every exception carries the HTTP status the route boundary renders it with.
"""
from typing import Any, Dict, List, Optional


class SpecflowError(Exception):
    """Base exception for all Specflow errors."""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RequestValidationFailed(SpecflowError):
    """Malformed or semantically invalid request payload."""
    status_code = 400


class NotFoundError(SpecflowError):
    """Unknown project, artifact, user or setting."""
    status_code = 404

    def __init__(self, resource: str, key: str):
        super().__init__(f"{resource} not found", {"resource": resource, "key": key})
        self.resource = resource
        self.key = key


class AuthenticationError(SpecflowError):
    status_code = 401


class PermissionDeniedError(SpecflowError):
    status_code = 403


class PhaseError(SpecflowError):
    """Phase lookup or phase transition error."""
    status_code = 400


class UnknownPhaseError(PhaseError):
    def __init__(self, phase: str):
        super().__init__(f"Unknown phase: {phase}", {"phase": phase})
        self.phase = phase


class PhaseTransitionError(PhaseError):
    """The requested phase operation is not legal for the project's current phase."""

    def __init__(self, message: str, phase: str, missing: Optional[List[str]] = None):
        details: Dict[str, Any] = {"phase": phase}
        if missing:
            details["missing"] = missing
        super().__init__(message, details)
        self.phase = phase
        self.missing = missing or []


class LLMError(SpecflowError):
    """LLM provider error."""

    def __init__(self, provider: str, message: str):
        super().__init__(
            f"LLM error ({provider}): {message}",
            {"provider": provider}
        )
        self.provider = provider


class ExecutorError(SpecflowError):
    """An agent executor failed; the phase was aborted."""

    def __init__(self, executor: str, phase: str, message: str):
        super().__init__(
            f"Executor '{executor}' failed during {phase}: {message}",
            {"executor": executor, "phase": phase}
        )
        self.executor = executor
        self.phase = phase


class ExecutorOutputError(SpecflowError):
    """Executor output is missing expected documents or was truncated."""

    def __init__(
        self,
        executor: str,
        missing: List[str],
        incomplete: Optional[List[str]] = None,
        invalid: Optional[List[str]] = None,
    ):
        parts = []
        if missing:
            parts.append(f"missing documents: {', '.join(missing)}")
        if incomplete:
            parts.append(f"truncated documents: {', '.join(incomplete)}")
        if invalid:
            parts.append(f"invalid JSON: {', '.join(invalid)}")
        super().__init__(
            f"{executor} output rejected ({'; '.join(parts)})",
            {
                "executor": executor,
                "missing": missing,
                "incomplete": incomplete or [],
                "invalid": invalid or [],
            }
        )
        self.executor = executor
        self.missing = missing
        self.incomplete = incomplete or []
        self.invalid = invalid or []


class PersistenceError(SpecflowError):
    """Artifact storage error."""

    def __init__(self, path: str, message: str):
        super().__init__(
            f"Cannot write to {path}: {message}",
            {"path": path}
        )
        self.path = path


class PhaseSpecError(SpecflowError):
    """The static phase specification is malformed."""
    pass


class EnvironmentConfigError(SpecflowError):
    """Required environment variables are missing or malformed."""

    def __init__(self, problems: List[str]):
        super().__init__(
            "Invalid environment configuration",
            {"problems": problems}
        )
        self.problems = problems
