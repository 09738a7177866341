import sys
import os
from datetime import datetime
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level
# Everything else is gated behind DEBUG

INFO_SCOPES = {
    "API",           # Route boundary
    "ORCHESTRATOR",  # Phase lifecycle
    "EXECUTOR",      # Agent execution
    "LLM",           # Provider boundary
    "ARTIFACTS",     # Storage writes
    "APPROVAL",      # Stack / dependency approvals
    "DB",
    "AUTH",
    "ADMIN",
    "ENV",
    "SECURITY",
    "MONITORING",
}

# DEBUG-only scopes (hidden by default)
DEBUG_SCOPES = {
    "PARSER",
    "PHASE_SPEC",
    "PROMPT",
}


def _debug_mode() -> bool:
    return os.getenv("SPECFLOW_DEBUG", "false").lower() == "true"


def _prefix(scope: str, project_id: Optional[str]) -> str:
    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"
    if project_id:
        prefix += f" [{project_id[:24]}]"
    return prefix


def log(scope: str, message: str, data: Any = None, project_id: Optional[str] = None) -> None:
    """
    Unified logging function for Specflow.

    Only INFO_SCOPES are shown by default.
    Set SPECFLOW_DEBUG=true to see all scopes.
    """
    if not _debug_mode() and scope not in INFO_SCOPES:
        return

    print(f"{_prefix(scope, project_id)} {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()


def log_error(scope: str, message: str, exc: Optional[BaseException] = None, project_id: Optional[str] = None) -> None:
    """
    Log a failure regardless of scope filtering.
    """
    line = f"{_prefix(scope, project_id)} ❌ {message}"
    if exc is not None:
        line += f" ({type(exc).__name__}: {exc})"
    print(line)
    sys.stdout.flush()


def log_section(scope: str, title: str, project_id: Optional[str] = None) -> None:
    """
    Log a section header with visual separator.
    """
    print(f"\n{'='*60}")
    print(f"{_prefix(scope, project_id)} {title}")
    print(f"{'='*60}")
    sys.stdout.flush()
