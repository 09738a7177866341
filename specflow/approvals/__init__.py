"""
Stack and dependency approvals.
"""
from .service import approve_stack, approve_dependencies

__all__ = ["approve_stack", "approve_dependencies"]
