"""
Core module - configuration, environment validation, errors, logging, auth.
"""
from .config import settings
from .exceptions import SpecflowError
from .logging import log, log_error, log_section

__all__ = ["settings", "SpecflowError", "log", "log_error", "log_section"]
