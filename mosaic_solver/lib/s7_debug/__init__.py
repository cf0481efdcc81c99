"""Module s7_debug : logger console et journaux structurés."""

from .console import get_logger, enable_debug, disable_debug, is_debug_enabled, debug_scope
from .logger import RunLogger, RunLog, StepLog

__all__ = [
    "get_logger",
    "enable_debug",
    "disable_debug",
    "is_debug_enabled",
    "debug_scope",
    "RunLogger",
    "RunLog",
    "StepLog",
]
