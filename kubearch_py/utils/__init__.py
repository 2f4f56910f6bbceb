"""Utility modules for the inspector package."""

from .logging import (
    get_logger,
    setup_logging,
    LogLevel,
    is_verbose,
)
from .subprocess import run_command, CommandResult, check_prerequisites
from .progress import ProgressStyle, Spinner

__all__ = [
    "get_logger",
    "setup_logging",
    "LogLevel",
    "is_verbose",
    "run_command",
    "CommandResult",
    "check_prerequisites",
    "ProgressStyle",
    "Spinner",
]
