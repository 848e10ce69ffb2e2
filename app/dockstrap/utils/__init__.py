"""Utility modules for dockstrap.

This module exports commonly used utility functions.
"""

from dockstrap.utils.formatting import (
    console,
    err_console,
    print_error,
    print_hints,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from dockstrap.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_hints",
    "print_info",
    "print_step",
    "print_success",
    "print_warning",
    "run_command",
]
