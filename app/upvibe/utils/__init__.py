"""Utility modules for upvibe.

This module exports commonly used utility functions.
"""

from upvibe.utils.formatting import (
    console,
    create_package_table,
    err_console,
    format_update_type,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from upvibe.utils.shell import CommandResult, command_exists, run_command, run_shell

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_package_table",
    "err_console",
    "format_update_type",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_shell",
]
