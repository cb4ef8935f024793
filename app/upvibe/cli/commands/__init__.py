"""CLI commands for upvibe.

This package contains all subcommand implementations.
"""

from upvibe.cli.commands import add, doctor, list_packages, remove, update

__all__ = ["add", "doctor", "list_packages", "remove", "update"]
