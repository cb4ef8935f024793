"""CLI package for upvibe.

This package contains the Typer application and all subcommands.
"""

from upvibe.cli.main import app

__all__ = ["app"]
