"""Add command implementation.

Adds a package to the config file or replaces its existing entry.
"""

from typing import Annotated

import typer
from rich.markup import escape

from upvibe.core.config import ConfigError, add_package, validate_package
from upvibe.models.config import PackageEntry
from upvibe.models.package import UpdateStrategy
from upvibe.utils.formatting import console, print_error, print_info, print_success


def add(
    package: Annotated[str, typer.Argument(help="Package name, e.g. typescript.")],
    global_install: Annotated[
        bool,
        typer.Option(
            "--global/--local",
            "-g/-l",
            help="Install globally (default) or into the current project.",
        ),
    ] = True,
    strategy: Annotated[
        UpdateStrategy,
        typer.Option(
            "--strategy",
            "-s",
            help="Update strategy: latest, minor, patch or pinned.",
            case_sensitive=False,
        ),
    ] = UpdateStrategy.LATEST,
    version: Annotated[
        str | None,
        typer.Option(
            "--version",
            "-v",
            help="Exact version (pinned strategy only).",
        ),
    ] = None,
    postinstall: Annotated[
        list[str] | None,
        typer.Option(
            "--postinstall",
            "-p",
            help="Command to run after install (repeatable).",
        ),
    ] = None,
) -> None:
    """Add a package to the configuration.

    Examples:
        upvibe add typescript
        upvibe add eslint --strategy minor
        upvibe add pnpm --strategy pinned --version 8.15.0
        upvibe add @angular/cli -p "ng analytics disable"
    """
    entry = PackageEntry(
        name=package,
        global_install=global_install,
        strategy=strategy,
        version=version,
        postinstall=postinstall or [],
    )

    errors = validate_package(entry)
    if errors:
        for error in errors:
            print_error(error)
        if strategy == UpdateStrategy.PINNED:
            print_info("Use --version to specify the version.")
        raise typer.Exit(code=1)

    try:
        config_path = add_package(entry)
    except ConfigError as e:
        print_error(f"Error adding package: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Added {package} to configuration")
    console.print(f"[muted]  Config file: {escape(str(config_path))}[/]")
    console.print(f"[muted]  Global: {str(global_install).lower()}[/]")
    console.print(f"[muted]  Strategy: {strategy.value}[/]")
    if version:
        console.print(f"[muted]  Version: {escape(version)}[/]")
    if entry.postinstall:
        console.print(f"[muted]  Postinstall: {len(entry.postinstall)} command(s)[/]")
    print_info("\nRun 'upvibe update' to install the package.")
