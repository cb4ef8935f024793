"""Remove command implementation."""

from typing import Annotated

import typer
from rich.markup import escape

from upvibe.core.config import ConfigError, remove_package
from upvibe.core.paths import get_config_path
from upvibe.utils.formatting import console, print_error, print_success, print_warning


def remove(
    package: Annotated[str, typer.Argument(help="Package name to remove.")],
) -> None:
    """Remove a package from the configuration.

    The package itself is left installed.
    """
    try:
        removed = remove_package(package)
    except ConfigError as e:
        print_error(f"Error removing package: {e}")
        raise typer.Exit(code=1) from e

    if removed:
        print_success(f"Removed {package} from configuration")
        console.print(f"[muted]  Config file: {escape(str(get_config_path()))}[/]")
    else:
        print_warning(f"Package {package} not found in configuration")
