"""Update command implementation.

Updates every configured package with the selected package manager.
"""

from typing import Annotated

import typer
from rich.markup import escape

from upvibe.cli.display import UpdateReporter, print_summary
from upvibe.core.config import require_config, validate_config
from upvibe.core.detect import select_package_manager
from upvibe.core.installed import get_installed_lookup
from upvibe.core.orchestrator import UpdateOrchestrator
from upvibe.core.registry import NpmRegistry
from upvibe.core.runner import ProcessRunner
from upvibe.models.package import PackageManager
from upvibe.utils.formatting import console, err_console, print_warning

app = typer.Typer(
    help="Update all configured packages.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def update_packages(
    ctx: typer.Context,
    manager: Annotated[
        PackageManager | None,
        typer.Option(
            "--manager",
            "-m",
            help="Package manager to use: npm, yarn or pnpm.",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """Update all configured packages.

    Packages are updated one at a time in config order. A failing package
    does not stop the others; the command exits with status 1 if any
    package failed.

    Examples:
        upvibe update               # Use configured or detected manager
        upvibe update -m pnpm       # Force pnpm
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config()

    errors = validate_config(config)
    if errors:
        err_console.print("[error]Configuration errors:[/]")
        for error in errors:
            err_console.print(f"[error]  • {escape(error)}[/]")
        raise typer.Exit(code=1)

    if not config.packages:
        print_warning("No packages configured to update")
        raise typer.Exit(code=0)

    selected = select_package_manager(override=manager, preferred=config.package_manager)
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))

    if not quiet:
        console.print(f"\n[bold_header]Updating packages with {selected.value}...[/]\n")

    with UpdateReporter(quiet=quiet) as reporter:
        orchestrator = UpdateOrchestrator(
            manager=selected,
            registry=NpmRegistry(),
            installed=get_installed_lookup(selected),
            runner=ProcessRunner(),
            progress=reporter,
        )
        summary = orchestrator.run(config.to_specs())

    if not quiet:
        print_summary(summary)

    if summary.has_failures:
        raise typer.Exit(code=summary.exit_code)
