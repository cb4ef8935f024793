"""Progress and summary rendering for update runs.

The UpdateReporter receives pipeline progress events from the
orchestrator and drives a Rich spinner; print_summary renders the
final RunSummary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.status import Status

from upvibe.core.orchestrator import ProgressEvent, UpdateStage
from upvibe.models.outcome import AlreadyCurrent, Failed, RunSummary, Success
from upvibe.utils.formatting import console, format_update_type

if TYPE_CHECKING:
    from upvibe.models.outcome import UpdateOutcome


def format_outcome_line(package: str, outcome: UpdateOutcome) -> str:
    """Format the one-line result shown when a package finishes.

    Args:
        package: Package name.
        outcome: The package's outcome.

    Returns:
        Rich markup line.
    """
    name = f"[package.name]{escape(package)}[/]"

    if isinstance(outcome, AlreadyCurrent):
        return f"[info]✔[/] {name} is already at [version]{escape(outcome.version)}[/]"

    if isinstance(outcome, Success):
        label = format_update_type(outcome.update_type)
        installed = f"[version]{escape(outcome.installed_version)}[/]"
        if outcome.is_new_install:
            return f"[success]✔[/] Installed {name} {installed}"
        if outcome.previous_version == outcome.installed_version:
            return f"[success]✔[/] Reinstalled {name} {installed}"
        previous = f"[version]{escape(outcome.previous_version or '')}[/]"
        return f"[success]✔[/] Updated {name}: {previous} → {installed} {label}".rstrip()

    return f"[error]✘[/] Failed to update {name}: [muted]{escape(outcome.error_message)}[/]"


class UpdateReporter:
    """Progress callback rendering a spinner per package.

    Usable as a context manager; the spinner is stopped on exit.

    Attributes:
        quiet: Only print failures when True.
    """

    def __init__(self, out: Console | None = None, quiet: bool = False) -> None:
        self._console = out or console
        self.quiet = quiet
        self._status: Status | None = None

    def __enter__(self) -> UpdateReporter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._stop()

    def __call__(self, event: ProgressEvent) -> None:
        name = f"[package.name]{escape(event.package)}[/]"

        if event.stage == UpdateStage.DONE:
            self._stop()
            if event.outcome is not None and not (
                self.quiet and not isinstance(event.outcome, Failed)
            ):
                self._console.print(format_outcome_line(event.package, event.outcome))
            return

        if self.quiet:
            return

        if event.warning:
            self._console.print(f"[warning]⚠[/] {name}: {escape(event.warning)}")
            return

        if event.stage == UpdateStage.DETECT:
            text = f"Checking {name}..."
        elif event.stage == UpdateStage.RESOLVE:
            text = f"Resolving target version for {name}..."
        elif event.stage == UpdateStage.INSTALL:
            text = f"{name}: [command]{escape(event.detail or '')}[/]"
        elif event.stage == UpdateStage.POST_INSTALL:
            text = f"Running postinstall for {name}..."
        else:
            text = f"Verifying {name}..."

        self._update(text)

    def _update(self, text: str) -> None:
        if self._status is None:
            self._status = self._console.status(text, spinner="dots")
            self._status.start()
        else:
            self._status.update(text)

    def _stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None


def print_summary(summary: RunSummary, out: Console | None = None) -> None:
    """Print the end-of-run summary.

    Args:
        summary: Outcomes of the run.
        out: Console to print to (defaults to the shared console).
    """
    out = out or console
    out.print("\n[bold_header]Update Summary[/]\n")

    if summary.updated:
        out.print(f"[success]Successfully updated {summary.succeeded} package(s):[/]")
        for name, success in summary.updated:
            if success.is_new_install:
                change = f"new install → {success.installed_version}"
            elif success.previous_version != success.installed_version:
                change = f"{success.previous_version} → {success.installed_version}"
            else:
                change = success.installed_version
            label = format_update_type(success.update_type)
            out.print(f"  • {escape(name)}: [version]{escape(change)}[/] {label}".rstrip())

    if summary.current:
        out.print(f"\n[info]Already up to date ({summary.already_current} package(s)):[/]")
        for name, current in summary.current:
            out.print(f"  • {escape(name)}: [version]{escape(current.version)}[/]")

    if summary.failures:
        out.print(f"\n[error]Failed to update {summary.failed} package(s):[/]")
        for name, failed in summary.failures:
            out.print(f"  • {escape(name)}: [muted]{escape(failed.error_message)}[/]")

    out.print()
