"""Update orchestration across the configured packages.

Each package goes through the same pipeline, strictly one package at a
time and in configuration order:

    detect -> resolve -> compare -> install -> post-install -> verify

All external effects go through three collaborators (registry lookup,
installed version lookup and process runner), so the pipeline can be
exercised without spawning processes or touching the network.

A failure in one package never stops the run: it is recorded as a
Failed outcome and the next package is attempted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from upvibe.core.commands import build_install_command
from upvibe.core.registry import RegistryError
from upvibe.core.runner import ProcessError
from upvibe.core.strategy import TargetVersion, resolve_target
from upvibe.core.version import classify_versions
from upvibe.models.outcome import AlreadyCurrent, Failed, RunSummary, Success, UpdateOutcome
from upvibe.models.version import UpdateType

if TYPE_CHECKING:
    from upvibe.core.installed import InstalledVersionLookup
    from upvibe.core.registry import RegistryLookup
    from upvibe.core.runner import ProcessRunner
    from upvibe.models.package import PackageManager, PackageSpec

logger = logging.getLogger(__name__)

# Environment applied to install commands
INSTALL_ENV: dict[str, str] = {"NODE_ENV": "production"}


class UpdateStage(str, Enum):
    """Pipeline stage reported to progress callbacks."""

    DETECT = "detect"
    RESOLVE = "resolve"
    INSTALL = "install"
    POST_INSTALL = "post_install"
    VERIFY = "verify"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """A state transition of one package's pipeline.

    Attributes:
        package: Package name.
        stage: Stage being entered.
        detail: Stage-specific detail (versions, command line).
        outcome: Final outcome, set on the DONE stage only.
        warning: Recoverable problem met in this stage, e.g. a
            strategy that fell back to latest.
    """

    package: str
    stage: UpdateStage
    detail: str | None = None
    outcome: UpdateOutcome | None = None
    warning: str | None = None


ProgressCallback = Callable[[ProgressEvent], None]


class UpdateOrchestrator:
    """Drives the update pipeline for a set of packages.

    Attributes:
        manager: Package manager used for every install in the run.
    """

    def __init__(
        self,
        manager: PackageManager,
        registry: RegistryLookup,
        installed: InstalledVersionLookup,
        runner: ProcessRunner,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            manager: Package manager selected for this run.
            registry: Source of published versions.
            installed: Source of installed versions.
            runner: Executes install commands and post-install hooks.
            progress: Optional callback invoked at each stage transition.
        """
        self.manager = manager
        self._registry = registry
        self._installed = installed
        self._runner = runner
        self._progress = progress

    def run(self, specs: Iterable[PackageSpec]) -> RunSummary:
        """Update every package in order and collect the outcomes.

        Args:
            specs: Packages to update, in configuration order.

        Returns:
            RunSummary with exactly one outcome per package.
        """
        summary = RunSummary()
        for spec in specs:
            outcome = self.update_package(spec)
            summary.add(spec.name, outcome)
        logger.info(
            "Update run finished: %d updated, %d current, %d failed",
            summary.succeeded,
            summary.already_current,
            summary.failed,
        )
        return summary

    def update_package(self, spec: PackageSpec) -> UpdateOutcome:
        """Run the pipeline for a single package.

        Never raises: any error ends the package as Failed.

        Args:
            spec: Package to update.

        Returns:
            The package's UpdateOutcome.
        """
        try:
            outcome = self._update(spec)
        except Exception as e:  # noqa: BLE001
            logger.debug("Unexpected error updating %s", spec.name, exc_info=True)
            outcome = Failed(str(e) or type(e).__name__)

        if isinstance(outcome, Failed):
            logger.warning("Failed to update %s: %s", spec.name, outcome.error_message)
        self._emit(spec.name, UpdateStage.DONE, outcome=outcome)
        return outcome

    def _update(self, spec: PackageSpec) -> UpdateOutcome:
        logger.debug(
            "Updating %s (%s, %s strategy)", spec.name, spec.scope, spec.strategy.value
        )
        self._emit(spec.name, UpdateStage.DETECT)
        previous = self._installed.current_version(spec.name, spec.global_install)

        self._emit(spec.name, UpdateStage.RESOLVE, previous)
        target = resolve_target(spec, previous, self._registry)
        if target.warning:
            self._emit(spec.name, UpdateStage.RESOLVE, warning=target.warning)
        concrete = self._concretize(spec.name, target)

        if previous is not None and concrete is not None and previous == concrete:
            logger.debug("%s is already at %s", spec.name, previous)
            return AlreadyCurrent(previous)

        command = build_install_command(
            self.manager, spec.name, target.value, spec.global_install
        )
        self._emit(spec.name, UpdateStage.INSTALL, command)
        try:
            self._runner.run(command, env=INSTALL_ENV)
        except ProcessError as e:
            return Failed(e.first_line)

        if spec.post_install:
            self._emit(spec.name, UpdateStage.POST_INSTALL, f"{len(spec.post_install)} command(s)")
            try:
                self._runner.run_sequence(spec.post_install)
            except ProcessError as e:
                return Failed(f"Post-install command failed ({e.command}): {e.first_line}")

        self._emit(spec.name, UpdateStage.VERIFY)
        observed = self._installed.current_version(spec.name, spec.global_install)
        if observed is not None and concrete is not None and observed != concrete:
            logger.warning(
                "%s is at %s after install, expected %s", spec.name, observed, concrete
            )

        if concrete is None:
            # latest could not be resolved to a version: leave unclassified
            update_type = UpdateType.NONE
        else:
            update_type = classify_versions(previous, observed or concrete)

        return Success(
            installed_version=observed or concrete or target.value,
            previous_version=previous,
            update_type=update_type,
        )

    def _concretize(self, name: str, target: TargetVersion) -> str | None:
        """Turn the ``latest`` tag into a version for comparison.

        Returns:
            The concrete target version, or None if the registry could
            not be asked.
        """
        if not target.is_latest:
            return target.value
        try:
            return self._registry.latest_version(name)
        except RegistryError as e:
            logger.warning("Could not determine latest version of %s: %s", name, e)
            return None

    def _emit(
        self,
        package: str,
        stage: UpdateStage,
        detail: str | None = None,
        outcome: UpdateOutcome | None = None,
        warning: str | None = None,
    ) -> None:
        if self._progress is not None:
            self._progress(ProgressEvent(package, stage, detail, outcome, warning))
