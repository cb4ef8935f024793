"""Unit tests for the update orchestrator.

All collaborators are in-memory fakes from conftest; no processes are
spawned and no registry is contacted.
"""

from unittest.mock import MagicMock

import pytest
from upvibe.core.orchestrator import INSTALL_ENV, ProgressEvent, UpdateOrchestrator, UpdateStage
from upvibe.models.outcome import AlreadyCurrent, Failed, RunSummary, Success
from upvibe.models.package import PackageManager, PackageSpec, UpdateStrategy
from upvibe.models.version import UpdateType


@pytest.fixture
def orchestrator(fake_registry, fake_installed, fake_runner) -> UpdateOrchestrator:
    """Orchestrator using npm and the shared fakes."""
    return UpdateOrchestrator(
        manager=PackageManager.NPM,
        registry=fake_registry,
        installed=fake_installed,
        runner=fake_runner,
    )


class TestUpdatePackage:
    """Tests for single-package pipelines."""

    def test_minor_scenario(self, orchestrator, fake_installed, fake_runner) -> None:
        """Minor strategy updates 1.2.3 to 1.3.5 and reports a minor update."""
        fake_installed.installed["lodash"] = "1.2.3"
        spec = PackageSpec("lodash", strategy=UpdateStrategy.MINOR)

        outcome = orchestrator.update_package(spec)

        assert outcome == Success("1.3.5", "1.2.3", UpdateType.MINOR)
        assert fake_runner.commands == ["npm install -g lodash@1.3.5"]

    def test_patch_scenario(self, orchestrator, fake_registry, fake_installed) -> None:
        """Patch strategy updates 1.2.3 to 1.2.4 and reports a patch update."""
        fake_registry.versions["lodash"] = ["1.2.4", "1.3.0"]
        fake_installed.installed["lodash"] = "1.2.3"
        spec = PackageSpec("lodash", strategy=UpdateStrategy.PATCH)

        outcome = orchestrator.update_package(spec)

        assert outcome == Success("1.2.4", "1.2.3", UpdateType.PATCH)

    @pytest.mark.parametrize(
        "strategy", [UpdateStrategy.LATEST, UpdateStrategy.MINOR, UpdateStrategy.PATCH]
    )
    def test_not_installed_installs_latest(self, orchestrator, fake_runner, strategy) -> None:
        """A missing package is installed at latest and classified as none."""
        outcome = orchestrator.update_package(PackageSpec("typescript", strategy=strategy))

        assert isinstance(outcome, Success)
        assert outcome.previous_version is None
        assert outcome.update_type == UpdateType.NONE
        assert outcome.installed_version == "5.4.5"
        assert fake_runner.commands == ["npm install -g typescript@latest"]

    def test_pinned_downgrade(self, orchestrator, fake_registry, fake_installed, fake_runner) -> None:
        """Pinned always installs its version, even below the current one."""
        fake_registry.versions["pnpm"] = ["1.9.0", "2.0.0"]
        fake_installed.installed["pnpm"] = "2.0.0"
        spec = PackageSpec("pnpm", strategy=UpdateStrategy.PINNED, pinned_version="1.9.0")

        outcome = orchestrator.update_package(spec)

        assert outcome == Success("1.9.0", "2.0.0", UpdateType.NONE)
        assert fake_runner.commands == ["npm install -g pnpm@1.9.0"]

    def test_latest_major_update(self, orchestrator, fake_installed) -> None:
        """Latest strategy crosses major versions."""
        fake_installed.installed["eslint"] = "8.56.0"

        outcome = orchestrator.update_package(PackageSpec("eslint"))

        assert outcome == Success("9.0.0", "8.56.0", UpdateType.MAJOR)

    def test_already_current_skips_install(self, orchestrator, fake_installed, fake_runner) -> None:
        """A package at its target version runs no command."""
        fake_installed.installed["typescript"] = "5.4.5"

        outcome = orchestrator.update_package(PackageSpec("typescript"))

        assert outcome == AlreadyCurrent("5.4.5")
        assert fake_runner.commands == []

    def test_pinned_already_current(self, orchestrator, fake_installed, fake_runner) -> None:
        """A pinned package already at its version is not reinstalled."""
        fake_installed.installed["pnpm"] = "8.15.0"
        spec = PackageSpec("pnpm", strategy=UpdateStrategy.PINNED, pinned_version="8.15.0")

        assert orchestrator.update_package(spec) == AlreadyCurrent("8.15.0")
        assert fake_runner.commands == []

    def test_install_failure(self, orchestrator, fake_runner) -> None:
        """A failing install reports the first stderr line and skips hooks."""
        fake_runner.fail_on["typescript@"] = "npm ERR! code EACCES\nnpm ERR! syscall mkdir"
        spec = PackageSpec("typescript", post_install=("tsc --version",))

        outcome = orchestrator.update_package(spec)

        assert outcome == Failed("npm ERR! code EACCES")
        assert fake_runner.commands == ["npm install -g typescript@latest"]

    def test_post_install_hooks_run_after_install(self, orchestrator, fake_runner) -> None:
        """Hooks run in order after a successful install."""
        spec = PackageSpec("typescript", post_install=("echo one", "echo two"))

        outcome = orchestrator.update_package(spec)

        assert isinstance(outcome, Success)
        assert fake_runner.commands == [
            "npm install -g typescript@latest",
            "echo one",
            "echo two",
        ]

    def test_post_install_failure(self, orchestrator, fake_runner) -> None:
        """A failing hook fails the package and stops later hooks."""
        fake_runner.fail_on["echo one"] = "hook exploded"
        spec = PackageSpec("typescript", post_install=("echo one", "echo two"))

        outcome = orchestrator.update_package(spec)

        assert isinstance(outcome, Failed)
        assert "Post-install command failed" in outcome.error_message
        assert "hook exploded" in outcome.error_message
        assert "echo two" not in fake_runner.commands

    def test_install_uses_production_env(self, orchestrator, fake_runner) -> None:
        """Install commands run with NODE_ENV=production."""
        orchestrator.update_package(PackageSpec("typescript"))

        assert fake_runner.envs[0] == INSTALL_ENV

    def test_local_install(self, orchestrator, fake_installed, fake_runner) -> None:
        """Local packages are looked up and installed without the global flag."""
        orchestrator.update_package(PackageSpec("prettier", global_install=False))

        assert fake_runner.commands == ["npm install prettier@latest"]
        assert fake_installed.calls[0] == ("prettier", False)

    def test_latest_unresolvable_is_unclassified(
        self, orchestrator, fake_registry, fake_installed, fake_runner
    ) -> None:
        """When latest cannot be resolved, the install proceeds and reports none."""
        fake_registry.failing.add("typescript")
        fake_installed.installed["typescript"] = "5.3.3"
        fake_runner.run = MagicMock()  # type: ignore[method-assign]

        outcome = orchestrator.update_package(PackageSpec("typescript"))

        assert isinstance(outcome, Success)
        assert outcome.update_type == UpdateType.NONE
        assert outcome.previous_version == "5.3.3"
        fake_runner.run.assert_called_once()

    def test_unsupported_manager_fails_package(self, fake_registry, fake_installed, fake_runner):
        """Programmer errors become a Failed outcome, not an exception."""
        orchestrator = UpdateOrchestrator(
            manager="bun",  # type: ignore[arg-type]
            registry=fake_registry,
            installed=fake_installed,
            runner=fake_runner,
        )

        outcome = orchestrator.update_package(PackageSpec("typescript"))

        assert isinstance(outcome, Failed)
        assert "Unknown package manager" in outcome.error_message
        assert fake_runner.commands == []

    def test_unexpected_exception_is_isolated(self, orchestrator, fake_installed) -> None:
        """An exception from a collaborator is converted to Failed."""
        fake_installed.current_version = MagicMock(  # type: ignore[method-assign]
            side_effect=RuntimeError("lookup crashed\ntraceback noise")
        )

        outcome = orchestrator.update_package(PackageSpec("typescript"))

        assert outcome == Failed("lookup crashed")


class TestRun:
    """Tests for whole-run behaviour."""

    def test_one_outcome_per_package_in_order(self, orchestrator, fake_installed) -> None:
        """Outcomes are recorded in configuration order."""
        fake_installed.installed["typescript"] = "5.4.5"
        specs = [PackageSpec("eslint"), PackageSpec("typescript"), PackageSpec("prettier")]

        summary = orchestrator.run(specs)

        assert isinstance(summary, RunSummary)
        assert [name for name, _ in summary.entries] == ["eslint", "typescript", "prettier"]
        assert summary.succeeded == 2
        assert summary.already_current == 1
        assert summary.exit_code == 0

    def test_partial_failure_isolation(self, orchestrator, fake_runner) -> None:
        """A failing package does not prevent later packages from updating."""
        fake_runner.fail_on["eslint@"] = "npm ERR! 404"
        specs = [PackageSpec("typescript"), PackageSpec("eslint"), PackageSpec("prettier")]

        summary = orchestrator.run(specs)

        assert len(summary) == 3
        assert isinstance(summary.outcome_for("typescript"), Success)
        assert summary.outcome_for("eslint") == Failed("npm ERR! 404")
        assert summary.outcome_for("prettier") == Success("3.2.5", None, UpdateType.NONE)
        assert summary.has_failures
        assert summary.exit_code == 1

    def test_idempotent_second_run(self, orchestrator, fake_installed, fake_runner) -> None:
        """Re-running with no external changes reports AlreadyCurrent everywhere."""
        fake_installed.installed.update({"eslint": "8.56.0", "lodash": "1.2.3"})
        specs = [
            PackageSpec("eslint"),
            PackageSpec("lodash", strategy=UpdateStrategy.MINOR),
            PackageSpec("typescript"),
            PackageSpec("pnpm-tool", strategy=UpdateStrategy.PINNED, pinned_version="2.0.0"),
        ]

        first = orchestrator.run(specs)
        commands_after_first = list(fake_runner.commands)
        second = orchestrator.run(specs)

        assert first.succeeded == 4
        assert second.already_current == 4
        assert fake_runner.commands == commands_after_first

    def test_empty_run(self, orchestrator) -> None:
        """No packages produce an empty, successful summary."""
        summary = orchestrator.run([])

        assert len(summary) == 0
        assert summary.exit_code == 0


class TestProgress:
    """Tests for progress callbacks."""

    def test_stage_sequence(self, fake_registry, fake_installed, fake_runner) -> None:
        """Every state transition is reported in pipeline order."""
        events: list[ProgressEvent] = []
        orchestrator = UpdateOrchestrator(
            PackageManager.PNPM, fake_registry, fake_installed, fake_runner, events.append
        )

        orchestrator.update_package(PackageSpec("typescript", post_install=("echo ok",)))

        assert [e.stage for e in events] == [
            UpdateStage.DETECT,
            UpdateStage.RESOLVE,
            UpdateStage.INSTALL,
            UpdateStage.POST_INSTALL,
            UpdateStage.VERIFY,
            UpdateStage.DONE,
        ]
        assert events[2].detail == "pnpm add -g typescript@latest"
        assert isinstance(events[-1].outcome, Success)

    def test_already_current_stages(self, fake_registry, fake_installed, fake_runner) -> None:
        """An up-to-date package goes straight from resolve to done."""
        fake_installed.installed["typescript"] = "5.4.5"
        events: list[ProgressEvent] = []
        orchestrator = UpdateOrchestrator(
            PackageManager.NPM, fake_registry, fake_installed, fake_runner, events.append
        )

        orchestrator.update_package(PackageSpec("typescript"))

        assert [e.stage for e in events] == [
            UpdateStage.DETECT,
            UpdateStage.RESOLVE,
            UpdateStage.DONE,
        ]
        assert events[-1].outcome == AlreadyCurrent("5.4.5")

    def test_resolution_warning_is_reported(
        self, fake_registry, fake_installed, fake_runner
    ) -> None:
        """A strategy falling back to latest reports why through progress."""
        fake_installed.installed["lodash"] = "1.2.3"
        fake_registry.failing.add("lodash")
        events: list[ProgressEvent] = []
        orchestrator = UpdateOrchestrator(
            PackageManager.NPM, fake_registry, fake_installed, fake_runner, events.append
        )

        orchestrator.update_package(PackageSpec("lodash", strategy=UpdateStrategy.MINOR))

        warnings = [e.warning for e in events if e.warning]
        assert len(warnings) == 1
        assert "using latest" in warnings[0]
        assert fake_runner.commands == ["npm install -g lodash@latest"]
