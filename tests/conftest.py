"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules, including
in-memory stand-ins for the registry, installed-version lookup and
process runner used by the update orchestrator.
"""

import pytest
from upvibe.core.registry import RegistryError
from upvibe.core.runner import ProcessError


class FakeRegistry:
    """Registry lookup backed by a dict of published versions."""

    def __init__(
        self,
        versions: dict[str, list[str]] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.versions = versions or {}
        self.failing = failing or set()
        self.latest_calls: list[str] = []
        self.list_calls: list[str] = []

    def latest_version(self, name: str) -> str:
        self.latest_calls.append(name)
        if name in self.failing or not self.versions.get(name):
            raise RegistryError(f"404 Not Found - {name}")
        return self.versions[name][-1]

    def list_versions(self, name: str) -> list[str]:
        self.list_calls.append(name)
        if name in self.failing or name not in self.versions:
            raise RegistryError(f"404 Not Found - {name}")
        return list(self.versions[name])


class FakeInstalled:
    """Installed-version lookup backed by a mutable dict."""

    def __init__(self, installed: dict[str, str] | None = None) -> None:
        self.installed = dict(installed or {})
        self.calls: list[tuple[str, bool]] = []

    def current_version(self, name: str, global_install: bool) -> str | None:
        self.calls.append((name, global_install))
        return self.installed.get(name)


class FakeRunner:
    """Process runner that records commands and simulates installs.

    Install commands of the form ``<pm> ... <name>@<version>`` update the
    linked FakeInstalled; ``latest`` resolves through the linked registry.
    """

    def __init__(
        self,
        installed: FakeInstalled,
        registry: FakeRegistry,
        fail_on: dict[str, str] | None = None,
    ) -> None:
        self.installed = installed
        self.registry = registry
        self.fail_on = fail_on or {}
        self.commands: list[str] = []
        self.envs: list[dict[str, str] | None] = []

    def run(self, command: str, env: dict[str, str] | None = None) -> None:
        self.commands.append(command)
        self.envs.append(env)
        for fragment, stderr in self.fail_on.items():
            if fragment in command:
                raise ProcessError(command, 1, stderr)

        spec = command.rsplit(" ", 1)[-1]
        if "@" in spec[1:]:
            name, _, version = spec.rpartition("@")
            if version == "latest":
                version = self.registry.versions[name][-1]
            self.installed.installed[name] = version

    def run_sequence(self, commands, env=None) -> None:
        for command in commands:
            self.run(command, env=env)


@pytest.fixture
def fake_registry() -> FakeRegistry:
    """Registry with a few published packages."""
    return FakeRegistry(
        {
            "typescript": ["5.3.3", "5.4.5"],
            "eslint": ["8.56.0", "8.57.0", "9.0.0"],
            "prettier": ["3.2.4", "3.2.5"],
            "lodash": ["1.2.3", "1.2.4", "1.3.0", "1.3.5", "2.0.0"],
        }
    )


@pytest.fixture
def fake_installed() -> FakeInstalled:
    """Installed-version lookup with nothing installed."""
    return FakeInstalled()


@pytest.fixture
def fake_runner(fake_installed: FakeInstalled, fake_registry: FakeRegistry) -> FakeRunner:
    """Runner wired to the fake registry and installed lookup."""
    return FakeRunner(fake_installed, fake_registry)
