"""Installed version lookups per package manager.

Every lookup treats a failing query or unreadable output as "not
installed": the package manager reports missing packages through
non-zero exits and empty listings.
"""

import json
import logging
import re
import subprocess
from typing import Any, Protocol

from upvibe.models.package import PackageManager
from upvibe.utils.shell import run_command

logger = logging.getLogger(__name__)

# Timeout for list queries
_LIST_TIMEOUT: float = 60.0

# Matches `info "typescript@5.4.5" has binaries:` lines of `yarn global list`
_YARN_GLOBAL_LINE = re.compile(r'^info "(?P<spec>.+)@(?P<version>[^@"]+)" has binaries')


class InstalledVersionLookup(Protocol):
    """Source of currently installed package versions."""

    def current_version(self, name: str, global_install: bool) -> str | None:
        """Return the installed version, or None if not installed."""
        ...


def _run_json(args: list[str]) -> Any | None:
    """Run a listing command and decode its JSON output."""
    try:
        result = run_command(args, timeout=_LIST_TIMEOUT)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Listing command %s failed to run: %s", " ".join(args), e)
        return None

    # npm exits non-zero for missing packages but may still print JSON
    output = result.stdout.strip()
    if not output:
        return None
    try:
        return json.loads(output)
    except json.JSONDecodeError:
        logger.debug("Unreadable output from %s", " ".join(args))
        return None


def _dependency_version(data: Any, name: str) -> str | None:
    """Extract dependencies[name].version from a listing object."""
    if not isinstance(data, dict):
        return None
    dependencies = data.get("dependencies")
    if not isinstance(dependencies, dict):
        return None
    entry = dependencies.get(name)
    if not isinstance(entry, dict):
        return None
    version = entry.get("version")
    return version if isinstance(version, str) and version else None


class NpmInstalledLookup:
    """Reads installed versions through ``npm list --json``."""

    def current_version(self, name: str, global_install: bool) -> str | None:
        args = ["npm", "list"]
        if global_install:
            args.append("-g")
        args.extend([name, "--json", "--depth=0"])
        return _dependency_version(_run_json(args), name)


class PnpmInstalledLookup:
    """Reads installed versions through ``pnpm list --json``.

    pnpm prints a list with one object per project.
    """

    def current_version(self, name: str, global_install: bool) -> str | None:
        args = ["pnpm", "list"]
        if global_install:
            args.append("-g")
        args.extend([name, "--json", "--depth=0"])
        data = _run_json(args)

        projects = data if isinstance(data, list) else [data]
        for project in projects:
            version = _dependency_version(project, name)
            if version is not None:
                return version
        return None


class YarnInstalledLookup:
    """Reads global versions from ``yarn global list``.

    Local yarn installs live in node_modules and are read through npm.
    """

    def __init__(self) -> None:
        self._local = NpmInstalledLookup()

    def current_version(self, name: str, global_install: bool) -> str | None:
        if not global_install:
            return self._local.current_version(name, global_install=False)

        try:
            result = run_command(["yarn", "global", "list", "--depth=0"], timeout=_LIST_TIMEOUT)
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("yarn global list failed to run: %s", e)
            return None
        if not result.success:
            return None

        return parse_yarn_global_list(result.stdout, name)


def parse_yarn_global_list(output: str, name: str) -> str | None:
    """Find a package version in ``yarn global list`` output.

    Args:
        output: Text output of ``yarn global list``.
        name: Package name to look for.

    Returns:
        Installed version, or None if the package is not listed.
    """
    for line in output.splitlines():
        match = _YARN_GLOBAL_LINE.match(line.strip())
        if match and match.group("spec") == name:
            return match.group("version")
    return None


def get_installed_lookup(manager: PackageManager) -> InstalledVersionLookup:
    """Get the installed version lookup for a package manager."""
    lookups: dict[PackageManager, type[InstalledVersionLookup]] = {
        PackageManager.NPM: NpmInstalledLookup,
        PackageManager.PNPM: PnpmInstalledLookup,
        PackageManager.YARN: YarnInstalledLookup,
    }
    return lookups[manager]()
