"""Registry queries for published package versions.

The registry is only ever asked for metadata; installs go through the
selected package manager.
"""

import json
import logging
import subprocess
from typing import Protocol

from upvibe.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Raised when version metadata cannot be fetched from the registry."""


class RegistryLookup(Protocol):
    """Source of published version metadata for packages."""

    def latest_version(self, name: str) -> str:
        """Return the version currently tagged as latest.

        Raises:
            RegistryError: If the lookup fails.
        """
        ...

    def list_versions(self, name: str) -> list[str]:
        """Return all published versions in publication order.

        Raises:
            RegistryError: If the lookup fails.
        """
        ...


class NpmRegistry:
    """Registry lookup backed by ``npm view``.

    Attributes:
        executable: npm executable to invoke.
    """

    # Timeout for registry queries (network bound)
    _VIEW_TIMEOUT: float = 60.0

    def __init__(self, executable: str = "npm") -> None:
        self.executable = executable

    def _view(self, name: str, field: str, *extra: str) -> str:
        args = [self.executable, "view", name, field, *extra]
        try:
            result: CommandResult = run_command(args, timeout=self._VIEW_TIMEOUT)
        except (OSError, subprocess.SubprocessError) as e:
            msg = f"Could not query registry for {name}: {e}"
            raise RegistryError(msg) from e

        if not result.success:
            detail = result.stderr.strip().splitlines()[0] if result.stderr.strip() else ""
            msg = f"Registry lookup for {name} failed: {detail or f'exit code {result.returncode}'}"
            raise RegistryError(msg)

        output = result.stdout.strip()
        if not output:
            msg = f"Registry returned no {field} for {name}"
            raise RegistryError(msg)
        return output

    def latest_version(self, name: str) -> str:
        """Return the latest published version of a package."""
        return self._view(name, "version")

    def list_versions(self, name: str) -> list[str]:
        """Return all published versions of a package."""
        output = self._view(name, "versions", "--json")
        try:
            data: object = json.loads(output)
        except json.JSONDecodeError as e:
            msg = f"Invalid version list for {name}: {e}"
            raise RegistryError(msg) from e

        # npm prints a bare string when only one version was ever published
        if isinstance(data, str):
            return [data]
        if isinstance(data, list) and all(isinstance(v, str) for v in data):
            logger.debug("Registry lists %d version(s) for %s", len(data), name)
            return list(data)

        msg = f"Unexpected version list format for {name}"
        raise RegistryError(msg)
