"""Package models for update configuration.

This module defines the immutable description of a package that upvibe
keeps up to date, together with the supported package managers and
update strategies.
"""

from dataclasses import dataclass, field
from enum import Enum


class PackageManager(str, Enum):
    """Supported package manager executables."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


class UpdateStrategy(str, Enum):
    """Policy governing which version a package is updated to.

    Attributes:
        LATEST: Always install the newest published version.
        MINOR: Stay on the installed major version.
        PATCH: Stay on the installed major and minor version.
        PINNED: Install exactly the configured version.
    """

    LATEST = "latest"
    MINOR = "minor"
    PATCH = "patch"
    PINNED = "pinned"


@dataclass(frozen=True, slots=True)
class PackageSpec:
    """A package to keep updated, as resolved from configuration.

    Attributes:
        name: Package name (e.g., 'typescript', '@angular/cli').
        global_install: Install into the global location instead of the
            current project.
        strategy: Update strategy for this package.
        pinned_version: Exact version to install (pinned strategy only).
        post_install: Shell commands to run after a successful install.
    """

    name: str
    global_install: bool = True
    strategy: UpdateStrategy = UpdateStrategy.LATEST
    pinned_version: str | None = None
    post_install: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if self.strategy == UpdateStrategy.PINNED and not self.pinned_version:
            msg = f"Package {self.name!r}: version is required when strategy is 'pinned'"
            raise ValueError(msg)
        if self.pinned_version and self.strategy != UpdateStrategy.PINNED:
            msg = f"Package {self.name!r}: version can only be specified when strategy is 'pinned'"
            raise ValueError(msg)

    @property
    def is_pinned(self) -> bool:
        """Check if this package is pinned to an exact version."""
        return self.strategy == UpdateStrategy.PINNED

    @property
    def scope(self) -> str:
        """Return a human-readable install scope."""
        return "global" if self.global_install else "local"
