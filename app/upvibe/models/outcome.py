"""Outcome models for update runs.

This module defines the per-package result of an update run as a tagged
union of three immutable variants, and the ordered summary of a whole run.
"""

from dataclasses import dataclass, field

from upvibe.models.version import UpdateType


@dataclass(frozen=True, slots=True)
class Success:
    """The install command (and any post-install hooks) completed.

    Attributes:
        installed_version: Version observed after the install, or the
            requested target when it could not be observed.
        previous_version: Version installed before the run, None if the
            package was not installed.
        update_type: Magnitude of the change from previous to installed.
    """

    installed_version: str
    previous_version: str | None
    update_type: UpdateType = UpdateType.NONE

    @property
    def is_new_install(self) -> bool:
        """Check if the package was not installed before the run."""
        return self.previous_version is None


@dataclass(frozen=True, slots=True)
class AlreadyCurrent:
    """The package was already at its target version; nothing was run.

    Attributes:
        version: The installed (and target) version.
    """

    version: str


@dataclass(frozen=True, slots=True)
class Failed:
    """The package could not be updated.

    Attributes:
        error_message: Single-line description of the failure.
    """

    error_message: str

    def __post_init__(self) -> None:
        """Keep the message to a single line."""
        first_line = self.error_message.strip().splitlines()[0] if self.error_message.strip() else ""
        object.__setattr__(self, "error_message", first_line or "Update failed")


UpdateOutcome = Success | AlreadyCurrent | Failed


@dataclass(slots=True)
class RunSummary:
    """Ordered results of one update run.

    Entries are appended once per package in configuration order and
    are never modified afterwards.
    """

    entries: list[tuple[str, UpdateOutcome]] = field(default_factory=list)

    def add(self, package: str, outcome: UpdateOutcome) -> None:
        """Append the outcome for a package."""
        self.entries.append((package, outcome))

    def __len__(self) -> int:
        return len(self.entries)

    def _of_type(self, kind: type) -> list[tuple[str, UpdateOutcome]]:
        return [(name, outcome) for name, outcome in self.entries if isinstance(outcome, kind)]

    @property
    def updated(self) -> list[tuple[str, Success]]:
        """Entries that ended in Success."""
        return self._of_type(Success)  # type: ignore[return-value]

    @property
    def current(self) -> list[tuple[str, AlreadyCurrent]]:
        """Entries that were already at their target version."""
        return self._of_type(AlreadyCurrent)  # type: ignore[return-value]

    @property
    def failures(self) -> list[tuple[str, Failed]]:
        """Entries that ended in Failed."""
        return self._of_type(Failed)  # type: ignore[return-value]

    @property
    def succeeded(self) -> int:
        return len(self.updated)

    @property
    def already_current(self) -> int:
        return len(self.current)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def has_failures(self) -> bool:
        """Check if at least one package failed."""
        return self.failed > 0

    @property
    def exit_code(self) -> int:
        """Process exit code for the run: 0 without failures, 1 otherwise."""
        return 1 if self.has_failures else 0

    def outcome_for(self, package: str) -> UpdateOutcome | None:
        """Return the outcome recorded for a package, if any."""
        for name, outcome in self.entries:
            if name == package:
                return outcome
        return None
