"""Version models for update classification."""

from dataclasses import dataclass
from enum import Enum


class UpdateType(str, Enum):
    """Magnitude of a version change.

    Downgrades and unchanged versions are both reported as NONE.
    """

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


@dataclass(frozen=True, slots=True, order=True)
class SemanticVersion:
    """A (major, minor, patch) version triple.

    Instances are ordered lexicographically by their components.
    Pre-release and build suffixes are not represented.
    """

    major: int
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        """Validate version components after initialization."""
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            msg = f"Version components must be non-negative, got {self}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
