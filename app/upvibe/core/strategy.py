"""Target version resolution per update strategy.

Registry failures never abort a package: they degrade the strategy to
``latest`` and are reported through the warning of the resolved target.
"""

import logging
from dataclasses import dataclass

from upvibe.core.registry import RegistryError, RegistryLookup
from upvibe.core.version import InvalidVersionFormatError, parse_version
from upvibe.models.package import PackageSpec, UpdateStrategy
from upvibe.models.version import SemanticVersion

logger = logging.getLogger(__name__)

# Dist-tag installed when no concrete version is targeted
LATEST = "latest"


class MissingPinnedVersionError(ValueError):
    """Raised when a pinned package has no version to pin to."""


@dataclass(frozen=True, slots=True)
class TargetVersion:
    """Version (or the ``latest`` tag) a package should be installed at.

    Attributes:
        value: Concrete version string, or LATEST.
        warning: Set when resolution fell back to LATEST after a
            recoverable problem.
    """

    value: str
    warning: str | None = None

    @property
    def is_latest(self) -> bool:
        """Check if the target is the unresolved ``latest`` tag."""
        return self.value == LATEST


def resolve_target(
    spec: PackageSpec,
    current_version: str | None,
    registry: RegistryLookup,
) -> TargetVersion:
    """Determine the version to install for a package.

    Args:
        spec: The package being updated.
        current_version: Installed version, None if not installed.
        registry: Source of published versions.

    Returns:
        The resolved TargetVersion.

    Raises:
        MissingPinnedVersionError: If a pinned package has no version.
    """
    if spec.is_pinned:
        if not spec.pinned_version:
            msg = f"Version is required for pinned strategy ({spec.name})"
            raise MissingPinnedVersionError(msg)
        return TargetVersion(spec.pinned_version)

    if spec.strategy == UpdateStrategy.LATEST:
        return TargetVersion(LATEST)

    if current_version is None:
        # Not installed yet, nothing to constrain the range to
        return TargetVersion(LATEST)

    return _resolve_constrained(spec, current_version, registry)


def _resolve_constrained(
    spec: PackageSpec,
    current_version: str,
    registry: RegistryLookup,
) -> TargetVersion:
    """Resolve the minor or patch strategy against the registry."""
    strategy = spec.strategy.value
    try:
        current = parse_version(current_version)
        available = registry.list_versions(spec.name)
    except (RegistryError, InvalidVersionFormatError) as e:
        warning = f"Could not determine {strategy} version for {spec.name}, using latest: {e}"
        logger.debug(warning)
        return TargetVersion(LATEST, warning=warning)

    best = select_eligible(current, available, spec.strategy)
    if best is None:
        logger.debug("No %s update available for %s %s", strategy, spec.name, current_version)
        return TargetVersion(current_version)

    logger.debug("Selected %s for %s (%s strategy)", best, spec.name, strategy)
    return TargetVersion(best)


def select_eligible(
    current: SemanticVersion,
    available: list[str],
    strategy: UpdateStrategy,
) -> str | None:
    """Pick the highest version allowed by a minor or patch strategy.

    Candidates must share the current major version (and, for the patch
    strategy, the current minor version) and be strictly newer than the
    current version. Unparseable candidates are skipped.

    Pre-release candidates (anything with a ``-`` suffix) are skipped too,
    rather than compared by their numeric part the way parse_version
    compares versions. A constrained update never moves onto a
    pre-release, even when one is the newest in range.

    Args:
        current: Installed version.
        available: Published version strings.
        strategy: UpdateStrategy.MINOR or UpdateStrategy.PATCH.

    Returns:
        The original string of the highest eligible version, or None.
    """
    best: tuple[SemanticVersion, str] | None = None

    for candidate in available:
        if "-" in candidate:
            continue
        try:
            parsed = parse_version(candidate)
        except InvalidVersionFormatError:
            logger.debug("Skipping unparseable version %r", candidate)
            continue

        if parsed.major != current.major:
            continue
        if strategy == UpdateStrategy.PATCH and parsed.minor != current.minor:
            continue
        if parsed <= current:
            continue

        if best is None or parsed > best[0]:
            best = (parsed, candidate)

    return best[1] if best is not None else None
