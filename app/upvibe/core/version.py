"""Version parsing and update classification.

Versions are dotted numeric strings such as ``1.2.3``. Pre-release and
build suffixes (``1.2.3-beta.1``, ``1.2.3+build.5``) are discarded before
comparison, and missing trailing components default to zero.
"""

from upvibe.models.version import SemanticVersion, UpdateType


class InvalidVersionFormatError(ValueError):
    """Raised when a version string cannot be parsed."""


def _strip_suffix(version: str) -> str:
    return version.split("-", 1)[0].split("+", 1)[0]


def parse_version(version: str) -> SemanticVersion:
    """Parse a dotted version string into a SemanticVersion.

    Only the first three components are used.

    Args:
        version: Version string, e.g. "1.2.3", "2.0", "1.2.3-rc.1".

    Returns:
        Parsed SemanticVersion.

    Raises:
        InvalidVersionFormatError: If a retained component is not a
            non-negative integer.
    """
    core = _strip_suffix(version.strip())
    components = core.split(".")[:3]

    numbers: list[int] = []
    for component in components:
        if not (component.isascii() and component.isdigit()):
            msg = f"Invalid version format: {version!r}"
            raise InvalidVersionFormatError(msg)
        numbers.append(int(component))

    while len(numbers) < 3:
        numbers.append(0)

    return SemanticVersion(*numbers)


def try_parse_version(version: str | None) -> SemanticVersion | None:
    """Parse a version string, returning None if absent or invalid."""
    if not version:
        return None
    try:
        return parse_version(version)
    except InvalidVersionFormatError:
        return None


def classify_update(current: SemanticVersion | None, target: SemanticVersion) -> UpdateType:
    """Classify the change from current to target.

    Args:
        current: Version before the update, None if not installed.
        target: Version after the update.

    Returns:
        MAJOR, MINOR or PATCH for an upgrade of that magnitude; NONE when
        there is no previous version, the versions are equal, or the
        target is a downgrade.
    """
    if current is None or target <= current:
        return UpdateType.NONE
    if target.major > current.major:
        return UpdateType.MAJOR
    if target.major == current.major and target.minor > current.minor:
        return UpdateType.MINOR
    if (
        target.major == current.major
        and target.minor == current.minor
        and target.patch > current.patch
    ):
        return UpdateType.PATCH
    return UpdateType.NONE


def classify_versions(current: str | None, target: str | None) -> UpdateType:
    """Classify the change between two version strings.

    Unparseable or missing versions classify as NONE.
    """
    target_version = try_parse_version(target)
    if target_version is None:
        return UpdateType.NONE
    return classify_update(try_parse_version(current), target_version)
