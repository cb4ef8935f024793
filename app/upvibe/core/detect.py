"""Package manager detection and selection.

The manager is chosen once per run, in this order: explicit override,
config preference, first manager found on PATH, npm.
"""

import logging
import subprocess
from collections.abc import Callable

from upvibe.core.version import try_parse_version
from upvibe.models.package import PackageManager
from upvibe.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

DEFAULT_MANAGER = PackageManager.NPM

# Oldest Node.js major the package managers are expected to run on
MIN_NODE_MAJOR = 18

# Detection order; npm ships with Node.js and is the usual choice
DETECTION_ORDER: tuple[PackageManager, ...] = (
    PackageManager.NPM,
    PackageManager.YARN,
    PackageManager.PNPM,
)


def is_manager_available(manager: PackageManager) -> bool:
    """Check if a package manager executable is on PATH."""
    return command_exists(manager.value)


def detect_package_manager() -> PackageManager:
    """Return the first available package manager, defaulting to npm."""
    for manager in DETECTION_ORDER:
        if is_manager_available(manager):
            return manager
    logger.debug("No package manager found on PATH, defaulting to %s", DEFAULT_MANAGER.value)
    return DEFAULT_MANAGER


def select_package_manager(
    override: PackageManager | None = None,
    preferred: PackageManager | None = None,
    detect: Callable[[], PackageManager] = detect_package_manager,
) -> PackageManager:
    """Resolve the package manager for a run.

    Args:
        override: Manager given explicitly on the command line.
        preferred: Manager declared in the config file.
        detect: Auto-detection used when neither is set.

    Returns:
        The selected PackageManager.
    """
    if override is not None:
        return override
    if preferred is not None:
        logger.info("Using package manager from config: %s", preferred.value)
        return preferred
    return detect()


def check_all_managers() -> dict[PackageManager, bool]:
    """Map every supported package manager to its availability."""
    return {manager: is_manager_available(manager) for manager in PackageManager}


def _tool_version(executable: str) -> str | None:
    try:
        result = run_command([executable, "--version"], timeout=15.0)
    except (OSError, subprocess.SubprocessError):
        return None
    if not result.success:
        return None
    return result.stdout.strip() or None


def get_manager_version(manager: PackageManager) -> str | None:
    """Return the version reported by ``<manager> --version``, if any."""
    return _tool_version(manager.value)


def get_node_version() -> str | None:
    """Return the Node.js version (e.g. ``v20.11.0``), None if not installed."""
    return _tool_version("node")


def is_node_supported(version: str) -> bool:
    """Check if a ``node --version`` string meets MIN_NODE_MAJOR.

    Args:
        version: Version as printed by node, with or without the ``v`` prefix.

    Returns:
        True if the major version is MIN_NODE_MAJOR or newer; False if it
        is older or cannot be parsed.
    """
    parsed = try_parse_version(version.strip().removeprefix("v"))
    return parsed is not None and parsed.major >= MIN_NODE_MAJOR
