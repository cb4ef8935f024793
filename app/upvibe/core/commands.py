"""Install command construction per package manager."""

from upvibe.models.package import PackageManager


class UnsupportedManagerError(ValueError):
    """Raised for a package manager without an install command mapping."""


def build_install_command(
    manager: PackageManager | str,
    package: str,
    version: str,
    global_install: bool = True,
) -> str:
    """Build the shell command that installs a package at a version.

    Args:
        manager: Package manager identifier.
        package: Package name.
        version: Concrete version or a dist-tag such as ``latest``.
        global_install: Install into the global location.

    Returns:
        Command line, e.g. ``npm install -g typescript@latest``.

    Raises:
        UnsupportedManagerError: If the manager is not supported.
    """
    try:
        pm = PackageManager(manager)
    except ValueError:
        msg = f"Unknown package manager: {manager}"
        raise UnsupportedManagerError(msg) from None

    target = f"{package}@{version}"

    if pm == PackageManager.NPM:
        args = ["npm", "install", "-g", target] if global_install else ["npm", "install", target]
    elif pm == PackageManager.PNPM:
        args = ["pnpm", "add", "-g", target] if global_install else ["pnpm", "add", target]
    else:  # YARN
        args = ["yarn", "global", "add", target] if global_install else ["yarn", "add", target]

    return " ".join(args)
