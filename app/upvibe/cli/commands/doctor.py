"""Doctor command implementation.

Checks Node.js, the package managers and the config file.
"""

from rich.markup import escape

from upvibe.core.config import ConfigError, ConfigNotFoundError, load_config, validate_config
from upvibe.core.detect import (
    MIN_NODE_MAJOR,
    check_all_managers,
    detect_package_manager,
    get_manager_version,
    get_node_version,
    is_node_supported,
)
from upvibe.core.paths import find_config_path, get_config_search_paths
from upvibe.models.package import PackageManager
from upvibe.utils.formatting import console

# Display order for package managers
_MANAGER_ORDER: tuple[PackageManager, ...] = (
    PackageManager.PNPM,
    PackageManager.YARN,
    PackageManager.NPM,
)


def doctor() -> None:
    """Check system for available package managers."""
    console.print("\n[bold_header]System Check[/]\n")

    console.print("[bold]Node.js:[/]")
    _check_node()

    console.print("\n[bold]Package Managers:[/]")
    availability = check_all_managers()
    for manager in _MANAGER_ORDER:
        if availability[manager]:
            version = get_manager_version(manager)
            suffix = f" ({escape(version)})" if version else ""
            console.print(f"[success]  ✔ {manager.value}{suffix}[/]")
        else:
            console.print(f"[muted]  ○ {manager.value} (not installed)[/]")

    default = detect_package_manager()
    console.print(f"\n[bold]Default package manager:[/] [info]{default.value}[/]")

    console.print("\n[bold]Configuration:[/]")
    _check_config()
    console.print()


def _check_node() -> None:
    version = get_node_version()
    if version is None:
        console.print(f"[error]  ✘ Not installed (requires {MIN_NODE_MAJOR}+)[/]")
    elif is_node_supported(version):
        console.print(f"[success]  ✔ Version {escape(version)}[/]")
    else:
        console.print(f"[error]  ✘ Version {escape(version)} (requires {MIN_NODE_MAJOR}+)[/]")


def _check_config() -> None:
    try:
        config = load_config()
    except ConfigNotFoundError:
        console.print("[warning]  ⚠ No config file found[/]")
        console.print("[muted]     Searched in:[/]")
        for path in get_config_search_paths():
            console.print(f"[muted]       • {path}[/]")
        return
    except ConfigError as e:
        console.print(f"[error]  ✘ {escape(str(e))}[/]")
        return

    console.print(
        f"[success]  ✔ Config file found ({len(config.packages)} packages): "
        f"{find_config_path()}[/]"
    )
    errors = validate_config(config)
    if errors:
        console.print("[warning]  ⚠ Configuration has errors:[/]")
        for error in errors:
            console.print(f"[warning]     • {escape(error)}[/]")
