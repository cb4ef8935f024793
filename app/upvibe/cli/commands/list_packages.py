"""List command implementation.

Shows the packages configured for updates.
"""

from rich.markup import escape

from upvibe.core.config import require_config
from upvibe.core.paths import find_config_path
from upvibe.utils.formatting import console, create_package_table, print_info, print_warning


def list_packages() -> None:
    """List all configured packages."""
    config = require_config()

    if not config.packages:
        print_warning("No packages configured")
        return

    table = create_package_table()
    for index, entry in enumerate(config.packages, start=1):
        table.add_row(
            str(index),
            escape(entry.name),
            "global" if entry.global_install else "local",
            entry.strategy.value,
            escape(entry.version or "-"),
            str(len(entry.postinstall)) if entry.postinstall else "-",
        )

    console.print(table)
    if config.package_manager is not None:
        print_info(f"Package manager: {config.package_manager.value}")
    print_info(f"Config file: {find_config_path()}")
