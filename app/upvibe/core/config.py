"""Config file I/O and validation.

This module loads and saves the upvibe config file in TOML format using
the Pydantic models in :mod:`upvibe.models.config`, and checks package
entries before an update run.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from upvibe.core.paths import find_config_path, get_config_path, get_config_search_paths
from upvibe.models.config import PackageEntry, UpvibeConfig
from upvibe.models.package import UpdateStrategy


class ConfigError(Exception):
    """Base exception for config-related errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when no config file is found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when the config content does not match the schema."""


def load_config(path: Path | None = None) -> UpvibeConfig:
    """Load a config file.

    Args:
        path: Path to the config file. If None, the first existing file
            from the search paths is used.

    Returns:
        Parsed UpvibeConfig with defaults applied.

    Raises:
        ConfigNotFoundError: If no config file exists.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = path or find_config_path()

    if config_path is None or not config_path.exists():
        searched = ", ".join(str(p) for p in ([path] if path else get_config_search_paths()))
        raise ConfigNotFoundError(f"Config not found (looked in {searched})")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return UpvibeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: UpvibeConfig, path: Path | None = None) -> Path:
    """Save a config to a TOML file.

    The file is written atomically through a temporary file in the same
    directory and os.replace().

    Args:
        config: The config to save.
        path: Destination. If None, the config file in use (or the local
            config path for a new one).

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def validate_package(entry: PackageEntry) -> list[str]:
    """Check a package entry for configuration errors.

    Args:
        entry: Package entry to check.

    Returns:
        Error messages; empty if the entry is valid.
    """
    errors: list[str] = []

    if not entry.name:
        errors.append("Package name is required")

    if entry.strategy == UpdateStrategy.PINNED and not entry.version:
        errors.append(f'Package "{entry.name}": version is required when strategy is "pinned"')

    if entry.version and entry.strategy != UpdateStrategy.PINNED:
        errors.append(
            f'Package "{entry.name}": version can only be specified when strategy is "pinned"'
        )

    return errors


def validate_config(config: UpvibeConfig) -> list[str]:
    """Check every package entry and name uniqueness.

    Returns:
        Error messages in package order; empty if the config is valid.
    """
    errors: list[str] = []
    seen: set[str] = set()

    for entry in config.packages:
        errors.extend(validate_package(entry))
        if entry.name and entry.name in seen:
            errors.append(f'Package "{entry.name}" is configured more than once')
        seen.add(entry.name)

    return errors


def add_package(entry: PackageEntry, path: Path | None = None) -> Path:
    """Add a package to the config, replacing an entry with the same name.

    A new config file is created if none exists.

    Returns:
        Path of the written config file.
    """
    config_path = path or get_config_path()
    try:
        config = load_config(config_path)
    except ConfigNotFoundError:
        config = UpvibeConfig()

    existing = config.get_package(entry.name)
    if existing is None:
        config.packages.append(entry)
    else:
        config.packages = [entry if p is existing else p for p in config.packages]

    return save_config(config, config_path)


def remove_package(name: str, path: Path | None = None) -> bool:
    """Remove a package from the config.

    Returns:
        True if the package was configured and removed, False otherwise.

    Raises:
        ConfigError: If an existing config cannot be read or written.
    """
    config_path = path or get_config_path()
    try:
        config = load_config(config_path)
    except ConfigNotFoundError:
        return False

    remaining = [entry for entry in config.packages if entry.name != name]
    if len(remaining) == len(config.packages):
        return False

    config.packages = remaining
    save_config(config, config_path)
    return True


def require_config(path: Path | None = None) -> UpvibeConfig:
    """Load the config or exit with a helpful error message.

    Raises:
        typer.Exit: If the config cannot be loaded.
    """
    import typer

    from upvibe.utils.formatting import print_error, print_info

    try:
        return load_config(path)
    except ConfigNotFoundError as e:
        print_error("No configuration file found!")
        print_info("Looked for config in:")
        for candidate in [path] if path else get_config_search_paths():
            print_info(f"  • {candidate}")
        print_info("Create one with 'upvibe add <package>'.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e


def _config_to_dict(config: UpvibeConfig) -> dict[str, Any]:
    """Convert a config to a dictionary suitable for TOML serialization.

    Defaults are omitted to keep the file short.
    """
    result: dict[str, Any] = {}
    if config.package_manager is not None:
        result["package_manager"] = config.package_manager.value
    result["packages"] = [_package_entry_to_dict(entry) for entry in config.packages]
    return result


def _package_entry_to_dict(entry: PackageEntry) -> dict[str, Any]:
    result: dict[str, Any] = {"name": entry.name}
    if not entry.global_install:
        result["global"] = False
    if entry.strategy != UpdateStrategy.LATEST:
        result["strategy"] = entry.strategy.value
    if entry.version:
        result["version"] = entry.version
    if entry.postinstall:
        result["postinstall"] = list(entry.postinstall)
    return result
