"""XDG-compliant path management for upvibe.

This module provides the locations searched for the upvibe config file
and user theme overrides.

Search order for the config file:
- ./.upvibe.toml (project-local)
- ~/.config/upvibe/config.toml (or XDG_CONFIG_HOME/upvibe/config.toml)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "upvibe"

# Config file name looked up in the working directory
LOCAL_CONFIG_FILENAME = ".upvibe.toml"

# Config file name inside the XDG config directory
USER_CONFIG_FILENAME = "config.toml"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the user configuration directory path.

    Returns:
        Path to ~/.config/upvibe/ (or XDG_CONFIG_HOME/upvibe/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_local_config_path(cwd: Path | None = None) -> Path:
    """Get the project-local config file path.

    Args:
        cwd: Directory to look in. Defaults to the current working directory.

    Returns:
        Path to .upvibe.toml in the given directory.
    """
    return (cwd or Path.cwd()) / LOCAL_CONFIG_FILENAME


def get_user_config_path() -> Path:
    """Get the user-wide config file path.

    Returns:
        Path to ~/.config/upvibe/config.toml.
    """
    return get_config_dir() / USER_CONFIG_FILENAME


def get_config_search_paths(cwd: Path | None = None) -> list[Path]:
    """Get config file candidates in lookup order."""
    return [get_local_config_path(cwd), get_user_config_path()]


def find_config_path(cwd: Path | None = None) -> Path | None:
    """Find the first existing config file.

    Args:
        cwd: Directory for the local lookup. Defaults to the working directory.

    Returns:
        Path to the config file in use, or None if none exists.
    """
    for candidate in get_config_search_paths(cwd):
        if candidate.is_file():
            return candidate
    return None


def get_config_path(cwd: Path | None = None) -> Path:
    """Get the config file to read from or write to.

    Returns the existing config file if there is one; otherwise the
    project-local path, where a new config is created.
    """
    return find_config_path(cwd) or get_local_config_path(cwd)


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/upvibe/theme.toml.
    """
    return get_config_dir() / "theme.toml"
