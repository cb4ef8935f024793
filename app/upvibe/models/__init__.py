"""Data models for upvibe.

This module exports the core data structures used throughout the application.
"""

from upvibe.models.config import PackageEntry, UpvibeConfig
from upvibe.models.outcome import AlreadyCurrent, Failed, RunSummary, Success, UpdateOutcome
from upvibe.models.package import PackageManager, PackageSpec, UpdateStrategy
from upvibe.models.version import SemanticVersion, UpdateType

__all__ = [
    "AlreadyCurrent",
    "Failed",
    "PackageEntry",
    "PackageManager",
    "PackageSpec",
    "RunSummary",
    "SemanticVersion",
    "Success",
    "UpdateOutcome",
    "UpdateStrategy",
    "UpdateType",
    "UpvibeConfig",
]
