"""Configuration models for the upvibe config file.

This module defines the Pydantic models representing the config.toml
structure listing the packages to keep updated.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from upvibe.models.package import PackageManager, PackageSpec, UpdateStrategy


class PackageEntry(BaseModel):
    """Entry for a single package in the config file.

    Cross-field rules (pinned strategy and version) are not enforced here
    so that every problem in a file can be reported at once; see
    :func:`upvibe.core.config.validate_package`.

    Attributes:
        name: Package name.
        global_install: Install globally (TOML key ``global``).
        strategy: Update strategy.
        version: Exact version, only for the pinned strategy.
        postinstall: Commands to run after installing.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: Annotated[str, Field(description="Package name")] = ""
    global_install: Annotated[
        bool,
        Field(alias="global", description="Install into the global location"),
    ] = True
    strategy: Annotated[
        UpdateStrategy,
        Field(description="Update strategy"),
    ] = UpdateStrategy.LATEST
    version: Annotated[
        str | None,
        Field(description="Exact version for the pinned strategy"),
    ] = None
    postinstall: Annotated[
        list[str],
        Field(default_factory=list, description="Commands to run after install"),
    ]

    def to_spec(self) -> PackageSpec:
        """Convert this entry to an immutable PackageSpec.

        Raises:
            ValueError: If the entry violates a package invariant.
        """
        return PackageSpec(
            name=self.name,
            global_install=self.global_install,
            strategy=self.strategy,
            pinned_version=self.version,
            post_install=tuple(self.postinstall),
        )


class UpvibeConfig(BaseModel):
    """Complete upvibe configuration.

    Attributes:
        package_manager: Preferred package manager, auto-detected if None.
        packages: Packages to update, in update order.
    """

    model_config = ConfigDict(extra="forbid")

    package_manager: Annotated[
        PackageManager | None,
        Field(description="Preferred package manager"),
    ] = None
    packages: Annotated[
        list[PackageEntry],
        Field(default_factory=list, description="Packages to keep updated"),
    ]

    def get_package(self, name: str) -> PackageEntry | None:
        """Return the entry for a package name, if configured."""
        for entry in self.packages:
            if entry.name == name:
                return entry
        return None

    def to_specs(self) -> list[PackageSpec]:
        """Convert all entries to PackageSpecs in configuration order."""
        return [entry.to_spec() for entry in self.packages]
