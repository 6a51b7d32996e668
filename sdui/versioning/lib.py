"""Token version gating and semantic versions.

Two version notions coexist:

- Token versions are plain integers declared per node. A node is rendered
  only if its version is at least its variant's `min_supported_version`
  and, when a client ceiling is known, at most that ceiling.
- Semantic versions (MAJOR.MINOR.PATCH) track components and the
  migration paths between their releases in a `VersionRegistry` that can
  be saved to and loaded from JSON.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sdui.tokens import BaseToken

logger = logging.getLogger(__name__)


# =============================================================================
# Per-token gate
# =============================================================================


class CompatibilityStatus(str, Enum):
    """Outcome of a version gate check."""

    COMPATIBLE = "compatible"
    TOO_OLD = "too_old"
    TOO_NEW = "too_new"


@dataclass(frozen=True)
class CompatibilityResult:
    """Result of checking a token against the version gate."""

    status: CompatibilityStatus
    token_id: str
    version: int
    min_supported_version: int
    client_version: int | None = None

    @property
    def is_compatible(self) -> bool:
        return self.status is CompatibilityStatus.COMPATIBLE

    @property
    def message(self) -> str:
        if self.status is CompatibilityStatus.TOO_OLD:
            return (
                f"Token '{self.token_id}' version {self.version} is below the "
                f"minimum supported version {self.min_supported_version}"
            )
        if self.status is CompatibilityStatus.TOO_NEW:
            return (
                f"Token '{self.token_id}' version {self.version} is newer than "
                f"client version {self.client_version}"
            )
        return f"Token '{self.token_id}' version {self.version} is compatible"


def check_compatibility(
    token: BaseToken, client_version: int | None = None
) -> CompatibilityResult:
    """Check a token's declared version against the gate.

    Args:
        token: Token to check. Children are not visited.
        client_version: Highest version the client renders, if bounded.

    Returns:
        CompatibilityResult with TOO_OLD when the version is below the
        variant floor (equal is accepted), TOO_NEW when it exceeds the client
        version, COMPATIBLE otherwise.
    """
    floor = type(token).min_supported_version
    if token.version < floor:
        status = CompatibilityStatus.TOO_OLD
    elif client_version is not None and token.version > client_version:
        status = CompatibilityStatus.TOO_NEW
    else:
        status = CompatibilityStatus.COMPATIBLE

    return CompatibilityResult(
        status=status,
        token_id=token.id,
        version=token.version,
        min_supported_version=floor,
        client_version=client_version,
    )


def is_compatible(token: BaseToken, client_version: int | None = None) -> bool:
    """Boolean form of `check_compatibility`."""
    return check_compatibility(token, client_version).is_compatible


# =============================================================================
# Semantic versions
# =============================================================================


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A MAJOR.MINOR.PATCH version with total ordering.

    - MAJOR changes are incompatible
    - MINOR changes add backward compatible functionality
    - PATCH changes are backward compatible fixes

    Example:
        >>> SemanticVersion.parse("1.2.3") < SemanticVersion(2, 0, 0)
        True
        >>> str(SemanticVersion(1, 2, 3).increment_minor())
        '1.3.0'
    """

    major: int
    minor: int = 0
    patch: int = 0

    INITIAL: ClassVar["SemanticVersion"]

    @classmethod
    def parse(cls, value: str) -> "SemanticVersion":
        """Parse a "MAJOR.MINOR.PATCH" string.

        Raises:
            ValueError: If the string is not three dot-separated integers.
        """
        parts = value.strip().split(".")
        if len(parts) != 3:
            raise ValueError(
                f"Version string must be in the format MAJOR.MINOR.PATCH, got: {value!r}"
            )
        try:
            major, minor, patch = (int(p) for p in parts)
        except ValueError as e:
            raise ValueError(f"Version parts must be integers, got: {value!r}") from e
        return cls(major, minor, patch)

    @classmethod
    def from_token_version(cls, version: int) -> "SemanticVersion":
        """Map an integer token version to MAJOR.0.0."""
        return cls(version, 0, 0)

    def is_compatible_with(self, other: "SemanticVersion") -> bool:
        """Same major and at least the other's minor/patch."""
        return self.major == other.major and (self.minor, self.patch) >= (
            other.minor,
            other.patch,
        )

    def can_migrate_to(self, target: "SemanticVersion") -> bool:
        return self <= target

    def increment_major(self) -> "SemanticVersion":
        return SemanticVersion(self.major + 1, 0, 0)

    def increment_minor(self) -> "SemanticVersion":
        return SemanticVersion(self.major, self.minor + 1, 0)

    def increment_patch(self) -> "SemanticVersion":
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


SemanticVersion.INITIAL = SemanticVersion(1, 0, 0)


# =============================================================================
# Version registry
# =============================================================================


class _RegistryModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class MigrationPath(_RegistryModel):
    """Description of how to move a component between two versions."""

    description: str
    is_breaking: bool = False
    migration_steps: list[str] = Field(default_factory=list)
    custom_data: dict[str, Any] | None = None


class ComponentVersion(_RegistryModel):
    id: str
    version: SemanticVersion


class MigrationPathEntry(_RegistryModel):
    component_id: str
    from_version: SemanticVersion
    to_version: SemanticVersion
    migration_path: MigrationPath


class RegistryData(_RegistryModel):
    """On-disk layout of a saved VersionRegistry."""

    versions: list[ComponentVersion] = Field(default_factory=list)
    migration_paths: list[MigrationPathEntry] = Field(default_factory=list)


class VersionRegistry:
    """Tracks component versions and the migration paths between them."""

    def __init__(self) -> None:
        self._versions: dict[str, SemanticVersion] = {}
        self._paths: dict[
            tuple[str, SemanticVersion, SemanticVersion], MigrationPath
        ] = {}

    def register_version(
        self, component_id: str, version: SemanticVersion | str
    ) -> None:
        """Register a component at a version (object or "MAJOR.MINOR.PATCH")."""
        if isinstance(version, str):
            version = SemanticVersion.parse(version)
        self._versions[component_id] = version

    def get_version(self, component_id: str) -> SemanticVersion | None:
        return self._versions.get(component_id)

    def is_registered(self, component_id: str) -> bool:
        return component_id in self._versions

    def update_version(self, component_id: str, version: SemanticVersion) -> bool:
        """Update a registered component.

        Returns:
            False if the component was not registered.
        """
        if not self.is_registered(component_id):
            return False
        self._versions[component_id] = version
        return True

    def can_upgrade(self, component_id: str, target: SemanticVersion) -> bool:
        """Whether a registered component can migrate to `target`."""
        current = self.get_version(component_id)
        return current is not None and current.can_migrate_to(target)

    def register_migration_path(
        self,
        component_id: str,
        from_version: SemanticVersion,
        to_version: SemanticVersion,
        path: MigrationPath,
    ) -> None:
        self._paths[(component_id, from_version, to_version)] = path

    def get_migration_path(
        self,
        component_id: str,
        from_version: SemanticVersion,
        to_version: SemanticVersion,
    ) -> MigrationPath | None:
        return self._paths.get((component_id, from_version, to_version))

    def to_data(self) -> RegistryData:
        return RegistryData(
            versions=[
                ComponentVersion(id=cid, version=version)
                for cid, version in self._versions.items()
            ],
            migration_paths=[
                MigrationPathEntry(
                    component_id=cid,
                    from_version=from_v,
                    to_version=to_v,
                    migration_path=path,
                )
                for (cid, from_v, to_v), path in self._paths.items()
            ],
        )

    def save(self, path: Path | str, indent: int = 2) -> None:
        """Write the registry as JSON."""
        path = Path(path)
        data = self.to_data().model_dump(mode="json", by_alias=True)
        path.write_text(json.dumps(data, indent=indent), encoding="utf-8")
        logger.debug("Saved version registry to %s", path)

    @classmethod
    def from_data(cls, data: RegistryData) -> "VersionRegistry":
        registry = cls()
        for entry in data.versions:
            registry.register_version(entry.id, entry.version)
        for entry in data.migration_paths:
            registry.register_migration_path(
                entry.component_id,
                entry.from_version,
                entry.to_version,
                entry.migration_path,
            )
        return registry

    @classmethod
    def load(cls, path: Path | str) -> "VersionRegistry":
        """Load a registry written by `save`.

        Raises:
            pydantic.ValidationError: If the file does not match the layout.
        """
        text = Path(path).read_text(encoding="utf-8")
        return cls.from_data(RegistryData.model_validate_json(text))


__all__ = [
    # Token gate
    "CompatibilityStatus",
    "CompatibilityResult",
    "check_compatibility",
    "is_compatible",
    # Semantic versions
    "SemanticVersion",
    # Registry
    "MigrationPath",
    "ComponentVersion",
    "MigrationPathEntry",
    "RegistryData",
    "VersionRegistry",
]
