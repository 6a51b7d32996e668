"""Token version gate, semantic versions and the component version registry."""

from .lib import (
    CompatibilityResult,
    CompatibilityStatus,
    ComponentVersion,
    MigrationPath,
    MigrationPathEntry,
    RegistryData,
    SemanticVersion,
    VersionRegistry,
    check_compatibility,
    is_compatible,
)

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
