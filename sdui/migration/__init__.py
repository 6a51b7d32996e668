"""Forward migration of token trees (typed and raw JSON)."""

from .lib import (
    DEFAULT_FIELD_MIGRATIONS,
    CyclicReferenceError,
    FieldMigration,
    FieldTransform,
    MigrationEngine,
    MigrationError,
    UnsupportedDowngradeError,
)

__all__ = [
    # Engine
    "MigrationEngine",
    "FieldMigration",
    "FieldTransform",
    "DEFAULT_FIELD_MIGRATIONS",
    # Errors
    "MigrationError",
    "UnsupportedDowngradeError",
    "CyclicReferenceError",
]
