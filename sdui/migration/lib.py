"""Forward migration of token trees between versions.

Two entry points share one policy:

- `MigrationEngine.migrate_token` works on typed token trees.
- `MigrationEngine.migrate_json` works on raw wire-form JSON, so documents
  can be upgraded without decoding them into the current model first.

Policy:
    1. A token already at the target version is returned unchanged.
    2. A token newer than the target raises `UnsupportedDowngradeError`.
    3. Otherwise each registered field migration for the variant runs when
       ``version < introduced_in <= target``, in ascending order, on the
       wire form of the field. Every other field is copied and the version
       becomes the target.
    4. Containers migrate their children first. A child that cannot be
       migrated fails the whole migration.

The engine never touches a registry; callers re-register the results.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Iterable, Mapping

from pydantic import TypeAdapter, ValidationError

from sdui.registry import TokenRegistry
from sdui.tokens import (
    BaseToken,
    TokenType,
    children_of,
    get_variant_meta,
    infer_token_type,
)
from sdui.values import TextStyle

logger = logging.getLogger(__name__)

FieldTransform = Callable[[Any], Any]


class MigrationError(Exception):
    """Base class for migration failures."""


class UnsupportedDowngradeError(MigrationError):
    """Raised when a token is newer than the migration target."""

    def __init__(self, token_id: str, version: int, target: int):
        super().__init__(
            f"Cannot migrate token '{token_id}' from version {version} "
            f"down to version {target}"
        )
        self.token_id = token_id
        self.version = version
        self.target = target


class CyclicReferenceError(MigrationError):
    """Raised when an in-memory JSON tree contains itself."""


@dataclass(frozen=True)
class FieldMigration:
    """A change to one field of one variant, introduced at a version.

    Attributes:
        variant: Variant the migration applies to.
        field: Wire name of the field.
        introduced_in: Version that introduced the change.
        transform: Function from old wire value to new wire value.
        description: Human-readable summary.
    """

    variant: TokenType
    field: str
    introduced_in: int
    transform: FieldTransform
    description: str = ""

    def applies(self, current: int, target: int) -> bool:
        return current < self.introduced_in <= target


def _collapse_body_small(value: Any) -> Any:
    if value == TextStyle.BODY_SMALL.value:
        return TextStyle.BODY_MEDIUM.value
    return value


DEFAULT_FIELD_MIGRATIONS: tuple[FieldMigration, ...] = (
    FieldMigration(
        variant=TokenType.TEXT,
        field="style",
        introduced_in=2,
        transform=_collapse_body_small,
        description="BodySmall text style folded into BodyMedium",
    ),
)


@lru_cache(maxsize=None)
def _field_adapter(model: type[BaseToken], field_name: str) -> TypeAdapter:
    return TypeAdapter(model.model_fields[field_name].annotation)


class MigrationEngine:
    """Migrates tokens forward using a set of field migrations.

    Example:
        >>> engine = MigrationEngine()
        >>> engine.migrate_token(TextToken(id="t", text="x"), 2).version
        2
    """

    def __init__(
        self, field_migrations: Iterable[FieldMigration] = DEFAULT_FIELD_MIGRATIONS
    ) -> None:
        self._migrations: dict[TokenType, list[FieldMigration]] = {}
        for migration in field_migrations:
            get_variant_meta(migration.variant)
            self._migrations.setdefault(migration.variant, []).append(migration)
        for migrations in self._migrations.values():
            migrations.sort(key=lambda m: m.introduced_in)

    def migrations_for(
        self, variant: TokenType, current: int, target: int
    ) -> list[FieldMigration]:
        """Field migrations that run when moving a variant from current to target."""
        return [
            m for m in self._migrations.get(variant, []) if m.applies(current, target)
        ]

    # -------------------------------------------------------------------------
    # Typed path
    # -------------------------------------------------------------------------

    def migrate_token(self, token: BaseToken, target: int) -> BaseToken:
        """Migrate a typed token tree to the target version.

        Raises:
            UnsupportedDowngradeError: If any migrated node is newer than target.
            MigrationError: If a field transform yields an invalid value.
        """
        if token.version == target:
            return token
        if token.version > target:
            raise UnsupportedDowngradeError(token.id, token.version, target)

        updates: dict[str, Any] = {"version": target}

        children = children_of(token)
        if children is not None:
            updates["children"] = tuple(
                self.migrate_token(child, target) for child in children
            )

        meta = get_variant_meta(token.type)
        for migration in self.migrations_for(meta.type, token.version, target):
            field_meta = meta.get_field(migration.field)
            if field_meta is None:
                raise MigrationError(
                    f"{meta.type.value} has no field '{migration.field}' to migrate"
                )
            name = field_meta.name
            adapter = _field_adapter(type(token), name)
            current = updates.get(name, getattr(token, name))
            wire_value = adapter.dump_python(current, mode="json", by_alias=True)
            try:
                updates[name] = adapter.validate_python(migration.transform(wire_value))
            except ValidationError as e:
                raise MigrationError(
                    f"Migration of '{migration.field}' on token '{token.id}' "
                    f"produced an invalid value"
                ) from e

        logger.debug(
            "Migrated %s '%s' from version %d to %d",
            meta.type.value,
            token.id,
            token.version,
            target,
        )
        return token.model_copy(update=updates)

    def migrate_registry(
        self, registry: TokenRegistry, target: int
    ) -> dict[str, BaseToken]:
        """Migrate every registered token, returning copies keyed by ID.

        The registry itself is left untouched.
        """
        snapshot = registry.snapshot()
        return {
            token_id: self.migrate_token(token, target)
            for token_id, token in snapshot.tokens.items()
        }

    # -------------------------------------------------------------------------
    # JSON path
    # -------------------------------------------------------------------------

    def migrate_json(
        self,
        data: Mapping[str, Any],
        target: int,
        *,
        infer_missing_type: bool = False,
    ) -> dict[str, Any] | None:
        """Migrate a wire-form token tree to the target version.

        A missing ``version`` is read as 1. Untagged nodes are migrated only
        when `infer_missing_type` is set; the inferred tag is written out.

        Returns:
            The migrated tree, or None if any node has an unknown shape.

        Raises:
            UnsupportedDowngradeError: If any migrated node is newer than target.
            CyclicReferenceError: If the tree contains itself.
        """
        return self._migrate_json(data, target, infer_missing_type, frozenset())

    def _migrate_json(
        self,
        data: Any,
        target: int,
        infer_missing_type: bool,
        ancestors: frozenset[int],
    ) -> dict[str, Any] | None:
        if not isinstance(data, Mapping):
            logger.warning("Cannot migrate non-object token payload")
            return None
        if id(data) in ancestors:
            raise CyclicReferenceError(
                f"Token '{data.get('id', '<unknown>')}' contains itself"
            )

        version = data.get("version", 1)
        if isinstance(version, bool) or not isinstance(version, int):
            logger.warning("Token '%s' has non-integer version", data.get("id"))
            return None
        if version == target:
            return dict(data)
        if version > target:
            raise UnsupportedDowngradeError(str(data.get("id")), version, target)

        token_type = self._json_type(data, infer_missing_type)
        if token_type is None:
            return None
        meta = get_variant_meta(token_type)

        result = dict(data)
        result["type"] = token_type.value

        for migration in self.migrations_for(token_type, version, target):
            if migration.field in result:
                result[migration.field] = migration.transform(result[migration.field])

        if meta.is_container and "children" in data:
            children = data["children"]
            if not isinstance(children, list):
                logger.warning("Token '%s' has non-list children", data.get("id"))
                return None
            path = ancestors | {id(data)}
            migrated: list[dict[str, Any]] = []
            for child in children:
                child_result = self._migrate_json(child, target, infer_missing_type, path)
                if child_result is None:
                    return None
                migrated.append(child_result)
            result["children"] = migrated

        result["version"] = target
        return result

    def _json_type(
        self, data: Mapping[str, Any], infer_missing_type: bool
    ) -> TokenType | None:
        tag = data.get("type")
        if tag is None:
            if not infer_missing_type:
                logger.warning("Token '%s' has no type tag", data.get("id"))
                return None
            inferred = infer_token_type(data)
            if inferred is None:
                logger.warning("Cannot infer type of token '%s'", data.get("id"))
            return inferred
        try:
            return TokenType(tag)
        except ValueError:
            logger.warning("Unknown token type '%s'", tag)
            return None


__all__ = [
    "MigrationError",
    "UnsupportedDowngradeError",
    "CyclicReferenceError",
    "FieldMigration",
    "FieldTransform",
    "DEFAULT_FIELD_MIGRATIONS",
    "MigrationEngine",
]
