"""Unit tests for the migration engine."""

import pytest

from sdui.migration import (
    CyclicReferenceError,
    FieldMigration,
    MigrationEngine,
    MigrationError,
    UnsupportedDowngradeError,
)
from sdui.registry import TokenRegistry
from sdui.tokens import (
    ButtonToken,
    CardToken,
    ColumnToken,
    DividerToken,
    TextToken,
    TokenType,
    decode_token,
    encode_token,
)
from sdui.values import Action, ActionType, TextStyle


def _tree(version: int = 1) -> CardToken:
    return CardToken(
        id="card",
        version=version,
        children=(
            ColumnToken(
                id="column",
                version=version,
                children=(
                    TextToken(
                        id="caption",
                        version=version,
                        text="Small print",
                        style=TextStyle.BODY_SMALL,
                    ),
                    ButtonToken(
                        id="cta",
                        version=version,
                        text="Go",
                        on_click=Action(type=ActionType.CUSTOM),
                    ),
                ),
            ),
        ),
    )


class TestMigrateToken:
    """Tests for the typed migration path."""

    @pytest.mark.unit
    def test_same_version_unchanged(self):
        """Tokens at the target version are returned as is."""
        token = _tree(2)
        assert MigrationEngine().migrate_token(token, 2) is token

    @pytest.mark.unit
    def test_upgrade_sets_version_recursively(self):
        """Every node reaches the target version."""
        migrated = MigrationEngine().migrate_token(_tree(1), 3)
        column = migrated.children[0]
        assert migrated.version == 3
        assert column.version == 3
        assert [c.version for c in column.children] == [3, 3]
        assert column.children[1].text.raw == "Go"

    @pytest.mark.unit
    def test_builtin_style_migration(self):
        """BodySmall becomes BodyMedium when crossing version 2."""
        migrated = MigrationEngine().migrate_token(_tree(1), 2)
        caption = migrated.children[0].children[0]
        assert caption.style is TextStyle.BODY_MEDIUM

    @pytest.mark.unit
    def test_transform_skipped_when_already_past(self):
        """Field migrations introduced at or before the current version do not run."""
        token = TextToken(id="t", version=2, text="x", style=TextStyle.BODY_SMALL)
        migrated = MigrationEngine().migrate_token(token, 3)
        assert migrated.style is TextStyle.BODY_SMALL

    @pytest.mark.unit
    def test_composition(self):
        """Migrating in steps equals migrating directly."""
        engine = MigrationEngine()
        stepwise = engine.migrate_token(engine.migrate_token(_tree(1), 2), 3)
        direct = engine.migrate_token(_tree(1), 3)
        assert stepwise == direct

    @pytest.mark.unit
    def test_downgrade_rejected(self):
        """Migrating to an older version raises."""
        with pytest.raises(UnsupportedDowngradeError) as exc:
            MigrationEngine().migrate_token(_tree(3), 2)
        assert exc.value.version == 3
        assert exc.value.target == 2

    @pytest.mark.unit
    def test_child_downgrade_fails_whole_tree(self):
        """A child newer than the target fails the migration."""
        token = ColumnToken(
            id="c", version=1, children=(DividerToken(id="d", version=5),)
        )
        with pytest.raises(UnsupportedDowngradeError):
            MigrationEngine().migrate_token(token, 3)

    @pytest.mark.unit
    def test_ordered_custom_migrations(self):
        """Custom migrations run in ascending version order."""
        engine = MigrationEngine(
            [
                FieldMigration(TokenType.DIVIDER, "thickness", 3, lambda v: v * 10),
                FieldMigration(TokenType.DIVIDER, "thickness", 2, lambda v: v + 1),
            ]
        )
        migrated = engine.migrate_token(DividerToken(id="d", thickness=1), 3)
        assert migrated.thickness == 20

    @pytest.mark.unit
    def test_invalid_transform_result(self):
        """Transforms producing invalid values raise MigrationError."""
        engine = MigrationEngine(
            [FieldMigration(TokenType.TEXT, "style", 2, lambda v: "Gigantic")]
        )
        with pytest.raises(MigrationError):
            engine.migrate_token(TextToken(id="t", text="x"), 2)

    @pytest.mark.unit
    def test_original_untouched(self):
        """Migration returns new tokens and leaves the input as is."""
        token = _tree(1)
        MigrationEngine().migrate_token(token, 2)
        assert token.version == 1
        assert token.children[0].children[0].style is TextStyle.BODY_SMALL

    @pytest.mark.unit
    def test_migrate_registry(self):
        """Registry migration returns copies without re-registering."""
        registry = TokenRegistry([TextToken(id="t", text="x")])
        migrated = MigrationEngine().migrate_registry(registry, 2)
        assert migrated["t"].version == 2
        assert registry.get_token("t").version == 1


class TestMigrateJson:
    """Tests for the JSON migration path."""

    @pytest.mark.unit
    def test_matches_typed_path(self):
        """JSON migration agrees with typed migration."""
        engine = MigrationEngine()
        migrated = engine.migrate_json(encode_token(_tree(1)), 3)
        assert decode_token(migrated) == engine.migrate_token(_tree(1), 3)

    @pytest.mark.unit
    def test_missing_version_defaults_to_one(self):
        """Payloads without a version are treated as version 1."""
        data = {"type": "Text", "id": "t", "text": "x", "style": "BodySmall"}
        migrated = MigrationEngine().migrate_json(data, 2)
        assert migrated["version"] == 2
        assert migrated["style"] == "BodyMedium"
        assert "version" not in data

    @pytest.mark.unit
    def test_unknown_fields_preserved(self):
        """Fields the engine does not know are copied through."""
        data = {"type": "Spacer", "id": "s", "version": 1, "experimental": True}
        assert MigrationEngine().migrate_json(data, 2)["experimental"] is True

    @pytest.mark.unit
    def test_same_version_unchanged(self):
        """Payloads already at the target are returned unchanged."""
        data = {"type": "Spacer", "id": "s", "version": 2}
        assert MigrationEngine().migrate_json(data, 2) == data

    @pytest.mark.unit
    def test_downgrade_rejected(self):
        """Newer payloads raise."""
        with pytest.raises(UnsupportedDowngradeError):
            MigrationEngine().migrate_json({"type": "Spacer", "id": "s", "version": 4}, 2)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "data",
        [
            {"type": "Carousel", "id": "x", "version": 1},
            {"id": "x", "version": 1, "text": "untagged"},
            {"type": "Text", "id": "x", "version": "one"},
            {"type": "Column", "id": "c", "version": 1, "children": "oops"},
            ["not", "an", "object"],
        ],
    )
    def test_unknown_shape_returns_none(self, data):
        """Unrecognized payloads yield None."""
        assert MigrationEngine().migrate_json(data, 2) is None

    @pytest.mark.unit
    def test_bad_child_fails_whole_tree(self):
        """A child with an unknown shape fails the migration."""
        data = {
            "type": "Column",
            "id": "c",
            "version": 1,
            "children": [{"type": "Spacer", "id": "ok"}, {"type": "Mystery", "id": "bad"}],
        }
        assert MigrationEngine().migrate_json(data, 2) is None

    @pytest.mark.unit
    def test_inference_opt_in(self):
        """Untagged payloads migrate when inference is enabled."""
        data = {"id": "t", "version": 1, "text": "x", "style": "BodySmall"}
        migrated = MigrationEngine().migrate_json(data, 2, infer_missing_type=True)
        assert migrated["type"] == "Text"
        assert migrated["style"] == "BodyMedium"

    @pytest.mark.unit
    def test_cycle_raises(self):
        """Self-containing JSON raises CyclicReferenceError."""
        data = {"type": "Column", "id": "loop", "version": 1, "children": []}
        data["children"].append(data)
        with pytest.raises(CyclicReferenceError):
            MigrationEngine().migrate_json(data, 2)
