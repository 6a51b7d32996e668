"""Unit tests for versioning."""

import json

import pytest

from sdui.tokens import ButtonToken, SpacerToken, TextToken
from sdui.values import Action, ActionType
from sdui.versioning import (
    CompatibilityStatus,
    MigrationPath,
    SemanticVersion,
    VersionRegistry,
    check_compatibility,
    is_compatible,
)


class TestVersionGate:
    """Tests for check_compatibility."""

    @pytest.mark.unit
    def test_version_zero_is_too_old(self):
        """Version 0 is below the floor of 1."""
        result = check_compatibility(SpacerToken(id="s", version=0))
        assert result.status is CompatibilityStatus.TOO_OLD
        assert not result.is_compatible
        assert "minimum supported version 1" in result.message

    @pytest.mark.unit
    def test_floor_is_inclusive(self):
        """Version equal to the floor is accepted."""
        token = TextToken(id="t", text="x", version=TextToken.min_supported_version)
        assert is_compatible(token)

    @pytest.mark.unit
    def test_client_ceiling(self):
        """Versions above the client version are too new."""
        token = ButtonToken(
            id="b", text="Go", version=3, on_click=Action(type=ActionType.CUSTOM)
        )
        assert check_compatibility(token, client_version=2).status is (
            CompatibilityStatus.TOO_NEW
        )
        assert is_compatible(token, client_version=3)
        assert is_compatible(token)

    @pytest.mark.unit
    def test_raised_floor(self):
        """A variant with a higher floor rejects older tokens."""

        class StrictSpacer(SpacerToken):
            min_supported_version = 2

        assert not is_compatible(StrictSpacer(id="s", version=1))
        assert is_compatible(StrictSpacer(id="s", version=2))


class TestSemanticVersion:
    """Tests for SemanticVersion."""

    @pytest.mark.unit
    def test_parse_and_str(self):
        """Parsing and formatting are inverse."""
        version = SemanticVersion.parse("1.2.3")
        assert version == SemanticVersion(1, 2, 3)
        assert str(version) == "1.2.3"

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["1.2", "1.2.3.4", "a.b.c", ""])
    def test_parse_malformed(self, value):
        """Malformed strings raise ValueError."""
        with pytest.raises(ValueError):
            SemanticVersion.parse(value)

    @pytest.mark.unit
    def test_ordering(self):
        """Versions order by major, minor, then patch."""
        versions = [
            SemanticVersion(2, 0, 0),
            SemanticVersion(1, 10, 0),
            SemanticVersion(1, 2, 3),
            SemanticVersion(1, 2, 10),
        ]
        assert sorted(versions) == [
            SemanticVersion(1, 2, 3),
            SemanticVersion(1, 2, 10),
            SemanticVersion(1, 10, 0),
            SemanticVersion(2, 0, 0),
        ]

    @pytest.mark.unit
    def test_compatibility(self):
        """Compatible means same major and not older."""
        base = SemanticVersion(1, 2, 0)
        assert SemanticVersion(1, 3, 0).is_compatible_with(base)
        assert SemanticVersion(1, 2, 0).is_compatible_with(base)
        assert not SemanticVersion(1, 1, 9).is_compatible_with(base)
        assert not SemanticVersion(2, 2, 0).is_compatible_with(base)

    @pytest.mark.unit
    def test_can_migrate_to(self):
        """Only forward or equal migration is allowed."""
        assert SemanticVersion(1, 0, 0).can_migrate_to(SemanticVersion(1, 0, 0))
        assert SemanticVersion(1, 0, 0).can_migrate_to(SemanticVersion(2, 0, 0))
        assert not SemanticVersion(2, 0, 0).can_migrate_to(SemanticVersion(1, 9, 9))

    @pytest.mark.unit
    def test_increments(self):
        """Increments reset lower components."""
        version = SemanticVersion(1, 2, 3)
        assert version.increment_major() == SemanticVersion(2, 0, 0)
        assert version.increment_minor() == SemanticVersion(1, 3, 0)
        assert version.increment_patch() == SemanticVersion(1, 2, 4)

    @pytest.mark.unit
    def test_initial_and_token_version(self):
        """INITIAL is 1.0.0 and token versions map to majors."""
        assert SemanticVersion.INITIAL == SemanticVersion(1, 0, 0)
        assert SemanticVersion.from_token_version(3) == SemanticVersion(3, 0, 0)


class TestVersionRegistry:
    """Tests for VersionRegistry."""

    @pytest.mark.unit
    def test_register_and_update(self):
        """Components can be registered and updated."""
        registry = VersionRegistry()
        registry.register_version("Text", "1.0.0")
        assert registry.get_version("Text") == SemanticVersion(1, 0, 0)
        assert registry.update_version("Text", SemanticVersion(1, 1, 0))
        assert registry.get_version("Text") == SemanticVersion(1, 1, 0)
        assert not registry.update_version("Button", SemanticVersion(1, 0, 0))
        assert not registry.is_registered("Button")

    @pytest.mark.unit
    def test_can_upgrade(self):
        """Upgrades must move forward from a registered version."""
        registry = VersionRegistry()
        registry.register_version("Card", SemanticVersion(2, 0, 0))
        assert registry.can_upgrade("Card", SemanticVersion(2, 1, 0))
        assert not registry.can_upgrade("Card", SemanticVersion(1, 0, 0))
        assert not registry.can_upgrade("Unknown", SemanticVersion(9, 0, 0))

    @pytest.mark.unit
    def test_migration_paths(self):
        """Migration paths are keyed by component and version pair."""
        registry = VersionRegistry()
        path = MigrationPath(description="Rename style", is_breaking=True)
        registry.register_migration_path(
            "Text", SemanticVersion(1, 0, 0), SemanticVersion(2, 0, 0), path
        )
        assert (
            registry.get_migration_path(
                "Text", SemanticVersion(1, 0, 0), SemanticVersion(2, 0, 0)
            )
            == path
        )
        assert (
            registry.get_migration_path(
                "Text", SemanticVersion(2, 0, 0), SemanticVersion(3, 0, 0)
            )
            is None
        )

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path):
        """A saved registry loads back with the same contents."""
        registry = VersionRegistry()
        registry.register_version("Text", "1.2.0")
        registry.register_migration_path(
            "Text",
            SemanticVersion(1, 0, 0),
            SemanticVersion(1, 2, 0),
            MigrationPath(
                description="Collapse BodySmall",
                migration_steps=["style: BodySmall -> BodyMedium"],
                custom_data={"field": "style"},
            ),
        )
        target = tmp_path / "versions.json"
        registry.save(target)

        raw = json.loads(target.read_text())
        assert raw["versions"] == [
            {"id": "Text", "version": {"major": 1, "minor": 2, "patch": 0}}
        ]
        assert raw["migrationPaths"][0]["componentId"] == "Text"
        assert raw["migrationPaths"][0]["migrationPath"]["isBreaking"] is False

        loaded = VersionRegistry.load(target)
        assert loaded.get_version("Text") == SemanticVersion(1, 2, 0)
        path = loaded.get_migration_path(
            "Text", SemanticVersion(1, 0, 0), SemanticVersion(1, 2, 0)
        )
        assert path is not None
        assert path.migration_steps == ["style: BodySmall -> BodyMedium"]
        assert path.custom_data == {"field": "style"}
