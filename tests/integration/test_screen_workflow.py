"""Integration tests for the register, validate, resolve and migrate workflow."""

import json

import pytest

from sdui.migration import MigrationEngine
from sdui.registry import TokenRegistry
from sdui.samples import SAMPLE_SCREENS, build_sample, enhanced_card
from sdui.schema import SchemaDecoder
from sdui.screen import ResolutionStatus, ScreenPayload, ScreenResolver, TokenRef
from sdui.tokens import TokenType, decode_token_json, encode_token_json, walk
from sdui.versioning import check_compatibility


@pytest.mark.integration
class TestEnhancedCardScreen:
    """The enhanced card registered node by node and rendered with bindings."""

    def test_scenario(self):
        """Bindings reach the title child and nothing is missing."""
        card = enhanced_card()
        registry = TokenRegistry()
        registry.register(card)
        for child in card.children:
            registry.register(child)

        payload = ScreenPayload(
            id="welcome",
            tokens=[TokenRef(id="enhanced_card", bind={"title": "Welcome"})],
        )
        assert registry.validate_screen_payload(payload) == []

        screen = ScreenResolver(registry).resolve(payload)
        root = screen.nodes[0]
        assert root.id == "enhanced_card"
        assert root.status is ResolutionStatus.RESOLVED
        title = next(c for c in root.children if c.id == "title")
        assert title.text == "Welcome"
        assert screen.ok

    def test_sample_registry_fixture(self, sample_registry, enhanced_screen):
        """The shared fixtures resolve the same way."""
        screen = ScreenResolver(sample_registry).resolve(enhanced_screen)
        assert screen.find("title").text == "Welcome"
        assert screen.find("button").text == "Learn More"

    def test_missing_children_reported(self):
        """Registering only the card leaves its children missing."""
        registry = TokenRegistry([enhanced_card()])
        assert registry.validate_screen_payload(SAMPLE_SCREENS["enhanced_home"]) == [
            "title",
            "description",
            "button",
        ]


@pytest.mark.integration
class TestDocumentLifecycle:
    """Encode, schema-check, migrate and re-register a full dashboard."""

    def test_round_trip_through_schema(self):
        """A dashboard survives JSON, the schema decoder and the codec."""
        dashboard = build_sample("dashboard")
        text = encode_token_json(dashboard)
        assert SchemaDecoder().decode(json.loads(text)) == dashboard
        assert decode_token_json(text) == dashboard

    def test_migrate_then_register(self, sample_registry):
        """Migrated copies re-register cleanly and stay compatible."""
        migrated = MigrationEngine().migrate_registry(sample_registry, 2)
        registry = TokenRegistry(migrated.values())

        assert registry.validate_registry() == []
        for token in registry.all_tokens().values():
            assert token.version == 2
            assert check_compatibility(token).is_compatible

        stats = registry.get_registration_stats()
        assert stats.total_tokens == len(sample_registry)
        assert stats.tokens_by_variant[TokenType.LAZY_COLUMN.value] == 1

    def test_json_and_typed_migration_agree(self):
        """Raw JSON migration matches typed migration for every node."""
        engine = MigrationEngine()
        for node in walk(build_sample("dashboard")):
            migrated_json = engine.migrate_json(json.loads(encode_token_json(node)), 3)
            assert decode_token_json(json.dumps(migrated_json)) == engine.migrate_token(
                node, 3
            )
