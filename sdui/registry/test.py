"""Unit tests for the token registry."""

import logging
import threading

import pytest

from sdui.registry import InvalidTokenError, TokenRegistry
from sdui.screen import ScreenPayload, TokenRef
from sdui.tokens import CardToken, ColumnToken, RowToken, SpacerToken, TextToken


def _card_with_children() -> tuple[CardToken, TextToken, TextToken]:
    title = TextToken(id="title", text="Title")
    body = TextToken(id="body", text="Body")
    card = CardToken(id="card", children=(ColumnToken(id="column", children=(title, body)),))
    return card, title, body


class TestRegistration:
    """Tests for register/get/clear."""

    @pytest.mark.unit
    def test_register_and_get(self):
        """Registered tokens are retrievable by ID."""
        registry = TokenRegistry()
        token = TextToken(id="t", text="x")
        registry.register(token)
        assert registry.get_token("t") == token
        assert registry.has_token("t")
        assert "t" in registry
        assert len(registry) == 1
        assert registry.get_token("missing") is None

    @pytest.mark.unit
    def test_register_all_and_clear(self):
        """Batch registration and clearing."""
        registry = TokenRegistry()
        registry.register_all([SpacerToken(id="a"), SpacerToken(id="b")])
        assert len(registry) == 2
        registry.clear()
        assert len(registry) == 0

    @pytest.mark.unit
    def test_all_tokens_is_copy(self):
        """Mutating the returned mapping does not affect the registry."""
        registry = TokenRegistry([SpacerToken(id="a")])
        tokens = registry.all_tokens()
        tokens.clear()
        assert registry.has_token("a")

    @pytest.mark.unit
    def test_overwrite_keeps_latest(self):
        """Re-registering an ID replaces the token."""
        registry = TokenRegistry()
        registry.register(TextToken(id="t", text="old"))
        registry.register(TextToken(id="t", text="new"))
        assert registry.get_token("t").text.raw == "new"

    @pytest.mark.unit
    def test_register_with_validation_rejects_blank_id(self):
        """Blank IDs raise InvalidTokenError."""
        registry = TokenRegistry()
        with pytest.raises(InvalidTokenError):
            registry.register_with_validation(SpacerToken(id="   "))
        with pytest.raises(ValueError):
            registry.register_with_validation(SpacerToken(id=""))
        assert len(registry) == 0

    @pytest.mark.unit
    def test_register_with_validation_warns_on_overwrite(self, caplog):
        """Overwrites are logged as warnings."""
        registry = TokenRegistry([SpacerToken(id="s")])
        with caplog.at_level(logging.WARNING, logger="sdui.registry.lib"):
            registry.register_with_validation(SpacerToken(id="s", height=4))
        assert "Overwriting existing token with ID 's'" in caplog.text

    @pytest.mark.unit
    def test_snapshot_is_isolated(self):
        """Snapshots do not see later registrations."""
        registry = TokenRegistry([SpacerToken(id="a")])
        snapshot = registry.snapshot()
        registry.register(SpacerToken(id="b"))
        assert "b" not in snapshot
        assert len(snapshot) == 1
        with pytest.raises(TypeError):
            snapshot.tokens["c"] = SpacerToken(id="c")

    @pytest.mark.unit
    def test_concurrent_registration(self):
        """Registrations from several threads are all kept."""
        registry = TokenRegistry()

        def _worker(prefix: str) -> None:
            for i in range(100):
                registry.register(SpacerToken(id=f"{prefix}-{i}"))

        threads = [threading.Thread(target=_worker, args=(str(n),)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(registry) == 400


class TestValidateRegistry:
    """Tests for validate_registry."""

    @pytest.mark.unit
    def test_consistent_registry(self):
        """Fully registered trees have no findings."""
        card, title, body = _card_with_children()
        registry = TokenRegistry([card, card.children[0], title, body])
        assert registry.validate_registry() == []

    @pytest.mark.unit
    def test_missing_child(self):
        """Unregistered children are reported."""
        card = CardToken(
            id="test_card",
            children=(TextToken(id="missing_text", text="Missing"),),
        )
        registry = TokenRegistry([card])
        errors = registry.validate_registry()
        assert errors == [
            "Token 'test_card' references missing child token 'missing_text'"
        ]

    @pytest.mark.unit
    def test_blank_id(self):
        """Blank IDs registered without validation are reported."""
        registry = TokenRegistry([SpacerToken(id=" ")])
        assert "Token has empty or blank ID" in registry.validate_registry()

    @pytest.mark.unit
    def test_conflicting_duplicate(self):
        """IDs overwritten with different content are reported."""
        registry = TokenRegistry()
        registry.register(SpacerToken(id="s", height=1))
        registry.register(SpacerToken(id="s", height=2))
        assert registry.validate_registry() == ["Duplicate token ID found: s"]

    @pytest.mark.unit
    def test_identical_reregistration_is_not_duplicate(self):
        """Registering the same token twice is harmless."""
        registry = TokenRegistry()
        registry.register(SpacerToken(id="s"))
        registry.register(SpacerToken(id="s"))
        assert registry.validate_registry() == []

    @pytest.mark.unit
    def test_field_findings_included(self):
        """Per-token field findings are reported."""
        registry = TokenRegistry([TextToken(id="t", text="", version=0)])
        assert registry.validate_registry() == [
            "Token 't' has invalid version: 0",
            "TextToken 't' has empty text content",
        ]

    @pytest.mark.unit
    def test_cycle_detected(self):
        """Cyclic references through registered children are reported."""
        a = ColumnToken(id="a", children=(RowToken(id="b"),))
        b = RowToken(id="b", children=(ColumnToken(id="a"),))
        registry = TokenRegistry([a, b])
        assert registry.find_cycles() == [["a", "b", "a"]]
        assert "Cyclic reference detected: a -> b -> a" in registry.validate_registry()

    @pytest.mark.unit
    def test_self_reference(self):
        """A container listing its own ID as a child is a cycle."""
        registry = TokenRegistry([ColumnToken(id="loop", children=(ColumnToken(id="loop"),))])
        assert registry.find_cycles() == [["loop", "loop"]]


class TestValidateScreenPayload:
    """Tests for validate_screen_payload."""

    @pytest.mark.unit
    def test_all_present(self):
        """Screens whose tokens are registered have nothing missing."""
        card, title, body = _card_with_children()
        registry = TokenRegistry([card, card.children[0], title, body])
        payload = ScreenPayload(id="home", tokens=[TokenRef(id="card")])
        assert registry.validate_screen_payload(payload) == []

    @pytest.mark.unit
    def test_missing_top_level(self):
        """Unregistered references are reported once each."""
        registry = TokenRegistry([SpacerToken(id="s")])
        payload = ScreenPayload(
            id="home",
            tokens=[
                TokenRef(id="s"),
                TokenRef(id="invalid_token"),
                TokenRef(id="invalid_token"),
            ],
        )
        assert registry.validate_screen_payload(payload) == ["invalid_token"]

    @pytest.mark.unit
    def test_missing_descendants(self):
        """Missing grandchildren are found through registered containers."""
        card, title, body = _card_with_children()
        registry = TokenRegistry([card, card.children[0], title])
        payload = ScreenPayload(id="home", tokens=[TokenRef(id="card")])
        assert registry.validate_screen_payload(payload) == ["body"]

    @pytest.mark.unit
    def test_terminates_on_cycles(self):
        """Cyclic references do not loop forever."""
        a = ColumnToken(id="a", children=(RowToken(id="b"),))
        b = RowToken(id="b", children=(ColumnToken(id="a"), SpacerToken(id="gone")))
        registry = TokenRegistry([a, b])
        payload = ScreenPayload(id="loop", tokens=[TokenRef(id="a")])
        assert registry.validate_screen_payload(payload) == ["gone"]


class TestRegistrationStats:
    """Tests for get_registration_stats."""

    @pytest.mark.unit
    def test_stats(self):
        """Counts per variant and sorted IDs."""
        registry = TokenRegistry(
            [TextToken(id="b", text="x"), TextToken(id="a", text="y"), SpacerToken(id="c")]
        )
        stats = registry.get_registration_stats()
        assert stats.total_tokens == 3
        assert stats.tokens_by_variant == {"Text": 2, "Spacer": 1}
        assert stats.sorted_ids == ["a", "b", "c"]
        assert stats.to_dict() == {
            "totalTokens": 3,
            "tokensByVariant": {"Text": 2, "Spacer": 1},
            "sortedIds": ["a", "b", "c"],
        }

    @pytest.mark.unit
    def test_empty_stats(self):
        """An empty registry reports zero tokens under the same keys."""
        assert TokenRegistry().get_registration_stats().to_dict() == {
            "totalTokens": 0,
            "tokensByVariant": {},
            "sortedIds": [],
        }
