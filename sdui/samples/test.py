"""Unit tests for the canned samples."""

import pytest

from sdui.samples import (
    SAMPLE_SCREENS,
    build_sample,
    build_sample_registry,
    list_samples,
)
from sdui.schema import SchemaDecoder
from sdui.tokens import TokenType, encode_token, walk
from sdui.validation import validate_token


class TestSamples:
    """Tests for sample builders."""

    @pytest.mark.unit
    def test_list_samples(self):
        """Every documented sample name is available."""
        assert list_samples() == [
            "article-card",
            "composed-cards",
            "dashboard",
            "enhanced-card",
            "form",
            "lazy-list",
            "profile-card",
            "slider",
        ]

    @pytest.mark.unit
    def test_unknown_sample(self):
        """Unknown names raise KeyError listing the options."""
        with pytest.raises(KeyError, match="profile-card"):
            build_sample("carousel")

    @pytest.mark.unit
    @pytest.mark.parametrize("name", list_samples())
    def test_samples_are_valid(self, name):
        """Every node of every sample passes field validation and the schema."""
        token = build_sample(name)
        for node in walk(token):
            assert validate_token(node) == []
        assert SchemaDecoder().validate(encode_token(token)) == []

    @pytest.mark.unit
    def test_enhanced_card_shape(self):
        """The enhanced card holds title, description and button."""
        card = build_sample("enhanced-card")
        assert card.token_type is TokenType.CARD
        assert [c.id for c in card.children] == ["title", "description", "button"]
        assert card.children[0].text.placeholders() == ["title"]

    @pytest.mark.unit
    def test_lazy_list_items(self):
        """The lazy list holds five cards."""
        lazy = build_sample("lazy-list")
        assert lazy.token_type is TokenType.LAZY_COLUMN
        assert [c.id for c in lazy.children] == [f"list_item_{i}" for i in range(1, 6)]


class TestSampleRegistry:
    """Tests for the sample registry and screens."""

    @pytest.mark.unit
    def test_every_node_registered(self):
        """Each node of each sample is registered under its own ID."""
        registry = build_sample_registry()
        for name in list_samples():
            for node in walk(build_sample(name)):
                assert registry.has_token(node.id)

    @pytest.mark.unit
    def test_registry_is_consistent(self):
        """The sample registry has no integrity findings."""
        assert build_sample_registry().validate_registry() == []

    @pytest.mark.unit
    @pytest.mark.parametrize("screen", sorted(SAMPLE_SCREENS))
    def test_screens_resolve(self, screen):
        """Sample screens reference only registered tokens."""
        registry = build_sample_registry()
        assert registry.validate_screen_payload(SAMPLE_SCREENS[screen]) == []
