"""Tests for output module."""

import json

import pytest

from sdui.output import format_resolved_screen, format_token_tree, render_token
from sdui.registry import TokenRegistry
from sdui.screen import ScreenPayload, ScreenResolver, TokenRef
from sdui.tokens import ColumnToken, SpacerToken, TextToken, encode_token


@pytest.fixture
def sample_tree():
    """Create sample token tree for testing."""
    return ColumnToken(
        id="root",
        children=(
            TextToken(id="greeting", text="Hello {{name}}"),
            ColumnToken(id="inner", children=(SpacerToken(id="gap", height=8),)),
        ),
    )


class TestFormatTokenTree:
    """Tests for format_token_tree function."""

    @pytest.mark.unit
    def test_single_node(self):
        """Test formatting single node."""
        result = format_token_tree(SpacerToken(id="gap"))
        assert result == "gap [Spacer, v1]"

    @pytest.mark.unit
    def test_nested_tree(self, sample_tree):
        """Test formatting nested tree."""
        assert format_token_tree(sample_tree).splitlines() == [
            "root [Column, v1]",
            "├── greeting [Text, v1, 'Hello {{name}}']",
            "└── inner [Column, v1]",
            "    └── gap [Spacer, v1]",
        ]


class TestFormatResolvedScreen:
    """Tests for format_resolved_screen function."""

    @pytest.mark.unit
    def test_bound_text_and_issues(self, sample_tree):
        """Resolved text is shown and issues are listed."""
        registry = TokenRegistry(
            [sample_tree, *sample_tree.children, SpacerToken(id="gap", height=8)]
        )
        payload = ScreenPayload(
            id="home",
            tokens=[TokenRef(id="greeting", bind={"name": "Ada"}), TokenRef(id="gone")],
        )
        result = format_resolved_screen(ScreenResolver(registry).resolve(payload))
        assert "greeting [Text, 'Hello Ada']" in result
        assert "gone [missing]" in result
        assert "Issues:" in result


class TestRenderToken:
    """Tests for render_token."""

    @pytest.mark.unit
    def test_json_is_normalised(self, sample_tree):
        """The JSON part is the wire encoding."""
        output = render_token(sample_tree)
        assert json.loads(output.json_text) == encode_token(sample_tree)
        assert output.to_text().startswith("root [Column, v1]")
