"""Unit tests for validation module."""

import pytest

from sdui.tokens import (
    AsyncImageToken,
    ButtonToken,
    CardToken,
    ColumnToken,
    DividerToken,
    SliderToken,
    SpacerToken,
    TextToken,
)
from sdui.validation import ValidationError, is_valid, validate_token
from sdui.values import (
    Accessibility,
    Action,
    ActionType,
    Background,
    ColorValue,
    Role,
    ValueRange,
)


class TestValidateToken:
    """Tests for validate_token function."""

    @pytest.mark.unit
    def test_valid_token(self):
        """Well-formed token passes validation."""
        token = TextToken(id="title", text="Hello", max_lines=2)
        assert validate_token(token) == []
        assert is_valid(token)

    @pytest.mark.unit
    def test_invalid_version(self):
        """Versions below 1 are reported."""
        errors = validate_token(SpacerToken(id="s", version=0))
        assert len(errors) == 1
        assert errors[0].error_type == "invalid_version"
        assert errors[0].message == "Token 's' has invalid version: 0"

    @pytest.mark.unit
    def test_blank_accessibility_label(self):
        """Blank a11y labels are reported."""
        token = DividerToken(
            id="d", accessibility=Accessibility(role=Role.NONE, label="   ")
        )
        errors = validate_token(token)
        assert [e.error_type for e in errors] == ["empty_label"]

    @pytest.mark.unit
    def test_blank_text(self):
        """Blank text content is reported."""
        errors = validate_token(TextToken(id="t", text=""))
        assert errors[0].message == "TextToken 't' has empty text content"
        assert errors[0].error_type == "empty_content"

    @pytest.mark.unit
    def test_text_max_lines(self):
        """maxLines must be positive."""
        errors = validate_token(TextToken(id="t", text="x", max_lines=0))
        assert errors[0].error_type == "invalid_range"
        assert "maxLines" in errors[0].message

    @pytest.mark.unit
    def test_image_checks_accumulate(self):
        """All image findings are reported together."""
        token = AsyncImageToken(
            id="img", url=" ", width_dp=0, height_dp=-1, layout_weight=-0.5
        )
        messages = [str(e) for e in validate_token(token)]
        assert messages == [
            "AsyncImageToken 'img' has empty URL",
            "AsyncImageToken 'img' has invalid width: 0",
            "AsyncImageToken 'img' has invalid height: -1",
            "AsyncImageToken 'img' has invalid layout weight: -0.5",
        ]

    @pytest.mark.unit
    def test_slider_range(self):
        """Inverted ranges and out-of-range initial values are reported."""
        token = SliderToken(
            id="s", initial_value=5.0, value_range=ValueRange(start=1.0, end=0.0), steps=0
        )
        types = [e.error_type for e in validate_token(token)]
        assert types == ["invalid_range", "invalid_range", "invalid_range"]

    @pytest.mark.unit
    def test_slider_in_range(self):
        """Initial value on the boundary is accepted."""
        token = SliderToken(id="s", initial_value=1.0, value_range=ValueRange(start=0, end=1))
        assert is_valid(token)

    @pytest.mark.unit
    def test_spacer_and_divider(self):
        """Negative spacer sizes and non-positive thickness are reported."""
        assert not is_valid(SpacerToken(id="s", width=-1))
        assert is_valid(SpacerToken(id="s", width=0, height=0))
        assert not is_valid(DividerToken(id="d", thickness=0))

    @pytest.mark.unit
    def test_color_channels(self):
        """Every out-of-range channel is reported."""
        token = TextToken(
            id="t", text="x", color=ColorValue(red=256, green=0, blue=-1, alpha=255)
        )
        messages = [e.message for e in validate_token(token)]
        assert messages == [
            "Token 't' has invalid red color value: 256",
            "Token 't' has invalid blue color value: -1",
        ]

    @pytest.mark.unit
    def test_background_colors(self):
        """Container background colors are checked."""
        token = ColumnToken(
            id="c",
            background=Background(border_color=ColorValue(red=0, green=300, blue=0)),
        )
        errors = validate_token(token)
        assert len(errors) == 1
        assert "green" in errors[0].message

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "action_type,key",
        [
            (ActionType.NAVIGATE, "target"),
            (ActionType.DEEP_LINK, "url"),
            (ActionType.OPEN_URL, "url"),
        ],
    )
    def test_action_required_data(self, action_type, key):
        """Actions missing their required data key are reported."""
        token = ButtonToken(id="b", text="Go", on_click=Action(type=action_type))
        errors = validate_token(token)
        assert len(errors) == 1
        assert errors[0].error_type == "invalid_action"
        assert errors[0].message == (
            f"Token 'b' {action_type.value} action missing required '{key}' data"
        )

        fixed = ButtonToken(
            id="b", text="Go", on_click=Action(type=action_type, data={key: "x"})
        )
        assert is_valid(fixed)

    @pytest.mark.unit
    def test_custom_action_unchecked(self):
        """Custom actions accept any data."""
        token = CardToken(id="c", on_click=Action(type=ActionType.CUSTOM))
        assert is_valid(token)

    @pytest.mark.unit
    def test_children_not_visited(self):
        """Invalid children do not make their parent invalid."""
        token = ColumnToken(id="c", children=(TextToken(id="t", text=""),))
        assert is_valid(token)

    @pytest.mark.unit
    def test_error_is_dataclass(self):
        """Findings compare by value."""
        assert ValidationError("a", "m", "t") == ValidationError("a", "m", "t")
