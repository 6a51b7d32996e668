"""Unit tests for value objects."""

import pytest
from pydantic import ValidationError

from sdui.values import (
    Accessibility,
    Action,
    ActionType,
    Background,
    ColorValue,
    EdgeInsets,
    LiveRegion,
    LoadingPlaceholder,
    Margin,
    Padding,
    Role,
    TemplateString,
    TextStyle,
    ValueRange,
)


class TestTemplateString:
    """Tests for placeholder resolution."""

    @pytest.mark.unit
    def test_resolves_known_key(self):
        assert TemplateString("Hello {{name}}").resolve({"name": "World"}) == (
            "Hello World"
        )

    @pytest.mark.unit
    def test_unknown_key_left_verbatim(self):
        assert TemplateString("{{x}}").resolve({}) == "{{x}}"

    @pytest.mark.unit
    def test_mixed_known_and_unknown(self):
        template = TemplateString("{{greeting}}, {{name}}!")
        assert template.resolve({"greeting": "Hi"}) == "Hi, {{name}}!"

    @pytest.mark.unit
    def test_values_are_stringified(self):
        assert TemplateString("{{n}} items").resolve({"n": 3}) == "3 items"

    @pytest.mark.unit
    def test_none_binding_left_verbatim(self):
        assert TemplateString("{{a}}").resolve({"a": None}) == "{{a}}"

    @pytest.mark.unit
    def test_repeated_placeholder(self):
        template = TemplateString("{{a}}-{{a}}")
        assert template.resolve({"a": "x"}) == "x-x"
        assert template.placeholders() == ["a"]

    @pytest.mark.unit
    def test_no_placeholders(self):
        template = TemplateString("plain")
        assert template.resolve({"plain": "nope"}) == "plain"
        assert template.placeholders() == []

    @pytest.mark.unit
    def test_serializes_as_bare_string(self):
        template = TemplateString("{{title}}")
        assert template.model_dump() == "{{title}}"
        assert TemplateString.model_validate("{{title}}") == template

    @pytest.mark.unit
    def test_blank_detection(self):
        assert TemplateString("   ").is_blank()
        assert not TemplateString("x").is_blank()


class TestSpacing:
    """Tests for padding/margin precedence."""

    @pytest.mark.unit
    def test_all_overrides_everything(self):
        insets = Padding(all=8, horizontal=4, start=1, bottom=2).resolve()
        assert insets == EdgeInsets(start=8, top=8, end=8, bottom=8)

    @pytest.mark.unit
    def test_axis_overrides_sides(self):
        insets = Margin(horizontal=12, vertical=6, start=1, top=2).resolve()
        assert insets == EdgeInsets(start=12, top=6, end=12, bottom=6)

    @pytest.mark.unit
    def test_single_sides(self):
        insets = Padding(start=1, top=2, end=3, bottom=4).resolve()
        assert insets == EdgeInsets(start=1, top=2, end=3, bottom=4)

    @pytest.mark.unit
    def test_missing_sides_are_zero(self):
        assert Padding().resolve() == EdgeInsets()
        assert Padding(top=5).resolve() == EdgeInsets(top=5)

    @pytest.mark.unit
    def test_zero_all_still_wins(self):
        insets = Padding(all=0, start=10).resolve()
        assert insets.start == 0

    @pytest.mark.unit
    def test_frozen(self):
        padding = Padding(all=4)
        with pytest.raises(ValidationError):
            padding.all = 8


class TestColorValue:
    """Tests for ColorValue."""

    @pytest.mark.unit
    def test_default_alpha(self):
        assert ColorValue(red=1, green=2, blue=3).alpha == 255

    @pytest.mark.unit
    def test_out_of_range_is_constructible(self):
        color = ColorValue(red=300, green=0, blue=0)
        assert color.red == 300

    @pytest.mark.unit
    def test_to_hex(self):
        assert ColorValue(red=255, green=0, blue=16, alpha=128).to_hex() == (
            "#FF001080"
        )


class TestWireAliases:
    """Value objects use camelCase keys on the wire."""

    @pytest.mark.unit
    def test_background_aliases(self):
        background = Background(
            color=ColorValue(red=0, green=0, blue=0),
            border_width=2,
            corner_radius=8,
        )
        data = background.model_dump(by_alias=True, exclude_none=True)
        assert data["borderWidth"] == 2
        assert data["cornerRadius"] == 8
        assert "borderColor" not in data

    @pytest.mark.unit
    def test_accessibility_from_wire(self):
        a11y = Accessibility.model_validate(
            {"role": "Header", "label": "Title", "liveRegion": "Polite"}
        )
        assert a11y.role is Role.HEADER
        assert a11y.live_region is LiveRegion.POLITE
        assert a11y.label.raw == "Title"
        assert a11y.is_focusable is True

    @pytest.mark.unit
    def test_loading_placeholder_alias(self):
        placeholder = LoadingPlaceholder.model_validate(
            {"showProgressIndicator": False}
        )
        assert placeholder.show_progress_indicator is False

    @pytest.mark.unit
    def test_unknown_keys_ignored(self):
        action = Action.model_validate(
            {"type": "Navigate", "data": {"target": "home"}, "analytics": True}
        )
        assert action.type is ActionType.NAVIGATE
        assert action.data == {"target": "home"}


class TestEnums:
    """Tests for closed enums."""

    @pytest.mark.unit
    def test_action_types(self):
        assert {a.value for a in ActionType} == {
            "Navigate",
            "DeepLink",
            "OpenUrl",
            "Custom",
        }

    @pytest.mark.unit
    def test_text_style_count(self):
        assert len(TextStyle) == 15

    @pytest.mark.unit
    def test_unknown_enum_rejected(self):
        with pytest.raises(ValidationError):
            Action.model_validate({"type": "Teleport"})


class TestValueRange:
    """Tests for slider ranges."""

    @pytest.mark.unit
    def test_contains_is_inclusive(self):
        value_range = ValueRange(start=0.0, end=10.0)
        assert value_range.contains(0.0)
        assert value_range.contains(10.0)
        assert not value_range.contains(10.5)
