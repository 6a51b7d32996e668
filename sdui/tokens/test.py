"""Unit tests for token models, metadata and codec."""

import pytest
from pydantic import ValidationError

from sdui.tokens import (
    TOKEN_MODELS,
    VARIANT_REGISTRY,
    AsyncImageToken,
    ButtonToken,
    Capability,
    CardToken,
    ColumnToken,
    DividerToken,
    FieldKind,
    LazyColumnToken,
    RowToken,
    SliderToken,
    SpacerToken,
    TextToken,
    TokenDecodeError,
    TokenType,
    action_of,
    capabilities_of,
    child_ids,
    children_of,
    decode_token,
    decode_token_json,
    encode_token,
    get_variant_meta,
    get_variants_with,
    infer_token_type,
    is_container,
    is_interactive,
    template_paths,
    walk,
    with_children,
)
from sdui.values import (
    Accessibility,
    Action,
    ActionType,
    Background,
    BoxAlignment,
    ButtonStyle,
    CardShape,
    ClipShape,
    ColorValue,
    ContentScale,
    ErrorFallback,
    HorizontalAlignment,
    LiveRegion,
    LoadingPlaceholder,
    Margin,
    Padding,
    Role,
    TextAlignValue,
    TextOverflowValue,
    TextStyle,
    ValueRange,
    VerticalAlignment,
)


def _rich_tree() -> CardToken:
    return CardToken(
        id="card",
        version=2,
        padding=Padding(all=16),
        elevation=4,
        on_click=Action(type=ActionType.NAVIGATE, data={"target": "details"}),
        children=(
            ColumnToken(
                id="column",
                children=(
                    TextToken(
                        id="title",
                        text="Hello {{name}}",
                        style=TextStyle.HEADLINE_MEDIUM,
                        color=ColorValue(red=10, green=20, blue=30),
                        max_lines=2,
                        accessibility=Accessibility(role=Role.HEADER, label="Title"),
                    ),
                    SpacerToken(id="gap", height=8),
                    DividerToken(id="rule"),
                    SliderToken(
                        id="volume",
                        initial_value=0.5,
                        value_range=ValueRange(start=0.0, end=1.0),
                        steps=10,
                    ),
                    AsyncImageToken(
                        id="hero",
                        url="https://example.com/{{img}}.png",
                        width_dp=120,
                        error_fallback=ErrorFallback(text="Image unavailable"),
                    ),
                    ButtonToken(
                        id="cta",
                        text="Go",
                        on_click=Action(
                            type=ActionType.OPEN_URL, data={"url": "https://example.com"}
                        ),
                    ),
                ),
            ),
        ),
    )


_REQUIRED_FIELDS: dict[TokenType, dict] = {
    TokenType.TEXT: {"text": "Hi"},
    TokenType.BUTTON: {"text": "Go", "on_click": Action(type=ActionType.CUSTOM)},
    TokenType.ASYNC_IMAGE: {"url": "https://example.com/a.png"},
}


def _minimal(token_type: TokenType):
    return TOKEN_MODELS[token_type](id="node", **_REQUIRED_FIELDS.get(token_type, {}))


def _populated(token_type: TokenType):
    """Build a token of the given variant with every optional field set."""
    color = ColorValue(red=10, green=20, blue=30, alpha=128)
    margin = Margin(horizontal=4, top=2)
    common = {
        "id": "full",
        "version": 2,
        "accessibility": Accessibility(
            role=Role.BUTTON,
            label="Full {{name}}",
            live_region=LiveRegion.POLITE,
            is_enabled=False,
            is_focusable=False,
        ),
    }
    container = {
        "padding": Padding(start=1, top=2, end=3, bottom=4),
        "margin": margin,
        "background": Background(
            color=color, border_color=color, border_width=1, corner_radius=8
        ),
        "children": (
            TextToken(id="child_text", text="{{title}}"),
            SpacerToken(id="child_gap", height=8),
        ),
    }
    click = Action(type=ActionType.NAVIGATE, data={"target": "details"})

    if token_type in (TokenType.COLUMN, TokenType.LAZY_COLUMN):
        fields = {**container, "alignment": HorizontalAlignment.END}
    elif token_type in (TokenType.ROW, TokenType.LAZY_ROW):
        fields = {**container, "alignment": VerticalAlignment.BOTTOM}
    elif token_type is TokenType.BOX:
        fields = {**container, "content_alignment": BoxAlignment.BOTTOM_END}
    elif token_type is TokenType.CARD:
        fields = {
            **container,
            "elevation": 6,
            "shape": CardShape.ROUNDED16,
            "on_click": click,
        }
    elif token_type is TokenType.TEXT:
        fields = {
            "text": "Hello {{name}}",
            "style": TextStyle.TITLE_LARGE,
            "color": color,
            "max_lines": 2,
            "overflow": TextOverflowValue.ELLIPSIS,
            "text_align": TextAlignValue.JUSTIFY,
            "margin": margin,
        }
    elif token_type is TokenType.SPACER:
        fields = {"width": 12, "height": 24}
    elif token_type is TokenType.DIVIDER:
        fields = {"thickness": 3, "color": color, "margin": margin}
    elif token_type is TokenType.BUTTON:
        fields = {
            "text": "Open {{item}}",
            "style": ButtonStyle.OUTLINED,
            "enabled": False,
            "margin": margin,
            "on_click": click,
        }
    elif token_type is TokenType.SLIDER:
        fields = {
            "initial_value": 2.5,
            "value_range": ValueRange(start=0.0, end=10.0),
            "steps": 4,
            "enabled": False,
            "margin": margin,
            "on_change": Action(type=ActionType.CUSTOM, data={"event": "volume"}),
            "on_click": click,
        }
    else:
        fields = {
            "url": "https://example.com/{{id}}.png",
            "width_dp": 64,
            "height_dp": 48,
            "layout_weight": 1.5,
            "clip": ClipShape.CIRCLE,
            "content_scale": ContentScale.CROP,
            "margin": margin,
            "error_fallback": ErrorFallback(
                text="Unavailable", icon_url="https://example.com/x.png"
            ),
            "loading_placeholder": LoadingPlaceholder(
                show_progress_indicator=False, background_color=color
            ),
            "on_click": click,
        }
    return TOKEN_MODELS[token_type](**common, **fields)


class TestTokenType:
    """Tests for TokenType enum."""

    @pytest.mark.unit
    def test_all_variants_exist(self):
        """All twelve variants are defined with their wire tags."""
        expected = {
            "Column",
            "Row",
            "Box",
            "LazyColumn",
            "LazyRow",
            "Card",
            "Text",
            "Spacer",
            "Divider",
            "Button",
            "Slider",
            "AsyncImage",
        }
        assert {t.value for t in TokenType} == expected

    @pytest.mark.unit
    def test_token_type_property(self):
        """Instances report their variant."""
        assert TextToken(id="t", text="x").token_type is TokenType.TEXT
        assert LazyColumnToken(id="l").token_type is TokenType.LAZY_COLUMN


class TestTokenModels:
    """Tests for token construction and defaults."""

    @pytest.mark.unit
    def test_defaults(self):
        """Optional fields take their documented defaults."""
        text = TextToken(id="t", text="Hi")
        assert text.version == 1
        assert text.style == TextStyle.BODY_MEDIUM
        assert text.accessibility is None
        assert text.text.raw == "Hi"

        card = CardToken(id="c")
        assert card.elevation == 1
        assert card.children == ()

        slider = SliderToken(id="s")
        assert slider.value_range == ValueRange(start=0.0, end=1.0)

    @pytest.mark.unit
    def test_min_supported_version(self):
        """Every variant shares the class-level floor."""
        for meta in VARIANT_REGISTRY.values():
            assert meta.model.min_supported_version == 1

    @pytest.mark.unit
    def test_tokens_are_immutable(self):
        """Assigning to a field raises."""
        token = TextToken(id="t", text="Hi")
        with pytest.raises(ValidationError):
            token.version = 2

    @pytest.mark.unit
    def test_button_requires_action(self):
        """Button without onClick is rejected."""
        with pytest.raises(ValidationError):
            ButtonToken(id="b", text="Go")

    @pytest.mark.unit
    def test_children_accept_lists(self):
        """Children passed as a list are stored as a tuple."""
        column = ColumnToken(id="c", children=[TextToken(id="t", text="x")])
        assert isinstance(column.children, tuple)
        assert child_ids(column) == ["t"]


class TestCapabilities:
    """Tests for capability queries."""

    @pytest.mark.unit
    def test_card_is_container_and_interactive(self):
        """Card combines both capabilities."""
        card = CardToken(id="c")
        assert capabilities_of(card) == Capability.CONTAINER | Capability.INTERACTIVE
        assert is_container(card)
        assert is_interactive(card)

    @pytest.mark.unit
    def test_leaves(self):
        """Plain leaves have no capabilities."""
        for token in (TextToken(id="t", text="x"), SpacerToken(id="s"), DividerToken(id="d")):
            assert capabilities_of(token) == Capability.NONE
            assert children_of(token) is None
            assert action_of(token) is None

    @pytest.mark.unit
    def test_action_of(self):
        """Interactive variants expose their action."""
        action = Action(type=ActionType.CUSTOM)
        assert action_of(ButtonToken(id="b", text="x", on_click=action)) == action
        assert action_of(AsyncImageToken(id="i", url="u")) is None
        assert action_of(SliderToken(id="s", on_change=action)) == action
        assert action_of(RowToken(id="r")) is None

    @pytest.mark.unit
    def test_get_variants_with(self):
        """Capability lookups partition the variants."""
        containers = get_variants_with(Capability.CONTAINER)
        interactive = get_variants_with(Capability.INTERACTIVE)
        assert len(containers) == 6
        assert set(interactive) == {
            TokenType.CARD,
            TokenType.BUTTON,
            TokenType.SLIDER,
            TokenType.ASYNC_IMAGE,
        }

    @pytest.mark.unit
    def test_walk_is_depth_first(self):
        """walk yields the root then descendants in order."""
        ids = [t.id for t in walk(_rich_tree())]
        assert ids == ["card", "column", "title", "gap", "rule", "volume", "hero", "cta"]

    @pytest.mark.unit
    def test_with_children(self):
        """Containers can be rebuilt with new children; leaves cannot."""
        column = ColumnToken(id="c")
        rebuilt = with_children(column, (SpacerToken(id="s"),))
        assert child_ids(rebuilt) == ["s"]
        assert column.children == ()

        with pytest.raises(TypeError):
            with_children(TextToken(id="t", text="x"), ())


class TestVariantMetadata:
    """Tests for the variant metadata table."""

    @pytest.mark.unit
    def test_every_variant_described(self):
        """Each TokenType has metadata pointing at its model."""
        for token_type in TokenType:
            meta = get_variant_meta(token_type)
            assert meta.type is token_type
            assert meta.model.model_fields["type"].default == token_type.value

    @pytest.mark.unit
    def test_fields_match_models(self):
        """Metadata wire names cover exactly the model's fields."""
        for meta in VARIANT_REGISTRY.values():
            model_names = {
                (info.alias or name)
                for name, info in meta.model.model_fields.items()
                if name != "type"
            }
            meta_names = {f.wire_name for f in meta.all_fields()}
            assert meta_names == model_names, meta.type

    @pytest.mark.unit
    def test_children_field_only_on_containers(self):
        """CHILDREN fields appear exactly on container variants."""
        for meta in VARIANT_REGISTRY.values():
            has_children = any(f.kind is FieldKind.CHILDREN for f in meta.fields)
            assert has_children == meta.is_container

    @pytest.mark.unit
    def test_lookup_by_wire_tag(self):
        """Variants can be looked up by wire tag; unknown tags raise KeyError."""
        assert get_variant_meta("Slider").type is TokenType.SLIDER
        with pytest.raises(KeyError):
            get_variant_meta("Carousel")

    @pytest.mark.unit
    def test_template_paths(self):
        """Template-bearing fields are discovered through value objects."""
        paths = template_paths(TokenType.ASYNC_IMAGE)
        assert ("url",) in paths
        assert ("errorFallback", "text") in paths
        assert ("a11y", "label") in paths
        assert template_paths(TokenType.SPACER) == (("a11y", "label"),)


class TestCodec:
    """Tests for encode/decode."""

    @pytest.mark.unit
    def test_encode_uses_wire_names(self):
        """Encoded output is camelCase with an explicit type tag."""
        data = encode_token(_rich_tree())
        assert data["type"] == "Card"
        assert data["onClick"] == {"type": "Navigate", "data": {"target": "details"}}
        title = data["children"][0]["children"][0]
        assert title["type"] == "Text"
        assert title["maxLines"] == 2
        assert title["a11y"] == {
            "role": "Header",
            "label": "Title",
            "liveRegion": "Off",
            "isEnabled": True,
            "isFocusable": True,
        }
        assert "textAlign" not in title

    @pytest.mark.unit
    def test_round_trip(self):
        """Decoding an encoded tree yields an equal tree."""
        tree = _rich_tree()
        assert decode_token(encode_token(tree)) == tree

    @pytest.mark.unit
    @pytest.mark.parametrize("token_type", list(TokenType))
    def test_round_trip_minimal(self, token_type):
        """Every variant with only its required fields survives encode and decode."""
        token = _minimal(token_type)
        decoded = decode_token(encode_token(token))
        assert decoded == token
        assert decoded.token_type is token_type

    @pytest.mark.unit
    @pytest.mark.parametrize("token_type", list(TokenType))
    def test_round_trip_populated(self, token_type):
        """Every variant with all optional fields set survives encode and decode."""
        token = _populated(token_type)
        data = encode_token(token)
        assert data["type"] == token_type.value
        assert decode_token(data) == token

    @pytest.mark.unit
    def test_decode_missing_type(self):
        """Untagged payloads are rejected by default."""
        with pytest.raises(TokenDecodeError):
            decode_token({"id": "t", "version": 1, "text": "Hi"})

    @pytest.mark.unit
    def test_decode_unknown_type(self):
        """Unknown tags are rejected."""
        with pytest.raises(TokenDecodeError) as exc:
            decode_token({"type": "Carousel", "id": "x", "version": 1})
        assert exc.value.errors

    @pytest.mark.unit
    def test_decode_invalid_field(self):
        """Invalid field values are rejected."""
        with pytest.raises(TokenDecodeError):
            decode_token({"type": "Text", "id": "t", "version": "one", "text": "Hi"})

    @pytest.mark.unit
    def test_decode_non_object(self):
        """Non-object payloads are rejected."""
        with pytest.raises(TokenDecodeError):
            decode_token(["not", "a", "token"])

    @pytest.mark.unit
    def test_decode_with_inference(self):
        """Opt-in inference tags untagged nodes recursively."""
        data = {
            "id": "root",
            "version": 1,
            "alignment": "Center",
            "children": [
                {"id": "t", "version": 1, "text": "Hi"},
                {"id": "b", "version": 1, "text": "Go", "onClick": {"type": "Custom"}},
            ],
        }
        token = decode_token(data, infer_missing_type=True)
        assert isinstance(token, ColumnToken)
        assert isinstance(token.children[0], TextToken)
        assert isinstance(token.children[1], ButtonToken)

    @pytest.mark.unit
    def test_decode_json_malformed(self):
        """Malformed JSON text raises TokenDecodeError."""
        with pytest.raises(TokenDecodeError):
            decode_token_json("{not json")


class TestInferTokenType:
    """Tests for legacy shape inference."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "data,expected",
        [
            ({"children": [], "alignment": "Start"}, TokenType.COLUMN),
            ({"children": [], "alignment": "Top"}, TokenType.ROW),
            ({"children": [], "contentAlignment": "Center"}, TokenType.BOX),
            ({"children": [], "elevation": 2}, TokenType.CARD),
            ({"children": []}, TokenType.COLUMN),
            ({"text": "x"}, TokenType.TEXT),
            ({"text": "x", "onClick": {}}, TokenType.BUTTON),
            ({"url": "u"}, TokenType.ASYNC_IMAGE),
            ({"initialValue": 0.5}, TokenType.SLIDER),
            ({"thickness": 2}, TokenType.DIVIDER),
            ({"height": 8}, TokenType.SPACER),
        ],
    )
    def test_inference_rules(self, data, expected):
        """Presence of characteristic fields selects the variant."""
        assert infer_token_type(data) is expected

    @pytest.mark.unit
    def test_unrecognized_shape(self):
        """Shapes matching no rule yield None."""
        assert infer_token_type({"id": "x", "version": 1}) is None
