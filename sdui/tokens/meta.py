"""Variant and value-object metadata.

Explicit field-level description of every token variant and value object,
built once at import time. This table is the single source the schema
generator, the migration engine and the screen resolver consult instead of
inspecting model classes at runtime.

Inherited fields (``children`` from ContainerToken, ``onClick`` from
InteractiveToken) are flagged so schema output can compose them through
``allOf`` rather than repeating them per variant.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

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
    TemplateString,
    TextAlignValue,
    TextOverflowValue,
    TextStyle,
    ValueRange,
    VerticalAlignment,
)

from .lib import TOKEN_CAPABILITIES, TOKEN_MODELS, BaseToken, Capability, TokenType


class FieldKind(str, Enum):
    """How a field is represented on the wire.

    - PRIMITIVE: JSON scalar, or a string map when ``value_type`` is set
    - ENUM: string restricted to an Enum's values
    - REF: nested value object, referenced by definition name
    - CHILDREN: ordered array of tokens
    """

    PRIMITIVE = "primitive"
    ENUM = "enum"
    REF = "ref"
    CHILDREN = "children"


@dataclass(frozen=True)
class FieldMeta:
    """Description of a single wire field."""

    name: str
    wire_name: str
    kind: FieldKind
    json_type: str | None = None
    ref: str | None = None
    enum: type[Enum] | None = None
    required: bool = False
    description: str = ""
    value_type: str | None = None
    inherited: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "wire_name": self.wire_name,
            "kind": self.kind.value,
            "json_type": self.json_type,
            "ref": self.ref,
            "enum": [m.value for m in self.enum] if self.enum else None,
            "required": self.required,
            "description": self.description,
            "inherited": self.inherited,
        }


@dataclass(frozen=True)
class VariantMeta:
    """Rich metadata for one token variant."""

    type: TokenType
    model: type[BaseToken]
    capabilities: Capability
    description: str
    fields: tuple[FieldMeta, ...] = field(default_factory=tuple)

    @property
    def is_container(self) -> bool:
        return Capability.CONTAINER in self.capabilities

    @property
    def is_interactive(self) -> bool:
        return Capability.INTERACTIVE in self.capabilities

    @property
    def own_fields(self) -> tuple[FieldMeta, ...]:
        """Fields declared by the variant itself (not composed from a base)."""
        return tuple(f for f in self.fields if not f.inherited)

    def all_fields(self) -> tuple[FieldMeta, ...]:
        """Common token fields followed by the variant's fields."""
        return TOKEN_FIELDS + self.fields

    def get_field(self, wire_name: str) -> FieldMeta | None:
        for f in self.all_fields():
            if f.wire_name == wire_name:
                return f
        return None

    def required_wire_names(self) -> list[str]:
        return [f.wire_name for f in self.fields if f.required]

    def to_dict(self) -> dict[str, Any]:
        """Convert metadata to dictionary for export."""
        return {
            "type": self.type.value,
            "description": self.description,
            "container": self.is_container,
            "interactive": self.is_interactive,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass(frozen=True)
class ValueMeta:
    """Metadata for a value object referenced by token fields."""

    name: str
    model: type[BaseModel]
    description: str
    json_type: str = "object"
    fields: tuple[FieldMeta, ...] = field(default_factory=tuple)


def _f(
    name: str,
    kind: FieldKind = FieldKind.PRIMITIVE,
    *,
    json_type: str | None = None,
    ref: str | None = None,
    enum: type[Enum] | None = None,
    required: bool = False,
    description: str = "",
    value_type: str | None = None,
    inherited: bool = False,
    wire_name: str | None = None,
) -> FieldMeta:
    return FieldMeta(
        name=name,
        wire_name=wire_name or to_camel(name),
        kind=kind,
        json_type=json_type,
        ref=ref,
        enum=enum,
        required=required,
        description=description,
        value_type=value_type,
        inherited=inherited,
    )


def _ref(name: str, ref: str, **kwargs: Any) -> FieldMeta:
    return _f(name, FieldKind.REF, ref=ref, **kwargs)


def _enum(name: str, enum: type[Enum], **kwargs: Any) -> FieldMeta:
    return _f(name, FieldKind.ENUM, json_type="string", enum=enum, **kwargs)


# =============================================================================
# Common fields
# =============================================================================

TOKEN_FIELDS: tuple[FieldMeta, ...] = (
    _f("id", json_type="string", required=True, description="Unique identifier for the token"),
    _f("version", json_type="integer", required=True, description="Token version"),
    _ref(
        "accessibility",
        "Accessibility",
        wire_name="a11y",
        description="Accessibility properties",
    ),
)

CHILDREN_FIELD = _f(
    "children",
    FieldKind.CHILDREN,
    json_type="array",
    description="Child tokens",
    inherited=True,
)

ON_CLICK_FIELD = _ref(
    "on_click",
    "Action",
    description="Action to perform when clicked",
    inherited=True,
)

_PADDING = _ref("padding", "Padding", description="Inner spacing")
_MARGIN = _ref("margin", "Margin", description="Outer spacing")
_BACKGROUND = _ref("background", "Background", description="Background and border")

_COLUMN_FIELDS = (
    _PADDING,
    _MARGIN,
    _BACKGROUND,
    _enum("alignment", HorizontalAlignment, description="Horizontal alignment of children"),
    CHILDREN_FIELD,
)

_ROW_FIELDS = (
    _PADDING,
    _MARGIN,
    _BACKGROUND,
    _enum("alignment", VerticalAlignment, description="Vertical alignment of children"),
    CHILDREN_FIELD,
)


# =============================================================================
# Variant registry
# =============================================================================


def _variant(
    token_type: TokenType, description: str, *fields: FieldMeta
) -> VariantMeta:
    return VariantMeta(
        type=token_type,
        model=TOKEN_MODELS[token_type],
        capabilities=TOKEN_CAPABILITIES[token_type],
        description=description,
        fields=fields,
    )


VARIANT_REGISTRY: dict[TokenType, VariantMeta] = {
    # === CONTAINERS ===
    TokenType.COLUMN: _variant(
        TokenType.COLUMN,
        "Vertical layout of child tokens",
        *_COLUMN_FIELDS,
    ),
    TokenType.ROW: _variant(
        TokenType.ROW,
        "Horizontal layout of child tokens",
        *_ROW_FIELDS,
    ),
    TokenType.BOX: _variant(
        TokenType.BOX,
        "Stacked layout of child tokens",
        _PADDING,
        _MARGIN,
        _BACKGROUND,
        _enum("content_alignment", BoxAlignment, description="Alignment of stacked content"),
        CHILDREN_FIELD,
    ),
    TokenType.LAZY_COLUMN: _variant(
        TokenType.LAZY_COLUMN,
        "Lazily composed vertical list",
        *_COLUMN_FIELDS,
    ),
    TokenType.LAZY_ROW: _variant(
        TokenType.LAZY_ROW,
        "Lazily composed horizontal list",
        *_ROW_FIELDS,
    ),
    TokenType.CARD: _variant(
        TokenType.CARD,
        "Elevated container with optional click action",
        _PADDING,
        _MARGIN,
        _f("elevation", json_type="integer", description="Card elevation in dp"),
        _enum("shape", CardShape, description="Corner shape of the card"),
        _BACKGROUND,
        ON_CLICK_FIELD,
        CHILDREN_FIELD,
    ),
    # === LEAVES ===
    TokenType.TEXT: _variant(
        TokenType.TEXT,
        "Text content with placeholder support",
        _ref("text", "TemplateString", required=True, description="Text content"),
        _enum("style", TextStyle, description="Typography style"),
        _ref("color", "ColorValue", description="Text color"),
        _f("max_lines", json_type="integer", description="Maximum number of lines"),
        _enum("overflow", TextOverflowValue, description="Overflow behaviour"),
        _enum("text_align", TextAlignValue, description="Text alignment"),
        _MARGIN,
    ),
    TokenType.SPACER: _variant(
        TokenType.SPACER,
        "Empty space",
        _f("width", json_type="integer", description="Width in dp"),
        _f("height", json_type="integer", description="Height in dp"),
    ),
    TokenType.DIVIDER: _variant(
        TokenType.DIVIDER,
        "Separator line",
        _f("thickness", json_type="integer", description="Line thickness in dp"),
        _ref("color", "ColorValue", description="Line color"),
        _MARGIN,
    ),
    # === INTERACTIVE ===
    TokenType.BUTTON: _variant(
        TokenType.BUTTON,
        "Clickable button",
        _ref("text", "TemplateString", required=True, description="Button label"),
        _enum("style", ButtonStyle, description="Button style"),
        _f("enabled", json_type="boolean", description="Whether the button is enabled"),
        _MARGIN,
        _ref(
            "on_click",
            "Action",
            required=True,
            description="Action to perform when clicked",
            inherited=True,
        ),
    ),
    TokenType.SLIDER: _variant(
        TokenType.SLIDER,
        "Value picker over a numeric range",
        _f("initial_value", json_type="number", description="Initial slider value"),
        _ref("value_range", "ValueRange", description="Allowed value range"),
        _f("steps", json_type="integer", description="Number of discrete steps"),
        _f("enabled", json_type="boolean", description="Whether the slider is enabled"),
        _MARGIN,
        _ref("on_change", "Action", description="Action to perform when the value changes"),
        ON_CLICK_FIELD,
    ),
    TokenType.ASYNC_IMAGE: _variant(
        TokenType.ASYNC_IMAGE,
        "Asynchronously loaded remote image",
        _ref("url", "TemplateString", required=True, description="Image URL"),
        _f("width_dp", json_type="integer", description="Width in dp"),
        _f("height_dp", json_type="integer", description="Height in dp"),
        _f("layout_weight", json_type="number", description="Layout weight"),
        _enum("clip", ClipShape, description="Clip shape"),
        _enum("content_scale", ContentScale, description="Content scale"),
        _MARGIN,
        _ref("error_fallback", "ErrorFallback", description="Content shown on error"),
        _ref(
            "loading_placeholder",
            "LoadingPlaceholder",
            description="Content shown while loading",
        ),
        ON_CLICK_FIELD,
    ),
}


# =============================================================================
# Value registry
# =============================================================================


def _spacing_fields(kind: str) -> tuple[FieldMeta, ...]:
    return tuple(
        _f(side, json_type="integer", description=f"{kind} for {side}")
        for side in ("all", "horizontal", "vertical", "start", "top", "end", "bottom")
    )


VALUE_REGISTRY: dict[str, ValueMeta] = {
    "TemplateString": ValueMeta(
        name="TemplateString",
        model=TemplateString,
        description="String with {{placeholder}} support",
        json_type="string",
    ),
    "Padding": ValueMeta(
        name="Padding",
        model=Padding,
        description="Padding configuration",
        fields=_spacing_fields("Padding"),
    ),
    "Margin": ValueMeta(
        name="Margin",
        model=Margin,
        description="Margin configuration",
        fields=_spacing_fields("Margin"),
    ),
    "ColorValue": ValueMeta(
        name="ColorValue",
        model=ColorValue,
        description="RGBA color with 0-255 channels",
        fields=(
            _f("red", json_type="integer", required=True, description="Red channel"),
            _f("green", json_type="integer", required=True, description="Green channel"),
            _f("blue", json_type="integer", required=True, description="Blue channel"),
            _f("alpha", json_type="integer", description="Alpha channel"),
        ),
    ),
    "Background": ValueMeta(
        name="Background",
        model=Background,
        description="Background configuration",
        fields=(
            _ref("color", "ColorValue", description="Fill color"),
            _ref("border_color", "ColorValue", description="Border color"),
            _f("border_width", json_type="integer", description="Border width in dp"),
            _f("corner_radius", json_type="integer", description="Corner radius in dp"),
        ),
    ),
    "Action": ValueMeta(
        name="Action",
        model=Action,
        description="Action configuration",
        fields=(
            _enum("type", ActionType, required=True, description="Action type"),
            _f(
                "data",
                json_type="object",
                value_type="string",
                description="Action data",
            ),
        ),
    ),
    "Accessibility": ValueMeta(
        name="Accessibility",
        model=Accessibility,
        description="Accessibility properties",
        fields=(
            _enum("role", Role, required=True, description="Semantic role"),
            _ref("label", "TemplateString", required=True, description="Spoken label"),
            _enum("live_region", LiveRegion, description="Live region politeness"),
            _f("is_enabled", json_type="boolean", description="Whether the element is enabled"),
            _f("is_focusable", json_type="boolean", description="Whether the element is focusable"),
        ),
    ),
    "ValueRange": ValueMeta(
        name="ValueRange",
        model=ValueRange,
        description="Closed numeric range",
        fields=(
            _f("start", json_type="number", description="Range start"),
            _f("end", json_type="number", description="Range end"),
        ),
    ),
    "ErrorFallback": ValueMeta(
        name="ErrorFallback",
        model=ErrorFallback,
        description="Fallback content for failed image loads",
        fields=(
            _ref("text", "TemplateString", description="Fallback text"),
            _ref("icon_url", "TemplateString", description="Fallback icon URL"),
        ),
    ),
    "LoadingPlaceholder": ValueMeta(
        name="LoadingPlaceholder",
        model=LoadingPlaceholder,
        description="Placeholder shown while an image loads",
        fields=(
            _f(
                "show_progress_indicator",
                json_type="boolean",
                description="Whether to show a progress indicator",
            ),
            _ref("background_color", "ColorValue", description="Placeholder color"),
        ),
    ),
}


# =============================================================================
# Lookup functions
# =============================================================================


def get_variant_meta(token_type: TokenType | str) -> VariantMeta:
    """Get rich metadata for a token variant.

    Args:
        token_type: The variant to look up (enum member or wire tag).

    Returns:
        VariantMeta with the variant's capabilities and fields.

    Raises:
        KeyError: If the variant is unknown.
    """
    try:
        return VARIANT_REGISTRY[TokenType(token_type)]
    except ValueError as e:
        raise KeyError(token_type) from e


def get_variants_with(capability: Capability) -> list[TokenType]:
    """Get all variants carrying a capability.

    Args:
        capability: The capability flag to filter by.

    Returns:
        List of TokenType values, in declaration order.
    """
    return [
        meta.type
        for meta in VARIANT_REGISTRY.values()
        if capability in meta.capabilities
    ]


def get_value_meta(name: str) -> ValueMeta:
    """Get metadata for a value object definition name."""
    return VALUE_REGISTRY[name]


def template_paths(token_type: TokenType | str) -> tuple[tuple[str, ...], ...]:
    """Wire paths of every TemplateString reachable from a variant.

    Nested value objects are followed, so an image yields
    ``("url",)``, ``("errorFallback", "text")`` and so on. Children are not
    followed.
    """
    paths: list[tuple[str, ...]] = []

    def _collect(fields: tuple[FieldMeta, ...], prefix: tuple[str, ...]) -> None:
        for f in fields:
            if f.kind is not FieldKind.REF:
                continue
            if f.ref == "TemplateString":
                paths.append(prefix + (f.wire_name,))
            elif f.ref in VALUE_REGISTRY:
                _collect(VALUE_REGISTRY[f.ref].fields, prefix + (f.wire_name,))

    _collect(get_variant_meta(token_type).all_fields(), ())
    return tuple(paths)


__all__ = [
    # Types
    "FieldKind",
    "FieldMeta",
    "VariantMeta",
    "ValueMeta",
    # Tables
    "TOKEN_FIELDS",
    "CHILDREN_FIELD",
    "ON_CLICK_FIELD",
    "VARIANT_REGISTRY",
    "VALUE_REGISTRY",
    # Lookup functions
    "get_variant_meta",
    "get_variants_with",
    "get_value_meta",
    "template_paths",
]
