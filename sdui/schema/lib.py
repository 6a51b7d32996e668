"""JSON Schema generation for token documents.

Two interchangeable strategies produce the same draft-07 document:

- `ExplicitSchemaGenerator` spells out every definition by hand, one
  method per variant and value object.
- `MetadataSchemaGenerator` walks the variant and value metadata tables.

Both emit the base definitions ``Token``, ``ContainerToken`` and
``InteractiveToken``; each variant composes them through ``allOf`` by
capability and pins its ``type`` tag with ``const``. `compare_schemas`
reports structural drift between two documents.
"""

import logging
from typing import Any

from pydantic import TypeAdapter

from sdui.config import get_schema_strategy
from sdui.tokens import (
    CHILDREN_FIELD,
    ON_CLICK_FIELD,
    TOKEN_FIELDS,
    TOKEN_MODELS,
    VALUE_REGISTRY,
    VARIANT_REGISTRY,
    FieldKind,
    FieldMeta,
    Token,
    TokenType,
    ValueMeta,
    VariantMeta,
)
from sdui.values import (
    ActionType,
    BoxAlignment,
    ButtonStyle,
    CardShape,
    ClipShape,
    ContentScale,
    HorizontalAlignment,
    LiveRegion,
    Role,
    TextAlignValue,
    TextOverflowValue,
    TextStyle,
    VerticalAlignment,
)

logger = logging.getLogger(__name__)

SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"
SCHEMA_TITLE = "Server-Driven UI Token Schema"
SCHEMA_DESCRIPTION = "Schema for Server-Driven UI tokens"

BASE_DEFINITIONS = ("Token", "ContainerToken", "InteractiveToken")
STRATEGIES = ("metadata", "explicit")


def definition_ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/definitions/{name}"}


def variant_definition_name(token_type: TokenType) -> str:
    return TOKEN_MODELS[token_type].__name__


def _variant_refs() -> list[dict[str, str]]:
    return [definition_ref(variant_definition_name(t)) for t in TokenType]


def _assemble(definitions: dict[str, Any]) -> dict[str, Any]:
    return {
        "$schema": SCHEMA_DRAFT,
        "title": SCHEMA_TITLE,
        "description": SCHEMA_DESCRIPTION,
        "type": "object",
        "definitions": definitions,
        "oneOf": _variant_refs(),
    }


# =============================================================================
# Explicit strategy
# =============================================================================


def _prop(json_type: str, description: str) -> dict[str, Any]:
    return {"type": json_type, "description": description}


def _ref(name: str, description: str) -> dict[str, Any]:
    return {**definition_ref(name), "description": description}


def _enum(values: type, description: str) -> dict[str, Any]:
    return {
        "type": "string",
        "enum": [member.value for member in values],
        "description": description,
    }


def _tag(token_type: TokenType) -> dict[str, Any]:
    return {"const": token_type.value, "description": "Variant tag"}


def _spacing_properties(kind: str) -> dict[str, Any]:
    return {
        "all": _prop("integer", f"{kind} for all"),
        "horizontal": _prop("integer", f"{kind} for horizontal"),
        "vertical": _prop("integer", f"{kind} for vertical"),
        "start": _prop("integer", f"{kind} for start"),
        "top": _prop("integer", f"{kind} for top"),
        "end": _prop("integer", f"{kind} for end"),
        "bottom": _prop("integer", f"{kind} for bottom"),
    }


class ExplicitSchemaGenerator:
    """Hand-written schema definitions, one method per definition."""

    def generate(self) -> dict[str, Any]:
        """Generate the complete schema document."""
        definitions = {
            # Base definitions
            "Token": self.token(),
            "ContainerToken": self.container_token(),
            "InteractiveToken": self.interactive_token(),
            # Variants
            "ColumnToken": self.column_token(),
            "RowToken": self.row_token(),
            "BoxToken": self.box_token(),
            "LazyColumnToken": self.lazy_column_token(),
            "LazyRowToken": self.lazy_row_token(),
            "CardToken": self.card_token(),
            "TextToken": self.text_token(),
            "SpacerToken": self.spacer_token(),
            "DividerToken": self.divider_token(),
            "ButtonToken": self.button_token(),
            "SliderToken": self.slider_token(),
            "AsyncImageToken": self.async_image_token(),
            # Value objects
            "TemplateString": self.template_string(),
            "Padding": self.padding(),
            "Margin": self.margin(),
            "ColorValue": self.color_value(),
            "Background": self.background(),
            "Action": self.action(),
            "Accessibility": self.accessibility(),
            "ValueRange": self.value_range(),
            "ErrorFallback": self.error_fallback(),
            "LoadingPlaceholder": self.loading_placeholder(),
        }
        return _assemble(definitions)

    # --- Base definitions ---------------------------------------------------

    def token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "Token",
            "description": "Base definition shared by all tokens",
            "properties": {
                "id": _prop("string", "Unique identifier for the token"),
                "version": _prop("integer", "Token version"),
                "a11y": _ref("Accessibility", "Accessibility properties"),
            },
            "required": ["id", "version"],
        }

    def container_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "ContainerToken",
            "description": "Base definition for tokens that hold other tokens",
            "allOf": [definition_ref("Token")],
            "properties": {
                "children": {
                    "type": "array",
                    "description": "Child tokens",
                    "items": {"oneOf": _variant_refs()},
                },
            },
            "required": ["children"],
        }

    def interactive_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "InteractiveToken",
            "description": "Base definition for tokens that can be clicked",
            "allOf": [definition_ref("Token")],
            "properties": {
                "onClick": _ref("Action", "Action to perform when clicked"),
            },
        }

    # --- Containers ---------------------------------------------------------

    def column_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "ColumnToken",
            "description": "Vertical layout of child tokens",
            "allOf": [definition_ref("ContainerToken")],
            "properties": {
                "type": _tag(TokenType.COLUMN),
                "padding": _ref("Padding", "Inner spacing"),
                "margin": _ref("Margin", "Outer spacing"),
                "background": _ref("Background", "Background and border"),
                "alignment": _enum(HorizontalAlignment, "Horizontal alignment of children"),
            },
            "required": ["type"],
        }

    def row_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "RowToken",
            "description": "Horizontal layout of child tokens",
            "allOf": [definition_ref("ContainerToken")],
            "properties": {
                "type": _tag(TokenType.ROW),
                "padding": _ref("Padding", "Inner spacing"),
                "margin": _ref("Margin", "Outer spacing"),
                "background": _ref("Background", "Background and border"),
                "alignment": _enum(VerticalAlignment, "Vertical alignment of children"),
            },
            "required": ["type"],
        }

    def box_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "BoxToken",
            "description": "Stacked layout of child tokens",
            "allOf": [definition_ref("ContainerToken")],
            "properties": {
                "type": _tag(TokenType.BOX),
                "padding": _ref("Padding", "Inner spacing"),
                "margin": _ref("Margin", "Outer spacing"),
                "background": _ref("Background", "Background and border"),
                "contentAlignment": _enum(BoxAlignment, "Alignment of stacked content"),
            },
            "required": ["type"],
        }

    def lazy_column_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "LazyColumnToken",
            "description": "Lazily composed vertical list",
            "allOf": [definition_ref("ContainerToken")],
            "properties": {
                "type": _tag(TokenType.LAZY_COLUMN),
                "padding": _ref("Padding", "Inner spacing"),
                "margin": _ref("Margin", "Outer spacing"),
                "background": _ref("Background", "Background and border"),
                "alignment": _enum(HorizontalAlignment, "Horizontal alignment of children"),
            },
            "required": ["type"],
        }

    def lazy_row_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "LazyRowToken",
            "description": "Lazily composed horizontal list",
            "allOf": [definition_ref("ContainerToken")],
            "properties": {
                "type": _tag(TokenType.LAZY_ROW),
                "padding": _ref("Padding", "Inner spacing"),
                "margin": _ref("Margin", "Outer spacing"),
                "background": _ref("Background", "Background and border"),
                "alignment": _enum(VerticalAlignment, "Vertical alignment of children"),
            },
            "required": ["type"],
        }

    def card_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "CardToken",
            "description": "Elevated container with optional click action",
            "allOf": [
                definition_ref("ContainerToken"),
                definition_ref("InteractiveToken"),
            ],
            "properties": {
                "type": _tag(TokenType.CARD),
                "padding": _ref("Padding", "Inner spacing"),
                "margin": _ref("Margin", "Outer spacing"),
                "elevation": _prop("integer", "Card elevation in dp"),
                "shape": _enum(CardShape, "Corner shape of the card"),
                "background": _ref("Background", "Background and border"),
            },
            "required": ["type"],
        }

    # --- Leaves -------------------------------------------------------------

    def text_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "TextToken",
            "description": "Text content with placeholder support",
            "allOf": [definition_ref("Token")],
            "properties": {
                "type": _tag(TokenType.TEXT),
                "text": _ref("TemplateString", "Text content"),
                "style": _enum(TextStyle, "Typography style"),
                "color": _ref("ColorValue", "Text color"),
                "maxLines": _prop("integer", "Maximum number of lines"),
                "overflow": _enum(TextOverflowValue, "Overflow behaviour"),
                "textAlign": _enum(TextAlignValue, "Text alignment"),
                "margin": _ref("Margin", "Outer spacing"),
            },
            "required": ["type", "text"],
        }

    def spacer_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "SpacerToken",
            "description": "Empty space",
            "allOf": [definition_ref("Token")],
            "properties": {
                "type": _tag(TokenType.SPACER),
                "width": _prop("integer", "Width in dp"),
                "height": _prop("integer", "Height in dp"),
            },
            "required": ["type"],
        }

    def divider_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "DividerToken",
            "description": "Separator line",
            "allOf": [definition_ref("Token")],
            "properties": {
                "type": _tag(TokenType.DIVIDER),
                "thickness": _prop("integer", "Line thickness in dp"),
                "color": _ref("ColorValue", "Line color"),
                "margin": _ref("Margin", "Outer spacing"),
            },
            "required": ["type"],
        }

    # --- Interactive --------------------------------------------------------

    def button_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "ButtonToken",
            "description": "Clickable button",
            "allOf": [definition_ref("InteractiveToken")],
            "properties": {
                "type": _tag(TokenType.BUTTON),
                "text": _ref("TemplateString", "Button label"),
                "style": _enum(ButtonStyle, "Button style"),
                "enabled": _prop("boolean", "Whether the button is enabled"),
                "margin": _ref("Margin", "Outer spacing"),
            },
            "required": ["type", "text", "onClick"],
        }

    def slider_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "SliderToken",
            "description": "Value picker over a numeric range",
            "allOf": [definition_ref("InteractiveToken")],
            "properties": {
                "type": _tag(TokenType.SLIDER),
                "initialValue": _prop("number", "Initial slider value"),
                "valueRange": _ref("ValueRange", "Allowed value range"),
                "steps": _prop("integer", "Number of discrete steps"),
                "enabled": _prop("boolean", "Whether the slider is enabled"),
                "margin": _ref("Margin", "Outer spacing"),
                "onChange": _ref("Action", "Action to perform when the value changes"),
            },
            "required": ["type"],
        }

    def async_image_token(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "AsyncImageToken",
            "description": "Asynchronously loaded remote image",
            "allOf": [definition_ref("InteractiveToken")],
            "properties": {
                "type": _tag(TokenType.ASYNC_IMAGE),
                "url": _ref("TemplateString", "Image URL"),
                "widthDp": _prop("integer", "Width in dp"),
                "heightDp": _prop("integer", "Height in dp"),
                "layoutWeight": _prop("number", "Layout weight"),
                "clip": _enum(ClipShape, "Clip shape"),
                "contentScale": _enum(ContentScale, "Content scale"),
                "margin": _ref("Margin", "Outer spacing"),
                "errorFallback": _ref("ErrorFallback", "Content shown on error"),
                "loadingPlaceholder": _ref(
                    "LoadingPlaceholder", "Content shown while loading"
                ),
            },
            "required": ["type", "url"],
        }

    # --- Value objects ------------------------------------------------------

    def template_string(self) -> dict[str, Any]:
        return {
            "type": "string",
            "title": "TemplateString",
            "description": "String with {{placeholder}} support",
        }

    def padding(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "Padding",
            "description": "Padding configuration",
            "properties": _spacing_properties("Padding"),
        }

    def margin(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "Margin",
            "description": "Margin configuration",
            "properties": _spacing_properties("Margin"),
        }

    def color_value(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "ColorValue",
            "description": "RGBA color with 0-255 channels",
            "properties": {
                "red": _prop("integer", "Red channel"),
                "green": _prop("integer", "Green channel"),
                "blue": _prop("integer", "Blue channel"),
                "alpha": _prop("integer", "Alpha channel"),
            },
            "required": ["red", "green", "blue"],
        }

    def background(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "Background",
            "description": "Background configuration",
            "properties": {
                "color": _ref("ColorValue", "Fill color"),
                "borderColor": _ref("ColorValue", "Border color"),
                "borderWidth": _prop("integer", "Border width in dp"),
                "cornerRadius": _prop("integer", "Corner radius in dp"),
            },
        }

    def action(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "Action",
            "description": "Action configuration",
            "properties": {
                "type": _enum(ActionType, "Action type"),
                "data": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                    "description": "Action data",
                },
            },
            "required": ["type"],
        }

    def accessibility(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "Accessibility",
            "description": "Accessibility properties",
            "properties": {
                "role": _enum(Role, "Semantic role"),
                "label": _ref("TemplateString", "Spoken label"),
                "liveRegion": _enum(LiveRegion, "Live region politeness"),
                "isEnabled": _prop("boolean", "Whether the element is enabled"),
                "isFocusable": _prop("boolean", "Whether the element is focusable"),
            },
            "required": ["role", "label"],
        }

    def value_range(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "ValueRange",
            "description": "Closed numeric range",
            "properties": {
                "start": _prop("number", "Range start"),
                "end": _prop("number", "Range end"),
            },
        }

    def error_fallback(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "ErrorFallback",
            "description": "Fallback content for failed image loads",
            "properties": {
                "text": _ref("TemplateString", "Fallback text"),
                "iconUrl": _ref("TemplateString", "Fallback icon URL"),
            },
        }

    def loading_placeholder(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "LoadingPlaceholder",
            "description": "Placeholder shown while an image loads",
            "properties": {
                "showProgressIndicator": _prop(
                    "boolean", "Whether to show a progress indicator"
                ),
                "backgroundColor": _ref("ColorValue", "Placeholder color"),
            },
        }


# =============================================================================
# Metadata strategy
# =============================================================================


def field_schema(field: FieldMeta) -> dict[str, Any]:
    """Schema fragment for one field."""
    match field.kind:
        case FieldKind.ENUM:
            return {
                "type": "string",
                "enum": [member.value for member in field.enum],
                "description": field.description,
            }
        case FieldKind.REF:
            return {**definition_ref(field.ref), "description": field.description}
        case FieldKind.CHILDREN:
            return {
                "type": "array",
                "description": field.description,
                "items": {"oneOf": _variant_refs()},
            }
        case FieldKind.PRIMITIVE if field.value_type is not None:
            return {
                "type": "object",
                "additionalProperties": {"type": field.value_type},
                "description": field.description,
            }
        case _:
            return {"type": field.json_type, "description": field.description}


def _object_schema(
    title: str,
    description: str,
    fields: tuple[FieldMeta, ...],
    *,
    bases: list[str] | None = None,
    extra_properties: dict[str, Any] | None = None,
    extra_required: list[str] | None = None,
) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "type": "object",
        "title": title,
        "description": description,
    }
    if bases:
        schema["allOf"] = [definition_ref(base) for base in bases]
    properties = dict(extra_properties or {})
    properties.update({f.wire_name: field_schema(f) for f in fields if not f.inherited})
    schema["properties"] = properties
    required = list(extra_required or []) + [f.wire_name for f in fields if f.required]
    if required:
        schema["required"] = required
    return schema


class MetadataSchemaGenerator:
    """Schema definitions derived from the variant and value metadata tables."""

    def generate(self) -> dict[str, Any]:
        """Generate the complete schema document."""
        definitions: dict[str, Any] = {
            "Token": _object_schema(
                "Token", "Base definition shared by all tokens", TOKEN_FIELDS
            ),
            "ContainerToken": _object_schema(
                "ContainerToken",
                "Base definition for tokens that hold other tokens",
                (),
                bases=["Token"],
                extra_properties={"children": field_schema(CHILDREN_FIELD)},
                extra_required=["children"],
            ),
            "InteractiveToken": _object_schema(
                "InteractiveToken",
                "Base definition for tokens that can be clicked",
                (),
                bases=["Token"],
                extra_properties={"onClick": field_schema(ON_CLICK_FIELD)},
            ),
        }
        for meta in VARIANT_REGISTRY.values():
            definitions[variant_definition_name(meta.type)] = self.variant_schema(meta)
        for meta in VALUE_REGISTRY.values():
            definitions[meta.name] = self.value_schema(meta)
        return _assemble(definitions)

    def variant_schema(self, meta: VariantMeta) -> dict[str, Any]:
        bases = []
        if meta.is_container:
            bases.append("ContainerToken")
        if meta.is_interactive:
            bases.append("InteractiveToken")
        if not bases:
            bases.append("Token")
        return _object_schema(
            variant_definition_name(meta.type),
            meta.description,
            meta.fields,
            bases=bases,
            extra_properties={"type": _tag(meta.type)},
            extra_required=["type"],
        )

    def value_schema(self, meta: ValueMeta) -> dict[str, Any]:
        if meta.json_type != "object":
            return {
                "type": meta.json_type,
                "title": meta.name,
                "description": meta.description,
            }
        return _object_schema(meta.name, meta.description, meta.fields)


# =============================================================================
# Export
# =============================================================================


def generate_schema(strategy: str = "metadata") -> dict[str, Any]:
    """Generate the token schema with the named strategy.

    Args:
        strategy: "metadata" or "explicit".

    Raises:
        ValueError: If the strategy is unknown.
    """
    if strategy == "metadata":
        return MetadataSchemaGenerator().generate()
    if strategy == "explicit":
        return ExplicitSchemaGenerator().generate()
    raise ValueError(f"Unknown schema strategy: {strategy!r} (expected one of {STRATEGIES})")


def export_json_schema(strategy: str | None = None) -> dict[str, Any]:
    """Export the token schema using the configured strategy.

    Resolution: strategy argument > SDUI_SCHEMA_STRATEGY > "metadata"
    """
    return generate_schema(get_schema_strategy(strategy))


def export_model_schema() -> dict[str, Any]:
    """Export pydantic's own JSON Schema of the token union.

    Useful for tooling that consumes pydantic-style ``$defs`` documents.
    """
    return TypeAdapter(Token).json_schema(by_alias=True)


# =============================================================================
# Comparison
# =============================================================================


def _shape(prop: dict[str, Any]) -> dict[str, Any]:
    keys = ("type", "$ref", "enum", "const", "additionalProperties")
    shape = {k: prop[k] for k in keys if k in prop}
    if "items" in prop:
        shape["items"] = prop["items"]
    return shape


def compare_schemas(first: dict[str, Any], second: dict[str, Any]) -> list[str]:
    """Report structural differences between two schema documents.

    Descriptions are ignored; properties, their types, references, enums
    and consts, required lists and base composition are compared.

    Returns:
        list[str]: One message per difference (empty if equivalent).
    """
    differences: list[str] = []

    if first.get("oneOf") != second.get("oneOf"):
        differences.append("Root oneOf differs")

    defs_a: dict[str, Any] = first.get("definitions", {})
    defs_b: dict[str, Any] = second.get("definitions", {})

    for name in sorted(defs_a.keys() - defs_b.keys()):
        differences.append(f"Definition '{name}' missing from second schema")
    for name in sorted(defs_b.keys() - defs_a.keys()):
        differences.append(f"Definition '{name}' missing from first schema")

    for name in sorted(defs_a.keys() & defs_b.keys()):
        a, b = defs_a[name], defs_b[name]
        if a.get("type") != b.get("type"):
            differences.append(f"{name}: type differs")
        if a.get("allOf", []) != b.get("allOf", []):
            differences.append(f"{name}: allOf differs")
        if sorted(a.get("required", [])) != sorted(b.get("required", [])):
            differences.append(f"{name}: required differs")

        props_a: dict[str, Any] = a.get("properties", {})
        props_b: dict[str, Any] = b.get("properties", {})
        for prop in sorted(props_a.keys() ^ props_b.keys()):
            side = "second" if prop in props_a else "first"
            differences.append(f"{name}.{prop}: missing from {side} schema")
        for prop in sorted(props_a.keys() & props_b.keys()):
            if _shape(props_a[prop]) != _shape(props_b[prop]):
                differences.append(f"{name}.{prop}: definition differs")

    return differences


__all__ = [
    "SCHEMA_DRAFT",
    "SCHEMA_TITLE",
    "SCHEMA_DESCRIPTION",
    "BASE_DEFINITIONS",
    "STRATEGIES",
    # Generators
    "ExplicitSchemaGenerator",
    "MetadataSchemaGenerator",
    "field_schema",
    "definition_ref",
    "variant_definition_name",
    # Export
    "generate_schema",
    "export_json_schema",
    "export_model_schema",
    # Comparison
    "compare_schemas",
]
