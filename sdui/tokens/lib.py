"""Core token models for server-driven UI documents.

This module defines the closed set of token variants that make up a UI
description tree. Every variant carries the common identity contract
(id, version, accessibility) and an explicit `type` tag that acts as the
union discriminator on the wire.

Container-ness and interactivity are capabilities looked up per variant,
not base classes: call sites ask `children_of(token)` or `action_of(token)`
and get `None` when the capability is absent.
"""

from enum import Enum, Flag
from typing import Annotated, ClassVar, Iterator, Literal, Union

from pydantic import Field

from sdui.values import (
    Accessibility,
    Action,
    Background,
    BoxAlignment,
    ButtonStyle,
    CardShape,
    ClipShape,
    ColorValue,
    ContentScale,
    ErrorFallback,
    HorizontalAlignment,
    LoadingPlaceholder,
    Margin,
    Padding,
    TemplateString,
    TextAlignValue,
    TextOverflowValue,
    TextStyle,
    ValueRange,
    VerticalAlignment,
    WireModel,
)


class TokenType(str, Enum):
    """Closed vocabulary of token variants (value is the wire tag)."""

    # Containers
    COLUMN = "Column"
    ROW = "Row"
    BOX = "Box"
    LAZY_COLUMN = "LazyColumn"
    LAZY_ROW = "LazyRow"
    CARD = "Card"

    # Leaves
    TEXT = "Text"
    SPACER = "Spacer"
    DIVIDER = "Divider"

    # Interactive
    BUTTON = "Button"
    SLIDER = "Slider"
    ASYNC_IMAGE = "AsyncImage"


class Capability(Flag):
    """Cross-cutting capabilities a variant may combine.

    A variant with neither flag is a plain leaf.
    """

    NONE = 0
    CONTAINER = 1
    INTERACTIVE = 2


class BaseToken(WireModel):
    """Common contract shared by every token variant.

    Attributes:
        id: Identifier, unique within a registry.
        version: Declared schema version of this node.
        accessibility: Optional accessibility semantics (wire key `a11y`).
        min_supported_version: Per-variant floor; nodes declaring a lower
            version are rejected at resolution time.
    """

    min_supported_version: ClassVar[int] = 1

    id: str = Field(..., description="Unique identifier for the token")
    version: int = Field(default=1, description="Declared token version")
    accessibility: Accessibility | None = Field(
        default=None,
        alias="a11y",
        description="Accessibility properties",
    )

    @property
    def token_type(self) -> TokenType:
        return TokenType(self.type)


# =============================================================================
# Containers
# =============================================================================


class ColumnToken(BaseToken):
    """Vertical container arranging children top to bottom."""

    type: Literal["Column"] = "Column"
    padding: Padding | None = None
    margin: Margin | None = None
    background: Background | None = None
    alignment: HorizontalAlignment = HorizontalAlignment.START
    children: tuple["Token", ...] = ()


class RowToken(BaseToken):
    """Horizontal container arranging children start to end."""

    type: Literal["Row"] = "Row"
    padding: Padding | None = None
    margin: Margin | None = None
    background: Background | None = None
    alignment: VerticalAlignment = VerticalAlignment.CENTER_VERTICALLY
    children: tuple["Token", ...] = ()


class BoxToken(BaseToken):
    """Stacking container positioning children by content alignment."""

    type: Literal["Box"] = "Box"
    padding: Padding | None = None
    margin: Margin | None = None
    background: Background | None = None
    content_alignment: BoxAlignment = BoxAlignment.CENTER
    children: tuple["Token", ...] = ()


class LazyColumnToken(BaseToken):
    """Vertically scrolling container that only composes visible items."""

    type: Literal["LazyColumn"] = "LazyColumn"
    padding: Padding | None = None
    margin: Margin | None = None
    background: Background | None = None
    alignment: HorizontalAlignment = HorizontalAlignment.START
    children: tuple["Token", ...] = ()


class LazyRowToken(BaseToken):
    """Horizontally scrolling container that only composes visible items."""

    type: Literal["LazyRow"] = "LazyRow"
    padding: Padding | None = None
    margin: Margin | None = None
    background: Background | None = None
    alignment: VerticalAlignment = VerticalAlignment.CENTER_VERTICALLY
    children: tuple["Token", ...] = ()


class CardToken(BaseToken):
    """Elevated container that can also be clicked."""

    type: Literal["Card"] = "Card"
    padding: Padding | None = None
    margin: Margin | None = None
    elevation: int = 1
    shape: CardShape = CardShape.ROUNDED8
    background: Background | None = None
    on_click: Action | None = None
    children: tuple["Token", ...] = ()


# =============================================================================
# Leaves
# =============================================================================


class TextToken(BaseToken):
    """Static text with placeholder support."""

    type: Literal["Text"] = "Text"
    text: TemplateString
    style: TextStyle = TextStyle.BODY_MEDIUM
    color: ColorValue | None = None
    max_lines: int | None = None
    overflow: TextOverflowValue = TextOverflowValue.CLIP
    text_align: TextAlignValue | None = None
    margin: Margin | None = None


class SpacerToken(BaseToken):
    """Empty space of fixed size."""

    type: Literal["Spacer"] = "Spacer"
    width: int | None = None
    height: int | None = None


class DividerToken(BaseToken):
    """Thin separator line."""

    type: Literal["Divider"] = "Divider"
    thickness: int = 1
    color: ColorValue | None = None
    margin: Margin | None = None


# =============================================================================
# Interactive leaves
# =============================================================================


class ButtonToken(BaseToken):
    """Clickable button; the click action is mandatory."""

    type: Literal["Button"] = "Button"
    text: TemplateString
    style: ButtonStyle = ButtonStyle.FILLED
    enabled: bool = True
    margin: Margin | None = None
    on_click: Action


class SliderToken(BaseToken):
    """Continuous or stepped value picker."""

    type: Literal["Slider"] = "Slider"
    initial_value: float = 0.0
    value_range: ValueRange = Field(default_factory=ValueRange)
    steps: int | None = None
    enabled: bool = True
    margin: Margin | None = None
    on_change: Action | None = None
    on_click: Action | None = None


class AsyncImageToken(BaseToken):
    """Remote image loaded asynchronously."""

    type: Literal["AsyncImage"] = "AsyncImage"
    url: TemplateString
    width_dp: int | None = None
    height_dp: int | None = None
    layout_weight: float | None = None
    clip: ClipShape | None = None
    content_scale: ContentScale = ContentScale.FILL_WIDTH
    margin: Margin | None = None
    error_fallback: ErrorFallback | None = None
    loading_placeholder: LoadingPlaceholder | None = None
    on_click: Action | None = None


Token = Annotated[
    Union[
        ColumnToken,
        RowToken,
        BoxToken,
        LazyColumnToken,
        LazyRowToken,
        CardToken,
        TextToken,
        SpacerToken,
        DividerToken,
        ButtonToken,
        SliderToken,
        AsyncImageToken,
    ],
    Field(discriminator="type"),
]

CONTAINER_MODELS = (
    ColumnToken,
    RowToken,
    BoxToken,
    LazyColumnToken,
    LazyRowToken,
    CardToken,
)

for _model in CONTAINER_MODELS:
    _model.model_rebuild()

TOKEN_MODELS: dict[TokenType, type[BaseToken]] = {
    TokenType.COLUMN: ColumnToken,
    TokenType.ROW: RowToken,
    TokenType.BOX: BoxToken,
    TokenType.LAZY_COLUMN: LazyColumnToken,
    TokenType.LAZY_ROW: LazyRowToken,
    TokenType.CARD: CardToken,
    TokenType.TEXT: TextToken,
    TokenType.SPACER: SpacerToken,
    TokenType.DIVIDER: DividerToken,
    TokenType.BUTTON: ButtonToken,
    TokenType.SLIDER: SliderToken,
    TokenType.ASYNC_IMAGE: AsyncImageToken,
}

TOKEN_CAPABILITIES: dict[TokenType, Capability] = {
    TokenType.COLUMN: Capability.CONTAINER,
    TokenType.ROW: Capability.CONTAINER,
    TokenType.BOX: Capability.CONTAINER,
    TokenType.LAZY_COLUMN: Capability.CONTAINER,
    TokenType.LAZY_ROW: Capability.CONTAINER,
    TokenType.CARD: Capability.CONTAINER | Capability.INTERACTIVE,
    TokenType.TEXT: Capability.NONE,
    TokenType.SPACER: Capability.NONE,
    TokenType.DIVIDER: Capability.NONE,
    TokenType.BUTTON: Capability.INTERACTIVE,
    TokenType.SLIDER: Capability.INTERACTIVE,
    TokenType.ASYNC_IMAGE: Capability.INTERACTIVE,
}


# =============================================================================
# Capability queries
# =============================================================================


def capabilities_of(token: BaseToken) -> Capability:
    """Get the capability flags for a token's variant."""
    return TOKEN_CAPABILITIES[token.token_type]


def is_container(token: BaseToken) -> bool:
    return Capability.CONTAINER in capabilities_of(token)


def is_interactive(token: BaseToken) -> bool:
    return Capability.INTERACTIVE in capabilities_of(token)


def children_of(token: BaseToken) -> tuple[BaseToken, ...] | None:
    """Return the owned children of a container, or None for other variants."""
    match token:
        case (
            ColumnToken()
            | RowToken()
            | BoxToken()
            | LazyColumnToken()
            | LazyRowToken()
            | CardToken()
        ):
            return token.children
        case (
            TextToken()
            | SpacerToken()
            | DividerToken()
            | ButtonToken()
            | SliderToken()
            | AsyncImageToken()
        ):
            return None
    raise TypeError(f"Unsupported token type: {type(token).__name__}")


def action_of(token: BaseToken) -> Action | None:
    """Return the action fired on interaction, or None.

    Sliders answer with their change action when one is set.
    """
    match token:
        case CardToken() | ButtonToken() | AsyncImageToken():
            return token.on_click
        case SliderToken():
            return token.on_change or token.on_click
        case (
            ColumnToken()
            | RowToken()
            | BoxToken()
            | LazyColumnToken()
            | LazyRowToken()
            | TextToken()
            | SpacerToken()
            | DividerToken()
        ):
            return None
    raise TypeError(f"Unsupported token type: {type(token).__name__}")


def child_ids(token: BaseToken) -> list[str]:
    """IDs of a container's direct children (empty for non-containers)."""
    return [child.id for child in children_of(token) or ()]


def walk(token: BaseToken) -> Iterator[BaseToken]:
    """Yield a token and all of its owned descendants, depth-first."""
    yield token
    for child in children_of(token) or ():
        yield from walk(child)


def with_children(token: BaseToken, children: tuple[BaseToken, ...]) -> BaseToken:
    """Return a copy of a container with its children replaced."""
    if not is_container(token):
        raise TypeError(f"{token.type} token '{token.id}' cannot hold children")
    return token.model_copy(update={"children": tuple(children)})


__all__ = [
    "TokenType",
    "Capability",
    "BaseToken",
    "Token",
    # Containers
    "ColumnToken",
    "RowToken",
    "BoxToken",
    "LazyColumnToken",
    "LazyRowToken",
    "CardToken",
    # Leaves
    "TextToken",
    "SpacerToken",
    "DividerToken",
    # Interactive
    "ButtonToken",
    "SliderToken",
    "AsyncImageToken",
    # Lookup tables
    "TOKEN_MODELS",
    "TOKEN_CAPABILITIES",
    "CONTAINER_MODELS",
    # Capability queries
    "capabilities_of",
    "is_container",
    "is_interactive",
    "children_of",
    "action_of",
    "child_ids",
    "walk",
    "with_children",
]
