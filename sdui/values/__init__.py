"""Value objects and closed enums for token fields."""

from .lib import (
    PLACEHOLDER_PATTERN,
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
    EdgeInsets,
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
    WireModel,
)

__all__ = [
    "WireModel",
    # Enums
    "Role",
    "LiveRegion",
    "ActionType",
    "TextStyle",
    "ButtonStyle",
    "HorizontalAlignment",
    "VerticalAlignment",
    "BoxAlignment",
    "CardShape",
    "ClipShape",
    "ContentScale",
    "TextAlignValue",
    "TextOverflowValue",
    # Templates
    "PLACEHOLDER_PATTERN",
    "TemplateString",
    # Spacing
    "EdgeInsets",
    "Padding",
    "Margin",
    # Value objects
    "ColorValue",
    "Background",
    "Action",
    "Accessibility",
    "ValueRange",
    "ErrorFallback",
    "LoadingPlaceholder",
]
