"""Value objects shared by all token variants.

Small immutable models (spacing, colors, actions, accessibility) and the
closed enums used by token fields. Enum values are the wire names, so a
member serializes as exactly the string the client expects.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, RootModel
from pydantic.alias_generators import to_camel

# =============================================================================
# Base model
# =============================================================================


class WireModel(BaseModel):
    """Base for all wire-format models.

    Python attributes are snake_case; JSON keys are camelCase. Unknown keys
    are ignored so newer servers can add fields without breaking older
    clients.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """Accessibility role announced by assistive technology."""

    BANNER = "Banner"
    IMAGE = "Image"
    BUTTON = "Button"
    CHECKBOX = "Checkbox"
    HEADER = "Header"
    LINK = "Link"
    SWITCH = "Switch"
    TEXT_FIELD = "TextField"
    SLIDER = "Slider"
    PROGRESS_BAR = "ProgressBar"
    RADIO_BUTTON = "RadioButton"
    NONE = "None"


class LiveRegion(str, Enum):
    """Politeness level for announcing content changes."""

    OFF = "Off"
    POLITE = "Polite"
    ASSERTIVE = "Assertive"


class ActionType(str, Enum):
    """Kind of action fired by an interactive token.

    - NAVIGATE: In-app navigation, expects a `target` entry in data
    - DEEP_LINK: Platform deep link, expects a `url` entry
    - OPEN_URL: External browser, expects a `url` entry
    - CUSTOM: Application-defined, free-form data
    """

    NAVIGATE = "Navigate"
    DEEP_LINK = "DeepLink"
    OPEN_URL = "OpenUrl"
    CUSTOM = "Custom"


class TextStyle(str, Enum):
    """Typography scale for text tokens."""

    DISPLAY_LARGE = "DisplayLarge"
    DISPLAY_MEDIUM = "DisplayMedium"
    DISPLAY_SMALL = "DisplaySmall"
    HEADLINE_LARGE = "HeadlineLarge"
    HEADLINE_MEDIUM = "HeadlineMedium"
    HEADLINE_SMALL = "HeadlineSmall"
    TITLE_LARGE = "TitleLarge"
    TITLE_MEDIUM = "TitleMedium"
    TITLE_SMALL = "TitleSmall"
    BODY_LARGE = "BodyLarge"
    BODY_MEDIUM = "BodyMedium"
    BODY_SMALL = "BodySmall"
    LABEL_LARGE = "LabelLarge"
    LABEL_MEDIUM = "LabelMedium"
    LABEL_SMALL = "LabelSmall"


class ButtonStyle(str, Enum):
    """Visual treatment of a button."""

    FILLED = "Filled"
    OUTLINED = "Outlined"
    TEXT = "Text"
    ELEVATED = "Elevated"
    FILLED_TONAL = "FilledTonal"


class HorizontalAlignment(str, Enum):
    """Cross-axis alignment for vertical containers."""

    START = "Start"
    CENTER = "Center"
    END = "End"


class VerticalAlignment(str, Enum):
    """Cross-axis alignment for horizontal containers."""

    TOP = "Top"
    CENTER_VERTICALLY = "CenterVertically"
    BOTTOM = "Bottom"


class BoxAlignment(str, Enum):
    """Two-dimensional content alignment inside a box."""

    TOP_START = "TopStart"
    TOP_CENTER = "TopCenter"
    TOP_END = "TopEnd"
    CENTER_START = "CenterStart"
    CENTER = "Center"
    CENTER_END = "CenterEnd"
    BOTTOM_START = "BottomStart"
    BOTTOM_CENTER = "BottomCenter"
    BOTTOM_END = "BottomEnd"


class CardShape(str, Enum):
    """Corner treatment of a card."""

    ROUNDED4 = "Rounded4"
    ROUNDED8 = "Rounded8"
    ROUNDED12 = "Rounded12"
    ROUNDED16 = "Rounded16"


class ClipShape(str, Enum):
    """Clip applied to an image."""

    CIRCLE = "Circle"
    ROUNDED4 = "Rounded4"
    ROUNDED8 = "Rounded8"
    ROUNDED12 = "Rounded12"
    ROUNDED16 = "Rounded16"


class ContentScale(str, Enum):
    """How an image is scaled into its bounds."""

    FILL_WIDTH = "FillWidth"
    FILL_HEIGHT = "FillHeight"
    CROP = "Crop"
    INSIDE = "Inside"
    FIT = "Fit"
    FILL_BOUNDS = "FillBounds"


class TextAlignValue(str, Enum):
    """Horizontal text alignment."""

    START = "Start"
    CENTER = "Center"
    END = "End"
    JUSTIFY = "Justify"
    LEFT = "Left"
    RIGHT = "Right"


class TextOverflowValue(str, Enum):
    """Behaviour of text that exceeds its line budget."""

    CLIP = "Clip"
    ELLIPSIS = "Ellipsis"
    VISIBLE = "Visible"


# =============================================================================
# Template strings
# =============================================================================

PLACEHOLDER_PATTERN = re.compile(r"\{\{(.*?)\}\}")


class TemplateString(RootModel[str]):
    """A raw string containing `{{key}}` placeholders.

    Serializes as a bare JSON string. Placeholders are resolved at render
    time; keys missing from the bindings are left verbatim.

    Example:
        >>> TemplateString("Hello {{name}}").resolve({"name": "World"})
        'Hello World'
        >>> TemplateString("{{x}}").resolve({})
        '{{x}}'
    """

    model_config = ConfigDict(frozen=True)

    @property
    def raw(self) -> str:
        return self.root

    def resolve(self, bindings: Mapping[str, Any]) -> str:
        """Substitute every known placeholder with its stringified binding."""

        def _replace(match: re.Match) -> str:
            key = match.group(1)
            if key in bindings and bindings[key] is not None:
                return str(bindings[key])
            return match.group(0)

        return PLACEHOLDER_PATTERN.sub(_replace, self.root)

    def placeholders(self) -> list[str]:
        """Return the distinct placeholder keys in order of appearance."""
        seen: list[str] = []
        for key in PLACEHOLDER_PATTERN.findall(self.root):
            if key not in seen:
                seen.append(key)
        return seen

    def is_blank(self) -> bool:
        return not self.root.strip()

    def __str__(self) -> str:
        return self.root


# =============================================================================
# Spacing
# =============================================================================


@dataclass(frozen=True)
class EdgeInsets:
    """Concrete per-side spacing after precedence has been applied."""

    start: int = 0
    top: int = 0
    end: int = 0
    bottom: int = 0


def _pick(*candidates: int | None) -> int:
    for value in candidates:
        if value is not None:
            return value
    return 0


class _Spacing(WireModel):
    all: int | None = None
    horizontal: int | None = None
    vertical: int | None = None
    start: int | None = None
    top: int | None = None
    end: int | None = None
    bottom: int | None = None

    def resolve(self) -> EdgeInsets:
        """Apply precedence: all, then horizontal/vertical, then single sides."""
        return EdgeInsets(
            start=_pick(self.all, self.horizontal, self.start),
            top=_pick(self.all, self.vertical, self.top),
            end=_pick(self.all, self.horizontal, self.end),
            bottom=_pick(self.all, self.vertical, self.bottom),
        )


class Padding(_Spacing):
    """Inner spacing of a token."""


class Margin(_Spacing):
    """Outer spacing of a token."""


# =============================================================================
# Color, background, action, accessibility
# =============================================================================


class ColorValue(WireModel):
    """RGBA color with 0-255 channels.

    Channel ranges are checked by validation rather than at construction,
    so out-of-range server data can still be loaded and reported.
    """

    red: int
    green: int
    blue: int
    alpha: int = 255

    def channels(self) -> dict[str, int]:
        return {
            "red": self.red,
            "green": self.green,
            "blue": self.blue,
            "alpha": self.alpha,
        }

    def to_hex(self) -> str:
        """Format as #RRGGBBAA (channels clamped to 0-255)."""
        parts = (max(0, min(255, v)) for v in self.channels().values())
        return "#" + "".join(f"{v:02X}" for v in parts)


class Background(WireModel):
    """Fill and border of a container."""

    color: ColorValue | None = None
    border_color: ColorValue | None = None
    border_width: int | None = None
    corner_radius: int | None = None


class Action(WireModel):
    """Action fired on user interaction."""

    type: ActionType
    data: dict[str, str] = Field(default_factory=dict)


class Accessibility(WireModel):
    """Accessibility semantics attached to a token."""

    role: Role
    label: TemplateString
    live_region: LiveRegion = LiveRegion.OFF
    is_enabled: bool = True
    is_focusable: bool = True


class ValueRange(WireModel):
    """Closed numeric range of a slider."""

    start: float = 0.0
    end: float = 1.0

    def contains(self, value: float) -> bool:
        return self.start <= value <= self.end


class ErrorFallback(WireModel):
    """Content shown when an image fails to load."""

    text: TemplateString | None = None
    icon_url: TemplateString | None = None


class LoadingPlaceholder(WireModel):
    """Content shown while an image loads."""

    show_progress_indicator: bool = True
    background_color: ColorValue | None = None


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
