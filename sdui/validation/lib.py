"""Per-token field validation.

This module checks the field-level invariants of a single token (version
floor, non-blank content, numeric ranges, color channels and action data)
and reports them as structured findings. It never raises and never follows
children; structural checks across tokens live in the registry.
"""

from dataclasses import dataclass

from sdui.tokens import (
    AsyncImageToken,
    BaseToken,
    ButtonToken,
    DividerToken,
    SliderToken,
    SpacerToken,
    TextToken,
    action_of,
)
from sdui.values import Action, ActionType, ColorValue

# Data keys each action type must carry
REQUIRED_ACTION_DATA: dict[ActionType, str] = {
    ActionType.NAVIGATE: "target",
    ActionType.DEEP_LINK: "url",
    ActionType.OPEN_URL: "url",
}


@dataclass
class ValidationError:
    """Represents a validation finding on a token.

    Attributes:
        node_id: ID of the token with the error.
        message: Human-readable error description.
        error_type: Category of the error.
    """

    node_id: str
    message: str
    error_type: str

    def __str__(self) -> str:
        return self.message


def validate_token(token: BaseToken) -> list[ValidationError]:
    """Validate the fields of a single token.

    Performs the following checks:
        - Version is at least 1
        - Accessibility label is not blank
        - Text, button and image content is not blank
        - Numeric fields are within their ranges
        - Color channels are within 0-255
        - Action data carries the keys its type requires

    Args:
        token: The token to validate. Children are not visited.

    Returns:
        list[ValidationError]: Findings in check order (empty if valid).

    Example:
        >>> errors = validate_token(TextToken(id="t", text=""))
        >>> errors[0].message
        "TextToken 't' has empty text content"
    """
    errors: list[ValidationError] = []

    if token.version <= 0:
        errors.append(
            ValidationError(
                node_id=token.id,
                message=f"Token '{token.id}' has invalid version: {token.version}",
                error_type="invalid_version",
            )
        )

    if token.accessibility is not None and token.accessibility.label.is_blank():
        errors.append(
            ValidationError(
                node_id=token.id,
                message=f"Token '{token.id}' has empty accessibility label",
                error_type="empty_label",
            )
        )

    errors.extend(_validate_variant(token))
    errors.extend(_validate_colors(token))

    action = action_of(token)
    if action is not None:
        errors.extend(_validate_action(token.id, action))
    if isinstance(token, SliderToken) and token.on_change and token.on_click:
        errors.extend(_validate_action(token.id, token.on_click))

    return errors


def is_valid(token: BaseToken) -> bool:
    """Check if a token passes field validation.

    Args:
        token: The token to check.

    Returns:
        bool: True if no findings exist.
    """
    return not validate_token(token)


def _range_error(token: BaseToken, field: str, value: object) -> ValidationError:
    return ValidationError(
        node_id=token.id,
        message=f"{type(token).__name__} '{token.id}' has invalid {field}: {value}",
        error_type="invalid_range",
    )


def _empty_error(token: BaseToken, what: str) -> ValidationError:
    return ValidationError(
        node_id=token.id,
        message=f"{type(token).__name__} '{token.id}' has empty {what}",
        error_type="empty_content",
    )


def _validate_variant(token: BaseToken) -> list[ValidationError]:
    """Variant-specific content and range checks."""
    errors: list[ValidationError] = []

    match token:
        case TextToken():
            if token.text.is_blank():
                errors.append(_empty_error(token, "text content"))
            if token.max_lines is not None and token.max_lines <= 0:
                errors.append(_range_error(token, "maxLines", token.max_lines))

        case ButtonToken():
            if token.text.is_blank():
                errors.append(_empty_error(token, "text content"))

        case AsyncImageToken():
            if token.url.is_blank():
                errors.append(_empty_error(token, "URL"))
            if token.width_dp is not None and token.width_dp <= 0:
                errors.append(_range_error(token, "width", token.width_dp))
            if token.height_dp is not None and token.height_dp <= 0:
                errors.append(_range_error(token, "height", token.height_dp))
            if token.layout_weight is not None and token.layout_weight < 0:
                errors.append(_range_error(token, "layout weight", token.layout_weight))

        case SliderToken():
            value_range = token.value_range
            if not value_range.contains(token.initial_value):
                errors.append(
                    ValidationError(
                        node_id=token.id,
                        message=(
                            f"SliderToken '{token.id}' initial value {token.initial_value} "
                            f"is outside range {value_range.start}..{value_range.end}"
                        ),
                        error_type="invalid_range",
                    )
                )
            if value_range.start >= value_range.end:
                errors.append(
                    _range_error(
                        token, "value range", f"{value_range.start}..{value_range.end}"
                    )
                )
            if token.steps is not None and token.steps <= 0:
                errors.append(_range_error(token, "steps", token.steps))

        case SpacerToken():
            if token.width is not None and token.width < 0:
                errors.append(_range_error(token, "width", token.width))
            if token.height is not None and token.height < 0:
                errors.append(_range_error(token, "height", token.height))

        case DividerToken():
            if token.thickness <= 0:
                errors.append(_range_error(token, "thickness", token.thickness))

    return errors


def _token_colors(token: BaseToken) -> list[ColorValue]:
    colors: list[ColorValue] = []
    color = getattr(token, "color", None)
    if color is not None:
        colors.append(color)
    background = getattr(token, "background", None)
    if background is not None:
        colors.extend(c for c in (background.color, background.border_color) if c)
    placeholder = getattr(token, "loading_placeholder", None)
    if placeholder is not None and placeholder.background_color is not None:
        colors.append(placeholder.background_color)
    return colors


def _validate_colors(token: BaseToken) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for color in _token_colors(token):
        for channel, value in color.channels().items():
            if value < 0 or value > 255:
                errors.append(
                    ValidationError(
                        node_id=token.id,
                        message=(
                            f"Token '{token.id}' has invalid {channel} color value: {value}"
                        ),
                        error_type="invalid_range",
                    )
                )
    return errors


def _validate_action(token_id: str, action: Action) -> list[ValidationError]:
    required = REQUIRED_ACTION_DATA.get(action.type)
    if required is None or required in action.data:
        return []
    return [
        ValidationError(
            node_id=token_id,
            message=(
                f"Token '{token_id}' {action.type.value} action missing "
                f"required '{required}' data"
            ),
            error_type="invalid_action",
        )
    ]


__all__ = [
    "ValidationError",
    "REQUIRED_ACTION_DATA",
    "validate_token",
    "is_valid",
]
