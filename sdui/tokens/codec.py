"""Wire codec for token trees.

Tokens travel as camelCase JSON objects carrying an explicit ``type`` tag.
Untagged payloads are rejected unless the caller opts in to the legacy
shape inference, which guesses a variant from the fields present.
"""

import json
import logging
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from sdui.values import HorizontalAlignment, VerticalAlignment

from .lib import BaseToken, Token, TokenType

logger = logging.getLogger(__name__)

TOKEN_ADAPTER: TypeAdapter = TypeAdapter(Token)

_HORIZONTAL_VALUES = {a.value for a in HorizontalAlignment}
_VERTICAL_VALUES = {a.value for a in VerticalAlignment}


class TokenDecodeError(ValueError):
    """Raised when a payload cannot be decoded into a token tree.

    Attributes:
        errors: Structured error entries from pydantic, when available.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


def encode_token(token: BaseToken) -> dict[str, Any]:
    """Encode a token tree to its JSON-compatible wire form.

    Args:
        token: Root of the tree to encode.

    Returns:
        Dict with camelCase keys and an explicit ``type`` on every node.
        Optional fields that are absent are omitted.
    """
    return token.model_dump(mode="json", by_alias=True, exclude_none=True)


def encode_token_json(token: BaseToken, indent: int | None = 2) -> str:
    return json.dumps(encode_token(token), indent=indent)


def infer_token_type(data: Mapping[str, Any]) -> TokenType | None:
    """Guess a variant from the fields present in an untagged payload.

    Mirrors the presence-based guessing older servers relied on. Lazy
    containers are indistinguishable from their eager counterparts and are
    inferred as Column/Row.

    Args:
        data: Raw wire-form object.

    Returns:
        The inferred TokenType, or None if no rule matches.
    """
    if "children" in data:
        if "elevation" in data or "shape" in data:
            return TokenType.CARD
        if "contentAlignment" in data:
            return TokenType.BOX
        alignment = data.get("alignment")
        if alignment in _VERTICAL_VALUES:
            return TokenType.ROW
        if alignment in _HORIZONTAL_VALUES or alignment is None:
            return TokenType.COLUMN
        return TokenType.BOX
    if "text" in data:
        return TokenType.BUTTON if "onClick" in data else TokenType.TEXT
    if "url" in data:
        return TokenType.ASYNC_IMAGE
    if "initialValue" in data or "valueRange" in data or "onChange" in data:
        return TokenType.SLIDER
    if "thickness" in data:
        return TokenType.DIVIDER
    if "width" in data or "height" in data:
        return TokenType.SPACER
    return None


def tag_untyped(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a payload tree with inferred ``type`` tags added.

    Nodes that already carry a tag keep it.

    Raises:
        TokenDecodeError: If a node's variant cannot be inferred.
    """
    if not isinstance(data, Mapping):
        raise TokenDecodeError(f"Token payload must be an object, got {type(data).__name__}")

    tagged = dict(data)
    if "type" not in tagged:
        inferred = infer_token_type(tagged)
        if inferred is None:
            raise TokenDecodeError(
                f"Cannot infer token type for '{tagged.get('id', '<unknown>')}'"
            )
        logger.debug("Inferred %s for untagged token '%s'", inferred.value, tagged.get("id"))
        tagged["type"] = inferred.value

    children = tagged.get("children")
    if isinstance(children, list):
        tagged["children"] = [tag_untyped(child) for child in children]
    return tagged


def decode_token(
    data: Mapping[str, Any], *, infer_missing_type: bool = False
) -> BaseToken:
    """Decode a wire-form payload into a typed token tree.

    Args:
        data: JSON object (already parsed).
        infer_missing_type: Guess the variant of untagged nodes instead of
            rejecting them.

    Returns:
        The decoded token.

    Raises:
        TokenDecodeError: On a missing or unknown tag, or invalid fields.
    """
    if not isinstance(data, Mapping):
        raise TokenDecodeError(f"Token payload must be an object, got {type(data).__name__}")

    if infer_missing_type:
        data = tag_untyped(data)

    try:
        return TOKEN_ADAPTER.validate_python(data)
    except ValidationError as e:
        logger.debug("Token decode failed: %s", e)
        raise TokenDecodeError(
            f"Invalid token '{data.get('id', '<unknown>')}': {e.error_count()} error(s)",
            errors=e.errors(include_url=False),
        ) from e


def decode_token_json(text: str, *, infer_missing_type: bool = False) -> BaseToken:
    """Decode a JSON string into a typed token tree."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TokenDecodeError(f"Malformed JSON: {e}") from e
    return decode_token(data, infer_missing_type=infer_missing_type)


__all__ = [
    "TOKEN_ADAPTER",
    "TokenDecodeError",
    "encode_token",
    "encode_token_json",
    "decode_token",
    "decode_token_json",
    "infer_token_type",
    "tag_untyped",
]
