"""Schema-checked decoding of wire JSON.

`SchemaDecoder` validates raw JSON against the generated token schema with
jsonschema before handing it to the pydantic codec, so callers get
path-addressed errors (``root.children[1].text``) for malformed documents.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as JsonSchemaError

from sdui.tokens import BaseToken, TokenDecodeError, decode_token, tag_untyped

from .lib import generate_schema

logger = logging.getLogger(__name__)


@dataclass
class SchemaValidationError:
    """Represents a schema validation error."""

    path: str
    message: str
    error_type: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class SchemaDecodeError(ValueError):
    """Raised when a document fails schema validation or decoding."""

    def __init__(self, errors: list[SchemaValidationError]):
        self.errors = errors
        summary = "; ".join(str(e) for e in errors[:3])
        if len(errors) > 3:
            summary += f" (+{len(errors) - 3} more)"
        super().__init__(f"Invalid token document: {summary}")


def format_path(parts: Iterable[Any]) -> str:
    """Render a jsonschema path deque as ``root.children[0].text``."""
    path = "root"
    for part in parts:
        path += f"[{part}]" if isinstance(part, int) else f".{part}"
    return path


def _is_tag_mismatch(error: JsonSchemaError) -> bool:
    return error.validator == "const" and list(error.path)[-1:] == ["type"]


def _flatten(error: JsonSchemaError) -> list[JsonSchemaError]:
    """Descend into oneOf failures, keeping only the branch the tag selected.

    Every variant pins its ``type`` with ``const``, so branches with a tag
    mismatch are noise. If no branch matched the tag the oneOf error itself
    is reported; an untagged node reports only the missing tag.
    """
    if error.validator not in ("oneOf", "anyOf") or not error.context:
        return [error]

    if isinstance(error.instance, Mapping) and "type" not in error.instance:
        for sub in error.context:
            if sub.validator == "required" and sub.message.startswith("'type'"):
                return [sub]
        return [error]

    branches: dict[Any, list[JsonSchemaError]] = {}
    for sub in error.context:
        branches.setdefault(sub.relative_schema_path[0], []).append(sub)
    relevant = [
        sub
        for subs in branches.values()
        if not any(_is_tag_mismatch(s) for s in subs)
        for sub in subs
    ]
    if not relevant:
        return [error]
    flattened: list[JsonSchemaError] = []
    for sub in relevant:
        flattened.extend(_flatten(sub))
    return flattened


class SchemaDecoder:
    """Validates wire JSON against the token schema, then decodes it.

    Example:
        >>> decoder = SchemaDecoder()
        >>> decoder.validate({"type": "Spacer", "id": "s", "version": 1})
        []
    """

    def __init__(
        self,
        schema: Mapping[str, Any] | None = None,
        *,
        infer_missing_type: bool = False,
    ) -> None:
        self.schema = dict(schema) if schema is not None else generate_schema()
        self.infer_missing_type = infer_missing_type
        Draft7Validator.check_schema(self.schema)
        self._validator = Draft7Validator(self.schema)

    def _prepare(self, data: Any) -> Any:
        if self.infer_missing_type and isinstance(data, Mapping):
            return tag_untyped(data)
        return data

    def validate(self, data: Any) -> list[SchemaValidationError]:
        """Validate a document against the schema.

        Returns:
            List of validation errors (empty if valid).
        """
        if not isinstance(data, Mapping):
            return [
                SchemaValidationError(
                    path="root",
                    message=f"Expected a JSON object, got {type(data).__name__}",
                    error_type="invalid_type",
                )
            ]
        try:
            data = self._prepare(data)
        except TokenDecodeError as e:
            return [SchemaValidationError("root", str(e), "inference")]

        errors: list[SchemaValidationError] = []
        seen: set[tuple[str, str]] = set()
        for error in self._validator.iter_errors(data):
            for leaf in _flatten(error):
                path = format_path(leaf.absolute_path)
                if (path, leaf.message) in seen:
                    continue
                seen.add((path, leaf.message))
                errors.append(
                    SchemaValidationError(
                        path=path,
                        message=leaf.message,
                        error_type=str(leaf.validator),
                    )
                )
        errors.sort(key=lambda e: e.path)
        return errors

    def is_valid(self, data: Any) -> bool:
        return not self.validate(data)

    def decode(self, data: Any) -> BaseToken:
        """Validate then decode a document into a typed token.

        Raises:
            SchemaDecodeError: If validation or decoding fails.
        """
        errors = self.validate(data)
        if errors:
            logger.debug("Schema rejected document with %d error(s)", len(errors))
            raise SchemaDecodeError(errors)
        try:
            return decode_token(self._prepare(data))
        except TokenDecodeError as e:
            raise SchemaDecodeError(
                [SchemaValidationError("root", str(e), "decode")]
            ) from e


__all__ = [
    "SchemaValidationError",
    "SchemaDecodeError",
    "SchemaDecoder",
    "format_path",
]
