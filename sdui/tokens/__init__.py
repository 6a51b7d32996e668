"""Token variants, capability queries, variant metadata and wire codec."""

from .codec import (
    TOKEN_ADAPTER,
    TokenDecodeError,
    decode_token,
    decode_token_json,
    encode_token,
    encode_token_json,
    infer_token_type,
    tag_untyped,
)
from .lib import (
    CONTAINER_MODELS,
    TOKEN_CAPABILITIES,
    TOKEN_MODELS,
    AsyncImageToken,
    BaseToken,
    BoxToken,
    ButtonToken,
    Capability,
    CardToken,
    ColumnToken,
    DividerToken,
    LazyColumnToken,
    LazyRowToken,
    RowToken,
    SliderToken,
    SpacerToken,
    TextToken,
    Token,
    TokenType,
    action_of,
    capabilities_of,
    child_ids,
    children_of,
    is_container,
    is_interactive,
    walk,
    with_children,
)
from .meta import (
    CHILDREN_FIELD,
    ON_CLICK_FIELD,
    TOKEN_FIELDS,
    VALUE_REGISTRY,
    VARIANT_REGISTRY,
    FieldKind,
    FieldMeta,
    ValueMeta,
    VariantMeta,
    get_value_meta,
    get_variant_meta,
    get_variants_with,
    template_paths,
)

__all__ = [
    # Core models
    "TokenType",
    "Capability",
    "BaseToken",
    "Token",
    "ColumnToken",
    "RowToken",
    "BoxToken",
    "LazyColumnToken",
    "LazyRowToken",
    "CardToken",
    "TextToken",
    "SpacerToken",
    "DividerToken",
    "ButtonToken",
    "SliderToken",
    "AsyncImageToken",
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
    # Metadata
    "FieldKind",
    "FieldMeta",
    "VariantMeta",
    "ValueMeta",
    "TOKEN_FIELDS",
    "CHILDREN_FIELD",
    "ON_CLICK_FIELD",
    "VARIANT_REGISTRY",
    "VALUE_REGISTRY",
    "get_variant_meta",
    "get_variants_with",
    "get_value_meta",
    "template_paths",
    # Codec
    "TOKEN_ADAPTER",
    "TokenDecodeError",
    "encode_token",
    "encode_token_json",
    "decode_token",
    "decode_token_json",
    "infer_token_type",
    "tag_untyped",
]
