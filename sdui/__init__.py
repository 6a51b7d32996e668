"""sdui-tokens: versioned document model for server-driven UI tokens."""

from sdui.migration import MigrationEngine, UnsupportedDowngradeError
from sdui.registry import TokenRegistry
from sdui.schema import export_json_schema, generate_schema
from sdui.screen import ScreenPayload, ScreenResolver, TokenRef
from sdui.tokens import Token, TokenType, decode_token, encode_token
from sdui.versioning import SemanticVersion, check_compatibility

__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "encode_token",
    "decode_token",
    # Registry
    "TokenRegistry",
    # Screens
    "TokenRef",
    "ScreenPayload",
    "ScreenResolver",
    # Versioning
    "SemanticVersion",
    "check_compatibility",
    "MigrationEngine",
    "UnsupportedDowngradeError",
    # Schema
    "generate_schema",
    "export_json_schema",
]
