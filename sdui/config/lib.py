"""Centralized environment configuration management for sdui.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from sdui.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> target = get_environment(EnvVar.SDUI_TARGET_VERSION)  # Returns int
    >>> infer = get_environment(EnvVar.SDUI_INFER_TOKEN_TYPE)  # Returns bool
    >>>
    >>> # Override at runtime
    >>> target = get_environment(EnvVar.SDUI_TARGET_VERSION, override=3)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "SDUI_LOG_LEVEL").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by sdui.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - logging: Log output configuration
        - versioning: Client and migration target versions
        - schema: Schema generation and decoding behaviour
        - output: CLI output formatting and locations
    """

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    SDUI_LOG_LEVEL = EnvConfig(
        name="SDUI_LOG_LEVEL",
        default="info",
        var_type=str,
        description="Log level name (debug, info, warning, error)",
        category="logging",
    )

    # -------------------------------------------------------------------------
    # Versioning
    # -------------------------------------------------------------------------
    SDUI_TARGET_VERSION = EnvConfig(
        name="SDUI_TARGET_VERSION",
        default=None,
        var_type=int,
        description="Default token version for the migrate command",
        category="versioning",
    )
    SDUI_CLIENT_VERSION = EnvConfig(
        name="SDUI_CLIENT_VERSION",
        default=None,
        var_type=int,
        description="Highest token version the client can render (None=unbounded)",
        category="versioning",
    )

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------
    SDUI_SCHEMA_STRATEGY = EnvConfig(
        name="SDUI_SCHEMA_STRATEGY",
        default="metadata",
        var_type=str,
        description="Schema generation strategy: 'metadata' or 'explicit'",
        category="schema",
    )
    SDUI_INFER_TOKEN_TYPE = EnvConfig(
        name="SDUI_INFER_TOKEN_TYPE",
        default=False,
        var_type=bool,
        description="Guess the variant of untagged token JSON from its fields",
        category="schema",
    )

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    SDUI_JSON_INDENT = EnvConfig(
        name="SDUI_JSON_INDENT",
        default=2,
        var_type=int,
        description="Indentation used when writing JSON documents",
        category="output",
    )
    SDUI_OUTPUT_DIR = EnvConfig(
        name="SDUI_OUTPUT_DIR",
        default=None,
        var_type=Path,
        description="Base directory for relative CLI output paths",
        category="output",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value)

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, bool, or Path).

    Example:
        >>> get_environment(EnvVar.SDUI_JSON_INDENT)
        2
        >>> get_environment(EnvVar.SDUI_JSON_INDENT, override=4)
        4
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (logging, versioning, schema, output).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


# =============================================================================
# Convenience Functions
# =============================================================================


def get_log_level(override: str | None = None) -> str:
    """Get the configured log level name."""
    return get_environment(EnvVar.SDUI_LOG_LEVEL, override)


def get_client_version(override: int | None = None) -> int | None:
    """Get the highest token version the client renders, if bounded."""
    return get_environment(EnvVar.SDUI_CLIENT_VERSION, override)


def get_schema_strategy(override: str | None = None) -> str:
    """Get the schema generation strategy name.

    Unknown values fall back to "metadata".
    """
    strategy = get_environment(EnvVar.SDUI_SCHEMA_STRATEGY, override)
    strategy = (strategy or "metadata").strip().lower()
    return strategy if strategy in ("metadata", "explicit") else "metadata"


def get_json_indent(override: int | None = None) -> int:
    """Get the JSON indentation width for written documents."""
    return get_environment(EnvVar.SDUI_JSON_INDENT, override)


def resolve_output_path(path: Path | str, override: Path | str | None = None) -> Path:
    """Resolve a CLI output path against SDUI_OUTPUT_DIR.

    Absolute paths are returned unchanged. Relative paths are placed
    under the configured output directory when one is set.

    Resolution: override > SDUI_OUTPUT_DIR > path as given
    """
    path = Path(path)
    if path.is_absolute():
        return path

    base = Path(override) if override is not None else get_environment(
        EnvVar.SDUI_OUTPUT_DIR
    )
    if base:
        return Path(base) / path
    return path


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_log_level",
    "get_client_version",
    "get_schema_strategy",
    "get_json_indent",
    "resolve_output_path",
    # Introspection
    "list_environment_variables",
]
