"""Centralized configuration management for sdui.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from sdui.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> indent = get_environment(EnvVar.SDUI_JSON_INDENT)  # Returns int: 2
    >>>
    >>> # Override at runtime
    >>> indent = get_environment(EnvVar.SDUI_JSON_INDENT, override=4)

Environment Variable Categories:
    logging: Log output configuration
    versioning: Client and migration target versions
    schema: Schema generation strategy and untagged-token inference
    output: JSON formatting and output directory
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_client_version,
    get_environment,
    get_environment_info,
    get_json_indent,
    get_log_level,
    get_schema_strategy,
    # Introspection
    list_environment_variables,
    resolve_output_path,
)

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
