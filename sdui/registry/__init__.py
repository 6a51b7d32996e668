"""Token registry with integrity validation and statistics."""

from .lib import (
    InvalidTokenError,
    RegistrationStats,
    RegistrySnapshot,
    TokenRegistry,
    find_cycles,
    missing_screen_tokens,
    validate_snapshot,
)

__all__ = [
    # Store
    "TokenRegistry",
    "RegistrySnapshot",
    "RegistrationStats",
    "InvalidTokenError",
    # Analysis
    "validate_snapshot",
    "missing_screen_tokens",
    "find_cycles",
]
