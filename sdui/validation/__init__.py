"""Per-token field validation with structured findings."""

from .lib import REQUIRED_ACTION_DATA, ValidationError, is_valid, validate_token

__all__ = [
    "ValidationError",
    "REQUIRED_ACTION_DATA",
    "validate_token",
    "is_valid",
]
