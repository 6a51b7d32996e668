"""Core logging implementation for sdui."""

import logging
import sys
from typing import Optional

__all__ = ["get_logger", "setup_logging", "parse_level"]


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Translate a level name (or number) into a logging level.

    Args:
        value: Level name such as "debug", a numeric level, or None.
        default: Level used when the value is missing or unrecognized.

    Returns:
        Numeric logging level.
    """
    if value is None:
        return default
    if isinstance(value, int):
        return value
    return logging.getLevelNamesMapping().get(value.strip().upper(), default)


def setup_logging(level: int | str = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level (numeric or name).
        stream: Output stream.
    """
    logging.basicConfig(
        level=parse_level(level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or "sdui")
