"""Screen payloads and their resolution against a token registry."""

from .lib import (
    NullListener,
    RecordingListener,
    ResolutionIssue,
    ResolutionListener,
    ResolutionStatus,
    ResolvedNode,
    ResolvedScreen,
    ScreenResolver,
    resolve_templates,
)
from .models import ScreenPayload, TokenRef

__all__ = [
    # Payload models
    "TokenRef",
    "ScreenPayload",
    # Resolution
    "ScreenResolver",
    "ResolutionStatus",
    "ResolutionIssue",
    "ResolvedNode",
    "ResolvedScreen",
    "resolve_templates",
    # Listeners
    "ResolutionListener",
    "NullListener",
    "RecordingListener",
]
