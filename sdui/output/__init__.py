"""Human-readable output for token trees and resolved screens."""

from .lib import TokenOutput, format_resolved_screen, format_token_tree, render_token

__all__ = [
    "TokenOutput",
    "format_token_tree",
    "format_resolved_screen",
    "render_token",
]
