"""Output formatting for token trees.

Generates human-readable text representations of token trees and resolved
screens for the CLI's render command.
"""

from dataclasses import dataclass
from typing import Any, Callable, Sequence, TypeVar

from sdui.screen import ResolutionStatus, ResolvedNode, ResolvedScreen
from sdui.tokens import BaseToken, Capability, capabilities_of, children_of, encode_token_json

N = TypeVar("N")


@dataclass
class TokenOutput:
    """Complete render output for one token tree.

    Attributes:
        text_tree: Human-readable tree representation.
        json_text: Normalised wire JSON.
        token: Original token.
    """

    text_tree: str
    json_text: str
    token: BaseToken

    def to_text(self) -> str:
        return f"{self.text_tree}\n\n{self.json_text}\n"


def _token_attrs(token: BaseToken) -> list[str]:
    attrs = [token.token_type.value, f"v{token.version}"]
    caps = capabilities_of(token)
    if Capability.INTERACTIVE in caps:
        attrs.append("interactive")
    text = getattr(token, "text", None)
    if text is not None:
        attrs.append(repr(text.raw))
    return attrs


def _format_tree(
    node: N,
    label: Callable[[N], str],
    children: Callable[[N], Sequence[N]],
) -> str:
    lines: list[str] = []

    def _format_node(current: N, prefix: str, is_last: bool, is_root: bool) -> None:
        if is_root:
            connector = ""
            child_prefix = ""
        else:
            connector = "└── " if is_last else "├── "
            child_prefix = prefix + ("    " if is_last else "│   ")

        lines.append(f"{prefix}{connector}{label(current)}")

        kids = children(current)
        for i, child in enumerate(kids):
            _format_node(child, child_prefix, i == len(kids) - 1, False)

    _format_node(node, "", True, True)
    return "\n".join(lines)


def format_token_tree(token: BaseToken) -> str:
    """Format a token tree as a human-readable tree.

    Example output:
        profile_card [Card, v1, interactive]
        └── profile_column [Column, v1]
            ├── avatar_image [AsyncImage, v1, interactive]
            └── name_text [Text, v1, 'John Doe']

    Args:
        token: Root token to format.

    Returns:
        Formatted tree string.
    """
    return _format_tree(
        token,
        lambda t: f"{t.id} [{', '.join(_token_attrs(t))}]",
        lambda t: children_of(t) or (),
    )


def _resolved_label(node: ResolvedNode) -> str:
    if node.status is not ResolutionStatus.RESOLVED:
        return f"{node.id} [{node.status.value}]"
    attrs: list[Any] = [node.token.token_type.value]
    if node.text is not None:
        attrs.append(repr(node.text))
    return f"{node.id} [{', '.join(attrs)}]"


def format_resolved_screen(screen: ResolvedScreen) -> str:
    """Format a resolved screen with its bound text and any issues."""
    lines = [f"Screen {screen.id}"]
    for node in screen.nodes:
        lines.append(_format_tree(node, _resolved_label, lambda n: n.children))
    if screen.issues:
        lines.append("")
        lines.append("Issues:")
        lines.extend(f"  - {issue.message}" for issue in screen.issues)
    return "\n".join(lines)


def render_token(token: BaseToken, indent: int | None = 2) -> TokenOutput:
    """Build the text tree and normalised JSON for a token."""
    return TokenOutput(
        text_tree=format_token_tree(token),
        json_text=encode_token_json(token, indent=indent),
        token=token,
    )


__all__ = [
    "TokenOutput",
    "format_token_tree",
    "format_resolved_screen",
    "render_token",
]
