"""Screen resolution.

Turns a `ScreenPayload` into a tree of `ResolvedNode`s ready to render:
every reference and every container child is looked up by ID in a single
registry snapshot, gated by version, and has its template fields resolved
against the bindings of the top-level reference it was reached from.

Problems never abort resolution. A missing, incompatible or cyclic
reference becomes a node with the matching status, an entry in
`ResolvedScreen.issues`, and (for missing and incompatible tokens) a
listener callback.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping, Protocol

from sdui.registry import RegistrySnapshot, TokenRegistry
from sdui.tokens import BaseToken, child_ids, template_paths
from sdui.values import TemplateString
from sdui.versioning import CompatibilityResult, check_compatibility

from .models import ScreenPayload, TokenRef

logger = logging.getLogger(__name__)


class ResolutionStatus(str, Enum):
    """Outcome of resolving one reference."""

    RESOLVED = "resolved"
    MISSING = "missing"
    INCOMPATIBLE = "incompatible"
    CYCLIC = "cyclic"


@dataclass(frozen=True)
class ResolutionIssue:
    """A reference that could not be fully resolved."""

    kind: ResolutionStatus
    token_id: str
    message: str


@dataclass(frozen=True)
class ResolvedNode:
    """A token ready for rendering.

    Attributes:
        id: Referenced token ID.
        status: How resolution went for this node.
        token: The registered token (None when missing).
        bindings: Placeholder bindings in effect for this node.
        children: Resolved children, in order.
        templates: Resolved template fields keyed by dotted wire path
            (e.g. "text", "a11y.label").
    """

    id: str
    status: ResolutionStatus
    token: BaseToken | None = None
    bindings: Mapping[str, str] = field(default_factory=dict)
    children: tuple["ResolvedNode", ...] = ()
    templates: Mapping[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str | None:
        """Resolved `text` field, if the token has one."""
        return self.templates.get("text")

    def walk(self) -> Iterator["ResolvedNode"]:
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class ResolvedScreen:
    """Result of resolving a screen payload."""

    id: str
    nodes: tuple[ResolvedNode, ...] = ()
    issues: tuple[ResolutionIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues

    def find(self, token_id: str) -> ResolvedNode | None:
        """First node with the given ID, depth-first."""
        for node in self.nodes:
            for candidate in node.walk():
                if candidate.id == token_id:
                    return candidate
        return None


# =============================================================================
# Listeners
# =============================================================================


class ResolutionListener(Protocol):
    """Receives notifications about unresolved references."""

    def on_missing(self, token_id: str) -> None: ...

    def on_incompatible(self, token: BaseToken, result: CompatibilityResult) -> None: ...


class NullListener:
    """Listener that ignores every notification."""

    def on_missing(self, token_id: str) -> None:
        pass

    def on_incompatible(self, token: BaseToken, result: CompatibilityResult) -> None:
        pass


class RecordingListener:
    """Listener that keeps every notification, for inspection."""

    def __init__(self) -> None:
        self.missing: list[str] = []
        self.incompatible: list[CompatibilityResult] = []

    def on_missing(self, token_id: str) -> None:
        self.missing.append(token_id)

    def on_incompatible(self, token: BaseToken, result: CompatibilityResult) -> None:
        self.incompatible.append(result)


# =============================================================================
# Template resolution
# =============================================================================


def resolve_templates(token: BaseToken, bindings: Mapping[str, Any]) -> dict[str, str]:
    """Resolve every template field of a token.

    Args:
        token: Token whose own fields are resolved (children are skipped).
        bindings: Placeholder values.

    Returns:
        Dotted wire path to resolved string, for fields that are present.
    """
    data = token.model_dump(
        mode="json", by_alias=True, exclude_none=True, exclude={"children"}
    )
    resolved: dict[str, str] = {}
    for path in template_paths(token.type):
        value: Any = data
        for key in path:
            if not isinstance(value, dict) or key not in value:
                value = None
                break
            value = value[key]
        if isinstance(value, str):
            resolved[".".join(path)] = TemplateString(value).resolve(bindings)
    return resolved


# =============================================================================
# Resolver
# =============================================================================


class ScreenResolver:
    """Resolves screen payloads against a token registry.

    Example:
        >>> resolver = ScreenResolver(registry)
        >>> screen = resolver.resolve(payload)
        >>> screen.find("title").text
        'Welcome'
    """

    def __init__(
        self,
        registry: TokenRegistry | RegistrySnapshot,
        *,
        listener: ResolutionListener | None = None,
        client_version: int | None = None,
    ) -> None:
        self.registry = registry
        self.listener = listener or NullListener()
        self.client_version = client_version

    def _snapshot(self) -> RegistrySnapshot:
        if isinstance(self.registry, RegistrySnapshot):
            return self.registry
        return self.registry.snapshot()

    def resolve(self, payload: ScreenPayload) -> ResolvedScreen:
        """Resolve every reference of a screen using one registry snapshot."""
        snapshot = self._snapshot()
        issues: list[ResolutionIssue] = []
        nodes = tuple(
            self._resolve_id(snapshot, ref.id, dict(ref.bind), frozenset(), issues)
            for ref in payload.tokens
        )
        if issues:
            logger.debug(
                "Screen '%s' resolved with %d issue(s)", payload.id, len(issues)
            )
        return ResolvedScreen(id=payload.id, nodes=nodes, issues=tuple(issues))

    def resolve_ref(self, ref: TokenRef) -> tuple[ResolvedNode, list[ResolutionIssue]]:
        """Resolve a single reference."""
        issues: list[ResolutionIssue] = []
        snapshot = self._snapshot()
        node = self._resolve_id(snapshot, ref.id, dict(ref.bind), frozenset(), issues)
        return node, issues

    def _resolve_id(
        self,
        snapshot: RegistrySnapshot,
        token_id: str,
        bindings: dict[str, str],
        ancestors: frozenset[str],
        issues: list[ResolutionIssue],
    ) -> ResolvedNode:
        if token_id in ancestors:
            issues.append(
                ResolutionIssue(
                    kind=ResolutionStatus.CYCLIC,
                    token_id=token_id,
                    message=f"Token '{token_id}' references itself through its children",
                )
            )
            return ResolvedNode(
                id=token_id, status=ResolutionStatus.CYCLIC, bindings=bindings
            )

        token = snapshot.get(token_id)
        if token is None:
            self.listener.on_missing(token_id)
            issues.append(
                ResolutionIssue(
                    kind=ResolutionStatus.MISSING,
                    token_id=token_id,
                    message=f"Token '{token_id}' is not registered",
                )
            )
            return ResolvedNode(
                id=token_id, status=ResolutionStatus.MISSING, bindings=bindings
            )

        result = check_compatibility(token, self.client_version)
        if not result.is_compatible:
            self.listener.on_incompatible(token, result)
            issues.append(
                ResolutionIssue(
                    kind=ResolutionStatus.INCOMPATIBLE,
                    token_id=token_id,
                    message=result.message,
                )
            )
            return ResolvedNode(
                id=token_id,
                status=ResolutionStatus.INCOMPATIBLE,
                token=token,
                bindings=bindings,
            )

        path = ancestors | {token_id}
        children = tuple(
            self._resolve_id(snapshot, child_id, bindings, path, issues)
            for child_id in child_ids(token)
        )
        return ResolvedNode(
            id=token_id,
            status=ResolutionStatus.RESOLVED,
            token=token,
            bindings=bindings,
            children=children,
            templates=resolve_templates(token, bindings),
        )


__all__ = [
    "ResolutionStatus",
    "ResolutionIssue",
    "ResolvedNode",
    "ResolvedScreen",
    "ResolutionListener",
    "NullListener",
    "RecordingListener",
    "resolve_templates",
    "ScreenResolver",
]
