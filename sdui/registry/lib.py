"""Identity-keyed token store with integrity validation.

The registry maps token IDs to token trees. Containers own their children
inline, but a child's ID is also a reference: resolution and integrity
checks look children up by ID, so every child must be registered under its
own ID for a screen to resolve completely.

All reads and writes go through a re-entrant lock. Validation works on a
point-in-time snapshot, so it never observes a half-applied batch and never
holds the lock while it walks the graph.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping

from sdui.tokens import BaseToken, child_ids
from sdui.validation import validate_token

if TYPE_CHECKING:
    from sdui.screen import ScreenPayload

logger = logging.getLogger(__name__)


class InvalidTokenError(ValueError):
    """Raised when a token cannot be registered."""


@dataclass(frozen=True)
class RegistrationStats:
    """Summary of the registry contents.

    Attributes:
        total_tokens: Number of registered tokens.
        tokens_by_variant: Count per variant wire tag.
        sorted_ids: All registered IDs, sorted.
    """

    total_tokens: int
    tokens_by_variant: dict[str, int] = field(default_factory=dict)
    sorted_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Wire form: each attribute under its camelCase name."""
        return {
            "totalTokens": self.total_tokens,
            "tokensByVariant": dict(self.tokens_by_variant),
            "sortedIds": list(self.sorted_ids),
        }


@dataclass(frozen=True)
class RegistrySnapshot:
    """Read-only, point-in-time view of a registry.

    Attributes:
        tokens: Immutable mapping of ID to token.
        duplicates: IDs that were overwritten with a different token.
    """

    tokens: Mapping[str, BaseToken]
    duplicates: frozenset[str] = frozenset()

    def get(self, token_id: str) -> BaseToken | None:
        return self.tokens.get(token_id)

    def __contains__(self, token_id: object) -> bool:
        return token_id in self.tokens

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)


class TokenRegistry:
    """Thread-safe registry of tokens keyed by ID.

    Example:
        >>> registry = TokenRegistry()
        >>> registry.register(TextToken(id="title", text="Hello"))
        >>> registry.has_token("title")
        True
        >>> registry.validate_registry()
        []
    """

    def __init__(self, tokens: Iterable[BaseToken] | None = None) -> None:
        self._tokens: dict[str, BaseToken] = {}
        self._duplicates: set[str] = set()
        self._lock = threading.RLock()
        if tokens is not None:
            self.register_all(tokens)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def register(self, token: BaseToken) -> None:
        """Insert a token, replacing any token with the same ID.

        Replacing a token with a different value logs a warning and is
        reported by `validate_registry()` as a duplicate ID.
        """
        with self._lock:
            self._store(token, warn=True)

    def register_all(self, tokens: Iterable[BaseToken]) -> None:
        """Register several tokens as one batch."""
        with self._lock:
            for token in tokens:
                self._store(token, warn=True)

    def register_with_validation(self, token: BaseToken) -> None:
        """Register a token after checking its ID.

        Raises:
            InvalidTokenError: If the token ID is empty or blank.
        """
        if not token.id or not token.id.strip():
            raise InvalidTokenError("Token ID cannot be empty or blank")

        with self._lock:
            if token.id in self._tokens:
                logger.warning("Overwriting existing token with ID '%s'", token.id)
            self._store(token, warn=False)

    def clear(self) -> None:
        """Remove all tokens and forget recorded duplicates."""
        with self._lock:
            self._tokens.clear()
            self._duplicates.clear()

    def _store(self, token: BaseToken, *, warn: bool) -> None:
        existing = self._tokens.get(token.id)
        if existing is not None and existing != token:
            self._duplicates.add(token.id)
            if warn:
                logger.warning(
                    "Token ID '%s' registered twice with different content; "
                    "keeping the latest",
                    token.id,
                )
        self._tokens[token.id] = token

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_token(self, token_id: str) -> BaseToken | None:
        with self._lock:
            return self._tokens.get(token_id)

    def has_token(self, token_id: str) -> bool:
        with self._lock:
            return token_id in self._tokens

    def all_tokens(self) -> dict[str, BaseToken]:
        """Return a copy of the ID to token mapping."""
        with self._lock:
            return dict(self._tokens)

    def snapshot(self) -> RegistrySnapshot:
        """Take a consistent read-only view for resolution or validation."""
        with self._lock:
            return RegistrySnapshot(
                tokens=MappingProxyType(dict(self._tokens)),
                duplicates=frozenset(self._duplicates),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def __contains__(self, token_id: object) -> bool:
        with self._lock:
            return token_id in self._tokens

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_registry(self) -> list[str]:
        """Check every registered token and the references between them.

        Performs the following checks:
            - Blank IDs
            - IDs registered twice with different content
            - Per-token field findings
            - Child references to unregistered IDs
            - Cyclic references through registered children

        Returns:
            list[str]: One message per violation (empty if consistent).
        """
        return validate_snapshot(self.snapshot())

    def validate_screen_payload(self, payload: ScreenPayload) -> list[str]:
        """Find token IDs a screen needs that are not registered.

        Children of registered containers are followed by ID, so a missing
        grandchild is reported as well.

        Returns:
            list[str]: Distinct missing IDs in first-seen order.
        """
        return missing_screen_tokens(self.snapshot(), payload)

    def find_cycles(self) -> list[list[str]]:
        """Find cyclic child references among registered tokens.

        Returns:
            list[list[str]]: Each cycle as an ID path ending where it began.
        """
        return find_cycles(self.snapshot())

    def get_registration_stats(self) -> RegistrationStats:
        """Summarize the registry contents."""
        snapshot = self.snapshot()
        by_variant: dict[str, int] = {}
        for token in snapshot.tokens.values():
            by_variant[token.type] = by_variant.get(token.type, 0) + 1
        return RegistrationStats(
            total_tokens=len(snapshot),
            tokens_by_variant=by_variant,
            sorted_ids=sorted(snapshot.tokens),
        )


# =============================================================================
# Snapshot analysis
# =============================================================================


def validate_snapshot(snapshot: RegistrySnapshot) -> list[str]:
    """Validate a registry snapshot. See `TokenRegistry.validate_registry`."""
    errors: list[str] = []

    for token_id, token in snapshot.tokens.items():
        if not token.id.strip():
            errors.append("Token has empty or blank ID")

        if token_id in snapshot.duplicates:
            errors.append(f"Duplicate token ID found: {token_id}")

        errors.extend(finding.message for finding in validate_token(token))

        for child_id in child_ids(token):
            if child_id not in snapshot:
                errors.append(
                    f"Token '{token.id}' references missing child token '{child_id}'"
                )

    for cycle in find_cycles(snapshot):
        errors.append(f"Cyclic reference detected: {' -> '.join(cycle)}")

    return errors


def missing_screen_tokens(
    snapshot: RegistrySnapshot, payload: ScreenPayload
) -> list[str]:
    """Distinct IDs reachable from a screen that the snapshot lacks."""
    missing: list[str] = []
    visited: set[str] = set()

    def _visit(token_id: str) -> None:
        if token_id in visited:
            return
        visited.add(token_id)

        token = snapshot.get(token_id)
        if token is None:
            missing.append(token_id)
            return
        for child_id in child_ids(token):
            _visit(child_id)

    for ref in payload.tokens:
        _visit(ref.id)

    return missing


def find_cycles(snapshot: RegistrySnapshot) -> list[list[str]]:
    """Detect cycles in the registered child-reference graph."""
    cycles: list[list[str]] = []
    visited: set[str] = set()

    def _check(token_id: str, path: list[str], on_path: set[str]) -> None:
        if token_id in on_path:
            start = path.index(token_id)
            cycles.append(path[start:] + [token_id])
            return
        if token_id in visited:
            return
        token = snapshot.get(token_id)
        if token is None:
            return
        visited.add(token_id)
        path.append(token_id)
        on_path.add(token_id)
        for child_id in child_ids(token):
            _check(child_id, path, on_path)
        on_path.remove(token_id)
        path.pop()

    for token_id in snapshot.tokens:
        _check(token_id, [], set())

    return cycles


__all__ = [
    "InvalidTokenError",
    "RegistrationStats",
    "RegistrySnapshot",
    "TokenRegistry",
    "validate_snapshot",
    "missing_screen_tokens",
    "find_cycles",
]
