"""Screen payload models.

A screen names the top-level tokens it shows by ID, each with the
placeholder bindings that apply to that token and its descendants.
"""

from typing import Any

from pydantic import Field

from sdui.values import WireModel


class TokenRef(WireModel):
    """Reference to a registered token with placeholder bindings."""

    id: str
    bind: dict[str, str] = Field(default_factory=dict)


class ScreenPayload(WireModel):
    """A screen composed of token references, in display order."""

    id: str
    tokens: tuple[TokenRef, ...] = ()

    def token_ids(self) -> list[str]:
        return [ref.id for ref in self.tokens]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["TokenRef", "ScreenPayload"]
