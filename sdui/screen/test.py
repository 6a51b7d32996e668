"""Unit tests for screen payloads and resolution."""

import pytest

from sdui.registry import TokenRegistry
from sdui.screen import (
    RecordingListener,
    ResolutionStatus,
    ScreenPayload,
    ScreenResolver,
    TokenRef,
    resolve_templates,
)
from sdui.tokens import AsyncImageToken, ColumnToken, RowToken, SpacerToken, TextToken
from sdui.values import Accessibility, ErrorFallback, Role


def _registry() -> TokenRegistry:
    greeting = TextToken(
        id="greeting",
        text="Hello {{name}}",
        accessibility=Accessibility(role=Role.HEADER, label="Greeting for {{name}}"),
    )
    footer = TextToken(id="footer", text="{{missing}} stays")
    column = ColumnToken(id="column", children=(greeting, footer))
    return TokenRegistry([column, greeting, footer])


class TestScreenPayload:
    """Tests for payload models."""

    @pytest.mark.unit
    def test_wire_shape(self):
        """Payloads serialize as {id, tokens: [{id, bind}]}."""
        payload = ScreenPayload(
            id="home", tokens=[TokenRef(id="card", bind={"title": "Hi"})]
        )
        assert payload.to_dict() == {
            "id": "home",
            "tokens": [{"id": "card", "bind": {"title": "Hi"}}],
        }
        assert ScreenPayload.model_validate(payload.to_dict()) == payload
        assert payload.token_ids() == ["card"]

    @pytest.mark.unit
    def test_bind_defaults_empty(self):
        """References without bindings get an empty map."""
        assert TokenRef(id="x").bind == {}


class TestResolveTemplates:
    """Tests for resolve_templates."""

    @pytest.mark.unit
    def test_nested_templates(self):
        """Template fields inside value objects are resolved."""
        image = AsyncImageToken(
            id="img",
            url="https://cdn/{{id}}.png",
            error_fallback=ErrorFallback(text="No image for {{id}}"),
        )
        assert resolve_templates(image, {"id": "42"}) == {
            "url": "https://cdn/42.png",
            "errorFallback.text": "No image for 42",
        }

    @pytest.mark.unit
    def test_no_templates(self):
        """Tokens without template fields resolve to an empty map."""
        assert resolve_templates(SpacerToken(id="s"), {"x": "y"}) == {}


class TestScreenResolver:
    """Tests for ScreenResolver."""

    @pytest.mark.unit
    def test_bindings_flow_to_descendants(self):
        """A reference's bindings apply to every descendant."""
        payload = ScreenPayload(
            id="home", tokens=[TokenRef(id="column", bind={"name": "Ada"})]
        )
        screen = ScreenResolver(_registry()).resolve(payload)

        assert screen.ok
        assert [n.id for n in screen.nodes] == ["column"]
        greeting = screen.find("greeting")
        assert greeting.status is ResolutionStatus.RESOLVED
        assert greeting.text == "Hello Ada"
        assert greeting.templates["a11y.label"] == "Greeting for Ada"
        assert screen.find("footer").text == "{{missing}} stays"

    @pytest.mark.unit
    def test_missing_reference(self):
        """Missing tokens become MISSING nodes and notify the listener."""
        listener = RecordingListener()
        payload = ScreenPayload(id="home", tokens=[TokenRef(id="nope")])
        screen = ScreenResolver(_registry(), listener=listener).resolve(payload)

        assert not screen.ok
        assert screen.nodes[0].status is ResolutionStatus.MISSING
        assert screen.issues[0].kind is ResolutionStatus.MISSING
        assert listener.missing == ["nope"]

    @pytest.mark.unit
    def test_missing_child(self):
        """Unregistered children are reported but siblings still resolve."""
        registry = _registry()
        registry.register(
            ColumnToken(
                id="column",
                children=(TextToken(id="greeting", text="x"), SpacerToken(id="gone")),
            )
        )
        screen = ScreenResolver(registry).resolve(
            ScreenPayload(id="home", tokens=[TokenRef(id="column")])
        )
        statuses = [c.status for c in screen.nodes[0].children]
        assert statuses == [ResolutionStatus.RESOLVED, ResolutionStatus.MISSING]

    @pytest.mark.unit
    def test_incompatible_token(self):
        """Tokens failing the version gate are reported, not rendered."""
        registry = TokenRegistry([SpacerToken(id="old", version=0)])
        listener = RecordingListener()
        screen = ScreenResolver(registry, listener=listener).resolve(
            ScreenPayload(id="home", tokens=[TokenRef(id="old")])
        )
        node = screen.nodes[0]
        assert node.status is ResolutionStatus.INCOMPATIBLE
        assert node.token is not None
        assert len(listener.incompatible) == 1
        assert listener.incompatible[0].token_id == "old"

    @pytest.mark.unit
    def test_client_ceiling(self):
        """Tokens newer than the client are incompatible."""
        registry = TokenRegistry([SpacerToken(id="new", version=5)])
        payload = ScreenPayload(id="home", tokens=[TokenRef(id="new")])
        assert ScreenResolver(registry).resolve(payload).ok
        limited = ScreenResolver(registry, client_version=4).resolve(payload)
        assert limited.nodes[0].status is ResolutionStatus.INCOMPATIBLE

    @pytest.mark.unit
    def test_cycle_terminates(self):
        """Cyclic child references resolve to a CYCLIC node."""
        registry = TokenRegistry(
            [
                ColumnToken(id="a", children=(RowToken(id="b"),)),
                RowToken(id="b", children=(ColumnToken(id="a"),)),
            ]
        )
        screen = ScreenResolver(registry).resolve(
            ScreenPayload(id="loop", tokens=[TokenRef(id="a")])
        )
        inner = screen.nodes[0].children[0].children[0]
        assert inner.id == "a"
        assert inner.status is ResolutionStatus.CYCLIC
        assert [i.kind for i in screen.issues] == [ResolutionStatus.CYCLIC]

    @pytest.mark.unit
    def test_uses_single_snapshot(self):
        """Resolution reads from the snapshot it was given."""
        registry = _registry()
        snapshot = registry.snapshot()
        registry.clear()
        screen = ScreenResolver(snapshot).resolve(
            ScreenPayload(id="home", tokens=[TokenRef(id="greeting")])
        )
        assert screen.ok
