"""Canned token trees and screens.

Every sample uses explicit, globally unique IDs so that all of them can be
registered side by side. `build_sample_registry` registers every node of
every sample under its own ID; `SAMPLE_SCREENS` reference them.
"""

import logging
from typing import Callable

from sdui.registry import TokenRegistry
from sdui.screen import ScreenPayload, TokenRef
from sdui.tokens import (
    AsyncImageToken,
    BaseToken,
    ButtonToken,
    CardToken,
    ColumnToken,
    LazyColumnToken,
    RowToken,
    SliderToken,
    TextToken,
    walk,
)
from sdui.values import (
    Action,
    ActionType,
    ButtonStyle,
    Margin,
    Padding,
    TextStyle,
)

logger = logging.getLogger(__name__)


def profile_card() -> CardToken:
    return CardToken(
        id="profile_card",
        padding=Padding(all=16),
        children=[
            ColumnToken(
                id="profile_column",
                children=[
                    AsyncImageToken(
                        id="avatar_image",
                        url="https://picsum.photos/56",
                        width_dp=56,
                        height_dp=56,
                    ),
                    TextToken(
                        id="name_text",
                        text="John Doe",
                        style=TextStyle.HEADLINE_MEDIUM,
                    ),
                    TextToken(
                        id="followers_text",
                        text="1234 followers",
                        style=TextStyle.BODY_MEDIUM,
                    ),
                ],
            )
        ],
    )


def article_card() -> CardToken:
    return CardToken(
        id="article_card",
        padding=Padding(all=16),
        children=[
            ColumnToken(
                id="article_column",
                children=[
                    AsyncImageToken(
                        id="article_image",
                        url="https://picsum.photos/400/250",
                        width_dp=400,
                        height_dp=250,
                    ),
                    TextToken(
                        id="article_title",
                        text="Server-driven UI cuts release time",
                        style=TextStyle.HEADLINE_MEDIUM,
                        margin=Margin(top=8),
                    ),
                ],
            )
        ],
    )


def enhanced_card() -> CardToken:
    """Card whose title is bound per screen through ``{{title}}``."""
    return CardToken(
        id="enhanced_card",
        padding=Padding(all=16),
        children=[
            TextToken(
                id="title",
                text="{{title}}",
                style=TextStyle.HEADLINE_MEDIUM,
            ),
            TextToken(
                id="description",
                text="This card demonstrates the CardToken with styling and a button.",
                style=TextStyle.BODY_MEDIUM,
                margin=Margin(top=8),
            ),
            ButtonToken(
                id="button",
                text="Learn More",
                style=ButtonStyle.FILLED,
                margin=Margin(top=16),
                on_click=Action(
                    type=ActionType.NAVIGATE,
                    data={"target": "details", "url": "https://example.com"},
                ),
            ),
        ],
    )


def form_card() -> CardToken:
    return CardToken(
        id="form_card",
        padding=Padding(all=16),
        children=[
            ColumnToken(
                id="form_column",
                children=[
                    TextToken(
                        id="form_title",
                        text="Contact Form",
                        style=TextStyle.HEADLINE_MEDIUM,
                    ),
                    TextToken(
                        id="form_description",
                        text="Fill out this form to get in touch with us.",
                        style=TextStyle.BODY_MEDIUM,
                        margin=Margin(top=8),
                    ),
                    ButtonToken(
                        id="form_submit",
                        text="Submit",
                        style=ButtonStyle.FILLED,
                        margin=Margin(top=16),
                        on_click=Action(
                            type=ActionType.CUSTOM, data={"action": "submit_form"}
                        ),
                    ),
                ],
            )
        ],
    )


def slider_card() -> CardToken:
    return CardToken(
        id="slider_card",
        padding=Padding(all=16),
        children=[
            ColumnToken(
                id="slider_column",
                children=[
                    TextToken(
                        id="slider_title",
                        text="Local State Management",
                        style=TextStyle.HEADLINE_MEDIUM,
                    ),
                    TextToken(
                        id="slider_description",
                        text="This slider demonstrates local state management.",
                        style=TextStyle.BODY_MEDIUM,
                        margin=Margin(top=8),
                    ),
                    SliderToken(
                        id="demo_slider",
                        initial_value=0.5,
                        margin=Margin(top=16),
                    ),
                ],
            )
        ],
    )


def lazy_list(count: int = 5) -> LazyColumnToken:
    return LazyColumnToken(
        id="lazy_list",
        padding=Padding(all=16),
        children=[
            CardToken(
                id=f"list_item_{i}",
                margin=Margin(bottom=8),
                padding=Padding(all=12),
                children=[
                    TextToken(
                        id=f"item_text_{i}",
                        text=f"List Item {i}",
                        style=TextStyle.BODY_MEDIUM,
                    )
                ],
            )
            for i in range(1, count + 1)
        ],
    )


def composed_cards() -> RowToken:
    """Row holding the profile and article cards."""
    return RowToken(
        id="composed_cards",
        padding=Padding(all=16),
        children=[profile_card(), article_card()],
    )


def dashboard() -> ColumnToken:
    """Column composing several of the other samples."""
    return ColumnToken(
        id="dashboard",
        children=[
            TextToken(
                id="dashboard_header",
                text="Dashboard",
                style=TextStyle.HEADLINE_LARGE,
                margin=Margin(all=16),
            ),
            RowToken(
                id="dashboard_cards",
                padding=Padding(horizontal=16),
                children=[enhanced_card(), slider_card()],
            ),
            form_card(),
            lazy_list(),
        ],
    )


SAMPLE_BUILDERS: dict[str, Callable[[], BaseToken]] = {
    "profile-card": profile_card,
    "article-card": article_card,
    "composed-cards": composed_cards,
    "dashboard": dashboard,
    "enhanced-card": enhanced_card,
    "form": form_card,
    "slider": slider_card,
    "lazy-list": lazy_list,
}

SAMPLE_SCREENS: dict[str, ScreenPayload] = {
    "home": ScreenPayload(
        id="home",
        tokens=[
            TokenRef(id="profile_card"),
            TokenRef(id="article_card"),
            TokenRef(id="lazy_list"),
        ],
    ),
    "enhanced_home": ScreenPayload(
        id="enhanced_home",
        tokens=[TokenRef(id="enhanced_card", bind={"title": "Welcome"})],
    ),
}


def list_samples() -> list[str]:
    """Names accepted by `build_sample`, sorted."""
    return sorted(SAMPLE_BUILDERS)


def build_sample(name: str) -> BaseToken:
    """Build a canned token tree.

    Args:
        name: Sample name, e.g. "profile-card".

    Returns:
        Root token of the sample.

    Raises:
        KeyError: If the sample name is unknown.
    """
    try:
        builder = SAMPLE_BUILDERS[name]
    except KeyError:
        raise KeyError(
            f"Unknown sample: {name!r}. Available: {', '.join(list_samples())}"
        ) from None
    return builder()


def build_sample_registry(registry: TokenRegistry | None = None) -> TokenRegistry:
    """Register every node of every sample under its own ID.

    Args:
        registry: Registry to fill. A new one is created if omitted.

    Returns:
        The filled registry.
    """
    registry = registry if registry is not None else TokenRegistry()
    for name in list_samples():
        registry.register_all(walk(build_sample(name)))
    logger.debug("Registered %d sample tokens", len(registry))
    return registry


__all__ = [
    # Builders
    "profile_card",
    "article_card",
    "enhanced_card",
    "form_card",
    "slider_card",
    "lazy_list",
    "composed_cards",
    "dashboard",
    # Lookup
    "SAMPLE_BUILDERS",
    "SAMPLE_SCREENS",
    "list_samples",
    "build_sample",
    "build_sample_registry",
]
