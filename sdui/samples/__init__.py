"""Canned token trees, the sample registry and sample screens."""

from .lib import (
    SAMPLE_BUILDERS,
    SAMPLE_SCREENS,
    article_card,
    build_sample,
    build_sample_registry,
    composed_cards,
    dashboard,
    enhanced_card,
    form_card,
    lazy_list,
    list_samples,
    profile_card,
    slider_card,
)

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
