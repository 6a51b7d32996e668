"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Isolation from SDUI_* variables set in the developer's shell
- Sample registry and screen fixtures
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from sdui.config import list_environment_variables

if TYPE_CHECKING:
    from sdui.registry import TokenRegistry
    from sdui.screen import ScreenPayload

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Configuration Constants
# =============================================================================

PROJECT_ROOT = Path(__file__).parent


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_sdui_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SDUI_* variables so tests see documented defaults.

    Tests that need a value set it explicitly with monkeypatch.
    """
    for env_var in list_environment_variables():
        if env_var.value.name in os.environ:
            monkeypatch.delenv(env_var.value.name)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Directory containing __main__.py."""
    return PROJECT_ROOT


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def sample_registry() -> TokenRegistry:
    """Registry holding every node of every canned sample.

    Returns:
        A filled TokenRegistry.
    """
    from sdui.samples import build_sample_registry

    return build_sample_registry()


@pytest.fixture
def enhanced_screen() -> ScreenPayload:
    """Screen referencing the enhanced card with a bound title.

    Returns:
        ScreenPayload with bindings {"title": "Welcome"}.
    """
    from sdui.samples import SAMPLE_SCREENS

    return SAMPLE_SCREENS["enhanced_home"]
