"""
Pytest configuration and shared fixtures for token transformer tests.
"""

from pathlib import Path

import numpy as np
import pytest

from token_transformer import InlineStyleMatcher, TokenRegistry, UtilityClassMatcher
from token_transformer.config import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep environment settings from leaking into tests."""
    monkeypatch.delenv("TOKEN_TRANSFORMER_CSS_PATH", raising=False)
    monkeypatch.delenv("TOKEN_TRANSFORMER_COLOR_THRESHOLD", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def tokens_css_path() -> Path:
    """Path to the CSS token fixture."""
    return FIXTURES_DIR / "tokens.css"


@pytest.fixture
def tokens_css(tokens_css_path) -> str:
    """Contents of the CSS token fixture."""
    return tokens_css_path.read_text(encoding="utf-8")


@pytest.fixture
def registry(tokens_css) -> TokenRegistry:
    """Initialized registry built from the CSS fixture."""
    return TokenRegistry(css_content=tokens_css).initialize()


@pytest.fixture
def utility_matcher() -> UtilityClassMatcher:
    return UtilityClassMatcher()


@pytest.fixture
def inline_matcher() -> InlineStyleMatcher:
    return InlineStyleMatcher()
