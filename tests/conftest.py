"""Shared fixtures for reify tests."""

from collections.abc import Iterator

import pytest

from reify.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Re-read settings for every test so env overrides never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
