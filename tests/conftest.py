"""Pytest configuration shared across the suite."""

import pytest

import _bootstrap  # noqa: F401

from token_rotator.core.config import get_settings


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Settings are cached per process; rebuild them for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
