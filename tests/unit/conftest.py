"""Shared fixtures for unit tests."""

import pytest

from tripwire import assert_config, clear_assert_funcs


@pytest.fixture(autouse=True)
def clean_config():
    """Reset the global config and user functions around each test."""
    assert_config.reset()
    clear_assert_funcs()
    yield
    assert_config.reset()
    clear_assert_funcs()
