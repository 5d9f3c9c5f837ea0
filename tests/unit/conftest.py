"""
Pytest configuration for unit tests.

Keeps TICKER_MATCHER_* settings from the developer's shell out of the tests.
"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_matcher_env(monkeypatch):
    """Remove matcher settings from the environment for each test."""
    for key in list(os.environ):
        if key.startswith("TICKER_MATCHER_"):
            monkeypatch.delenv(key)
