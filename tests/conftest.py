"""
ABOUTME: Pytest configuration and shared fixtures
ABOUTME: Provides environment setup fixtures and isolated accessors for all tests
"""

import os
from unittest.mock import patch

import pytest

from envvar import TypedEnvAccessor


@pytest.fixture
def test_env_vars():
    """Provide test environment variables."""
    return {
        "STRING_VAR": "abc",
        "BOOL_VAR": "true",
        "INT_VAR": "42",
        "UINT_VAR": "1",
        "FLOAT_VAR": "3.14",
    }


@pytest.fixture
def mock_env_vars(test_env_vars, monkeypatch):
    """Mock environment variables for testing, with NOT_SET guaranteed absent."""
    monkeypatch.delenv("NOT_SET", raising=False)
    with patch.dict(os.environ, test_env_vars, clear=False):
        yield test_env_vars


@pytest.fixture
def set_env(monkeypatch):
    """Provide a setter for a single process environment variable."""
    monkeypatch.delenv("NOT_SET", raising=False)

    def _set(name, value):
        monkeypatch.setenv(name, value)

    return _set


@pytest.fixture
def accessor(test_env_vars):
    """Provide an accessor over a private mapping instead of os.environ."""
    return TypedEnvAccessor(dict(test_env_vars))
