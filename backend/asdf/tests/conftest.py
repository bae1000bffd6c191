"""
Global pytest configuration and fixtures for all tests.

Provides:
- A fresh service container per test
- Isolated ASDF_* environment variables and settings cache
"""

import os

import pytest

from asdf.core.config import ENV_PREFIX, Settings, get_settings
from asdf.core.dependencies import ServiceContainer


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove ASDF_* variables and reset cached settings around each test."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)

    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()

    # .env loading writes os.environ directly
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            del os.environ[key]


@pytest.fixture
def container() -> ServiceContainer:
    """Provide an empty, unlocked container."""
    return ServiceContainer()


@pytest.fixture
def settings() -> Settings:
    """Provide default settings without reading a .env file."""
    return Settings(env_file=None)


class CallCounter:
    """Factory wrapper that records how many times it was invoked."""

    def __init__(self, result=None):
        self.calls = 0
        self.result = result

    def __call__(self, container):
        self.calls += 1
        return self.result


@pytest.fixture
def counter():
    return CallCounter
