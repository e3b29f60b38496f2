"""
Root conftest.py for custom-agent-provider tests.

This file provides:
1. Common pytest markers for test categorization
2. An isolated environment for every test (no CUSTOM_AGENT_* leakage)
3. Environment fixtures for test mode and a configured backend
4. Shared sample tools and messages
"""

from __future__ import annotations

import logging
import os

import pytest

from custom_agent.providers import reset_provider

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        norm = str(item.fspath).replace("\\", "/")
        if "/tests/unit/cli/" in norm:
            item.add_marker(pytest.mark.cli)


# Variables that change which provider gets built.
_TEST_MODE_VARS = ("PLAYWRIGHT_TEST_BASE_URL", "PLAYWRIGHT", "CI_PLAYWRIGHT")
_APP_ENV_VARS = ("APP_ENV", "ENVIRONMENT")


# =============================================================================
# ENVIRONMENT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Remove every variable that affects provider selection."""
    for key in list(os.environ):
        if key.startswith("CUSTOM_AGENT_") and key != "CUSTOM_AGENT_ENV_LOADED":
            monkeypatch.delenv(key, raising=False)
    for key in _TEST_MODE_VARS + _APP_ENV_VARS:
        monkeypatch.delenv(key, raising=False)

    reset_provider()
    yield
    reset_provider()

    pkg_logger = logging.getLogger("custom_agent")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture
def test_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    """Switch providers to test doubles."""
    monkeypatch.setenv("CUSTOM_AGENT_TEST_MODE", "1")


@pytest.fixture
def backend_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Configure a custom agent backend through the environment."""
    env = {
        "CUSTOM_AGENT_PROVIDER_NAME": "acme-agent",
        "CUSTOM_AGENT_API_KEY": "sk-acme-secret-123456",
        "CUSTOM_AGENT_BASE_URL": "https://agent.acme.test/v1",
        "CUSTOM_AGENT_HEADERS": '{"X-Org-Id": "acme", "X-Trace": "on"}',
        "CUSTOM_AGENT_CHAT_MODEL": "acme-chat",
        "CUSTOM_AGENT_REASONING_MODEL": "acme-r1",
        "CUSTOM_AGENT_TITLE_MODEL": "acme-mini",
        "CUSTOM_AGENT_ARTIFACT_MODEL": "acme-coder",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_messages() -> list[dict[str, str]]:
    return [
        {"role": "system", "content": "You are a helpful assistant."},
        {"role": "user", "content": "Hello"},
    ]


@pytest.fixture
def sample_tools() -> list:
    def get_weather(city: str) -> str:
        """Get the current weather for a city."""
        return f"Sunny in {city}"

    def calculator(expression: str) -> str:
        """Evaluate an arithmetic expression."""
        return "42"

    return [get_weather, calculator]
