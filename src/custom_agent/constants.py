"""Environment flags.

These are functions rather than module constants so tests can flip the
environment with ``monkeypatch`` without reimporting anything.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

# Any of these set to a non-empty value switches providers to test doubles.
TEST_ENV_VARS = (
    "PLAYWRIGHT_TEST_BASE_URL",
    "PLAYWRIGHT",
    "CI_PLAYWRIGHT",
    "CUSTOM_AGENT_TEST_MODE",
)

APP_ENV_VARS = ("APP_ENV", "ENVIRONMENT")


def is_test_environment(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when running under an end-to-end or explicit test mode."""
    env = os.environ if environ is None else environ
    return any(env.get(name) for name in TEST_ENV_VARS)


def app_environment(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the lower-cased deployment environment name, or ``""``."""
    env = os.environ if environ is None else environ
    for name in APP_ENV_VARS:
        value = env.get(name)
        if value:
            return value.strip().lower()
    return ""


def is_production_environment(environ: Optional[Mapping[str, str]] = None) -> bool:
    return app_environment(environ) == "production"


def is_development_environment(environ: Optional[Mapping[str, str]] = None) -> bool:
    return app_environment(environ) == "development"
