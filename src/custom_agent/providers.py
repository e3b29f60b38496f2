"""The application's model provider.

:func:`get_provider` returns the provider the app should use for every
model role. Under test (see :func:`custom_agent.constants.is_test_environment`)
the roles map to deterministic doubles; otherwise they map to models on the
OpenAI-compatible backend configured through ``CUSTOM_AGENT_*`` variables.

Usage:
    from custom_agent import get_provider

    provider = get_provider()
    title = provider.language_model("title-model").invoke("Summarize: ...")
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from custom_agent.constants import is_test_environment
from custom_agent.middleware import extract_reasoning_middleware, wrap_language_model
from custom_agent.models import SMALL_IMAGE_MODEL_ID, ModelRoles
from custom_agent.provider import CustomProvider, OpenAICompatibleProvider, describe_model
from custom_agent.settings import CustomAgentSettings
from custom_agent.testing import build_test_provider

logger = logging.getLogger(__name__)

_provider: Optional[CustomProvider] = None
_lock = threading.Lock()


def build_custom_agent_provider(settings: CustomAgentSettings) -> CustomProvider:
    """Map every model role to a model on the configured backend."""
    backend = OpenAICompatibleProvider.from_settings(settings)

    language_models = {
        ModelRoles.chat: backend(settings.chat_model),
        ModelRoles.reasoning: wrap_language_model(
            backend(settings.reasoning_model),
            extract_reasoning_middleware(tag_name=settings.reasoning_tag),
        ),
        ModelRoles.title: backend(settings.title_model),
        ModelRoles.artifact: backend(settings.artifact_model),
    }
    image_models = {}
    if settings.image_model:
        image_models[SMALL_IMAGE_MODEL_ID] = backend.image_model(settings.image_model)

    return CustomProvider(language_models=language_models, image_models=image_models)


def build_provider(
    settings: Optional[CustomAgentSettings] = None,
    *,
    test: Optional[bool] = None,
) -> CustomProvider:
    """Build a provider for the current environment.

    Args:
        settings: Backend settings. Read from the environment when omitted.
            Ignored in test mode.
        test: Force test doubles on or off. Defaults to
            :func:`is_test_environment`.

    Raises:
        ConfigurationError: If the environment holds invalid settings.
    """
    if test is None:
        test = is_test_environment()

    if test:
        logger.info("Using test model provider")
        return build_test_provider()

    if settings is None:
        settings = CustomAgentSettings.from_env()

    provider = build_custom_agent_provider(settings)
    logger.info("Using %s at %s", settings.provider_name, settings.base_url)
    for model_id in provider.language_model_ids():
        logger.info("  %s -> %s", model_id, describe_model(provider.language_model(model_id)))
    for model_id in provider.image_model_ids():
        logger.info("  %s -> %s (image)", model_id, describe_model(provider.image_model(model_id)))
    return provider


def get_provider() -> CustomProvider:
    """Return the process-wide provider, building it on first use."""
    global _provider
    if _provider is None:
        with _lock:
            if _provider is None:
                _provider = build_provider()
    return _provider


def reset_provider() -> None:
    """Drop the cached provider so the next call re-reads the environment."""
    global _provider
    with _lock:
        _provider = None
