import os

from dotenv import find_dotenv, load_dotenv

if not os.environ.get("CUSTOM_AGENT_ENV_LOADED"):
    load_dotenv(find_dotenv(usecwd=True))
    os.environ["CUSTOM_AGENT_ENV_LOADED"] = "1"

from custom_agent.constants import (
    is_development_environment,
    is_production_environment,
    is_test_environment,
)
from custom_agent.errors import (
    ConfigurationError,
    CustomAgentError,
    NoSuchModelError,
    ProviderError,
)
from custom_agent.logging import configure_logging, get_logger
from custom_agent.middleware import (
    ReasoningMiddleware,
    WrappedChatModel,
    extract_reasoning_middleware,
    wrap_language_model,
)
from custom_agent.models import (
    DEFAULT_CHAT_MODEL,
    LANGUAGE_MODEL_IDS,
    ChatModel,
    ModelRoles,
    chat_models,
    get_chat_model,
)
from custom_agent.provider import (
    CustomProvider,
    GeneratedImage,
    OpenAICompatibleImageModel,
    OpenAICompatibleProvider,
)
from custom_agent.providers import build_provider, get_provider, reset_provider
from custom_agent.settings import CustomAgentSettings

__version__ = "0.1.0"

__all__ = [
    # Provider selection
    "build_provider",
    "get_provider",
    "reset_provider",
    # Providers
    "CustomProvider",
    "OpenAICompatibleProvider",
    "OpenAICompatibleImageModel",
    "GeneratedImage",
    # Middleware
    "ReasoningMiddleware",
    "WrappedChatModel",
    "extract_reasoning_middleware",
    "wrap_language_model",
    # Models
    "ChatModel",
    "ModelRoles",
    "LANGUAGE_MODEL_IDS",
    "DEFAULT_CHAT_MODEL",
    "chat_models",
    "get_chat_model",
    # Settings
    "CustomAgentSettings",
    # Environment
    "is_test_environment",
    "is_production_environment",
    "is_development_environment",
    # Errors
    "CustomAgentError",
    "ConfigurationError",
    "ProviderError",
    "NoSuchModelError",
    # Logging
    "configure_logging",
    "get_logger",
]
