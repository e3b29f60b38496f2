"""Exception hierarchy for custom-agent-provider.

All errors raised by this package derive from :class:`CustomAgentError`, so
callers can catch one type at the boundary:

    from custom_agent.errors import CustomAgentError

    try:
        model = get_provider().language_model("chat-model")
    except CustomAgentError as e:
        print(e.message, e.hint)

Errors raised by the OpenAI SDK while talking to the backend are not
wrapped; they propagate as-is.
"""

from __future__ import annotations

from typing import List, Optional


class CustomAgentError(Exception):
    """Base exception for custom-agent-provider."""

    def __init__(self, message: str, *, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class ConfigurationError(CustomAgentError):
    """An environment variable or setting holds an invalid value."""

    def __init__(
        self,
        message: str,
        *,
        env_var: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message, hint=hint)
        self.env_var = env_var


class ProviderError(CustomAgentError):
    """Base exception for provider lookups and construction."""

    pass


class NoSuchModelError(ProviderError):
    """A model id was requested that the provider does not know about."""

    def __init__(
        self,
        model_id: str,
        *,
        model_type: str = "languageModel",
        available: Optional[List[str]] = None,
    ):
        self.model_id = model_id
        self.model_type = model_type
        self.available = list(available or [])
        hint = f"Available: {', '.join(self.available)}" if self.available else None
        super().__init__(f"No such {model_type}: {model_id}", hint=hint)


__all__ = [
    "CustomAgentError",
    "ConfigurationError",
    "ProviderError",
    "NoSuchModelError",
]
