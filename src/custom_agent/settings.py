"""Settings for the custom agent backend.

Every value comes from a ``CUSTOM_AGENT_*`` environment variable and falls
back to a default when the variable is unset or empty:

    CUSTOM_AGENT_PROVIDER_NAME    custom-agent
    CUSTOM_AGENT_API_KEY          dummy-key
    CUSTOM_AGENT_BASE_URL         http://localhost:8000/v1
    CUSTOM_AGENT_HEADERS          {}  (JSON object)
    CUSTOM_AGENT_CHAT_MODEL       gpt-4o-mini
    CUSTOM_AGENT_REASONING_MODEL  gpt-4o
    CUSTOM_AGENT_TITLE_MODEL      gpt-3.5-turbo
    CUSTOM_AGENT_ARTIFACT_MODEL   gpt-4o
    CUSTOM_AGENT_IMAGE_MODEL      (unset: no image model)
    CUSTOM_AGENT_REASONING_TAG    think
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from custom_agent.errors import ConfigurationError, NoSuchModelError
from custom_agent.models import LANGUAGE_MODEL_IDS, ModelRoles

ENV_PREFIX = "CUSTOM_AGENT_"

DEFAULT_PROVIDER_NAME = "custom-agent"
DEFAULT_API_KEY = "dummy-key"
DEFAULT_BASE_URL = "http://localhost:8000/v1"
DEFAULT_CHAT_BACKEND_MODEL = "gpt-4o-mini"
DEFAULT_REASONING_BACKEND_MODEL = "gpt-4o"
DEFAULT_TITLE_BACKEND_MODEL = "gpt-3.5-turbo"
DEFAULT_ARTIFACT_BACKEND_MODEL = "gpt-4o"
DEFAULT_REASONING_TAG = "think"


def parse_headers(raw: Optional[str]) -> Dict[str, str]:
    """Decode ``CUSTOM_AGENT_HEADERS`` into a header dict.

    Raises:
        ConfigurationError: If the value is not valid JSON or not an object.
    """
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"CUSTOM_AGENT_HEADERS is not valid JSON: {e.msg}",
            env_var="CUSTOM_AGENT_HEADERS",
            hint='Use a JSON object, e.g. {"X-Org": "acme"}',
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"CUSTOM_AGENT_HEADERS must be a JSON object, got {type(data).__name__}",
            env_var="CUSTOM_AGENT_HEADERS",
            hint='Use a JSON object, e.g. {"X-Org": "acme"}',
        )
    return {str(k): str(v) for k, v in data.items()}


_SENSITIVE_HEADER_PARTS = ("authorization", "token", "key", "secret", "cookie")


def _redact(secret: str) -> str:
    if len(secret) <= 8:
        return "***"
    return f"{secret[:4]}...{secret[-4:]}"


def _redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {
        name: _redact(value) if any(p in name.lower() for p in _SENSITIVE_HEADER_PARTS) else value
        for name, value in headers.items()
    }


@dataclass
class CustomAgentSettings:
    provider_name: str = DEFAULT_PROVIDER_NAME
    api_key: str = DEFAULT_API_KEY
    base_url: str = DEFAULT_BASE_URL
    headers: Dict[str, str] = field(default_factory=dict)
    chat_model: str = DEFAULT_CHAT_BACKEND_MODEL
    reasoning_model: str = DEFAULT_REASONING_BACKEND_MODEL
    title_model: str = DEFAULT_TITLE_BACKEND_MODEL
    artifact_model: str = DEFAULT_ARTIFACT_BACKEND_MODEL
    image_model: Optional[str] = None
    reasoning_tag: str = DEFAULT_REASONING_TAG

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CustomAgentSettings":
        """Read settings from the environment (``os.environ`` by default)."""
        env = os.environ if environ is None else environ

        def get(name: str, default: Optional[str]) -> Optional[str]:
            return env.get(ENV_PREFIX + name) or default

        return cls(
            provider_name=get("PROVIDER_NAME", DEFAULT_PROVIDER_NAME),
            api_key=get("API_KEY", DEFAULT_API_KEY),
            base_url=get("BASE_URL", DEFAULT_BASE_URL),
            headers=parse_headers(env.get(ENV_PREFIX + "HEADERS")),
            chat_model=get("CHAT_MODEL", DEFAULT_CHAT_BACKEND_MODEL),
            reasoning_model=get("REASONING_MODEL", DEFAULT_REASONING_BACKEND_MODEL),
            title_model=get("TITLE_MODEL", DEFAULT_TITLE_BACKEND_MODEL),
            artifact_model=get("ARTIFACT_MODEL", DEFAULT_ARTIFACT_BACKEND_MODEL),
            image_model=get("IMAGE_MODEL", None),
            reasoning_tag=get("REASONING_TAG", DEFAULT_REASONING_TAG),
        )

    def role_models(self) -> Dict[str, str]:
        """Map each language model role id to its backend model."""
        return {
            ModelRoles.chat: self.chat_model,
            ModelRoles.reasoning: self.reasoning_model,
            ModelRoles.title: self.title_model,
            ModelRoles.artifact: self.artifact_model,
        }

    def model_for(self, role: str) -> str:
        models = self.role_models()
        if role not in models:
            raise NoSuchModelError(role, available=list(LANGUAGE_MODEL_IDS))
        return models[role]

    def as_dict(self, redact: bool = True) -> Dict[str, Any]:
        return {
            "provider_name": self.provider_name,
            "api_key": _redact(self.api_key) if redact else self.api_key,
            "base_url": self.base_url,
            "headers": _redact_headers(self.headers) if redact else dict(self.headers),
            "models": self.role_models(),
            "image_model": self.image_model,
            "reasoning_tag": self.reasoning_tag,
        }
