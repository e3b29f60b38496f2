"""Provider objects.

Two building blocks:

- :class:`OpenAICompatibleProvider` is a factory bound to one
  OpenAI-compatible endpoint (base URL, key, extra headers). Calling it
  with a backend model id returns a ``ChatOpenAI`` pointed at that endpoint.
- :class:`CustomProvider` is a static table from logical model ids
  (``"chat-model"``, ``"title-model"``, ...) to ready-made models, with an
  optional fallback provider for ids it does not list.

Usage:
    backend = OpenAICompatibleProvider(
        name="custom-agent",
        base_url="http://localhost:8000/v1",
        api_key="dummy-key",
    )
    provider = CustomProvider(
        language_models={"chat-model": backend("gpt-4o-mini")},
    )
    provider.language_model("chat-model").invoke("Hello")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

import openai
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI

from custom_agent.errors import NoSuchModelError

if TYPE_CHECKING:
    from custom_agent.settings import CustomAgentSettings

logger = logging.getLogger(__name__)


@dataclass
class GeneratedImage:
    """One image returned by an image model."""

    url: Optional[str] = None
    b64_json: Optional[str] = None
    revised_prompt: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None


class OpenAICompatibleImageModel:
    """Image generation through ``POST {base_url}/images/generations``."""

    def __init__(self, provider: "OpenAICompatibleProvider", model_id: str):
        self.provider = provider
        self.model_id = model_id

    def __repr__(self) -> str:
        return f"OpenAICompatibleImageModel(provider={self.provider.name!r}, model={self.model_id!r})"

    def _request(self, prompt: str, n: int, size: Optional[str], kwargs: Dict[str, Any]) -> Dict[str, Any]:
        request: Dict[str, Any] = {"model": self.model_id, "prompt": prompt, "n": n, **kwargs}
        if size:
            request["size"] = size
        return request

    def _to_images(self, response: Any) -> List[GeneratedImage]:
        return [
            GeneratedImage(
                url=getattr(item, "url", None),
                b64_json=getattr(item, "b64_json", None),
                revised_prompt=getattr(item, "revised_prompt", None),
                model=self.model_id,
                provider=self.provider.name,
            )
            for item in (response.data or [])
        ]

    def generate(self, prompt: str, *, n: int = 1, size: Optional[str] = None, **kwargs: Any) -> List[GeneratedImage]:
        client = self.provider.openai_client()
        response = client.images.generate(**self._request(prompt, n, size, kwargs))
        return self._to_images(response)

    async def agenerate(
        self, prompt: str, *, n: int = 1, size: Optional[str] = None, **kwargs: Any
    ) -> List[GeneratedImage]:
        client = self.provider.async_openai_client()
        response = await client.images.generate(**self._request(prompt, n, size, kwargs))
        return self._to_images(response)


class OpenAICompatibleProvider:
    """Factory for models served by one OpenAI-compatible endpoint."""

    def __init__(
        self,
        name: str,
        base_url: str,
        api_key: str,
        headers: Optional[Mapping[str, str]] = None,
    ):
        self.name = name
        self.base_url = base_url
        self.api_key = api_key
        self.headers: Dict[str, str] = dict(headers or {})

    @classmethod
    def from_settings(cls, settings: "CustomAgentSettings") -> "OpenAICompatibleProvider":
        return cls(
            name=settings.provider_name,
            base_url=settings.base_url,
            api_key=settings.api_key,
            headers=settings.headers,
        )

    def __repr__(self) -> str:
        return f"OpenAICompatibleProvider(name={self.name!r}, base_url={self.base_url!r})"

    def __call__(self, model_id: str, **kwargs: Any) -> ChatOpenAI:
        return self.chat_model(model_id, **kwargs)

    def chat_model(self, model_id: str, **kwargs: Any) -> ChatOpenAI:
        """Build a chat model for ``model_id`` on this endpoint.

        Extra keyword arguments (``temperature``, ``max_tokens``,
        ``timeout``, ...) are passed through to ``ChatOpenAI``.
        """
        logger.debug("Creating chat model %s on %s (%s)", model_id, self.name, self.base_url)
        return ChatOpenAI(
            model=model_id,
            api_key=self.api_key,
            base_url=self.base_url,
            default_headers=self.headers or None,
            name=f"{self.name}.chat",
            **kwargs,
        )

    # Lets an OpenAICompatibleProvider act as a CustomProvider fallback.
    language_model = chat_model

    def image_model(self, model_id: str) -> OpenAICompatibleImageModel:
        return OpenAICompatibleImageModel(self, model_id)

    def openai_client(self) -> openai.OpenAI:
        return openai.OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            default_headers=self.headers or None,
        )

    def async_openai_client(self) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            default_headers=self.headers or None,
        )


class CustomProvider:
    """Static mapping of model ids to language and image models."""

    def __init__(
        self,
        language_models: Optional[Mapping[str, BaseChatModel]] = None,
        image_models: Optional[Mapping[str, Any]] = None,
        fallback: Optional[Any] = None,
    ):
        self._language_models: Dict[str, BaseChatModel] = dict(language_models or {})
        self._image_models: Dict[str, Any] = dict(image_models or {})
        self.fallback = fallback

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._language_models

    def __repr__(self) -> str:
        return (
            f"CustomProvider(language_models={self.language_model_ids()!r}, "
            f"image_models={self.image_model_ids()!r})"
        )

    def language_model_ids(self) -> List[str]:
        return list(self._language_models)

    def image_model_ids(self) -> List[str]:
        return list(self._image_models)

    def language_model(self, model_id: str) -> BaseChatModel:
        """Return the language model registered under ``model_id``.

        Raises:
            NoSuchModelError: If the id is unknown and there is no fallback.
        """
        model = self._language_models.get(model_id)
        if model is not None:
            return model
        if self.fallback is not None:
            return self.fallback.language_model(model_id)
        raise NoSuchModelError(
            model_id,
            model_type="languageModel",
            available=self.language_model_ids(),
        )

    def image_model(self, model_id: str) -> Any:
        """Return the image model registered under ``model_id``.

        Raises:
            NoSuchModelError: If the id is unknown and there is no fallback.
        """
        model = self._image_models.get(model_id)
        if model is not None:
            return model
        if self.fallback is not None:
            return self.fallback.image_model(model_id)
        raise NoSuchModelError(
            model_id,
            model_type="imageModel",
            available=self.image_model_ids(),
        )


def model_parts(model: Any) -> Tuple[str, Optional[str]]:
    """Split a model into (backend model name, middleware label or None)."""
    middleware = getattr(model, "middleware", None)
    inner = getattr(model, "model", None)
    if middleware is not None and inner is not None:
        return describe_model(inner), middleware.describe()
    for attr in ("model_name", "model_id", "model"):
        value = getattr(model, attr, None)
        if isinstance(value, str):
            return value, None
    return type(model).__name__, None


def describe_model(model: Any) -> str:
    """Short label for logs and the CLI: backend model name plus wrappers."""
    name, middleware = model_parts(model)
    return f"{name} + {middleware}" if middleware else name
