"""Deterministic stand-ins for every model role.

Used automatically when :func:`custom_agent.constants.is_test_environment`
is true, so end-to-end suites never reach the backend. The doubles are
LangChain fake chat models: they support ``invoke``, ``ainvoke``,
``stream`` and ``astream`` and always produce the same text.
"""

from __future__ import annotations

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from custom_agent.middleware import extract_reasoning_middleware, wrap_language_model
from custom_agent.models import ModelRoles
from custom_agent.provider import CustomProvider

CHAT_RESPONSE = "Hello, world!"
REASONING_TEXT = "The user greeted me, so I should greet them back."
REASONING_ANSWER = "Hi there! How can I help you today?"
REASONING_RESPONSE = f"<think>{REASONING_TEXT}</think>{REASONING_ANSWER}"
TITLE_RESPONSE = "This is a test title"
ARTIFACT_RESPONSE = "# Test document\n\nThis is a test artifact."


def chat_model() -> BaseChatModel:
    return FakeListChatModel(responses=[CHAT_RESPONSE], name="test.chat-model")


def reasoning_model() -> BaseChatModel:
    return wrap_language_model(
        FakeListChatModel(responses=[REASONING_RESPONSE], name="test.chat-model-reasoning"),
        extract_reasoning_middleware(tag_name="think"),
    )


def title_model() -> BaseChatModel:
    return FakeListChatModel(responses=[TITLE_RESPONSE], name="test.title-model")


def artifact_model() -> BaseChatModel:
    return FakeListChatModel(responses=[ARTIFACT_RESPONSE], name="test.artifact-model")


def build_test_provider() -> CustomProvider:
    return CustomProvider(
        language_models={
            ModelRoles.chat: chat_model(),
            ModelRoles.reasoning: reasoning_model(),
            ModelRoles.title: title_model(),
            ModelRoles.artifact: artifact_model(),
        }
    )
