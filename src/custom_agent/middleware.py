"""Language model middleware.

Reasoning backends (DeepSeek-R1, QwQ, most vLLM reasoning deployments served
through an OpenAI-compatible API) inline their chain of thought in the
message text between ``<think>`` tags. :func:`extract_reasoning_middleware`
moves that text out of ``content`` and into
``additional_kwargs["reasoning_content"]``, the key LangChain integrations
use for provider-native reasoning.

Usage:
    from langchain_openai import ChatOpenAI
    from custom_agent.middleware import (
        extract_reasoning_middleware,
        wrap_language_model,
    )

    model = wrap_language_model(
        ChatOpenAI(model="deepseek-r1", base_url="http://localhost:8000/v1"),
        extract_reasoning_middleware(tag_name="think"),
    )
    msg = model.invoke("Why is the sky blue?")
    msg.content                               # answer only
    msg.additional_kwargs["reasoning_content"]  # the thinking
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Iterator, List, Optional, Sequence, Tuple

from langchain_core.callbacks import (
    AsyncCallbackManagerForLLMRun,
    CallbackManagerForLLMRun,
)
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, AIMessageChunk, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatGenerationChunk, ChatResult
from langchain_core.utils.function_calling import convert_to_openai_tool
from pydantic import ConfigDict

REASONING_KEY = "reasoning_content"

# (kind, text) where kind is "text" or "reasoning"
Part = Tuple[str, str]


def _potential_start_index(text: str, searched: str) -> Optional[int]:
    """Index where ``searched`` starts in ``text``, or where a suffix of
    ``text`` could be the beginning of ``searched``. None if neither."""
    if not searched:
        return None
    direct = text.find(searched)
    if direct != -1:
        return direct
    for i in range(len(text)):
        if searched.startswith(text[i:]):
            return i
    return None


def _has_payload(chunk: AIMessageChunk) -> bool:
    return bool(
        chunk.tool_call_chunks
        or chunk.usage_metadata
        or chunk.response_metadata
        or chunk.additional_kwargs
    )


@dataclass
class ReasoningStreamExtractor:
    """Stateful splitter for one streamed response."""

    opening_tag: str
    closing_tag: str
    separator: str
    is_reasoning: bool = False
    buffer: str = ""
    _is_first_reasoning: bool = field(default=True, repr=False)
    _is_first_text: bool = field(default=True, repr=False)
    _after_switch: bool = field(default=False, repr=False)
    _saw_last: bool = field(default=False, repr=False)

    def _publish(self, text: str, out: List[Part]) -> None:
        if not text:
            return
        first = self._is_first_reasoning if self.is_reasoning else self._is_first_text
        prefix = self.separator if self._after_switch and not first else ""
        out.append(("reasoning" if self.is_reasoning else "text", prefix + text))
        self._after_switch = False
        if self.is_reasoning:
            self._is_first_reasoning = False
        else:
            self._is_first_text = False

    def feed_text(self, delta: str) -> List[Part]:
        self.buffer += delta
        out: List[Part] = []
        while True:
            tag = self.closing_tag if self.is_reasoning else self.opening_tag
            idx = _potential_start_index(self.buffer, tag)
            if idx is None:
                self._publish(self.buffer, out)
                self.buffer = ""
                break

            self._publish(self.buffer[:idx], out)
            if idx + len(tag) <= len(self.buffer):
                self.buffer = self.buffer[idx + len(tag) :]
                self.is_reasoning = not self.is_reasoning
                self._after_switch = True
            else:
                # partial tag at the end; wait for more text
                self.buffer = self.buffer[idx:]
                break
        return out

    def flush_text(self) -> List[Part]:
        out: List[Part] = []
        self._publish(self.buffer, out)
        self.buffer = ""
        return out

    def feed(self, chunk: AIMessageChunk) -> List[AIMessageChunk]:
        if not isinstance(chunk.content, str):
            return [chunk]
        # the end-of-stream marker is held back and put on the last chunk flush() emits
        if chunk.chunk_position == "last":
            self._saw_last = True
            chunk = chunk.model_copy(update={"chunk_position": None})
        if not chunk.content:
            return [chunk] if _has_payload(chunk) else []
        parts = self.feed_text(chunk.content)
        if not parts:
            return [chunk.model_copy(update={"content": ""})] if _has_payload(chunk) else []
        return self._to_chunks(parts, template=chunk)

    def flush(self, template: Optional[AIMessageChunk] = None) -> List[AIMessageChunk]:
        chunk_id = template.id if template is not None else None
        chunks = [self._part_chunk(kind, text, chunk_id) for kind, text in self.flush_text()]
        if self._saw_last:
            if not chunks:
                chunks.append(AIMessageChunk(content="", id=chunk_id))
            chunks[-1] = chunks[-1].model_copy(update={"chunk_position": "last"})
            self._saw_last = False
        return chunks

    def _to_chunks(self, parts: Sequence[Part], template: AIMessageChunk) -> List[AIMessageChunk]:
        kind, text = parts[0]
        if kind == "reasoning":
            first = template.model_copy(
                update={
                    "content": "",
                    "additional_kwargs": {**template.additional_kwargs, REASONING_KEY: text},
                }
            )
        else:
            first = template.model_copy(update={"content": text})
        rest = [self._part_chunk(k, t, template.id) for k, t in parts[1:]]
        return [first, *rest]

    @staticmethod
    def _part_chunk(kind: str, text: str, chunk_id: Optional[str]) -> AIMessageChunk:
        if kind == "reasoning":
            return AIMessageChunk(content="", additional_kwargs={REASONING_KEY: text}, id=chunk_id)
        return AIMessageChunk(content=text, id=chunk_id)


@dataclass(frozen=True)
class ReasoningMiddleware:
    """Move ``<tag>...</tag>`` spans from message text into reasoning."""

    tag_name: str = "think"
    separator: str = "\n"
    start_with_reasoning: bool = False

    @property
    def opening_tag(self) -> str:
        return f"<{self.tag_name}>"

    @property
    def closing_tag(self) -> str:
        return f"</{self.tag_name}>"

    def extract(self, text: str) -> Tuple[str, Optional[str]]:
        """Split ``text`` into (text without reasoning, reasoning or None)."""
        if self.start_with_reasoning:
            text = self.opening_tag + text

        pattern = re.compile(
            f"{re.escape(self.opening_tag)}(.*?){re.escape(self.closing_tag)}",
            re.DOTALL,
        )
        matches = list(pattern.finditer(text))
        if not matches:
            return text, None

        reasoning = self.separator.join(m.group(1) for m in matches)
        stripped = text
        for m in reversed(matches):
            before = stripped[: m.start()]
            after = stripped[m.end() :]
            joiner = self.separator if before and after else ""
            stripped = before + joiner + after
        return stripped, reasoning

    def transform_message(self, message: BaseMessage) -> BaseMessage:
        if not isinstance(message.content, str):
            return message
        text, reasoning = self.extract(message.content)
        if reasoning is None:
            return message
        return message.model_copy(
            update={
                "content": text,
                "additional_kwargs": {**message.additional_kwargs, REASONING_KEY: reasoning},
            }
        )

    def stream_extractor(self) -> ReasoningStreamExtractor:
        return ReasoningStreamExtractor(
            opening_tag=self.opening_tag,
            closing_tag=self.closing_tag,
            separator=self.separator,
            is_reasoning=self.start_with_reasoning,
        )

    def describe(self) -> str:
        return f"extract-reasoning(<{self.tag_name}>)"


def extract_reasoning_middleware(
    tag_name: str = "think",
    separator: str = "\n",
    start_with_reasoning: bool = False,
) -> ReasoningMiddleware:
    """Build a middleware that extracts ``<tag_name>`` reasoning spans.

    Args:
        tag_name: Tag name without angle brackets.
        separator: Joins multiple reasoning spans, and the text on either side
            of a removed span.
        start_with_reasoning: The response starts inside the tag, i.e. the
            backend omits the opening tag.
    """
    return ReasoningMiddleware(
        tag_name=tag_name,
        separator=separator,
        start_with_reasoning=start_with_reasoning,
    )


class WrappedChatModel(BaseChatModel):
    """A chat model that runs another chat model through a middleware."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: BaseChatModel
    middleware: ReasoningMiddleware

    @property
    def _llm_type(self) -> str:
        return f"wrapped-{self.model._llm_type}"

    @property
    def _identifying_params(self) -> dict:
        return {
            "model": self.model._identifying_params,
            "middleware": self.middleware.describe(),
        }

    # The inner model runs as its own traced call. Token callbacks for the
    # outer run are emitted by BaseChatModel for every chunk _stream yields.

    def _generate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Optional[CallbackManagerForLLMRun] = None,
        **kwargs: Any,
    ) -> ChatResult:
        message = self.model.invoke(messages, stop=stop, **kwargs)
        message = self.middleware.transform_message(message)
        return ChatResult(generations=[ChatGeneration(message=message)])

    async def _agenerate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Optional[AsyncCallbackManagerForLLMRun] = None,
        **kwargs: Any,
    ) -> ChatResult:
        message = await self.model.ainvoke(messages, stop=stop, **kwargs)
        message = self.middleware.transform_message(message)
        return ChatResult(generations=[ChatGeneration(message=message)])

    def _stream(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Optional[CallbackManagerForLLMRun] = None,
        **kwargs: Any,
    ) -> Iterator[ChatGenerationChunk]:
        extractor = self.middleware.stream_extractor()
        last: Optional[AIMessageChunk] = None
        for chunk in self.model.stream(messages, stop=stop, **kwargs):
            last = chunk
            for out in extractor.feed(chunk):
                yield ChatGenerationChunk(message=out)
        for out in extractor.flush(last):
            yield ChatGenerationChunk(message=out)

    async def _astream(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Optional[AsyncCallbackManagerForLLMRun] = None,
        **kwargs: Any,
    ) -> AsyncIterator[ChatGenerationChunk]:
        extractor = self.middleware.stream_extractor()
        last: Optional[AIMessageChunk] = None
        async for chunk in self.model.astream(messages, stop=stop, **kwargs):
            last = chunk
            for out in extractor.feed(chunk):
                yield ChatGenerationChunk(message=out)
        for out in extractor.flush(last):
            yield ChatGenerationChunk(message=out)

    def bind_tools(self, tools: Sequence[Any], **kwargs: Any):
        formatted = [convert_to_openai_tool(t) for t in tools]
        return self.bind(tools=formatted, **kwargs)


def wrap_language_model(model: BaseChatModel, middleware: ReasoningMiddleware) -> WrappedChatModel:
    """Wrap ``model`` so its outputs pass through ``middleware``."""
    return WrappedChatModel(model=model, middleware=middleware)


__all__ = [
    "REASONING_KEY",
    "ReasoningMiddleware",
    "ReasoningStreamExtractor",
    "WrappedChatModel",
    "extract_reasoning_middleware",
    "wrap_language_model",
]
