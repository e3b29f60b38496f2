"""Unit tests for custom_agent.middleware.

Tests cover:
- Extracting <think> spans from complete messages
- Splitting streamed text when tags straddle chunk boundaries
- WrappedChatModel invoke / ainvoke / stream / astream over a fake model
- bind_tools on a wrapped model

All tests use LangChain fake chat models - no real API calls.
"""

from __future__ import annotations

from functools import reduce
from operator import add

import pytest
from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage, AIMessageChunk

from custom_agent.middleware import (
    REASONING_KEY,
    ReasoningStreamExtractor,
    WrappedChatModel,
    extract_reasoning_middleware,
    wrap_language_model,
)

# =============================================================================
# Helpers
# =============================================================================


def make_extractor(**kwargs) -> ReasoningStreamExtractor:
    return extract_reasoning_middleware(**kwargs).stream_extractor()


def feed_all(extractor: ReasoningStreamExtractor, deltas: list[str]) -> list[tuple[str, str]]:
    parts = []
    for delta in deltas:
        parts.extend(extractor.feed_text(delta))
    parts.extend(extractor.flush_text())
    return parts


class RecordingHandler(BaseCallbackHandler):
    def __init__(self):
        self.tokens = []
        self.ends = 0

    def on_llm_new_token(self, token, **kwargs):
        self.tokens.append(token)

    def on_llm_end(self, response, **kwargs):
        self.ends += 1


def wrapped(response: str, **kwargs) -> WrappedChatModel:
    return wrap_language_model(
        FakeListChatModel(responses=[response]),
        extract_reasoning_middleware(**kwargs),
    )


# =============================================================================
# Non-streaming extraction
# =============================================================================


class TestExtract:
    def test_leading_reasoning(self):
        mw = extract_reasoning_middleware()
        assert mw.extract("<think>plan</think>Answer") == ("Answer", "plan")

    def test_multiple_spans_joined_with_separator(self):
        mw = extract_reasoning_middleware()
        text, reasoning = mw.extract("Intro<think>a</think>middle<think>b</think>end")

        assert reasoning == "a\nb"
        assert text == "Intro\nmiddle\nend"

    def test_multiline_reasoning(self):
        mw = extract_reasoning_middleware()
        text, reasoning = mw.extract("<think>line 1\nline 2</think>Done")

        assert reasoning == "line 1\nline 2"
        assert text == "Done"

    def test_no_tags(self):
        mw = extract_reasoning_middleware()
        assert mw.extract("Just an answer") == ("Just an answer", None)

    def test_custom_tag_and_separator(self):
        mw = extract_reasoning_middleware(tag_name="reasoning", separator=" | ")
        text, reasoning = mw.extract("<reasoning>x</reasoning>A<reasoning>y</reasoning>B")

        assert reasoning == "x | y"
        assert text == "A | B"

    def test_other_tags_untouched(self):
        mw = extract_reasoning_middleware(tag_name="reasoning")
        assert mw.extract("<think>x</think>A") == ("<think>x</think>A", None)

    def test_start_with_reasoning(self):
        mw = extract_reasoning_middleware(start_with_reasoning=True)
        assert mw.extract("thinking</think>answer") == ("answer", "thinking")


class TestTransformMessage:
    def test_moves_reasoning_into_additional_kwargs(self):
        mw = extract_reasoning_middleware()
        msg = AIMessage(content="<think>why</think>because", additional_kwargs={"foo": "bar"})

        out = mw.transform_message(msg)

        assert out.content == "because"
        assert out.additional_kwargs == {"foo": "bar", REASONING_KEY: "why"}
        assert msg.content == "<think>why</think>because"

    def test_without_reasoning_returns_same_message(self):
        mw = extract_reasoning_middleware()
        msg = AIMessage(content="plain")

        assert mw.transform_message(msg) is msg

    def test_content_blocks_pass_through(self):
        mw = extract_reasoning_middleware()
        msg = AIMessage(content=[{"type": "text", "text": "<think>x</think>y"}])

        assert mw.transform_message(msg) is msg


# =============================================================================
# Streaming extraction
# =============================================================================


class TestStreamExtractor:
    def test_tags_split_across_chunks(self):
        parts = feed_all(make_extractor(), ["<thi", "nk>abc</th", "ink>Hello"])

        assert parts == [("reasoning", "abc"), ("text", "Hello")]

    def test_character_by_character(self):
        parts = feed_all(make_extractor(), list("<think>ab</think>cd"))

        reasoning = "".join(t for kind, t in parts if kind == "reasoning")
        text = "".join(t for kind, t in parts if kind == "text")
        assert reasoning == "ab"
        assert text == "cd"

    def test_separator_between_text_segments(self):
        parts = feed_all(make_extractor(), ["Hi <think>x</think> there"])

        assert parts == [("text", "Hi "), ("reasoning", "x"), ("text", "\n there")]

    def test_less_than_sign_in_text_is_published(self):
        parts = feed_all(make_extractor(), ["a < b", " and c"])

        assert "".join(t for _, t in parts) == "a < b and c"
        assert all(kind == "text" for kind, _ in parts)

    def test_dangling_partial_tag_flushed_as_text(self):
        extractor = make_extractor()

        assert extractor.feed_text("done <th") == [("text", "done ")]
        assert extractor.flush_text() == [("text", "<th")]

    def test_start_with_reasoning(self):
        parts = feed_all(make_extractor(start_with_reasoning=True), ["plan", "</think>go"])

        assert parts == [("reasoning", "plan"), ("text", "go")]

    def test_feed_chunk_keeps_metadata_on_first_part(self):
        extractor = make_extractor()
        chunk = AIMessageChunk(content="<think>r</think>t", id="run-1", response_metadata={"model_name": "m"})

        out = extractor.feed(chunk)

        assert [c.content for c in out] == ["", "t"]
        assert out[0].additional_kwargs[REASONING_KEY] == "r"
        assert out[0].response_metadata == {"model_name": "m"}
        assert out[1].response_metadata == {}
        assert all(c.id == "run-1" for c in out)

    def test_feed_empty_chunk_passes_through(self):
        extractor = make_extractor()
        chunk = AIMessageChunk(content="", usage_metadata={"input_tokens": 1, "output_tokens": 2, "total_tokens": 3})

        assert extractor.feed(chunk) == [chunk]

    def test_end_marker_moves_to_last_part(self):
        extractor = make_extractor()
        chunk = AIMessageChunk(content="<think>r</think>t", chunk_position="last")

        out = extractor.feed(chunk) + extractor.flush(chunk)

        assert [c.chunk_position for c in out] == [None, None, "last"]
        assert out[-1].content == ""

    def test_end_marker_kept_when_text_buffered(self):
        extractor = make_extractor()
        extractor.feed(AIMessageChunk(content="done "))
        last = AIMessageChunk(content="<th", chunk_position="last")

        assert extractor.feed(last) == []
        out = extractor.flush(last)

        assert [c.content for c in out] == ["<th"]
        assert out[-1].chunk_position == "last"


# =============================================================================
# WrappedChatModel
# =============================================================================


class TestWrappedChatModel:
    def test_invoke(self):
        model = wrapped("<think>why</think>because")

        msg = model.invoke("question")

        assert msg.content == "because"
        assert msg.additional_kwargs[REASONING_KEY] == "why"

    def test_invoke_without_reasoning(self):
        msg = wrapped("plain answer").invoke("question")

        assert msg.content == "plain answer"
        assert REASONING_KEY not in msg.additional_kwargs

    @pytest.mark.asyncio
    async def test_ainvoke(self):
        msg = await wrapped("<think>why</think>because").ainvoke("question")

        assert msg.content == "because"
        assert msg.additional_kwargs[REASONING_KEY] == "why"

    @pytest.mark.streaming
    def test_stream(self):
        chunks = list(wrapped("<think>why</think>because").stream("question"))

        full = reduce(add, chunks)
        assert full.content == "because"
        assert full.additional_kwargs[REASONING_KEY] == "why"
        assert "<" not in "".join(c.content for c in chunks)

    @pytest.mark.streaming
    @pytest.mark.asyncio
    async def test_astream(self):
        chunks = [c async for c in wrapped("<think>why</think>because").astream("question")]

        full = reduce(add, chunks)
        assert full.content == "because"
        assert full.additional_kwargs[REASONING_KEY] == "why"

    def test_invoke_with_callbacks(self):
        handler = RecordingHandler()

        msg = wrapped("<think>why</think>because").invoke("question", config={"callbacks": [handler]})

        assert msg.content == "because"
        assert handler.ends == 1

    @pytest.mark.streaming
    def test_stream_reports_each_token_once(self):
        handler = RecordingHandler()

        chunks = list(wrapped("<think>why</think>because").stream("question", config={"callbacks": [handler]}))

        assert handler.tokens == [c.content for c in chunks]
        assert "".join(handler.tokens) == "because"

    @pytest.mark.streaming
    def test_stream_ends_with_single_last_chunk(self):
        chunks = list(wrapped("answer <th").stream("question"))

        assert [c.chunk_position for c in chunks].count("last") == 1
        assert chunks[-1].chunk_position == "last"
        assert "".join(c.content for c in chunks) == "answer <th"

    def test_llm_type_and_params(self):
        model = wrapped("x", tag_name="reasoning")

        assert model._llm_type.startswith("wrapped-")
        assert model._identifying_params["middleware"] == "extract-reasoning(<reasoning>)"

    def test_bind_tools(self, sample_tools):
        bound = wrapped("x").bind_tools(sample_tools)

        names = [t["function"]["name"] for t in bound.kwargs["tools"]]
        assert names == ["get_weather", "calculator"]
