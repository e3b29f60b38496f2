#!/usr/bin/env python
"""Reasoning Streaming Example.

This example demonstrates:
- Streaming from the reasoning role
- Separating <think> reasoning from the answer as tokens arrive
- Async streaming patterns

The backend behind CUSTOM_AGENT_REASONING_MODEL should wrap its thinking in
<think>...</think> (or the tag set in CUSTOM_AGENT_REASONING_TAG).
"""

import asyncio

from custom_agent import get_provider
from custom_agent.middleware import REASONING_KEY


async def main():
    model = get_provider().language_model("chat-model-reasoning")

    print("=" * 60)
    print("Reasoning (dimmed) then answer")
    print("=" * 60)

    in_reasoning = False
    async for chunk in model.astream("Is 1009 a prime number?"):
        reasoning = chunk.additional_kwargs.get(REASONING_KEY)
        if reasoning:
            if not in_reasoning:
                print("\033[2m", end="")
                in_reasoning = True
            print(reasoning, end="", flush=True)
        if chunk.content:
            if in_reasoning:
                print("\033[0m\n" + "-" * 40)
                in_reasoning = False
            print(chunk.content, end="", flush=True)

    print("\n" + "=" * 60)
    print("Non-streaming")
    print("=" * 60)
    msg = await model.ainvoke("What is 17 * 23?")
    print("Reasoning:", msg.additional_kwargs.get(REASONING_KEY))
    print("Answer:   ", msg.content)


if __name__ == "__main__":
    asyncio.run(main())
