"""
CLI command for sending a one-shot message through a model role.

Usage:
    custom-agent chat -m "Hello"                              # chat-model
    custom-agent chat -m "Why?" --model chat-model-reasoning  # shows reasoning
    custom-agent chat -m "Hello" --no-stream --json
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import typer

from custom_agent.cli.output import console, print_cli_error
from custom_agent.errors import CustomAgentError
from custom_agent.middleware import REASONING_KEY
from custom_agent.models import DEFAULT_CHAT_MODEL
from custom_agent.providers import build_provider


def _make_messages(message: str, system: Optional[str]) -> List[Dict[str, Any]]:
    msgs: List[Dict[str, Any]] = []
    if system:
        msgs.append({"role": "system", "content": system})
    msgs.append({"role": "user", "content": message})
    return msgs


def _stream(model, messages) -> None:
    in_reasoning = False
    for chunk in model.stream(messages):
        reasoning = chunk.additional_kwargs.get(REASONING_KEY)
        if reasoning:
            console.print(reasoning, end="", style="dim", markup=False, highlight=False)
            in_reasoning = True
        if isinstance(chunk.content, str) and chunk.content:
            if in_reasoning:
                console.print()
                in_reasoning = False
            console.print(chunk.content, end="", markup=False, highlight=False)
    console.print()


def chat_cmd(
    message: str = typer.Option(
        ...,
        "--message",
        "-m",
        help="Message to send",
    ),
    model_id: str = typer.Option(
        DEFAULT_CHAT_MODEL,
        "--model",
        help="Model role (chat-model, chat-model-reasoning, title-model, artifact-model)",
    ),
    system: Optional[str] = typer.Option(
        None,
        "--system",
        "-s",
        help="System prompt",
    ),
    no_stream: bool = typer.Option(
        False,
        "--no-stream",
        help="Disable streaming output",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON (implies --no-stream)",
    ),
):
    """Send one message through a model role and print the reply."""
    try:
        model = build_provider().language_model(model_id)
    except CustomAgentError as e:
        print_cli_error(e.message, hint=e.hint)
        raise typer.Exit(1)

    messages = _make_messages(message, system)

    if not (no_stream or output_json):
        _stream(model, messages)
        return

    response = model.invoke(messages)
    reasoning = response.additional_kwargs.get(REASONING_KEY)

    if output_json:
        typer.echo(
            json.dumps(
                {"model": model_id, "content": response.content, "reasoning": reasoning},
                indent=2,
            )
        )
        return

    if reasoning:
        console.print(reasoning, style="dim", markup=False, highlight=False)
    console.print(response.content, markup=False, highlight=False)


def register(parent: typer.Typer):
    """Register chat command with the parent CLI app."""
    parent.command("chat", rich_help_panel="Chat")(chat_cmd)
