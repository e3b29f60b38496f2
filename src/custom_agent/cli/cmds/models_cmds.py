"""
CLI commands for inspecting the model configuration.

Usage:
    custom-agent models          # Role -> backend model table
    custom-agent models --json
    custom-agent config          # Resolved CUSTOM_AGENT_* settings (key redacted)
"""

from __future__ import annotations

import json

import typer

from custom_agent.cli.output import print_chat_models, print_cli_error, print_roles, print_settings
from custom_agent.constants import is_test_environment
from custom_agent.errors import ConfigurationError
from custom_agent.models import DEFAULT_CHAT_MODEL, chat_models
from custom_agent.provider import describe_model, model_parts
from custom_agent.providers import build_provider
from custom_agent.settings import CustomAgentSettings

app = typer.Typer(help="Model configuration commands")


def _load_settings() -> CustomAgentSettings:
    try:
        return CustomAgentSettings.from_env()
    except ConfigurationError as e:
        print_cli_error(e.message, hint=e.hint)
        raise typer.Exit(1)


@app.command("models")
def models_cmd(
    output_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON",
    ),
):
    """Show which backend model serves each role."""
    test = is_test_environment()
    settings = None if test else _load_settings()
    provider = build_provider(settings, test=test)

    language = {m: provider.language_model(m) for m in provider.language_model_ids()}
    images = {m: provider.image_model(m) for m in provider.image_model_ids()}

    if output_json:
        result = {
            "mode": "test" if test else "custom-agent",
            "language_models": {role: describe_model(m) for role, m in language.items()},
            "image_models": {role: describe_model(m) for role, m in images.items()},
            "chat_models": [m.model_dump() for m in chat_models],
            "default_chat_model": DEFAULT_CHAT_MODEL,
        }
        typer.echo(json.dumps(result, indent=2))
        return

    label = "test doubles" if test else f"{settings.provider_name} @ {settings.base_url}"
    rows = [(role, *model_parts(m)) for role, m in {**language, **images}.items()]
    print_roles(label, rows)
    print_chat_models(chat_models, DEFAULT_CHAT_MODEL)


@app.command("config")
def config_cmd(
    output_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON",
    ),
    show_key: bool = typer.Option(
        False,
        "--show-key",
        help="Print the API key unredacted",
    ),
):
    """Show the resolved backend settings."""
    values = _load_settings().as_dict(redact=not show_key)
    values["test_mode"] = is_test_environment()

    if output_json:
        typer.echo(json.dumps(values, indent=2))
    else:
        print_settings(values)


def register(parent: typer.Typer):
    """Register model commands with the parent CLI app."""
    parent.command("models", rich_help_panel="Configuration")(models_cmd)
    parent.command("config", rich_help_panel="Configuration")(config_cmd)
