from __future__ import annotations

from typing import Optional

import typer

from custom_agent import __version__
from custom_agent.cli.cmds import register_chat, register_models
from custom_agent.logging import configure_logging

_TYPER_HELP = """Model roles for the custom agent backend.

**Quick start:**

* `custom-agent models` — Show which backend model serves each role
* `custom-agent config` — Show resolved CUSTOM_AGENT_* settings
* `custom-agent chat -m "Hello"` — One-shot message
"""

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=_TYPER_HELP,
    rich_markup_mode="markdown",
)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        typer.echo(f"custom-agent {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
):
    """custom-agent — model roles for an OpenAI-compatible backend."""
    configure_logging("DEBUG" if verbose else None)


register_models(app)
register_chat(app)


def main():
    app()


if __name__ == "__main__":
    main()
