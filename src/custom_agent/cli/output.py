"""Rich output helpers shared by CLI commands."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from custom_agent.models import ChatModel

console = Console()


def print_cli_error(message: str, hint: Optional[str] = None) -> None:
    console.print(f"[red]✗[/red] {escape(message)}", highlight=False)
    if hint:
        console.print(f"  [dim]{escape(hint)}[/dim]", highlight=False)


def print_roles(provider_label: str, rows: Sequence[Tuple[str, str, Optional[str]]]) -> None:
    """Print the role table: (role id, backend model, middleware)."""
    table = Table(title=f"Model roles ({provider_label})", title_justify="left")
    table.add_column("Role", style="bold")
    table.add_column("Model")
    table.add_column("Middleware", style="dim")
    for role, model, middleware in rows:
        table.add_row(role, model, middleware or "-")
    console.print(table)


def print_chat_models(models: List[ChatModel], default: str) -> None:
    table = Table(title="Selectable chat models", title_justify="left")
    table.add_column("Id", style="bold")
    table.add_column("Name")
    table.add_column("Description", style="dim")
    for m in models:
        name = f"{m.name} (default)" if m.id == default else m.name
        table.add_row(m.id, name, m.description)
    console.print(table)


def print_settings(values: Dict[str, Any]) -> None:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="bold")
    table.add_column()
    for key, value in values.items():
        if isinstance(value, dict):
            rendered = ", ".join(f"{k}={v}" for k, v in value.items()) or "-"
        else:
            rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)
    console.print(table)
