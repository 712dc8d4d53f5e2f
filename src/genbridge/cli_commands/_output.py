"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from genbridge.core.interface.models import GenerateResponse  # noqa: TC001
from genbridge.core.registry.capabilities import ModelCapabilities  # noqa: TC001

console = Console()


def print_models_table(models: dict[str, ModelCapabilities]) -> None:
    """Pretty-print model names and their capabilities as a table."""
    table = Table(title="Anthropic Models")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Multiturn")
    table.add_column("Tools")
    table.add_column("System Role")
    table.add_column("Media")

    for name, caps in models.items():
        table.add_row(
            name,
            _flag(caps.multiturn),
            _flag(caps.tools),
            _flag(caps.system_role),
            _flag(caps.media),
        )

    console.print(table)


def print_payload(payload: dict[str, Any]) -> None:
    """Print a provider request payload as JSON."""
    console.print_json(json.dumps(payload, default=str))


def print_response(response: GenerateResponse, *, as_json: bool = False) -> None:
    """Print a generation response as text or JSON."""
    if as_json:
        console.print_json(response.model_dump_json(exclude={"request"}))
        return

    for candidate in response.candidates:
        text = candidate.message.text
        if text:
            console.print(text, markup=False, highlight=False)

    if response.usage is not None:
        usage = response.usage
        console.print(
            f"\n[dim]finish: {_finish(response)}  "
            f"tokens: {usage.input_tokens} in / {usage.output_tokens} out "
            f"/ {usage.total_tokens} total[/dim]"
        )


def _finish(response: GenerateResponse) -> str:
    if not response.candidates:
        return "-"
    return str(response.candidates[-1].finish_reason)


def _flag(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"
