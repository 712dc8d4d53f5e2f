"""``genbridge models`` — list the Claude models known to the registry."""

from __future__ import annotations

import json

import click

from genbridge.cli_commands._output import console, print_models_table


@click.group()
def models() -> None:
    """Inspect known models."""


@models.command("list")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format.",
)
def list_models(fmt: str) -> None:
    """List known models and their capabilities."""
    from genbridge.core.registry.registry_data import KNOWN_MODELS

    if fmt == "json":
        data = {name: caps.model_dump() for name, caps in KNOWN_MODELS.items()}
        console.print_json(json.dumps(data))
    else:
        print_models_table(KNOWN_MODELS)
