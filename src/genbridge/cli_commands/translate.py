"""``genbridge translate`` — show the provider payload for a request file."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from genbridge.cli_commands._output import console, print_payload


@click.command()
@click.argument("request_file", type=click.Path(exists=True))
@click.option("--model", "-m", required=True, help="Anthropic model id.")
def translate(request_file: str, model: str) -> None:
    """Translate REQUEST_FILE (YAML or JSON) into a Messages API payload.

    Nothing is sent; no API key is needed.
    """
    from genbridge.core.interface.errors import GenBridgeError
    from genbridge.core.interface.loader import RequestLoader
    from genbridge.core.interface.transpilers.anthropic import AnthropicTranspiler

    try:
        request = RequestLoader(Path(request_file)).load()
        params = AnthropicTranspiler().to_provider(model, request)
    except GenBridgeError as exc:
        console.print(f"[red]Translation error:[/red] {exc}")
        sys.exit(1)

    print_payload(params.to_payload())
