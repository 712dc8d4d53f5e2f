"""``genbridge generate`` — send a single prompt to an Anthropic model."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from genbridge.cli_commands._output import console, print_response


@click.command()
@click.argument("prompt")
@click.option("--model", "-m", required=True, help="Anthropic model id.")
@click.option("--system", "-s", default=None, help="System instruction.")
@click.option(
    "--max-tokens", type=click.IntRange(min=1), default=None, help="Maximum output tokens."
)
@click.option("--temperature", type=float, default=None, help="Sampling temperature.")
@click.option("--api-key", envvar="ANTHROPIC_API_KEY", default=None, help="Anthropic API key.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option("--telemetry", is_flag=True, help="Export trace spans to the console.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def generate(
    prompt: str,
    model: str,
    system: str | None,
    max_tokens: int | None,
    temperature: float | None,
    api_key: str | None,
    fmt: str,
    telemetry: bool,
    verbose: bool,
) -> None:
    """Send PROMPT to MODEL and print the response."""
    from genbridge.core.interface.client import AnthropicClient
    from genbridge.core.interface.config import ClientConfig
    from genbridge.core.interface.errors import GenBridgeError
    from genbridge.core.interface.models import (
        GenerateRequest,
        GenerateResponse,
        GenerationCommonConfig,
        Message,
    )

    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    if telemetry:
        from genbridge.utils.telemetry import configure_telemetry

        configure_telemetry(export_to_console=True)

    messages: list[Message] = []
    if system:
        messages.append(Message.system(system))
    messages.append(Message.user(prompt))

    config = None
    if max_tokens is not None or temperature is not None:
        config = GenerationCommonConfig(max_output_tokens=max_tokens, temperature=temperature)

    request = GenerateRequest(messages=messages, config=config)

    async def _generate() -> GenerateResponse:
        async with AnthropicClient(ClientConfig(api_key=api_key)) as client:
            return await client.generate(model, request)

    try:
        response = asyncio.run(_generate())
    except GenBridgeError as exc:
        console.print(f"[red]Generation error:[/red] {exc}")
        sys.exit(1)

    print_response(response, as_json=fmt == "json")
