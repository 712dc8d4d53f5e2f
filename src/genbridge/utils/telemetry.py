"""OpenTelemetry tracing for model calls.

Only the OpenTelemetry API is a hard dependency. Until
:func:`configure_telemetry` installs an SDK tracer provider, every span is
a no-op, so instrumented code never checks whether tracing is on.

Each generation call runs in a ``model.generate`` span::

    with get_tracer(__name__).start_as_current_span("model.generate") as span:
        record_request(span, model, request)
        ...
        record_response(span, response)

Exporting spans needs the ``otel`` extra: ``pip install genbridge[otel]``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from genbridge.core.interface.models import GenerateRequest, GenerateResponse

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_MODEL = "genbridge.model"
ATTR_PROVIDER = "genbridge.provider"
ATTR_MESSAGES = "genbridge.messages"
ATTR_TOOLS = "genbridge.tools"
ATTR_CANDIDATES = "genbridge.candidates"
ATTR_TOKENS_INPUT = "genbridge.tokens.input"
ATTR_TOKENS_OUTPUT = "genbridge.tokens.output"
ATTR_TOKENS_TOTAL = "genbridge.tokens.total"
ATTR_FINISH_REASON = "genbridge.finish_reason"

_INSTRUMENTATION_NAME = "genbridge"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer for *name*; a no-op tracer until the SDK is configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def record_request(
    span: trace.Span, provider: str, model: str, request: GenerateRequest
) -> None:
    """Tag *span* with the target model and the size of *request*."""
    span.set_attribute(ATTR_MODEL, model)
    span.set_attribute(ATTR_PROVIDER, provider)
    span.set_attribute(ATTR_MESSAGES, len(request.messages))
    span.set_attribute(ATTR_TOOLS, len(request.tools))


def record_response(span: trace.Span, response: GenerateResponse) -> None:
    """Tag *span* with candidate count, token usage and the first finish reason."""
    span.set_attribute(ATTR_CANDIDATES, len(response.candidates))
    if response.usage is not None:
        span.set_attribute(ATTR_TOKENS_INPUT, response.usage.input_tokens)
        span.set_attribute(ATTR_TOKENS_OUTPUT, response.usage.output_tokens)
        span.set_attribute(ATTR_TOKENS_TOTAL, response.usage.total_tokens)
    if response.candidates:
        span.set_attribute(ATTR_FINISH_REASON, str(response.candidates[0].finish_reason))


def configure_telemetry(
    *,
    service_name: str = "genbridge",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider that exports genbridge spans.

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        Print finished spans to stdout as they end.
    otlp_endpoint:
        Batch-export spans over OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If ``opentelemetry-sdk`` (or, for OTLP, ``opentelemetry-exporter-otlp``)
        is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install genbridge[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if export_to_console:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(otlp_endpoint)))

    trace.set_tracer_provider(provider)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install genbridge[otel]"
        )
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
