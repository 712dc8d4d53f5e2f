"""AnthropicClient — owned client handle that serves Claude models.

Builds the credentialed transport, registers models in a
:class:`~genbridge.core.registry.ModelRegistry` and runs generation
requests through the Anthropic transpiler.
"""

from __future__ import annotations

import logging
import threading

from genbridge.core.interface.config import LABEL_PREFIX, PROVIDER, ClientConfig
from genbridge.core.interface.errors import (
    AlreadyInitializedError,
    NotInitializedError,
    UnknownModelCapabilitiesError,
)
from genbridge.core.interface.models import (
    GenerateRequest,
    GenerateResponse,
    GenerateResponseChunk,
    StreamCallback,
)
from genbridge.core.interface.transpilers.anthropic import AnthropicTranspiler
from genbridge.core.interface.transport import HTTPTransport, Transport
from genbridge.core.registry.capabilities import (
    ModelCapabilities,
    ModelDefinition,
    ModelFn,
    ModelRegistry,
)
from genbridge.core.registry.registry_data import KNOWN_MODELS, known_capabilities
from genbridge.utils.telemetry import get_tracer, record_request, record_response

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)

_transpiler = AnthropicTranspiler()


async def generate(
    transport: Transport,
    model: str,
    request: GenerateRequest,
    callback: StreamCallback | None = None,
) -> GenerateResponse:
    """Run *request* against *model* through *transport*.

    Translation errors are raised before the transport is called; transport
    errors propagate unchanged. The returned response carries *request*.
    """
    with _tracer.start_as_current_span("model.generate") as span:
        record_request(span, PROVIDER, model, request)

        params = _transpiler.to_provider(model, request)
        message = await transport.send(params)

        response = _transpiler.from_provider(message)
        response.request = request

        record_response(span, response)

        if callback is not None:
            # The transport delivers whole responses; hand each candidate over as one chunk.
            for candidate in response.candidates:
                await callback(
                    GenerateResponseChunk(index=candidate.index, content=candidate.message.content)
                )

        return response


class AnthropicClient:
    """Client handle for the Anthropic provider.

    Each instance owns its transport and its registration state, so
    independent clients can coexist.

    Usage::

        registry = ModelRegistry()
        async with AnthropicClient(ClientConfig(api_key="...")) as client:
            client.initialize(registry)
            model = client.model("claude-3-5-haiku-20241022")
            response = await model(GenerateRequest(messages=[Message.user("Hi")]))
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        api_key = self.config.resolve_api_key()
        self.transport: Transport = transport or HTTPTransport(api_key, self.config)
        self._registry: ModelRegistry | None = None
        self._lock = threading.Lock()

    async def __aenter__(self) -> AnthropicClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if it holds resources."""
        aclose = getattr(self.transport, "aclose", None)
        if aclose is not None:
            await aclose()

    @property
    def initialized(self) -> bool:
        return self._registry is not None

    def initialize(self, registry: ModelRegistry) -> None:
        """Register every known Claude model in *registry*.

        Raises:
            AlreadyInitializedError: if this client was already initialized.
        """
        with self._lock:
            if self._registry is not None:
                raise AlreadyInitializedError()
            self._registry = registry
            for name, caps in KNOWN_MODELS.items():
                self._define(registry, name, caps)
        logger.info("Anthropic client initialized with %d known models", len(KNOWN_MODELS))

    def define_model(
        self, name: str, capabilities: ModelCapabilities | None = None
    ) -> ModelDefinition:
        """Register *name*, falling back to known capabilities when none are given.

        Raises:
            NotInitializedError: if :meth:`initialize` has not been called.
            UnknownModelCapabilitiesError: if *capabilities* is ``None`` and
                *name* is not a known model.
        """
        with self._lock:
            registry = self._require_registry()
            caps = capabilities if capabilities is not None else known_capabilities(name)
            if caps is None:
                raise UnknownModelCapabilitiesError(name)
            return self._define(registry, name, caps)

    def is_defined_model(self, name: str) -> bool:
        """Return whether *name* is registered; ``False`` before :meth:`initialize`."""
        with self._lock:
            registry = self._registry
        return registry is not None and registry.is_registered(PROVIDER, name)

    def model(self, name: str) -> ModelDefinition | None:
        """Return the registered definition for *name*, or ``None``."""
        with self._lock:
            registry = self._registry
        if registry is None:
            return None
        return registry.lookup(PROVIDER, name)

    async def generate(
        self,
        model: str,
        request: GenerateRequest,
        callback: StreamCallback | None = None,
    ) -> GenerateResponse:
        """Run *request* against *model* using this client's transport."""
        return await generate(self.transport, model, request, callback)

    def _require_registry(self) -> ModelRegistry:
        if self._registry is None:
            raise NotInitializedError()
        return self._registry

    def _define(
        self, registry: ModelRegistry, name: str, caps: ModelCapabilities
    ) -> ModelDefinition:
        return registry.register(
            PROVIDER,
            name,
            caps,
            self._bind(name),
            label=f"{LABEL_PREFIX} - {name}",
        )

    def _bind(self, name: str) -> ModelFn:
        transport = self.transport

        async def invoke(
            request: GenerateRequest, callback: StreamCallback | None = None
        ) -> GenerateResponse:
            return await generate(transport, name, request, callback)

        return invoke
