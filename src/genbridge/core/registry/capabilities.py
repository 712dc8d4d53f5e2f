"""Model registry — named, capability-tagged generate callables.

Providers register one callable per model name. Callers look models up
by ``provider/name`` and invoke them with an agnostic request.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pydantic import BaseModel

from genbridge.core.interface.errors import DuplicateModelError
from genbridge.core.interface.models import GenerateRequest, GenerateResponse, StreamCallback

logger = logging.getLogger(__name__)

ModelFn = Callable[[GenerateRequest, StreamCallback | None], Awaitable[GenerateResponse]]


class ModelCapabilities(BaseModel):
    """What a model can accept."""

    multiturn: bool = False
    tools: bool = False
    system_role: bool = False
    media: bool = False


MULTIMODAL = ModelCapabilities(multiturn=True, tools=True, system_role=True, media=True)


@dataclass(frozen=True)
class ModelDefinition:
    """A registered model: metadata plus the callable that serves it."""

    provider: str
    name: str
    label: str
    capabilities: ModelCapabilities
    generate: ModelFn

    @property
    def key(self) -> str:
        return f"{self.provider}/{self.name}"

    async def __call__(
        self, request: GenerateRequest, callback: StreamCallback | None = None
    ) -> GenerateResponse:
        return await self.generate(request, callback)


class ModelRegistry:
    """Maps ``provider/name`` keys to model definitions. Thread-safe."""

    def __init__(self) -> None:
        self._models: dict[str, ModelDefinition] = {}
        self._lock = threading.Lock()

    def register(
        self,
        provider: str,
        name: str,
        capabilities: ModelCapabilities,
        fn: ModelFn,
        label: str | None = None,
    ) -> ModelDefinition:
        """Register *fn* as the generate callable for ``provider/name``.

        Raises:
            DuplicateModelError: if the key is already registered.
        """
        definition = ModelDefinition(
            provider=provider,
            name=name,
            label=label or name,
            capabilities=capabilities,
            generate=fn,
        )
        with self._lock:
            if definition.key in self._models:
                raise DuplicateModelError(definition.key)
            self._models[definition.key] = definition
        logger.debug("Registered model %s", definition.key)
        return definition

    def lookup(self, provider: str, name: str) -> ModelDefinition | None:
        """Return the definition for ``provider/name``, or ``None``."""
        with self._lock:
            return self._models.get(f"{provider}/{name}")

    def is_registered(self, provider: str, name: str) -> bool:
        return self.lookup(provider, name) is not None

    def list_models(self, provider: str | None = None) -> list[ModelDefinition]:
        """Return registered definitions sorted by key, optionally filtered."""
        with self._lock:
            models = list(self._models.values())
        if provider is not None:
            models = [m for m in models if m.provider == provider]
        return sorted(models, key=lambda m: m.key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)
