"""Model registry and known model capabilities."""

from genbridge.core.registry.capabilities import (
    MULTIMODAL,
    ModelCapabilities,
    ModelDefinition,
    ModelFn,
    ModelRegistry,
)
from genbridge.core.registry.registry_data import KNOWN_MODELS, known_capabilities

__all__ = [
    "KNOWN_MODELS",
    "MULTIMODAL",
    "ModelCapabilities",
    "ModelDefinition",
    "ModelFn",
    "ModelRegistry",
    "known_capabilities",
]
