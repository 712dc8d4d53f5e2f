"""Static model data.

Contains the capabilities of known Claude models, used when a model is
registered by name without explicit capabilities.
"""

from genbridge.core.registry.capabilities import MULTIMODAL, ModelCapabilities

# ---------------------------------------------------------------------------
# Known model capabilities
# ---------------------------------------------------------------------------

KNOWN_MODELS: dict[str, ModelCapabilities] = {
    "claude-3-haiku-20240307": MULTIMODAL,
    "claude-3-sonnet-20240229": MULTIMODAL,
    "claude-3-opus-20240229": MULTIMODAL,
    "claude-3-5-haiku-20241022": MULTIMODAL,
    "claude-3-5-sonnet-20241022": MULTIMODAL,
    "claude-3-7-sonnet-20250219": MULTIMODAL,
    "claude-sonnet-4-20250514": MULTIMODAL,
    "claude-opus-4-20250514": MULTIMODAL,
}


def known_capabilities(name: str) -> ModelCapabilities | None:
    """Return the capabilities of a known model, or ``None``."""
    return KNOWN_MODELS.get(name)
