"""Provider-specific transpiler implementations."""

from genbridge.core.interface.transpilers.anthropic import (
    AnthropicGenerationConfig,
    AnthropicTranspiler,
)

__all__ = ["AnthropicGenerationConfig", "AnthropicTranspiler"]
