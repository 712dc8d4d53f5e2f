"""genbridge — translate agnostic generation requests to and from Anthropic's Messages API."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from genbridge.core.interface.client import AnthropicClient as AnthropicClient
    from genbridge.core.registry.capabilities import ModelRegistry as ModelRegistry

_LAZY_EXPORTS = {
    "AnthropicClient": "genbridge.core.interface.client",
    "ModelRegistry": "genbridge.core.registry.capabilities",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'genbridge' has no attribute {name!r}")
