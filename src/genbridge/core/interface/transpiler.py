"""Transpiler protocol — converts between the agnostic schema and a provider's.

Each provider has a concrete transpiler that implements bidirectional
conversion: GenerateRequest -> provider request and provider response ->
GenerateResponse.
"""

from typing import Any, Protocol

from genbridge.core.interface.models import GenerateRequest, GenerateResponse


class Transpiler(Protocol):
    """Protocol for provider-specific request/response transpilers."""

    def to_provider(self, model: str, request: GenerateRequest) -> Any:
        """Convert an agnostic request into the provider's request object.

        Raises a :class:`~genbridge.core.interface.errors.TranslationError`
        when the request uses something the provider cannot express.
        """
        ...

    def from_provider(self, response: Any) -> GenerateResponse:
        """Convert the provider's raw response into a GenerateResponse.

        The returned response does not carry the originating request; the
        caller attaches it.
        """
        ...
