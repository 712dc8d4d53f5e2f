"""Agnostic generation schema — the provider-neutral request/response format.

Callers only ever build and read these types. Provider transpilers convert
them to and from the provider's wire schema, so nothing outside a
transpiler touches provider-specific payloads.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator

Role = Literal["user", "system", "model"]

# ---------------------------------------------------------------------------
# Content Parts: closed tagged union, discriminated on ``kind``
# ---------------------------------------------------------------------------


class TextPart(BaseModel):
    """Plain text content part."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class MediaPart(BaseModel):
    """Inline media content part carrying a base64 payload."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["media"] = "media"
    content_type: str
    data: str


class ToolRequest(BaseModel):
    """A tool invocation requested by the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    input: Any = None


class ToolRequestPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_request"] = "tool_request"
    tool_request: ToolRequest


class ToolResponse(BaseModel):
    """The output of a tool, keyed by output name."""

    model_config = ConfigDict(frozen=True)

    name: str
    output: dict[str, Any] = {}


class ToolResponsePart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_response"] = "tool_response"
    tool_response: ToolResponse


Part = Annotated[
    TextPart | MediaPart | ToolRequestPart | ToolResponsePart,
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Message: role plus ordered content parts
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """A single conversation turn.

    Roles:
    - user: human input
    - system: instructions for the model
    - model: model-generated turns (may include tool requests)
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: list[Part] = []

    @property
    def text(self) -> str:
        """Concatenated text of all TextPart parts."""
        return "".join(part.text for part in self.content if isinstance(part, TextPart))

    @classmethod
    def user(cls, text: str) -> Message:
        return cls(role="user", content=[TextPart(text=text)])

    @classmethod
    def system(cls, text: str) -> Message:
        return cls(role="system", content=[TextPart(text=text)])

    @classmethod
    def model(cls, text: str) -> Message:
        return cls(role="model", content=[TextPart(text=text)])


# ---------------------------------------------------------------------------
# Request: messages, tools, output format and generation config layers
# ---------------------------------------------------------------------------


class ToolDefinition(BaseModel):
    """A tool the model may call. ``input_schema`` is passed through verbatim."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=lambda: dict[str, Any]())


class OutputConfig(BaseModel):
    """Requested output shape."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    format: Literal["text", "json", "media"] = "text"
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")


class GenerationCommonConfig(BaseModel):
    """Cross-provider generation parameters.

    Provider-specific configs subclass this and add their own fields.
    """

    model_config = ConfigDict(frozen=True)

    max_output_tokens: int | None = Field(default=None, ge=1)
    top_k: int | None = None
    top_p: float | None = None
    temperature: float | None = None
    stop_sequences: list[str] | None = None


class GenerateRequest(BaseModel):
    """A provider-agnostic generation request.

    ``config`` and ``provider_config`` are override layers applied in that
    order: every field of a later layer replaces the earlier one.
    A mapping given as ``provider_config`` is validated as the Anthropic
    config so its ``tool_choice`` and ``metadata`` are kept.
    """

    model_config = ConfigDict(frozen=True)

    messages: list[Message] = []
    tools: list[ToolDefinition] = []
    output: OutputConfig | None = None
    config: GenerationCommonConfig | None = None
    provider_config: SerializeAsAny[GenerationCommonConfig] | None = None

    @field_validator("provider_config", mode="before")
    @classmethod
    def _provider_layer(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            from genbridge.core.interface.transpilers.anthropic import AnthropicGenerationConfig

            return AnthropicGenerationConfig.model_validate(value)
        return value


# ---------------------------------------------------------------------------
# Response: candidates, usage and the originating request
# ---------------------------------------------------------------------------


class FinishReason(StrEnum):
    STOP = "stop"
    LENGTH = "length"
    BLOCKED = "blocked"
    OTHER = "other"
    UNKNOWN = "unknown"


class Candidate(BaseModel):
    """One generated alternative."""

    index: int = 0
    message: Message
    finish_reason: FinishReason = FinishReason.UNKNOWN


class GenerationUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class GenerateResponse(BaseModel):
    """A provider-agnostic generation response."""

    candidates: list[Candidate] = []
    usage: GenerationUsage | None = None
    request: GenerateRequest | None = None

    @property
    def text(self) -> str:
        """Text of the first candidate, or an empty string."""
        if not self.candidates:
            return ""
        return self.candidates[0].message.text


class GenerateResponseChunk(BaseModel):
    """A partial result handed to a streaming callback."""

    index: int = 0
    content: list[Part] = []

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.content if isinstance(part, TextPart))


StreamCallback = Callable[[GenerateResponseChunk], Awaitable[None]]
