"""Anthropic Messages API models — wire-level request and response structures.

Field names mirror the Messages API JSON exactly. Requests are serialized
with :meth:`MessageCreateParams.to_payload`, which drops unset fields.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Request content blocks
# ---------------------------------------------------------------------------


class TextBlockParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class Base64ImageSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["base64"] = "base64"
    media_type: str
    data: str


class ImageBlockParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    source: Base64ImageSource


class ToolUseBlockParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: Any = None


class ToolResultBlockParam(BaseModel):
    """Tool output; ``content`` holds already-encoded text or image blocks."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: list[dict[str, Any]] = []
    is_error: bool = False


ContentBlockParam = TextBlockParam | ImageBlockParam | ToolUseBlockParam | ToolResultBlockParam


class MessageParam(BaseModel):
    """A single entry of the ``messages`` array."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: list[ContentBlockParam] = []


# ---------------------------------------------------------------------------
# Tools and request-level options
# ---------------------------------------------------------------------------


class ToolParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    input_schema: dict[str, Any]


class ToolChoice(BaseModel):
    """How the model may use the supplied tools."""

    model_config = ConfigDict(frozen=True)

    type: Literal["auto", "any", "tool", "none"] = "auto"
    name: str | None = None
    disable_parallel_tool_use: bool | None = None


class Metadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str | None = None


class MessageCreateParams(BaseModel):
    """Body of ``POST /v1/messages``. Never mutated after assembly."""

    model_config = ConfigDict(frozen=True)

    model: str
    messages: list[MessageParam] = []
    system: list[TextBlockParam] = []
    tools: list[ToolParam] = []
    max_tokens: int
    top_k: int | None = None
    top_p: float | None = None
    temperature: float | None = None
    stop_sequences: list[str] | None = None
    tool_choice: ToolChoice | None = None
    metadata: Metadata | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body, omitting unset options and empty lists."""
        payload = self.model_dump(mode="json", exclude_none=True)
        for key in ("system", "tools"):
            if not payload.get(key):
                payload.pop(key, None)
        return payload


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class ContentBlock(BaseModel):
    """A block of the response ``content`` array.

    Only ``text`` blocks carry ``text``; ``tool_use`` blocks carry
    ``id``/``name``/``input``. Other block types are tolerated as-is.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    text: str | None = None
    id: str | None = None
    name: str | None = None
    input: Any = None


class Usage(BaseModel):
    model_config = ConfigDict(extra="allow")

    input_tokens: int = 0
    output_tokens: int = 0


class AnthropicMessage(BaseModel):
    """Response body of ``POST /v1/messages``."""

    model_config = ConfigDict(extra="allow")

    id: str = ""
    type: str = "message"
    role: str = "assistant"
    model: str = ""
    content: list[ContentBlock] = []
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: Usage = Usage()
