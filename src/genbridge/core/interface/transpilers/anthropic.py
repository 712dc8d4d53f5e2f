"""Anthropic transpiler — agnostic schema <-> Messages API.

Key differences from the agnostic schema:
- System instructions are a separate top-level ``system`` block list.
- The "model" role is called "assistant".
- Tool requests and responses are ``tool_use``/``tool_result`` content
  blocks, both keyed by tool name.
- Tool outputs carrying a base64 data URL become image blocks.
- ``max_tokens`` is mandatory.
"""

import json
import logging
import re
from typing import Any, Literal, Never, NoReturn

from genbridge.core.interface.errors import (
    MalformedDataURLError,
    ToolResponseSerializationError,
    UnsupportedOutputFormatError,
    UnsupportedPartKindError,
)
from genbridge.core.interface.models import (
    Candidate,
    FinishReason,
    GenerateRequest,
    GenerateResponse,
    GenerationCommonConfig,
    GenerationUsage,
    MediaPart,
    Message,
    Part,
    TextPart,
    ToolDefinition,
    ToolRequestPart,
    ToolResponse,
    ToolResponsePart,
)
from genbridge.core.interface.transpilers.anthropic_models import (
    AnthropicMessage,
    Base64ImageSource,
    ContentBlock,
    ContentBlockParam,
    ImageBlockParam,
    MessageCreateParams,
    MessageParam,
    Metadata,
    TextBlockParam,
    ToolChoice,
    ToolParam,
    ToolResultBlockParam,
    ToolUseBlockParam,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 4096

_DATA_URL_RE = re.compile(r"data:([^;]+);base64,(.+)")

_ROLES: dict[str, Literal["user", "assistant"]] = {
    "user": "user",
    "model": "assistant",
}

_FINISH_REASONS: dict[str, FinishReason] = {
    "end_turn": FinishReason.STOP,
    "max_tokens": FinishReason.LENGTH,
    "stop_sequence": FinishReason.OTHER,
    "tool_use": FinishReason.OTHER,
}


class AnthropicGenerationConfig(GenerationCommonConfig):
    """Common generation config plus Anthropic-only request options."""

    tool_choice: ToolChoice | None = None
    metadata: Metadata | None = None


class AnthropicTranspiler:
    """Converts between the agnostic schema and Anthropic's Messages API."""

    def to_provider(self, model: str, request: GenerateRequest) -> MessageCreateParams:
        return convert_request(model, request)

    def from_provider(self, response: AnthropicMessage | dict[str, Any]) -> GenerateResponse:
        if isinstance(response, dict):
            response = AnthropicMessage.model_validate(response)
        return translate_response(response)


# ---------------------------------------------------------------------------
# Outbound: GenerateRequest -> MessageCreateParams
# ---------------------------------------------------------------------------


def convert_request(model: str, request: GenerateRequest) -> MessageCreateParams:
    """Assemble a Messages API request for *model* from *request*.

    Generation config layers are applied in order ``config`` then
    ``provider_config``; each layer replaces the sampling fields wholesale.
    """
    if request.output is not None and request.output.format != "text":
        raise UnsupportedOutputFormatError(request.output.format)

    system, messages = convert_messages(request.messages)
    fields: dict[str, Any] = {
        "system": system,
        "model": model,
        "messages": messages,
        "tools": convert_tools(request.tools),
    }

    for layer in (request.config, request.provider_config):
        if layer is None:
            continue
        fields["max_tokens"] = layer.max_output_tokens
        fields["top_k"] = layer.top_k
        fields["top_p"] = layer.top_p
        fields["temperature"] = layer.temperature
        fields["stop_sequences"] = list(layer.stop_sequences) if layer.stop_sequences else None
        if isinstance(layer, AnthropicGenerationConfig):
            fields["tool_choice"] = layer.tool_choice
            fields["metadata"] = layer.metadata

    if fields.get("max_tokens") is None:
        fields["max_tokens"] = DEFAULT_MAX_TOKENS

    logger.debug(
        "Assembled request for %s: %d system block(s), %d message(s), %d tool(s)",
        model,
        len(system),
        len(messages),
        len(fields["tools"]),
    )
    return MessageCreateParams(**fields)


def convert_messages(
    messages: list[Message],
) -> tuple[list[TextBlockParam], list[MessageParam]]:
    """Split *messages* into system blocks and role-tagged provider messages.

    System-role messages feed the system channel and must be text-only.
    Every other message becomes exactly one provider message, in order.
    """
    system: list[TextBlockParam] = []
    converted: list[MessageParam] = []

    for msg in messages:
        if msg.role == "system":
            system.extend(_system_block(part) for part in msg.content)
            continue
        content = [_convert_part(part) for part in msg.content]
        converted.append(MessageParam(role=_ROLES[msg.role], content=content))

    return system, converted


def _system_block(part: Part) -> TextBlockParam:
    if not isinstance(part, TextPart):
        raise UnsupportedPartKindError(part.kind, "system messages may only contain text")
    return TextBlockParam(text=part.text)


def _convert_part(part: Part) -> ContentBlockParam:
    match part:
        case TextPart():
            return TextBlockParam(text=part.text)
        case MediaPart():
            return ImageBlockParam(
                source=Base64ImageSource(media_type=part.content_type, data=part.data)
            )
        case ToolRequestPart():
            tool_request = part.tool_request
            return ToolUseBlockParam(
                id=tool_request.name,
                name=tool_request.name,
                input=tool_request.input if tool_request.input is not None else {},
            )
        case ToolResponsePart():
            return ToolResultBlockParam(
                tool_use_id=part.tool_response.name,
                content=[convert_tool_response(part.tool_response)],
                is_error=False,
            )
        case _:
            _unsupported_part(part)


def _unsupported_part(part: Never) -> NoReturn:
    # Typed ``Never`` so type checkers flag a Part variant missing above.
    kind = getattr(part, "kind", type(part).__name__)
    raise UnsupportedPartKindError(str(kind))


def convert_tool_response(response: ToolResponse) -> dict[str, Any]:
    """Encode a tool output as a text or image content block.

    An output whose ``url`` is a base64 data URL becomes an image block
    (``contentType``, when present, overrides the URL's media type).
    Everything else is JSON-encoded into a text block.
    """
    output = response.output
    url = output.get("url")
    if isinstance(url, str):
        try:
            data, content_type = extract_data_from_base64_url(url)
        except MalformedDataURLError:
            logger.debug("Tool %r url is not a base64 data URL; encoding as JSON", response.name)
        else:
            override = output.get("contentType")
            if isinstance(override, str):
                content_type = override
            image = ImageBlockParam(source=Base64ImageSource(media_type=content_type, data=data))
            return image.model_dump()

    try:
        text = json.dumps(
            output, separators=(",", ":"), sort_keys=True, ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError) as exc:
        raise ToolResponseSerializationError(response.name, str(exc)) from exc
    return TextBlockParam(text=text).model_dump()


def extract_data_from_base64_url(url: str) -> tuple[str, str]:
    """Split ``data:<media-type>;base64,<payload>`` into (payload, media-type)."""
    match = _DATA_URL_RE.fullmatch(url)
    if match is None:
        raise MalformedDataURLError(url)
    return match.group(2), match.group(1)


def convert_tools(tools: list[ToolDefinition]) -> list[ToolParam]:
    """Map tool definitions to tool params; schemas pass through untouched."""
    return [
        ToolParam(name=t.name, description=t.description, input_schema=t.input_schema)
        for t in tools
    ]


# ---------------------------------------------------------------------------
# Inbound: AnthropicMessage -> GenerateResponse
# ---------------------------------------------------------------------------


def translate_response(message: AnthropicMessage) -> GenerateResponse:
    """Translate a Messages API response; one candidate per content block."""
    finish_reason = _finish_reason(message.stop_reason)
    candidates = [
        _translate_candidate(index, block, finish_reason)
        for index, block in enumerate(message.content)
    ]

    usage = GenerationUsage(
        input_tokens=message.usage.input_tokens,
        output_tokens=message.usage.output_tokens,
        total_tokens=message.usage.input_tokens + message.usage.output_tokens,
    )
    return GenerateResponse(candidates=candidates, usage=usage)


def _translate_candidate(
    index: int, block: ContentBlock, finish_reason: FinishReason
) -> Candidate:
    return Candidate(
        index=index,
        message=Message(role="model", content=[TextPart(text=block.text or "")]),
        finish_reason=finish_reason,
    )


def _finish_reason(stop_reason: str | None) -> FinishReason:
    if stop_reason is None:
        return FinishReason.UNKNOWN
    return _FINISH_REASONS.get(stop_reason, FinishReason.UNKNOWN)
