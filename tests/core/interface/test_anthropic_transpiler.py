"""Tests for the Anthropic transpiler."""

from types import SimpleNamespace
from typing import Any

import pytest
from pydantic import ValidationError

from genbridge.core.interface.errors import (
    MalformedDataURLError,
    ToolResponseSerializationError,
    UnsupportedOutputFormatError,
    UnsupportedPartKindError,
)
from genbridge.core.interface.models import (
    FinishReason,
    GenerateRequest,
    GenerationCommonConfig,
    MediaPart,
    Message,
    OutputConfig,
    TextPart,
    ToolDefinition,
    ToolRequest,
    ToolRequestPart,
    ToolResponse,
    ToolResponsePart,
)
from genbridge.core.interface.transpilers.anthropic import (
    DEFAULT_MAX_TOKENS,
    AnthropicGenerationConfig,
    AnthropicTranspiler,
    convert_messages,
    convert_request,
    convert_tool_response,
    convert_tools,
    extract_data_from_base64_url,
    translate_response,
)
from genbridge.core.interface.transpilers.anthropic_models import (
    AnthropicMessage,
    ImageBlockParam,
    Metadata,
    TextBlockParam,
    ToolChoice,
    ToolResultBlockParam,
    ToolUseBlockParam,
)

MODEL = "claude-3-5-haiku-20241022"

# ---------------------------------------------------------------------------
# Fixtures: sample conversations and responses
# ---------------------------------------------------------------------------


def _simple_request(**kwargs: Any) -> GenerateRequest:
    return GenerateRequest(
        messages=[
            Message.system("You are helpful."),
            Message.user("Hello"),
            Message.model("Hi there!"),
            Message.user("How are you?"),
        ],
        **kwargs,
    )


def _weather_tool() -> ToolDefinition:
    return ToolDefinition(
        name="get_weather",
        description="Look up the weather for a city.",
        input_schema={
            "type": "object",
            "properties": {"city": {"type": "string"}},
            "required": ["city"],
        },
    )


def _response(
    content: list[dict[str, Any]],
    stop_reason: str | None = "end_turn",
    input_tokens: int = 10,
    output_tokens: int = 5,
) -> AnthropicMessage:
    return AnthropicMessage.model_validate(
        {
            "id": "msg_01",
            "type": "message",
            "role": "assistant",
            "model": MODEL,
            "content": content,
            "stop_reason": stop_reason,
            "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
        }
    )


# ---------------------------------------------------------------------------
# Base64 data URLs
# ---------------------------------------------------------------------------


class TestExtractDataFromBase64URL:
    def test_valid_url(self) -> None:
        assert extract_data_from_base64_url("data:image/png;base64,AAA=") == ("AAA=", "image/png")

    def test_payload_keeps_everything_after_comma(self) -> None:
        data, media_type = extract_data_from_base64_url("data:image/jpeg;base64,ab,cd==")
        assert data == "ab,cd=="
        assert media_type == "image/jpeg"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/cat.png",
            "data:image/png,AAA=",
            "data:;base64,AAA=",
            "data:image/png;base64,",
            "prefix data:image/png;base64,AAA=",
            "",
        ],
    )
    def test_malformed(self, url: str) -> None:
        with pytest.raises(MalformedDataURLError):
            extract_data_from_base64_url(url)


# ---------------------------------------------------------------------------
# Tool response encoding
# ---------------------------------------------------------------------------


class TestConvertToolResponse:
    def test_data_url_becomes_image(self) -> None:
        block = convert_tool_response(
            ToolResponse(name="screenshot", output={"url": "data:image/png;base64,AAA="})
        )
        assert block == {
            "type": "image",
            "source": {"type": "base64", "data": "AAA=", "media_type": "image/png"},
        }

    def test_content_type_overrides_url_media_type(self) -> None:
        block = convert_tool_response(
            ToolResponse(
                name="screenshot",
                output={"url": "data:image/png;base64,AAA=", "contentType": "image/jpeg"},
            )
        )
        assert block["source"]["media_type"] == "image/jpeg"
        assert block["source"]["data"] == "AAA="

    def test_non_url_output_is_json_text(self) -> None:
        block = convert_tool_response(ToolResponse(name="calc", output={"result": 42}))
        assert block == {"type": "text", "text": '{"result":42}'}

    def test_plain_url_falls_back_to_json(self) -> None:
        block = convert_tool_response(
            ToolResponse(name="fetch", output={"url": "https://example.com/cat.png"})
        )
        assert block == {"type": "text", "text": '{"url":"https://example.com/cat.png"}'}

    def test_non_string_url_falls_back_to_json(self) -> None:
        block = convert_tool_response(ToolResponse(name="fetch", output={"url": 7}))
        assert block == {"type": "text", "text": '{"url":7}'}

    def test_json_keys_are_sorted(self) -> None:
        block = convert_tool_response(ToolResponse(name="t", output={"b": 1, "a": [1, 2]}))
        assert block["text"] == '{"a":[1,2],"b":1}'

    def test_unserializable_output_raises(self) -> None:
        with pytest.raises(ToolResponseSerializationError) as exc_info:
            convert_tool_response(ToolResponse(name="clock", output={"now": object()}))
        assert exc_info.value.name == "clock"

    def test_nan_output_raises(self) -> None:
        with pytest.raises(ToolResponseSerializationError):
            convert_tool_response(ToolResponse(name="stats", output={"mean": float("nan")}))


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


class TestConvertTools:
    def test_fields_copied(self) -> None:
        tools = convert_tools([_weather_tool()])
        assert len(tools) == 1
        assert tools[0].name == "get_weather"
        assert tools[0].description == "Look up the weather for a city."
        assert tools[0].input_schema == _weather_tool().input_schema

    def test_order_preserved(self) -> None:
        defs = [ToolDefinition(name=n) for n in ("b", "a", "c")]
        assert [t.name for t in convert_tools(defs)] == ["b", "a", "c"]

    def test_schema_passed_through_unvalidated(self) -> None:
        schema = {"type": "not-a-json-schema-type", "x-custom": [1, {"y": None}]}
        tools = convert_tools([ToolDefinition(name="odd", input_schema=schema)])
        assert tools[0].input_schema == schema

    def test_idempotent(self) -> None:
        defs = [_weather_tool(), ToolDefinition(name="noop")]
        first = [t.model_dump_json() for t in convert_tools(defs)]
        second = [t.model_dump_json() for t in convert_tools(defs)]
        assert first == second

    def test_empty(self) -> None:
        assert convert_tools([]) == []


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class TestConvertMessages:
    def test_every_message_is_appended(self) -> None:
        system, messages = convert_messages(_simple_request().messages)
        assert len(system) == 1
        assert len(messages) == 3

    def test_roles(self) -> None:
        _, messages = convert_messages(_simple_request().messages)
        assert [m.role for m in messages] == ["user", "assistant", "user"]

    def test_system_goes_to_system_channel(self) -> None:
        system, messages = convert_messages(_simple_request().messages)
        assert system == [TextBlockParam(text="You are helpful.")]
        assert all(m.role != "system" for m in messages)

    def test_system_with_media_rejected(self) -> None:
        msg = Message(role="system", content=[MediaPart(content_type="image/png", data="AAA=")])
        with pytest.raises(UnsupportedPartKindError) as exc_info:
            convert_messages([msg])
        assert exc_info.value.kind == "media"

    def test_consecutive_same_role_not_merged(self) -> None:
        _, messages = convert_messages([Message.user("one"), Message.user("two")])
        assert len(messages) == 2

    def test_text_part(self) -> None:
        _, messages = convert_messages([Message.user("Hello")])
        assert messages[0].content == [TextBlockParam(text="Hello")]

    def test_media_part(self) -> None:
        msg = Message(
            role="user",
            content=[
                TextPart(text="What is this?"),
                MediaPart(content_type="image/webp", data="UklGRg=="),
            ],
        )
        _, messages = convert_messages([msg])
        image = messages[0].content[1]
        assert isinstance(image, ImageBlockParam)
        assert image.source.media_type == "image/webp"
        assert image.source.data == "UklGRg=="

    def test_tool_request_part(self) -> None:
        msg = Message(
            role="model",
            content=[
                ToolRequestPart(tool_request=ToolRequest(name="get_weather", input={"city": "Oslo"}))
            ],
        )
        _, messages = convert_messages([msg])
        block = messages[0].content[0]
        assert isinstance(block, ToolUseBlockParam)
        assert block.id == "get_weather"
        assert block.name == "get_weather"
        assert block.input == {"city": "Oslo"}

    def test_tool_request_without_input(self) -> None:
        msg = Message(role="model", content=[ToolRequestPart(tool_request=ToolRequest(name="ping"))])
        _, messages = convert_messages([msg])
        block = messages[0].content[0]
        assert isinstance(block, ToolUseBlockParam)
        assert block.input == {}

    def test_tool_response_part(self) -> None:
        msg = Message(
            role="user",
            content=[
                ToolResponsePart(
                    tool_response=ToolResponse(name="get_weather", output={"temp": 3})
                )
            ],
        )
        _, messages = convert_messages([msg])
        block = messages[0].content[0]
        assert isinstance(block, ToolResultBlockParam)
        assert block.tool_use_id == "get_weather"
        assert block.is_error is False
        assert block.content == [{"type": "text", "text": '{"temp":3}'}]

    def test_unknown_part_kind(self) -> None:
        msg = Message.model_construct(role="user", content=[SimpleNamespace(kind="reasoning")])
        with pytest.raises(UnsupportedPartKindError) as exc_info:
            convert_messages([msg])
        assert exc_info.value.kind == "reasoning"

    def test_empty(self) -> None:
        assert convert_messages([]) == ([], [])


# ---------------------------------------------------------------------------
# Request assembly
# ---------------------------------------------------------------------------


class TestConvertRequest:
    def test_base_fields(self) -> None:
        params = convert_request(MODEL, _simple_request(tools=[_weather_tool()]))
        assert params.model == MODEL
        assert len(params.system) == 1
        assert len(params.messages) == 3
        assert [t.name for t in params.tools] == ["get_weather"]

    @pytest.mark.parametrize("fmt", ["json", "media"])
    def test_rejects_non_text_output(self, fmt: str) -> None:
        request = _simple_request(output=OutputConfig(format=fmt), tools=[_weather_tool()])
        with pytest.raises(UnsupportedOutputFormatError) as exc_info:
            convert_request(MODEL, request)
        assert exc_info.value.output_format == fmt

    def test_rejects_non_text_output_without_messages(self) -> None:
        with pytest.raises(UnsupportedOutputFormatError):
            convert_request(MODEL, GenerateRequest(output=OutputConfig(format="json")))

    def test_text_output_accepted(self) -> None:
        params = convert_request(MODEL, _simple_request(output=OutputConfig(format="text")))
        assert params.model == MODEL

    def test_part_errors_propagate(self) -> None:
        msg = Message.model_construct(role="user", content=[SimpleNamespace(kind="custom")])
        with pytest.raises(UnsupportedPartKindError):
            convert_request(MODEL, GenerateRequest.model_construct(messages=[msg], tools=[]))

    def test_default_max_tokens(self) -> None:
        params = convert_request(MODEL, _simple_request())
        assert params.max_tokens == DEFAULT_MAX_TOKENS
        assert params.temperature is None
        assert params.tool_choice is None

    def test_common_config(self) -> None:
        config = GenerationCommonConfig(
            max_output_tokens=256,
            top_k=40,
            top_p=0.8,
            temperature=0.5,
            stop_sequences=["END"],
        )
        params = convert_request(MODEL, _simple_request(config=config))
        assert params.max_tokens == 256
        assert params.top_k == 40
        assert params.top_p == 0.8
        assert params.temperature == 0.5
        assert params.stop_sequences == ["END"]

    def test_provider_config_overrides_common(self) -> None:
        choice = ToolChoice(type="tool", name="get_weather")
        request = _simple_request(
            config=GenerationCommonConfig(temperature=0.5),
            provider_config=AnthropicGenerationConfig(temperature=0.9, tool_choice=choice),
        )
        params = convert_request(MODEL, request)
        assert params.temperature == 0.9
        assert params.tool_choice == choice

    def test_provider_config_replaces_wholesale(self) -> None:
        request = _simple_request(
            config=GenerationCommonConfig(max_output_tokens=100, top_k=5),
            provider_config=AnthropicGenerationConfig(temperature=0.2),
        )
        params = convert_request(MODEL, request)
        assert params.top_k is None
        assert params.max_tokens == DEFAULT_MAX_TOKENS
        assert params.temperature == 0.2

    def test_provider_config_as_only_layer(self) -> None:
        config = AnthropicGenerationConfig(
            max_output_tokens=64,
            metadata=Metadata(user_id="user-123"),
            tool_choice=ToolChoice(type="any"),
        )
        params = convert_request(MODEL, _simple_request(config=config))
        assert params.max_tokens == 64
        assert params.metadata == Metadata(user_id="user-123")
        assert params.tool_choice == ToolChoice(type="any")

    def test_provider_config_mapping_sets_tool_choice(self) -> None:
        request = GenerateRequest.model_validate(
            {
                "messages": [{"role": "user", "content": [{"kind": "text", "text": "Hi"}]}],
                "provider_config": {"temperature": 0.9, "tool_choice": {"type": "any"}},
            }
        )
        params = convert_request(MODEL, request)
        assert params.temperature == 0.9
        assert params.tool_choice == ToolChoice(type="any")

    def test_params_frozen(self) -> None:
        params = convert_request(MODEL, _simple_request())
        with pytest.raises(ValidationError):
            params.temperature = 1.0  # type: ignore[misc]

    def test_payload_shape(self) -> None:
        payload = convert_request(MODEL, _simple_request()).to_payload()
        assert payload["model"] == MODEL
        assert payload["max_tokens"] == DEFAULT_MAX_TOKENS
        assert payload["system"] == [{"type": "text", "text": "You are helpful."}]
        assert payload["messages"][0] == {
            "role": "user",
            "content": [{"type": "text", "text": "Hello"}],
        }
        assert "tools" not in payload
        assert "temperature" not in payload
        assert "tool_choice" not in payload

    def test_payload_omits_empty_system(self) -> None:
        payload = convert_request(MODEL, GenerateRequest(messages=[Message.user("Hi")])).to_payload()
        assert "system" not in payload

    def test_payload_tool_fields(self) -> None:
        request = _simple_request(
            tools=[_weather_tool()],
            provider_config=AnthropicGenerationConfig(tool_choice=ToolChoice(type="auto")),
        )
        payload = convert_request(MODEL, request).to_payload()
        assert payload["tools"][0]["input_schema"]["required"] == ["city"]
        assert payload["tool_choice"] == {"type": "auto"}


# ---------------------------------------------------------------------------
# Response translation
# ---------------------------------------------------------------------------


class TestTranslateResponse:
    def test_text_response(self) -> None:
        response = translate_response(_response([{"type": "text", "text": "Hello!"}]))
        assert len(response.candidates) == 1
        candidate = response.candidates[0]
        assert candidate.index == 0
        assert candidate.message.role == "model"
        assert candidate.message.text == "Hello!"
        assert candidate.finish_reason == FinishReason.STOP

    def test_one_candidate_per_block(self) -> None:
        response = translate_response(
            _response(
                [
                    {"type": "text", "text": "Let me check."},
                    {"type": "tool_use", "id": "toolu_1", "name": "get_weather", "input": {}},
                ],
                stop_reason="tool_use",
            )
        )
        assert [c.index for c in response.candidates] == [0, 1]
        assert [c.message.text for c in response.candidates] == ["Let me check.", ""]
        assert all(c.finish_reason == FinishReason.OTHER for c in response.candidates)
        assert all(len(c.message.content) == 1 for c in response.candidates)

    @pytest.mark.parametrize(
        ("stop_reason", "expected"),
        [
            ("end_turn", FinishReason.STOP),
            ("max_tokens", FinishReason.LENGTH),
            ("stop_sequence", FinishReason.OTHER),
            ("tool_use", FinishReason.OTHER),
            ("pause_turn", FinishReason.UNKNOWN),
            ("refusal", FinishReason.UNKNOWN),
            (None, FinishReason.UNKNOWN),
        ],
    )
    def test_finish_reason_mapping(self, stop_reason: str | None, expected: FinishReason) -> None:
        response = translate_response(
            _response([{"type": "text", "text": "x"}], stop_reason=stop_reason)
        )
        assert response.candidates[0].finish_reason == expected

    def test_usage(self) -> None:
        response = translate_response(_response([], input_tokens=123, output_tokens=45))
        assert response.usage is not None
        assert response.usage.input_tokens == 123
        assert response.usage.output_tokens == 45
        assert response.usage.total_tokens == 168

    def test_request_not_attached(self) -> None:
        response = translate_response(_response([{"type": "text", "text": "x"}]))
        assert response.request is None


# ---------------------------------------------------------------------------
# Transpiler facade
# ---------------------------------------------------------------------------


class TestAnthropicTranspiler:
    def setup_method(self) -> None:
        self.transpiler = AnthropicTranspiler()

    def test_to_provider(self) -> None:
        params = self.transpiler.to_provider(MODEL, _simple_request())
        assert params.model == MODEL

    def test_from_provider_accepts_dict(self) -> None:
        response = self.transpiler.from_provider(
            {
                "content": [{"type": "text", "text": "Hi"}],
                "stop_reason": "max_tokens",
                "usage": {"input_tokens": 1, "output_tokens": 2},
            }
        )
        assert response.text == "Hi"
        assert response.candidates[0].finish_reason == FinishReason.LENGTH
        assert response.usage is not None
        assert response.usage.total_tokens == 3

    def test_round_trip_preserves_count_and_roles(self) -> None:
        conversation = [
            Message.user("Hi"),
            Message.model("Hello!"),
            Message.user("Tell me a joke."),
            Message.model("Why did the chicken cross the road?"),
        ]
        params = self.transpiler.to_provider(MODEL, GenerateRequest(messages=conversation))
        assert len(params.messages) == len(conversation)

        back = [
            Message(role="model" if m.role == "assistant" else "user", content=[TextPart(text=b.text)])
            for m in params.messages
            for b in m.content
            if isinstance(b, TextBlockParam)
        ]
        assert [m.role for m in back] == [m.role for m in conversation]
        assert [m.text for m in back] == [m.text for m in conversation]

        replies = [
            {"type": "text", "text": b.text}
            for m in params.messages
            if m.role == "assistant"
            for b in m.content
            if isinstance(b, TextBlockParam)
        ]
        response = self.transpiler.from_provider(_response(replies))
        model_turns = [m for m in conversation if m.role == "model"]
        assert len(response.candidates) == len(model_turns)
        assert all(c.message.role == "model" for c in response.candidates)
        assert [c.message.text for c in response.candidates] == [m.text for m in model_turns]
