"""Agnostic generation schema, provider transpilation and errors."""

from genbridge.core.interface.config import ClientConfig
from genbridge.core.interface.errors import (
    AlreadyInitializedError,
    ConfigurationError,
    DuplicateModelError,
    GenBridgeError,
    MalformedDataURLError,
    MissingCredentialError,
    NotInitializedError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderError,
    RequestFileError,
    ToolResponseSerializationError,
    TranslationError,
    UnknownModelCapabilitiesError,
    UnsupportedOutputFormatError,
    UnsupportedPartKindError,
)
from genbridge.core.interface.models import (
    Candidate,
    FinishReason,
    GenerateRequest,
    GenerateResponse,
    GenerateResponseChunk,
    GenerationCommonConfig,
    GenerationUsage,
    MediaPart,
    Message,
    OutputConfig,
    Part,
    Role,
    StreamCallback,
    TextPart,
    ToolDefinition,
    ToolRequest,
    ToolRequestPart,
    ToolResponse,
    ToolResponsePart,
)
from genbridge.core.interface.transpiler import Transpiler

__all__ = [
    "AlreadyInitializedError",
    "Candidate",
    "ClientConfig",
    "ConfigurationError",
    "DuplicateModelError",
    "FinishReason",
    "GenBridgeError",
    "GenerateRequest",
    "GenerateResponse",
    "GenerateResponseChunk",
    "GenerationCommonConfig",
    "GenerationUsage",
    "MalformedDataURLError",
    "MediaPart",
    "Message",
    "MissingCredentialError",
    "NotInitializedError",
    "OutputConfig",
    "Part",
    "ProviderAPIError",
    "ProviderConnectionError",
    "ProviderError",
    "RequestFileError",
    "Role",
    "StreamCallback",
    "TextPart",
    "ToolDefinition",
    "ToolRequest",
    "ToolRequestPart",
    "ToolResponse",
    "ToolResponsePart",
    "ToolResponseSerializationError",
    "Transpiler",
    "TranslationError",
    "UnknownModelCapabilitiesError",
    "UnsupportedOutputFormatError",
    "UnsupportedPartKindError",
]
