"""Shared error types for the translation layer and its collaborators."""


class GenBridgeError(Exception):
    """Base error for all genbridge failures."""


# ---------------------------------------------------------------------------
# Configuration: client setup and model registration
# ---------------------------------------------------------------------------


class ConfigurationError(GenBridgeError):
    """The client or registry was configured incorrectly."""


class MissingCredentialError(ConfigurationError):
    """No API key was supplied explicitly or through the environment."""

    def __init__(self, env_var: str) -> None:
        self.env_var = env_var
        super().__init__(
            f"Anthropic requires setting {env_var} in the environment. "
            "You can get an API key at https://console.anthropic.com/settings/keys"
        )


class AlreadyInitializedError(ConfigurationError):
    """``initialize()`` was called twice on the same client."""

    def __init__(self) -> None:
        super().__init__("AnthropicClient.initialize() has already been called")


class NotInitializedError(ConfigurationError):
    """A registry operation was attempted before ``initialize()``."""

    def __init__(self) -> None:
        super().__init__("AnthropicClient.initialize() has not been called")


class UnknownModelCapabilitiesError(ConfigurationError):
    """A model was defined without capabilities and has no known default."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"anthropic.define_model: called with unknown model {name!r} and no capabilities"
        )


class DuplicateModelError(ConfigurationError):
    """A model key was registered twice."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Model already registered: {key}")


class RequestFileError(ConfigurationError):
    """A request file could not be read, parsed or validated."""


# ---------------------------------------------------------------------------
# Translation: agnostic schema <-> provider wire schema
# ---------------------------------------------------------------------------


class TranslationError(GenBridgeError):
    """A request or response could not be translated."""


class UnsupportedOutputFormatError(TranslationError):
    """The request asks for an output format the provider cannot produce."""

    def __init__(self, output_format: str) -> None:
        self.output_format = output_format
        super().__init__(
            f'anthropic does not support "{output_format}" output format, only "text" is supported'
        )


class UnsupportedPartKindError(TranslationError):
    """A content part kind is not supported where it appeared."""

    def __init__(self, kind: str, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(
            f"unsupported message part kind {kind!r}" + (f": {detail}" if detail else "")
        )


class MalformedDataURLError(TranslationError):
    """A string does not match ``data:<media-type>;base64,<payload>``."""

    def __init__(self, url: str) -> None:
        self.url = url
        preview = url if len(url) <= 40 else url[:37] + "..."
        super().__init__(f"invalid base64 data URL format: {preview!r}")


class ToolResponseSerializationError(TranslationError):
    """A tool response output could not be encoded as JSON."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(
            f"Cannot serialize output of tool {name!r}" + (f": {detail}" if detail else "")
        )


# ---------------------------------------------------------------------------
# Provider: failures reported by the transport
# ---------------------------------------------------------------------------


class ProviderError(GenBridgeError):
    """The provider call failed."""


class ProviderAPIError(ProviderError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(
            f"Anthropic API error {status_code}" + (f": {detail}" if detail else "")
        )


class ProviderConnectionError(ProviderError):
    """The provider could not be reached."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Connection to Anthropic failed" + (f": {detail}" if detail else ""))
