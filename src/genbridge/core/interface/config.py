"""Client configuration — credentials, endpoint and HTTP settings."""

import os

from pydantic import BaseModel

from genbridge.core.interface.errors import MissingCredentialError

PROVIDER = "anthropic"
LABEL_PREFIX = "Anthropic"
API_KEY_ENV = "ANTHROPIC_API_KEY"

DEFAULT_BASE_URL = "https://api.anthropic.com"
DEFAULT_API_VERSION = "2023-06-01"


class ClientConfig(BaseModel):
    """Configuration for an :class:`~genbridge.core.interface.client.AnthropicClient`.

    ``api_key`` may be left unset, in which case it is read from the
    ``ANTHROPIC_API_KEY`` environment variable when the client is built.
    """

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 60.0

    def resolve_api_key(self) -> str:
        """Return the explicit key, else the environment key.

        Raises:
            MissingCredentialError: if neither is set.
        """
        if self.api_key:
            return self.api_key
        api_key = os.environ.get(API_KEY_ENV, "")
        if not api_key:
            raise MissingCredentialError(API_KEY_ENV)
        return api_key
