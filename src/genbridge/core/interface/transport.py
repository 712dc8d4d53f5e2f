"""Transport — delivers an assembled Messages API request and returns the reply.

The translation layer never performs I/O itself; it hands a
:class:`MessageCreateParams` to a :class:`Transport` and translates
whatever comes back.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from genbridge.core.interface.config import ClientConfig
from genbridge.core.interface.errors import ProviderAPIError, ProviderConnectionError
from genbridge.core.interface.transpilers.anthropic_models import (
    AnthropicMessage,
    MessageCreateParams,
)

logger = logging.getLogger(__name__)

MESSAGES_PATH = "/v1/messages"


@runtime_checkable
class Transport(Protocol):
    """Sends a provider request and returns the provider response."""

    async def send(self, params: MessageCreateParams) -> AnthropicMessage: ...


class HTTPTransport:
    """Posts requests to the Messages API over httpx.

    Usage::

        async with HTTPTransport(api_key, ClientConfig()) as transport:
            message = await transport.send(params)

    Without the context manager an ``httpx.AsyncClient`` is created lazily
    on first use and released by :meth:`aclose`.
    """

    def __init__(self, api_key: str, config: ClientConfig | None = None) -> None:
        self._api_key = api_key
        self._config = config or ClientConfig()
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HTTPTransport:
        self._http()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url.rstrip("/"),
                headers={
                    "x-api-key": self._api_key,
                    "anthropic-version": self._config.api_version,
                    "content-type": "application/json",
                },
                timeout=self._config.timeout,
            )
        return self._client

    async def send(self, params: MessageCreateParams) -> AnthropicMessage:
        """POST *params* to ``/v1/messages``.

        Raises:
            ProviderAPIError: the API answered with an error status or an
                unparseable body.
            ProviderConnectionError: the API could not be reached.
        """
        logger.debug("POST %s model=%s", MESSAGES_PATH, params.model)
        try:
            response = await self._http().post(MESSAGES_PATH, json=params.to_payload())
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderAPIError(exc.response.status_code, _error_detail(exc.response)) from exc
        except httpx.HTTPError as exc:
            raise ProviderConnectionError(str(exc)) from exc

        try:
            return AnthropicMessage.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ProviderAPIError(response.status_code, f"invalid response body: {exc}") from exc


def _error_detail(response: httpx.Response) -> str:
    """Extract ``error.message`` from an API error body, else the raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and "message" in error:
            return str(error["message"])
    return response.text
