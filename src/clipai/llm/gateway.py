from __future__ import annotations

from dataclasses import replace
from typing import Any, Awaitable, Callable, Optional

import httpx
import openai
from openai import AsyncOpenAI

from clipai import logger as logger_mod

from ._retry import RetryConfig, execute_with_retry
from .errors import (
    MissingCredentialError,
    ProviderError,
    TransportError,
    UnsupportedOperationError,
)
from .types import ProviderConfig, ProviderName

log = logger_mod.get_logger()

CHAT_ENDPOINT = "/chat/completions"
EMBEDDINGS_ENDPOINT = "/embeddings"


class ProviderGateway:
    """Authenticated calls to the primary and fast providers.

    Holds both provider configs for one session. Each `send` performs one
    logical request: a single POST, repeated only while the provider reports
    a rate limit and the retry ceiling allows it.
    """

    def __init__(
        self,
        primary: ProviderConfig,
        fast: ProviderConfig,
        *,
        timeout_s: float = 30.0,
        retry: RetryConfig | None = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._configs = {ProviderName.PRIMARY: primary, ProviderName.FAST: fast}
        self._timeout_s = timeout_s
        self._retry = retry or RetryConfig()
        self._http_client = http_client
        self._clients: dict[ProviderConfig, AsyncOpenAI] = {}
        # Clients replaced by a credential change; closed in aclose().
        self._retired: list[AsyncOpenAI] = []

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------
    def config_for(self, name: ProviderName) -> ProviderConfig:
        return self._configs[name]

    def has_credential(self, name: ProviderName) -> bool:
        return self._configs[name].is_configured

    def has_any_credential(self) -> bool:
        return any(cfg.is_configured for cfg in self._configs.values())

    def set_primary_credential(self, secret: Optional[str]) -> None:
        self._set_credential(ProviderName.PRIMARY, secret)

    def set_fast_credential(self, secret: Optional[str]) -> None:
        self._set_credential(ProviderName.FAST, secret)

    def _set_credential(self, name: ProviderName, secret: Optional[str]) -> None:
        key = (secret or "").strip() or None
        self._configs[name] = replace(self._configs[name], api_key=key)
        # In-flight calls keep the client they already hold.
        for cfg in [c for c in self._clients if c.name == name]:
            self._retired.append(self._clients.pop(cfg))

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    async def send(
        self,
        endpoint: str,
        payload: dict[str, Any],
        provider: ProviderConfig,
        attempt: int = 0,
    ) -> dict[str, Any]:
        """POST `payload` to `endpoint` and return the parsed JSON body."""

        if not provider.is_configured:
            raise MissingCredentialError(f"{provider.label} API key not set.")

        create = self._endpoint(endpoint, provider)
        log.debug(f"POST {provider.label}{endpoint} model={payload.get('model')}")

        async def _once() -> dict[str, Any]:
            return await self._post(create, payload, provider)

        return await execute_with_retry(
            _once,
            context=f"calling {provider.label} {endpoint}",
            retry=self._retry,
            attempt=attempt,
        )

    def _endpoint(
        self, endpoint: str, provider: ProviderConfig
    ) -> Callable[..., Awaitable[Any]]:
        client = self._client(provider)
        if endpoint == CHAT_ENDPOINT:
            return client.chat.completions.with_raw_response.create
        if endpoint == EMBEDDINGS_ENDPOINT:
            if not provider.supports_embeddings:
                raise UnsupportedOperationError(
                    f"{provider.label} provider does not support embeddings."
                )
            return client.embeddings.with_raw_response.create
        raise UnsupportedOperationError(f"Unsupported endpoint: {endpoint}")

    async def _post(
        self,
        create: Callable[..., Awaitable[Any]],
        payload: dict[str, Any],
        provider: ProviderConfig,
    ) -> dict[str, Any]:
        try:
            raw = await create(**payload)
        except openai.APIStatusError as e:
            raise ProviderError(_status_error_message(e)) from e
        except openai.APIConnectionError as e:
            raise TransportError(f"{provider.label} request failed: {e}") from e
        except openai.APIError as e:
            raise TransportError(f"{provider.label} request failed: {e}") from e

        try:
            body = raw.http_response.json()
        except ValueError as e:
            raise TransportError("Failed to parse AI response") from e

        if not isinstance(body, dict):
            raise TransportError("Failed to parse AI response")

        err = body.get("error")
        if err:
            raise ProviderError(_error_text(err))
        return body

    def _client(self, provider: ProviderConfig) -> AsyncOpenAI:
        client = self._clients.get(provider)
        if client is None:
            client = AsyncOpenAI(
                api_key=provider.api_key,
                base_url=provider.base_url,
                timeout=self._timeout_s,
                # Rate-limit retries are handled by execute_with_retry.
                max_retries=0,
                http_client=self._http_client,
            )
            self._clients[provider] = client
        return client

    async def aclose(self) -> None:
        clients = list(self._clients.values()) + self._retired
        self._clients.clear()
        self._retired = []
        # A caller-supplied http_client belongs to the caller.
        if self._http_client is not None:
            return
        for client in clients:
            await client.close()


def _error_text(err: Any) -> str:
    if isinstance(err, dict):
        msg = err.get("message")
        if isinstance(msg, str) and msg:
            return msg
        return "API error"
    return str(err) or "API error"


def _status_error_message(e: openai.APIStatusError) -> str:
    body = e.body
    if isinstance(body, dict):
        if "error" in body:
            return _error_text(body["error"])
        msg = body.get("message")
        if isinstance(msg, str) and msg:
            return msg
    return e.message


def chat_text(body: dict[str, Any]) -> str:
    """Extract choices[0].message.content from a chat completion body."""

    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise TransportError("Malformed chat completion response") from e
    if not isinstance(content, str):
        raise TransportError("Malformed chat completion response")
    return content


def embedding_vector(body: dict[str, Any]) -> list[float]:
    """Extract data[0].embedding from an embeddings body."""

    try:
        vector = body["data"][0]["embedding"]
    except (KeyError, IndexError, TypeError) as e:
        raise TransportError("Malformed embeddings response") from e
    if not isinstance(vector, list):
        raise TransportError("Malformed embeddings response")
    try:
        return [float(v) for v in vector]
    except (TypeError, ValueError) as e:
        raise TransportError("Malformed embeddings response") from e
