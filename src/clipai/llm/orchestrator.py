from __future__ import annotations

from typing import Optional, Sequence

from clipai import logger as logger_mod

from . import budget
from .errors import LLMError, OversizedRequestError, UnsupportedOperationError
from .gateway import (
    CHAT_ENDPOINT,
    EMBEDDINGS_ENDPOINT,
    ProviderGateway,
    chat_text,
    embedding_vector,
)
from .types import ChatMessage, ChatRequest, ProviderName

log = logger_mod.get_logger()

DEFAULT_TEMPERATURE = 0.7


class FallbackOrchestrator:
    """Provider-routed chat with fast -> primary fallback.

    The fast provider is tried first for latency and cost. Because its
    per-minute quota is much smaller, any failure there is retried once on
    the primary provider when a primary credential is configured.
    """

    def __init__(self, gateway: ProviderGateway) -> None:
        self.gateway = gateway

    async def chat_completion(
        self,
        messages: Sequence[ChatMessage],
        system: Optional[str] = None,
        provider: ProviderName = ProviderName.FAST,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        can_fall_back = provider == ProviderName.FAST and self.gateway.has_credential(
            ProviderName.PRIMARY
        )

        tokens = budget.estimate_messages_tokens(messages, system)
        if tokens > budget.REQUEST_TOKEN_CEILING and provider == ProviderName.FAST:
            if not can_fall_back:
                raise OversizedRequestError(
                    f"Request too large (~{tokens} tokens, max "
                    f"{budget.REQUEST_TOKEN_CEILING}) and no primary provider is configured."
                )
            log.info(
                f"Request ~{tokens} tokens exceeds {budget.REQUEST_TOKEN_CEILING}; "
                "routing to primary provider"
            )
            provider = ProviderName.PRIMARY
            can_fall_back = False

        try:
            return await self._chat_once(messages, system, provider, temperature)
        except LLMError as e:
            if not can_fall_back:
                raise
            log.warning(
                f"Fast provider failed ({type(e).__name__}: {e}); falling back to primary"
            )
            return await self._chat_once(
                messages, system, ProviderName.PRIMARY, temperature
            )

    async def _chat_once(
        self,
        messages: Sequence[ChatMessage],
        system: Optional[str],
        provider: ProviderName,
        temperature: float,
    ) -> str:
        cfg = self.gateway.config_for(provider)
        assembled = list(messages)
        if system:
            assembled.insert(0, ChatMessage(role="system", content=system))
        request = ChatRequest(
            messages=tuple(assembled),
            temperature=temperature,
            max_tokens=cfg.max_output_tokens,
        )
        body = await self.gateway.send(
            CHAT_ENDPOINT, request.to_payload(cfg.model), cfg
        )
        return chat_text(body)

    async def embedding(
        self, text: str, provider: ProviderName = ProviderName.PRIMARY
    ) -> list[float]:
        cfg = self.gateway.config_for(provider)
        if not cfg.supports_embeddings:
            raise UnsupportedOperationError(
                f"{cfg.label} provider does not support embeddings. "
                "Use the primary provider or keyword search."
            )
        body = await self.gateway.send(
            EMBEDDINGS_ENDPOINT,
            {
                "model": cfg.embedding_model or cfg.model,
                "input": text,
                "encoding_format": "float",
            },
            cfg,
        )
        return embedding_vector(body)
