from __future__ import annotations

from typing import Optional

import httpx

from clipai import config

from . import budget
from ._retry import RetryConfig
from .gateway import ProviderGateway
from .types import ProviderConfig, ProviderName


def primary_config(api_key: Optional[str] = None) -> ProviderConfig:
    return ProviderConfig(
        name=ProviderName.PRIMARY,
        base_url=config.OPENAI_BASE_URL,
        model=config.OPENAI_MODEL,
        max_output_tokens=budget.PRIMARY_MAX_OUTPUT_TOKENS,
        api_key=api_key or None,
        supports_embeddings=True,
        embedding_model=config.EMBEDDING_MODEL,
    )


def fast_config(api_key: Optional[str] = None) -> ProviderConfig:
    return ProviderConfig(
        name=ProviderName.FAST,
        base_url=config.GROQ_BASE_URL,
        model=config.GROQ_MODEL,
        max_output_tokens=budget.FAST_MAX_OUTPUT_TOKENS,
        api_key=api_key or None,
    )


def build_gateway(
    *,
    primary_key: Optional[str] = None,
    fast_key: Optional[str] = None,
    retry: RetryConfig | None = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ProviderGateway:
    """Factory for a session gateway.

    Keys default to OPENAI_API_KEY / GROQ_API_KEY from the environment (.env).
    Either may be missing; callers can supply them later through the
    gateway's credential setters.
    """

    return ProviderGateway(
        primary_config(primary_key if primary_key is not None else config.OPENAI_API_KEY),
        fast_config(fast_key if fast_key is not None else config.GROQ_API_KEY),
        timeout_s=config.LLM_TIMEOUT_S,
        retry=retry,
        http_client=http_client,
    )
