from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

import httpx

from clipai.llm._retry import RetryConfig
from clipai.llm.factory import build_gateway
from clipai.llm.gateway import ProviderGateway
from clipai.llm.orchestrator import FallbackOrchestrator
from clipai.llm.types import Category, SearchCandidate
from clipai.text import categorize, cleanup, formatter, reply, search


class ClipboardAI:
    """Session facade used by the UI/IPC layer.

    Owns one gateway (and therefore one pair of provider credentials) and
    exposes the AI text operations. Construct one per session:

        ai = ClipboardAI.from_env()
        label = await ai.categorize_text(text)
    """

    def __init__(self, gateway: ProviderGateway) -> None:
        self.gateway = gateway
        self.orchestrator = FallbackOrchestrator(gateway)

    @classmethod
    def from_env(
        cls,
        *,
        primary_key: Optional[str] = None,
        fast_key: Optional[str] = None,
        retry: RetryConfig | None = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "ClipboardAI":
        return cls(
            build_gateway(
                primary_key=primary_key,
                fast_key=fast_key,
                retry=retry,
                http_client=http_client,
            )
        )

    # Credential intake
    def set_primary_credential(self, secret: Optional[str]) -> None:
        self.gateway.set_primary_credential(secret)

    def set_fast_credential(self, secret: Optional[str]) -> None:
        self.gateway.set_fast_credential(secret)

    def set_api_key(self, secret: Optional[str]) -> None:
        """Legacy single-key entry point; sets the primary credential."""
        self.gateway.set_primary_credential(secret)

    def has_any_credential(self) -> bool:
        return self.gateway.has_any_credential()

    # Feature operations
    async def smart_paste(
        self,
        text: str,
        options: cleanup.SmartPasteOptions | Mapping[str, Any] | None = None,
    ) -> str:
        return await cleanup.smart_paste(self.orchestrator, text, options)

    async def format_text(
        self, text: str, format_type: Union[str, formatter.FormatType, None]
    ) -> str:
        return await formatter.format_text(self.orchestrator, text, format_type)

    async def categorize_text(self, text: str) -> Category:
        return await categorize.categorize_text(self.orchestrator, text)

    async def batch_categorize(self, texts: Sequence[str]) -> list[Category]:
        return await categorize.batch_categorize(self.orchestrator, texts)

    async def generate_reply(
        self, messages: Union[str, Sequence[str]], context: str = ""
    ) -> str:
        return await reply.generate_reply(self.orchestrator, messages, context)

    async def semantic_search(
        self, query: str, items: Sequence[SearchCandidate], limit: int = 5
    ) -> list[SearchCandidate]:
        return await search.semantic_search(self.orchestrator, query, items, limit)

    async def aclose(self) -> None:
        await self.gateway.aclose()
