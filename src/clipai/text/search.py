"""Ranking clipboard items against a query.

Three strategies are tried in order: embedding similarity (primary provider),
LLM ranking (fast provider), and a local keyword match that needs no network
and cannot fail.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Sequence

from clipai import logger as logger_mod
from clipai.llm import budget
from clipai.llm.orchestrator import FallbackOrchestrator
from clipai.llm.types import ChatMessage, ProviderName, SearchCandidate

log = logger_mod.get_logger()

MIN_KEYWORD_CHARS = 3

_INT_RE = re.compile(r"\d+")


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """Dot product over norms; 0 for empty, mismatched or zero-norm vectors."""

    if not a or not b or len(a) != len(b):
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


def keyword_search(
    query: str, items: Sequence[SearchCandidate], limit: int
) -> list[SearchCandidate]:
    if limit <= 0:
        return []
    tokens = [t for t in query.lower().split() if len(t) >= MIN_KEYWORD_CHARS]
    if not tokens:
        return list(items[:limit])
    matches = []
    for item in items:
        haystack = item.text.lower()
        if any(t in haystack for t in tokens):
            matches.append(item)
            if len(matches) >= limit:
                break
    return matches


def rank_by_embedding(
    query_vector: Sequence[float], items: Sequence[SearchCandidate], limit: int
) -> list[SearchCandidate]:
    """Order items by similarity; zero scores (no usable signal) are dropped."""

    scored = [
        (cosine_similarity(query_vector, item.embedding), item)
        for item in items
        if item.embedding and len(item.embedding) == len(query_vector)
    ]
    scored = [pair for pair in scored if pair[0] != 0.0]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored[:limit]]


def build_ranking_prompt(query: str, candidates: Sequence[SearchCandidate], limit: int) -> str:
    listing = "\n".join(
        f"{i}. {item.text[: budget.SEARCH_CANDIDATE_CHARS]}"
        for i, item in enumerate(candidates, start=1)
    )
    return (
        f'Given the query: "{query}"\n\n'
        f"Find the most relevant items from this list:\n{listing}\n\n"
        f"Return only the numbers (comma-separated) of the most relevant items, "
        f"max {limit} items."
    )


def parse_ranked_indices(reply: str, count: int, limit: int) -> list[int]:
    """Map 1-based numbers in a free-form reply to valid 0-based indices."""

    indices: list[int] = []
    for raw in _INT_RE.findall(reply):
        idx = int(raw) - 1
        if 0 <= idx < count and idx not in indices:
            indices.append(idx)
            if len(indices) >= limit:
                break
    return indices


async def _embedding_search(
    orchestrator: FallbackOrchestrator,
    query: str,
    items: Sequence[SearchCandidate],
    limit: int,
) -> list[SearchCandidate]:
    gateway = orchestrator.gateway
    if not gateway.has_credential(ProviderName.PRIMARY):
        return []
    if not any(item.embedding for item in items):
        return []
    query_vector = await orchestrator.embedding(
        query[: budget.SEARCH_QUERY_MAX_CHARS], ProviderName.PRIMARY
    )
    return rank_by_embedding(query_vector, items, limit)


async def _llm_search(
    orchestrator: FallbackOrchestrator,
    query: str,
    items: Sequence[SearchCandidate],
    limit: int,
) -> list[SearchCandidate]:
    if not orchestrator.gateway.has_credential(ProviderName.FAST):
        return []
    candidates = list(items[: budget.SEARCH_MAX_CANDIDATES])
    if not candidates:
        return []
    prompt = build_ranking_prompt(
        query[: budget.SEARCH_QUERY_MAX_CHARS], candidates, limit
    )
    if budget.estimate_tokens(prompt) > budget.SEARCH_PROMPT_TOKEN_CEILING:
        log.info("Search prompt too large for LLM ranking; using keyword search")
        return []
    reply = await orchestrator.chat_completion(
        [ChatMessage(role="user", content=prompt)], provider=ProviderName.FAST
    )
    return [candidates[i] for i in parse_ranked_indices(reply, len(candidates), limit)]


async def semantic_search(
    orchestrator: FallbackOrchestrator,
    query: str,
    items: Sequence[SearchCandidate],
    limit: int = 5,
) -> list[SearchCandidate]:
    """Return up to `limit` items relevant to `query`. Never raises."""

    if limit <= 0:
        return []

    try:
        results = await _embedding_search(orchestrator, query, items, limit)
        if results:
            return results
    except Exception as e:  # noqa: BLE001
        log.info(f"Embedding search failed, trying LLM ranking: {e}")

    try:
        results = await _llm_search(orchestrator, query, items, limit)
        if results:
            return results
    except Exception as e:  # noqa: BLE001
        log.info(f"LLM search failed, using keyword search: {e}")

    return keyword_search(query, items, limit)
