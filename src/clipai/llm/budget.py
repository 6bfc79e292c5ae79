"""Token budget estimation and truncation policy.

Token counts here are an approximation (1 token ~ 4 characters), good enough
to keep requests under provider ceilings without shipping a tokenizer.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from .errors import OversizedRequestError
from .types import ChatMessage

CHARS_PER_TOKEN = 4
TRUNCATION_MARKER = "..."

# Input size policy (characters)
HARD_MAX_INPUT_CHARS = 20000  # refuse to run at all above this
MAX_INPUT_CHARS = 8000  # truncate to this before sending
CATEGORIZE_SAMPLE_CHARS = 300  # only a prefix is needed to classify

# Request-level policy (approximate tokens)
REQUEST_TOKEN_CEILING = 4000
FAST_MAX_OUTPUT_TOKENS = 600
PRIMARY_MAX_OUTPUT_TOKENS = 800

# Reply drafting
REPLY_TOKEN_CEILING = 3000
REPLY_MAX_MESSAGES = 5
REPLY_CONTEXT_CHARS = 500

# Search
SEARCH_MAX_CANDIDATES = 10
SEARCH_CANDIDATE_CHARS = 80
SEARCH_QUERY_MAX_CHARS = 1000
SEARCH_PROMPT_TOKEN_CEILING = 2000


def estimate_tokens(text: Optional[str]) -> int:
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_messages_tokens(
    messages: Iterable[ChatMessage], system: Optional[str] = None
) -> int:
    total = estimate_tokens(system)
    for m in messages:
        total += estimate_tokens(m.content)
    return total


def truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def is_oversized(text: str, max_chars: int) -> bool:
    return len(text) > max_chars


def check_input(text: str) -> str:
    """Reject text above the hard ceiling, otherwise truncate it for sending."""

    if is_oversized(text, HARD_MAX_INPUT_CHARS):
        raise OversizedRequestError(
            f"Text too large ({len(text)} chars, max {HARD_MAX_INPUT_CHARS}). "
            "Shorten or split the input."
        )
    return truncate(text, MAX_INPUT_CHARS)
