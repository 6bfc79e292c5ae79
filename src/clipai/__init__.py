"""clipai

AI text operations for a clipboard-history manager: cleanup, format
conversion, categorization, reply drafting and search, routed across a fast
and a primary LLM provider with fallback to local heuristics.

External code should normally only need :class:`~clipai.service.ClipboardAI`:

    from clipai import ClipboardAI

    ai = ClipboardAI.from_env()
    cleaned = await ai.smart_paste(text, {"removeLineBreaks": True})
"""

from .assistant import ChatAssistant, DetectedMessage
from .llm.types import Category, SearchCandidate
from .service import ClipboardAI

__all__ = [
    "Category",
    "ChatAssistant",
    "ClipboardAI",
    "DetectedMessage",
    "SearchCandidate",
]
