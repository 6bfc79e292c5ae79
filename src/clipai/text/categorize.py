from __future__ import annotations

import re
from typing import Sequence

from clipai import logger as logger_mod
from clipai.llm import budget
from clipai.llm.orchestrator import FallbackOrchestrator
from clipai.llm.types import Category, ChatMessage

log = logger_mod.get_logger()

CATEGORIES = [c.value for c in Category]

CODE_KEYWORDS = ("function", "const ", "var ", "class ")
COMMAND_PREFIXES = ("#!", "sudo ", "npm ", "git ")

_DIGITS_RE = re.compile(r"^[0-9]+$")


def heuristic_category(text: str) -> Category:
    """Rule-based label; first matching rule wins.

    Known limitation: the xml rule runs after the html rule, so XML (which
    always contains "<" and ">") is labeled html.
    """

    if "@" in text and "." in text:
        return Category.EMAIL
    if text.startswith("http://") or text.startswith("https://"):
        return Category.LINK
    if _DIGITS_RE.match(text.strip()):
        return Category.NUMBER
    if "{" in text or "[" in text:
        return Category.JSON
    if "<" in text and ">" in text:
        return Category.HTML
    if "<?xml" in text or "<xml" in text:
        return Category.XML
    if any(k in text for k in CODE_KEYWORDS):
        return Category.CODE
    if text.startswith(COMMAND_PREFIXES):
        return Category.COMMAND
    return Category.NOTE


def match_category(reply: str) -> Category | None:
    cleaned = reply.strip().lower()
    for c in CATEGORIES:
        if c in cleaned:
            return Category(c)
    return None


async def categorize_text(orchestrator: FallbackOrchestrator, text: str) -> Category:
    """Label a clipboard item. Never raises."""

    if budget.is_oversized(text, budget.CATEGORIZE_SAMPLE_CHARS):
        return heuristic_category(text)
    if not orchestrator.gateway.has_any_credential():
        return heuristic_category(text)

    sample = text[: budget.CATEGORIZE_SAMPLE_CHARS]
    prompt = (
        f"Categorize the following text into one of these categories: "
        f"{', '.join(CATEGORIES)}. Return only the category name, nothing else.\n\n"
        f"Text: {sample}"
    )
    try:
        reply = await orchestrator.chat_completion(
            [ChatMessage(role="user", content=prompt)]
        )
    except Exception as e:  # noqa: BLE001
        log.info(f"AI categorization unavailable ({type(e).__name__}); using heuristics")
        return heuristic_category(text)

    category = match_category(reply)
    if category is None:
        log.debug(f"Unrecognized category reply {reply[:40]!r}; using heuristics")
        return heuristic_category(text)
    return category


async def batch_categorize(
    orchestrator: FallbackOrchestrator, texts: Sequence[str]
) -> list[Category]:
    """Categorize items one at a time to avoid amplifying rate limits."""

    results: list[Category] = []
    for idx, text in enumerate(texts):
        try:
            results.append(await categorize_text(orchestrator, text))
        except Exception as e:  # noqa: BLE001
            log.warning(f"Categorizing item {idx} failed: {e}")
            results.append(Category.OTHER)
    return results
