from __future__ import annotations

from typing import Sequence, Union

from clipai.llm import budget
from clipai.llm.errors import OversizedRequestError
from clipai.llm.orchestrator import FallbackOrchestrator
from clipai.llm.types import ChatMessage


def build_reply_prompt(messages: Union[str, Sequence[str]], context: str = "") -> str:
    if isinstance(messages, str):
        messages_text = budget.truncate(messages, budget.MAX_INPUT_CHARS)
    else:
        # Keep the most recent messages
        recent = list(messages)[-budget.REPLY_MAX_MESSAGES :]
        messages_text = "\n\n".join(
            f"Message {i}: {budget.truncate(m, budget.MAX_INPUT_CHARS)}"
            for i, m in enumerate(recent, start=1)
        )

    context = budget.truncate(context or "", budget.REPLY_CONTEXT_CHARS)
    context_line = f"Context: {context}" if context else ""
    return (
        "You are a helpful assistant. Based on the following messages, draft a "
        f"concise and appropriate reply. {context_line}\n\n"
        f"Messages:\n{messages_text}\n\nDraft a reply:"
    )


async def generate_reply(
    orchestrator: FallbackOrchestrator,
    messages: Union[str, Sequence[str]],
    context: str = "",
) -> str:
    prompt = build_reply_prompt(messages, context)
    tokens = budget.estimate_tokens(prompt)
    if tokens > budget.REPLY_TOKEN_CEILING:
        raise OversizedRequestError(
            f"Messages too large for a reply (~{tokens} tokens, max "
            f"{budget.REPLY_TOKEN_CEILING}). Select fewer or shorter messages."
        )
    reply = await orchestrator.chat_completion(
        [ChatMessage(role="user", content=prompt)]
    )
    return reply.strip()
