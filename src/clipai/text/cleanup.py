from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from clipai.llm import budget
from clipai.llm._json import unwrap_json_wrapper
from clipai.llm.orchestrator import FallbackOrchestrator
from clipai.llm.types import ChatMessage

FENCE = "```"

RAW_OUTPUT_DIRECTIVE = (
    "IMPORTANT: Return ONLY the cleaned/formatted plain text output. "
    "Do not wrap it in JSON, markdown code blocks, or any other formatting. "
    "Return the actual text content directly, with no explanations, "
    "no JSON structures, and no code block markers."
)


@dataclass(frozen=True)
class SmartPasteOptions:
    """Optional transformations; each set flag adds one directive."""

    remove_line_breaks: bool = False
    format_json: bool = False
    rewrite_tone: Optional[str] = None
    reformat: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "SmartPasteOptions":
        """Accept snake_case or the camelCase keys sent by the UI layer."""

        data = data or {}

        def _get(snake: str, camel: str) -> Any:
            return data.get(snake, data.get(camel))

        tone = _get("rewrite_tone", "rewriteTone")
        return cls(
            remove_line_breaks=bool(_get("remove_line_breaks", "removeLineBreaks")),
            format_json=bool(_get("format_json", "formatJSON")),
            rewrite_tone=str(tone) if tone else None,
            reformat=bool(_get("reformat", "reformat")),
        )


def build_instruction(options: SmartPasteOptions) -> str:
    prompt = "Clean and format the following text. "
    if options.remove_line_breaks:
        prompt += "Remove unnecessary line breaks and extra whitespace. "
    if options.format_json:
        prompt += (
            "If the text contains JSON data, format it as valid, properly indented JSON. "
        )
    if options.rewrite_tone:
        prompt += f"Rewrite the text in a {options.rewrite_tone} tone. "
    if options.reformat:
        prompt += "Reformat the text for better readability. "
    return prompt + RAW_OUTPUT_DIRECTIVE


def strip_code_fence(text: str) -> str:
    """Remove one opening fence line and, if present, its closing fence line."""

    if not text.startswith(FENCE):
        return text
    lines = text.split("\n")
    if len(lines) < 2:
        return text
    lines = lines[1:]
    if lines[-1].strip() == FENCE:
        lines = lines[:-1]
    return "\n".join(lines).strip()


def unwrap_model_output(text: str) -> str:
    """Best-effort removal of wrapping the model was told not to add.

    Handles a single fenced code block and a single-key object such as
    {"text": "..."}. One level only; anything else is returned as-is.
    """

    cleaned = strip_code_fence(text.strip())
    inner = unwrap_json_wrapper(cleaned)
    if inner is not None:
        return inner
    return cleaned


async def smart_paste(
    orchestrator: FallbackOrchestrator,
    text: str,
    options: SmartPasteOptions | Mapping[str, Any] | None = None,
) -> str:
    if not isinstance(options, SmartPasteOptions):
        options = SmartPasteOptions.from_mapping(options)

    source = budget.check_input(text)
    prompt = build_instruction(options)
    result = await orchestrator.chat_completion(
        [ChatMessage(role="user", content=f"{prompt}\n\nText:\n{source}")]
    )
    return unwrap_model_output(result)
