from __future__ import annotations

from enum import Enum

from clipai.llm import budget
from clipai.llm.orchestrator import FallbackOrchestrator
from clipai.llm.types import ChatMessage


class FormatType(str, Enum):
    HTML_TO_MARKDOWN = "html-to-markdown"
    MARKDOWN_TO_HTML = "markdown-to-html"
    JSON_FORMAT = "json-format"
    CODE_FORMAT = "code-format"
    REMOVE_FORMATTING = "remove-formatting"
    CAPITALIZE = "capitalize"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"


FORMAT_PROMPTS = {
    FormatType.HTML_TO_MARKDOWN: "Convert the following HTML to clean Markdown format. Return only the Markdown, no explanations:\n\n",
    FormatType.MARKDOWN_TO_HTML: "Convert the following Markdown to HTML format. Return only the HTML, no explanations:\n\n",
    FormatType.JSON_FORMAT: "Format the following JSON with proper indentation. Return only the formatted JSON, no explanations:\n\n",
    FormatType.CODE_FORMAT: "Format the following code for better readability. Return only the formatted code, no explanations:\n\n",
    FormatType.REMOVE_FORMATTING: "Remove all formatting from the following text and return plain text only:\n\n",
    FormatType.CAPITALIZE: "Capitalize the following text properly:\n\n",
    FormatType.LOWERCASE: "Convert the following text to lowercase:\n\n",
    FormatType.UPPERCASE: "Convert the following text to UPPERCASE:\n\n",
}


def resolve_format_type(format_type: str | FormatType | None) -> FormatType:
    """Unknown keys fall back to stripping all formatting."""

    try:
        return FormatType(format_type)
    except ValueError:
        return FormatType.REMOVE_FORMATTING


async def format_text(
    orchestrator: FallbackOrchestrator,
    text: str,
    format_type: str | FormatType | None,
) -> str:
    source = budget.check_input(text)
    prompt = FORMAT_PROMPTS[resolve_format_type(format_type)]
    return await orchestrator.chat_completion(
        [ChatMessage(role="user", content=f"{prompt}{source}")]
    )
