from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Optional, Sequence

Role = Literal["system", "user", "assistant"]


class ProviderName(str, Enum):
    """The two interchangeable chat backends."""

    PRIMARY = "primary"
    FAST = "fast"


class Category(str, Enum):
    """Closed set of labels attached to clipboard items."""

    CODE = "code"
    EMAIL = "email"
    LINK = "link"
    NOTE = "note"
    PASSWORD = "password"
    NUMBER = "number"
    COMMAND = "command"
    JSON = "json"
    XML = "xml"
    HTML = "html"
    OTHER = "other"


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for one provider.

    A provider without an api_key is unusable and is skipped, never attempted.
    """

    name: ProviderName
    base_url: str
    model: str
    max_output_tokens: int
    api_key: Optional[str] = None
    supports_embeddings: bool = False
    embedding_model: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool((self.api_key or "").strip())

    @property
    def label(self) -> str:
        return self.name.value


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class ChatRequest:
    messages: tuple[ChatMessage, ...]
    temperature: float = 0.7
    max_tokens: int = 800

    def __post_init__(self) -> None:
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be in [0, 1], got {self.temperature}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

    def to_payload(self, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


@dataclass(frozen=True)
class RateLimitSignal:
    wait_ms: Optional[int]
    retry_eligible: bool


@dataclass(frozen=True)
class SearchCandidate:
    """A caller-owned clipboard item; the core only reads it."""

    text: str
    embedding: Optional[Sequence[float]] = None
