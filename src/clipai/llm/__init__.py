"""Provider dispatch for the AI features.

Layers, leaves first:
- budget: token estimation and truncation policy
- gateway: one authenticated provider call with rate-limit retry
- orchestrator: fast -> primary provider fallback
"""

from .errors import (
    LLMError,
    MissingCredentialError,
    OversizedRequestError,
    ProviderError,
    RateLimitedError,
    TransportError,
    UnsupportedOperationError,
)
from .factory import build_gateway
from .gateway import ProviderGateway
from .orchestrator import FallbackOrchestrator
from .types import (
    Category,
    ChatMessage,
    ChatRequest,
    ProviderConfig,
    ProviderName,
    SearchCandidate,
)

__all__ = [
    "Category",
    "ChatMessage",
    "ChatRequest",
    "FallbackOrchestrator",
    "LLMError",
    "MissingCredentialError",
    "OversizedRequestError",
    "ProviderConfig",
    "ProviderError",
    "ProviderGateway",
    "ProviderName",
    "RateLimitedError",
    "SearchCandidate",
    "TransportError",
    "UnsupportedOperationError",
    "build_gateway",
]
