class LLMError(RuntimeError):
    pass


class MissingCredentialError(LLMError):
    """The requested provider has no configured secret."""


class ProviderError(LLMError):
    """Structured error reported by a provider; the message is kept verbatim."""


class RateLimitedError(ProviderError):
    """Rate-limit error that was still failing after the retry ceiling."""


class OversizedRequestError(LLMError):
    """Input or assembled prompt exceeds a size ceiling before any network call."""


class TransportError(LLMError):
    """Network-level failure or a response body that could not be parsed."""


class UnsupportedOperationError(LLMError):
    """The provider does not offer the requested operation (e.g. embeddings)."""
