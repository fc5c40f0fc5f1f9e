"""Exception hierarchy for ragcore."""


class RagCoreError(Exception):
    """Base exception for all ragcore errors."""


class ConfigurationError(RagCoreError):
    """Raised at call time for non-recoverable misconfiguration (e.g. missing API key)."""


class LLMClientError(RagCoreError):
    """Raised when LLM API calls fail after exhausting retries."""


class RetryableError(LLMClientError):
    """Rate limits, timeouts, 5xx: these should be retried."""


class NonRetryableError(LLMClientError):
    """Auth errors, bad requests, 4xx (non-429): these fail immediately."""


class EmbeddingError(RagCoreError):
    """A single embedding model failed to produce vectors."""

    def __init__(self, message: str, model: str = "") -> None:
        super().__init__(message)
        self.model = model


class JSONParseError(RagCoreError):
    """LLM response could not be parsed as JSON."""

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class CacheBackendError(RagCoreError):
    """Raised by the remote cache tier when the store is unreachable or misbehaves."""
