"""Error types raised across the contextual retrieval system."""

from typing import Any, List, Optional


class ContextualRetrievalError(Exception):
    """Base class for all errors raised by this package."""


class InvalidCategoryError(ContextualRetrievalError):
    """A category name outside the closed set. Recovered locally, never surfaced to callers."""

    def __init__(self, value: Any):
        super().__init__(f"Invalid category: {value!r}")
        self.value = value


class EmbeddingError(ContextualRetrievalError):
    """Exception raised when embedding generation fails."""


class ModelUnavailableError(EmbeddingError):
    """The embedding model could not be initialized."""


class LLMError(ContextualRetrievalError):
    """Base class for failures of the outbound chat completion call."""


class LLMConfigurationError(LLMError):
    """The LLM backend is not configured (e.g. missing API key)."""


class LLMTimeoutError(LLMError):
    """The chat completion call exceeded its timeout."""


class LLMAPIError(LLMError):
    """The LLM API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class LLMNetworkError(LLMError):
    """The LLM API could not be reached."""


class ToolNotFoundError(ContextualRetrievalError):
    """No tool is registered under the requested name."""


class ToolValidationError(ContextualRetrievalError):
    """Tool input failed schema validation."""

    def __init__(self, messages: List[str]):
        super().__init__(f"Input validation failed: {'; '.join(messages)}")
        self.messages = messages
