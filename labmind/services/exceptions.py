"""
Exception classes for the analysis service.

- ConfigurationError: the service cannot talk to its language model (missing key,
  unsupported provider). Fatal for every request until fixed.
- ToolExecutionError: a single statistical tool could not run. Recovered by the
  tool dispatcher and reported inline as that tool's error payload.
- InvalidInputError: a tool received data it cannot compute on.
- UpstreamServiceError: the language-model call itself failed.

Request validation errors are raised by FastAPI/pydantic and mapped to HTTP 400
in ``labmind.main``.
"""

from typing import Optional


class AnalysisServiceError(Exception):
    """Base exception for all analysis service errors."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize the error.

        Args:
            message: Human-readable error message
            provider: LLM provider name, when relevant
            model: Model name, when relevant
            original_error: Original exception that was wrapped
        """
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.model = model
        self.original_error = original_error

    def __str__(self) -> str:
        """Return formatted error message with context."""
        parts = [super().__str__()]
        if self.provider:
            parts.append(f"provider={self.provider}")
        if self.model:
            parts.append(f"model={self.model}")
        return " | ".join(parts)


class ConfigurationError(AnalysisServiceError):
    """Missing credential or unsupported provider configuration."""

    pass


class ToolExecutionError(AnalysisServiceError):
    """A statistical tool failed to produce a result.

    ``str()`` is the bare message; it becomes the tool's ``{"error": ...}`` payload.
    """

    def __str__(self) -> str:
        return self.message


class InvalidInputError(ToolExecutionError):
    """Tool input is missing, malformed, or has no usable values."""

    pass


class UpstreamServiceError(AnalysisServiceError):
    """
    The language-model call failed.

    ``transient`` marks failures that may succeed if repeated later:
    - HTTP 429: Rate limit exceeded
    - HTTP 503: Service unavailable
    - HTTP 504: Gateway timeout
    - HTTP 408: Request timeout
    - Connection and timeout errors

    Nothing in this service retries; the flag is for callers layering their own policy.
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        original_error: Optional[Exception] = None,
        transient: bool = False,
    ):
        super().__init__(message, provider, model, original_error)
        self.transient = transient
