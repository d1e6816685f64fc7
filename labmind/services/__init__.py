# Services module
from .exceptions import (
    AnalysisServiceError,
    ConfigurationError,
    InvalidInputError,
    ToolExecutionError,
    UpstreamServiceError,
)
from .llm_service import LLMService, get_llm_service

__all__ = [
    "LLMService",
    "get_llm_service",
    "AnalysisServiceError",
    "ConfigurationError",
    "InvalidInputError",
    "ToolExecutionError",
    "UpstreamServiceError",
]
