"""Pydantic models for the application.

- api_models: External API request/response models
- analysis_models: Tool invocations and results exchanged with the model
"""

# API models (external contracts)
from .api_models import (
    AnalysisType,
    AnalyzeRequest,
    AnalyzeResponse,
    ConfigResponse,
    DataFormat,
    ErrorResponse,
    HealthResponse,
    ModelConfig,
)

# Analysis conversation models
from .analysis_models import (
    ToolInvocation,
    ToolResult,
)

__all__ = [
    # API Models
    "AnalysisType",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ConfigResponse",
    "DataFormat",
    "ErrorResponse",
    "HealthResponse",
    "ModelConfig",
    # Analysis Models
    "ToolInvocation",
    "ToolResult",
]
