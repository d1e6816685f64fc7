"""Pydantic models for API requests and responses."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .analysis_models import ToolResult


class AnalysisType(str, Enum):
    """Kinds of analysis a caller can request."""

    STATISTICAL = "statistical"
    QUALITY = "quality"
    VISUALIZATION = "visualization"
    INSIGHTS = "insights"
    CUSTOM = "custom"


class DataFormat(str, Enum):
    """Hint describing how ``data`` is encoded when sent as text."""

    JSON = "json"
    CSV = "csv"
    ARRAY = "array"


class AnalyzeRequest(BaseModel):
    """Request model for the analyze endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    data: Any = Field(..., description="Array, object of arrays, single object, or raw text")
    analysis_type: AnalysisType = Field(
        ..., alias="analysisType", description="Requested analysis type"
    )
    user_query: str | None = Field(
        default=None, alias="userQuery", description="Free-text question about the data"
    )
    data_format: DataFormat | None = Field(
        default=None, alias="dataFormat", description="Encoding hint for text data"
    )


class AnalyzeResponse(BaseModel):
    """Response model for the analyze endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(..., description="Whether the analysis completed")
    analysis: str = Field(..., description="Narrative analysis written by the model")
    tool_results: list[ToolResult] | None = Field(
        default=None,
        alias="toolResults",
        description="Raw tool outputs, in invocation order, when tools ran",
    )
    model: str | None = Field(default=None, description="Model that wrote the analysis")


class ErrorResponse(BaseModel):
    """Error body returned with 4xx/5xx responses."""

    error: str = Field(..., description="Short error message")
    details: Any | None = Field(default=None, description="Underlying error details")


class ModelConfig(BaseModel):
    """LLM configuration currently in use."""

    provider: str
    model: str
    available_models: list[str] = Field(default_factory=list)
    temperature: float
    max_tokens: int
    api_key_configured: bool


class ConfigResponse(BaseModel):
    """Response model for the configuration endpoint."""

    llm_providers: list[str]
    current_llm: ModelConfig
    preview_char_budget: int
    tools: list[str]


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    timestamp: datetime
