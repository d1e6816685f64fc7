"""Configuration API routes."""

from datetime import datetime

from fastapi import APIRouter

from labmind.config import config
from labmind.models import ConfigResponse, HealthResponse, ModelConfig
from labmind.services.analysis import get_tool_names

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current configuration."""
    llm_config = config.get_llm_config()
    analysis_config = config.get_analysis_config()

    return ConfigResponse(
        llm_providers=list(config.yaml_config.get("llm", {}).get("providers", {}).keys())
        or ["anthropic", "openai"],
        current_llm=ModelConfig(
            provider=llm_config["provider"],
            model=llm_config["model"],
            available_models=llm_config["available_models"],
            temperature=llm_config["temperature"],
            max_tokens=llm_config["max_tokens"],
            api_key_configured=config.get_api_key(llm_config["provider"]) is not None,
        ),
        preview_char_budget=analysis_config["preview_char_budget"],
        tools=get_tool_names(),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    app_config = config.yaml_config.get("app", {})

    return HealthResponse(
        status="healthy",
        version=app_config.get("version", "1.0.0"),
        timestamp=datetime.now(),
    )
