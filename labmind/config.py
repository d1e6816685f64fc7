"""Configuration management for the application."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")

    # Server configuration
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    debug: bool = Field(default=False, alias="DEBUG")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def load_yaml_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load YAML configuration file."""
    if config_path is None:
        config_path = Path(__file__).parent.parent / "config" / "config.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        return {}

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


class AppConfig:
    """Combined application configuration."""

    def __init__(self, config_path: Optional[str] = None):
        self.settings = Settings()
        self.yaml_config = load_yaml_config(config_path)

    def get_llm_config(self, provider: Optional[str] = None) -> Dict[str, Any]:
        """Get LLM configuration for a specific provider."""
        yaml_llm = self.yaml_config.get("llm", {})
        default_provider = yaml_llm.get("default_provider", "anthropic")
        provider = provider or default_provider

        llm_config = yaml_llm.get("providers", {}).get(provider, {})

        # Hardcoded fallback models per provider
        default_models = {
            "anthropic": "claude-sonnet-4-5-20250929",
            "openai": "gpt-4o",
        }

        return {
            "provider": provider,
            "model": llm_config.get("default_model", default_models.get(provider, "claude-sonnet-4-5-20250929")),
            "temperature": llm_config.get("temperature", 0.7),
            "max_tokens": llm_config.get("max_tokens", 4096),
            "available_models": llm_config.get("models", []),
        }

    def get_analysis_config(self) -> Dict[str, Any]:
        """Get analysis orchestration configuration."""
        analysis_config = self.yaml_config.get("analysis", {})
        return {
            "preview_char_budget": analysis_config.get("preview_char_budget", 5000),
            "default_outlier_threshold": analysis_config.get("default_outlier_threshold", 1.5),
        }

    def get_cors_origins(self) -> list[str]:
        """Get allowed CORS origins."""
        return self.yaml_config.get("cors", {}).get(
            "allow_origins", ["http://localhost:3000"]
        )

    def get_api_key(self, provider: str) -> Optional[str]:
        """Get API key for a specific provider."""
        key_map = {
            "anthropic": self.settings.anthropic_api_key,
            "openai": self.settings.openai_api_key,
        }
        return key_map.get(provider)

    @staticmethod
    def get_api_key_env_var(provider: str) -> str:
        """Name of the environment variable holding a provider's key."""
        return f"{provider.upper()}_API_KEY"


# Global config instance
config = AppConfig()


def get_config() -> AppConfig:
    """Return the global configuration instance."""
    return config
