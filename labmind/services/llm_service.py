"""Model-agnostic LLM service supporting multiple providers."""

import asyncio
import logging
from typing import Any, Dict, List, Sequence

import httpx
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage

from labmind.config import config

from .exceptions import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)


class LLMService:
    """Service for managing LLM interactions with model-agnostic design."""

    def __init__(
        self,
        provider: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        llm_config = config.get_llm_config(provider)
        self.provider = llm_config["provider"]
        self.model = model or llm_config["model"]
        self.temperature = temperature if temperature is not None else llm_config["temperature"]
        self.max_tokens = max_tokens if max_tokens is not None else llm_config["max_tokens"]
        self._llm: BaseChatModel | None = None

    def _get_llm(self) -> BaseChatModel:
        """Get LLM instance based on provider configuration."""
        if self._llm is not None:
            return self._llm

        provider_api_key = config.get_api_key(self.provider)

        logger.info(
            f"Initializing LLM: provider={self.provider}, model={self.model}, "
            f"temperature={self.temperature}, max_tokens={self.max_tokens}"
        )

        if self.provider == "anthropic":
            from langchain_anthropic import ChatAnthropic

            if not provider_api_key:
                raise ConfigurationError("ANTHROPIC_API_KEY not configured", provider=self.provider)

            self._llm = ChatAnthropic(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                anthropic_api_key=provider_api_key,
            )

        elif self.provider == "openai":
            from langchain_openai import ChatOpenAI

            if not provider_api_key:
                raise ConfigurationError("OPENAI_API_KEY not configured", provider=self.provider)

            self._llm = ChatOpenAI(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                api_key=provider_api_key,
            )

        else:
            raise ConfigurationError(f"Unsupported LLM provider: {self.provider}")

        return self._llm

    @property
    def llm(self) -> BaseChatModel:
        """Get the LLM instance."""
        return self._get_llm()

    def ensure_configured(self) -> None:
        """Raise ConfigurationError now rather than on the first call."""
        self._get_llm()

    async def invoke_with_tools(
        self,
        messages: Sequence[BaseMessage],
        tools: List[Dict[str, Any]],
    ) -> AIMessage:
        """
        Send a conversation to the model with the tool catalog bound.

        Args:
            messages: Full conversation so far, system prompt first
            tools: Tool definitions in Anthropic format

        Returns:
            The model's reply; ``tool_calls`` lists any requested invocations

        Raises:
            ConfigurationError: If the provider is not configured
            UpstreamServiceError: If the provider call fails for any reason
        """
        llm = self._get_llm()

        logger.info(
            f"Calling LLM: {self.provider}/{self.model}, "
            f"num_messages={len(messages)}, num_tools={len(tools)}"
        )

        try:
            response = await llm.bind_tools(tools).ainvoke(list(messages))
        except Exception as e:
            transient = self._is_transient_error(e)
            if transient:
                logger.warning(f"Transient LLM error: {self.provider}/{self.model} - {e}")
            else:
                logger.error(f"LLM error: {self.provider}/{self.model} - {e}")
            raise UpstreamServiceError(
                str(e),
                provider=self.provider,
                model=self.model,
                original_error=e,
                transient=transient,
            ) from e

        logger.info(
            f"LLM response received: tool_calls={len(response.tool_calls)}, "
            f"stop_reason={response.response_metadata.get('stop_reason')}"
        )
        return response

    def _is_transient_error(self, error: Exception) -> bool:
        """
        Check if error is transient.

        Transient errors include:
        - HTTP 429: Rate limit exceeded
        - HTTP 503: Service unavailable
        - HTTP 504: Gateway timeout
        - HTTP 408: Request timeout
        - Connection errors
        - Timeout errors

        Args:
            error: Exception to check

        Returns:
            True if error is transient, False otherwise
        """
        if hasattr(error, "status_code"):
            return error.status_code in {429, 503, 504, 408}

        return isinstance(
            error,
            asyncio.TimeoutError | httpx.TimeoutException | httpx.ConnectError | httpx.NetworkError | httpx.RemoteProtocolError,
        )


def get_llm_service(
    provider: str | None = None,
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> LLMService:
    """Factory function to get LLM service."""
    return LLMService(
        provider=provider, model=model, temperature=temperature, max_tokens=max_tokens
    )
