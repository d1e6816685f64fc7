"""
Unit tests for the LLM service.

Tests provider configuration and how model-call failures are reported.
"""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest
from langchain_core.messages import AIMessage, HumanMessage

from labmind.services.exceptions import ConfigurationError, UpstreamServiceError


def _service_with_llm(llm: Mock):
    from labmind.services.llm_service import LLMService

    service = LLMService(provider="anthropic", model="claude-test")
    service._llm = llm
    return service


def _llm_returning(**ainvoke_kwargs) -> Mock:
    bound = Mock()
    bound.ainvoke = AsyncMock(**ainvoke_kwargs)
    llm = Mock()
    llm.bind_tools = Mock(return_value=bound)
    return llm


class StatusError(Exception):
    """Provider error carrying an HTTP status code."""

    def __init__(self, status_code: int):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


@pytest.mark.unit
class TestConfiguration:
    """Test provider setup."""

    def test_defaults_from_config(self):
        """Test that the default provider and model come from config."""
        from labmind.services.llm_service import LLMService

        service = LLMService()

        assert service.provider == "anthropic"
        assert service.model == "claude-sonnet-4-5-20250929"
        assert service.max_tokens == 4096

    def test_missing_anthropic_key(self):
        """Test that a missing key raises ConfigurationError naming the variable."""
        from labmind.config import config
        from labmind.services.llm_service import LLMService

        with patch.object(config, "get_api_key", return_value=None):
            service = LLMService(provider="anthropic")
            with pytest.raises(ConfigurationError) as exc_info:
                service.ensure_configured()

        assert exc_info.value.message == "ANTHROPIC_API_KEY not configured"

    def test_missing_openai_key(self):
        """Test the OpenAI variant of the missing-key error."""
        from labmind.config import config
        from labmind.services.llm_service import LLMService

        with patch.object(config, "get_api_key", return_value=None):
            with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
                LLMService(provider="openai").ensure_configured()

    def test_unsupported_provider(self):
        """Test that an unknown provider is a configuration error."""
        from labmind.services.llm_service import LLMService

        with pytest.raises(ConfigurationError, match="Unsupported LLM provider"):
            LLMService(provider="mystery").ensure_configured()

    def test_builds_anthropic_client(self):
        """Test that a configured key produces a ChatAnthropic client, once."""
        from langchain_anthropic import ChatAnthropic

        from labmind.config import config
        from labmind.services.llm_service import LLMService

        with patch.object(config, "get_api_key", return_value="sk-ant-test"):
            service = LLMService(provider="anthropic", model="claude-test")
            llm = service.llm

        assert isinstance(llm, ChatAnthropic)
        assert service.llm is llm


@pytest.mark.unit
class TestInvokeWithTools:
    """Test the tool-enabled model call."""

    @pytest.mark.asyncio
    async def test_binds_tools_and_returns_reply(self):
        """Test that the catalog is bound and the reply returned."""
        reply = AIMessage(content="done")
        llm = _llm_returning(return_value=reply)
        service = _service_with_llm(llm)
        tools = [{"name": "t", "description": "d", "input_schema": {"type": "object"}}]

        result = await service.invoke_with_tools([HumanMessage(content="hi")], tools)

        assert result is reply
        llm.bind_tools.assert_called_once_with(tools)

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self):
        """Test that a provider error becomes UpstreamServiceError."""
        service = _service_with_llm(_llm_returning(side_effect=ValueError("bad request")))

        with pytest.raises(UpstreamServiceError) as exc_info:
            await service.invoke_with_tools([HumanMessage(content="hi")], [])

        assert exc_info.value.message == "bad request"
        assert exc_info.value.transient is False
        assert exc_info.value.model == "claude-test"
        assert isinstance(exc_info.value.original_error, ValueError)

    @pytest.mark.asyncio
    async def test_rate_limit_is_transient(self):
        """Test that HTTP 429 is marked transient."""
        service = _service_with_llm(_llm_returning(side_effect=StatusError(429)))

        with pytest.raises(UpstreamServiceError) as exc_info:
            await service.invoke_with_tools([HumanMessage(content="hi")], [])

        assert exc_info.value.transient is True

    @pytest.mark.asyncio
    async def test_connection_error_is_transient(self):
        """Test that network failures are marked transient."""
        service = _service_with_llm(_llm_returning(side_effect=httpx.ConnectError("refused")))

        with pytest.raises(UpstreamServiceError) as exc_info:
            await service.invoke_with_tools([HumanMessage(content="hi")], [])

        assert exc_info.value.transient is True

    def test_client_errors_are_not_transient(self):
        """Test status codes that should not be repeated."""
        service = _service_with_llm(Mock())

        assert service._is_transient_error(StatusError(400)) is False
        assert service._is_transient_error(StatusError(503)) is True
