"""
Tests for OpenAI completion provider.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from notecoach.core.llm.openai import OpenAICompletion
from notecoach.utils.exceptions import LLMError


@pytest.fixture
def openai_llm():
    """Create OpenAI completion provider for testing."""
    return OpenAICompletion(api_key="test-key", model="gpt-4o-mini", timeout=120.0)


def chat_response(content):
    """Build a chat completion response carrying ``content``."""
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.mark.unit
@pytest.mark.asyncio
class TestOpenAICompletion:
    """Test OpenAI completion provider."""

    async def test_initialization_with_base_url(self):
        """Test initialization with custom base URL."""
        llm = OpenAICompletion(api_key="test-key", base_url="https://custom.openai.com")
        assert llm.model == "gpt-3.5-turbo"
        assert llm.client is not None

    async def test_complete(self, openai_llm):
        """Test a chat completion request."""
        with patch.object(
            openai_llm.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.return_value = chat_response("Where did you walk?")

            result = await openai_llm.complete("Coach:", "Long walk today", max_tokens=50)

            assert result == "Where did you walk?"
            kwargs = mock_create.call_args.kwargs
            assert kwargs["model"] == "gpt-4o-mini"
            assert kwargs["max_tokens"] == 50
            assert kwargs["temperature"] == 0.7
            assert kwargs["messages"][0] == {"role": "system", "content": "Coach:"}
            assert kwargs["messages"][1] == {"role": "user", "content": "Long walk today"}

    async def test_complete_empty_content(self, openai_llm):
        """Test a missing reply is an LLM error."""
        with patch.object(
            openai_llm.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.return_value = chat_response(None)

            with pytest.raises(LLMError, match="empty content"):
                await openai_llm.complete("sys", "user")

    async def test_complete_error_wrapped(self, openai_llm):
        """Test API errors surface as LLMError."""
        with patch.object(
            openai_llm.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.side_effect = RuntimeError("server error")

            with pytest.raises(LLMError, match="server error") as exc_info:
                await openai_llm.complete("sys", "user")

            assert isinstance(exc_info.value.__cause__, RuntimeError)

    async def test_close(self, openai_llm):
        """Test close method."""
        with patch.object(openai_llm.client, "close", new_callable=AsyncMock) as mock_close:
            await openai_llm.close()
            mock_close.assert_called_once()
