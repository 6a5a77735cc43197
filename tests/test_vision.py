"""Tests for vision backends (mocked API calls)."""

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from receiptcal.config import load_config
from receiptcal.errors import UpstreamError
from receiptcal.vision import ExtractionRequest, create_backend
from receiptcal.vision.claude import ClaudeVisionBackend
from receiptcal.vision.gemini import GeminiVisionBackend

_REQUEST = ExtractionRequest(image_data="AAAA", media_type="image/png")
_ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"


def _mock_client(text: str | None = None, error: Exception | None = None):
    response = MagicMock()
    response.content = [MagicMock(text=text)] if text is not None else []
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=response, side_effect=error)
    return client


class TestCreateBackend:
    def test_create_claude_backend(self):
        config = load_config()
        backend = create_backend(config)
        assert isinstance(backend, ClaudeVisionBackend)

    def test_create_gemini_backend(self):
        config = load_config()
        config.vision.backend = "gemini"
        backend = create_backend(config)
        assert isinstance(backend, GeminiVisionBackend)

    def test_create_unknown_backend(self):
        config = load_config()
        config.vision.backend = "unknown"
        with pytest.raises(ValueError, match="Unknown vision backend"):
            create_backend(config)


class TestClaudeVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        backend = ClaudeVisionBackend(api_key="")
        with pytest.raises(UpstreamError, match="API key"):
            await backend.complete(_REQUEST, "prompt")

    @pytest.mark.asyncio
    async def test_sends_image_and_prompt(self):
        client = _mock_client(text='{"storeName": "Acme"}')
        with patch("anthropic.AsyncAnthropic", return_value=client) as ctor:
            backend = ClaudeVisionBackend(api_key="test-key", model="claude-test", timeout=5.0)
            text = await backend.complete(_REQUEST, "read it")

        assert text == '{"storeName": "Acme"}'
        assert ctor.call_args.kwargs["api_key"] == "test-key"
        assert ctor.call_args.kwargs["timeout"] == 5.0

        client.messages.create.assert_awaited_once()
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 1024
        content = kwargs["messages"][0]["content"]
        assert content[0] == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/png", "data": "AAAA"},
        }
        assert content[1] == {"type": "text", "text": "read it"}

    @pytest.mark.asyncio
    async def test_connection_error_becomes_upstream_error(self):
        error = anthropic.APIConnectionError(request=httpx.Request("POST", _ANTHROPIC_URL))
        with patch("anthropic.AsyncAnthropic", return_value=_mock_client(error=error)):
            backend = ClaudeVisionBackend(api_key="test-key")
            with pytest.raises(UpstreamError, match="Connection error"):
                await backend.complete(_REQUEST, "prompt")

    @pytest.mark.asyncio
    async def test_timeout_becomes_upstream_error(self):
        error = anthropic.APITimeoutError(request=httpx.Request("POST", _ANTHROPIC_URL))
        with patch("anthropic.AsyncAnthropic", return_value=_mock_client(error=error)):
            backend = ClaudeVisionBackend(api_key="test-key")
            with pytest.raises(UpstreamError, match="timed out"):
                await backend.complete(_REQUEST, "prompt")

    @pytest.mark.asyncio
    async def test_status_error_keeps_provider_message(self):
        request = httpx.Request("POST", _ANTHROPIC_URL)
        error = anthropic.APIStatusError(
            "Overloaded",
            response=httpx.Response(529, request=request),
            body=None,
        )
        with patch("anthropic.AsyncAnthropic", return_value=_mock_client(error=error)):
            backend = ClaudeVisionBackend(api_key="test-key")
            with pytest.raises(UpstreamError, match="Overloaded"):
                await backend.complete(_REQUEST, "prompt")

    @pytest.mark.asyncio
    async def test_empty_reply(self):
        with patch("anthropic.AsyncAnthropic", return_value=_mock_client()):
            backend = ClaudeVisionBackend(api_key="test-key")
            with pytest.raises(UpstreamError, match="empty reply"):
                await backend.complete(_REQUEST, "prompt")


class TestGeminiVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        backend = GeminiVisionBackend(api_key="")
        with pytest.raises(UpstreamError, match="API key"):
            await backend.complete(_REQUEST, "prompt")
