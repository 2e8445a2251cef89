"""Tests for the OpenAI-compatible client helpers."""

from unittest.mock import Mock, patch

import httpx
import openai
import pytest

from podbrief.config import Settings
from podbrief.errors import ConfigurationError, UpstreamAIError
from podbrief.llm import init_llm_openai, request_chat_completion


class TestInitLlmOpenai:
    """Tests for init_llm_openai function."""

    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError, match="not configured"):
            init_llm_openai(Settings(ai_api_key=None))

    @patch("podbrief.llm.openai.OpenAI")
    def test_builds_client_from_settings(self, mock_openai):
        init_llm_openai(Settings(ai_api_key="k", ai_base_url="https://llm.example.com/v1/"))

        mock_openai.assert_called_once_with(
            api_key="k", base_url="https://llm.example.com/v1", max_retries=0
        )


class TestRequestChatCompletion:
    """Tests for request_chat_completion function."""

    def test_sends_single_user_message(self, make_completion):
        client = Mock()
        client.chat.completions.create.return_value = make_completion("reply")

        assert request_chat_completion(client, "m", "prompt", max_tokens=123) == "reply"
        client.chat.completions.create.assert_called_once_with(
            model="m",
            messages=[{"role": "user", "content": "prompt"}],
            stream=False,
            max_tokens=123,
        )

    def test_status_error_wrapped(self):
        request = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")
        response = httpx.Response(401, request=request, text="invalid key")
        client = Mock()
        client.chat.completions.create.side_effect = openai.AuthenticationError(
            "invalid key", response=response, body=None
        )

        with pytest.raises(UpstreamAIError) as exc_info:
            request_chat_completion(client, "m", "prompt")

        assert exc_info.value.status == 401
        assert str(exc_info.value) == "AI API error: 401 - invalid key"

    def test_connection_error_wrapped(self):
        request = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")
        client = Mock()
        client.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

        with pytest.raises(UpstreamAIError) as exc_info:
            request_chat_completion(client, "m", "prompt")
        assert exc_info.value.status is None

    def test_empty_choices(self):
        client = Mock()
        client.chat.completions.create.return_value = Mock(choices=[])
        assert request_chat_completion(client, "m", "prompt") == ""
