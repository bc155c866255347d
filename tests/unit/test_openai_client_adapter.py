from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from docexplorer.summarization.exceptions import SummarizationError, SummarizationNetworkError
from docexplorer.summarization.openai_client_adapter import OpenAIClientAdapter

_OPENAI = "docexplorer.summarization.openai_client_adapter.openai.OpenAI"


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _complete(adapter: OpenAIClientAdapter, json_output: bool = True) -> str:
    return adapter.create_chat_completion(
        model="m",
        temperature=0.2,
        system_prompt="system",
        user_prompt="user",
        max_tokens=100,
        json_output=json_output,
    )


class TestOpenAIClientAdapter:
    def test_returns_content_and_requests_json_object(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response('{"ok": true}')
        with patch(_OPENAI, return_value=mock_client):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url=None)
            content = _complete(adapter)
        assert content == '{"ok": true}'
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}
        assert kwargs["max_tokens"] == 100

    def test_plain_text_has_no_response_format(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("Overview.")
        with patch(_OPENAI, return_value=mock_client):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            assert _complete(adapter, json_output=False) == "Overview."
        assert "response_format" not in mock_client.chat.completions.create.call_args.kwargs

    def test_raises_error_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(None)
        with patch(_OPENAI, return_value=mock_client):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(SummarizationError, match="empty response"):
                _complete(adapter)

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=MagicMock()
        )
        with patch(_OPENAI, return_value=mock_client):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(SummarizationNetworkError, match="network error"):
                _complete(adapter)

    def test_raises_network_error_on_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = httpx.TimeoutException("timeout")
        with patch(_OPENAI, return_value=mock_client):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(SummarizationNetworkError, match="network error"):
                _complete(adapter)

    def test_raises_network_error_on_api_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIError(
            message="server error",
            request=MagicMock(),
            body=None,
        )
        with patch(_OPENAI, return_value=mock_client):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(SummarizationNetworkError, match="API error"):
                _complete(adapter)
