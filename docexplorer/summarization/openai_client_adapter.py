from typing import Any

import httpx
import openai

from docexplorer.logging.logger import Log
from docexplorer.summarization.client_base import BaseSummarizationClient
from docexplorer.summarization.exceptions import SummarizationError, SummarizationNetworkError


class OpenAIClientAdapter(BaseSummarizationClient):
    """Chat completions against OpenAI or any host exposing the same API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(api_key=api_key, timeout=timeout_seconds, base_url=base_url)

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        json_output: bool,
    ) -> str:
        request: dict[str, Any] = {
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "messages": self._messages(system_prompt, user_prompt),
        }
        if json_output:
            request["response_format"] = {"type": "json_object"}

        try:
            response = self._client.chat.completions.create(**request)
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise SummarizationNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise SummarizationNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise SummarizationError("AI returned no choices")
        choice = response.choices[0]
        if choice.finish_reason == "length":
            Log.warning(f"Response from {model} was cut off at {max_tokens} tokens")
        if choice.message.content is None:
            raise SummarizationError("AI returned empty response")
        return choice.message.content

    @staticmethod
    def _messages(system_prompt: str, user_prompt: str) -> list[dict[str, str]]:
        messages = [{"role": "user", "content": user_prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})
        return messages
