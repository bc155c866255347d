from abc import ABC, abstractmethod


class BaseSummarizationClient(ABC):
    """Contract for provider-specific summarization AI clients."""

    @abstractmethod
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
        """Return provider response as plain text."""
