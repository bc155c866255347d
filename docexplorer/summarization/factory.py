from typing import ClassVar, NamedTuple

from docexplorer.config.settings import Settings
from docexplorer.logging.logger import Log
from docexplorer.summarization.base import BaseSummarizer
from docexplorer.summarization.example_client_adapter import ExampleClientAdapter
from docexplorer.summarization.openai_client_adapter import OpenAIClientAdapter
from docexplorer.summarization.summarizer import Summarizer


class _Endpoint(NamedTuple):
    base_url: str | None
    api_key: str
    model: str


class SummarizerFactory:
    """Creates the summarizer for ``settings.summarization_provider``.

    Every provider except ``example`` speaks the OpenAI chat API; they differ
    only in base URL, key and model name.
    """

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseSummarizer:
        """Create a configured summarizer from application settings."""
        provider = settings.summarization_provider.strip().lower()
        if provider == "example":
            return Summarizer(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                max_chars=settings.summary_max_chars,
            )

        endpoint = cls._endpoint(provider, settings)
        Log.info(f"Summarizing with provider '{provider}' model '{endpoint.model}'")
        client = OpenAIClientAdapter(
            api_key=endpoint.api_key,
            timeout_seconds=settings.summarization_openai_timeout_seconds,
            base_url=endpoint.base_url,
        )
        return Summarizer(
            client=client,
            model=endpoint.model,
            temperature=settings.summarization_openai_temperature,
            max_chars=settings.summary_max_chars,
        )

    @classmethod
    def _endpoint(cls, provider: str, settings: Settings) -> _Endpoint:
        fallback_model = settings.summarization_openai_model_name
        if provider == "openai":
            return _Endpoint(None, settings.summarization_openai_api_key, fallback_model)
        if provider == "openai_compatible":
            base_url = settings.summarization_openai_compatible_base_url.strip()
            if not base_url:
                raise ValueError(
                    "summarization_openai_compatible_base_url is required for "
                    "summarization_provider=openai_compatible"
                )
            return _Endpoint(
                base_url,
                settings.summarization_openai_compatible_api_key,
                settings.summarization_openai_compatible_model_name or fallback_model,
            )
        if provider == "openrouter":
            return _Endpoint(
                cls.OPENAI_COMPATIBLE_BASE_URLS[provider],
                settings.summarization_openrouter_api_key,
                settings.summarization_openrouter_model_name or fallback_model,
            )
        if provider == "groq":
            return _Endpoint(
                cls.OPENAI_COMPATIBLE_BASE_URLS[provider],
                settings.summarization_groq_api_key,
                settings.summarization_groq_model_name or fallback_model,
            )
        if provider == "ollama":
            # Ollama ignores the key but the client refuses an empty one.
            return _Endpoint(
                cls.OPENAI_COMPATIBLE_BASE_URLS[provider],
                "ollama",
                settings.summarization_ollama_model_name or fallback_model,
            )
        supported = ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]
        raise ValueError(
            f"Unknown summarization provider '{provider}'. Choose from: {supported}"
        )
