from unittest.mock import patch

import pytest

from docexplorer.config.settings import Settings
from docexplorer.summarization.example_client_adapter import ExampleClientAdapter
from docexplorer.summarization.factory import SummarizerFactory
from docexplorer.summarization.summarizer import Summarizer

_ADAPTER = "docexplorer.summarization.factory.OpenAIClientAdapter"


class TestSummarizerFactory:
    def test_example_provider_needs_no_network(self) -> None:
        summarizer = SummarizerFactory.create(
            Settings(_env_file=None, summarization_provider="example")
        )
        assert isinstance(summarizer, Summarizer)
        assert isinstance(summarizer._client, ExampleClientAdapter)

    def test_openai_provider(self) -> None:
        settings = Settings(
            _env_file=None, summarization_provider="openai", summarization_openai_api_key="sk"
        )
        with patch(_ADAPTER) as adapter:
            summarizer = SummarizerFactory.create(settings)
        adapter.assert_called_once_with(api_key="sk", timeout_seconds=60, base_url=None)
        assert summarizer._model == "gpt-4o-mini"

    def test_known_compatible_host(self) -> None:
        settings = Settings(
            _env_file=None,
            summarization_provider="groq",
            summarization_groq_api_key="gk",
            summarization_groq_model_name="llama",
        )
        with patch(_ADAPTER) as adapter:
            summarizer = SummarizerFactory.create(settings)
        assert adapter.call_args.kwargs["base_url"] == "https://api.groq.com/openai/v1"
        assert adapter.call_args.kwargs["api_key"] == "gk"
        assert summarizer._model == "llama"

    def test_openai_compatible_requires_base_url(self) -> None:
        settings = Settings(_env_file=None, summarization_provider="openai_compatible")
        with pytest.raises(ValueError, match="base_url is required"):
            SummarizerFactory.create(settings)

    def test_unknown_provider_raises(self) -> None:
        settings = Settings(_env_file=None, summarization_provider="acme-ai")
        with pytest.raises(ValueError, match="Unknown summarization provider"):
            SummarizerFactory.create(settings)

    def test_ollama_uses_placeholder_key_and_falls_back_to_default_model(self) -> None:
        settings = Settings(_env_file=None, summarization_provider="Ollama")
        with patch(_ADAPTER) as adapter:
            summarizer = SummarizerFactory.create(settings)
        assert adapter.call_args.kwargs["api_key"] == "ollama"
        assert adapter.call_args.kwargs["base_url"] == "http://localhost:11434/v1"
        assert summarizer._model == "gpt-4o-mini"
