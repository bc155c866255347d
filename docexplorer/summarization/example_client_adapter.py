"""Offline summarization client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseSummarizationClient and register the provider in SummarizerFactory.
"""

import json
from typing import ClassVar

from docexplorer.summarization.client_base import BaseSummarizationClient


class ExampleClientAdapter(BaseSummarizationClient):
    """Adapter that returns a fixed summary or overview without network calls.

    Useful for local development against the portal and for tests.
    """

    DEFAULT_SUMMARY: ClassVar[dict[str, object]] = {
        "siteContext": "Example site context generated without an AI provider.",
        "contaminantsOfConcern": [],
        "impactedMedia": [],
        "keyActions": "No key actions identified",
        "relevanceFlag": "Maybe",
        "fullSummary": "Example summary generated without an AI provider.",
    }
    DEFAULT_OVERVIEW: ClassVar[str] = "Example facility overview generated without an AI provider."

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
        _ = model, temperature, system_prompt, user_prompt, max_tokens
        if json_output:
            return json.dumps(self.DEFAULT_SUMMARY)
        return self.DEFAULT_OVERVIEW
