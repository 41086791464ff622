"""Mistral provider adapter implementation."""

from .base_provider import Provider
from .openai_adapter import OpenAIAdapter


class MistralAdapter(OpenAIAdapter):
    """Mistral chat completions share the OpenAI wire format and bearer auth."""

    provider = Provider.MISTRAL
