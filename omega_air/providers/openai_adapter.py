"""OpenAI provider adapter implementation."""

from typing import Any, Dict, List, Tuple

from .base_provider import BaseProvider, GenerationRequest, Provider, TokenUsage


def chat_messages(request: GenerationRequest) -> List[Dict[str, str]]:
    """OpenAI-style message list; the system message only when one is given."""
    messages = []
    if request.system_prompt:
        messages.append({"role": "system", "content": request.system_prompt})
    messages.append({"role": "user", "content": request.prompt})
    return messages


class OpenAIAdapter(BaseProvider):
    """OpenAI API adapter for GPT models."""

    provider = Provider.OPENAI

    @property
    def endpoint(self) -> str:
        return "/chat/completions"

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.config.api_key}"}

    def build_payload(self, request: GenerationRequest) -> Dict[str, Any]:
        return {
            "model": self.resolve_model(request),
            "messages": chat_messages(request),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

    def parse_response(self, data: Dict[str, Any]) -> Tuple[str, str, TokenUsage]:
        usage = data.get("usage") or {}
        return (
            data["choices"][0]["message"]["content"],
            data.get("model", ""),
            TokenUsage.of(usage.get("prompt_tokens"), usage.get("completion_tokens")),
        )
