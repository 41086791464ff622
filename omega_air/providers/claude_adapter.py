"""Anthropic Claude provider adapter implementation."""

from typing import Any, Dict, Optional, Tuple

from ..reliability.admission import ProviderAdmission
from .base_provider import BaseProvider, GenerationRequest, Provider, ProviderConfig, TokenUsage


class ClaudeAdapter(BaseProvider):
    """Anthropic Messages API adapter for Claude models."""

    provider = Provider.CLAUDE

    def __init__(
        self,
        config: ProviderConfig,
        admission: Optional[ProviderAdmission] = None,
        timeout: float = 30.0,
        anthropic_version: str = "2023-06-01",
    ):
        super().__init__(config, admission, timeout)
        self.anthropic_version = anthropic_version

    @property
    def endpoint(self) -> str:
        return "/messages"

    def headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "anthropic-version": self.anthropic_version,
        }

    def build_payload(self, request: GenerationRequest) -> Dict[str, Any]:
        payload = {
            "model": self.resolve_model(request),
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }

        if request.system_prompt:
            payload["system"] = request.system_prompt

        return payload

    def parse_response(self, data: Dict[str, Any]) -> Tuple[str, str, TokenUsage]:
        # Claude reports input/output tokens rather than prompt/completion
        usage = data.get("usage") or {}
        texts = [block["text"] for block in data["content"] if block.get("type") == "text"]
        if not texts:
            raise ValueError("no text content block")
        content = "".join(texts)
        return (
            content,
            data.get("model", ""),
            TokenUsage.of(usage.get("input_tokens"), usage.get("output_tokens")),
        )
