"""Base provider interface for AI model adapters."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import aiohttp

from ..exceptions import ProviderRequestFailed, ProviderUnavailable
from ..reliability.admission import ProviderAdmission
from .http_client import post_json

logger = logging.getLogger(__name__)


class Provider(str, Enum):
    """Supported AI providers."""

    OPENAI = "openai"
    CLAUDE = "claude"
    MISTRAL = "mistral"


@dataclass(frozen=True)
class GenerationRequest:
    """Single generation request routed to one provider."""

    prompt: str
    model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 1000
    system_prompt: Optional[str] = None
    requester_id: Optional[Any] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def of(cls, prompt_tokens: Optional[int], completion_tokens: Optional[int]) -> "TokenUsage":
        prompt_tokens = int(prompt_tokens or 0)
        completion_tokens = int(completion_tokens or 0)
        return cls(prompt_tokens, completion_tokens, prompt_tokens + completion_tokens)


@dataclass(frozen=True)
class GenerationResponse:
    """Normalized response from a provider."""

    content: str
    model: str
    provider: str
    usage: TokenUsage
    metadata: Dict[str, Any] = field(default_factory=dict)
    latency_ms: float = 0.0


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved configuration for one provider."""

    api_key: str
    base_url: str
    supported_models: Tuple[str, ...]
    enabled: bool

    @property
    def default_model(self) -> Optional[str]:
        return self.supported_models[0] if self.supported_models else None


class BaseProvider(ABC):
    """Abstract base class for AI model providers.

    Adapters translate a ``GenerationRequest`` into the vendor wire format and
    the vendor reply back into a ``GenerationResponse``. They never retry and
    never suppress errors; every failure surfaces as ``ProviderRequestFailed``.
    """

    provider: Provider

    def __init__(
        self,
        config: ProviderConfig,
        admission: Optional[ProviderAdmission] = None,
        timeout: float = 30.0,
    ):
        if not config.enabled:
            raise ProviderUnavailable(self.provider.value)
        self.config = config
        self.admission = admission or ProviderAdmission()
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return self.provider.value

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Path of the completion endpoint relative to the base URL."""

    @abstractmethod
    def headers(self) -> Dict[str, str]:
        """Vendor auth headers."""

    @abstractmethod
    def build_payload(self, request: GenerationRequest) -> Dict[str, Any]:
        """Vendor JSON body for the request."""

    @abstractmethod
    def parse_response(self, data: Dict[str, Any]) -> Tuple[str, str, TokenUsage]:
        """Extract content, model id and token usage from the vendor reply."""

    def resolve_model(self, request: GenerationRequest) -> str:
        if request.model and request.model in self.config.supported_models:
            return request.model
        return self.config.default_model or request.model or ""

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session exists."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers={"Content-Type": "application/json"})
        return self.session

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        payload = self.build_payload(request)

        async with self.admission.slot(self.name):
            session = await self._ensure_session()
            start_time = time.time()
            data = await post_json(
                session,
                self.name,
                f"{self.config.base_url}{self.endpoint}",
                headers=self.headers(),
                payload=payload,
                timeout=self.timeout,
            )
            latency_ms = (time.time() - start_time) * 1000

        if not isinstance(data, dict):
            raise ProviderRequestFailed(self.name, f"malformed response: expected a JSON object, got {type(data).__name__}")

        try:
            content, model, usage = self.parse_response(data)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderRequestFailed(self.name, f"malformed response: {e!r}") from e

        if not isinstance(content, str):
            raise ProviderRequestFailed(self.name, "malformed response: empty content")

        return GenerationResponse(
            content=content,
            model=model or payload.get("model", ""),
            provider=self.name,
            usage=usage,
            metadata=dict(request.metadata),
            latency_ms=latency_ms,
        )

    async def close(self):
        """Close the aiohttp session."""
        if self.session:
            await self.session.close()
            self.session = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(models={len(self.config.supported_models)})"
