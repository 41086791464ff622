from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..orchestration.model_registry import ModelMeta
from ..providers import GenerationRequest, GenerationResponse
from ..reliability.retry_policy import RoutingMode


class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    model: Optional[str] = None
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(1000, gt=0)
    system_prompt: Optional[str] = None
    requester_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            prompt=self.prompt,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            system_prompt=self.system_prompt,
            requester_id=self.requester_id,
            metadata=dict(self.metadata),
        )


class Usage(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class GenerateResponse(BaseModel):
    content: str
    model: str
    provider: str
    usage: Usage
    metadata: Dict[str, Any] = Field(default_factory=dict)
    latency_ms: float

    @classmethod
    def from_response(cls, response: GenerationResponse) -> "GenerateResponse":
        return cls(
            content=response.content,
            model=response.model,
            provider=response.provider,
            usage=Usage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            ),
            metadata=response.metadata,
            latency_ms=response.latency_ms,
        )


class ModelInfo(BaseModel):
    provider: str
    name: str
    max_tokens: int
    cost_per_1k_tokens: float
    priority: int
    available: bool

    @classmethod
    def from_meta(cls, meta: ModelMeta) -> "ModelInfo":
        return cls(
            provider=meta.provider,
            name=meta.name,
            max_tokens=meta.max_tokens,
            cost_per_1k_tokens=meta.cost_per_1k_tokens,
            priority=meta.priority,
            available=meta.available,
        )


class SystemStatus(BaseModel):
    mode: RoutingMode
    enabled_providers: Dict[str, bool]
    available_providers: List[str]
    total_models: int
    status: str
    provider_statuses: Dict[str, str]


class ModeUpdate(BaseModel):
    mode: RoutingMode
