"""OmegaAIR: routes generation requests across AI providers with retry and fallback."""

from .exceptions import (
    AllProvidersExhausted,
    NoProvidersAvailable,
    OmegaAIRError,
    ProviderRequestFailed,
    ProviderUnavailable,
)
from .orchestration import FallbackManager, ModelRouter
from .providers import GenerationRequest, GenerationResponse, Provider, TokenUsage
from .reliability import FallbackPolicy, RoutingMode

__all__ = [
    "AllProvidersExhausted",
    "FallbackManager",
    "FallbackPolicy",
    "GenerationRequest",
    "GenerationResponse",
    "ModelRouter",
    "NoProvidersAvailable",
    "OmegaAIRError",
    "Provider",
    "ProviderRequestFailed",
    "ProviderUnavailable",
    "RoutingMode",
    "TokenUsage"
]
