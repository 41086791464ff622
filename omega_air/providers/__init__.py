from typing import Dict, Optional, Type

from ..exceptions import ProviderUnavailable
from ..reliability.admission import ProviderAdmission
from .base_provider import (
    BaseProvider,
    GenerationRequest,
    GenerationResponse,
    Provider,
    ProviderConfig,
    TokenUsage,
)
from .claude_adapter import ClaudeAdapter
from .mistral_adapter import MistralAdapter
from .openai_adapter import OpenAIAdapter

ADAPTERS: Dict[Provider, Type[BaseProvider]] = {
    Provider.OPENAI: OpenAIAdapter,
    Provider.CLAUDE: ClaudeAdapter,
    Provider.MISTRAL: MistralAdapter,
}


def build_adapter(
    provider: Provider,
    config: ProviderConfig,
    admission: Optional[ProviderAdmission] = None,
    timeout: float = 30.0,
    **options,
) -> BaseProvider:
    """Instantiate the adapter for ``provider``; raises ProviderUnavailable if not enabled."""
    if not config.enabled:
        raise ProviderUnavailable(provider.value)
    return ADAPTERS[provider](config, admission=admission, timeout=timeout, **options)


__all__ = [
    "ADAPTERS",
    "BaseProvider",
    "ClaudeAdapter",
    "GenerationRequest",
    "GenerationResponse",
    "MistralAdapter",
    "OpenAIAdapter",
    "Provider",
    "ProviderConfig",
    "TokenUsage",
    "build_adapter"
]
